"""
requant - Fixed-point requantization parameters for integer inference

Converts real scale ratios of quantized layers into integer
(multiplier, shift) pairs that integer-only kernels apply to their
int32 accumulators.

Main APIs:
- requant.decompose(): Decompose one real multiplier
- requant.per_channel_decompose(): One pair per output channel
- requant.fill_channel_multipliers_and_shifts(): Fill caller buffers from
  tensor descriptors
- requant.quantized_range(): Integer bounds of a quantized type
"""

__version__ = "0.1.0"

from requant.api import (
    RequantConfig,
    configure,
    get_config,
    load_config,
)
from requant.enums import (
    ActivationFunction,
    QuantDataType,
    RoundingPolicy,
)
from requant.exceptions import (
    BufferTooSmallError,
    ConfigurationError,
    InvalidChannelCountError,
    InvalidMultiplierError,
    InvalidScaleError,
    RequantError,
    UnsupportedTypeError,
)
from requant.quant import (
    ActivationInfo,
    MultiplierShift,
    OutputStageConfig,
    QuantizationInfo,
    QuantizedRange,
    ScaleGranularity,
    TensorInfo,
    activation_bounds,
    compute_output_stage,
    decompose,
    decompose_sub_unity,
    decompose_super_unity,
    effective_multipliers,
    fill_channel_multipliers_and_shifts,
    make_tensor_info,
    per_channel_decompose,
    quantized_range,
)
from requant.reasons import (
    ALL_REASON_CODES,
    ReasonCategory,
)

__all__ = [
    "__version__",
    # Configuration
    "RequantConfig",
    "configure",
    "get_config",
    "load_config",
    # Enums
    "ActivationFunction",
    "QuantDataType",
    "RoundingPolicy",
    # Exceptions
    "RequantError",
    "InvalidMultiplierError",
    "UnsupportedTypeError",
    "InvalidChannelCountError",
    "InvalidScaleError",
    "BufferTooSmallError",
    "ConfigurationError",
    # Reasons
    "ALL_REASON_CODES",
    "ReasonCategory",
    # Decomposition
    "ActivationInfo",
    "MultiplierShift",
    "OutputStageConfig",
    "QuantizationInfo",
    "QuantizedRange",
    "ScaleGranularity",
    "TensorInfo",
    "activation_bounds",
    "compute_output_stage",
    "decompose",
    "decompose_sub_unity",
    "decompose_super_unity",
    "effective_multipliers",
    "fill_channel_multipliers_and_shifts",
    "make_tensor_info",
    "per_channel_decompose",
    "quantized_range",
]
