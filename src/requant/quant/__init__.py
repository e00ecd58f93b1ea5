"""Quantized multiplier decomposition engine.

This module provides:
- Quantized type ranges and activation clamp bounds
- Quantization parameters (per-tensor, per-channel) and tensor descriptors
- Scalar multiplier decomposition into (multiplier, shift) pairs
- Per-channel output stages and caller-buffer filling
"""
from __future__ import annotations

from requant.quant.compute import (
    compute_output_stage,
    fill_channel_multipliers_and_shifts,
    resolve_num_channels,
)
from requant.quant.multiplier import (
    FIXED_POINT_ONE,
    MULTIPLIER_MIN,
    RELATIVE_ERROR_BOUND,
    MultiplierShift,
    decompose,
    decompose_sub_unity,
    decompose_super_unity,
)
from requant.quant.per_channel import (
    OutputStageConfig,
    effective_multipliers,
    per_channel_decompose,
)
from requant.quant.ranges import (
    QUANTIZED_RANGES,
    ActivationInfo,
    QuantizedRange,
    activation_bounds,
    quantized_range,
)
from requant.quant.scales import (
    QuantizationInfo,
    ScaleGranularity,
)
from requant.quant.tensor_info import (
    TensorInfo,
    make_tensor_info,
)

__all__ = [
    # Ranges
    "QUANTIZED_RANGES",
    "QuantizedRange",
    "quantized_range",
    "ActivationInfo",
    "activation_bounds",
    # Parameters
    "QuantizationInfo",
    "ScaleGranularity",
    "TensorInfo",
    "make_tensor_info",
    # Scalar decomposition
    "FIXED_POINT_ONE",
    "MULTIPLIER_MIN",
    "RELATIVE_ERROR_BOUND",
    "MultiplierShift",
    "decompose",
    "decompose_sub_unity",
    "decompose_super_unity",
    # Per-channel
    "OutputStageConfig",
    "effective_multipliers",
    "per_channel_decompose",
    "compute_output_stage",
    "fill_channel_multipliers_and_shifts",
    "resolve_num_channels",
]
