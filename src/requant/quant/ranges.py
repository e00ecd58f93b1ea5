"""Integer ranges of quantized data types.

This module provides:
- QuantizedRange and the RangeTable (QUANTIZED_RANGES)
- quantized_range() lookup
- activation_bounds(): clamp range of an activation fused into requantization
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Final, Iterator, Optional, Union

from requant import reasons as ReasonCodes
from requant.core.validation import validate_scale
from requant.enums import ActivationFunction, QuantDataType, RoundingPolicy
from requant.exceptions import InvalidScaleError, UnsupportedTypeError
from requant.quant.rounding import resolve_rounding, round_half
from requant.quant.scales import QuantizationInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuantizedRange:
    """Inclusive integer bounds of one quantized type.

    Unpacks like a ``(min, max)`` tuple.
    """

    min: int
    max: int

    def __iter__(self) -> Iterator[int]:
        yield self.min
        yield self.max

    def clamp(self, value: int) -> int:
        return max(self.min, min(self.max, value))

    def __contains__(self, value: int) -> bool:
        return self.min <= value <= self.max


QUANTIZED_RANGES: Final[dict[QuantDataType, QuantizedRange]] = {
    QuantDataType.QASYMM8: QuantizedRange(0, 255),
    QuantDataType.QASYMM8_SIGNED: QuantizedRange(-128, 127),
    QuantDataType.QSYMM8: QuantizedRange(-128, 127),
    QuantDataType.QSYMM8_PER_CHANNEL: QuantizedRange(-128, 127),
    QuantDataType.QASYMM16: QuantizedRange(0, 65535),
    QuantDataType.QSYMM16: QuantizedRange(-32768, 32767),
    QuantDataType.S32: QuantizedRange(-(2**31), 2**31 - 1),
}


def quantized_range(data_type: Union[QuantDataType, str]) -> QuantizedRange:
    """Representable integer bounds of a quantized data type.

    Args:
        data_type: QuantDataType member or its string value.

    Returns:
        QuantizedRange with inclusive bounds.

    Raises:
        UnsupportedTypeError: If the type has no quantized range.
    """
    try:
        key = QuantDataType(data_type)
    except ValueError:
        key = None

    if key not in QUANTIZED_RANGES:
        raise UnsupportedTypeError(
            data_type,
            supported=[t.value for t in QUANTIZED_RANGES],
            reason=ReasonCodes.DATA_TYPE_UNSUPPORTED,
        )
    return QUANTIZED_RANGES[key]


@dataclass(frozen=True)
class ActivationInfo:
    """An activation fused into the output stage.

    Attributes:
        function: Activation kind.
        a: Upper bound for BOUNDED_RELU and LU_BOUNDED_RELU.
        b: Lower bound for LU_BOUNDED_RELU.
    """

    function: ActivationFunction = ActivationFunction.IDENTITY
    a: float = 0.0
    b: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "function", ActivationFunction(self.function))
        if not (math.isfinite(self.a) and math.isfinite(self.b)):
            raise ValueError("Activation bounds must be finite")
        if self.function is ActivationFunction.LU_BOUNDED_RELU and self.b > self.a:
            raise ValueError(f"Lower bound b={self.b} exceeds upper bound a={self.a}")


def _quantize_value(
    value: float,
    info: QuantizationInfo,
    bounds: QuantizedRange,
    rounding: RoundingPolicy,
) -> int:
    return bounds.clamp(round_half(value / info.uniform_scale, rounding) + info.zero_point)


def activation_bounds(
    activation: ActivationInfo,
    output_info: QuantizationInfo,
    data_type: Union[QuantDataType, str],
    *,
    rounding: Optional[Union[RoundingPolicy, str]] = None,
) -> QuantizedRange:
    """Clamp range of a fused activation in the quantized output domain.

    RELU clamps below at the output zero point; BOUNDED_RELU additionally
    clamps above at quantize(a); LU_BOUNDED_RELU clamps to
    [quantize(b), quantize(a)]. All bounds stay inside the type range.

    Args:
        activation: Activation to fold into the clamp.
        output_info: Per-tensor quantization of the output.
        data_type: Output element type.
        rounding: Tie-break rule for quantize(); global config if omitted.

    Returns:
        QuantizedRange of the clamp.

    Raises:
        UnsupportedTypeError: If data_type has no quantized range.
        InvalidScaleError: If output_info is per-channel or its scale is unusable.
    """
    type_range = quantized_range(data_type)
    if activation.function is ActivationFunction.IDENTITY:
        return type_range

    if output_info.is_per_channel:
        raise InvalidScaleError(
            "output",
            reason=ReasonCodes.SCALE_GRANULARITY_UNSUPPORTED,
            message="Output quantization must be per-tensor",
        )
    scale = output_info.uniform_scale
    result = validate_scale(scale, "output")
    if not result:
        raise InvalidScaleError(
            "output", scale=scale, reason=result.reason, message=result.message
        )

    rounding = resolve_rounding(rounding)
    low = type_range.clamp(output_info.zero_point)
    if activation.function is ActivationFunction.LU_BOUNDED_RELU:
        low = _quantize_value(activation.b, output_info, type_range, rounding)

    high = type_range.max
    if activation.function in (
        ActivationFunction.BOUNDED_RELU,
        ActivationFunction.LU_BOUNDED_RELU,
    ):
        high = _quantize_value(activation.a, output_info, type_range, rounding)

    logger.debug(
        "%s clamp for %s: [%d, %d]", activation.function.value, data_type, low, high
    )
    return QuantizedRange(low, high)
