"""
requant Core Enumerations

Type-safe enums for data types, rounding and fused activations.
All enums inherit from (str, Enum) for JSON/YAML serialization compatibility.

This module provides:
- QuantDataType: Tensor element types (quantized and plain)
- RoundingPolicy: Tie-break rule for mantissa quantization
- ActivationFunction: Activations that can be fused into the output stage
"""
from __future__ import annotations

from enum import Enum, unique


@unique
class QuantDataType(str, Enum):
    """Tensor element types.

    Quantized members have an integer range in the RangeTable. F16 and F32
    are listed so descriptors of float tensors can be expressed; they have
    no quantized range.

    Members:
        QASYMM8: 8-bit unsigned asymmetric
        QASYMM8_SIGNED: 8-bit signed asymmetric
        QSYMM8: 8-bit signed symmetric
        QSYMM8_PER_CHANNEL: 8-bit signed symmetric, one scale per channel
        QASYMM16: 16-bit unsigned asymmetric
        QSYMM16: 16-bit signed symmetric
        S32: 32-bit signed integer (accumulators)
        F16: 16-bit float
        F32: 32-bit float
    """

    QASYMM8 = "qasymm8"
    QASYMM8_SIGNED = "qasymm8_signed"
    QSYMM8 = "qsymm8"
    QSYMM8_PER_CHANNEL = "qsymm8_per_channel"
    QASYMM16 = "qasymm16"
    QSYMM16 = "qsymm16"
    S32 = "s32"
    F16 = "f16"
    F32 = "f32"


@unique
class RoundingPolicy(str, Enum):
    """Tie-break rule used when a scaled mantissa lies exactly between integers.

    Mantissas are non-negative, so HALF_AWAY_FROM_ZERO is round-half-up.

    Members:
        HALF_AWAY_FROM_ZERO: 2.5 -> 3, 3.5 -> 4
        HALF_EVEN: 2.5 -> 2, 3.5 -> 4 (banker's rounding)
    """

    HALF_AWAY_FROM_ZERO = "half_away_from_zero"
    HALF_EVEN = "half_even"


@unique
class ActivationFunction(str, Enum):
    """Activations whose clamp can be folded into the requantization stage.

    Members:
        IDENTITY: No activation, clamp to the full type range
        RELU: max(0, x)
        BOUNDED_RELU: min(a, max(0, x))
        LU_BOUNDED_RELU: min(a, max(b, x))
    """

    IDENTITY = "identity"
    RELU = "relu"
    BOUNDED_RELU = "bounded_relu"
    LU_BOUNDED_RELU = "lu_bounded_relu"
