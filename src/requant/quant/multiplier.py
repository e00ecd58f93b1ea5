"""Decomposition of real multipliers into fixed-point (multiplier, shift) pairs.

A real multiplier ``m`` is written as ``q * 2**-31 * 2**-shift`` with
``q`` in ``[2**30, 2**31)``, i.e. a Q0.31 mantissa in ``[0.5, 1.0)`` and a
power-of-two shift. Integer kernels apply ``m`` to an accumulator with one
32x32 multiply-high and one arithmetic shift.

Shift convention: positive is a right shift (``m < 1``), negative is a
left shift (``m >= 1``).

This module provides:
- MultiplierShift: the decomposed pair
- decompose(): unified entry point for any non-negative multiplier
- decompose_sub_unity() / decompose_super_unity(): the two specialized paths
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Final, Iterator, Optional, Union

from requant import reasons as ReasonCodes
from requant.api.config import get_config
from requant.core.validation import validate_multiplier
from requant.enums import RoundingPolicy
from requant.exceptions import InvalidMultiplierError
from requant.quant.rounding import resolve_rounding, round_half

logger = logging.getLogger(__name__)

FRACTIONAL_BITS: Final[int] = 31
FIXED_POINT_ONE: Final[int] = 1 << FRACTIONAL_BITS
MULTIPLIER_MIN: Final[int] = 1 << (FRACTIONAL_BITS - 1)

# Worst-case relative error of a rounded Q0.31 mantissa in [0.5, 1.0).
RELATIVE_ERROR_BOUND: Final[float] = 2.0 ** -FRACTIONAL_BITS

RoundingArg = Optional[Union[RoundingPolicy, str]]


@dataclass(frozen=True, slots=True)
class MultiplierShift:
    """Fixed-point representation of a real multiplier.

    Unpacks like a ``(quantized_multiplier, shift)`` tuple.

    Attributes:
        quantized_multiplier: Q0.31 mantissa, in [2**30, 2**31) or 0.
        shift: Right shift if positive, left shift if negative.
    """

    quantized_multiplier: int
    shift: int

    def __iter__(self) -> Iterator[int]:
        yield self.quantized_multiplier
        yield self.shift

    def to_real(self) -> float:
        """Real value represented by this pair."""
        return math.ldexp(self.quantized_multiplier, -FRACTIONAL_BITS - self.shift)


def _normalize(multiplier: float, rounding: RoundingPolicy) -> tuple[int, int]:
    """Split a positive multiplier into a Q0.31 mantissa and a base-2 exponent.

    Returns ``(q, exponent)`` with ``multiplier ~= q * 2**-31 * 2**exponent``.
    """
    mantissa, exponent = math.frexp(multiplier)
    q = round_half(math.ldexp(mantissa, FRACTIONAL_BITS), rounding)
    if q == FIXED_POINT_ONE:
        # Mantissa rounded up to 1.0: carry into the exponent.
        q //= 2
        exponent += 1
        logger.debug(
            "Mantissa of %r rounded to 1.0, exponent carried to %d", multiplier, exponent
        )
    return q, exponent


def _sub_unity(multiplier: float, rounding: RoundingPolicy) -> tuple[int, int]:
    q, exponent = _normalize(multiplier, rounding)
    return q, -exponent


def _super_unity(multiplier: float, rounding: RoundingPolicy) -> tuple[int, int]:
    return _normalize(multiplier, rounding)


def _raise_if_invalid(multiplier: float) -> None:
    result = validate_multiplier(multiplier)
    if not result:
        raise InvalidMultiplierError(
            multiplier, reason=result.reason, message=result.message
        )


def _verify(multiplier: float, pair: MultiplierShift) -> None:
    error = abs(pair.to_real() - multiplier)
    if error > multiplier * RELATIVE_ERROR_BOUND:
        raise InvalidMultiplierError(
            multiplier,
            reason=ReasonCodes.RECONSTRUCTION_ERROR_EXCEEDED,
            message=(
                f"{pair} reconstructs {multiplier!r} with relative error "
                f"{error / multiplier:.3e} > 2^-31"
            ),
        )


def decompose_sub_unity(
    multiplier: float,
    *,
    rounding: RoundingArg = None,
) -> tuple[int, int]:
    """Decompose a multiplier in (0, 1) into ``(quantized_multiplier, right_shift)``.

    Args:
        multiplier: Real value with 0 < multiplier < 1.
        rounding: Tie-break rule; global config if omitted.

    Returns:
        Tuple of (quantized_multiplier, right_shift) with right_shift >= 0.

    Raises:
        InvalidMultiplierError: If the multiplier is outside (0, 1), or so
            close to 1 that its mantissa rounds to 1.0 (use ``decompose``).
    """
    multiplier = float(multiplier)
    _raise_if_invalid(multiplier)
    if not 0.0 < multiplier < 1.0:
        raise InvalidMultiplierError(
            multiplier,
            reason=ReasonCodes.MULTIPLIER_NOT_SUB_UNITY,
            message=f"multiplier={multiplier!r} is not in (0, 1)",
        )

    q, right_shift = _sub_unity(multiplier, resolve_rounding(rounding))
    if right_shift < 0:
        raise InvalidMultiplierError(
            multiplier,
            reason=ReasonCodes.MULTIPLIER_NOT_SUB_UNITY,
            message=f"multiplier={multiplier!r} rounds to 1.0 at 31 fractional bits",
        )
    return q, right_shift


def decompose_super_unity(
    multiplier: float,
    *,
    rounding: RoundingArg = None,
) -> tuple[int, int]:
    """Decompose a multiplier >= 1 into ``(quantized_multiplier, left_shift)``.

    Args:
        multiplier: Finite real value >= 1.
        rounding: Tie-break rule; global config if omitted.

    Returns:
        Tuple of (quantized_multiplier, left_shift) with left_shift >= 1.

    Raises:
        InvalidMultiplierError: If the multiplier is below 1 or not finite.
    """
    multiplier = float(multiplier)
    _raise_if_invalid(multiplier)
    if multiplier < 1.0:
        raise InvalidMultiplierError(
            multiplier,
            reason=ReasonCodes.MULTIPLIER_NOT_SUPER_UNITY,
            message=f"multiplier={multiplier!r} is below 1",
        )

    return _super_unity(multiplier, resolve_rounding(rounding))


def decompose(multiplier: float, *, rounding: RoundingArg = None) -> MultiplierShift:
    """Decompose any finite non-negative multiplier into a MultiplierShift.

    Zero decomposes to ``(0, 0)``. Values below 1 take the sub-unity path
    and get a positive (right) shift; values of 1 or more take the
    super-unity path and get a negative (left) shift. A value just below 1
    whose mantissa rounds up to 1.0 comes out as ``(2**30, -1)``.

    Args:
        multiplier: Real multiplier.
        rounding: Tie-break rule; global config if omitted.

    Returns:
        MultiplierShift whose real value is within a relative 2**-31 of
        ``multiplier``.

    Raises:
        InvalidMultiplierError: If the multiplier is negative, NaN or infinite.

    Example:
        >>> decompose(0.5)
        MultiplierShift(quantized_multiplier=1073741824, shift=0)
        >>> decompose(3.0)
        MultiplierShift(quantized_multiplier=1610612736, shift=-2)
    """
    multiplier = float(multiplier)
    _raise_if_invalid(multiplier)
    if multiplier == 0.0:
        return MultiplierShift(0, 0)

    policy = resolve_rounding(rounding)
    if multiplier < 1.0:
        # A mantissa that carries just below 1.0 leaves right_shift at -1,
        # which is the same value expressed as a one-bit left shift.
        q, right_shift = _sub_unity(multiplier, policy)
        pair = MultiplierShift(q, right_shift)
    else:
        q, left_shift = _super_unity(multiplier, policy)
        pair = MultiplierShift(q, -left_shift)

    if get_config().verify_reconstruction:
        _verify(multiplier, pair)
    return pair
