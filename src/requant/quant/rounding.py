"""Scalar rounding under a selectable tie-break rule."""
from __future__ import annotations

import math
from typing import Optional, Union

from requant.api.config import get_config
from requant.enums import RoundingPolicy


def round_half(value: float, policy: RoundingPolicy) -> int:
    """Round ``value`` to the nearest integer, breaking ties per ``policy``.

    Args:
        value: Finite real value.
        policy: Tie-break rule.

    Returns:
        Rounded integer.
    """
    if policy is RoundingPolicy.HALF_EVEN:
        return round(value)
    # Exact for |value| < 2**52, which covers every scaled mantissa.
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def resolve_rounding(rounding: Optional[Union[RoundingPolicy, str]]) -> RoundingPolicy:
    """Explicit rounding rule, or the globally configured one when omitted."""
    if rounding is None:
        return get_config().rounding
    return RoundingPolicy(rounding)
