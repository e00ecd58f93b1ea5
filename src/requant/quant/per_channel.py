"""Per-output-channel multiplier decomposition.

For a quantized layer with input scale ``s_in``, weight scale ``s_w[c]``
and output scale ``s_out``, channel ``c`` rescales its int32 accumulator
by ``s_in * s_w[c] / s_out``. This module computes that effective
multiplier for every channel and decomposes each one independently.

This module provides:
- OutputStageConfig: per-channel pairs plus clamp bounds and output offset
- effective_multipliers(): the real per-channel multipliers
- per_channel_decompose(): the full per-channel output stage
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Union

import torch

from requant import reasons as ReasonCodes
from requant.api.config import get_config
from requant.core.validation import validate_channel_count, validate_scale
from requant.enums import QuantDataType, RoundingPolicy
from requant.exceptions import InvalidChannelCountError, InvalidScaleError
from requant.quant.multiplier import MultiplierShift, decompose
from requant.quant.ranges import (
    ActivationInfo,
    QuantizedRange,
    activation_bounds,
    quantized_range,
)
from requant.quant.rounding import resolve_rounding
from requant.quant.scales import QuantizationInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputStageConfig:
    """Requantization parameters consumed by an integer output stage.

    Attributes:
        pairs: One MultiplierShift per output channel.
        min_bound: Lowest value the stage may emit.
        max_bound: Highest value the stage may emit.
        output_zero_point: Offset added after rescaling.
    """

    pairs: tuple[MultiplierShift, ...]
    min_bound: int
    max_bound: int
    output_zero_point: int = 0

    def __post_init__(self) -> None:
        pairs = tuple(self.pairs)
        if not pairs:
            raise ValueError("OutputStageConfig needs at least one channel")
        if self.min_bound > self.max_bound:
            raise ValueError(
                f"min_bound={self.min_bound} exceeds max_bound={self.max_bound}"
            )
        object.__setattr__(self, "pairs", pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[MultiplierShift]:
        return iter(self.pairs)

    def __getitem__(self, channel: int) -> MultiplierShift:
        return self.pairs[channel]

    @property
    def num_channels(self) -> int:
        return len(self.pairs)

    @property
    def multipliers(self) -> tuple[int, ...]:
        return tuple(p.quantized_multiplier for p in self.pairs)

    @property
    def shifts(self) -> tuple[int, ...]:
        return tuple(p.shift for p in self.pairs)

    @property
    def multiplier(self) -> int:
        """Multiplier of channel 0, for per-tensor consumers."""
        return self.pairs[0].quantized_multiplier

    @property
    def shift(self) -> int:
        """Shift of channel 0, for per-tensor consumers."""
        return self.pairs[0].shift

    @property
    def bounds(self) -> QuantizedRange:
        return QuantizedRange(self.min_bound, self.max_bound)

    @property
    def is_uniform(self) -> bool:
        """True if every channel shares the same pair."""
        return all(p == self.pairs[0] for p in self.pairs)

    def to_tensors(self) -> tuple[torch.Tensor, torch.Tensor]:
        """Multipliers and shifts as two 1-D ``torch.int32`` tensors."""
        return (
            torch.tensor(self.multipliers, dtype=torch.int32),
            torch.tensor(self.shifts, dtype=torch.int32),
        )


def _check_scales(info: QuantizationInfo, role: str) -> None:
    for channel, scale in enumerate(info.scale.tolist()):
        result = validate_scale(scale, role)
        if not result:
            raise InvalidScaleError(
                role,
                scale=scale,
                channel=channel if info.is_per_channel else None,
                reason=result.reason,
                message=result.message,
            )


def _check_per_tensor(info: QuantizationInfo, role: str) -> None:
    if info.is_per_channel:
        raise InvalidScaleError(
            role,
            reason=ReasonCodes.SCALE_GRANULARITY_UNSUPPORTED,
            message=f"{role.capitalize()} quantization must be per-tensor",
        )


def _check_multipliers(multipliers: torch.Tensor, per_channel: bool) -> None:
    # Each factor is valid, but the product can still leave float64 range.
    for channel, value in enumerate(multipliers.tolist()):
        if value == 0.0 or not math.isfinite(value):
            raise InvalidScaleError(
                "effective",
                scale=value,
                channel=channel if per_channel else None,
                reason=ReasonCodes.EFFECTIVE_MULTIPLIER_OUT_OF_RANGE,
                message=(
                    f"input.scale * weight_scale / output.scale evaluates to "
                    f"{value!r} for channel {channel}"
                ),
            )


def effective_multipliers(
    input_info: QuantizationInfo,
    weight_info: QuantizationInfo,
    output_info: QuantizationInfo,
    num_channels: int,
) -> torch.Tensor:
    """Real requantization multiplier of every output channel.

    Args:
        input_info: Per-tensor input quantization.
        weight_info: Per-tensor or per-channel weight quantization.
        output_info: Per-tensor output quantization.
        num_channels: Output-channel count.

    Returns:
        1-D ``torch.float64`` tensor of ``input.scale * weight_scale(c) / output.scale``.

    Raises:
        InvalidChannelCountError: If num_channels is not positive, or differs
            from the number of per-channel weight scales.
        InvalidScaleError: If a scale is not strictly positive and finite,
            input/output quantization is per-channel, or a product of valid
            scales underflows to zero or overflows to infinity.
    """
    _check_per_tensor(input_info, "input")
    _check_per_tensor(output_info, "output")

    result = validate_channel_count(
        num_channels,
        weight_info.num_scales if weight_info.is_per_channel else None,
    )
    if not result:
        raise InvalidChannelCountError(
            result.message,
            expected=num_channels if isinstance(num_channels, int) else None,
            got=weight_info.num_scales if weight_info.is_per_channel else None,
            reason=result.reason,
        )

    _check_scales(input_info, "input")
    _check_scales(weight_info, "weight")
    _check_scales(output_info, "output")

    weight_scales = weight_info.scales_for(num_channels)
    multipliers = (input_info.scale[0] * weight_scales) / output_info.scale[0]
    _check_multipliers(multipliers, weight_info.is_per_channel)
    return multipliers


def per_channel_decompose(
    input_info: QuantizationInfo,
    weight_info: QuantizationInfo,
    output_info: QuantizationInfo,
    num_channels: int,
    *,
    data_type: Optional[Union[QuantDataType, str]] = None,
    activation: Optional[ActivationInfo] = None,
    rounding: Optional[Union[RoundingPolicy, str]] = None,
) -> OutputStageConfig:
    """Compute one multiplier/shift pair per output channel.

    Per-tensor weights yield ``num_channels`` identical pairs.

    Args:
        input_info: Per-tensor input quantization.
        weight_info: Per-tensor or per-channel weight quantization.
        output_info: Per-tensor output quantization.
        num_channels: Output-channel count.
        data_type: Output type bounding the clamp; global default if omitted.
        activation: Fused activation narrowing the clamp.
        rounding: Tie-break rule; global config if omitted.

    Returns:
        OutputStageConfig with exactly ``num_channels`` pairs.

    Raises:
        InvalidChannelCountError: If the channel count is inconsistent.
        InvalidScaleError: If any scale is unusable, or an effective
            multiplier underflows to zero or overflows.
        UnsupportedTypeError: If data_type has no quantized range.
    """
    multipliers = effective_multipliers(input_info, weight_info, output_info, num_channels)
    policy = resolve_rounding(rounding)

    if data_type is None:
        data_type = get_config().default_data_type
    if activation is None:
        bounds = quantized_range(data_type)
    else:
        bounds = activation_bounds(activation, output_info, data_type, rounding=policy)

    if weight_info.is_per_channel:
        pairs = tuple(decompose(m, rounding=policy) for m in multipliers.tolist())
    else:
        pairs = (decompose(float(multipliers[0]), rounding=policy),) * num_channels

    logger.debug(
        "Decomposed %d channel multipliers (%s weights), clamp [%d, %d]",
        num_channels,
        weight_info.granularity.value,
        bounds.min,
        bounds.max,
    )
    return OutputStageConfig(
        pairs=pairs,
        min_bound=bounds.min,
        max_bound=bounds.max,
        output_zero_point=output_info.zero_point,
    )
