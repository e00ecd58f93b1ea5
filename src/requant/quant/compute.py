"""Per-channel multipliers and shifts from tensor descriptors.

Resolves the output-channel count from the weight descriptor, runs the
per-channel decomposition and writes the result into caller-owned
buffers. Buffers may be 1-D int32 or int64 torch tensors (int32 is what
integer output stages consume) or any mutable sequence supporting item
assignment.
"""
from __future__ import annotations

import logging
from typing import Any, MutableSequence, Optional, Sequence, Union

import torch

from requant.core.validation import (
    buffer_capacity,
    validate_buffer_capacity,
    validate_channel_axis,
)
from requant.enums import RoundingPolicy
from requant.exceptions import BufferTooSmallError, InvalidChannelCountError
from requant.quant.per_channel import OutputStageConfig, per_channel_decompose
from requant.quant.ranges import ActivationInfo
from requant.quant.tensor_info import TensorInfo

logger = logging.getLogger(__name__)

Buffer = Union[torch.Tensor, MutableSequence[int]]


def resolve_num_channels(weight_desc: TensorInfo, channel_axis: int) -> int:
    """Size of the output-channel axis of the weights.

    Raises:
        InvalidChannelCountError: If the axis does not exist.
    """
    result = validate_channel_axis(weight_desc.shape, channel_axis)
    if not result:
        raise InvalidChannelCountError(result.message, reason=result.reason)
    return weight_desc.dimension(channel_axis)


def _check_buffer(buffer: Any, required: int, name: str) -> None:
    result = validate_buffer_capacity(buffer, required, name)
    if not result:
        raise BufferTooSmallError(
            name,
            buffer_capacity(buffer),
            required,
            reason=result.reason,
            message=result.message,
        )


def _write(buffer: Buffer, values: Sequence[int]) -> None:
    if isinstance(buffer, torch.Tensor):
        buffer[: len(values)] = torch.tensor(
            values, dtype=buffer.dtype, device=buffer.device
        )
        return
    for index, value in enumerate(values):
        buffer[index] = value


def compute_output_stage(
    input_desc: TensorInfo,
    weight_desc: TensorInfo,
    output_desc: TensorInfo,
    channel_axis: int,
    *,
    activation: Optional[ActivationInfo] = None,
    rounding: Optional[Union[RoundingPolicy, str]] = None,
) -> OutputStageConfig:
    """Output stage for a layer described by tensor descriptors.

    Clamp bounds come from ``output_desc.data_type``, narrowed by
    ``activation`` when given.

    Args:
        input_desc: Input tensor descriptor.
        weight_desc: Weight tensor descriptor.
        output_desc: Output tensor descriptor.
        channel_axis: Axis of ``weight_desc.shape`` enumerating output channels.
        activation: Fused activation.
        rounding: Tie-break rule; global config if omitted.

    Returns:
        OutputStageConfig with one pair per output channel.
    """
    num_channels = resolve_num_channels(weight_desc, channel_axis)
    return per_channel_decompose(
        input_desc.quant_info,
        weight_desc.quant_info,
        output_desc.quant_info,
        num_channels,
        data_type=output_desc.data_type,
        activation=activation,
        rounding=rounding,
    )


def fill_channel_multipliers_and_shifts(
    input_desc: TensorInfo,
    weight_desc: TensorInfo,
    output_desc: TensorInfo,
    channel_axis: int,
    multipliers_out: Buffer,
    shifts_out: Buffer,
    *,
    activation: Optional[ActivationInfo] = None,
    rounding: Optional[Union[RoundingPolicy, str]] = None,
) -> OutputStageConfig:
    """Write one multiplier and one shift per output channel into caller buffers.

    Both buffers are checked before anything is written. Slots past the
    channel count are left untouched. If the weights are quantized
    per-tensor every channel gets the same pair.

    Args:
        input_desc: Input tensor descriptor.
        weight_desc: Weight tensor descriptor.
        output_desc: Output tensor descriptor.
        channel_axis: Axis of ``weight_desc.shape`` enumerating output channels.
        multipliers_out: Buffer receiving the quantized multipliers.
        shifts_out: Buffer receiving the shifts.
        activation: Fused activation.
        rounding: Tie-break rule; global config if omitted.

    Returns:
        The OutputStageConfig whose pairs were written.

    Raises:
        BufferTooSmallError: If a buffer holds fewer slots than channels, is
            not 1-D, or is a tensor of a dtype other than int32/int64.
        InvalidChannelCountError: If the channel axis or count is inconsistent.
        InvalidScaleError: If any scale is unusable.
        UnsupportedTypeError: If the output type has no quantized range.

    Example:
        >>> mults = torch.zeros(64, dtype=torch.int32)
        >>> shifts = torch.zeros(64, dtype=torch.int32)
        >>> fill_channel_multipliers_and_shifts(src, wei, dst, 0, mults, shifts)
    """
    num_channels = resolve_num_channels(weight_desc, channel_axis)
    _check_buffer(multipliers_out, num_channels, "multipliers_out")
    _check_buffer(shifts_out, num_channels, "shifts_out")

    stage = compute_output_stage(
        input_desc,
        weight_desc,
        output_desc,
        channel_axis,
        activation=activation,
        rounding=rounding,
    )

    _write(multipliers_out, stage.multipliers)
    _write(shifts_out, stage.shifts)
    logger.debug("Wrote %d multiplier/shift pairs", num_channels)
    return stage
