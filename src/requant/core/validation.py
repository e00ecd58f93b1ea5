"""
Precondition Validation

Status-returning checks for every precondition of the decomposition
pipeline. Callers that prefer not to handle exceptions can run these
first; the public operations run them too and raise on failure.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Final, Sequence

import torch

from requant import reasons as ReasonCodes


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes:
        valid: Whether the validation passed.
        reason: Reason code if validation failed.
        message: Optional detailed message.
    """

    valid: bool
    reason: str | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.valid


_OK = ValidationResult(valid=True)

# Tensor buffers must hold signed int32 values (negative shifts included) exactly.
BUFFER_DTYPES: Final[tuple[torch.dtype, ...]] = (torch.int32, torch.int64)


def validate_multiplier(multiplier: float) -> ValidationResult:
    """Validate a real multiplier for decomposition.

    Zero is valid (it decomposes to ``(0, 0)``).

    Args:
        multiplier: Real multiplier.

    Returns:
        ValidationResult indicating if the multiplier can be decomposed.
    """
    if not math.isfinite(multiplier):
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.MULTIPLIER_NOT_FINITE,
            message=f"multiplier={multiplier!r} is not finite",
        )

    if multiplier < 0.0:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.MULTIPLIER_NEGATIVE,
            message=f"multiplier={multiplier!r} is negative",
        )

    return _OK


def validate_scale(scale: float, role: str = "scale") -> ValidationResult:
    """Validate a single quantization scale.

    Args:
        scale: Scale value.
        role: Name used in the message ("input", "weight", "output").

    Returns:
        ValidationResult indicating if the scale is strictly positive and finite.
    """
    if not math.isfinite(scale):
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.SCALE_NOT_FINITE,
            message=f"{role} scale={scale!r} is not finite",
        )

    if scale <= 0.0:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.SCALE_NOT_POSITIVE,
            message=f"{role} scale={scale!r} is not strictly positive",
        )

    return _OK


def validate_channel_count(
    num_channels: int,
    num_scales: int | None = None,
) -> ValidationResult:
    """Validate an output-channel count against a per-channel scale count.

    Args:
        num_channels: Requested output-channel count.
        num_scales: Number of per-channel weight scales, or None when the
            weights are per-tensor.

    Returns:
        ValidationResult indicating if the counts agree.
    """
    if isinstance(num_channels, bool) or not isinstance(num_channels, int) or num_channels < 1:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.CHANNEL_COUNT_INVALID,
            message=f"num_channels={num_channels!r} must be a positive integer",
        )

    if num_scales is not None and num_scales != num_channels:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.CHANNEL_COUNT_MISMATCH,
            message=(
                f"{num_scales} per-channel weight scales given "
                f"for {num_channels} output channels"
            ),
        )

    return _OK


def validate_channel_axis(shape: Sequence[int], axis: int) -> ValidationResult:
    """Validate that ``axis`` indexes a dimension of ``shape``.

    Negative axes count from the end, as in torch.

    Args:
        shape: Weight tensor shape.
        axis: Output-channel axis.

    Returns:
        ValidationResult indicating if the axis is in range.
    """
    rank = len(shape)
    if not -rank <= axis < rank:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.CHANNEL_AXIS_OUT_OF_RANGE,
            message=f"channel_axis={axis} is out of range for shape {tuple(shape)}",
        )

    return _OK


def buffer_capacity(buffer: Any) -> int:
    """Number of writable slots in a caller buffer."""
    if isinstance(buffer, torch.Tensor):
        return buffer.numel()
    return len(buffer)


def validate_buffer_capacity(
    buffer: Any,
    required: int,
    name: str = "buffer",
) -> ValidationResult:
    """Validate that an output buffer can hold ``required`` elements.

    Args:
        buffer: 1-D int32/int64 torch tensor or mutable sequence.
        required: Number of slots that will be written.
        name: Buffer name used in the message.

    Returns:
        ValidationResult indicating if the buffer can take every value.
    """
    if isinstance(buffer, torch.Tensor) and buffer.dim() != 1:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.BUFFER_NOT_1D,
            message=f"{name} must be 1-D, got shape {tuple(buffer.shape)}",
        )

    if isinstance(buffer, torch.Tensor) and buffer.dtype not in BUFFER_DTYPES:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.BUFFER_DTYPE_UNSUPPORTED,
            message=f"{name} has dtype {buffer.dtype}, expected torch.int32 or torch.int64",
        )

    capacity = buffer_capacity(buffer)
    if capacity < required:
        return ValidationResult(
            valid=False,
            reason=ReasonCodes.BUFFER_TOO_SMALL,
            message=f"{name} holds {capacity} elements, {required} required",
        )

    return _OK
