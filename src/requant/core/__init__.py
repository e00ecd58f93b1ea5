"""
requant Core Module

Precondition validation returning status values.
"""
from requant.core.validation import (
    ValidationResult,
    buffer_capacity,
    validate_buffer_capacity,
    validate_channel_axis,
    validate_channel_count,
    validate_multiplier,
    validate_scale,
)

__all__ = [
    "ValidationResult",
    "buffer_capacity",
    "validate_buffer_capacity",
    "validate_channel_axis",
    "validate_channel_count",
    "validate_multiplier",
    "validate_scale",
]
