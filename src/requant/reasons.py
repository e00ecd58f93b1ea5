"""
requant Reason Codes

Structured reason codes explaining why a decomposition input was rejected.
Each code has a unique string value for serialization and debugging.

This module provides:
- ReasonCategory: Categories of rejection reasons
- Individual reason code constants
- ALL_REASON_CODES: Mapping of all codes to their categories
"""
from __future__ import annotations

from enum import Enum, unique


@unique
class ReasonCategory(str, Enum):
    """Categories of rejection reasons.

    Categories are stored as lowercase strings.
    """

    MULTIPLIER = "multiplier"
    SCALE = "scale"
    CHANNEL = "channel"
    BUFFER = "buffer"
    DTYPE = "dtype"
    CONFIG = "config"


# =============================================================================
# Multiplier Reason Codes
# =============================================================================

MULTIPLIER_NEGATIVE = "MULTIPLIER_NEGATIVE"
"""Real multiplier is below zero."""

MULTIPLIER_NOT_FINITE = "MULTIPLIER_NOT_FINITE"
"""Real multiplier is NaN or infinite."""

MULTIPLIER_NOT_SUB_UNITY = "MULTIPLIER_NOT_SUB_UNITY"
"""Sub-unity decomposer got a value outside (0, 1), or one that rounds to 1."""

MULTIPLIER_NOT_SUPER_UNITY = "MULTIPLIER_NOT_SUPER_UNITY"
"""Super-unity decomposer got a value below 1."""

RECONSTRUCTION_ERROR_EXCEEDED = "RECONSTRUCTION_ERROR_EXCEEDED"
"""Decomposed pair does not reproduce the multiplier within 2^-31."""


# =============================================================================
# Scale Reason Codes
# =============================================================================

SCALE_NOT_POSITIVE = "SCALE_NOT_POSITIVE"
"""Quantization scale is zero or negative."""

SCALE_NOT_FINITE = "SCALE_NOT_FINITE"
"""Quantization scale is NaN or infinite."""

SCALE_GRANULARITY_UNSUPPORTED = "SCALE_GRANULARITY_UNSUPPORTED"
"""Input or output quantization is per-channel; only weights may be."""

EFFECTIVE_MULTIPLIER_OUT_OF_RANGE = "EFFECTIVE_MULTIPLIER_OUT_OF_RANGE"
"""Valid scales combine to a multiplier that underflows to 0 or overflows."""


# =============================================================================
# Channel Reason Codes
# =============================================================================

CHANNEL_COUNT_MISMATCH = "CHANNEL_COUNT_MISMATCH"
"""Per-channel scale count differs from the output-channel count."""

CHANNEL_COUNT_INVALID = "CHANNEL_COUNT_INVALID"
"""Output-channel count is not a positive integer."""

CHANNEL_AXIS_OUT_OF_RANGE = "CHANNEL_AXIS_OUT_OF_RANGE"
"""Channel axis does not index a dimension of the weight shape."""


# =============================================================================
# Buffer Reason Codes
# =============================================================================

BUFFER_TOO_SMALL = "BUFFER_TOO_SMALL"
"""Caller-supplied output buffer holds fewer slots than channels."""

BUFFER_NOT_1D = "BUFFER_NOT_1D"
"""Caller-supplied tensor buffer is not one-dimensional."""

BUFFER_DTYPE_UNSUPPORTED = "BUFFER_DTYPE_UNSUPPORTED"
"""Tensor buffer dtype cannot hold int32 values exactly."""


# =============================================================================
# Data Type Reason Codes
# =============================================================================

DATA_TYPE_UNSUPPORTED = "DATA_TYPE_UNSUPPORTED"
"""Data type has no quantized integer range."""


# =============================================================================
# Configuration Reason Codes
# =============================================================================

CONFIG_VALIDATION_FAILED = "CONFIG_VALIDATION_FAILED"
"""Configuration value failed validation."""


ALL_REASON_CODES: dict[str, ReasonCategory] = {
    # Multiplier
    MULTIPLIER_NEGATIVE: ReasonCategory.MULTIPLIER,
    MULTIPLIER_NOT_FINITE: ReasonCategory.MULTIPLIER,
    MULTIPLIER_NOT_SUB_UNITY: ReasonCategory.MULTIPLIER,
    MULTIPLIER_NOT_SUPER_UNITY: ReasonCategory.MULTIPLIER,
    RECONSTRUCTION_ERROR_EXCEEDED: ReasonCategory.MULTIPLIER,
    # Scale
    SCALE_NOT_POSITIVE: ReasonCategory.SCALE,
    SCALE_NOT_FINITE: ReasonCategory.SCALE,
    SCALE_GRANULARITY_UNSUPPORTED: ReasonCategory.SCALE,
    EFFECTIVE_MULTIPLIER_OUT_OF_RANGE: ReasonCategory.SCALE,
    # Channel
    CHANNEL_COUNT_MISMATCH: ReasonCategory.CHANNEL,
    CHANNEL_COUNT_INVALID: ReasonCategory.CHANNEL,
    CHANNEL_AXIS_OUT_OF_RANGE: ReasonCategory.CHANNEL,
    # Buffer
    BUFFER_TOO_SMALL: ReasonCategory.BUFFER,
    BUFFER_NOT_1D: ReasonCategory.BUFFER,
    BUFFER_DTYPE_UNSUPPORTED: ReasonCategory.BUFFER,
    # Dtype
    DATA_TYPE_UNSUPPORTED: ReasonCategory.DTYPE,
    # Config
    CONFIG_VALIDATION_FAILED: ReasonCategory.CONFIG,
}

