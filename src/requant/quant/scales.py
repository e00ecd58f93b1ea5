"""Quantization parameter handling.

This module provides:
- Scale granularity definitions
- QuantizationInfo, the per-tensor / per-channel tagged variant
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Sequence, Union

import torch


ScaleLike = Union[float, Sequence[float], torch.Tensor]


@unique
class ScaleGranularity(str, Enum):
    """Scale granularity for quantization.

    PER_TENSOR: Single scale for entire tensor.
    PER_CHANNEL: One scale per output channel.
    """

    PER_TENSOR = "per_tensor"
    PER_CHANNEL = "per_channel"


@dataclass(frozen=True, eq=False)
class QuantizationInfo:
    """Quantization parameters of one tensor.

    Scales are stored as a 1-D ``torch.float64`` tensor on the CPU: one
    element for PER_TENSOR, one per output channel for PER_CHANNEL. The
    tensor is a private copy, so the caller's tensor can change afterwards
    without affecting this object.

    Scale positivity is not checked here; the decomposition routines
    check it and report which channel is at fault.

    Attributes:
        scale: Scale tensor.
        zero_point: Integer offset mapping real 0 to a quantized value.
        granularity: Scale granularity level.
    """

    scale: torch.Tensor
    zero_point: int = 0
    granularity: ScaleGranularity = ScaleGranularity.PER_TENSOR

    def __post_init__(self) -> None:
        scale = torch.as_tensor(self.scale, dtype=torch.float64)
        scale = scale.detach().to("cpu").reshape(-1).clone()
        granularity = ScaleGranularity(self.granularity)

        if scale.numel() == 0:
            raise ValueError("QuantizationInfo needs at least one scale")
        if granularity is ScaleGranularity.PER_TENSOR and scale.numel() != 1:
            raise ValueError(
                f"Per-tensor quantization takes one scale, got {scale.numel()}"
            )

        object.__setattr__(self, "scale", scale)
        object.__setattr__(self, "zero_point", int(self.zero_point))
        object.__setattr__(self, "granularity", granularity)

    @classmethod
    def per_tensor(cls, scale: float, zero_point: int = 0) -> "QuantizationInfo":
        """Quantization with a single scale for the whole tensor."""
        return cls(
            scale=torch.tensor([float(scale)], dtype=torch.float64),
            zero_point=zero_point,
            granularity=ScaleGranularity.PER_TENSOR,
        )

    @classmethod
    def per_channel(cls, scales: ScaleLike, zero_point: int = 0) -> "QuantizationInfo":
        """Quantization with one scale per output channel."""
        return cls(
            scale=scales,
            zero_point=zero_point,
            granularity=ScaleGranularity.PER_CHANNEL,
        )

    @property
    def is_per_channel(self) -> bool:
        return self.granularity is ScaleGranularity.PER_CHANNEL

    @property
    def num_scales(self) -> int:
        return self.scale.numel()

    @property
    def uniform_scale(self) -> float:
        """The single scale of a per-tensor quantization.

        Raises:
            ValueError: If quantization is per-channel.
        """
        if self.is_per_channel:
            raise ValueError("Per-channel quantization has no uniform scale")
        return float(self.scale[0])

    def scale_at(self, channel: int) -> float:
        """Scale that applies to ``channel``.

        A per-tensor scale applies to every channel.
        """
        if not self.is_per_channel:
            return float(self.scale[0])
        return float(self.scale[channel])

    def scales_for(self, num_channels: int) -> torch.Tensor:
        """Scales for ``num_channels`` channels, replicating a per-tensor scale.

        Raises:
            ValueError: If a per-channel scale count differs from num_channels.
        """
        if not self.is_per_channel:
            return self.scale.expand(num_channels)
        if self.num_scales != num_channels:
            raise ValueError(
                f"{self.num_scales} scales cannot cover {num_channels} channels"
            )
        return self.scale

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "scale": self.scale.tolist(),
            "zero_point": self.zero_point,
            "granularity": self.granularity.value,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "QuantizationInfo":
        """Deserialize from dictionary.

        Args:
            d: Dictionary representation.

        Returns:
            QuantizationInfo instance.
        """
        return cls(
            scale=torch.tensor(d["scale"], dtype=torch.float64),
            zero_point=d.get("zero_point", 0),
            granularity=ScaleGranularity(d.get("granularity", "per_tensor")),
        )

    def __repr__(self) -> str:
        return (
            f"QuantizationInfo(scale={self.scale.tolist()}, "
            f"zero_point={self.zero_point}, granularity={self.granularity.value})"
        )
