"""Tensor descriptors consumed by the channel multiplier computer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional, Sequence, Union

import torch

from requant.enums import QuantDataType
from requant.quant.scales import QuantizationInfo

# Quantized type implied by a torch storage dtype. int8 maps to the
# per-channel type when the quantization info is per-channel.
_TORCH_DTYPE_TO_QUANT: Final[dict[torch.dtype, QuantDataType]] = {
    torch.uint8: QuantDataType.QASYMM8,
    torch.int8: QuantDataType.QASYMM8_SIGNED,
    torch.int16: QuantDataType.QSYMM16,
    torch.int32: QuantDataType.S32,
    torch.float16: QuantDataType.F16,
    torch.float32: QuantDataType.F32,
}


@dataclass(frozen=True)
class TensorInfo:
    """Shape, element type and quantization of a tensor.

    Attributes:
        shape: Tensor dimensions.
        data_type: Element type.
        quant_info: Quantization parameters.
    """

    shape: tuple[int, ...]
    data_type: QuantDataType
    quant_info: QuantizationInfo

    def __post_init__(self) -> None:
        shape = tuple(int(d) for d in self.shape)
        if any(d < 0 for d in shape):
            raise ValueError(f"Tensor dimensions must be non-negative, got {shape}")
        object.__setattr__(self, "shape", shape)
        object.__setattr__(self, "data_type", QuantDataType(self.data_type))

    @property
    def num_dimensions(self) -> int:
        return len(self.shape)

    def dimension(self, axis: int) -> int:
        """Size along ``axis``; negative axes count from the end."""
        return self.shape[axis]

    @classmethod
    def from_tensor(
        cls,
        tensor: torch.Tensor,
        quant_info: QuantizationInfo,
        data_type: Optional[Union[QuantDataType, str]] = None,
    ) -> "TensorInfo":
        """Describe an existing tensor.

        Args:
            tensor: Tensor whose shape (and dtype) to take.
            quant_info: Quantization parameters of the tensor.
            data_type: Element type; inferred from ``tensor.dtype`` if omitted.

        Raises:
            ValueError: If the element type cannot be inferred.
        """
        if data_type is None:
            if tensor.dtype not in _TORCH_DTYPE_TO_QUANT:
                raise ValueError(f"Cannot infer a quantized type from {tensor.dtype}")
            data_type = _TORCH_DTYPE_TO_QUANT[tensor.dtype]
            if data_type is QuantDataType.QASYMM8_SIGNED and quant_info.is_per_channel:
                data_type = QuantDataType.QSYMM8_PER_CHANNEL
        return cls(shape=tuple(tensor.shape), data_type=data_type, quant_info=quant_info)


def make_tensor_info(
    shape: Sequence[int],
    data_type: Union[QuantDataType, str],
    scale: Union[float, Sequence[float], torch.Tensor],
    zero_point: int = 0,
) -> TensorInfo:
    """Build a TensorInfo, choosing per-channel quantization for sequences of scales."""
    if isinstance(scale, (int, float)):
        quant_info = QuantizationInfo.per_tensor(scale, zero_point)
    else:
        quant_info = QuantizationInfo.per_channel(scale, zero_point)
    return TensorInfo(shape=tuple(shape), data_type=data_type, quant_info=quant_info)
