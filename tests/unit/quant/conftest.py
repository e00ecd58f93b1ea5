"""Pytest fixtures for quantization tests."""
from __future__ import annotations

import pytest

from requant.enums import QuantDataType
from requant.quant.scales import QuantizationInfo
from requant.quant.tensor_info import TensorInfo


@pytest.fixture
def input_info() -> QuantizationInfo:
    """Per-tensor input quantization, scale 0.5."""
    return QuantizationInfo.per_tensor(0.5, zero_point=0)


@pytest.fixture
def output_info() -> QuantizationInfo:
    """Per-tensor output quantization, scale 0.25."""
    return QuantizationInfo.per_tensor(0.25, zero_point=0)


@pytest.fixture
def per_channel_weights() -> QuantizationInfo:
    """Three per-channel weight scales."""
    return QuantizationInfo.per_channel([0.1, 0.2, 0.05])


@pytest.fixture
def conv_descriptors(
    input_info: QuantizationInfo,
    per_channel_weights: QuantizationInfo,
    output_info: QuantizationInfo,
) -> tuple[TensorInfo, TensorInfo, TensorInfo]:
    """Input, weight and output descriptors of a 3-output-channel conv."""
    src = TensorInfo((1, 8, 16, 16), QuantDataType.QASYMM8_SIGNED, input_info)
    wei = TensorInfo((3, 8, 3, 3), QuantDataType.QSYMM8_PER_CHANNEL, per_channel_weights)
    dst = TensorInfo((1, 3, 14, 14), QuantDataType.QASYMM8_SIGNED, output_info)
    return src, wei, dst
