"""Tests for quantized type ranges and activation clamp bounds."""
from __future__ import annotations

import pytest


class TestQuantizedRange:
    """Tests for quantized_range()."""

    def test_unsigned_8bit(self) -> None:
        """8-bit unsigned asymmetric spans [0, 255]."""
        from requant.enums import QuantDataType
        from requant.quant.ranges import quantized_range

        assert tuple(quantized_range(QuantDataType.QASYMM8)) == (0, 255)

    @pytest.mark.parametrize("data_type", ["qasymm8_signed", "qsymm8", "qsymm8_per_channel"])
    def test_signed_8bit(self, data_type: str) -> None:
        """8-bit signed types span [-128, 127]."""
        from requant.quant.ranges import quantized_range

        assert tuple(quantized_range(data_type)) == (-128, 127)

    def test_16bit(self) -> None:
        """16-bit types."""
        from requant.enums import QuantDataType
        from requant.quant.ranges import quantized_range

        assert tuple(quantized_range(QuantDataType.QASYMM16)) == (0, 65535)
        assert tuple(quantized_range(QuantDataType.QSYMM16)) == (-32768, 32767)

    def test_s32(self) -> None:
        """Accumulator type spans the int32 range."""
        from requant.enums import QuantDataType
        from requant.quant.ranges import quantized_range

        bounds = quantized_range(QuantDataType.S32)
        assert bounds.min == -(2**31)
        assert bounds.max == 2**31 - 1

    def test_every_quantized_type_listed(self) -> None:
        """All non-float types have a range."""
        from requant.enums import QuantDataType
        from requant.quant.ranges import QUANTIZED_RANGES

        floats = {QuantDataType.F16, QuantDataType.F32}
        assert set(QUANTIZED_RANGES) == set(QuantDataType) - floats

    @pytest.mark.parametrize("data_type", ["f16", "f32"])
    def test_float_types_unsupported(self, data_type: str) -> None:
        """Float types have no quantized range."""
        from requant import reasons
        from requant.exceptions import UnsupportedTypeError
        from requant.quant.ranges import quantized_range

        with pytest.raises(UnsupportedTypeError) as exc_info:
            quantized_range(data_type)
        assert exc_info.value.reason == reasons.DATA_TYPE_UNSUPPORTED
        assert "qasymm8" in exc_info.value.supported

    def test_unknown_tag_unsupported(self) -> None:
        """Unknown tags raise UnsupportedTypeError, a LookupError."""
        from requant.quant.ranges import quantized_range

        with pytest.raises(LookupError):
            quantized_range("int4")

    def test_clamp_and_contains(self) -> None:
        """QuantizedRange clamps and tests membership."""
        from requant.quant.ranges import QuantizedRange

        bounds = QuantizedRange(-128, 127)
        assert bounds.clamp(300) == 127
        assert bounds.clamp(-300) == -128
        assert bounds.clamp(5) == 5
        assert 0 in bounds
        assert 128 not in bounds


class TestActivationInfo:
    """Tests for ActivationInfo construction."""

    def test_default_identity(self) -> None:
        """Default activation is identity."""
        from requant.enums import ActivationFunction
        from requant.quant.ranges import ActivationInfo

        assert ActivationInfo().function is ActivationFunction.IDENTITY

    def test_string_function(self) -> None:
        """Function accepts its string value."""
        from requant.enums import ActivationFunction
        from requant.quant.ranges import ActivationInfo

        assert ActivationInfo("relu").function is ActivationFunction.RELU

    def test_inverted_bounds_rejected(self) -> None:
        """LU_BOUNDED_RELU needs b <= a."""
        from requant.quant.ranges import ActivationInfo

        with pytest.raises(ValueError):
            ActivationInfo("lu_bounded_relu", a=1.0, b=2.0)

    def test_non_finite_rejected(self) -> None:
        """Bounds must be finite."""
        from requant.quant.ranges import ActivationInfo

        with pytest.raises(ValueError):
            ActivationInfo("bounded_relu", a=float("inf"))


class TestActivationBounds:
    """Tests for activation_bounds()."""

    def test_identity_is_type_range(self) -> None:
        """Identity clamps to the full type range."""
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(0.1, zero_point=10)
        assert tuple(activation_bounds(ActivationInfo(), info, "qasymm8")) == (0, 255)

    def test_relu_low_is_zero_point(self) -> None:
        """RELU clamps below at the zero point."""
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(0.1, zero_point=10)
        assert tuple(activation_bounds(ActivationInfo("relu"), info, "qasymm8")) == (10, 255)

    def test_bounded_relu(self) -> None:
        """BOUNDED_RELU clamps above at quantize(a)."""
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(0.05, zero_point=-128)
        bounds = activation_bounds(
            ActivationInfo("bounded_relu", a=6.0), info, "qasymm8_signed"
        )
        # 6.0 / 0.05 = 120, offset by -128
        assert tuple(bounds) == (-128, -8)

    def test_lu_bounded_relu(self) -> None:
        """LU_BOUNDED_RELU clamps to [quantize(b), quantize(a)]."""
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(0.5, zero_point=0)
        bounds = activation_bounds(
            ActivationInfo("lu_bounded_relu", a=10.0, b=-10.0), info, "qasymm8_signed"
        )
        assert tuple(bounds) == (-20, 20)

    def test_bounds_saturate_to_type(self) -> None:
        """Quantized bounds stay inside the type range."""
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(0.01, zero_point=0)
        bounds = activation_bounds(
            ActivationInfo("lu_bounded_relu", a=100.0, b=-100.0), info, "qasymm8_signed"
        )
        assert tuple(bounds) == (-128, 127)

    def test_rounding_tie(self) -> None:
        """quantize() breaks ties per the rounding rule."""
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(1.0, zero_point=0)
        act = ActivationInfo("bounded_relu", a=2.5)
        assert activation_bounds(act, info, "qasymm8").max == 3
        assert activation_bounds(act, info, "qasymm8", rounding="half_even").max == 2

    def test_per_channel_output_rejected(self) -> None:
        """Output quantization must be per-tensor."""
        from requant import reasons
        from requant.exceptions import InvalidScaleError
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_channel([0.1, 0.2])
        with pytest.raises(InvalidScaleError) as exc_info:
            activation_bounds(ActivationInfo("relu"), info, "qasymm8")
        assert exc_info.value.reason == reasons.SCALE_GRANULARITY_UNSUPPORTED

    def test_zero_scale_rejected(self) -> None:
        """A zero output scale cannot quantize bounds."""
        from requant import reasons
        from requant.exceptions import InvalidScaleError
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(0.0)
        with pytest.raises(InvalidScaleError) as exc_info:
            activation_bounds(ActivationInfo("bounded_relu", a=6.0), info, "qasymm8")
        assert exc_info.value.reason == reasons.SCALE_NOT_POSITIVE

    def test_unsupported_type(self) -> None:
        """Float output types have no clamp."""
        from requant.exceptions import UnsupportedTypeError
        from requant.quant.ranges import ActivationInfo, activation_bounds
        from requant.quant.scales import QuantizationInfo

        info = QuantizationInfo.per_tensor(0.1)
        with pytest.raises(UnsupportedTypeError):
            activation_bounds(ActivationInfo("relu"), info, "f32")
