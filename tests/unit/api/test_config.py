"""Tests for requant configuration APIs.

Tests for requant.configure(), get_config() and load_config().
"""
from __future__ import annotations

import threading

import pytest


class TestConfigureAPI:
    """Tests for requant.configure() public API."""

    def test_defaults(self) -> None:
        """Defaults round half away from zero with an s32 clamp."""
        import requant
        from requant.enums import QuantDataType, RoundingPolicy

        config = requant.get_config()
        assert config.rounding is RoundingPolicy.HALF_AWAY_FROM_ZERO
        assert config.default_data_type is QuantDataType.S32
        assert config.verify_reconstruction is False

    def test_configure_rounding(self) -> None:
        """Configure rounding by string."""
        import requant
        from requant.enums import RoundingPolicy

        requant.configure(rounding="half_even")
        assert requant.get_config().rounding is RoundingPolicy.HALF_EVEN

    def test_configure_case_insensitive(self) -> None:
        import requant
        from requant.enums import QuantDataType

        requant.configure(default_data_type="QASYMM8")
        assert requant.get_config().default_data_type is QuantDataType.QASYMM8

    def test_configure_verify(self) -> None:
        import requant

        requant.configure(verify_reconstruction=True)
        assert requant.get_config().verify_reconstruction is True

    def test_configure_invalid_leaves_state(self) -> None:
        """A bad value raises and changes nothing."""
        import requant
        from requant.exceptions import ConfigurationError

        requant.configure(rounding="half_even", default_data_type="qasymm8")
        with pytest.raises(ConfigurationError) as exc_info:
            requant.configure(rounding="half_up", default_data_type="s32")

        assert exc_info.value.config_key == "rounding"
        config = requant.get_config()
        assert config.rounding.value == "half_even"
        assert config.default_data_type.value == "qasymm8"

    def test_reset(self) -> None:
        import requant
        from requant.enums import RoundingPolicy

        requant.configure(rounding="half_even", verify_reconstruction=True)
        requant.configure(reset=True)

        config = requant.get_config()
        assert config.rounding is RoundingPolicy.HALF_AWAY_FROM_ZERO
        assert config.verify_reconstruction is False

    def test_get_config_returns_copy(self) -> None:
        """Mutating the returned config does not affect global state."""
        import requant

        config = requant.get_config()
        config.verify_reconstruction = True
        assert requant.get_config().verify_reconstruction is False

    def test_concurrent_configure(self) -> None:
        """Concurrent writers leave a valid configuration."""
        import requant

        def worker(policy: str) -> None:
            for _ in range(100):
                requant.configure(rounding=policy)

        threads = [
            threading.Thread(target=worker, args=(p,))
            for p in ("half_even", "half_away_from_zero") * 4
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert requant.get_config().rounding.value in ("half_even", "half_away_from_zero")


class TestRequantConfig:
    """Tests for the RequantConfig dataclass."""

    def test_string_coercion(self) -> None:
        from requant.api.config import RequantConfig
        from requant.enums import RoundingPolicy

        config = RequantConfig(rounding="half_even")
        assert config.rounding is RoundingPolicy.HALF_EVEN

    def test_invalid_value(self) -> None:
        from requant.api.config import RequantConfig
        from requant.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError):
            RequantConfig(default_data_type="int4")

    def test_to_dict(self) -> None:
        from requant.api.config import RequantConfig

        assert RequantConfig().to_dict() == {
            "rounding": "half_away_from_zero",
            "default_data_type": "s32",
            "verify_reconstruction": False,
        }

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables populate the config."""
        from requant.api.config import RequantConfig
        from requant.enums import QuantDataType, RoundingPolicy

        monkeypatch.setenv("REQUANT_ROUNDING", "half_even")
        monkeypatch.setenv("REQUANT_DEFAULT_DATA_TYPE", "qsymm16")
        monkeypatch.setenv("REQUANT_VERIFY_RECONSTRUCTION", "true")

        config = RequantConfig.from_env()
        assert config.rounding is RoundingPolicy.HALF_EVEN
        assert config.default_data_type is QuantDataType.QSYMM16
        assert config.verify_reconstruction is True

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from requant.api.config import RequantConfig

        for key in (
            "REQUANT_ROUNDING",
            "REQUANT_DEFAULT_DATA_TYPE",
            "REQUANT_VERIFY_RECONSTRUCTION",
        ):
            monkeypatch.delenv(key, raising=False)

        assert RequantConfig.from_env() == RequantConfig()

    @pytest.mark.parametrize("value", ["0", "false", "No", "OFF"])
    def test_from_env_false_strings(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        from requant.api.config import RequantConfig

        monkeypatch.setenv("REQUANT_VERIFY_RECONSTRUCTION", value)
        assert RequantConfig.from_env().verify_reconstruction is False


class TestLoadConfig:
    """Tests for requant.load_config()."""

    def test_load_yaml(self, tmp_path) -> None:
        import requant
        from requant.enums import QuantDataType, RoundingPolicy

        path = tmp_path / "requant.yaml"
        path.write_text(
            "rounding: half_even\n"
            "default_data_type: qasymm8\n"
            "verify_reconstruction: true\n"
        )
        requant.load_config(str(path))

        config = requant.get_config()
        assert config.rounding is RoundingPolicy.HALF_EVEN
        assert config.default_data_type is QuantDataType.QASYMM8
        assert config.verify_reconstruction is True

    def test_partial_yaml(self, tmp_path) -> None:
        """Keys absent from the file keep their current value."""
        import requant

        requant.configure(default_data_type="qsymm16")
        path = tmp_path / "requant.yaml"
        path.write_text("rounding: half_even\n")
        requant.load_config(str(path))

        assert requant.get_config().default_data_type.value == "qsymm16"

    def test_missing_file(self, tmp_path) -> None:
        import requant

        with pytest.raises(FileNotFoundError):
            requant.load_config(str(tmp_path / "absent.yaml"))

    def test_not_a_mapping(self, tmp_path) -> None:
        import requant
        from requant.exceptions import ConfigurationError

        path = tmp_path / "requant.yaml"
        path.write_text("- half_even\n")
        with pytest.raises(ConfigurationError):
            requant.load_config(str(path))

    def test_unknown_key(self, tmp_path) -> None:
        import requant
        from requant.exceptions import ConfigurationError

        path = tmp_path / "requant.yaml"
        path.write_text("rounding: half_even\nprecision: 64\n")
        with pytest.raises(ConfigurationError) as exc_info:
            requant.load_config(str(path))
        assert exc_info.value.config_key == "precision"

