"""requant Configuration APIs.

Public APIs for configuring requant:
- configure() - Set global configuration
- get_config() - Get current configuration
- load_config() - Load configuration from a YAML file
"""
from __future__ import annotations

import dataclasses
import logging
import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TypeVar, Union

import yaml

from requant.enums import QuantDataType, RoundingPolicy
from requant.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=Enum)

_FALSE_STRINGS = ("0", "false", "no", "off")


def _coerce_enum(enum_cls: type[_E], value: Union[_E, str], key: str) -> _E:
    """Convert a member or its string value to ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        raise ConfigurationError(
            f"Invalid value {value!r} for '{key}'",
            config_key=key,
            expected=[m.value for m in enum_cls],
            got=value,
        ) from None


@dataclass
class RequantConfig:
    """Global requant configuration.

    Attributes:
        rounding: Tie-break rule for mantissa quantization.
        default_data_type: Output type whose range clamps an output stage
            when the caller does not name one.
        verify_reconstruction: If True, re-check every decomposed pair
            against the 2^-31 relative error bound.
    """
    rounding: RoundingPolicy = RoundingPolicy.HALF_AWAY_FROM_ZERO
    default_data_type: QuantDataType = QuantDataType.S32
    verify_reconstruction: bool = False

    def __post_init__(self) -> None:
        """Normalize string values to enum members."""
        self.rounding = _coerce_enum(RoundingPolicy, self.rounding, "rounding")
        self.default_data_type = _coerce_enum(
            QuantDataType, self.default_data_type, "default_data_type"
        )

    @classmethod
    def from_env(cls) -> "RequantConfig":
        """Create config from environment variables.

        Environment variables:
            REQUANT_ROUNDING: "half_away_from_zero" or "half_even"
            REQUANT_DEFAULT_DATA_TYPE: Name of a QuantDataType member
            REQUANT_VERIFY_RECONSTRUCTION: "1"/"true" to enable

        Returns:
            RequantConfig with values from environment.
        """
        rounding = os.environ.get(
            "REQUANT_ROUNDING", RoundingPolicy.HALF_AWAY_FROM_ZERO.value
        )
        default_data_type = os.environ.get(
            "REQUANT_DEFAULT_DATA_TYPE", QuantDataType.S32.value
        )
        verify_str = os.environ.get("REQUANT_VERIFY_RECONSTRUCTION", "0")
        verify = verify_str.lower() not in _FALSE_STRINGS

        return cls(
            rounding=rounding,
            default_data_type=default_data_type,
            verify_reconstruction=verify,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a YAML-friendly dictionary."""
        return {
            "rounding": self.rounding.value,
            "default_data_type": self.default_data_type.value,
            "verify_reconstruction": self.verify_reconstruction,
        }


@dataclass
class GlobalState:
    """Global state for requant."""
    config: RequantConfig = field(default_factory=RequantConfig)
    _lock: threading.Lock = field(default_factory=threading.Lock)


# Module-level global state
_global_state: Optional[GlobalState] = None
_state_lock = threading.Lock()


def _get_global_state() -> GlobalState:
    """Get or create global state."""
    global _global_state
    if _global_state is None:
        with _state_lock:
            if _global_state is None:
                _global_state = GlobalState()
    return _global_state


def configure(
    rounding: Optional[Union[RoundingPolicy, str]] = None,
    default_data_type: Optional[Union[QuantDataType, str]] = None,
    verify_reconstruction: Optional[bool] = None,
    reset: bool = False,
) -> None:
    """Configure requant global settings.

    Settings persist for the lifetime of the process unless reset.

    Args:
        rounding: Tie-break rule for mantissa quantization.
        default_data_type: Output type used for clamp bounds by default.
        verify_reconstruction: Re-check the error bound of every pair.
        reset: If True, reset all settings to defaults first.

    Raises:
        ConfigurationError: If a value is not valid for its setting.

    Example:
        >>> import requant
        >>> requant.configure(rounding="half_even")
        >>> requant.configure(reset=True)
    """
    state = _get_global_state()

    # Coerce before taking the lock so a bad value leaves state untouched
    if rounding is not None:
        rounding = _coerce_enum(RoundingPolicy, rounding, "rounding")
    if default_data_type is not None:
        default_data_type = _coerce_enum(
            QuantDataType, default_data_type, "default_data_type"
        )

    with state._lock:
        if reset:
            state.config = RequantConfig()

        if rounding is not None:
            state.config.rounding = rounding
        if default_data_type is not None:
            state.config.default_data_type = default_data_type
        if verify_reconstruction is not None:
            state.config.verify_reconstruction = bool(verify_reconstruction)

    logger.debug("requant configuration: %s", state.config)


def get_config() -> RequantConfig:
    """Get current requant configuration.

    Returns:
        Current configuration object (copy for safety).
    """
    state = _get_global_state()
    with state._lock:
        return dataclasses.replace(state.config)


def load_config(path: str) -> None:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If config file is invalid.

    YAML format::

        rounding: half_even
        default_data_type: qasymm8
        verify_reconstruction: true
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config file format: {path}")

    unknown = set(data) - {f.name for f in dataclasses.fields(RequantConfig)}
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in {path}: {sorted(unknown)}",
            config_key=sorted(unknown)[0],
        )

    configure(
        rounding=data.get("rounding"),
        default_data_type=data.get("default_data_type"),
        verify_reconstruction=data.get("verify_reconstruction"),
    )

