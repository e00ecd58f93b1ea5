"""requant Public Configuration API.

This module provides the user-facing configuration management
(configure, get_config, load_config).
"""
from __future__ import annotations

from requant.api.config import (
    RequantConfig,
    configure,
    get_config,
    load_config,
)

__all__ = [
    "RequantConfig",
    "configure",
    "get_config",
    "load_config",
]
