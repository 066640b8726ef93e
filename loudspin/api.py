"""Stable public API for building tooling on top of loudspin.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from loudspin.core.config_loader import DEFAULT_CONFIG_PATH, load_config
from loudspin.core.device_glob import expand_pattern
from loudspin.core.dispatch import build_command, translate_arg
from loudspin.core.errors import (
    AmbientCapError,
    CapabilityError,
    CapabilityInitError,
    CapabilityUpdateError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    DispatchError,
    InvalidArgError,
    LoudspinError,
    PatternError,
    format_error_chain,
)
from loudspin.core.model import (
    Capability,
    CapabilityGrant,
    CapabilitySet,
    Config,
    Invocation,
    Loudness,
    MatchError,
    RunReport,
)
from loudspin.core.service import LoudspinService
from loudspin.privilege.base import CapabilityBackend

__all__ = [
    "LoudspinError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "CapabilityError",
    "CapabilityInitError",
    "CapabilityUpdateError",
    "AmbientCapError",
    "PatternError",
    "DispatchError",
    "InvalidArgError",
    "Capability",
    "CapabilityBackend",
    "CapabilityGrant",
    "CapabilitySet",
    "Config",
    "Invocation",
    "Loudness",
    "MatchError",
    "RunReport",
    "build_command",
    "expand_pattern",
    "format_error_chain",
    "load_config",
    "translate_arg",
    "apply_loudness",
]


def apply_loudness(
    loudness: Loudness | str,
    *,
    config_path: Path = DEFAULT_CONFIG_PATH,
    capabilities: CapabilityBackend | None = None,
    on_warning: Callable[[str], None] | None = None,
) -> RunReport:
    """Load the configuration and apply ``loudness`` to every configured device.

    Raises a :class:`LoudspinError` subclass on the first fatal error.
    """
    config = load_config(config_path, loudness)
    service = LoudspinService(config, capabilities=capabilities, on_warning=on_warning)
    return service.run()
