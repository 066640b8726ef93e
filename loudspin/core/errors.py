"""Domain-specific errors for loudspin."""

from __future__ import annotations


class LoudspinError(Exception):
    """Base error for loudspin."""


class ConfigError(LoudspinError):
    """Base configuration error."""


class ConfigLoadError(ConfigError):
    """Raised when the configuration file cannot be opened or read."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration does not parse or conform to schema."""


class CapabilityError(LoudspinError):
    """Base capability error."""


class CapabilityInitError(CapabilityError):
    """Raised when the capability state of the process cannot be obtained."""


class CapabilityUpdateError(CapabilityError):
    """Raised when the kernel rejects an effective/inheritable/permitted update."""


class AmbientCapError(CapabilityError):
    """Raised when a capability cannot be raised into the ambient set."""


class PatternError(LoudspinError):
    """Raised when a device glob pattern is malformed."""


class DispatchError(LoudspinError):
    """Raised when the disk-control tool cannot be spawned or waited for."""


class InvalidArgError(LoudspinError):
    """Raised when a loudness level has no tool argument."""


def format_error_chain(exc: BaseException) -> str:
    """Render ``exc`` and its ``__cause__`` chain, outermost first."""
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        message = str(current)
        if message:
            messages.append(message)
        current = current.__cause__
    return ": ".join(messages)
