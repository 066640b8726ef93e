"""Core data models used across loader, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

DEFAULT_TOOL_PATH = "/sbin/hdparm"


class Loudness(str, Enum):
    QUIET = "quiet"
    LOUD = "loud"
    SHOW = "show"


class Capability(IntEnum):
    """Linux capability numbers from ``<linux/capability.h>``."""

    DAC_OVERRIDE = 1
    SYS_RAWIO = 17

    @property
    def cap_name(self) -> str:
        return f"CAP_{self.name}"


class CapFlag(IntEnum):
    """libcap ``cap_flag_t`` values."""

    EFFECTIVE = 0
    PERMITTED = 1
    INHERITABLE = 2


class CapabilitySet(str, Enum):
    EFFECTIVE = "effective"
    INHERITABLE = "inheritable"
    PERMITTED = "permitted"
    AMBIENT = "ambient"


@dataclass(frozen=True)
class Config:
    devices: tuple[str, ...]
    tool_path: str = DEFAULT_TOOL_PATH
    command_arg: Loudness | str = Loudness.SHOW
    source: Path | None = None

    def as_document(self) -> dict[str, Any]:
        """Return the fields persisted in the configuration file."""
        return {"devices": list(self.devices), "hdparm_path": self.tool_path}


@dataclass(frozen=True)
class CapabilityGrant:
    capabilities: tuple[Capability, ...]
    sets: tuple[CapabilitySet, ...]


@dataclass(frozen=True)
class MatchError:
    path: Path
    error: OSError

    def __str__(self) -> str:
        reason = self.error.strerror or str(self.error)
        return f"error reading {self.path}: {reason}"


@dataclass(frozen=True)
class Invocation:
    device: Path
    argv: tuple[str, ...]
    returncode: int


@dataclass(frozen=True)
class RunReport:
    grant: CapabilityGrant
    invocations: tuple[Invocation, ...]
    warnings: tuple[str, ...]
