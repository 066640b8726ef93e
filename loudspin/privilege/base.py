"""Capability adapter interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from loudspin.core.model import Capability, CapFlag


class CapabilityBackend(Protocol):
    """Narrow boundary over the OS capability calls.

    Every method raises ``OSError`` when the kernel or libcap rejects the call.
    """

    def init(self) -> None:
        """Fetch the capability state of the current process."""

    def update(self, caps: Sequence[Capability], flag: CapFlag) -> None:
        """Raise ``caps`` in the ``flag`` set of the fetched state."""

    def apply(self) -> None:
        """Install the fetched state on the current process."""

    def raise_ambient(self, cap: Capability) -> None:
        """Raise ``cap`` into the ambient set of the current process."""

    def close(self) -> None:
        """Release the fetched state."""
