"""Raise the two capabilities needed for raw device access."""

from __future__ import annotations

import logging

from loudspin.core.errors import AmbientCapError, CapabilityInitError, CapabilityUpdateError
from loudspin.core.model import Capability, CapabilityGrant, CapabilitySet, CapFlag
from loudspin.privilege.base import CapabilityBackend
from loudspin.privilege.libcap import LibcapBackend

REQUIRED_CAPABILITIES = (Capability.DAC_OVERRIDE, Capability.SYS_RAWIO)
_UPDATE_ORDER = (CapFlag.EFFECTIVE, CapFlag.INHERITABLE, CapFlag.PERMITTED)
LOGGER = logging.getLogger(__name__)


def elevate(backend: CapabilityBackend | None = None) -> CapabilityGrant:
    """Raise CAP_DAC_OVERRIDE and CAP_SYS_RAWIO in every capability set.

    The effective, inheritable and permitted sets are updated and applied
    first. Both capabilities are then raised into the ambient set so that the
    spawned disk-control tool inherits them. Any rejection is fatal.
    """
    backend = backend or LibcapBackend()
    names = ", ".join(cap.cap_name for cap in REQUIRED_CAPABILITIES)

    try:
        backend.init()
    except OSError as exc:
        raise CapabilityInitError("error initializing capabilities") from exc

    try:
        for flag in _UPDATE_ORDER:
            try:
                backend.update(REQUIRED_CAPABILITIES, flag)
            except OSError as exc:
                raise CapabilityUpdateError(
                    f"error raising {names} in the {flag.name.lower()} set"
                ) from exc
        try:
            backend.apply()
        except OSError as exc:
            raise CapabilityUpdateError("error setting capabilities") from exc
    finally:
        backend.close()

    for cap in REQUIRED_CAPABILITIES:
        try:
            backend.raise_ambient(cap)
        except OSError as exc:
            raise AmbientCapError(f"unable to set ambient capability {cap.cap_name}") from exc

    LOGGER.debug("set capabilities: %s", names)
    return CapabilityGrant(
        capabilities=REQUIRED_CAPABILITIES,
        sets=(
            CapabilitySet.EFFECTIVE,
            CapabilitySet.INHERITABLE,
            CapabilitySet.PERMITTED,
            CapabilitySet.AMBIENT,
        ),
    )
