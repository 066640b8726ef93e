"""Run the disk-control tool against one device."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from loudspin.core.errors import DispatchError, InvalidArgError
from loudspin.core.model import Invocation, Loudness

ACOUSTIC_FLAG = "-M"
_LEVEL_ARGS = {
    Loudness.QUIET: "128",
    Loudness.LOUD: "254",
}
LOGGER = logging.getLogger(__name__)


def translate_arg(level: Loudness | str) -> str | None:
    """Map a loudness level to the tool's numeric argument.

    ``show`` has no numeric argument and maps to ``None``.
    """
    try:
        loudness = Loudness(level)
    except ValueError:
        raise InvalidArgError(f"wrong command argument '{level}'") from None
    return _LEVEL_ARGS.get(loudness)


def build_command(tool_path: str, level: Loudness | str, device: Path | str) -> list[str]:
    argv = [tool_path, ACOUSTIC_FLAG]
    numeric = translate_arg(level)
    if numeric is not None:
        argv.append(numeric)
    argv.append(str(device))
    return argv


def dispatch(device: Path, level: Loudness | str, tool_path: str) -> Invocation:
    """Run the tool for ``device`` and block until it exits.

    The tool's exit status is recorded but not treated as a failure; only
    failing to spawn or wait for the process raises.
    """
    argv = build_command(tool_path, level, device)
    LOGGER.debug("running %s", " ".join(argv))
    try:
        process = subprocess.Popen(argv)
    except OSError as exc:
        raise DispatchError(f"error calling {tool_path}") from exc

    try:
        returncode = process.wait()
    except OSError as exc:
        raise DispatchError(f"error waiting for {tool_path} to complete") from exc

    LOGGER.debug("executed %s for %s (exit status %d)", tool_path, device, returncode)
    return Invocation(device=Path(device), argv=tuple(argv), returncode=returncode)
