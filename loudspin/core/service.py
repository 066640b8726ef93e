"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
from collections.abc import Callable

from loudspin.core.config_loader import dump_config
from loudspin.core.device_glob import expand_pattern
from loudspin.core.dispatch import dispatch
from loudspin.core.errors import PatternError
from loudspin.core.model import Config, Invocation, MatchError, RunReport
from loudspin.core.privilege import elevate
from loudspin.privilege.base import CapabilityBackend

LOGGER = logging.getLogger(__name__)


class LoudspinService:
    def __init__(
        self,
        config: Config,
        *,
        capabilities: CapabilityBackend | None = None,
        on_warning: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config
        self.capabilities = capabilities
        self.on_warning = on_warning or LOGGER.warning

    def run(self) -> RunReport:
        """Elevate once, then run the tool for every matched device in order."""
        self._log_config()

        grant = elevate(self.capabilities)

        invocations: list[Invocation] = []
        warnings: list[str] = []
        for pattern in self.config.devices:
            LOGGER.debug("processing glob %r", pattern)
            try:
                matches = expand_pattern(pattern)
            except PatternError as exc:
                raise PatternError("error listing device files") from exc

            for match in matches:
                if isinstance(match, MatchError):
                    warning = f"failed to list file: {match}"
                    warnings.append(warning)
                    self.on_warning(warning)
                    continue

                LOGGER.debug("found device file at %s", match)
                invocations.append(
                    dispatch(match, self.config.command_arg, self.config.tool_path)
                )

        return RunReport(grant=grant, invocations=tuple(invocations), warnings=tuple(warnings))

    def _log_config(self) -> None:
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        LOGGER.debug("read config:")
        for line in dump_config(self.config).splitlines():
            LOGGER.debug("\t%s", line)
