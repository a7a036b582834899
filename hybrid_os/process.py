"""Running-process checks and launching for the Epic and Steam clients."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .host import DesktopHost
from .waiting import Clock, Sleep, wait_until

Logger = logging.Logger

LAUNCH_SETTLE_S = 3.0


@dataclass(slots=True)
class StartOutcome:
    """Result of launching a client application."""

    ready: bool
    polled: bool  # False when there was no executable to watch and the fixed delay was used


class ProcessMonitor:
    """Answers "is X running?" and starts client applications.

    Failures of the underlying host primitives surface as
    `ExternalCommandError`; callers turn them into response text.
    """

    def __init__(
        self,
        host: DesktopHost,
        sleep: Sleep = time.sleep,
        clock: Clock = time.monotonic,
        logger: Optional[Logger] = None,
    ) -> None:
        self._host = host
        self._sleep = sleep
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def is_running(self, executable_name: str) -> bool:
        wanted = executable_name.casefold()
        running = any(name.casefold() == wanted for name in self._host.list_processes(executable_name))
        self._logger.debug("%s running=%s", executable_name, running)
        return running

    def start(self, command: str, executable_name: Optional[str] = None) -> StartOutcome:
        """Launch `command` and wait until it has had a chance to initialise.

        With `executable_name` the process list is polled for up to
        LAUNCH_SETTLE_S seconds; without it the full delay is slept.
        """
        self._logger.info("Starting %s", command)
        self._host.spawn(command)

        if executable_name is None:
            self._sleep(LAUNCH_SETTLE_S)
            return StartOutcome(ready=True, polled=False)

        ready = wait_until(
            lambda: self.is_running(executable_name),
            LAUNCH_SETTLE_S,
            sleep=self._sleep,
            clock=self._clock,
        )
        if not ready:
            self._logger.warning("%s not observed running within %.1fs", executable_name, LAUNCH_SETTLE_S)
        return StartOutcome(ready=ready, polled=True)

    def open_uri(self, uri: str) -> None:
        """Hand a protocol URI (e.g. steam://) to the shell without waiting."""
        self._logger.info("Opening %s", uri)
        self._host.spawn(uri)


__all__ = ["LAUNCH_SETTLE_S", "ProcessMonitor", "StartOutcome"]
