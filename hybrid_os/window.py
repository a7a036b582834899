"""Window activation and key injection for the launcher clients.

`send_keys` always focuses first and then waits (bounded by FOCUS_SETTLE_S)
for the window to become the foreground window before typing. Keys are sent
even when no window was found; the outcome reports `focused=False` so the
caller can say so.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .host import DesktopHost, ps_quote
from .waiting import Clock, Sleep, wait_until

Logger = logging.Logger

FOCUS_SETTLE_S = 0.5


@dataclass(slots=True)
class FocusOutcome:
    """Whether a main window was found and activated."""

    found: bool
    handle: Optional[int] = None


@dataclass(slots=True)
class KeysOutcome:
    """Result of a focus-then-type sequence."""

    focused: bool
    settled: bool  # foreground window observed to be the focused handle


def window_info_script(process_name: str) -> str:
    name = ps_quote(process_name)
    return (
        f"Get-Process -Name {name} -ErrorAction SilentlyContinue | "
        f"Where-Object {{ $_.ProcessName -eq {name} }} | "
        'Select-Object ProcessName, MainWindowTitle, @{Name="Memory(MB)";'
        "Expression={[Math]::Round($_.WorkingSet64/1MB,2)}} | "
        "Format-Table -AutoSize | Out-String -Width 200"
    )


class WindowController:
    """Focus, type into, and describe a client's main window."""

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

    def focus(self, process_name: str) -> FocusOutcome:
        handle = self._host.find_window_of(process_name)
        if handle is None:
            self._logger.info("No visible main window for %s; skipping activation", process_name)
            return FocusOutcome(found=False)

        self._host.activate(handle)
        self._logger.info("Activated %s window (handle=%s)", process_name, handle)
        return FocusOutcome(found=True, handle=handle)

    def send_keys(self, process_name: str, keys: str) -> KeysOutcome:
        outcome = self.focus(process_name)

        if outcome.found:
            settled = wait_until(
                lambda: self._host.foreground_window() == outcome.handle,
                FOCUS_SETTLE_S,
                sleep=self._sleep,
                clock=self._clock,
            )
            if not settled:
                self._logger.warning("%s window did not reach the foreground; typing anyway", process_name)
        else:
            self._sleep(FOCUS_SETTLE_S)
            settled = False

        self._logger.info("Sending keys %r to %s", keys, process_name)
        self._host.send_keys(keys)
        return KeysOutcome(focused=outcome.found, settled=settled)

    def window_info(self, process_name: str) -> str:
        """Return a table of process name, window title, and memory use, or ''."""
        return self._host.run_script(window_info_script(process_name)).strip()


__all__ = [
    "FOCUS_SETTLE_S",
    "FocusOutcome",
    "KeysOutcome",
    "WindowController",
    "window_info_script",
]
