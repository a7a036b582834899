"""Host primitives used by the launcher automation tools.

Everything the handlers need from the operating system goes through the
`DesktopHost` protocol: listing processes, spawning a command, running a short
PowerShell script, and locating/activating/typing into a top-level window.
`WindowsHost` implements it with psutil, `cmd /c start`, PowerShell,
pygetwindow and user32. Tests substitute a fake.

Implementations target Windows while remaining importable from other platforms
for tooling and tests; on other platforms every primitive except the process
listing raises `ExternalCommandError`.
"""
from __future__ import annotations

import logging
import subprocess
import sys
from typing import List, Optional, Protocol, Sequence

import psutil

Logger = logging.Logger

_IS_WINDOWS = sys.platform.startswith("win32")

if _IS_WINDOWS:
    try:
        import pygetwindow as gw  # type: ignore
    except Exception as exc:  # pragma: no cover - import error surfaced once
        raise ImportError("pygetwindow is required on Windows hosts") from exc

    import ctypes
else:  # pragma: no cover - used only when running tooling on non-Windows hosts
    gw = None  # type: ignore
    ctypes = None  # type: ignore


class ExternalCommandError(RuntimeError):
    """Raised when a process, script, or window primitive fails."""


class DesktopHost(Protocol):
    """OS capabilities required by the process and window controllers."""

    def list_processes(self, image_name: str) -> List[str]:
        """Return the names of running processes whose image name equals `image_name`, ignoring case."""

    def spawn(self, target: str) -> None:
        """Start an executable path or URI without waiting for it to exit."""

    def run_script(self, script: str) -> str:
        """Run an automation script and return its captured stdout."""

    def find_window_of(self, process_name: str) -> Optional[int]:
        """Return the main window handle of the named process, if it has one."""

    def activate(self, handle: int) -> None:
        """Bring the window with the given handle to the foreground."""

    def send_keys(self, keys: str) -> None:
        """Type a SendKeys-notation sequence into the foreground window."""

    def foreground_window(self) -> Optional[int]:
        """Return the handle of the current foreground window."""


def ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + value.replace("'", "''") + "'"


def main_window_query(process_name: str) -> str:
    """PowerShell snippet printing the main window handle of a visible process."""
    name = ps_quote(process_name)
    return (
        f"$proc = Get-Process -Name {name} -ErrorAction SilentlyContinue | "
        f"Where-Object {{ $_.ProcessName -eq {name} -and $_.MainWindowHandle -ne 0 }} | "
        "Select-Object -First 1\n"
        "if ($proc) { $proc.MainWindowHandle.ToInt64() }"
    )


def send_keys_script(keys: str) -> str:
    return (
        "Add-Type -AssemblyName System.Windows.Forms\n"
        f"[System.Windows.Forms.SendKeys]::SendWait({ps_quote(keys)})"
    )


class WindowsHost:
    """`DesktopHost` backed by Windows command-line tools and user32."""

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

        if not _IS_WINDOWS:
            self._logger.warning("WindowsHost instantiated on non-Windows platform; OS tools will fail")

    def _require_windows(self) -> None:
        if not _IS_WINDOWS:
            raise ExternalCommandError("Launcher automation requires Windows")

    def _run(self, command: Sequence[str]) -> str:
        self._require_windows()
        self._logger.debug("Running %s", command[0])
        try:
            completed = subprocess.run(
                list(command),
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as exc:
            raise ExternalCommandError(f"{command[0]} is not available: {exc}") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip()
            raise ExternalCommandError(
                f"{command[0]} exited with status {exc.returncode}" + (f": {detail}" if detail else "")
            ) from exc
        except OSError as exc:
            raise ExternalCommandError(f"Failed to run {command[0]}: {exc}") from exc
        return completed.stdout or ""

    def list_processes(self, image_name: str) -> List[str]:
        wanted = image_name.casefold()
        matches: List[str] = []
        try:
            for proc in psutil.process_iter(["name"]):
                name = proc.info.get("name") or ""
                if name.casefold() == wanted:
                    matches.append(name)
        except psutil.Error as exc:
            raise ExternalCommandError(f"Failed to list processes: {exc}") from exc
        return matches

    def spawn(self, target: str) -> None:
        # `start` returns as soon as the target has been handed to the shell.
        self._run(["cmd", "/c", "start", "", target])

    def run_script(self, script: str) -> str:
        return self._run(["powershell", "-NoProfile", "-NonInteractive", "-Command", script])

    def find_window_of(self, process_name: str) -> Optional[int]:
        output = self.run_script(main_window_query(process_name)).strip()
        if not output:
            return None
        first_line = output.splitlines()[0].strip()
        try:
            handle = int(first_line)
        except ValueError as exc:
            raise ExternalCommandError(f"Unexpected window handle output: {first_line!r}") from exc
        return handle or None

    def activate(self, handle: int) -> None:
        self._require_windows()
        assert gw is not None  # noqa: S101 - guarded by _require_windows
        window = gw.Win32Window(handle)
        try:
            if window.isMinimized:
                self._logger.debug("Window %s is minimized; restoring", handle)
                window.restore()
            window.activate()
        except gw.PyGetWindowException as exc:  # pragma: no cover - dependent on GUI state
            raise ExternalCommandError(f"Failed to activate window {handle}: {exc}") from exc

    def send_keys(self, keys: str) -> None:
        self.run_script(send_keys_script(keys))

    def foreground_window(self) -> Optional[int]:
        self._require_windows()
        assert ctypes is not None  # noqa: S101 - guarded by _require_windows
        handle = ctypes.windll.user32.GetForegroundWindow()
        return int(handle) or None


__all__ = [
    "DesktopHost",
    "ExternalCommandError",
    "WindowsHost",
    "main_window_query",
    "ps_quote",
    "send_keys_script",
]
