"""OS layer for the Epic & Steam hybrid tool server.

This package wraps the host primitives (process listing and launching,
PowerShell automation, window activation, key injection) behind small
controllers that the tool handlers compose, plus the static configuration that
locates each client's data on disk.

Implementations target Windows while remaining importable from other platforms
for tooling and tests.
"""

from .config import CatalogConfig, EpicConfig, SteamConfig, load_configs
from .host import DesktopHost, ExternalCommandError, WindowsHost
from .process import ProcessMonitor, StartOutcome
from .window import FocusOutcome, KeysOutcome, WindowController

__all__ = [
    "CatalogConfig",
    "DesktopHost",
    "EpicConfig",
    "ExternalCommandError",
    "FocusOutcome",
    "KeysOutcome",
    "ProcessMonitor",
    "StartOutcome",
    "SteamConfig",
    "WindowController",
    "WindowsHost",
    "load_configs",
]
