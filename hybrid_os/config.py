"""Configuration structures shared by the OS and library modules.

Values originate from `config.yaml` (preferred) or environment variables and
are resolved once at startup. Epic Games Launcher directories are derived from
the Windows profile environment (PROGRAMDATA, LOCALAPPDATA, APPDATA) with a
hardcoded fallback when a variable is absent.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import Dict, List, Mapping, Optional, Tuple

import yaml

DEFAULT_STEAM_LIBRARY_PATHS: Tuple[str, ...] = (
    r"C:\Program Files (x86)\Steam\steamapps\common",
    r"D:\SteamLibrary\steamapps\common",
    r"E:\SteamLibrary\steamapps\common",
    r"F:\SteamLibrary\steamapps\common",
)

DEFAULT_CATALOG_URL = "https://store-site-backend-static.ak.epicgames.com/freeGamesPromotions"


@dataclass(slots=True)
class EpicConfig:
    """Epic Games Launcher locations and process identity."""

    launcher_path: str = r"C:\Program Files (x86)\Epic Games\Launcher\Portal\Binaries\Win32\EpicGamesLauncher.exe"
    executable_name: str = "EpicGamesLauncher.exe"
    process_name: str = "EpicGamesLauncher"  # Get-Process name, no extension
    manifest_dir: str = r"C:\ProgramData\Epic\EpicGamesLauncher\Data\Manifests"
    logs_dir: str = r"C:\Users\Default\AppData\Local\EpicGamesLauncher\Saved\Logs"
    data_dir: str = r"C:\Users\Default\AppData\Roaming\Epic\EpicGamesLauncher"
    manifest_extension: str = ".item"


@dataclass(slots=True)
class SteamConfig:
    """Steam client location and library roots."""

    client_path: str = r"C:\Program Files (x86)\Steam\steam.exe"
    executable_name: str = "steam.exe"
    process_name: str = "steam"
    library_paths: List[str] = field(default_factory=lambda: list(DEFAULT_STEAM_LIBRARY_PATHS))


@dataclass(slots=True)
class CatalogConfig:
    """Epic Games Store promotions endpoint."""

    url: str = DEFAULT_CATALOG_URL
    locale: str = "ko"
    country: str = "KR"
    currency_symbol: str = "₩"
    request_timeout_s: float = 30.0

    @property
    def params(self) -> Dict[str, str]:
        return {"locale": self.locale, "country": self.country, "allowCountries": self.country}


def epic_defaults_from_env(environ: Optional[Mapping[str, str]] = None) -> EpicConfig:
    """Build Epic directories from the Windows profile environment."""

    env = os.environ if environ is None else environ
    username = env.get("USERNAME") or "Default"
    program_data = env.get("PROGRAMDATA") or r"C:\ProgramData"
    local_app_data = env.get("LOCALAPPDATA") or rf"C:\Users\{username}\AppData\Local"
    app_data = env.get("APPDATA") or rf"C:\Users\{username}\AppData\Roaming"

    config = EpicConfig()
    config.manifest_dir = str(PureWindowsPath(program_data, "Epic", "EpicGamesLauncher", "Data", "Manifests"))
    config.logs_dir = str(PureWindowsPath(local_app_data, "EpicGamesLauncher", "Saved", "Logs"))
    config.data_dir = str(PureWindowsPath(app_data, "Epic", "EpicGamesLauncher"))
    return config


def load_configs(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[EpicConfig, SteamConfig, CatalogConfig]:
    """Load Epic, Steam, and catalog configuration from YAML, falling back to defaults."""

    cfg_path = Path(path) if path is not None else Path("config.yaml")
    epic_cfg = epic_defaults_from_env(environ)
    steam_cfg = SteamConfig()
    catalog_cfg = CatalogConfig()

    if not cfg_path.exists():
        return epic_cfg, steam_cfg, catalog_cfg

    with cfg_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    _apply_epic_config(epic_cfg, raw.get("epic", {}))
    _apply_steam_config(steam_cfg, raw.get("steam", {}))
    _apply_catalog_config(catalog_cfg, raw.get("catalog", {}))

    return epic_cfg, steam_cfg, catalog_cfg


def _apply_epic_config(config: EpicConfig, data: Dict) -> None:
    if not data:
        return

    for key in (
        "launcher_path",
        "executable_name",
        "process_name",
        "manifest_dir",
        "logs_dir",
        "data_dir",
        "manifest_extension",
    ):
        value = data.get(key)
        if value:
            setattr(config, key, str(value))


def _apply_steam_config(config: SteamConfig, data: Dict) -> None:
    if not data:
        return

    for key in ("client_path", "executable_name", "process_name"):
        value = data.get(key)
        if value:
            setattr(config, key, str(value))

    libraries = data.get("library_paths")
    if isinstance(libraries, (list, tuple)):
        config.library_paths = [str(entry) for entry in libraries if entry]


def _apply_catalog_config(config: CatalogConfig, data: Dict) -> None:
    if not data:
        return

    if "url" in data:
        config.url = str(data["url"])

    if "locale" in data:
        config.locale = str(data["locale"])

    if "country" in data:
        config.country = str(data["country"])

    if "currency_symbol" in data:
        config.currency_symbol = str(data["currency_symbol"])

    if "request_timeout_s" in data:
        config.request_timeout_s = float(data["request_timeout_s"])


__all__ = [
    "CatalogConfig",
    "DEFAULT_CATALOG_URL",
    "DEFAULT_STEAM_LIBRARY_PATHS",
    "EpicConfig",
    "SteamConfig",
    "epic_defaults_from_env",
    "load_configs",
]
