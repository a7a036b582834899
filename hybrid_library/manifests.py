"""Epic Games Launcher manifest scanning.

The launcher writes one JSON `.item` file per installed title into its
Manifests directory. Only fully installed titles (`bIsIncompleteInstall` is
explicitly false) are reported; unreadable or malformed files are skipped so a
single bad manifest never hides its siblings.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

Logger = logging.Logger

BYTES_PER_GB = 1024 ** 3
UNKNOWN = "Unknown"


@dataclass(slots=True)
class InstalledItem:
    """One installed game as reported by a launcher."""

    display_name: str
    identifier: str
    install_path: str
    size: str  # "12.34GB" or "Unknown"
    version: str = UNKNOWN
    last_used: str = UNKNOWN
    library: Optional[str] = None  # originating library root, Steam only


def format_gb(size_bytes: float) -> str:
    return f"{size_bytes / BYTES_PER_GB:.2f}GB"


def _manifest_size(value: Any) -> str:
    # Zero and missing sizes are both reported as unknown.
    if not value:
        return UNKNOWN
    try:
        size_bytes = float(value)
    except (TypeError, ValueError, OverflowError):
        return UNKNOWN
    if not math.isfinite(size_bytes):
        return UNKNOWN
    return format_gb(size_bytes)


def item_from_manifest(manifest: Dict[str, Any]) -> Optional[InstalledItem]:
    """Map a parsed manifest onto an InstalledItem, or None if it is not a complete install."""
    if manifest.get("bIsIncompleteInstall") is not False:
        return None

    app_name = str(manifest.get("AppName") or UNKNOWN)
    return InstalledItem(
        display_name=str(manifest.get("DisplayName") or app_name),
        identifier=app_name,
        install_path=str(manifest.get("InstallLocation") or UNKNOWN),
        size=_manifest_size(manifest.get("InstallSize")),
        version=str(manifest.get("AppVersionString") or UNKNOWN),
        last_used=str(manifest.get("LastPlayed") or "Never"),
    )


def scan_epic_manifests(
    manifest_dir: str | Path,
    extension: str = ".item",
    logger: Optional[Logger] = None,
) -> List[InstalledItem]:
    """Return installed Epic titles found in `manifest_dir`, in filename order.

    A missing directory yields an empty list. Errors listing the directory
    itself propagate as OSError.
    """
    log = logger or logging.getLogger(__name__)
    directory = Path(manifest_dir)
    if not directory.is_dir():
        log.debug("Manifest directory %s does not exist", directory)
        return []

    suffix = extension.lower()
    items: List[InstalledItem] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name.lower()):
        if entry.suffix.lower() != suffix or not entry.is_file():
            continue
        try:
            manifest = json.loads(entry.read_text(encoding="utf-8-sig"))
        except (OSError, ValueError) as exc:
            log.debug("Skipping unreadable manifest %s: %s", entry.name, exc)
            continue
        if not isinstance(manifest, dict):
            log.debug("Skipping manifest %s: not a JSON object", entry.name)
            continue

        item = item_from_manifest(manifest)
        if item is not None:
            items.append(item)

    log.info("Found %d installed Epic titles in %s", len(items), directory)
    return items


__all__ = [
    "BYTES_PER_GB",
    "InstalledItem",
    "UNKNOWN",
    "format_gb",
    "item_from_manifest",
    "scan_epic_manifests",
]
