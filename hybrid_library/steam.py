"""Steam library discovery by directory enumeration."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .manifests import UNKNOWN, InstalledItem, format_gb

Logger = logging.Logger


def directory_size(path: str | Path) -> int:
    """Sum the sizes of all files below `path`.

    Entries that cannot be read are skipped. An unreadable `path` itself
    raises OSError.
    """
    total = 0
    pending = [os.fspath(path)]
    root = True
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(entry.path)
                        elif entry.is_file(follow_symlinks=False):
                            total += entry.stat(follow_symlinks=False).st_size
                    except OSError:
                        continue
        except OSError:
            if root:
                raise
        root = False
    return total


def _game_size(path: Path, logger: Logger) -> str:
    try:
        return format_gb(directory_size(path))
    except OSError as exc:
        logger.debug("Could not size %s: %s", path, exc)
        return UNKNOWN


def scan_steam_libraries(
    library_paths: Iterable[str],
    logger: Optional[Logger] = None,
) -> Dict[str, List[InstalledItem]]:
    """Return installed games grouped by library root, in configured root order.

    Roots that do not exist are skipped; roots without game folders are
    omitted from the result.
    """
    log = logger or logging.getLogger(__name__)
    grouped: Dict[str, List[InstalledItem]] = {}

    for library in library_paths:
        root = Path(library)
        if not root.is_dir():
            log.debug("Steam library %s does not exist", root)
            continue

        games: List[InstalledItem] = []
        for folder in sorted(root.iterdir(), key=lambda p: p.name.lower()):
            if not folder.is_dir():
                continue
            games.append(
                InstalledItem(
                    display_name=folder.name,
                    identifier=folder.name,
                    install_path=str(folder),
                    size=_game_size(folder, log),
                    library=library,
                )
            )

        log.info("Found %d Steam games in %s", len(games), root)
        if games:
            grouped[library] = games

    return grouped


__all__ = ["directory_size", "scan_steam_libraries"]
