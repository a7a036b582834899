"""Installed-game discovery and Epic Games Store catalog access."""

from .catalog import (
    CatalogClient,
    CatalogFetchError,
    CatalogParseError,
    DiscountRecord,
    FreeGameRecord,
    extract_discounts,
    extract_free_games,
)
from .manifests import InstalledItem, scan_epic_manifests
from .steam import directory_size, scan_steam_libraries

__all__ = [
    "CatalogClient",
    "CatalogFetchError",
    "CatalogParseError",
    "DiscountRecord",
    "FreeGameRecord",
    "InstalledItem",
    "directory_size",
    "extract_discounts",
    "extract_free_games",
    "scan_epic_manifests",
    "scan_steam_libraries",
]
