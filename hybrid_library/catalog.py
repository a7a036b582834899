"""Epic Games Store promotions catalog client.

The store publishes a single JSON document listing promoted titles together
with their prices and promotional offer windows. Each tool call fetches it
once; nothing is cached. Prices in the document are in minor currency units.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import requests

from hybrid_os.config import CatalogConfig

Logger = logging.Logger

DEFAULT_DISCOUNT_COUNT = 5


class CatalogFetchError(RuntimeError):
    """Raised when the catalog endpoint cannot be reached or returns an error status."""


class CatalogParseError(RuntimeError):
    """Raised when the catalog response body is not valid JSON."""


@dataclass(slots=True)
class DiscountRecord:
    """A discounted title, prices in minor currency units."""

    title: str
    original_price: int
    discounted_price: int
    discount_percent: int
    seller: str = "Unknown"


@dataclass(slots=True)
class FreeGameRecord:
    """A title that is free now (ends at `date`) or will be (starts at `date`)."""

    title: str
    date: str
    description: str = ""


class CatalogClient:
    """Fetches the promotions document with `requests`."""

    def __init__(
        self,
        config: CatalogConfig,
        session: Optional[requests.Session] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def config(self) -> CatalogConfig:
        return self._config

    def fetch_catalog(self) -> Dict[str, Any]:
        """GET the catalog and return the parsed document.

        Raises:
            CatalogFetchError: On connection errors, timeouts, or HTTP error status.
            CatalogParseError: If the body is not a JSON object.
        """
        self._logger.debug("Fetching catalog %s params=%s", self._config.url, self._config.params)
        try:
            response = self._session.get(
                self._config.url,
                params=self._config.params,
                timeout=self._config.request_timeout_s,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            self._logger.warning("Catalog request failed: %s", exc)
            raise CatalogFetchError(f"Catalog request failed: {exc}") from exc

        try:
            document = response.json()
        except ValueError as exc:
            self._logger.warning("Catalog response was not valid JSON: %s", exc)
            raise CatalogParseError(f"Catalog response was not valid JSON: {exc}") from exc

        if not isinstance(document, dict):
            raise CatalogParseError("Catalog response was not a JSON object")
        return document


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def catalog_elements(document: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return `data.Catalog.searchStore.elements`, or [] when any level is missing."""
    store = _mapping(_mapping(_mapping(document.get("data")).get("Catalog")).get("searchStore"))
    elements = store.get("elements")
    if not isinstance(elements, list):
        return []
    return [element for element in elements if isinstance(element, dict)]


def _offer_groups(element: Dict[str, Any], key: str) -> List[Any]:
    groups = _mapping(element.get("promotions")).get(key)
    return groups if isinstance(groups, list) else []


def _first_offer(groups: List[Any]) -> Dict[str, Any]:
    offers = _mapping(groups[0]).get("promotionalOffers") if groups else None
    if isinstance(offers, list) and offers:
        return _mapping(offers[0])
    return {}


def _total_price(element: Dict[str, Any]) -> Dict[str, Any]:
    return _mapping(_mapping(element.get("price")).get("totalPrice"))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_offer_date(value: Any) -> str:
    """Render an ISO-8601 offer timestamp as YYYY-MM-DD."""
    if not value:
        return "Unknown"
    text = str(value)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return text
    return parsed.date().isoformat()


def format_price(minor_units: int, symbol: str) -> str:
    value = minor_units / 100
    if value == int(value):
        return f"{symbol}{int(value):,}"
    return f"{symbol}{value:,.2f}"


def extract_discounts(document: Dict[str, Any], count: int = DEFAULT_DISCOUNT_COUNT) -> List[DiscountRecord]:
    """Collect discounted titles with an active offer, in catalog order, up to `count`."""
    records: List[DiscountRecord] = []
    for element in catalog_elements(document):
        if not _offer_groups(element, "promotionalOffers"):
            continue

        price = _total_price(element)
        original = price.get("originalPrice")
        discounted = price.get("discountPrice")
        if not isinstance(original, (int, float)) or not isinstance(discounted, (int, float)):
            continue
        if original <= 0 or not discounted < original:
            continue

        records.append(
            DiscountRecord(
                title=str(element.get("title") or "Unknown"),
                original_price=int(original),
                discounted_price=int(discounted),
                discount_percent=round_half_up((1 - discounted / original) * 100),
                seller=str(_mapping(element.get("seller")).get("name") or "Unknown"),
            )
        )
        if len(records) >= count:
            break
    return records


def extract_free_games(document: Dict[str, Any]) -> Tuple[List[FreeGameRecord], List[FreeGameRecord]]:
    """Split the catalog into (currently free, upcoming free), both in catalog order.

    A title that is free right now is never also listed as upcoming.
    """
    current: List[FreeGameRecord] = []
    upcoming: List[FreeGameRecord] = []

    for element in catalog_elements(document):
        title = str(element.get("title") or "Unknown")
        active = _offer_groups(element, "promotionalOffers")

        if active and _total_price(element).get("discountPrice") == 0:
            current.append(
                FreeGameRecord(
                    title=title,
                    date=format_offer_date(_first_offer(active).get("endDate")),
                    description=str(element.get("description") or ""),
                )
            )
            continue

        scheduled = _offer_groups(element, "upcomingPromotionalOffers")
        if scheduled:
            upcoming.append(
                FreeGameRecord(
                    title=title,
                    date=format_offer_date(_first_offer(scheduled).get("startDate")),
                )
            )

    return current, upcoming


__all__ = [
    "CatalogClient",
    "CatalogFetchError",
    "CatalogParseError",
    "DEFAULT_DISCOUNT_COUNT",
    "DiscountRecord",
    "FreeGameRecord",
    "catalog_elements",
    "extract_discounts",
    "extract_free_games",
    "format_offer_date",
    "format_price",
    "round_half_up",
]
