"""Tests for the promotions catalog client and its extraction rules."""
from __future__ import annotations

import pytest
import requests

from conftest import FakeResponse, FakeSession, catalog_document, catalog_element
from hybrid_library.catalog import (
    CatalogClient,
    CatalogFetchError,
    CatalogParseError,
    catalog_elements,
    extract_discounts,
    extract_free_games,
    format_offer_date,
    format_price,
)
from hybrid_os.config import DEFAULT_CATALOG_URL, CatalogConfig


def test_discount_percent_is_computed_from_prices() -> None:
    document = catalog_document(catalog_element("Control", 1000, 750, seller="Remedy"))
    [record] = extract_discounts(document)

    assert record.discount_percent == 25
    assert record.original_price == 1000
    assert record.discounted_price == 750
    assert record.seller == "Remedy"


def test_discount_percent_rounds_half_up() -> None:
    [record] = extract_discounts(catalog_document(catalog_element("Half", 800, 700)))
    assert record.discount_percent == 13


def test_discounts_stop_at_count_in_catalog_order() -> None:
    document = catalog_document(
        catalog_element("First", 2000, 1000),
        catalog_element("Not active", 2000, 1000, active=False),
        catalog_element("Full price", 2000, 2000),
        catalog_element("Second", 5000, 4900),
        catalog_element("Third", 3000, 100),
    )

    records = extract_discounts(document, count=2)

    assert [record.title for record in records] == ["First", "Second"]
    assert records[1].seller == "Unknown"


def test_discounts_default_count_is_five() -> None:
    document = catalog_document(*(catalog_element(f"Game {i}", 1000, 500) for i in range(8)))
    assert len(extract_discounts(document)) == 5


def test_current_free_game_is_never_upcoming() -> None:
    document = catalog_document(
        catalog_element("Free Now", 2999, 0, upcoming=True, description="A" * 80),
        catalog_element("Next Week", 1999, 1999, active=False, upcoming=True, start_date="2024-01-18T16:00:00.000Z"),
        catalog_element("Discounted", 1999, 999),
    )

    current, upcoming = extract_free_games(document)

    assert [record.title for record in current] == ["Free Now"]
    assert current[0].date == "2024-01-11"
    assert current[0].description == "A" * 80
    assert [record.title for record in upcoming] == ["Next Week"]
    assert upcoming[0].date == "2024-01-18"


def test_free_games_tolerate_missing_offer_details() -> None:
    element = catalog_element("Odd", 0, 0)
    element["promotions"]["promotionalOffers"] = [{"promotionalOffers": []}]
    current, upcoming = extract_free_games(catalog_document(element))
    assert current[0].date == "Unknown"
    assert upcoming == []


@pytest.mark.parametrize("document", [{}, {"data": None}, {"data": {"Catalog": {"searchStore": {}}}}])
def test_missing_structure_yields_nothing(document) -> None:
    assert catalog_elements(document) == []
    assert extract_discounts(document) == []
    assert extract_free_games(document) == ([], [])


def test_formatting_helpers() -> None:
    assert format_price(1234500, "₩") == "₩12,345"
    assert format_price(1999, "$") == "$19.99"
    assert format_offer_date("2024-01-04T16:00:00.000Z") == "2024-01-04"
    assert format_offer_date(None) == "Unknown"
    assert format_offer_date("soon") == "soon"


def test_fetch_catalog_sends_fixed_locale_parameters() -> None:
    session = FakeSession(FakeResponse(catalog_document()))
    client = CatalogClient(CatalogConfig(), session=session)

    assert client.fetch_catalog() == catalog_document()
    [request] = session.requests
    assert request["url"] == DEFAULT_CATALOG_URL
    assert request["params"] == {"locale": "ko", "country": "KR", "allowCountries": "KR"}


def test_fetch_catalog_network_error_becomes_fetch_error() -> None:
    client = CatalogClient(CatalogConfig(), session=FakeSession(error=requests.ConnectionError("offline")))
    with pytest.raises(CatalogFetchError, match="offline"):
        client.fetch_catalog()


def test_fetch_catalog_http_error_becomes_fetch_error() -> None:
    client = CatalogClient(CatalogConfig(), session=FakeSession(FakeResponse({}, status_code=503)))
    with pytest.raises(CatalogFetchError):
        client.fetch_catalog()


def test_fetch_catalog_invalid_json_becomes_parse_error() -> None:
    client = CatalogClient(CatalogConfig(), session=FakeSession(FakeResponse(invalid_json=True)))
    with pytest.raises(CatalogParseError):
        client.fetch_catalog()


def test_fetch_catalog_rejects_non_object_documents() -> None:
    client = CatalogClient(CatalogConfig(), session=FakeSession(FakeResponse([1, 2])))
    with pytest.raises(CatalogParseError):
        client.fetch_catalog()
