"""Shared fakes for the host, clock, and catalog HTTP layer."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import pytest
import requests

from hybrid_library.catalog import CatalogClient
from hybrid_os.config import CatalogConfig, EpicConfig, SteamConfig
from hybrid_os.host import ExternalCommandError
from hybrid_server.handlers import ToolHandlers
from hybrid_server.router import build_router


class FakeHost:
    """In-memory DesktopHost recording every primitive call in order."""

    def __init__(
        self,
        running: Iterable[str] = (),
        windows: Optional[Dict[str, int]] = None,
        launches: Optional[Dict[str, str]] = None,
        script_output: str = "",
        fail: Iterable[str] = (),
        activation_takes_effect: bool = True,
    ) -> None:
        self.running = set(running)
        self.windows = dict(windows or {})
        self.launches = dict(launches or {})
        self.script_output = script_output
        self.fail = set(fail)
        self.activation_takes_effect = activation_takes_effect
        self.foreground: Optional[int] = None
        self.calls: List[tuple] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.fail:
            raise ExternalCommandError(f"{name} failed")

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def list_processes(self, image_name: str) -> List[str]:
        self._record("list_processes", image_name)
        return sorted(name for name in self.running if name.casefold() == image_name.casefold())

    def spawn(self, target: str) -> None:
        self._record("spawn", target)
        if target in self.launches:
            self.running.add(self.launches[target])

    def run_script(self, script: str) -> str:
        self._record("run_script", script)
        return self.script_output

    def find_window_of(self, process_name: str) -> Optional[int]:
        self._record("find_window_of", process_name)
        return self.windows.get(process_name)

    def activate(self, handle: int) -> None:
        self._record("activate", handle)
        if self.activation_takes_effect:
            self.foreground = handle

    def send_keys(self, keys: str) -> None:
        self._record("send_keys", keys)

    def foreground_window(self) -> Optional[int]:
        self._record("foreground_window")
        return self.foreground


class FakeClock:
    """Monotonic clock advanced only by `sleep`."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, invalid_json: bool = False) -> None:
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; returns one canned response or raises."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def get(self, url: str, params: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> FakeResponse:
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def catalog_element(
    title: str,
    original: int,
    discount: int,
    active: bool = True,
    upcoming: bool = False,
    seller: Optional[str] = None,
    description: str = "",
    end_date: str = "2024-01-11T16:00:00.000Z",
    start_date: str = "2024-01-11T16:00:00.000Z",
) -> Dict[str, Any]:
    element: Dict[str, Any] = {
        "title": title,
        "description": description,
        "price": {"totalPrice": {"originalPrice": original, "discountPrice": discount}},
        "promotions": {
            "promotionalOffers": (
                [{"promotionalOffers": [{"startDate": "2024-01-04T16:00:00.000Z", "endDate": end_date}]}]
                if active
                else []
            ),
            "upcomingPromotionalOffers": (
                [{"promotionalOffers": [{"startDate": start_date, "endDate": "2024-01-18T16:00:00.000Z"}]}]
                if upcoming
                else []
            ),
        },
    }
    if seller is not None:
        element["seller"] = {"name": seller}
    return element


def catalog_document(*elements: Dict[str, Any]) -> Dict[str, Any]:
    return {"data": {"Catalog": {"searchStore": {"elements": list(elements)}}}}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def configs(tmp_path):
    epic = EpicConfig()
    epic.manifest_dir = str(tmp_path / "Manifests")
    epic.logs_dir = str(tmp_path / "Logs")
    epic.data_dir = str(tmp_path / "Data")
    steam = SteamConfig(library_paths=[str(tmp_path / "steam_a"), str(tmp_path / "steam_b")])
    return epic, steam, CatalogConfig()


@pytest.fixture
def make_handlers(configs, clock):
    def factory(host: FakeHost, session: Optional[FakeSession] = None) -> ToolHandlers:
        epic, steam, catalog_cfg = configs
        client = CatalogClient(catalog_cfg, session=session or FakeSession(FakeResponse(catalog_document())))
        return ToolHandlers(epic, steam, catalog_cfg, host=host, catalog=client, sleep=clock.sleep, clock=clock)

    return factory


@pytest.fixture
def make_router(configs, clock):
    def factory(host: FakeHost, session: Optional[FakeSession] = None):
        epic, steam, catalog_cfg = configs
        client = CatalogClient(catalog_cfg, session=session or FakeSession(FakeResponse(catalog_document())))
        return build_router(epic, steam, catalog_cfg, host=host, catalog=client, sleep=clock.sleep, clock=clock)

    return factory
