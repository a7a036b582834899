"""Tool handlers for the Epic Games Launcher, Steam, and the Epic store catalog.

Every public handler takes the tool's argument mapping and returns a
`ToolResult`. Handlers are the terminal boundary for their own failures:
host, filesystem, and catalog errors are logged and turned into response text
here, never raised to the router.
"""
from __future__ import annotations

import logging
import math
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import quote

from hybrid_library.catalog import (
    DEFAULT_DISCOUNT_COUNT,
    CatalogClient,
    CatalogFetchError,
    CatalogParseError,
    extract_discounts,
    extract_free_games,
    format_price,
)
from hybrid_library.manifests import scan_epic_manifests
from hybrid_library.steam import scan_steam_libraries
from hybrid_os.config import CatalogConfig, EpicConfig, SteamConfig
from hybrid_os.host import DesktopHost, ExternalCommandError
from hybrid_os.process import LAUNCH_SETTLE_S, ProcessMonitor
from hybrid_os.waiting import Clock, Sleep
from hybrid_os.window import WindowController

from .results import OutcomeKind, ToolResult

Logger = logging.Logger

Arguments = Mapping[str, Any]
Handler = Callable[[Arguments], ToolResult]

EPIC_LABEL = "Epic Games Launcher"
STEAM_LABEL = "Steam"

DESCRIPTION_PREVIEW_CHARS = 50

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def parse_count(raw: Any) -> Optional[int]:
    """Read the discount `count` argument.

    Missing, empty, and zero values mean the default; negative, non-numeric,
    and non-finite values are rejected with None.
    """
    if raw is None or raw == "":
        return DEFAULT_DISCOUNT_COUNT
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return int(value) or DEFAULT_DISCOUNT_COUNT


class ToolHandlers:
    """Binds tool names to handlers that drive the OS controllers and catalog client."""

    def __init__(
        self,
        epic_config: EpicConfig,
        steam_config: SteamConfig,
        catalog_config: CatalogConfig,
        host: DesktopHost,
        catalog: Optional[CatalogClient] = None,
        sleep: Sleep = time.sleep,
        clock: Clock = time.monotonic,
        logger: Optional[Logger] = None,
    ) -> None:
        self._epic = epic_config
        self._steam = steam_config
        self._logger = logger or logging.getLogger(__name__)
        self._processes = ProcessMonitor(host, sleep=sleep, clock=clock, logger=self._logger)
        self._windows = WindowController(host, sleep=sleep, clock=clock, logger=self._logger)
        self._catalog = catalog or CatalogClient(catalog_config, logger=self._logger)

    def table(self) -> Dict[str, Handler]:
        return {
            "check_epic_status": self.check_epic_status,
            "start_epic_launcher": self.start_epic_launcher,
            "focus_epic_window": self.focus_epic_window,
            "send_keys_to_epic": self.send_keys_to_epic,
            "get_epic_window_info": self.get_epic_window_info,
            "get_epic_discounts": self.get_epic_discounts,
            "get_free_games": self.get_free_games,
            "get_installed_games": self.get_installed_games,
            "check_steam_status": self.check_steam_status,
            "start_steam": self.start_steam,
            "focus_steam_window": self.focus_steam_window,
            "get_steam_installed_games": self.get_steam_installed_games,
            "launch_steam_game": self.launch_steam_game,
            "open_steam_library": self.open_steam_library,
        }

    # ------------------------------------------------------------------
    # Epic Games Launcher

    def check_epic_status(self, arguments: Arguments) -> ToolResult:
        return self._check_status(EPIC_LABEL, self._epic.executable_name)

    def start_epic_launcher(self, arguments: Arguments) -> ToolResult:
        return self._start(EPIC_LABEL, self._epic.launcher_path, self._epic.executable_name)

    def focus_epic_window(self, arguments: Arguments) -> ToolResult:
        return self._focus(EPIC_LABEL, self._epic.process_name)

    def send_keys_to_epic(self, arguments: Arguments) -> ToolResult:
        keys = arguments.get("keys")
        if not isinstance(keys, str) or not keys:
            return ToolResult.failure(
                OutcomeKind.INVALID_ARGUMENTS,
                'Provide the keys to send, e.g. "^s" for Ctrl+S.',
            )

        try:
            outcome = self._windows.send_keys(self._epic.process_name, keys)
        except ExternalCommandError as exc:
            self._logger.error("Sending keys to %s failed: %s", EPIC_LABEL, exc)
            return ToolResult.failure(OutcomeKind.COMMAND_FAILED, f"Error while sending keys: {exc}")

        if outcome.focused:
            return ToolResult.success(f"Sent keys to {EPIC_LABEL}: {keys}", focused=True, settled=outcome.settled)
        return ToolResult.success(
            f"Sent keys: {keys}\n"
            f"No visible {EPIC_LABEL} window was found, so the keys went to the current foreground window.",
            focused=False,
            settled=False,
        )

    def get_epic_window_info(self, arguments: Arguments) -> ToolResult:
        try:
            info = self._windows.window_info(self._epic.process_name)
        except ExternalCommandError as exc:
            self._logger.error("Window info query for %s failed: %s", EPIC_LABEL, exc)
            return ToolResult.failure(OutcomeKind.COMMAND_FAILED, f"Error while reading window information: {exc}")

        if not info:
            return ToolResult.not_found(f"{EPIC_LABEL} is not running; no window information available.")
        return ToolResult.success(f"{EPIC_LABEL} window information:\n\n{info}")

    def get_epic_discounts(self, arguments: Arguments) -> ToolResult:
        raw_count = arguments.get("count")
        count = parse_count(raw_count)
        if count is None:
            return ToolResult.failure(OutcomeKind.INVALID_ARGUMENTS, f"count must be a non-negative number, got {raw_count!r}.")

        document = self._fetch_catalog("discount information")
        if isinstance(document, ToolResult):
            return document

        symbol = self._catalog.config.currency_symbol
        records = extract_discounts(document, count)
        if not records:
            return ToolResult.not_found(
                "No games are on sale right now. Check the store in Epic Games Launcher directly."
            )

        entries = [
            f"{index}. {record.title}\n"
            f"   {record.discount_percent}% off\n"
            f"   {format_price(record.original_price, symbol)} -> {format_price(record.discounted_price, symbol)}\n"
            f"   Seller: {record.seller}"
            for index, record in enumerate(records, start=1)
        ]
        return ToolResult.success(
            f"Epic Games Store discounts ({len(records)}):\n\n" + "\n\n".join(entries),
            count=len(records),
        )

    def get_free_games(self, arguments: Arguments) -> ToolResult:
        document = self._fetch_catalog("free game information")
        if isinstance(document, ToolResult):
            return document

        current, upcoming = extract_free_games(document)
        if not current and not upcoming:
            return ToolResult.not_found("No current or upcoming free games are listed on the Epic Games Store.")

        current_lines = [
            f"{index}. {record.title}\n"
            f"   Ends: {record.date}\n"
            f"   {record.description[:DESCRIPTION_PREVIEW_CHARS]}..."
            for index, record in enumerate(current, start=1)
        ]
        upcoming_lines = [
            f"{index}. {record.title}\n   Starts: {record.date}"
            for index, record in enumerate(upcoming, start=1)
        ]
        text = (
            "Epic Games free games:\n\n"
            f"Free now ({len(current)}):\n" + "\n".join(current_lines) + "\n\n"
            f"Upcoming free games ({len(upcoming)}):\n" + "\n".join(upcoming_lines)
        )
        return ToolResult.success(text, current=len(current), upcoming=len(upcoming))

    def get_installed_games(self, arguments: Arguments) -> ToolResult:
        try:
            games = scan_epic_manifests(
                self._epic.manifest_dir,
                extension=self._epic.manifest_extension,
                logger=self._logger,
            )
        except OSError as exc:
            self._logger.error("Reading Epic manifests failed: %s", exc)
            return ToolResult.failure(
                OutcomeKind.FILESYSTEM_FAILED,
                f"Could not read the Epic Games library: {exc}\n\nCheck the library in Epic Games Launcher directly.",
            )

        if not games:
            locations = "\n".join(
                f"- {label}: {path} ({'found' if Path(path).is_dir() else 'missing'})"
                for label, path in (
                    ("Manifests", self._epic.manifest_dir),
                    ("Logs", self._epic.logs_dir),
                    ("Launcher data", self._epic.data_dir),
                )
            )
            return ToolResult.not_found(
                "Epic Games library:\n\n"
                "No installed games were found.\n\n"
                "Possible causes:\n"
                "- Epic Games Launcher is not installed\n"
                "- No games are installed\n"
                "- Insufficient permissions\n\n"
                f"Checked locations:\n{locations}\n\n"
                "Check the Library tab in Epic Games Launcher directly."
            )

        entries = [
            f"{index}. {game.display_name}\n"
            f"   App name: {game.identifier}\n"
            f"   Version: {game.version}\n"
            f"   Size: {game.size}\n"
            f"   Location: {game.install_path}\n"
            f"   Last played: {game.last_used}"
            for index, game in enumerate(games, start=1)
        ]
        return ToolResult.success(
            f"Epic Games library ({len(games)} games):\n\n" + "\n\n".join(entries),
            count=len(games),
        )

    # ------------------------------------------------------------------
    # Steam

    def check_steam_status(self, arguments: Arguments) -> ToolResult:
        return self._check_status(STEAM_LABEL, self._steam.executable_name)

    def start_steam(self, arguments: Arguments) -> ToolResult:
        return self._start(STEAM_LABEL, self._steam.client_path, self._steam.executable_name)

    def focus_steam_window(self, arguments: Arguments) -> ToolResult:
        return self._focus(STEAM_LABEL, self._steam.process_name)

    def get_steam_installed_games(self, arguments: Arguments) -> ToolResult:
        try:
            grouped = scan_steam_libraries(self._steam.library_paths, logger=self._logger)
        except OSError as exc:
            self._logger.error("Reading Steam libraries failed: %s", exc)
            return ToolResult.failure(OutcomeKind.FILESYSTEM_FAILED, f"Could not read the Steam library: {exc}")

        total = sum(len(games) for games in grouped.values())
        if total == 0:
            checked = "\n".join(f"- {path}" for path in self._steam.library_paths) or "- (none configured)"
            return ToolResult.not_found(
                "Steam library:\n\n"
                "No installed games were found.\n\n"
                f"Library paths checked:\n{checked}"
            )

        sections: List[str] = []
        for library, games in grouped.items():
            lines = [f"{library} ({len(games)}):"]
            lines.extend(f"   {index}. {game.display_name} ({game.size})" for index, game in enumerate(games, start=1))
            sections.append("\n".join(lines))
        return ToolResult.success(
            f"Steam library ({total} games):\n\n" + "\n\n".join(sections),
            count=total,
            libraries=list(grouped),
        )

    def launch_steam_game(self, arguments: Arguments) -> ToolResult:
        app_id = arguments.get("appId")
        game_name = arguments.get("gameName")

        if app_id:
            if not (str(app_id).isascii() and str(app_id).isdigit()):
                return ToolResult.failure(OutcomeKind.INVALID_ARGUMENTS, f"appId must be numeric, got {app_id!r}.")
            uri = f"steam://rungameid/{app_id}"
            message = f"Launched Steam game (App ID: {app_id})."
        elif game_name:
            uri = f"steam://nav/games/details/{quote(str(game_name), safe=_URI_COMPONENT_SAFE)}"
            message = f'Opened the Steam page for "{game_name}".'
        else:
            return ToolResult.failure(OutcomeKind.INVALID_ARGUMENTS, "Provide a game name (gameName) or App ID (appId).")

        try:
            self._processes.open_uri(uri)
        except ExternalCommandError as exc:
            self._logger.error("Launching %s failed: %s", uri, exc)
            return ToolResult.failure(OutcomeKind.COMMAND_FAILED, f"Error while launching the Steam game: {exc}")
        return ToolResult.success(message, uri=uri)

    def open_steam_library(self, arguments: Arguments) -> ToolResult:
        try:
            self._processes.open_uri("steam://open/games")
        except ExternalCommandError as exc:
            self._logger.error("Opening the Steam library failed: %s", exc)
            return ToolResult.failure(OutcomeKind.COMMAND_FAILED, f"Error while opening the Steam library: {exc}")
        return ToolResult.success("Opened the Steam library.")

    # ------------------------------------------------------------------
    # Shared steps

    def _check_status(self, label: str, executable_name: str) -> ToolResult:
        try:
            running = self._processes.is_running(executable_name)
        except ExternalCommandError as exc:
            self._logger.error("%s status check failed: %s", label, exc)
            return ToolResult.failure(OutcomeKind.COMMAND_FAILED, f"Error while checking {label} status: {exc}")

        if running:
            return ToolResult.success(f"{label} is running.", running=True)
        return ToolResult.success(f"{label} is not running.", running=False)

    def _start(self, label: str, command: str, executable_name: str) -> ToolResult:
        try:
            outcome = self._processes.start(command, executable_name)
        except ExternalCommandError as exc:
            self._logger.error("Starting %s failed: %s", label, exc)
            return ToolResult.failure(OutcomeKind.COMMAND_FAILED, f"Error while starting {label}: {exc}")

        if not outcome.ready:
            return ToolResult.failure(
                OutcomeKind.TIMEOUT,
                f"Started {label}, but {executable_name} was not seen running within {LAUNCH_SETTLE_S:g} seconds.",
            )
        return ToolResult.success(f"Started {label}.")

    def _focus(self, label: str, process_name: str) -> ToolResult:
        try:
            outcome = self._windows.focus(process_name)
        except ExternalCommandError as exc:
            self._logger.error("Focusing %s failed: %s", label, exc)
            return ToolResult.failure(OutcomeKind.COMMAND_FAILED, f"Error while activating the {label} window: {exc}")

        if not outcome.found:
            return ToolResult.not_found(f"No visible {label} window was found; nothing was brought to the foreground.")
        return ToolResult.success(f"Brought the {label} window to the foreground.", handle=outcome.handle)

    def _fetch_catalog(self, what: str) -> Dict[str, Any] | ToolResult:
        try:
            return self._catalog.fetch_catalog()
        except CatalogFetchError as exc:
            return ToolResult.failure(OutcomeKind.FETCH_FAILED, f"Could not fetch {what}: {exc}")
        except CatalogParseError as exc:
            return ToolResult.failure(OutcomeKind.PARSE_FAILED, f"Could not read {what}: {exc}")


__all__ = ["Arguments", "Handler", "ToolHandlers"]
