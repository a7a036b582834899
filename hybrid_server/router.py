"""Routes tool calls to their handlers.

The router is the single call site between the transport and the handlers.
An unknown tool name raises `UnknownToolError` before any handler runs; every
other outcome comes back from the handler as a `ToolResult`.
"""
from __future__ import annotations

import logging
import time
from types import MappingProxyType
from typing import Any, Mapping, Optional

from hybrid_library.catalog import CatalogClient
from hybrid_os.config import CatalogConfig, EpicConfig, SteamConfig
from hybrid_os.host import DesktopHost, WindowsHost
from hybrid_os.waiting import Clock, Sleep

from .handlers import Handler, ToolHandlers
from .results import Envelope, ToolResult
from .tools import TOOL_NAMES

Logger = logging.Logger


class UnknownToolError(LookupError):
    """Raised when a request names a tool that is not in the routing table."""


class ToolRouter:
    """Static tool-name to handler dispatch."""

    def __init__(self, handlers: Mapping[str, Handler], logger: Optional[Logger] = None) -> None:
        self._table: Mapping[str, Handler] = MappingProxyType(dict(handlers))
        self._logger = logger or logging.getLogger(__name__)

    @property
    def tool_names(self) -> frozenset[str]:
        return frozenset(self._table)

    def run(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Invoke the handler for `name` and return its tagged result."""
        handler = self._table.get(name)
        if handler is None:
            self._logger.warning("Rejected unknown tool %r", name)
            raise UnknownToolError(f"Unknown tool: {name}")

        self._logger.info("Calling tool %s", name)
        result = handler(dict(arguments or {}))
        self._logger.debug("Tool %s finished with %s", name, result.kind.value)
        return result

    def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Envelope:
        """Invoke the handler for `name` and return the response envelope."""
        return self.run(name, arguments).to_envelope()


def build_router(
    epic_config: EpicConfig,
    steam_config: SteamConfig,
    catalog_config: CatalogConfig,
    host: Optional[DesktopHost] = None,
    catalog: Optional[CatalogClient] = None,
    sleep: Sleep = time.sleep,
    clock: Clock = time.monotonic,
    logger: Optional[Logger] = None,
) -> ToolRouter:
    """Wire the handlers for every declared tool into a router."""

    handlers = ToolHandlers(
        epic_config,
        steam_config,
        catalog_config,
        host=host or WindowsHost(logger=logger),
        catalog=catalog,
        sleep=sleep,
        clock=clock,
        logger=logger,
    )
    table = handlers.table()
    if set(table) != TOOL_NAMES:
        raise RuntimeError(f"Handler table does not match declared tools: {sorted(set(table) ^ TOOL_NAMES)}")
    return ToolRouter(table, logger=logger)


__all__ = ["ToolRouter", "UnknownToolError", "build_router"]
