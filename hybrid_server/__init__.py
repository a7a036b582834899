"""Tool routing and MCP serving for the Epic & Steam hybrid server."""
from __future__ import annotations

from typing import TYPE_CHECKING

from .results import OutcomeKind, ToolResult, text_envelope
from .router import ToolRouter, UnknownToolError, build_router

if TYPE_CHECKING:  # pragma: no cover - import typing aid only
    from .server import create_server, serve

__all__ = [
    "OutcomeKind",
    "ToolResult",
    "ToolRouter",
    "UnknownToolError",
    "build_router",
    "create_server",
    "serve",
    "text_envelope",
]


def __getattr__(name: str):
    # The MCP SDK is only needed when actually serving.
    if name == "create_server":
        from .server import create_server

        return create_server
    if name == "serve":
        from .server import serve

        return serve
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
