"""MCP stdio binding for the tool router."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import mcp.server.stdio
from mcp.server import Server
from mcp.types import TextContent, Tool

from .router import ToolRouter
from .tools import ALL_TOOLS, plain

Logger = logging.Logger

SERVER_NAME = "epic-steam-hybrid-mcp"


def create_server(router: ToolRouter, logger: Optional[Logger] = None) -> Server:
    log = logger or logging.getLogger(__name__)
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [
            Tool(name=spec["name"], description=spec["description"], inputSchema=plain(spec["inputSchema"]))
            for spec in ALL_TOOLS
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        # Handlers block on subprocesses, sleeps, and HTTP; keep them off the event loop.
        envelope = await asyncio.to_thread(router.dispatch, name, arguments)
        log.debug("Tool %s returned %d content block(s)", name, len(envelope["content"]))
        return [TextContent(type="text", text=block["text"]) for block in envelope["content"]]

    return server


async def serve(router: ToolRouter, logger: Optional[Logger] = None) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    server = create_server(router, logger=logger)
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


__all__ = ["SERVER_NAME", "create_server", "serve"]
