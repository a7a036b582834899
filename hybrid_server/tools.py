"""Tool descriptors exposed over MCP.

Descriptors are read-only: mappings are MappingProxyType views and lists are
tuples. Use `plain` to get a mutable JSON-shaped copy.
"""
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple


def _frozen(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _frozen(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_frozen(item) for item in value)
    return value


def plain(value: Any) -> Any:
    """Deep-copy a frozen descriptor back into dicts and lists."""
    if isinstance(value, Mapping):
        return {key: plain(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [plain(item) for item in value]
    return value


def _no_arguments() -> Dict[str, Any]:
    return {"type": "object", "properties": {}}


# Epic Games tools
TOOL_CHECK_EPIC_STATUS = _frozen({
    "name": "check_epic_status",
    "description": "Check if Epic Games Launcher is running",
    "inputSchema": _no_arguments(),
})

TOOL_START_EPIC_LAUNCHER = _frozen({
    "name": "start_epic_launcher",
    "description": "Start Epic Games Launcher",
    "inputSchema": _no_arguments(),
})

TOOL_FOCUS_EPIC_WINDOW = _frozen({
    "name": "focus_epic_window",
    "description": "Bring Epic Games Launcher to foreground",
    "inputSchema": _no_arguments(),
})

TOOL_SEND_KEYS_TO_EPIC = _frozen({
    "name": "send_keys_to_epic",
    "description": "Send keyboard shortcuts to Epic Games Launcher",
    "inputSchema": {
        "type": "object",
        "properties": {
            "keys": {
                "type": "string",
                "description": 'Keys to send in SendKeys notation (e.g., "^s" for Ctrl+S, "{ENTER}" for Enter)',
            },
        },
        "required": ["keys"],
    },
})

TOOL_GET_EPIC_WINDOW_INFO = _frozen({
    "name": "get_epic_window_info",
    "description": "Get Epic Games Launcher window information",
    "inputSchema": _no_arguments(),
})

TOOL_GET_EPIC_DISCOUNTS = _frozen({
    "name": "get_epic_discounts",
    "description": "Get current discounted games from Epic Games Store",
    "inputSchema": {
        "type": "object",
        "properties": {
            "count": {
                "type": "number",
                "description": "Number of games to get",
                "default": 5,
            },
        },
    },
})

TOOL_GET_FREE_GAMES = _frozen({
    "name": "get_free_games",
    "description": "Get current and upcoming free games",
    "inputSchema": _no_arguments(),
})

TOOL_GET_INSTALLED_GAMES = _frozen({
    "name": "get_installed_games",
    "description": "Get list of installed games from Epic Games Library",
    "inputSchema": _no_arguments(),
})

# Steam tools
TOOL_CHECK_STEAM_STATUS = _frozen({
    "name": "check_steam_status",
    "description": "Check if Steam is running",
    "inputSchema": _no_arguments(),
})

TOOL_START_STEAM = _frozen({
    "name": "start_steam",
    "description": "Start Steam",
    "inputSchema": _no_arguments(),
})

TOOL_FOCUS_STEAM_WINDOW = _frozen({
    "name": "focus_steam_window",
    "description": "Bring Steam to foreground",
    "inputSchema": _no_arguments(),
})

TOOL_GET_STEAM_INSTALLED_GAMES = _frozen({
    "name": "get_steam_installed_games",
    "description": "Get list of installed games from Steam Library",
    "inputSchema": _no_arguments(),
})

TOOL_LAUNCH_STEAM_GAME = _frozen({
    "name": "launch_steam_game",
    "description": "Launch a Steam game by name or App ID",
    "inputSchema": {
        "type": "object",
        "properties": {
            "gameName": {
                "type": "string",
                "description": "Name of the game to launch",
            },
            "appId": {
                "type": "string",
                "description": "Steam App ID of the game to launch",
            },
        },
    },
})

TOOL_OPEN_STEAM_LIBRARY = _frozen({
    "name": "open_steam_library",
    "description": "Open Steam library",
    "inputSchema": _no_arguments(),
})

# Tool collections
EPIC_TOOLS = (
    TOOL_CHECK_EPIC_STATUS,
    TOOL_START_EPIC_LAUNCHER,
    TOOL_FOCUS_EPIC_WINDOW,
    TOOL_SEND_KEYS_TO_EPIC,
    TOOL_GET_EPIC_WINDOW_INFO,
    TOOL_GET_EPIC_DISCOUNTS,
    TOOL_GET_FREE_GAMES,
    TOOL_GET_INSTALLED_GAMES,
)

STEAM_TOOLS = (
    TOOL_CHECK_STEAM_STATUS,
    TOOL_START_STEAM,
    TOOL_FOCUS_STEAM_WINDOW,
    TOOL_GET_STEAM_INSTALLED_GAMES,
    TOOL_LAUNCH_STEAM_GAME,
    TOOL_OPEN_STEAM_LIBRARY,
)

ALL_TOOLS: Tuple[Mapping[str, Any], ...] = EPIC_TOOLS + STEAM_TOOLS

TOOL_NAMES = frozenset(tool["name"] for tool in ALL_TOOLS)

TOOLS_BY_NAME: Mapping[str, Mapping[str, Any]] = MappingProxyType({tool["name"]: tool for tool in ALL_TOOLS})


def get_tool_by_name(name: str) -> Mapping[str, Any]:
    """Get tool descriptor by name.

    Raises:
        KeyError: If tool name is not recognized
    """
    try:
        return TOOLS_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown tool name: {name}") from None


__all__ = [
    "ALL_TOOLS",
    "EPIC_TOOLS",
    "STEAM_TOOLS",
    "TOOLS_BY_NAME",
    "TOOL_NAMES",
    "get_tool_by_name",
    "plain",
]
