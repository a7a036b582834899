"""Tests for tool routing and the response envelope contract."""
from __future__ import annotations

import pytest
import requests

from conftest import FakeHost, FakeSession
from hybrid_server.results import OutcomeKind, ToolResult, text_envelope
from hybrid_server.router import ToolRouter, UnknownToolError
from hybrid_server.tools import ALL_TOOLS, TOOL_NAMES, TOOL_SEND_KEYS_TO_EPIC, get_tool_by_name, plain

SAMPLE_ARGUMENTS = {
    "send_keys_to_epic": {"keys": "^s"},
    "launch_steam_game": {"appId": "570"},
    "get_epic_discounts": {"count": 3},
}


def _assert_envelope(envelope) -> None:
    assert set(envelope) == {"content"}
    assert len(envelope["content"]) == 1
    block = envelope["content"][0]
    assert block["type"] == "text"
    assert isinstance(block["text"], str) and block["text"]


def test_router_covers_every_declared_tool(make_router) -> None:
    router = make_router(FakeHost())
    assert router.tool_names == TOOL_NAMES
    assert len(TOOL_NAMES) == len(ALL_TOOLS) == 14


def test_unknown_tool_raises_without_calling_any_handler() -> None:
    called = []
    router = ToolRouter({"known": lambda arguments: called.append(arguments) or ToolResult.success("ok")})

    with pytest.raises(UnknownToolError, match="Unknown tool: nope"):
        router.dispatch("nope", {"x": 1})
    assert called == []


def test_missing_arguments_default_to_empty_mapping() -> None:
    seen = []
    router = ToolRouter({"echo": lambda arguments: seen.append(arguments) or ToolResult.success("done")})

    assert router.dispatch("echo", None) == text_envelope("done")
    assert seen == [{}]


def test_handler_result_is_returned_unchanged() -> None:
    result = ToolResult.not_found("nothing here")
    router = ToolRouter({"find": lambda arguments: result})

    assert router.run("find") is result
    assert router.dispatch("find") == {"content": [{"type": "text", "text": "nothing here"}]}


@pytest.mark.parametrize("name", sorted(TOOL_NAMES))
def test_every_tool_returns_envelope_when_host_fails(make_router, name) -> None:
    host = FakeHost(fail={"list_processes", "spawn", "run_script", "find_window_of", "activate", "send_keys"})
    router = make_router(host, FakeSession(error=requests.ConnectionError("offline")))

    _assert_envelope(router.dispatch(name, SAMPLE_ARGUMENTS.get(name, {})))


@pytest.mark.parametrize("name", sorted(TOOL_NAMES))
def test_every_tool_returns_envelope_on_happy_path(make_router, name) -> None:
    host = FakeHost(running={"steam.exe", "EpicGamesLauncher.exe"}, windows={"steam": 1, "EpicGamesLauncher": 2})
    router = make_router(host)

    _assert_envelope(router.dispatch(name, SAMPLE_ARGUMENTS.get(name, {})))


def test_failures_are_tagged_but_still_enveloped(make_router) -> None:
    router = make_router(FakeHost(fail={"list_processes"}))

    result = router.run("check_epic_status")

    assert result.kind is OutcomeKind.COMMAND_FAILED
    assert not result.ok
    _assert_envelope(result.to_envelope())


def test_status_check_is_idempotent(make_router) -> None:
    router = make_router(FakeHost(running={"steam.exe"}))
    assert router.dispatch("check_steam_status") == router.dispatch("check_steam_status")


def test_tool_descriptors() -> None:
    assert get_tool_by_name("send_keys_to_epic")["inputSchema"]["required"] == ("keys",)
    with pytest.raises(KeyError):
        get_tool_by_name("format_disk")
    for tool in ALL_TOOLS:
        assert tool["inputSchema"]["type"] == "object"
        assert tool["description"]


def test_tool_descriptors_are_read_only() -> None:
    spec = get_tool_by_name("get_epic_discounts")

    with pytest.raises(TypeError):
        spec["name"] = "format_disk"  # type: ignore[index]
    with pytest.raises(TypeError):
        spec["inputSchema"]["properties"]["count"]["default"] = 0  # type: ignore[index]
    with pytest.raises(AttributeError):
        TOOL_SEND_KEYS_TO_EPIC["inputSchema"]["required"].append("extra")  # type: ignore[union-attr]

    assert get_tool_by_name("get_epic_discounts")["inputSchema"]["properties"]["count"]["default"] == 5


def test_plain_copy_is_mutable_and_detached() -> None:
    schema = plain(TOOL_SEND_KEYS_TO_EPIC["inputSchema"])
    schema["required"].append("extra")

    assert schema["required"] == ["keys", "extra"]
    assert TOOL_SEND_KEYS_TO_EPIC["inputSchema"]["required"] == ("keys",)
