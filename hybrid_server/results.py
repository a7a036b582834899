"""Tagged tool outcomes and the flat response envelope.

Handlers return a `ToolResult` so callers and tests can branch on what
actually happened; the transport only ever sees the envelope produced by
`to_envelope()`, which carries exactly one text block.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping


class OutcomeKind(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_ARGUMENTS = "invalid_arguments"
    COMMAND_FAILED = "command_failed"
    FILESYSTEM_FAILED = "filesystem_failed"
    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"
    TIMEOUT = "timeout"


Envelope = Dict[str, List[Dict[str, str]]]


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of one tool invocation."""

    kind: OutcomeKind
    text: str
    details: Mapping[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @classmethod
    def success(cls, text: str, **details: Any) -> "ToolResult":
        return cls(OutcomeKind.OK, text, details)

    @classmethod
    def not_found(cls, text: str, **details: Any) -> "ToolResult":
        return cls(OutcomeKind.NOT_FOUND, text, details)

    @classmethod
    def failure(cls, kind: OutcomeKind, text: str, **details: Any) -> "ToolResult":
        return cls(kind, text, details)

    def to_envelope(self) -> Envelope:
        return text_envelope(self.text)


def text_envelope(text: str) -> Envelope:
    return {"content": [{"type": "text", "text": text}]}


__all__ = ["Envelope", "OutcomeKind", "ToolResult", "text_envelope"]
