"""Timeline event model and session log content decoding."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from typing import Literal

EventType = Literal[
    "prompt",
    "assistant",
    "tool_call",
    "sub_agent_spawn",
    "correction",
    "compaction",
    "error",
    "commit",
]

EVENT_TYPES: tuple[str, ...] = (
    "prompt",
    "assistant",
    "tool_call",
    "sub_agent_spawn",
    "correction",
    "compaction",
    "error",
    "commit",
)

PREVIEW_LENGTH = 120


def preview(text: str, max_length: int = PREVIEW_LENGTH) -> str:
    """First line of ``text``, truncated with an ellipsis."""
    line = text.split("\n", 1)[0]
    return line[:max_length] + "…" if len(line) > max_length else line


@dataclass(frozen=True)
class TimelineEvent:
    """One normalized fact about what happened during a coding session."""

    id: str
    timestamp: str
    type: str
    project: str
    project_name: str
    branch: str
    session_id: str
    source_file: str
    source_line: int
    content: str
    content_preview: str
    metadata: str = "{}"

    @property
    def day(self) -> str:
        """UTC calendar day of the event (YYYY-MM-DD)."""
        return self.timestamp[:10]

    @property
    def metadata_dict(self) -> dict:
        try:
            data = json.loads(self.metadata or "{}")
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}


def make_event(
    *,
    timestamp: str,
    type: str,
    project: str,
    project_name: str,
    branch: str,
    session_id: str,
    source_file: str,
    source_line: int,
    content: str,
    metadata: dict | None = None,
    content_preview: str | None = None,
) -> TimelineEvent:
    """Create an event, assigning its id and preview once."""
    return TimelineEvent(
        id=uuid.uuid4().hex,
        timestamp=timestamp,
        type=type,
        project=project,
        project_name=project_name,
        branch=branch,
        session_id=session_id,
        source_file=source_file,
        source_line=source_line,
        content=content,
        content_preview=content_preview if content_preview is not None else preview(content),
        metadata=json.dumps(metadata or {}, separators=(",", ":")),
    )


@dataclass(frozen=True)
class ToolUse:
    """A tool invocation embedded in an assistant message."""

    name: str
    input: object = None

    @property
    def arguments(self) -> str:
        if isinstance(self.input, str):
            return self.input
        return json.dumps(self.input if self.input is not None else {}, separators=(",", ":"))


@dataclass(frozen=True)
class TextContent:
    """Message content given as a plain string."""

    value: str

    @property
    def text(self) -> str:
        return self.value

    @property
    def tool_uses(self) -> list[ToolUse]:
        return []


@dataclass(frozen=True)
class BlockContent:
    """Message content given as a list of typed blocks."""

    blocks: list[dict] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(
            block["text"]
            for block in self.blocks
            if block.get("type") == "text" and isinstance(block.get("text"), str)
        )

    @property
    def tool_uses(self) -> list[ToolUse]:
        return [
            ToolUse(name=str(block.get("name") or "unknown"), input=block.get("input"))
            for block in self.blocks
            if block.get("type") == "tool_use"
        ]


MessageContent = TextContent | BlockContent


def decode_content(raw: object) -> MessageContent:
    """Decode raw JSON message content into a typed variant."""
    if isinstance(raw, str):
        return TextContent(raw)
    if isinstance(raw, list):
        return BlockContent([block for block in raw if isinstance(block, dict)])
    return TextContent("")
