"""Parse Claude Code session JSONL files into timeline events."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path

from ..utils import JSONLParser, normalize_timestamp, to_iso
from .classifier import is_compaction, is_correction, is_error_result, tool_event_type
from .events import TimelineEvent, decode_content, make_event

logger = logging.getLogger(__name__)

CONVERSATIONAL_TYPES = frozenset({"user", "assistant"})


@dataclass(frozen=True)
class ParseState:
    """Session-scoped state carried from one log line to the next."""

    session_id: str
    branch: str = ""
    last_type: str = ""


@dataclass(frozen=True)
class SourceContext:
    """Per-file provenance shared by every event parsed from one file."""

    source_file: str
    project: str
    project_name: str
    fallback_timestamp: str


def _message_content(record: dict) -> object:
    message = record.get("message")
    if isinstance(message, dict) and "content" in message:
        return message.get("content")
    return record.get("content")


def process_record(
    record: dict,
    line_number: int,
    state: ParseState,
    source: SourceContext,
) -> tuple[list[TimelineEvent], ParseState]:
    """Derive the events for one log record and the state for the next one."""
    record_type = record.get("type")

    if record_type == "summary":
        branch = record.get("gitBranch")
        session_id = record.get("sessionId")
        return [], replace(
            state,
            branch=branch if isinstance(branch, str) else "",
            session_id=session_id if isinstance(session_id, str) and session_id else state.session_id,
        )

    timestamp = normalize_timestamp(record.get("timestamp"), source.fallback_timestamp)

    def emit(event_type: str, content: str, metadata: dict | None = None) -> TimelineEvent:
        return make_event(
            timestamp=timestamp,
            type=event_type,
            project=source.project,
            project_name=source.project_name,
            branch=state.branch,
            session_id=state.session_id,
            source_file=source.source_file,
            source_line=line_number,
            content=content,
            metadata=metadata,
        )

    events: list[TimelineEvent] = []

    if record_type == "user":
        text = decode_content(_message_content(record)).text
        if text:
            event_type = "correction" if is_correction(text, state.last_type) else "prompt"
            events.append(emit(event_type, text))

    elif record_type == "assistant":
        content = decode_content(_message_content(record))
        text = content.text
        if text:
            message = record.get("message")
            model = record.get("model") or (message.get("model") if isinstance(message, dict) else None)
            events.append(emit("assistant", text, {"model": model or ""}))
        for tool in content.tool_uses:
            events.append(
                emit(
                    tool_event_type(tool.name),
                    f"{tool.name}: {tool.arguments[:100]}",
                    {"tool": tool.name},
                )
            )

    elif record_type == "tool_result":
        raw = record.get("content")
        if is_error_result(raw, record.get("is_error")):
            text = decode_content(raw).text or json.dumps(raw if raw is not None else "")[:200]
            events.append(emit("error", text, {"tool_use_id": record.get("tool_use_id") or ""}))

    elif record_type == "system":
        raw = _message_content(record)
        text = decode_content(raw if raw is not None else "").text
        if is_compaction(text, record.get("subtype")):
            events.append(emit("compaction", text or "context compacted"))

    if record_type in CONVERSATIONAL_TYPES:
        state = replace(state, last_type=record_type)
    return events, state


class SessionLogParser:
    """Turn one session log file into an ordered list of timeline events."""

    def __init__(self, path: Path, project: str, project_name: str):
        self.path = Path(path)
        self.project = project
        self.project_name = project_name

    def parse(self) -> list[TimelineEvent]:
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            return []

        source = SourceContext(
            source_file=str(self.path),
            project=self.project,
            project_name=self.project_name,
            fallback_timestamp=to_iso(datetime.fromtimestamp(mtime, tz=timezone.utc)),
        )
        state = ParseState(session_id=self.path.stem)
        events: list[TimelineEvent] = []

        for entry in JSONLParser(self.path).iter_entries():
            produced, state = process_record(entry.data, entry.line_number, state, source)
            events.extend(produced)
        return events


def parse_session(path: Path, project: str, project_name: str) -> list[TimelineEvent]:
    """Parse a single JSONL session file. Missing files yield no events."""
    return SessionLogParser(path, project, project_name).parse()
