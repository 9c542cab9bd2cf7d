"""Session discovery, loading and grouping."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

from ..utils import parse_iso
from .events import TimelineEvent
from .runtime import resolve_claude_dir
from .session_parser import parse_session

logger = logging.getLogger(__name__)

PERIOD_DAYS = {"day": 1, "week": 7, "month": 30}

_RELATIVE_SINCE = re.compile(r"^(\d+)\s*days?$", re.IGNORECASE)


@dataclass
class ParsedSession:
    """Events of one session, partitioned by type."""

    session_id: str
    events: list[TimelineEvent] = field(default_factory=list)
    user_messages: list[TimelineEvent] = field(default_factory=list)
    assistant_messages: list[TimelineEvent] = field(default_factory=list)
    tool_calls: list[TimelineEvent] = field(default_factory=list)
    corrections: list[TimelineEvent] = field(default_factory=list)
    compactions: list[TimelineEvent] = field(default_factory=list)
    commits: list[TimelineEvent] = field(default_factory=list)
    sub_agent_spawns: list[TimelineEvent] = field(default_factory=list)
    errors: list[TimelineEvent] = field(default_factory=list)
    duration_minutes: float = 0.0

    @property
    def day(self) -> str | None:
        return self.events[0].day if self.events else None

    @property
    def project_name(self) -> str | None:
        return self.events[0].project_name if self.events else None


def classify_events(events: list[TimelineEvent], session_id: str | None = None) -> ParsedSession:
    """Build a ParsedSession from the events of one session."""
    by_type: dict[str, list[TimelineEvent]] = {}
    for event in events:
        by_type.setdefault(event.type, []).append(event)

    duration = 0.0
    if len(events) >= 2:
        first = parse_iso(events[0].timestamp)
        last = parse_iso(events[-1].timestamp)
        if first and last:
            duration = (last - first).total_seconds() / 60

    return ParsedSession(
        session_id=session_id or (events[0].session_id if events else "unknown"),
        events=list(events),
        user_messages=by_type.get("prompt", []),
        assistant_messages=by_type.get("assistant", []),
        tool_calls=by_type.get("tool_call", []),
        corrections=by_type.get("correction", []),
        compactions=by_type.get("compaction", []),
        commits=by_type.get("commit", []),
        sub_agent_spawns=by_type.get("sub_agent_spawn", []),
        errors=by_type.get("error", []),
        duration_minutes=duration,
    )


def group_sessions(events: Iterable[TimelineEvent]) -> list[ParsedSession]:
    """Group a flat event list by session id, each ordered by timestamp."""
    grouped: dict[str, list[TimelineEvent]] = {}
    for event in events:
        grouped.setdefault(event.session_id, []).append(event)
    return [
        classify_events(sorted(items, key=lambda e: e.timestamp), session_id=session_id)
        for session_id, items in grouped.items()
    ]


def attach_commits(sessions: list[ParsedSession], commits: list[TimelineEvent]) -> list[ParsedSession]:
    """Place commit events into the session whose time window contains them."""
    if not commits:
        return sessions

    extra: dict[int, list[TimelineEvent]] = {}
    for commit in commits:
        for index, session in enumerate(sessions):
            if not session.events:
                continue
            if session.events[0].timestamp <= commit.timestamp <= session.events[-1].timestamp:
                extra.setdefault(index, []).append(commit)
                break

    attached = []
    for index, session in enumerate(sessions):
        if index not in extra:
            attached.append(session)
            continue
        merged = sorted(session.events + extra[index], key=lambda e: e.timestamp)
        attached.append(classify_events(merged, session_id=session.session_id))
    return attached


@dataclass(frozen=True)
class SessionDir:
    """A Claude project directory holding session logs."""

    project: str
    project_name: str
    session_dir: Path


@dataclass(frozen=True)
class SessionFile:
    """A session log file and its last-modified time."""

    session_id: str
    path: Path
    mtime: datetime


def decode_project_dir(name: str) -> tuple[str, str]:
    """Decode a Claude project directory name into (project path, display name)."""
    decoded = re.sub(r"^-", "/", name).replace("-", "/")
    parts = [part for part in decoded.split("/") if part]
    return decoded, parts[-1] if parts else name


def find_session_dirs(claude_dir: Path | None = None) -> list[SessionDir]:
    projects_dir = (claude_dir or resolve_claude_dir()) / "projects"
    if not projects_dir.is_dir():
        return []

    dirs = []
    for entry in sorted(projects_dir.iterdir()):
        if not entry.is_dir():
            continue
        project, project_name = decode_project_dir(entry.name)
        dirs.append(SessionDir(project=project, project_name=project_name, session_dir=entry))
    return dirs


def _session_file(path: Path) -> SessionFile:
    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    return SessionFile(session_id=path.stem, path=path, mtime=mtime)


def find_session_files(project_dir: Path) -> list[SessionFile]:
    """List JSONL session files in a project directory, including sub-agent logs."""
    if not project_dir.is_dir():
        return []

    files: list[SessionFile] = []
    for entry in sorted(project_dir.iterdir()):
        if entry.is_file() and entry.suffix == ".jsonl":
            files.append(_session_file(entry))
        elif entry.is_dir():
            subagents = entry / "subagents"
            if subagents.is_dir():
                files.extend(_session_file(sub) for sub in sorted(subagents.glob("*.jsonl")))
    return files


def resolve_since(since: str | None, period: str, now: datetime | None = None) -> datetime | None:
    """Resolve the lower mtime bound from an explicit ``since`` or the period window."""
    now = now or datetime.now(timezone.utc)
    if since:
        relative = _RELATIVE_SINCE.match(since.strip())
        if relative:
            return now - timedelta(days=int(relative.group(1)))
        parsed = parse_iso(since)
        if parsed is None:
            logger.warning("Ignoring unparseable since value: %s", since)
        return parsed
    days = PERIOD_DAYS.get(period)
    return now - timedelta(days=days) if days else None


def load_sessions(
    claude_dir: Path | None = None,
    project: str | None = None,
    session_id: str | None = None,
    since: str | None = None,
    period: str = "day",
    now: datetime | None = None,
) -> list[ParsedSession]:
    """Load parsed sessions matching the given filters.

    No matching sessions is not an error: the result is simply empty.
    """
    dirs = find_session_dirs(claude_dir)
    if project:
        needle = project.lower()
        dirs = [d for d in dirs if needle in d.project_name.lower() or needle in d.project.lower()]

    since_dt = resolve_since(since, period, now=now)
    sessions: list[ParsedSession] = []

    for session_dir in dirs:
        for session_file in find_session_files(session_dir.session_dir):
            if session_id and session_file.session_id != session_id:
                continue
            if since_dt and session_file.mtime < since_dt:
                continue
            try:
                events = parse_session(session_file.path, session_dir.project, session_dir.project_name)
            except OSError as e:
                logger.warning("Failed to parse session %s: %s", session_file.path, e)
                continue
            if events:
                sessions.append(classify_events(sorted(events, key=lambda e: e.timestamp)))

    return sessions
