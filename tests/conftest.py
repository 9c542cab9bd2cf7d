"""Pytest configuration and shared fixtures."""

import json
import shutil
import tempfile
from pathlib import Path

import pytest

from prompt_discipline.core.events import make_event
from prompt_discipline.core.sessions import classify_events


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


def write_jsonl(path: Path, records: list) -> Path:
    """Write records as JSONL; strings are written verbatim as raw lines."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [record if isinstance(record, str) else json.dumps(record) for record in records]
    path.write_text("\n".join(lines) + "\n")
    return path


def user(text, ts="2026-02-12T10:00:00Z"):
    return {"type": "user", "timestamp": ts, "message": {"role": "user", "content": text}}


def assistant(text="", ts="2026-02-12T10:00:05Z", tools=()):
    blocks = [{"type": "text", "text": text}] if text else []
    blocks.extend({"type": "tool_use", "name": name, "input": args} for name, args in tools)
    return {"type": "assistant", "timestamp": ts, "message": {"role": "assistant", "content": blocks}}


def event(event_type, content="", ts="2026-02-12T10:00:00.000Z", session_id="s1", project_name="demo"):
    return make_event(
        timestamp=ts,
        type=event_type,
        project=f"/work/{project_name}",
        project_name=project_name,
        branch="main",
        session_id=session_id,
        source_file="test.jsonl",
        source_line=1,
        content=content,
    )


def session_of(*events, session_id="s1"):
    return classify_events(list(events), session_id=session_id)


@pytest.fixture
def sample_records():
    """A short, well-formed session."""
    return [
        {"type": "summary", "gitBranch": "feature/login", "sessionId": "sess-42"},
        user("Add validation to src/auth/login.ts for empty passwords", ts="2026-02-12T10:00:00Z"),
        assistant(
            "I'll read the file first.",
            ts="2026-02-12T10:00:05Z",
            tools=[("Read", {"file_path": "src/auth/login.ts"})],
        ),
        user("no, use the zod schema instead", ts="2026-02-12T10:01:00Z"),
        assistant("Switching to zod.", ts="2026-02-12T10:01:10Z", tools=[("Bash", {"command": "npm test"})]),
        {"type": "system", "subtype": "compaction", "timestamp": "2026-02-12T10:30:00Z", "content": ""},
    ]


@pytest.fixture
def mock_claude_dir(temp_dir, sample_records):
    """A Claude config directory with two projects of session logs."""
    claude_dir = temp_dir / ".claude"
    projects = claude_dir / "projects"
    write_jsonl(projects / "-work-demo" / "sess-42.jsonl", sample_records)
    write_jsonl(
        projects / "-work-other" / "other-1.jsonl",
        [
            user("Refactor api/routes/users.py to use the service layer", ts="2026-02-13T09:00:00Z"),
            assistant("Done.", ts="2026-02-13T09:05:00Z"),
        ],
    )
    write_jsonl(
        projects / "-work-demo" / "sess-42" / "subagents" / "agent-a.jsonl",
        [user("Summarize src/auth/ for the parent task", ts="2026-02-12T10:02:00Z")],
    )
    return claude_dir
