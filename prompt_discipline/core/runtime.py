"""Shared runtime identity and storage helpers."""

from __future__ import annotations

import hashlib
import os
import tempfile
import uuid
from pathlib import Path


def _is_writable_dir(path: Path) -> bool:
    """Return whether path exists and accepts create/write/delete operations."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        probe = path / f".pd-write-probe-{uuid.uuid4().hex}"
        probe.write_text("ok")
        probe.unlink(missing_ok=True)
        return True
    except OSError:
        return False


def resolve_runtime_home() -> Path:
    """Resolve the runtime home with a writable fallback for restricted envs."""
    configured = os.environ.get("PREFLIGHT_HOME")
    if configured:
        path = Path(configured).expanduser()
        if _is_writable_dir(path):
            return path

    preferred = Path.home() / ".preflight"
    if _is_writable_dir(preferred):
        return preferred

    fallback = Path(tempfile.gettempdir()) / "preflight-runtime"
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


def resolve_claude_dir() -> Path:
    """Return the Claude config directory holding session logs."""
    configured = os.environ.get("CLAUDE_CONFIG_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".claude"


def project_key(project: str) -> str:
    """Return a stable storage key for a project identifier."""
    return hashlib.md5(project.encode("utf-8")).hexdigest()[:12]


def project_runtime_dir(key: str, base_dir: Path | None = None) -> Path:
    """Return (and create) the runtime directory for a project key."""
    root = base_dir or resolve_runtime_home() / "projects"
    target = root / key
    target.mkdir(parents=True, exist_ok=True)
    return target
