"""Git commit history as timeline events."""

import logging
import re
import subprocess
from datetime import datetime
from pathlib import Path

from ..utils import parse_iso, to_iso
from .events import TimelineEvent, make_event, preview

logger = logging.getLogger(__name__)

RECORD_SEP = "\x1e"
FIELD_SEP = "\x1f"
HEADER_END = "\x1d"

LOG_FORMAT = "%x1e%H%x1f%aI%x1f%an%x1f%s%x1f%b%x1f%x1d"

_STAT_SUMMARY = re.compile(
    r"(\d+) files? changed(?:,\s*(\d+) insertions?\(\+\))?(?:,\s*(\d+) deletions?\(-\))?"
)


def is_git_repo(path: Path) -> bool:
    return (path / ".git").exists()


def parse_git_log(raw: str, project: str, project_name: str) -> list[TimelineEvent]:
    """Parse ``git log --stat`` output produced with LOG_FORMAT."""
    events: list[TimelineEvent] = []

    for block in raw.split(RECORD_SEP):
        if HEADER_END not in block:
            continue
        header, _, stat = block.partition(HEADER_END)
        fields = header.split(FIELD_SEP)
        if len(fields) < 5:
            continue

        sha, date_str, author, subject, body = (part.strip() for part in fields[:5])
        if not sha:
            continue
        committed_at = parse_iso(date_str)
        if committed_at is None:
            logger.warning("Skipping commit %s with unparseable date %r", sha, date_str)
            continue

        stat = stat.strip()
        message = f"{subject}\n\n{body}" if body else subject
        content = f"{message}\n\n{stat}" if stat else message

        summary = _STAT_SUMMARY.search(stat)
        events.append(
            make_event(
                timestamp=to_iso(committed_at),
                type="commit",
                project=project,
                project_name=project_name,
                branch="all",
                session_id="",
                source_file=f"git:{sha}",
                source_line=0,
                content=content,
                content_preview=preview(subject),
                metadata={
                    "hash": sha,
                    "author": author,
                    "files_changed": int(summary.group(1)) if summary else 0,
                    "insertions": int(summary.group(2)) if summary and summary.group(2) else 0,
                    "deletions": int(summary.group(3)) if summary and summary.group(3) else 0,
                },
            )
        )

    return events


class GitHistoryExtractor:
    """Read commit history of a project through the git CLI."""

    def __init__(self, project_dir: Path, timeout: int = 30):
        self.project_dir = Path(project_dir).resolve()
        self.timeout = timeout

    def _run_git(self, *args: str) -> tuple[str, int]:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.project_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
            return result.stdout, result.returncode
        except subprocess.TimeoutExpired:
            logger.warning("git %s timed out in %s", args[0], self.project_dir)
            return "", 1
        except FileNotFoundError:
            return "", 1

    def extract(
        self,
        since: datetime | None = None,
        branch: str | None = None,
        max_count: int = 10000,
    ) -> list[TimelineEvent]:
        if not is_git_repo(self.project_dir):
            return []

        args = ["log", branch or "--all", f"--max-count={max_count}"]
        if since:
            args.append(f"--since={to_iso(since)}")
        args.extend([f"--format={LOG_FORMAT}", "--stat"])

        output, code = self._run_git(*args)
        if code != 0 and not output:
            return []
        return parse_git_log(output, str(self.project_dir), self.project_dir.name)
