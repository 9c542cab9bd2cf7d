"""JSONL session log reader."""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Files above this size are streamed instead of read into memory.
LARGE_FILE_THRESHOLD = 10 * 1024 * 1024


@dataclass
class JSONLEntry:
    """A single object entry from a JSONL file."""

    data: dict
    line_number: int

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value from the entry data."""
        return self.data.get(key, default)

    @property
    def type(self) -> str | None:
        """Get the entry type if present."""
        return self.data.get("type")


class JSONLParser:
    """Parser for JSONL (JSON Lines) files.

    JSONL files contain one JSON object per line, which is the format
    used by Claude Code session logs. Lines that are not valid JSON are
    logged and skipped so one corrupt line never hides the rest of the file.
    """

    def __init__(self, path: Path, large_file_threshold: int = LARGE_FILE_THRESHOLD):
        self.path = path
        self.large_file_threshold = large_file_threshold

    def parse(self) -> list[JSONLEntry]:
        """Parse the entire file and return all entries."""
        return list(self.iter_entries())

    def iter_entries(self) -> Iterator[JSONLEntry]:
        """Iterate over object entries in file order."""
        if not self.path.is_file():
            return

        for line_num, line in enumerate(self._iter_lines(), start=1):
            line = line.strip()
            if not line:
                continue

            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping malformed line %d in %s", line_num, self.path)
                continue

            if isinstance(data, dict):
                yield JSONLEntry(data=data, line_number=line_num)

    def _iter_lines(self) -> Iterator[str]:
        if self.is_large:
            with open(self.path, encoding="utf-8", errors="replace") as handle:
                yield from handle
            return
        yield from self.path.read_text(encoding="utf-8", errors="replace").split("\n")

    @property
    def is_large(self) -> bool:
        """Whether the file is big enough to be streamed."""
        try:
            return self.path.stat().st_size > self.large_file_threshold
        except OSError:
            return False

    @property
    def entry_count(self) -> int:
        """Get the total number of valid JSON entries."""
        return sum(1 for _ in self.iter_entries())
