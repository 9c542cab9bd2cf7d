"""Lifetime running-average baselines per project."""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from ..utils import to_iso
from .runtime import project_key, project_runtime_dir
from .scorecard import Scorecard, round_half_up

logger = logging.getLogger(__name__)

BASELINE_FILENAME = "baseline.json"


@dataclass
class BaselineData:
    """Incremental averages of every scorecard computed for a project."""

    category_averages: dict[str, int] = field(default_factory=dict)
    overall_average: int = 0
    session_count: int = 0
    last_updated: str = ""

    def to_dict(self) -> dict:
        return {
            "categoryAverages": dict(self.category_averages),
            "overallAverage": self.overall_average,
            "sessionCount": self.session_count,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BaselineData":
        averages = data.get("categoryAverages") or {}
        return cls(
            category_averages={str(name): int(value) for name, value in averages.items()},
            overall_average=int(data.get("overallAverage", 0)),
            session_count=int(data.get("sessionCount", 0)),
            last_updated=str(data.get("lastUpdated", "")),
        )


def incremental_mean(average: float, count: int, value: float) -> int:
    """``round((average * count + value) / (count + 1))``."""
    return round_half_up((average * count + value) / (count + 1))


def update_baseline(
    existing: BaselineData | None,
    scorecard: Scorecard,
    now: datetime | None = None,
) -> BaselineData:
    """Fold one more scorecard into a baseline without mutating the input."""
    updated_at = to_iso(now or datetime.now(timezone.utc))
    if existing is None or existing.session_count <= 0:
        return BaselineData(
            category_averages={c.name: c.score for c in scorecard.categories},
            overall_average=scorecard.overall,
            session_count=1,
            last_updated=updated_at,
        )

    n = existing.session_count
    averages = dict(existing.category_averages)
    for category in scorecard.categories:
        previous = averages.get(category.name, category.score)
        averages[category.name] = incremental_mean(previous, n, category.score)

    return BaselineData(
        category_averages=averages,
        overall_average=incremental_mean(existing.overall_average, n, scorecard.overall),
        session_count=n + 1,
        last_updated=updated_at,
    )


class BaselineStore:
    """Persist baselines as one JSON document per project.

    Writes go through a temp file and an atomic rename while holding an
    exclusive lock, so two concurrent runs cannot lose an update.
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir

    def path_for(self, project: str) -> Path:
        return project_runtime_dir(project_key(project), base_dir=self.base_dir) / BASELINE_FILENAME

    def load(self, project: str) -> BaselineData | None:
        """Load a baseline; a missing or corrupt file means no baseline yet."""
        path = self.path_for(project)
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text())
            if not isinstance(raw, dict):
                return None
            return BaselineData.from_dict(raw)
        except (json.JSONDecodeError, OSError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Ignoring unreadable baseline %s: %s", path, e)
            return None

    def save(self, project: str, data: BaselineData) -> None:
        path = self.path_for(project)
        with self._locked(path):
            self._write(path, data)

    def record(self, project: str, scorecard: Scorecard) -> BaselineData:
        """Read-modify-write the baseline for one new scorecard."""
        path = self.path_for(project)
        with self._locked(path):
            updated = update_baseline(self.load(project), scorecard)
            self._write(path, updated)
        return updated

    @contextmanager
    def _locked(self, path: Path):
        with open(path.with_suffix(".lock"), "a") as lock:
            fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock.fileno(), fcntl.LOCK_UN)

    @staticmethod
    def _write(path: Path, data: BaselineData) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".baseline-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as handle:
                handle.write(json.dumps(data.to_dict(), indent=2))
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
