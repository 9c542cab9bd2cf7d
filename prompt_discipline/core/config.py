"""Project configuration from .preflight/ with environment fallback."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

logger = logging.getLogger(__name__)

Strictness = Literal["relaxed", "standard", "strict"]
STRICTNESS_LEVELS: tuple[str, ...] = ("relaxed", "standard", "strict")
PROFILES: tuple[str, ...] = ("minimal", "standard", "full")


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _strictness(value: Any, default: Strictness = "standard") -> Strictness:
    if isinstance(value, str) and value.strip().lower() in STRICTNESS_LEVELS:
        return value.strip().lower()  # type: ignore[return-value]
    return default


@dataclass
class TriageConfig:
    """Keyword rules and strictness used by the prompt triage classifier."""

    always_check: list[str] = field(default_factory=list)
    skip: list[str] = field(default_factory=list)
    cross_service_keywords: list[str] = field(default_factory=list)
    strictness: Strictness = "standard"
    related_projects: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Any) -> "TriageConfig":
        """Build a config from loosely structured data; missing fields use defaults.

        Accepts both flat keys and the ``rules:`` nesting used by triage.yml.
        """
        if not isinstance(data, dict):
            return cls()
        rules = data.get("rules") if isinstance(data.get("rules"), dict) else data
        related = data.get("related_projects")
        return cls(
            always_check=_string_list(rules.get("always_check")),
            skip=_string_list(rules.get("skip")),
            cross_service_keywords=_string_list(rules.get("cross_service_keywords")),
            strictness=_strictness(data.get("strictness")),
            related_projects=_related_aliases(related),
        )


@dataclass
class RelatedProject:
    path: str
    alias: str


@dataclass
class Thresholds:
    session_stale_minutes: int = 30
    max_tool_calls_before_checkpoint: int = 100
    correction_pattern_threshold: int = 3


DEFAULT_ALWAYS_CHECK = ["rewards", "permissions", "migration", "schema"]
DEFAULT_SKIP = ["commit", "format", "lint"]
DEFAULT_CROSS_SERVICE = ["auth", "notification", "event", "webhook"]


@dataclass
class PreflightConfig:
    """Project-level configuration."""

    profile: str = "standard"
    related_projects: list[RelatedProject] = field(default_factory=list)
    thresholds: Thresholds = field(default_factory=Thresholds)
    triage: TriageConfig = field(
        default_factory=lambda: TriageConfig(
            always_check=list(DEFAULT_ALWAYS_CHECK),
            skip=list(DEFAULT_SKIP),
            cross_service_keywords=list(DEFAULT_CROSS_SERVICE),
        )
    )

    def triage_config(self) -> TriageConfig:
        """Triage rules with related project aliases folded in."""
        aliases = {project.alias: project.path for project in self.related_projects}
        aliases.update(self.triage.related_projects)
        return TriageConfig(
            always_check=list(self.triage.always_check),
            skip=list(self.triage.skip),
            cross_service_keywords=list(self.triage.cross_service_keywords),
            strictness=self.triage.strictness,
            related_projects=aliases,
        )


def _related_aliases(value: Any) -> dict[str, str]:
    if isinstance(value, dict):
        return {str(alias): str(path) for alias, path in value.items()}
    return {project.alias: project.path for project in _related_projects(value)}


def _related_projects(value: Any) -> list[RelatedProject]:
    projects = []
    if not isinstance(value, list):
        return projects
    for item in value:
        if isinstance(item, dict) and item.get("path"):
            path = str(item["path"])
            alias = str(item.get("alias") or Path(path).name or path)
            projects.append(RelatedProject(path=path, alias=alias))
        elif isinstance(item, str) and item.strip():
            path = item.strip()
            projects.append(RelatedProject(path=path, alias=Path(path).name or path))
    return projects


def _load_yaml(path: Path) -> dict | None:
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Failed to parse %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def load_config(project_dir: Path, environ: dict[str, str] | None = None) -> PreflightConfig:
    """Load configuration for a project.

    ``.preflight/config.yml`` and ``.preflight/triage.yml`` are merged over the
    defaults. Environment variables are consulted only when the project has no
    ``.preflight/`` directory.
    """
    env = os.environ if environ is None else environ
    preflight_dir = project_dir / ".preflight"
    config = PreflightConfig()

    config_data = _load_yaml(preflight_dir / "config.yml")
    if config_data:
        if config_data.get("profile") in PROFILES:
            config.profile = config_data["profile"]
        if "related_projects" in config_data:
            config.related_projects = _related_projects(config_data["related_projects"])
        thresholds = config_data.get("thresholds")
        if isinstance(thresholds, dict):
            for name in ("session_stale_minutes", "max_tool_calls_before_checkpoint", "correction_pattern_threshold"):
                if isinstance(thresholds.get(name), int):
                    setattr(config.thresholds, name, thresholds[name])

    triage_data = _load_yaml(preflight_dir / "triage.yml")
    if triage_data:
        rules = triage_data.get("rules") if isinstance(triage_data.get("rules"), dict) else {}
        for name in ("always_check", "skip", "cross_service_keywords"):
            if name in rules:
                setattr(config.triage, name, _string_list(rules[name]))
        config.triage.strictness = _strictness(triage_data.get("strictness"), config.triage.strictness)

    if not preflight_dir.exists():
        profile = env.get("PROMPT_DISCIPLINE_PROFILE", "").lower()
        if profile in PROFILES:
            config.profile = profile
        related = env.get("PREFLIGHT_RELATED")
        if related:
            config.related_projects = _related_projects(
                [path.strip() for path in related.split(",") if path.strip()]
            )

    return config
