"""Tests for project configuration loading."""

import logging

from prompt_discipline.core.config import (
    DEFAULT_ALWAYS_CHECK,
    PreflightConfig,
    TriageConfig,
    load_config,
)


class TestTriageConfig:
    def test_from_mapping_tolerates_missing_fields(self):
        config = TriageConfig.from_mapping({})

        assert config.always_check == []
        assert config.skip == []
        assert config.cross_service_keywords == []
        assert config.strictness == "standard"

    def test_from_mapping_accepts_rules_nesting(self):
        config = TriageConfig.from_mapping(
            {"rules": {"skip": ["format"], "always_check": ["billing"]}, "strictness": "STRICT"}
        )

        assert config.skip == ["format"]
        assert config.always_check == ["billing"]
        assert config.strictness == "strict"

    def test_from_mapping_rejects_garbage(self):
        assert TriageConfig.from_mapping(["not", "a", "dict"]) == TriageConfig()
        assert TriageConfig.from_mapping({"strictness": "extreme"}).strictness == "standard"


class TestLoadConfig:
    def test_defaults_without_preflight_dir(self, temp_dir):
        config = load_config(temp_dir, environ={})

        assert config.profile == "standard"
        assert config.triage.always_check == DEFAULT_ALWAYS_CHECK
        assert config.related_projects == []

    def test_reads_yaml_files(self, temp_dir):
        preflight = temp_dir / ".preflight"
        preflight.mkdir()
        (preflight / "config.yml").write_text(
            "profile: full\n"
            "related_projects:\n"
            "  - path: /work/billing\n"
            "    alias: billing\n"
            "  - /work/notifications\n"
            "thresholds:\n"
            "  session_stale_minutes: 45\n"
        )
        (preflight / "triage.yml").write_text(
            "rules:\n"
            "  always_check: [payments]\n"
            "  skip: []\n"
            "strictness: relaxed\n"
        )

        config = load_config(temp_dir, environ={})

        assert config.profile == "full"
        assert [(p.alias, p.path) for p in config.related_projects] == [
            ("billing", "/work/billing"),
            ("notifications", "/work/notifications"),
        ]
        assert config.thresholds.session_stale_minutes == 45
        assert config.triage.always_check == ["payments"]
        assert config.triage.skip == []
        assert config.triage.strictness == "relaxed"

    def test_environment_used_without_preflight_dir(self, temp_dir):
        config = load_config(
            temp_dir,
            environ={"PROMPT_DISCIPLINE_PROFILE": "minimal", "PREFLIGHT_RELATED": "/work/a, /work/b"},
        )

        assert config.profile == "minimal"
        assert [p.alias for p in config.related_projects] == ["a", "b"]

    def test_environment_ignored_with_preflight_dir(self, temp_dir):
        (temp_dir / ".preflight").mkdir()

        config = load_config(temp_dir, environ={"PROMPT_DISCIPLINE_PROFILE": "minimal"})

        assert config.profile == "standard"

    def test_invalid_yaml_keeps_defaults(self, temp_dir, caplog):
        preflight = temp_dir / ".preflight"
        preflight.mkdir()
        (preflight / "triage.yml").write_text("rules: [unclosed\n")

        with caplog.at_level(logging.WARNING):
            config = load_config(temp_dir, environ={})

        assert config.triage.always_check == DEFAULT_ALWAYS_CHECK
        assert "Failed to parse" in caplog.text

    def test_triage_config_merges_related_aliases(self):
        config = PreflightConfig()
        config.triage.related_projects = {"web": "/work/web"}

        triage_config = config.triage_config()

        assert triage_config.related_projects == {"web": "/work/web"}
        assert triage_config.skip == config.triage.skip
