"""Tests for the command-line interface."""

import pytest

from prompt_discipline.cli import build_parser, main


@pytest.fixture(autouse=True)
def runtime_home(monkeypatch, temp_dir):
    monkeypatch.setenv("PREFLIGHT_HOME", str(temp_dir / "runtime"))


def test_triage_command(capsys, temp_dir):
    code = main(["triage", "fix it", "--project-dir", str(temp_dir)])

    out = capsys.readouterr().out
    assert code == 0
    assert "Level:      ambiguous" in out
    assert "clarify-intent, scope-work" in out


def test_triage_strictness_override(capsys, temp_dir):
    prompt = "Rename getUser to fetchUser in src/users.ts"

    main(["triage", prompt, "--project-dir", str(temp_dir), "--strictness", "strict"])

    assert "verify-files-exist" in capsys.readouterr().out


def test_scorecard_command(capsys, mock_claude_dir):
    code = main(["scorecard", "--project", "demo", "--claude-dir", str(mock_claude_dir)])

    assert code == 0
    assert "# 📊 Prompt Discipline Scorecard" in capsys.readouterr().out


def test_comparative_needs_two_projects(capsys, mock_claude_dir):
    main(["scorecard", "--report-type", "comparative", "--compare", "demo", "--claude-dir", str(mock_claude_dir)])

    assert "requires at least 2 projects" in capsys.readouterr().out


def test_invalid_period_is_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["scorecard", "--period", "year"])
