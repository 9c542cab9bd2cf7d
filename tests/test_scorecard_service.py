"""Tests for report generation orchestration."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from conftest import event

from prompt_discipline.core.baseline import BaselineStore
from prompt_discipline.core.pdf import PdfRenderError
from prompt_discipline.core.scorecard_service import (
    COMPARATIVE_NEEDS_PROJECTS,
    NO_SESSIONS_MESSAGE,
    ScorecardRequest,
    ScorecardService,
)


def failing_renderer(html, path):
    raise PdfRenderError("no headless browser found")


@pytest.fixture
def store(temp_dir):
    return BaselineStore(base_dir=temp_dir / "runtime")


@pytest.fixture
def service(mock_claude_dir, store):
    return ScorecardService(
        claude_dir=mock_claude_dir,
        baseline_store=store,
        today=lambda: date(2026, 2, 14),
    )


class TestScorecardService:
    def test_no_sessions_message(self, service):
        result = service.generate(ScorecardRequest(project="missing"))

        assert result.kind == "empty"
        assert result.text == NO_SESSIONS_MESSAGE

    def test_scorecard_updates_baseline(self, service, store):
        first = service.generate(ScorecardRequest(project="demo"))
        second = service.generate(ScorecardRequest(project="demo"))

        assert first.kind == "scorecard"
        assert first.baseline is None
        assert "vs Avg" not in first.text
        assert second.baseline is not None
        assert "vs Avg" in second.text
        assert store.load("demo").session_count == 2

    def test_project_name_defaults_to_session_project(self, service):
        result = service.generate(ScorecardRequest(session_id="other-1", period="session"))

        assert result.scorecard.project == "other"
        assert result.scorecard.date == "2026-02-14"

    def test_week_scorecard_is_promoted_to_trend(self, service, store):
        result = service.generate(ScorecardRequest(project="demo", period="week"))

        assert result.kind == "trend"
        assert result.text.startswith("# 📈 Weekly Trend Report")
        assert store.load("demo").session_count == 1

    def test_week_scorecard_for_one_session_stays_scorecard(self, service):
        result = service.generate(ScorecardRequest(project="demo", period="week", session_id="sess-42"))

        assert result.kind == "scorecard"

    def test_html_output(self, service):
        result = service.generate(ScorecardRequest(project="demo", output="html"))

        assert result.text.startswith("<!DOCTYPE html>")

    def test_pdf_fallback_to_markdown(self, mock_claude_dir, store):
        service = ScorecardService(claude_dir=mock_claude_dir, baseline_store=store, pdf_renderer=failing_renderer)

        result = service.generate(ScorecardRequest(project="demo", output="pdf"))

        assert result.text.startswith("⚠️ PDF generation failed (no headless browser found)")
        assert "# 📊 Prompt Discipline Scorecard" in result.text
        assert result.pdf_path is None

    def test_pdf_success_uses_default_path(self, mock_claude_dir, store):
        renderer = MagicMock()
        service = ScorecardService(
            claude_dir=mock_claude_dir,
            baseline_store=store,
            pdf_renderer=renderer,
            today=lambda: date(2026, 2, 14),
        )

        result = service.generate(ScorecardRequest(project="demo", output="pdf"))

        html, path = renderer.call_args.args
        assert html.startswith("<!DOCTYPE html>")
        assert path.name == "scorecard-2026-02-14.pdf"
        assert result.pdf_path == str(path)
        assert result.text.startswith(f"✅ PDF scorecard saved to {path}")

    def test_comparative_requires_two_projects(self, service):
        result = service.generate(ScorecardRequest(report_type="comparative", compare_projects=["demo"]))

        assert result.kind == "message"
        assert result.text == COMPARATIVE_NEEDS_PROJECTS

    def test_comparative_report(self, service, store):
        result = service.generate(
            ScorecardRequest(report_type="comparative", compare_projects=["demo", "other"], period="week")
        )

        assert result.kind == "comparative"
        assert [p.name for p in result.comparative.projects] == ["demo", "other"]
        assert store.load("demo") is None

    def test_baseline_write_failure_is_not_fatal(self, service, store):
        with patch.object(store, "record", side_effect=OSError("read-only")):
            result = service.generate(ScorecardRequest(project="demo"))

        assert result.kind == "scorecard"

    def test_git_commits_are_attached(self, mock_claude_dir, store, temp_dir):
        commit = event("commit", "feat: validate login", ts="2026-02-12T10:00:30.000Z", session_id="sess-42")
        service = ScorecardService(claude_dir=mock_claude_dir, baseline_store=store, project_dir=temp_dir)

        with patch("prompt_discipline.core.scorecard_service.GitHistoryExtractor") as extractor:
            extractor.return_value.extract.return_value = [commit]
            result = service.generate(ScorecardRequest(project="demo", session_id="sess-42", period="session"))

        extractor.assert_called_once_with(temp_dir)
        assert result.scorecard.category("Compaction Management").score == 100

    def test_unwritable_pdf_path_falls_back_to_markdown(self, monkeypatch, mock_claude_dir, store, temp_dir):
        monkeypatch.setenv("PREFLIGHT_BROWSER", "/bin/true")
        (temp_dir / "afile").write_text("not a directory")
        service = ScorecardService(claude_dir=mock_claude_dir, baseline_store=store)

        result = service.generate(
            ScorecardRequest(project="demo", output="pdf", output_path=str(temp_dir / "afile" / "x.pdf"))
        )

        assert result.text.startswith("⚠️ PDF generation failed")
        assert "Falling back to markdown" in result.text
        assert result.pdf_path is None

    def test_renderer_os_error_falls_back_to_markdown(self, mock_claude_dir, store):
        renderer = MagicMock(side_effect=PermissionError("denied"))
        service = ScorecardService(claude_dir=mock_claude_dir, baseline_store=store, pdf_renderer=renderer)

        result = service.generate(ScorecardRequest(project="demo", output="pdf"))

        assert result.text.startswith("⚠️ PDF generation failed (denied)")

    def test_unreadable_baseline_store_is_not_fatal(self, mock_claude_dir, temp_dir, caplog):
        blocked = temp_dir / "blocked"
        blocked.write_text("not a directory")
        service = ScorecardService(claude_dir=mock_claude_dir, baseline_store=BaselineStore(base_dir=blocked))

        scorecard = service.generate(ScorecardRequest(project="demo"))
        trend = service.generate(ScorecardRequest(project="demo", period="week"))

        assert scorecard.kind == "scorecard"
        assert scorecard.baseline is None
        assert trend.kind == "trend"
        assert "Failed to read baseline for demo" in caplog.text
