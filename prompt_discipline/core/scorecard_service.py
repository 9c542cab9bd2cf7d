"""Generate scorecard, trend and comparative reports from session logs."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date as date_cls
from pathlib import Path
from typing import Literal

from .baseline import BaselineData, BaselineStore
from .git_history import GitHistoryExtractor
from .pdf import PdfRenderError, render_pdf
from .report_renderer import (
    comparative_to_html,
    comparative_to_markdown,
    scorecard_to_html,
    scorecard_to_markdown,
    trend_to_html,
    trend_to_markdown,
)
from .scorecard import Scorecard, compute_scorecard
from .sessions import ParsedSession, attach_commits, load_sessions, resolve_since
from .trends import ComparativeReport, TrendReport, build_comparative_report, build_trend_report

logger = logging.getLogger(__name__)

Period = Literal["session", "day", "week", "month"]
OutputFormat = Literal["markdown", "pdf", "html"]
ReportType = Literal["scorecard", "trend", "comparative"]

PERIODS: tuple[str, ...] = ("session", "day", "week", "month")
OUTPUT_FORMATS: tuple[str, ...] = ("markdown", "pdf", "html")
REPORT_TYPES: tuple[str, ...] = ("scorecard", "trend", "comparative")

NO_SESSIONS_MESSAGE = (
    "No sessions found matching the criteria. Try broadening the time period or checking the project name."
)
COMPARATIVE_NEEDS_PROJECTS = "Comparative report requires at least 2 projects in compare_projects."

_PDF_LABELS = {
    "scorecard": "PDF scorecard",
    "trend": "Trend PDF",
    "comparative": "Comparative PDF",
}

PdfRenderer = Callable[[str, Path], object]


@dataclass
class ScorecardRequest:
    project: str | None = None
    period: Period = "day"
    session_id: str | None = None
    since: str | None = None
    output: OutputFormat = "markdown"
    output_path: str | None = None
    report_type: ReportType = "scorecard"
    compare_projects: list[str] = field(default_factory=list)


@dataclass
class ReportOutput:
    """Rendered report text plus the structured report it came from."""

    kind: str
    text: str
    pdf_path: str | None = None
    scorecard: Scorecard | None = None
    trend: TrendReport | None = None
    comparative: ComparativeReport | None = None
    baseline: BaselineData | None = None


class ScorecardService:
    """Load sessions, score them, keep the baseline current and render the result.

    Collaborators are injected so tests can point at a temporary Claude
    directory, a temporary baseline store and a fake PDF renderer.
    """

    def __init__(
        self,
        claude_dir: Path | None = None,
        baseline_store: BaselineStore | None = None,
        pdf_renderer: PdfRenderer = render_pdf,
        project_dir: Path | None = None,
        today: Callable[[], date_cls] = date_cls.today,
    ):
        self.claude_dir = claude_dir
        self.baseline_store = baseline_store or BaselineStore()
        self.pdf_renderer = pdf_renderer
        self.project_dir = project_dir
        self.today = today

    def generate(self, request: ScorecardRequest) -> ReportOutput:
        report_date = self.today().isoformat()

        if request.report_type == "comparative":
            return self._comparative(request, report_date)

        sessions = load_sessions(
            claude_dir=self.claude_dir,
            project=request.project,
            session_id=request.session_id,
            since=request.since,
            period=request.period,
        )
        if not sessions:
            return ReportOutput(kind="empty", text=NO_SESSIONS_MESSAGE)

        sessions = self._with_commits(sessions, request)
        project_name = request.project or sessions[0].project_name or "unknown"

        if self._wants_trend(request):
            return self._trend(request, sessions, project_name, report_date)
        return self._scorecard(request, sessions, project_name, report_date)

    @staticmethod
    def _wants_trend(request: ScorecardRequest) -> bool:
        if request.report_type == "trend":
            return True
        return request.period in ("week", "month") and not request.session_id

    def _with_commits(self, sessions: list[ParsedSession], request: ScorecardRequest) -> list[ParsedSession]:
        if self.project_dir is None:
            return sessions
        since = resolve_since(request.since, request.period)
        commits = GitHistoryExtractor(self.project_dir).extract(since=since)
        return attach_commits(sessions, commits)

    def _scorecard(
        self,
        request: ScorecardRequest,
        sessions: list[ParsedSession],
        project_name: str,
        report_date: str,
    ) -> ReportOutput:
        scorecard = compute_scorecard(sessions, project_name, request.period, date=report_date)
        baseline = self._load_baseline(project_name)
        self._record_baseline(project_name, scorecard)

        markdown = scorecard_to_markdown(scorecard, baseline)
        output = ReportOutput(kind="scorecard", text=markdown, scorecard=scorecard, baseline=baseline)
        return self._finish(request, output, markdown, lambda: scorecard_to_html(scorecard, baseline), report_date)

    def _trend(
        self,
        request: ScorecardRequest,
        sessions: list[ParsedSession],
        project_name: str,
        report_date: str,
    ) -> ReportOutput:
        baseline = self._load_baseline(project_name)
        report = build_trend_report(sessions, project_name, request.period, baseline=baseline)
        self._record_baseline(
            project_name, compute_scorecard(sessions, project_name, request.period, date=report_date)
        )

        markdown = trend_to_markdown(report)
        output = ReportOutput(kind="trend", text=markdown, trend=report, baseline=baseline)
        return self._finish(request, output, markdown, lambda: trend_to_html(report), report_date)

    def _comparative(self, request: ScorecardRequest, report_date: str) -> ReportOutput:
        names = [name for name in request.compare_projects if name]
        if len(names) < 2:
            return ReportOutput(kind="message", text=COMPARATIVE_NEEDS_PROJECTS)

        sessions_by_project = {
            name: load_sessions(
                claude_dir=self.claude_dir,
                project=name,
                since=request.since,
                period=request.period,
            )
            for name in names
        }
        report = build_comparative_report(sessions_by_project, request.period, date=report_date)
        markdown = comparative_to_markdown(report)
        output = ReportOutput(kind="comparative", text=markdown, comparative=report)
        return self._finish(request, output, markdown, lambda: comparative_to_html(report), report_date)

    def _load_baseline(self, project_name: str) -> BaselineData | None:
        try:
            return self.baseline_store.load(project_name)
        except OSError as e:
            logger.warning("Failed to read baseline for %s: %s", project_name, e)
            return None

    def _record_baseline(self, project_name: str, scorecard: Scorecard) -> None:
        try:
            self.baseline_store.record(project_name, scorecard)
        except OSError as e:
            logger.warning("Failed to update baseline for %s: %s", project_name, e)

    def _finish(
        self,
        request: ScorecardRequest,
        output: ReportOutput,
        markdown: str,
        html: Callable[[], str],
        report_date: str,
    ) -> ReportOutput:
        if request.output == "html":
            output.text = html()
        elif request.output == "pdf":
            path = Path(request.output_path or Path(tempfile.gettempdir()) / f"{output.kind}-{report_date}.pdf")
            try:
                self.pdf_renderer(html(), path)
            except (PdfRenderError, OSError) as e:
                logger.warning("PDF generation failed: %s", e)
                output.text = f"⚠️ PDF generation failed ({e}). Falling back to markdown:\n\n{markdown}"
            else:
                output.pdf_path = str(path)
                output.text = f"✅ {_PDF_LABELS[output.kind]} saved to {path}\n\n{markdown}"
        return output
