"""Core business logic for prompt discipline."""

from .baseline import BaselineData, BaselineStore, update_baseline
from .classifier import is_correction
from .config import PreflightConfig, TriageConfig, load_config
from .events import TimelineEvent
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
from .scorecard import CategoryScore, Scorecard, compute_scorecard, letter_grade
from .scorecard_service import ReportOutput, ScorecardRequest, ScorecardService
from .session_parser import ParseState, SessionLogParser, parse_session
from .sessions import ParsedSession, group_sessions, load_sessions
from .trends import ComparativeReport, TrendReport, build_comparative_report, build_trend_report
from .triage import TriageResult, triage

__all__ = [
    "BaselineData",
    "BaselineStore",
    "CategoryScore",
    "ComparativeReport",
    "GitHistoryExtractor",
    "ParseState",
    "ParsedSession",
    "PdfRenderError",
    "PreflightConfig",
    "ReportOutput",
    "Scorecard",
    "ScorecardRequest",
    "ScorecardService",
    "SessionLogParser",
    "TimelineEvent",
    "TrendReport",
    "TriageConfig",
    "TriageResult",
    "build_comparative_report",
    "build_trend_report",
    "comparative_to_html",
    "comparative_to_markdown",
    "compute_scorecard",
    "group_sessions",
    "is_correction",
    "letter_grade",
    "load_config",
    "load_sessions",
    "parse_session",
    "render_pdf",
    "scorecard_to_html",
    "scorecard_to_markdown",
    "trend_to_html",
    "trend_to_markdown",
    "triage",
    "update_baseline",
]
