"""Trend and cross-project comparison reports built from daily scorecards."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as date_cls

from .baseline import BaselineData
from .charts import render_sparkline, render_trend_svg
from .scorecard import (
    CATEGORY_NAMES,
    CategoryScore,
    Scorecard,
    compute_scorecard,
    has_file_ref,
    round_half_up,
)
from .sessions import ParsedSession

# Deltas inside +/- this many points are reported as stable.
TREND_DEAD_ZONE = 5

TREND_ARROWS = {"improving": "↑", "declining": "↓", "stable": "→"}

IMPROVEMENT_TIPS = {
    "Plans": "Start sessions with a detailed plan: list files to touch, expected changes, and success criteria before coding.",
    "Clarification": "Always reference specific file paths and function names in your prompts instead of speaking abstractly.",
    "Delegation": "When spawning sub-agents, provide detailed context: file paths, expected output format, and constraints.",
    "Follow-up Specificity": "After receiving a response, reference specific lines/files rather than saying 'fix it' or 'try again'.",
    "Token Efficiency": "Batch related changes into single prompts. Avoid asking for one small change at a time.",
    "Sequencing": "Complete work in one area before moving to the next. Avoid jumping between unrelated files.",
    "Compaction Management": "Commit before context compaction hits. Keep sessions focused to avoid hitting limits.",
    "Session Lifecycle": "Commit every 15-30 minutes. Don't let sessions run 3+ hours without checkpoints.",
    "Error Recovery": "When correcting the AI, be specific: 'In file X, line Y, change Z to W' not 'no, wrong'.",
    "Workspace Hygiene": "Maintain CLAUDE.md and .claude/ workspace docs for project context.",
    "Cross-Session Continuity": "Start each session by reading project context files (CLAUDE.md, README, etc.).",
    "Verification": "Always run tests/build at the end of a session to verify changes work.",
}
DEFAULT_TIP = "Focus on improving this area."


def trend_direction(current: float, previous: float) -> str:
    delta = current - previous
    if delta > TREND_DEAD_ZONE:
        return "improving"
    if delta < -TREND_DEAD_ZONE:
        return "declining"
    return "stable"


def trend_arrow(current: float, previous: float) -> str:
    return TREND_ARROWS[trend_direction(current, previous)]


@dataclass
class DailyScore:
    date: str
    score: int
    categories: list[CategoryScore]
    session_count: int
    prompt_count: int
    tool_call_count: int
    correction_count: int
    compaction_count: int


@dataclass
class CategoryTrend:
    name: str
    current: int
    previous: int
    direction: str

    @property
    def arrow(self) -> str:
        return TREND_ARROWS[self.direction]


@dataclass
class Improvement:
    category: str
    score: int
    recommendation: str


@dataclass
class TrendStats:
    sessions: int = 0
    prompts: int = 0
    tool_calls: int = 0
    correction_rate: int = 0
    compactions: int = 0


@dataclass
class TrendReport:
    project: str
    period: str
    daily_scores: list[DailyScore]
    category_trends: list[CategoryTrend]
    top_improvements: list[Improvement]
    best_prompt: str
    worst_prompt: str
    stats: TrendStats
    baseline: BaselineData | None = None
    svg: str = ""
    sparkline: str = "-"


def group_sessions_by_day(sessions: list[ParsedSession]) -> dict[str, list[ParsedSession]]:
    by_day: dict[str, list[ParsedSession]] = {}
    for session in sessions:
        if session.day:
            by_day.setdefault(session.day, []).append(session)
    return by_day


def score_daily_data(sessions: list[ParsedSession]) -> list[DailyScore]:
    by_day = group_sessions_by_day(sessions)
    daily = []
    for day in sorted(by_day):
        day_sessions = by_day[day]
        scorecard = compute_scorecard(day_sessions, "", day, date=day)
        daily.append(
            DailyScore(
                date=day,
                score=scorecard.overall,
                categories=scorecard.categories,
                session_count=len(day_sessions),
                prompt_count=sum(len(s.user_messages) for s in day_sessions),
                tool_call_count=sum(len(s.tool_calls) for s in day_sessions),
                correction_count=sum(len(s.corrections) for s in day_sessions),
                compaction_count=sum(len(s.compactions) for s in day_sessions),
            )
        )
    return daily


def _average_category(days: list[DailyScore], name: str) -> float:
    if not days:
        return 0.0
    total = 0
    for day in days:
        total += next((c.score for c in day.categories if c.name == name), 0)
    return total / len(days)


def category_trends(daily_scores: list[DailyScore]) -> list[CategoryTrend]:
    """Compare each category's average in the earlier half of days against the later half.

    A single day has nothing to compare against and is reported as stable.
    """
    if not daily_scores:
        return []
    mid = max(1, len(daily_scores) // 2)
    first_half = daily_scores[:mid]
    second_half = daily_scores[mid:] or first_half

    trends = []
    for name in (c.name for c in daily_scores[0].categories):
        previous = _average_category(first_half, name)
        current = _average_category(second_half, name)
        trends.append(
            CategoryTrend(
                name=name,
                current=round_half_up(current),
                previous=round_half_up(previous),
                direction=trend_direction(current, previous),
            )
        )
    return trends


def find_best_worst_prompt(sessions: list[ParsedSession]) -> tuple[str, str]:
    best, worst = "", ""
    best_score, worst_score = -1, None
    for session in sessions:
        for message in session.user_messages:
            text = message.content
            if len(text) < 5:
                continue
            score = len(text) + (200 if has_file_ref(text) else 0)
            if score > best_score:
                best_score, best = score, text
            if worst_score is None or score < worst_score:
                worst_score, worst = score, text
    return best[:300], worst[:200]


def build_trend_report(
    sessions: list[ParsedSession],
    project: str,
    period: str,
    baseline: BaselineData | None = None,
) -> TrendReport:
    daily_scores = score_daily_data(sessions)
    trends = category_trends(daily_scores)

    lowest = sorted(trends, key=lambda t: t.current)[:3]
    improvements = [
        Improvement(category=t.name, score=t.current, recommendation=IMPROVEMENT_TIPS.get(t.name, DEFAULT_TIP))
        for t in lowest
    ]

    best, worst = find_best_worst_prompt(sessions)
    prompts = sum(len(s.user_messages) for s in sessions)
    corrections = sum(len(s.corrections) for s in sessions)

    return TrendReport(
        project=project,
        period=period,
        daily_scores=daily_scores,
        category_trends=trends,
        top_improvements=improvements,
        best_prompt=best,
        worst_prompt=worst,
        stats=TrendStats(
            sessions=len(sessions),
            prompts=prompts,
            tool_calls=sum(len(s.tool_calls) for s in sessions),
            correction_rate=round_half_up(corrections / prompts * 100) if prompts else 0,
            compactions=sum(len(s.compactions) for s in sessions),
        ),
        baseline=baseline,
        svg=render_trend_svg([(d.date, d.score) for d in daily_scores]),
        sparkline=render_sparkline([d.score for d in daily_scores]),
    )


@dataclass
class ProjectScorecard:
    name: str
    scorecard: Scorecard


@dataclass
class ComparativeReport:
    period: str
    date: str
    projects: list[ProjectScorecard] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)


def cross_project_patterns(projects: list[ProjectScorecard]) -> list[str]:
    if len(projects) < 2:
        return []
    patterns = []
    for name in CATEGORY_NAMES:
        scores = []
        for project in projects:
            category = project.scorecard.category(name)
            scores.append(category.score if category else 0)
        average = round_half_up(sum(scores) / len(scores))
        if all(score < 65 for score in scores):
            patterns.append(f"⚠️ You're consistently weakest at {name} across all projects (avg: {average})")
        if all(score >= 80 for score in scores):
            patterns.append(f"✅ {name} score is strong everywhere; good habit (avg: {average})")
    return patterns


def build_comparative_report(
    sessions_by_project: dict[str, list[ParsedSession]],
    period: str,
    date: str | None = None,
) -> ComparativeReport:
    """Score each project separately; projects without sessions are left out."""
    report_date = date or date_cls.today().isoformat()
    projects = [
        ProjectScorecard(name=name, scorecard=compute_scorecard(sessions, name, period, date=report_date))
        for name, sessions in sessions_by_project.items()
        if sessions
    ]
    return ComparativeReport(
        period=period,
        date=report_date,
        projects=projects,
        patterns=cross_project_patterns(projects),
    )
