"""Twelve-category prompt discipline scoring over parsed sessions."""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date as date_cls

from .sessions import ParsedSession

CATEGORY_NAMES: tuple[str, ...] = (
    "Plans",
    "Clarification",
    "Delegation",
    "Follow-up Specificity",
    "Token Efficiency",
    "Sequencing",
    "Compaction Management",
    "Session Lifecycle",
    "Error Recovery",
    "Workspace Hygiene",
    "Cross-Session Continuity",
    "Verification",
)

GRADE_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (55, "C-"),
    (50, "D"),
)

MAX_EXAMPLES = 3

_PATH_RE = re.compile(r"(?:/[\w./-]+\.\w{1,6}|\b\w+\.\w{2,6}\b)")
_FILE_EXT_RE = re.compile(
    r"\.\b(?:ts|tsx|js|jsx|py|rs|go|rb|java|c|cpp|h|css|scss|html|json|yaml|yml|toml|md|sql|sh)\b"
)
_AREA_RE = re.compile(r"/[\w./-]+")
_TOOL_PATH_RE = re.compile(r"(?:file_path|path)[\"']?\s*[:=]\s*[\"']([^\"']+)")
_WORKSPACE_DOCS_RE = re.compile(r"\.claude/|CLAUDE\.md")
_CONTEXT_DOCS_RE = re.compile(r"CLAUDE\.md|\.claude/|checkpoint|context|README", re.IGNORECASE)
_VERIFICATION_RE = re.compile(r"test|build|lint|check|verify|jest|vitest|pytest|cargo.test", re.IGNORECASE)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float) -> int:
    """Round to an integer score within [0, 100]."""
    return max(0, min(100, round_half_up(value)))


def pct(numerator: float, denominator: float) -> int:
    """Percentage of good instances; an empty denominator counts as 100."""
    if denominator == 0:
        return 100
    return round_half_up(numerator / denominator * 100)


def letter_grade(score: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def has_file_ref(text: str) -> bool:
    return bool(_PATH_RE.search(text) or _FILE_EXT_RE.search(text))


@dataclass
class CategoryExamples:
    good: list[str] = field(default_factory=list)
    bad: list[str] = field(default_factory=list)


@dataclass
class CategoryScore:
    """Score for one category with the evidence behind it."""

    name: str
    score: int
    grade: str
    evidence: str
    examples: CategoryExamples | None = None


@dataclass
class Highlights:
    best: CategoryScore
    worst: CategoryScore


@dataclass
class Scorecard:
    project: str
    period: str
    date: str
    overall: int
    overall_grade: str
    categories: list[CategoryScore]
    highlights: Highlights

    def category(self, name: str) -> CategoryScore | None:
        return next((c for c in self.categories if c.name == name), None)


def _category(name: str, score: float, evidence: str, examples: CategoryExamples | None = None) -> CategoryScore:
    value = clamp(score)
    return CategoryScore(name=name, score=value, grade=letter_grade(value), evidence=evidence, examples=examples)


# -- category scorers ---------------------------------------------------------


def score_plans(sessions: list[ParsedSession]) -> CategoryScore:
    if not sessions:
        return _category("Plans", 75, "No sessions to analyze")

    planned = sum(
        1
        for session in sessions
        if any(len(m.content) > 100 and has_file_ref(m.content) for m in session.user_messages[:3])
    )
    return _category(
        "Plans",
        pct(planned, len(sessions)),
        f"{planned}/{len(sessions)} sessions began with file-specific planning prompts "
        "(>100 chars with file references).",
    )


def score_clarification(sessions: list[ParsedSession]) -> CategoryScore:
    prompts = [m for session in sessions for m in session.user_messages]
    specific = sum(1 for m in prompts if has_file_ref(m.content))
    return _category(
        "Clarification",
        pct(specific, len(prompts)),
        f"{specific}/{len(prompts)} user prompts contained file paths or specific identifiers.",
    )


def score_delegation(sessions: list[ParsedSession]) -> CategoryScore:
    spawns = [e for session in sessions for e in session.sub_agent_spawns]
    if not spawns:
        return _category("Delegation", 75, "No sub-agent spawns detected. Default score.")
    detailed = sum(1 for e in spawns if len(e.content) > 200)
    return _category(
        "Delegation",
        pct(detailed, len(spawns)),
        f"{detailed}/{len(spawns)} sub-agent tasks had detailed descriptions (>200 chars).",
    )


def score_follow_up_specificity(sessions: list[ParsedSession]) -> CategoryScore:
    follow_ups = 0
    specific = 0
    examples = CategoryExamples()

    for session in sessions:
        previous: str | None = None
        for event in session.events:
            if event.type == "prompt" and previous == "assistant":
                follow_ups += 1
                file_ref = has_file_ref(event.content)
                if file_ref or len(event.content) >= 50:
                    specific += 1
                    if file_ref and len(examples.good) < MAX_EXAMPLES:
                        examples.good.append(event.content[:120])
                elif len(examples.bad) < MAX_EXAMPLES:
                    examples.bad.append(event.content[:80])
            if event.type in ("prompt", "assistant"):
                previous = event.type

    return _category(
        "Follow-up Specificity",
        pct(specific, follow_ups),
        f"{specific}/{follow_ups} follow-up prompts had specific file references or sufficient detail.",
        examples if (examples.good or examples.bad) else None,
    )


def score_token_efficiency(sessions: list[ParsedSession]) -> CategoryScore:
    total_calls = 0
    total_files = 0
    for session in sessions:
        total_calls += len(session.tool_calls)
        files = set()
        for call in session.tool_calls:
            match = _TOOL_PATH_RE.search(call.content)
            if match:
                files.add(match.group(1))
        total_files += len(files) or 1

    ratio = total_calls / total_files if total_files else 0.0
    if ratio <= 5:
        score = 100
    elif ratio <= 10:
        score = 90
    elif ratio <= 20:
        score = 75
    elif ratio <= 40:
        score = 60
    else:
        score = 40

    bloated = sum(1 for session in sessions if len(session.tool_calls) > 200)
    score = clamp(score - bloated * 10)
    return _category(
        "Token Efficiency",
        score,
        f"{total_calls} tool calls across {total_files} unique files (ratio: {ratio:.1f}). "
        f"{bloated} session(s) exceeded 200 tool calls.",
    )


def prompt_area(text: str) -> str:
    """Directory prefix of the first path-like token in a prompt."""
    match = _AREA_RE.search(text)
    if not match:
        return ""
    return "/".join(match.group(0).split("/")[:-1])


def score_sequencing(sessions: list[ParsedSession]) -> CategoryScore:
    switches = 0
    prompts = 0
    for session in sessions:
        last_area = ""
        for message in session.user_messages:
            prompts += 1
            area = prompt_area(message.content)
            if area and last_area and area != last_area:
                switches += 1
            if area:
                last_area = area

    rate = switches / prompts if prompts else 0.0
    if rate <= 0.05:
        score = 100
    elif rate <= 0.10:
        score = 90
    elif rate <= 0.20:
        score = 75
    elif rate <= 0.35:
        score = 60
    else:
        score = 45
    return _category(
        "Sequencing",
        score,
        f"{switches} topic switches across {prompts} prompts ({round_half_up(rate * 100)}% switch rate).",
    )


def score_compaction_management(sessions: list[ParsedSession]) -> CategoryScore:
    total = 0
    covered = 0
    for session in sessions:
        for index, event in enumerate(session.events):
            if event.type != "compaction":
                continue
            total += 1
            if any(e.type == "commit" for e in session.events[max(0, index - 10):index]):
                covered += 1

    if total == 0:
        return _category("Compaction Management", 100, "No compactions needed; sessions stayed manageable.")
    return _category(
        "Compaction Management",
        pct(covered, total),
        f"{covered}/{total} compactions were preceded by a commit within 10 messages.",
    )


def score_session_lifecycle(sessions: list[ParsedSession]) -> CategoryScore:
    if not sessions:
        return _category("Session Lifecycle", 75, "No sessions.")

    good = 0.0
    for session in sessions:
        if session.duration_minutes <= 0:
            good += 1
            continue
        commits = len(session.commits)
        if session.duration_minutes > 180 and commits == 0:
            continue
        interval = session.duration_minutes / commits if commits else session.duration_minutes
        if interval <= 30:
            good += 1
        elif interval <= 60:
            good += 0.5

    healthy = round_half_up(good)
    return _category(
        "Session Lifecycle",
        pct(healthy, len(sessions)),
        f"{healthy}/{len(sessions)} sessions had healthy commit frequency (every 15-30 min).",
    )


def score_error_recovery(sessions: list[ParsedSession]) -> CategoryScore:
    corrections = 0
    recovered = 0
    messages = 0
    for session in sessions:
        messages += len(session.events)
        for index, event in enumerate(session.events):
            if event.type != "correction":
                continue
            corrections += 1
            if any(e.type in ("tool_call", "assistant") for e in session.events[index + 1:index + 3]):
                recovered += 1

    if corrections == 0:
        return _category("Error Recovery", 95, "No corrections needed.")

    rate = corrections / messages if messages else 0.0
    score = clamp(100 - rate * 500)
    score = clamp(score + pct(recovered, corrections) * 0.2)
    return _category(
        "Error Recovery",
        score,
        f"{corrections} corrections ({rate * 100:.1f}% of messages). {recovered} recovered within 2 messages.",
    )


def score_workspace_hygiene(sessions: list[ParsedSession]) -> CategoryScore:
    referencing = sum(
        1
        for session in sessions
        if _WORKSPACE_DOCS_RE.search(" ".join(e.content for e in session.events))
    )
    bonus = min(referencing * 5, 20)
    return _category(
        "Workspace Hygiene",
        75 + bonus,
        f"Default baseline 75. {referencing} session(s) referenced .claude/ workspace docs (+bonus).",
    )


def score_cross_session_continuity(sessions: list[ParsedSession]) -> CategoryScore:
    if not sessions:
        return _category("Cross-Session Continuity", 75, "No sessions.")
    good = sum(
        1
        for session in sessions
        if any(_CONTEXT_DOCS_RE.search(call.content) for call in session.tool_calls[:3])
    )
    return _category(
        "Cross-Session Continuity",
        pct(good, len(sessions)),
        f"{good}/{len(sessions)} sessions started by reading project context docs.",
    )


def score_verification(sessions: list[ParsedSession]) -> CategoryScore:
    if not sessions:
        return _category("Verification", 75, "No sessions.")
    verified = 0
    for session in sessions:
        tail = session.events[int(len(session.events) * 0.9):]
        if any(e.type == "tool_call" and _VERIFICATION_RE.search(e.content) for e in tail):
            verified += 1
    return _category(
        "Verification",
        pct(verified, len(sessions)),
        f"{verified}/{len(sessions)} sessions ran tests/builds in the final 10% of events.",
    )


CATEGORY_SCORERS: tuple[Callable[[list[ParsedSession]], CategoryScore], ...] = (
    score_plans,
    score_clarification,
    score_delegation,
    score_follow_up_specificity,
    score_token_efficiency,
    score_sequencing,
    score_compaction_management,
    score_session_lifecycle,
    score_error_recovery,
    score_workspace_hygiene,
    score_cross_session_continuity,
    score_verification,
)


def pick_highlights(categories: list[CategoryScore]) -> Highlights:
    """Best and worst category; ties go to the earlier category."""
    return Highlights(
        best=max(categories, key=lambda c: c.score),
        worst=min(categories, key=lambda c: c.score),
    )


def build_scorecard(
    categories: list[CategoryScore],
    project: str,
    period: str,
    date: str | None = None,
) -> Scorecard:
    """Aggregate category scores into a scorecard (unweighted mean)."""
    overall = clamp(sum(c.score for c in categories) / len(categories))
    return Scorecard(
        project=project,
        period=period,
        date=date or date_cls.today().isoformat(),
        overall=overall,
        overall_grade=letter_grade(overall),
        categories=categories,
        highlights=pick_highlights(categories),
    )


def compute_scorecard(
    sessions: list[ParsedSession],
    project: str,
    period: str,
    date: str | None = None,
) -> Scorecard:
    """Score a set of sessions across all twelve categories."""
    return build_scorecard([scorer(sessions) for scorer in CATEGORY_SCORERS], project, period, date)
