"""Prompt triage: decide how much clarification a prompt needs before acting.

Rules run in a fixed priority order and the first one that matches decides
the level. The order itself is the tie-break: a skip keyword beats
everything, multi-step and cross-service beat always-check, and ``clear`` is
what remains when nothing else fires.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from .config import TriageConfig

TriageLevel = Literal["trivial", "clear", "ambiguous", "cross-service", "multi-step"]

TRIAGE_LEVELS: tuple[str, ...] = ("trivial", "clear", "ambiguous", "cross-service", "multi-step")

CLARIFY_TOOLS = ["clarify-intent", "scope-work"]

TRIVIAL_COMMANDS = frozenset({
    "commit", "format", "lint", "run tests", "push", "pull", "status",
    "build", "test", "deploy", "start", "stop", "restart",
})

CROSS_SERVICE_TERMS = ("schema", "contract", "interface", "event")

VAGUE_VERBS = frozenset({"fix", "update", "change", "refactor", "improve", "optimize"})

_FILE_REFERENCE = re.compile(r"[\w\-./\\]+\.[A-Za-z]\w{0,3}(?=[\s,:;)]|$)")
_FILE_TOKEN = re.compile(r"(?<![\w/.-])(?:\./)?([\w\-./]+\.[A-Za-z]\w{0,5})\b")
_BARE_PATH = re.compile(r"^[\w\-./\\]+\.\w+$")
_LINE_NUMBER = re.compile(r"\bline\s+\d+|:\d+\b|@\d+", re.IGNORECASE)
_PRONOUN = re.compile(r"\b(it|them|this|that|those|these)\b", re.IGNORECASE)
_CODE_CONTEXT = re.compile(r"`[^`]+`|\b[a-z]+[A-Z]\w*\b|\b\w+_\w+\b")
_AND_SPLIT = re.compile(r"\s+and\s+", re.IGNORECASE)
_LIST_ITEM = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s+\S", re.MULTILINE)
_SEQUENCING = (
    ("first ... then", re.compile(r"\bfirst\b.+\bthen\b", re.IGNORECASE | re.DOTALL)),
    ("then", re.compile(r"\bthen\b", re.IGNORECASE)),
    ("after that", re.compile(r"\bafter that\b", re.IGNORECASE)),
    ("finally", re.compile(r"\bfinally\b", re.IGNORECASE)),
)
_TOKEN_PUNCTUATION = ",;:!?()\"'"


@dataclass
class TriageResult:
    """Outcome of triaging one prompt."""

    level: TriageLevel
    confidence: float
    reasons: list[str] = field(default_factory=list)
    recommended_tools: list[str] = field(default_factory=list)
    cross_service_hits: list[str] | None = None


# -- text signals ------------------------------------------------------------


def has_file_reference(prompt: str) -> bool:
    return bool(_FILE_REFERENCE.search(prompt))


def has_line_numbers(prompt: str) -> bool:
    return bool(_LINE_NUMBER.search(prompt))


def is_bare_file_path(prompt: str) -> bool:
    return bool(_BARE_PATH.match(prompt.strip()))


def is_trivial_command(prompt: str) -> bool:
    return prompt.strip().lower() in TRIVIAL_COMMANDS


def has_unresolved_pronoun(prompt: str) -> bool:
    """A pronoun with nothing concrete (file, code span, identifier) to refer to."""
    if not _PRONOUN.search(prompt):
        return False
    return not (has_file_reference(prompt) or _CODE_CONTEXT.search(prompt))


def _words(text: str) -> list[str]:
    return [word.strip(_TOKEN_PUNCTUATION) for word in text.split() if word.strip(_TOKEN_PUNCTUATION)]


def _is_concrete(word: str) -> bool:
    return bool(re.search(r"\.\w+", word)) or any(ch.isupper() for ch in word) or len(word) > 6


def has_vague_verb(prompt: str) -> bool:
    """A vague verb not followed within three words by a concrete target."""
    words = _words(prompt)
    for index, word in enumerate(words):
        if word.lower() not in VAGUE_VERBS:
            continue
        if not any(_is_concrete(following) for following in words[index + 1:index + 4]):
            return True
    return False


def _top_level_dir(reference: str) -> str:
    parts = [part for part in reference.split("/") if part and part != "."]
    return parts[0] if len(parts) > 1 else "."


def multi_step_signal(prompt: str) -> str | None:
    """Name of the first multi-step indicator found in the prompt, if any."""
    parts = _AND_SPLIT.split(prompt)
    for left, right in zip(parts, parts[1:]):
        if len(_words(left)) >= 2 and len(_words(right)) >= 2:
            return "independent clauses joined by 'and'"

    for label, pattern in _SEQUENCING:
        if pattern.search(prompt):
            return f"sequencing language ({label})"

    if _LIST_ITEM.search(prompt):
        return "numbered or bulleted list"

    references = set(_FILE_TOKEN.findall(prompt))
    if len(references) >= 2 and len({_top_level_dir(ref) for ref in references}) >= 2:
        return "files in different top-level directories"
    return None


def cross_service_hits(prompt: str, config: TriageConfig) -> list[str]:
    lowered = prompt.lower()
    hits: list[str] = []
    matched: set[str] = set()

    for keyword in config.cross_service_keywords:
        if keyword and keyword.lower() in lowered:
            hits.append(f"keyword: {keyword}")
            matched.add(keyword.lower())

    for alias in config.related_projects:
        if alias and alias.lower() in lowered:
            hits.append(f"project: {alias}")

    for term in CROSS_SERVICE_TERMS:
        if term not in matched and re.search(rf"\b{term}s?\b", lowered):
            hits.append(f"term: {term}")
    return hits


def keyword_in(prompt: str, keyword: str) -> bool:
    """Whole-word, case-insensitive match; a trailing plural "s" is allowed."""
    return bool(re.search(rf"(?<!\w){re.escape(keyword.lower())}s?(?!\w)", prompt.lower()))


def _first_keyword(prompt: str, keywords: list[str]) -> str | None:
    return next((keyword for keyword in keywords if keyword and keyword_in(prompt, keyword)), None)


def ambiguity_reasons(prompt: str) -> list[str]:
    reasons = []
    if len(prompt.strip()) < 50 and not has_file_reference(prompt):
        reasons.append("short prompt without file references")
    if has_unresolved_pronoun(prompt):
        reasons.append("contains vague pronouns")
    if has_vague_verb(prompt):
        reasons.append("contains vague verbs without specific targets")
    return reasons


# -- ordered rules -------------------------------------------------------------


@dataclass(frozen=True)
class TriageRule:
    """A named predicate and the result it produces when it matches.

    ``predicate`` returns evidence (anything truthy) or a falsy value;
    ``build`` turns that evidence into the final result.
    """

    name: str
    predicate: Callable[[str, TriageConfig], Any]
    build: Callable[[str, TriageConfig, Any], TriageResult]


def _build_skip(prompt: str, config: TriageConfig, keyword: str) -> TriageResult:
    return TriageResult(level="trivial", confidence=0.95, reasons=[f"matches skip keyword: {keyword}"])


def _build_multi_step(prompt: str, config: TriageConfig, signal: str) -> TriageResult:
    return TriageResult(
        level="multi-step",
        confidence=0.85,
        reasons=["contains multi-step indicators", signal],
        recommended_tools=[*CLARIFY_TOOLS, "sequence-tasks"],
    )


def _build_cross_service(prompt: str, config: TriageConfig, hits: list[str]) -> TriageResult:
    return TriageResult(
        level="cross-service",
        confidence=0.8,
        reasons=[f"cross-service indicators: {', '.join(hits)}"],
        recommended_tools=[*CLARIFY_TOOLS, "search-related-projects"],
        cross_service_hits=hits,
    )


def _build_always_check(prompt: str, config: TriageConfig, keyword: str) -> TriageResult:
    return TriageResult(
        level="ambiguous",
        confidence=0.8,
        reasons=[f"matches always_check keyword: {keyword}", *ambiguity_reasons(prompt)],
        recommended_tools=list(CLARIFY_TOOLS),
    )


def _trivial_reason(prompt: str, config: TriageConfig) -> str | None:
    if len(prompt.strip()) < 20 and is_trivial_command(prompt):
        return "short common command"
    if is_bare_file_path(prompt):
        return "appears to be a file path"
    return None


def _build_trivial(prompt: str, config: TriageConfig, reason: str) -> TriageResult:
    confidence = 0.9 if reason == "short common command" else 0.85
    return TriageResult(level="trivial", confidence=confidence, reasons=[reason])


def _build_ambiguous(prompt: str, config: TriageConfig, reasons: list[str]) -> TriageResult:
    return TriageResult(
        level="ambiguous",
        confidence=0.7,
        reasons=list(reasons),
        recommended_tools=list(CLARIFY_TOOLS),
    )


def _build_clear(prompt: str, config: TriageConfig, _: Any) -> TriageResult:
    reasons: list[str] = []
    tools: list[str] = []
    confidence = 0.8

    file_reference = has_file_reference(prompt)
    if file_reference:
        reasons.append("references specific file paths")
    if has_line_numbers(prompt):
        reasons.append("references specific line numbers")
    if len(prompt.strip()) > 50:
        reasons.append("detailed prompt with concrete nouns")

    if config.strictness == "strict" and file_reference:
        reasons.append("strict mode: adding verification checks")
        tools.append("verify-files-exist")
    elif config.strictness == "relaxed" and not reasons:
        reasons.append("relaxed mode: assuming clear intent")
        confidence = 0.9

    if not reasons:
        reasons.append("well-formed prompt with clear intent")
    return TriageResult(level="clear", confidence=confidence, reasons=reasons, recommended_tools=tools)


TRIAGE_RULES: tuple[TriageRule, ...] = (
    TriageRule("skip", lambda p, c: _first_keyword(p, c.skip), _build_skip),
    TriageRule("multi-step", lambda p, c: multi_step_signal(p), _build_multi_step),
    TriageRule("cross-service", cross_service_hits, _build_cross_service),
    TriageRule("always-check", lambda p, c: _first_keyword(p, c.always_check), _build_always_check),
    TriageRule("trivial", _trivial_reason, _build_trivial),
    TriageRule("ambiguous", lambda p, c: ambiguity_reasons(p), _build_ambiguous),
    TriageRule("clear", lambda p, c: True, _build_clear),
)


def triage(
    prompt: str,
    config: TriageConfig | None = None,
    rules: tuple[TriageRule, ...] = TRIAGE_RULES,
) -> TriageResult:
    """Classify a prompt into one of the five triage levels."""
    config = config or TriageConfig()
    for rule in rules:
        evidence = rule.predicate(prompt, config)
        if evidence:
            return rule.build(prompt, config, evidence)
    return _build_clear(prompt, config, None)
