"""Content heuristics used to label session log records."""

import re

CORRECTION_PATTERNS = (
    re.compile(r"\bno\b", re.IGNORECASE),
    re.compile(r"\bwrong\b", re.IGNORECASE),
    re.compile(r"\bnot that\b", re.IGNORECASE),
    re.compile(r"\bactually\b", re.IGNORECASE),
    re.compile(r"\binstead\b", re.IGNORECASE),
    re.compile(r"\bi meant\b", re.IGNORECASE),
    re.compile(r"\bundo\b", re.IGNORECASE),
    re.compile(r"\brevert\b", re.IGNORECASE),
)

COMPACTION_PATTERN = re.compile(r"compact", re.IGNORECASE)
STDERR_PATTERN = re.compile(r"stderr", re.IGNORECASE)

SUB_AGENT_TOOLS = frozenset({"Task", "dispatch_agent"})


def matches_correction_language(text: str) -> bool:
    return any(pattern.search(text) for pattern in CORRECTION_PATTERNS)


def is_correction(text: str, last_type: str | None) -> bool:
    """Whether a user message retracts the assistant turn right before it.

    Only a message that directly follows an assistant record can be a
    correction, so an opening message that happens to say "no" stays a prompt.
    """
    return last_type == "assistant" and matches_correction_language(text)


def is_compaction(text: str, subtype: str | None = None) -> bool:
    return subtype == "compaction" or bool(COMPACTION_PATTERN.search(text))


def is_error_result(content: object, is_error: object = None) -> bool:
    if is_error is True:
        return True
    return isinstance(content, str) and bool(STDERR_PATTERN.search(content))


def tool_event_type(tool_name: str) -> str:
    """Event type for an embedded tool invocation."""
    return "sub_agent_spawn" if tool_name in SUB_AGENT_TOOLS else "tool_call"
