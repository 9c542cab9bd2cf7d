"""Tests for session record classification heuristics."""

import pytest

from prompt_discipline.core.classifier import (
    is_compaction,
    is_correction,
    is_error_result,
    tool_event_type,
)


@pytest.mark.parametrize(
    "text",
    ["no", "No, the other file", "that's wrong", "not that one", "Actually, use X", "use Y instead",
     "I meant the header", "undo that", "revert the last change"],
)
def test_correction_language_after_assistant(text):
    assert is_correction(text, "assistant")


@pytest.mark.parametrize("text", ["I know it works", "notable change", "nothing to add", "wrongful"])
def test_correction_words_are_word_bounded(text):
    assert not is_correction(text, "assistant")


def test_correction_requires_assistant_turn():
    assert not is_correction("no, wrong", "user")
    assert not is_correction("no, wrong", None)
    assert not is_correction("no, wrong", "")


def test_compaction_detection():
    assert is_compaction("", "compaction")
    assert is_compaction("Context was compacted")
    assert not is_compaction("all good")


def test_error_result_detection():
    assert is_error_result("anything", True)
    assert is_error_result("stderr: permission denied")
    assert not is_error_result("ok", False)
    assert not is_error_result(["stderr"], None)


def test_tool_event_type():
    assert tool_event_type("Task") == "sub_agent_spawn"
    assert tool_event_type("dispatch_agent") == "sub_agent_spawn"
    assert tool_event_type("Bash") == "tool_call"
