"""Prompt discipline: triage prompts and score coding sessions."""

__version__ = "0.1.0"
