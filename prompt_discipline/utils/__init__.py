"""Shared utilities for prompt discipline."""

from .datetime_utils import normalize_timestamp, parse_iso, to_iso
from .jsonl_parser import JSONLEntry, JSONLParser

__all__ = [
    "JSONLEntry",
    "JSONLParser",
    "normalize_timestamp",
    "parse_iso",
    "to_iso",
]
