"""Tests for datetime and JSONL helpers."""

from datetime import datetime, timezone

from conftest import write_jsonl

from prompt_discipline.utils.datetime_utils import epoch_to_iso, normalize_timestamp, parse_iso, to_iso
from prompt_discipline.utils.jsonl_parser import JSONLParser


class TestDatetimeUtils:
    def test_parse_iso_variants(self):
        expected = datetime(2026, 2, 12, 10, 30, tzinfo=timezone.utc)

        assert parse_iso("2026-02-12T10:30:00Z") == expected
        assert parse_iso("2026-02-12T10:30:00+00:00") == expected
        assert parse_iso("2026-02-12T10:30:00") == expected

    def test_parse_iso_invalid(self):
        assert parse_iso("") is None
        assert parse_iso(None) is None
        assert parse_iso("not a date") is None

    def test_to_iso_is_utc_with_millis(self):
        assert to_iso(datetime(2026, 2, 12, 10, 30, tzinfo=timezone.utc)) == "2026-02-12T10:30:00.000Z"

    def test_epoch_seconds_and_millis(self):
        assert epoch_to_iso(1770892200) == "2026-02-12T10:30:00.000Z"
        assert epoch_to_iso(1770892200000) == "2026-02-12T10:30:00.000Z"

    def test_normalize_timestamp_fallback(self):
        fallback = "2026-01-01T00:00:00.000Z"

        assert normalize_timestamp("garbage", fallback) == fallback
        assert normalize_timestamp(None, fallback) == fallback
        assert normalize_timestamp(True, fallback) == fallback
        assert normalize_timestamp("2026-02-12T10:30:00Z", fallback) == "2026-02-12T10:30:00.000Z"


class TestJSONLParser:
    def test_skips_malformed_and_non_object_lines(self, temp_dir, caplog):
        path = write_jsonl(temp_dir / "s.jsonl", [{"type": "user"}, "{broken", "[1, 2]", "", {"type": "assistant"}])

        entries = JSONLParser(path).parse()

        assert [e.type for e in entries] == ["user", "assistant"]
        assert [e.line_number for e in entries] == [1, 5]
        assert "Skipping malformed line 2" in caplog.text

    def test_streams_large_files(self, temp_dir):
        path = write_jsonl(temp_dir / "s.jsonl", [{"type": "user"}, {"type": "assistant"}])

        parser = JSONLParser(path, large_file_threshold=1)

        assert parser.is_large
        assert parser.entry_count == 2

    def test_missing_file(self, temp_dir):
        assert JSONLParser(temp_dir / "missing.jsonl").parse() == []
