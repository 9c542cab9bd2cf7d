"""Tests for Markdown/HTML report rendering and charts."""

from conftest import event, session_of

from prompt_discipline.core.baseline import BaselineData
from prompt_discipline.core.charts import render_radar_svg, render_sparkline, render_trend_svg
from prompt_discipline.core.report_renderer import (
    NO_COMPARATIVE_DATA,
    comparative_to_html,
    comparative_to_markdown,
    grade_color,
    scorecard_to_html,
    scorecard_to_markdown,
    trend_to_html,
    trend_to_markdown,
)
from prompt_discipline.core.scorecard import CATEGORY_NAMES, compute_scorecard
from prompt_discipline.core.trends import (
    ComparativeReport,
    build_comparative_report,
    build_trend_report,
    trend_arrow,
)

PROMPT = "Update src/app.ts to <b>escape</b> user input before rendering the preview pane"


def sample_sessions():
    return [
        session_of(
            event("prompt", "hello there", ts="2026-02-11T10:00:00.000Z"),
            event("assistant", "ok", ts="2026-02-11T10:01:00.000Z"),
            event("prompt", PROMPT, ts="2026-02-11T10:02:00.000Z"),
            event("assistant", "done", ts="2026-02-11T10:03:00.000Z"),
            event("prompt", "fix it", ts="2026-02-11T10:04:00.000Z"),
        ),
        session_of(event("prompt", "hello world", ts="2026-02-12T10:00:00.000Z"), session_id="s2"),
    ]


def sample_scorecard():
    return compute_scorecard(sample_sessions(), "demo", "day", date="2026-02-12")


class TestScorecardRendering:
    def test_markdown_structure(self):
        text = scorecard_to_markdown(sample_scorecard())

        assert text.startswith("# 📊 Prompt Discipline Scorecard")
        assert "| # | Category | Score | Grade |" in text
        assert "vs Avg" not in text
        for name in CATEGORY_NAMES:
            assert f"| {name} |" in text
        assert '- ❌ "fix it"' in text

    def test_markdown_with_baseline_adds_column(self):
        scorecard = sample_scorecard()
        plans = scorecard.category("Plans")
        baseline = BaselineData(category_averages={"Plans": 50}, overall_average=60, session_count=4)

        text = scorecard_to_markdown(scorecard, baseline)

        assert "| # | Category | Score | Grade | vs Avg |" in text
        assert f"| 1 | Plans | {plans.score} | {plans.grade} | {trend_arrow(plans.score, 50)} D (50) |" in text
        assert "| — |" in text

    def test_rendering_is_deterministic(self):
        scorecard = sample_scorecard()

        assert scorecard_to_markdown(scorecard) == scorecard_to_markdown(scorecard)
        assert scorecard_to_html(scorecard) == scorecard_to_html(scorecard)

    def test_html_escapes_user_text_and_embeds_radar(self):
        html = scorecard_to_html(sample_scorecard())

        assert html.startswith("<!DOCTYPE html>")
        assert "<svg" in html
        assert "<b>escape</b>" not in html
        assert "&lt;b&gt;escape&lt;/b&gt;" in html


class TestTrendRendering:
    def test_markdown_sections(self):
        report = build_trend_report(sample_sessions(), "demo", "week")

        text = trend_to_markdown(report)

        assert text.startswith("# 📈 Weekly Trend Report")
        assert "**Days:** 2" in text
        assert "## 🎯 Top 3 Areas to Improve" in text
        assert "## 💬 Prompts of the Week" in text
        assert report.sparkline in text

    def test_monthly_labels_and_baseline_column(self):
        baseline = BaselineData(category_averages={"Plans": 50}, overall_average=50, session_count=1)
        report = build_trend_report(sample_sessions(), "demo", "month", baseline=baseline)

        text = trend_to_markdown(report)
        html = trend_to_html(report)

        assert "Monthly Trend Report" in text
        assert "| Category | Score | Trend | vs Avg |" in text
        assert "vs Avg" in html
        assert report.svg in html


class TestComparativeRendering:
    def test_empty_report(self):
        report = ComparativeReport(period="week", date="2026-02-12")

        assert comparative_to_markdown(report).endswith(NO_COMPARATIVE_DATA)
        assert NO_COMPARATIVE_DATA in comparative_to_html(report)

    def test_table_rows(self):
        report = build_comparative_report(
            {"web": sample_sessions(), "api": sample_sessions()}, "week", date="2026-02-12"
        )

        text = comparative_to_markdown(report)
        html = comparative_to_html(report)

        assert "# 📊 Comparative Report — 2026-02-12" in text
        assert "**Projects:** 2" in text
        assert any(line.startswith("Overall:") for line in text.splitlines())
        assert any(line.startswith("Plans:") for line in text.splitlines())
        assert "Cross-project Patterns" in html


def test_grade_colors():
    assert grade_color("A+") == "#22c55e"
    assert grade_color("B-") == "#eab308"
    assert grade_color("C") == "#f97316"
    assert grade_color("F") == "#ef4444"


class TestCharts:
    def test_radar_has_grid_rings_and_vertices(self):
        svg = render_radar_svg(sample_scorecard().categories)

        assert svg.count("<polygon") == 5
        assert svg.count("<circle") == 12

    def test_radar_full_score_reaches_outer_ring(self):
        scorecard = compute_scorecard([], "demo", "day", date="2026-02-12")
        scorecard.categories[0].score = 100

        svg = render_radar_svg(scorecard.categories)

        assert '<circle cx="200.00" cy="50.00"' in svg

    def test_trend_chart(self):
        svg = render_trend_svg([("2026-02-11", 50), ("2026-02-12", 100)])

        assert svg.count("<line") == 5
        assert ">02-11<" in svg
        assert "M 40.00 100.00 L 360.00 40.00" in svg

    def test_trend_chart_single_point_is_centered(self):
        assert '<circle cx="200.00"' in render_trend_svg([("2026-02-12", 75)])

    def test_sparkline(self):
        assert render_sparkline([]) == "-"
        assert render_sparkline([1, 1, 1]) == "███"
        assert render_sparkline([0, 100]) == "▁█"
