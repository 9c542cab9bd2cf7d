"""Markdown and HTML renderings of scorecards, trend and comparative reports.

Every renderer is a pure function of its input: rendering the same report
twice yields identical text.
"""

from __future__ import annotations

from html import escape

from .baseline import BaselineData
from .charts import render_radar_svg
from .scorecard import CategoryScore, Scorecard, letter_grade
from .trends import ComparativeReport, TrendReport, trend_arrow

NO_COMPARATIVE_DATA = "No projects with data found."

_BODY_STYLE = "font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;margin:0;color:#1f2937"
_HEADER_STYLE = "background:linear-gradient(135deg,#1e293b,#0f172a);color:white;padding:32px 40px"
_CELL = "padding:8px;border-bottom:1px solid #e5e7eb"


def grade_color(grade: str) -> str:
    if grade.startswith("A"):
        return "#22c55e"
    if grade.startswith("B"):
        return "#eab308"
    if grade.startswith("C"):
        return "#f97316"
    return "#ef4444"


def _badge(text: str, grade: str, padding: str = "2px 8px") -> str:
    return (
        f'<span style="background:{grade_color(grade)};color:white;padding:{padding};'
        f'border-radius:4px;font-weight:700">{escape(text)}</span>'
    )


def _page(body: str) -> str:
    return (
        '<!DOCTYPE html><html><head><meta charset="utf-8"/></head>'
        f'<body style="{_BODY_STYLE}">\n{body}\n</body></html>'
    )


def _vs_average(score: int, average: int | None) -> str:
    if average is None:
        return "—"
    return f"{trend_arrow(score, average)} {letter_grade(average)} ({average})"


def _period_words(period: str) -> tuple[str, str]:
    return ("Weekly", "Week") if period == "week" else ("Monthly", "Month")


# -- scorecard ---------------------------------------------------------------


def _detail_lines(index: int, category: CategoryScore) -> list[str]:
    lines = [
        f"\n### {index}. {category.name} — {category.grade} ({category.score}/100)",
        f"Evidence: {category.evidence}",
    ]
    if category.examples and category.examples.bad:
        lines.append("\nExamples of vague follow-ups:")
        lines.extend(f'- ❌ "{example}"' for example in category.examples.bad)
    if category.examples and category.examples.good:
        lines.append("\nExamples of specific follow-ups:")
        lines.extend(f'- ✅ "{example}"' for example in category.examples.good)
    return lines


def scorecard_to_markdown(scorecard: Scorecard, baseline: BaselineData | None = None) -> str:
    """Scorecard as Markdown; a baseline adds a "vs Avg" column."""
    lines = [
        "# 📊 Prompt Discipline Scorecard",
        f"**Project:** {scorecard.project} | **Period:** {scorecard.period} ({scorecard.date}) | "
        f"**Overall: {scorecard.overall_grade} ({scorecard.overall}/100)**\n",
        "## Category Scores",
    ]
    if baseline:
        lines.append("| # | Category | Score | Grade | vs Avg |")
        lines.append("|---|----------|-------|-------|--------|")
        for i, category in enumerate(scorecard.categories, 1):
            average = baseline.category_averages.get(category.name)
            lines.append(
                f"| {i} | {category.name} | {category.score} | {category.grade} | "
                f"{_vs_average(category.score, average)} |"
            )
    else:
        lines.append("| # | Category | Score | Grade |")
        lines.append("|---|----------|-------|-------|")
        for i, category in enumerate(scorecard.categories, 1):
            lines.append(f"| {i} | {category.name} | {category.score} | {category.grade} |")

    best, worst = scorecard.highlights.best, scorecard.highlights.worst
    lines.append("\n## Highlights")
    lines.append(f"- 🏆 **Best:** {best.name} ({best.grade}) — {best.evidence}")
    lines.append(f"- ⚠️ **Worst:** {worst.name} ({worst.grade}) — {worst.evidence}")

    lines.append("\n## Detailed Breakdown")
    for i, category in enumerate(scorecard.categories, 1):
        lines.extend(_detail_lines(i, category))
    return "\n".join(lines)


def _html_examples(category: CategoryScore) -> str:
    if not category.examples:
        return ""
    parts = []
    if category.examples.bad:
        rows = "".join(
            f'<div style="color:#ef4444;font-size:13px">❌ "{escape(example)}"</div>'
            for example in category.examples.bad
        )
        parts.append(f'<div style="margin-top:6px">{rows}</div>')
    if category.examples.good:
        rows = "".join(
            f'<div style="color:#22c55e;font-size:13px">✅ "{escape(example)}"</div>'
            for example in category.examples.good
        )
        parts.append(f'<div style="margin-top:4px">{rows}</div>')
    return "".join(parts)


def scorecard_to_html(scorecard: Scorecard, baseline: BaselineData | None = None) -> str:
    rows = []
    for i, category in enumerate(scorecard.categories, 1):
        average_cell = ""
        if baseline:
            average = baseline.category_averages.get(category.name)
            average_cell = f'<td style="{_CELL};text-align:center">{escape(_vs_average(category.score, average))}</td>'
        rows.append(
            f'<tr><td style="{_CELL}">{i}</td>'
            f'<td style="{_CELL};font-weight:600">{escape(category.name)}</td>'
            f'<td style="{_CELL};text-align:center">{category.score}</td>'
            f'<td style="{_CELL};text-align:center">{_badge(category.grade, category.grade)}</td>'
            f"{average_cell}</tr>"
        )

    details = []
    for i, category in enumerate(scorecard.categories, 1):
        details.append(
            '<div style="margin-bottom:16px">'
            f'<h3 style="margin:0 0 4px">{i}. {escape(category.name)} — '
            f'<span style="color:{grade_color(category.grade)}">{category.grade}</span> ({category.score}/100)</h3>'
            f'<p style="color:#6b7280;margin:0">{escape(category.evidence)}</p>'
            f"{_html_examples(category)}</div>"
        )

    table_rows = "".join(rows)
    detail_blocks = "".join(details)
    best, worst = scorecard.highlights.best, scorecard.highlights.worst
    average_header = '<th style="padding:8px;text-align:center">vs Avg</th>' if baseline else ""
    body = f"""<div style="{_HEADER_STYLE};display:flex;align-items:center;justify-content:space-between">
  <div>
    <h1 style="margin:0;font-size:28px">📊 Prompt Discipline Scorecard</h1>
    <p style="margin:8px 0 0;opacity:0.8">Project: <strong>{escape(scorecard.project)}</strong> | Period: {escape(scorecard.period)} | {escape(scorecard.date)}</p>
  </div>
  <div style="width:100px;height:100px;border-radius:50%;background:{grade_color(scorecard.overall_grade)};display:flex;align-items:center;justify-content:center;flex-direction:column">
    <div style="font-size:28px;font-weight:800;line-height:1">{scorecard.overall_grade}</div>
    <div style="font-size:14px;opacity:0.9">{scorecard.overall}/100</div>
  </div>
</div>
<div style="padding:32px 40px;display:flex;gap:40px;flex-wrap:wrap">
  <div style="flex:1;min-width:300px">
    <h2 style="margin:0 0 12px">Category Scores</h2>
    <table style="width:100%;border-collapse:collapse;font-size:14px">
      <thead><tr style="background:#f9fafb"><th style="padding:8px;text-align:left">#</th><th style="padding:8px;text-align:left">Category</th><th style="padding:8px;text-align:center">Score</th><th style="padding:8px;text-align:center">Grade</th>{average_header}</tr></thead>
      <tbody>{table_rows}</tbody>
    </table>
  </div>
  <div style="flex:0 0 auto">{render_radar_svg(scorecard.categories)}</div>
</div>
<div style="padding:0 40px 20px">
  <div style="background:#f0fdf4;border-left:4px solid #22c55e;padding:12px 16px;margin-bottom:8px;border-radius:4px">🏆 <strong>Best:</strong> {escape(best.name)} ({best.grade}) — {escape(best.evidence)}</div>
  <div style="background:#fef2f2;border-left:4px solid #ef4444;padding:12px 16px;border-radius:4px">⚠️ <strong>Needs work:</strong> {escape(worst.name)} ({worst.grade}) — {escape(worst.evidence)}</div>
</div>
<div style="padding:20px 40px 40px">
  <h2 style="margin:0 0 16px">Detailed Breakdown</h2>
  {detail_blocks}
</div>"""
    return _page(body)


# -- trend -------------------------------------------------------------------


def trend_to_markdown(report: TrendReport) -> str:
    label, noun = _period_words(report.period)
    stats = report.stats
    lines = [
        f"# 📈 {label} Trend Report",
        f"**Project:** {report.project} | **Period:** {report.period} | **Days:** {len(report.daily_scores)}\n",
        "## 📊 Stats",
        "| Sessions | Prompts | Tool Calls | Correction Rate | Compactions |",
        "|----------|---------|------------|-----------------|-------------|",
        f"| {stats.sessions} | {stats.prompts} | {stats.tool_calls} | {stats.correction_rate}% | {stats.compactions} |\n",
        "## 📉 Score Trend",
        f"Daily scores: {report.sparkline}\n",
        "| Date | Score | Grade |",
        "|------|-------|-------|",
    ]
    lines.extend(f"| {day.date} | {day.score} | {letter_grade(day.score)} |" for day in report.daily_scores)

    baseline = report.baseline
    lines.append("\n## Category Trends")
    lines.append("| Category | Score | Trend |" + (" vs Avg |" if baseline else ""))
    lines.append("|----------|-------|-------|" + ("--------|" if baseline else ""))
    for trend in report.category_trends:
        row = f"| {trend.name} | {trend.current} ({letter_grade(trend.current)}) | {trend.arrow} |"
        if baseline:
            average = baseline.category_averages.get(trend.name)
            if average is None:
                row += " — |"
            else:
                row += f" {trend_arrow(trend.current, average)} vs {letter_grade(average)} ({average}) |"
        lines.append(row)

    lines.append("\n## 🎯 Top 3 Areas to Improve")
    lines.extend(
        f"- **{item.category}** ({letter_grade(item.score)}, {item.score}/100): {item.recommendation}"
        for item in report.top_improvements
    )

    lines.append(f"\n## 💬 Prompts of the {noun}")
    lines.append(f"**Best prompt:**\n> {report.best_prompt}\n")
    lines.append(f"**Worst prompt:**\n> {report.worst_prompt}")
    return "\n".join(lines)


def _stat_tile(value: str, label: str) -> str:
    return (
        '<div style="background:#f8fafc;padding:12px 20px;border-radius:8px;text-align:center">'
        f'<div style="font-size:24px;font-weight:700">{value}</div>'
        f'<div style="color:#6b7280;font-size:12px">{label}</div></div>'
    )


def trend_to_html(report: TrendReport) -> str:
    label, noun = _period_words(report.period)
    stats = report.stats
    baseline = report.baseline

    rows = []
    for trend in report.category_trends:
        grade = letter_grade(trend.current)
        average_cell = ""
        if baseline:
            average = baseline.category_averages.get(trend.name)
            text = "—" if average is None else f"{trend_arrow(trend.current, average)} {letter_grade(average)}"
            average_cell = f'<td style="padding:6px;text-align:center">{text}</td>'
        rows.append(
            f'<tr><td style="padding:6px">{escape(trend.name)}</td>'
            f'<td style="padding:6px;text-align:center">{_badge(f"{grade} ({trend.current})", grade, "2px 6px")}</td>'
            f'<td style="padding:6px;text-align:center;font-size:18px">{trend.arrow}</td>{average_cell}</tr>'
        )

    improvements = "".join(
        '<div style="background:#fef2f2;border-left:4px solid #f97316;padding:10px 16px;margin-bottom:8px;border-radius:4px">'
        f"<strong>{escape(item.category)}</strong> ({item.score}/100): {escape(item.recommendation)}</div>"
        for item in report.top_improvements
    )
    tiles = "".join(
        _stat_tile(value, name)
        for value, name in (
            (str(stats.sessions), "Sessions"),
            (str(stats.prompts), "Prompts"),
            (str(stats.tool_calls), "Tool Calls"),
            (f"{stats.correction_rate}%", "Correction Rate"),
            (str(stats.compactions), "Compactions"),
        )
    )
    average_header = '<th style="padding:6px;text-align:center">vs Avg</th>' if baseline else ""
    table_rows = "".join(rows)

    body = f"""<div style="{_HEADER_STYLE}">
  <h1 style="margin:0">📈 {label} Trend Report</h1>
  <p style="margin:8px 0 0;opacity:0.8">Project: <strong>{escape(report.project)}</strong> | {len(report.daily_scores)} days | {stats.sessions} sessions</p>
</div>
<div style="padding:24px 40px;display:flex;gap:20px;flex-wrap:wrap">{tiles}</div>
<div style="padding:0 40px">{report.svg}</div>
<div style="padding:24px 40px">
  <h2>Category Trends</h2>
  <table style="width:100%;border-collapse:collapse;font-size:14px">
    <thead><tr style="background:#f9fafb"><th style="padding:6px;text-align:left">Category</th><th style="padding:6px;text-align:center">Score</th><th style="padding:6px;text-align:center">Trend</th>{average_header}</tr></thead>
    <tbody>{table_rows}</tbody>
  </table>
</div>
<div style="padding:0 40px 20px">
  <h2>🎯 Top 3 Areas to Improve</h2>
  {improvements}
</div>
<div style="padding:0 40px 40px">
  <h2>💬 Prompts of the {noun}</h2>
  <div style="background:#f0fdf4;border-left:4px solid #22c55e;padding:10px 16px;margin-bottom:8px;border-radius:4px"><strong>Best:</strong> {escape(report.best_prompt)}</div>
  <div style="background:#fef2f2;border-left:4px solid #ef4444;padding:10px 16px;border-radius:4px"><strong>Worst:</strong> {escape(report.worst_prompt)}</div>
</div>"""
    return _page(body)


# -- comparative ---------------------------------------------------------------


def _grade_cell(category: CategoryScore | None) -> str:
    return f"{category.grade} ({category.score})" if category else "—"


def comparative_to_markdown(report: ComparativeReport) -> str:
    lines = [
        f"# 📊 Comparative Report — {report.date}",
        f"**Period:** {report.period} | **Projects:** {len(report.projects)}\n",
    ]
    if not report.projects:
        return "\n".join(lines) + "\n" + NO_COMPARATIVE_DATA

    names = [c.name for c in report.projects[0].scorecard.categories]
    lines.append("".ljust(24) + "  ".join(p.name.ljust(14) for p in report.projects))
    lines.append(
        "Overall:".ljust(24)
        + "  ".join(f"{p.scorecard.overall_grade} ({p.scorecard.overall})".ljust(14) for p in report.projects)
    )
    for name in names:
        row = "  ".join(_grade_cell(p.scorecard.category(name)).ljust(14) for p in report.projects)
        lines.append(f"{name}:".ljust(24) + row)

    if report.patterns:
        lines.append("\n## Cross-project patterns")
        lines.extend(report.patterns)
    return "\n".join(lines)


def comparative_to_html(report: ComparativeReport) -> str:
    if not report.projects:
        return _page(f"<p>{NO_COMPARATIVE_DATA}</p>")

    names = [c.name for c in report.projects[0].scorecard.categories]
    header = "".join(f'<th style="padding:8px;text-align:center">{escape(p.name)}</th>' for p in report.projects)
    overall = "".join(
        f'<td style="padding:8px;text-align:center">'
        f'{_badge(f"{p.scorecard.overall_grade} ({p.scorecard.overall})", p.scorecard.overall_grade)}</td>'
        for p in report.projects
    )

    rows = []
    for name in names:
        cells = []
        for project in report.projects:
            category = project.scorecard.category(name)
            if category is None:
                cells.append('<td style="padding:6px;text-align:center">—</td>')
            else:
                cells.append(
                    f'<td style="padding:6px;text-align:center">'
                    f'{_badge(_grade_cell(category), category.grade, "1px 6px")}</td>'
                )
        rows.append(f'<tr><td style="padding:6px;font-weight:600">{escape(name)}</td>{"".join(cells)}</tr>')

    table_rows = "".join(rows)
    patterns = ""
    if report.patterns:
        items = "".join(
            f'<div style="padding:8px 16px;margin-bottom:4px;'
            f'background:{"#fef2f2" if pattern.startswith("⚠️") else "#f0fdf4"};border-radius:4px">'
            f"{escape(pattern)}</div>"
            for pattern in report.patterns
        )
        patterns = f'<div style="padding:0 40px 40px"><h2>Cross-project Patterns</h2>{items}</div>'

    body = f"""<div style="{_HEADER_STYLE}">
  <h1 style="margin:0">📊 Comparative Report</h1>
  <p style="margin:8px 0 0;opacity:0.8">Period: {escape(report.period)} | {escape(report.date)}</p>
</div>
<div style="padding:24px 40px">
  <table style="width:100%;border-collapse:collapse;font-size:14px">
    <thead><tr style="background:#f9fafb"><th style="padding:8px;text-align:left">Category</th>{header}</tr></thead>
    <tbody>
      <tr style="background:#f0f9ff"><td style="padding:8px;font-weight:700">Overall</td>{overall}</tr>
      {table_rows}
    </tbody>
  </table>
</div>
{patterns}"""
    return _page(body)
