"""Inline SVG charts and a compact unicode sparkline for reports."""

from __future__ import annotations

import math
from html import escape

from .scorecard import CategoryScore

RADAR_SIZE = 400
RADAR_RADIUS = 150
RADAR_RINGS = (0.25, 0.5, 0.75, 1.0)

TREND_WIDTH = 400
TREND_HEIGHT = 200
TREND_PAD = 40
TREND_GRIDLINES = (0, 25, 50, 75, 100)

ACCENT = "#3b82f6"
GRID = "#e5e7eb"
MUTED = "#6b7280"
FAINT = "#9ca3af"


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def _axis_angle(index: int, count: int) -> float:
    return (math.pi * 2 * index) / count - math.pi / 2


def _label_anchor(angle: float) -> str:
    if abs(angle + math.pi / 2) < 0.1 or abs(angle - math.pi / 2) < 0.1:
        return "middle"
    return "start" if -math.pi / 2 < angle < math.pi / 2 else "end"


def render_radar_svg(categories: list[CategoryScore]) -> str:
    """Radar chart with one axis per category, starting at 12 o'clock."""
    cx = cy = RADAR_SIZE / 2
    count = len(categories)
    if count == 0:
        return (
            f'<svg viewBox="0 0 {RADAR_SIZE} {RADAR_SIZE}" width="{RADAR_SIZE}" height="{RADAR_SIZE}" '
            'xmlns="http://www.w3.org/2000/svg"></svg>'
        )

    rings = []
    for fraction in RADAR_RINGS:
        ring_radius = RADAR_RADIUS * fraction
        points = " ".join(
            f"{_fmt(cx + ring_radius * math.cos(_axis_angle(i, count)))},"
            f"{_fmt(cy + ring_radius * math.sin(_axis_angle(i, count)))}"
            for i in range(count)
        )
        rings.append(f'<polygon points="{points}" fill="none" stroke="{GRID}" stroke-width="1"/>')

    vertices = []
    labels = []
    for i, category in enumerate(categories):
        angle = _axis_angle(i, count)
        distance = category.score / 100 * RADAR_RADIUS
        vertices.append((cx + distance * math.cos(angle), cy + distance * math.sin(angle)))
        lx = cx + (RADAR_RADIUS + 30) * math.cos(angle)
        ly = cy + (RADAR_RADIUS + 30) * math.sin(angle)
        labels.append(
            f'<text x="{_fmt(lx)}" y="{_fmt(ly)}" text-anchor="{_label_anchor(angle)}" '
            f'font-size="10" fill="{MUTED}">{escape(category.name[:12])}</text>'
        )

    polygon = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in vertices)
    dots = "".join(f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="4" fill="{ACCENT}"/>' for x, y in vertices)

    return (
        f'<svg viewBox="0 0 {RADAR_SIZE} {RADAR_SIZE}" width="{RADAR_SIZE}" height="{RADAR_SIZE}" '
        'xmlns="http://www.w3.org/2000/svg">\n'
        f"  {''.join(rings)}\n"
        f'  <polygon points="{polygon}" fill="rgba(59,130,246,0.2)" stroke="{ACCENT}" stroke-width="2"/>\n'
        f"  {dots}\n"
        f"  {''.join(labels)}\n"
        "</svg>"
    )


def render_trend_svg(points: list[tuple[str, int]]) -> str:
    """Line chart of ``(YYYY-MM-DD, score)`` pairs labelled by MM-DD."""
    header = (
        f'<svg viewBox="0 0 {TREND_WIDTH} {TREND_HEIGHT}" width="{TREND_WIDTH}" height="{TREND_HEIGHT}" '
        'xmlns="http://www.w3.org/2000/svg">'
    )
    if not points:
        return (
            f'{header}<text x="{TREND_WIDTH // 2}" y="{TREND_HEIGHT // 2}" text-anchor="middle" '
            f'fill="{MUTED}">No data</text></svg>'
        )

    plot_w = TREND_WIDTH - TREND_PAD * 2
    plot_h = TREND_HEIGHT - TREND_PAD * 2
    count = len(points)

    def x_at(index: int) -> float:
        if count == 1:
            return TREND_PAD + plot_w / 2
        return TREND_PAD + index / (count - 1) * plot_w

    def y_at(score: float) -> float:
        return TREND_PAD + plot_h - score / 100 * plot_h

    grid = "".join(
        f'<line x1="{TREND_PAD}" y1="{_fmt(y_at(value))}" x2="{TREND_WIDTH - TREND_PAD}" y2="{_fmt(y_at(value))}" '
        f'stroke="{GRID}" stroke-width="1"/>'
        f'<text x="{TREND_PAD - 5}" y="{_fmt(y_at(value) + 4)}" text-anchor="end" font-size="10" '
        f'fill="{FAINT}">{value}</text>'
        for value in TREND_GRIDLINES
    )
    labels = "".join(
        f'<text x="{_fmt(x_at(i))}" y="{TREND_HEIGHT - 8}" text-anchor="middle" font-size="9" '
        f'fill="{FAINT}">{escape(day[5:])}</text>'
        for i, (day, _) in enumerate(points)
    )
    path = " ".join(
        f"{'M' if i == 0 else 'L'} {_fmt(x_at(i))} {_fmt(y_at(score))}" for i, (_, score) in enumerate(points)
    )
    dots = "".join(
        f'<circle cx="{_fmt(x_at(i))}" cy="{_fmt(y_at(score))}" r="3" fill="{ACCENT}"/>'
        for i, (_, score) in enumerate(points)
    )

    return (
        f"{header}\n"
        f'  <rect width="{TREND_WIDTH}" height="{TREND_HEIGHT}" fill="white" rx="4"/>\n'
        f"  {grid}\n"
        f'  <path d="{path}" fill="none" stroke="{ACCENT}" stroke-width="2"/>\n'
        f"  {dots}\n"
        f"  {labels}\n"
        "</svg>"
    )


def render_sparkline(values: list[float]) -> str:
    """Render a tiny unicode sparkline from numeric values."""
    if not values:
        return "-"

    blocks = "▁▂▃▄▅▆▇█"
    low = min(values)
    high = max(values)
    if high == low:
        return blocks[-1] * len(values)

    chars = []
    for value in values:
        ratio = (value - low) / (high - low)
        index = int(round(ratio * (len(blocks) - 1)))
        chars.append(blocks[max(0, min(index, len(blocks) - 1))])
    return "".join(chars)
