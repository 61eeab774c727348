from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional, Tuple

from .drawing import Drawing


def compute_bounds(drawing: Drawing) -> Tuple[float, float, float, float]:
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for x, y in drawing.points():
        min_x = min(min_x, x)
        max_x = max(max_x, x)
        min_y = min(min_y, y)
        max_y = max(max_y, y)
    if min_x == math.inf:
        return (0.0, 0.0, 0.0, 0.0)
    return (min_x, min_y, max_x, max_y)


def _fmt(value: float, precision: int) -> str:
    if not value:
        value = 0.0
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def to_svg(
    drawing: Drawing,
    *,
    margin: float = 5.0,
    precision: int = 2,
    stroke: str = "#0e2b14",
    stroke_width: float = 1.0,
    fill: str = "#000",
    title: Optional[str] = None,
) -> str:
    """Serialise a drawing as an SVG document.

    Turtle coordinates grow upwards; y is negated on output so the figure is
    not upside down in SVG's downward-growing frame.
    """
    min_x, min_y, max_x, max_y = compute_bounds(drawing)
    left = min_x - margin
    top = -max_y - margin
    width = max(max_x - min_x + 2 * margin, 1.0)
    height = max(max_y - min_y + 2 * margin, 1.0)

    lines: List[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
        f'viewBox="{_fmt(left, precision)} {_fmt(top, precision)} '
        f'{_fmt(width, precision)} {_fmt(height, precision)}">',
    ]
    if title:
        lines.append(f"  <title>{_escape(title)}</title>")
    if drawing.segments:
        lines.append(
            f'  <g stroke="{stroke}" stroke-width="{_fmt(stroke_width, precision)}" '
            'stroke-linecap="round" fill="none">'
        )
        for (x1, y1), (x2, y2) in drawing.segments:
            lines.append(
                f'    <line x1="{_fmt(x1, precision)}" y1="{_fmt(-y1, precision)}" '
                f'x2="{_fmt(x2, precision)}" y2="{_fmt(-y2, precision)}" />'
            )
        lines.append("  </g>")
    if drawing.dots:
        lines.append(f'  <g fill="{fill}" stroke="none">')
        for dot in drawing.dots:
            x, y = dot.center
            lines.append(
                f'    <circle cx="{_fmt(x, precision)}" cy="{_fmt(-y, precision)}" '
                f'r="{_fmt(dot.radius, precision)}" />'
            )
        lines.append("  </g>")
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def write_svg(drawing: Drawing, path: str | Path, **options) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(to_svg(drawing, **options), encoding="utf-8")
    return out_path


def render_ascii(drawing: Drawing, columns: int = 72, rows: int = 36) -> str:
    """Rasterise a drawing onto a character grid for terminal previews."""
    if drawing.is_empty():
        return ""
    min_x, min_y, max_x, max_y = compute_bounds(drawing)
    span_x = max(max_x - min_x, 1e-9)
    span_y = max(max_y - min_y, 1e-9)
    scale = min((columns - 1) / span_x, (rows - 1) / span_y)
    width = int(span_x * scale) + 1
    height = int(span_y * scale) + 1
    grid = [[" " for _ in range(width)] for _ in range(height)]

    def plot(x: float, y: float, char: str) -> None:
        col = int(round((x - min_x) * scale))
        row = int(round((max_y - y) * scale))
        if 0 <= row < height and 0 <= col < width:
            grid[row][col] = char

    for (x1, y1), (x2, y2) in drawing.segments:
        samples = max(int(math.hypot(x2 - x1, y2 - y1) * scale * 2), 1)
        for i in range(samples + 1):
            t = i / samples
            plot(x1 + (x2 - x1) * t, y1 + (y2 - y1) * t, "#")
    for dot in drawing.dots:
        plot(dot.center[0], dot.center[1], "o")

    return "\n".join("".join(row).rstrip() for row in grid)
