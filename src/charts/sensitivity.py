"""
Sensitivity chart renderer: axis domains, linear pixel scales and polyline
layout for one factor's (value, yield) series, plus SVG output.

All functions are pure; the same series and viewport always produce the
same layout.
"""

from dataclasses import dataclass, field, asdict
from html import escape
from typing import Dict, List, Sequence, Tuple

import numpy as np

# Fraction of the yield range added above and below the data
Y_DOMAIN_PADDING = 0.1
Y_TICK_FRACTIONS = (0.0, 0.25, 0.5, 0.75, 1.0)


@dataclass(frozen=True)
class Padding:
    top: float = 20
    right: float = 20
    bottom: float = 50
    left: float = 60


@dataclass(frozen=True)
class Viewport:
    width: float = 350
    height: float = 250
    padding: Padding = field(default_factory=Padding)

    @property
    def chart_width(self) -> float:
        return self.width - self.padding.left - self.padding.right

    @property
    def chart_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom


@dataclass
class Tick:
    position: float
    label: str


@dataclass
class ChartLayout:
    x_domain: Tuple[float, float]
    y_domain: Tuple[float, float]
    line_path: str
    points: List[Tuple[float, float]]
    x_ticks: List[Tick] = field(default_factory=list)
    y_ticks: List[Tick] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


def format_label(value: float) -> str:
    """Axis label: values over 1000 as '1.5k', otherwise as an integer."""
    if value > 1000:
        return f"{value / 1000:.1f}k"
    return f"{value:.0f}"


def _span(lo: float, hi: float) -> float:
    """Width of [lo, hi]; a collapsed range falls back to |hi| (or 1.0)."""
    span = hi - lo
    if span > 0:
        return span
    return abs(hi) or 1.0


def _fmt(coord: float) -> str:
    return f"{round(float(coord), 2):g}"


def _point_values(point) -> Tuple[float, float]:
    # Accepts AnalysisDataPoint models, plain dicts or (value, yield) pairs
    if isinstance(point, dict):
        return float(point["value"]), float(point["yield"])
    if isinstance(point, (tuple, list)):
        return float(point[0]), float(point[1])
    return float(point.value), float(point.yield_)


def layout(series: Sequence, viewport: Viewport = Viewport()) -> ChartLayout:
    """
    Compute the chart geometry for an ordered sensitivity series.

    The series is drawn in input order; it is not sorted here. Points with a
    NaN or infinite coordinate are skipped.
    """
    empty = ChartLayout(x_domain=(0.0, 1.0), y_domain=(0.0, 1.0), line_path="", points=[])
    if not series:
        return empty

    data = np.array([_point_values(p) for p in series], dtype=float)
    data = data[np.isfinite(data).all(axis=1)]
    if len(data) == 0:
        return empty
    values, yields = data[:, 0], data[:, 1]

    x_min, x_max = float(values.min()), float(values.max())
    y_min, y_max = float(yields.min()), float(yields.max())
    y_range = _span(y_min, y_max)
    y_domain_min = y_min - y_range * Y_DOMAIN_PADDING
    y_domain_max = y_max + y_range * Y_DOMAIN_PADDING

    pad = viewport.padding
    chart_width = viewport.chart_width
    chart_height = viewport.chart_height

    xs = pad.left + (values - x_min) / _span(x_min, x_max) * chart_width
    ys = pad.top + chart_height - (yields - y_domain_min) / (y_domain_max - y_domain_min) * chart_height

    points = [(float(x), float(y)) for x, y in zip(xs, ys)]
    line_path = " ".join(
        f"{'M' if i == 0 else 'L'} {_fmt(x)} {_fmt(y)}" for i, (x, y) in enumerate(points)
    )

    x_ticks = [Tick(position=x, label=format_label(v)) for (x, _), v in zip(points, values)]
    y_ticks = [
        Tick(
            position=pad.top + chart_height * (1 - frac),
            label=format_label(y_domain_min + (y_domain_max - y_domain_min) * frac),
        )
        for frac in Y_TICK_FRACTIONS
    ]

    return ChartLayout(
        x_domain=(x_min, x_max),
        y_domain=(y_domain_min, y_domain_max),
        line_path=line_path,
        points=points,
        x_ticks=x_ticks,
        y_ticks=y_ticks,
    )


def render_svg(
    chart: ChartLayout,
    viewport: Viewport = Viewport(),
    x_label: str = "",
    y_label: str = "Predicted Yield (kg/ha)",
    color: str = "#3b82f6",
) -> str:
    """Render a computed layout as a standalone SVG document."""
    pad = viewport.padding
    chart_width = viewport.chart_width
    chart_height = viewport.chart_height
    bottom = pad.top + chart_height
    stroke = escape(color, quote=True)

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {_fmt(viewport.width)} {_fmt(viewport.height)}">',
        f'<line x1="{_fmt(pad.left)}" y1="{_fmt(bottom)}" x2="{_fmt(pad.left + chart_width)}" '
        f'y2="{_fmt(bottom)}" stroke="currentColor" stroke-width="0.5" />',
        f'<line x1="{_fmt(pad.left)}" y1="{_fmt(pad.top)}" x2="{_fmt(pad.left)}" '
        f'y2="{_fmt(bottom)}" stroke="currentColor" stroke-width="0.5" />',
    ]

    for tick in chart.y_ticks:
        parts.append(
            f'<text x="{_fmt(pad.left - 8)}" y="{_fmt(tick.position + 4)}" text-anchor="end" '
            f'font-size="10">{escape(tick.label)}</text>'
        )
    for tick in chart.x_ticks:
        parts.append(
            f'<text x="{_fmt(tick.position)}" y="{_fmt(bottom + 15)}" text-anchor="middle" '
            f'font-size="10">{escape(tick.label)}</text>'
        )

    parts.append(
        f'<text x="{_fmt(pad.left + chart_width / 2)}" y="{_fmt(viewport.height - 10)}" '
        f'text-anchor="middle" font-size="12">{escape(x_label)}</text>'
    )
    parts.append(
        f'<text transform="rotate(-90) translate(-{_fmt(pad.top + chart_height / 2)}, 15)" '
        f'text-anchor="middle" font-size="12">{escape(y_label)}</text>'
    )

    if chart.line_path:
        parts.append(f'<path d="{chart.line_path}" fill="none" stroke="{stroke}" stroke-width="2" />')
    for x, y in chart.points:
        parts.append(f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="3" fill="{stroke}" />')

    parts.append("</svg>")
    return "\n".join(parts)
