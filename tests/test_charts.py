"""Tests for sensitivity chart geometry and SVG rendering."""

import math
import sys
import pytest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.charts.sensitivity import Padding, Viewport, format_label, layout, render_svg
from src.data.schema import AnalysisDataPoint


SERIES = [
    {"value": 1000, "yield": 4000},
    {"value": 1100, "yield": 4200},
    {"value": 1200, "yield": 4500},
    {"value": 1300, "yield": 4400},
    {"value": 1400, "yield": 4100},
]

VIEWPORT = Viewport(width=350, height=250, padding=Padding(top=20, right=20, bottom=50, left=60))


class TestFormatLabel:
    def test_thousands(self):
        assert format_label(1500) == "1.5k"
        assert format_label(2300) == "2.3k"

    def test_plain(self):
        assert format_label(950) == "950"
        assert format_label(1000) == "1000"
        assert format_label(25.4) == "25"


class TestLayout:
    def test_empty_series_is_degenerate(self):
        chart = layout([], VIEWPORT)
        assert chart.line_path == ""
        assert chart.points == []
        assert chart.x_domain == (0.0, 1.0)
        assert chart.y_domain == (0.0, 1.0)

    def test_x_endpoints_span_chart(self):
        chart = layout(SERIES, VIEWPORT)
        assert chart.points[0][0] == pytest.approx(60)
        assert chart.points[-1][0] == pytest.approx(330)

    def test_domains(self):
        chart = layout(SERIES, VIEWPORT)
        assert chart.x_domain == (1000, 1400)
        assert chart.y_domain[0] == pytest.approx(3950)
        assert chart.y_domain[1] == pytest.approx(4550)

    def test_y_axis_inverted(self):
        chart = layout(SERIES, VIEWPORT)
        ys = [y for _, y in chart.points]
        # Highest yield is drawn highest (smallest pixel y)
        assert min(ys) == ys[2]
        assert max(ys) == ys[0]
        for y in ys:
            assert 20 < y < 200

    def test_equal_yields_map_to_equal_pixel_y(self):
        series = SERIES + [{"value": 1500, "yield": 4200}]
        chart = layout(series, VIEWPORT)
        assert chart.points[1][1] == pytest.approx(chart.points[5][1])

    def test_all_equal_yields_keep_finite_domain(self):
        series = [{"value": v, "yield": 3000} for v in (10, 20, 30)]
        chart = layout(series, VIEWPORT)
        lo, hi = chart.y_domain
        assert math.isfinite(lo) and math.isfinite(hi)
        assert lo < hi
        for x, y in chart.points:
            assert math.isfinite(x) and math.isfinite(y)
            assert y == pytest.approx(20 + 180 / 2)

    def test_zero_yields_keep_finite_domain(self):
        chart = layout([{"value": 1, "yield": 0}, {"value": 2, "yield": 0}], VIEWPORT)
        assert chart.y_domain[0] < chart.y_domain[1]

    def test_single_point(self):
        chart = layout([{"value": 100, "yield": 2000}], VIEWPORT)
        x, y = chart.points[0]
        assert math.isfinite(x) and math.isfinite(y)
        assert chart.line_path.startswith("M ")

    def test_path_follows_input_order(self):
        chart = layout(SERIES, VIEWPORT)
        commands = chart.line_path.split(" ")
        assert commands[0] == "M"
        assert chart.line_path.count("L ") == len(SERIES) - 1
        assert chart.line_path.startswith("M 60 ")

    def test_non_finite_points_are_skipped(self):
        series = SERIES[:2] + [{"value": 1250, "yield": float("nan")}, (float("inf"), 4300)] + SERIES[2:]
        chart = layout(series, VIEWPORT)
        assert chart == layout(SERIES, VIEWPORT)
        assert "nan" not in chart.line_path
        assert "inf" not in chart.line_path

    def test_all_non_finite_is_degenerate(self):
        chart = layout([{"value": float("nan"), "yield": 1}, (2, float("-inf"))], VIEWPORT)
        assert chart.line_path == ""
        assert chart.points == []
        assert chart.y_domain == (0.0, 1.0)

    def test_unsorted_series_is_not_reordered(self):
        series = list(reversed(SERIES))
        chart = layout(series, VIEWPORT)
        assert chart.points[0][0] == pytest.approx(330)

    def test_accepts_models(self):
        models = [AnalysisDataPoint.model_validate(p) for p in SERIES]
        assert layout(models, VIEWPORT) == layout(SERIES, VIEWPORT)

    def test_idempotent(self):
        assert layout(SERIES, VIEWPORT) == layout(SERIES, VIEWPORT)

    def test_ticks(self):
        chart = layout(SERIES, VIEWPORT)
        assert [t.label for t in chart.x_ticks] == ["1000", "1.1k", "1.2k", "1.3k", "1.4k"]
        assert len(chart.y_ticks) == 5
        assert chart.y_ticks[0].position == pytest.approx(200)
        assert chart.y_ticks[-1].position == pytest.approx(20)
        assert all(t.label.endswith("k") for t in chart.y_ticks)

    def test_default_viewport(self):
        chart = layout(SERIES)
        assert chart.points[0][0] == pytest.approx(60)


class TestRenderSvg:
    def test_contains_path_and_points(self):
        chart = layout(SERIES, VIEWPORT)
        svg = render_svg(chart, VIEWPORT, x_label="Rainfall (mm)", color="#3b82f6")
        assert svg.startswith("<svg")
        assert svg.rstrip().endswith("</svg>")
        assert f'd="{chart.line_path}"' in svg
        assert svg.count("<circle") == 5
        assert "Rainfall (mm)" in svg
        assert 'viewBox="0 0 350 250"' in svg

    def test_escapes_labels(self):
        chart = layout(SERIES, VIEWPORT)
        svg = render_svg(chart, VIEWPORT, x_label="<b>&</b>")
        assert "<b>" not in svg
        assert "&lt;b&gt;&amp;&lt;/b&gt;" in svg

    def test_empty_chart_has_no_path(self):
        svg = render_svg(layout([], VIEWPORT), VIEWPORT)
        assert "<path" not in svg
        assert "<circle" not in svg
