"""Tests for the matplotlib and plotly renderers."""

from __future__ import annotations

import math

import matplotlib.pyplot as plt
import pytest
from matplotlib.figure import Figure

from sunpathdome.generator import build_context, generate
from sunpathdome.models import DSTTransition, SkyPoint, SunPathData
from sunpathdome.renderers.common import collect_labels
from sunpathdome.renderers.plotly_3d import DOME_RADIUS, render_dome_figure
from sunpathdome.renderers.static import render_static_chart, save_static_chart

_TRANSITIONS = (
    DSTTransition(doy=70, month=3, day=10, spring_forward=True, offset_change_hours=1.0),
    DSTTransition(doy=308, month=11, day=3, spring_forward=False, offset_change_hours=-1.0),
)


@pytest.fixture(scope="module")
def sun_path() -> SunPathData:
    return SunPathData(
        context=build_context(43.47, -80.54, 2024, _TRANSITIONS),
        timezone_id=None,
        transitions=_TRANSITIONS,
        lines=tuple(generate(43.47, -80.54, 2024, _TRANSITIONS)),
    )


def test_collect_labels_covers_every_label_kind(sun_path: SunPathData) -> None:
    """Date, hour, and shifted DST labels are all present."""
    texts = {text for _, text, _, _ in collect_labels(sun_path)}

    assert {"6/21", "12/21", "3/10", "11/3", "12:00", "13:00"} <= texts


def test_collect_labels_sides(sun_path: SunPathData) -> None:
    """June's date label sits below its arc in the north."""
    june = [above for _, text, above, _ in collect_labels(sun_path) if text == "6/21"]

    assert june and not any(june)


def test_render_static_chart(sun_path: SunPathData) -> None:
    """The polar chart draws at least one matplotlib line per path line."""
    fig = render_static_chart(sun_path, chart_size=4)
    try:
        assert isinstance(fig, Figure)
        assert len(fig.axes[0].lines) >= len(sun_path.lines)
    finally:
        plt.close(fig)


def test_save_static_chart(sun_path: SunPathData, tmp_path) -> None:
    """The PNG is written to the requested path."""
    out = save_static_chart(sun_path, tmp_path / "charts" / "waterloo.png")

    assert out.exists()
    assert out.stat().st_size > 0


def test_render_dome_figure_traces(sun_path: SunPathData) -> None:
    """One trace per line, plus labels, the sun marker, and the horizon ring."""
    sun = SkyPoint(math.radians(30.0), math.radians(180.0))
    fig = render_dome_figure(sun_path, sun=sun)
    names = [trace.name for trace in fig.data]

    assert len(fig.data) == len(sun_path.lines) + 3
    assert names[-3:] == ["labels", "sun", "horizon"]
    assert fig.data[-2].z[0] == pytest.approx(DOME_RADIUS * 0.5)


def test_render_dome_figure_hides_sun_below_horizon(sun_path: SunPathData) -> None:
    """A set sun is not drawn."""
    fig = render_dome_figure(sun_path, sun=SkyPoint(-0.2, 1.0))

    assert "sun" not in [trace.name for trace in fig.data]
