"""Matplotlib static PNG renderer — polar sky chart of the sun-path diagram."""

import math
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from sunpathdome.models import SkyPoint, SunPathData
from sunpathdome.renderers.common import LINE_STYLES, collect_labels

_ROOT = Path(__file__).parent.parent.parent.parent


def _polar(points: tuple[SkyPoint, ...] | list[SkyPoint]) -> tuple[np.ndarray, np.ndarray]:
    """Azimuth as theta, zenith distance in degrees as r (0 at zenith, 90 at horizon)."""
    theta = np.array([p.azimuth for p in points])
    r = 90.0 - np.degrees([p.altitude for p in points])
    return theta, np.clip(r, 0.0, 90.0)


def render_static_chart(sun_path: SunPathData, chart_size: int = 10) -> Figure:
    """Render SunPathData as a polar sky chart (North up, East clockwise).

    Args:
        sun_path: Fully computed sun-path data.
        chart_size: Output image size in inches.

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(
        figsize=(chart_size, chart_size), subplot_kw={"projection": "polar"}
    )
    fig.patch.set_facecolor("black")
    ax.set_facecolor("#0d1b35")
    ax.set_theta_zero_location("N")
    ax.set_theta_direction(-1)
    ax.set_rlim(0, 90)
    ax.set_rticks([15, 30, 45, 60, 75])
    ax.set_yticklabels([])
    ax.set_xticks(np.radians([0, 90, 180, 270]))
    ax.set_xticklabels(["N", "E", "S", "W"], color="#aaaaaa")
    ax.grid(color="#334466", linewidth=0.5)

    for line in sun_path.lines:
        color, alpha, width = LINE_STYLES[line.kind]
        theta, r = _polar(line.points)
        # Split where the path crosses North, otherwise plot draws a chord across the chart
        jumps = np.where(np.abs(np.diff(theta)) > math.pi)[0] + 1
        for t_seg, r_seg in zip(np.split(theta, jumps), np.split(r, jumps)):
            ax.plot(t_seg, r_seg, color=color, alpha=alpha, linewidth=width)

    for point, text, above, color in collect_labels(sun_path):
        theta, r = _polar([point])
        ax.annotate(
            text,
            xy=(theta[0], r[0]),
            xytext=(0, 8 if above else -8),
            textcoords="offset points",
            ha="center",
            va="bottom" if above else "top",
            color=color,
            fontsize=7,
            fontfamily="monospace",
        )

    return fig


def save_static_chart(sun_path: SunPathData, output_path: Path | None = None) -> Path:
    """Save SunPathData as a PNG file.

    Args:
        sun_path: Fully computed sun-path data.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        ctx = sun_path.context
        filename = f"sunpath__{ctx.lat_deg:.4f}_{ctx.lon_deg:.4f}__{ctx.year}.png"
        output_path = _ROOT / "results" / filename

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(sun_path)
    fig.savefig(output_path, facecolor="black")
    plt.close(fig)
    return output_path
