"""Plotly 3D sky-dome renderer.

Every line is placed on a hemisphere of radius DOME_RADIUS centred on the
observer, in local East-North-Up coordinates (x=East, y=North, z=Up).
"""

import numpy as np
import plotly.graph_objects as go

from sunpathdome.models import SkyPoint, SunPathData
from sunpathdome.projector import to_tangent_plane, to_tangent_plane_array
from sunpathdome.renderers.common import LINE_STYLES, collect_labels

DOME_RADIUS = 500.0  # Metres; large enough to read as "the sky" around a building
_BG = "#050a1a"
_SUN_COLOR = "#ffd54f"
_LABEL_LIFT = 0.03  # Radians nudged up/down for above/below labels


def render_dome_figure(sun_path: SunPathData, sun: SkyPoint | None = None) -> go.Figure:
    """Render SunPathData as an interactive 3D sky dome.

    Args:
        sun_path: Fully computed sun-path data.
        sun: Current sun position. Drawn as a marker when above the horizon.

    Returns:
        Plotly Figure object.
    """
    traces: list[go.Scatter3d] = []
    for line in sun_path.lines:
        color, alpha, width = LINE_STYLES[line.kind]
        enu = to_tangent_plane_array(line.points, DOME_RADIUS)
        traces.append(
            go.Scatter3d(
                x=enu[:, 0],
                y=enu[:, 1],
                z=enu[:, 2],
                mode="lines",
                line=dict(color=color, width=width * 2),
                opacity=alpha,
                hoverinfo="skip",
                name=line.kind.value,
                showlegend=False,
            )
        )

    labels = collect_labels(sun_path)
    if labels:
        # Above labels sit slightly higher on the dome, below labels slightly lower
        lifted = [
            SkyPoint(
                altitude=p.altitude + (_LABEL_LIFT if above else -_LABEL_LIFT),
                azimuth=p.azimuth,
            )
            for p, _, above, _ in labels
        ]
        enu = to_tangent_plane_array(lifted, DOME_RADIUS)
        traces.append(
            go.Scatter3d(
                x=enu[:, 0],
                y=enu[:, 1],
                z=enu[:, 2],
                mode="text",
                text=[text for _, text, _, _ in labels],
                textfont=dict(color=[c for _, _, _, c in labels], size=11, family="monospace"),
                hoverinfo="skip",
                name="labels",
                showlegend=False,
            )
        )

    if sun is not None and sun.altitude > 0:
        east, north, up = to_tangent_plane(sun, DOME_RADIUS)
        traces.append(
            go.Scatter3d(
                x=[east],
                y=[north],
                z=[up],
                mode="markers",
                marker=dict(size=10, color=_SUN_COLOR),
                hoverinfo="skip",
                name="sun",
                showlegend=False,
            )
        )

    # Horizon ring
    ring = np.linspace(0.0, 2.0 * np.pi, 181)
    traces.append(
        go.Scatter3d(
            x=DOME_RADIUS * np.sin(ring),
            y=DOME_RADIUS * np.cos(ring),
            z=np.zeros_like(ring),
            mode="lines",
            line=dict(color="#334466", width=2),
            hoverinfo="skip",
            name="horizon",
            showlegend=False,
        )
    )

    fig = go.Figure(data=traces)
    hidden = dict(visible=False, range=[-DOME_RADIUS, DOME_RADIUS])
    fig.update_layout(
        paper_bgcolor=_BG,
        margin=dict(l=0, r=0, t=0, b=0),
        scene=dict(
            xaxis=hidden,
            yaxis=hidden,
            zaxis=dict(visible=False, range=[-0.05 * DOME_RADIUS, DOME_RADIUS]),
            aspectmode="manual",
            aspectratio=dict(x=1, y=1, z=0.525),
            bgcolor=_BG,
        ),
    )
    return fig
