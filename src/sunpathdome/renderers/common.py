"""Styling and label layout shared by the renderers."""

from sunpathdome.models import DstLine, HourLine, LabelSide, LineKind, SkyPoint, SunPathData

# (color, alpha, linewidth) per line kind
LINE_STYLES: dict[LineKind, tuple[str, float, float]] = {
    LineKind.SOLSTICE: ("orange", 0.95, 3.0),
    LineKind.MONTH: ("gold", 0.7, 1.5),
    LineKind.HOUR: ("white", 0.45, 1.0),
    LineKind.HOUR_DST: ("#ffb74d", 0.6, 1.0),
    LineKind.DST: ("cyan", 0.85, 2.5),
}


def collect_labels(sun_path: SunPathData) -> list[tuple[SkyPoint, str, bool, str]]:
    """Flatten every label of every line into (point, text, above, color).

    Hour lines are labelled at their solstice ends, date arcs at solar noon
    and at the extra clock-time positions, DST arcs at each shifted hour.
    """
    labels: list[tuple[SkyPoint, str, bool, str]] = []

    def add(point: SkyPoint | None, text: str | None, above: bool, color: str) -> None:
        if point is not None and text:
            labels.append((point, text, above, color))

    for line in sun_path.lines:
        color = LINE_STYLES[line.kind][0]
        if isinstance(line, HourLine):
            add(line.top_label_point, line.label_above, True, color)
            add(line.bottom_label_point, line.label_below, False, color)
            continue

        below_point = getattr(line, "mid_label_point_below", None) or line.mid_label_point
        add(line.mid_label_point, line.label_above, True, color)
        add(below_point, line.label_below, False, color)

        if isinstance(line, DstLine):
            above = line.dst_hour_labels_position is LabelSide.ABOVE
            for hour_label in line.dst_hour_labels:
                add(hour_label.point, hour_label.label, above, color)
            continue
        for extra in line.extra_label_points:
            add(extra.point, extra.label_above, True, color)
            add(extra.point, extra.label_below, False, color)
    return labels
