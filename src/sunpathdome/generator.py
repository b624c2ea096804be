"""Sun-path line generation — solstice arcs, intermediate declination arcs,
hourly analemmas, and DST transition-day arcs for one location and year.

All helpers are pure functions of a GenerationContext, so the whole output
is a deterministic function of (lat, lon, year, transitions, timezone).
"""

import logging
import math
from collections.abc import Sequence
from datetime import date

from sunpathdome.dst import is_dst_day, standard_offset_and_adjustment
from sunpathdome.models import (
    DSTTransition,
    DstHourLabel,
    DstLine,
    GenerationContext,
    HourLine,
    LabelPoint,
    LabelSide,
    LineKind,
    MonthLine,
    PathLine,
    SkyPoint,
    SolsticeLine,
    TaggedPoint,
)
from sunpathdome.solar import (
    day_of_year,
    days_in_year,
    doy_to_month_day,
    hour_angle_for_clock,
    solar_declination,
    solar_position,
)

logger = logging.getLogger(__name__)

ARC_STEP_MINUTES = 5
HORIZON_TOLERANCE_DEG = 0.5  # Arc ends may dip this far below the horizon
EXTRA_LABEL_HOURS = (9, 15)
INTERMEDIATE_ARC_COUNT = 5
SUMMER_SOLSTICE = (6, 21)
WINTER_SOLSTICE = (12, 21)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clock_label(hours: float) -> str:
    """Format clock hours as "H:MM". Values past 24:00 wrap to the next day."""
    minutes = _round_half_up(hours * 60)
    if minutes > 24 * 60 or minutes < 0:
        minutes %= 24 * 60
    return f"{minutes // 60}:{minutes % 60:02d}"


def _date_label(doy: int, year: int) -> str:
    month, day = doy_to_month_day(doy, year)
    return f"{month}/{day}"


def build_context(
    lat_deg: float,
    lon_deg: float,
    year: int,
    dst_transitions: Sequence[DSTTransition] = (),
    timezone_id: str | None = None,
) -> GenerationContext:
    """Derive the per-request context.

    With a resolvable timezone the standard offset and DST adjustment come
    from pytz. Otherwise clock time is local mean solar time and the DST
    adjustment is the largest shift among the supplied transitions.
    """
    standard: float | None = None
    adjustment = 0.0
    if timezone_id:
        standard, adjustment = standard_offset_and_adjustment(timezone_id, year)
    if standard is None:
        standard = lon_deg / 15.0
        adjustment = max((abs(tr.offset_change_hours) for tr in dst_transitions), default=0.0)

    return GenerationContext(
        lat_deg=lat_deg,
        lon_deg=lon_deg,
        year=year,
        standard_utc_offset_hours=standard,
        dst_adjustment_hours=adjustment,
        is_northern_hemisphere=lat_deg >= 0,
    )


def _point_at(ctx: GenerationContext, doy: int, clock_hours: float) -> SkyPoint:
    return solar_position(
        math.radians(ctx.lat_deg),
        solar_declination(doy),
        hour_angle_for_clock(clock_hours, ctx.clock_correction_hours),
    )


def sample_arc(ctx: GenerationContext, doy: int) -> tuple[SkyPoint, ...]:
    """Sun positions over one day, midnight to midnight standard time.

    Points below -HORIZON_TOLERANCE_DEG are dropped; the small tolerance lets
    the arc meet the horizon instead of stopping just above it.
    """
    min_alt = -math.radians(HORIZON_TOLERANCE_DEG)
    points = (
        _point_at(ctx, doy, minute / 60.0)
        for minute in range(0, 24 * 60 + 1, ARC_STEP_MINUTES)
    )
    return tuple(p for p in points if p.altitude > min_alt)


def noon_point(ctx: GenerationContext, doy: int) -> SkyPoint | None:
    """Solar-noon position of a day, or None if the sun stays down."""
    pos = solar_position(math.radians(ctx.lat_deg), solar_declination(doy), 0.0)
    return pos if pos.altitude > 0 else None


def extra_labels(
    ctx: GenerationContext,
    doy: int,
    label_above: str | None,
    label_below: str | None,
) -> tuple[LabelPoint, ...]:
    """Date labels at the EXTRA_LABEL_HOURS clock times, above the horizon only."""
    labels: list[LabelPoint] = []
    for hour in EXTRA_LABEL_HOURS:
        pos = _point_at(ctx, doy, hour)
        if pos.altitude > 0:
            labels.append(LabelPoint(point=pos, label_above=label_above, label_below=label_below))
    return tuple(labels)


def split_by_dst(tagged: Sequence[TaggedPoint]) -> list[tuple[bool, tuple[SkyPoint, ...]]]:
    """Split tagged points into maximal runs of equal DST status.

    The first point of each new run is also appended to the run before it,
    so adjacent runs share their boundary point exactly. Runs left with a
    single point (only possible at the very end) are dropped; that point is
    already the last point of the previous run.

    Returns:
        List of (is_dst, points) in sweep order.
    """
    runs: list[tuple[bool, list[SkyPoint]]] = []
    for tp in tagged:
        if runs and runs[-1][0] == tp.is_dst:
            runs[-1][1].append(tp.point)
            continue
        if runs:
            runs[-1][1].append(tp.point)
        runs.append((tp.is_dst, [tp.point]))
    return [(is_dst, tuple(points)) for is_dst, points in runs if len(points) >= 2]


def _solstice_doys(year: int) -> tuple[int, int]:
    return (
        day_of_year(date(year, *SUMMER_SOLSTICE)),
        day_of_year(date(year, *WINTER_SOLSTICE)),
    )


def _solstice_lines(ctx: GenerationContext) -> list[SolsticeLine]:
    june_doy, dec_doy = _solstice_doys(ctx.year)
    # The higher arc carries its label below; the top is left to hour labels.
    june_is_high = ctx.is_northern_hemisphere
    lines: list[SolsticeLine] = []
    for doy, is_high in ((june_doy, june_is_high), (dec_doy, not june_is_high)):
        points = sample_arc(ctx, doy)
        if len(points) < 2:
            continue
        label = _date_label(doy, ctx.year)
        above = None if is_high else label
        below = label if is_high else None
        lines.append(
            SolsticeLine(
                points=points,
                label=label,
                label_above=above,
                label_below=below,
                extra_label_points=extra_labels(ctx, doy, above, below),
                mid_label_point=noon_point(ctx, doy),
            )
        )
    return lines


def _intermediate_lines(ctx: GenerationContext) -> list[MonthLine]:
    june_doy, dec_doy = _solstice_doys(ctx.year)
    n_days = days_in_year(ctx.year)
    half_year = (june_doy - dec_doy) % n_days
    parts = INTERMEDIATE_ARC_COUNT + 1

    lines: list[MonthLine] = []
    for k in range(1, parts):
        days_from_winter = _round_half_up(half_year * k / parts)
        ascending = (dec_doy + days_from_winter - 1) % n_days + 1
        descending = (dec_doy - days_from_winter - 1) % n_days + 1

        # Same declination on both dates, so the ascending arc stands for both
        points = sample_arc(ctx, ascending)
        if len(points) < 2:
            continue

        if ctx.is_northern_hemisphere:
            above_doy, below_doy = ascending, descending
        else:
            above_doy, below_doy = descending, ascending
        above = _date_label(above_doy, ctx.year)
        below = _date_label(below_doy, ctx.year)

        lines.append(
            MonthLine(
                points=points,
                label=_date_label(ascending, ctx.year),
                label_above=above,
                label_below=below,
                extra_label_points=extra_labels(ctx, above_doy, above, None)
                + extra_labels(ctx, below_doy, None, below),
                mid_label_point=noon_point(ctx, above_doy),
                mid_label_point_below=noon_point(ctx, below_doy),
            )
        )
    return lines


def _june_is_dst_end(
    ctx: GenerationContext, transitions: Sequence[DSTTransition], june_doy: int, dec_doy: int
) -> bool:
    """Whether the June end of an hour line is read in DST clock time."""
    if transitions:
        if is_dst_day(june_doy, transitions):
            return True
        if is_dst_day(dec_doy, transitions):
            return False
    return ctx.is_northern_hemisphere


def _hour_lines(ctx: GenerationContext, transitions: Sequence[DSTTransition]) -> list[HourLine]:
    lat_rad = math.radians(ctx.lat_deg)
    n_days = days_in_year(ctx.year)
    june_doy, dec_doy = _solstice_doys(ctx.year)
    declinations = [solar_declination(doy) for doy in range(1, n_days + 1)]
    dst_days = [is_dst_day(doy, transitions) for doy in range(1, n_days + 1)]
    june_dst = _june_is_dst_end(ctx, transitions, june_doy, dec_doy)

    lines: list[HourLine] = []
    for hour in range(25):
        hour_angle = hour_angle_for_clock(hour, ctx.clock_correction_hours)
        tagged: list[TaggedPoint] = []
        for decl, is_dst in zip(declinations, dst_days):
            pos = solar_position(lat_rad, decl, hour_angle)
            if pos.altitude > 0:
                tagged.append(TaggedPoint(point=pos, is_dst=is_dst))
        if len(tagged) < 2:
            continue

        std_label = _clock_label(hour)
        dst_label = (
            _clock_label(hour + ctx.dst_adjustment_hours)
            if ctx.dst_adjustment_hours > 0
            else std_label
        )
        june_label, dec_label = (dst_label, std_label) if june_dst else (std_label, dst_label)

        # Label ends sit on the solstice arcs; which one is higher varies by hour
        june_pos = solar_position(lat_rad, declinations[june_doy - 1], hour_angle)
        dec_pos = solar_position(lat_rad, declinations[dec_doy - 1], hour_angle)
        if june_pos.altitude > dec_pos.altitude:
            top, bottom, above, below = june_pos, dec_pos, june_label, dec_label
        else:
            top, bottom, above, below = dec_pos, june_pos, dec_label, june_label

        runs = split_by_dst(tagged)
        label_run = next((i for i, (is_dst, _) in enumerate(runs) if not is_dst), 0)
        for i, (is_dst, points) in enumerate(runs):
            labelled = i == label_run
            lines.append(
                HourLine(
                    points=points,
                    kind=LineKind.HOUR_DST if is_dst else LineKind.HOUR,
                    hour=hour,
                    label=std_label,
                    label_above=above if labelled else None,
                    label_below=below if labelled else None,
                    top_label_point=top if labelled and top.altitude > 0 else None,
                    bottom_label_point=bottom if labelled and bottom.altitude > 0 else None,
                    all_tagged_points=tuple(tagged) if i == 0 else None,
                )
            )
    return lines


def _dst_lines(ctx: GenerationContext, transitions: Sequence[DSTTransition]) -> list[DstLine]:
    lines: list[DstLine] = []
    for tr in transitions:
        points = sample_arc(ctx, tr.doy)
        if len(points) < 2:
            continue

        # Clock reading after the shift: DST after spring-forward, standard after fall-back
        shift = _round_half_up(ctx.dst_adjustment_hours) if tr.spring_forward else 0
        hour_labels: list[DstHourLabel] = []
        for hour in range(25):
            pos = _point_at(ctx, tr.doy, hour)
            after = hour + shift
            if pos.altitude > 0 and 0 <= after <= 24:
                hour_labels.append(DstHourLabel(point=pos, label=_clock_label(after)))

        date_label = f"{tr.month}/{tr.day}"
        lines.append(
            DstLine(
                points=points,
                label=date_label,
                label_above=None if tr.spring_forward else date_label,
                label_below=date_label if tr.spring_forward else None,
                dst_hour_labels=tuple(hour_labels),
                dst_hour_labels_position=(
                    LabelSide.ABOVE if tr.spring_forward else LabelSide.BELOW
                ),
                mid_label_point=noon_point(ctx, tr.doy),
                transition=tr,
            )
        )
    return lines


def generate(
    lat_deg: float,
    lon_deg: float,
    year: int,
    dst_transitions: Sequence[DSTTransition] | None = None,
    timezone_id: str | None = None,
) -> list[PathLine]:
    """Generate every line and label of the sun-path diagram.

    Output order: solstice arcs, intermediate arcs, hour-line runs, DST arcs.
    Lines with fewer than two above-horizon points are omitted rather than
    reported. Latitude/longitude are expected to be in range.

    Args:
        lat_deg: Latitude in degrees (north positive).
        lon_deg: Longitude in degrees (east positive).
        year: Calendar year.
        dst_transitions: Transitions from find_transitions(). None or empty
            means no DST-specific output.
        timezone_id: IANA id used for the standard offset and DST adjustment.

    Returns:
        Ordered list of PathLine variants.
    """
    transitions = tuple(dst_transitions or ())
    ctx = build_context(lat_deg, lon_deg, year, transitions, timezone_id)
    return generate_with_context(ctx, transitions)


def generate_with_context(
    ctx: GenerationContext, transitions: Sequence[DSTTransition] = ()
) -> list[PathLine]:
    """Generate every line for an already-built context.

    Lets callers that also keep the context (see compute_sun_path) derive it
    once, so the lines and the stored context cannot disagree.
    """
    lines: list[PathLine] = [
        *_solstice_lines(ctx),
        *_intermediate_lines(ctx),
        *_hour_lines(ctx, transitions),
        *_dst_lines(ctx, transitions),
    ]
    logger.debug(
        "Generated %d lines for lat=%.4f lon=%.4f year=%d",
        len(lines),
        ctx.lat_deg,
        ctx.lon_deg,
        ctx.year,
    )
    return lines
