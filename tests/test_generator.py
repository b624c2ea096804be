"""Tests for sun-path line generation."""

from __future__ import annotations

import math
from collections import defaultdict

import pytest

from sunpathdome.generator import (
    HORIZON_TOLERANCE_DEG,
    build_context,
    generate,
    generate_with_context,
    sample_arc,
    split_by_dst,
)
from sunpathdome.models import (
    DSTTransition,
    DstLine,
    HourLine,
    LabelSide,
    LineKind,
    MonthLine,
    SkyPoint,
    SolsticeLine,
    TaggedPoint,
)
from sunpathdome.solar import solar_declination, solar_position

WATERLOO = (43.47, -80.54)

SYNTHETIC_TRANSITIONS = [
    DSTTransition(doy=74, month=3, day=15, spring_forward=True, offset_change_hours=1.0),
    DSTTransition(doy=309, month=11, day=5, spring_forward=False, offset_change_hours=-1.0),
]


def _of_kind(lines: list, kind: LineKind) -> list:
    return [line for line in lines if line.kind is kind]


def _hour_groups(lines: list) -> dict[int, list[HourLine]]:
    groups: dict[int, list[HourLine]] = defaultdict(list)
    for line in lines:
        if isinstance(line, HourLine):
            groups[line.hour].append(line)
    return groups


def test_waterloo_without_dst_info() -> None:
    """2 solstice arcs, 5 month arcs, hour lines only in standard time, no DST arcs."""
    lines = generate(*WATERLOO, 2024)

    assert len(_of_kind(lines, LineKind.SOLSTICE)) == 2
    assert len(_of_kind(lines, LineKind.MONTH)) == 5
    assert _of_kind(lines, LineKind.HOUR_DST) == []
    assert _of_kind(lines, LineKind.DST) == []
    assert 0 < len(_hour_groups(lines)) <= 25
    assert all(len(group) == 1 for group in _hour_groups(lines).values())


def test_output_order_and_minimum_points() -> None:
    """Lines come grouped by kind in generation order, each with at least two points."""
    lines = generate(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS)
    order = [LineKind.SOLSTICE, LineKind.MONTH, LineKind.HOUR, LineKind.DST]
    ranks = [order.index(LineKind.HOUR if l.kind is LineKind.HOUR_DST else l.kind) for l in lines]

    assert ranks == sorted(ranks)
    assert all(len(line.points) >= 2 for line in lines)


@pytest.mark.parametrize("lat", [-66.0, -33.87, 0.0, 43.47, 60.0, 78.0])
def test_points_stay_in_range(lat: float) -> None:
    """Azimuths in [0, 2pi), altitudes in (-pi/2, pi/2], arcs clipped at the horizon tolerance."""
    lines = generate(lat, 10.0, 2023, SYNTHETIC_TRANSITIONS)
    min_alt = -math.radians(HORIZON_TOLERANCE_DEG)

    for line in lines:
        for p in line.points:
            assert 0.0 <= p.azimuth < 2 * math.pi
            assert -math.pi / 2 < p.altitude <= math.pi / 2
            assert p.altitude > min_alt
            if isinstance(line, HourLine):
                assert p.altitude > 0


def test_solstice_labels_northern_hemisphere() -> None:
    """North: the high June arc is labelled below, December above."""
    june, dec = _of_kind(generate(*WATERLOO, 2023), LineKind.SOLSTICE)

    assert isinstance(june, SolsticeLine)
    assert (june.label, june.label_above, june.label_below) == ("6/21", None, "6/21")
    assert (dec.label, dec.label_above, dec.label_below) == ("12/21", "12/21", None)
    assert len(june.extra_label_points) == 2
    assert all(e.label_below == "6/21" and e.label_above is None for e in june.extra_label_points)
    assert june.mid_label_point is not None


def test_solstice_labels_southern_hemisphere() -> None:
    """South: the assignment is mirrored."""
    june, dec = _of_kind(generate(-33.87, 151.21, 2023), LineKind.SOLSTICE)

    assert (june.label_above, june.label_below) == ("6/21", None)
    assert (dec.label_above, dec.label_below) == (None, "12/21")


def test_intermediate_arc_labels_both_dates() -> None:
    """Each month arc names both dates sharing its declination, swapped by hemisphere."""
    north = _of_kind(generate(*WATERLOO, 2023), LineKind.MONTH)
    south = _of_kind(generate(-33.87, 151.21, 2023), LineKind.MONTH)

    assert isinstance(north[0], MonthLine)
    assert (north[0].label, north[0].label_above, north[0].label_below) == ("1/20", "1/20", "11/21")
    assert (south[0].label, south[0].label_above, south[0].label_below) == ("1/20", "11/21", "1/20")


def test_intermediate_arc_extra_and_mid_labels_per_date() -> None:
    """Extra 9:00/15:00 labels and noon labels are computed per date."""
    line = _of_kind(generate(*WATERLOO, 2023), LineKind.MONTH)[0]

    above = [e for e in line.extra_label_points if e.label_above]
    below = [e for e in line.extra_label_points if e.label_below]
    assert [e.label_above for e in above] == ["1/20", "1/20"]
    assert [e.label_below for e in below] == ["11/21", "11/21"]
    assert line.mid_label_point is not None
    assert line.mid_label_point_below is not None
    assert line.mid_label_point != line.mid_label_point_below


def test_intermediate_arcs_use_ascending_date() -> None:
    """The arc shape comes from the ascending date."""
    ctx = build_context(*WATERLOO, 2023)
    lines = _of_kind(generate(*WATERLOO, 2023), LineKind.MONTH)

    assert lines[0].points == sample_arc(ctx, 20)


def test_hemisphere_symmetry_of_noon_altitudes() -> None:
    """June noon at +L matches December noon at -L."""
    north = _of_kind(generate(40.0, 0.0, 2023), LineKind.SOLSTICE)
    south = _of_kind(generate(-40.0, 0.0, 2023), LineKind.SOLSTICE)

    assert north[0].mid_label_point.altitude == pytest.approx(
        south[1].mid_label_point.altitude, abs=1e-9
    )
    assert north[1].mid_label_point.altitude == pytest.approx(
        south[0].mid_label_point.altitude, abs=1e-9
    )


def test_polar_night_omits_december_arc() -> None:
    """Arcs that never clear the horizon are silently dropped."""
    lines = generate(85.0, 0.0, 2023)
    solstice = _of_kind(lines, LineKind.SOLSTICE)

    assert [line.label for line in solstice] == ["6/21"]
    assert len(_of_kind(lines, LineKind.MONTH)) < 5


def test_hour_line_splits_at_dst_boundaries() -> None:
    """Noon crosses both transitions: standard, DST, standard, sharing boundary points."""
    lines = generate(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS)
    noon = _hour_groups(lines)[12]

    assert [line.kind for line in noon] == [LineKind.HOUR, LineKind.HOUR_DST, LineKind.HOUR]
    assert noon[0].points[-1] == noon[1].points[0]
    assert noon[1].points[-1] == noon[2].points[0]
    assert len(noon[0].points) == 74  # days 1-73 plus the day-74 boundary
    assert len(noon[1].points) == 236  # days 74-308 plus the day-309 boundary


def test_split_segments_reproduce_unsplit_sweep() -> None:
    """Concatenated runs minus shared boundaries equal the unsplit hourly sweep."""
    lines = generate(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS)
    lat = math.radians(WATERLOO[0])

    for hour, group in _hour_groups(lines).items():
        merged = list(group[0].points)
        for line in group[1:]:
            assert line.points[0] == merged[-1]
            merged.extend(line.points[1:])

        # No timezone: clock time is mean solar time
        hour_angle = math.radians((hour - 12) * 15.0)
        expected = [
            p
            for p in (solar_position(lat, solar_declination(d), hour_angle) for d in range(1, 366))
            if p.altitude > 0
        ]
        assert merged == expected
        assert [tp.point for tp in group[0].all_tagged_points] == expected


def test_hour_lines_crossing_transitions_have_both_kinds() -> None:
    """Any hour whose sweep spans both statuses yields both Hour and Hour-DST runs."""
    lines = generate(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS)

    for group in _hour_groups(lines).values():
        statuses = {tp.is_dst for tp in group[0].all_tagged_points}
        kinds = {line.kind for line in group}
        if statuses == {False, True}:
            assert kinds == {LineKind.HOUR, LineKind.HOUR_DST}


def test_hour_line_labels_only_on_first_standard_run() -> None:
    """Labels and endpoint markers appear once per hour; tagged points only on the first run."""
    lines = generate(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS)
    noon = _hour_groups(lines)[12]

    assert noon[0].label_above == "13:00"  # June end is higher and in DST
    assert noon[0].label_below == "12:00"
    assert noon[0].top_label_point is not None
    assert noon[0].top_label_point.altitude > noon[0].bottom_label_point.altitude
    assert noon[0].all_tagged_points is not None
    for line in noon[1:]:
        assert line.label_above is None
        assert line.label_below is None
        assert line.top_label_point is None
        assert line.all_tagged_points is None


def test_hour_line_labels_without_dst_adjustment() -> None:
    """With no DST both ends read standard time."""
    noon = _hour_groups(generate(*WATERLOO, 2023))[12][0]

    assert (noon.label, noon.label_above, noon.label_below) == ("12:00", "12:00", "12:00")


def test_hour_line_dst_label_goes_to_southern_summer_end() -> None:
    """South: December is the DST end and the higher one at noon."""
    transitions = [
        DSTTransition(doy=92, month=4, day=2, spring_forward=False, offset_change_hours=-1.0),
        DSTTransition(doy=274, month=10, day=1, spring_forward=True, offset_change_hours=1.0),
    ]
    noon = _hour_groups(generate(-33.87, 151.21, 2023, transitions))[12]

    # The year opens in DST, so labels move to the first standard-time run
    assert [line.kind for line in noon] == [LineKind.HOUR_DST, LineKind.HOUR, LineKind.HOUR_DST]
    assert noon[0].label_above is None
    assert noon[0].all_tagged_points is not None
    assert noon[1].label_above == "13:00"
    assert noon[1].label_below == "12:00"


def test_leap_year_adds_one_sample() -> None:
    """The noon analemma has 366 samples in 2024 and 365 in 2023."""
    noon_2023 = _hour_groups(generate(*WATERLOO, 2023))[12][0]
    noon_2024 = _hour_groups(generate(*WATERLOO, 2024))[12][0]

    assert len(noon_2023.points) == 365
    assert len(noon_2024.points) == 366
    assert noon_2023.points[0].altitude == pytest.approx(noon_2024.points[0].altitude)


def test_dst_arcs_spring_and_fall() -> None:
    """Spring arcs label the date below and shifted hours above; fall arcs the reverse."""
    dst_lines = _of_kind(generate(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS), LineKind.DST)
    spring, fall = dst_lines

    assert isinstance(spring, DstLine)
    assert (spring.label, spring.label_above, spring.label_below) == ("3/15", None, "3/15")
    assert spring.dst_hour_labels_position is LabelSide.ABOVE
    assert "13:00" in [hl.label for hl in spring.dst_hour_labels]

    assert (fall.label, fall.label_above, fall.label_below) == ("11/5", "11/5", None)
    assert fall.dst_hour_labels_position is LabelSide.BELOW
    assert "12:00" in [hl.label for hl in fall.dst_hour_labels]

    for line in dst_lines:
        for hl in line.dst_hour_labels:
            assert hl.point.altitude > 0
            assert 0 <= int(hl.label.split(":")[0]) <= 24


def test_empty_transition_list_omits_dst_output() -> None:
    """An empty list behaves like no DST information."""
    assert generate(*WATERLOO, 2023, []) == generate(*WATERLOO, 2023)


def test_generate_is_deterministic() -> None:
    """Identical inputs give identical output."""
    first = generate(*WATERLOO, 2024, SYNTHETIC_TRANSITIONS)
    second = generate(*WATERLOO, 2024, SYNTHETIC_TRANSITIONS)

    assert first == second


def test_generate_with_real_timezone() -> None:
    """Toronto: standard offset -5h, DST +1h, labels shifted by the clock correction."""
    ctx = build_context(*WATERLOO, 2023, timezone_id="America/Toronto")

    assert ctx.standard_utc_offset_hours == -5.0
    assert ctx.dst_adjustment_hours == 1.0
    assert ctx.clock_correction_hours == pytest.approx(-5.0 + 80.54 / 15.0)

    lines = generate(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS, "America/Toronto")
    assert len(_of_kind(lines, LineKind.DST)) == 2
    assert _of_kind(lines, LineKind.HOUR_DST)


def test_generate_with_context_matches_generate() -> None:
    """Lines built from a prepared context equal those from the coordinate entry point."""
    ctx = build_context(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS, "America/Toronto")

    assert generate_with_context(ctx, SYNTHETIC_TRANSITIONS) == generate(
        *WATERLOO, 2023, SYNTHETIC_TRANSITIONS, "America/Toronto"
    )


def test_unknown_timezone_falls_back_to_solar_time() -> None:
    """An unresolvable zone behaves as if no zone was supplied."""
    assert generate(*WATERLOO, 2023, None, "Mars/Olympus_Mons") == generate(*WATERLOO, 2023)


def test_build_context_without_timezone_uses_transitions() -> None:
    """Without a zone, clock time is mean solar time and the shift comes from the transitions."""
    ctx = build_context(*WATERLOO, 2023, SYNTHETIC_TRANSITIONS)

    assert ctx.clock_correction_hours == pytest.approx(0.0)
    assert ctx.dst_adjustment_hours == 1.0
    assert ctx.is_northern_hemisphere


def test_split_by_dst_shares_boundaries() -> None:
    """Runs share their boundary point; a trailing one-point run is dropped."""
    pts = [SkyPoint(0.1 * i, 0.2 * i) for i in range(6)]
    flags = [False, False, True, True, False, True]
    runs = split_by_dst([TaggedPoint(p, f) for p, f in zip(pts, flags)])

    assert runs == [
        (False, (pts[0], pts[1], pts[2])),
        (True, (pts[2], pts[3], pts[4])),
        (False, (pts[4], pts[5])),
    ]


def test_split_by_dst_single_status() -> None:
    """Uniform status gives one run with every point."""
    pts = [SkyPoint(0.1 * i, 0.2 * i) for i in range(4)]
    runs = split_by_dst([TaggedPoint(p, False) for p in pts])

    assert runs == [(False, tuple(pts))]
