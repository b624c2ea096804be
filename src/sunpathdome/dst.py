"""Daylight-saving transition detection via pytz UTC-offset lookups."""

import logging
from datetime import date, datetime, timedelta

from pytz import UnknownTimeZoneError, timezone

from sunpathdome.models import DSTTransition
from sunpathdome.solar import days_in_year

logger = logging.getLogger(__name__)

OFFSET_EPSILON_HOURS = 0.01  # Tolerates fractional legacy offsets


class TimezoneLookupError(Exception):
    """The timezone id could not be resolved."""


def utc_offset_hours(timezone_id: str, day: date) -> float:
    """UTC offset in hours for a timezone at local noon of a given day.

    Raises:
        TimezoneLookupError: If pytz does not know the timezone id.
    """
    try:
        local_tz = timezone(timezone_id)
    except UnknownTimeZoneError as e:
        raise TimezoneLookupError(f"Unknown timezone: {timezone_id}") from e
    noon = local_tz.localize(datetime(day.year, day.month, day.day, 12))
    offset = noon.utcoffset()
    assert offset is not None
    return offset.total_seconds() / 3600.0


def find_transitions(timezone_id: str, year: int) -> list[DSTTransition]:
    """Scan a calendar year for days on which the UTC offset changes.

    Each day's offset at local noon is compared to the previous day's. A
    change larger than OFFSET_EPSILON_HOURS is a transition; it springs
    forward when the offset increased. Runs 365/366 lookups, so call it once
    per location/year, not per frame.

    Args:
        timezone_id: IANA timezone id (e.g. "America/Toronto").
        year: Calendar year to scan.

    Returns:
        Transitions in calendar order. Empty if the zone has no DST or
        cannot be resolved.
    """
    start = date(year, 1, 1)
    try:
        prev_offset = utc_offset_hours(timezone_id, start)
        transitions: list[DSTTransition] = []
        # Indexed by doy; stepping past Dec 31 overflows date in year 9999
        for doy in range(2, days_in_year(year) + 1):
            day = start + timedelta(days=doy - 1)
            offset = utc_offset_hours(timezone_id, day)
            change = offset - prev_offset
            if abs(change) > OFFSET_EPSILON_HOURS:
                transitions.append(
                    DSTTransition(
                        doy=doy,
                        month=day.month,
                        day=day.day,
                        spring_forward=change > 0,
                        offset_change_hours=change,
                    )
                )
            prev_offset = offset
    except TimezoneLookupError:
        logger.warning("No DST data for %r; treating as no DST", timezone_id)
        return []

    logger.debug("%s %d: %d DST transitions", timezone_id, year, len(transitions))
    return transitions


def standard_offset_and_adjustment(
    timezone_id: str, year: int
) -> tuple[float | None, float]:
    """Standard UTC offset and DST adjustment for a zone, in hours.

    The mid-January and mid-July offsets are compared: the smaller one is
    standard time, the difference is the DST adjustment. Works for both
    hemispheres.

    Returns:
        (standard_offset, adjustment), or (None, 0.0) if the zone is unknown.
    """
    try:
        winter = utc_offset_hours(timezone_id, date(year, 1, 15))
        summer = utc_offset_hours(timezone_id, date(year, 7, 15))
    except TimezoneLookupError:
        logger.warning("Unknown timezone %r; using local mean solar time", timezone_id)
        return None, 0.0
    standard = min(winter, summer)
    return standard, max(winter, summer) - standard


def is_dst_day(doy: int, transitions: list[DSTTransition] | tuple[DSTTransition, ...]) -> bool:
    """Whether clocks are shifted on a given day of year.

    The status is set by the last transition on or before the day. Before the
    first transition it is the opposite of that transition's direction, which
    covers southern-hemisphere years that open in DST.
    """
    if not transitions:
        return False
    ordered = sorted(transitions, key=lambda tr: tr.doy)
    status = not ordered[0].spring_forward
    for tr in ordered:
        if tr.doy > doy:
            break
        status = tr.spring_forward
    return status
