"""Solar position math — declination, hour angle, altitude and azimuth.

The generator uses the single-harmonic declination approximation
(error up to ~0.3°), which is fine for drawing a sun-path diagram but not
for ephemeris work. For the live sun marker a skyfield-backed model can be
swapped in through the ``SolarModel`` protocol.
"""

import math
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Protocol

from skyfield.api import Loader, wgs84

from sunpathdome.models import SkyPoint

OBLIQUITY_DEG = 23.4393
EPHEMERIS_FILE = "de421.bsp"

_ROOT = Path(__file__).parent.parent.parent
_TAU = 2.0 * math.pi


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4 and not by 100, unless divisible by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def day_of_year(d: date) -> int:
    """1-based day of year."""
    return d.timetuple().tm_yday


def doy_to_month_day(doy: int, year: int) -> tuple[int, int]:
    """Convert a 1-based day of year to (month, day)."""
    d = date(year, 1, 1) + timedelta(days=doy - 1)
    return d.month, d.day


def solar_declination(doy: int) -> float:
    """Solar declination in radians for a day of year."""
    return math.radians(OBLIQUITY_DEG) * math.sin(2.0 * math.pi * (doy - 81) / 365.0)


def hour_angle_for_clock(clock_hours: float, clock_correction_hours: float) -> float:
    """Hour angle in radians for a standard clock time.

    Args:
        clock_hours: Standard (non-DST) clock time in hours, 0-24.
        clock_correction_hours: Standard clock time minus local mean solar time.

    Returns:
        Hour angle in radians, 0 at solar noon, negative in the morning.
    """
    return math.radians((clock_hours - 12.0 - clock_correction_hours) * 15.0)


def _normalize_hour_angle(hour_angle: float) -> float:
    """Wrap to (-pi, pi] so the afternoon test sees the right half-day."""
    wrapped = math.fmod(hour_angle + math.pi, _TAU)
    if wrapped <= 0.0:
        wrapped += _TAU
    return wrapped - math.pi


def solar_position(lat_rad: float, decl_rad: float, hour_angle_rad: float) -> SkyPoint:
    """Compute altitude/azimuth of the sun.

    Args:
        lat_rad: Observer latitude in radians.
        decl_rad: Solar declination in radians.
        hour_angle_rad: Hour angle in radians (0 = solar noon, negative = morning).

    Returns:
        SkyPoint with azimuth clockwise from North in [0, 2pi).
    """
    hour_angle = _normalize_hour_angle(hour_angle_rad)
    sin_alt = math.sin(lat_rad) * math.sin(decl_rad) + math.cos(lat_rad) * math.cos(
        decl_rad
    ) * math.cos(hour_angle)
    sin_alt = max(-1.0, min(1.0, sin_alt))
    altitude = math.asin(sin_alt)

    # 1e-12 keeps the denominator finite at the zenith and at the poles
    denom = math.cos(lat_rad) * math.cos(altitude) + 1e-12
    cos_az = (math.sin(decl_rad) - math.sin(lat_rad) * sin_alt) / denom
    azimuth = math.acos(max(-1.0, min(1.0, cos_az)))
    if hour_angle > 0:
        azimuth = _TAU - azimuth

    return SkyPoint(altitude=altitude, azimuth=azimuth % _TAU)


def _require_aware(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        raise ValueError("instant must be timezone-aware.")
    return instant.astimezone(timezone.utc)


class SolarModel(Protocol):
    """Anything that can place the sun for an observer at an instant."""

    def position_at(
        self, lat_deg: float, lon_deg: float, instant: datetime
    ) -> SkyPoint: ...


class ApproximateSolarModel:
    """Declination/hour-angle approximation, no external data."""

    def position_at(self, lat_deg: float, lon_deg: float, instant: datetime) -> SkyPoint:
        utc_dt = _require_aware(instant)
        doy = day_of_year(utc_dt.date())
        utc_hours = (
            utc_dt.hour
            + utc_dt.minute / 60.0
            + utc_dt.second / 3600.0
            + utc_dt.microsecond / 3_600_000_000.0
        )
        # Local mean solar time: UTC shifted by 4 minutes per degree of longitude
        hour_angle = math.radians((utc_hours + lon_deg / 15.0 - 12.0) * 15.0)
        return solar_position(
            math.radians(lat_deg), solar_declination(doy), hour_angle
        )


class SkyfieldSolarModel:
    """High-precision model backed by skyfield and the DE421 ephemeris.

    skyfield's ``altaz()`` already measures azimuth from North towards East,
    so its output only needs wrapping into [0, 2pi).
    """

    def __init__(self, directory: Path | None = None) -> None:
        self._loader = Loader(str(directory or _ROOT / "resources"))
        self._eph = self._loader(EPHEMERIS_FILE)
        self._ts = self._loader.timescale()

    def position_at(self, lat_deg: float, lon_deg: float, instant: datetime) -> SkyPoint:
        t = self._ts.from_datetime(_require_aware(instant))
        ground = self._eph["earth"] + wgs84.latlon(
            latitude_degrees=lat_deg, longitude_degrees=lon_deg
        )
        alt, az, _ = ground.at(t).observe(self._eph["sun"]).apparent().altaz()
        return SkyPoint(altitude=float(alt.radians), azimuth=float(az.radians) % _TAU)
