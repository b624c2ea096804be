"""Sky-dome placement — altitude/azimuth to local East-North-Up vectors."""

import math
from collections.abc import Sequence
from datetime import datetime

import numpy as np

from sunpathdome.models import SkyPoint
from sunpathdome.solar import ApproximateSolarModel, SolarModel

_DEFAULT_MODEL = ApproximateSolarModel()


def to_tangent_plane(point: SkyPoint, radius: float) -> tuple[float, float, float]:
    """Convert a sky point to an ENU vector of the given length.

    Returns:
        (east, north, up)
    """
    cos_alt = math.cos(point.altitude)
    return (
        radius * math.sin(point.azimuth) * cos_alt,
        radius * math.cos(point.azimuth) * cos_alt,
        radius * math.sin(point.altitude),
    )


def from_tangent_plane(east: float, north: float, up: float) -> SkyPoint:
    """Recover altitude/azimuth from an ENU vector of any non-zero length."""
    radius = math.sqrt(east * east + north * north + up * up)
    altitude = math.asin(max(-1.0, min(1.0, up / radius)))
    azimuth = math.atan2(east, north) % (2.0 * math.pi)
    return SkyPoint(altitude=altitude, azimuth=azimuth)


def to_tangent_plane_array(points: Sequence[SkyPoint], radius: float) -> np.ndarray:
    """Vectorized to_tangent_plane. Returns an (N, 3) array of east/north/up."""
    alt = np.array([p.altitude for p in points], dtype=float)
    az = np.array([p.azimuth for p in points], dtype=float)
    cos_alt = np.cos(alt)
    return radius * np.column_stack((np.sin(az) * cos_alt, np.cos(az) * cos_alt, np.sin(alt)))


def current_position(
    lat_deg: float,
    lon_deg: float,
    instant: datetime,
    model: SolarModel | None = None,
) -> SkyPoint:
    """Sun position for an observer at an instant.

    Kept apart from line generation because the consumer refreshes it on a
    timer while the diagram itself only changes with location or year.

    Args:
        lat_deg: Latitude in degrees.
        lon_deg: Longitude in degrees (east positive).
        instant: Timezone-aware datetime.
        model: Solar model to use. Defaults to the approximate model.

    Raises:
        ValueError: If instant is naive.
    """
    return (model or _DEFAULT_MODEL).position_at(lat_deg, lon_deg, instant)
