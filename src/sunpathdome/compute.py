"""Top-level computation layer — timezone resolution, DST detection, and line generation."""

import logging
from collections import OrderedDict
from collections.abc import Callable
from datetime import datetime

from timezonefinder import TimezoneFinder

from sunpathdome.dst import find_transitions
from sunpathdome.generator import build_context, generate_with_context
from sunpathdome.models import SunPathData

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

CacheKey = tuple[float, float, int, str | None]


def timezone_for_location(lat: float, lng: float) -> str | None:
    """IANA timezone id at a coordinate, or None (open ocean, poles)."""
    tz_str = _tf.timezone_at(lat=lat, lng=lng)
    if tz_str is None:
        logger.warning("Timezone not found: lat=%s, lng=%s", lat, lng)
    return tz_str


def compute_sun_path(
    lat: float,
    lng: float,
    year: int,
    timezone_id: str | None = None,
) -> SunPathData:
    """Compute the full sun-path diagram for a location and year.

    Args:
        lat: Latitude in decimal degrees.
        lng: Longitude in decimal degrees.
        year: Calendar year.
        timezone_id: IANA id. Resolved from the coordinates when None.

    Returns:
        SunPathData holding the context, transitions, and every line.
    """
    tz_str = timezone_id or timezone_for_location(lat, lng)
    transitions = tuple(find_transitions(tz_str, year)) if tz_str else ()
    context = build_context(lat, lng, year, transitions, tz_str)
    lines = generate_with_context(context, transitions)
    return SunPathData(
        context=context,
        timezone_id=tz_str,
        transitions=transitions,
        lines=tuple(lines),
    )


class SunPathCache:
    """Caller-owned LRU of computed diagrams.

    Keys round coordinates to 4 decimals (~10 m), so small jitter in the
    selected point does not trigger a recomputation.
    """

    def __init__(self, capacity: int = 32) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._items: OrderedDict[CacheKey, SunPathData] = OrderedDict()

    def __len__(self) -> int:
        return len(self._items)

    @staticmethod
    def key(lat: float, lng: float, year: int, timezone_id: str | None) -> CacheKey:
        return (round(lat, 4), round(lng, 4), year, timezone_id)

    def get(
        self,
        lat: float,
        lng: float,
        year: int,
        timezone_id: str | None = None,
        compute: Callable[..., SunPathData] = compute_sun_path,
    ) -> SunPathData:
        """Return the cached diagram or compute and store it."""
        key = self.key(lat, lng, year, timezone_id)
        if key in self._items:
            logger.debug("Sun path cache hit: %s", key)
            self._items.move_to_end(key)
            return self._items[key]

        value = compute(lat, lng, year, timezone_id)
        self._items[key] = value
        if len(self._items) > self.capacity:
            self._items.popitem(last=False)
        return value


def run(lat: float, lng: float, year: int | None = None) -> SunPathData:
    """Top-level entry point: resolve the timezone and build the diagram.

    Args:
        lat: Latitude in decimal degrees.
        lng: Longitude in decimal degrees.
        year: Calendar year. Defaults to the current year.

    Returns:
        Fully computed SunPathData.
    """
    if year is None:
        year = datetime.now().year
    return compute_sun_path(lat, lng, year)
