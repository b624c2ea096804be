"""Data model definitions — explicit boundaries between solar math, line generation, and rendering."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SkyPoint:
    """A single direction on the sky dome."""

    altitude: float  # Radians above the horizon, (-pi/2, pi/2]
    azimuth: float  # Radians clockwise from North, [0, 2pi)


@dataclass(frozen=True)
class DSTTransition:
    """A day on which the local clock shifts."""

    doy: int  # Day of year, 1-based, relative to Jan 1 UTC
    month: int  # 1-12
    day: int  # Day of month
    spring_forward: bool  # True if the UTC offset increased
    offset_change_hours: float  # Signed offset change (+1.0, -1.0, 0.5, ...)


@dataclass(frozen=True)
class GenerationContext:
    """Per-request inputs derived once before any line is generated."""

    lat_deg: float
    lon_deg: float
    year: int
    standard_utc_offset_hours: float  # lon/15 when no timezone is known
    dst_adjustment_hours: float  # 0.0 when the zone does not observe DST
    is_northern_hemisphere: bool

    @property
    def clock_correction_hours(self) -> float:
        """Standard clock time minus local mean solar time, in hours."""
        return self.standard_utc_offset_hours - self.lon_deg / 15.0


class LineKind(str, Enum):
    """Line category. Renderers key styling off this value."""

    SOLSTICE = "solstice"
    MONTH = "month"
    HOUR = "hour"
    HOUR_DST = "hour-dst"
    DST = "dst"


class LabelSide(str, Enum):
    ABOVE = "above"
    BELOW = "below"


@dataclass(frozen=True)
class LabelPoint:
    """Extra date label anchored on an arc (9:00 / 15:00 positions)."""

    point: SkyPoint
    label_above: str | None = None
    label_below: str | None = None


@dataclass(frozen=True)
class DstHourLabel:
    """Clock-hour label on a DST transition arc, as read after the shift."""

    point: SkyPoint
    label: str  # e.g. "7:00"


@dataclass(frozen=True)
class TaggedPoint:
    """One sample of an hour line with its DST status."""

    point: SkyPoint
    is_dst: bool


@dataclass(frozen=True)
class SolsticeLine:
    """June 21 or December 21 day arc."""

    points: tuple[SkyPoint, ...]
    label: str  # "6/21" or "12/21"
    label_above: str | None
    label_below: str | None
    extra_label_points: tuple[LabelPoint, ...]
    mid_label_point: SkyPoint | None  # Solar noon
    kind: LineKind = LineKind.SOLSTICE


@dataclass(frozen=True)
class MonthLine:
    """Intermediate declination arc shared by two dates of the year."""

    points: tuple[SkyPoint, ...]
    label: str  # Ascending date label
    label_above: str
    label_below: str
    extra_label_points: tuple[LabelPoint, ...]
    mid_label_point: SkyPoint | None  # Solar noon of the date labelled above
    mid_label_point_below: SkyPoint | None  # Solar noon of the date labelled below
    kind: LineKind = LineKind.MONTH


@dataclass(frozen=True)
class HourLine:
    """One contiguous run of an hourly analemma, standard time or DST."""

    points: tuple[SkyPoint, ...]
    kind: LineKind  # HOUR or HOUR_DST
    hour: int  # Standard clock hour, 0-24
    label: str
    label_above: str | None = None
    label_below: str | None = None
    top_label_point: SkyPoint | None = None
    bottom_label_point: SkyPoint | None = None
    # Only on the first run emitted for the hour; spans every run.
    all_tagged_points: tuple[TaggedPoint, ...] | None = None


@dataclass(frozen=True)
class DstLine:
    """Day arc of a DST transition date with the post-shift clock labels."""

    points: tuple[SkyPoint, ...]
    label: str  # "3/10"
    label_above: str | None
    label_below: str | None
    dst_hour_labels: tuple[DstHourLabel, ...]
    dst_hour_labels_position: LabelSide
    mid_label_point: SkyPoint | None
    transition: DSTTransition
    kind: LineKind = LineKind.DST


PathLine = SolsticeLine | MonthLine | HourLine | DstLine


@dataclass(frozen=True)
class SunPathData:
    """The sole input to renderers. Fully computed state."""

    context: GenerationContext
    timezone_id: str | None  # IANA id, None when unresolved
    transitions: tuple[DSTTransition, ...]
    lines: tuple[PathLine, ...]
