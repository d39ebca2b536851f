"""Exact-integer geometry value types consumed by the Gerber engine.

Every linear quantity is an integer number of **nanometres** and every
angle an integer number of **micro-degrees**.  Arithmetic on these types
never goes through floating point, so coordinates written to a
manufacturing file cannot drift.  Floats enter only through the explicit
``from_mm`` / ``from_deg`` constructors, which round exactly once.

Sign convention:
    Positive angles rotate counter-clockwise, negative angles clockwise.

Polygons arrive already decomposed into ordered segments.  Each segment
carries its end point and turn angle (zero = straight); arc centers may be
precomputed by the caller or derived here from the chord.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

NM_PER_MM = 1_000_000
UDEG_PER_DEG = 1_000_000


def _fixed_point_string(value: int, scale: int, digits: int) -> str:
    """Format ``value / scale`` as a decimal without trailing zeros."""
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), scale)
    if frac == 0:
        return f"{sign}{whole}"
    frac_str = f"{frac:0{digits}d}".rstrip("0")
    return f"{sign}{whole}.{frac_str}"


def _require_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            f"{name} must be an integer, got {type(value).__name__} {value!r}"
        )


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class Length:
    """Signed length in nanometres."""

    nm: int = 0

    def __post_init__(self) -> None:
        _require_int("Length.nm", self.nm)

    @classmethod
    def from_mm(cls, mm: float) -> Length:
        return cls(round(mm * NM_PER_MM))

    def to_mm(self) -> float:
        return self.nm / NM_PER_MM

    def to_nm_string(self) -> str:
        """Plain integer string, as used for 6.6 fixed-point coordinates."""
        return str(self.nm)

    def to_mm_string(self) -> str:
        """Exact millimetre string, e.g. ``"0.2"`` for 200000 nm."""
        return _fixed_point_string(self.nm, NM_PER_MM, 6)

    def abs(self) -> Length:
        return Length(abs(self.nm))

    def __add__(self, other: Length) -> Length:
        return Length(self.nm + other.nm)

    def __sub__(self, other: Length) -> Length:
        return Length(self.nm - other.nm)

    def __neg__(self) -> Length:
        return Length(-self.nm)

    def __mul__(self, factor: int) -> Length:
        _require_int("Length factor", factor)
        return Length(self.nm * factor)

    __rmul__ = __mul__

    def __bool__(self) -> bool:
        return self.nm != 0

    def __str__(self) -> str:
        return f"{self.to_mm_string()}mm"


@dataclass(frozen=True, slots=True, order=True)
class Angle:
    """Signed angle in micro-degrees (negative = clockwise)."""

    udeg: int = 0

    def __post_init__(self) -> None:
        _require_int("Angle.udeg", self.udeg)

    @classmethod
    def from_deg(cls, deg: float) -> Angle:
        return cls(round(deg * UDEG_PER_DEG))

    @classmethod
    def deg0(cls) -> Angle:
        return cls(0)

    @classmethod
    def deg90(cls) -> Angle:
        return cls(90 * UDEG_PER_DEG)

    @classmethod
    def deg180(cls) -> Angle:
        return cls(180 * UDEG_PER_DEG)

    @classmethod
    def deg270(cls) -> Angle:
        return cls(270 * UDEG_PER_DEG)

    def to_deg(self) -> float:
        return self.udeg / UDEG_PER_DEG

    def to_rad(self) -> float:
        return math.radians(self.to_deg())

    def to_deg_string(self) -> str:
        return _fixed_point_string(self.udeg, UDEG_PER_DEG, 6)

    def abs(self) -> Angle:
        return Angle(abs(self.udeg))

    def mapped_to_0_360(self) -> Angle:
        return Angle(self.udeg % (360 * UDEG_PER_DEG))

    def __add__(self, other: Angle) -> Angle:
        return Angle(self.udeg + other.udeg)

    def __sub__(self, other: Angle) -> Angle:
        return Angle(self.udeg - other.udeg)

    def __neg__(self) -> Angle:
        return Angle(-self.udeg)

    def __bool__(self) -> bool:
        return self.udeg != 0

    def __str__(self) -> str:
        return f"{self.to_deg_string()}deg"


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """(x, y) position in nanometres."""

    x: Length = field(default_factory=Length)
    y: Length = field(default_factory=Length)

    @classmethod
    def from_nm(cls, x: int, y: int) -> Point:
        return cls(Length(x), Length(y))

    @classmethod
    def from_mm(cls, x: float, y: float) -> Point:
        return cls(Length.from_mm(x), Length.from_mm(y))

    def abs(self) -> Point:
        """Component-wise absolute value."""
        return Point(self.x.abs(), self.y.abs())

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ellipse:
    """Ellipse with an outline stroke.

    Parameters
    ----------
    center : Point
        Center position.
    radius_x, radius_y : Length
        Semi-axes before rotation.  Equal radii make a circle.
    line_width : Length
        Stroke width used for the outline.
    rotation : Angle
        Rotation of the X semi-axis.
    """

    center: Point
    radius_x: Length
    radius_y: Length
    line_width: Length = field(default_factory=Length)
    rotation: Angle = field(default_factory=Angle)

    @property
    def is_circle(self) -> bool:
        return self.radius_x == self.radius_y


def arc_center(start: Point, end: Point, angle: Angle) -> Point:
    """Center of the arc from *start* to *end* turning by *angle*.

    The center lies on the chord bisector at distance
    ``(chord / 2) / tan(angle / 2)``, to the left of the chord for
    counter-clockwise arcs.  The result is rounded to whole nanometres.

    Raises
    ------
    ValueError
        If *angle* is zero or the chord is degenerate.
    """
    if not angle:
        raise ValueError("Straight segment has no arc center")
    dx = end.x.nm - start.x.nm
    dy = end.y.nm - start.y.nm
    chord = math.hypot(dx, dy)
    if chord == 0:
        raise ValueError(f"Arc from {start} to {end} has zero chord length")
    mid_x = (start.x.nm + end.x.nm) / 2.0
    mid_y = (start.y.nm + end.y.nm) / 2.0
    half_angle = angle.to_rad() / 2.0
    # cos/sin avoids the tan() pole at 180 degrees
    h = (chord / 2.0) * math.cos(half_angle) / math.sin(half_angle)
    cx = mid_x - dy / chord * h
    cy = mid_y + dx / chord * h
    return Point.from_nm(round(cx), round(cy))


@dataclass(frozen=True, slots=True)
class PolygonSegment:
    """One segment of a polygon traversal.

    Parameters
    ----------
    end_pos : Point
        Segment end point; the start is the previous segment's end.
    angle : Angle
        Turn angle.  Zero means a straight segment.
    center : Point | None
        Precomputed arc center.  ``None`` derives it from the chord.
    """

    end_pos: Point
    angle: Angle = field(default_factory=Angle)
    center: Point | None = None

    @property
    def is_arc(self) -> bool:
        return bool(self.angle)


@dataclass(frozen=True, slots=True)
class Polygon:
    """Polyline/arc path with a stroke width.

    Parameters
    ----------
    start_pos : Point
        First point of the traversal.
    segments : tuple[PolygonSegment, ...]
        Ordered segments.
    line_width : Length
        Stroke width for outlines.
    """

    start_pos: Point
    segments: tuple[PolygonSegment, ...] = ()
    line_width: Length = field(default_factory=Length)

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    @property
    def end_pos(self) -> Point:
        if not self.segments:
            return self.start_pos
        return self.segments[-1].end_pos

    @property
    def is_closed(self) -> bool:
        return self.end_pos == self.start_pos

    def start_point_of_segment(self, index: int) -> Point:
        if index == 0:
            return self.start_pos
        return self.segments[index - 1].end_pos

    def calc_center_of_arc_segment(self, index: int) -> Point:
        segment = self.segments[index]
        if segment.center is not None:
            return segment.center
        return arc_center(
            self.start_point_of_segment(index), segment.end_pos, segment.angle
        )
