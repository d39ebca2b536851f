"""Aperture registry -- shape descriptors to D-codes.

Every draw or flash in a Gerber file uses a previously defined aperture.
The registry hands out one D-code per *distinct* shape so that a board
with thousands of identical pads still emits a single definition.

Codes:
    D-codes start at ``base_code`` (10; D00-D09 are reserved by the
    format) and increase by one for every newly seen descriptor, in
    first-seen order.

Dedup key:
    Descriptors are frozen dataclasses compared field by field with no
    tolerance.  They are normalized before lookup, so a rectangle rotated
    by 90 degrees is the same aperture as its swapped twin.

Definition syntax (dimensions in mm, hole field omitted when zero)::

    %ADD10C,0.2*%
    %ADD11R,1.5X0.8X0.3*%
    %ADD12O,2X1*%
    %ADD13P,1.2X6X22.5*%
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from gerber_cam.geometry.primitives import Angle, Length

logger = logging.getLogger(__name__)

DEFAULT_BASE_CODE = 10
MIN_POLYGON_VERTICES = 3
MAX_POLYGON_VERTICES = 12


def _check_non_negative(name: str, value: Length) -> None:
    if value.nm < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def _check_positive(name: str, value: Length) -> None:
    if value.nm <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")


def _with_hole(params: list[str], hole: Length) -> str:
    if hole.nm > 0:
        params.append(hole.to_mm_string())
    return "X".join(params)


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CircleAperture:
    """Standard circle ``C``.  A zero diameter is the region-fill aperture."""

    diameter: Length
    hole: Length = field(default_factory=Length)

    def __post_init__(self) -> None:
        _check_non_negative("Circle diameter", self.diameter)
        _check_non_negative("Circle hole", self.hole)

    def to_gerber(self) -> str:
        return "C," + _with_hole([self.diameter.to_mm_string()], self.hole)


@dataclass(frozen=True, slots=True)
class RectangleAperture:
    """Standard rectangle ``R``.

    ``rotation`` is always normalized to ``[0, 180)`` degrees; a value
    other than zero cannot be expressed by the standard aperture and is
    written unrotated.
    """

    width: Length
    height: Length
    rotation: Angle = field(default_factory=Angle)
    hole: Length = field(default_factory=Length)

    def __post_init__(self) -> None:
        _check_positive("Rectangle width", self.width)
        _check_positive("Rectangle height", self.height)
        _check_non_negative("Rectangle hole", self.hole)

    def to_gerber(self) -> str:
        params = [self.width.to_mm_string(), self.height.to_mm_string()]
        return "R," + _with_hole(params, self.hole)


@dataclass(frozen=True, slots=True)
class ObroundAperture:
    """Standard obround ``O`` (stadium).  Rotation as for rectangles."""

    width: Length
    height: Length
    rotation: Angle = field(default_factory=Angle)
    hole: Length = field(default_factory=Length)

    def __post_init__(self) -> None:
        _check_positive("Obround width", self.width)
        _check_positive("Obround height", self.height)
        _check_non_negative("Obround hole", self.hole)

    def to_gerber(self) -> str:
        params = [self.width.to_mm_string(), self.height.to_mm_string()]
        return "O," + _with_hole(params, self.hole)


@dataclass(frozen=True, slots=True)
class RegularPolygonAperture:
    """Standard regular polygon ``P``.

    Parameters
    ----------
    diameter : Length
        Circumscribed circle diameter.
    vertices : int
        Number of vertices, 3 to 12.
    rotation : Angle
        Rotation of the first vertex, normalized to ``[0, 360)``.
    hole : Length
        Center hole diameter, zero for none.
    """

    diameter: Length
    vertices: int
    rotation: Angle = field(default_factory=Angle)
    hole: Length = field(default_factory=Length)

    def __post_init__(self) -> None:
        _check_positive("Polygon diameter", self.diameter)
        _check_non_negative("Polygon hole", self.hole)
        if not MIN_POLYGON_VERTICES <= self.vertices <= MAX_POLYGON_VERTICES:
            raise ValueError(
                f"Polygon vertices must be in [{MIN_POLYGON_VERTICES}, "
                f"{MAX_POLYGON_VERTICES}], got {self.vertices}"
            )

    def to_gerber(self) -> str:
        params = [
            self.diameter.to_mm_string(),
            str(self.vertices),
            self.rotation.to_deg_string(),
        ]
        return "P," + _with_hole(params, self.hole)


ApertureDescriptor = Union[
    CircleAperture, RectangleAperture, ObroundAperture, RegularPolygonAperture
]


@dataclass(frozen=True, slots=True)
class ApertureEntry:
    """A descriptor together with its assigned D-code."""

    code: int
    descriptor: ApertureDescriptor

    def to_gerber(self) -> str:
        return f"%ADD{self.code}{self.descriptor.to_gerber()}*%"


def _normalize_half_turn(
    width: Length, height: Length, rotation: Angle,
) -> tuple[Length, Length, Angle]:
    """Fold a rotation into ``[0, 180)`` and absorb quarter turns."""
    folded = Angle(rotation.udeg % Angle.deg180().udeg)
    if folded == Angle.deg90():
        return height, width, Angle.deg0()
    return width, height, folded


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ApertureList:
    """Deduplicating D-code registry for one export.

    Parameters
    ----------
    base_code : int
        First D-code handed out.  Must be >= 10.
    """

    def __init__(self, base_code: int = DEFAULT_BASE_CODE) -> None:
        if base_code < DEFAULT_BASE_CODE:
            raise ValueError(
                f"D-codes below {DEFAULT_BASE_CODE} are reserved, "
                f"got base_code={base_code}"
            )
        self._base_code = base_code
        self._codes: dict[ApertureDescriptor, int] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_circle(
        self, diameter: Length, hole: Length = Length(0),
    ) -> int:
        return self._register(CircleAperture(diameter, hole))

    def register_rectangle(
        self,
        width: Length,
        height: Length,
        rotation: Angle = Angle(0),
        hole: Length = Length(0),
    ) -> int:
        w, h, rot = _normalize_half_turn(width, height, rotation)
        return self._register(RectangleAperture(w, h, rot, hole))

    def register_obround(
        self,
        width: Length,
        height: Length,
        rotation: Angle = Angle(0),
        hole: Length = Length(0),
    ) -> int:
        w, h, rot = _normalize_half_turn(width, height, rotation)
        return self._register(ObroundAperture(w, h, rot, hole))

    def register_regular_polygon(
        self,
        diameter: Length,
        vertices: int,
        rotation: Angle = Angle(0),
        hole: Length = Length(0),
    ) -> int:
        return self._register(
            RegularPolygonAperture(
                diameter, vertices, rotation.mapped_to_0_360(), hole
            )
        )

    def _register(self, descriptor: ApertureDescriptor) -> int:
        code = self._codes.get(descriptor)
        if code is not None:
            return code
        code = self._base_code + len(self._codes)
        self._codes[descriptor] = code
        if isinstance(descriptor, (RectangleAperture, ObroundAperture)) and descriptor.rotation:
            logger.warning(
                "Rotation %s of aperture D%d is not supported, written unrotated",
                descriptor.rotation,
                code,
            )
        logger.debug("New aperture D%d: %s", code, descriptor.to_gerber())
        return code

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[ApertureEntry]:
        """All entries in allocation order."""
        return [ApertureEntry(code, desc) for desc, code in self._codes.items()]

    def serialize(self) -> str:
        """Aperture-definition block, one ``%ADD...*%`` line per entry."""
        return "".join(entry.to_gerber() + "\n" for entry in self.entries)

    generate_string = serialize

    def reset(self) -> None:
        self._codes.clear()

    def truncate(self, count: int) -> None:
        """Drop every entry allocated after the first *count*."""
        while len(self._codes) > count:
            self._codes.popitem()

    def __len__(self) -> int:
        return len(self._codes)
