"""Plot IR operations -- the vocabulary between board geometry and Gerber.

Every plot request is an immutable, slotted dataclass mirroring one
``GerberGenerator`` draw/flash call.  Operations use **semantic** names
(``FlashRect``, not ``D03``) and exact-integer geometry from
``gerber_cam.geometry``.

A *Layer* is the ordered list of operations that becomes one Gerber file.
Order matters: aperture codes and mode switches are allocated in plot
order, so replaying the same layer always yields the same bytes.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum

from gerber_cam.geometry.primitives import Angle, Ellipse, Length, Point, Polygon

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Layer = list["Operation"]
"""All operations of one output file, in plot order."""


class LayerPolarity(Enum):
    """Image polarity for subsequent objects (``%LPD*%`` / ``%LPC*%``)."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Operation(ABC):
    """Base class for all plot operations."""

    pass


# ---------------------------------------------------------------------------
# Layer state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetLayerPolarity(Operation):
    """Switch between dark (positive) and clear (negative) objects."""

    polarity: LayerPolarity


# ---------------------------------------------------------------------------
# Draw operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DrawLine(Operation):
    """Straight trace stroked with a round aperture.

    Parameters
    ----------
    start, end : Point
        End points in nm.
    width : Length
        Trace width; becomes the aperture diameter.
    """

    start: Point
    end: Point
    width: Length

    def __post_init__(self) -> None:
        if self.width.nm < 0:
            raise ValueError(f"DrawLine width must be >= 0, got {self.width}")


@dataclass(frozen=True, slots=True)
class DrawEllipseOutline(Operation):
    """Ellipse outline.  Only circles are supported by the generator."""

    ellipse: Ellipse


@dataclass(frozen=True, slots=True)
class DrawEllipseArea(Operation):
    """Filled ellipse.  Only circles are supported by the generator."""

    ellipse: Ellipse


@dataclass(frozen=True, slots=True)
class DrawPolygonOutline(Operation):
    """Polygon stroked with its line width."""

    polygon: Polygon


@dataclass(frozen=True, slots=True)
class DrawPolygonArea(Operation):
    """Polygon filled as a region.  Open polygons are closed on output."""

    polygon: Polygon


# ---------------------------------------------------------------------------
# Flash operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FlashCircle(Operation):
    """Round pad, optionally with a hole."""

    pos: Point
    diameter: Length
    hole: Length = field(default_factory=Length)


@dataclass(frozen=True, slots=True)
class FlashRect(Operation):
    """Rectangular pad.  Quarter-turn rotations are folded into the size."""

    pos: Point
    width: Length
    height: Length
    rotation: Angle = field(default_factory=Angle)
    hole: Length = field(default_factory=Length)


@dataclass(frozen=True, slots=True)
class FlashObround(Operation):
    """Obround (stadium) pad."""

    pos: Point
    width: Length
    height: Length
    rotation: Angle = field(default_factory=Angle)
    hole: Length = field(default_factory=Length)


@dataclass(frozen=True, slots=True)
class FlashRegularPolygon(Operation):
    """Regular polygon pad.

    Parameters
    ----------
    pos : Point
        Pad center.
    diameter : Length
        Circumscribed circle diameter.
    vertices : int
        Number of vertices (3 to 12).
    rotation : Angle
        Rotation of the first vertex.
    hole : Length
        Hole diameter, zero for none.
    """

    pos: Point
    diameter: Length
    vertices: int
    rotation: Angle = field(default_factory=Angle)
    hole: Length = field(default_factory=Length)
