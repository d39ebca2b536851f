"""
Geometry module.

Exact-integer value types (nanometres, micro-degrees) that describe the
board artwork handed to the Gerber generator.
"""

from gerber_cam.geometry.primitives import (
    Angle,
    Ellipse,
    Length,
    Point,
    Polygon,
    PolygonSegment,
    arc_center,
)

__all__ = [
    "Angle",
    "Ellipse",
    "Length",
    "Point",
    "Polygon",
    "PolygonSegment",
    "arc_center",
]
