"""
Gerber CAM output module.

Converts board geometry to RS-274X/X2 text: a deduplicating aperture
registry and a stateful command-stream generator.
"""

from gerber_cam.cam.apertures import (
    ApertureEntry,
    ApertureList,
    CircleAperture,
    ObroundAperture,
    RectangleAperture,
    RegularPolygonAperture,
)
from gerber_cam.cam.generator import (
    GerberError,
    GerberGenerator,
    InterpolationMode,
    QuadrantMode,
    RegionMode,
)

__all__ = [
    "ApertureEntry",
    "ApertureList",
    "CircleAperture",
    "GerberError",
    "GerberGenerator",
    "InterpolationMode",
    "ObroundAperture",
    "QuadrantMode",
    "RectangleAperture",
    "RegionMode",
    "RegularPolygonAperture",
]
