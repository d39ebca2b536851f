"""
Plot Intermediate Representation module.

Defines all plot requests as immutable dataclasses.  This vocabulary is
the contract between board geometry and Gerber generation.

All coordinates are integer nanometres.
"""

from gerber_cam.plot_ir.operations import (
    DrawEllipseArea,
    DrawEllipseOutline,
    DrawLine,
    DrawPolygonArea,
    DrawPolygonOutline,
    FlashCircle,
    FlashObround,
    FlashRect,
    FlashRegularPolygon,
    Layer,
    LayerPolarity,
    Operation,
    SetLayerPolarity,
)

__all__ = [
    "DrawEllipseArea",
    "DrawEllipseOutline",
    "DrawLine",
    "DrawPolygonArea",
    "DrawPolygonOutline",
    "FlashCircle",
    "FlashObround",
    "FlashRect",
    "FlashRegularPolygon",
    "Layer",
    "LayerPolarity",
    "Operation",
    "SetLayerPolarity",
]
