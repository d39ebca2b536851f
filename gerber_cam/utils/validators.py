"""YAML schema validation for plot jobs.

Provides validation for plot job files using pydantic:
    - Plot job schema (plot_job.v1): project identity, optional polarity
      and an ordered list of draw/flash operations

Job files are written by hand or by upstream tools, so geometry is given
in **millimetres** and angles in **degrees**.  ``to_operations()``
converts them once, with explicit rounding, into the exact-integer plot
IR consumed by the Gerber generator.

Usage:
    from gerber_cam.utils import validators

    job = validators.load_plot_job("plot_job.yaml")
    ops = job.to_operations()
"""

import uuid
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gerber_cam.geometry.primitives import (
    Angle,
    Ellipse,
    Length,
    Point,
    Polygon,
    PolygonSegment,
)
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
    LayerPolarity,
    Operation,
    SetLayerPolarity,
)

XY = Tuple[float, float]


def _point(xy: XY) -> Point:
    return Point.from_mm(xy[0], xy[1])


# ============================================================================
# OPERATION SCHEMAS
# ============================================================================

class LineSpec(BaseModel):
    """Straight trace."""
    type: Literal["line"]
    start: XY = Field(..., description="Start point (x, y) in mm")
    end: XY = Field(..., description="End point (x, y) in mm")
    width: float = Field(..., ge=0.0, description="Trace width in mm")

    def to_operation(self) -> Operation:
        return DrawLine(_point(self.start), _point(self.end), Length.from_mm(self.width))


class EllipseSpec(BaseModel):
    """Ellipse outline or area (only circles are exported)."""
    type: Literal["ellipse"]
    center: XY = Field(..., description="Center (x, y) in mm")
    radius_x: float = Field(..., gt=0.0, description="X radius in mm")
    radius_y: float = Field(..., gt=0.0, description="Y radius in mm")
    line_width: float = Field(0.0, ge=0.0, description="Outline width in mm")
    rotation: float = Field(0.0, description="Rotation in degrees")
    filled: bool = Field(False, description="Fill instead of outline")

    def to_operation(self) -> Operation:
        ellipse = Ellipse(
            center=_point(self.center),
            radius_x=Length.from_mm(self.radius_x),
            radius_y=Length.from_mm(self.radius_y),
            line_width=Length.from_mm(self.line_width),
            rotation=Angle.from_deg(self.rotation),
        )
        if self.filled:
            return DrawEllipseArea(ellipse)
        return DrawEllipseOutline(ellipse)


class SegmentSpec(BaseModel):
    """Polygon segment; a non-zero angle makes it an arc."""
    end: XY = Field(..., description="End point (x, y) in mm")
    angle: float = Field(0.0, ge=-360.0, le=360.0, description="Turn angle in degrees (negative = CW)")
    center: Optional[XY] = Field(None, description="Precomputed arc center (x, y) in mm")


class PolygonSpec(BaseModel):
    """Polygon outline or filled region."""
    type: Literal["polygon"]
    start: XY = Field(..., description="Start point (x, y) in mm")
    line_width: float = Field(0.0, ge=0.0, description="Outline width in mm")
    filled: bool = Field(False, description="Fill as region instead of outline")
    segments: List[SegmentSpec] = Field(..., min_length=1, description="Ordered segments")

    def to_operation(self) -> Operation:
        polygon = Polygon(
            start_pos=_point(self.start),
            segments=tuple(
                PolygonSegment(
                    end_pos=_point(seg.end),
                    angle=Angle.from_deg(seg.angle),
                    center=_point(seg.center) if seg.center is not None else None,
                )
                for seg in self.segments
            ),
            line_width=Length.from_mm(self.line_width),
        )
        if self.filled:
            return DrawPolygonArea(polygon)
        return DrawPolygonOutline(polygon)


class CircleSpec(BaseModel):
    """Round pad."""
    type: Literal["circle"]
    position: XY = Field(..., description="Pad center (x, y) in mm")
    diameter: float = Field(..., gt=0.0, description="Diameter in mm")
    hole: float = Field(0.0, ge=0.0, description="Hole diameter in mm, 0 for none")

    def to_operation(self) -> Operation:
        return FlashCircle(
            _point(self.position), Length.from_mm(self.diameter), Length.from_mm(self.hole)
        )


class RectSpec(BaseModel):
    """Rectangular or obround pad."""
    type: Literal["rect", "obround"]
    position: XY = Field(..., description="Pad center (x, y) in mm")
    width: float = Field(..., gt=0.0, description="Width in mm")
    height: float = Field(..., gt=0.0, description="Height in mm")
    rotation: float = Field(0.0, description="Rotation in degrees")
    hole: float = Field(0.0, ge=0.0, description="Hole diameter in mm, 0 for none")

    def to_operation(self) -> Operation:
        op_cls = FlashRect if self.type == "rect" else FlashObround
        return op_cls(
            _point(self.position),
            Length.from_mm(self.width),
            Length.from_mm(self.height),
            Angle.from_deg(self.rotation),
            Length.from_mm(self.hole),
        )


class RegularPolygonSpec(BaseModel):
    """Regular polygon pad."""
    type: Literal["regular_polygon"]
    position: XY = Field(..., description="Pad center (x, y) in mm")
    diameter: float = Field(..., gt=0.0, description="Circumscribed diameter in mm")
    vertices: int = Field(..., ge=3, le=12, description="Vertex count")
    rotation: float = Field(0.0, description="Rotation in degrees")
    hole: float = Field(0.0, ge=0.0, description="Hole diameter in mm, 0 for none")

    def to_operation(self) -> Operation:
        return FlashRegularPolygon(
            _point(self.position),
            Length.from_mm(self.diameter),
            self.vertices,
            Angle.from_deg(self.rotation),
            Length.from_mm(self.hole),
        )


PlotOperationSpec = Annotated[
    Union[LineSpec, EllipseSpec, PolygonSpec, CircleSpec, RectSpec, RegularPolygonSpec],
    Field(discriminator="type"),
]


# ============================================================================
# PLOT JOB SCHEMA V1
# ============================================================================

class ProjectInfo(BaseModel):
    """Project identity written to ``%TF.ProjectId``."""
    name: str = Field(..., min_length=1, description="Project name")
    uuid: str = Field(..., description="Project UUID")
    revision: str = Field("v1", min_length=1, description="Revision tag")

    @field_validator('uuid')
    @classmethod
    def validate_uuid(cls, v: str) -> str:
        try:
            return str(uuid.UUID(v))
        except ValueError:
            raise ValueError(f"Project uuid must be a valid UUID, got '{v}'")


class PlotJobV1(BaseModel):
    """Plot job schema v1 (one Gerber file)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("plot_job.v1", alias="schema", description="Schema version")
    project: ProjectInfo
    polarity: Optional[Literal["positive", "negative"]] = Field(
        None, description="Layer polarity set before the first operation"
    )
    operations: List[PlotOperationSpec] = Field(..., min_length=1, description="Ordered operations")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "plot_job.v1":
            raise ValueError(f"Expected schema 'plot_job.v1', got '{v}'")
        return v

    def to_operations(self) -> List[Operation]:
        """Convert to plot IR operations (nanometres, micro-degrees)."""
        ops: List[Operation] = []
        if self.polarity is not None:
            ops.append(SetLayerPolarity(LayerPolarity(self.polarity)))
        ops.extend(spec.to_operation() for spec in self.operations)
        return ops


# ============================================================================
# PUBLIC API
# ============================================================================

def load_plot_job(path: Union[str, Path]) -> PlotJobV1:
    """Load and validate a plot job from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to plot_job.v1 YAML file

    Returns
    -------
    PlotJobV1
        Validated plot job

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails or the file is not valid YAML (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Plot job not found: {path}")

    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(str(e)) from e
    if not isinstance(data, dict):
        raise ValueError(f"Plot job at {path} must be a mapping, got {type(data).__name__}")
    try:
        return PlotJobV1(**data)
    except ValidationError as e:
        raise ValueError(f"Plot job validation failed at {path}: {e}") from e
