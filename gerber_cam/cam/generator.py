"""Gerber generator -- board geometry to RS-274X/X2 text.

Draw and flash calls append command lines to a per-instance content
buffer; ``generate()`` wraps that buffer with header, aperture block and
checksum footer.

Coordinate format:
    ``%FSLAX66Y66*%`` with ``%MOMM*%`` -- six integer and six decimal
    millimetre digits, i.e. exactly one nanometre per unit.  Coordinates
    are therefore written as plain nanometre integers::

        X1000000Y-250000D01*   ; 1 mm, -0.25 mm

Plotter state:
    Aperture selection, quadrant mode, region mode and interpolation mode
    are tracked as explicit fields.  A mode command is written only when
    the requested state differs from the current one, so repeated use of
    an aperture never re-emits its ``D<code>*`` selection.

Checksum:
    ``%TF.MD5`` is the MD5 of everything before it with line breaks
    removed (see ``gerber_cam.utils.hashing``).
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from io import StringIO
from pathlib import Path
from typing import Iterable, Iterator

from gerber_cam.cam.apertures import ApertureList
from gerber_cam.configs.loader import GerberConfig, default_config
from gerber_cam.geometry.primitives import Angle, Ellipse, Length, Point, Polygon
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
from gerber_cam.utils import fs, hashing

logger = logging.getLogger(__name__)

# 6 integer digits of millimetres in nanometre units
_MAX_COORDINATE_NM = 10**12


class GerberError(Exception):
    """Raised when Gerber generation fails due to caller misuse."""

    pass


# ---------------------------------------------------------------------------
# Plotter modes
# ---------------------------------------------------------------------------


class InterpolationMode(Enum):
    LINEAR = "G01"
    CLOCKWISE = "G02"
    COUNTER_CLOCKWISE = "G03"


class QuadrantMode(Enum):
    SINGLE = "G74"
    MULTI = "G75"


class RegionMode(Enum):
    OFF = "G37"
    ON = "G36"


def _coord(length: Length) -> str:
    if abs(length.nm) >= _MAX_COORDINATE_NM:
        raise GerberError(
            f"Coordinate {length} exceeds the 6.6 coordinate format"
        )
    return length.to_nm_string()


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class GerberGenerator:
    """Build one Gerber file from draw/flash calls.

    Parameters
    ----------
    project_name : str
        Project name for ``%TF.ProjectId``; commas are removed.
    project_uuid : uuid.UUID | str
        Project identifier; hyphens are removed.
    project_revision : str
        Revision tag for ``%TF.ProjectId``.
    config : GerberConfig | None
        Export configuration.  ``None`` uses the built-in defaults.

    Notes
    -----
    One instance serves one export.  Call ``reset()`` before reusing it.
    Not thread-safe: aperture codes and modes depend on call order.
    """

    def __init__(
        self,
        project_name: str,
        project_uuid: uuid.UUID | str,
        project_revision: str,
        config: GerberConfig | None = None,
    ) -> None:
        self._cfg = config if config is not None else default_config()
        self._project_id = project_name.replace(",", "")
        self._project_guid = str(project_uuid).replace("-", "")
        self._project_revision = project_revision
        self._apertures = ApertureList(self._cfg.apertures.base_code)
        self._content = StringIO()
        self._output = ""
        self._reset_state()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def apertures(self) -> ApertureList:
        return self._apertures

    @property
    def output(self) -> str:
        """Text assembled by the last ``generate()`` call."""
        return self._output

    @property
    def content(self) -> str:
        """Board commands emitted so far (without header/footer)."""
        return self._content.getvalue()

    @property
    def current_aperture(self) -> int | None:
        return self._aperture

    @property
    def quadrant_mode(self) -> QuadrantMode:
        return self._quadrant_mode

    @property
    def region_mode(self) -> RegionMode:
        return self._region_mode

    @property
    def interpolation_mode(self) -> InterpolationMode:
        return self._interpolation_mode

    # ------------------------------------------------------------------
    # Plot methods
    # ------------------------------------------------------------------

    def set_layer_polarity(self, polarity: LayerPolarity | str) -> None:
        with self._plot_call():
            try:
                polarity = LayerPolarity(polarity)
            except ValueError:
                logger.error("Invalid layer polarity: %r", polarity)
                return
            if polarity is LayerPolarity.POSITIVE:
                self._emit("%LPD*%")
            else:
                self._emit("%LPC*%")

    def draw_line(self, start: Point, end: Point, width: Length) -> None:
        with self._plot_call():
            self._select_aperture(self._apertures.register_circle(width, Length(0)))
            self._move_to(start)
            self._linear_to(end)

    def draw_ellipse_outline(self, ellipse: Ellipse) -> None:
        with self._plot_call():
            if not ellipse.is_circle:
                logger.warning("Ellipse was ignored in gerber output: %s", ellipse)
                return
            outer = ellipse.radius_x * 2 + ellipse.line_width
            inner = ellipse.radius_x * 2 - ellipse.line_width
            if inner.nm < 0:
                inner = Length(0)
            self._select_aperture(self._apertures.register_circle(outer, inner))
            self._flash_at(ellipse.center)

    def draw_ellipse_area(self, ellipse: Ellipse) -> None:
        with self._plot_call():
            if not ellipse.is_circle:
                logger.warning("Ellipse was ignored in gerber output: %s", ellipse)
                return
            self._select_aperture(
                self._apertures.register_circle(ellipse.radius_x * 2, Length(0))
            )
            self._flash_at(ellipse.center)

    def draw_polygon_outline(self, polygon: Polygon) -> None:
        with self._plot_call():
            self._select_aperture(
                self._apertures.register_circle(polygon.line_width, Length(0))
            )
            self._move_to(polygon.start_pos)
            self._trace_segments(polygon)

    def draw_polygon_area(self, polygon: Polygon) -> None:
        with self._plot_call():
            self._select_aperture(self._apertures.register_circle(Length(0), Length(0)))
            self._set_region_mode(RegionMode.ON)
            self._move_to(polygon.start_pos)
            self._trace_segments(polygon)
            if not polygon.is_closed:
                logger.error(
                    "Non-closed polygon in region fill, closing %s -> %s",
                    polygon.end_pos,
                    polygon.start_pos,
                )
                self._linear_to(polygon.start_pos)
            self._set_region_mode(RegionMode.OFF)

    def flash_circle(self, pos: Point, diameter: Length, hole: Length = Length(0)) -> None:
        with self._plot_call():
            self._select_aperture(self._apertures.register_circle(diameter, hole))
            self._flash_at(pos)

    def flash_rect(
        self,
        pos: Point,
        width: Length,
        height: Length,
        rotation: Angle = Angle(0),
        hole: Length = Length(0),
    ) -> None:
        with self._plot_call():
            self._select_aperture(
                self._apertures.register_rectangle(width, height, rotation, hole)
            )
            self._flash_at(pos)

    def flash_obround(
        self,
        pos: Point,
        width: Length,
        height: Length,
        rotation: Angle = Angle(0),
        hole: Length = Length(0),
    ) -> None:
        with self._plot_call():
            self._select_aperture(
                self._apertures.register_obround(width, height, rotation, hole)
            )
            self._flash_at(pos)

    def flash_regular_polygon(
        self,
        pos: Point,
        diameter: Length,
        vertices: int,
        rotation: Angle = Angle(0),
        hole: Length = Length(0),
    ) -> None:
        with self._plot_call():
            self._select_aperture(
                self._apertures.register_regular_polygon(diameter, vertices, rotation, hole)
            )
            self._flash_at(pos)

    def plot(self, operations: Iterable[Operation]) -> None:
        """Replay plot IR operations through the draw/flash methods."""
        for op in operations:
            self._plot_op(op)

    # ------------------------------------------------------------------
    # General methods
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self._output = ""
        self._content = StringIO()
        self._apertures.reset()
        self._reset_state()

    def generate(
        self,
        creation_date: datetime | None = None,
        *,
        allow_empty: bool = False,
    ) -> str:
        """Assemble the complete file.

        Parameters
        ----------
        creation_date : datetime | None
            Value of ``%TF.CreationDate``.  ``None`` uses the current
            local time.
        allow_empty : bool
            Permit a file before any plot call was made.  Calls whose
            shapes were skipped (e.g. non-circular ellipses) count as
            plotted and yield a complete file without board commands.

        Returns
        -------
        str
            Header, aperture block, content and footer.

        Raises
        ------
        GerberError
            If no plot call was made and *allow_empty* is False, or a
            region is still open.
        """
        if self._region_mode is RegionMode.ON:
            raise GerberError("Cannot generate while region mode is on")
        if not self._plotted and not allow_empty:
            raise GerberError("Nothing was plotted; refusing to generate an empty file")

        buf = StringIO()
        self._write_header(buf, creation_date or datetime.now())
        buf.write(self._apertures.serialize())
        self._write_content(buf)
        self._write_footer(buf)
        self._output = buf.getvalue()
        logger.debug(
            "Generated %d bytes with %d apertures",
            len(self._output),
            len(self._apertures),
        )
        return self._output

    def save_to_file(self, path: str | Path) -> None:
        """Write the generated text atomically as single-byte text.

        Raises
        ------
        GerberError
            If ``generate()`` has not been called or the text cannot be
            encoded with the configured codec.
        RuntimeError
            If the destination cannot be created or written.
        """
        if not self._output:
            raise GerberError("Nothing generated yet; call generate() first")
        encoding = self._cfg.output.encoding
        try:
            data = self._output.encode(encoding)
        except UnicodeEncodeError as exc:
            raise GerberError(
                f"Gerber output is not representable as {encoding}: {exc}"
            ) from exc
        fs.atomic_write_bytes(path, data)
        logger.info("Gerber file written to %s", path)

    # ------------------------------------------------------------------
    # Internal: dispatch
    # ------------------------------------------------------------------

    def _plot_op(self, op: Operation) -> None:
        if isinstance(op, SetLayerPolarity):
            self.set_layer_polarity(op.polarity)
        elif isinstance(op, DrawLine):
            self.draw_line(op.start, op.end, op.width)
        elif isinstance(op, DrawEllipseOutline):
            self.draw_ellipse_outline(op.ellipse)
        elif isinstance(op, DrawEllipseArea):
            self.draw_ellipse_area(op.ellipse)
        elif isinstance(op, DrawPolygonOutline):
            self.draw_polygon_outline(op.polygon)
        elif isinstance(op, DrawPolygonArea):
            self.draw_polygon_area(op.polygon)
        elif isinstance(op, FlashCircle):
            self.flash_circle(op.pos, op.diameter, op.hole)
        elif isinstance(op, FlashRect):
            self.flash_rect(op.pos, op.width, op.height, op.rotation, op.hole)
        elif isinstance(op, FlashObround):
            self.flash_obround(op.pos, op.width, op.height, op.rotation, op.hole)
        elif isinstance(op, FlashRegularPolygon):
            self.flash_regular_polygon(
                op.pos, op.diameter, op.vertices, op.rotation, op.hole
            )
        else:
            logger.warning("Unsupported operation: %s", type(op).__name__)

    def _trace_segments(self, polygon: Polygon) -> None:
        for i, segment in enumerate(polygon.segments):
            if not segment.angle:
                self._linear_to(segment.end_pos)
                continue
            if segment.angle.abs() <= Angle.deg90():
                self._set_quadrant_mode(QuadrantMode.SINGLE)
            else:
                self._set_quadrant_mode(QuadrantMode.MULTI)
            if segment.angle.udeg < 0:
                self._set_interpolation_mode(InterpolationMode.CLOCKWISE)
            else:
                self._set_interpolation_mode(InterpolationMode.COUNTER_CLOCKWISE)
            self._arc_to(
                polygon.start_point_of_segment(i),
                polygon.calc_center_of_arc_segment(i),
                segment.end_pos,
            )
            self._set_interpolation_mode(InterpolationMode.LINEAR)

    # ------------------------------------------------------------------
    # Internal: state transitions
    # ------------------------------------------------------------------

    def _reset_state(self) -> None:
        # Matches the modes declared in the header
        self._aperture: int | None = None
        self._quadrant_mode = QuadrantMode.SINGLE
        self._region_mode = RegionMode.OFF
        self._interpolation_mode = InterpolationMode.LINEAR
        self._plotted = False

    @contextmanager
    def _plot_call(self) -> Iterator[None]:
        """Run one plot call; on failure drop its partial output.

        Content, aperture entries and modes are restored to their state
        before the call, so a rejected shape never leaves an open region
        or an unused aperture behind.
        """
        mark = self._content.tell()
        aperture_count = len(self._apertures)
        state = (
            self._aperture,
            self._quadrant_mode,
            self._region_mode,
            self._interpolation_mode,
        )
        try:
            yield
        except (GerberError, ValueError):
            self._content.seek(mark)
            self._content.truncate()
            self._apertures.truncate(aperture_count)
            (
                self._aperture,
                self._quadrant_mode,
                self._region_mode,
                self._interpolation_mode,
            ) = state
            raise
        self._plotted = True

    def _emit(self, line: str) -> None:
        self._content.write(line + "\n")

    def _select_aperture(self, code: int) -> None:
        if code != self._aperture:
            self._emit(f"D{code}*")
            self._aperture = code

    def _set_region_mode(self, mode: RegionMode) -> None:
        if mode is not self._region_mode:
            self._emit(f"{mode.value}*")
            self._region_mode = mode

    def _set_quadrant_mode(self, mode: QuadrantMode) -> None:
        if mode is not self._quadrant_mode:
            self._emit(f"{mode.value}*")
            self._quadrant_mode = mode

    def _set_interpolation_mode(self, mode: InterpolationMode) -> None:
        if mode is not self._interpolation_mode:
            self._emit(f"{mode.value}*")
            self._interpolation_mode = mode

    # ------------------------------------------------------------------
    # Internal: operations
    # ------------------------------------------------------------------

    def _move_to(self, pos: Point) -> None:
        self._emit(f"X{_coord(pos.x)}Y{_coord(pos.y)}D02*")

    def _linear_to(self, pos: Point) -> None:
        self._emit(f"X{_coord(pos.x)}Y{_coord(pos.y)}D01*")

    def _arc_to(self, start: Point, center: Point, end: Point) -> None:
        diff = center - start
        if self._quadrant_mode is QuadrantMode.SINGLE:
            # no sign allowed in single quadrant mode
            diff = diff.abs()
        self._emit(
            f"X{_coord(end.x)}Y{_coord(end.y)}"
            f"I{_coord(diff.x)}J{_coord(diff.y)}D01*"
        )

    def _flash_at(self, pos: Point) -> None:
        self._emit(f"X{_coord(pos.x)}Y{_coord(pos.y)}D03*")

    # ------------------------------------------------------------------
    # Header / content / footer
    # ------------------------------------------------------------------

    def _write_header(self, buf: StringIO, creation_date: datetime) -> None:
        sw = self._cfg.generation_software
        buf.write("G04 --- HEADER BEGIN --- *\n")
        buf.write(
            f"%TF.GenerationSoftware,{sw.vendor},{sw.application},{sw.version}*%\n"
        )
        buf.write(
            f"%TF.CreationDate,{creation_date.replace(microsecond=0).isoformat()}*%\n"
        )
        buf.write(
            f"%TF.ProjectId,{self._project_id},{self._project_guid},"
            f"{self._project_revision}*%\n"
        )
        buf.write(f"%TF.Part,{self._cfg.output.part}*%\n")
        # leading zeros omitted, absolute, 6.6 = nanometres
        buf.write("%FSLAX66Y66*%\n")
        buf.write("%MOMM*%\n")
        buf.write(f"{InterpolationMode.LINEAR.value}*\n")
        buf.write(f"{QuadrantMode.SINGLE.value}*\n")
        buf.write("G04 --- HEADER END --- *\n")

    def _write_content(self, buf: StringIO) -> None:
        buf.write("G04 --- BOARD BEGIN --- *\n")
        buf.write(self._content.getvalue())
        buf.write("G04 --- BOARD END --- *\n")

    def _write_footer(self, buf: StringIO) -> None:
        checksum = hashing.gerber_checksum(buf.getvalue())
        buf.write(f"%TF.MD5,{checksum}*%\n")
        buf.write("M02*\n")
