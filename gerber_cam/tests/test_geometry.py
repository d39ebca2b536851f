"""Tests for exact-integer geometry primitives.

Validates nanometre/micro-degree formatting, integer-only arithmetic,
arc center derivation and polygon traversal helpers.
"""

from __future__ import annotations

import pytest

from gerber_cam.geometry.primitives import (
    Angle,
    Ellipse,
    Length,
    Point,
    Polygon,
    PolygonSegment,
    arc_center,
)


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


class TestLength:
    @pytest.mark.parametrize(
        "nm, expected",
        [
            (0, "0"),
            (1, "0.000001"),
            (200_000, "0.2"),
            (1_000_000, "1"),
            (-1_500_000, "-1.5"),
            (12_345_678, "12.345678"),
        ],
    )
    def test_mm_string(self, nm: int, expected: str) -> None:
        assert Length(nm).to_mm_string() == expected

    def test_nm_string(self) -> None:
        assert Length(-5000).to_nm_string() == "-5000"

    def test_float_rejected(self) -> None:
        with pytest.raises(TypeError, match="must be an integer"):
            Length(0.5)  # type: ignore[arg-type]

    def test_from_mm_rounds_once(self) -> None:
        assert Length.from_mm(0.1) == Length(100_000)
        assert Length.from_mm(-2.5) == Length(-2_500_000)

    def test_arithmetic_is_exact(self) -> None:
        a = Length(300_000)
        b = Length(100_000)
        assert a + b == Length(400_000)
        assert b - a == Length(-200_000)
        assert a * 2 == Length(600_000)
        assert 2 * a == Length(600_000)
        assert (-a).abs() == a

    def test_ordering(self) -> None:
        assert Length(-1) < Length(0) < Length(1)


# ---------------------------------------------------------------------------
# Angle
# ---------------------------------------------------------------------------


class TestAngle:
    def test_constants(self) -> None:
        assert Angle.deg90().udeg == 90_000_000
        assert Angle.deg180() == Angle.from_deg(180)

    def test_deg_string(self) -> None:
        assert Angle.from_deg(22.5).to_deg_string() == "22.5"
        assert Angle.deg0().to_deg_string() == "0"
        assert Angle.from_deg(-90).to_deg_string() == "-90"

    def test_abs_and_compare(self) -> None:
        assert Angle.from_deg(-91).abs() > Angle.deg90()
        assert Angle.from_deg(-90).abs() <= Angle.deg90()

    def test_mapped_to_0_360(self) -> None:
        assert Angle.from_deg(-90).mapped_to_0_360() == Angle.deg270()
        assert Angle.from_deg(450).mapped_to_0_360() == Angle.deg90()


# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------


class TestPoint:
    def test_subtract_and_abs(self) -> None:
        diff = Point.from_nm(0, 0) - Point.from_nm(1_000_000, -250)
        assert diff == Point.from_nm(-1_000_000, 250)
        assert diff.abs() == Point.from_nm(1_000_000, 250)

    def test_from_mm(self) -> None:
        assert Point.from_mm(1.5, -0.25) == Point.from_nm(1_500_000, -250_000)


# ---------------------------------------------------------------------------
# Arc centers
# ---------------------------------------------------------------------------


class TestArcCenter:
    def test_quarter_ccw(self) -> None:
        center = arc_center(
            Point.from_nm(1_000_000, 0), Point.from_nm(0, 1_000_000), Angle.deg90()
        )
        assert center == Point.from_nm(0, 0)

    def test_quarter_cw(self) -> None:
        center = arc_center(
            Point.from_nm(1_000_000, 0), Point.from_nm(0, 1_000_000), Angle.from_deg(-90)
        )
        assert center == Point.from_nm(1_000_000, 1_000_000)

    def test_half_turn_center_is_midpoint(self) -> None:
        center = arc_center(
            Point.from_nm(-1_000_000, 0), Point.from_nm(1_000_000, 0), Angle.deg180()
        )
        assert center == Point.from_nm(0, 0)

    def test_straight_segment_rejected(self) -> None:
        with pytest.raises(ValueError, match="no arc center"):
            arc_center(Point.from_nm(0, 0), Point.from_nm(1, 0), Angle.deg0())

    def test_zero_chord_rejected(self) -> None:
        with pytest.raises(ValueError, match="zero chord"):
            arc_center(Point.from_nm(5, 5), Point.from_nm(5, 5), Angle.deg90())


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


class TestShapes:
    def test_ellipse_is_circle(self) -> None:
        c = Ellipse(Point(), Length(100), Length(100))
        e = Ellipse(Point(), Length(100), Length(200))
        assert c.is_circle
        assert not e.is_circle

    def test_polygon_traversal(self) -> None:
        poly = Polygon(
            start_pos=Point.from_nm(0, 0),
            segments=[
                PolygonSegment(Point.from_nm(10, 0)),
                PolygonSegment(Point.from_nm(10, 10)),
                PolygonSegment(Point.from_nm(0, 0)),
            ],
        )
        assert isinstance(poly.segments, tuple)
        assert poly.segment_count == 3
        assert poly.start_point_of_segment(0) == Point.from_nm(0, 0)
        assert poly.start_point_of_segment(2) == Point.from_nm(10, 10)
        assert poly.is_closed

    def test_open_polygon(self) -> None:
        poly = Polygon(
            start_pos=Point.from_nm(0, 0),
            segments=(PolygonSegment(Point.from_nm(10, 0)),),
        )
        assert not poly.is_closed
        assert poly.end_pos == Point.from_nm(10, 0)

    def test_precomputed_center_wins(self) -> None:
        explicit = Point.from_nm(7, 7)
        poly = Polygon(
            start_pos=Point.from_nm(1_000_000, 0),
            segments=(
                PolygonSegment(Point.from_nm(0, 1_000_000), Angle.deg90(), explicit),
            ),
        )
        assert poly.calc_center_of_arc_segment(0) == explicit

    def test_derived_center(self) -> None:
        poly = Polygon(
            start_pos=Point.from_nm(1_000_000, 0),
            segments=(PolygonSegment(Point.from_nm(0, 1_000_000), Angle.deg90()),),
        )
        assert poly.calc_center_of_arc_segment(0) == Point.from_nm(0, 0)

    def test_frozen(self) -> None:
        p = Point.from_nm(1, 2)
        with pytest.raises(AttributeError):
            p.x = Length(5)  # type: ignore[misc]
