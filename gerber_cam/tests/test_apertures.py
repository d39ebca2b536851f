"""Tests for the aperture registry.

Validates D-code allocation order, dedup of equal descriptors, rotation
normalization, definition syntax and caller-contract checks.
"""

from __future__ import annotations

import logging

import pytest

from gerber_cam.cam.apertures import (
    ApertureList,
    CircleAperture,
    RectangleAperture,
    RegularPolygonAperture,
)
from gerber_cam.geometry.primitives import Angle, Length


def mm(value: float) -> Length:
    return Length.from_mm(value)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def apertures() -> ApertureList:
    return ApertureList()


# ---------------------------------------------------------------------------
# Code allocation and dedup
# ---------------------------------------------------------------------------


class TestCodeAllocation:
    def test_first_code_is_base(self, apertures: ApertureList) -> None:
        assert apertures.register_circle(mm(0.2)) == 10

    def test_codes_increment_in_first_seen_order(self, apertures: ApertureList) -> None:
        codes = [
            apertures.register_circle(mm(0.2)),
            apertures.register_rectangle(mm(1), mm(2)),
            apertures.register_obround(mm(1), mm(2)),
            apertures.register_regular_polygon(mm(1), 6),
        ]
        assert codes == [10, 11, 12, 13]

    def test_same_shape_same_code(self, apertures: ApertureList) -> None:
        codes = {apertures.register_circle(mm(0.2), mm(0)) for _ in range(25)}
        assert codes == {10}
        assert len(apertures) == 1
        assert apertures.serialize().count("%ADD") == 1

    def test_dedup_across_interleaved_calls(self, apertures: ApertureList) -> None:
        a = apertures.register_circle(mm(0.2))
        b = apertures.register_rectangle(mm(1), mm(1))
        assert apertures.register_circle(mm(0.2)) == a
        assert apertures.register_rectangle(mm(1), mm(1)) == b
        assert len(apertures) == 2

    def test_hole_distinguishes_descriptors(self, apertures: ApertureList) -> None:
        a = apertures.register_circle(mm(1))
        b = apertures.register_circle(mm(1), mm(0.3))
        assert a != b

    def test_shape_kind_distinguishes_descriptors(self, apertures: ApertureList) -> None:
        a = apertures.register_rectangle(mm(1), mm(2))
        b = apertures.register_obround(mm(1), mm(2))
        assert a != b

    def test_custom_base_code(self) -> None:
        apertures = ApertureList(base_code=100)
        assert apertures.register_circle(mm(1)) == 100

    def test_reserved_base_code_rejected(self) -> None:
        with pytest.raises(ValueError, match="reserved"):
            ApertureList(base_code=9)

    def test_reset(self, apertures: ApertureList) -> None:
        apertures.register_circle(mm(1))
        apertures.register_circle(mm(2))
        apertures.reset()
        assert len(apertures) == 0
        assert apertures.serialize() == ""
        assert apertures.register_circle(mm(2)) == 10

    def test_truncate_drops_newest(self, apertures: ApertureList) -> None:
        apertures.register_circle(mm(1))
        apertures.register_circle(mm(2))
        apertures.register_circle(mm(3))
        apertures.truncate(1)
        assert [e.code for e in apertures.entries] == [10]
        assert apertures.register_circle(mm(3)) == 11
        assert apertures.register_circle(mm(1)) == 10


# ---------------------------------------------------------------------------
# Rotation normalization
# ---------------------------------------------------------------------------


class TestRotation:
    def test_quarter_turn_swaps_rectangle(self, apertures: ApertureList) -> None:
        plain = apertures.register_rectangle(mm(1), mm(2))
        assert apertures.register_rectangle(mm(2), mm(1), Angle.deg90()) == plain
        assert apertures.register_rectangle(mm(2), mm(1), Angle.deg270()) == plain
        assert apertures.register_rectangle(mm(1), mm(2), Angle.deg180()) == plain
        assert apertures.register_rectangle(mm(2), mm(1), Angle.from_deg(-90)) == plain

    def test_quarter_turn_swaps_obround(self, apertures: ApertureList) -> None:
        code = apertures.register_obround(mm(3), mm(1), Angle.deg90())
        assert apertures.serialize() == f"%ADD{code}O,1X3*%\n"

    def test_circle_has_no_rotation(self) -> None:
        assert CircleAperture(mm(1)) == CircleAperture(mm(1), mm(0))

    def test_unsupported_rotation_warns(
        self, apertures: ApertureList, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING):
            code = apertures.register_rectangle(mm(2), mm(1), Angle.from_deg(45))
        assert "not supported" in caplog.text
        assert code != apertures.register_rectangle(mm(2), mm(1))
        assert f"%ADD{code}R,2X1*%" in apertures.serialize()

    def test_polygon_rotation_wraps(self, apertures: ApertureList) -> None:
        a = apertures.register_regular_polygon(mm(1), 6, Angle.from_deg(-30))
        b = apertures.register_regular_polygon(mm(1), 6, Angle.from_deg(330))
        assert a == b


# ---------------------------------------------------------------------------
# Definition syntax
# ---------------------------------------------------------------------------


class TestSerialize:
    def test_circle(self, apertures: ApertureList) -> None:
        apertures.register_circle(Length(200_000))
        apertures.register_circle(mm(1.1), mm(0.9))
        apertures.register_circle(Length(0))
        assert apertures.serialize() == (
            "%ADD10C,0.2*%\n"
            "%ADD11C,1.1X0.9*%\n"
            "%ADD12C,0*%\n"
        )

    def test_rectangle_and_obround(self, apertures: ApertureList) -> None:
        apertures.register_rectangle(mm(1.5), mm(0.8), hole=mm(0.3))
        apertures.register_obround(mm(2), mm(1))
        assert apertures.serialize() == (
            "%ADD10R,1.5X0.8X0.3*%\n"
            "%ADD11O,2X1*%\n"
        )

    def test_regular_polygon(self, apertures: ApertureList) -> None:
        apertures.register_regular_polygon(mm(1.2), 6, Angle.from_deg(22.5))
        apertures.register_regular_polygon(mm(1), 3, hole=mm(0.25))
        assert apertures.serialize() == (
            "%ADD10P,1.2X6X22.5*%\n"
            "%ADD11P,1X3X0X0.25*%\n"
        )

    def test_entries_in_allocation_order(self, apertures: ApertureList) -> None:
        apertures.register_obround(mm(2), mm(1))
        apertures.register_circle(mm(1))
        entries = apertures.entries
        assert [e.code for e in entries] == [10, 11]
        assert isinstance(entries[1].descriptor, CircleAperture)

    def test_deterministic(self) -> None:
        def build() -> str:
            a = ApertureList()
            a.register_circle(mm(0.25))
            a.register_rectangle(mm(1), mm(2), Angle.deg90())
            a.register_circle(mm(0.25))
            return a.serialize()

        assert build() == build()


# ---------------------------------------------------------------------------
# Caller-contract checks
# ---------------------------------------------------------------------------


class TestPreconditions:
    def test_negative_diameter(self, apertures: ApertureList) -> None:
        with pytest.raises(ValueError, match=">= 0"):
            apertures.register_circle(Length(-1))

    def test_negative_hole(self, apertures: ApertureList) -> None:
        with pytest.raises(ValueError, match="hole"):
            apertures.register_circle(mm(1), Length(-1))

    def test_zero_width_rectangle(self) -> None:
        with pytest.raises(ValueError, match="> 0"):
            RectangleAperture(Length(0), mm(1))

    @pytest.mark.parametrize("vertices", [2, 13])
    def test_polygon_vertex_range(self, vertices: int) -> None:
        with pytest.raises(ValueError, match="vertices"):
            RegularPolygonAperture(mm(1), vertices)

    def test_failed_registration_allocates_nothing(self, apertures: ApertureList) -> None:
        with pytest.raises(ValueError):
            apertures.register_regular_polygon(mm(1), 20)
        assert len(apertures) == 0
