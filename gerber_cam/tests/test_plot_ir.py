"""Tests for plot IR operations."""

from __future__ import annotations

import dataclasses

import pytest

from gerber_cam.geometry.primitives import Angle, Length, Point
from gerber_cam.plot_ir.operations import (
    DrawLine,
    FlashCircle,
    FlashRect,
    FlashRegularPolygon,
    LayerPolarity,
    Operation,
    SetLayerPolarity,
)


class TestOperations:
    def test_frozen(self) -> None:
        op = FlashCircle(Point(), Length(1_000))
        with pytest.raises(dataclasses.FrozenInstanceError):
            op.diameter = Length(2_000)  # type: ignore[misc]

    def test_defaults(self) -> None:
        op = FlashRect(Point(), Length(1), Length(2))
        assert op.rotation == Angle(0)
        assert op.hole == Length(0)
        assert FlashRegularPolygon(Point(), Length(1), 6).hole == Length(0)

    def test_value_equality(self) -> None:
        a = DrawLine(Point.from_nm(0, 0), Point.from_nm(5, 5), Length(10))
        b = DrawLine(Point.from_nm(0, 0), Point.from_nm(5, 5), Length(10))
        assert a == b
        assert hash(a) == hash(b)

    def test_all_are_operations(self) -> None:
        assert isinstance(SetLayerPolarity(LayerPolarity.NEGATIVE), Operation)
        assert isinstance(FlashCircle(Point(), Length(1)), Operation)

    def test_negative_line_width_rejected(self) -> None:
        with pytest.raises(ValueError, match="width"):
            DrawLine(Point(), Point.from_nm(1, 0), Length(-1))

    def test_zero_line_width_allowed(self) -> None:
        assert DrawLine(Point(), Point.from_nm(1, 0), Length(0)).width == Length(0)

    def test_polarity_values(self) -> None:
        assert LayerPolarity("positive") is LayerPolarity.POSITIVE
        assert LayerPolarity("negative") is LayerPolarity.NEGATIVE
