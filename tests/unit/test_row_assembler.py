"""Tests for row assembly and geometry fallbacks."""
from __future__ import annotations

import math

import pytest

from ifc_qto.application.services.row_assembler import RowAssembler, round_value
from ifc_qto.domain import (
    ExtractedValues,
    GeometryResult,
    QtoOptions,
    SpaceSubject,
)


class SpySource:
    """Geometry source recording calls."""

    def __init__(self, result: GeometryResult | None = None, error: Exception | None = None) -> None:
        self.result = result or GeometryResult()
        self.error = error
        self.calls: list[int] = []

    def __call__(self, subject_id: int) -> GeometryResult:
        self.calls.append(subject_id)
        if self.error is not None:
            raise self.error
        return self.result


SUBJECT = SpaceSubject(id=7, global_id="0abc", name="101", long_name="Office")


def assemble_one(
    values: ExtractedValues,
    options: QtoOptions,
    mesh: SpySource | None = None,
    extrusion: SpySource | None = None,
):
    assembler = RowAssembler(mesh_source=mesh, extrusion_source=extrusion)
    return assembler.assemble([SUBJECT], {SUBJECT.id: values}, options)[0]


class TestFallbacks:
    """Tests for lazy geometry fallbacks."""

    def test_complete_values_skip_geometry(self) -> None:
        """Test sources are not called when nothing is missing."""
        mesh = SpySource(GeometryResult(1.0, 1.0))
        row = assemble_one(ExtractedValues(12.5, 37.5), QtoOptions(use_geometry=True), mesh)
        assert (row.area, row.volume) == (12.5, 37.5)
        assert mesh.calls == []

    def test_geometry_disabled(self) -> None:
        """Test missing values stay missing without use_geometry."""
        mesh = SpySource(GeometryResult(1.0, 1.0))
        row = assemble_one(ExtractedValues(), QtoOptions(), mesh)
        assert row.area is None and row.volume is None
        assert mesh.calls == []

    def test_fills_only_missing_fields(self) -> None:
        """Test extracted values are kept and gaps filled."""
        mesh = SpySource(GeometryResult(16.0, 8.0))
        row = assemble_one(ExtractedValues(area=12.5), QtoOptions(use_geometry=True), mesh)
        assert (row.area, row.volume) == (12.5, 8.0)

    def test_mesh_before_extrusion(self) -> None:
        """Test extrusion is only consulted for what mesh did not derive."""
        mesh = SpySource(GeometryResult(volume=8.0))
        extrusion = SpySource(GeometryResult(12.0, 30.0))
        row = assemble_one(ExtractedValues(), QtoOptions(use_geometry=True), mesh, extrusion)
        assert (row.area, row.volume) == (12.0, 8.0)
        assert mesh.calls == [7] and extrusion.calls == [7]

    def test_extrusion_skipped_when_mesh_complete(self) -> None:
        """Test later sources are not called once both values exist."""
        mesh = SpySource(GeometryResult(16.0, 8.0))
        extrusion = SpySource(GeometryResult(12.0, 30.0))
        assemble_one(ExtractedValues(), QtoOptions(use_geometry=True), mesh, extrusion)
        assert extrusion.calls == []

    @pytest.mark.parametrize("bad", [0.0, -1.0, math.nan, math.inf])
    def test_unusable_values_are_underived(self, bad: float) -> None:
        """Test non-positive and non-finite values fall through."""
        mesh = SpySource(GeometryResult(bad, bad))
        extrusion = SpySource(GeometryResult(12.0, 30.0))
        row = assemble_one(ExtractedValues(), QtoOptions(use_geometry=True), mesh, extrusion)
        assert (row.area, row.volume) == (12.0, 30.0)

    def test_failing_source_does_not_abort(self) -> None:
        """Test a raising source is skipped."""
        mesh = SpySource(error=RuntimeError("boom"))
        extrusion = SpySource(GeometryResult(12.0, 30.0))
        row = assemble_one(ExtractedValues(), QtoOptions(use_geometry=True), mesh, extrusion)
        assert (row.area, row.volume) == (12.0, 30.0)


class TestForceGeometry:
    """Tests for force_geometry."""

    def test_overwrites_extracted_values(self) -> None:
        """Test derived values replace extracted ones."""
        mesh = SpySource(GeometryResult(16.0, 8.0))
        row = assemble_one(ExtractedValues(12.5, 37.5), QtoOptions(force_geometry=True), mesh)
        assert (row.area, row.volume) == (16.0, 8.0)
        assert mesh.calls == [7]

    def test_keeps_extracted_when_underived(self) -> None:
        """Test a field without geometry keeps its extracted value."""
        mesh = SpySource(GeometryResult(volume=8.0))
        row = assemble_one(ExtractedValues(12.5, 37.5), QtoOptions(force_geometry=True), mesh)
        assert (row.area, row.volume) == (12.5, 8.0)


class TestRowShaping:
    """Tests for extras, rounding and renaming."""

    def test_core_columns_first(self) -> None:
        """Test output column order."""
        row = assemble_one(ExtractedValues(1.0, 2.0, {"Finish": "Tiles"}), QtoOptions())
        assert list(row.to_dict()) == ["id", "GlobalId", "Name", "LongName", "Area", "Volume", "Finish"]

    def test_extras_never_overwrite_core(self) -> None:
        """Test an extra named like a core column is dropped."""
        row = assemble_one(ExtractedValues(1.0, 2.0, {"Name": "spoof", "Area": 5}), QtoOptions())
        assert row.to_dict()["Name"] == "101"
        assert row.to_dict()["Area"] == 1.0

    def test_rounding(self) -> None:
        """Test floats are rounded, other values untouched."""
        values = ExtractedValues(12.345678, 2.0 / 3.0, {"Count": 3, "Label": "x", "Ratio": 0.123456})
        row = assemble_one(values, QtoOptions(round=2))
        assert row.area == 12.35
        assert row.volume == 0.67
        assert row.extra == {"Count": 3, "Label": "x", "Ratio": 0.12}

    def test_rename_keeps_position(self) -> None:
        """Test renamed keys stay in place."""
        options = QtoOptions(rename_map={"Area": "Fläche", "Name": "Raumnummer"})
        row = assemble_one(ExtractedValues(1.0, 2.0), options).to_dict()
        assert list(row) == ["id", "GlobalId", "Raumnummer", "LongName", "Fläche", "Volume"]
        assert row["Fläche"] == 1.0

    def test_rename_collision_last_wins(self) -> None:
        """Test a rename onto an existing key replaces it."""
        options = QtoOptions(rename_map={"Area": "Volume"})
        row = assemble_one(ExtractedValues(1.0, 2.0), options).to_dict()
        assert row["Volume"] == 1.0
        assert "Area" not in row

    def test_subject_order_preserved(self) -> None:
        """Test rows follow the given subject order."""
        subjects = [SpaceSubject(id=3), SpaceSubject(id=1), SpaceSubject(id=2)]
        rows = RowAssembler().assemble(subjects, {}, QtoOptions())
        assert [row.id for row in rows] == [3, 1, 2]


class TestRoundValue:
    """Tests for round_value."""

    @pytest.mark.parametrize("value", [0.1 + 0.2, 1234.56789, -0.000123456, 2.5, 1e-12])
    @pytest.mark.parametrize("decimals", [0, 3, 8])
    def test_idempotent(self, value: float, decimals: int) -> None:
        """Test rounding twice equals rounding once."""
        once = round_value(value, decimals)
        assert round_value(once, decimals) == once

    def test_passthrough(self) -> None:
        """Test non-floats and disabled rounding."""
        assert round_value(1.23456, None) == 1.23456
        assert round_value(True, 2) is True
        assert round_value("1.23456", 2) == "1.23456"
        assert math.isnan(round_value(math.nan, 2))
