"""Tests for the relationship index and definition readers."""
from __future__ import annotations

import pytest

from ifc_qto.domain import (
    MalformedDefinitionError,
    Property,
    PropertySet,
    QuantityKind,
    QuantitySet,
)
from ifc_qto.infrastructure.ifc import build_index, read_definition, read_subject
from ifc_qto.infrastructure.ifc import relationships


class TestBuildIndex:
    """Tests for build_index."""

    def test_subjects_in_first_encounter_order(self, builder) -> None:
        """Test subject order follows the relationship scan."""
        first, second, third = builder.space("1"), builder.space("2"), builder.space("3")
        builder.relate(builder.quantity_set(area=1.0), third)
        builder.relate(builder.property_set("P", {"A": 1.0}), first, third)

        index = build_index(builder.handle())

        assert index.subject_ids == [third.id(), first.id()]
        assert index.order_subjects([first.id(), second.id(), third.id()]) == [
            third.id(),
            first.id(),
            second.id(),
        ]

    def test_definitions_in_scan_order(self, builder) -> None:
        """Test a subject's definitions keep their scan order."""
        space = builder.space("1")
        builder.relate(builder.property_set("Later", {"A": 1.0}), space)
        builder.relate(builder.quantity_set("Qto", area=2.0), space)

        definitions = build_index(builder.handle()).definitions_for(space.id())

        assert [definition.name for definition in definitions] == ["Later", "Qto"]

    def test_incomplete_relationships_skipped(self, builder) -> None:
        """Test relationships without objects or definition are skipped."""
        space = builder.space("1")
        builder.relate(builder.quantity_set(area=1.0))
        builder.file.createIfcRelDefinesByProperties(
            GlobalId="3Ax9h2Jz55Mw0Z7IZS4dVf",
            RelatedObjects=[space],
        )

        index = build_index(builder.handle())

        assert len(index) == 0
        assert index.relationship_count == 2
        assert index.skipped_count == 2

    def test_unknown_subject(self, builder) -> None:
        """Test a subject without relationships."""
        index = build_index(builder.handle())
        assert index.definitions_for(42) == []
        assert 42 not in index

    def test_malformed_definition_skipped(self, builder, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test unreadable definitions are skipped, not raised."""
        space = builder.space("1")
        broken = builder.property_set("Broken", {"A": 1.0})
        builder.relate(broken, space)
        builder.relate(builder.quantity_set(area=5.0), space)

        real_read = relationships.read_definition

        def flaky_read(record):
            if record.id() == broken.id():
                raise MalformedDefinitionError(record.id(), "cycle")
            return real_read(record)

        monkeypatch.setattr(relationships, "read_definition", flaky_read)
        definitions = build_index(builder.handle()).definitions_for(space.id())

        assert [type(definition) for definition in definitions] == [QuantitySet]


class TestReadDefinition:
    """Tests for read_definition."""

    def test_quantity_set(self, builder) -> None:
        """Test quantities are read with kinds and values."""
        result = read_definition(builder.quantity_set(area=12.5, volume=37.5, length=3.0))

        assert isinstance(result, QuantitySet)
        assert result.name == "Qto_SpaceBaseQuantities"
        assert [(q.name, q.kind, q.value) for q in result.quantities] == [
            ("NetFloorArea", QuantityKind.AREA, 12.5),
            ("NetVolume", QuantityKind.VOLUME, 37.5),
            ("Height", QuantityKind.LENGTH, 3.0),
        ]

    def test_unnamed_sets_get_default_names(self, builder) -> None:
        """Test missing set names default to Qto/Pset."""
        assert read_definition(builder.quantity_set(None, area=1.0)).name == "Qto"
        assert read_definition(builder.property_set(None, {"A": 1.0})).name == "Pset"

    def test_property_set_values_unwrapped(self, builder) -> None:
        """Test single values are reduced to primitives."""
        result = read_definition(
            builder.property_set("Pset_SpaceCommon", {"Reference": "R1", "IsExternal": False, "Count": 3}),
        )

        assert result == PropertySet(
            "Pset_SpaceCommon",
            (
                Property("Reference", "R1"),
                Property("IsExternal", False),
                Property("Count", 3),
            ),
        )

    def test_enumerated_values(self, builder) -> None:
        """Test multi-valued properties are joined."""
        single = builder.file.createIfcPropertyEnumeratedValue(
            Name="Finish", EnumerationValues=[builder.value("Tiles")],
        )
        multi = builder.file.createIfcPropertyEnumeratedValue(
            Name="Colors", EnumerationValues=[builder.value("Red"), builder.value("Blue")],
        )
        pset = builder.file.createIfcPropertySet(
            GlobalId="1Ax9h2Jz55Mw0Z7IZS4dVf", Name="Enum", HasProperties=[single, multi],
        )

        result = read_definition(pset)

        assert result.properties == (Property("Finish", "Tiles"), Property("Colors", "Red, Blue"))

    def test_other_definitions_ignored(self, builder) -> None:
        """Test non-set records return None."""
        assert read_definition(builder.space("1")) is None
        assert read_definition(None) is None


class TestReadSubject:
    """Tests for read_subject."""

    def test_identity_and_attributes(self, builder) -> None:
        """Test identity fields and scalar attributes are copied."""
        space = builder.space("101", "Office", ObjectType="Office", Description="North wing")

        subject = read_subject(space)

        assert subject.id == space.id()
        assert subject.global_id == space.GlobalId
        assert (subject.name, subject.long_name) == ("101", "Office")
        assert subject.attributes["ObjectType"] == "Office"
        assert subject.attributes["Description"] == "North wing"
        assert "GlobalId" not in subject.attributes
        assert "Name" not in subject.attributes

    def test_references_not_copied(self, builder) -> None:
        """Test entity references stay out of the attribute copy."""
        space = builder.represent(builder.space("101"), builder.extrusion(builder.rectangle(1.0, 1.0), 1.0))
        assert "Representation" not in read_subject(space).attributes
