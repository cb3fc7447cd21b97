"""Pytest configuration and fixtures."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import ifcopenshell
import ifcopenshell.guid
import pytest

from ifc_qto.infrastructure.ifc import ModelHandle
from ifc_qto.shared.config import Settings


class IfcModelBuilder:
    """Builds small IFC4 models in memory."""

    def __init__(self, schema: str = "IFC4") -> None:
        self.file = ifcopenshell.file(schema=schema)
        self._context = None

    def space(self, name: str | None = None, long_name: str | None = None, **attributes: Any) -> Any:
        """Create an IfcSpace."""
        return self.file.createIfcSpace(
            GlobalId=ifcopenshell.guid.new(),
            Name=name,
            LongName=long_name,
            **attributes,
        )

    def entity(self, ifc_class: str, **attributes: Any) -> Any:
        """Create any rooted entity."""
        return self.file.create_entity(ifc_class, GlobalId=ifcopenshell.guid.new(), **attributes)

    def quantity_set(
        self,
        name: str | None = "Qto_SpaceBaseQuantities",
        *,
        area: float | None = None,
        volume: float | None = None,
        length: float | None = None,
    ) -> Any:
        """Create an IfcElementQuantity with the given quantities."""
        quantities = []
        if area is not None:
            quantities.append(self.file.createIfcQuantityArea(Name="NetFloorArea", AreaValue=area))
        if volume is not None:
            quantities.append(self.file.createIfcQuantityVolume(Name="NetVolume", VolumeValue=volume))
        if length is not None:
            quantities.append(self.file.createIfcQuantityLength(Name="Height", LengthValue=length))
        return self.file.createIfcElementQuantity(
            GlobalId=ifcopenshell.guid.new(),
            Name=name,
            Quantities=quantities,
        )

    def property_set(self, name: str | None, properties: dict[str, Any]) -> Any:
        """Create an IfcPropertySet of single values."""
        return self.file.createIfcPropertySet(
            GlobalId=ifcopenshell.guid.new(),
            Name=name,
            HasProperties=[
                self.file.createIfcPropertySingleValue(Name=key, NominalValue=self.value(value))
                for key, value in properties.items()
            ],
        )

    def value(self, value: Any) -> Any:
        """Wrap a Python value in a matching IFC defined type."""
        if isinstance(value, bool):
            return self.file.create_entity("IfcBoolean", value)
        if isinstance(value, int):
            return self.file.create_entity("IfcInteger", value)
        if isinstance(value, float):
            return self.file.create_entity("IfcReal", value)
        return self.file.create_entity("IfcLabel", str(value))

    def relate(self, definition: Any, *objects: Any) -> Any:
        """Attach a definition to objects via IfcRelDefinesByProperties."""
        return self.file.createIfcRelDefinesByProperties(
            GlobalId=ifcopenshell.guid.new(),
            RelatedObjects=list(objects),
            RelatingPropertyDefinition=definition,
        )

    def context(self) -> Any:
        """Get (or create) the model representation context."""
        if self._context is None:
            self._context = self.file.createIfcGeometricRepresentationContext(
                ContextType="Model",
                CoordinateSpaceDimension=3,
                Precision=1.0e-5,
                WorldCoordinateSystem=self.placement(),
            )
        return self._context

    def placement(self) -> Any:
        """Create an identity IfcAxis2Placement3D."""
        return self.file.createIfcAxis2Placement3D(
            Location=self.file.createIfcCartesianPoint((0.0, 0.0, 0.0)),
        )

    def units(self, prefix: str | None = None) -> Any:
        """Create the IfcProject with an SI length unit (e.g. prefix "MILLI")."""
        length = self.file.createIfcSIUnit(UnitType="LENGTHUNIT", Prefix=prefix, Name="METRE")
        return self.file.createIfcProject(
            GlobalId=ifcopenshell.guid.new(),
            Name="Test",
            RepresentationContexts=[self.context()],
            UnitsInContext=self.file.createIfcUnitAssignment([length]),
        )

    def local_placement(self, x: float, y: float, z: float) -> Any:
        """Create an IfcLocalPlacement at the given location."""
        return self.file.createIfcLocalPlacement(
            RelativePlacement=self.file.createIfcAxis2Placement3D(
                Location=self.file.createIfcCartesianPoint((x, y, z)),
            ),
        )

    def extrusion(self, profile: Any, depth: float) -> Any:
        """Create an IfcExtrudedAreaSolid along +Z."""
        return self.file.createIfcExtrudedAreaSolid(
            SweptArea=profile,
            Position=self.placement(),
            ExtrudedDirection=self.file.createIfcDirection((0.0, 0.0, 1.0)),
            Depth=depth,
        )

    def rectangle(self, x: float, y: float) -> Any:
        """Create an IfcRectangleProfileDef."""
        return self.file.createIfcRectangleProfileDef(ProfileType="AREA", XDim=x, YDim=y)

    def polygon(self, points: list[tuple[float, float]]) -> Any:
        """Create an IfcArbitraryClosedProfileDef from a closed polyline."""
        ring = [self.file.createIfcCartesianPoint(point) for point in points]
        ring.append(ring[0])
        return self.file.createIfcArbitraryClosedProfileDef(
            ProfileType="AREA",
            OuterCurve=self.file.createIfcPolyline(ring),
        )

    def represent(self, product: Any, *items: Any) -> Any:
        """Give a product a body representation made of the given items."""
        product.Representation = self.file.createIfcProductDefinitionShape(
            Representations=[
                self.file.createIfcShapeRepresentation(
                    ContextOfItems=self.context(),
                    RepresentationIdentifier="Body",
                    RepresentationType="SweptSolid",
                    Items=list(items),
                ),
            ],
        )
        return product

    def handle(self) -> ModelHandle:
        """Wrap the in-memory file in a model handle."""
        return ModelHandle(self.file, source="test")

    def to_bytes(self) -> bytes:
        """Serialize to STEP bytes."""
        return self.file.to_string().encode("utf-8")

    def write(self, path: Path) -> Path:
        """Write the model to disk."""
        path.write_bytes(self.to_bytes())
        return path


@pytest.fixture
def builder() -> IfcModelBuilder:
    """Empty IFC4 model builder."""
    return IfcModelBuilder()


@pytest.fixture
def office_model(builder: IfcModelBuilder) -> IfcModelBuilder:
    """Two spaces: one with base quantities, one with a property set only."""
    office = builder.space("101", "Office", ObjectType="Office", Description="North wing")
    storage = builder.space("102", "Storage")

    builder.relate(builder.quantity_set(area=12.5, volume=37.5), office)
    builder.relate(
        builder.property_set("Pset_SpaceCommon", {"Reference": "R-101", "IsExternal": False}),
        office,
    )
    builder.relate(
        builder.property_set("BIM_Data", {"Netto Area": 8.0, "Raumvolumen": 20.0, "Finish": "Tiles"}),
        storage,
    )
    return builder


@pytest.fixture
def test_settings() -> Settings:
    """Test settings."""
    return Settings(
        log_level="DEBUG",
        qto_round_decimals=4,
    )
