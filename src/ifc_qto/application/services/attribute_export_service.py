"""Attribute Export Service.

Flat attribute tables (core attributes, property sets, quantity sets)
for rooted IFC entities.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Sequence

from ifc_qto.application.services.property_extractor import flatten_definitions
from ifc_qto.domain import ValidationError
from ifc_qto.infrastructure.ifc import ModelHandle, attribute, build_index
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)

Layout = Literal["wide", "long"]

CORE_ATTRIBUTES = ("GlobalId", "Name", "Description", "ObjectType", "Tag")
CORE_PREFIX = "Core."

DEFAULT_EXCLUDE_TYPES = ("IfcPropertySet", "IfcBuilding", "IfcBuildingStorey", "IfcProject")

ROOT_CLASS = "IfcRoot"
RELATIONSHIP_CLASS = "IfcRelationship"


@dataclass
class AttributeExportResult:
    """Result of an attribute export."""

    layout: Layout
    rows: list[dict[str, Any]] = field(default_factory=list)
    types: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of rows."""
        return len(self.rows)

    def to_dict(self) -> dict:
        """Convert to dict."""
        return {
            "layout": self.layout,
            "types": self.types,
            "count": self.count,
            "rows": self.rows,
        }


class AttributeExportService:
    """Service for exporting entity attributes as flat rows.

    Only rooted entities (those carrying a GlobalId) are exported;
    relationships are never exported.
    """

    def export(
        self,
        model: ModelHandle,
        ifc_types: Sequence[str] | None = None,
        layout: Layout = "wide",
        include_core: bool = True,
        exclude_types: Iterable[str] = DEFAULT_EXCLUDE_TYPES,
    ) -> AttributeExportResult:
        """Export attributes of the requested entity types.

        Args:
            model: Open model handle
            ifc_types: Exact IFC classes to export (None = all rooted classes)
            layout: "wide" (one row per entity) or "long" (key/value rows)
            include_core: Include GlobalId, Name, Description, ObjectType, Tag
            exclude_types: IFC classes never exported

        Returns:
            AttributeExportResult

        Raises:
            ValidationError: If the layout is unknown
        """
        if layout not in ("wide", "long"):
            raise ValidationError("layout", "must be 'wide' or 'long'", layout)

        excluded = {name.strip().upper() for name in exclude_types if name.strip()}
        groups = self._collect(model, ifc_types, excluded)

        index = build_index(model)
        result = AttributeExportResult(layout=layout, types=list(groups))

        for type_name, records in groups.items():
            for record in records:
                base: dict[str, Any] = {"ExpressID": record.id(), "Type": type_name}
                if include_core:
                    base.update(self._core_attributes(record))

                columns = flatten_definitions(index.definitions_for(record.id()))

                if layout == "wide":
                    result.rows.append({**base, **columns})
                else:
                    result.rows.extend(self._long_rows(record.id(), type_name, base, columns))

        logger.info(
            "Attribute export complete",
            layout=layout,
            types=len(result.types),
            rows=result.count,
        )
        return result

    def _collect(
        self,
        model: ModelHandle,
        ifc_types: Sequence[str] | None,
        excluded: set[str],
    ) -> dict[str, list[Any]]:
        """Group exportable records by exact class, in first-seen order."""
        if ifc_types is None:
            records = [
                record
                for record in model.by_type(ROOT_CLASS)
                if not record.is_a(RELATIONSHIP_CLASS)
            ]
        else:
            records = []
            for name in dict.fromkeys(t.strip() for t in ifc_types if t.strip()):
                found = model.by_type(name, include_subtypes=False)
                if not found:
                    logger.debug("No entities of requested type", ifc_type=name)
                records.extend(found)

        groups: dict[str, list[Any]] = {}
        for record in records:
            type_name = record.is_a()
            if type_name.upper() in excluded:
                continue
            if attribute(record, "GlobalId") is None:
                continue
            groups.setdefault(type_name, []).append(record)
        return groups

    @staticmethod
    def _core_attributes(record: Any) -> dict[str, Any]:
        tag = attribute(record, "Tag")
        if tag is None:
            tag = attribute(record, "Number")
        return {
            "GlobalId": attribute(record, "GlobalId"),
            "Name": attribute(record, "Name"),
            "Description": attribute(record, "Description"),
            "ObjectType": attribute(record, "ObjectType"),
            "Tag": tag,
        }

    @staticmethod
    def _long_rows(
        express_id: int,
        type_name: str,
        base: dict[str, Any],
        columns: dict[str, Any],
    ) -> list[dict[str, Any]]:
        rows = [
            {"ExpressID": express_id, "Type": type_name, "key": f"{CORE_PREFIX}{key}", "value": base[key]}
            for key in CORE_ATTRIBUTES
            if base.get(key) is not None
        ]
        rows.extend(
            {"ExpressID": express_id, "Type": type_name, "key": key, "value": value}
            for key, value in columns.items()
        )
        return rows
