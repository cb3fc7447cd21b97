"""Property/Quantity Extractor.

Single traversal of a subject's property and quantity sets, shared by the
space QTO, attribute export and parameter explorer services.
"""
from __future__ import annotations

import re
from typing import Any, Iterable

from ifc_qto.domain import (
    Definition,
    ExtractedValues,
    PropertySet,
    QtoOptions,
    QuantityKind,
    QuantitySet,
)
from ifc_qto.infrastructure.ifc import RelationshipIndex, to_number

# Property-set heuristics (German models use "Volumen")
AREA_NAME_PATTERN = re.compile(r"area", re.IGNORECASE)
VOLUME_NAME_PATTERN = re.compile(r"volume|volumen", re.IGNORECASE)


def qualified_name(set_name: str, name: str) -> str:
    """Column key for a set member, e.g. "Qto_SpaceBaseQuantities.NetFloorArea"."""
    return f"{set_name}.{name}"


def extract_values(definitions: Iterable[Definition], options: QtoOptions) -> ExtractedValues:
    """Resolve Area/Volume and extra fields from definitions.

    One left-to-right pass; the first value seen for a slot wins.
    Quantity sets fill Area/Volume from their first AREA/VOLUME quantity.
    Property sets fill a still-empty slot from the first numeric property
    whose name matches the Area/Volume pattern.

    Args:
        definitions: Subject definitions in index order
        options: Extraction options

    Returns:
        ExtractedValues
    """
    result = ExtractedValues()
    wanted = set(options.extra_params)

    for definition in definitions:
        if isinstance(definition, QuantitySet):
            for quantity in definition.quantities:
                if quantity.kind is QuantityKind.AREA and result.area is None:
                    result.area = quantity.value
                elif quantity.kind is QuantityKind.VOLUME and result.volume is None:
                    result.volume = quantity.value

                key = qualified_name(definition.name, quantity.name)
                if options.all_params:
                    result.extra.setdefault(key, quantity.value)
                _select(result.extra, wanted, quantity.name, key, quantity.value)

        elif isinstance(definition, PropertySet):
            for prop in definition.properties:
                key = qualified_name(definition.name, prop.name)
                if options.all_params:
                    result.extra.setdefault(key, prop.value)
                _select(result.extra, wanted, prop.name, key, prop.value)

                if result.area is None and AREA_NAME_PATTERN.search(prop.name):
                    result.area = to_number(prop.value)
                if result.volume is None and VOLUME_NAME_PATTERN.search(prop.name):
                    result.volume = to_number(prop.value)

    return result


def _select(extra: dict[str, Any], wanted: set[str], name: str, key: str, value: Any) -> None:
    if name in wanted:
        extra.setdefault(name, value)
    if key in wanted:
        extra.setdefault(key, value)


def extract(index: RelationshipIndex, subject_id: int, options: QtoOptions) -> ExtractedValues:
    """Extract Area/Volume and extra fields for one subject.

    Args:
        index: Relationship index of the open model
        subject_id: Subject express id
        options: Extraction options

    Returns:
        ExtractedValues (empty for subjects without definitions)
    """
    return extract_values(index.definitions_for(subject_id), options)


def flatten_definitions(definitions: Iterable[Definition]) -> dict[str, Any]:
    """Flatten definitions to "<set>.<name>" -> value, first occurrence wins."""
    flat: dict[str, Any] = {}
    for definition in definitions:
        if isinstance(definition, QuantitySet):
            for quantity in definition.quantities:
                flat.setdefault(qualified_name(definition.name, quantity.name), quantity.value)
        elif isinstance(definition, PropertySet):
            for prop in definition.properties:
                flat.setdefault(qualified_name(definition.name, prop.name), prop.value)
    return flat
