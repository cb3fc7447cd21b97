"""Property and quantity definition reader.

Maps IfcPropertySet / IfcElementQuantity records onto domain definitions.
"""
from __future__ import annotations

from typing import Any, Iterator

from ifc_qto.domain import (
    Definition,
    MalformedDefinitionError,
    Property,
    PropertySet,
    Quantity,
    QuantityKind,
    QuantitySet,
)
from ifc_qto.infrastructure.ifc.attributes import attribute, is_reference, to_number
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)

# Value attribute per quantity class
QUANTITY_VALUE_ATTRIBUTES = {
    "IfcQuantityArea": "AreaValue",
    "IfcQuantityVolume": "VolumeValue",
    "IfcQuantityLength": "LengthValue",
    "IfcQuantityCount": "CountValue",
    "IfcQuantityWeight": "WeightValue",
    "IfcQuantityTime": "TimeValue",
    "IfcQuantityNumber": "NumberValue",
}

# Value attribute per simple property class
PROPERTY_VALUE_ATTRIBUTES = {
    "IfcPropertySingleValue": "NominalValue",
    "IfcPropertyEnumeratedValue": "EnumerationValues",
    "IfcPropertyListValue": "ListValues",
}


def read_definition(record: Any) -> Definition | None:
    """Read a property or quantity set record.

    Args:
        record: Definition record from the relationship index

    Returns:
        PropertySet, QuantitySet, or None for other definition kinds

    Raises:
        MalformedDefinitionError: If the record cannot be traversed
    """
    if not is_reference(record):
        return None

    try:
        if record.is_a("IfcElementQuantity"):
            return QuantitySet(
                name=attribute(record, "Name") or "Qto",
                quantities=tuple(_read_quantities(record)),
            )
        if record.is_a("IfcPropertySet"):
            return PropertySet(
                name=attribute(record, "Name") or "Pset",
                properties=tuple(_read_properties(record)),
            )
    except (AttributeError, RuntimeError, TypeError) as e:
        raise MalformedDefinitionError(record.id(), str(e)) from e

    return None


def _read_quantities(record: Any) -> Iterator[Quantity]:
    for quantity in attribute(record, "Quantities") or ():
        if not is_reference(quantity):
            continue
        name = attribute(quantity, "Name")
        value_attribute = QUANTITY_VALUE_ATTRIBUTES.get(quantity.is_a())
        if not name or value_attribute is None:
            continue

        value = to_number(attribute(quantity, value_attribute))
        if value is None:
            logger.debug("Skipping non-numeric quantity", quantity=name, id=quantity.id())
            continue

        yield Quantity(
            name=str(name),
            kind=QuantityKind.from_ifc_class(quantity.is_a()),
            value=value,
        )


def _read_properties(record: Any) -> Iterator[Property]:
    for prop in attribute(record, "HasProperties") or ():
        if not is_reference(prop):
            continue
        name = attribute(prop, "Name")
        if not name:
            continue
        yield Property(name=str(name), value=property_value(prop))


def property_value(prop: Any) -> Any:
    """Get the primitive value of a simple property.

    Multi-valued properties with a single entry return that entry; longer
    ones are joined with ", ". Complex properties return None.
    """
    value_attribute = PROPERTY_VALUE_ATTRIBUTES.get(prop.is_a())
    if value_attribute is None:
        return None

    value = attribute(prop, value_attribute)
    if isinstance(value, tuple):
        items = [item for item in value if not is_reference(item)]
        if not items:
            return None
        if len(items) == 1:
            return items[0]
        return ", ".join(str(item) for item in items)
    if is_reference(value):
        return None
    return value
