"""Property and Quantity Definitions.

Domain view of the property sets and quantity sets attached to an IFC
object through IfcRelDefinesByProperties.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class QuantityKind(str, Enum):
    """Quantity classification used for Area/Volume resolution."""

    AREA = "area"
    VOLUME = "volume"
    LENGTH = "length"
    OTHER = "other"

    @classmethod
    def from_ifc_class(cls, ifc_class: str) -> QuantityKind:
        """Map IFC quantity class to kind.

        Args:
            ifc_class: IFC entity class name (e.g., "IfcQuantityArea")

        Returns:
            Corresponding QuantityKind
        """
        mapping = {
            "IfcQuantityArea": cls.AREA,
            "IfcQuantityVolume": cls.VOLUME,
            "IfcQuantityLength": cls.LENGTH,
        }
        return mapping.get(ifc_class, cls.OTHER)


@dataclass(frozen=True)
class Property:
    """Single named property value."""

    name: str
    value: Any


@dataclass(frozen=True)
class Quantity:
    """Explicitly typed numeric quantity."""

    name: str
    kind: QuantityKind
    value: float


@dataclass(frozen=True)
class PropertySet:
    """Named bag of (name, value) pairs in declaration order."""

    name: str
    properties: tuple[Property, ...] = ()


@dataclass(frozen=True)
class QuantitySet:
    """Named bag of typed quantities in declaration order."""

    name: str
    quantities: tuple[Quantity, ...] = ()


Definition = Union[PropertySet, QuantitySet]
