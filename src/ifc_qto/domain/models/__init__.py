"""Domain Models.

Core domain entities for space quantity takeoff.
"""
from __future__ import annotations

from ifc_qto.domain.models.definitions import (
    Definition,
    Property,
    PropertySet,
    Quantity,
    QuantityKind,
    QuantitySet,
)
from ifc_qto.domain.models.geometry import (
    ArbitraryClosedProfile,
    ExtrusionSolid,
    GeometryResult,
    Mesh,
    Profile,
    RectangleProfile,
    UnsupportedProfile,
)
from ifc_qto.domain.models.options import QtoOptions
from ifc_qto.domain.models.space import (
    CORE_COLUMNS,
    ExtractedValues,
    SpaceRow,
    SpaceSubject,
    rename_keys,
)

__all__ = [
    # Definitions
    "Definition",
    "Property",
    "PropertySet",
    "Quantity",
    "QuantityKind",
    "QuantitySet",
    # Geometry
    "ArbitraryClosedProfile",
    "ExtrusionSolid",
    "GeometryResult",
    "Mesh",
    "Profile",
    "RectangleProfile",
    "UnsupportedProfile",
    # Options
    "QtoOptions",
    # Space
    "CORE_COLUMNS",
    "ExtractedValues",
    "SpaceRow",
    "SpaceSubject",
    "rename_keys",
]
