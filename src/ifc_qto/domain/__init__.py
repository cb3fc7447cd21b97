"""Domain Layer.

Contains the core entities, options, exceptions and provider interfaces.
This layer has no IFC engine or framework dependencies.
"""
from __future__ import annotations

from ifc_qto.domain.exceptions import (
    DecodeError,
    DomainError,
    GeometryUnavailableError,
    IfcFileNotFoundError,
    IfcImportError,
    MalformedDefinitionError,
    ModelReleasedError,
    ValidationError,
)
from ifc_qto.domain.models import (
    CORE_COLUMNS,
    ArbitraryClosedProfile,
    Definition,
    ExtractedValues,
    ExtrusionSolid,
    GeometryResult,
    Mesh,
    Profile,
    Property,
    PropertySet,
    QtoOptions,
    Quantity,
    QuantityKind,
    QuantitySet,
    RectangleProfile,
    SpaceRow,
    SpaceSubject,
    UnsupportedProfile,
    rename_keys,
)
from ifc_qto.domain.providers import (
    ExtrusionProvider,
    MeshProvider,
    NullMeshProvider,
)

__all__ = [
    # Exceptions
    "DomainError",
    "ValidationError",
    "IfcImportError",
    "IfcFileNotFoundError",
    "DecodeError",
    "ModelReleasedError",
    "GeometryUnavailableError",
    "MalformedDefinitionError",
    # Models
    "Definition",
    "Property",
    "PropertySet",
    "Quantity",
    "QuantityKind",
    "QuantitySet",
    "ArbitraryClosedProfile",
    "ExtrusionSolid",
    "GeometryResult",
    "Mesh",
    "Profile",
    "RectangleProfile",
    "UnsupportedProfile",
    "QtoOptions",
    "CORE_COLUMNS",
    "ExtractedValues",
    "SpaceRow",
    "SpaceSubject",
    "rename_keys",
    # Providers
    "ExtrusionProvider",
    "MeshProvider",
    "NullMeshProvider",
]
