"""IFC Infrastructure.

IfcOpenShell-based decoding, relationship indexing and geometry readers.
"""
from __future__ import annotations

from ifc_qto.infrastructure.ifc.attributes import (
    attribute,
    is_reference,
    is_scalar,
    is_wrapper,
    to_number,
    unwrap,
)
from ifc_qto.infrastructure.ifc.definitions import property_value, read_definition
from ifc_qto.infrastructure.ifc.geometry import (
    IfcExtrusionProvider,
    IfcOpenShellMeshProvider,
    find_extrusion,
    read_profile,
)
from ifc_qto.infrastructure.ifc.model import (
    SUPPORTED_SCHEMAS,
    GeometryEngine,
    ModelHandle,
    open_model,
    read_model_file,
)
from ifc_qto.infrastructure.ifc.relationships import RelationshipIndex, build_index
from ifc_qto.infrastructure.ifc.subjects import SPACE_CLASS, read_subject

__all__ = [
    # Attributes
    "attribute",
    "is_reference",
    "is_scalar",
    "is_wrapper",
    "to_number",
    "unwrap",
    # Definitions
    "property_value",
    "read_definition",
    # Geometry
    "IfcExtrusionProvider",
    "IfcOpenShellMeshProvider",
    "find_extrusion",
    "read_profile",
    # Model
    "SUPPORTED_SCHEMAS",
    "GeometryEngine",
    "ModelHandle",
    "open_model",
    "read_model_file",
    # Relationships
    "RelationshipIndex",
    "build_index",
    # Subjects
    "SPACE_CLASS",
    "read_subject",
]
