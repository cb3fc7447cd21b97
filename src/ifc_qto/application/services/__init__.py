"""Application services.

Space quantity takeoff and the attribute/parameter listing services.
"""
from __future__ import annotations

# Re-export services for convenient imports
# These will be available as:
#   from ifc_qto.application.services import SpaceQtoService

__all__ = [
    "AttributeExportService",
    "ParameterExplorerService",
    "RowAssembler",
    "SpaceQtoService",
    "compute_from_extrusion",
    "compute_from_mesh",
    "extract",
]


def __getattr__(name: str):
    """Lazy imports for services."""
    if name == "AttributeExportService":
        from ifc_qto.application.services.attribute_export_service import AttributeExportService
        return AttributeExportService
    elif name == "ParameterExplorerService":
        from ifc_qto.application.services.parameter_explorer_service import ParameterExplorerService
        return ParameterExplorerService
    elif name == "RowAssembler":
        from ifc_qto.application.services.row_assembler import RowAssembler
        return RowAssembler
    elif name == "SpaceQtoService":
        from ifc_qto.application.services.space_qto_service import SpaceQtoService
        return SpaceQtoService
    elif name == "compute_from_extrusion":
        from ifc_qto.application.services.extrusion_geometry import compute_from_extrusion
        return compute_from_extrusion
    elif name == "compute_from_mesh":
        from ifc_qto.application.services.mesh_geometry import compute_from_mesh
        return compute_from_mesh
    elif name == "extract":
        from ifc_qto.application.services.property_extractor import extract
        return extract
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
