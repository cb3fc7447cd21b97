"""Space QTO Service.

Quantity takeoff for IfcSpace: Area/Volume per space from quantity sets,
property heuristics, mesh integration and extrusion analytics.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable

from ifc_qto.application.services.extrusion_geometry import compute_from_extrusion
from ifc_qto.application.services.mesh_geometry import compute_from_mesh
from ifc_qto.application.services.property_extractor import extract
from ifc_qto.application.services.row_assembler import RowAssembler
from ifc_qto.domain import (
    ExtractedValues,
    ExtrusionProvider,
    GeometryResult,
    MeshProvider,
    NullMeshProvider,
    QtoOptions,
    SpaceRow,
    SpaceSubject,
)
from ifc_qto.infrastructure.ifc import (
    SPACE_CLASS,
    IfcExtrusionProvider,
    IfcOpenShellMeshProvider,
    ModelHandle,
    RelationshipIndex,
    build_index,
    open_model,
    read_model_file,
    read_subject,
)
from ifc_qto.shared.config import settings
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)

MeshProviderFactory = Callable[[ModelHandle], MeshProvider]
ExtrusionProviderFactory = Callable[[ModelHandle], ExtrusionProvider]


class SpaceQtoService:
    """Service for deriving space Area/Volume rows from IFC models."""

    def __init__(
        self,
        *,
        mesh_provider_factory: MeshProviderFactory | None = None,
        extrusion_provider_factory: ExtrusionProviderFactory | None = None,
        footprint_threshold: float | None = None,
    ) -> None:
        """Initialize service.

        Args:
            mesh_provider_factory: Creates the mesh provider for a model
            extrusion_provider_factory: Creates the extrusion provider for a model
            footprint_threshold: Near-horizontal threshold for footprint area
        """
        self._mesh_provider_factory = mesh_provider_factory or IfcOpenShellMeshProvider
        self._extrusion_provider_factory = extrusion_provider_factory or IfcExtrusionProvider
        self._footprint_threshold = (
            footprint_threshold
            if footprint_threshold is not None
            else settings.qto_footprint_threshold
        )

    def run_file(self, file_path: str | Path, options: QtoOptions) -> list[SpaceRow]:
        """Run the takeoff on an IFC file.

        Raises:
            IfcFileNotFoundError: If the file doesn't exist
            DecodeError: If the file is too large or cannot be decoded
        """
        data = read_model_file(file_path)
        return self.run(data, options, source=str(file_path))

    def run(
        self,
        data: bytes,
        options: QtoOptions,
        *,
        source: str | None = None,
    ) -> list[SpaceRow]:
        """Run the takeoff on raw IFC bytes.

        The model is released before returning, also on errors.

        Args:
            data: IFC file content
            options: Takeoff options
            source: Optional origin description for logs

        Returns:
            One SpaceRow per IfcSpace

        Raises:
            DecodeError: If the bytes cannot be decoded
        """
        with open_model(data, source=source) as model:
            return self.run_model(model, options)

    def run_model(self, model: ModelHandle, options: QtoOptions) -> list[SpaceRow]:
        """Run the takeoff on an open model.

        Args:
            model: Open model handle
            options: Takeoff options

        Returns:
            One SpaceRow per IfcSpace, indexed subjects first
        """
        logger.info(
            "Starting space QTO",
            source=model.source,
            use_geometry=options.use_geometry,
            force_geometry=options.force_geometry,
        )

        index = build_index(model)
        records = {record.id(): record for record in model.by_type(SPACE_CLASS)}
        ordered_ids = index.order_subjects(records)

        subjects: list[SpaceSubject] = []
        extracted: dict[int, ExtractedValues] = {}
        for subject_id in ordered_ids:
            subject = read_subject(records[subject_id])
            subjects.append(subject)
            extracted[subject_id] = self._extract(index, subject, options)

        assembler = self._create_assembler(model, options, ordered_ids)
        rows = assembler.assemble(subjects, extracted, options)

        logger.info(
            "Space QTO complete",
            spaces=len(rows),
            with_area=sum(1 for row in rows if row.area is not None),
            with_volume=sum(1 for row in rows if row.volume is not None),
        )
        return rows

    def _extract(
        self,
        index: RelationshipIndex,
        subject: SpaceSubject,
        options: QtoOptions,
    ) -> ExtractedValues:
        """Extract values for one subject without aborting the batch."""
        try:
            values = extract(index, subject.id, options)
        except Exception as e:
            logger.warning(
                "Extraction failed for space",
                subject_id=subject.id,
                global_id=subject.global_id,
                error=str(e),
            )
            return ExtractedValues()

        # Requested fields missing from the definitions may be plain attributes
        for name in options.extra_params:
            if name not in values.extra and name in subject.attributes:
                values.extra[name] = subject.attributes[name]

        return values

    def _create_assembler(
        self,
        model: ModelHandle,
        options: QtoOptions,
        subject_ids: list[int],
    ) -> RowAssembler:
        if not options.needs_geometry:
            return RowAssembler()

        if model.engine is not None and not model.engine.available:
            mesh_provider: MeshProvider = NullMeshProvider()
        else:
            mesh_provider = self._mesh_provider_factory(model)
        extrusion_provider = self._extrusion_provider_factory(model)

        prefetch = getattr(mesh_provider, "prefetch", None)
        if options.force_geometry and callable(prefetch):
            prefetch(subject_ids)

        def mesh_source(subject_id: int) -> GeometryResult:
            return compute_from_mesh(
                mesh_provider.meshes_for(subject_id), self._footprint_threshold,
            )

        def extrusion_source(subject_id: int) -> GeometryResult:
            solid = extrusion_provider.extrusion_for(subject_id)
            if solid is None:
                return GeometryResult()
            return compute_from_extrusion(solid)

        return RowAssembler(mesh_source=mesh_source, extrusion_source=extrusion_source)


def run_space_qto(data: bytes, options: QtoOptions | None = None) -> list[SpaceRow]:
    """Convenience function to run the space takeoff on IFC bytes."""
    if options is None:
        options = QtoOptions(
            use_geometry=settings.qto_use_geometry,
            round=settings.qto_round_decimals,
        )
    return SpaceQtoService().run(data, options)
