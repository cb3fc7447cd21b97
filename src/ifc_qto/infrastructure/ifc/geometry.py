"""IfcOpenShell geometry readers.

Mesh provider backed by the IfcOpenShell geometry engine and an analytical
reader for extruded-solid representations.
"""
from __future__ import annotations

from typing import Any, Iterable, Iterator

import ifcopenshell.geom
import ifcopenshell.util.shape

from ifc_qto.domain import (
    ArbitraryClosedProfile,
    ExtrusionSolid,
    GeometryUnavailableError,
    Mesh,
    Profile,
    RectangleProfile,
    UnsupportedProfile,
)
from ifc_qto.infrastructure.ifc.attributes import attribute, is_reference, to_number
from ifc_qto.infrastructure.ifc.model import GeometryEngine, ModelHandle
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)


class IfcOpenShellMeshProvider:
    """Triangulates subjects with the IfcOpenShell geometry engine.

    Uses whichever entry point the installed engine offers: the streaming
    iterator for ``prefetch`` and ``create_shape`` per subject otherwise.
    Missing geometry yields an empty list, never an exception.
    """

    def __init__(self, model: ModelHandle, engine: GeometryEngine | None = None) -> None:
        """Initialize provider.

        Args:
            model: Open model handle
            engine: Geometry engine (defaults to the model's, then the shared one)
        """
        self._model = model
        self._engine = engine or model.engine or GeometryEngine.acquire()
        self._cache: dict[int, list[Mesh]] = {}

    def prefetch(self, subject_ids: Iterable[int]) -> None:
        """Triangulate many subjects in one streaming pass when supported."""
        if not self._engine.supports_streaming:
            return

        records = [
            record for record in map(self._model.by_id, subject_ids)
            if record is not None and _has_representation(record)
        ]
        if not records:
            return

        try:
            iterator = ifcopenshell.geom.iterator(
                self._engine.settings, self._model.ifc, 1, include=records,
            )
            if not iterator.initialize():
                return
            while True:
                shape = iterator.get()
                mesh = _mesh_from_shape(shape)
                if mesh is not None:
                    self._cache.setdefault(int(shape.id), []).append(mesh)
                if not iterator.next():
                    break
        except Exception as e:
            logger.warning("Streaming triangulation failed", error=str(e))
            return

        for record in records:
            self._cache.setdefault(record.id(), [])
        logger.debug("Prefetched meshes", subjects=len(records))

    def meshes_for(self, subject_id: int) -> list[Mesh]:
        """Get the mesh chunks of a subject."""
        if subject_id in self._cache:
            return self._cache[subject_id]

        try:
            meshes = self._triangulate(subject_id)
        except GeometryUnavailableError as e:
            logger.warning("Geometry unavailable", subject_id=subject_id, reason=e.reason)
            meshes = []

        self._cache[subject_id] = meshes
        return meshes

    def _triangulate(self, subject_id: int) -> list[Mesh]:
        record = self._model.by_id(subject_id)
        if record is None:
            raise GeometryUnavailableError(subject_id, "record not found")
        if not _has_representation(record):
            return []
        if not self._engine.supports_shapes:
            raise GeometryUnavailableError(subject_id, "engine cannot create shapes")

        try:
            shape = ifcopenshell.geom.create_shape(self._engine.settings, record)
        except Exception as e:
            raise GeometryUnavailableError(subject_id, str(e) or type(e).__name__) from e

        mesh = _mesh_from_shape(shape)
        return [mesh] if mesh is not None else []


def _has_representation(record: Any) -> bool:
    return is_reference(attribute(record, "Representation"))


def _mesh_from_shape(shape: Any) -> Mesh | None:
    geometry = getattr(shape, "geometry", None)
    if geometry is None:
        return None

    vertices = geometry.verts
    faces = geometry.faces
    if not len(vertices) or not len(faces):
        return None

    try:
        matrix = ifcopenshell.util.shape.get_shape_matrix(shape)
    except Exception as e:
        logger.debug("Shape matrix unavailable", shape_id=getattr(shape, "id", None), error=str(e))
        matrix = None

    return Mesh(vertices=vertices, indices=faces, transform=matrix)


class IfcExtrusionProvider:
    """Reads the first extruded solid of a subject from the model."""

    def __init__(self, model: ModelHandle) -> None:
        self._model = model

    def extrusion_for(self, subject_id: int) -> ExtrusionSolid | None:
        record = self._model.by_id(subject_id)
        if record is None:
            return None
        return find_extrusion(record)


def find_extrusion(record: Any) -> ExtrusionSolid | None:
    """Find the first IfcExtrudedAreaSolid of a record's representations.

    Mapped items are followed into their source representation. Later
    extrusions are ignored.

    Args:
        record: Product record

    Returns:
        ExtrusionSolid or None when there is no extrusion
    """
    representation = attribute(record, "Representation")
    if not is_reference(representation):
        return None

    for shape_representation in attribute(representation, "Representations") or ():
        for item in _iter_items(attribute(shape_representation, "Items") or ()):
            if item.is_a("IfcExtrudedAreaSolid"):
                depth = to_number(attribute(item, "Depth"))
                if depth is None:
                    continue
                return ExtrusionSolid(
                    profile=read_profile(attribute(item, "SweptArea")),
                    depth=depth,
                )
    return None


def _iter_items(items: Iterable[Any]) -> Iterator[Any]:
    for item in items:
        if not is_reference(item):
            continue
        if item.is_a("IfcMappedItem"):
            source = attribute(item, "MappingSource")
            mapped = attribute(source, "MappedRepresentation") if source else None
            if mapped is not None:
                yield from _iter_items(attribute(mapped, "Items") or ())
            continue
        yield item


def read_profile(profile: Any) -> Profile:
    """Map an IFC profile definition onto a domain profile.

    Args:
        profile: IfcProfileDef record

    Returns:
        RectangleProfile, ArbitraryClosedProfile, or UnsupportedProfile
    """
    if not is_reference(profile):
        return UnsupportedProfile("missing")

    if profile.is_a("IfcRectangleHollowProfileDef"):
        return UnsupportedProfile(profile.is_a())

    if profile.is_a("IfcRectangleProfileDef"):
        x = to_number(attribute(profile, "XDim"))
        y = to_number(attribute(profile, "YDim"))
        if x is None or y is None:
            return UnsupportedProfile(profile.is_a())
        return RectangleProfile(x=x, y=y)

    if profile.is_a("IfcArbitraryClosedProfileDef"):
        points = _curve_points(attribute(profile, "OuterCurve"))
        if points is None:
            return UnsupportedProfile(profile.is_a())
        return ArbitraryClosedProfile.from_points(points)

    return UnsupportedProfile(profile.is_a())


def _curve_points(curve: Any) -> list[tuple[float, ...]] | None:
    if not is_reference(curve):
        return None

    if curve.is_a("IfcPolyline"):
        return [
            tuple(attribute(point, "Coordinates") or ())
            for point in attribute(curve, "Points") or ()
        ]

    if curve.is_a("IfcIndexedPolyCurve"):
        point_list = attribute(curve, "Points")
        if point_list is None:
            return None
        return [tuple(coordinates) for coordinates in attribute(point_list, "CoordList") or ()]

    return None
