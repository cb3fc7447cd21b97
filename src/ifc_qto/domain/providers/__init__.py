"""Provider Interfaces (Protocols).

Defines the geometry capabilities the derivation pipeline depends on
without implementation details.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from ifc_qto.domain.models import ExtrusionSolid, Mesh


@runtime_checkable
class MeshProvider(Protocol):
    """Supplies triangulated boundary chunks per subject.

    An empty list is the "no geometry" sentinel; implementations never
    raise for a missing or failing geometry.
    """

    def meshes_for(self, subject_id: int) -> list[Mesh]: ...


@runtime_checkable
class ExtrusionProvider(Protocol):
    """Supplies the first extruded solid of a subject, if any."""

    def extrusion_for(self, subject_id: int) -> ExtrusionSolid | None: ...


class NullMeshProvider:
    """Mesh provider used when no geometry capability is available."""

    def meshes_for(self, subject_id: int) -> list[Mesh]:
        return []


__all__ = [
    "ExtrusionProvider",
    "MeshProvider",
    "NullMeshProvider",
]
