"""Mesh Geometry Fallback.

Area/Volume integration over triangulated boundary meshes.

Volume uses the divergence theorem: the signed tetrahedra formed by each
triangle and the origin sum to the enclosed volume of a closed,
consistently wound mesh. The absolute value is taken over the total, so
open or inconsistently wound input is reported as-is, not repaired.

The "footprint" area is a heuristic over near-horizontal triangles.
Floor and ceiling both pass the test, and each triangle contributes the
magnitude of its edge cross product, so a closed box reports four times
its plan area (16 for a 2 x 2 x 2 cube).
"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ifc_qto.domain import GeometryResult, Mesh
from ifc_qto.shared.config import settings

DEFAULT_FOOTPRINT_THRESHOLD = 0.95


def _triangles(mesh: Mesh) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    corners = mesh.world_vertices()[mesh.indices]
    return corners[:, 0], corners[:, 1], corners[:, 2]


def signed_volume(mesh: Mesh) -> float:
    """Sum of a . (b x c) / 6 over all triangles of a chunk."""
    if not mesh.triangle_count:
        return 0.0
    a, b, c = _triangles(mesh)
    return float(np.einsum("ij,ij->i", a, np.cross(b, c)).sum() / 6.0)


def footprint_area(mesh: Mesh, threshold: float = DEFAULT_FOOTPRINT_THRESHOLD) -> float:
    """Heuristic footprint of a chunk.

    A triangle is near-horizontal when |n_z| / |n| of its face normal
    exceeds ``threshold``. Degenerate triangles never count.

    Args:
        mesh: Mesh chunk
        threshold: Minimum vertical share of the unit normal

    Returns:
        Summed cross-product magnitude of near-horizontal triangles
    """
    if not mesh.triangle_count:
        return 0.0
    a, b, c = _triangles(mesh)
    normals = np.cross(b - a, c - a)
    magnitudes = np.linalg.norm(normals, axis=1)

    valid = magnitudes > 0.0
    vertical = np.zeros_like(magnitudes)
    vertical[valid] = np.abs(normals[valid, 2]) / magnitudes[valid]

    horizontal = valid & (vertical > threshold)
    return float(magnitudes[horizontal].sum())


def compute_from_mesh(
    meshes: Sequence[Mesh],
    threshold: float | None = None,
) -> GeometryResult:
    """Compute footprint area and volume over all chunks of a subject.

    Args:
        meshes: Mesh chunks (each may carry its own transform)
        threshold: Near-horizontal threshold (defaults to settings)

    Returns:
        GeometryResult; empty when no triangles are available
    """
    if threshold is None:
        threshold = settings.qto_footprint_threshold

    chunks = [mesh for mesh in meshes if mesh.triangle_count]
    if not chunks:
        return GeometryResult()

    volume = abs(sum(signed_volume(mesh) for mesh in chunks))
    area = sum(footprint_area(mesh, threshold) for mesh in chunks)

    return GeometryResult(
        area=area if math.isfinite(area) else None,
        volume=volume if math.isfinite(volume) else None,
    )
