"""Geometry Domain Models.

Triangle meshes and extruded solids used by the Area/Volume fallbacks.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union

import numpy as np

from ifc_qto.domain.exceptions import ValidationError


@dataclass(frozen=True, eq=False)
class Mesh:
    """Triangulated boundary chunk.

    Vertices and indices are accepted either flat (x, y, z, x, y, z, ...)
    or already shaped as (N, 3). An optional 4x4 transform maps local
    coordinates into model coordinates.

    Attributes:
        vertices: (N, 3) float array
        indices: (M, 3) integer array of vertex indices
        transform: Optional (4, 4) affine matrix
    """

    vertices: np.ndarray
    indices: np.ndarray
    transform: np.ndarray | None = field(default=None)

    def __post_init__(self) -> None:
        """Normalize buffers and validate index bounds."""
        vertices = np.asarray(self.vertices, dtype=np.float64)
        indices = np.asarray(self.indices, dtype=np.int64)

        if vertices.size % 3:
            raise ValidationError("vertices", "length must be divisible by 3", vertices.size)
        if indices.size % 3:
            raise ValidationError("indices", "length must be divisible by 3", indices.size)

        vertices = vertices.reshape(-1, 3)
        indices = indices.reshape(-1, 3)

        if indices.size and (indices.min() < 0 or indices.max() >= len(vertices)):
            raise ValidationError("indices", "index out of vertex range", int(indices.max()))

        transform = self.transform
        if transform is not None:
            transform = np.asarray(transform, dtype=np.float64)
            if transform.shape != (4, 4):
                raise ValidationError("transform", "must be a 4x4 matrix", transform.shape)

        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "indices", indices)
        object.__setattr__(self, "transform", transform)

    @property
    def triangle_count(self) -> int:
        """Number of triangles in the chunk."""
        return len(self.indices)

    def world_vertices(self) -> np.ndarray:
        """Vertices with the transform applied.

        Only the rotation and translation parts are used; the bottom
        (perspective) row is ignored.
        """
        if self.transform is None:
            return self.vertices
        rotation = self.transform[:3, :3]
        translation = self.transform[:3, 3]
        return self.vertices @ rotation.T + translation


@dataclass(frozen=True)
class RectangleProfile:
    """Rectangular profile with X and Y dimensions."""

    x: float
    y: float


@dataclass(frozen=True)
class ArbitraryClosedProfile:
    """Closed polygon profile given as an (x, y) point ring."""

    points: tuple[tuple[float, float], ...]

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> ArbitraryClosedProfile:
        """Create a profile from any sequence of 2D (or 3D) coordinates."""
        return cls(tuple((float(p[0]), float(p[1])) for p in points))


@dataclass(frozen=True)
class UnsupportedProfile:
    """Profile kind that has no analytical area formula here."""

    kind: str


Profile = Union[RectangleProfile, ArbitraryClosedProfile, UnsupportedProfile]


@dataclass(frozen=True)
class ExtrusionSolid:
    """2D profile swept along a depth."""

    profile: Profile
    depth: float


@dataclass(frozen=True)
class GeometryResult:
    """Area/Volume pair derived from geometry. None means underived."""

    area: float | None = None
    volume: float | None = None

    @property
    def is_empty(self) -> bool:
        """True when neither value was derived."""
        return self.area is None and self.volume is None
