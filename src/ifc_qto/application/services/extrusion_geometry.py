"""Extrusion Analytical Fallback.

Area/Volume of extruded solids straight from profile and depth.
"""
from __future__ import annotations

from typing import Sequence

from ifc_qto.domain import (
    ArbitraryClosedProfile,
    ExtrusionSolid,
    GeometryResult,
    RectangleProfile,
)


def shoelace_area(points: Sequence[tuple[float, float]]) -> float | None:
    """Area of a closed polygon ring via the shoelace formula.

    The ring wraps from the last point to the first; a repeated closing
    point contributes nothing.

    Args:
        points: (x, y) vertices

    Returns:
        Unsigned area, or None for fewer than 3 points
    """
    if len(points) < 3:
        return None

    twice_area = 0.0
    for (x1, y1), (x2, y2) in zip(points, [*points[1:], points[0]]):
        twice_area += x1 * y2 - x2 * y1
    return abs(twice_area) / 2.0


def compute_from_extrusion(solid: ExtrusionSolid) -> GeometryResult:
    """Compute area and volume of an extruded solid.

    Args:
        solid: Extruded profile with depth

    Returns:
        GeometryResult; empty for unsupported profiles
    """
    profile = solid.profile

    if isinstance(profile, RectangleProfile):
        area = profile.x * profile.y
    elif isinstance(profile, ArbitraryClosedProfile):
        area = shoelace_area(profile.points)
        if area is None:
            return GeometryResult()
    else:
        return GeometryResult()

    return GeometryResult(area=area, volume=area * solid.depth)
