"""Row Assembler.

Merges extracted values with geometry fallbacks into ordered output rows.
"""
from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Sequence

from ifc_qto.domain import (
    CORE_COLUMNS,
    ExtractedValues,
    GeometryResult,
    QtoOptions,
    SpaceRow,
    SpaceSubject,
)
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)

GeometrySource = Callable[[int], GeometryResult]


def round_value(value: Any, decimals: int | None) -> Any:
    """Round finite floats; other values pass through unchanged."""
    if decimals is None or isinstance(value, bool) or not isinstance(value, float):
        return value
    if not math.isfinite(value):
        return value
    return round(value, decimals)


def _usable(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


class RowAssembler:
    """Assembles SpaceRows from extractor output and geometry fallbacks.

    Fallback sources are only called for subjects that need them, mesh
    before extrusion.
    """

    def __init__(
        self,
        mesh_source: GeometrySource | None = None,
        extrusion_source: GeometrySource | None = None,
    ) -> None:
        """Initialize assembler.

        Args:
            mesh_source: subject id -> mesh-derived GeometryResult
            extrusion_source: subject id -> extrusion-derived GeometryResult
        """
        self._sources: list[tuple[str, GeometrySource]] = []
        if mesh_source is not None:
            self._sources.append(("mesh", mesh_source))
        if extrusion_source is not None:
            self._sources.append(("extrusion", extrusion_source))

    def assemble(
        self,
        subjects: Sequence[SpaceSubject],
        extracted: Mapping[int, ExtractedValues],
        options: QtoOptions,
    ) -> list[SpaceRow]:
        """Build one row per subject, preserving subject order.

        Args:
            subjects: Subjects in output order
            extracted: Extractor output per subject id
            options: Geometry, rename and rounding options

        Returns:
            List of SpaceRow
        """
        return [
            self._assemble_row(subject, extracted.get(subject.id) or ExtractedValues(), options)
            for subject in subjects
        ]

    def _assemble_row(
        self,
        subject: SpaceSubject,
        values: ExtractedValues,
        options: QtoOptions,
    ) -> SpaceRow:
        area, volume = values.area, values.volume

        if options.force_geometry:
            geo_area, geo_volume = self._derive(subject.id, need_area=True, need_volume=True)
            if geo_area is not None:
                area = geo_area
            if geo_volume is not None:
                volume = geo_volume
        elif options.use_geometry and (area is None or volume is None):
            geo_area, geo_volume = self._derive(
                subject.id, need_area=area is None, need_volume=volume is None,
            )
            if area is None:
                area = geo_area
            if volume is None:
                volume = geo_volume

        decimals = options.round
        extra = {
            key: round_value(value, decimals)
            for key, value in values.extra.items()
            if key not in CORE_COLUMNS
        }

        return SpaceRow.from_subject(
            subject,
            area=round_value(area, decimals),
            volume=round_value(volume, decimals),
            extra=extra,
            rename_map=dict(options.rename_map),
        )

    def _derive(
        self,
        subject_id: int,
        *,
        need_area: bool,
        need_volume: bool,
    ) -> tuple[float | None, float | None]:
        """Derive missing values from the fallback chain, first usable wins."""
        area: float | None = None
        volume: float | None = None

        for name, source in self._sources:
            if not (need_area and area is None) and not (need_volume and volume is None):
                break
            try:
                result = source(subject_id)
            except Exception as e:
                logger.warning(
                    "Geometry fallback failed",
                    source=name,
                    subject_id=subject_id,
                    error=str(e),
                )
                continue

            if need_area and area is None and _usable(result.area):
                area = result.area
            if need_volume and volume is None and _usable(result.volume):
                volume = result.volume

        if (need_area and area is None) or (need_volume and volume is None):
            logger.debug(
                "Geometry fallback incomplete",
                subject_id=subject_id,
                area=area,
                volume=volume,
            )
        return area, volume
