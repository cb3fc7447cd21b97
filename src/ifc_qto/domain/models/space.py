"""Space Domain Entities.

Represents an IfcSpace subject and the row derived for it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Output columns that extra fields never overwrite
CORE_COLUMNS = ("id", "GlobalId", "Name", "LongName", "Area", "Volume")


@dataclass(frozen=True)
class SpaceSubject:
    """Space identity copied out of the model.

    Attributes:
        id: STEP express id
        global_id: IFC GlobalId
        name: Space name (usually the room number)
        long_name: Long/descriptive name
        attributes: Other direct scalar attributes of the space record
    """

    id: int
    global_id: str | None = None
    name: str | None = None
    long_name: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ExtractedValues:
    """Area/Volume and extra fields read from a subject's definitions."""

    area: float | None = None
    volume: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class SpaceRow:
    """Output row for one space.

    Holds primitive copies only, so rows outlive the model handle.
    """

    id: int
    global_id: str | None = None
    name: str | None = None
    long_name: str | None = None
    area: float | None = None
    volume: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    rename_map: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_subject(
        cls,
        subject: SpaceSubject,
        *,
        area: float | None = None,
        volume: float | None = None,
        extra: dict[str, Any] | None = None,
        rename_map: dict[str, str] | None = None,
    ) -> SpaceRow:
        """Factory method to create a row for a subject."""
        return cls(
            id=subject.id,
            global_id=subject.global_id,
            name=subject.name,
            long_name=subject.long_name,
            area=area,
            volume=volume,
            extra=dict(extra or {}),
            rename_map=dict(rename_map or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Ordered output mapping: core columns first, then extras.

        The row's rename map is applied to the keys.
        """
        row: dict[str, Any] = {
            "id": self.id,
            "GlobalId": self.global_id,
            "Name": self.name,
            "LongName": self.long_name,
            "Area": self.area,
            "Volume": self.volume,
        }
        for key, value in self.extra.items():
            if key not in row:
                row[key] = value
        return rename_keys(row, self.rename_map)


def rename_keys(row: dict[str, Any], rename_map: dict[str, str]) -> dict[str, Any]:
    """Rename keys by exact match, keeping their position.

    Mappings are applied in order. A renamed key replaces any existing key
    of the same name, so the last applied mapping wins on collision.

    Args:
        row: Ordered field mapping
        rename_map: Old key -> new key

    Returns:
        New ordered mapping
    """
    result = dict(row)
    for old_key, new_key in rename_map.items():
        if not new_key or old_key == new_key or old_key not in result:
            continue
        result = {
            (new_key if key == old_key else key): value
            for key, value in result.items()
            if key != new_key
        }
    return result
