"""Subject reader.

Copies identity and direct scalar attributes of a record out of the model.
"""
from __future__ import annotations

from typing import Any

from ifc_qto.domain import SpaceSubject
from ifc_qto.infrastructure.ifc.attributes import attribute, is_scalar, unwrap

SPACE_CLASS = "IfcSpace"

# Attributes stored as dedicated SpaceSubject fields
_IDENTITY_ATTRIBUTES = {"id", "type", "GlobalId", "Name", "LongName"}


def read_subject(record: Any) -> SpaceSubject:
    """Create a SpaceSubject from an IFC record.

    Args:
        record: IfcSpace (or other rooted) record

    Returns:
        SpaceSubject holding primitive copies only
    """
    attributes: dict[str, Any] = {}
    for name, value in record.get_info(recursive=False).items():
        if name in _IDENTITY_ATTRIBUTES:
            continue
        value = unwrap(value)
        if value is not None and is_scalar(value):
            attributes[name] = value

    return SpaceSubject(
        id=record.id(),
        global_id=attribute(record, "GlobalId"),
        name=attribute(record, "Name"),
        long_name=attribute(record, "LongName"),
        attributes=attributes,
    )
