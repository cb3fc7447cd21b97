"""Relationship indexer.

Builds the subject -> definitions map from IfcRelDefinesByProperties in a
single pass over the model.
"""
from __future__ import annotations

from typing import Any, Iterable

from ifc_qto.domain import Definition, MalformedDefinitionError
from ifc_qto.infrastructure.ifc.attributes import is_reference, unwrap
from ifc_qto.infrastructure.ifc.definitions import read_definition
from ifc_qto.infrastructure.ifc.model import ModelHandle
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)

REL_DEFINES_BY_PROPERTIES = "IfcRelDefinesByProperties"


class RelationshipIndex:
    """Subject id -> definition records, in scan encounter order.

    Holds borrowed records; valid only while the model handle is open.
    """

    def __init__(self) -> None:
        """Initialize an empty index."""
        self._by_subject: dict[int, list[Any]] = {}
        self.relationship_count = 0
        self.skipped_count = 0

    def add(self, subject_id: int, record: Any) -> None:
        """Append a definition record for a subject."""
        self._by_subject.setdefault(subject_id, []).append(record)

    def records_for(self, subject_id: int) -> list[Any]:
        """Get raw definition records of a subject (copy)."""
        return list(self._by_subject.get(subject_id, ()))

    def definitions_for(self, subject_id: int) -> list[Definition]:
        """Read a subject's property and quantity sets in index order.

        Records of other kinds and malformed records are skipped.
        """
        definitions: list[Definition] = []
        for record in self._by_subject.get(subject_id, ()):
            try:
                definition = read_definition(record)
            except MalformedDefinitionError as e:
                logger.debug(
                    "Skipping malformed definition",
                    subject_id=subject_id,
                    record_id=e.record_id,
                    reason=e.reason,
                )
                continue
            if definition is not None:
                definitions.append(definition)
        return definitions

    @property
    def subject_ids(self) -> list[int]:
        """Subject ids in first-encounter order."""
        return list(self._by_subject)

    def order_subjects(self, subject_ids: Iterable[int]) -> list[int]:
        """Order subjects by first encounter in the scan.

        Subjects never referenced by a relationship follow in their given
        order.
        """
        wanted = list(dict.fromkeys(subject_ids))
        wanted_set = set(wanted)
        indexed = [sid for sid in self._by_subject if sid in wanted_set]
        indexed_set = set(indexed)
        return indexed + [sid for sid in wanted if sid not in indexed_set]

    def __contains__(self, subject_id: object) -> bool:
        return subject_id in self._by_subject

    def __len__(self) -> int:
        return len(self._by_subject)


def build_index(model: ModelHandle) -> RelationshipIndex:
    """Scan every IfcRelDefinesByProperties once and index its definitions.

    A relationship without a definition or without related objects is
    skipped. IFC4 definition sets contribute each member in order.

    Args:
        model: Open model handle

    Returns:
        RelationshipIndex

    Raises:
        ModelReleasedError: If the handle has been released
    """
    index = RelationshipIndex()

    for rel in model.by_type(REL_DEFINES_BY_PROPERTIES):
        index.relationship_count += 1
        definitions = _definitions_of(rel)
        related = unwrap(getattr(rel, "RelatedObjects", None)) or ()
        if not isinstance(related, tuple):
            related = (related,)

        subjects = [obj for obj in related if is_reference(obj)]
        if not definitions or not subjects:
            index.skipped_count += 1
            logger.debug("Skipping incomplete relationship", relationship_id=rel.id())
            continue

        for subject in subjects:
            for definition in definitions:
                index.add(subject.id(), definition)

    logger.info(
        "Indexed property relationships",
        relationships=index.relationship_count,
        skipped=index.skipped_count,
        subjects=len(index),
    )
    return index


def _definitions_of(rel: Any) -> list[Any]:
    # IfcPropertySetDefinitionSet unwraps to a tuple of definitions
    definition = unwrap(getattr(rel, "RelatingPropertyDefinition", None))
    if isinstance(definition, tuple):
        return [item for item in definition if is_reference(item)]
    if is_reference(definition):
        return [definition]
    return []
