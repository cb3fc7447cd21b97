"""Parameter Explorer Service.

Lists every parameter key available on spaces, as a guide for choosing
``extra_params`` and rename mappings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ifc_qto.application.services.property_extractor import qualified_name
from ifc_qto.domain import PropertySet, QuantitySet, ValidationError
from ifc_qto.infrastructure.ifc import (
    SPACE_CLASS,
    ModelHandle,
    attribute,
    build_index,
)
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)

SPACE_PREFIX = "Space."
SPACE_ATTRIBUTES = (
    "Name",
    "LongName",
    "ObjectType",
    "Description",
    "Number",
    "ElevationWithFlooring",
)


@dataclass
class ParameterInfo:
    """A parameter key with sample values."""

    name: str
    kind: str  # space, pset, qto
    samples: list[Any] = field(default_factory=list)

    @property
    def sample(self) -> Any:
        """First sample, None when there is none."""
        return self.samples[0] if self.samples else None

    def to_dict(self) -> dict:
        """Convert to dict."""
        return {
            "name": self.name,
            "kind": self.kind,
            "sample": self.sample,
            "samples": self.samples,
        }


class ParameterExplorerService:
    """Service for discovering space parameter keys."""

    def explore(self, model: ModelHandle, max_examples: int = 1) -> list[ParameterInfo]:
        """Collect parameter keys found on any IfcSpace.

        Args:
            model: Open model handle
            max_examples: Maximum non-null samples kept per key

        Returns:
            ParameterInfo list in first-encounter order

        Raises:
            ValidationError: If max_examples is negative
        """
        if max_examples < 0:
            raise ValidationError("max_examples", "must not be negative", max_examples)

        index = build_index(model)
        found: dict[str, ParameterInfo] = {}

        def record(name: str, kind: str, value: Any) -> None:
            info = found.get(name)
            if info is None:
                info = found[name] = ParameterInfo(name=name, kind=kind)
            if value is not None and len(info.samples) < max_examples:
                info.samples.append(value)

        spaces = model.by_type(SPACE_CLASS)
        for space in spaces:
            for attr in SPACE_ATTRIBUTES:
                value = attribute(space, attr)
                if value is not None:
                    record(f"{SPACE_PREFIX}{attr}", "space", value)

            for definition in index.definitions_for(space.id()):
                if isinstance(definition, QuantitySet):
                    for quantity in definition.quantities:
                        record(qualified_name(definition.name, quantity.name), "qto", quantity.value)
                elif isinstance(definition, PropertySet):
                    for prop in definition.properties:
                        record(qualified_name(definition.name, prop.name), "pset", prop.value)

        logger.info("Parameter exploration complete", spaces=len(spaces), parameters=len(found))
        return list(found.values())
