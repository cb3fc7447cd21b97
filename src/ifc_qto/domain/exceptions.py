"""Domain layer exceptions.

All domain-specific exceptions inherit from DomainError.
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, value: Any = None) -> None:
        full_message = f"Validation error for '{field}': {message}"
        details = {"field": field, "value": value}
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class IfcImportError(DomainError):
    pass


class IfcFileNotFoundError(IfcImportError):
    def __init__(self, file_path: str) -> None:
        super().__init__(f"IFC file not found: {file_path}")
        self.file_path = file_path


class DecodeError(IfcImportError):
    """Input bytes could not be turned into a model handle."""

    def __init__(self, reason: str, source: str | None = None) -> None:
        details: dict[str, Any] = {"reason": reason}
        if source:
            details["source"] = source
        super().__init__("Failed to decode IFC model", details)
        self.reason = reason
        self.source = source


class ModelReleasedError(DomainError):
    def __init__(self) -> None:
        super().__init__("IFC model handle has already been released")


class GeometryUnavailableError(DomainError):
    """No mesh or extrusion data could be produced for a subject.

    Non-fatal: raised and handled inside the geometry layer only.
    """

    def __init__(self, subject_id: int, reason: str) -> None:
        super().__init__(
            f"No geometry available for #{subject_id}", {"reason": reason},
        )
        self.subject_id = subject_id
        self.reason = reason


class MalformedDefinitionError(DomainError):
    """A property or quantity definition is missing required fields.

    Non-fatal: the definition is skipped by the reader.
    """

    def __init__(self, record_id: int, reason: str) -> None:
        super().__init__(f"Malformed definition #{record_id}", {"reason": reason})
        self.record_id = record_id
        self.reason = reason
