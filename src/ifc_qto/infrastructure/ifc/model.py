"""IFC model handle and geometry engine lifecycle.

Decodes STEP bytes with IfcOpenShell into a scoped, read-only model handle.
"""
from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import ifcopenshell
import ifcopenshell.geom

from ifc_qto.domain import DecodeError, IfcFileNotFoundError, ModelReleasedError
from ifc_qto.shared.config import settings
from ifc_qto.shared.logging import get_logger


logger = get_logger(__name__)

STEP_HEADER = "ISO-10303-21"

# Supported IFC schemas
SUPPORTED_SCHEMAS = {"IFC2X3", "IFC4", "IFC4X1", "IFC4X2", "IFC4X3"}


class GeometryEngine:
    """Process-wide IfcOpenShell geometry engine state.

    Initialized once on first ``acquire()``; ``shutdown()`` drops the
    shared settings so the next ``acquire()`` starts fresh.
    """

    _instance: GeometryEngine | None = None

    def __init__(self) -> None:
        """Initialize engine settings and detect capabilities.

        Meshes are emitted in model units, matching quantity sets and
        extrusion profiles read from the same model.
        """
        self.settings = ifcopenshell.geom.settings()
        self.settings.set("convert-back-units", True)
        self.supports_streaming = hasattr(ifcopenshell.geom, "iterator")
        self.supports_shapes = hasattr(ifcopenshell.geom, "create_shape")

    @classmethod
    def acquire(cls) -> GeometryEngine:
        """Get the shared engine, initializing it on first use."""
        if cls._instance is None:
            cls._instance = cls()
            logger.info(
                "Geometry engine initialized",
                ifcopenshell_version=getattr(ifcopenshell, "version", "unknown"),
                streaming=cls._instance.supports_streaming,
                shapes=cls._instance.supports_shapes,
            )
        return cls._instance

    @classmethod
    def shutdown(cls) -> None:
        """Release the shared engine."""
        if cls._instance is not None:
            cls._instance = None
            logger.info("Geometry engine shut down")

    @classmethod
    def is_initialized(cls) -> bool:
        """Check whether the shared engine exists."""
        return cls._instance is not None

    @property
    def available(self) -> bool:
        """True when any mesh capability exists."""
        return self.supports_streaming or self.supports_shapes


class ModelHandle:
    """Read-only handle to a decoded IFC record graph.

    The handle owns the IfcOpenShell file; after ``close()`` every access
    raises ModelReleasedError.
    """

    def __init__(
        self,
        ifc: ifcopenshell.file,
        *,
        engine: GeometryEngine | None = None,
        source: str | None = None,
    ) -> None:
        """Wrap an already decoded IfcOpenShell file.

        Args:
            ifc: Decoded IFC file
            engine: Geometry engine used for mesh fallbacks
            source: Optional origin description for logs
        """
        self._ifc: ifcopenshell.file | None = ifc
        self.engine = engine
        self.source = source

    @classmethod
    def decode(
        cls,
        data: bytes,
        *,
        engine: GeometryEngine | None = None,
        source: str | None = None,
    ) -> ModelHandle:
        """Decode STEP bytes into a model handle.

        Args:
            data: Raw IFC (ISO 10303-21) file content
            engine: Geometry engine used for mesh fallbacks
            source: Optional origin description for logs and errors

        Returns:
            Open ModelHandle

        Raises:
            DecodeError: If the bytes are not a decodable IFC model
        """
        if not data:
            raise DecodeError("input is empty", source)

        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            text = data.decode("latin-1")

        text = text.lstrip("\ufeff \t\r\n")
        if not text.startswith(STEP_HEADER):
            raise DecodeError(f"missing {STEP_HEADER} header", source)

        try:
            ifc = ifcopenshell.file.from_string(text)
            schema = ifc.schema
        except Exception as e:
            raise DecodeError(str(e) or type(e).__name__, source) from e

        if schema_family(schema) not in SUPPORTED_SCHEMAS:
            raise DecodeError(f"unsupported IFC schema: {schema}", source)

        logger.info("IFC model decoded", schema=schema, source=source, size=len(data))
        return cls(ifc, engine=engine, source=source)

    @property
    def ifc(self) -> ifcopenshell.file:
        """Get the decoded IFC file."""
        if self._ifc is None:
            raise ModelReleasedError()
        return self._ifc

    @property
    def is_open(self) -> bool:
        """True until the handle is released."""
        return self._ifc is not None

    @property
    def schema(self) -> str:
        """IFC schema identifier."""
        return self.ifc.schema

    def by_type(self, ifc_class: str, include_subtypes: bool = True) -> list[Any]:
        """Get all records of a class in model order.

        Classes unknown to the model's schema yield an empty list.
        """
        ifc = self.ifc
        try:
            return list(ifc.by_type(ifc_class, include_subtypes=include_subtypes))
        except RuntimeError:
            return []

    def by_id(self, record_id: int) -> Any | None:
        """Get a record by express id, None when absent."""
        ifc = self.ifc
        try:
            return ifc.by_id(record_id)
        except RuntimeError:
            return None

    def close(self) -> None:
        """Release the decoded file."""
        if self._ifc is not None:
            self._ifc = None
            logger.debug("IFC model released", source=self.source)

    def __enter__(self) -> ModelHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def schema_family(schema: str) -> str:
    """Reduce a schema identifier to its family (IFC4X3_ADD2 -> IFC4X3)."""
    return schema.upper().split("_")[0]


@contextmanager
def open_model(data: bytes, *, source: str | None = None) -> Iterator[ModelHandle]:
    """Decode a model for the duration of a ``with`` block.

    The geometry engine is acquired before decoding and the handle is
    released on every exit path.

    Args:
        data: Raw IFC file content
        source: Optional origin description

    Yields:
        Open ModelHandle

    Raises:
        DecodeError: If the bytes are not a decodable IFC model
    """
    engine = GeometryEngine.acquire()
    model = ModelHandle.decode(data, engine=engine, source=source)
    try:
        yield model
    finally:
        model.close()


def read_model_file(file_path: str | Path) -> bytes:
    """Read an IFC file from disk, enforcing the configured size limit.

    Args:
        file_path: Path to the IFC file

    Returns:
        Raw file content

    Raises:
        IfcFileNotFoundError: If the file doesn't exist
        DecodeError: If the file exceeds the size limit
    """
    path = Path(file_path)
    if not path.is_file():
        raise IfcFileNotFoundError(str(path))

    if path.stat().st_size > settings.ifc_max_file_size_bytes:
        raise DecodeError(f"file exceeds {settings.ifc_max_file_size_mb} MB limit", str(path))

    return path.read_bytes()
