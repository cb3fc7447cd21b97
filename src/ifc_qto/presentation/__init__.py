"""Presentation layer (MCP server)."""
from __future__ import annotations

from ifc_qto.presentation.server import main

__all__ = ["main"]
