"""IFC QTO.

Quantity takeoff for IFC spaces: Area and Volume per IfcSpace from
quantity sets, property sets and geometry, served over MCP.
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "IFC-QTO Team"

# Re-export main entry point
from ifc_qto.presentation import main

__all__ = ["main", "__version__"]
