"""Quantity Takeoff MCP Tools.

Tools for space Area/Volume takeoff, parameter discovery and attribute
export from IFC files.
"""
from __future__ import annotations

import json
import math
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from ifc_qto.application.services.attribute_export_service import (
    DEFAULT_EXCLUDE_TYPES,
    AttributeExportService,
)
from ifc_qto.application.services.parameter_explorer_service import ParameterExplorerService
from ifc_qto.application.services.space_qto_service import SpaceQtoService
from ifc_qto.domain import QtoOptions
from ifc_qto.infrastructure.ifc import open_model, read_model_file
from ifc_qto.shared.config import settings
from ifc_qto.shared.logging import get_logger

logger = get_logger(__name__)


class ValueEncoder(json.JSONEncoder):
    """JSON encoder for IFC attribute values."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (set, frozenset)):
            return sorted(obj, key=str)
        return str(obj)


def _finite(value: Any) -> Any:
    """Replace NaN/inf floats with None for strict JSON."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(item) for item in value]
    return value


def _dumps(data: Any) -> str:
    return json.dumps(_finite(data), cls=ValueEncoder, indent=2, ensure_ascii=False)


def register_qto_tools(server: Server) -> None:
    """Register quantity takeoff MCP tools.

    Args:
        server: MCP Server instance
    """

    @server.list_tools()
    async def list_qto_tools() -> list[Tool]:
        """List available takeoff tools."""
        return [
            Tool(
                name="ifc_space_qto",
                description="Derive Area and Volume for every IfcSpace from quantity sets, property sets and, optionally, geometry.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_path": {
                            "type": "string",
                            "description": "Path to the IFC file",
                        },
                        "all_params": {
                            "type": "boolean",
                            "default": False,
                            "description": "Include every property and quantity as '<set>.<name>' columns",
                        },
                        "use_geometry": {
                            "type": "boolean",
                            "default": settings.qto_use_geometry,
                            "description": "Derive missing Area/Volume from geometry",
                        },
                        "force_geometry": {
                            "type": "boolean",
                            "default": False,
                            "description": "Always derive Area/Volume from geometry",
                        },
                        "extra_params": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Additional parameter names to include",
                        },
                        "rename_map": {
                            "type": "object",
                            "additionalProperties": {"type": "string"},
                            "description": "Output column renames (old -> new)",
                        },
                        "round": {
                            "type": "integer",
                            "minimum": 0,
                            "maximum": 10,
                            "description": "Decimal places for float values",
                        },
                        "format": {
                            "type": "string",
                            "enum": ["json", "markdown"],
                            "default": "json",
                        },
                    },
                    "required": ["file_path"],
                },
            ),
            Tool(
                name="ifc_explore_parameters",
                description="List all parameter keys found on IfcSpace entities (Space.*, property sets, quantity sets) with sample values.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_path": {
                            "type": "string",
                            "description": "Path to the IFC file",
                        },
                        "max_examples": {
                            "type": "integer",
                            "minimum": 0,
                            "default": 1,
                            "description": "Maximum sample values per key",
                        },
                    },
                    "required": ["file_path"],
                },
            ),
            Tool(
                name="ifc_export_attributes",
                description="Export core attributes, property sets and quantity sets of rooted IFC entities as a flat table.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_path": {
                            "type": "string",
                            "description": "Path to the IFC file",
                        },
                        "ifc_types": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "IFC classes to export, e.g. ['IfcSpace', 'IfcDoor']. Omit for all.",
                        },
                        "exclude_types": {
                            "type": "array",
                            "items": {"type": "string"},
                            "default": list(DEFAULT_EXCLUDE_TYPES),
                            "description": "IFC classes to skip",
                        },
                        "layout": {
                            "type": "string",
                            "enum": ["wide", "long"],
                            "default": "wide",
                            "description": "One row per entity or key/value rows",
                        },
                        "include_core": {
                            "type": "boolean",
                            "default": True,
                            "description": "Include GlobalId, Name, Description, ObjectType, Tag",
                        },
                    },
                    "required": ["file_path"],
                },
            ),
        ]

    @server.call_tool()
    async def call_qto_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle takeoff tool calls."""
        return await dispatch_qto_tool(name, arguments)


async def dispatch_qto_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Run a takeoff tool; errors become an "Error: ..." text response."""
    try:
        if name == "ifc_space_qto":
            return await _space_qto(arguments)
        elif name == "ifc_explore_parameters":
            return await _explore_parameters(arguments)
        elif name == "ifc_export_attributes":
            return await _export_attributes(arguments)
        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]
    except Exception as e:
        logger.error("Takeoff tool error", tool=name, error=str(e))
        return [TextContent(type="text", text=f"Error: {str(e)}")]


async def _space_qto(args: dict[str, Any]) -> list[TextContent]:
    """Run the space quantity takeoff."""
    file_path = args["file_path"]
    fmt = args.get("format", "json")

    options = QtoOptions.from_mapping({
        "use_geometry": settings.qto_use_geometry,
        "round": settings.qto_round_decimals,
        **args,
    })

    rows = [row.to_dict() for row in SpaceQtoService().run_file(file_path, options)]

    if fmt == "json":
        return [TextContent(
            type="text",
            text=_dumps({"file_path": file_path, "count": len(rows), "rows": rows}),
        )]

    # Markdown format
    lines = [
        "# Space Quantity Takeoff",
        "",
        f"**File:** {file_path}",
        f"**Spaces:** {len(rows)}",
    ]
    if rows:
        columns = list(dict.fromkeys(key for row in rows for key in row))
        lines.extend([
            "",
            "| " + " | ".join(columns) + " |",
            "|" + "|".join("---" for _ in columns) + "|",
        ])
        for row in rows:
            cells = ["" if row.get(col) is None else str(row[col]) for col in columns]
            lines.append("| " + " | ".join(cells) + " |")

    return [TextContent(type="text", text="\n".join(lines))]


async def _explore_parameters(args: dict[str, Any]) -> list[TextContent]:
    """List space parameter keys."""
    file_path = args["file_path"]
    max_examples = int(args.get("max_examples", 1))

    data = read_model_file(file_path)
    with open_model(data, source=str(file_path)) as model:
        parameters = ParameterExplorerService().explore(model, max_examples=max_examples)

    return [TextContent(
        type="text",
        text=_dumps({
            "file_path": file_path,
            "count": len(parameters),
            "parameters": [info.to_dict() for info in parameters],
        }),
    )]


async def _export_attributes(args: dict[str, Any]) -> list[TextContent]:
    """Export entity attributes."""
    file_path = args["file_path"]

    data = read_model_file(file_path)
    with open_model(data, source=str(file_path)) as model:
        result = AttributeExportService().export(
            model,
            ifc_types=args.get("ifc_types"),
            layout=args.get("layout", "wide"),
            include_core=bool(args.get("include_core", True)),
            exclude_types=args.get("exclude_types", DEFAULT_EXCLUDE_TYPES),
        )

    return [TextContent(
        type="text",
        text=_dumps({"file_path": file_path, **result.to_dict()}),
    )]
