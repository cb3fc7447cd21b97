"""MCP Tools registration.

All tool modules register their tools with the MCP server.
"""
from __future__ import annotations

from mcp.server import Server

from ifc_qto.presentation.tools.qto_tools import dispatch_qto_tool, register_qto_tools

__all__ = [
    "dispatch_qto_tool",
    "register_all_tools",
    "register_qto_tools",
]


def register_all_tools(server: Server) -> None:
    """Register every tool module with the server."""
    register_qto_tools(server)
