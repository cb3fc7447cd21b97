"""IFC QTO MCP Server.

Main MCP server setup over stdio.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from mcp.server import Server
from mcp.server.stdio import stdio_server

from ifc_qto.infrastructure.ifc import GeometryEngine
from ifc_qto.presentation.tools import register_all_tools
from ifc_qto.shared.config import settings
from ifc_qto.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_server() -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured MCP Server instance
    """
    server = Server(settings.app_name)

    # Register all tools
    register_all_tools(server)

    return server


@asynccontextmanager
async def lifespan() -> AsyncGenerator[None, None]:
    """Manage server lifecycle.

    Initializes the geometry engine on startup and releases it on shutdown.
    """
    logger.info("Starting IFC QTO Server", version=settings.app_version)

    try:
        engine = GeometryEngine.acquire()
    except Exception as e:
        logger.error("Failed to initialize geometry engine", error=str(e))
        raise

    if not engine.available:
        logger.warning("Geometry engine cannot triangulate, mesh fallback disabled")

    try:
        yield
    finally:
        GeometryEngine.shutdown()
        logger.info("IFC QTO Server stopped")


async def run_server() -> None:
    """Run the MCP server."""
    setup_logging()
    server = create_server()

    async with lifespan():
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )


def main() -> None:
    """Entry point for the MCP server."""
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
