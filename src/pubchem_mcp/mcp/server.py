"""
MCP Server
Model Context Protocol server exposing PubChem over stdio
Source: https://github.com/modelcontextprotocol/python-sdk
Verified: 2026-10-19
"""

import asyncio
import signal

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from pubchem_mcp.core.config import get_settings
from pubchem_mcp.gateways.pubchem_gateway import get_pubchem_gateway, reset_pubchem_gateway
from pubchem_mcp.mcp.resources import list_resource_templates, read_resource
from pubchem_mcp.mcp.tools import call_tool, list_tools
from pubchem_mcp.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_server() -> Server:
    """
    Build the MCP server and register its handlers.

    Tool calls and resource reads are registered as raw request handlers so
    that protocol errors raised while dispatching reach the client as
    JSON-RPC errors instead of being folded into tool results.
    """
    settings = get_settings()
    app = Server(settings.MCP_SERVER_NAME, version=settings.MCP_SERVER_VERSION)

    @app.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return await list_tools()

    @app.list_resources()
    async def _list_resources() -> list[types.Resource]:
        # Only templated resources are published
        return []

    @app.list_resource_templates()
    async def _list_resource_templates() -> list[types.ResourceTemplate]:
        return await list_resource_templates()

    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(result)

    async def _read_resource(request: types.ReadResourceRequest) -> types.ServerResult:
        result = await read_resource(request.params.uri)
        return types.ServerResult(result)

    app.request_handlers[types.CallToolRequest] = _call_tool
    app.request_handlers[types.ReadResourceRequest] = _read_resource

    return app


async def serve(app: Server) -> None:
    """
    Run the server on stdio until the client disconnects.

    Evidence: Stdio transport for MCP
    Source: https://modelcontextprotocol.io/specification/2025-06-18/basic/transports
    Verified: 2026-10-19
    """
    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            app.create_initialization_options(),
        )


async def main() -> None:
    """Configure logging, serve, and close the HTTP client on the way out."""
    settings = get_settings()
    setup_logging(
        level=settings.LOG_LEVEL,
        log_file=settings.LOG_FILE,
        json_logs=settings.JSON_LOGS,
    )

    app = create_server()
    # Build the shared client configuration before the first request
    get_pubchem_gateway()

    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except NotImplementedError:
            logger.debug(f"Signal handlers unavailable; {sig.name} uses the default action")

    logger.info(
        f"Starting MCP server: {settings.MCP_SERVER_NAME} v{settings.MCP_SERVER_VERSION} "
        f"({settings.ENVIRONMENT})"
    )
    try:
        await serve(app)
    except asyncio.CancelledError:
        logger.info("Shutdown signal received")
    finally:
        await reset_pubchem_gateway()
        logger.info("PubChem MCP server stopped")


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
