"""Tests for MCP server wiring."""

import asyncio
import signal
from unittest.mock import AsyncMock, MagicMock

import pytest
from loguru import logger
from mcp import types

from pubchem_mcp.mcp import server
from pubchem_mcp.mcp.server import create_server, main
from pubchem_mcp.utils.errors import InvalidRequestError, MethodNotFoundError


@pytest.fixture
def app():
    return create_server()


@pytest.fixture
def lifecycle(monkeypatch):
    """Patch everything main() touches outside the event loop."""
    mocks = {
        "serve": AsyncMock(),
        "reset_pubchem_gateway": AsyncMock(),
        "setup_logging": MagicMock(),
        "get_pubchem_gateway": MagicMock(),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(server, name, mock)

    return mocks


async def run_main():
    """Run main() and drop the signal handlers it installs on the test loop."""
    try:
        await main()
    finally:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)


class TestServerWiring:
    """Handlers are registered for tools and resources."""

    def test_server_identity(self, app):
        assert app.name == "pubchem-server"

    def test_capabilities_advertised(self, app):
        options = app.create_initialization_options()

        assert options.capabilities.tools is not None
        assert options.capabilities.resources is not None

    @pytest.mark.asyncio
    async def test_list_tools_handler(self, app):
        handler = app.request_handlers[types.ListToolsRequest]

        result = await handler(types.ListToolsRequest(method="tools/list"))

        assert [tool.name for tool in result.root.tools] == ["pubchem"]

    @pytest.mark.asyncio
    async def test_call_tool_protocol_errors_are_not_wrapped(self, app):
        handler = app.request_handlers[types.CallToolRequest]
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="chembl", arguments={}),
        )

        with pytest.raises(MethodNotFoundError):
            await handler(request)

    @pytest.mark.asyncio
    async def test_read_resource_protocol_errors_are_not_wrapped(self, app):
        handler = app.request_handlers[types.ReadResourceRequest]
        request = types.ReadResourceRequest(
            method="resources/read",
            params=types.ReadResourceRequestParams(uri="pubchem://reaction/1"),
        )

        with pytest.raises(InvalidRequestError):
            await handler(request)


class TestShutdown:
    """main() always closes the shared HTTP client."""

    @pytest.mark.asyncio
    async def test_cancellation_closes_gateway(self, lifecycle):
        lifecycle["serve"].side_effect = asyncio.CancelledError

        await run_main()

        lifecycle["serve"].assert_awaited_once()
        lifecycle["reset_pubchem_gateway"].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_normal_exit_closes_gateway(self, lifecycle):
        await run_main()

        lifecycle["reset_pubchem_gateway"].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_serve_failure_still_closes_gateway(self, lifecycle):
        lifecycle["serve"].side_effect = RuntimeError("stdio closed")

        with pytest.raises(RuntimeError, match="stdio closed"):
            await run_main()

        lifecycle["reset_pubchem_gateway"].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_logging_configured_from_settings(self, lifecycle, monkeypatch):
        monkeypatch.setenv("PUBCHEM_LOG_LEVEL", "debug")

        await run_main()

        lifecycle["setup_logging"].assert_called_once_with(
            level="DEBUG", log_file=None, json_logs=False
        )

    @pytest.mark.asyncio
    async def test_startup_line_names_environment(self, lifecycle, monkeypatch):
        monkeypatch.setenv("PUBCHEM_ENVIRONMENT", "staging")
        messages = []
        sink_id = logger.add(messages.append, format="{message}")

        try:
            await run_main()
        finally:
            logger.remove(sink_id)

        assert any("pubchem-server v1.0.0 (staging)" in message for message in messages)
