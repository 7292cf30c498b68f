from __future__ import annotations

import logging
from typing import List

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .config import AppConfig
from .dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "make-automation-server"
SERVER_VERSION = "1.0.0"


def build_server(dispatcher: ToolDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return dispatcher.list_tools()

    # Registered without the call_tool() decorator, which would turn the
    # dispatcher's McpError into an isError result and drop its code and data.
    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        content = await dispatcher.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content))

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(config: AppConfig) -> None:
    server = build_server(ToolDispatcher(config))
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Make MCP server started")
        logger.info("Webhook URL: %s", "configured" if config.webhook_configured else "not configured")
        await server.run(read_stream, write_stream, server.create_initialization_options())
