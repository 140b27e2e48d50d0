"""
MCP protocol server.

Advertises the tool catalog over tools/list and routes tools/call into the
registry dispatcher. The same Server instance is served over SSE (mounted
into the FastAPI app) or over stdio.
"""

import logging
from typing import Any, Dict, List

from mcp import types
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from starlette.requests import Request
from starlette.responses import Response

from .base import ToolResult
from .config import SERVER_NAME, SERVER_VERSION
from .registry import invoke, list_tools

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/messages/"


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    """Convert a dispatcher result into the MCP wire type."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block["text"]) for block in result.content],
        isError=result.is_error,
    )


def create_server() -> Server:
    """Build the MCP server with the catalog and dispatcher handlers attached."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        """List available HubSpot tools."""
        return [
            types.Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=definition.input_schema,
            )
            for definition in list_tools()
        ]

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        # Registered directly so isError results pass through untouched
        name = request.params.name
        arguments: Dict[str, Any] = request.params.arguments or {}
        result = await invoke(name, arguments)
        return types.ServerResult(to_call_tool_result(result))

    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server


server = create_server()
sse = SseServerTransport(MESSAGES_PATH)


async def handle_sse(request: Request) -> Response:
    """Open one MCP session over a server-sent event stream."""
    logger.info(f"SSE session opened from {request.client.host if request.client else 'unknown'}")
    async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )
    logger.info("SSE session closed")
    return Response()


async def run_stdio() -> None:
    """Run the MCP server over stdin/stdout."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )
