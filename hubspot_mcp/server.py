#!/usr/bin/env python3
"""
HubSpot MCP Server Entrypoint

HTTP server that exposes the HubSpot tools two ways:
  - MCP over SSE  (GET /sse, POST /messages/)
  - Plain HTTP    (/tools, /tools/schema, /tools/{name}, /tools/{name}/execute)

Usage:
  hubspot-mcp-server                     # SSE + HTTP on $PORT (default 3000)
  hubspot-mcp-server --transport stdio   # MCP over stdin/stdout
"""

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import SERVER_VERSION, get_settings
from .mcp_server import MESSAGES_PATH, handle_sse, run_stdio, sse
from .registry import get_all_tools, get_tools_schema, invoke, list_tool_names

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    if not settings.hubspot_api_key:
        logger.warning("HUBSPOT_API_KEY is not set; tool calls will fail upstream")
    logger.info(f"HubSpot MCP server ready with {len(list_tool_names())} tools")
    yield
    logger.info("Shutting down HubSpot MCP server")


app = FastAPI(
    title="HubSpot MCP Server",
    version=SERVER_VERSION,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# MCP transport
app.add_route("/sse", handle_sse, methods=["GET"])
app.mount(MESSAGES_PATH, app=sse.handle_post_message)


class ToolRequest(BaseModel):
    """Request body for tool execution."""

    arguments: Dict[str, Any] = {}


class ContentBlock(BaseModel):
    type: str
    text: str


class ToolResponse(BaseModel):
    """Response from tool execution."""

    content: List[ContentBlock]
    isError: bool = False


# ============== API Endpoints ==============


@app.get("/")
async def root():
    return {
        "status": "HubSpot MCP Server is running",
        "version": SERVER_VERSION,
        "tools_count": len(list_tool_names()),
        "endpoints": {
            "sse": "/sse",
            "messages": MESSAGES_PATH,
            "list_tools": "/tools",
            "tool_schema": "/tools/schema",
            "execute": "/tools/{tool_name}/execute",
            "health": "/health",
        },
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/tools")
async def list_tools():
    tools = get_all_tools()
    return {
        "total": len(tools),
        "tools": [
            {
                "name": name,
                "description": tool.description,
                "category": tool.category,
                "parameters": [
                    {
                        "name": p.name,
                        "type": p.type,
                        "description": p.description,
                        "required": p.required,
                    }
                    for p in tool.parameters
                ],
            }
            for name, tool in tools.items()
        ],
    }


@app.get("/tools/schema")
async def get_tools_schema_endpoint():
    return {"tools": get_tools_schema()}


@app.get("/tools/{tool_name}")
async def get_tool_info(tool_name: str):
    tools = get_all_tools()
    if tool_name not in tools:
        raise HTTPException(status_code=404, detail=f"Tool not found: {tool_name}")

    tool = tools[tool_name]
    return {
        "name": tool.name,
        "description": tool.description,
        "category": tool.category,
        "inputSchema": tool.input_schema,
        "parameters": [
            {
                "name": p.name,
                "type": p.type,
                "description": p.description,
                "required": p.required,
                "default": p.default,
            }
            for p in tool.parameters
        ],
    }


@app.post("/tools/{tool_name}/execute", response_model=ToolResponse)
async def execute_tool_endpoint(tool_name: str, request: ToolRequest):
    result = await invoke(tool_name, request.arguments)
    return ToolResponse(**result.to_dict())


# ============== Main ==============


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="HubSpot MCP server")
    parser.add_argument(
        "--transport",
        choices=["sse", "stdio"],
        default="sse",
        help="MCP transport: SSE over HTTP (default) or stdio",
    )
    parser.add_argument("--host", default=settings.host, help="Bind address for SSE mode")
    parser.add_argument("--port", type=int, default=settings.port, help="Listening port for SSE mode")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Run the HubSpot MCP server."""
    args = parse_args(argv)

    # stdout belongs to the protocol in stdio mode
    logging.basicConfig(
        level=get_settings().log_level,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    if args.transport == "stdio":
        logger.info("Starting HubSpot MCP server on stdio")
        asyncio.run(run_stdio())
        return

    import uvicorn

    logger.info(f"Starting HubSpot MCP server on {args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
