"""
HubSpot MCP Server

Exposes HubSpot CRM contacts and deals as MCP tools. The registry holds the
tool catalog and dispatches calls; each tool translates its arguments into
HubSpot API requests.
"""

from .base import MCPTool, ToolDefinition, ToolExecutionError, ToolResult
from .registry import get_all_tools, get_tool, invoke, list_tools

__all__ = [
    "MCPTool",
    "ToolDefinition",
    "ToolExecutionError",
    "ToolResult",
    "get_all_tools",
    "get_tool",
    "invoke",
    "list_tools",
]
