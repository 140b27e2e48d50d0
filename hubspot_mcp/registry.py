"""
HubSpot MCP Tool Registry

Single Source of Truth (SSOT) for the tool catalog and for dispatching
tool calls. The advertised catalog and the dispatch table are the same
mapping, so every advertised name is executable and nothing else is.
"""

import logging
from typing import Any, Dict, List, Optional

from .base import ToolDefinition, ToolResult, UnknownToolError
from .client import HubSpotClient
from .tools import TOOL_CLASSES

logger = logging.getLogger(__name__)

# Global registry (insertion order is the advertised order)
_tool_registry: Dict[str, ToolDefinition] = {}
_client: Optional[HubSpotClient] = None
_initialized: bool = False


def _discover_tools() -> None:
    """
    Instantiate every tool class once and register its definition.
    This is the ONLY place where tools are collected.
    """
    global _tool_registry, _client, _initialized

    if _initialized:
        return

    if _client is None:
        _client = HubSpotClient.from_settings()

    for tool_cls in TOOL_CLASSES:
        definition = tool_cls(client=_client).to_definition()
        if definition.name in _tool_registry:
            raise ValueError(f"Duplicate tool name: {definition.name}")
        _tool_registry[definition.name] = definition
        logger.debug(f"Registered tool: {definition.name}")

    _initialized = True
    logger.info(f"Tool registration complete. Total tools: {len(_tool_registry)}")


def list_tools() -> List[ToolDefinition]:
    """All tool definitions in stable catalog order."""
    _discover_tools()
    return list(_tool_registry.values())


def get_all_tools() -> Dict[str, ToolDefinition]:
    """
    Get all registered tools keyed by name.
    This is the public API for accessing tools.
    """
    _discover_tools()
    return _tool_registry.copy()


def get_tool(name: str) -> Optional[ToolDefinition]:
    """
    Get a specific tool by name.
    Returns None if tool not found.
    """
    _discover_tools()
    return _tool_registry.get(name)


def list_tool_names() -> List[str]:
    """Get list of all registered tool names."""
    _discover_tools()
    return list(_tool_registry.keys())


def get_tools_schema() -> List[Dict[str, Any]]:
    """
    Get all tools in MCP listing format (name, description, inputSchema).
    Used by the HTTP schema endpoint.
    """
    return [definition.to_schema() for definition in list_tools()]


async def invoke(name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
    """
    Execute a tool by name with the given arguments.

    Never raises: unknown names and tool failures come back as a ToolResult
    with ``is_error`` set and a single "Error: ..." text block.
    """
    tool = get_tool(name)

    if tool is None:
        error = UnknownToolError(name)
        logger.warning(error.message)
        return ToolResult.error(error.message)

    logger.info(f"Invoking tool: {name}")
    try:
        return await tool.handler(**(arguments or {}))
    except Exception as e:
        # Argument binding failures (e.g. non-mapping arguments) happen before run()
        logger.exception(f"Failed to dispatch {name}")
        return ToolResult.error(str(e))


def reset_registry(client: Optional[HubSpotClient] = None) -> None:
    """
    Reset the registry (mainly for testing).
    The next lookup rebuilds the tools around ``client`` or a client from
    the current settings.
    """
    global _tool_registry, _client, _initialized
    _tool_registry = {}
    _client = client
    _initialized = False
