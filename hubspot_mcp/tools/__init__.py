"""
HubSpot MCP Tools Package

Every tool class listed in TOOL_CLASSES is registered by registry.py, in
this order. Each tool inherits from MCPTool and implements execute().
"""

from .contacts import CreateContactTool, GetContactTool, SearchContactsTool
from .deals import CreateDealTool, GetPipelineSummaryTool, SearchDealsTool

TOOL_CLASSES = (
    SearchContactsTool,
    GetContactTool,
    CreateContactTool,
    SearchDealsTool,
    CreateDealTool,
    GetPipelineSummaryTool,
)

__all__ = [
    "TOOL_CLASSES",
    "SearchContactsTool",
    "GetContactTool",
    "CreateContactTool",
    "SearchDealsTool",
    "CreateDealTool",
    "GetPipelineSummaryTool",
]
