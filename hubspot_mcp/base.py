"""
HubSpot MCP Tool Base Classes

Provides the tool definition types, the normalized tool result and the
common error handling shared by every HubSpot tool.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolParameter:
    """Definition of a tool parameter."""
    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None

    def to_schema(self) -> Dict[str, Any]:
        prop: Dict[str, Any] = {
            "type": self.type,
            "description": self.description,
        }
        if self.default is not None:
            prop["default"] = self.default
        return prop


@dataclass(frozen=True)
class ToolDefinition:
    """Complete, immutable definition of an MCP tool."""
    name: str
    description: str
    parameters: Tuple[ToolParameter, ...] = ()
    handler: Optional[Callable] = field(default=None, compare=False)
    category: str = "general"

    @property
    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema describing the accepted arguments."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.to_schema() for p in self.parameters},
        }
        required = [p.name for p in self.parameters if p.required]
        # required가 있을 때만 포함
        if required:
            schema["required"] = required
        return schema

    def to_schema(self) -> Dict[str, Any]:
        """MCP tool listing shape: name, description, inputSchema."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolResult:
    """
    Normalized outcome of one tool call.

    Either a success payload or an error payload; ``is_error`` tags which.
    Content is always a list of text blocks.
    """
    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": text}])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": f"Error: {message}"}], is_error=True)

    @property
    def first_text(self) -> str:
        return self.content[0]["text"] if self.content else ""

    def to_dict(self) -> Dict[str, Any]:
        return {"content": list(self.content), "isError": self.is_error}


class ToolExecutionError(Exception):
    """Base exception for every failure surfaced as an error result."""
    def __init__(self, message: str, tool_name: str = None, details: Dict = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class HubSpotAPIError(ToolExecutionError):
    """Raised when the HubSpot API answers with a non-success status."""
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"HubSpot API error: {status_code} - {body}",
            details={"status_code": status_code, "body": body},
        )


class UnknownToolError(ToolExecutionError):
    """Raised when a tool name is not in the catalog."""
    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}", tool_name=tool_name)


def pretty_json(value: Any) -> str:
    """Render a value the way every tool result prints its payload."""
    return json.dumps(value, indent=2, ensure_ascii=False)


class MCPTool(ABC):
    """
    Abstract base class for HubSpot MCP tools.

    All tools must inherit from this class and implement:
    - name: Tool identifier
    - description: What the tool does
    - parameters: List of ToolParameter definitions
    - execute(): Translate arguments into HubSpot calls and render the text result

    Arguments are passed to ``execute`` exactly as received. Required
    parameters are advertised in the schema but not enforced here; a missing
    value surfaces as a HubSpot rejection or a client-side exception.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            from .client import HubSpotClient
            self._client = HubSpotClient.from_settings()
        return self._client

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for the tool."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        pass

    @property
    def parameters(self) -> List[ToolParameter]:
        """List of parameters the tool accepts."""
        return []

    @property
    def category(self) -> str:
        """Category for grouping tools."""
        return "general"

    @abstractmethod
    async def execute(self, /, **kwargs) -> str:
        """
        Execute the tool with the raw call arguments.
        Returns the text payload of a successful result.
        """
        pass

    async def run(self, /, **kwargs) -> ToolResult:
        """
        Public entry point: execute and normalize.
        Never raises; failures become an error result.
        """
        logger.debug(f"Running {self.name} with arguments: {kwargs}")
        try:
            text = await self.execute(**kwargs)
            return ToolResult.text(text)
        except ToolExecutionError as e:
            logger.error(f"Execution error in {self.name}: {e.message}")
            return ToolResult.error(e.message)
        except Exception as e:
            logger.exception(f"Unexpected error in {self.name}")
            return ToolResult.error(str(e))

    def to_definition(self) -> ToolDefinition:
        """Convert tool to ToolDefinition for registry."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=tuple(self.parameters),
            handler=self.run,
            category=self.category
        )
