"""
HubSpot Deal Tools

Search and create deals, and summarize the deal pipeline by stage.
"""

import logging
import math
import re
from collections import defaultdict
from typing import Any, Dict, Iterable, List

from ..base import MCPTool, ToolParameter, pretty_json

logger = logging.getLogger(__name__)

DEALS_PATH = "/crm/v3/objects/deals"
DEAL_SEARCH_PATH = f"{DEALS_PATH}/search"

SEARCH_PROPERTIES = ["dealname", "amount", "dealstage", "pipeline", "closedate"]
SUMMARY_PROPERTIES = ["dealname", "amount", "dealstage"]

DEFAULT_SEARCH_LIMIT = 20
SUMMARY_LIMIT = 100
DEFAULT_PIPELINE = "default"
UNKNOWN_STAGE = "Unknown"

# Leading decimal literal, as accepted by JavaScript's parseFloat
_LEADING_FLOAT = re.compile(
    r"^\s*([+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?))"
)


def parse_amount(value: Any) -> float:
    """
    Parse a deal amount, falling back to 0.

    HubSpot returns amounts as strings ("1500.00"). Trailing garbage after a
    numeric prefix is ignored ("100 USD" -> 100.0); missing, empty,
    non-numeric or NaN values count as 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_FLOAT.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1).replace("Infinity", "inf"))

    return 0.0 if math.isnan(number) else number


def _total(amounts: List[float]) -> Any:
    """
    Order-independent sum, rendered the way JSON.stringify prints numbers.

    Whole values become ints (150 rather than 150.0) and non-finite totals
    become None, which serializes as null.
    """
    total = float(sum(sorted(amounts)))
    if not math.isfinite(total):
        return None
    return int(total) if total.is_integer() else total


def summarize_pipeline(deals: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Aggregate deals into per-stage counts and values.

    Returns ``{"summary": {stage: {"count", "totalValue"}}, "totalDeals",
    "totalValue"}``. Amounts are summed in sorted order and stages are
    emitted in sorted order, so the result is identical for any ordering of
    ``deals``.
    """
    amounts_by_stage: Dict[str, List[float]] = defaultdict(list)

    for deal in deals:
        properties = deal.get("properties") or {}
        stage = properties.get("dealstage") or UNKNOWN_STAGE
        amounts_by_stage[stage].append(parse_amount(properties.get("amount")))

    summary = {
        stage: {"count": len(amounts), "totalValue": _total(amounts)}
        for stage, amounts in sorted(amounts_by_stage.items())
    }
    all_amounts = [a for amounts in amounts_by_stage.values() for a in amounts]

    return {
        "summary": summary,
        "totalDeals": len(all_amounts),
        "totalValue": _total(all_amounts),
    }


class SearchDealsTool(MCPTool):
    """Search deals, optionally restricted to one pipeline stage."""

    @property
    def name(self) -> str:
        return "search_deals"

    @property
    def description(self) -> str:
        return "Search for deals in HubSpot pipeline"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="pipeline_stage",
                type="string",
                description="Filter by pipeline stage",
                required=False,
            ),
            ToolParameter(
                name="limit",
                type="number",
                description="Maximum number of results (default: 20)",
                required=False,
                default=DEFAULT_SEARCH_LIMIT,
            ),
        ]

    @property
    def category(self) -> str:
        return "deals"

    async def execute(self, /, **kwargs) -> str:
        body: Dict[str, Any] = {
            "properties": SEARCH_PROPERTIES,
            "limit": kwargs.get("limit") or DEFAULT_SEARCH_LIMIT,
        }

        stage = kwargs.get("pipeline_stage")
        if stage:
            body["filterGroups"] = [
                {
                    "filters": [
                        {
                            "propertyName": "dealstage",
                            "operator": "EQ",
                            "value": stage,
                        }
                    ]
                }
            ]

        data = await self.client.post(DEAL_SEARCH_PATH, json=body)
        results = data["results"]
        logger.info(f"search_deals matched {len(results)} deals")
        return pretty_json(results)


class CreateDealTool(MCPTool):
    """Create a deal from the four supported properties only."""

    @property
    def name(self) -> str:
        return "create_deal"

    @property
    def description(self) -> str:
        return "Create a new deal in HubSpot"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter("dealname", "string", "Name of the deal", required=True),
            ToolParameter("amount", "number", "Deal amount in dollars", required=True),
            ToolParameter("dealstage", "string", "Pipeline stage", required=True),
            ToolParameter(
                "pipeline", "string", "Pipeline name",
                required=False, default=DEFAULT_PIPELINE,
            ),
        ]

    @property
    def category(self) -> str:
        return "deals"

    async def execute(self, /, **kwargs) -> str:
        properties = {
            "dealname": kwargs.get("dealname"),
            "amount": kwargs.get("amount"),
            "dealstage": kwargs.get("dealstage"),
            "pipeline": kwargs.get("pipeline") or DEFAULT_PIPELINE,
        }
        data = await self.client.post(DEALS_PATH, json={"properties": properties})
        logger.info(f"Created deal {data.get('id')}")
        return f"Deal created successfully! ID: {data.get('id')}\n{pretty_json(data)}"


class GetPipelineSummaryTool(MCPTool):
    """Summarize the first page of deals by stage."""

    @property
    def name(self) -> str:
        return "get_pipeline_summary"

    @property
    def description(self) -> str:
        return "Get a summary of all deals by pipeline stage"

    @property
    def category(self) -> str:
        return "deals"

    async def execute(self, /, **kwargs) -> str:
        data = await self.client.post(DEAL_SEARCH_PATH, json={
            "properties": SUMMARY_PROPERTIES,
            "limit": SUMMARY_LIMIT,
        })
        summary = summarize_pipeline(data["results"])
        logger.info(
            f"Pipeline summary: {summary['totalDeals']} deals "
            f"across {len(summary['summary'])} stages"
        )
        return f"Pipeline Summary:\n{pretty_json(summary)}"
