"""
Unit tests for the deal tools and pipeline aggregation.
"""

import itertools
import json

import pytest

from hubspot_mcp.registry import invoke
from hubspot_mcp.tools.deals import parse_amount, summarize_pipeline

SEARCH_PATH = "/crm/v3/objects/deals/search"


def deal(stage, amount, deal_id="1"):
    properties = {"dealname": f"Deal {deal_id}"}
    if stage is not None:
        properties["dealstage"] = stage
    if amount is not None:
        properties["amount"] = amount
    return {"id": deal_id, "properties": properties}


@pytest.fixture
def sample_deals():
    return [
        deal("won", "100", "1"),
        deal("won", "50", "2"),
        deal("", "bad", "3"),
    ]


class TestParseAmount:

    @pytest.mark.parametrize("raw, expected", [
        ("100", 100.0),
        ("1500.50", 1500.5),
        (" 42", 42.0),
        ("100 USD", 100.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        (250, 250.0),
        (12.5, 12.5),
    ])
    def test_numeric(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "bad", "USD 100", "NaN", float("nan"), True])
    def test_fallback_to_zero(self, raw):
        assert parse_amount(raw) == 0.0


class TestSummarizePipeline:

    def test_aggregation(self, sample_deals):
        summary = summarize_pipeline(sample_deals)

        assert summary == {
            "summary": {
                "won": {"count": 2, "totalValue": 150},
                "Unknown": {"count": 1, "totalValue": 0},
            },
            "totalDeals": 3,
            "totalValue": 150,
        }

    def test_order_independent(self, sample_deals):
        expected = summarize_pipeline(sample_deals)

        for ordering in itertools.permutations(sample_deals):
            summary = summarize_pipeline(list(ordering))
            assert summary == expected
            assert list(summary["summary"]) == list(expected["summary"])

    def test_missing_stage_and_amount(self):
        summary = summarize_pipeline([deal(None, None), {"id": "9"}])

        assert summary["summary"] == {"Unknown": {"count": 2, "totalValue": 0}}
        assert summary["totalDeals"] == 2

    def test_whole_totals_are_ints(self, sample_deals):
        summary = summarize_pipeline(sample_deals)

        assert isinstance(summary["totalValue"], int)
        assert isinstance(summary["summary"]["won"]["totalValue"], int)
        assert summarize_pipeline([deal("won", "10.25")])["totalValue"] == 10.25

    def test_overflowing_total_is_null(self):
        summary = summarize_pipeline([deal("won", "1e308", "1"), deal("won", "1e308", "2")])

        assert summary["totalDeals"] == 2
        assert summary["summary"]["won"] == {"count": 2, "totalValue": None}
        assert summary["totalValue"] is None

    def test_infinite_amounts(self):
        summary = summarize_pipeline([
            deal("won", "Infinity", "1"),
            deal("lost", "-Infinity", "2"),
            deal("open", "5", "3"),
        ])

        assert summary["summary"]["won"]["totalValue"] is None
        assert summary["summary"]["lost"]["totalValue"] is None
        assert summary["summary"]["open"]["totalValue"] == 5
        assert summary["totalValue"] is None

    def test_empty(self):
        assert summarize_pipeline([]) == {"summary": {}, "totalDeals": 0, "totalValue": 0}


class TestSearchDeals:

    @pytest.mark.asyncio
    async def test_unfiltered_default_limit(self, hubspot):
        await invoke("search_deals", {})

        body = hubspot.last_json()
        assert hubspot.last.url.path == SEARCH_PATH
        assert body["limit"] == 20
        assert "filterGroups" not in body
        assert body["properties"] == ["dealname", "amount", "dealstage", "pipeline", "closedate"]

    @pytest.mark.asyncio
    async def test_stage_filter(self, hubspot):
        await invoke("search_deals", {"pipeline_stage": "closedwon", "limit": 5})

        body = hubspot.last_json()
        assert body["limit"] == 5
        assert body["filterGroups"] == [
            {"filters": [{"propertyName": "dealstage", "operator": "EQ", "value": "closedwon"}]}
        ]

    @pytest.mark.asyncio
    async def test_returns_results_array(self, hubspot, sample_deals):
        hubspot.respond("POST", SEARCH_PATH, json_body={"results": sample_deals})

        result = await invoke("search_deals", {})

        assert json.loads(result.first_text) == sample_deals


class TestCreateDeal:

    @pytest.mark.asyncio
    async def test_whitelists_properties(self, hubspot):
        result = await invoke("create_deal", {
            "dealname": "Big one",
            "amount": 5000,
            "dealstage": "qualified",
            "foo": "bar",
        })

        assert hubspot.last.url.path == "/crm/v3/objects/deals"
        assert hubspot.last_json() == {
            "properties": {
                "dealname": "Big one",
                "amount": 5000,
                "dealstage": "qualified",
                "pipeline": "default",
            }
        }
        assert result.first_text.startswith("Deal created successfully! ID: 1001\n")

    @pytest.mark.asyncio
    async def test_explicit_pipeline(self, hubspot):
        await invoke("create_deal", {
            "dealname": "Renewal",
            "amount": 100,
            "dealstage": "won",
            "pipeline": "renewals",
        })

        assert hubspot.last_json()["properties"]["pipeline"] == "renewals"


class TestGetPipelineSummary:

    @pytest.mark.asyncio
    async def test_request_and_rendering(self, hubspot, sample_deals):
        hubspot.respond("POST", SEARCH_PATH, json_body={"results": sample_deals})

        result = await invoke("get_pipeline_summary", {})

        body = hubspot.last_json()
        assert body == {"properties": ["dealname", "amount", "dealstage"], "limit": 100}

        header, _, payload = result.first_text.partition("\n")
        assert header == "Pipeline Summary:"
        assert json.loads(payload) == {
            "summary": {
                "won": {"count": 2, "totalValue": 150},
                "Unknown": {"count": 1, "totalValue": 0},
            },
            "totalDeals": 3,
            "totalValue": 150,
        }

    @pytest.mark.asyncio
    async def test_huge_amounts_render_as_strict_json(self, hubspot):
        hubspot.respond("POST", SEARCH_PATH, json_body={"results": [
            deal("won", "1e308", "1"),
            deal("won", "1e308", "2"),
            deal("lost", "Infinity", "3"),
        ]})

        result = await invoke("get_pipeline_summary", {})

        assert result.is_error is False
        payload = result.first_text.partition("\n")[2]
        assert "Infinity" not in payload

        def reject_constant(name):
            raise ValueError(name)

        data = json.loads(payload, parse_constant=reject_constant)
        assert data["totalValue"] is None
        assert data["totalDeals"] == 3

    @pytest.mark.asyncio
    async def test_whole_totals_render_without_decimal(self, hubspot, sample_deals):
        hubspot.respond("POST", SEARCH_PATH, json_body={"results": sample_deals})

        result = await invoke("get_pipeline_summary", {})

        assert '"totalValue": 150\n' in result.first_text
        assert "150.0" not in result.first_text

    @pytest.mark.asyncio
    async def test_upstream_failure(self, hubspot):
        hubspot.respond("POST", SEARCH_PATH, status_code=401, text="unauthorized")

        result = await invoke("get_pipeline_summary", {})

        assert result.is_error is True
        assert result.first_text == "Error: HubSpot API error: 401 - unauthorized"
