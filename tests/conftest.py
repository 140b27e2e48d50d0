"""
Shared fixtures: a fake HubSpot API built on httpx.MockTransport.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from hubspot_mcp.client import HubSpotClient
from hubspot_mcp.registry import reset_registry

TEST_API_KEY = "test-token"
TEST_BASE_URL = "https://api.hubapi.test"

Route = Tuple[str, str]


class FakeHubSpot:
    """
    Records every outbound request and answers from per-route responses.

    Unrouted POSTs to a .../search path return an empty result page, other
    POSTs echo the properties back as a created record, and GETs return a
    record with the id taken from the path.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Route, Callable[[httpx.Request], httpx.Response]] = {}
        self.failure: Optional[Tuple[int, str]] = None

    def respond(self, method: str, path: str, status_code: int = 200,
                json_body: Any = None, text: Optional[str] = None) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body)
        self.routes[(method, path)] = handler

    def fail_all(self, status_code: int, text: str) -> None:
        self.routes = {}
        self.failure = (status_code, text)

    def _default(self, request: httpx.Request) -> httpx.Response:
        if self.failure:
            return httpx.Response(self.failure[0], text=self.failure[1])

        path = request.url.path
        if request.method == "POST" and path.endswith("/search"):
            return httpx.Response(200, json={"total": 0, "results": []})
        if request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(201, json={"id": "1001", "properties": body["properties"]})
        return httpx.Response(200, json={"id": path.rsplit("/", 1)[-1], "properties": {}})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path), self._default)
        return handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last.content)


@pytest.fixture
def hubspot() -> FakeHubSpot:
    return FakeHubSpot()


@pytest.fixture
def client(hubspot) -> HubSpotClient:
    return HubSpotClient(
        api_key=TEST_API_KEY,
        base_url=TEST_BASE_URL,
        transport=httpx.MockTransport(hubspot.handle),
    )


@pytest.fixture(autouse=True)
def registry(client):
    """Point the global registry at the fake API for every test."""
    reset_registry(client=client)
    yield
    reset_registry()
