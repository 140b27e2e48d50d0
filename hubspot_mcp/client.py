"""
HubSpot REST API client.

Every tool issues its outbound calls through HubSpotClient.request, which
attaches the bearer credential, sends the JSON body and turns non-success
statuses into HubSpotAPIError.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .base import HubSpotAPIError
from .config import DEFAULT_API_BASE, get_settings

logger = logging.getLogger(__name__)


class HubSpotClient:
    """
    Thin async wrapper around the HubSpot CRM v3 API.

    A fresh httpx.AsyncClient is opened per request; nothing is pooled or
    cached between tool invocations. ``transport`` lets tests plug in an
    httpx.MockTransport.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "HubSpotClient":
        settings = get_settings()
        if not settings.hubspot_api_key:
            logger.warning("HUBSPOT_API_KEY is not set; HubSpot will reject requests")
        return cls(
            api_key=settings.hubspot_api_key,
            base_url=settings.hubspot_api_base,
            timeout=settings.hubspot_timeout,
            transport=transport,
        )

    def _headers(self, overrides: Optional[Dict[str, str]] = None) -> httpx.Headers:
        headers = httpx.Headers({
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        })
        if overrides:
            headers.update(overrides)
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send one request to ``base_url + endpoint`` and return the parsed JSON.

        Raises:
            HubSpotAPIError: on any non-2xx response, carrying the status
                code and the raw response text.
        """
        url = f"{self.base_url}{endpoint}"
        logger.info(f"HubSpot {method} {endpoint}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.request(method, url, json=json, headers=self._headers(headers))

        if not resp.is_success:
            logger.warning(f"HubSpot {method} {endpoint} failed with {resp.status_code}")
            raise HubSpotAPIError(resp.status_code, resp.text)

        return resp.json()

    async def post(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return await self.request(endpoint, method="POST", json=json, **kwargs)

    async def get(self, endpoint: str, **kwargs) -> Any:
        return await self.request(endpoint, method="GET", **kwargs)
