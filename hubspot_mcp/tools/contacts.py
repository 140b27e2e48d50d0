"""
HubSpot Contact Tools

Search, fetch and create CRM contacts through the HubSpot v3 objects API.
"""

import logging
from typing import Any, Dict, List

from ..base import MCPTool, ToolParameter, pretty_json

logger = logging.getLogger(__name__)

CONTACTS_PATH = "/crm/v3/objects/contacts"
CONTACT_SEARCH_PATH = f"{CONTACTS_PATH}/search"

SEARCH_PROPERTIES = ["firstname", "lastname", "email", "phone", "company"]
DETAIL_PROPERTIES = SEARCH_PROPERTIES + ["lifecyclestage"]

DEFAULT_SEARCH_LIMIT = 10


def build_contact_search(query: str, limit: Any = None) -> Dict[str, Any]:
    """
    Build the search body matching ``query`` against email, first name or
    last name. Each property is its own filter group, so HubSpot ORs them.
    """
    return {
        "filterGroups": [
            {
                "filters": [
                    {
                        "propertyName": prop,
                        "operator": "CONTAINS_TOKEN",
                        "value": query,
                    }
                ]
            }
            for prop in ("email", "firstname", "lastname")
        ],
        "properties": SEARCH_PROPERTIES,
        "limit": limit or DEFAULT_SEARCH_LIMIT,
    }


class SearchContactsTool(MCPTool):
    """Search contacts by name or email."""

    @property
    def name(self) -> str:
        return "search_contacts"

    @property
    def description(self) -> str:
        return "Search for contacts in HubSpot by name, email, or company"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="query",
                type="string",
                description="Search query (name, email, company, etc.)",
                required=True,
            ),
            ToolParameter(
                name="limit",
                type="number",
                description="Maximum number of results to return (default: 10)",
                required=False,
                default=DEFAULT_SEARCH_LIMIT,
            ),
        ]

    @property
    def category(self) -> str:
        return "contacts"

    async def execute(self, /, **kwargs) -> str:
        body = build_contact_search(kwargs["query"], kwargs.get("limit"))
        data = await self.client.post(CONTACT_SEARCH_PATH, json=body)
        results = data["results"]
        logger.info(f"search_contacts matched {len(results)} contacts")
        return pretty_json(results)


class GetContactTool(MCPTool):
    """
    Fetch a single contact.

    ``contact_id`` may be a HubSpot record id or an email address. Emails are
    resolved with an exact-match search; when nothing matches the result is
    ``null`` rather than an error.
    """

    @property
    def name(self) -> str:
        return "get_contact"

    @property
    def description(self) -> str:
        return "Get detailed information about a specific contact"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="contact_id",
                type="string",
                description="HubSpot contact ID or email address",
                required=True,
            ),
        ]

    @property
    def category(self) -> str:
        return "contacts"

    async def _find_by_email(self, email: str) -> Any:
        data = await self.client.post(CONTACT_SEARCH_PATH, json={
            "filterGroups": [
                {
                    "filters": [
                        {
                            "propertyName": "email",
                            "operator": "EQ",
                            "value": email,
                        }
                    ]
                }
            ],
            "properties": DETAIL_PROPERTIES,
            "limit": 1,
        })
        results = data["results"]
        return results[0] if results else None

    async def _fetch_by_id(self, contact_id: str) -> Any:
        properties = ",".join(DETAIL_PROPERTIES)
        return await self.client.get(f"{CONTACTS_PATH}/{contact_id}?properties={properties}")

    async def execute(self, /, **kwargs) -> str:
        contact_id = kwargs["contact_id"]

        if "@" in contact_id:
            contact = await self._find_by_email(contact_id)
        else:
            contact = await self._fetch_by_id(contact_id)

        return pretty_json(contact)


class CreateContactTool(MCPTool):
    """Create a contact; every argument is sent as a contact property."""

    @property
    def name(self) -> str:
        return "create_contact"

    @property
    def description(self) -> str:
        return "Create a new contact in HubSpot"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter("email", "string", "Contact email address", required=True),
            ToolParameter("firstname", "string", "First name", required=False),
            ToolParameter("lastname", "string", "Last name", required=False),
            ToolParameter("phone", "string", "Phone number", required=False),
            ToolParameter("company", "string", "Company name", required=False),
        ]

    @property
    def category(self) -> str:
        return "contacts"

    async def execute(self, /, **kwargs) -> str:
        # No whitelist: unknown arguments become HubSpot properties as well.
        data = await self.client.post(CONTACTS_PATH, json={"properties": dict(kwargs)})
        logger.info(f"Created contact {data.get('id')}")
        return f"Contact created successfully! ID: {data.get('id')}\n{pretty_json(data)}"
