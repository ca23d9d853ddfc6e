"""
agent.tools.search_contacts - Answer questions about existing contacts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from application.context import TurnContext
from application.services.contacts import ContactService
from agent.tools.base import BaseTool


class SearchContactsInput(BaseModel):
    """Input schema for the searchContacts tool."""

    model_config = ConfigDict(extra="forbid")

    query: str = Field(
        ...,
        min_length=1,
        description="The search query to match against name, email, or notes",
    )


class SearchContactsTool(BaseTool):
    """Substring search over name, email and notes."""

    name = "searchContacts"
    description = (
        "Search for contacts by name, email, or notes. Use this when the user "
        "asks a question about their contacts."
    )

    def __init__(self, contact_service: ContactService):
        self._service = contact_service

    def get_schema(self) -> type[BaseModel]:
        return SearchContactsInput

    async def execute(self, ctx: TurnContext, query: str = "", **kwargs) -> dict[str, Any]:
        outcome = await self._service.search_contacts(query)
        return outcome.to_dict()
