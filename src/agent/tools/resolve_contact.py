"""
agent.tools.resolve_contact - Create-or-update a contact from conversation.

The model fills in whatever it learned about a person; the tool matches
by email, then name, and either creates the contact or merges the new
interaction into it (see ContactService.resolve_contact).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.entities import parse_timestamp
from application.context import TurnContext
from application.services.contacts import ContactService
from agent.tools.base import BaseTool

logger = logging.getLogger(__name__)


class ResolveContactInput(BaseModel):
    """Input schema for the resolveContact tool."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Optional[str] = Field(
        default=None, description="The full name of the contact",
    )
    email: Optional[str] = Field(
        default=None, description="The email address of the contact",
    )
    phone: Optional[str] = Field(
        default=None, description="The phone number of the contact",
    )
    new_notes: Optional[str] = Field(
        default=None,
        alias="newNotes",
        description="New notes or context about this interaction to append",
    )
    interaction_date: Optional[str] = Field(
        default=None,
        alias="interactionDate",
        description="ISO date string of when this interaction occurred (defaults to now)",
    )


class ResolveContactTool(BaseTool):
    """Upsert-with-merge of a single contact."""

    name = "resolveContact"
    description = (
        "Create a new contact or update an existing one. Use this when the user "
        "wants to add someone or mentions meeting/contacting someone. "
        "Provide at least a name or an email."
    )

    def __init__(self, contact_service: ContactService):
        self._service = contact_service

    def get_schema(self) -> type[BaseModel]:
        return ResolveContactInput

    async def execute(
        self,
        ctx: TurnContext,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        new_notes: Optional[str] = None,
        interaction_date: Optional[str] = None,
        **kwargs,
    ) -> dict[str, Any]:
        interaction_at = parse_timestamp(interaction_date)
        if interaction_at is None:
            if interaction_date:
                logger.info(
                    "Unparseable interactionDate %r, using turn time instead",
                    interaction_date,
                )
            interaction_at = ctx.now

        outcome = await self._service.resolve_contact(
            name=name,
            email=email,
            phone=phone,
            new_notes=new_notes,
            interaction_at=interaction_at,
        )
        return outcome.to_dict()
