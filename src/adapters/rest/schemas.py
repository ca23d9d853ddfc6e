"""Pydantic models for REST API request/response validation."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.entities import ContactPatch, parse_timestamp
from domain.exceptions import ValidationError


# --- Agent ---

class AgentBody(BaseModel):
    # Left untyped so a non-string prompt reaches the executor's own check.
    prompt: Any = None


# --- Contacts ---

class ContactCreateBody(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    def to_patch(self) -> ContactPatch:
        return ContactPatch(
            name=self.name, email=self.email, phone=self.phone, notes=self.notes,
        )


class ContactUpdateBody(BaseModel):
    """Partial update. Omitted fields stay untouched; explicit null clears."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    last_contacted_at: Optional[str] = Field(default=None, alias="lastContactedAt")

    def to_patch(self) -> ContactPatch:
        patch = ContactPatch()
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "last_contacted_at" and value is not None:
                parsed = parse_timestamp(value)
                if parsed is None:
                    raise ValidationError(f"Invalid lastContactedAt: {value!r}")
                value = parsed
            setattr(patch, name, value)
        return patch
