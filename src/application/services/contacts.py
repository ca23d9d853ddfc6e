"""
application.services.contacts - Contact resolution, search and CRUD.

Business logic only: works against the ContactRepository port and never
touches SQL. Used by the agent tools (resolveContact, searchContacts) and
by the REST/CLI adapters for plain CRUD.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from domain.entities import (
    UNSET,
    Contact,
    ContactPatch,
    append_note,
    note_entry,
)
from domain.exceptions import ConflictError, NotFoundError, ValidationError
from domain.ports import ContactRepository
from application.dto import ResolveOutcome, SearchOutcome

logger = logging.getLogger(__name__)

DEFAULT_INTERACTION_NOTE = "Contact interaction"


def _clean(value: Optional[str]) -> Optional[str]:
    """Treat None, empty and whitespace-only strings alike as absent."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class ContactService:
    """Upsert-with-merge, substring search and CRUD over contacts."""

    def __init__(self, contact_repo: ContactRepository):
        self._repo = contact_repo

    # ------------------------------------------------------------------
    # resolveContact
    # ------------------------------------------------------------------

    async def resolve_contact(
        self,
        *,
        interaction_at: datetime,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        new_notes: Optional[str] = None,
    ) -> ResolveOutcome:
        """Create a contact or merge an interaction into an existing one.

        Matching is by exact email first, then exact name. A new contact
        gets ``[ts] new_notes`` (or no notes); an existing one keeps any
        field the caller left empty and gets a new notes entry appended.

        If the insert loses a race on the email uniqueness constraint the
        match is retried once and the interaction merged into the winner.

        Raises:
            ValidationError: neither name nor email given.
            ConflictError:   the write still violates email uniqueness.
        """
        name, email, phone, new_notes = (
            _clean(name), _clean(email), _clean(phone), _clean(new_notes),
        )
        if not name and not email:
            raise ValidationError("At least one of name or email is required")

        existing = await self._match(name=name, email=email)

        if existing is None:
            patch = ContactPatch(
                name=name,
                email=email,
                phone=phone,
                notes=note_entry(interaction_at, new_notes) if new_notes else None,
                last_contacted_at=interaction_at,
            )
            try:
                contact = await self._repo.insert(patch)
            except ConflictError:
                logger.warning(
                    "Insert for email=%s lost a uniqueness race; retrying match once",
                    email,
                )
                existing = await self._match(name=name, email=email)
                if existing is None:
                    raise
            else:
                logger.info("Created contact id=%s", contact.id)
                return ResolveOutcome(action="created", contact=contact)

        contact = await self._merge(existing, interaction_at, name, email, phone, new_notes)
        logger.info("Updated contact id=%s", contact.id)
        return ResolveOutcome(action="updated", contact=contact)

    async def _match(
        self, *, name: Optional[str], email: Optional[str],
    ) -> Optional[Contact]:
        match = None
        if email:
            match = await self._repo.find_by_email(email)
        if match is None and name:
            match = await self._repo.find_by_name(name)
        return match

    async def _merge(
        self,
        existing: Contact,
        interaction_at: datetime,
        name: Optional[str],
        email: Optional[str],
        phone: Optional[str],
        new_notes: Optional[str],
    ) -> Contact:
        entry = note_entry(interaction_at, new_notes or DEFAULT_INTERACTION_NOTE)
        patch = ContactPatch(
            name=name if name else UNSET,
            email=email if email else UNSET,
            phone=phone if phone else UNSET,
            notes=append_note(existing.notes, entry),
            last_contacted_at=interaction_at,
        )
        updated = await self._repo.update(existing.id, patch)
        if updated is None:
            raise NotFoundError(f"Contact {existing.id} was deleted before it could be updated")
        return updated

    # ------------------------------------------------------------------
    # searchContacts
    # ------------------------------------------------------------------

    async def search_contacts(self, query: str) -> SearchOutcome:
        """Substring match over name, email and notes (logical OR).

        Case handling follows the store: ASCII letters match
        case-insensitively, other characters match exactly.

        Raises:
            ValidationError: blank query.
        """
        cleaned = _clean(query)
        if not cleaned:
            raise ValidationError("Search query must not be empty")
        results = await self._repo.search(cleaned, include_notes=True)
        logger.info("Search '%s' matched %d contact(s)", cleaned, len(results))
        return SearchOutcome(results=results)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def list_contacts(self, query: Optional[str] = None) -> list[Contact]:
        """All contacts, or those whose name or email contains ``query``."""
        cleaned = _clean(query)
        if cleaned:
            return await self._repo.search(cleaned, include_notes=False)
        return await self._repo.list_all()

    async def get_contact(self, contact_id: int) -> Contact:
        contact = await self._repo.get_by_id(contact_id)
        if contact is None:
            raise NotFoundError("Contact not found")
        return contact

    async def create_contact(self, patch: ContactPatch) -> Contact:
        """Create a contact from explicit fields. No matching, no merge.

        Raises:
            ValidationError: neither name nor email given.
            ConflictError:   email already used by another contact.
        """
        changes = patch.changes()
        fields = ContactPatch(
            name=_clean(changes.get("name")),
            email=_clean(changes.get("email")),
            phone=_clean(changes.get("phone")),
            notes=_clean(changes.get("notes")),
            last_contacted_at=changes.get("last_contacted_at"),
        )
        if not fields.name and not fields.email:
            raise ValidationError("At least one of name or email is required")
        contact = await self._repo.insert(fields)
        logger.info("Created contact id=%s via CRUD", contact.id)
        return contact

    async def update_contact(self, contact_id: int, patch: ContactPatch) -> Contact:
        """Apply only the assigned fields of ``patch``.

        Raises:
            NotFoundError: no contact with this id.
            ConflictError: email already used by another contact.
        """
        updated = await self._repo.update(contact_id, patch)
        if updated is None:
            raise NotFoundError("Contact not found")
        logger.info("Updated contact id=%s fields=%s", contact_id, sorted(patch.changes()))
        return updated

    async def delete_contact(self, contact_id: int) -> Contact:
        deleted = await self._repo.delete(contact_id)
        if deleted is None:
            raise NotFoundError("Contact not found")
        logger.info("Deleted contact id=%s", contact_id)
        return deleted
