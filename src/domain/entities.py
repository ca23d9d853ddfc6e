"""
domain.entities - Persistence-aware types (have IDs, timestamps).

Decoupled from any persistence strategy: no SQL concerns, no DB imports.
Timestamps are set by the repository implementation, not by the entities
themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Optional


class _Unset:
    """Sentinel type for a patch field that was never assigned."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

NOTE_SEPARATOR = "\n\n"


@dataclass
class Contact:
    """A person in the contact store.

    ``notes`` is an append-only log of ``[timestamp] text`` entries joined
    by blank lines, newest last.
    """
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    last_contacted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for tool payloads and HTTP responses (camelCase keys)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "notes": self.notes,
            "lastContactedAt": format_timestamp(self.last_contacted_at),
            "createdAt": format_timestamp(self.created_at),
        }


@dataclass
class ContactPatch:
    """Partial update for a Contact.

    Fields left at ``UNSET`` are not touched; ``None`` explicitly clears
    the column. Shared by the CRUD update path and resolveContact's merge.
    """
    name: Any = UNSET
    email: Any = UNSET
    phone: Any = UNSET
    notes: Any = UNSET
    last_contacted_at: Any = UNSET

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were assigned."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp as ISO-8601 UTC with milliseconds, e.g. 2026-10-19T09:30:00.000Z."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Returns None for empty or unparseable input. A trailing ``Z`` is
    accepted and naive values are taken to be UTC.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def note_entry(timestamp: datetime, text: str) -> str:
    """Build one ``[timestamp] text`` notes entry."""
    return f"[{format_timestamp(timestamp)}] {text}"


def append_note(existing: Optional[str], entry: str) -> str:
    """Append an entry to a notes log, separated by a blank line."""
    if not existing:
        return entry
    return f"{existing}{NOTE_SEPARATOR}{entry}"
