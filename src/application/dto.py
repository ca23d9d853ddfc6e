"""
application.dto - Data Transfer Objects for service input/output.

These are the structured results that services return to callers
(agent tools, REST endpoints, CLI adapters).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from domain.entities import Contact


@dataclass(frozen=True)
class ResolveOutcome:
    """Result of resolveContact: what happened and the resulting contact."""
    action: Literal["created", "updated"]
    contact: Contact

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.action, "contact": self.contact.to_dict()}


@dataclass(frozen=True)
class SearchOutcome:
    """Contacts matching a search query."""
    results: list[Contact]

    @property
    def count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {"results": [c.to_dict() for c in self.results], "count": self.count}
