"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations. Application services and the
agent depend only on these protocols, never on concrete classes.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from domain.entities import Contact, ContactPatch
from domain.models import ConversationMessage, ModelReply, ToolDescriptor


# ---------------------------------------------------------------------------
# Language Model Port
# ---------------------------------------------------------------------------

@runtime_checkable
class LanguageModelClient(Protocol):
    """Request/response transport to a hosted model with tool calling.

    When ``tools`` is None the reply never contains tool invocations.
    Failures surface as UpstreamServiceError.
    """

    async def converse(
        self,
        system_instruction: str,
        messages: Sequence[ConversationMessage],
        tools: Optional[Sequence[ToolDescriptor]] = None,
    ) -> ModelReply: ...


# ---------------------------------------------------------------------------
# Repository Port
# ---------------------------------------------------------------------------

@runtime_checkable
class ContactRepository(Protocol):
    """CRUD and lookup operations for Contact entities.

    Each call is atomic on a single record; nothing is transactional
    across calls. Email uniqueness violations raise ConflictError.
    """

    async def get_by_id(self, contact_id: int) -> Contact | None: ...
    async def find_by_email(self, email: str) -> Contact | None: ...
    async def find_by_name(self, name: str) -> Contact | None: ...
    async def insert(self, patch: ContactPatch) -> Contact: ...
    async def update(self, contact_id: int, patch: ContactPatch) -> Contact | None: ...
    async def search(self, substring: str, *, include_notes: bool = True) -> list[Contact]: ...
    async def list_all(self) -> list[Contact]: ...
    async def delete(self, contact_id: int) -> Contact | None: ...
