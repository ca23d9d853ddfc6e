"""
Shared fixtures for the contact assistant test suite.

Every test gets its own SQLite file under tmp_path and a scripted
language-model client, so nothing talks to a real provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

import pytest
import pytest_asyncio

from application.context import TurnContext
from application.services.contacts import ContactService
from domain.models import ConversationMessage, ModelReply, ToolDescriptor
from agent.tools.registry import ToolRegistry
from agent.tools.resolve_contact import ResolveContactTool
from agent.tools.search_contacts import SearchContactsTool
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.contact_repo import SQLiteContactRepository
from infrastructure.persistence.migrations import run_migrations

FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


# ── Language model double ────────────────────────────────────

@dataclass
class ModelCall:
    system_instruction: str
    messages: list[ConversationMessage]
    tools: Optional[Sequence[ToolDescriptor]]


class ScriptedModelClient:
    """LanguageModelClient that replays queued replies (or raises queued errors)."""

    def __init__(self, *replies):
        self._replies = list(replies)
        self.calls: list[ModelCall] = []

    async def converse(self, system_instruction, messages, tools=None) -> ModelReply:
        self.calls.append(ModelCall(system_instruction, list(messages), tools))
        if not self._replies:
            raise AssertionError("ScriptedModelClient ran out of replies")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def scripted_llm():
    """Factory: scripted_llm(reply1, reply2, ...) -> ScriptedModelClient."""
    return ScriptedModelClient


# ── Storage ──────────────────────────────────────────────────

@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "contacts.db")


@pytest_asyncio.fixture
async def connection(db_path) -> AsyncSQLiteConnection:
    conn = AsyncSQLiteConnection(db_path)
    await run_migrations(conn)
    return conn


@pytest_asyncio.fixture
async def repo(connection) -> SQLiteContactRepository:
    return SQLiteContactRepository(connection)


@pytest.fixture
def service(repo) -> ContactService:
    return ContactService(repo)


# ── Agent pieces ─────────────────────────────────────────────

@pytest.fixture
def registry(service) -> ToolRegistry:
    reg = ToolRegistry()
    reg.register(ResolveContactTool(service))
    reg.register(SearchContactsTool(service))
    return reg.freeze()


@pytest.fixture
def ctx() -> TurnContext:
    return TurnContext(request_id="test-request", now=FIXED_NOW)
