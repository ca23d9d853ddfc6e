"""
factory - Composition root for the contact assistant.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services and the agent.

Usage:
    from factory import ServiceFactory
    from infrastructure.config import Settings

    config = Settings.from_env()
    factory = ServiceFactory(config)   # raises ConfigurationError on bad config
    await factory.initialize()         # one-time startup

    agent = factory.create_agent()
    result = await agent.run_turn("I met Sam Lee, sam@x.com, yesterday")
"""

from __future__ import annotations

import logging
from typing import Optional

from domain.ports import LanguageModelClient
from infrastructure.config import Settings
from infrastructure.llm.llm_builder import build_chat_model, history_needs_tool_definitions
from infrastructure.llm.model_client import LangChainModelClient
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.contact_repo import SQLiteContactRepository
from infrastructure.persistence.migrations import run_migrations
from application.services.contacts import ContactService
from agent.executor import AgentExecutor
from agent.tools.registry import ToolRegistry
from agent.tools.resolve_contact import ResolveContactTool
from agent.tools.search_contacts import SearchContactsTool

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root — wires all dependencies together.

    The language-model client is built eagerly so missing credentials fail
    at startup. Tests may pass ``llm_client`` to skip provider setup;
    ``with_agent=False`` skips it entirely for CRUD-only callers.
    """

    def __init__(
        self,
        config: Settings,
        llm_client: Optional[LanguageModelClient] = None,
        with_agent: bool = True,
    ):
        self._config = config
        self._connection = AsyncSQLiteConnection(config.db_path)
        self._llm_client = llm_client
        if self._llm_client is None and with_agent:
            self._llm_client = self._build_llm_client()
        self._registry = self._build_tool_registry()
        self._initialized = False

    @property
    def connection(self) -> AsyncSQLiteConnection:
        return self._connection

    async def initialize(self) -> None:
        """One-time startup: run migrations."""
        logger.info("Initializing ServiceFactory...")
        await run_migrations(self._connection)
        self._initialized = True
        logger.info(
            "ServiceFactory ready (provider=%s, model=%s, api_key=%s, db=%s)",
            self._config.llm_provider,
            self._config.active_llm_model,
            "set" if self._config.active_api_key else "not set",
            self._config.db_path,
        )

    # ------------------------------------------------------------------
    # Service creation
    # ------------------------------------------------------------------

    def create_contact_repository(self) -> SQLiteContactRepository:
        return SQLiteContactRepository(self._connection)

    def create_contact_service(self) -> ContactService:
        """Create a ContactService over the SQLite store."""
        return ContactService(contact_repo=self.create_contact_repository())

    @property
    def tool_registry(self) -> ToolRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Agent creation
    # ------------------------------------------------------------------

    def create_agent(self) -> AgentExecutor:
        """Create an AgentExecutor sharing the process-wide tool registry."""
        self._ensure_initialized()
        if self._llm_client is None:
            raise RuntimeError("ServiceFactory was built with with_agent=False.")
        return AgentExecutor(llm=self._llm_client, tools=self._registry)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_llm_client(self) -> LanguageModelClient:
        self._config.validate()
        cfg = self._config
        chat_model = build_chat_model(
            provider=cfg.llm_provider,
            model=cfg.active_llm_model,
            temperature=cfg.llm_temperature,
            ollama_base_url=cfg.ollama_base_url,
            openai_api_key=cfg.openai_api_key,
            anthropic_api_key=cfg.anthropic_api_key,
            groq_api_key=cfg.groq_api_key,
            max_tokens=cfg.llm_max_tokens,
        )
        return LangChainModelClient(
            chat_model,
            timeout_seconds=cfg.llm_timeout_seconds,
            echo_tool_definitions=history_needs_tool_definitions(cfg.llm_provider),
        )

    def _build_tool_registry(self) -> ToolRegistry:
        contact_service = self.create_contact_service()
        registry = ToolRegistry()
        registry.register(ResolveContactTool(contact_service))
        registry.register(SearchContactsTool(contact_service))
        return registry.freeze()

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call await factory.initialize() first."
            )
