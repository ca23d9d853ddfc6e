"""
Shared FastAPI dependencies.

- get_factory(): returns the initialized ServiceFactory (set at startup).
- get_contact_service() / get_agent(): per-request services built from it.
"""

from __future__ import annotations

from fastapi import Depends

from factory import ServiceFactory
from agent.executor import AgentExecutor
from application.services.contacts import ContactService

# Module-level reference set by app lifespan
_factory: ServiceFactory | None = None


def set_factory(factory: ServiceFactory | None) -> None:
    global _factory
    _factory = factory


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory


def get_contact_service(
    factory: ServiceFactory = Depends(get_factory),
) -> ContactService:
    return factory.create_contact_service()


def get_agent(factory: ServiceFactory = Depends(get_factory)) -> AgentExecutor:
    return factory.create_agent()
