"""
FastAPI application — REST adapter for the contact assistant.

Usage:
    python run_api.py

Or directly:
    uvicorn adapters.rest.app:create_app --factory --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from domain.exceptions import DomainError
from infrastructure.config import Settings
from infrastructure.logging_setup import configure_logging
from factory import ServiceFactory
from adapters.rest.dependencies import set_factory
from adapters.rest.routers import agent, contacts

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

_STATUS_BY_KIND = {
    "validation_error": 400,
    "not_found": 404,
    "conflict": 409,
}


def create_app(
    factory: Optional[ServiceFactory] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the FastAPI app.

    With no arguments the factory is built from the environment at startup;
    tests pass a ready ServiceFactory instead.
    """
    if factory is None and settings is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize ServiceFactory on startup."""
        active = factory or ServiceFactory(settings)
        await active.initialize()
        set_factory(active)
        yield
        set_factory(None)
        # No teardown needed — aiosqlite connections are per-operation

    app = FastAPI(
        title="Contact CRM Assistant",
        version=__version__,
        description="Contact store with a tool-calling conversational assistant.",
        lifespan=lifespan,
    )

    origins = list(settings.cors_origins) if settings else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(contacts.router)
    app.include_router(agent.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code = _STATUS_BY_KIND.get(exc.kind, 500)
        if status_code == 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "error": str(exc), "errorKind": exc.kind},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": f"Validation failed: {problems}",
                "errorKind": "validation_error",
            },
        )

    @app.get("/api/health", tags=["health"])
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app

