"""
infrastructure.persistence.connection - Async SQLite connection manager.

Each repository call opens its own aiosqlite connection, so concurrent
agent turns never share a cursor. Writers wait on SQLite's lock for up to
``busy_timeout`` seconds instead of failing with "database is locked".
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

logger = logging.getLogger(__name__)


class AsyncSQLiteConnection:
    """Per-operation connections to the contacts database."""

    def __init__(self, db_path: str, busy_timeout: float = 5.0):
        self._db_path = db_path
        self._busy_timeout = busy_timeout
        if db_path != ":memory:":
            Path(db_path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    @property
    def db_path(self) -> str:
        return self._db_path

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection whose rows are ``aiosqlite.Row``.

        The block is one transaction: committed when it exits normally,
        rolled back and re-raised otherwise.
        """
        async with aiosqlite.connect(self._db_path, timeout=self._busy_timeout) as conn:
            conn.row_factory = aiosqlite.Row
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                logger.debug("Rolled back transaction on %s", self._db_path)
                raise
