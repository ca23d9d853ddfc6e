"""
infrastructure.persistence.contact_repo - SQLite contact repository.

Implements the ContactRepository port. Translates sqlite integrity
failures on the email column into ConflictError and any other driver
error into RepositoryError.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Optional

import aiosqlite

from domain.entities import Contact, ContactPatch, format_timestamp, parse_timestamp, utc_now
from domain.exceptions import ConflictError, RepositoryError
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, email, phone, notes, last_contacted_at, created_at"
_WRITABLE = {"name", "email", "phone", "notes", "last_contacted_at"}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the query matches them literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteContactRepository:
    """Async SQLite implementation of ContactRepository.

    Substring search uses SQLite's LIKE, which is case-insensitive for
    ASCII letters only ("JANE" matches "jane", "É" does not match "é").
    """

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def get_by_id(self, contact_id: int) -> Optional[Contact]:
        async with self._session() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts WHERE id = ?",
                (contact_id,),
            )
        return self._row_to_contact(rows[0]) if rows else None

    async def find_by_email(self, email: str) -> Optional[Contact]:
        async with self._session() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts WHERE email = ? LIMIT 1",
                (email,),
            )
        return self._row_to_contact(rows[0]) if rows else None

    async def find_by_name(self, name: str) -> Optional[Contact]:
        async with self._session() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts WHERE name = ? ORDER BY id LIMIT 1",
                (name,),
            )
        return self._row_to_contact(rows[0]) if rows else None

    async def insert(self, patch: ContactPatch) -> Contact:
        values = self._to_columns(patch.changes())
        values["created_at"] = format_timestamp(utc_now())
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)

        async with self._session() as conn:
            cursor = await conn.execute(
                f"INSERT INTO contacts ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )
            new_id = cursor.lastrowid
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts WHERE id = ?", (new_id,),
            )
        logger.debug("Inserted contact id=%s", new_id)
        return self._row_to_contact(rows[0])

    async def update(self, contact_id: int, patch: ContactPatch) -> Optional[Contact]:
        values = self._to_columns(patch.changes())

        async with self._session() as conn:
            if values:
                assignments = ", ".join(f"{col} = ?" for col in values)
                await conn.execute(
                    f"UPDATE contacts SET {assignments} WHERE id = ?",
                    (*values.values(), contact_id),
                )
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts WHERE id = ?", (contact_id,),
            )
        return self._row_to_contact(rows[0]) if rows else None

    async def search(self, substring: str, *, include_notes: bool = True) -> list[Contact]:
        pattern = f"%{escape_like(substring)}%"
        clauses = ["name LIKE ? ESCAPE '\\'", "email LIKE ? ESCAPE '\\'"]
        if include_notes:
            clauses.append("notes LIKE ? ESCAPE '\\'")

        async with self._session() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts WHERE {' OR '.join(clauses)} ORDER BY id",
                tuple(pattern for _ in clauses),
            )
        return [self._row_to_contact(r) for r in rows]

    async def list_all(self) -> list[Contact]:
        async with self._session() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts ORDER BY id",
            )
        return [self._row_to_contact(r) for r in rows]

    async def delete(self, contact_id: int) -> Optional[Contact]:
        async with self._session() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM contacts WHERE id = ?", (contact_id,),
            )
            if not rows:
                return None
            await conn.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))
        return self._row_to_contact(rows[0])

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with self._conn.acquire() as conn:
                yield conn
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc) and "email" in str(exc):
                raise ConflictError("A contact with this email already exists") from exc
            raise RepositoryError(str(exc)) from exc
        except sqlite3.Error as exc:
            logger.exception("Contact store operation failed")
            raise RepositoryError(str(exc)) from exc

    @staticmethod
    def _to_columns(changes: dict[str, Any]) -> dict[str, Any]:
        unknown = set(changes) - _WRITABLE
        if unknown:
            raise ValueError(f"Invalid field(s) {sorted(unknown)}. Allowed: {sorted(_WRITABLE)}")
        columns = dict(changes)
        if isinstance(columns.get("last_contacted_at"), datetime):
            columns["last_contacted_at"] = format_timestamp(columns["last_contacted_at"])
        return columns

    @staticmethod
    def _row_to_contact(row) -> Contact:
        return Contact(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"],
            notes=row["notes"],
            last_contacted_at=parse_timestamp(row["last_contacted_at"]),
            created_at=parse_timestamp(row["created_at"]),
        )
