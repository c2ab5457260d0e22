"""Persistence gateway over a single SQLAlchemy async connection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    create_async_engine,
)
from sqlalchemy.sql.expression import Executable

from shipdesk.exceptions import InternalError
from shipdesk.storage.models import ADDITIVE_COLUMNS, Base

logger = logging.getLogger(__name__)

# The driver raises OverflowError itself for integers outside SQLite's
# 64-bit range; SQLAlchemy does not wrap it.
STORAGE_ERRORS = (SQLAlchemyError, OverflowError)


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a mutating statement. Zero-valued when it failed."""

    inserted_id: int = 0
    rows_affected: int = 0


class Database:
    """Owns the store and exposes query/execute/persist primitives.

    The gateway keeps one connection open for the lifetime of the
    application. Mutations stay in the connection's transaction until
    :meth:`persist` commits them, so callers run ``execute`` immediately
    followed by ``persist``. Service operations wrap their whole
    validate-mutate-persist sequence in :meth:`exclusive` to keep
    concurrent requests from interleaving between those steps.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        self._connection: AsyncConnection | None = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        if self._connection is None:
            self._connection = await self.engine.connect()
            logger.info("Connected to %s", self.engine.url)

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
        await self.engine.dispose()

    @property
    def connection(self) -> AsyncConnection:
        if self._connection is None:
            raise RuntimeError("Database is not connected")
        return self._connection

    def exclusive(self) -> asyncio.Lock:
        """Lock serializing service operations."""
        return self._lock

    async def create_schema(self) -> None:
        """Create missing tables and apply additive column migrations."""
        await self.connection.run_sync(Base.metadata.create_all)
        await self.connection.commit()
        for table, column, column_type in ADDITIVE_COLUMNS:
            try:
                await self.connection.exec_driver_sql(
                    f"ALTER TABLE {table} ADD COLUMN {column} {column_type}"
                )
            except OperationalError as exc:
                await self.connection.rollback()
                if "duplicate column" not in str(exc).lower():
                    raise
                logger.debug("Column %s.%s already exists", table, column)
                continue
            await self.connection.commit()
            logger.info("Added column %s.%s", table, column)

    async def query_all(self, statement: Executable) -> list[dict[str, Any]]:
        """Run a query and return every row as a dict.

        Storage errors are logged and reported as an empty result.
        """
        try:
            result = await self.connection.execute(statement)
        except STORAGE_ERRORS:
            logger.exception("Query failed")
            return []
        return [dict(row) for row in result.mappings().all()]

    async def query_one(self, statement: Executable) -> dict[str, Any] | None:
        rows = await self.query_all(statement)
        return rows[0] if rows else None

    async def execute(self, statement: Executable) -> ExecuteResult:
        """Run an insert/update/delete inside the pending transaction.

        Storage errors are logged, the pending transaction is rolled back
        and a zero-valued result is returned.
        """
        try:
            result = await self.connection.execute(statement)
        except STORAGE_ERRORS:
            logger.exception("Statement failed")
            await self.connection.rollback()
            return ExecuteResult()

        inserted_id = 0
        if result.is_insert and result.inserted_primary_key:
            inserted_id = result.inserted_primary_key[0] or 0
        return ExecuteResult(
            inserted_id=inserted_id,
            rows_affected=max(result.rowcount, 0),
        )

    async def persist(self) -> None:
        """Commit the pending transaction to durable storage."""
        try:
            await self.connection.commit()
        except SQLAlchemyError as exc:
            logger.exception("Commit failed")
            await self.connection.rollback()
            raise InternalError() from exc
