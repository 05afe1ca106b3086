"""
Database Handle

Wraps the SQLAlchemy AsyncEngine and its bounded connection pool.

DESIGN DECISION: There is no module-level engine. A Database is built
once at startup and passed explicitly to every repository.

Connections are always taken with `async with`, so they go back to the
pool whether the block succeeds or fails. Driver exceptions are
translated at this boundary:

- pool exhausted / store unreachable -> ConnectionError
- any other SQLAlchemy error         -> StorageError

Only startup checks (ping, create_schema) are retried. Request-path
statements are not.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import DatabaseSettings
from finance_tracker.services.storage.interface import ConnectionError, StorageError
from finance_tracker.services.storage.tables import metadata


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Pool handle shared by all repositories.

    Usage:
        db = Database.from_settings(get_settings().database)
        async with db.begin() as conn:
            await conn.execute(...)
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "Database":
        """Build the engine and its pool from configuration."""
        options = {"echo": settings.echo}
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.pool_size,
                max_overflow=settings.max_overflow,
                pool_timeout=settings.pool_timeout,
                pool_pre_ping=True,
            )
        return cls(create_async_engine(settings.url, **options))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def url(self) -> str:
        """Connection URL with the password masked."""
        return self._engine.url.render_as_string(hide_password=True)

    @asynccontextmanager
    async def _translate_errors(self) -> AsyncIterator[None]:
        try:
            yield
        except StorageError:
            raise
        except sa_exc.TimeoutError as e:
            raise ConnectionError(f"Connection pool exhausted: {e}") from e
        except sa_exc.OperationalError as e:
            raise ConnectionError(f"Database unavailable: {e}") from e
        except sa_exc.DBAPIError as e:
            if e.connection_invalidated:
                raise ConnectionError(f"Database connection lost: {e}") from e
            raise StorageError(f"Database error: {e}") from e
        except sa_exc.SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e
        except OSError as e:
            raise ConnectionError(f"Database unreachable: {e}") from e

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        """Borrow a connection for reads. Returned to the pool on exit."""
        async with self._translate_errors():
            async with self._engine.connect() as conn:
                yield conn

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[AsyncConnection]:
        """
        Borrow a connection inside a transaction.

        Commits when the block exits normally, rolls back when it raises.
        """
        async with self._translate_errors():
            async with self._engine.begin() as conn:
                yield conn

    @retry(
        retry=retry_if_exception_type(ConnectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def ping(self) -> bool:
        """Check the store is reachable."""
        async with self.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    @retry(
        retry=retry_if_exception_type(ConnectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def create_schema(self) -> None:
        """Create missing tables. Existing tables are left alone."""
        async with self.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self._engine.dispose()
