"""Database engine and session factory shared by the app and scripts."""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config import DATABASE_URL


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str = DATABASE_URL) -> AsyncEngine:
    """Create the async engine for ``url``."""
    if url.startswith("sqlite"):
        # aiosqlite connections are tied to the event loop that opened them
        sqlite_engine = create_async_engine(url, poolclass=NullPool)
        event.listen(sqlite_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_async_engine(url, pool_pre_ping=True)


engine = build_engine()

# Sessions for work that runs outside the request-scoped session
session_maker = async_sessionmaker(engine, expire_on_commit=False)

__all__ = ["engine", "session_maker", "build_engine"]
