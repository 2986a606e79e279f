from __future__ import annotations

from typing import Any, AsyncGenerator, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql.dml import Insert

from vidtube.config import settings
from vidtube import models as _models  # noqa: F401
from vidtube.models.base import Base


def _get_database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set")
    return database_url


class Database:
    """Explicit store handle: one engine plus the session factory bound to it."""

    def __init__(self, url: str | None = None, **engine_options: Any) -> None:
        database_url = url or _get_database_url()
        if database_url.startswith("postgresql"):
            engine_options.setdefault("pool_pre_ping", True)
        self.engine: AsyncEngine = create_async_engine(database_url, **engine_options)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_factory() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def insert_ignoring_conflicts(
    db: AsyncSession,
    model: type[Base],
    index_elements: Sequence[str],
    **values: Any,
) -> Insert:
    """INSERT ... ON CONFLICT DO NOTHING for the session's dialect."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
    else:
        raise RuntimeError(f"Unsupported dialect for upsert: {dialect}")
    return stmt.on_conflict_do_nothing(index_elements=list(index_elements))
