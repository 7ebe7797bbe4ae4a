"""
Async engine and session factory.

PostgreSQL (asyncpg) in deployments; SQLite (aiosqlite) for local runs.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from recruitment.core.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """Driver-specific engine keyword arguments."""
    options: Dict[str, Any] = {"echo": settings.DEBUG}
    if make_url(database_url).get_backend_name() == "sqlite":
        # concurrent writers wait on the file lock instead of failing fast
        options["connect_args"] = {"timeout": 30}
    else:
        options["pool_pre_ping"] = True
    return options


engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

# expire_on_commit=False: routers serialize ORM rows after the service commits
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Services commit their own units of work; anything left pending when the
    request finishes is committed here, and an exception rolls it back.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
