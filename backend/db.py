from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from backend.settings import get_settings

logger = logging.getLogger(__name__)

ASYNC_DRIVERS = {
    "sqlite://": "sqlite+aiosqlite://",
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "postgresql+psycopg2://": "postgresql+asyncpg://",
}
LOCAL_HOSTS = {"localhost", "127.0.0.1"}


def normalize_database_url(database_url: str) -> str:
    """Swap sync driver prefixes for async ones and turn ``sslmode`` into asyncpg's ``ssl``."""
    url = str(database_url or "").strip()
    for prefix, replacement in ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            url = replacement + url[len(prefix) :]
            break
    if not url or is_sqlite_url(url):
        return url
    parsed = urlparse(url)
    query = []
    ssl_requested = False
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key == "sslmode":
            ssl_requested = True
        elif key not in {"channel_binding", "ssl"}:
            query.append((key, value))
    if ssl_requested:
        query.append(("ssl", "true"))
    return urlunparse(parsed._replace(query=urlencode(query)))


def is_sqlite_url(database_url: str) -> bool:
    return str(database_url or "").strip().lower().startswith("sqlite")


def engine_options(db_url: str) -> dict:
    if is_sqlite_url(db_url):
        return {"future": True}
    options = {"pool_pre_ping": True, "future": True, "pool_size": 20, "max_overflow": 10}
    host = urlparse(db_url).hostname or ""
    if host and host not in LOCAL_HOSTS:
        options["connect_args"] = {"ssl": True}
    return options


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        db_url = normalize_database_url(get_settings().database_url)
        _engine = create_async_engine(db_url, **engine_options(db_url))
        logger.info("Database engine ready (%s)", "sqlite" if is_sqlite_url(db_url) else "postgres")
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


@asynccontextmanager
async def session_scope(commit: bool = False) -> AsyncIterator[AsyncSession]:
    """One session per unit of work; ``commit=True`` commits when the block exits cleanly."""
    async with get_sessionmaker()() as session:
        yield session
        if commit:
            await session.commit()


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
