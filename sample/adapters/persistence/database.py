# sample/adapters/persistence/database.py

from __future__ import annotations

from typing import Any, Dict

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sample.adapters.persistence.models import configure_mappings, metadata
from sample.core.domain.exceptions import InvalidConfigurationError

logger = structlog.get_logger(__name__)


def _sanitize(url: str) -> str:
    # never log credentials
    if "@" in url:
        return url.split("://", 1)[0] + "://***@" + url.split("@", 1)[1]
    return url


class Database:
    """
    Process-wide engine and session factory.

    One instance per process (container singleton). Sessions handed out by
    ``session_factory`` belong to a single request scope.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        if not url:
            raise InvalidConfigurationError("DATABASE_URL is not configured.")

        engine_kwargs: Dict[str, Any] = {"echo": echo, "pool_pre_ping": True}

        # SQLite needs a special flag when used in a multi-threaded web app.
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine_kwargs.pop("pool_pre_ping")
            if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
                # every new connection would otherwise open a fresh, empty database
                engine_kwargs["poolclass"] = StaticPool

        try:
            self._engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        except Exception as exc:
            raise InvalidConfigurationError(f"Invalid DATABASE_URL: {exc}") from exc

        self._url = url
        self.session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("database_configured", url=_sanitize(url))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def url(self) -> str:
        return self._url

    async def create_all(self) -> None:
        """Creates every mapped table that does not exist yet."""
        configure_mappings()
        async with self._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("database_schema_ready", tables=sorted(metadata.tables))

    async def ping(self) -> bool:
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("database_disposed")
