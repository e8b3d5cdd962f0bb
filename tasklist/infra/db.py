from __future__ import annotations

import asyncio
import logging

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import CreateTable

from tasklist.domain.errors import StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}


def build_async_url(database_url: str) -> tuple[URL, dict]:
    """Point plain Postgres/SQLite URLs at their asyncio drivers.

    Returns the rewritten URL and the ``connect_args`` for the engine.
    """
    url = make_url(database_url)
    connect_args: dict = {}
    backend = url.get_backend_name()

    if backend in ("postgres", "postgresql"):
        query = dict(url.query)
        sslmode = query.pop("sslmode", None)
        query.pop("channel_binding", None)
        url = url.set(drivername="postgresql+asyncpg", query=query)
        if sslmode:
            connect_args["ssl"] = sslmode
        elif url.host and url.host not in _LOCAL_HOSTS:
            connect_args["ssl"] = "require"
    elif backend == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")

    return url, connect_args


class StorageContext:
    """Engine, session factory and schema state for one process.

    Build it once at startup and hand it to every repository. The schema
    is created on first use; concurrent callers wait for the same attempt
    and its outcome is kept for the life of the context.
    """

    def __init__(self, database_url: str, **engine_kwargs) -> None:
        url, connect_args = build_async_url(database_url)
        self.engine: AsyncEngine = create_async_engine(
            url,
            pool_pre_ping=True,
            connect_args=connect_args,
            **engine_kwargs,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self._schema_lock = asyncio.Lock()
        self._schema_ready = False
        self._schema_error: BaseException | None = None

    @property
    def schema_ready(self) -> bool:
        return self._schema_ready

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_error is not None:
                raise StorageError(
                    f"Schema initialization failed: {self._schema_error}"
                ) from self._schema_error
            if self._schema_ready:
                return
            try:
                await self._create_schema()
            except (SQLAlchemyError, OSError) as exc:
                self._schema_error = exc
                raise StorageError(f"Schema initialization failed: {exc}") from exc
            self._schema_ready = True
            logger.info(
                "Task schema ready on %s",
                self.engine.url.render_as_string(hide_password=True),
            )

    async def _create_schema(self) -> None:
        from .models import TaskModel

        async with self.engine.begin() as connection:
            await connection.execute(CreateTable(TaskModel.__table__, if_not_exists=True))

    async def dispose(self) -> None:
        await self.engine.dispose()
