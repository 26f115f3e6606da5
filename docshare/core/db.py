import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
)

from docshare.db import models  # noqa: F401  регистрирует таблицы в metadata
from docshare.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Явно создаваемый дескриптор подключения к БД: открывается при старте, закрывается при остановке"""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    def open(self) -> None:
        if self._engine is not None:
            return
        self._engine = create_async_engine(self.database_url, future=True, echo=self.echo)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine, class_=AsyncSession, expire_on_commit=False
        )
        logger.info(f"Database engine opened for {self._engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Database engine closed")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    async def create_all(self) -> None:
        """Создание таблиц (для разработки и тестов)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open")
        async with self._sessionmaker() as session:
            yield session
