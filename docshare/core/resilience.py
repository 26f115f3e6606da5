import asyncio
import logging
from typing import Awaitable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from docshare.core.errors import DependencyUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded(awaitable: Awaitable[T], timeout: float, dependency: str) -> T:
    """Вызов внешней зависимости с ограничением по времени.

    Тайм-аут и ошибки драйвера превращаются в DependencyUnavailable,
    доменные ошибки (VersionConflict и др.) пробрасываются как есть.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        logger.error(f"{dependency} did not respond within {timeout}s")
        raise DependencyUnavailable(f"{dependency} did not respond in time")
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"{dependency} call failed: {e}")
        raise DependencyUnavailable(f"{dependency} is unavailable") from e
