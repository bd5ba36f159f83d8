"""
Точка входа хранилища SnippetsHub.

Командный слой десктопного приложения вызывает startup() один раз
до первого обращения к сервисам и shutdown() при выходе:

    async with lifespan():
        async with session_scope() as db:
            snippets = await SnippetService(db).get_all_snippets()
"""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from .core.config import settings
from .core.database import engine, init_db
from .core.logging import get_logger, setup_logging

logger = get_logger(__name__)

APP_VERSION = "0.1.0"
APP_START_TIME: float = 0.0  # Will be set on startup


async def startup() -> None:
    """
    Инициализация ресурсов.

    1. Логирование (LOG_LEVEL, LOG_FORMAT из настроек)
    2. Схема базы (таблицы, поисковое зеркало, миграции)

    Raises:
        StorageError: Если схему не удалось создать
    """
    global APP_START_TIME

    setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
    APP_START_TIME = time.time()

    await init_db()

    logger.info(
        "Store started",
        extra={
            "app_name": settings.APP_NAME,
            "version": APP_VERSION,
            "debug": settings.DEBUG,
            "log_level": settings.LOG_LEVEL,
        },
    )


async def shutdown() -> None:
    """Освобождение ресурсов (закрыть соединение с базой)."""
    await engine.dispose()

    uptime = int(time.time() - APP_START_TIME) if APP_START_TIME > 0 else 0
    logger.info("Store stopped", extra={"uptime_seconds": uptime})


@asynccontextmanager
async def lifespan() -> AsyncIterator[None]:
    """Startup при входе, shutdown при выходе (даже после исключения)."""
    await startup()
    try:
        yield
    finally:
        await shutdown()
