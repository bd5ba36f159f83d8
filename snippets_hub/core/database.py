"""Database connection and session management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from .config import settings
from .logging import get_logger, operation_scope

logger = get_logger(__name__)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite выключает внешние ключи по умолчанию - включаем на каждом соединении."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Создать async engine для встроенной SQLite базы.

    Args:
        database_url: Строка подключения (sqlite+aiosqlite:///...)
        echo: Выводить SQL в логи

    Returns:
        Настроенный AsyncEngine

    Raises:
        ValueError: Если URL указывает не на SQLite

    StaticPool - одно общее соединение на процесс,
    SQLite сам сериализует конфликтующие записи.
    """
    if make_url(database_url).get_backend_name() != "sqlite":
        raise ValueError(f"Only SQLite databases are supported, got: {database_url}")

    new_engine = create_async_engine(
        database_url,
        echo=echo,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},  # Allow multi-threaded access
    )
    event.listen(new_engine.sync_engine, "connect", _enable_foreign_keys)
    return new_engine


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Единица работы: одна сессия = одна транзакция.

    Usage:
        async with session_scope() as db:
            todo = await TodoService(db).create_todo(TodoCreate(title="Write docs"))

    Commit при успехе, rollback при любом исключении - многошаговые
    операции (замена тегов, каскадное удаление, batch) не оставляют
    частичного состояния.
    """
    with operation_scope():
        async with AsyncSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception as exc:
                await session.rollback()
                logger.warning("Unit of work rolled back", extra={"error": type(exc).__name__})
                raise


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Initialize database (tables, search mirror, indices, migrations)."""
    from .schema import init_schema

    await init_schema(bind or engine)


async def drop_db(bind: AsyncEngine | None = None) -> None:
    """Drop all tables (use with caution!)."""
    from .schema import drop_schema

    await drop_schema(bind or engine)
