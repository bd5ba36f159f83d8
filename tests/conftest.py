"""
Pytest fixtures для тестов.

Предоставляет:
- test_engine: SQLite in-memory база с полной схемой (таблицы, FTS5 зеркало, триггеры)
- test_session_factory: фабрика сессий поверх test_engine
- test_db: сессия для одного теста
"""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippets_hub.core.database import build_engine
from snippets_hub.core.schema import init_schema

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """
    Создаёт async engine для тестовой БД через ту же фабрику, что и приложение.

    StaticPool обеспечивает что используется одно и то же соединение,
    что критично для in-memory БД (иначе данные теряются).
    Каждый тест получает новую базу - полная изоляция.
    """
    engine = build_engine(TEST_DATABASE_URL)
    await init_schema(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Фабрика сессий для тестов, которым нужно несколько единиц работы."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_db(test_session_factory):
    """
    Предоставляет async session для работы с тестовой БД.

    Транзакция откатывается после теста.
    """
    async with test_session_factory() as session:
        yield session
        await session.rollback()
