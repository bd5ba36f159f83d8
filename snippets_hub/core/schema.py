"""
Жизненный цикл схемы: таблицы, поисковое зеркало, индексы, миграции.

init_schema() идемпотентна и вызывается один раз при старте:
1. create_all - все таблицы и индексы из моделей (IF NOT EXISTS)
2. Аддитивные миграции колонок через Alembic Operations
   ("duplicate column" - не ошибка, колонка уже есть)
3. FTS5 зеркало snippets_fts + триггеры INSERT/UPDATE/DELETE

Зеркало синхронизирует сама база (триггеры), а не приложение:
любая запись в snippets, откуда бы она ни пришла, попадает в индекс.
"""

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Boolean, Column, Connection, Integer, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine

from ..models import Base
from .errors import storage_errors
from .logging import get_logger

logger = get_logger(__name__)

SEARCH_MIRROR_TABLE = "snippets_fts"


# Колонки, добавленные после первой версии схемы.
# Функция, а не список: Alembic привязывает Column к своей Table.
def _additive_columns() -> list[tuple[str, Column]]:
    return [
        ("snippets", Column("is_favorite", Boolean, nullable=False, server_default=text("0"))),
        ("snippets", Column("usage_count", Integer, nullable=False, server_default=text("0"))),
    ]


SEARCH_MIRROR_DDL: list[str] = [
    f"""
    CREATE VIRTUAL TABLE IF NOT EXISTS {SEARCH_MIRROR_TABLE} USING fts5(
        id UNINDEXED,
        title,
        description,
        code,
        tags,
        tokenize='trigram'
    )
    """,
    f"""
    CREATE TRIGGER IF NOT EXISTS snippets_ai AFTER INSERT ON snippets BEGIN
        INSERT INTO {SEARCH_MIRROR_TABLE}(id, title, description, code, tags)
        VALUES (new.id, new.title, new.description, new.code, new.tags);
    END
    """,
    f"""
    CREATE TRIGGER IF NOT EXISTS snippets_ad AFTER DELETE ON snippets BEGIN
        DELETE FROM {SEARCH_MIRROR_TABLE} WHERE id = old.id;
    END
    """,
    f"""
    CREATE TRIGGER IF NOT EXISTS snippets_au AFTER UPDATE ON snippets BEGIN
        UPDATE {SEARCH_MIRROR_TABLE} SET
            title = new.title,
            description = new.description,
            code = new.code,
            tags = new.tags
        WHERE id = old.id;
    END
    """,
]

SEARCH_MIRROR_TEARDOWN: list[str] = [
    "DROP TRIGGER IF EXISTS snippets_ai",
    "DROP TRIGGER IF EXISTS snippets_ad",
    "DROP TRIGGER IF EXISTS snippets_au",
    f"DROP TABLE IF EXISTS {SEARCH_MIRROR_TABLE}",
]


def _apply_additive_migrations(connection: Connection) -> None:
    """
    Добавить недостающие колонки.

    Ошибка "duplicate column" поглощается - колонка уже существует
    (новая база создана create_all со всеми колонками).
    """
    op = Operations(MigrationContext.configure(connection))

    for table_name, column in _additive_columns():
        try:
            op.add_column(table_name, column)
            logger.info("Column added", extra={"table": table_name, "column": column.name})
        except OperationalError as exc:
            if "duplicate column" not in str(exc).lower():
                raise
            logger.debug("Column already exists", extra={"table": table_name, "column": column.name})


async def init_schema(engine: AsyncEngine) -> None:
    """
    Создать/мигрировать схему (идемпотентно).

    Args:
        engine: Async engine базы

    Raises:
        StorageError: Если не удалось создать таблицы, зеркало или триггеры
    """
    async with engine.begin() as conn:
        with storage_errors("create tables"):
            await conn.run_sync(Base.metadata.create_all)

        with storage_errors("migrate columns"):
            await conn.run_sync(_apply_additive_migrations)

        with storage_errors("create search mirror"):
            for statement in SEARCH_MIRROR_DDL:
                await conn.execute(text(statement))

    logger.info("Database schema initialized")


async def drop_schema(engine: AsyncEngine) -> None:
    """Drop search mirror, triggers and all tables."""
    async with engine.begin() as conn:
        for statement in SEARCH_MIRROR_TEARDOWN:
            await conn.execute(text(statement))
        await conn.run_sync(Base.metadata.drop_all)
