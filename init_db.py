"""
Скрипт для инициализации базы данных.

Создаёт таблицы, поисковое зеркало и применяет аддитивные миграции
для базы из DATABASE_URL (config/.env).
"""

import asyncio

from snippets_hub.core.config import settings
from snippets_hub.main import shutdown, startup


async def main():
    """Создать/мигрировать схему."""
    print(f"Инициализация базы: {settings.DATABASE_URL}")
    await startup()
    await shutdown()
    print("✓ Схема готова!")


if __name__ == "__main__":
    asyncio.run(main())
