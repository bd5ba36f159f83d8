"""Snippet repository with search queries."""

from sqlalchemy import Text, and_, column, or_, select, table, text, type_coerce, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schema import SEARCH_MIRROR_TABLE
from ..models import Snippet
from .base import BaseRepository


class SnippetRepository(BaseRepository[Snippet]):
    """
    Репозиторий для работы со сниппетами.

    Все значения фильтров передаются как bind-параметры,
    спецсимволы LIKE (% и _) в пользовательском вводе экранируются.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Snippet, db)

    async def get_all_recent(self) -> list[Snippet]:
        """Все сниппеты, последние обновлённые - первыми."""
        return await self.get_all(order_by=Snippet.updated_at.desc())

    async def get_by_project(self, project_id: str) -> list[Snippet]:
        """
        Получить сниппеты проекта.

        SQL эквивалент:
            SELECT * FROM snippets WHERE project_id = :project_id
            ORDER BY updated_at DESC;
        """
        result = await self.db.execute(
            select(Snippet).where(Snippet.project_id == project_id).order_by(Snippet.updated_at.desc())
        )
        return list(result.scalars().all())

    async def search(
        self,
        keyword: str = "",
        language: str | None = None,
        tags: list[str] | None = None,
    ) -> list[Snippet]:
        """
        Поиск сниппетов. Все условия комбинируются через AND.

        Args:
            keyword: Подстрока в title/description/code ("" - без фильтра)
            language: Точное совпадение языка
            tags: Каждый тег должен встречаться в сериализованном списке тегов

        Returns:
            Список сниппетов, последние обновлённые - первыми

        SQL эквивалент:
            SELECT * FROM snippets
            WHERE (title LIKE :kw OR description LIKE :kw OR code LIKE :kw)
              AND language = :language
              AND tags LIKE :tag_1 AND tags LIKE :tag_2
            ORDER BY updated_at DESC;
        """
        conditions = []

        if keyword:
            conditions.append(
                or_(
                    Snippet.title.contains(keyword, autoescape=True),
                    Snippet.description.contains(keyword, autoescape=True),
                    Snippet.code.contains(keyword, autoescape=True),
                )
            )

        if language is not None:
            conditions.append(Snippet.language == language)

        # tags хранится как JSON текст - сравниваем как обычный TEXT,
        # иначе bind-значение прошло бы через JSONText.process_bind_param
        for tag in tags or []:
            conditions.append(type_coerce(Snippet.tags, Text).contains(tag, autoescape=True))

        query = select(Snippet)
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(Snippet.updated_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def search_fulltext(self, phrase: str) -> list[Snippet]:
        """
        Полнотекстовый поиск через FTS5 зеркало (trigram).

        Args:
            phrase: Фраза для поиска (экранируется как FTS5 phrase-строка)

        Returns:
            Список сниппетов, последние обновлённые - первыми

        SQL эквивалент:
            SELECT * FROM snippets
            WHERE id IN (SELECT id FROM snippets_fts WHERE snippets_fts MATCH :query)
            ORDER BY updated_at DESC;
        """
        fts_query = '"' + phrase.replace('"', '""') + '"'

        matching_ids = (
            select(column("id"))
            .select_from(table(SEARCH_MIRROR_TABLE))
            .where(text(f"{SEARCH_MIRROR_TABLE} MATCH :query").bindparams(query=fts_query))
        )
        result = await self.db.execute(
            select(Snippet).where(Snippet.id.in_(matching_ids)).order_by(Snippet.updated_at.desc())
        )
        return list(result.scalars().all())

    async def detach_folder(self, folder_id: str) -> int:
        """
        Отвязать все сниппеты от папки (folder_id = NULL).

        Returns:
            Количество отвязанных сниппетов
        """
        result = await self.db.execute(
            update(Snippet)
            .where(Snippet.folder_id == folder_id)
            .values(folder_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def increment_usage(self, snippet_id: str) -> bool:
        """
        Атомарно увеличить usage_count на 1, не трогая updated_at.

        Returns:
            True если сниппет найден

        SQL эквивалент:
            UPDATE snippets SET usage_count = usage_count + 1 WHERE id = :id;
        """
        result = await self.db.execute(
            update(Snippet)
            .where(Snippet.id == snippet_id)
            # явное значение отключает onupdate=now_ms
            .values(usage_count=Snippet.usage_count + 1, updated_at=Snippet.updated_at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0
