"""Snippet service with business logic."""

import json

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, storage_errors
from ..core.logging import get_logger
from ..models import Snippet, new_id, now_ms
from ..repositories import SnippetRepository
from ..schemas import SnippetCreate, SnippetRead, SnippetSearchQuery, SnippetUpdate

logger = get_logger(__name__)

# FTS5 trigram не находит фразы короче трёх символов
MIN_FULL_TEXT_QUERY_LENGTH = 3

# Колонки NOT NULL: явный None в запросе на обновление игнорируется
_REQUIRED_FIELDS = {"title", "code", "language", "tags", "is_favorite", "usage_count"}


class SnippetService:
    """
    Сервис для работы со сниппетами.

    Отвечает за:
    - Генерацию ID и timestamps (created_at == updated_at при создании)
    - Частичное обновление (только переданные поля)
    - Поиск: по атрибутам (LIKE) и полнотекстовый (FTS5 зеркало)
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.snippet_repo = SnippetRepository(db)

    async def create_snippet(self, data: SnippetCreate) -> SnippetRead:
        """
        Создать сниппет.

        Args:
            data: Поля нового сниппета

        Returns:
            Созданный сниппет (is_favorite=False, usage_count=0)

        Raises:
            StorageError: Если база отклонила запись
        """
        now = now_ms()
        snippet = Snippet(
            id=new_id(),
            title=data.title,
            description=data.description,
            code=data.code,
            language=data.language,
            tags=list(data.tags),
            folder_id=data.folder_id,
            project_id=data.project_id,
            is_favorite=False,
            usage_count=0,
            created_at=now,
            updated_at=now,
        )

        with storage_errors("create snippet"):
            snippet = await self.snippet_repo.create(snippet)

        logger.info("Snippet created", extra={"snippet_id": snippet.id, "language": snippet.language})
        return SnippetRead.model_validate(snippet)

    async def get_snippet(self, snippet_id: str) -> SnippetRead | None:
        """Получить сниппет по ID (None, если не найден)."""
        with storage_errors("get snippet"):
            snippet = await self.snippet_repo.get_by_id(snippet_id)
        return SnippetRead.model_validate(snippet) if snippet else None

    async def get_all_snippets(self) -> list[SnippetRead]:
        """Все сниппеты, последние обновлённые - первыми."""
        with storage_errors("get snippets"):
            snippets = await self.snippet_repo.get_all_recent()
        return [SnippetRead.model_validate(s) for s in snippets]

    async def update_snippet(self, snippet_id: str, data: SnippetUpdate) -> SnippetRead:
        """
        Обновить сниппет.

        Изменяются только поля, явно переданные в запросе.
        Явный None очищает необязательное поле (description, folder_id, project_id).

        Raises:
            NotFoundError: Если сниппет не существует
            StorageError: Если база отклонила запись
        """
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in _REQUIRED_FIELDS
        }
        changes["updated_at"] = now_ms()

        with storage_errors("update snippet"):
            snippet = await self.snippet_repo.update(snippet_id, **changes)

        if not snippet:
            raise NotFoundError("Snippet", snippet_id)

        logger.info("Snippet updated", extra={"snippet_id": snippet_id, "fields": sorted(changes)})
        return SnippetRead.model_validate(snippet)

    async def delete_snippet(self, snippet_id: str) -> bool:
        """
        Удалить сниппет. Запись в поисковом зеркале удаляет триггер.

        Returns:
            True если удалён, False если не найден
        """
        with storage_errors("delete snippet"):
            deleted = await self.snippet_repo.delete(snippet_id)

        if deleted:
            logger.info("Snippet deleted", extra={"snippet_id": snippet_id})
        return deleted

    async def search_snippets(self, query: SnippetSearchQuery) -> list[SnippetRead]:
        """
        Поиск по ключевому слову, языку и тегам (все условия через AND).

        Returns:
            Найденные сниппеты, последние обновлённые - первыми
        """
        with storage_errors("search snippets"):
            snippets = await self.snippet_repo.search(
                keyword=query.keyword,
                language=query.language,
                tags=query.tags,
            )
        return [SnippetRead.model_validate(s) for s in snippets]

    async def full_text_search(self, query: str) -> list[SnippetRead]:
        """
        Полнотекстовый поиск по title/description/code/tags.

        Короткие запросы (меньше трёх символов) ищутся через LIKE,
        trigram индекс их не находит.

        Args:
            query: Поисковая фраза

        Returns:
            Найденные сниппеты, последние обновлённые - первыми
        """
        phrase = query.strip()
        if len(phrase) < MIN_FULL_TEXT_QUERY_LENGTH:
            return await self.search_snippets(SnippetSearchQuery(keyword=phrase))

        with storage_errors("full-text search snippets"):
            snippets = await self.snippet_repo.search_fulltext(phrase)
        return [SnippetRead.model_validate(s) for s in snippets]

    async def get_snippets_by_project(self, project_id: str) -> list[SnippetRead]:
        """Сниппеты проекта, последние обновлённые - первыми."""
        with storage_errors("get project snippets"):
            snippets = await self.snippet_repo.get_by_project(project_id)
        return [SnippetRead.model_validate(s) for s in snippets]

    async def record_usage(self, snippet_id: str) -> SnippetRead:
        """
        Увеличить счётчик использований (копирование, вставка).

        updated_at не меняется - использование не является правкой.

        Raises:
            NotFoundError: Если сниппет не существует
        """
        with storage_errors("record snippet usage"):
            found = await self.snippet_repo.increment_usage(snippet_id)
            snippet = await self.snippet_repo.get_by_id(snippet_id) if found else None

        if not snippet:
            raise NotFoundError("Snippet", snippet_id)
        return SnippetRead.model_validate(snippet)

    async def export_to_json(self) -> str:
        """
        Выгрузить все сниппеты в JSON (массив объектов, отступ 2 пробела).

        Порядок - как в get_all_snippets().
        """
        snippets = await self.get_all_snippets()
        return json.dumps([s.model_dump(mode="json") for s in snippets], indent=2, ensure_ascii=False)
