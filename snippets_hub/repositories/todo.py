"""Todo repository with hierarchy, tag relation and aggregate queries."""

from typing import Any

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Todo, todo_tag_relations
from .base import BaseRepository


class TodoRepository(BaseRepository[Todo]):
    """
    Репозиторий для работы с задачами.

    Включает методы для:
    - Сборки задачи с тегами и одним уровнем подзадач (eager loading)
    - Каскадного удаления прямых подзадач
    - Записи связей задача-тег (INSERT ... ON CONFLICT DO NOTHING)
    - Поиска и агрегатов для статистики
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Todo, db)

    @staticmethod
    def _full_select():
        # populate_existing: связи могли измениться через Core INSERT/DELETE
        # после того, как объект попал в identity map сессии
        return (
            select(Todo)
            .options(
                selectinload(Todo.tags),
                selectinload(Todo.subtasks).selectinload(Todo.tags),
            )
            .execution_options(populate_existing=True)
        )

    async def get_by_id_full(self, id: str) -> Todo | None:
        """
        Получить задачу с тегами и подзадачами (eager loading).

        Args:
            id: ID задачи

        Returns:
            Задача со связями или None

        Использование:
            todo = await repo.get_by_id_full(todo_id)
            print([tag.id for tag in todo.tags])  # без дополнительного запроса
            for subtask in todo.subtasks:  # уже отсортированы по created_at
                print(subtask.title)
        """
        result = await self.db.execute(self._full_select().where(Todo.id == id))
        return result.scalar_one_or_none()

    async def get_all_full(self) -> list[Todo]:
        """Все задачи со связями, последние созданные - первыми."""
        result = await self.db.execute(self._full_select().order_by(Todo.created_at.desc()))
        return list(result.scalars().all())

    async def get_by_ids_full(self, ids: list[str]) -> list[Todo]:
        """Задачи со связями по списку ID (порядок не гарантирован)."""
        if not ids:
            return []
        result = await self.db.execute(self._full_select().where(Todo.id.in_(ids)))
        return list(result.scalars().all())

    async def get_parent_id(self, id: str) -> str | None:
        """Вернуть parent_id задачи (None - корневая задача или не найдена)."""
        result = await self.db.execute(select(Todo.parent_id).where(Todo.id == id))
        return result.scalar_one_or_none()

    async def get_existing_ids(self, ids: list[str]) -> set[str]:
        """
        Какие из переданных ID существуют.

        SQL эквивалент:
            SELECT id FROM todos WHERE id IN (:id_1, :id_2, ...);
        """
        if not ids:
            return set()
        result = await self.db.execute(select(Todo.id).where(Todo.id.in_(ids)))
        return set(result.scalars().all())

    async def delete_subtasks(self, parent_id: str) -> int:
        """
        Удалить прямые подзадачи (внуки не затрагиваются).

        Returns:
            Количество удалённых подзадач

        SQL эквивалент:
            DELETE FROM todos WHERE parent_id = :parent_id;
        """
        result = await self.db.execute(delete(Todo).where(Todo.parent_id == parent_id))
        return result.rowcount

    async def get_tag_ids(self, todo_id: str) -> list[str]:
        """ID тегов задачи (отсортированы)."""
        result = await self.db.execute(
            select(todo_tag_relations.c.tag_id)
            .where(todo_tag_relations.c.todo_id == todo_id)
            .order_by(todo_tag_relations.c.tag_id)
        )
        return list(result.scalars().all())

    async def add_tags(self, todo_id: str, tag_ids: list[str]) -> None:
        """
        Привязать теги к задаче. Повторная привязка - не ошибка.

        SQL эквивалент:
            INSERT INTO todo_tag_relations (todo_id, tag_id) VALUES (...)
            ON CONFLICT DO NOTHING;
        """
        if not tag_ids:
            return
        rows = [{"todo_id": todo_id, "tag_id": tag_id} for tag_id in dict.fromkeys(tag_ids)]
        await self.db.execute(sqlite_insert(todo_tag_relations).values(rows).on_conflict_do_nothing())

    async def set_tags(self, todo_id: str, tag_ids: list[str]) -> None:
        """Заменить весь набор тегов задачи (удалить все, затем вставить)."""
        await self.db.execute(delete(todo_tag_relations).where(todo_tag_relations.c.todo_id == todo_id))
        await self.add_tags(todo_id, tag_ids)

    async def search(
        self,
        keyword: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        completed: bool | None = None,
        archived: bool | None = None,
        tag_ids: list[str] | None = None,
    ) -> list[Todo]:
        """
        Поиск задач. Все фильтры комбинируются через AND.

        Args:
            keyword: Подстрока в title/description
            status: Точное совпадение статуса
            priority: Точное совпадение приоритета
            completed: Флаг выполнения
            archived: Флаг архивации
            tag_ids: Задача должна иметь хотя бы один из тегов (OR)

        Returns:
            Список задач со связями, последние обновлённые - первыми.
            Задача с несколькими подходящими тегами попадает в результат один раз.

        SQL эквивалент:
            SELECT * FROM todos
            WHERE (title LIKE :kw OR description LIKE :kw)
              AND status = :status
              AND id IN (SELECT todo_id FROM todo_tag_relations WHERE tag_id IN (...))
            ORDER BY updated_at DESC;
        """
        conditions = []

        if keyword:
            conditions.append(
                or_(
                    Todo.title.contains(keyword, autoescape=True),
                    Todo.description.contains(keyword, autoescape=True),
                )
            )

        if status is not None:
            conditions.append(Todo.status == status)

        if priority is not None:
            conditions.append(Todo.priority == priority)

        if completed is not None:
            conditions.append(Todo.completed == completed)

        if archived is not None:
            conditions.append(Todo.archived == archived)

        if tag_ids:
            tagged = select(todo_tag_relations.c.todo_id).where(todo_tag_relations.c.tag_id.in_(tag_ids))
            conditions.append(Todo.id.in_(tagged))

        query = self._full_select()
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(Todo.updated_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ========================================================================
    # AGGREGATES (только неархивные задачи)
    # ========================================================================

    async def count_active(self, *conditions: Any) -> int:
        """
        Количество неархивных задач, удовлетворяющих условиям.

        SQL эквивалент:
            SELECT COUNT(*) FROM todos WHERE archived = 0 AND ...;
        """
        result = await self.db.execute(
            select(func.count()).select_from(Todo).where(Todo.archived.is_(False), *conditions)
        )
        return result.scalar_one()

    async def count_active_grouped(self, column: Any, null_label: str) -> dict[str, int]:
        """
        Количество неархивных задач по значениям колонки.

        Args:
            column: Колонка группировки (Todo.priority, Todo.assignee, ...)
            null_label: Ключ для NULL значений ("none", "unassigned")

        SQL эквивалент:
            SELECT COALESCE(priority, 'none'), COUNT(*) FROM todos
            WHERE archived = 0 GROUP BY COALESCE(priority, 'none');
        """
        key = func.coalesce(column, null_label)
        result = await self.db.execute(
            select(key, func.count()).select_from(Todo).where(Todo.archived.is_(False)).group_by(key)
        )
        return {row[0]: row[1] for row in result.all()}
