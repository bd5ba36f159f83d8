"""Todo comment repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import TodoComment
from .base import BaseRepository


class TodoCommentRepository(BaseRepository[TodoComment]):
    """
    Репозиторий для работы с комментариями к задачам.

    Комментарии поддерживают Markdown форматирование.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(TodoComment, db)

    async def get_by_todo(self, todo_id: str, limit: int | None = None) -> list[TodoComment]:
        """
        Получить все комментарии для задачи.

        Args:
            todo_id: ID задачи
            limit: Максимальное количество комментариев (None = все)

        Returns:
            Список комментариев, старые - первыми

        SQL эквивалент:
            SELECT * FROM todo_comments
            WHERE todo_id = :todo_id
            ORDER BY created_at ASC
            LIMIT :limit;
        """
        query = (
            select(TodoComment)
            .where(TodoComment.todo_id == todo_id)
            .order_by(TodoComment.created_at.asc())
        )

        if limit:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())
