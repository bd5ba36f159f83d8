"""Todo attachment repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import TodoAttachment
from .base import BaseRepository


class TodoAttachmentRepository(BaseRepository[TodoAttachment]):
    """Репозиторий для ссылок на файлы, прикреплённые к задачам."""

    def __init__(self, db: AsyncSession):
        super().__init__(TodoAttachment, db)

    async def get_by_todo(self, todo_id: str) -> list[TodoAttachment]:
        """
        Получить вложения задачи в порядке добавления.

        SQL эквивалент:
            SELECT * FROM todo_attachments WHERE todo_id = :todo_id
            ORDER BY created_at ASC;
        """
        result = await self.db.execute(
            select(TodoAttachment)
            .where(TodoAttachment.todo_id == todo_id)
            .order_by(TodoAttachment.created_at.asc())
        )
        return list(result.scalars().all())
