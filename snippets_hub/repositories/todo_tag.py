"""Todo tag repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import TodoTag
from .base import BaseRepository


class TodoTagRepository(BaseRepository[TodoTag]):
    """
    Репозиторий для работы с тегами задач.

    Связи задача-тег удаляются каскадом (ON DELETE CASCADE)
    при удалении тега.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(TodoTag, db)

    async def get_all_oldest_first(self) -> list[TodoTag]:
        """
        Все теги в порядке создания.

        SQL эквивалент:
            SELECT * FROM todo_tags ORDER BY created_at ASC;
        """
        return await self.get_all(order_by=TodoTag.created_at.asc())
