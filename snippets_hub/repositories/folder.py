"""Folder repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Folder
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Репозиторий для работы с папками сниппетов."""

    def __init__(self, db: AsyncSession):
        super().__init__(Folder, db)

    async def get_all_oldest_first(self) -> list[Folder]:
        """
        Все папки в порядке создания.

        SQL эквивалент:
            SELECT * FROM folders ORDER BY created_at ASC;
        """
        return await self.get_all(order_by=Folder.created_at.asc())
