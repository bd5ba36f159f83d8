"""Git repository reference repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import GitRepository
from .base import BaseRepository


class GitRepositoryRepository(BaseRepository[GitRepository]):
    """Репозиторий для ссылок на локальные git репозитории (path уникален)."""

    def __init__(self, db: AsyncSession):
        super().__init__(GitRepository, db)

    async def get_all_newest_first(self) -> list[GitRepository]:
        """Все репозитории, последние созданные - первыми."""
        return await self.get_all(order_by=GitRepository.created_at.desc())
