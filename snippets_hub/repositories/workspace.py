"""Workspace repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Workspace
from .base import BaseRepository


class WorkspaceRepository(BaseRepository[Workspace]):
    """Репозиторий для работы с workspace."""

    def __init__(self, db: AsyncSession):
        super().__init__(Workspace, db)

    async def get_all_newest_first(self) -> list[Workspace]:
        """
        Все workspace, последние созданные - первыми.

        created_at - ISO-8601 строка, лексикографический порядок
        совпадает с хронологическим для одного часового пояса.
        """
        return await self.get_all(order_by=Workspace.created_at.desc())
