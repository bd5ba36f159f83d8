"""Project repository with specific queries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Project
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """
    Репозиторий для работы с проектами.

    Проекты живут внутри workspace и могут образовывать дерево
    через parent_id (is_folder=True - проект-папка).
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Project, db)

    async def get_all_newest_first(self) -> list[Project]:
        """Все проекты, последние созданные - первыми."""
        return await self.get_all(order_by=Project.created_at.desc())

    async def get_by_workspace(self, workspace_id: str) -> list[Project]:
        """
        Получить проекты workspace.

        SQL эквивалент:
            SELECT * FROM projects WHERE workspace_id = :workspace_id
            ORDER BY created_at DESC;
        """
        result = await self.db.execute(
            select(Project).where(Project.workspace_id == workspace_id).order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())
