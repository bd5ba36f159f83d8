"""Project service."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, storage_errors
from ..core.logging import get_logger
from ..models import Project, utc_now_iso
from ..repositories import ProjectRepository, SnippetRepository
from ..schemas import ProjectCreate, ProjectRead, ProjectUpdate, SnippetRead

logger = get_logger(__name__)

_REQUIRED_FIELDS = {
    "workspace_id",
    "name",
    "project_type",
    "path",
    "color",
    "icon",
    "tags",
    "settings",
    "metadata",
    "is_folder",
}


def _to_columns(values: dict[str, Any]) -> dict[str, Any]:
    """Переименовать metadata -> metadata_ (имя атрибута ORM модели)."""
    if "metadata" in values:
        values["metadata_"] = values.pop("metadata")
    return values


class ProjectService:
    """
    Сервис для работы с проектами.

    Как и workspace, проект приходит полностью сформированным
    (id и ISO-8601 timestamps задаёт вызывающий код).
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса с несколькими репозиториями."""
        self.db = db
        self.project_repo = ProjectRepository(db)
        self.snippet_repo = SnippetRepository(db)

    async def create_project(self, data: ProjectCreate) -> ProjectRead:
        """Сохранить проект."""
        project = Project(**_to_columns(data.model_dump()))

        with storage_errors("create project"):
            project = await self.project_repo.create(project)

        logger.info("Project created", extra={"project_id": project.id, "workspace_id": project.workspace_id})
        return ProjectRead.model_validate(project)

    async def get_project(self, project_id: str) -> ProjectRead | None:
        """Получить проект по ID (None, если не найден)."""
        with storage_errors("get project"):
            project = await self.project_repo.get_by_id(project_id)
        return ProjectRead.model_validate(project) if project else None

    async def get_projects(self) -> list[ProjectRead]:
        """Все проекты, последние созданные - первыми."""
        with storage_errors("get projects"):
            projects = await self.project_repo.get_all_newest_first()
        return [ProjectRead.model_validate(p) for p in projects]

    async def get_workspace_projects(self, workspace_id: str) -> list[ProjectRead]:
        """Проекты workspace, последние созданные - первыми."""
        with storage_errors("get workspace projects"):
            projects = await self.project_repo.get_by_workspace(workspace_id)
        return [ProjectRead.model_validate(p) for p in projects]

    async def update_project(self, project_id: str, data: ProjectUpdate) -> ProjectRead:
        """
        Частичное обновление проекта.

        Raises:
            NotFoundError: Если проект не существует
        """
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in _REQUIRED_FIELDS
        }
        changes = _to_columns(changes)
        changes["updated_at"] = utc_now_iso()

        with storage_errors("update project"):
            project = await self.project_repo.update(project_id, **changes)

        if not project:
            raise NotFoundError("Project", project_id)

        logger.info("Project updated", extra={"project_id": project_id})
        return ProjectRead.model_validate(project)

    async def delete_project(self, project_id: str) -> bool:
        """Удалить проект (сниппеты проекта остаются с прежним project_id)."""
        with storage_errors("delete project"):
            deleted = await self.project_repo.delete(project_id)

        if deleted:
            logger.info("Project deleted", extra={"project_id": project_id})
        return deleted

    async def get_snippets_by_project(self, project_id: str) -> list[SnippetRead]:
        """Сниппеты, привязанные к проекту."""
        with storage_errors("get project snippets"):
            snippets = await self.snippet_repo.get_by_project(project_id)
        return [SnippetRead.model_validate(s) for s in snippets]
