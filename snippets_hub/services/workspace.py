"""Workspace service."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, storage_errors
from ..core.logging import get_logger
from ..models import Workspace, utc_now_iso
from ..repositories import WorkspaceRepository
from ..schemas import WorkspaceCreate, WorkspaceRead, WorkspaceUpdate

logger = get_logger(__name__)

_REQUIRED_FIELDS = {"name", "color", "is_default", "settings"}


class WorkspaceService:
    """
    Сервис для работы с workspace.

    Вызывающий код передаёт полностью сформированную сущность
    (id и ISO-8601 timestamps), сервис сохраняет её как есть.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.workspace_repo = WorkspaceRepository(db)

    async def create_workspace(self, data: WorkspaceCreate) -> WorkspaceRead:
        """Сохранить workspace."""
        with storage_errors("create workspace"):
            workspace = await self.workspace_repo.create(Workspace(**data.model_dump()))

        logger.info("Workspace created", extra={"workspace_id": workspace.id})
        return WorkspaceRead.model_validate(workspace)

    async def get_workspace(self, workspace_id: str) -> WorkspaceRead | None:
        """Получить workspace по ID (None, если не найден)."""
        with storage_errors("get workspace"):
            workspace = await self.workspace_repo.get_by_id(workspace_id)
        return WorkspaceRead.model_validate(workspace) if workspace else None

    async def get_workspaces(self) -> list[WorkspaceRead]:
        """Все workspace, последние созданные - первыми."""
        with storage_errors("get workspaces"):
            workspaces = await self.workspace_repo.get_all_newest_first()
        return [WorkspaceRead.model_validate(w) for w in workspaces]

    async def update_workspace(self, workspace_id: str, data: WorkspaceUpdate) -> WorkspaceRead:
        """
        Частичное обновление: меняются только переданные поля,
        updated_at - текущее время UTC.

        Raises:
            NotFoundError: Если workspace не существует
        """
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in _REQUIRED_FIELDS
        }
        changes["updated_at"] = utc_now_iso()

        with storage_errors("update workspace"):
            workspace = await self.workspace_repo.update(workspace_id, **changes)

        if not workspace:
            raise NotFoundError("Workspace", workspace_id)

        logger.info("Workspace updated", extra={"workspace_id": workspace_id})
        return WorkspaceRead.model_validate(workspace)

    async def delete_workspace(self, workspace_id: str) -> bool:
        """Удалить workspace (проекты не затрагиваются)."""
        with storage_errors("delete workspace"):
            deleted = await self.workspace_repo.delete(workspace_id)

        if deleted:
            logger.info("Workspace deleted", extra={"workspace_id": workspace_id})
        return deleted
