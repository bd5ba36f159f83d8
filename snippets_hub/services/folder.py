"""Folder service."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import storage_errors
from ..core.logging import get_logger
from ..models import Folder, new_id, now_ms
from ..repositories import FolderRepository, SnippetRepository
from ..schemas import FolderCreate, FolderRead

logger = get_logger(__name__)


class FolderService:
    """
    Сервис для работы с папками сниппетов.

    Удаление папки не удаляет сниппеты - они отвязываются (folder_id = NULL).
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса с несколькими репозиториями."""
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.snippet_repo = SnippetRepository(db)

    async def create_folder(self, data: FolderCreate) -> FolderRead:
        """Создать папку."""
        folder = Folder(id=new_id(), name=data.name, parent_id=data.parent_id, created_at=now_ms())

        with storage_errors("create folder"):
            folder = await self.folder_repo.create(folder)

        logger.info("Folder created", extra={"folder_id": folder.id})
        return FolderRead.model_validate(folder)

    async def get_folder(self, folder_id: str) -> FolderRead | None:
        """Получить папку по ID (None, если не найдена)."""
        with storage_errors("get folder"):
            folder = await self.folder_repo.get_by_id(folder_id)
        return FolderRead.model_validate(folder) if folder else None

    async def get_all_folders(self) -> list[FolderRead]:
        """Все папки, старые - первыми."""
        with storage_errors("get folders"):
            folders = await self.folder_repo.get_all_oldest_first()
        return [FolderRead.model_validate(f) for f in folders]

    async def delete_folder(self, folder_id: str) -> bool:
        """
        Удалить папку.

        Шаги (одна транзакция):
        1. Отвязать сниппеты папки
        2. Удалить саму папку

        Returns:
            True если папка удалена, False если не найдена
        """
        with storage_errors("delete folder"):
            detached = await self.snippet_repo.detach_folder(folder_id)
            deleted = await self.folder_repo.delete(folder_id)

        if deleted:
            logger.info("Folder deleted", extra={"folder_id": folder_id, "detached_snippets": detached})
        return deleted
