"""Git repository reference service."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, storage_errors
from ..core.logging import get_logger
from ..models import GitRepository, utc_now_iso
from ..repositories import GitRepositoryRepository
from ..schemas import GitRepositoryCreate, GitRepositoryRead, GitRepositoryUpdate

logger = get_logger(__name__)

_REQUIRED_FIELDS = {"name", "path", "is_default", "remotes"}


class GitRepositoryService:
    """
    Сервис для ссылок на локальные git репозитории.

    path уникален: повторная регистрация того же пути
    завершается StorageError (нарушение UNIQUE).
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.git_repo = GitRepositoryRepository(db)

    async def create_git_repository(self, data: GitRepositoryCreate) -> GitRepositoryRead:
        """
        Сохранить ссылку на репозиторий.

        Raises:
            StorageError: Если репозиторий с таким path уже есть
        """
        with storage_errors("create git repository"):
            repository = await self.git_repo.create(GitRepository(**data.model_dump()))

        logger.info("Git repository created", extra={"repository_id": repository.id, "path": repository.path})
        return GitRepositoryRead.model_validate(repository)

    async def get_git_repository(self, repository_id: str) -> GitRepositoryRead | None:
        """Получить репозиторий по ID (None, если не найден)."""
        with storage_errors("get git repository"):
            repository = await self.git_repo.get_by_id(repository_id)
        return GitRepositoryRead.model_validate(repository) if repository else None

    async def get_git_repositories(self) -> list[GitRepositoryRead]:
        """Все репозитории, последние созданные - первыми."""
        with storage_errors("get git repositories"):
            repositories = await self.git_repo.get_all_newest_first()
        return [GitRepositoryRead.model_validate(r) for r in repositories]

    async def update_git_repository(self, repository_id: str, data: GitRepositoryUpdate) -> GitRepositoryRead:
        """
        Частичное обновление репозитория.

        Raises:
            NotFoundError: Если репозиторий не существует
            StorageError: Если новый path уже занят
        """
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in _REQUIRED_FIELDS
        }
        changes["updated_at"] = utc_now_iso()

        with storage_errors("update git repository"):
            repository = await self.git_repo.update(repository_id, **changes)

        if not repository:
            raise NotFoundError("GitRepository", repository_id)

        logger.info("Git repository updated", extra={"repository_id": repository_id})
        return GitRepositoryRead.model_validate(repository)

    async def delete_git_repository(self, repository_id: str) -> bool:
        """Удалить ссылку на репозиторий (файлы на диске не трогаются)."""
        with storage_errors("delete git repository"):
            deleted = await self.git_repo.delete(repository_id)

        if deleted:
            logger.info("Git repository deleted", extra={"repository_id": repository_id})
        return deleted
