"""Tag service with palette resolution."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, ValidationError, storage_errors
from ..core.logging import get_logger
from ..models import TAG_COLOR_PALETTE, TodoTag, new_id, now_ms
from ..repositories import TodoTagRepository
from ..schemas import TodoTagCreate, TodoTagRead, TodoTagUpdate

logger = get_logger(__name__)


def resolve_color(color_id: str) -> tuple[str, str]:
    """
    Разрешить ключ палитры в пару (цвет текста, цвет фона).

    Raises:
        ValidationError: Если ключа нет в палитре
    """
    try:
        return TAG_COLOR_PALETTE[color_id]
    except KeyError:
        raise ValidationError(
            f"Unknown color id '{color_id}', expected one of: {', '.join(TAG_COLOR_PALETTE)}"
        ) from None


class TagService:
    """
    Сервис для работы с тегами задач.

    Цвет тега задаётся ключом закрытой палитры (color_id),
    конкретные hex значения вычисляются сервисом.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.tag_repo = TodoTagRepository(db)

    async def create_tag(self, data: TodoTagCreate) -> TodoTagRead:
        """
        Создать тег.

        Raises:
            ValidationError: Если color_id не из палитры (ничего не записано)
        """
        color, bg_color = resolve_color(data.color_id)
        tag = TodoTag(
            id=new_id(),
            name=data.name,
            color=color,
            bg_color=bg_color,
            color_id=data.color_id,
            created_at=now_ms(),
        )

        with storage_errors("create tag"):
            tag = await self.tag_repo.create(tag)

        logger.info("Tag created", extra={"tag_id": tag.id, "color_id": tag.color_id})
        return TodoTagRead.model_validate(tag)

    async def get_tag(self, tag_id: str) -> TodoTagRead | None:
        """Получить тег по ID (None, если не найден)."""
        with storage_errors("get tag"):
            tag = await self.tag_repo.get_by_id(tag_id)
        return TodoTagRead.model_validate(tag) if tag else None

    async def get_all_tags(self) -> list[TodoTagRead]:
        """Все теги, старые - первыми."""
        with storage_errors("get tags"):
            tags = await self.tag_repo.get_all_oldest_first()
        return [TodoTagRead.model_validate(t) for t in tags]

    async def update_tag(self, tag_id: str, data: TodoTagUpdate) -> TodoTagRead:
        """
        Обновить имя и/или цвет тега.

        Цвета пересчитываются только при смене color_id.

        Raises:
            ValidationError: Пустое обновление или неизвестный color_id
            NotFoundError: Если тег не существует
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise ValidationError("Tag update must change name or color_id")

        if "color_id" in changes:
            resolve_color(changes["color_id"])

        with storage_errors("update tag"):
            tag = await self.tag_repo.get_by_id(tag_id)
            if not tag:
                raise NotFoundError("TodoTag", tag_id)

            if changes.get("color_id", tag.color_id) != tag.color_id:
                changes["color"], changes["bg_color"] = resolve_color(changes["color_id"])

            tag = await self.tag_repo.update(tag_id, **changes)

        logger.info("Tag updated", extra={"tag_id": tag_id, "fields": sorted(changes)})
        return TodoTagRead.model_validate(tag)

    async def delete_tag(self, tag_id: str) -> bool:
        """Удалить тег. Связи с задачами удаляются каскадом."""
        with storage_errors("delete tag"):
            deleted = await self.tag_repo.delete(tag_id)

        if deleted:
            logger.info("Tag deleted", extra={"tag_id": tag_id})
        return deleted
