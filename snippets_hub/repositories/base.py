"""Generic repository over one ORM model with a string primary key."""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Общие операции доступа к данным для любой модели с колонкой id (UUID строка).

    Репозиторий только выполняет запросы: flush - да, commit - никогда.
    Транзакцией управляет вызывающий код (session_scope).

    Пример:
        repo = BaseRepository(Folder, db)
        folder = await repo.create(Folder(id=new_id(), name="Algorithms"))
        await repo.update(folder.id, name="Algos")
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def create(self, obj: ModelType) -> ModelType:
        """
        Добавить объект и сразу отправить INSERT (flush).

        Ошибки ограничений (UNIQUE, FOREIGN KEY) всплывают здесь,
        а не при commit.
        """
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def get_by_id(self, id: str) -> ModelType | None:
        """
        Запись по ID или None.

        SQL эквивалент:
            SELECT * FROM <table> WHERE id = :id;
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: list[str]) -> list[ModelType]:
        """Записи с ID из списка; отсутствующие ID пропускаются, порядок не гарантирован."""
        if not ids:
            return []
        result = await self.db.execute(select(self.model).where(self.model.id.in_(ids)))
        return list(result.scalars().all())

    async def get_all(self, order_by: Any = None, skip: int = 0, limit: int | None = None) -> list[ModelType]:
        """
        Все записи с необязательной сортировкой и пагинацией.

        Args:
            order_by: Выражение сортировки (Snippet.updated_at.desc())
            skip: Сколько записей пропустить
            limit: Максимум записей (None - без ограничения)
        """
        query = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update(self, id: str, **values: Any) -> ModelType | None:
        """
        Присвоить переданные значения атрибутам записи.

        Неизвестные имена атрибутов игнорируются.

        Returns:
            Обновлённый объект или None, если записи нет
        """
        obj = await self.get_by_id(id)
        if obj is None:
            return None

        for key, value in values.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: str) -> bool:
        """
        Удалить запись по ID.

        Returns:
            True если строка была удалена

        SQL эквивалент:
            DELETE FROM <table> WHERE id = :id;
        """
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def exists(self, id: str) -> bool:
        """
        Есть ли запись с таким ID (без загрузки объекта).

        SQL эквивалент:
            SELECT EXISTS (SELECT 1 FROM <table> WHERE id = :id);
        """
        result = await self.db.execute(select(exists().where(self.model.id == id)))
        return bool(result.scalar())

    async def count(self, *conditions: Any) -> int:
        """
        Количество записей, удовлетворяющих условиям (без условий - все).

        SQL эквивалент:
            SELECT COUNT(*) FROM <table> WHERE ...;
        """
        query = select(func.count()).select_from(self.model)
        if conditions:
            query = query.where(*conditions)
        result = await self.db.execute(query)
        return result.scalar_one()
