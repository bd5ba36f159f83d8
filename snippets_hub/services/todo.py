"""Todo service with business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, ValidationError, storage_errors
from ..core.logging import get_logger
from ..models import Todo, TodoAttachment, TodoComment, TodoStatus, new_id, now_ms
from ..repositories import TodoAttachmentRepository, TodoCommentRepository, TodoRepository
from ..schemas import (
    BatchTodoOperation,
    TodoAttachmentCreate,
    TodoAttachmentRead,
    TodoCommentCreate,
    TodoCommentRead,
    TodoCreate,
    TodoRead,
    TodoSearchQuery,
    TodoUpdate,
)

logger = get_logger(__name__)

BATCH_OPERATIONS = ("complete", "archive", "delete", "update")

# Колонки NOT NULL: явный None в запросе на обновление игнорируется
_REQUIRED_FIELDS = {"title", "status", "progress", "completed", "archived", "dependencies"}


def to_todo_read(todo: Todo, with_subtasks: bool = True) -> TodoRead:
    """
    Собрать TodoRead из загруженной задачи.

    Требует, чтобы tags и subtasks (с их tags) были загружены заранее
    (TodoRepository.get_by_id_full и другие *_full методы).
    """
    fields = {column.key: getattr(todo, column.key) for column in Todo.__table__.columns}
    return TodoRead(
        **fields,
        tags=sorted(tag.id for tag in todo.tags),
        subtasks=[to_todo_read(sub, with_subtasks=False) for sub in todo.subtasks] if with_subtasks else [],
    )


class TodoService:
    """
    Сервис для работы с задачами.

    Это самый сложный сервис, так как задачи имеют много связей:
    - Подзадачи (один уровень при сборке, каскад на прямые подзадачи при удалении)
    - Теги (Many-to-Many через todo_tag_relations)
    - Зависимости (список ID других задач)
    - Комментарии и вложения
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса с несколькими репозиториями."""
        self.db = db
        self.todo_repo = TodoRepository(db)
        self.comment_repo = TodoCommentRepository(db)
        self.attachment_repo = TodoAttachmentRepository(db)

    async def _load(self, todo_id: str) -> TodoRead:
        todo = await self.todo_repo.get_by_id_full(todo_id)
        if not todo:
            raise NotFoundError("Todo", todo_id)
        return to_todo_read(todo)

    async def _check_parent(self, todo_id: str | None, parent_id: str) -> None:
        """
        Проверить родителя: существует и не образует цикл.

        Args:
            todo_id: ID задачи, которой назначают родителя (None - новая задача)
            parent_id: ID предполагаемого родителя

        Raises:
            ValidationError: Родитель не найден или цепочка предков приводит к самой задаче
        """
        if parent_id == todo_id:
            raise ValidationError(f"Todo {todo_id} cannot be its own parent")

        if not await self.todo_repo.exists(parent_id):
            raise ValidationError(f"Parent todo {parent_id} not found")

        if todo_id is None:
            return

        # Поднимаемся по цепочке предков
        seen: set[str] = set()
        current: str | None = parent_id
        while current is not None and current not in seen:
            if current == todo_id:
                raise ValidationError(f"Setting parent {parent_id} on todo {todo_id} creates a cycle")
            seen.add(current)
            current = await self.todo_repo.get_parent_id(current)

    async def create_todo(self, data: TodoCreate) -> TodoRead:
        """
        Создать задачу.

        Args:
            data: Поля новой задачи, tags - список ID существующих тегов

        Returns:
            Собранная задача (с тегами и подзадачами)

        Raises:
            ValidationError: Если parent_id указывает на несуществующую задачу
            StorageError: Если база отклонила запись (например, неизвестный ID тега)

        Бизнес-правила:
        1. progress=0, completed/archived=False
        2. created_by/updated_by по умолчанию - assignee
        3. Повторные ID тегов не ошибка (ON CONFLICT DO NOTHING)
        """
        with storage_errors("create todo"):
            if data.parent_id:
                await self._check_parent(None, data.parent_id)

            now = now_ms()
            author = data.created_by or data.assignee
            todo = Todo(
                id=new_id(),
                title=data.title,
                description=data.description,
                status=data.status,
                priority=data.priority,
                due_date=data.due_date,
                estimated_hours=data.estimated_hours,
                progress=0,
                assignee=data.assignee,
                project_id=data.project_id,
                parent_id=data.parent_id,
                recurring_config=data.recurring_config,
                dependencies=list(data.dependencies or []),
                completed=False,
                archived=False,
                created_by=author,
                updated_by=author,
                created_at=now,
                updated_at=now,
            )
            todo = await self.todo_repo.create(todo)

            if data.tags:
                await self.todo_repo.add_tags(todo.id, data.tags)

            result = await self._load(todo.id)

        logger.info("Todo created", extra={"todo_id": result.id, "parent_id": result.parent_id})
        return result

    async def get_todo(self, todo_id: str) -> TodoRead | None:
        """Получить собранную задачу (None, если не найдена)."""
        with storage_errors("get todo"):
            todo = await self.todo_repo.get_by_id_full(todo_id)
        return to_todo_read(todo) if todo else None

    async def get_todos(self) -> list[TodoRead]:
        """Все задачи, последние созданные - первыми."""
        with storage_errors("get todos"):
            todos = await self.todo_repo.get_all_full()
        return [to_todo_read(t) for t in todos]

    async def update_todo(self, todo_id: str, data: TodoUpdate) -> TodoRead:
        """
        Обновить задачу.

        Изменяются только переданные поля. Если передан tags,
        весь набор связей с тегами заменяется.

        Raises:
            NotFoundError: Если задача не существует
            ValidationError: Цикл родителей, несуществующий родитель, зависимость от себя

        Бизнес-правила:
        1. archived=True - проставить archived_at, archived=False - сбросить
        2. updated_at пересчитывается всегда
        """
        changes = data.model_dump(exclude_unset=True)
        tag_ids = changes.pop("tags", None)
        changes = {
            key: value for key, value in changes.items() if value is not None or key not in _REQUIRED_FIELDS
        }

        with storage_errors("update todo"):
            if not await self.todo_repo.exists(todo_id):
                raise NotFoundError("Todo", todo_id)

            if changes.get("parent_id"):
                await self._check_parent(todo_id, changes["parent_id"])

            if todo_id in changes.get("dependencies", []):
                raise ValidationError(f"Todo {todo_id} cannot depend on itself")

            now = now_ms()
            if "archived" in changes:
                changes["archived_at"] = now if changes["archived"] else None
            changes["updated_at"] = now

            await self.todo_repo.update(todo_id, **changes)

            if tag_ids is not None:
                await self.todo_repo.set_tags(todo_id, tag_ids)

            result = await self._load(todo_id)

        logger.info("Todo updated", extra={"todo_id": todo_id, "fields": sorted(changes)})
        return result

    async def delete_todo(self, todo_id: str) -> bool:
        """
        Удалить задачу и её прямые подзадачи.

        Внуки остаются с parent_id удалённой подзадачи.
        Связи с тегами, комментарии и вложения удаляются каскадом.

        Returns:
            True если удалена, False если не найдена
        """
        with storage_errors("delete todo"):
            if not await self.todo_repo.exists(todo_id):
                return False
            removed_subtasks = await self.todo_repo.delete_subtasks(todo_id)
            deleted = await self.todo_repo.delete(todo_id)

        logger.info("Todo deleted", extra={"todo_id": todo_id, "removed_subtasks": removed_subtasks})
        return deleted

    async def search_todos(self, query: TodoSearchQuery) -> list[TodoRead]:
        """
        Поиск задач (все фильтры через AND, теги - хотя бы один из списка).

        Returns:
            Найденные задачи, последние обновлённые - первыми
        """
        with storage_errors("search todos"):
            todos = await self.todo_repo.search(
                keyword=query.keyword,
                status=query.status,
                priority=query.priority,
                completed=query.completed,
                archived=query.archived,
                tag_ids=query.tags,
            )
        return [to_todo_read(t) for t in todos]

    async def batch_update_todos(self, batch: BatchTodoOperation) -> list[TodoRead]:
        """
        Массовая операция над задачами.

        Операции:
        - complete: completed=True, status="completed"
        - archive: archived=True, archived_at=сейчас
        - delete: удаление как в delete_todo, результат - пустой список
        - update: общий TodoUpdate для каждой задачи

        Returns:
            Задачи после операции, в порядке todo_ids

        Raises:
            ValidationError: Неизвестная операция или update без payload
            NotFoundError: Любой ID не найден (проверяется до первой записи)
        """
        if batch.operation not in BATCH_OPERATIONS:
            raise ValidationError(f"Unknown batch operation: {batch.operation}")
        if batch.operation == "update" and batch.updates is None:
            raise ValidationError("Batch update requires an updates payload")

        todo_ids = list(dict.fromkeys(batch.todo_ids))

        with storage_errors(f"batch {batch.operation} todos"):
            existing = await self.todo_repo.get_existing_ids(todo_ids)
            missing = [todo_id for todo_id in todo_ids if todo_id not in existing]
            if missing:
                raise NotFoundError("Todo", missing[0])

            if batch.operation == "delete":
                for todo_id in todo_ids:
                    await self.delete_todo(todo_id)
                logger.info("Batch operation applied", extra={"operation": "delete", "count": len(todo_ids)})
                return []

            now = now_ms()
            for todo_id in todo_ids:
                if batch.operation == "complete":
                    await self.todo_repo.update(
                        todo_id, completed=True, status=TodoStatus.COMPLETED.value, updated_at=now
                    )
                elif batch.operation == "archive":
                    await self.todo_repo.update(todo_id, archived=True, archived_at=now, updated_at=now)
                else:
                    await self.update_todo(todo_id, batch.updates)

            todos = {todo.id: todo for todo in await self.todo_repo.get_by_ids_full(todo_ids)}

        logger.info("Batch operation applied", extra={"operation": batch.operation, "count": len(todo_ids)})
        return [to_todo_read(todos[todo_id]) for todo_id in todo_ids]

    # ========================================================================
    # COMMENTS
    # ========================================================================

    async def add_comment(self, todo_id: str, data: TodoCommentCreate) -> TodoCommentRead:
        """
        Добавить комментарий к задаче.

        Raises:
            NotFoundError: Если задача не существует
        """
        with storage_errors("add todo comment"):
            if not await self.todo_repo.exists(todo_id):
                raise NotFoundError("Todo", todo_id)

            comment = TodoComment(
                id=new_id(), todo_id=todo_id, content=data.content, author=data.author, created_at=now_ms()
            )
            comment = await self.comment_repo.create(comment)

        logger.info("Comment added", extra={"todo_id": todo_id, "comment_id": comment.id})
        return TodoCommentRead.model_validate(comment)

    async def get_comments(self, todo_id: str) -> list[TodoCommentRead]:
        """Комментарии задачи, старые - первыми."""
        with storage_errors("get todo comments"):
            comments = await self.comment_repo.get_by_todo(todo_id)
        return [TodoCommentRead.model_validate(c) for c in comments]

    async def delete_comment(self, comment_id: str) -> bool:
        """Удалить комментарий."""
        with storage_errors("delete todo comment"):
            return await self.comment_repo.delete(comment_id)

    # ========================================================================
    # ATTACHMENTS
    # ========================================================================

    async def add_attachment(self, todo_id: str, data: TodoAttachmentCreate) -> TodoAttachmentRead:
        """
        Прикрепить файл к задаче (сохраняется только ссылка).

        Raises:
            NotFoundError: Если задача не существует
        """
        with storage_errors("add todo attachment"):
            if not await self.todo_repo.exists(todo_id):
                raise NotFoundError("Todo", todo_id)

            attachment = TodoAttachment(id=new_id(), todo_id=todo_id, created_at=now_ms(), **data.model_dump())
            attachment = await self.attachment_repo.create(attachment)

        logger.info("Attachment added", extra={"todo_id": todo_id, "attachment_id": attachment.id})
        return TodoAttachmentRead.model_validate(attachment)

    async def get_attachments(self, todo_id: str) -> list[TodoAttachmentRead]:
        """Вложения задачи в порядке добавления."""
        with storage_errors("get todo attachments"):
            attachments = await self.attachment_repo.get_by_todo(todo_id)
        return [TodoAttachmentRead.model_validate(a) for a in attachments]

    async def delete_attachment(self, attachment_id: str) -> bool:
        """Удалить вложение."""
        with storage_errors("delete todo attachment"):
            return await self.attachment_repo.delete(attachment_id)
