"""
Pydantic схемы запросов и ответов.

DTOs (Data Transfer Objects) - объекты, которыми сервисы обмениваются
с вызывающим кодом (командный слой UI).

Зачем отдельные схемы от моделей SQLAlchemy?
1. Контроль над тем, что видит вызывающий код (ответ никогда не частичный)
2. Валидация входящих данных
3. Частичное обновление: поле "не передано" != поле "передано как None"
   (model_dump(exclude_unset=True))
"""

from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .models import TodoStatus

# ============================================================================
# SNIPPET SCHEMAS
# ============================================================================


class SnippetCreate(BaseModel):
    """
    Схема для создания сниппета.

    Пример:
    {
        "title": "Quick sort",
        "code": "def qsort(xs): ...",
        "language": "python",
        "tags": ["algorithms", "sorting"]
    }
    """

    title: str = Field(..., min_length=1, description="Название сниппета")
    code: str = Field(..., description="Код")
    language: str = Field(..., min_length=1, max_length=50, description="Язык")
    description: str | None = Field(None, description="Описание")
    tags: list[str] = Field(default_factory=list, description="Свободные теги (порядок важен)")
    folder_id: str | None = Field(None, description="ID папки")
    project_id: str | None = Field(None, description="ID проекта")


class SnippetUpdate(BaseModel):
    """
    Схема для обновления сниппета.

    Все поля опциональные (частичное обновление).
    Непереданные поля сохраняют текущие значения.
    """

    title: str | None = Field(None, min_length=1)
    code: str | None = None
    language: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = None
    tags: list[str] | None = None
    folder_id: str | None = None
    project_id: str | None = None
    is_favorite: bool | None = None
    usage_count: int | None = Field(None, ge=0)


class SnippetRead(BaseModel):
    """Сниппет в ответе."""

    id: str
    title: str
    description: str | None
    code: str
    language: str
    tags: list[str]
    folder_id: str | None
    project_id: str | None
    is_favorite: bool
    usage_count: int
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class SnippetSearchQuery(BaseModel):
    """
    Параметры поиска сниппетов (все фильтры через AND).

    - keyword: подстрока в title/description/code ("" = без фильтра)
    - language: точное совпадение
    - tags: каждый тег должен встречаться в списке тегов сниппета
    """

    keyword: str = ""
    language: str | None = None
    tags: list[str] | None = None


# ============================================================================
# FOLDER SCHEMAS
# ============================================================================


class FolderCreate(BaseModel):
    """Схема для создания папки."""

    name: str = Field(..., min_length=1, max_length=200)
    parent_id: str | None = None


class FolderRead(BaseModel):
    """Папка в ответе."""

    id: str
    name: str
    parent_id: str | None
    created_at: int

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# WORKSPACE / PROJECT / GIT REPOSITORY SCHEMAS
# ============================================================================


class WorkspaceCreate(BaseModel):
    """
    Полностью сформированный workspace (id и timestamps задаёт вызывающий код).

    Timestamps - ISO-8601 строки.
    """

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    color: str
    is_default: bool = False
    settings: dict[str, Any] = Field(default_factory=dict)
    created_at: str
    updated_at: str


class WorkspaceUpdate(BaseModel):
    """Частичное обновление workspace."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    color: str | None = None
    is_default: bool | None = None
    settings: dict[str, Any] | None = None


class WorkspaceRead(WorkspaceCreate):
    """Workspace в ответе."""

    model_config = ConfigDict(from_attributes=True)


class ProjectCreate(BaseModel):
    """Полностью сформированный проект (id и timestamps задаёт вызывающий код)."""

    id: str
    workspace_id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    project_type: str
    template: str | None = None
    parent_id: str | None = None
    path: str
    color: str
    icon: str
    tags: list[str] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)
    # В ORM модели атрибут называется metadata_ (metadata занято DeclarativeBase)
    metadata: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("metadata_", "metadata")
    )
    is_folder: bool = False
    created_at: str
    updated_at: str


class ProjectUpdate(BaseModel):
    """Частичное обновление проекта."""

    workspace_id: str | None = None
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    project_type: str | None = None
    template: str | None = None
    parent_id: str | None = None
    path: str | None = None
    color: str | None = None
    icon: str | None = None
    tags: list[str] | None = None
    settings: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    is_folder: bool | None = None


class ProjectRead(ProjectCreate):
    """Проект в ответе."""

    model_config = ConfigDict(from_attributes=True)


class GitRemote(BaseModel):
    """Именованный remote репозитория."""

    name: str
    url: str


class GitRepositoryCreate(BaseModel):
    """Полностью сформированная ссылка на git репозиторий."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    path: str = Field(..., min_length=1)
    is_default: bool = False
    remotes: list[GitRemote] = Field(default_factory=list)
    created_at: str
    updated_at: str


class GitRepositoryUpdate(BaseModel):
    """Частичное обновление git репозитория."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    path: str | None = Field(None, min_length=1)
    is_default: bool | None = None
    remotes: list[GitRemote] | None = None


class GitRepositoryRead(GitRepositoryCreate):
    """Git репозиторий в ответе."""

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# TODO SCHEMAS
# ============================================================================


class TodoCreate(BaseModel):
    """
    Схема для создания задачи.

    Пример:
    {
        "title": "Write release notes",
        "priority": "high",
        "due_date": "2026-02-01",
        "tags": ["<tag id>", "<tag id>"],
        "parent_id": "<todo id>"
    }
    """

    title: str = Field(..., min_length=1, description="Название задачи")
    description: str | None = None
    status: str = Field(default=TodoStatus.TODO.value, min_length=1)
    priority: str | None = None
    due_date: date | None = None
    estimated_hours: float | None = Field(None, ge=0)
    assignee: str | None = None
    project_id: str | None = None
    parent_id: str | None = Field(None, description="ID родительской задачи (для подзадач)")
    recurring_config: str | None = None
    dependencies: list[str] | None = None
    tags: list[str] | None = Field(None, description="Список ID тегов")
    created_by: str | None = Field(None, description="Автор (по умолчанию assignee)")


class TodoUpdate(BaseModel):
    """
    Схема для обновления задачи.

    Все поля опциональные. Изменяются только переданные поля.
    tags заменяет весь набор связей целиком.
    """

    title: str | None = Field(None, min_length=1)
    description: str | None = None
    status: str | None = Field(None, min_length=1)
    priority: str | None = None
    due_date: date | None = None
    estimated_hours: float | None = Field(None, ge=0)
    actual_hours: float | None = Field(None, ge=0)
    progress: int | None = Field(None, ge=0, le=100)
    assignee: str | None = None
    project_id: str | None = None
    parent_id: str | None = None
    recurring_config: str | None = None
    dependencies: list[str] | None = None
    completed: bool | None = None
    archived: bool | None = None
    tags: list[str] | None = None
    updated_by: str | None = None


class TodoRead(BaseModel):
    """
    Собранная задача в ответе.

    tags - ID тегов, subtasks - ровно один уровень подзадач
    (у подзадач subtasks всегда пустой).
    """

    id: str
    title: str
    description: str | None
    status: str
    priority: str | None
    due_date: date | None
    estimated_hours: float | None
    actual_hours: float | None
    progress: int
    assignee: str | None
    project_id: str | None
    parent_id: str | None
    recurring_config: str | None
    dependencies: list[str]
    completed: bool
    archived: bool
    created_by: str | None
    updated_by: str | None
    created_at: int
    updated_at: int
    archived_at: int | None
    tags: list[str] = Field(default_factory=list)
    subtasks: list["TodoRead"] = Field(default_factory=list)


class TodoSearchQuery(BaseModel):
    """
    Параметры поиска задач (все фильтры через AND).

    tags: задача должна иметь хотя бы один из перечисленных тегов (OR).
    """

    keyword: str | None = None
    status: str | None = None
    priority: str | None = None
    completed: bool | None = None
    archived: bool | None = None
    tags: list[str] | None = None


class BatchTodoOperation(BaseModel):
    """
    Массовая операция над задачами.

    operation: complete | archive | delete | update
    updates: общий payload для operation="update"
    """

    operation: str
    todo_ids: list[str]
    updates: TodoUpdate | None = None


class TodoStats(BaseModel):
    """Агрегированная статистика по неархивным задачам."""

    total: int
    completed: int
    pending: int
    in_progress: int
    blocked: int
    overdue: int
    due_today: int
    due_this_week: int
    by_priority: dict[str, int]
    by_project: dict[str, int]
    by_assignee: dict[str, int]


# ============================================================================
# TODO TAG SCHEMAS
# ============================================================================


class TodoTagCreate(BaseModel):
    """Схема для создания тега (color_id - ключ палитры)."""

    name: str = Field(..., min_length=1, max_length=100)
    color_id: str


class TodoTagUpdate(BaseModel):
    """Частичное обновление тега."""

    name: str | None = Field(None, min_length=1, max_length=100)
    color_id: str | None = None


class TodoTagRead(BaseModel):
    """Тег в ответе (цвета уже разрешены из палитры)."""

    id: str
    name: str
    color: str
    bg_color: str
    color_id: str
    created_at: int

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# COMMENT / ATTACHMENT SCHEMAS
# ============================================================================


class TodoCommentCreate(BaseModel):
    """Комментарий к задаче (Markdown)."""

    content: str = Field(..., min_length=1)
    author: str | None = None


class TodoCommentRead(BaseModel):
    """Комментарий в ответе."""

    id: str
    todo_id: str
    content: str
    author: str | None
    created_at: int

    model_config = ConfigDict(from_attributes=True)


class TodoAttachmentCreate(BaseModel):
    """Ссылка на файл, прикреплённый к задаче."""

    filename: str = Field(..., min_length=1)
    filepath: str = Field(..., min_length=1)
    size: int | None = Field(None, ge=0)
    mime_type: str | None = None


class TodoAttachmentRead(BaseModel):
    """Вложение в ответе."""

    id: str
    todo_id: str
    filename: str
    filepath: str
    size: int | None
    mime_type: str | None
    created_at: int

    model_config = ConfigDict(from_attributes=True)
