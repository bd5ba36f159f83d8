"""Todo model."""

import enum
from datetime import date

from sqlalchemy import BigInteger, Boolean, Date, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONText, TimestampMixin, new_id


class TodoStatus(str, enum.Enum):
    """Known todo statuses (колонка хранит строку, набор открытый)."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Todo(Base, TimestampMixin):
    """
    Todo with one-level subtask assembly.

    parent_id - мягкая ссылка без FOREIGN KEY: при удалении задачи
    удаляются только прямые подзадачи, внуки остаются "сиротами".
    """

    __tablename__ = "todos"
    __table_args__ = (
        Index("idx_todos_parent_id", "parent_id"),
        Index("idx_todos_project_id", "project_id"),
        Index("idx_todos_due_date", "due_date"),
        Index("idx_todos_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=TodoStatus.TODO.value, nullable=False)
    priority: Mapped[str | None] = mapped_column(String(32), nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)  # YYYY-MM-DD
    estimated_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    assignee: Mapped[str | None] = mapped_column(String(200), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    parent_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    recurring_config: Mapped[str | None] = mapped_column(Text, nullable=True)  # opaque JSON
    dependencies: Mapped[list[str]] = mapped_column(JSONText(list), nullable=True)  # todo ids
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    archived_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    # Relationships (только чтение - связи пишутся репозиторием напрямую)
    tags: Mapped[list["TodoTag"]] = relationship(
        "TodoTag", secondary="todo_tag_relations", viewonly=True
    )
    subtasks: Mapped[list["Todo"]] = relationship(
        "Todo",
        primaryjoin="Todo.id == remote(foreign(Todo.parent_id))",
        order_by="Todo.created_at",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, title='{self.title}', status={self.status})>"
