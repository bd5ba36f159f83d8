"""Snippet model."""

from sqlalchemy import Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONText, TimestampMixin, new_id


class Snippet(Base, TimestampMixin):
    """
    Сохранённый фрагмент кода.

    folder_id/project_id - мягкие ссылки (без FOREIGN KEY):
    удаление папки отвязывает сниппеты, а не удаляет их.

    Таблица зеркалируется в snippets_fts триггерами (см. core/schema.py).
    """

    __tablename__ = "snippets"
    __table_args__ = (Index("idx_snippets_project_id", "project_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(50), nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSONText(list), nullable=True)  # JSON array
    folder_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    usage_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', language={self.language})>"
