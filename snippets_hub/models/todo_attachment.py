"""Todo attachment model."""

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, now_ms


class TodoAttachment(Base):
    """File attached to a todo (only the reference is stored, not the content)."""

    __tablename__ = "todo_attachments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    todo_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("todos.id", ondelete="CASCADE"), nullable=False
    )
    filename: Mapped[str] = mapped_column(String(500), nullable=False)
    filepath: Mapped[str] = mapped_column(Text, nullable=False)
    size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)

    def __repr__(self) -> str:
        return f"<TodoAttachment(id={self.id}, todo_id={self.todo_id}, filename='{self.filename}')>"
