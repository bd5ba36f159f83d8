"""Todo comment model."""

from sqlalchemy import BigInteger, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, now_ms


class TodoComment(Base):
    """Comment on a todo (supports Markdown)."""

    __tablename__ = "todo_comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    todo_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("todos.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)

    def __repr__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"<TodoComment(id={self.id}, todo_id={self.todo_id}, content='{preview}')>"
