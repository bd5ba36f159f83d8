"""Todo-Tag junction table."""

from sqlalchemy import Column, ForeignKey, String, Table

from .base import Base

# Many-to-many junction table for todos and tags
# ON DELETE CASCADE: связь исчезает при удалении любой из сторон
todo_tag_relations = Table(
    "todo_tag_relations",
    Base.metadata,
    Column("todo_id", String(36), ForeignKey("todos.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("todo_tags.id", ondelete="CASCADE"), primary_key=True),
)
