"""SQLAlchemy models for SnippetsHub."""

from .base import Base, JSONText, TimestampMixin, new_id, now_ms, utc_now_iso
from .folder import Folder
from .git_repository import GitRepository
from .project import Project
from .snippet import Snippet
from .todo import Todo, TodoStatus
from .todo_attachment import TodoAttachment
from .todo_comment import TodoComment
from .todo_tag import TAG_COLOR_PALETTE, TodoTag
from .todo_tag_relation import todo_tag_relations
from .workspace import Workspace

__all__ = [
    "Base",
    "JSONText",
    "TimestampMixin",
    "new_id",
    "now_ms",
    "utc_now_iso",
    "Snippet",
    "Folder",
    "Workspace",
    "Project",
    "GitRepository",
    "Todo",
    "TodoStatus",
    "TodoTag",
    "TAG_COLOR_PALETTE",
    "todo_tag_relations",
    "TodoComment",
    "TodoAttachment",
]
