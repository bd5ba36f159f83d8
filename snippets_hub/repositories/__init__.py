"""Repository layer for data access."""

from .base import BaseRepository
from .folder import FolderRepository
from .git_repository import GitRepositoryRepository
from .project import ProjectRepository
from .snippet import SnippetRepository
from .todo import TodoRepository
from .todo_attachment import TodoAttachmentRepository
from .todo_comment import TodoCommentRepository
from .todo_tag import TodoTagRepository
from .workspace import WorkspaceRepository

__all__ = [
    "BaseRepository",
    "SnippetRepository",
    "FolderRepository",
    "WorkspaceRepository",
    "ProjectRepository",
    "GitRepositoryRepository",
    "TodoRepository",
    "TodoTagRepository",
    "TodoCommentRepository",
    "TodoAttachmentRepository",
]
