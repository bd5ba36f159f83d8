"""Service layer with business logic."""

from .folder import FolderService
from .git_repository import GitRepositoryService
from .project import ProjectService
from .snippet import SnippetService
from .stats import StatsService
from .tag import TagService
from .todo import TodoService
from .workspace import WorkspaceService

__all__ = [
    "SnippetService",
    "FolderService",
    "WorkspaceService",
    "ProjectService",
    "GitRepositoryService",
    "TodoService",
    "TagService",
    "StatsService",
]
