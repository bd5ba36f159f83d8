"""Git repository model."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONText


class GitRepository(Base):
    """Reference to a local git repository with its remotes."""

    __tablename__ = "git_repositories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    path: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # [{"name": "origin", "url": "git@..."}]
    remotes: Mapped[list[dict[str, str]]] = mapped_column(JSONText(list), nullable=True)
    created_at: Mapped[str] = mapped_column(String(64), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(64), nullable=False)

    def __repr__(self) -> str:
        return f"<GitRepository(id={self.id}, path='{self.path}')>"
