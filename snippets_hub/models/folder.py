"""Folder model."""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, now_ms


class Folder(Base):
    """Folder for organizing snippets (tree via parent_id)."""

    __tablename__ = "folders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name='{self.name}')>"
