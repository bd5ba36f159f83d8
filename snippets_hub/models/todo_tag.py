"""Todo tag model and color palette."""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, now_ms

# Закрытая палитра: ключ -> (цвет текста, цвет фона)
TAG_COLOR_PALETTE: dict[str, tuple[str, str]] = {
    "red": ("#ef4444", "#fef2f2"),
    "orange": ("#f97316", "#fff7ed"),
    "amber": ("#f59e0b", "#fffbeb"),
    "yellow": ("#eab308", "#fefce8"),
    "lime": ("#84cc16", "#f7fee7"),
    "green": ("#22c55e", "#f0fdf4"),
    "emerald": ("#10b981", "#ecfdf5"),
    "teal": ("#14b8a6", "#f0fdfa"),
    "cyan": ("#06b6d4", "#ecfeff"),
    "sky": ("#0ea5e9", "#f0f9ff"),
    "blue": ("#3b82f6", "#eff6ff"),
    "indigo": ("#6366f1", "#eef2ff"),
    "violet": ("#8b5cf6", "#f5f3ff"),
    "purple": ("#a855f7", "#faf5ff"),
    "fuchsia": ("#d946ef", "#fdf4ff"),
    "pink": ("#ec4899", "#fdf2f8"),
    "rose": ("#f43f5e", "#fff1f2"),
    "gray": ("#6b7280", "#f9fafb"),
}


class TodoTag(Base):
    """Tag for todos with colors resolved from the palette."""

    __tablename__ = "todo_tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)  # hex foreground
    bg_color: Mapped[str] = mapped_column(String(7), nullable=False)  # hex background
    color_id: Mapped[str] = mapped_column(String(32), nullable=False)  # palette key
    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)

    def __repr__(self) -> str:
        return f"<TodoTag(id={self.id}, name='{self.name}', color_id={self.color_id})>"
