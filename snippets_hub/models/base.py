"""Base classes for SQLAlchemy models."""

import json
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import BigInteger, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from ..core.errors import SerializationError
from ..core.logging import get_logger

logger = get_logger(__name__)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


def now_ms() -> int:
    """Return current UTC time as integer milliseconds since epoch."""
    return int(datetime.now(UTC).timestamp() * 1000)


def utc_now_iso() -> str:
    """Return current UTC time as ISO-8601 string."""
    return datetime.now(UTC).isoformat()


def _log_fallback(error: SerializationError) -> None:
    logger.warning(
        "Falling back to empty value",
        extra={"error_code": error.code, "column": error.column, "reason": error.message},
    )


class JSONText(TypeDecorator):
    """
    Структурированное значение (список/словарь), сохранённое как JSON в TEXT колонке.

    Запись: json.dumps(value), None сохраняется как пустое значение по умолчанию.
    Чтение: json.loads(text); если текст повреждён или тип не совпадает
    (ожидали список, получили словарь) - возвращаем пустое значение по умолчанию
    и пишем warning. Чтение никогда не падает из-за содержимого колонки.

    Пример:
        tags: Mapped[list[str]] = mapped_column(JSONText(list))
        settings: Mapped[dict] = mapped_column(JSONText(dict))
    """

    impl = Text
    cache_ok = True

    def __init__(self, default_factory: Callable[[], Any] = dict, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.default_factory = default_factory

    def process_bind_param(self, value: Any, dialect: Any) -> str:
        if value is None:
            value = self.default_factory()
        return json.dumps(value, ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Any) -> Any:
        if value is None or value == "":
            return self.default_factory()

        try:
            decoded = json.loads(value)
        except (TypeError, ValueError) as exc:
            _log_fallback(SerializationError("json column", str(exc)))
            return self.default_factory()

        default = self.default_factory()
        if not isinstance(decoded, type(default)):
            _log_fallback(
                SerializationError(
                    "json column", f"expected {type(default).__name__}, got {type(decoded).__name__}"
                )
            )
            return default

        return decoded


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """Mixin for adding created_at and updated_at timestamps (epoch milliseconds)."""

    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)
    updated_at: Mapped[int] = mapped_column(
        BigInteger, default=now_ms, onupdate=now_ms, nullable=False
    )
