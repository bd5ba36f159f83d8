"""
Структурированное логирование хранилища.

Каждая единица работы (session_scope) получает operation_id -
все записи, сделанные внутри неё, несут этот ID:

    with operation_scope():
        logger.info("Todo created", extra={"todo_id": todo.id})
    # {"level": "INFO", "message": "Todo created", "operation_id": "6f1c...",
    #  "extra": {"todo_id": "..."}}
"""

import json
import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from .config import settings

# ID текущей единицы работы ("" - вне session_scope)
operation_id_var: ContextVar[str] = ContextVar("operation_id", default="")

# Атрибуты, которые есть у любого LogRecord; всё остальное пришло через extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "operation_id"}

# Сторонние логгеры и их уровень по умолчанию
_QUIET_LOGGERS = {
    "aiosqlite": logging.WARNING,
    "alembic": logging.WARNING,
}


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    return str(uuid.uuid4())


@contextmanager
def operation_scope(operation_id: str | None = None) -> Iterator[str]:
    """
    Привязать operation_id ко всем записям внутри блока.

    Args:
        operation_id: Готовый ID (по умолчанию - новый UUID)

    Yields:
        Активный operation_id
    """
    token = operation_id_var.set(operation_id or generate_operation_id())
    try:
        yield operation_id_var.get()
    finally:
        operation_id_var.reset(token)


class OperationContextFilter(logging.Filter):
    """Копирует operation_id из контекста в record (до форматирования)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.operation_id = operation_id_var.get()
        return True


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    Одна JSON строка на запись.

    Ошибки хранилища (StoreError) дополнительно дают поле error_code:
    из исключения в exc_info или из extra={"error_code": ...}.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        operation_id = getattr(record, "operation_id", "")
        if operation_id:
            log_data["operation_id"] = operation_id

        extra = _extra_fields(record)
        if "error_code" in extra:
            log_data["error_code"] = extra.pop("error_code")
        if extra:
            log_data["extra"] = extra

        if record.exc_info:
            error = record.exc_info[1]
            if getattr(error, "code", None):
                log_data["error_code"] = error.code
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """Human-readable formatter for development: extra выводится как key=value."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%H:%M:%S.%f")[:-3]
        operation_id = getattr(record, "operation_id", "")
        prefix = f"[{operation_id[:8]}] " if operation_id else ""
        fields = " ".join(f"{key}={value}" for key, value in _extra_fields(record).items())

        line = f"{timestamp} {record.levelname:<7} {prefix}{record.name}: {record.getMessage()}"
        if fields:
            line += f" ({fields})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Настроить корневой логгер.

    Повторный вызов заменяет обработчики, а не добавляет новые.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_format: "json" (структурированный) или "simple" (для разработки)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(OperationContextFilter())
    handler.setFormatter(JSONFormatter() if log_format.lower() == "json" else SimpleFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    # DATABASE_ECHO включает SQL в логах
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.DATABASE_ECHO else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Логгер модуля (обычно get_logger(__name__))."""
    return logging.getLogger(name)
