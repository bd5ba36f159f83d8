"""
Ошибки слоя хранения.

Единая иерархия исключений для всех сервисов:
1. NotFoundError - операция требует существующую запись, а её нет
2. ValidationError - запрос не прошёл проверку (палитра, тип batch-операции, ...)
3. SerializationError - повреждённый JSON в колонке (перехватывается локально)
4. StorageError - SQLite отклонил операцию (обёртка над SQLAlchemyError)

Как это работает:
    with storage_errors("create todo"):
        await self.todo_repo.create(todo)

Любая SQLAlchemyError внутри блока превращается в StorageError
с сообщением "Failed to create todo: ..." и цепочкой __cause__.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from .logging import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """
    Базовый класс для всех ошибок хранилища.

    Атрибуты:
        code: Машиночитаемый код ошибки ("NOT_FOUND", "VALIDATION_ERROR", ...)
        message: Человекочитаемое сообщение
    """

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class NotFoundError(StoreError):
    """
    Запись не найдена.

    Использование:
        raise NotFoundError("Todo", "0b6f...")
        # Сообщение: "Todo with id=0b6f... not found"
    """

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(code="NOT_FOUND", message=f"{resource} with id={resource_id} not found")


class ValidationError(StoreError, ValueError):
    """Запрос не прошёл валидацию (ничего не записано)."""

    def __init__(self, message: str):
        super().__init__(code="VALIDATION_ERROR", message=message)


class SerializationError(StoreError):
    """Структурированное значение в колонке не удалось декодировать."""

    def __init__(self, column: str, message: str):
        self.column = column
        super().__init__(code="SERIALIZATION_ERROR", message=f"{column}: {message}")


class StorageError(StoreError):
    """
    SQLite отклонил операцию.

    Исходная ошибка SQLAlchemy доступна через __cause__.
    """

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        super().__init__(code="STORAGE_ERROR", message=f"Failed to {operation}: {cause}")


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Обернуть ошибки движка в StorageError с контекстом операции.

    Args:
        operation: Что делали ("create snippet", "search todos", ...)

    Raises:
        StorageError: Если внутри блока возникла SQLAlchemyError
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage operation failed", extra={"operation": operation, "error": str(exc)})
        raise StorageError(operation, exc) from exc
