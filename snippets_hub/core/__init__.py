"""Core application components."""

from .config import Settings, settings
from .database import AsyncSessionLocal, build_engine, drop_db, engine, init_db, session_scope
from .errors import NotFoundError, SerializationError, StorageError, StoreError, ValidationError

__all__ = [
    "settings",
    "Settings",
    "engine",
    "build_engine",
    "AsyncSessionLocal",
    "session_scope",
    "init_db",
    "drop_db",
    "StoreError",
    "NotFoundError",
    "ValidationError",
    "SerializationError",
    "StorageError",
]
