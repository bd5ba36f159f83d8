"""
Тесты единицы работы (session_scope).

Проверяем commit при успехе и rollback при любом исключении.
"""

import pytest

from snippets_hub.core import database
from snippets_hub.core.errors import NotFoundError
from snippets_hub.core.logging import operation_id_var
from snippets_hub.schemas import BatchTodoOperation, FolderCreate, TodoCreate
from snippets_hub.services import FolderService, TodoService


@pytest.fixture
def scoped_sessions(monkeypatch, test_session_factory):
    """session_scope() поверх тестовой базы."""
    monkeypatch.setattr(database, "AsyncSessionLocal", test_session_factory)
    return test_session_factory


@pytest.mark.asyncio
async def test_session_scope_commits(scoped_sessions):
    """Test: успешная единица работы сохраняется."""
    async with database.session_scope() as db:
        folder = await FolderService(db).create_folder(FolderCreate(name="Committed"))
        assert operation_id_var.get() != ""

    async with database.session_scope() as db:
        assert await FolderService(db).get_folder(folder.id) is not None


@pytest.mark.asyncio
async def test_session_scope_rolls_back_on_error(scoped_sessions):
    """Test: исключение откатывает все записи единицы работы."""
    with pytest.raises(RuntimeError):
        async with database.session_scope() as db:
            await FolderService(db).create_folder(FolderCreate(name="Rolled back"))
            raise RuntimeError("boom")

    async with database.session_scope() as db:
        assert await FolderService(db).get_all_folders() == []


@pytest.mark.asyncio
async def test_batch_failure_leaves_no_partial_state(scoped_sessions):
    """Test: массовая операция с неизвестным ID ничего не меняет."""
    async with database.session_scope() as db:
        todo = await TodoService(db).create_todo(TodoCreate(title="Stable"))

    with pytest.raises(NotFoundError):
        async with database.session_scope() as db:
            await TodoService(db).batch_update_todos(
                BatchTodoOperation(operation="delete", todo_ids=[todo.id, "missing"])
            )

    async with database.session_scope() as db:
        assert await TodoService(db).get_todo(todo.id) is not None
