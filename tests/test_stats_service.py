"""Тесты для StatsService."""

from datetime import date, timedelta

import pytest

from snippets_hub.schemas import TodoCreate, TodoUpdate
from snippets_hub.services import StatsService, TodoService

TODAY = date(2026, 3, 10)


@pytest.mark.asyncio
async def test_stats_on_empty_store(test_db):
    """Test: пустая база - нулевые счётчики."""
    stats = await StatsService(test_db).get_todo_stats(today=TODAY)

    assert stats.total == 0
    assert stats.pending == 0
    assert stats.by_priority == {}


@pytest.mark.asyncio
async def test_stats_counts(test_db):
    """Test: все метрики по неархивным задачам."""
    todos = TodoService(test_db)

    await todos.create_todo(
        TodoCreate(title="Overdue", due_date=TODAY - timedelta(days=1), priority="high", assignee="alice")
    )
    await todos.create_todo(TodoCreate(title="Today", due_date=TODAY, project_id="p1"))
    await todos.create_todo(
        TodoCreate(title="This week", due_date=TODAY + timedelta(days=7), status="in_progress", priority="high")
    )
    await todos.create_todo(TodoCreate(title="Later", due_date=TODAY + timedelta(days=8), status="blocked"))
    done = await todos.create_todo(TodoCreate(title="Done overdue", due_date=TODAY - timedelta(days=3)))
    await todos.update_todo(done.id, TodoUpdate(completed=True))
    archived = await todos.create_todo(TodoCreate(title="Archived", due_date=TODAY, priority="low"))
    await todos.update_todo(archived.id, TodoUpdate(archived=True))

    stats = await StatsService(test_db).get_todo_stats(today=TODAY)

    assert stats.total == 5
    assert stats.completed == 1
    assert stats.pending == 4
    assert stats.completed + stats.pending == stats.total
    assert stats.in_progress == 1
    assert stats.blocked == 1
    assert stats.overdue == 1
    assert stats.due_today == 1
    assert stats.due_this_week == 2
    assert stats.by_priority == {"high": 2, "none": 3}
    assert stats.by_project == {"p1": 1, "none": 4}
    assert stats.by_assignee == {"alice": 1, "unassigned": 4}


@pytest.mark.asyncio
async def test_stats_default_today_is_utc_date(test_db):
    """Test: без today используется текущая дата UTC."""
    await TodoService(test_db).create_todo(TodoCreate(title="Someday"))

    stats = await StatsService(test_db).get_todo_stats()

    assert stats.total == 1
    assert stats.overdue == 0
