"""
Тесты для Repository Layer.

Проверяем:
- Базовые CRUD операции
- Поисковые запросы (bind-параметры, экранирование LIKE)
- Связи задача-тег (идемпотентная вставка, замена набора)
- Агрегаты для статистики
"""

import logging

import pytest
from sqlalchemy import text

from snippets_hub.models import Folder, Snippet, Todo, TodoTag, new_id
from snippets_hub.repositories import (
    FolderRepository,
    SnippetRepository,
    TodoRepository,
    TodoTagRepository,
)

# ============================================================================
# BASE REPOSITORY TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_base_crud(test_db):
    """Test: create / get / update / delete / count."""
    repo = FolderRepository(test_db)

    folder = await repo.create(Folder(id=new_id(), name="Algorithms"))
    assert folder.created_at > 0

    assert await repo.exists(folder.id)
    assert (await repo.get_by_id(folder.id)).name == "Algorithms"
    assert await repo.count() == 1

    updated = await repo.update(folder.id, name="Algos")
    assert updated.name == "Algos"
    assert await repo.update("missing", name="x") is None

    assert await repo.delete(folder.id) is True
    assert await repo.delete(folder.id) is False
    assert await repo.get_by_id(folder.id) is None


@pytest.mark.asyncio
async def test_get_by_ids(test_db):
    """Test: выборка по списку ID."""
    repo = FolderRepository(test_db)
    a = await repo.create(Folder(id=new_id(), name="A"))
    b = await repo.create(Folder(id=new_id(), name="B"))
    await repo.create(Folder(id=new_id(), name="C"))

    found = await repo.get_by_ids([a.id, b.id, "missing"])

    assert {f.id for f in found} == {a.id, b.id}
    assert await repo.get_by_ids([]) == []


# ============================================================================
# SNIPPET REPOSITORY TESTS
# ============================================================================


def _snippet(title: str, code: str = "pass", language: str = "python", **kwargs) -> Snippet:
    return Snippet(id=new_id(), title=title, code=code, language=language, **kwargs)


@pytest.mark.asyncio
async def test_snippet_search_escapes_like_wildcards(test_db):
    """Test: % и _ в ключевом слове ищутся буквально."""
    repo = SnippetRepository(test_db)
    await repo.create(_snippet("Progress 100%"))
    await repo.create(_snippet("Progress 1000"))

    found = await repo.search(keyword="100%")

    assert [s.title for s in found] == ["Progress 100%"]


@pytest.mark.asyncio
async def test_snippet_search_keyword_is_bound_parameter(test_db):
    """Test: кавычки в запросе не ломают SQL."""
    repo = SnippetRepository(test_db)
    await repo.create(_snippet("Robert'); DROP TABLE snippets;--"))

    found = await repo.search(keyword="'); DROP TABLE")

    assert len(found) == 1
    assert await repo.count() == 1


@pytest.mark.asyncio
async def test_snippet_search_tags_all_required(test_db):
    """Test: каждый запрошенный тег должен присутствовать."""
    repo = SnippetRepository(test_db)
    await repo.create(_snippet("Both", tags=["sorting", "algorithms"]))
    await repo.create(_snippet("One", tags=["sorting"]))

    found = await repo.search(tags=["sorting", "algorithms"])

    assert [s.title for s in found] == ["Both"]


@pytest.mark.asyncio
async def test_snippet_detach_folder(test_db):
    """Test: отвязка сниппетов от папки."""
    repo = SnippetRepository(test_db)
    inside = await repo.create(_snippet("Inside", folder_id="f1"))
    other = await repo.create(_snippet("Other", folder_id="f2"))

    assert await repo.detach_folder("f1") == 1

    assert (await repo.get_by_id(inside.id)).folder_id is None
    assert (await repo.get_by_id(other.id)).folder_id == "f2"


@pytest.mark.asyncio
async def test_snippet_increment_usage_keeps_updated_at(test_db):
    """Test: счётчик использований не меняет updated_at."""
    repo = SnippetRepository(test_db)
    snippet = await repo.create(_snippet("Counter", created_at=1000, updated_at=1000))

    assert await repo.increment_usage(snippet.id) is True
    assert await repo.increment_usage("missing") is False

    reloaded = await repo.get_by_id(snippet.id)
    assert reloaded.usage_count == 1
    assert reloaded.updated_at == 1000


# ============================================================================
# JSON COLUMN TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_corrupted_json_column_falls_back_to_empty(test_db, caplog):
    """Test: повреждённый JSON в колонке читается как пустой список."""
    repo = SnippetRepository(test_db)
    snippet_id = (await repo.create(_snippet("Broken tags", tags=["x"]))).id

    await test_db.execute(text("UPDATE snippets SET tags = 'not json' WHERE id = :id"), {"id": snippet_id})
    test_db.expire_all()

    with caplog.at_level(logging.WARNING, logger="snippets_hub.models.base"):
        reloaded = await repo.get_by_id(snippet_id)

    assert reloaded.tags == []
    fallback = [r for r in caplog.records if r.getMessage() == "Falling back to empty value"]
    assert fallback
    assert fallback[0].error_code == "SERIALIZATION_ERROR"


@pytest.mark.asyncio
async def test_json_column_type_mismatch_falls_back_to_empty(test_db):
    """Test: объект вместо массива читается как пустой список."""
    repo = SnippetRepository(test_db)
    snippet_id = (await repo.create(_snippet("Dict tags"))).id

    await test_db.execute(text("""UPDATE snippets SET tags = '{"a": 1}' WHERE id = :id"""), {"id": snippet_id})
    test_db.expire_all()

    assert (await repo.get_by_id(snippet_id)).tags == []


# ============================================================================
# TODO REPOSITORY TESTS
# ============================================================================


async def _tag(db, name: str) -> TodoTag:
    return await TodoTagRepository(db).create(
        TodoTag(id=new_id(), name=name, color="#ef4444", bg_color="#fef2f2", color_id="red")
    )


@pytest.mark.asyncio
async def test_add_tags_is_idempotent(test_db):
    """Test: повторная привязка тега не создаёт дубликат и не падает."""
    repo = TodoRepository(test_db)
    todo = await repo.create(Todo(id=new_id(), title="Tagged"))
    tag = await _tag(test_db, "urgent")

    await repo.add_tags(todo.id, [tag.id])
    await repo.add_tags(todo.id, [tag.id, tag.id])

    assert await repo.get_tag_ids(todo.id) == [tag.id]


@pytest.mark.asyncio
async def test_set_tags_replaces_relation_set(test_db):
    """Test: set_tags заменяет набор целиком."""
    repo = TodoRepository(test_db)
    todo = await repo.create(Todo(id=new_id(), title="Retag"))
    old = await _tag(test_db, "old")
    new = await _tag(test_db, "new")

    await repo.add_tags(todo.id, [old.id])
    await repo.set_tags(todo.id, [new.id])

    assert await repo.get_tag_ids(todo.id) == [new.id]

    full = await repo.get_by_id_full(todo.id)
    assert [t.id for t in full.tags] == [new.id]


@pytest.mark.asyncio
async def test_get_by_id_full_loads_one_level_of_subtasks(test_db):
    """Test: подзадачи отсортированы по created_at."""
    repo = TodoRepository(test_db)
    parent = await repo.create(Todo(id=new_id(), title="Parent", created_at=1, updated_at=1))
    await repo.create(Todo(id=new_id(), title="Second", parent_id=parent.id, created_at=20, updated_at=20))
    await repo.create(Todo(id=new_id(), title="First", parent_id=parent.id, created_at=10, updated_at=10))

    full = await repo.get_by_id_full(parent.id)

    assert [s.title for s in full.subtasks] == ["First", "Second"]


@pytest.mark.asyncio
async def test_count_active_skips_archived(test_db):
    """Test: агрегаты считают только неархивные задачи."""
    repo = TodoRepository(test_db)
    await repo.create(Todo(id=new_id(), title="Active", priority="high"))
    await repo.create(Todo(id=new_id(), title="Plain"))
    await repo.create(Todo(id=new_id(), title="Archived", priority="high", archived=True))

    assert await repo.count_active() == 2
    assert await repo.count_active_grouped(Todo.priority, "none") == {"high": 1, "none": 1}
