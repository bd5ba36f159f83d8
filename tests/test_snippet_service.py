"""
Тесты для SnippetService и FolderService.

Проверяем:
- Создание и чтение (round-trip)
- Частичное обновление
- Поиск (атрибуты, полнотекстовый) и порядок результатов
- Удаление папки с отвязкой сниппетов
"""

import json

import pytest

from snippets_hub.core.errors import NotFoundError
from snippets_hub.repositories import SnippetRepository
from snippets_hub.schemas import FolderCreate, SnippetCreate, SnippetSearchQuery, SnippetUpdate
from snippets_hub.services import FolderService, SnippetService

# ============================================================================
# SNIPPET SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_create_and_get_snippet_round_trip(test_db):
    """Test: созданный сниппет читается с теми же полями."""
    service = SnippetService(test_db)

    created = await service.create_snippet(
        SnippetCreate(
            title="Quick sort",
            code="def qsort(xs): ...",
            language="python",
            description="Recursive",
            tags=["algorithms", "sorting"],
        )
    )

    assert created.created_at == created.updated_at
    assert created.is_favorite is False
    assert created.usage_count == 0

    fetched = await service.get_snippet(created.id)
    assert fetched == created
    assert fetched.tags == ["algorithms", "sorting"]


@pytest.mark.asyncio
async def test_get_missing_snippet_returns_none(test_db):
    """Test: отсутствующий сниппет - None, не исключение."""
    assert await SnippetService(test_db).get_snippet("missing") is None


@pytest.mark.asyncio
async def test_update_title_only_keeps_other_fields(test_db):
    """Test: частичное обновление меняет только title и updated_at."""
    service = SnippetService(test_db)
    created = await service.create_snippet(
        SnippetCreate(title="Old", code="print('hi')", language="python", description="Greeting", tags=["io"])
    )
    await SnippetRepository(test_db).update(created.id, updated_at=1)

    updated = await service.update_snippet(created.id, SnippetUpdate(title="New"))

    assert updated.title == "New"
    assert updated.code == created.code
    assert updated.language == created.language
    assert updated.description == created.description
    assert updated.tags == created.tags
    assert updated.created_at == created.created_at
    assert updated.updated_at > 1


@pytest.mark.asyncio
async def test_update_explicit_none_clears_description(test_db):
    """Test: явный None очищает необязательное поле, но не обязательное."""
    service = SnippetService(test_db)
    created = await service.create_snippet(
        SnippetCreate(title="T", code="c", language="go", description="to be removed")
    )

    updated = await service.update_snippet(created.id, SnippetUpdate(description=None, title=None))

    assert updated.description is None
    assert updated.title == "T"


@pytest.mark.asyncio
async def test_update_missing_snippet_raises(test_db):
    """Test: обновление несуществующего сниппета - NotFoundError."""
    with pytest.raises(NotFoundError):
        await SnippetService(test_db).update_snippet("missing", SnippetUpdate(title="x"))


@pytest.mark.asyncio
async def test_delete_snippet(test_db):
    """Test: удаление возвращает True один раз."""
    service = SnippetService(test_db)
    created = await service.create_snippet(SnippetCreate(title="Gone", code="x", language="c"))

    assert await service.delete_snippet(created.id) is True
    assert await service.delete_snippet(created.id) is False
    assert await service.get_snippet(created.id) is None


@pytest.mark.asyncio
async def test_search_by_language_newest_updated_first(test_db):
    """Test: фильтр по языку, сортировка по updated_at DESC."""
    service = SnippetService(test_db)
    repo = SnippetRepository(test_db)
    a = await service.create_snippet(SnippetCreate(title="A", code="1", language="rust"))
    b = await service.create_snippet(SnippetCreate(title="B", code="2", language="rust"))
    await service.create_snippet(SnippetCreate(title="C", code="3", language="go"))
    await repo.update(a.id, updated_at=2000)
    await repo.update(b.id, updated_at=1000)

    found = await service.search_snippets(SnippetSearchQuery(language="rust"))

    assert [s.id for s in found] == [a.id, b.id]


@pytest.mark.asyncio
async def test_search_combines_keyword_language_and_tags(test_db):
    """Test: все фильтры комбинируются через AND."""
    service = SnippetService(test_db)
    match = await service.create_snippet(
        SnippetCreate(title="HTTP client", code="requests.get(url)", language="python", tags=["network"])
    )
    await service.create_snippet(
        SnippetCreate(title="HTTP client", code="fetch(url)", language="javascript", tags=["network"])
    )
    await service.create_snippet(SnippetCreate(title="HTTP server", code="serve()", language="python"))

    found = await service.search_snippets(
        SnippetSearchQuery(keyword="client", language="python", tags=["network"])
    )

    assert [s.id for s in found] == [match.id]


@pytest.mark.asyncio
async def test_full_text_search(test_db):
    """Test: полнотекстовый поиск по коду через FTS5 зеркало."""
    service = SnippetService(test_db)
    hit = await service.create_snippet(
        SnippetCreate(title="Debounce", code="function debounce(fn, ms) {}", language="javascript")
    )
    await service.create_snippet(SnippetCreate(title="Throttle", code="function throttle() {}", language="javascript"))

    found = await service.full_text_search("debounce(fn")

    assert [s.id for s in found] == [hit.id]


@pytest.mark.asyncio
async def test_full_text_search_short_query_falls_back_to_keyword(test_db):
    """Test: запрос короче трёх символов ищется через LIKE."""
    service = SnippetService(test_db)
    hit = await service.create_snippet(SnippetCreate(title="Go", code="fmt.Println()", language="go"))
    await service.create_snippet(SnippetCreate(title="Rust", code="println!()", language="rust"))

    found = await service.full_text_search("Go")

    assert [s.id for s in found] == [hit.id]


@pytest.mark.asyncio
async def test_snippets_by_project_and_usage(test_db):
    """Test: выборка по проекту и счётчик использований."""
    service = SnippetService(test_db)
    in_project = await service.create_snippet(SnippetCreate(title="P", code="1", language="sql", project_id="p1"))
    await service.create_snippet(SnippetCreate(title="Q", code="2", language="sql"))

    assert [s.id for s in await service.get_snippets_by_project("p1")] == [in_project.id]

    used = await service.record_usage(in_project.id)
    assert used.usage_count == 1
    assert used.updated_at == in_project.updated_at

    with pytest.raises(NotFoundError):
        await service.record_usage("missing")


@pytest.mark.asyncio
async def test_export_to_json(test_db):
    """Test: экспорт всех сниппетов в JSON."""
    service = SnippetService(test_db)
    created = await service.create_snippet(SnippetCreate(title="Export me", code="x = 1", language="python"))

    exported = json.loads(await service.export_to_json())

    assert len(exported) == 1
    assert exported[0]["id"] == created.id
    assert exported[0]["title"] == "Export me"


# ============================================================================
# FOLDER SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_folders_listed_oldest_first(test_db):
    """Test: папки в порядке создания."""
    service = FolderService(test_db)
    first = await service.create_folder(FolderCreate(name="First"))
    second = await service.create_folder(FolderCreate(name="Second", parent_id=first.id))
    await service.folder_repo.update(first.id, created_at=1)
    await service.folder_repo.update(second.id, created_at=2)

    folders = await service.get_all_folders()

    assert [f.id for f in folders] == [first.id, second.id]
    assert folders[1].parent_id == first.id


@pytest.mark.asyncio
async def test_delete_folder_detaches_snippets(test_db):
    """Test: удаление папки отвязывает сниппеты, а не удаляет их."""
    folders = FolderService(test_db)
    snippets = SnippetService(test_db)
    folder = await folders.create_folder(FolderCreate(name="Scratch"))
    snippet = await snippets.create_snippet(
        SnippetCreate(title="Kept", code="x", language="python", folder_id=folder.id)
    )

    assert await folders.delete_folder(folder.id) is True

    assert await folders.get_folder(folder.id) is None
    kept = await snippets.get_snippet(snippet.id)
    assert kept is not None
    assert kept.folder_id is None
    assert await folders.delete_folder(folder.id) is False
