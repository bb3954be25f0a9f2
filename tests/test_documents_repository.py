"""
Tests for the repository gateway.
"""

from unittest.mock import AsyncMock

import pytest

from core.errors import NotFoundError, PersistenceError, QueryError
from documents.predicates import Predicate


@pytest.mark.asyncio
async def test_list_all_empty_collection(documents):
    assert await documents.list_all("tasks") == []


@pytest.mark.asyncio
async def test_add_then_get_returns_fields_plus_id(documents):
    fields = {"title": "Write tests", "isCompleted": False}

    created = await documents.add("tasks", fields)
    fetched = await documents.get_by_id("tasks", created["id"])

    assert fetched == {"id": created["id"], "title": "Write tests", "isCompleted": False}
    assert created == fetched


@pytest.mark.asyncio
async def test_add_does_not_mutate_input_and_ignores_caller_id(documents, store):
    fields = {"id": "chosen", "title": "A"}

    created = await documents.add("tasks", fields)

    assert fields == {"id": "chosen", "title": "A"}
    assert created["id"] != "chosen"
    assert "id" not in store.collections["tasks"][created["id"]]


@pytest.mark.asyncio
async def test_get_by_id_missing_raises_not_found(documents):
    with pytest.raises(NotFoundError):
        await documents.get_by_id("tasks", "missing")


@pytest.mark.asyncio
async def test_get_by_id_empty_document_still_exists(documents, store):
    doc_id = await store.add("tasks", {})

    assert await documents.get_by_id("tasks", doc_id) == {"id": doc_id}


@pytest.mark.asyncio
async def test_list_all_merges_ids(documents):
    first = await documents.add("tasks", {"title": "A"})
    second = await documents.add("tasks", {"title": "B"})

    assert await documents.list_all("tasks") == [first, second]


@pytest.mark.asyncio
async def test_update_preserves_unmentioned_fields(documents):
    created = await documents.add("tasks", {"title": "A", "description": "keep me", "isCompleted": False})

    updated = await documents.update("tasks", created["id"], {"isCompleted": True})

    assert updated == {
        "id": created["id"],
        "title": "A",
        "description": "keep me",
        "isCompleted": True,
    }


@pytest.mark.asyncio
async def test_update_cannot_change_id(documents, store):
    created = await documents.add("tasks", {"title": "A"})

    updated = await documents.update("tasks", created["id"], {"id": "other", "title": "B"})

    assert updated == {"id": created["id"], "title": "B"}
    assert "id" not in store.collections["tasks"][created["id"]]


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(documents):
    with pytest.raises(NotFoundError):
        await documents.update("tasks", "missing", {"title": "B"})


@pytest.mark.asyncio
async def test_delete_then_get_raises_not_found(documents):
    created = await documents.add("tasks", {"title": "A"})

    result = await documents.delete("tasks", created["id"])

    assert result == {"id": created["id"], "deleted": True}
    with pytest.raises(NotFoundError):
        await documents.get_by_id("tasks", created["id"])


@pytest.mark.asyncio
async def test_delete_missing_raises_not_found(documents):
    with pytest.raises(NotFoundError):
        await documents.delete("tasks", "missing")


@pytest.mark.asyncio
async def test_query_by_owner_returns_matching_documents_with_ids(documents):
    first = await documents.add("tasks", {"ownerId": "u1", "title": "one"})
    await documents.add("tasks", {"ownerId": "u2", "title": "two"})
    third = await documents.add("tasks", {"ownerId": "u1", "title": "three"})

    result = await documents.query("tasks", [["ownerId", "==", "u1"]])

    assert result == [first, third]
    assert all(doc["id"] for doc in result)


@pytest.mark.asyncio
async def test_query_predicates_are_conjunctive(documents):
    await documents.add("tasks", {"ownerId": "u1", "isCompleted": True})
    open_task = await documents.add("tasks", {"ownerId": "u1", "isCompleted": False})

    result = await documents.query(
        "tasks",
        [("ownerId", "==", "u1"), Predicate("isCompleted", "==", False)],
    )

    assert result == [open_task]


@pytest.mark.asyncio
async def test_query_without_predicates_lists_everything(documents):
    first = await documents.add("tasks", {"title": "A"})
    second = await documents.add("tasks", {"title": "B"})

    assert await documents.query("tasks", []) == [first, second]
    assert await documents.query("tasks") == [first, second]


@pytest.mark.asyncio
async def test_query_rejects_unknown_operator(documents):
    with pytest.raises(QueryError):
        await documents.query("tasks", [("ownerId", "like", "u%")])


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [("ownerId", "=="), "ownerId==u1", ("", "==", "u1")])
async def test_query_rejects_malformed_predicates(documents, bad):
    with pytest.raises(QueryError):
        await documents.query("tasks", [bad])


@pytest.mark.asyncio
async def test_query_in_requires_list(documents):
    with pytest.raises(QueryError):
        await documents.query("tasks", [("ownerId", "in", "u1")])


@pytest.mark.asyncio
async def test_store_failure_is_wrapped_with_operation(documents, store):
    cause = RuntimeError("connection reset")
    store.update = AsyncMock(side_effect=cause)

    with pytest.raises(PersistenceError) as exc_info:
        await documents.update("tasks", "doc1", {"title": "B"})

    assert "update document" in str(exc_info.value)
    assert "'tasks'" in str(exc_info.value)
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
async def test_store_failure_on_read_is_wrapped(documents, store):
    store.get_all = AsyncMock(side_effect=OSError("unreachable"))

    with pytest.raises(PersistenceError, match="list documents"):
        await documents.list_all("tasks")
