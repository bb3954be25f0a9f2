"""
Repository gateway: typed access to any named collection.

Every result is a fresh dict of the form `{"id": <id>, **fields}`. Missing
documents raise `NotFoundError` from `get_by_id`, `update` and `delete`
alike; store failures surface as `PersistenceError` naming the operation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from core.errors import AppError, NotFoundError, PersistenceError

from .predicates import Predicate, parse_predicates
from .store import DocumentStore

logger = logging.getLogger(__name__)


def _merge(document_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
    return {**fields, "id": document_id}


def _without_id(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if key != "id"}


@contextmanager
def _store_call(operation: str, collection: str) -> Iterator[None]:
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.exception("store_call_failed operation=%s collection=%s", operation, collection)
        raise PersistenceError(f"Failed to {operation} in '{collection}': {exc}") from exc


class DocumentRepository:
    def __init__(self, store: DocumentStore):
        self._store = store

    async def list_all(self, collection: str) -> list[dict[str, Any]]:
        with _store_call("list documents", collection):
            pairs = await self._store.get_all(collection)
        return [_merge(document_id, fields) for document_id, fields in pairs]

    async def get_by_id(self, collection: str, document_id: str) -> dict[str, Any]:
        with _store_call("get document", collection):
            exists, fields = await self._store.get(collection, document_id)
        if not exists:
            raise NotFoundError("Document not found.")
        return _merge(document_id, fields)

    async def add(self, collection: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        data = _without_id(fields)
        with _store_call("add document", collection):
            document_id = await self._store.add(collection, data)
        logger.debug("document_added collection=%s id=%s", collection, document_id)
        return _merge(document_id, data)

    async def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        """
        Merge `fields` into the stored document and return the result.

        Fields not present in `fields` keep their stored values.
        """
        with _store_call("update document", collection):
            touched = await self._store.update(collection, document_id, _without_id(fields))
        if not touched:
            raise NotFoundError("Document not found.")
        logger.debug("document_updated collection=%s id=%s", collection, document_id)
        return await self.get_by_id(collection, document_id)

    async def delete(self, collection: str, document_id: str) -> dict[str, Any]:
        with _store_call("delete document", collection):
            deleted = await self._store.delete(collection, document_id)
        if not deleted:
            raise NotFoundError("Document not found.")
        logger.debug("document_deleted collection=%s id=%s", collection, document_id)
        return {"id": document_id, "deleted": True}

    async def query(
        self,
        collection: str,
        predicates: Iterable[Predicate | Sequence[Any]] | None = None,
    ) -> list[dict[str, Any]]:
        parsed = parse_predicates(predicates)
        if not parsed:
            return await self.list_all(collection)

        with _store_call("query documents", collection):
            pairs = await self._store.query(collection, parsed)
        return [_merge(document_id, fields) for document_id, fields in pairs]
