"""
Task business logic on top of the `tasks` document collection.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from documents.repository import DocumentRepository

TASKS_COLLECTION = "tasks"
TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_dates(task: dict[str, Any]) -> dict[str, Any]:
    parsed = dict(task)
    for key in TIMESTAMP_FIELDS:
        value = parsed.get(key)
        if isinstance(value, str) and value:
            parsed[key] = datetime.fromisoformat(value)
    return parsed


class TasksService:
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    async def get_all_tasks(self) -> list[dict[str, Any]]:
        tasks = await self._documents.list_all(TASKS_COLLECTION)
        return [_parse_dates(task) for task in tasks]

    async def get_task_by_id(self, task_id: str) -> dict[str, Any]:
        return _parse_dates(await self._documents.get_by_id(TASKS_COLLECTION, task_id))

    async def get_tasks_by_owner_id(self, owner_id: str) -> list[dict[str, Any]]:
        tasks = await self._documents.query(TASKS_COLLECTION, [("ownerId", "==", owner_id)])
        return [_parse_dates(task) for task in tasks]

    async def create_task(self, fields: dict[str, Any]) -> dict[str, Any]:
        now = _utc_now_iso()
        created = await self._documents.add(
            TASKS_COLLECTION,
            {**fields, "createdAt": now, "updatedAt": now},
        )
        return _parse_dates(created)

    async def update_task(self, task_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        # createdAt is owned by create_task.
        patch = {key: value for key, value in changes.items() if key != "createdAt"}
        patch["updatedAt"] = _utc_now_iso()
        updated = await self._documents.update(TASKS_COLLECTION, task_id, patch)
        return _parse_dates(updated)

    async def delete_task(self, task_id: str) -> dict[str, Any]:
        return await self._documents.delete(TASKS_COLLECTION, task_id)
