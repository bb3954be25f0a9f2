"""
Document store over PostgreSQL `jsonb` (raw SQL through `core.db`).

Every collection lives in one `documents` table keyed by
`(collection, id)`. Fields are the `data` object; identifiers are assigned
here, never by callers.

Predicate SQL:
- field names are bound as text parameters (`data -> $n::text`)
- values are bound as JSON text and cast (`$n::text::jsonb`), so `None` is
  the JSON `null` and never SQL NULL
- range operators only match values of the same JSON type
"""

from __future__ import annotations

import json
import secrets
import string
from typing import Any, Protocol

from core import db

from .predicates import Predicate

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 20

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    collection text NOT NULL,
    id text NOT NULL,
    data jsonb NOT NULL DEFAULT '{}'::jsonb,
    created_at timestamptz NOT NULL DEFAULT now(),
    updated_at timestamptz NOT NULL DEFAULT now(),
    PRIMARY KEY (collection, id)
)
"""

_COMPARISONS = {"==": "=", "!=": "<>", "<": "<", "<=": "<=", ">": ">", ">=": ">="}


def new_document_id() -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


class DocumentStore(Protocol):
    async def get_all(self, collection: str) -> list[tuple[str, dict[str, Any]]]: ...

    async def get(self, collection: str, document_id: str) -> tuple[bool, dict[str, Any]]: ...

    async def add(self, collection: str, fields: dict[str, Any]) -> str: ...

    async def update(self, collection: str, document_id: str, fields: dict[str, Any]) -> bool: ...

    async def delete(self, collection: str, document_id: str) -> bool: ...

    async def query(self, collection: str, predicates: list[Predicate]) -> list[tuple[str, dict[str, Any]]]: ...


def _predicate_sql(predicate: Predicate, field_param: int, value_param: int) -> tuple[str, Any]:
    """
    Return the SQL condition for one predicate and the value to bind.
    """
    field = f"data -> ${field_param}::text"
    value = f"${value_param}::text::jsonb"

    if predicate.operator in ("==", "!="):
        return f"{field} {_COMPARISONS[predicate.operator]} {value}", predicate.value

    if predicate.operator in _COMPARISONS:
        # jsonb orders across types (string < number < ...); keep comparisons within one type.
        sql = (
            f"jsonb_typeof({field}) = jsonb_typeof({value}) "
            f"AND {field} {_COMPARISONS[predicate.operator]} {value}"
        )
        return sql, predicate.value

    if predicate.operator == "in":
        return f"{field} IS NOT NULL AND {value} @> jsonb_build_array({field})", list(predicate.value)

    if predicate.operator == "array-contains":
        sql = f"jsonb_typeof({field}) = 'array' AND {field} @> jsonb_build_array({value})"
        return sql, predicate.value

    raise ValueError(f"Unsupported predicate operator: {predicate.operator!r}.")


def build_query(collection: str, predicates: list[Predicate]) -> tuple[str, list[Any]]:
    """
    Compose the SELECT for a conjunction of predicates.
    """
    args: list[Any] = [collection]
    conditions = ["collection = $1"]
    for predicate in predicates:
        field_param, value_param = len(args) + 1, len(args) + 2
        condition, value = _predicate_sql(predicate, field_param, value_param)
        conditions.append(f"({condition})")
        args.extend([predicate.field, json.dumps(value)])

    sql = (
        "SELECT id, data FROM documents WHERE "
        + " AND ".join(conditions)
        + " ORDER BY created_at, id"
    )
    return sql, args


def _rows_to_pairs(rows: list[dict[str, Any]]) -> list[tuple[str, dict[str, Any]]]:
    return [(str(row["id"]), dict(row["data"] or {})) for row in rows]


class PostgresDocumentStore:
    async def ensure_schema(self) -> None:
        await db.execute(SCHEMA_SQL)

    async def get_all(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        rows = await db.fetch_all(
            """
            SELECT id, data
            FROM documents
            WHERE collection = $1
            ORDER BY created_at, id
            """,
            collection,
        )
        return _rows_to_pairs(rows)

    async def get(self, collection: str, document_id: str) -> tuple[bool, dict[str, Any]]:
        row = await db.fetch_one(
            """
            SELECT data
            FROM documents
            WHERE collection = $1
              AND id = $2
            """,
            collection,
            document_id,
        )
        if row is None:
            return False, {}
        return True, dict(row["data"] or {})

    async def add(self, collection: str, fields: dict[str, Any]) -> str:
        row = await db.fetch_one(
            """
            INSERT INTO documents (collection, id, data)
            VALUES ($1, $2, $3::jsonb)
            RETURNING id
            """,
            collection,
            new_document_id(),
            fields,
        )
        if row is None:
            raise RuntimeError("Failed to insert document.")
        return str(row["id"])

    async def update(self, collection: str, document_id: str, fields: dict[str, Any]) -> bool:
        row = await db.fetch_one(
            """
            UPDATE documents
            SET data = data || $3::jsonb,
                updated_at = now()
            WHERE collection = $1
              AND id = $2
            RETURNING id
            """,
            collection,
            document_id,
            fields,
        )
        return row is not None

    async def delete(self, collection: str, document_id: str) -> bool:
        row = await db.fetch_one(
            """
            DELETE FROM documents
            WHERE collection = $1
              AND id = $2
            RETURNING id
            """,
            collection,
            document_id,
        )
        return row is not None

    async def query(self, collection: str, predicates: list[Predicate]) -> list[tuple[str, dict[str, Any]]]:
        sql, args = build_query(collection, predicates)
        rows = await db.fetch_all(sql, *args)
        return _rows_to_pairs(rows)
