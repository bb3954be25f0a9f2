"""
Query predicates: `(field, operator, value)` triples applied conjunctively.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from core.errors import QueryError

OPERATORS = frozenset({"==", "!=", "<", "<=", ">", ">=", "in", "array-contains"})


@dataclass(frozen=True)
class Predicate:
    field: str
    operator: str
    value: Any


def parse_predicate(raw: Predicate | Sequence[Any]) -> Predicate:
    if isinstance(raw, Predicate):
        predicate = raw
    else:
        if isinstance(raw, (str, bytes)) or len(raw) != 3:
            raise QueryError(f"Predicate must be a (field, operator, value) triple, got {raw!r}.")
        field, operator, value = raw
        predicate = Predicate(field=field, operator=operator, value=value)

    if not isinstance(predicate.field, str) or not predicate.field.strip():
        raise QueryError("Predicate field must be a non-empty string.")
    if predicate.operator not in OPERATORS:
        raise QueryError(f"Unsupported predicate operator: {predicate.operator!r}.")
    if predicate.operator == "in" and not isinstance(predicate.value, (list, tuple)):
        raise QueryError("The 'in' operator needs a list value.")
    return predicate


def parse_predicates(raw: Iterable[Predicate | Sequence[Any]] | None) -> list[Predicate]:
    return [parse_predicate(item) for item in (raw or ())]
