"""
Explicit input validation for request payloads.

Routers call `require_valid(schema, payload)` at the entry boundary before
touching any service. Violations come back as a flat list of
`{"field": ..., "message": ...}` dicts, which the error handler returns as-is.
"""

from __future__ import annotations

import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import RequestValidationFailed

M = TypeVar("M", bound=BaseModel)

_ENTITY_ID_RE = re.compile(r"^[A-Za-z0-9]+$")


def _violation(error: dict[str, Any]) -> dict[str, str]:
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    return {"field": field, "message": str(error.get("msg") or "Invalid value.")}


def validate_payload(schema: type[M], payload: Any) -> tuple[M | None, list[dict[str, str]]]:
    """
    Validate `payload` against `schema`.

    Returns `(model, [])` on success and `(None, violations)` otherwise.
    """
    try:
        return schema.model_validate(payload), []
    except ValidationError as exc:
        return None, [_violation(err) for err in exc.errors()]


def require_valid(schema: type[M], payload: Any) -> M:
    model, violations = validate_payload(schema, payload)
    if violations or model is None:
        raise RequestValidationFailed(violations)
    return model


def entity_id_violations(value: str, *, field: str = "id") -> list[dict[str, str]]:
    if not value:
        return [{"field": field, "message": "Must not be empty."}]
    if not _ENTITY_ID_RE.match(value):
        return [{"field": field, "message": "Must contain only letters and digits."}]
    return []


def require_entity_id(value: str, *, field: str = "id") -> str:
    violations = entity_id_violations(value, field=field)
    if violations:
        raise RequestValidationFailed(violations)
    return value
