"""
Response envelope shared by every JSON endpoint.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    message: str | None = None
    data: T | None = None
    error: Any = None


class DeletedResponse(BaseModel):
    id: str
    deleted: bool
