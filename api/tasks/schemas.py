"""
Pydantic schemas for task endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, StrictBool, model_validator

ALNUM_PATTERN = r"^[A-Za-z0-9]+$"


class TaskCreateRequest(BaseModel):
    ownerId: str = Field(..., min_length=1, max_length=128, pattern=ALNUM_PATTERN)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1, max_length=5000)
    isCompleted: StrictBool = False


class TaskUpdateRequest(BaseModel):
    ownerId: str | None = Field(default=None, min_length=1, max_length=128, pattern=ALNUM_PATTERN)
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    isCompleted: StrictBool | None = None

    @model_validator(mode="after")
    def _has_changes(self) -> TaskUpdateRequest:
        if not self.changes():
            raise ValueError("Provide at least one field to update.")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class TaskResponse(BaseModel):
    id: str
    ownerId: str
    title: str
    description: str
    isCompleted: bool
    createdAt: datetime | None = None
    updatedAt: datetime | None = None
