"""
Task API endpoints. Every route requires a bearer token.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from auth import dependencies as auth_dependencies
from core.schemas import ApiResponse, DeletedResponse
from core.validation import require_entity_id, require_valid

from . import schemas
from .service import TasksService

router = APIRouter(prefix="/tasks")


def get_tasks_service(request: Request) -> TasksService:
    return request.app.state.tasks_service


@router.get("")
async def get_all_tasks(
    _: dict = Depends(auth_dependencies.get_current_user),
    tasks_service: TasksService = Depends(get_tasks_service),
) -> ApiResponse[list[schemas.TaskResponse]]:
    tasks = await tasks_service.get_all_tasks()
    return ApiResponse(success=True, data=[schemas.TaskResponse(**task) for task in tasks])


@router.get("/owner/{owner_id}")
async def get_tasks_by_owner_id(
    owner_id: str,
    _: dict = Depends(auth_dependencies.get_current_user),
    tasks_service: TasksService = Depends(get_tasks_service),
) -> ApiResponse[list[schemas.TaskResponse]]:
    tasks = await tasks_service.get_tasks_by_owner_id(require_entity_id(owner_id))
    return ApiResponse(success=True, data=[schemas.TaskResponse(**task) for task in tasks])


@router.get("/{task_id}")
async def get_task_by_id(
    task_id: str,
    _: dict = Depends(auth_dependencies.get_current_user),
    tasks_service: TasksService = Depends(get_tasks_service),
) -> ApiResponse[schemas.TaskResponse]:
    task = await tasks_service.get_task_by_id(require_entity_id(task_id))
    return ApiResponse(success=True, data=schemas.TaskResponse(**task))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: Any = Body(default=None),
    _: dict = Depends(auth_dependencies.get_current_user),
    tasks_service: TasksService = Depends(get_tasks_service),
) -> ApiResponse[schemas.TaskResponse]:
    body = require_valid(schemas.TaskCreateRequest, payload)
    task = await tasks_service.create_task(body.model_dump())
    return ApiResponse(success=True, data=schemas.TaskResponse(**task))


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    payload: Any = Body(default=None),
    _: dict = Depends(auth_dependencies.get_current_user),
    tasks_service: TasksService = Depends(get_tasks_service),
) -> ApiResponse[schemas.TaskResponse]:
    task_id = require_entity_id(task_id)
    body = require_valid(schemas.TaskUpdateRequest, payload)
    task = await tasks_service.update_task(task_id, body.changes())
    return ApiResponse(success=True, data=schemas.TaskResponse(**task))


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    _: dict = Depends(auth_dependencies.get_current_user),
    tasks_service: TasksService = Depends(get_tasks_service),
) -> ApiResponse[DeletedResponse]:
    deleted = await tasks_service.delete_task(require_entity_id(task_id))
    return ApiResponse(
        success=True,
        message="Task deleted successfully",
        data=DeletedResponse(**deleted),
    )
