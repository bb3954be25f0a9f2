"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from auth import dependencies as auth_dependencies
from auth.schemas import UserResponse
from core.schemas import ApiResponse
from core.validation import require_entity_id

from .service import UsersService

router = APIRouter(prefix="/users")


def get_users_service(request: Request) -> UsersService:
    return request.app.state.users_service


@router.get("/{user_id}")
async def get_user_by_id(
    user_id: str,
    _: dict = Depends(auth_dependencies.get_current_user),
    users_service: UsersService = Depends(get_users_service),
) -> ApiResponse[UserResponse]:
    user = await users_service.get_user_by_id(require_entity_id(user_id))
    return ApiResponse(success=True, data=UserResponse(**user))
