"""
Auth API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from core.schemas import ApiResponse
from core.validation import require_valid

from . import schemas
from .dependencies import get_auth_service
from .service import AuthService

router = APIRouter(prefix="/auth")


@router.post("/login")
async def login(
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[schemas.TokenResponse]:
    body = require_valid(schemas.AuthRequest, payload)
    token = await auth_service.login(body.email, body.password)
    return ApiResponse(success=True, data=schemas.TokenResponse(token=token))


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[schemas.UserResponse]:
    body = require_valid(schemas.AuthRequest, payload)
    user = await auth_service.register(body.email, body.password)
    return ApiResponse(success=True, data=schemas.UserResponse(**user))


@router.post("/validate-email")
async def validate_email(
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[schemas.IsValidResponse]:
    body = require_valid(schemas.ValidateEmailRequest, payload)
    is_valid = await auth_service.validate_email(body.email)
    return ApiResponse(
        success=True,
        message="Email verified successfully",
        data=schemas.IsValidResponse(isValid=is_valid),
    )


@router.post("/validate-token")
async def validate_token(
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[schemas.IsValidResponse]:
    body = require_valid(schemas.ValidateTokenRequest, payload)
    auth_service.validate_token(body.token)
    return ApiResponse(success=True, data=schemas.IsValidResponse(isValid=True))
