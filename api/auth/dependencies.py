"""
Auth dependencies for protected FastAPI routes.

`get_current_user` is the authorization gate: every failure becomes the same
401 response, and the specific reason is only logged.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, Request, status

from core.errors import AppError

from .service import AuthService

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "Not authorized."


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=NOT_AUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        logger.info("auth_denied reason=missing_authorization_header")
        raise _unauthorized()

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        logger.info("auth_denied reason=malformed_authorization_header")
        raise _unauthorized()

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        logger.info("auth_denied reason=not_a_bearer_token")
        raise _unauthorized()
    return token


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(
    request: Request,
    access_token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    try:
        user = await auth_service.get_user_from_access_token(access_token)
    except AppError as exc:
        logger.info("auth_denied reason=%s detail=%s", type(exc).__name__, exc)
        raise _unauthorized() from exc

    request.state.user = user
    return user
