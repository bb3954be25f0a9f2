"""
Auth business logic: registration, login and token verification.

Errors are the core kinds from `core.errors`; the HTTP mapping lives in
`main.py`. Email uniqueness is checked before insert, so two concurrent
registrations of the same address can both succeed.
"""

from __future__ import annotations

import logging
from typing import Any

from core.config import AuthSettings
from core.errors import (
    ConflictError,
    InvalidCredentialError,
    InvalidTokenError,
    NotFoundError,
    PersistenceError,
)
from documents.repository import DocumentRepository

from . import security
from .repository import UserRepository, normalize_email, public_user

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, documents: DocumentRepository, settings: AuthSettings):
        self._users = UserRepository(documents)
        self._settings = settings

    async def register(self, email: str, password: str) -> dict[str, Any]:
        """
        Create an identity and return it as `{id, email}`.

        The stored hash is not part of the returned shape.
        """
        existing = await self._users.get_user_by_email(email)
        if existing is not None:
            raise ConflictError("Email is already registered.")

        password_hash = security.hash_password(password, rounds=self._settings.bcrypt_rounds)
        try:
            user_row = await self._users.create_user(email=email, password_hash=password_hash)
        except PersistenceError as exc:
            raise PersistenceError(f"Error creating user: {exc}") from exc

        logger.info("user_registered user_id=%s", user_row["id"])
        return public_user(user_row)

    async def login(self, email: str, password: str) -> str:
        user_row = await self.get_user_by_email(email)

        if not security.verify_password(password, str(user_row.get("passwordHash") or "")):
            logger.info("login_rejected user_id=%s reason=password_mismatch", user_row["id"])
            raise InvalidCredentialError("Invalid password.")

        return security.build_access_token(
            user_id=str(user_row["id"]),
            email=str(user_row["email"]),
            settings=self._settings,
        )

    async def validate_email(self, email: str) -> bool:
        await self.get_user_by_email(email)
        return True

    def validate_token(self, token: str) -> dict[str, Any]:
        return security.decode_access_token(token, self._settings)

    async def get_user_by_email(self, email: str) -> dict[str, Any]:
        user_row = await self._users.get_user_by_email(email)
        if user_row is None:
            raise NotFoundError("User not found.")
        return user_row

    async def get_user_from_access_token(self, access_token: str) -> dict[str, Any]:
        payload = self.validate_token(access_token)
        user_row = await self.get_user_by_email(normalize_email(str(payload["email"])))
        if str(user_row["id"]) != str(payload["sub"]):
            raise InvalidTokenError("Token subject does not match the account.")
        return public_user(user_row)
