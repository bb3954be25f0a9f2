"""
Auth security helpers: bcrypt password hashes and signed access tokens.
"""

from __future__ import annotations

import time
from typing import Any

import bcrypt
import jwt

from core.config import AuthSettings
from core.errors import InvalidPasswordError, InvalidTokenError

REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]

# bcrypt only reads the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str, *, rounds: int = 10) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise InvalidPasswordError("Password is empty.")
    if len(password) > MAX_PASSWORD_BYTES:
        raise InvalidPasswordError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    try:
        return bcrypt.hashpw(password, bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    except ValueError as exc:
        raise InvalidPasswordError("Password cannot be hashed.") from exc


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(*, user_id: str, email: str, settings: AuthSettings) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + int(settings.token_expiry.total_seconds())

    payload = {
        "sub": str(user_id),
        "id": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: AuthSettings) -> dict[str, Any]:
    """
    Verify signature and expiry; any failure is an `InvalidTokenError`.
    """
    raw = (token or "").strip()
    if not raw:
        raise InvalidTokenError("Access token is empty.")

    try:
        payload = jwt.decode(
            raw,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError("Invalid or expired token.") from exc

    payload.setdefault("id", payload["sub"])
    return payload
