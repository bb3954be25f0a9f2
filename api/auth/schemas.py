"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

from .security import MAX_PASSWORD_BYTES


class ValidateEmailRequest(BaseModel):
    email: EmailStr


class AuthRequest(ValidateEmailRequest):
    password: str = Field(..., min_length=6, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded.")
        return value


class ValidateTokenRequest(BaseModel):
    token: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    email: str


class TokenResponse(BaseModel):
    token: str


class IsValidResponse(BaseModel):
    isValid: bool
