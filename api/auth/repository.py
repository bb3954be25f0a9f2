"""
Identity persistence on top of the `users` document collection.
"""

from __future__ import annotations

from documents.repository import DocumentRepository

USERS_COLLECTION = "users"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserRepository:
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    async def create_user(self, *, email: str, password_hash: str) -> dict:
        return await self._documents.add(
            USERS_COLLECTION,
            {"email": normalize_email(email), "passwordHash": password_hash},
        )

    async def get_user_by_email(self, email: str) -> dict | None:
        rows = await self._documents.query(
            USERS_COLLECTION,
            [("email", "==", normalize_email(email))],
        )
        return rows[0] if rows else None

    async def get_user_by_id(self, user_id: str) -> dict:
        return await self._documents.get_by_id(USERS_COLLECTION, user_id)


def public_user(user_row: dict) -> dict:
    """
    Identity without its password hash.
    """
    return {key: value for key, value in user_row.items() if key != "passwordHash"}
