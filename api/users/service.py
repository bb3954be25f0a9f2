"""
User lookups for the users API.
"""

from __future__ import annotations

from typing import Any

from auth.repository import UserRepository, public_user
from documents.repository import DocumentRepository


class UsersService:
    def __init__(self, documents: DocumentRepository):
        self._users = UserRepository(documents)

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        return public_user(await self._users.get_user_by_id(user_id))
