from typing import List, Optional
import uuid

from docshare.core.errors import NotFound, ValidationFailed
from docshare.core.resilience import bounded
from docshare.domains.identity.contracts import IdentityDirectory
from docshare.domains.identity.entities import Identity

MIN_SEARCH_LENGTH = 2


class IdentityService:
    """Сервис для поиска пользователей и просмотра профилей"""

    def __init__(self, directory: IdentityDirectory, timeout: float):
        self.directory = directory
        self.timeout = timeout

    async def _call(self, awaitable):
        return await bounded(awaitable, self.timeout, "Identity directory")

    async def search_users(self, query: str, requester_id: Optional[uuid.UUID] = None, limit: int = 10) -> List[Identity]:
        """Поиск пользователей по имени или email, исключая самого пользователя"""
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            raise ValidationFailed.for_field("q", "Search query must be at least 2 characters")

        return list(await self._call(self.directory.search(query, exclude_id=requester_id, limit=limit)))

    async def get_user_profile(self, user_id: uuid.UUID) -> Identity:
        """Получение профиля пользователя"""
        user = await self._call(self.directory.find_by_id(user_id))
        if user is None:
            raise NotFound("User not found")
        return user
