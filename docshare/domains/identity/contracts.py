from typing import List, Optional, Protocol, Sequence
import uuid

from docshare.domains.identity.entities import Identity


class IdentityDirectory(Protocol):
    """Каталог пользователей, которым пользуется ядро"""

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[Identity]:
        ...

    async def find_by_name_prefix(self, token: str) -> Sequence[Identity]:
        """Регистронезависимый префиксный поиск по первому слову отображаемого имени"""
        ...

    async def find_by_email(self, email: str) -> Optional[Identity]:
        ...

    async def search(
        self, query: str, exclude_id: Optional[uuid.UUID] = None, limit: int = 10
    ) -> List[Identity]:
        ...
