from datetime import datetime
from typing import List, Optional, Protocol
import uuid

from docshare.domains.notifications.entities import Notification


class NotificationStore(Protocol):
    """Хранилище уведомлений; все выборки ограничены получателем"""

    async def create(self, notification: Notification) -> Notification:
        ...

    async def get_for_recipient(self, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> Optional[Notification]:
        ...

    async def list_for_recipient(
        self,
        recipient_id: uuid.UUID,
        since: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Notification]:
        """Новые первыми"""
        ...

    async def count_unread(self, recipient_id: uuid.UUID) -> int:
        ...

    async def count_since(self, recipient_id: uuid.UUID, since: Optional[datetime] = None) -> int:
        ...

    async def latest_timestamp(self, recipient_id: uuid.UUID) -> Optional[datetime]:
        ...

    async def mark_read(self, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> Optional[Notification]:
        ...

    async def mark_all_read(self, recipient_id: uuid.UUID) -> int:
        ...
