import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence
import uuid

from docshare.core.errors import NotFound, ValidationFailed
from docshare.core.resilience import bounded
from docshare.domains.notifications.contracts import NotificationStore
from docshare.domains.notifications.entities import (
    FailedNotification, FanOutResult, Notification, NotificationDraft, NotificationPage, PollResult
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationService:
    """Создание уведомлений о событиях совместной работы и чтение ленты получателя"""

    def __init__(
        self,
        store: NotificationStore,
        timeout: float,
        page_size: int = 20,
        clock: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.timeout = timeout
        self.page_size = page_size
        self.clock = clock

    async def _call(self, awaitable):
        return await bounded(awaitable, self.timeout, "Notification store")

    async def create(self, draft: NotificationDraft) -> Notification:
        """Сохранение одного уведомления"""
        notification = Notification.from_draft(draft, created_at=self.clock())
        return await self._call(self.store.create(notification))

    async def fan_out(self, drafts: Sequence[NotificationDraft]) -> FanOutResult:
        """Создание уведомлений независимыми задачами.

        Ошибка для одного получателя не отменяет остальные: она
        журналируется и возвращается в `failed`.
        """
        result = FanOutResult()
        if not drafts:
            return result

        outcomes = await asyncio.gather(
            *(self.create(draft) for draft in drafts),
            return_exceptions=True
        )

        for draft, outcome in zip(drafts, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    f"Notification creation failed for recipient {draft.recipient_id} "
                    f"(document {draft.document_id}): {outcome}"
                )
                result.failed.append(FailedNotification(draft=draft, error=str(outcome)))
            else:
                result.created.append(outcome)

        return result

    async def list_for_recipient(
        self,
        recipient_id: uuid.UUID,
        since: Optional[datetime] = None,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> NotificationPage:
        """Лента получателя, новые первыми"""
        page_size = page_size or self.page_size
        if page < 1 or page_size < 1:
            raise ValidationFailed.for_field("page", "Page and page size must be positive")

        items, unread_count, latest = await self._call(asyncio.gather(
            self.store.list_for_recipient(
                recipient_id, since=since, limit=page_size, offset=(page - 1) * page_size
            ),
            self.store.count_unread(recipient_id),
            self.store.latest_timestamp(recipient_id),
        ))

        return NotificationPage(
            items=items,
            unread_count=unread_count,
            latest_timestamp=latest,
            # Приблизительно: полная страница означает "возможно, есть еще"
            has_more=len(items) == page_size
        )

    async def poll_since(self, recipient_id: uuid.UUID, since: Optional[datetime] = None) -> PollResult:
        """Легкая проверка новых уведомлений: только счетчики"""
        new_count, unread_count, latest = await self._call(asyncio.gather(
            self.store.count_since(recipient_id, since),
            self.store.count_unread(recipient_id),
            self.store.latest_timestamp(recipient_id),
        ))

        return PollResult(
            has_new=new_count > 0,
            new_count=new_count,
            unread_count=unread_count,
            latest_timestamp=latest
        )

    async def mark_read(self, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> Notification:
        """Чужое уведомление неотличимо от отсутствующего"""
        notification = await self._call(self.store.mark_read(notification_id, recipient_id))
        if notification is None:
            raise NotFound("Notification not found")
        return notification

    async def mark_all_read(self, recipient_id: uuid.UUID) -> int:
        count = await self._call(self.store.mark_all_read(recipient_id))
        logger.info(f"Marked {count} notification(s) as read for {recipient_id}")
        return count

