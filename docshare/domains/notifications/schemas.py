from pydantic import BaseModel, ConfigDict
from typing import List, Optional
import uuid
from datetime import datetime

from docshare.domains.notifications.entities import NotificationPage, NotificationType, PollResult


class NotificationResponse(BaseModel):
    """Схема для ответа с данными уведомления"""
    id: uuid.UUID
    recipient_id: uuid.UUID
    sender_id: uuid.UUID
    type: NotificationType
    document_id: uuid.UUID
    message: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    """Лента уведомлений, новые первыми"""
    success: bool = True
    notifications: List[NotificationResponse]
    unread_count: int
    latest_timestamp: Optional[datetime]
    has_more: bool

    @classmethod
    def from_page(cls, page: NotificationPage) -> "NotificationListResponse":
        return cls(
            notifications=[NotificationResponse.model_validate(item) for item in page.items],
            unread_count=page.unread_count,
            latest_timestamp=page.latest_timestamp,
            has_more=page.has_more
        )


class NotificationCheckResponse(BaseModel):
    success: bool = True
    has_new: bool
    new_count: int
    unread_count: int
    latest_timestamp: Optional[datetime]

    @classmethod
    def from_poll(cls, poll: PollResult) -> "NotificationCheckResponse":
        return cls(
            has_new=poll.has_new,
            new_count=poll.new_count,
            unread_count=poll.unread_count,
            latest_timestamp=poll.latest_timestamp
        )


class NotificationReadResponse(BaseModel):
    success: bool = True
    notification: NotificationResponse


class NotificationReadAllResponse(BaseModel):
    success: bool = True
    updated: int
