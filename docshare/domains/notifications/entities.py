import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class NotificationType(str, Enum):
    MENTION = "mention"
    SHARE = "share"


@dataclass(frozen=True)
class NotificationDraft:
    """Уведомление до сохранения"""
    recipient_id: uuid.UUID
    sender_id: uuid.UUID
    type: NotificationType
    document_id: uuid.UUID
    message: str


@dataclass(frozen=True)
class Notification:
    id: uuid.UUID
    recipient_id: uuid.UUID
    sender_id: uuid.UUID
    type: NotificationType
    document_id: uuid.UUID
    message: str
    is_read: bool
    created_at: datetime

    @classmethod
    def from_draft(cls, draft: NotificationDraft, created_at: datetime) -> "Notification":
        return cls(
            id=uuid.uuid4(),
            recipient_id=draft.recipient_id,
            sender_id=draft.sender_id,
            type=draft.type,
            document_id=draft.document_id,
            message=draft.message,
            is_read=False,
            created_at=created_at
        )


@dataclass
class NotificationPage:
    items: List[Notification]
    unread_count: int
    latest_timestamp: Optional[datetime]
    has_more: bool


@dataclass
class PollResult:
    has_new: bool
    new_count: int
    unread_count: int
    latest_timestamp: Optional[datetime]


@dataclass
class FailedNotification:
    draft: NotificationDraft
    error: str


@dataclass
class FanOutResult:
    created: List[Notification] = field(default_factory=list)
    failed: List[FailedNotification] = field(default_factory=list)
