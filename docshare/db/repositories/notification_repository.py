from datetime import datetime
from typing import List, Optional
import uuid

from sqlalchemy import select, update, func

from docshare.core.db import Database
from docshare.db.models.notification import Notification as NotificationModel
from docshare.db.base import as_utc
from docshare.domains.notifications.entities import Notification, NotificationType


class NotificationRepository:
    """Репозиторий для работы с уведомлениями"""

    def __init__(self, database: Database):
        self.database = database

    async def create(self, notification: Notification) -> Notification:
        """Создание нового уведомления"""
        db_notification = NotificationModel(
            uuid=notification.id,
            recipient_id=notification.recipient_id,
            sender_id=notification.sender_id,
            type=notification.type.value,
            document_id=notification.document_id,
            message=notification.message,
            is_read=notification.is_read,
            created_at=as_utc(notification.created_at)
        )

        async with self.database.session() as session:
            session.add(db_notification)
            await session.commit()
            await session.refresh(db_notification)
            return self._to_domain(db_notification)

    async def get_for_recipient(
        self, notification_id: uuid.UUID, recipient_id: uuid.UUID
    ) -> Optional[Notification]:
        """Уведомление, только если оно адресовано recipient_id"""
        async with self.database.session() as session:
            result = await session.execute(
                select(NotificationModel).where(
                    NotificationModel.uuid == notification_id,
                    NotificationModel.recipient_id == recipient_id
                )
            )
            db_notification = result.scalar_one_or_none()
            return self._to_domain(db_notification) if db_notification else None

    async def list_for_recipient(
        self,
        recipient_id: uuid.UUID,
        since: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Notification]:
        """Уведомления получателя, новые первыми"""
        stmt = select(NotificationModel).where(NotificationModel.recipient_id == recipient_id)
        if since is not None:
            stmt = stmt.where(NotificationModel.created_at > as_utc(since))

        async with self.database.session() as session:
            result = await session.execute(
                stmt
                .order_by(NotificationModel.created_at.desc(), NotificationModel.uuid.asc())
                .offset(offset)
                .limit(limit)
            )
            return [self._to_domain(item) for item in result.scalars().all()]

    async def count_unread(self, recipient_id: uuid.UUID) -> int:
        """Подсчет непрочитанных уведомлений"""
        async with self.database.session() as session:
            count = await session.scalar(
                select(func.count(NotificationModel.uuid)).where(
                    NotificationModel.recipient_id == recipient_id,
                    NotificationModel.is_read.is_(False)
                )
            )
            return count or 0

    async def count_since(self, recipient_id: uuid.UUID, since: Optional[datetime] = None) -> int:
        """Подсчет уведомлений новее since (всех, если since не задан)"""
        stmt = select(func.count(NotificationModel.uuid)).where(NotificationModel.recipient_id == recipient_id)
        if since is not None:
            stmt = stmt.where(NotificationModel.created_at > as_utc(since))

        async with self.database.session() as session:
            return (await session.scalar(stmt)) or 0

    async def latest_timestamp(self, recipient_id: uuid.UUID) -> Optional[datetime]:
        """Время самого свежего уведомления получателя"""
        async with self.database.session() as session:
            latest = await session.scalar(
                select(func.max(NotificationModel.created_at))
                .where(NotificationModel.recipient_id == recipient_id)
            )
            return as_utc(latest)

    async def mark_read(self, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> Optional[Notification]:
        """Отметка о прочтении; чужие уведомления не затрагиваются"""
        async with self.database.session() as session:
            result = await session.execute(
                update(NotificationModel)
                .where(
                    NotificationModel.uuid == notification_id,
                    NotificationModel.recipient_id == recipient_id
                )
                .values(is_read=True)
            )
            await session.commit()

            if result.rowcount == 0:
                return None

        return await self.get_for_recipient(notification_id, recipient_id)

    async def mark_all_read(self, recipient_id: uuid.UUID) -> int:
        """Отметка о прочтении всех уведомлений получателя"""
        async with self.database.session() as session:
            result = await session.execute(
                update(NotificationModel)
                .where(
                    NotificationModel.recipient_id == recipient_id,
                    NotificationModel.is_read.is_(False)
                )
                .values(is_read=True)
            )
            await session.commit()
            return result.rowcount

    def _to_domain(self, db_notification: NotificationModel) -> Notification:
        """Преобразование модели БД в доменную сущность"""
        return Notification(
            id=db_notification.uuid,
            recipient_id=db_notification.recipient_id,
            sender_id=db_notification.sender_id,
            type=NotificationType(db_notification.type),
            document_id=db_notification.document_id,
            message=db_notification.message,
            is_read=bool(db_notification.is_read),
            created_at=as_utc(db_notification.created_at)
        )
