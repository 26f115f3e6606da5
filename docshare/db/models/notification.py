from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Uuid

from docshare.db.base import BaseModel


class Notification(BaseModel):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_recipient_created", "recipient_id", "created_at"),)

    recipient_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False)
    type = Column(String(16), nullable=False)
    # Слабая ссылка: уведомление переживает удаление документа
    document_id = Column(Uuid(as_uuid=True), nullable=False)
    message = Column(String(512), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
