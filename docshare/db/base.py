import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import declarative_base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Базовый класс для моделей
Base = declarative_base()


class BaseModel(Base):
    """Общие колонки сущностей с UUID-идентификатором"""
    __abstract__ = True

    uuid = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite возвращает наивные datetime; все время в системе хранится в UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
