from docshare.db.repositories.user_repository import UserRepository
from docshare.db.repositories.document_repository import DocumentRepository
from docshare.db.repositories.notification_repository import NotificationRepository

__all__ = [
    "UserRepository",
    "DocumentRepository",
    "NotificationRepository"
]
