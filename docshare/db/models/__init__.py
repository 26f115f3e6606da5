from docshare.db.models.user import User
from docshare.db.models.document import Document, DocumentGrant, DocumentHistory
from docshare.db.models.notification import Notification

__all__ = [
    "User",
    "Document",
    "DocumentGrant",
    "DocumentHistory",
    "Notification"
]
