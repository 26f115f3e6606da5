from docshare.domains.notifications.entities import Notification, NotificationDraft, NotificationType
from docshare.domains.notifications.services import NotificationService

__all__ = ["Notification", "NotificationDraft", "NotificationType", "NotificationService"]
