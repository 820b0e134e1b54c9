from app.domains.notifications.entities import Notification
from app.domains.notifications.schemas import NotificationResponse, NotificationListResponse
from app.domains.notifications.services import NotificationService

__all__ = [
    "Notification",
    "NotificationResponse", "NotificationListResponse",
    "NotificationService"
]
