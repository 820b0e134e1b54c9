from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid

from app.db.models.notification import NotificationType


class NotificationResponse(BaseModel):
    """Схема уведомления"""
    uuid: uuid.UUID
    type: NotificationType
    title: str
    message: str
    related_id: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
