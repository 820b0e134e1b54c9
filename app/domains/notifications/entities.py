import uuid
from datetime import datetime
from typing import Optional

from app.db.models.notification import NotificationType


class Notification:
    """Уведомление пользователя"""

    def __init__(
        self,
        uuid: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        user_id: uuid.UUID,
        related_id: Optional[str] = None,
        is_read: bool = False,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.type = type
        self.title = title
        self.message = message
        self.user_id = user_id
        self.related_id = related_id
        self.is_read = is_read
        self.created_at = created_at or datetime.utcnow()

    @classmethod
    def create_notification(
        cls,
        type: NotificationType,
        title: str,
        message: str,
        user_id: uuid.UUID,
        related_id: Optional[uuid.UUID] = None
    ) -> "Notification":
        return cls(
            uuid=uuid.uuid4(),
            type=type,
            title=title,
            message=message,
            user_id=user_id,
            related_id=str(related_id) if related_id else None
        )

    def __repr__(self) -> str:
        return f"Notification(uuid={self.uuid}, type={self.type.value}, user_id={self.user_id})"
