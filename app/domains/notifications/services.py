import logging
import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import unit_of_work
from app.core.errors import NotFoundError
from app.db.models.notification import NotificationType
from app.db.repositories.notification_repository import NotificationRepository
from app.domains.notifications.entities import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """Сервис уведомлений"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.notification_repository = NotificationRepository(session)

    async def notify(
        self,
        user_id: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[uuid.UUID] = None
    ) -> Notification:
        """Создание уведомления в текущей транзакции, без коммита"""
        notification = Notification.create_notification(
            type=type,
            title=title,
            message=message,
            user_id=user_id,
            related_id=related_id
        )
        logger.info(f"Notification {type.value} queued for user {user_id}")
        return await self.notification_repository.create(notification)

    async def list_notifications(self, user_id: uuid.UUID, unread_only: bool = False) -> List[Notification]:
        return await self.notification_repository.list_by_user(user_id, unread_only=unread_only)

    async def count_unread(self, user_id: uuid.UUID) -> int:
        return await self.notification_repository.count_unread(user_id)

    async def mark_read(self, notification_uuid: uuid.UUID, user_id: uuid.UUID) -> None:
        """Отметить уведомление прочитанным"""
        notification = await self.notification_repository.get_by_uuid(notification_uuid)
        # Чужие уведомления не раскрываем
        if not notification or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        async with unit_of_work(self.session):
            await self.notification_repository.mark_read(notification_uuid)

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        async with unit_of_work(self.session):
            return await self.notification_repository.mark_all_read(user_id)
