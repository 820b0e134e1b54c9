from typing import List, Optional, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
import uuid

from app.db.models.notification import Notification as NotificationModel

if TYPE_CHECKING:
    from app.domains.notifications.entities import Notification


class NotificationRepository:
    """Репозиторий для работы с уведомлениями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, notification: "Notification") -> "Notification":
        db_notification = NotificationModel(
            uuid=notification.uuid,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            user_id=notification.user_id,
            related_id=notification.related_id,
            is_read=notification.is_read
        )
        self.session.add(db_notification)
        await self.session.flush()
        return notification

    async def get_by_uuid(self, notification_uuid: uuid.UUID) -> Optional["Notification"]:
        result = await self.session.execute(
            select(NotificationModel).where(NotificationModel.uuid == notification_uuid)
        )
        db_notification = result.scalar_one_or_none()
        return self._to_domain(db_notification) if db_notification else None

    async def list_by_user(self, user_id: uuid.UUID, unread_only: bool = False, limit: int = 50) -> List["Notification"]:
        """Уведомления пользователя, новые первыми"""
        query = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.where(NotificationModel.is_read.is_(False))
        result = await self.session.execute(
            query.order_by(NotificationModel.created_at.desc()).limit(limit)
        )
        return [self._to_domain(n) for n in result.scalars().all()]

    async def count_unread(self, user_id: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.count(NotificationModel.uuid)).where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False)
            )
        )
        return result.scalar() or 0

    async def mark_read(self, notification_uuid: uuid.UUID) -> None:
        await self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.uuid == notification_uuid)
            .values(is_read=True)
        )

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        result = await self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False))
            .values(is_read=True)
        )
        return result.rowcount

    def _to_domain(self, db_notification: NotificationModel) -> "Notification":
        from app.domains.notifications.entities import Notification

        return Notification(
            uuid=db_notification.uuid,
            type=db_notification.type,
            title=db_notification.title,
            message=db_notification.message,
            user_id=db_notification.user_id,
            related_id=db_notification.related_id,
            is_read=db_notification.is_read,
            created_at=db_notification.created_at
        )
