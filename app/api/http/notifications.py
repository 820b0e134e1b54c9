from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.api.deps import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import MessageResponse
from app.domains.notifications.schemas import NotificationResponse, NotificationListResponse
from app.domains.notifications.services import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Уведомления пользователя, новые первыми"""
    notification_service = NotificationService(db)
    notifications = await notification_service.list_notifications(current_user.uuid, unread_only=unread_only)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=await notification_service.count_unread(current_user.uuid)
    )


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    count = await NotificationService(db).mark_all_read(current_user.uuid)
    return MessageResponse(message=f"{count} notifications marked as read")


@router.put("/{notification_uuid}/read", response_model=MessageResponse)
async def mark_read(
    notification_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await NotificationService(db).mark_read(notification_uuid, current_user.uuid)
    return MessageResponse(message="Notification marked as read")
