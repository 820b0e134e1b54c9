import logging
import uuid
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ForbiddenError, NotFoundError
from app.db.repositories.manual_repository import ManualRepository
from app.db.repositories.share_repository import ManualShareRepository
from app.db.repositories.team_repository import TeamMemberRepository
from app.domains.manuals.entities import Manual
from app.domains.manuals.permissions import (
    Permission, resolve_permission, can_view, can_edit, can_delete, can_share
)

logger = logging.getLogger(__name__)

MANUAL_NOT_FOUND = "Manual not found"


class ManualAccessService:
    """Сбор фактов о доступе к мануалу и проверка прав"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.manual_repository = ManualRepository(session)
        self.member_repository = TeamMemberRepository(session)
        self.share_repository = ManualShareRepository(session)

    async def permission_for(self, user_id: uuid.UUID, manual: Manual) -> Permission:
        team_role = await self.member_repository.get_role(user_id, manual.team_id)
        share_permission = None
        if team_role is None and manual.owner_id != user_id:
            share_permission = await self.share_repository.get_permission(manual.uuid, user_id)
        return resolve_permission(user_id, manual.owner_id, team_role, share_permission)

    async def get_permission(self, user_id: uuid.UUID, manual_uuid: uuid.UUID) -> Permission:
        """Право пользователя на мануал; для несуществующего мануала NONE"""
        manual = await self.manual_repository.get_by_uuid(manual_uuid)
        if not manual:
            return Permission.NONE
        return await self.permission_for(user_id, manual)

    async def _load(self, user_id: uuid.UUID, manual_uuid: uuid.UUID) -> Tuple[Manual, Permission]:
        manual = await self.manual_repository.get_by_uuid(manual_uuid)
        if not manual:
            raise NotFoundError(MANUAL_NOT_FOUND)
        permission = await self.permission_for(user_id, manual)
        # Недоступный мануал не отличаем от несуществующего
        if not can_view(permission):
            raise NotFoundError(MANUAL_NOT_FOUND)
        return manual, permission

    async def require_view(self, user_id: uuid.UUID, manual_uuid: uuid.UUID) -> Tuple[Manual, Permission]:
        return await self._load(user_id, manual_uuid)

    async def require_edit(self, user_id: uuid.UUID, manual_uuid: uuid.UUID) -> Tuple[Manual, Permission]:
        manual, permission = await self._load(user_id, manual_uuid)
        if not can_edit(permission):
            logger.info(f"User {user_id} denied edit on manual {manual_uuid} ({permission.value})")
            raise ForbiddenError("You don't have permission to edit this manual")
        return manual, permission

    async def require_delete(self, user_id: uuid.UUID, manual_uuid: uuid.UUID) -> Tuple[Manual, Permission]:
        manual, permission = await self._load(user_id, manual_uuid)
        if not can_delete(permission):
            raise ForbiddenError("Only the owner can delete this manual")
        return manual, permission

    async def require_share(self, user_id: uuid.UUID, manual_uuid: uuid.UUID) -> Tuple[Manual, Permission]:
        manual, permission = await self._load(user_id, manual_uuid)
        if not can_share(permission):
            raise ForbiddenError("Only the owner can manage sharing for this manual")
        return manual, permission
