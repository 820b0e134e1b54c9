import logging
import secrets
import uuid
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import unit_of_work
from app.core.errors import BadRequestError, ForbiddenError, GoneError, NotFoundError
from app.db.models.notification import NotificationType
from app.db.models.team import TeamRole
from app.db.repositories.manual_repository import ManualRepository, SectionRepository, BlockRepository
from app.db.repositories.share_repository import ManualShareRepository, ExternalLinkRepository
from app.db.repositories.team_repository import TeamRepository, TeamMemberRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.manuals.access import ManualAccessService
from app.domains.manuals.entities import Manual, Section, build_section_tree
from app.domains.notifications.services import NotificationService
from app.domains.sharing.entities import ManualShare, ExternalLink
from app.domains.sharing.schemas import ShareCreate, ExternalLinkCreate
from app.domains.teams.entities import Team

logger = logging.getLogger(__name__)

# 128 бит случайности, hex
EXTERNAL_LINK_TOKEN_BYTES = 16

PERMISSION_LABELS = {TeamRole.EDITOR: "editor", TeamRole.VIEWER: "viewer"}


class SharingService:
    """Персональный шаринг и внешние ссылки; управляет только владелец"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.access = ManualAccessService(session)
        self.share_repository = ManualShareRepository(session)
        self.link_repository = ExternalLinkRepository(session)
        self.member_repository = TeamMemberRepository(session)
        self.user_repository = UserRepository(session)
        self.notification_service = NotificationService(session)

    async def get_settings(self, user: User, manual_uuid: uuid.UUID):
        """Участники команды (кроме владельца), персональные доступы и ссылки"""
        manual, _ = await self.access.require_share(user.uuid, manual_uuid)

        members = [m for m in await self.member_repository.list_by_team(manual.team_id) if m.user_id != manual.owner_id]
        shares = await self.share_repository.list_by_manual(manual_uuid)
        users = {
            u.uuid: u
            for u in await self.user_repository.get_by_uuids(
                list({m.user_id for m in members} | {s.user_id for s in shares})
            )
        }
        links = await self.link_repository.list_by_manual(manual_uuid)

        team_members = [(m, users[m.user_id]) for m in members if m.user_id in users]
        shared_users = [(s, users[s.user_id]) for s in shares if s.user_id in users]
        return team_members, shared_users, links

    async def share_with_member(self, user: User, manual_uuid: uuid.UUID, share_data: ShareCreate) -> Tuple[ManualShare, User]:
        """Выдача персонального доступа участнику команды"""
        manual, _ = await self.access.require_share(user.uuid, manual_uuid)

        if await self.member_repository.get_role(share_data.user_id, manual.team_id) is None:
            raise BadRequestError("Manuals can only be shared with team members")
        if await self.share_repository.get_for_user(manual_uuid, share_data.user_id):
            raise BadRequestError("Manual is already shared with this user")

        grantee = await self.user_repository.get_by_uuid(share_data.user_id)
        share = ManualShare.create_share(manual_uuid, share_data.user_id, share_data.permission)

        async with unit_of_work(self.session):
            share = await self.share_repository.create(share)
            await self.notification_service.notify(
                user_id=share.user_id,
                type=NotificationType.MANUAL_SHARED,
                title="A manual was shared with you",
                message=f'"{manual.title}" was shared with you',
                related_id=manual.uuid
            )

        logger.info(f"Manual {manual_uuid} shared with {share.user_id} as {share.permission.value}")
        return share, grantee

    async def _get_share(self, manual_uuid: uuid.UUID, share_uuid: uuid.UUID) -> ManualShare:
        share = await self.share_repository.get_by_uuid(share_uuid)
        if not share or share.manual_id != manual_uuid:
            raise NotFoundError("Share not found")
        return share

    async def update_share(self, user: User, manual_uuid: uuid.UUID, share_uuid: uuid.UUID, permission: TeamRole) -> ManualShare:
        """Смена права персонального доступа с уведомлением"""
        manual, _ = await self.access.require_share(user.uuid, manual_uuid)
        share = await self._get_share(manual_uuid, share_uuid)

        async with unit_of_work(self.session):
            await self.share_repository.update_permission(share.uuid, permission)
            await self.notification_service.notify(
                user_id=share.user_id,
                type=NotificationType.PERMISSION_CHANGED,
                title="Your permission was changed",
                message=f'Your permission on "{manual.title}" is now {PERMISSION_LABELS[permission]}',
                related_id=manual.uuid
            )

        share.permission = permission
        return share

    async def remove_share(self, user: User, manual_uuid: uuid.UUID, share_uuid: uuid.UUID) -> None:
        await self.access.require_share(user.uuid, manual_uuid)
        share = await self._get_share(manual_uuid, share_uuid)
        async with unit_of_work(self.session):
            await self.share_repository.delete(share.uuid)

    async def create_link(self, user: User, manual_uuid: uuid.UUID, link_data: ExternalLinkCreate) -> ExternalLink:
        """Новая внешняя ссылка с выбранным уровнем доступа"""
        await self.access.require_share(user.uuid, manual_uuid)
        link = ExternalLink.create_link(
            manual_id=manual_uuid,
            token=secrets.token_hex(EXTERNAL_LINK_TOKEN_BYTES),
            access_type=link_data.access_type,
            expires_at=link_data.expires_at
        )
        async with unit_of_work(self.session):
            link = await self.link_repository.create(link)
        logger.info(f"External link {link.uuid} ({link.access_type.value}) created for manual {manual_uuid}")
        return link

    async def _get_link(self, manual_uuid: uuid.UUID, link_uuid: uuid.UUID) -> ExternalLink:
        link = await self.link_repository.get_by_uuid(link_uuid)
        if not link or link.manual_id != manual_uuid:
            raise NotFoundError("Share link not found")
        return link

    async def set_link_active(self, user: User, manual_uuid: uuid.UUID, link_uuid: uuid.UUID, is_active: bool) -> ExternalLink:
        await self.access.require_share(user.uuid, manual_uuid)
        link = await self._get_link(manual_uuid, link_uuid)
        async with unit_of_work(self.session):
            await self.link_repository.set_active(link.uuid, is_active)
        link.is_active = is_active
        return link

    async def delete_link(self, user: User, manual_uuid: uuid.UUID, link_uuid: uuid.UUID) -> None:
        await self.access.require_share(user.uuid, manual_uuid)
        link = await self._get_link(manual_uuid, link_uuid)
        async with unit_of_work(self.session):
            await self.link_repository.delete(link.uuid)


class PublicShareService:
    """Чтение мануала по внешней ссылке без аутентификации"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.link_repository = ExternalLinkRepository(session)
        self.manual_repository = ManualRepository(session)
        self.section_repository = SectionRepository(session)
        self.block_repository = BlockRepository(session)
        self.user_repository = UserRepository(session)
        self.team_repository = TeamRepository(session)

    async def get_shared_manual(self, token: str) -> Tuple[ExternalLink, Manual, List[Section], User, Team]:
        """Неизвестная ссылка 404, выключенная 403, просроченная 410"""
        link = await self.link_repository.get_by_token(token)
        if not link:
            raise NotFoundError("Invalid share link")
        if not link.is_active:
            raise ForbiddenError("This share link has been disabled")
        if link.is_expired():
            raise GoneError("This share link has expired")

        manual = await self.manual_repository.get_by_uuid(link.manual_id)
        if not manual:
            raise NotFoundError("Invalid share link")

        sections = await self.section_repository.list_by_manual(manual.uuid)
        # Для TITLE_ONLY блоки не читаем вовсе
        blocks = [] if link.is_title_only else await self.block_repository.list_by_manual(manual.uuid)
        owner = await self.user_repository.get_by_uuid(manual.owner_id)
        team = await self.team_repository.get_by_uuid(manual.team_id)
        return link, manual, build_section_tree(sections, blocks), owner, team
