import logging
import uuid
from datetime import timedelta
from typing import Optional, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import unit_of_work
from app.core.errors import BadRequestError, ForbiddenError, NotFoundError
from app.core.security import generate_token
from app.db.models.notification import NotificationType
from app.db.models.team import TeamRole
from app.db.repositories.manual_repository import ManualRepository
from app.db.repositories.team_repository import TeamRepository, TeamMemberRepository, InvitationRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.notifications.services import NotificationService
from app.domains.teams.entities import Team, TeamMember, Invitation
from app.domains.teams.schemas import TeamCreate, TeamUpdate, MemberInvite

logger = logging.getLogger(__name__)


class TeamService:
    """Сервис для работы с командами и участниками"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.team_repository = TeamRepository(session)
        self.member_repository = TeamMemberRepository(session)
        self.invitation_repository = InvitationRepository(session)
        self.user_repository = UserRepository(session)
        self.manual_repository = ManualRepository(session)
        self.notification_service = NotificationService(session)

    async def get_my_team(self, user: User) -> Optional[Tuple[Team, TeamMember]]:
        """Команда пользователя и его членство"""
        membership = await self.member_repository.get_by_user(user.uuid)
        if not membership:
            return None
        team = await self.team_repository.get_by_uuid(membership.team_id)
        return team, membership

    async def get_team_details(self, team: Team):
        """Участники с пользователями и мануалы команды"""
        members = await self.member_repository.list_by_team(team.uuid)
        users = {u.uuid: u for u in await self.user_repository.get_by_uuids([m.user_id for m in members])}
        manuals = await self.manual_repository.list_by_team(team.uuid)
        return [(member, users[member.user_id]) for member in members if member.user_id in users], manuals

    async def _require_owner(self, user: User) -> Tuple[Team, TeamMember]:
        membership = await self.member_repository.get_by_user(user.uuid)
        if not membership or not membership.is_owner:
            raise ForbiddenError("Only the team owner can do this")
        team = await self.team_repository.get_by_uuid(membership.team_id)
        return team, membership

    async def create_team(self, user: User, team_data: TeamCreate) -> Team:
        """Создание команды; создатель становится ее единственным OWNER"""
        if await self.member_repository.get_by_user(user.uuid):
            raise BadRequestError("You already belong to a team. A user can only be in one team")

        team = Team.create_team(
            name=team_data.name,
            owner_id=user.uuid,
            description=team_data.description,
            icon=team_data.icon
        )

        async with unit_of_work(self.session):
            team = await self.team_repository.create(team)
            await self.member_repository.create(
                TeamMember.create_member(user.uuid, team.uuid, TeamRole.OWNER)
            )

        logger.info(f"Team {team.uuid} created by {user.uuid}")
        return team

    async def update_team(self, user: User, team_data: TeamUpdate) -> Team:
        team, _ = await self._require_owner(user)
        team.update_info(name=team_data.name, description=team_data.description, icon=team_data.icon)
        async with unit_of_work(self.session):
            await self.team_repository.update(team)
        return team

    async def delete_team(self, user: User) -> None:
        """Удаление команды вместе с участниками и мануалами"""
        team, _ = await self._require_owner(user)
        async with unit_of_work(self.session):
            await self.team_repository.delete(team.uuid)
        logger.info(f"Team {team.uuid} deleted by {user.uuid}")

    async def invite_member(self, user: User, invite_data: MemberInvite) -> Tuple[Invitation, str]:
        """Приглашение пользователя по email. Возвращает приглашение и ссылку"""
        team, _ = await self._require_owner(user)
        email = invite_data.email.lower()

        existing_user = await self.user_repository.get_by_email(email)
        if existing_user:
            membership = await self.member_repository.get_by_user(existing_user.uuid)
            if membership and membership.team_id == team.uuid:
                raise BadRequestError("User is already a member of this team")
            if membership:
                raise BadRequestError("User already belongs to another team")

        pending = await self.invitation_repository.get_pending(email, team.uuid)
        if pending and not pending.is_expired():
            raise BadRequestError("An invitation has already been sent to this email")

        invitation = Invitation.create_invitation(
            email=email,
            role=invite_data.role,
            token=generate_token(),
            team_id=team.uuid,
            sender_id=user.uuid,
            lifetime=timedelta(days=settings.invitation_expiry_days),
            receiver_id=existing_user.uuid if existing_user else None
        )

        async with unit_of_work(self.session):
            if pending:
                # просроченное приглашение закрываем перед выдачей нового
                pending.expire()
                await self.invitation_repository.update_status(pending)
            invitation = await self.invitation_repository.create(invitation)
            if existing_user:
                await self.notification_service.notify(
                    user_id=existing_user.uuid,
                    type=NotificationType.INVITATION_RECEIVED,
                    title="You have been invited to a team",
                    message=f"{user.name} invited you to join {team.name}",
                    related_id=team.uuid
                )

        link = f"{settings.app_base_url}/invite/{invitation.token}"
        if settings.is_development:
            logger.info(f"Invitation for {email} to team {team.name} ({invitation.role.value}): {link}")
        return invitation, link

    async def _get_team_member(self, team: Team, member_uuid: uuid.UUID) -> TeamMember:
        member = await self.member_repository.get_by_uuid(member_uuid)
        if not member or member.team_id != team.uuid:
            raise NotFoundError("Team member not found")
        return member

    async def change_member_role(self, user: User, member_uuid: uuid.UUID, role: TeamRole) -> TeamMember:
        """Смена роли участника; в команде всегда ровно один OWNER"""
        team, own_membership = await self._require_owner(user)
        member = await self._get_team_member(team, member_uuid)
        if member.uuid == own_membership.uuid:
            raise BadRequestError("You cannot change your own role")
        if role == TeamRole.OWNER:
            raise BadRequestError("A team has exactly one owner. Use ownership transfer instead")

        async with unit_of_work(self.session):
            await self.member_repository.update_role(member.uuid, role)
            await self._check_single_owner(team.uuid)

        member.role = role
        logger.info(f"Member {member.uuid} of team {team.uuid} is now {role.value}")
        return member

    async def transfer_ownership(self, user: User, member_uuid: uuid.UUID) -> Team:
        """Передача роли OWNER другому участнику; прежний владелец становится EDITOR"""
        team, own_membership = await self._require_owner(user)
        member = await self._get_team_member(team, member_uuid)
        if member.uuid == own_membership.uuid:
            raise BadRequestError("You already own this team")

        async with unit_of_work(self.session):
            await self.member_repository.update_role(own_membership.uuid, TeamRole.EDITOR)
            await self.member_repository.update_role(member.uuid, TeamRole.OWNER)
            team.owner_id = member.user_id
            team.update_info()
            await self.team_repository.update(team)
            await self._check_single_owner(team.uuid)

        logger.info(f"Team {team.uuid} ownership transferred to {member.user_id}")
        return team

    async def remove_member(self, user: User, member_uuid: uuid.UUID) -> None:
        team, own_membership = await self._require_owner(user)
        member = await self._get_team_member(team, member_uuid)
        if member.uuid == own_membership.uuid:
            raise BadRequestError("You cannot remove yourself from the team")
        async with unit_of_work(self.session):
            await self.member_repository.delete(member.uuid)
        logger.info(f"Member {member.uuid} removed from team {team.uuid}")

    async def _check_single_owner(self, team_uuid: uuid.UUID) -> None:
        if await self.member_repository.count_owners(team_uuid) != 1:
            raise BadRequestError("A team must have exactly one owner")


class InvitationService:
    """Просмотр, принятие и отклонение приглашений"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.invitation_repository = InvitationRepository(session)
        self.member_repository = TeamMemberRepository(session)
        self.team_repository = TeamRepository(session)
        self.user_repository = UserRepository(session)
        self.notification_service = NotificationService(session)

    async def _get_pending(self, token: str) -> Invitation:
        invitation = await self.invitation_repository.get_by_token(token)
        if not invitation:
            raise NotFoundError("Invitation not found")

        if invitation.is_pending and invitation.is_expired():
            invitation.expire()
            async with unit_of_work(self.session):
                await self.invitation_repository.update_status(invitation)
            raise BadRequestError("Invitation has expired")

        if not invitation.is_pending:
            raise BadRequestError(f"Invitation is no longer valid ({invitation.status.value.lower()})")
        return invitation

    async def get_invitation(self, token: str) -> Tuple[Invitation, Team, User]:
        """Приглашение с командой и отправителем"""
        invitation = await self._get_pending(token)
        team = await self.team_repository.get_by_uuid(invitation.team_id)
        sender = await self.user_repository.get_by_uuid(invitation.sender_id)
        return invitation, team, sender

    async def accept_invitation(self, user: User, token: str) -> Team:
        """Принятие приглашения текущим пользователем"""
        invitation = await self._get_pending(token)

        if user.email != invitation.email:
            raise BadRequestError("This invitation was sent to a different email address")
        if await self.member_repository.get_by_user(user.uuid):
            raise BadRequestError("You already belong to a team")

        team = await self.team_repository.get_by_uuid(invitation.team_id)
        async with unit_of_work(self.session):
            await self.member_repository.create(
                TeamMember.create_member(user.uuid, invitation.team_id, invitation.role)
            )
            invitation.accept(user.uuid)
            await self.invitation_repository.update_status(invitation)
            await self.notification_service.notify(
                user_id=team.owner_id,
                type=NotificationType.MEMBER_JOINED,
                title="A new member joined your team",
                message=f"{user.name} joined the team",
                related_id=team.uuid
            )

        logger.info(f"User {user.uuid} joined team {team.uuid} by invitation")
        return team

    async def reject_invitation(self, user: User, token: str) -> None:
        invitation = await self._get_pending(token)
        if user.email != invitation.email:
            raise BadRequestError("This invitation was sent to a different email address")
        invitation.reject()
        async with unit_of_work(self.session):
            await self.invitation_repository.update_status(invitation)
