from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
import uuid

from app.db.models.team import (
    Team as TeamModel, TeamMember as TeamMemberModel, Invitation as InvitationModel,
    TeamRole, InvitationStatus
)

if TYPE_CHECKING:
    from app.domains.teams.entities import Team, TeamMember, Invitation


class TeamRepository:
    """Репозиторий для работы с командами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, team: "Team") -> "Team":
        """Создание команды"""
        db_team = TeamModel(
            uuid=team.uuid,
            name=team.name,
            description=team.description,
            icon=team.icon,
            owner_id=team.owner_id
        )
        self.session.add(db_team)
        await self.session.flush()
        await self.session.refresh(db_team)
        return self._to_domain(db_team)

    async def get_by_uuid(self, team_uuid: uuid.UUID) -> Optional["Team"]:
        """Получение команды по UUID"""
        result = await self.session.execute(
            select(TeamModel).where(TeamModel.uuid == team_uuid)
        )
        db_team = result.scalar_one_or_none()
        return self._to_domain(db_team) if db_team else None

    async def update(self, team: "Team") -> "Team":
        """Обновление команды"""
        await self.session.execute(
            update(TeamModel)
            .where(TeamModel.uuid == team.uuid)
            .values(
                name=team.name,
                description=team.description,
                icon=team.icon,
                owner_id=team.owner_id,
                updated_at=team.updated_at
            )
        )
        await self.session.flush()
        return team

    async def delete(self, team_uuid: uuid.UUID) -> bool:
        """Удаление команды вместе с участниками, приглашениями и мануалами"""
        result = await self.session.execute(
            delete(TeamModel).where(TeamModel.uuid == team_uuid)
        )
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(TeamModel.uuid)))
        return result.scalar() or 0

    def _to_domain(self, db_team: TeamModel) -> "Team":
        from app.domains.teams.entities import Team

        return Team(
            uuid=db_team.uuid,
            name=db_team.name,
            owner_id=db_team.owner_id,
            description=db_team.description,
            icon=db_team.icon,
            created_at=db_team.created_at,
            updated_at=db_team.updated_at
        )


class TeamMemberRepository:
    """Репозиторий для работы с участниками команд"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, member: "TeamMember") -> "TeamMember":
        """Добавление участника в команду"""
        db_member = TeamMemberModel(
            uuid=member.uuid,
            user_id=member.user_id,
            team_id=member.team_id,
            role=member.role
        )
        self.session.add(db_member)
        await self.session.flush()
        await self.session.refresh(db_member)
        return self._to_domain(db_member)

    async def get_by_uuid(self, member_uuid: uuid.UUID) -> Optional["TeamMember"]:
        result = await self.session.execute(
            select(TeamMemberModel).where(TeamMemberModel.uuid == member_uuid)
        )
        db_member = result.scalar_one_or_none()
        return self._to_domain(db_member) if db_member else None

    async def get_by_user(self, user_id: uuid.UUID) -> Optional["TeamMember"]:
        """Членство пользователя (не более одного)"""
        result = await self.session.execute(
            select(TeamMemberModel).where(TeamMemberModel.user_id == user_id)
        )
        db_member = result.scalar_one_or_none()
        return self._to_domain(db_member) if db_member else None

    async def get_role(self, user_id: uuid.UUID, team_id: uuid.UUID) -> Optional[TeamRole]:
        """Роль пользователя в конкретной команде"""
        result = await self.session.execute(
            select(TeamMemberModel.role).where(
                TeamMemberModel.user_id == user_id,
                TeamMemberModel.team_id == team_id
            )
        )
        return result.scalar_one_or_none()

    async def list_by_team(self, team_id: uuid.UUID) -> List["TeamMember"]:
        """Участники команды в порядке вступления"""
        result = await self.session.execute(
            select(TeamMemberModel)
            .where(TeamMemberModel.team_id == team_id)
            .order_by(TeamMemberModel.created_at.asc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update_role(self, member_uuid: uuid.UUID, role: TeamRole) -> None:
        await self.session.execute(
            update(TeamMemberModel)
            .where(TeamMemberModel.uuid == member_uuid)
            .values(role=role)
        )
        await self.session.flush()

    async def count_owners(self, team_id: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.count(TeamMemberModel.uuid)).where(
                TeamMemberModel.team_id == team_id,
                TeamMemberModel.role == TeamRole.OWNER
            )
        )
        return result.scalar() or 0

    async def delete(self, member_uuid: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(TeamMemberModel).where(TeamMemberModel.uuid == member_uuid)
        )
        return result.rowcount > 0

    def _to_domain(self, db_member: TeamMemberModel) -> "TeamMember":
        from app.domains.teams.entities import TeamMember

        return TeamMember(
            uuid=db_member.uuid,
            user_id=db_member.user_id,
            team_id=db_member.team_id,
            role=db_member.role,
            created_at=db_member.created_at
        )


class InvitationRepository:
    """Репозиторий для работы с приглашениями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invitation: "Invitation") -> "Invitation":
        db_invitation = InvitationModel(
            uuid=invitation.uuid,
            email=invitation.email,
            role=invitation.role,
            token=invitation.token,
            team_id=invitation.team_id,
            sender_id=invitation.sender_id,
            receiver_id=invitation.receiver_id,
            status=invitation.status,
            expires_at=invitation.expires_at
        )
        self.session.add(db_invitation)
        await self.session.flush()
        await self.session.refresh(db_invitation)
        return self._to_domain(db_invitation)

    async def get_by_token(self, token: str) -> Optional["Invitation"]:
        """Получение приглашения по токену"""
        result = await self.session.execute(
            select(InvitationModel).where(InvitationModel.token == token)
        )
        db_invitation = result.scalar_one_or_none()
        return self._to_domain(db_invitation) if db_invitation else None

    async def get_pending(self, email: str, team_id: uuid.UUID) -> Optional["Invitation"]:
        """Ожидающее приглашение для email в команду"""
        result = await self.session.execute(
            select(InvitationModel).where(
                InvitationModel.email == email.lower(),
                InvitationModel.team_id == team_id,
                InvitationModel.status == InvitationStatus.PENDING
            )
        )
        db_invitation = result.scalars().first()
        return self._to_domain(db_invitation) if db_invitation else None

    async def update_status(self, invitation: "Invitation") -> "Invitation":
        await self.session.execute(
            update(InvitationModel)
            .where(InvitationModel.uuid == invitation.uuid)
            .values(status=invitation.status, receiver_id=invitation.receiver_id)
        )
        await self.session.flush()
        return invitation

    def _to_domain(self, db_invitation: InvitationModel) -> "Invitation":
        from app.domains.teams.entities import Invitation

        return Invitation(
            uuid=db_invitation.uuid,
            email=db_invitation.email,
            role=db_invitation.role,
            token=db_invitation.token,
            team_id=db_invitation.team_id,
            sender_id=db_invitation.sender_id,
            expires_at=db_invitation.expires_at,
            status=db_invitation.status,
            receiver_id=db_invitation.receiver_id,
            created_at=db_invitation.created_at
        )
