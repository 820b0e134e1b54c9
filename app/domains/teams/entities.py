import uuid
from datetime import datetime, timedelta
from typing import Optional

from app.db.models.team import TeamRole, InvitationStatus


class Team:
    """Сущность команды"""

    def __init__(
        self,
        uuid: uuid.UUID,
        name: str,
        owner_id: uuid.UUID,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.name = name
        self.owner_id = owner_id
        self.description = description
        self.icon = icon
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def update_info(self, name: Optional[str] = None, description: Optional[str] = None, icon: Optional[str] = None) -> None:
        """Обновление данных команды"""
        if name:
            self.name = name
        if description is not None:
            self.description = description
        if icon is not None:
            self.icon = icon
        self.updated_at = datetime.utcnow()

    @classmethod
    def create_team(cls, name: str, owner_id: uuid.UUID, description: Optional[str] = None, icon: Optional[str] = None) -> "Team":
        """Создание новой команды"""
        return cls(
            uuid=uuid.uuid4(),
            name=name,
            owner_id=owner_id,
            description=description,
            icon=icon
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Team):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Team(uuid={self.uuid}, name={self.name})"


class TeamMember:
    """Участник команды с ролью"""

    def __init__(
        self,
        uuid: uuid.UUID,
        user_id: uuid.UUID,
        team_id: uuid.UUID,
        role: TeamRole,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.user_id = user_id
        self.team_id = team_id
        self.role = role
        self.created_at = created_at or datetime.utcnow()

    @property
    def is_owner(self) -> bool:
        return self.role == TeamRole.OWNER

    @property
    def can_author(self) -> bool:
        """Может ли участник создавать мануалы"""
        return self.role in (TeamRole.OWNER, TeamRole.EDITOR)

    @classmethod
    def create_member(cls, user_id: uuid.UUID, team_id: uuid.UUID, role: TeamRole) -> "TeamMember":
        return cls(uuid=uuid.uuid4(), user_id=user_id, team_id=team_id, role=role)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TeamMember):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"TeamMember(user_id={self.user_id}, team_id={self.team_id}, role={self.role.value})"


class Invitation:
    """Приглашение в команду"""

    def __init__(
        self,
        uuid: uuid.UUID,
        email: str,
        role: TeamRole,
        token: str,
        team_id: uuid.UUID,
        sender_id: uuid.UUID,
        expires_at: datetime,
        status: InvitationStatus = InvitationStatus.PENDING,
        receiver_id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.email = email
        self.role = role
        self.token = token
        self.team_id = team_id
        self.sender_id = sender_id
        self.expires_at = expires_at
        self.status = status
        self.receiver_id = receiver_id
        self.created_at = created_at or datetime.utcnow()

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < (now or datetime.utcnow())

    def accept(self, receiver_id: uuid.UUID) -> None:
        self.status = InvitationStatus.ACCEPTED
        self.receiver_id = receiver_id

    def reject(self) -> None:
        self.status = InvitationStatus.REJECTED

    def expire(self) -> None:
        self.status = InvitationStatus.EXPIRED

    @classmethod
    def create_invitation(
        cls,
        email: str,
        role: TeamRole,
        token: str,
        team_id: uuid.UUID,
        sender_id: uuid.UUID,
        lifetime: timedelta,
        receiver_id: Optional[uuid.UUID] = None
    ) -> "Invitation":
        """Создание нового приглашения"""
        return cls(
            uuid=uuid.uuid4(),
            email=email.lower(),
            role=role,
            token=token,
            team_id=team_id,
            sender_id=sender_id,
            expires_at=datetime.utcnow() + lifetime,
            receiver_id=receiver_id
        )

    def __repr__(self) -> str:
        return f"Invitation(uuid={self.uuid}, email={self.email}, status={self.status.value})"
