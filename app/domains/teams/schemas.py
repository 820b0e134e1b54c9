from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from app.db.models.team import TeamRole, InvitationStatus


class TeamBase(BaseModel):
    """Базовая схема команды"""
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    icon: Optional[str] = Field(None, max_length=500)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Team name cannot be empty')
        return v.strip()


class TeamCreate(TeamBase):
    """Схема для создания команды"""
    pass


class TeamUpdate(TeamBase):
    """Схема для обновления команды"""
    pass


class MemberUser(BaseModel):
    uuid: uuid.UUID
    email: str
    name: str
    profile_image: Optional[str] = None


class TeamMemberResponse(BaseModel):
    """Участник команды"""
    uuid: uuid.UUID
    role: TeamRole
    user: MemberUser
    joined_at: datetime


class TeamManualSummary(BaseModel):
    uuid: uuid.UUID
    title: str
    updated_at: datetime


class TeamResponse(BaseModel):
    """Команда с участниками и мануалами"""
    uuid: uuid.UUID
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    members: List[TeamMemberResponse] = []
    manuals: List[TeamManualSummary] = []


class MyTeamResponse(BaseModel):
    team: Optional[TeamResponse] = None
    role: Optional[TeamRole] = None


class MemberInvite(BaseModel):
    """Приглашение участника"""
    email: EmailStr
    role: TeamRole

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        # Владелец в команде только один
        if v == TeamRole.OWNER:
            raise ValueError('Invitations can only grant EDITOR or VIEWER role')
        return v


class MemberRoleUpdate(BaseModel):
    role: TeamRole


class OwnershipTransfer(BaseModel):
    member_id: uuid.UUID


class InvitationResponse(BaseModel):
    """Данные приглашения"""
    uuid: uuid.UUID
    email: str
    role: TeamRole
    status: InvitationStatus
    expires_at: datetime


class InvitationCreatedResponse(BaseModel):
    success: bool = True
    invitation: InvitationResponse
    invitation_link: Optional[str] = None


class InvitationTeam(BaseModel):
    uuid: uuid.UUID
    name: str
    description: Optional[str] = None


class InvitationDetailResponse(BaseModel):
    """Приглашение, как его видит получатель"""
    uuid: uuid.UUID
    email: str
    role: TeamRole
    team: InvitationTeam
    sender_name: str
    expires_at: datetime
