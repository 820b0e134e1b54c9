import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, UUID
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class TeamRole(str, enum.Enum):
    OWNER = "OWNER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class InvitationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class Team(BaseModel):
    __tablename__ = "teams"

    name = Column(String(50), nullable=False)
    description = Column(String(200), nullable=True)
    icon = Column(String(500), nullable=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid"), nullable=False)

    # Relationships
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan", passive_deletes=True)
    invitations = relationship("Invitation", back_populates="team", cascade="all, delete-orphan", passive_deletes=True)


class TeamMember(BaseModel):
    __tablename__ = "team_members"

    # Пользователь состоит максимум в одной команде
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), unique=True, nullable=False)
    team_id = Column(UUID(as_uuid=True), ForeignKey("teams.uuid", ondelete="CASCADE"), index=True, nullable=False)
    role = Column(Enum(TeamRole, name="team_role"), nullable=False, default=TeamRole.VIEWER)

    # Relationships
    user = relationship("User", back_populates="membership")
    team = relationship("Team", back_populates="members")


class Invitation(BaseModel):
    __tablename__ = "invitations"

    email = Column(String(255), index=True, nullable=False)
    role = Column(Enum(TeamRole, name="team_role"), nullable=False)
    token = Column(String(128), unique=True, index=True, nullable=False)
    team_id = Column(UUID(as_uuid=True), ForeignKey("teams.uuid", ondelete="CASCADE"), nullable=False)
    sender_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="SET NULL"), nullable=True)
    status = Column(Enum(InvitationStatus, name="invitation_status"), nullable=False, default=InvitationStatus.PENDING)
    expires_at = Column(DateTime, nullable=False)

    # Relationships
    team = relationship("Team", back_populates="invitations")
