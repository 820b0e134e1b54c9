import enum

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Enum, UUID, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import BaseModel
from app.db.models.team import TeamRole


class AccessType(str, enum.Enum):
    TITLE_ONLY = "TITLE_ONLY"
    FULL_ACCESS = "FULL_ACCESS"


class ManualShare(BaseModel):
    __tablename__ = "manual_shares"
    __table_args__ = (UniqueConstraint("manual_id", "user_id", name="uq_manual_share_user"),)

    manual_id = Column(UUID(as_uuid=True), ForeignKey("manuals.uuid", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), index=True, nullable=False)
    permission = Column(Enum(TeamRole, name="team_role"), nullable=False)
    shared_at = Column(DateTime, nullable=False)

    # Relationships
    user = relationship("User")


class ExternalShareLink(BaseModel):
    __tablename__ = "external_share_links"

    manual_id = Column(UUID(as_uuid=True), ForeignKey("manuals.uuid", ondelete="CASCADE"), index=True, nullable=False)
    token = Column(String(64), unique=True, index=True, nullable=False)
    access_type = Column(Enum(AccessType, name="access_type"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime, nullable=True)
