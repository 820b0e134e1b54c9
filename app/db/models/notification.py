import enum

from sqlalchemy import Column, String, Boolean, ForeignKey, Enum, UUID
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class NotificationType(str, enum.Enum):
    MANUAL_SHARED = "MANUAL_SHARED"
    PERMISSION_CHANGED = "PERMISSION_CHANGED"
    MEMBER_JOINED = "MEMBER_JOINED"
    INVITATION_RECEIVED = "INVITATION_RECEIVED"


class Notification(BaseModel):
    __tablename__ = "notifications"

    type = Column(Enum(NotificationType, name="notification_type"), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(String(1000), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), index=True, nullable=False)
    related_id = Column(String(64), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)

    # Relationships
    user = relationship("User", back_populates="notifications")
