from sqlalchemy import Column, String, Text, ForeignKey, UUID
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class ManualVersion(BaseModel):
    __tablename__ = "manual_versions"

    manual_id = Column(UUID(as_uuid=True), ForeignKey("manuals.uuid", ondelete="CASCADE"), index=True, nullable=False)
    content = Column(Text, nullable=False)
    summary = Column(String(500), nullable=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), nullable=False)

    # Relationships
    manual = relationship("Manual", back_populates="versions")
    creator = relationship("User")
