from sqlalchemy import Column, String, Integer, ForeignKey, UUID

from app.db.base import BaseModel


class StoredFile(BaseModel):
    __tablename__ = "files"

    filename = Column(String(255), nullable=False)
    stored_filename = Column(String(255), unique=True, nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String(500), nullable=False)
    uploaded_by = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), nullable=False)
    manual_id = Column(UUID(as_uuid=True), ForeignKey("manuals.uuid", ondelete="SET NULL"), nullable=True)
