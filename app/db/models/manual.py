import enum

from sqlalchemy import Column, String, Text, Integer, ForeignKey, Enum, UUID
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class BlockType(str, enum.Enum):
    HEADING1 = "HEADING1"
    HEADING2 = "HEADING2"
    HEADING3 = "HEADING3"
    BODY = "BODY"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    TABLE = "TABLE"
    CODE = "CODE"
    DIVIDER = "DIVIDER"


class Manual(BaseModel):
    __tablename__ = "manuals"

    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), index=True, nullable=False)
    team_id = Column(UUID(as_uuid=True), ForeignKey("teams.uuid", ondelete="CASCADE"), index=True, nullable=False)

    # Relationships
    sections = relationship("ManualSection", back_populates="manual", cascade="all, delete-orphan", passive_deletes=True)
    versions = relationship("ManualVersion", back_populates="manual", cascade="all, delete-orphan", passive_deletes=True)


class ManualSection(BaseModel):
    __tablename__ = "manual_sections"

    manual_id = Column(UUID(as_uuid=True), ForeignKey("manuals.uuid", ondelete="CASCADE"), index=True, nullable=False)
    parent_id = Column(UUID(as_uuid=True), ForeignKey("manual_sections.uuid", ondelete="CASCADE"), index=True, nullable=True)
    title = Column(String(200), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    depth = Column(Integer, nullable=False, default=1)

    # Relationships
    manual = relationship("Manual", back_populates="sections")
    blocks = relationship("ContentBlock", back_populates="section", cascade="all, delete-orphan", passive_deletes=True)


class ContentBlock(BaseModel):
    __tablename__ = "content_blocks"

    section_id = Column(UUID(as_uuid=True), ForeignKey("manual_sections.uuid", ondelete="CASCADE"), index=True, nullable=False)
    type = Column(Enum(BlockType, name="block_type"), nullable=False)
    content = Column(Text, nullable=False, default="")
    order = Column(Integer, nullable=False, default=0)

    # Relationships
    section = relationship("ManualSection", back_populates="blocks")
