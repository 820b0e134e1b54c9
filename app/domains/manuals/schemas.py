from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union, Dict, Any
from datetime import datetime
import uuid

from app.db.models.manual import BlockType
from app.domains.manuals.entities import Section, Block
from app.domains.manuals.permissions import Permission


class ManualBase(BaseModel):
    """Базовая схема мануала"""
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class ManualCreate(ManualBase):
    """Схема для создания мануала"""
    pass


class ManualUpdate(BaseModel):
    """Схема для обновления мануала"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip() if v else v


class SectionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    parent_id: Optional[uuid.UUID] = None


class SectionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    order: Optional[int] = Field(None, ge=0)


class BlockCreate(BaseModel):
    section_id: uuid.UUID
    type: BlockType
    content: Union[str, Dict[str, Any], None] = None


class BlockUpdate(BaseModel):
    content: Union[str, Dict[str, Any], None] = None
    order: Optional[int] = Field(None, ge=0)


class ReorderItem(BaseModel):
    uuid: uuid.UUID
    order: int = Field(..., ge=0)


class SectionReorder(BaseModel):
    """Полный список (uuid, order) для разделов"""
    sections: List[ReorderItem]


class BlockReorder(BaseModel):
    """Полный список (uuid, order) для блоков"""
    blocks: List[ReorderItem]


class BlockResponse(BaseModel):
    uuid: uuid.UUID
    section_id: uuid.UUID
    type: BlockType
    content: str
    order: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_block(cls, block: Block) -> "BlockResponse":
        return cls(
            uuid=block.uuid,
            section_id=block.section_id,
            type=block.type,
            content=block.content,
            order=block.order,
            created_at=block.created_at,
            updated_at=block.updated_at
        )


class SectionResponse(BaseModel):
    """Раздел с блоками и подразделами"""
    uuid: uuid.UUID
    manual_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    title: str
    order: int
    depth: int
    blocks: List[BlockResponse] = []
    children: List["SectionResponse"] = []

    @classmethod
    def from_section(cls, section: Section) -> "SectionResponse":
        return cls(
            uuid=section.uuid,
            manual_id=section.manual_id,
            parent_id=section.parent_id,
            title=section.title,
            order=section.order,
            depth=section.depth,
            blocks=[BlockResponse.from_block(b) for b in section.blocks],
            children=[cls.from_section(child) for child in section.children]
        )


class ManualResponse(ManualBase):
    """Схема для ответа с данными мануала"""
    uuid: uuid.UUID
    owner_id: uuid.UUID
    team_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class ManualDetailResponse(ManualResponse):
    """Мануал с деревом разделов и правами текущего пользователя"""
    sections: List[SectionResponse]
    permission: Permission
    can_edit: bool
    can_delete: bool
    can_share: bool


class ManualListItem(ManualResponse):
    permission: Permission


class ManualListResponse(BaseModel):
    manuals: List[ManualListItem]
