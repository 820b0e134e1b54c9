from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime
import uuid


class VersionCreate(BaseModel):
    """Схема для создания версии"""
    summary: Optional[str] = Field(None, max_length=500)


class VersionCreator(BaseModel):
    uuid: uuid.UUID
    name: str


class VersionResponse(BaseModel):
    """Версия без содержимого, для списка"""
    uuid: uuid.UUID
    manual_id: uuid.UUID
    summary: Optional[str] = None
    created_by: uuid.UUID
    creator: Optional[VersionCreator] = None
    created_at: datetime


class VersionDetailResponse(VersionResponse):
    """Версия с разобранным снимком"""
    content: Any


class VersionListResponse(BaseModel):
    versions: List[VersionResponse]


class RestoreResponse(BaseModel):
    success: bool = True
    message: str
    sections_restored: int
    blocks_restored: int
