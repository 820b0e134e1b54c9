from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
import uuid

from app.db.models.manual import BlockType


class ManualHit(BaseModel):
    uuid: uuid.UUID
    title: str
    description: Optional[str] = None
    team_name: Optional[str] = None
    owner_name: Optional[str] = None
    updated_at: datetime


class SectionHit(BaseModel):
    uuid: uuid.UUID
    title: str
    depth: int
    manual_id: uuid.UUID
    manual_title: str
    team_name: Optional[str] = None


class BlockHit(BaseModel):
    uuid: uuid.UUID
    type: BlockType
    preview: str
    raw_preview: str
    section_id: uuid.UUID
    section_title: str
    manual_id: uuid.UUID
    manual_title: str
    team_name: Optional[str] = None


class SearchResults(BaseModel):
    manuals: List[ManualHit] = []
    sections: List[SectionHit] = []
    blocks: List[BlockHit] = []


class SearchResponse(BaseModel):
    """Результаты поиска по трем уровням"""
    success: bool = True
    results: SearchResults
    total_results: int = 0
    query: str = ""
