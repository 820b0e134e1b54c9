from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime, timezone
import uuid

from app.db.models.sharing import AccessType
from app.db.models.team import TeamRole
from app.domains.manuals.entities import Section
from app.domains.manuals.schemas import SectionResponse


def _validate_share_permission(v):
    if v not in (TeamRole.EDITOR, TeamRole.VIEWER):
        raise ValueError('Permission must be EDITOR or VIEWER')
    return v


class ShareCreate(BaseModel):
    """Персональный доступ для участника команды"""
    user_id: uuid.UUID
    permission: TeamRole

    @field_validator('permission')
    @classmethod
    def validate_permission(cls, v):
        return _validate_share_permission(v)


class ShareUpdate(BaseModel):
    permission: TeamRole

    @field_validator('permission')
    @classmethod
    def validate_permission(cls, v):
        return _validate_share_permission(v)


class ExternalLinkCreate(BaseModel):
    """Создание внешней ссылки"""
    access_type: AccessType
    expires_at: Optional[datetime] = None

    @field_validator('expires_at')
    @classmethod
    def to_naive_utc(cls, v):
        # В БД храним naive UTC
        if v is not None and v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class ExternalLinkUpdate(BaseModel):
    is_active: bool


class ShareTeamMember(BaseModel):
    user_id: uuid.UUID
    name: str
    email: str
    role: TeamRole


class SharedUserResponse(BaseModel):
    uuid: uuid.UUID
    user_id: uuid.UUID
    user_name: str
    user_email: str
    permission: TeamRole
    shared_at: datetime


class ExternalLinkResponse(BaseModel):
    uuid: uuid.UUID
    token: str
    access_type: AccessType
    is_active: bool
    created_at: datetime
    expires_at: Optional[datetime] = None
    url: str


class ShareSettingsResponse(BaseModel):
    """Настройки шаринга мануала"""
    team_members: List[ShareTeamMember]
    shared_users: List[SharedUserResponse]
    external_links: List[ExternalLinkResponse]


class SectionOutlineResponse(BaseModel):
    """Раздел без содержимого блоков"""
    uuid: uuid.UUID
    title: str
    order: int
    depth: int
    blocks: List[dict] = []
    children: List["SectionOutlineResponse"] = []

    @classmethod
    def from_section(cls, section: Section) -> "SectionOutlineResponse":
        return cls(
            uuid=section.uuid,
            title=section.title,
            order=section.order,
            depth=section.depth,
            blocks=[],
            children=[cls.from_section(child) for child in section.children]
        )


class PublicPerson(BaseModel):
    uuid: uuid.UUID
    name: str


class PublicManualResponse(BaseModel):
    uuid: uuid.UUID
    title: str
    description: Optional[str] = None
    owner: Optional[PublicPerson] = None
    team: Optional[PublicPerson] = None
    sections: List[Union[SectionResponse, SectionOutlineResponse]]
    created_at: datetime
    updated_at: datetime


class PublicShareResponse(BaseModel):
    success: bool = True
    manual: PublicManualResponse
    access_type: AccessType
