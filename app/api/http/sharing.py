from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.api.deps import get_current_user
from app.core.config import settings
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import MessageResponse
from app.domains.manuals.schemas import SectionResponse
from app.domains.sharing.entities import ManualShare, ExternalLink
from app.domains.sharing.schemas import (
    ShareCreate, ShareUpdate, ExternalLinkCreate, ExternalLinkUpdate,
    ShareSettingsResponse, ShareTeamMember, SharedUserResponse, ExternalLinkResponse,
    SectionOutlineResponse, PublicPerson, PublicManualResponse, PublicShareResponse
)
from app.domains.sharing.services import SharingService, PublicShareService

router = APIRouter(prefix="/manual/{manual_uuid}/share", tags=["sharing"])
public_router = APIRouter(prefix="/share", tags=["sharing"])


def share_url(token: str) -> str:
    return f"{settings.app_base_url}/share/{token}"


def shared_user_response(share: ManualShare, user: User) -> SharedUserResponse:
    return SharedUserResponse(
        uuid=share.uuid,
        user_id=user.uuid,
        user_name=user.name,
        user_email=user.email,
        permission=share.permission,
        shared_at=share.shared_at
    )


def link_response(link: ExternalLink) -> ExternalLinkResponse:
    return ExternalLinkResponse(
        uuid=link.uuid,
        token=link.token,
        access_type=link.access_type,
        is_active=link.is_active,
        created_at=link.created_at,
        expires_at=link.expires_at,
        url=share_url(link.token)
    )


@router.get("", response_model=ShareSettingsResponse)
async def get_share_settings(
    manual_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Настройки шаринга: участники команды, персональные доступы, ссылки"""
    team_members, shared_users, links = await SharingService(db).get_settings(current_user, manual_uuid)
    return ShareSettingsResponse(
        team_members=[
            ShareTeamMember(user_id=user.uuid, name=user.name, email=user.email, role=member.role)
            for member, user in team_members
        ],
        shared_users=[shared_user_response(share, user) for share, user in shared_users],
        external_links=[link_response(link) for link in links]
    )


@router.post("", response_model=SharedUserResponse, status_code=status.HTTP_201_CREATED)
@router.post("/team", response_model=SharedUserResponse, status_code=status.HTTP_201_CREATED)
async def share_with_member(
    manual_uuid: uuid.UUID,
    share_data: ShareCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Персональный доступ для участника команды"""
    share, user = await SharingService(db).share_with_member(current_user, manual_uuid, share_data)
    return shared_user_response(share, user)


@router.put("/team/{share_uuid}", response_model=MessageResponse)
async def update_share(
    manual_uuid: uuid.UUID,
    share_uuid: uuid.UUID,
    share_data: ShareUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    share = await SharingService(db).update_share(current_user, manual_uuid, share_uuid, share_data.permission)
    return MessageResponse(message=f"Permission changed to {share.permission.value}")


@router.delete("/team/{share_uuid}", response_model=MessageResponse)
async def remove_share(
    manual_uuid: uuid.UUID,
    share_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await SharingService(db).remove_share(current_user, manual_uuid, share_uuid)
    return MessageResponse(message="Share removed")


@router.post("/external", response_model=ExternalLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    manual_uuid: uuid.UUID,
    link_data: ExternalLinkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    link = await SharingService(db).create_link(current_user, manual_uuid, link_data)
    return link_response(link)


@router.put("/external/{link_uuid}", response_model=ExternalLinkResponse)
async def update_link(
    manual_uuid: uuid.UUID,
    link_uuid: uuid.UUID,
    link_data: ExternalLinkUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Включение и выключение ссылки"""
    link = await SharingService(db).set_link_active(current_user, manual_uuid, link_uuid, link_data.is_active)
    return link_response(link)


@router.delete("/external/{link_uuid}", response_model=MessageResponse)
async def delete_link(
    manual_uuid: uuid.UUID,
    link_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await SharingService(db).delete_link(current_user, manual_uuid, link_uuid)
    return MessageResponse(message="Share link deleted")


@public_router.get("/{token}", response_model=PublicShareResponse)
async def get_shared_manual(token: str, db: AsyncSession = Depends(get_db)):
    """Публичный просмотр мануала по ссылке"""
    link, manual, sections, owner, team = await PublicShareService(db).get_shared_manual(token)

    if link.is_title_only:
        section_responses = [SectionOutlineResponse.from_section(s) for s in sections]
    else:
        section_responses = [SectionResponse.from_section(s) for s in sections]

    return PublicShareResponse(
        manual=PublicManualResponse(
            uuid=manual.uuid,
            title=manual.title,
            description=manual.description,
            owner=PublicPerson(uuid=owner.uuid, name=owner.name) if owner else None,
            team=PublicPerson(uuid=team.uuid, name=team.name) if team else None,
            sections=section_responses,
            created_at=manual.created_at,
            updated_at=manual.updated_at
        ),
        access_type=link.access_type
    )
