from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.api.deps import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.versions.entities import ManualVersion
from app.domains.versions.schemas import (
    VersionCreate, VersionCreator, VersionResponse, VersionDetailResponse, VersionListResponse, RestoreResponse
)
from app.domains.versions.services import VersionService

router = APIRouter(prefix="/manual/{manual_uuid}/version", tags=["versions"])


def version_fields(version: ManualVersion, creator: Optional[User]) -> dict:
    return dict(
        uuid=version.uuid,
        manual_id=version.manual_id,
        summary=version.summary,
        created_by=version.created_by,
        creator=VersionCreator(uuid=creator.uuid, name=creator.name) if creator else None,
        created_at=version.created_at
    )


@router.get("", response_model=VersionListResponse)
async def list_versions(
    manual_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Последние версии мануала"""
    version_service = VersionService(db)
    versions = await version_service.list_versions(current_user, manual_uuid)
    creators = await version_service.get_creators(versions)
    return VersionListResponse(versions=[
        VersionResponse(**version_fields(v, creators.get(v.created_by))) for v in versions
    ])


@router.post("", response_model=VersionResponse, status_code=status.HTTP_201_CREATED)
async def create_version(
    manual_uuid: uuid.UUID,
    version_data: VersionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    version = await VersionService(db).create_version(current_user, manual_uuid, version_data.summary)
    return VersionResponse(**version_fields(version, current_user))


@router.get("/{version_uuid}", response_model=VersionDetailResponse)
async def get_version(
    manual_uuid: uuid.UUID,
    version_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    version_service = VersionService(db)
    version = await version_service.get_version(current_user, manual_uuid, version_uuid)
    creators = await version_service.get_creators([version])
    return VersionDetailResponse(
        **version_fields(version, creators.get(version.created_by)),
        content=VersionService.decode_content(version)
    )


@router.post("/{version_uuid}/restore", response_model=RestoreResponse)
async def restore_version(
    manual_uuid: uuid.UUID,
    version_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Восстановление мануала из снимка"""
    sections, blocks = await VersionService(db).restore_version(current_user, manual_uuid, version_uuid)
    return RestoreResponse(
        message="Version restored",
        sections_restored=sections,
        blocks_restored=blocks
    )
