from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.api.deps import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import MessageResponse
from app.domains.manuals.entities import Manual
from app.domains.manuals.permissions import can_edit, can_delete, can_share
from app.domains.manuals.schemas import (
    ManualCreate, ManualUpdate, ManualResponse, ManualDetailResponse, ManualListItem, ManualListResponse,
    SectionCreate, SectionUpdate, SectionReorder, SectionResponse,
    BlockCreate, BlockUpdate, BlockReorder, BlockResponse
)
from app.domains.manuals.services import ManualService

router = APIRouter(prefix="/manual", tags=["manuals"])


def manual_fields(manual: Manual) -> dict:
    return dict(
        uuid=manual.uuid,
        title=manual.title,
        description=manual.description,
        owner_id=manual.owner_id,
        team_id=manual.team_id,
        created_at=manual.created_at,
        updated_at=manual.updated_at
    )


@router.get("", response_model=ManualListResponse)
async def list_manuals(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Мануалы, доступные текущему пользователю"""
    manuals = await ManualService(db).list_manuals(current_user)
    return ManualListResponse(manuals=[
        ManualListItem(**manual_fields(manual), permission=permission)
        for manual, permission in manuals
    ])


@router.post("", response_model=ManualResponse, status_code=status.HTTP_201_CREATED)
async def create_manual(
    manual_data: ManualCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание мануала в команде пользователя"""
    manual = await ManualService(db).create_manual(current_user, manual_data)
    return ManualResponse(**manual_fields(manual))


@router.get("/{manual_uuid}", response_model=ManualDetailResponse)
async def get_manual(
    manual_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Мануал с полным деревом разделов и блоков"""
    manual, sections, permission = await ManualService(db).get_manual_tree(current_user, manual_uuid)
    return ManualDetailResponse(
        **manual_fields(manual),
        sections=[SectionResponse.from_section(s) for s in sections],
        permission=permission,
        can_edit=can_edit(permission),
        can_delete=can_delete(permission),
        can_share=can_share(permission)
    )


@router.put("/{manual_uuid}", response_model=ManualResponse)
async def update_manual(
    manual_uuid: uuid.UUID,
    update_data: ManualUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    manual = await ManualService(db).update_manual(current_user, manual_uuid, update_data)
    return ManualResponse(**manual_fields(manual))


@router.delete("/{manual_uuid}", response_model=MessageResponse)
async def delete_manual(
    manual_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ManualService(db).delete_manual(current_user, manual_uuid)
    return MessageResponse(message="Manual deleted")


# Разделы

@router.post("/{manual_uuid}/section", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
async def add_section(
    manual_uuid: uuid.UUID,
    section_data: SectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    section = await ManualService(db).add_section(current_user, manual_uuid, section_data)
    return SectionResponse.from_section(section)


# reorder объявлен раньше /{section_uuid}, иначе путь перехватит параметр
@router.put("/{manual_uuid}/section/reorder", response_model=MessageResponse)
async def reorder_sections(
    manual_uuid: uuid.UUID,
    reorder_data: SectionReorder,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ManualService(db).reorder_sections(current_user, manual_uuid, reorder_data.sections)
    return MessageResponse(message="Sections reordered")


@router.put("/{manual_uuid}/section/{section_uuid}", response_model=SectionResponse)
async def update_section(
    manual_uuid: uuid.UUID,
    section_uuid: uuid.UUID,
    update_data: SectionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    section = await ManualService(db).update_section(current_user, manual_uuid, section_uuid, update_data)
    return SectionResponse.from_section(section)


@router.delete("/{manual_uuid}/section/{section_uuid}", response_model=MessageResponse)
async def delete_section(
    manual_uuid: uuid.UUID,
    section_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ManualService(db).delete_section(current_user, manual_uuid, section_uuid)
    return MessageResponse(message="Section deleted")


# Блоки

@router.post("/{manual_uuid}/block", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
async def add_block(
    manual_uuid: uuid.UUID,
    block_data: BlockCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    block = await ManualService(db).add_block(current_user, manual_uuid, block_data)
    return BlockResponse.from_block(block)


@router.put("/{manual_uuid}/block/reorder", response_model=MessageResponse)
async def reorder_blocks(
    manual_uuid: uuid.UUID,
    reorder_data: BlockReorder,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ManualService(db).reorder_blocks(current_user, manual_uuid, reorder_data.blocks)
    return MessageResponse(message="Blocks reordered")


@router.put("/{manual_uuid}/block/{block_uuid}", response_model=BlockResponse)
async def update_block(
    manual_uuid: uuid.UUID,
    block_uuid: uuid.UUID,
    update_data: BlockUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    block = await ManualService(db).update_block(current_user, manual_uuid, block_uuid, update_data)
    return BlockResponse.from_block(block)


@router.delete("/{manual_uuid}/block/{block_uuid}", response_model=MessageResponse)
async def delete_block(
    manual_uuid: uuid.UUID,
    block_uuid: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ManualService(db).delete_block(current_user, manual_uuid, block_uuid)
    return MessageResponse(message="Block deleted")
