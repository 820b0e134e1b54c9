import logging
import uuid
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import unit_of_work
from app.core.errors import BadRequestError, ForbiddenError, NotFoundError
from app.db.repositories.manual_repository import ManualRepository, SectionRepository, BlockRepository
from app.db.repositories.team_repository import TeamMemberRepository
from app.db.repositories.version_repository import ManualVersionRepository
from app.domains.identity.entities import User
from app.domains.manuals.access import ManualAccessService
from app.domains.manuals.blocks import normalize_block_content
from app.domains.manuals.entities import Manual, Section, Block, MAX_SECTION_DEPTH, build_section_tree
from app.domains.manuals.permissions import Permission
from app.domains.manuals.schemas import (
    ManualCreate, ManualUpdate, SectionCreate, SectionUpdate,
    BlockCreate, BlockUpdate, ReorderItem
)
from app.domains.versions.entities import ManualVersion
from app.domains.manuals.snapshot import build_snapshot

logger = logging.getLogger(__name__)

INITIAL_VERSION_SUMMARY = "Initial version"


class ManualService:
    """Сервис для работы с мануалами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.access = ManualAccessService(session)
        self.manual_repository = ManualRepository(session)
        self.section_repository = SectionRepository(session)
        self.block_repository = BlockRepository(session)
        self.member_repository = TeamMemberRepository(session)
        self.version_repository = ManualVersionRepository(session)

    async def list_manuals(self, user: User) -> List[Tuple[Manual, Permission]]:
        """Мануалы, доступные пользователю, с его правом на каждый"""
        membership = await self.member_repository.get_by_user(user.uuid)
        manuals = await self.manual_repository.list_accessible(
            user.uuid, membership.team_id if membership else None
        )
        return [(manual, await self.access.permission_for(user.uuid, manual)) for manual in manuals]

    async def create_manual(self, user: User, manual_data: ManualCreate) -> Manual:
        """Создание мануала в команде пользователя вместе с начальной версией"""
        membership = await self.member_repository.get_by_user(user.uuid)
        if not membership:
            raise BadRequestError("You are not a member of any team")
        if not membership.can_author:
            raise ForbiddenError("You don't have permission to create manuals")

        manual = Manual.create_manual(
            title=manual_data.title,
            owner_id=user.uuid,
            team_id=membership.team_id,
            description=manual_data.description
        )

        async with unit_of_work(self.session):
            manual = await self.manual_repository.create(manual)
            await self.version_repository.create(ManualVersion.create_version(
                manual_id=manual.uuid,
                content=build_snapshot(manual, [], []),
                created_by=user.uuid,
                summary=INITIAL_VERSION_SUMMARY
            ))

        logger.info(f"Manual {manual.uuid} created by {user.uuid}")
        return manual

    async def get_manual_tree(self, user: User, manual_uuid: uuid.UUID) -> Tuple[Manual, List[Section], Permission]:
        """Мануал с деревом разделов и правом пользователя"""
        manual, permission = await self.access.require_view(user.uuid, manual_uuid)
        return manual, await self.load_tree(manual.uuid), permission

    async def load_tree(self, manual_uuid: uuid.UUID) -> List[Section]:
        sections = await self.section_repository.list_by_manual(manual_uuid)
        blocks = await self.block_repository.list_by_manual(manual_uuid)
        return build_section_tree(sections, blocks)

    async def update_manual(self, user: User, manual_uuid: uuid.UUID, update_data: ManualUpdate) -> Manual:
        manual, _ = await self.access.require_edit(user.uuid, manual_uuid)
        # явный null очищает описание, отсутствующее поле оставляет как есть
        if "description" in update_data.model_fields_set:
            manual.description = update_data.description
        manual.update_info(title=update_data.title)
        async with unit_of_work(self.session):
            await self.manual_repository.update(manual)
        return manual

    async def delete_manual(self, user: User, manual_uuid: uuid.UUID) -> None:
        """Удаление мануала, только владелец"""
        await self.access.require_delete(user.uuid, manual_uuid)
        async with unit_of_work(self.session):
            await self.manual_repository.delete(manual_uuid)
        logger.info(f"Manual {manual_uuid} deleted by {user.uuid}")

    # Разделы

    async def add_section(self, user: User, manual_uuid: uuid.UUID, section_data: SectionCreate) -> Section:
        """Добавление раздела в конец списка соседей"""
        await self.access.require_edit(user.uuid, manual_uuid)

        parent = None
        if section_data.parent_id:
            parent = await self.section_repository.get_by_uuid(section_data.parent_id)
            if not parent or parent.manual_id != manual_uuid:
                raise NotFoundError("Parent section not found")
            if parent.depth + 1 > MAX_SECTION_DEPTH:
                raise BadRequestError(f"Sections can be nested at most {MAX_SECTION_DEPTH} levels deep")

        async with unit_of_work(self.session):
            order = await self.section_repository.next_order(manual_uuid, parent.uuid if parent else None)
            section = await self.section_repository.create(
                Section.create_section(manual_uuid, section_data.title, order, parent)
            )
            await self.manual_repository.touch(manual_uuid)

        return section

    async def _get_section(self, manual_uuid: uuid.UUID, section_uuid: uuid.UUID) -> Section:
        section = await self.section_repository.get_by_uuid(section_uuid)
        if not section or section.manual_id != manual_uuid:
            raise NotFoundError("Section not found")
        return section

    async def update_section(
        self, user: User, manual_uuid: uuid.UUID, section_uuid: uuid.UUID, update_data: SectionUpdate
    ) -> Section:
        await self.access.require_edit(user.uuid, manual_uuid)
        section = await self._get_section(manual_uuid, section_uuid)

        if update_data.title is not None:
            section.title = update_data.title
        if update_data.order is not None:
            section.order = update_data.order

        async with unit_of_work(self.session):
            await self.section_repository.update(section)
            await self.manual_repository.touch(manual_uuid)
        return section

    async def delete_section(self, user: User, manual_uuid: uuid.UUID, section_uuid: uuid.UUID) -> None:
        """Удаление раздела вместе с подразделами и блоками"""
        await self.access.require_edit(user.uuid, manual_uuid)
        await self._get_section(manual_uuid, section_uuid)
        async with unit_of_work(self.session):
            await self.section_repository.delete(section_uuid)
            await self.manual_repository.touch(manual_uuid)

    async def reorder_sections(self, user: User, manual_uuid: uuid.UUID, items: List[ReorderItem]) -> None:
        """Применение полного списка порядков одной транзакцией"""
        await self.access.require_edit(user.uuid, manual_uuid)
        orders = _orders_map(items)
        if await self.section_repository.count_in_manual(manual_uuid, list(orders)) != len(orders):
            raise NotFoundError("Section not found")

        async with unit_of_work(self.session):
            await self.section_repository.set_orders(orders)
            await self.manual_repository.touch(manual_uuid)

    # Блоки

    async def add_block(self, user: User, manual_uuid: uuid.UUID, block_data: BlockCreate) -> Block:
        """Добавление блока в конец раздела"""
        await self.access.require_edit(user.uuid, manual_uuid)
        await self._get_section(manual_uuid, block_data.section_id)
        content = normalize_block_content(block_data.type, block_data.content)

        async with unit_of_work(self.session):
            order = await self.block_repository.next_order(block_data.section_id)
            block = await self.block_repository.create(
                Block.create_block(block_data.section_id, block_data.type, content, order)
            )
            await self.manual_repository.touch(manual_uuid)

        return block

    async def _get_block(self, manual_uuid: uuid.UUID, block_uuid: uuid.UUID) -> Block:
        block = await self.block_repository.get_in_manual(block_uuid, manual_uuid)
        if not block:
            raise NotFoundError("Block not found")
        return block

    async def update_block(
        self, user: User, manual_uuid: uuid.UUID, block_uuid: uuid.UUID, update_data: BlockUpdate
    ) -> Block:
        """Обновление содержимого или порядка блока; последняя запись побеждает"""
        await self.access.require_edit(user.uuid, manual_uuid)
        block = await self._get_block(manual_uuid, block_uuid)

        if "content" in update_data.model_fields_set:
            block.content = normalize_block_content(block.type, update_data.content)
        if update_data.order is not None:
            block.order = update_data.order

        async with unit_of_work(self.session):
            await self.block_repository.update(block)
            await self.manual_repository.touch(manual_uuid)
        return block

    async def delete_block(self, user: User, manual_uuid: uuid.UUID, block_uuid: uuid.UUID) -> None:
        await self.access.require_edit(user.uuid, manual_uuid)
        await self._get_block(manual_uuid, block_uuid)
        async with unit_of_work(self.session):
            await self.block_repository.delete(block_uuid)
            await self.manual_repository.touch(manual_uuid)

    async def reorder_blocks(self, user: User, manual_uuid: uuid.UUID, items: List[ReorderItem]) -> None:
        await self.access.require_edit(user.uuid, manual_uuid)
        orders = _orders_map(items)
        if await self.block_repository.count_in_manual(manual_uuid, list(orders)) != len(orders):
            raise NotFoundError("Block not found")

        async with unit_of_work(self.session):
            await self.block_repository.set_orders(orders)
            await self.manual_repository.touch(manual_uuid)


def _orders_map(items: List[ReorderItem]) -> dict:
    orders = {item.uuid: item.order for item in items}
    if len(orders) != len(items):
        raise BadRequestError("Duplicate ids in reorder list")
    return orders
