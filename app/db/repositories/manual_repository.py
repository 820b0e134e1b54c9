from typing import Optional, List, Dict, TYPE_CHECKING
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, or_
import uuid

from app.db.models.manual import (
    Manual as ManualModel, ManualSection as SectionModel, ContentBlock as BlockModel
)
from app.db.models.sharing import ManualShare as ManualShareModel

if TYPE_CHECKING:
    from app.domains.manuals.entities import Manual, Section, Block


class ManualRepository:
    """Репозиторий для работы с мануалами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, manual: "Manual") -> "Manual":
        """Создание нового мануала"""
        db_manual = ManualModel(
            uuid=manual.uuid,
            title=manual.title,
            description=manual.description,
            owner_id=manual.owner_id,
            team_id=manual.team_id
        )
        self.session.add(db_manual)
        await self.session.flush()
        await self.session.refresh(db_manual)
        return self._to_domain(db_manual)

    async def get_by_uuid(self, manual_uuid: uuid.UUID) -> Optional["Manual"]:
        """Получение мануала по UUID"""
        result = await self.session.execute(
            select(ManualModel).where(ManualModel.uuid == manual_uuid)
        )
        db_manual = result.scalar_one_or_none()
        return self._to_domain(db_manual) if db_manual else None

    async def get_by_uuids(self, manual_uuids: List[uuid.UUID]) -> Dict[uuid.UUID, "Manual"]:
        if not manual_uuids:
            return {}
        result = await self.session.execute(
            select(ManualModel).where(ManualModel.uuid.in_(manual_uuids))
        )
        return {m.uuid: self._to_domain(m) for m in result.scalars().all()}

    def accessible_ids_query(self, user_id: uuid.UUID, team_id: Optional[uuid.UUID]):
        """Подзапрос UUID мануалов, доступных пользователю"""
        shared = select(ManualShareModel.manual_id).where(ManualShareModel.user_id == user_id)
        conditions = [ManualModel.owner_id == user_id, ManualModel.uuid.in_(shared)]
        if team_id is not None:
            conditions.append(ManualModel.team_id == team_id)
        return select(ManualModel.uuid).where(or_(*conditions))

    async def list_accessible(self, user_id: uuid.UUID, team_id: Optional[uuid.UUID]) -> List["Manual"]:
        """Мануалы владельца, его команды и расшаренные ему, свежие первыми"""
        result = await self.session.execute(
            select(ManualModel)
            .where(ManualModel.uuid.in_(self.accessible_ids_query(user_id, team_id)))
            .order_by(ManualModel.updated_at.desc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_by_team(self, team_id: uuid.UUID) -> List["Manual"]:
        result = await self.session.execute(
            select(ManualModel)
            .where(ManualModel.team_id == team_id)
            .order_by(ManualModel.updated_at.desc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update(self, manual: "Manual") -> "Manual":
        """Обновление мануала"""
        await self.session.execute(
            update(ManualModel)
            .where(ManualModel.uuid == manual.uuid)
            .values(
                title=manual.title,
                description=manual.description,
                updated_at=manual.updated_at
            )
        )
        await self.session.flush()
        return manual

    async def touch(self, manual_uuid: uuid.UUID) -> None:
        """Обновление updated_at после любой правки дерева"""
        await self.session.execute(
            update(ManualModel)
            .where(ManualModel.uuid == manual_uuid)
            .values(updated_at=datetime.utcnow())
        )

    async def delete(self, manual_uuid: uuid.UUID) -> bool:
        """Удаление мануала; разделы, блоки, шаринг и версии удаляются каскадом"""
        result = await self.session.execute(
            delete(ManualModel).where(ManualModel.uuid == manual_uuid)
        )
        return result.rowcount > 0

    async def search(self, query: str, accessible_ids, limit: int = 20) -> List["Manual"]:
        """Поиск по заголовку и описанию"""
        result = await self.session.execute(
            select(ManualModel)
            .where(
                ManualModel.uuid.in_(accessible_ids),
                or_(
                    ManualModel.title.icontains(query, autoescape=True),
                    ManualModel.description.icontains(query, autoescape=True)
                )
            )
            .order_by(ManualModel.updated_at.desc())
            .limit(limit)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    def _to_domain(self, db_manual: ManualModel) -> "Manual":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.manuals.entities import Manual

        return Manual(
            uuid=db_manual.uuid,
            title=db_manual.title,
            owner_id=db_manual.owner_id,
            team_id=db_manual.team_id,
            description=db_manual.description,
            created_at=db_manual.created_at,
            updated_at=db_manual.updated_at
        )


class SectionRepository:
    """Репозиторий для работы с разделами мануала"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, section: "Section") -> "Section":
        db_section = SectionModel(
            uuid=section.uuid,
            manual_id=section.manual_id,
            parent_id=section.parent_id,
            title=section.title,
            order=section.order,
            depth=section.depth
        )
        self.session.add(db_section)
        await self.session.flush()
        await self.session.refresh(db_section)
        return self._to_domain(db_section)

    async def get_by_uuid(self, section_uuid: uuid.UUID) -> Optional["Section"]:
        result = await self.session.execute(
            select(SectionModel).where(SectionModel.uuid == section_uuid)
        )
        db_section = result.scalar_one_or_none()
        return self._to_domain(db_section) if db_section else None

    async def list_by_manual(self, manual_uuid: uuid.UUID) -> List["Section"]:
        """Все разделы мануала плоским списком"""
        result = await self.session.execute(
            select(SectionModel)
            .where(SectionModel.manual_id == manual_uuid)
            .order_by(SectionModel.depth.asc(), SectionModel.order.asc())
        )
        return [self._to_domain(s) for s in result.scalars().all()]

    async def next_order(self, manual_uuid: uuid.UUID, parent_id: Optional[uuid.UUID]) -> int:
        """Следующий order среди соседей; первый раздел получает 0"""
        parent_condition = (
            SectionModel.parent_id.is_(None) if parent_id is None else SectionModel.parent_id == parent_id
        )
        result = await self.session.execute(
            select(func.max(SectionModel.order)).where(
                SectionModel.manual_id == manual_uuid,
                parent_condition
            )
        )
        current = result.scalar()
        return 0 if current is None else current + 1

    async def count_in_manual(self, manual_uuid: uuid.UUID, section_uuids: List[uuid.UUID]) -> int:
        result = await self.session.execute(
            select(func.count(SectionModel.uuid)).where(
                SectionModel.manual_id == manual_uuid,
                SectionModel.uuid.in_(section_uuids)
            )
        )
        return result.scalar() or 0

    async def update(self, section: "Section") -> "Section":
        await self.session.execute(
            update(SectionModel)
            .where(SectionModel.uuid == section.uuid)
            .values(title=section.title, order=section.order, updated_at=datetime.utcnow())
        )
        await self.session.flush()
        return section

    async def set_orders(self, orders: Dict[uuid.UUID, int]) -> None:
        """Массовое обновление order по первичному ключу"""
        if not orders:
            return
        await self.session.execute(
            update(SectionModel),
            [{"uuid": section_uuid, "order": order} for section_uuid, order in orders.items()]
        )

    async def delete(self, section_uuid: uuid.UUID) -> bool:
        """Удаление раздела; подразделы и блоки удаляются каскадом"""
        result = await self.session.execute(
            delete(SectionModel).where(SectionModel.uuid == section_uuid)
        )
        return result.rowcount > 0

    async def delete_by_manual(self, manual_uuid: uuid.UUID) -> int:
        result = await self.session.execute(
            delete(SectionModel).where(SectionModel.manual_id == manual_uuid)
        )
        return result.rowcount

    async def search(self, query: str, accessible_ids, limit: int = 30) -> List["Section"]:
        """Поиск по заголовкам разделов"""
        result = await self.session.execute(
            select(SectionModel)
            .where(
                SectionModel.manual_id.in_(accessible_ids),
                SectionModel.title.icontains(query, autoescape=True)
            )
            .order_by(SectionModel.updated_at.desc())
            .limit(limit)
        )
        return [self._to_domain(s) for s in result.scalars().all()]

    def _to_domain(self, db_section: SectionModel) -> "Section":
        from app.domains.manuals.entities import Section

        return Section(
            uuid=db_section.uuid,
            manual_id=db_section.manual_id,
            title=db_section.title,
            order=db_section.order,
            depth=db_section.depth,
            parent_id=db_section.parent_id,
            created_at=db_section.created_at,
            updated_at=db_section.updated_at
        )


class BlockRepository:
    """Репозиторий для работы с блоками контента"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, block: "Block") -> "Block":
        db_block = BlockModel(
            uuid=block.uuid,
            section_id=block.section_id,
            type=block.type,
            content=block.content,
            order=block.order
        )
        self.session.add(db_block)
        await self.session.flush()
        await self.session.refresh(db_block)
        return self._to_domain(db_block)

    async def get_in_manual(self, block_uuid: uuid.UUID, manual_uuid: uuid.UUID) -> Optional["Block"]:
        """Блок, только если его раздел принадлежит мануалу"""
        result = await self.session.execute(
            select(BlockModel)
            .join(SectionModel, BlockModel.section_id == SectionModel.uuid)
            .where(BlockModel.uuid == block_uuid, SectionModel.manual_id == manual_uuid)
        )
        db_block = result.scalar_one_or_none()
        return self._to_domain(db_block) if db_block else None

    async def list_by_manual(self, manual_uuid: uuid.UUID) -> List["Block"]:
        result = await self.session.execute(
            select(BlockModel)
            .join(SectionModel, BlockModel.section_id == SectionModel.uuid)
            .where(SectionModel.manual_id == manual_uuid)
            .order_by(BlockModel.order.asc())
        )
        return [self._to_domain(b) for b in result.scalars().all()]

    async def next_order(self, section_uuid: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.max(BlockModel.order)).where(BlockModel.section_id == section_uuid)
        )
        current = result.scalar()
        return 0 if current is None else current + 1

    async def count_in_manual(self, manual_uuid: uuid.UUID, block_uuids: List[uuid.UUID]) -> int:
        result = await self.session.execute(
            select(func.count(BlockModel.uuid))
            .join(SectionModel, BlockModel.section_id == SectionModel.uuid)
            .where(SectionModel.manual_id == manual_uuid, BlockModel.uuid.in_(block_uuids))
        )
        return result.scalar() or 0

    async def update(self, block: "Block") -> "Block":
        await self.session.execute(
            update(BlockModel)
            .where(BlockModel.uuid == block.uuid)
            .values(content=block.content, order=block.order, updated_at=datetime.utcnow())
        )
        await self.session.flush()
        return block

    async def set_orders(self, orders: Dict[uuid.UUID, int]) -> None:
        if not orders:
            return
        await self.session.execute(
            update(BlockModel),
            [{"uuid": block_uuid, "order": order} for block_uuid, order in orders.items()]
        )

    async def delete(self, block_uuid: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(BlockModel).where(BlockModel.uuid == block_uuid)
        )
        return result.rowcount > 0

    async def search(self, query: str, accessible_ids, limit: int = 50) -> List[tuple]:
        """Поиск по содержимому блоков; возвращает (block, section_title, manual_id)"""
        result = await self.session.execute(
            select(BlockModel, SectionModel.title, SectionModel.manual_id)
            .join(SectionModel, BlockModel.section_id == SectionModel.uuid)
            .where(
                SectionModel.manual_id.in_(accessible_ids),
                BlockModel.content.icontains(query, autoescape=True)
            )
            .order_by(BlockModel.updated_at.desc())
            .limit(limit)
        )
        return [(self._to_domain(row[0]), row[1], row[2]) for row in result.all()]

    def _to_domain(self, db_block: BlockModel) -> "Block":
        from app.domains.manuals.entities import Block

        return Block(
            uuid=db_block.uuid,
            section_id=db_block.section_id,
            type=db_block.type,
            content=db_block.content,
            order=db_block.order,
            created_at=db_block.created_at,
            updated_at=db_block.updated_at
        )
