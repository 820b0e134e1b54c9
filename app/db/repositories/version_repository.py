from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from app.db.models.version import ManualVersion as ManualVersionModel

if TYPE_CHECKING:
    from app.domains.versions.entities import ManualVersion


class ManualVersionRepository:
    """Репозиторий для работы с версиями мануалов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, version: "ManualVersion") -> "ManualVersion":
        """Создание новой версии"""
        db_version = ManualVersionModel(
            uuid=version.uuid,
            manual_id=version.manual_id,
            content=version.content,
            summary=version.summary,
            created_by=version.created_by
        )
        self.session.add(db_version)
        await self.session.flush()
        await self.session.refresh(db_version)
        return self._to_domain(db_version)

    async def get_by_uuid(self, version_uuid: uuid.UUID) -> Optional["ManualVersion"]:
        """Получение версии по UUID"""
        result = await self.session.execute(
            select(ManualVersionModel).where(ManualVersionModel.uuid == version_uuid)
        )
        db_version = result.scalar_one_or_none()
        return self._to_domain(db_version) if db_version else None

    async def list_by_manual(self, manual_uuid: uuid.UUID, limit: int = 50) -> List["ManualVersion"]:
        """Версии мануала, новые первыми"""
        result = await self.session.execute(
            select(ManualVersionModel)
            .where(ManualVersionModel.manual_id == manual_uuid)
            .order_by(ManualVersionModel.created_at.desc())
            .limit(limit)
        )
        return [self._to_domain(v) for v in result.scalars().all()]

    def _to_domain(self, db_version: ManualVersionModel) -> "ManualVersion":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.versions.entities import ManualVersion

        return ManualVersion(
            uuid=db_version.uuid,
            manual_id=db_version.manual_id,
            content=db_version.content,
            created_by=db_version.created_by,
            summary=db_version.summary,
            created_at=db_version.created_at
        )
