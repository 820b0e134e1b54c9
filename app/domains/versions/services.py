import json
import logging
import uuid
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import unit_of_work
from app.core.errors import NotFoundError
from app.db.repositories.manual_repository import ManualRepository, SectionRepository, BlockRepository
from app.db.repositories.version_repository import ManualVersionRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.manuals.access import ManualAccessService
from app.domains.versions.entities import ManualVersion
from app.domains.manuals.snapshot import build_snapshot, parse_snapshot, plan_restore

logger = logging.getLogger(__name__)

VERSION_LIST_LIMIT = 50


class VersionService:
    """Сервис для работы с версиями мануалов"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.access = ManualAccessService(session)
        self.manual_repository = ManualRepository(session)
        self.section_repository = SectionRepository(session)
        self.block_repository = BlockRepository(session)
        self.version_repository = ManualVersionRepository(session)
        self.user_repository = UserRepository(session)

    async def list_versions(self, user: User, manual_uuid: uuid.UUID) -> List[ManualVersion]:
        """Последние версии мануала, новые первыми"""
        await self.access.require_view(user.uuid, manual_uuid)
        return await self.version_repository.list_by_manual(manual_uuid, limit=VERSION_LIST_LIMIT)

    async def get_version(self, user: User, manual_uuid: uuid.UUID, version_uuid: uuid.UUID) -> ManualVersion:
        await self.access.require_view(user.uuid, manual_uuid)
        return await self._get_version(manual_uuid, version_uuid)

    async def _get_version(self, manual_uuid: uuid.UUID, version_uuid: uuid.UUID) -> ManualVersion:
        version = await self.version_repository.get_by_uuid(version_uuid)
        if not version or version.manual_id != manual_uuid:
            raise NotFoundError("Version not found")
        return version

    async def create_version(self, user: User, manual_uuid: uuid.UUID, summary: Optional[str] = None) -> ManualVersion:
        """Снимок текущего состояния мануала"""
        manual, _ = await self.access.require_edit(user.uuid, manual_uuid)
        sections = await self.section_repository.list_by_manual(manual_uuid)
        blocks = await self.block_repository.list_by_manual(manual_uuid)

        version = ManualVersion.create_version(
            manual_id=manual_uuid,
            content=build_snapshot(manual, sections, blocks),
            created_by=user.uuid,
            summary=summary
        )
        async with unit_of_work(self.session):
            version = await self.version_repository.create(version)

        logger.info(f"Version {version.uuid} of manual {manual_uuid} created by {user.uuid}")
        return version

    async def restore_version(self, user: User, manual_uuid: uuid.UUID, version_uuid: uuid.UUID) -> Tuple[int, int]:
        """
        Восстановление мануала из версии.

        Текущие разделы удаляются и создаются заново из снимка в одной
        транзакции. Перед восстановлением версия автоматически не создается.
        """
        manual, _ = await self.access.require_edit(user.uuid, manual_uuid)
        version = await self._get_version(manual_uuid, version_uuid)

        snapshot = parse_snapshot(version.content)
        sections, blocks = plan_restore(manual_uuid, snapshot)

        async with unit_of_work(self.session):
            await self.section_repository.delete_by_manual(manual_uuid)

            manual.title = snapshot.title
            manual.description = snapshot.description
            manual.update_info()
            await self.manual_repository.update(manual)

            for section in sections:
                await self.section_repository.create(section)
            for block in blocks:
                await self.block_repository.create(block)

        logger.info(f"Manual {manual_uuid} restored to version {version_uuid} by {user.uuid}")
        return len(sections), len(blocks)

    async def get_creators(self, versions: List[ManualVersion]) -> Dict[uuid.UUID, User]:
        """Авторы версий по их UUID"""
        users = await self.user_repository.get_by_uuids(list({v.created_by for v in versions}))
        return {u.uuid: u for u in users}

    @staticmethod
    def decode_content(version: ManualVersion):
        """Снимок как JSON объект; поврежденный снимок отдается строкой"""
        try:
            return json.loads(version.content)
        except ValueError:
            return version.content
