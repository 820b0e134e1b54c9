from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
import uuid

from app.db.models.sharing import ManualShare as ManualShareModel, ExternalShareLink as ExternalLinkModel
from app.db.models.team import TeamRole

if TYPE_CHECKING:
    from app.domains.sharing.entities import ManualShare, ExternalLink


class ManualShareRepository:
    """Репозиторий персонального шаринга"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, share: "ManualShare") -> "ManualShare":
        db_share = ManualShareModel(
            uuid=share.uuid,
            manual_id=share.manual_id,
            user_id=share.user_id,
            permission=share.permission,
            shared_at=share.shared_at
        )
        self.session.add(db_share)
        await self.session.flush()
        return share

    async def get_by_uuid(self, share_uuid: uuid.UUID) -> Optional["ManualShare"]:
        result = await self.session.execute(
            select(ManualShareModel).where(ManualShareModel.uuid == share_uuid)
        )
        db_share = result.scalar_one_or_none()
        return self._to_domain(db_share) if db_share else None

    async def get_for_user(self, manual_uuid: uuid.UUID, user_id: uuid.UUID) -> Optional["ManualShare"]:
        result = await self.session.execute(
            select(ManualShareModel).where(
                ManualShareModel.manual_id == manual_uuid,
                ManualShareModel.user_id == user_id
            )
        )
        db_share = result.scalar_one_or_none()
        return self._to_domain(db_share) if db_share else None

    async def get_permission(self, manual_uuid: uuid.UUID, user_id: uuid.UUID) -> Optional[TeamRole]:
        result = await self.session.execute(
            select(ManualShareModel.permission).where(
                ManualShareModel.manual_id == manual_uuid,
                ManualShareModel.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def list_by_manual(self, manual_uuid: uuid.UUID) -> List["ManualShare"]:
        result = await self.session.execute(
            select(ManualShareModel)
            .where(ManualShareModel.manual_id == manual_uuid)
            .order_by(ManualShareModel.shared_at.desc())
        )
        return [self._to_domain(s) for s in result.scalars().all()]

    async def update_permission(self, share_uuid: uuid.UUID, permission: TeamRole) -> None:
        await self.session.execute(
            update(ManualShareModel)
            .where(ManualShareModel.uuid == share_uuid)
            .values(permission=permission)
        )

    async def delete(self, share_uuid: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(ManualShareModel).where(ManualShareModel.uuid == share_uuid)
        )
        return result.rowcount > 0

    def _to_domain(self, db_share: ManualShareModel) -> "ManualShare":
        from app.domains.sharing.entities import ManualShare

        return ManualShare(
            uuid=db_share.uuid,
            manual_id=db_share.manual_id,
            user_id=db_share.user_id,
            permission=db_share.permission,
            shared_at=db_share.shared_at
        )


class ExternalLinkRepository:
    """Репозиторий внешних ссылок"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, link: "ExternalLink") -> "ExternalLink":
        db_link = ExternalLinkModel(
            uuid=link.uuid,
            manual_id=link.manual_id,
            token=link.token,
            access_type=link.access_type,
            is_active=link.is_active,
            expires_at=link.expires_at
        )
        self.session.add(db_link)
        await self.session.flush()
        await self.session.refresh(db_link)
        return self._to_domain(db_link)

    async def get_by_uuid(self, link_uuid: uuid.UUID) -> Optional["ExternalLink"]:
        result = await self.session.execute(
            select(ExternalLinkModel).where(ExternalLinkModel.uuid == link_uuid)
        )
        db_link = result.scalar_one_or_none()
        return self._to_domain(db_link) if db_link else None

    async def get_by_token(self, token: str) -> Optional["ExternalLink"]:
        result = await self.session.execute(
            select(ExternalLinkModel).where(ExternalLinkModel.token == token)
        )
        db_link = result.scalar_one_or_none()
        return self._to_domain(db_link) if db_link else None

    async def list_by_manual(self, manual_uuid: uuid.UUID) -> List["ExternalLink"]:
        result = await self.session.execute(
            select(ExternalLinkModel)
            .where(ExternalLinkModel.manual_id == manual_uuid)
            .order_by(ExternalLinkModel.created_at.desc())
        )
        return [self._to_domain(link) for link in result.scalars().all()]

    async def set_active(self, link_uuid: uuid.UUID, is_active: bool) -> None:
        await self.session.execute(
            update(ExternalLinkModel)
            .where(ExternalLinkModel.uuid == link_uuid)
            .values(is_active=is_active)
        )

    async def delete(self, link_uuid: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(ExternalLinkModel).where(ExternalLinkModel.uuid == link_uuid)
        )
        return result.rowcount > 0

    def _to_domain(self, db_link: ExternalLinkModel) -> "ExternalLink":
        from app.domains.sharing.entities import ExternalLink

        return ExternalLink(
            uuid=db_link.uuid,
            manual_id=db_link.manual_id,
            token=db_link.token,
            access_type=db_link.access_type,
            is_active=db_link.is_active,
            expires_at=db_link.expires_at,
            created_at=db_link.created_at
        )
