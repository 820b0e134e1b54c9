import uuid
from datetime import datetime
from typing import Optional

from app.db.models.sharing import AccessType
from app.db.models.team import TeamRole


class ManualShare:
    """Персональный доступ участника команды к мануалу"""

    def __init__(
        self,
        uuid: uuid.UUID,
        manual_id: uuid.UUID,
        user_id: uuid.UUID,
        permission: TeamRole,
        shared_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.manual_id = manual_id
        self.user_id = user_id
        self.permission = permission
        self.shared_at = shared_at or datetime.utcnow()

    @classmethod
    def create_share(cls, manual_id: uuid.UUID, user_id: uuid.UUID, permission: TeamRole) -> "ManualShare":
        return cls(uuid=uuid.uuid4(), manual_id=manual_id, user_id=user_id, permission=permission)

    def __repr__(self) -> str:
        return f"ManualShare(manual_id={self.manual_id}, user_id={self.user_id}, permission={self.permission.value})"


class ExternalLink:
    """Внешняя ссылка на мануал"""

    def __init__(
        self,
        uuid: uuid.UUID,
        manual_id: uuid.UUID,
        token: str,
        access_type: AccessType,
        is_active: bool = True,
        expires_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.manual_id = manual_id
        self.token = token
        self.access_type = access_type
        self.is_active = is_active
        self.expires_at = expires_at
        self.created_at = created_at or datetime.utcnow()

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at is not None and self.expires_at < (now or datetime.utcnow())

    @property
    def is_title_only(self) -> bool:
        return self.access_type == AccessType.TITLE_ONLY

    @classmethod
    def create_link(
        cls,
        manual_id: uuid.UUID,
        token: str,
        access_type: AccessType,
        expires_at: Optional[datetime] = None
    ) -> "ExternalLink":
        return cls(
            uuid=uuid.uuid4(),
            manual_id=manual_id,
            token=token,
            access_type=access_type,
            expires_at=expires_at
        )

    def __repr__(self) -> str:
        return f"ExternalLink(uuid={self.uuid}, access_type={self.access_type.value}, active={self.is_active})"
