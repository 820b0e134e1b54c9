import uuid
from datetime import datetime
from typing import Optional


class ManualVersion:
    """Снимок мануала целиком, только для добавления"""

    def __init__(
        self,
        uuid: uuid.UUID,
        manual_id: uuid.UUID,
        content: str,
        created_by: uuid.UUID,
        summary: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.manual_id = manual_id
        self.content = content
        self.created_by = created_by
        self.summary = summary
        self.created_at = created_at or datetime.utcnow()

    @classmethod
    def create_version(
        cls,
        manual_id: uuid.UUID,
        content: str,
        created_by: uuid.UUID,
        summary: Optional[str] = None
    ) -> "ManualVersion":
        """Создание новой версии мануала"""
        return cls(
            uuid=uuid.uuid4(),
            manual_id=manual_id,
            content=content,
            created_by=created_by,
            summary=summary
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, ManualVersion):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"ManualVersion(uuid={self.uuid}, manual_id={self.manual_id})"
