import uuid
from datetime import datetime
from typing import Optional, List

from app.db.models.manual import BlockType

MAX_SECTION_DEPTH = 3


class Manual:
    """Сущность мануала"""

    def __init__(
        self,
        uuid: uuid.UUID,
        title: str,
        owner_id: uuid.UUID,
        team_id: uuid.UUID,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.title = title
        self.owner_id = owner_id
        self.team_id = team_id
        self.description = description
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def update_info(self, title: Optional[str] = None) -> None:
        """Обновление заголовка и отметки времени"""
        if title:
            self.title = title
        self.updated_at = datetime.utcnow()

    @classmethod
    def create_manual(
        cls,
        title: str,
        owner_id: uuid.UUID,
        team_id: uuid.UUID,
        description: Optional[str] = None
    ) -> "Manual":
        """Создание нового мануала"""
        return cls(
            uuid=uuid.uuid4(),
            title=title,
            owner_id=owner_id,
            team_id=team_id,
            description=description
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Manual):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Manual(uuid={self.uuid}, title={self.title})"


class Section:
    """Раздел мануала, узел дерева глубиной до трех уровней"""

    def __init__(
        self,
        uuid: uuid.UUID,
        manual_id: uuid.UUID,
        title: str,
        order: int = 0,
        depth: int = 1,
        parent_id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.manual_id = manual_id
        self.title = title
        self.order = order
        self.depth = depth
        self.parent_id = parent_id
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()
        self.blocks: List["Block"] = []
        self.children: List["Section"] = []

    @classmethod
    def create_section(
        cls,
        manual_id: uuid.UUID,
        title: str,
        order: int,
        parent: Optional["Section"] = None
    ) -> "Section":
        """Создание раздела под родителем или в корне"""
        return cls(
            uuid=uuid.uuid4(),
            manual_id=manual_id,
            title=title,
            order=order,
            depth=parent.depth + 1 if parent else 1,
            parent_id=parent.uuid if parent else None
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Section):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Section(uuid={self.uuid}, title={self.title}, depth={self.depth}, order={self.order})"


class Block:
    """Блок контента внутри раздела"""

    def __init__(
        self,
        uuid: uuid.UUID,
        section_id: uuid.UUID,
        type: BlockType,
        content: str,
        order: int = 0,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.section_id = section_id
        self.type = type
        self.content = content
        self.order = order
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    @classmethod
    def create_block(cls, section_id: uuid.UUID, type: BlockType, content: str, order: int) -> "Block":
        return cls(
            uuid=uuid.uuid4(),
            section_id=section_id,
            type=type,
            content=content,
            order=order
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Block):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Block(uuid={self.uuid}, type={self.type.value}, order={self.order})"


def build_section_tree(sections: List[Section], blocks: List[Block]) -> List[Section]:
    """Сборка дерева разделов из плоских списков; дети и блоки сортируются по order"""
    by_id = {section.uuid: section for section in sections}
    for section in sections:
        section.children = []
        section.blocks = []

    for block in blocks:
        section = by_id.get(block.section_id)
        if section is not None:
            section.blocks.append(block)

    roots = []
    for section in sections:
        parent = by_id.get(section.parent_id) if section.parent_id else None
        if parent is not None:
            parent.children.append(section)
        else:
            roots.append(section)

    for section in sections:
        section.children.sort(key=lambda s: s.order)
        section.blocks.sort(key=lambda b: b.order)
    roots.sort(key=lambda s: s.order)
    return roots
