"""
Сериализация мануала в JSON снимок и план восстановления из снимка.

Формат снимка:
    {"title", "description",
     "sections": [{"id", "title", "order", "depth", "parentId",
                   "blocks": [{"id", "type", "content", "order"}]}]}
"""
import json
import uuid
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import BadRequestError
from app.db.models.manual import BlockType
from app.domains.manuals.entities import Manual, Section, Block, MAX_SECTION_DEPTH

CORRUPTED_VERSION = "Version data is corrupted"


class SnapshotBlock(BaseModel):
    id: Optional[str] = None
    type: BlockType
    content: str = ""
    order: int = 0


class SnapshotSection(BaseModel):
    id: Optional[str] = None
    title: str
    order: int = 0
    depth: int = 1
    parent_id: Optional[str] = Field(None, alias="parentId")
    blocks: List[SnapshotBlock] = []

    model_config = ConfigDict(populate_by_name=True)


class Snapshot(BaseModel):
    title: str
    description: Optional[str] = None
    sections: List[SnapshotSection] = []


def build_snapshot(manual: Manual, sections: List[Section], blocks: List[Block]) -> str:
    """Снимок текущего состояния мануала, разделы плоским списком"""
    blocks_by_section: Dict[uuid.UUID, List[Block]] = {}
    for block in blocks:
        blocks_by_section.setdefault(block.section_id, []).append(block)

    data = {
        "title": manual.title,
        "description": manual.description,
        "sections": [
            {
                "id": str(section.uuid),
                "title": section.title,
                "order": section.order,
                "depth": section.depth,
                "parentId": str(section.parent_id) if section.parent_id else None,
                "blocks": [
                    {
                        "id": str(block.uuid),
                        "type": block.type.value,
                        "content": block.content,
                        "order": block.order,
                    }
                    for block in sorted(blocks_by_section.get(section.uuid, []), key=lambda b: b.order)
                ],
            }
            for section in sorted(sections, key=lambda s: (s.depth, s.order))
        ],
    }
    return json.dumps(data, ensure_ascii=False)


def parse_snapshot(content: str) -> Snapshot:
    """Разбор снимка; любые ошибки формата дают BadRequest"""
    try:
        return Snapshot.model_validate_json(content)
    except (PydanticValidationError, ValueError):
        raise BadRequestError(CORRUPTED_VERSION)


def plan_restore(manual_uuid: uuid.UUID, snapshot: Snapshot) -> Tuple[List[Section], List[Block]]:
    """
    Разделы и блоки для пересоздания из снимка.

    Все записи получают новые UUID, ссылки на родителя переводятся через
    идентификаторы из снимка. Раздел с неизвестным родителем становится
    корневым. Разделы возвращаются родителями вперед.
    """
    by_snapshot_id = {s.id: s for s in snapshot.sections if s.id}

    def ancestry_depth(section: SnapshotSection, seen=()) -> int:
        parent = by_snapshot_id.get(section.parent_id) if section.parent_id else None
        if parent is None:
            return 1
        if section.id in seen:
            raise BadRequestError(CORRUPTED_VERSION)
        return ancestry_depth(parent, seen + (section.id,)) + 1

    ordered = sorted(snapshot.sections, key=lambda s: (ancestry_depth(s), s.order))

    new_ids: Dict[str, uuid.UUID] = {}
    sections: List[Section] = []
    blocks: List[Block] = []

    for item in ordered:
        depth = ancestry_depth(item)
        if depth > MAX_SECTION_DEPTH:
            raise BadRequestError(CORRUPTED_VERSION)

        section = Section(
            uuid=uuid.uuid4(),
            manual_id=manual_uuid,
            title=item.title,
            order=item.order,
            depth=depth,
            parent_id=new_ids.get(item.parent_id) if item.parent_id else None
        )
        if item.id:
            new_ids[item.id] = section.uuid
        sections.append(section)

        for block_item in item.blocks:
            blocks.append(Block.create_block(
                section_id=section.uuid,
                type=block_item.type,
                content=block_item.content,
                order=block_item.order
            ))

    return sections, blocks
