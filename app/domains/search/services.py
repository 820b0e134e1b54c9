import json
import logging
import re
import uuid
from typing import Dict, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.manual import BlockType
from app.db.repositories.manual_repository import ManualRepository, SectionRepository, BlockRepository
from app.db.repositories.team_repository import TeamRepository, TeamMemberRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.search.schemas import ManualHit, SectionHit, BlockHit, SearchResults, SearchResponse

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200

HEADING_TYPES = (BlockType.HEADING1, BlockType.HEADING2, BlockType.HEADING3)

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


def make_preview(block_type: BlockType, content: str) -> str:
    """Текстовое превью блока, не длиннее PREVIEW_LENGTH"""
    try:
        if block_type == BlockType.BODY:
            text = _SPACE_RE.sub(" ", _TAG_RE.sub(" ", content)).strip()
            return text[:PREVIEW_LENGTH]
        if block_type in HEADING_TYPES:
            return str(json.loads(content).get("text") or "")[:PREVIEW_LENGTH]
        if block_type == BlockType.TABLE:
            json.loads(content)
            return "Table content"
    except (ValueError, AttributeError):
        pass
    return content[:PREVIEW_LENGTH]


def highlight(text: str, query: str) -> str:
    """Оборачивает совпадения в <mark> без учета регистра"""
    if not query:
        return text
    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    return pattern.sub(r"<mark>\1</mark>", text)


class SearchService:
    """Поиск по доступным пользователю мануалам"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.manual_repository = ManualRepository(session)
        self.section_repository = SectionRepository(session)
        self.block_repository = BlockRepository(session)
        self.member_repository = TeamMemberRepository(session)
        self.team_repository = TeamRepository(session)
        self.user_repository = UserRepository(session)

    async def _team_names(self, team_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, str]:
        names = {}
        for team_id in set(team_ids):
            team = await self.team_repository.get_by_uuid(team_id)
            if team:
                names[team_id] = team.name
        return names

    async def search(self, user: User, query: Optional[str]) -> SearchResponse:
        query = (query or "").strip()
        if not query:
            return SearchResponse(results=SearchResults())

        membership = await self.member_repository.get_by_user(user.uuid)
        accessible = self.manual_repository.accessible_ids_query(
            user.uuid, membership.team_id if membership else None
        )

        manuals = await self.manual_repository.search(query, accessible)
        sections = await self.section_repository.search(query, accessible)
        block_rows = await self.block_repository.search(query, accessible)

        # Подгружаем заголовки мануалов и названия команд одним проходом
        manual_ids = {s.manual_id for s in sections} | {row[2] for row in block_rows}
        manual_map = await self.manual_repository.get_by_uuids(list(manual_ids | {m.uuid for m in manuals}))
        team_names = await self._team_names(m.team_id for m in manual_map.values())
        owners = {
            u.uuid: u.name
            for u in await self.user_repository.get_by_uuids(list({m.owner_id for m in manuals}))
        }

        manual_hits = [
            ManualHit(
                uuid=m.uuid,
                title=m.title,
                description=m.description,
                team_name=team_names.get(m.team_id),
                owner_name=owners.get(m.owner_id),
                updated_at=m.updated_at
            )
            for m in manuals
        ]

        section_hits = []
        for section in sections:
            manual = manual_map.get(section.manual_id)
            if not manual:
                continue
            section_hits.append(SectionHit(
                uuid=section.uuid,
                title=section.title,
                depth=section.depth,
                manual_id=manual.uuid,
                manual_title=manual.title,
                team_name=team_names.get(manual.team_id)
            ))

        block_hits = []
        for block, section_title, manual_id in block_rows:
            manual = manual_map.get(manual_id)
            if not manual:
                continue
            preview = make_preview(block.type, block.content)
            block_hits.append(BlockHit(
                uuid=block.uuid,
                type=block.type,
                preview=highlight(preview, query),
                raw_preview=preview,
                section_id=block.section_id,
                section_title=section_title,
                manual_id=manual.uuid,
                manual_title=manual.title,
                team_name=team_names.get(manual.team_id)
            ))

        total = len(manual_hits) + len(section_hits) + len(block_hits)
        logger.debug(f"Search '{query}' by {user.uuid}: {total} results")
        return SearchResponse(
            results=SearchResults(manuals=manual_hits, sections=section_hits, blocks=block_hits),
            total_results=total,
            query=query
        )
