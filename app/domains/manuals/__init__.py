from app.domains.manuals.entities import Manual, Section, Block, build_section_tree
from app.domains.manuals.permissions import (
    Permission, resolve_permission, can_view, can_edit, can_delete, can_share
)
from app.domains.manuals.schemas import (
    ManualCreate, ManualUpdate, ManualResponse, ManualDetailResponse,
    ManualListItem, ManualListResponse, SectionCreate, SectionUpdate,
    SectionResponse, SectionReorder, BlockCreate, BlockUpdate, BlockResponse,
    BlockReorder, ReorderItem
)
from app.domains.manuals.access import ManualAccessService
from app.domains.manuals.services import ManualService

__all__ = [
    "Manual", "Section", "Block", "build_section_tree",
    "Permission", "resolve_permission", "can_view", "can_edit", "can_delete", "can_share",
    "ManualCreate", "ManualUpdate", "ManualResponse", "ManualDetailResponse",
    "ManualListItem", "ManualListResponse", "SectionCreate", "SectionUpdate",
    "SectionResponse", "SectionReorder", "BlockCreate", "BlockUpdate", "BlockResponse",
    "BlockReorder", "ReorderItem",
    "ManualAccessService", "ManualService"
]
