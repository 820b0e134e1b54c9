from app.domains.search.schemas import SearchResponse, SearchResults, ManualHit, SectionHit, BlockHit
from app.domains.search.services import SearchService, make_preview, highlight

__all__ = [
    "SearchResponse", "SearchResults", "ManualHit", "SectionHit", "BlockHit",
    "SearchService", "make_preview", "highlight"
]
