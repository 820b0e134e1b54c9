from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.deps import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.search.schemas import SearchResponse
from app.domains.search.services import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search(
    q: Optional[str] = Query(None, max_length=200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Поиск по мануалам, разделам и блокам"""
    return await SearchService(db).search(current_user, q)
