from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.core.errors import UnauthorizedError
from app.core.session_blacklist import SessionBlacklist, get_session_blacklist
from app.domains.identity.entities import User
from app.domains.identity.services import IdentityService

security = HTTPBearer(auto_error=False)


def get_identity_service(
    db: AsyncSession = Depends(get_db),
    blacklist: SessionBlacklist = Depends(get_session_blacklist)
) -> IdentityService:
    return IdentityService(db, blacklist)


async def get_current_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity_service: IdentityService = Depends(get_identity_service)
) -> Tuple[User, Dict[str, Any]]:
    """Пользователь и payload токена из заголовка Bearer или cookie сессии"""
    token = credentials.credentials if credentials else request.cookies.get(settings.session_cookie_name)
    if not token:
        raise UnauthorizedError()
    return await identity_service.get_current_user_from_token(token)


async def get_current_user(
    current_session: Tuple[User, Dict[str, Any]] = Depends(get_current_session)
) -> User:
    """Зависимость для получения текущего пользователя"""
    return current_session[0]
