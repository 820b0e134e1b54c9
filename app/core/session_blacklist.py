import logging
import time
import uuid
from typing import Any, Dict, Optional

import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger(__name__)

TOKEN_KEY_PREFIX = "session:revoked:jti:"
USER_KEY_PREFIX = "session:revoked:user:"

_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    """Общий клиент Redis для процесса"""
    global _client
    if _client is None:
        _client = redis.from_url(settings.redis_url, decode_responses=True)
    return _client


class SessionBlacklist:
    """Черный список сессий с TTL, общий для всех процессов"""

    def __init__(self, client: redis.Redis):
        self.client = client

    async def revoke_token(self, jti: str, expires_at: float) -> None:
        """Отзыв одной сессии до истечения срока ее токена"""
        ttl = int(expires_at - time.time())
        if ttl <= 0:
            return
        await self.client.set(f"{TOKEN_KEY_PREFIX}{jti}", "1", ex=ttl)
        logger.info(f"Session {jti} revoked for {ttl}s")

    async def revoke_user_sessions(self, user_id: uuid.UUID) -> None:
        """Отзыв всех сессий пользователя, выданных до текущего момента"""
        ttl = settings.session_max_age_days * 24 * 60 * 60
        await self.client.set(f"{USER_KEY_PREFIX}{user_id}", repr(time.time()), ex=ttl)
        logger.info(f"All sessions of user {user_id} revoked")

    async def is_revoked(self, payload: Dict[str, Any]) -> bool:
        """Проверка, отозван ли токен сессии"""
        jti = payload.get("jti")
        if jti and await self.client.exists(f"{TOKEN_KEY_PREFIX}{jti}"):
            return True

        revoked_at = await self.client.get(f"{USER_KEY_PREFIX}{payload.get('sub')}")
        if revoked_at is None:
            return False
        return float(payload.get("iat", 0)) < float(revoked_at)


def get_session_blacklist() -> SessionBlacklist:
    return SessionBlacklist(get_redis())
