import secrets
from uuid import UUID

from redis.asyncio import Redis

SESSION_PREFIX = "SESSION:"
STATE_PREFIX = "OAUTH_STATE:"
STATE_TTL_SECONDS = 300


class SessionStore:
    """redis 에 세션(session_id -> user_id)과 OAuth state 를 보관"""

    def __init__(self, redis: Redis, ttl_seconds: int):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    async def create(self, user_id: UUID) -> str:
        session_id = secrets.token_urlsafe(32)
        await self.redis.set(f"{SESSION_PREFIX}{session_id}", str(user_id), ex=self.ttl_seconds)
        return session_id

    async def get_user_id(self, session_id: str) -> UUID | None:
        user_id = await self.redis.get(f"{SESSION_PREFIX}{session_id}")
        if not user_id:
            return None
        try:
            return UUID(user_id)
        except ValueError:
            return None

    async def delete(self, session_id: str) -> None:
        await self.redis.delete(f"{SESSION_PREFIX}{session_id}")

    async def issue_state(self) -> str:
        state = secrets.token_urlsafe(32)
        await self.redis.set(f"{STATE_PREFIX}{state}", "valid", ex=STATE_TTL_SECONDS)
        return state

    async def consume_state(self, state: str) -> bool:
        # 한 번 쓰면 바로 삭제 (재사용 방지)
        deleted = await self.redis.delete(f"{STATE_PREFIX}{state}")
        return deleted > 0
