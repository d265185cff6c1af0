import logging

from domains.auth.exceptions import InvalidOAuthStateException
from domains.auth.gateway import AuthGateway
from domains.auth.session import SessionStore
from domains.user.service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, gateway: AuthGateway, session_store: SessionStore, user_service: UserService):
        self.gateway = gateway
        self.session_store = session_store
        self.user_service = user_service

    async def get_login_url(self) -> str:
        state = await self.session_store.issue_state()
        return self.gateway.get_authorization_url(state)

    async def handle_callback(self, code: str, state: str) -> str:
        """로그인 성공 시 새 session_id 반환"""
        if not state or not await self.session_store.consume_state(state):
            raise InvalidOAuthStateException()

        profile = await self.gateway.fetch_profile(code)
        user = await self.user_service.upsert_social_user(profile)

        session_id = await self.session_store.create(user.id)
        logger.info("로그인 성공: user=%s", user.id)
        return session_id

    async def logout(self, session_id: str | None) -> None:
        if session_id:
            await self.session_store.delete(session_id)
