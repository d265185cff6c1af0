"""
외부 인증 제공자 게이트웨이

전역 설정에 의존하지 않고, main.create_app 에서 명시적으로 만들어서 주입함
"""
from abc import ABC, abstractmethod
from urllib.parse import urlencode

import httpx

from domains.auth.exceptions import OAuthProviderException
from domains.user.schemas import ProviderProfile

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


class AuthGateway(ABC):
    @abstractmethod
    def get_authorization_url(self, state: str) -> str:
        """로그인 페이지로 보낼 URL"""

    @abstractmethod
    async def fetch_profile(self, code: str) -> ProviderProfile:
        """콜백으로 받은 code 로 유저 프로필 조회"""


class GoogleAuthGateway(AuthGateway):
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.transport = transport

    def get_authorization_url(self, state: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": "openid email profile",
                "state": state,
            }
        )
        return f"{GOOGLE_AUTH_URL}?{query}"

    async def fetch_profile(self, code: str) -> ProviderProfile:
        async with httpx.AsyncClient(transport=self.transport, timeout=10.0) as client:
            access_token = await self._get_token(client, code)
            user_info = await self._get_user_info(client, access_token)

        if not user_info.get("sub"):
            raise OAuthProviderException(detail="구글 유저 정보에 식별자가 없습니다.")

        return ProviderProfile(
            provider_id=str(user_info["sub"]),
            name=user_info.get("name"),
            email=user_info.get("email"),
            image=user_info.get("picture"),
        )

    async def _get_token(self, client: httpx.AsyncClient, code: str) -> str:
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "code": code,
        }

        try:
            response = await client.post(GOOGLE_TOKEN_URL, data=data)
        except httpx.HTTPError:
            raise OAuthProviderException(detail="구글 토큰 요청 실패")

        if response.status_code != 200:
            raise OAuthProviderException(detail="구글 토큰 발급 실패")

        access_token = self._json(response).get("access_token")
        if not access_token:
            raise OAuthProviderException(detail="구글 토큰 응답에 access_token 이 없습니다.")
        return access_token

    async def _get_user_info(self, client: httpx.AsyncClient, access_token: str) -> dict:
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            response = await client.get(GOOGLE_USERINFO_URL, headers=headers)
        except httpx.HTTPError:
            raise OAuthProviderException(detail="구글 유저 정보 요청 실패")

        if response.status_code != 200:
            raise OAuthProviderException(detail="구글 유저 정보 조회 실패")

        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            raise OAuthProviderException(detail="구글 응답을 해석할 수 없습니다.")

        if not isinstance(body, dict):
            raise OAuthProviderException(detail="구글 응답 형식이 올바르지 않습니다.")
        return body
