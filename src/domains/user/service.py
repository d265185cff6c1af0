import logging
from domains.user.models import User
from domains.user.repository import UserRepository
from domains.user.schemas import ProviderProfile, InfoResponse

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def upsert_social_user(self, profile: ProviderProfile) -> User:
        """
        로그인 시점마다 호출됨.
        처음 보는 provider_id 면 새로 만들고, 이미 있으면 이름/이메일/이미지만 갱신
        """
        user = await self.user_repo.get_user_by_google_id(profile.provider_id)

        if not user:
            new_user = User(
                google_id=profile.provider_id,
                name=profile.name,
                email=profile.email,
                image=profile.image,
            )
            saved = await self.user_repo.save_user(new_user)
            logger.info("신규 유저 생성: id=%s", saved.id)
            return saved

        user.name = profile.name
        user.email = profile.email
        user.image = profile.image
        return await self.user_repo.update_user(user)

    async def get_user_info(self, user: User) -> InfoResponse:
        favorites = await self.user_repo.get_favorite_ids(user.id)

        return InfoResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            image=user.image,
            favorites=favorites,
        )
