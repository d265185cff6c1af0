from fastapi import Depends, Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db, get_redis
from core.exception.exceptions import UnauthorizedException
from core.security import get_session_id, get_optional_session_id
from domains.auth.gateway import AuthGateway
from domains.auth.service import AuthService
from domains.auth.session import SessionStore
from domains.image.uploader import ImageUploader
from domains.recipe.repository import RecipeRepository
from domains.recipe.service import RecipeService
from domains.user.models import User
from domains.user.repository import UserRepository
from domains.user.service import UserService


# --- 앱 시작 시 주입된 외부 연동 객체 ---
def get_auth_gateway(request: Request) -> AuthGateway:
    return request.app.state.auth_gateway


def get_image_uploader(request: Request) -> ImageUploader | None:
    return getattr(request.app.state, "image_uploader", None)


# --- 유저 관련 DI ---
def get_user_repo(session: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(session)


def get_user_service(user_repo: UserRepository = Depends(get_user_repo)) -> UserService:
    return UserService(user_repo)


def get_session_store(redis: Redis = Depends(get_redis)) -> SessionStore:
    return SessionStore(redis, ttl_seconds=settings.SESSION_TTL_SECONDS)


async def _resolve_user(
    session_id: str, session_store: SessionStore, user_repo: UserRepository
) -> User | None:
    user_id = await session_store.get_user_id(session_id)
    if user_id is None:
        return None
    return await user_repo.get_user_by_id(user_id)


async def get_current_user(
    session_id: str = Depends(get_session_id),
    session_store: SessionStore = Depends(get_session_store),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User:
    user = await _resolve_user(session_id, session_store, user_repo)
    if user is None:
        raise UnauthorizedException(detail="세션이 만료되었거나 유효하지 않습니다.")
    return user


async def get_optional_user(
    session_id: str | None = Depends(get_optional_session_id),
    session_store: SessionStore = Depends(get_session_store),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User | None:
    if session_id is None:
        return None
    return await _resolve_user(session_id, session_store, user_repo)


def get_auth_service(
    gateway: AuthGateway = Depends(get_auth_gateway),
    session_store: SessionStore = Depends(get_session_store),
    user_service: UserService = Depends(get_user_service),
) -> AuthService:
    return AuthService(gateway=gateway, session_store=session_store, user_service=user_service)


# --- 레시피 관련 DI ---
def get_recipe_repo(session: AsyncSession = Depends(get_db)) -> RecipeRepository:
    return RecipeRepository(session)


def get_recipe_service(
    user: User = Depends(get_current_user),
    recipe_repo: RecipeRepository = Depends(get_recipe_repo),
    image_uploader: ImageUploader | None = Depends(get_image_uploader),
) -> RecipeService:
    return RecipeService(user=user, recipe_repo=recipe_repo, image_uploader=image_uploader)


def get_public_recipe_service(
    recipe_repo: RecipeRepository = Depends(get_recipe_repo),
) -> RecipeService:
    return RecipeService(user=None, recipe_repo=recipe_repo)
