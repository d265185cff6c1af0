import logging

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from core.config import settings
from core.di import get_auth_service, get_optional_user, get_user_service
from core.security import get_optional_session_id
from domains.auth.exceptions import InvalidOAuthStateException, OAuthProviderException
from domains.auth.service import AuthService
from domains.user.models import User
from domains.user.schemas import InfoResponse
from domains.user.service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/google", status_code=307, summary="구글 로그인 페이지로 리다이렉트")
async def google_login(auth_service: AuthService = Depends(get_auth_service)):
    return RedirectResponse(await auth_service.get_login_url())


@router.get("/google/callback", status_code=307, summary="구글 로그인 콜백")
async def google_callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    성공하면 세션 쿠키를 심고 프론트 대시보드로, 실패하면 로그인 페이지로 보냄
    """
    if error or not code:
        logger.warning("구글 로그인 취소/실패: error=%s", error)
        return RedirectResponse(settings.LOGIN_FAILURE_REDIRECT)

    try:
        session_id = await auth_service.handle_callback(code, state)
    except (InvalidOAuthStateException, OAuthProviderException) as e:
        logger.warning("구글 로그인 실패: %s", e.detail)
        return RedirectResponse(settings.LOGIN_FAILURE_REDIRECT)

    response = RedirectResponse(settings.LOGIN_SUCCESS_REDIRECT)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
    )
    return response


@router.get(
    "/user",
    status_code=200,
    summary="로그인 유저 정보 조회 API (비로그인 시 null)",
    response_model=InfoResponse | None,
)
async def current_user(
    user: User | None = Depends(get_optional_user),
    user_service: UserService = Depends(get_user_service),
):
    if user is None:
        return None
    return await user_service.get_user_info(user)


@router.get("/logout", status_code=307, summary="로그아웃")
async def logout(
    session_id: str | None = Depends(get_optional_session_id),
    auth_service: AuthService = Depends(get_auth_service),
):
    await auth_service.logout(session_id)

    response = RedirectResponse(settings.LOGOUT_REDIRECT)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
