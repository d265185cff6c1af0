from fastapi import Depends
from fastapi.security import APIKeyCookie

from core.config import settings
from core.exception.exceptions import UnauthorizedException

session_cookie_scheme = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)


# --- 세션 쿠키 ---
def get_optional_session_id(
    session_id: str | None = Depends(session_cookie_scheme),
) -> str | None:
    return session_id or None


def get_session_id(
    session_id: str | None = Depends(get_optional_session_id),
) -> str:
    if session_id is None:
        raise UnauthorizedException()
    return session_id
