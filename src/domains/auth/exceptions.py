from core.exception.exceptions import BaseCustomException


class InvalidOAuthStateException(BaseCustomException):
    def __init__(self, detail: str = "유효하지 않은 접근입니다. (State 불일치)"):
        super().__init__(status_code=400, detail=detail, code="INVALID_OAUTH_STATE")


class OAuthProviderException(BaseCustomException):
    def __init__(self, detail: str = "외부 로그인 제공자와 통신에 실패했습니다."):
        super().__init__(status_code=502, detail=detail, code="OAUTH_PROVIDER_ERROR")
