from pathlib import Path
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"


class Settings(BaseSettings):

    DB_USER: str
    DB_PASSWORD: str
    DB_HOST: str = "localhost"  # 기본값 설정 (없으면 로컬로 간주)
    DB_PORT: int = 5432
    DB_NAME: str = "recipes"
    DB_ECHO: bool = False

    REDIS_URL: str = "redis://localhost:6379/0"

    # --- Google OAuth ---
    GOOGLE_CLIENT_ID: str
    GOOGLE_CLIENT_SECRET: SecretStr
    GOOGLE_REDIRECT_URI: str = "http://localhost:5000/api/v1/auth/google/callback"

    LOGIN_SUCCESS_REDIRECT: str = "http://localhost:5173/dashboard"
    LOGIN_FAILURE_REDIRECT: str = "http://localhost:5173/login"
    LOGOUT_REDIRECT: str = "http://localhost:5173/login"

    # --- 세션 ---
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: str = "lax"  # 프론트가 다른 도메인이면 "none" + SECURE=true
    SESSION_TTL_SECONDS: int = 60 * 60 * 24 * 7

    # --- Cloudinary (이미지 업로드) ---
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: SecretStr = SecretStr("")
    CLOUDINARY_FOLDER: str = "food-recipes"

    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
    )
    LOG_LEVEL: str = "INFO"

    @property
    def POSTGRES_DATABASE_URL(self) -> str:
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",  # 정의되지 않은 변수는 무시
        case_sensitive=True,
    )


settings = Settings()  # 유효성 체크
