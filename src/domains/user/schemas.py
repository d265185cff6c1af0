from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, ConfigDict


class ProviderProfile(BaseModel):
    """외부 인증 제공자(Google)가 내려준 프로필 정보"""

    provider_id: str
    name: str | None = None
    email: EmailStr | None = None
    image: str | None = None


class UserSummary(BaseModel):
    id: UUID
    name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class InfoResponse(BaseModel):
    id: UUID
    name: str | None = None
    email: EmailStr | None = None
    image: str | None = None
    favorites: list[UUID] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
