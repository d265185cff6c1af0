from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, constr

from domains.user.schemas import UserSummary


# --- Request ---
class RecipeForm(BaseModel):
    """multipart 폼에서 넘어온 값 그대로 (검증/변환은 서비스에서)"""

    title: str | None = None
    ingredients: str | None = None
    instructions: str | None = None
    category: str | None = None
    cooking_time: str | None = None


class RecipeFilter(BaseModel):
    category: str | None = None
    search: str | None = None
    ingredients: str | None = None
    cooking_time: int | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0, le=5)


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, examples=[4])


class CommentRequest(BaseModel):
    comment: constr(strip_whitespace=True, min_length=1) = Field(..., examples=["맛있어요!"])


# --- Response ---
class RatingResponse(BaseModel):
    user: UserSummary | None = None
    rating: int

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    user: UserSummary | None = None
    comment: str
    date: datetime = Field(validation_alias="created_at")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class RecipeResponse(BaseModel):
    id: UUID
    title: str
    ingredients: str
    instructions: str
    category: str
    cooking_time: int
    image: str | None = None
    created_by: UserSummary | None = Field(None, validation_alias="creator")
    ratings: list[RatingResponse] = Field(default_factory=list)
    comments: list[CommentResponse] = Field(default_factory=list)
    average_rating: float = 0
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class RecipeListResponse(BaseModel):
    recipes: list[RecipeResponse]
    pagination: Pagination


class RateRecipeResponse(BaseModel):
    message: str = Field(default="평점이 등록되었습니다.")
    average_rating: float


class CommentRecipeResponse(BaseModel):
    message: str = Field(default="댓글이 등록되었습니다.")
    comments: list[CommentResponse]


class FavoriteToggleResponse(BaseModel):
    message: str
    is_favorite: bool


class MessageResponse(BaseModel):
    message: str
