import logging
import math
from uuid import UUID

from domains.image.schemas import ImageFile
from domains.image.uploader import ImageUploader
from domains.recipe.exceptions import (
    RecipeNotFoundException,
    RecipeForbiddenException,
    RecipeValidationException,
)
from domains.recipe.models import Recipe
from domains.recipe.repository import RecipeRepository
from domains.recipe.schemas import (
    RecipeForm,
    RecipeFilter,
    RecipeResponse,
    RecipeListResponse,
    Pagination,
    RatingRequest,
    RateRecipeResponse,
    CommentRequest,
    CommentRecipeResponse,
    CommentResponse,
    FavoriteToggleResponse,
)
from domains.user.models import User

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("title", "ingredients", "instructions", "category")


def parse_cooking_time(value: str | None) -> int | None:
    """숫자가 아니거나 음수면 None"""
    if value is None:
        return None
    try:
        minutes = int(value.strip())
    except ValueError:
        return None
    return minutes if minutes >= 0 else None


class RecipeService:
    def __init__(
        self,
        user: User | None,
        recipe_repo: RecipeRepository,
        image_uploader: ImageUploader | None = None,
    ):
        self.user = user
        self.recipe_repo = recipe_repo
        self.image_uploader = image_uploader

    async def create_recipe(self, form: RecipeForm, image: ImageFile | None = None) -> RecipeResponse:
        missing = [field for field in TEXT_FIELDS if not (getattr(form, field) or "").strip()]
        if missing:
            raise RecipeValidationException(detail=f"필수 항목이 누락되었습니다: {', '.join(missing)}")

        image_url = await self._upload(image) if image else None

        recipe = Recipe(
            title=form.title.strip(),
            ingredients=form.ingredients.strip(),
            instructions=form.instructions.strip(),
            category=form.category.strip(),
            cooking_time=parse_cooking_time(form.cooking_time) or 0,
            image=image_url,
            created_by=self.user.id,
        )
        saved = await self.recipe_repo.save_recipe(recipe)
        logger.info("레시피 생성: id=%s user=%s", saved.id, self.user.id)

        return await self._load(saved.id)

    async def get_recipes(self, filters: RecipeFilter, page: int = 1, limit: int = 10) -> RecipeListResponse:
        logger.info("레시피 목록 조회: filters=%s page=%s limit=%s", filters.model_dump(exclude_none=True), page, limit)

        recipes, total = await self.recipe_repo.get_recipes(
            filters, offset=(page - 1) * limit, limit=limit
        )

        return RecipeListResponse(
            recipes=[RecipeResponse.model_validate(r) for r in recipes],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit),
            ),
        )

    async def get_recipe(self, recipe_id: UUID) -> RecipeResponse:
        return await self._load(recipe_id)

    async def update_recipe(
        self, recipe_id: UUID, form: RecipeForm, image: ImageFile | None = None
    ) -> RecipeResponse:
        """
        보내준 필드만 수정 (안 보낸 필드는 기존 값 유지)
        소유자 확인이 끝나기 전에는 아무것도 건드리지 않음
        """
        await self._get_owned(recipe_id)

        values = {}
        blank = []
        for field in TEXT_FIELDS:
            value = getattr(form, field)
            if value is None:
                continue
            if not value.strip():
                blank.append(field)
                continue
            values[field] = value.strip()

        if blank:
            raise RecipeValidationException(detail=f"빈 값으로 수정할 수 없습니다: {', '.join(blank)}")

        cooking_time = parse_cooking_time(form.cooking_time)
        if cooking_time is not None:
            values["cooking_time"] = cooking_time

        if image:
            values["image"] = await self._upload(image)

        await self.recipe_repo.update_recipe(recipe_id, values)
        logger.info("레시피 수정: id=%s fields=%s", recipe_id, sorted(values))

        return await self._load(recipe_id)

    async def delete_recipe(self, recipe_id: UUID) -> None:
        await self._get_owned(recipe_id)

        is_deleted = await self.recipe_repo.delete_recipe(recipe_id)
        if not is_deleted:
            raise RecipeNotFoundException()
        logger.info("레시피 삭제: id=%s user=%s", recipe_id, self.user.id)

    # --- 평점 / 댓글 / 즐겨찾기 ---
    async def rate_recipe(self, recipe_id: UUID, request: RatingRequest) -> RateRecipeResponse:
        await self._ensure_exists(recipe_id)

        await self.recipe_repo.replace_rating_for(recipe_id, self.user.id, request.rating)
        recipe = await self.recipe_repo.get_recipe(recipe_id)

        return RateRecipeResponse(average_rating=recipe.average_rating)

    async def comment_recipe(self, recipe_id: UUID, request: CommentRequest) -> CommentRecipeResponse:
        await self._ensure_exists(recipe_id)

        await self.recipe_repo.append_comment(recipe_id, self.user.id, request.comment)
        recipe = await self.recipe_repo.get_recipe(recipe_id)

        return CommentRecipeResponse(
            comments=[CommentResponse.model_validate(c) for c in recipe.comments]
        )

    async def toggle_favorite(self, recipe_id: UUID) -> FavoriteToggleResponse:
        await self._ensure_exists(recipe_id)

        if await self.recipe_repo.is_favorite(self.user.id, recipe_id):
            await self.recipe_repo.remove_favorite(self.user.id, recipe_id)
            return FavoriteToggleResponse(message="즐겨찾기에서 삭제되었습니다.", is_favorite=False)

        await self.recipe_repo.add_favorite(self.user.id, recipe_id)
        return FavoriteToggleResponse(message="즐겨찾기에 추가되었습니다.", is_favorite=True)

    async def get_favorites(self) -> list[RecipeResponse]:
        recipes = await self.recipe_repo.get_favorite_recipes(self.user.id)
        return [RecipeResponse.model_validate(r) for r in recipes]

    # --- 내부 헬퍼 ---
    async def _load(self, recipe_id: UUID) -> RecipeResponse:
        recipe = await self.recipe_repo.get_recipe(recipe_id)
        if not recipe:
            raise RecipeNotFoundException()
        return RecipeResponse.model_validate(recipe)

    async def _ensure_exists(self, recipe_id: UUID) -> None:
        if not await self.recipe_repo.exists(recipe_id):
            raise RecipeNotFoundException()

    async def _get_owned(self, recipe_id: UUID) -> Recipe:
        recipe = await self.recipe_repo.get_recipe(recipe_id)

        if not recipe:
            raise RecipeNotFoundException()
        if not recipe.is_owned_by(self.user.id):
            raise RecipeForbiddenException()
        return recipe

    async def _upload(self, image: ImageFile) -> str:
        if self.image_uploader is None:
            raise RecipeValidationException(detail="이미지 업로드를 사용할 수 없습니다.")
        return await self.image_uploader.upload(image)
