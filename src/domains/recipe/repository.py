import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exception.exceptions import DatabaseException
from domains.recipe.models import Recipe, RecipeRating, RecipeComment
from domains.recipe.schemas import RecipeFilter
from domains.user.models import Favorite

logger = logging.getLogger(__name__)

# 작성자/평가자/댓글 작성자 이름까지 한 번에 로딩
AGGREGATE_LOAD_OPTIONS = (
    selectinload(Recipe.creator),
    selectinload(Recipe.ratings).selectinload(RecipeRating.user),
    selectinload(Recipe.comments).selectinload(RecipeComment.user),
)


def average_rating_expr():
    return (
        select(func.coalesce(func.avg(RecipeRating.rating), 0))
        .where(RecipeRating.recipe_id == Recipe.id)
        .correlate(Recipe)
        .scalar_subquery()
    )


def build_conditions(filters: RecipeFilter) -> list:
    conditions = []

    if filters.category:
        conditions.append(Recipe.category == filters.category)
    if filters.search:
        conditions.append(Recipe.title.icontains(filters.search, autoescape=True))
    if filters.ingredients:
        conditions.append(Recipe.ingredients.icontains(filters.ingredients, autoescape=True))
    if filters.cooking_time is not None:
        conditions.append(Recipe.cooking_time <= filters.cooking_time)
    if filters.rating is not None:
        conditions.append(average_rating_expr() >= filters.rating)

    return conditions


class RecipeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save_recipe(self, recipe: Recipe) -> Recipe:
        try:
            self.session.add(recipe)
            await self.session.commit()
            return recipe
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"레시피 저장 실패: {str(e)}")

    async def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        try:
            stmt = (
                select(Recipe)
                .where(Recipe.id == recipe_id)
                .options(*AGGREGATE_LOAD_OPTIONS)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise DatabaseException(detail=f"레시피 조회 실패: {str(e)}")

    async def exists(self, recipe_id: UUID) -> bool:
        try:
            stmt = select(Recipe.id).where(Recipe.id == recipe_id)
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            raise DatabaseException(detail=f"레시피 조회 실패: {str(e)}")

    async def get_recipes(
        self, filters: RecipeFilter, offset: int, limit: int
    ) -> tuple[list[Recipe], int]:
        conditions = build_conditions(filters)

        try:
            count_stmt = select(func.count()).select_from(Recipe).where(*conditions)
            total = (await self.session.execute(count_stmt)).scalar_one()

            stmt = (
                select(Recipe)
                .where(*conditions)
                .options(*AGGREGATE_LOAD_OPTIONS)
                .order_by(Recipe.created_at.desc(), Recipe.id.desc())
                .offset(offset)
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(stmt)
            return list(result.scalars().all()), total
        except SQLAlchemyError as e:
            raise DatabaseException(detail=f"레시피 목록 조회 실패: {str(e)}")

    async def update_recipe(self, recipe_id: UUID, values: dict[str, Any]) -> None:
        if not values:
            return

        try:
            stmt = (
                update(Recipe)
                .where(Recipe.id == recipe_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"레시피 수정 실패: {str(e)}")

    async def delete_recipe(self, recipe_id: UUID) -> bool:
        """레시피와 딸린 평점/댓글, 그리고 모든 유저의 즐겨찾기 항목까지 한 트랜잭션으로 삭제"""
        try:
            await self.session.execute(delete(Favorite).where(Favorite.recipe_id == recipe_id))
            await self.session.execute(delete(RecipeRating).where(RecipeRating.recipe_id == recipe_id))
            await self.session.execute(delete(RecipeComment).where(RecipeComment.recipe_id == recipe_id))
            result = await self.session.execute(delete(Recipe).where(Recipe.id == recipe_id))
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"레시피 삭제 실패: {str(e)}")

    # --- 평점 / 댓글 ---
    async def replace_rating_for(self, recipe_id: UUID, user_id: UUID, rating: int) -> None:
        """기존 평점 삭제 + 새 평점 추가를 같은 트랜잭션에서 처리"""
        try:
            await self.session.execute(
                delete(RecipeRating).where(
                    RecipeRating.recipe_id == recipe_id,
                    RecipeRating.user_id == user_id,
                )
            )
            self.session.add(RecipeRating(recipe_id=recipe_id, user_id=user_id, rating=rating))
            await self.session.commit()
        except IntegrityError:
            # 같은 유저의 동시 요청이 먼저 저장됨 -> 그 행을 이 값으로 덮어씀
            await self.session.rollback()
            logger.info("평점 동시 저장 충돌: recipe=%s user=%s", recipe_id, user_id)
            await self._overwrite_rating(recipe_id, user_id, rating)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"평점 저장 실패: {str(e)}")

    async def _overwrite_rating(self, recipe_id: UUID, user_id: UUID, rating: int) -> None:
        try:
            result = await self.session.execute(
                update(RecipeRating)
                .where(RecipeRating.recipe_id == recipe_id, RecipeRating.user_id == user_id)
                .values(rating=rating)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.add(RecipeRating(recipe_id=recipe_id, user_id=user_id, rating=rating))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"평점 저장 실패: {str(e)}")

    async def append_comment(self, recipe_id: UUID, user_id: UUID, comment: str) -> None:
        try:
            self.session.add(RecipeComment(recipe_id=recipe_id, user_id=user_id, comment=comment))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"댓글 저장 실패: {str(e)}")

    # --- 즐겨찾기 ---
    async def is_favorite(self, user_id: UUID, recipe_id: UUID) -> bool:
        try:
            stmt = select(Favorite).where(
                Favorite.user_id == user_id, Favorite.recipe_id == recipe_id
            )
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            raise DatabaseException(detail=f"즐겨찾기 조회 실패: {str(e)}")

    async def add_favorite(self, user_id: UUID, recipe_id: UUID) -> None:
        try:
            self.session.add(Favorite(user_id=user_id, recipe_id=recipe_id))
            await self.session.commit()
        except IntegrityError:
            # 이미 즐겨찾기에 있음 (동시 요청) -> 추가된 것으로 취급
            await self.session.rollback()
            logger.info("즐겨찾기 중복 추가 무시: user=%s recipe=%s", user_id, recipe_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"즐겨찾기 추가 실패: {str(e)}")

    async def remove_favorite(self, user_id: UUID, recipe_id: UUID) -> None:
        try:
            await self.session.execute(
                delete(Favorite).where(
                    Favorite.user_id == user_id, Favorite.recipe_id == recipe_id
                )
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"즐겨찾기 삭제 실패: {str(e)}")

    async def get_favorite_recipes(self, user_id: UUID) -> list[Recipe]:
        try:
            stmt = (
                select(Recipe)
                .join(Favorite, Favorite.recipe_id == Recipe.id)
                .where(Favorite.user_id == user_id)
                .options(*AGGREGATE_LOAD_OPTIONS)
                .order_by(Favorite.created_at)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseException(detail=f"즐겨찾기 목록 조회 실패: {str(e)}")
