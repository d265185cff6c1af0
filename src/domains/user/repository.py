from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio.session import AsyncSession

from core.exception.exceptions import DatabaseException, UnexpectedException
from domains.user.models import User, Favorite


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save_user(self, user: User) -> User:
        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
            return user
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"유저 저장 실패: {str(e)}")

    async def _get_one(self, *where_conditions) -> User | None:
        try:
            stmt = select(User).where(*where_conditions)
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise DatabaseException(detail=f"DB 조회 오류: {str(e)}")
        except Exception as e:
            raise UnexpectedException(detail=f"예기치 못한 에러: {str(e)}")

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        return await self._get_one(User.id == user_id)

    async def get_user_by_google_id(self, google_id: str) -> User | None:
        return await self._get_one(User.google_id == google_id)

    async def update_user(self, user: User) -> User:
        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
            return user
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseException(detail=f"데이터 업데이트 실패: {str(e)}")

    async def get_favorite_ids(self, user_id: UUID) -> list[UUID]:
        try:
            stmt = (
                select(Favorite.recipe_id)
                .where(Favorite.user_id == user_id)
                .order_by(Favorite.created_at)
            )
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseException(detail=f"즐겨찾기 조회 실패: {str(e)}")
