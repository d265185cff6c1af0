from decimal import Decimal, ROUND_HALF_UP

import uuid6
from sqlalchemy import (
    Column,
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import Uuid
from sqlalchemy.sql import func

from core.database import Base


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid6.uuid7)
    created_by = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(200), nullable=False)
    ingredients = Column(Text, nullable=False)
    instructions = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    cooking_time = Column(Integer, nullable=False, default=0)  # 분 단위
    image = Column(String(512))
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    creator = relationship("User", back_populates="recipes")
    ratings = relationship(
        "RecipeRating",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RecipeRating.id",
    )
    comments = relationship(
        "RecipeComment",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RecipeComment.id",
    )

    __table_args__ = (CheckConstraint("cooking_time >= 0", name="ck_recipes_cooking_time"),)
    __mapper_args__ = {"eager_defaults": True}

    @property
    def average_rating(self) -> float:
        if not self.ratings:
            return 0
        mean = Decimal(sum(r.rating for r in self.ratings)) / Decimal(len(self.ratings))
        return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    def is_owned_by(self, user_id) -> bool:
        return self.created_by == user_id


class RecipeRating(Base):
    __tablename__ = "recipe_ratings"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    recipe_id = Column(
        Uuid(as_uuid=True), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    rating = Column(Integer, nullable=False)

    recipe = relationship("Recipe", back_populates="ratings")
    user = relationship("User")

    # (레시피, 유저) 당 평점 1개
    __table_args__ = (
        UniqueConstraint("recipe_id", "user_id", name="uq_recipe_ratings_recipe_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_recipe_ratings_range"),
    )


class RecipeComment(Base):
    __tablename__ = "recipe_comments"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    recipe_id = Column(
        Uuid(as_uuid=True), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    recipe = relationship("Recipe", back_populates="comments")
    user = relationship("User")

    __mapper_args__ = {"eager_defaults": True}
