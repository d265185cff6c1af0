import pytest

from domains.recipe.repository import RecipeRepository
from domains.user.models import User
from domains.user.repository import UserRepository


@pytest.mark.asyncio
async def test_save_and_find_by_google_id(db_session):
    """[Repository] google_id 로 유저 조회"""
    repo = UserRepository(db_session)

    saved = await repo.save_user(User(google_id="g-1", name="홍길동", email="hong@example.com"))

    found = await repo.get_user_by_google_id("g-1")
    assert found.id == saved.id
    assert (await repo.get_user_by_id(saved.id)).name == "홍길동"
    assert await repo.get_user_by_google_id("unknown") is None


@pytest.mark.asyncio
async def test_get_favorite_ids(db_session, test_user, make_recipe):
    repo = UserRepository(db_session)
    recipe_repo = RecipeRepository(db_session)
    first = await make_recipe(test_user, title="First")
    second = await make_recipe(test_user, title="Second")

    await recipe_repo.add_favorite(test_user.id, first.id)
    await recipe_repo.add_favorite(test_user.id, second.id)

    assert await repo.get_favorite_ids(test_user.id) == [first.id, second.id]
