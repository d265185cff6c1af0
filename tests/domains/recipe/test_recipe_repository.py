import pytest
from datetime import datetime, timedelta
from sqlalchemy import select, func, insert

from domains.recipe.models import Recipe, RecipeRating, RecipeComment
from domains.recipe.repository import RecipeRepository
from domains.recipe.schemas import RecipeFilter
from domains.user.models import Favorite

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.mark.asyncio
async def test_save_and_get_recipe_with_names(db_session, test_user, other_user):
    """[Repository] 저장 후 조회 시 작성자/평가자/댓글 작성자 로딩"""
    repo = RecipeRepository(db_session)

    saved = await repo.save_recipe(
        Recipe(
            created_by=test_user.id,
            title="Kimchi Stew",
            ingredients="kimchi, pork",
            instructions="boil",
            category="Korean",
        )
    )
    await repo.replace_rating_for(saved.id, other_user.id, 4)
    await repo.append_comment(saved.id, other_user.id, "맛있어요")

    recipe = await repo.get_recipe(saved.id)

    assert recipe.cooking_time == 0
    assert recipe.creator.name == "테스터"
    assert recipe.ratings[0].user.name == "다른유저"
    assert recipe.comments[0].user.name == "다른유저"
    assert recipe.comments[0].created_at is not None


@pytest.mark.asyncio
async def test_replace_rating_keeps_one_per_user(db_session, test_user, other_user, make_recipe):
    """[Repository] 같은 유저가 여러 번 평가해도 평점은 1개"""
    repo = RecipeRepository(db_session)
    recipe = await make_recipe(test_user)

    await repo.replace_rating_for(recipe.id, other_user.id, 2)
    await repo.replace_rating_for(recipe.id, other_user.id, 5)
    await repo.replace_rating_for(recipe.id, test_user.id, 4)

    loaded = await repo.get_recipe(recipe.id)

    assert len(loaded.ratings) == 2
    assert sorted(r.rating for r in loaded.ratings) == [4, 5]
    assert loaded.average_rating == 4.5


@pytest.mark.asyncio
async def test_comments_keep_insertion_order(db_session, test_user, make_recipe):
    repo = RecipeRepository(db_session)
    recipe = await make_recipe(test_user)

    for text in ["첫번째", "두번째", "세번째"]:
        await repo.append_comment(recipe.id, test_user.id, text)

    loaded = await repo.get_recipe(recipe.id)

    assert [c.comment for c in loaded.comments] == ["첫번째", "두번째", "세번째"]


@pytest.mark.asyncio
async def test_get_recipes_ordering_and_pagination(db_session, test_user, make_recipe):
    """[Repository] 최신순 정렬 + offset/limit + 전체 개수"""
    repo = RecipeRepository(db_session)
    for i in range(25):
        await make_recipe(test_user, title=f"Recipe {i}", created_at=BASE_TIME + timedelta(minutes=i))

    first_page, total = await repo.get_recipes(RecipeFilter(), offset=0, limit=10)
    last_page, _ = await repo.get_recipes(RecipeFilter(), offset=20, limit=10)

    assert total == 25
    assert first_page[0].title == "Recipe 24"  # 나중에 만든 게 먼저
    assert len(last_page) == 5
    assert last_page[-1].title == "Recipe 0"


@pytest.mark.asyncio
async def test_get_recipes_filters(db_session, test_user, other_user, make_recipe):
    """[Repository] category / search / ingredients / cooking_time / rating 필터"""
    repo = RecipeRepository(db_session)
    cake = await make_recipe(test_user, title="Chocolate Cake", category="Dessert", cooking_time=60)
    await make_recipe(
        test_user,
        title="chocolate tart",
        category="Dessert",
        ingredients="butter, CHOCOLATE",
        cooking_time=30,
    )
    await make_recipe(test_user, title="Pancake", category="Breakfast", cooking_time=15)
    await make_recipe(test_user, title="Dessert Soup", category="dessert", cooking_time=10)

    await repo.replace_rating_for(cake.id, test_user.id, 5)
    await repo.replace_rating_for(cake.id, other_user.id, 4)

    async def titles(**kwargs):
        recipes, _ = await repo.get_recipes(RecipeFilter(**kwargs), offset=0, limit=10)
        return sorted(r.title for r in recipes)

    assert await titles(category="Dessert") == ["Chocolate Cake", "chocolate tart"]
    assert await titles(search="cake") == ["Chocolate Cake", "Pancake"]
    assert await titles(ingredients="chocolate") == ["chocolate tart"]
    assert await titles(cooking_time=30) == ["Dessert Soup", "Pancake", "chocolate tart"]
    assert await titles(rating=4.5) == ["Chocolate Cake"]
    assert await titles(category="Dessert", search="cake", cooking_time=30) == []


@pytest.mark.asyncio
async def test_search_escapes_wildcards(db_session, test_user, make_recipe):
    repo = RecipeRepository(db_session)
    await make_recipe(test_user, title="100% Rye Bread")
    await make_recipe(test_user, title="Plain Bread")

    recipes, total = await repo.get_recipes(RecipeFilter(search="%"), offset=0, limit=10)

    assert total == 1
    assert recipes[0].title == "100% Rye Bread"


@pytest.mark.asyncio
async def test_update_recipe_only_given_values(db_session, test_user, make_recipe):
    repo = RecipeRepository(db_session)
    recipe = await make_recipe(test_user, title="Old", cooking_time=20)

    await repo.update_recipe(recipe.id, {"title": "New"})
    updated = await repo.get_recipe(recipe.id)

    assert updated.title == "New"
    assert updated.cooking_time == 20


@pytest.mark.asyncio
async def test_delete_recipe_cascades(db_session, test_user, other_user, make_recipe):
    """[Repository] 삭제 시 평점/댓글/즐겨찾기까지 같이 삭제"""
    repo = RecipeRepository(db_session)
    recipe = await make_recipe(test_user)
    await repo.replace_rating_for(recipe.id, other_user.id, 3)
    await repo.append_comment(recipe.id, other_user.id, "굿")
    await repo.add_favorite(other_user.id, recipe.id)

    assert await repo.delete_recipe(recipe.id) is True

    assert await repo.get_recipe(recipe.id) is None
    for model in (RecipeRating, RecipeComment, Favorite):
        count = (await db_session.execute(select(func.count()).select_from(model))).scalar_one()
        assert count == 0


@pytest.mark.asyncio
async def test_favorites_add_remove_and_list(db_session, test_user, make_recipe):
    repo = RecipeRepository(db_session)
    first = await make_recipe(test_user, title="First")
    second = await make_recipe(test_user, title="Second")

    await repo.add_favorite(test_user.id, second.id)
    await repo.add_favorite(test_user.id, first.id)

    assert await repo.is_favorite(test_user.id, first.id) is True
    favorites = await repo.get_favorite_recipes(test_user.id)
    assert [r.title for r in favorites] == ["Second", "First"]  # 추가한 순서

    await repo.remove_favorite(test_user.id, first.id)
    assert await repo.is_favorite(test_user.id, first.id) is False

    # 삭제 후 다시 추가해도 문제 없음
    await repo.add_favorite(test_user.id, first.id)
    assert await repo.is_favorite(test_user.id, first.id) is True


@pytest.mark.asyncio
async def test_add_favorite_already_present(db_session, test_user, make_recipe):
    """[Repository] 동시 요청으로 이미 들어간 즐겨찾기 -> 에러 없이 1개 유지"""
    repo = RecipeRepository(db_session)
    recipe = await make_recipe(test_user)
    user_id, recipe_id = test_user.id, recipe.id

    # 다른 요청이 먼저 넣은 상황
    await db_session.execute(insert(Favorite).values(user_id=user_id, recipe_id=recipe_id))
    await db_session.commit()

    await repo.add_favorite(user_id, recipe_id)

    assert await repo.is_favorite(user_id, recipe_id) is True
    assert len(await repo.get_favorite_recipes(user_id)) == 1


@pytest.mark.asyncio
async def test_replace_rating_concurrent_insert(db_session, monkeypatch, test_user, make_recipe):
    """[Repository] 삭제와 추가 사이에 같은 유저 평점이 끼어들어도 마지막 값 하나만 남음"""
    repo = RecipeRepository(db_session)
    recipe = await make_recipe(test_user)
    user_id, recipe_id = test_user.id, recipe.id
    await repo.replace_rating_for(recipe_id, user_id, 2)

    original_execute = db_session.execute
    interleaved = []

    async def execute_with_concurrent_rating(statement, *args, **kwargs):
        result = await original_execute(statement, *args, **kwargs)
        if statement.is_delete and not interleaved:
            interleaved.append(True)
            await original_execute(
                insert(RecipeRating).values(recipe_id=recipe_id, user_id=user_id, rating=1)
            )
        return result

    monkeypatch.setattr(db_session, "execute", execute_with_concurrent_rating)

    await repo.replace_rating_for(recipe_id, user_id, 5)

    assert interleaved == [True]
    loaded = await repo.get_recipe(recipe_id)
    assert [r.rating for r in loaded.ratings] == [5]
