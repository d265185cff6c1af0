from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from core.di import get_recipe_service, get_public_recipe_service
from core.exception.exceptions import UnauthorizedException
from domains.image.exceptions import InvalidImageException, ImageUploadException
from domains.image.schemas import ImageFile
from domains.recipe.exceptions import (
    RecipeNotFoundException,
    RecipeForbiddenException,
    RecipeValidationException,
)
from domains.recipe.schemas import (
    RecipeForm,
    RecipeFilter,
    RecipeResponse,
    RecipeListResponse,
    RatingRequest,
    RateRecipeResponse,
    CommentRequest,
    CommentRecipeResponse,
    FavoriteToggleResponse,
    MessageResponse,
)
from domains.recipe.service import RecipeService
from util.docs import create_error_response

router = APIRouter()


async def read_image(upload: UploadFile | None) -> ImageFile | None:
    if upload is None or not upload.filename:
        return None
    return ImageFile(
        filename=upload.filename,
        content_type=upload.content_type,
        data=await upload.read(),
    )


@router.post(
    "",
    status_code=201,
    summary="레시피 등록 API",
    response_model=RecipeResponse,
    responses=create_error_response(
        RecipeValidationException,
        UnauthorizedException,
        InvalidImageException,
        ImageUploadException,
    ),
)
async def create_recipe(
    title: str | None = Form(None),
    ingredients: str | None = Form(None),
    instructions: str | None = Form(None),
    category: str | None = Form(None),
    cooking_time: str | None = Form(None, alias="cookingTime"),
    image: UploadFile | None = File(None),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    multipart/form-data 로 받음. title, ingredients, instructions, category 필수
    ## cookingTime 은 숫자가 아니면 0으로 저장
    """
    form = RecipeForm(
        title=title,
        ingredients=ingredients,
        instructions=instructions,
        category=category,
        cooking_time=cooking_time,
    )
    return await service.create_recipe(form, await read_image(image))


@router.get(
    "",
    status_code=200,
    summary="레시피 목록 조회 API",
    response_model=RecipeListResponse,
)
async def get_recipes(
    category: str | None = None,
    search: str | None = None,
    ingredients: str | None = None,
    cooking_time: int | None = Query(
        None, alias="cookingTime", ge=0, description="최대 조리시간(분, 이하)"
    ),
    rating: float | None = Query(None, ge=0, le=5, description="최소 평균 평점(이상)"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: RecipeService = Depends(get_public_recipe_service),
):
    """
    # 모든 필터는 AND 조건
    ## category -> 정확히 일치
    ## search -> 제목 부분 일치 (대소문자 무시)
    ## ingredients -> 재료 부분 일치 (대소문자 무시)
    """
    filters = RecipeFilter(
        category=category,
        search=search,
        ingredients=ingredients,
        cooking_time=cooking_time,
        rating=rating,
    )
    return await service.get_recipes(filters, page=page, limit=limit)


# "/{recipe_id}" 보다 먼저 선언해야 함
@router.get(
    "/favorites",
    status_code=200,
    summary="즐겨찾기 목록 조회 API",
    response_model=list[RecipeResponse],
    responses=create_error_response(UnauthorizedException),
)
async def get_favorites(service: RecipeService = Depends(get_recipe_service)):
    return await service.get_favorites()


@router.get(
    "/{recipe_id}",
    status_code=200,
    summary="레시피 단일 조회 API",
    response_model=RecipeResponse,
    responses=create_error_response(RecipeNotFoundException),
)
async def get_recipe(
    recipe_id: UUID, service: RecipeService = Depends(get_public_recipe_service)
):
    return await service.get_recipe(recipe_id)


@router.put(
    "/{recipe_id}",
    status_code=200,
    summary="레시피 수정 API",
    response_model=RecipeResponse,
    responses=create_error_response(
        RecipeNotFoundException,
        RecipeForbiddenException,
        RecipeValidationException,
        UnauthorizedException,
    ),
)
async def update_recipe(
    recipe_id: UUID,
    title: str | None = Form(None),
    ingredients: str | None = Form(None),
    instructions: str | None = Form(None),
    category: str | None = Form(None),
    cooking_time: str | None = Form(None, alias="cookingTime"),
    image: UploadFile | None = File(None),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    ## 보낸 필드만 수정됨. 안 보낸 필드는 기존 값 그대로
    ## 보냈는데 빈 문자열이면 400
    """
    form = RecipeForm(
        title=title,
        ingredients=ingredients,
        instructions=instructions,
        category=category,
        cooking_time=cooking_time,
    )
    return await service.update_recipe(recipe_id, form, await read_image(image))


@router.delete(
    "/{recipe_id}",
    status_code=200,
    summary="레시피 삭제 API",
    response_model=MessageResponse,
    responses=create_error_response(
        RecipeNotFoundException, RecipeForbiddenException, UnauthorizedException
    ),
)
async def delete_recipe(
    recipe_id: UUID, service: RecipeService = Depends(get_recipe_service)
):
    await service.delete_recipe(recipe_id)
    return MessageResponse(message="레시피가 삭제되었습니다.")


@router.post(
    "/{recipe_id}/rating",
    status_code=200,
    summary="레시피 평점 등록 API",
    response_model=RateRecipeResponse,
    responses=create_error_response(RecipeNotFoundException, UnauthorizedException),
)
async def rate_recipe(
    recipe_id: UUID,
    request: RatingRequest,
    service: RecipeService = Depends(get_recipe_service),
):
    """
    ## 같은 유저가 다시 평가하면 기존 평점을 덮어씀
    """
    return await service.rate_recipe(recipe_id, request)


@router.post(
    "/{recipe_id}/comment",
    status_code=200,
    summary="레시피 댓글 등록 API",
    response_model=CommentRecipeResponse,
    responses=create_error_response(RecipeNotFoundException, UnauthorizedException),
)
async def comment_recipe(
    recipe_id: UUID,
    request: CommentRequest,
    service: RecipeService = Depends(get_recipe_service),
):
    return await service.comment_recipe(recipe_id, request)


@router.post(
    "/{recipe_id}/favorite",
    status_code=200,
    summary="즐겨찾기 추가/삭제 API",
    response_model=FavoriteToggleResponse,
    responses=create_error_response(RecipeNotFoundException, UnauthorizedException),
)
async def toggle_favorite(
    recipe_id: UUID, service: RecipeService = Depends(get_recipe_service)
):
    return await service.toggle_favorite(recipe_id)
