from core.exception.exceptions import BaseCustomException


class RecipeNotFoundException(BaseCustomException):
    def __init__(self, detail: str = "해당 레시피가 존재하지 않습니다."):
        super().__init__(status_code=404, detail=detail, code="RECIPE_NOT_FOUND")


class RecipeForbiddenException(BaseCustomException):
    def __init__(self, detail: str = "본인이 작성한 레시피만 수정/삭제할 수 있습니다."):
        super().__init__(status_code=403, detail=detail, code="RECIPE_FORBIDDEN")


class RecipeValidationException(BaseCustomException):
    def __init__(self, detail: str = "필수 항목이 누락되었습니다."):
        super().__init__(status_code=400, detail=detail, code="RECIPE_VALIDATION_ERROR")
