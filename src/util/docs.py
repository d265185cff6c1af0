# src/util/docs.py
from typing import Type
from core.exception.exceptions import BaseCustomException, GlobalErrorResponse


# 예외 클래스들을 받아서 Swagger responses 명세를 만들어줌 (같은 status_code 는 examples 로 묶음)
def create_error_response(*exception_classes: Type[BaseCustomException]) -> dict:
    responses: dict = {}

    for exc_class in exception_classes:
        exc = exc_class()

        entry = responses.setdefault(
            exc.status_code,
            {
                "model": GlobalErrorResponse,
                "content": {"application/json": {"examples": {}}},
            },
        )
        entry["content"]["application/json"]["examples"][exc_class.__name__] = {
            "summary": exc.detail,
            "value": {
                "status_code": exc.status_code,
                "code": exc.code,
                "detail": exc.detail,
            },
        }

    return responses
