from core.exception.exceptions import BaseCustomException


class InvalidImageException(BaseCustomException):
    def __init__(self, detail: str = "jpg, jpeg, png 형식의 이미지만 업로드할 수 있습니다."):
        super().__init__(status_code=400, detail=detail, code="INVALID_IMAGE")


class ImageUploadException(BaseCustomException):
    def __init__(self, detail: str = "이미지 업로드에 실패했습니다."):
        super().__init__(status_code=502, detail=detail, code="IMAGE_UPLOAD_FAILED")
