"""
이미지 업로드 (외부 에셋 호스트)

앱 시작 시 구현체를 만들어서 create_app(image_uploader=...) 으로 넘김.
테스트에서는 가짜 구현체로 갈아끼울 수 있음.
"""
import hashlib
import logging
import time
from abc import ABC, abstractmethod
from pathlib import PurePath

import httpx

from domains.image.exceptions import InvalidImageException, ImageUploadException
from domains.image.schemas import ImageFile

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png"}


def validate_image(image: ImageFile) -> None:
    extension = PurePath(image.filename).suffix.lstrip(".").lower()

    if extension not in ALLOWED_EXTENSIONS and image.content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidImageException()
    if not image.data:
        raise InvalidImageException(detail="비어 있는 이미지 파일입니다.")


class ImageUploader(ABC):
    @abstractmethod
    async def upload(self, image: ImageFile) -> str:
        """이미지를 업로드하고 접근 가능한 URL 을 반환"""


class CloudinaryImageUploader(ImageUploader):
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "food-recipes",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.transport = transport

    @property
    def upload_url(self) -> str:
        return f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image/upload"

    def sign(self, params: dict[str, str]) -> str:
        # Cloudinary 서명: 키 정렬 후 "k=v&k=v" + api_secret 를 SHA-1
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("UTF-8")).hexdigest()

    async def upload(self, image: ImageFile) -> str:
        validate_image(image)

        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ImageUploadException(detail="이미지 저장소 설정이 없습니다.")

        params = {"folder": self.folder, "timestamp": str(int(time.time()))}
        data = {**params, "api_key": self.api_key, "signature": self.sign(params)}
        files = {"file": (image.filename, image.data, image.content_type or "application/octet-stream")}

        async with httpx.AsyncClient(transport=self.transport, timeout=30.0) as client:
            try:
                response = await client.post(self.upload_url, data=data, files=files)
            except httpx.HTTPError as e:
                logger.warning("Cloudinary 업로드 요청 실패: %s", e)
                raise ImageUploadException()

        if response.status_code != 200:
            logger.warning("Cloudinary 업로드 실패: status=%s body=%s", response.status_code, response.text)
            raise ImageUploadException()

        try:
            secure_url = response.json().get("secure_url")
        except (ValueError, AttributeError):
            secure_url = None

        if not secure_url:
            logger.warning("Cloudinary 응답에 secure_url 없음: body=%s", response.text)
            raise ImageUploadException()
        return secure_url
