import hashlib
import httpx
import pytest

from domains.image.exceptions import InvalidImageException, ImageUploadException
from domains.image.schemas import ImageFile
from domains.image.uploader import CloudinaryImageUploader

PNG = ImageFile(filename="cake.png", content_type="image/png", data=b"\x89PNG")


def _uploader(handler, **overrides) -> CloudinaryImageUploader:
    values = dict(cloud_name="demo", api_key="key", api_secret="secret")
    values.update(overrides)
    return CloudinaryImageUploader(transport=httpx.MockTransport(handler), **values)


def test_sign_sorts_params():
    uploader = _uploader(lambda request: httpx.Response(500))

    expected = hashlib.sha1(b"folder=food-recipes&timestamp=100secret").hexdigest()
    assert uploader.sign({"timestamp": "100", "folder": "food-recipes"}) == expected


@pytest.mark.asyncio
async def test_upload_returns_secure_url():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1_1/demo/image/upload"
        assert b"food-recipes" in request.content
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo/cake.png"})

    assert await _uploader(handler).upload(PNG) == "https://res.cloudinary.com/demo/cake.png"


@pytest.mark.asyncio
async def test_upload_rejects_unsupported_format():
    uploader = _uploader(lambda request: httpx.Response(200, json={"secure_url": "x"}))

    with pytest.raises(InvalidImageException):
        await uploader.upload(ImageFile(filename="anim.gif", content_type="image/gif", data=b"GIF"))


@pytest.mark.asyncio
async def test_upload_failure():
    with pytest.raises(ImageUploadException):
        await _uploader(lambda request: httpx.Response(500)).upload(PNG)


@pytest.mark.asyncio
async def test_upload_without_configuration():
    uploader = _uploader(lambda request: httpx.Response(200), cloud_name="")

    with pytest.raises(ImageUploadException):
        await uploader.upload(PNG)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>gateway</html>"),
        httpx.Response(200, json={"public_id": "cake"}),
        httpx.Response(200, json=["unexpected"]),
    ],
)
async def test_upload_malformed_response(response):
    """[Uploader] 200 이지만 secure_url 을 못 읽으면 ImageUploadException"""
    with pytest.raises(ImageUploadException):
        await _uploader(lambda request: response).upload(PNG)
