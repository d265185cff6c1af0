from pydantic import BaseModel


class ImageFile(BaseModel):
    filename: str
    content_type: str | None = None
    data: bytes
