from typing import List

from agroconnect.schemas.base import BaseSchema


class UploadedImage(BaseSchema):
    url: str
    file_name: str
    size: int
    type: str


class ImageUploadResponse(BaseSchema):
    success: bool = True
    images: List[UploadedImage]


class SuccessResponse(BaseSchema):
    success: bool = True
