import io
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from loguru import logger

from agroconnect.auth.security import AuthenticatedUser, get_current_user
from agroconnect.core.config import settings
from agroconnect.core.exceptions import BackendFailure, NotFoundError, ValidationError
from agroconnect.schemas.image import ImageUploadResponse, SuccessResponse
from agroconnect.services.storage import LocalBucketStorage, get_storage
from agroconnect.utils.image_utils import generate_storage_key, validate_image_batch

router = APIRouter()


def _check_batch(files: List[UploadFile], sizes: List[int], current_user: AuthenticatedUser) -> None:
    is_valid, error = validate_image_batch(
        (upload.content_type, size) for upload, size in zip(files, sizes)
    )
    if not is_valid:
        logger.info(f"Rejected image batch of {len(files)} from {current_user.id}: {error}")
        raise ValidationError(error)


def _discard(storage: LocalBucketStorage, keys: List[str]) -> None:
    """Remove objects written by a batch that did not complete."""
    for key in keys:
        try:
            storage.remove(key)
        except BackendFailure:
            logger.warning(f"Could not remove orphaned image {key}")


@router.post(
    "",
    response_model=ImageUploadResponse,
    summary="Upload product images",
    description="Upload one or more images (multipart field `images`). The whole batch is rejected if any file is invalid.",
)
async def upload_images(
    images: Optional[List[UploadFile]] = File(None),
    storage: LocalBucketStorage = Depends(get_storage),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Upload images for a listing.

    - **images**: JPEG, PNG or WebP files, each at most 5MB, at most 8 per batch
    """
    files = [upload for upload in images or [] if upload.filename]
    if not files:
        raise ValidationError("No images provided")

    # nothing is buffered until the declared sizes pass
    _check_batch(files, [upload.size or 0 for upload in files], current_user)

    # a part may under-report its size, so reads stop just past the limit
    contents = [await upload.read(settings.MAX_IMAGE_SIZE_BYTES + 1) for upload in files]
    _check_batch(files, [len(data) for data in contents], current_user)

    uploaded = []
    try:
        for upload, data in zip(files, contents):
            key = generate_storage_key(current_user.id, upload.filename, upload.content_type)
            storage.upload(key, io.BytesIO(data))
            uploaded.append({
                "url": storage.get_public_url(key),
                "file_name": key,
                "size": len(data),
                "type": upload.content_type,
            })
    except BackendFailure:
        _discard(storage, [image["file_name"] for image in uploaded])
        raise

    logger.info(f"Uploaded {len(uploaded)} image(s) for {current_user.id}")
    return {"success": True, "images": uploaded}


@router.delete(
    "",
    response_model=SuccessResponse,
    summary="Delete a product image",
    description="Delete one of the caller's images by its storage key.",
)
def delete_image(
    file_name: Optional[str] = Query(None, alias="fileName", description="Storage key returned by the upload"),
    storage: LocalBucketStorage = Depends(get_storage),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    if not file_name:
        raise ValidationError("File name is required")

    # keys outside the caller's namespace look exactly like missing ones
    owned = (
        file_name.startswith(f"{current_user.id}/")
        and ".." not in file_name.split("/")
        and storage.is_safe_key(file_name)
    )
    if not owned or not storage.exists(file_name):
        raise NotFoundError("Image not found")

    storage.remove(file_name)
    logger.info(f"Image {file_name} deleted by {current_user.id}")
    return {"success": True}
