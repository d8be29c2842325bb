import secrets
import string
import time
from typing import Iterable, Optional, Tuple

from agroconnect.core.config import settings

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]

_EXTENSION_BY_TYPE = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

_KEY_ALPHABET = string.ascii_lowercase + string.digits


def validate_image_file(content_type: Optional[str], size: int) -> Tuple[bool, Optional[str]]:
    if content_type not in ALLOWED_IMAGE_TYPES:
        return False, "Only JPEG, PNG, and WebP images are allowed"
    if size > settings.MAX_IMAGE_SIZE_BYTES:
        return False, f"Image size must be less than {format_file_size(settings.MAX_IMAGE_SIZE_BYTES)}"
    return True, None


def validate_image_batch(files: Iterable[Tuple[Optional[str], int]], existing_count: int = 0) -> Tuple[bool, Optional[str]]:
    """Check a batch of ``(content_type, size)`` pairs, stopping at the first problem."""
    files = list(files)
    if not files:
        return False, "No images provided"

    if existing_count + len(files) > settings.MAX_IMAGES_PER_PRODUCT:
        return False, f"Maximum {settings.MAX_IMAGES_PER_PRODUCT} images allowed"

    total_size = 0
    for content_type, size in files:
        is_valid, error = validate_image_file(content_type, size)
        if not is_valid:
            return False, error
        total_size += size

    if total_size > settings.MAX_TOTAL_IMAGE_BYTES:
        return False, f"Total image size must be less than {format_file_size(settings.MAX_TOTAL_IMAGE_BYTES)}"

    return True, None


def file_extension(filename: Optional[str], content_type: Optional[str]) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if ext.isalnum():
            return ext
    return _EXTENSION_BY_TYPE.get(content_type or "", "bin")


def generate_storage_key(user_id: str, filename: Optional[str], content_type: Optional[str]) -> str:
    """Build ``{user_id}/{epoch_ms}-{random}.{ext}`` for a new object."""
    timestamp = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_KEY_ALPHABET) for _ in range(13))
    return f"{user_id}/{timestamp}-{suffix}.{file_extension(filename, content_type)}"


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[index]}"
