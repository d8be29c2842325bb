"""Object storage for product images.

Objects live in a bucket directory (``STORAGE_ROOT/STORAGE_BUCKET``) and are
served read-only by the static mount in ``agroconnect.main``. Keys are
``{user_id}/{name}`` and never leave the bucket.
"""

import shutil
from pathlib import Path
from typing import BinaryIO

from loguru import logger

from agroconnect.core.config import settings
from agroconnect.core.exceptions import BackendFailure


class LocalBucketStorage:
    def __init__(self, root: Path, bucket: str, public_base_url: str):
        self.bucket = bucket
        self.bucket_dir = (Path(root) / bucket).resolve()
        self.public_base_url = public_base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.bucket_dir / key).resolve()
        if self.bucket_dir not in path.parents:
            raise ValueError(f"Key escapes bucket: {key}")
        return path

    def is_safe_key(self, key: str) -> bool:
        try:
            self._path_for(key)
        except ValueError:
            return False
        return True

    def upload(self, key: str, fileobj: BinaryIO) -> None:
        path = self._path_for(key)
        if path.exists():
            raise BackendFailure("Failed to upload image")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as buffer:
                shutil.copyfileobj(fileobj, buffer)
        except OSError:
            logger.exception(f"Upload of {self.bucket}/{key} failed")
            raise BackendFailure("Failed to upload image")

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink()
        except OSError:
            logger.exception(f"Delete of {self.bucket}/{key} failed")
            raise BackendFailure("Failed to delete image")

    def get_public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def key_from_url(self, url: str):
        prefix = f"{self.public_base_url}/{self.bucket}/"
        if url.startswith(prefix):
            return url[len(prefix):]
        return None


def get_storage() -> LocalBucketStorage:
    return LocalBucketStorage(Path(settings.STORAGE_ROOT), settings.STORAGE_BUCKET, settings.STORAGE_PUBLIC_URL)
