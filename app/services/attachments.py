"""
Image attachment handling for food items and reviews.

Uploads are screened in memory (media type, extension, size, decodable image)
before anything is written; accepted uploads are staged in the upload
directory under a collision-free name and addressed publicly through the
configured URL prefix.
"""

import io
import random
import time
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile
from PIL import Image

from app.core.config import Settings
from app.core.exceptions import PayloadTooLargeError, UnsupportedMediaError
from app.utils.logger import upload_logger


class AttachmentManager:
    """Stages, discards and releases image files on local disk."""

    def __init__(
        self,
        upload_dir: str,
        url_prefix: str = "/uploads",
        max_size_bytes: int = 5 * 1024 * 1024,
        allowed_types: Iterable[str] = ("image/jpeg", "image/png", "image/gif"),
        allowed_extensions: Iterable[str] = (".jpg", ".jpeg", ".png", ".gif"),
    ):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size_bytes = max_size_bytes
        self.allowed_types = {t.lower() for t in allowed_types}
        self.allowed_extensions = {e.lower() for e in allowed_extensions}

    @classmethod
    def from_settings(cls, settings: Settings) -> "AttachmentManager":
        return cls(
            upload_dir=settings.UPLOAD_DIR,
            url_prefix=settings.UPLOAD_URL_PREFIX,
            max_size_bytes=settings.max_file_size_bytes,
            allowed_types=settings.ALLOWED_IMAGE_TYPES,
            allowed_extensions=settings.ALLOWED_IMAGE_EXTENSIONS,
        )

    async def screen(self, upload: UploadFile) -> bytes:
        """
        Validate an upload and return its bytes.

        Raises:
            UnsupportedMediaError: not a jpeg/png/gif image
            PayloadTooLargeError: larger than the configured limit
        """
        content_type = (upload.content_type or "").lower()
        extension = Path(upload.filename or "").suffix.lower()

        if content_type not in self.allowed_types or extension not in self.allowed_extensions:
            raise UnsupportedMediaError()

        # One byte past the limit is enough to know it is too large
        data = await upload.read(self.max_size_bytes + 1)
        if len(data) > self.max_size_bytes:
            raise PayloadTooLargeError()

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
        except Exception as e:
            raise UnsupportedMediaError() from e

        return data

    def _unique_name(self, field: str, extension: str) -> str:
        millis = int(time.time() * 1000)
        suffix = random.randint(0, 10**9)
        return f"{field}-{millis}-{suffix}{extension}"

    async def stage(self, upload: Optional[UploadFile], field: str = "image") -> Optional[str]:
        """
        Screen and write an upload, returning its public path.

        Returns None when no file was sent.
        """
        if upload is None or not upload.filename:
            return None

        data = await self.screen(upload)

        name = self._unique_name(field, Path(upload.filename).suffix.lower())
        await aiofiles.os.makedirs(self.upload_dir, exist_ok=True)
        async with aiofiles.open(self.upload_dir / name, "wb") as f:
            await f.write(data)

        public_path = f"{self.url_prefix}/{name}"
        upload_logger.info("Staged upload", context="stage", path=public_path, size=len(data))
        return public_path

    def to_disk_path(self, public_path: Optional[str]) -> Optional[Path]:
        """Map ``/uploads/<name>`` back to the file in the upload directory."""
        if not public_path or not public_path.startswith(self.url_prefix + "/"):
            return None
        name = Path(public_path[len(self.url_prefix) + 1:]).name
        if not name:
            return None
        return self.upload_dir / name

    async def _remove(self, public_path: Optional[str], reason: str) -> bool:
        disk_path = self.to_disk_path(public_path)
        if disk_path is None:
            return False
        try:
            await aiofiles.os.remove(disk_path)
        except FileNotFoundError:
            upload_logger.warning("File already gone", context=reason, path=public_path)
            return False
        except OSError as e:
            upload_logger.error(f"Could not delete file: {e}", context=reason, path=public_path)
            return False

        upload_logger.debug("Deleted file", context=reason, path=public_path)
        return True

    async def discard(self, public_path: Optional[str]) -> bool:
        """Remove a staged file whose write was rejected."""
        return await self._remove(public_path, "discard")

    async def release(self, public_path: Optional[str]) -> bool:
        """Remove a file no longer referenced by any record."""
        return await self._remove(public_path, "release")

    async def release_many(self, public_paths: Iterable[Optional[str]]) -> int:
        released = 0
        for path in public_paths:
            if path and await self.release(path):
                released += 1
        return released
