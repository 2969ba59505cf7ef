"""Temporary storage for pasted images, kept until the surrounding form is saved.

The image is readable immediately through a base64 ``data:`` URL; the entry
is looked up by id (or by that URL in saved HTML) when the form uploads its
images for real.
"""

import asyncio
import base64
import logging
import re
import secrets
import string
import time
from typing import Protocol

from pydantic import BaseModel

from smart_paste.config import DEFAULT_MAX_IMAGE_BYTES

logger = logging.getLogger(__name__)

# data:image/png;base64,.... inside saved HTML
DATA_URL_RE = re.compile(r"data:image/[^;]+;base64,[^\"'>\s)]+")

_ID_ALPHABET = string.ascii_lowercase + string.digits


class StorageLimitExceeded(RuntimeError):
    """Raised when storing an image would pass the storage size limit."""


class StoredImage(BaseModel):
    id: str
    url: str
    file_name: str
    mime_type: str
    size: int


class StorageStats(BaseModel):
    count: int
    total_size: int
    total_size_mb: float
    percent_used: float


class ImageStore(Protocol):
    """Anything that can store a pasted image blob and hand back an id and URL."""

    async def store(self, blob: bytes, file_name: str | None = None, mime_type: str = "image/png") -> StoredImage:
        """Store *blob* and return where it can be displayed from."""


def generate_temp_image_id() -> str:
    """Return an id like ``temp_1718000000000_k3j9x0a1b``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"temp_{int(time.time() * 1000)}_{suffix}"


class TempImageStorage:
    """In-memory image store with a total size limit."""

    def __init__(self, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES):
        self.max_bytes = max_bytes
        self._images: dict[str, StoredImage] = {}
        # Bytes claimed by stores still encoding
        self._reserved = 0

    async def store(self, blob: bytes, file_name: str | None = None, mime_type: str = "image/png") -> StoredImage:
        """Store *blob* and return it with a temporary id and a data URL."""
        # Check and reserve before awaiting so concurrent stores see each other
        total = sum(image.size for image in self._images.values()) + self._reserved + len(blob)
        if total > self.max_bytes:
            raise StorageLimitExceeded("Storage limit exceeded. Please upload existing images first.")
        self._reserved += len(blob)

        try:
            # Large screenshots take a while to encode
            encoded = await asyncio.to_thread(base64.b64encode, blob)
        finally:
            self._reserved -= len(blob)

        image_id = generate_temp_image_id()
        image = StoredImage(
            id=image_id,
            url=f"data:{mime_type};base64,{encoded.decode('ascii')}",
            file_name=file_name or f"pasted-image-{int(time.time() * 1000)}.png",
            mime_type=mime_type,
            size=len(blob),
        )
        self._images[image_id] = image
        logger.info("Stored temp image %s (%s, %d bytes)", image_id, image.file_name, image.size)
        return image

    def get(self, image_id: str) -> StoredImage | None:
        return self._images.get(image_id)

    def all(self) -> dict[str, StoredImage]:
        return dict(self._images)

    def remove(self, image_id: str) -> None:
        self._images.pop(image_id, None)

    def clear(self) -> None:
        """Drop every stored image (e.g. after the form was submitted)."""
        self._images.clear()

    def extract_temp_ids(self, html: str) -> list[str]:
        """Return ids of stored images whose data URL appears in *html*."""
        if not html:
            return []
        urls = set(DATA_URL_RE.findall(html))
        return [image_id for image_id, image in self._images.items() if image.url in urls]

    def cleanup_unused(self, html: str) -> list[str]:
        """Remove stored images that *html* no longer references; return the removed ids."""
        used = set(self.extract_temp_ids(html))
        unused = [image_id for image_id in self._images if image_id not in used]
        for image_id in unused:
            self.remove(image_id)
        if unused:
            logger.info("Removed %d unused temp images", len(unused))
        return unused

    def stats(self) -> StorageStats:
        total = sum(image.size for image in self._images.values())
        return StorageStats(
            count=len(self._images),
            total_size=total,
            total_size_mb=round(total / 1024 / 1024, 2),
            percent_used=round(total / self.max_bytes * 100, 1) if self.max_bytes else 0.0,
        )
