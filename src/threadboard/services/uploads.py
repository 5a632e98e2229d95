"""Intake and storage of post images."""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from fastapi import UploadFile

from threadboard.core.errors import InvalidInputError
from threadboard.core.settings import settings

logger = logging.getLogger(__name__)

_CHUNK_SIZE: Final[int] = 64 * 1024
SNIFF_LENGTH: Final[int] = 512

ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset({".jpg", ".jpeg", ".png", ".gif"})
ALLOWED_CONTENT_TYPES: Final[frozenset[str]] = frozenset({"image/jpeg", "image/png", "image/gif"})

_SIGNATURES: Final[tuple[tuple[bytes, str], ...]] = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


@dataclass(slots=True)
class ImageUpload:
    """An uploaded file held in memory.

    ``size`` is the number of bytes received. Reading stops one byte past the
    limit, so an oversized file never sits in memory in full.
    """

    filename: str
    data: bytes
    size: int


@dataclass(slots=True)
class StoredImage:
    """Image persisted under the uploads directory."""

    absolute_path: Path
    public_path: str


async def read_upload(upload: UploadFile | None, limit: int | None = None) -> ImageUpload | None:
    """Drain an ``UploadFile`` into an :class:`ImageUpload`.

    Returns None when the form carried no file.
    """
    if upload is None or not upload.filename:
        return None
    max_bytes = settings.max_upload_bytes if limit is None else limit
    chunks: list[bytes] = []
    total = 0
    try:
        while total <= max_bytes:
            chunk = await upload.read(_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
            total += len(chunk)
    finally:
        await upload.close()
    return ImageUpload(filename=upload.filename, data=b"".join(chunks), size=total)


def sniff_content_type(head: bytes) -> str:
    """Detect the image type from the leading bytes of a file."""
    for signature, content_type in _SIGNATURES:
        if head.startswith(signature):
            return content_type
    return "application/octet-stream"


def validate_image(image: ImageUpload, limit: int | None = None) -> str:
    """Check size, extension and content of an upload.

    Returns:
        The lower-cased file extension

    Raises:
        InvalidInputError: if the image is too large or not a JPG, PNG or GIF
    """
    max_bytes = settings.max_upload_bytes if limit is None else limit
    if image.size > max_bytes:
        raise InvalidInputError(
            f"Image file is too large. Maximum size is {max_bytes // (1024 * 1024)}MB.",
            field="image",
            code="image_too_large",
        )
    extension = Path(image.filename).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise InvalidInputError(
            "Invalid file type. Only JPG, PNG, and GIF are allowed.",
            field="image",
            code="image_extension",
        )
    if sniff_content_type(image.data[:SNIFF_LENGTH]) not in ALLOWED_CONTENT_TYPES:
        raise InvalidInputError(
            "Invalid image type. Only JPG, PNG, and GIF are allowed.",
            field="image",
            code="image_content",
        )
    return extension


def _candidate_paths(directory: Path, user_id: int, extension: str) -> Iterator[Path]:
    stem = f"{user_id}_{int(time.time())}"
    yield directory / f"{stem}{extension}"
    for suffix in itertools.count(1):
        yield directory / f"{stem}_{suffix}{extension}"


def store_image(image: ImageUpload, user_id: int, extension: str) -> StoredImage:
    """Write a validated image to ``<upload_dir>/<userId>_<unixSec>[_n]<ext>``.

    Names are claimed with an exclusive create, so an upload racing for the
    same second moves on to the next suffix instead of overwriting.
    """
    directory = settings.upload_dir
    directory.mkdir(parents=True, exist_ok=True)
    for target in _candidate_paths(directory, user_id, extension):
        try:
            with target.open("xb") as buffer:
                buffer.write(image.data)
        except FileExistsError:
            continue
        break
    public_path = f"{settings.upload_url_prefix}/{target.name}"
    logger.info("Stored image %s for user %d", target.name, user_id)
    return StoredImage(absolute_path=target, public_path=public_path)


def discard_image(stored: StoredImage | None) -> None:
    """Remove an image whose post was never committed."""
    if stored is None:
        return
    try:
        stored.absolute_path.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove orphaned upload %s", stored.absolute_path, exc_info=True)
