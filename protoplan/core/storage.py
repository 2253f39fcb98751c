"""
Local object storage for uploaded screen images.

Objects are addressed by a storage key relative to ``settings.STORAGE_DIR``
(``<project_id>/<hex>.<ext>``) and exposed publicly through the ``/storage``
static mount.
"""

import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from protoplan.core.config import settings

logger = logging.getLogger(__name__)

PUBLIC_MOUNT = "/storage"


class StorageError(Exception):
    """Raised when an upload cannot be stored."""


class InvalidImageError(StorageError):
    """Raised when the uploaded bytes are not a readable image."""


@dataclass
class StoredImage:
    key: str
    size: int
    format: str
    width: int
    height: int


def storage_root() -> Path:
    root = Path(settings.STORAGE_DIR)
    root.mkdir(parents=True, exist_ok=True)
    return root


def object_path(key: str) -> Path:
    path = (storage_root() / key).resolve()
    if storage_root().resolve() not in path.parents:
        raise StorageError(f"Storage key escapes storage root: {key}")
    return path


def public_url(key: Optional[str]) -> Optional[str]:
    if not key:
        return None
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{PUBLIC_MOUNT}/{key}"


def _extension(image_format: str) -> str:
    # StaticFiles derives Content-Type from the extension; never take it from the client
    ext = image_format.lower()
    return "jpg" if ext == "jpeg" else ext


def save_image(project_id: int, filename: Optional[str], data: bytes) -> StoredImage:
    """
    Validate and store an uploaded image under the project's prefix.

    Args:
        project_id: Owning project id, used as the key prefix
        filename: Client-side filename, only used in error messages
        data: Raw file bytes, possibly truncated at ``MAX_UPLOAD_SIZE + 1``

    Returns:
        StoredImage describing the stored object

    Raises:
        StorageError: If the file is empty or too large
        InvalidImageError: If Pillow cannot decode the image or it has too many pixels
    """
    if not data:
        raise StorageError("File is empty")
    if len(data) > settings.MAX_UPLOAD_SIZE:
        raise StorageError(
            f"File exceeds maximum size ({settings.MAX_UPLOAD_SIZE / 1024 / 1024:.1f}MB)"
        )

    dest_dir = storage_root() / str(project_id)
    dest_dir.mkdir(parents=True, exist_ok=True)
    tmp_path = dest_dir / f".{uuid.uuid4().hex}.upload"
    tmp_path.write_bytes(data)

    try:
        try:
            with Image.open(tmp_path) as img:
                img.verify()
            with Image.open(tmp_path) as img:
                image_format = img.format or "PNG"
                width, height = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
            raise InvalidImageError(f"Not a valid image: {filename or 'upload'}") from e

        key = f"{project_id}/{uuid.uuid4().hex}.{_extension(image_format)}"
        tmp_path.replace(storage_root() / key)
    finally:
        tmp_path.unlink(missing_ok=True)

    logger.info(f"Stored image {key} ({len(data)} bytes)")
    return StoredImage(key=key, size=len(data), format=image_format.lower(), width=width, height=height)


def delete_object(key: Optional[str]) -> bool:
    """
    Delete a stored object.

    Returns:
        True if deletion was successful or the object didn't exist, False on error
    """
    if not key:
        return True

    try:
        path = object_path(key)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted stored object: {key}")
        return True
    except (OSError, StorageError) as e:
        logger.error(f"Failed to delete stored object {key}: {e}")
        return False


def delete_prefix(project_id: int) -> None:
    """Remove every object stored for a project."""
    prefix_dir = storage_root() / str(project_id)
    if prefix_dir.exists():
        shutil.rmtree(prefix_dir, ignore_errors=True)
        logger.info(f"Removed storage prefix for project {project_id}")
