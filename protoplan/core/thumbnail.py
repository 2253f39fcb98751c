"""
Preview thumbnails for uploaded screens.

Thumbnails are stored next to their source image under ``<project_id>/thumbs/``
and share the storage key scheme of :mod:`protoplan.core.storage`.
"""

import logging
import uuid
from typing import Optional

from PIL import Image

from protoplan.core.config import settings
from protoplan.core.storage import object_path, storage_root

logger = logging.getLogger(__name__)

DEFAULT_THUMBNAIL_FORMAT = "JPEG"
DEFAULT_THUMBNAIL_QUALITY = 85


def generate_thumbnail(
    source_key: str,
    max_size: Optional[int] = None,
    quality: int = DEFAULT_THUMBNAIL_QUALITY,
) -> Optional[str]:
    """
    Generate a preview thumbnail for a stored image.

    Args:
        source_key: Storage key of the source image
        max_size: Bounding box edge in pixels (defaults to settings.THUMBNAIL_SIZE)
        quality: JPEG quality (1-100)

    Returns:
        Storage key of the thumbnail, or None if generation failed

    Raises:
        FileNotFoundError: If the source object doesn't exist
    """
    source_path = object_path(source_key)
    if not source_path.exists():
        raise FileNotFoundError(f"Source image not found: {source_key}")

    max_size = max_size or settings.THUMBNAIL_SIZE
    prefix = source_key.split("/", 1)[0]
    dest_dir = storage_root() / prefix / "thumbs"
    dest_dir.mkdir(parents=True, exist_ok=True)

    try:
        with Image.open(source_path) as img:
            # JPEG has no alpha channel; flatten onto white
            if img.mode in ("RGBA", "P", "LA"):
                img = img.convert("RGBA")
                rgb_img = Image.new("RGB", img.size, (255, 255, 255))
                rgb_img.paste(img, mask=img.split()[-1])
                img = rgb_img
            elif img.mode != "RGB":
                img = img.convert("RGB")

            img.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)

            thumb_key = f"{prefix}/thumbs/{uuid.uuid4().hex}_thumb.jpg"
            img.save(storage_root() / thumb_key, format=DEFAULT_THUMBNAIL_FORMAT, quality=quality, optimize=True)

            logger.info(f"Generated thumbnail: {thumb_key}")
            return thumb_key

    except (OSError, ValueError) as e:
        logger.error(f"Failed to generate thumbnail for {source_key}: {e}")
        return None

