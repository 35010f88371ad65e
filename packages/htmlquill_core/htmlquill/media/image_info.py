"""Intrinsic image dimensions read with Pillow."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..styles.units import Unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    content_type: Optional[str] = None
    format: Optional[str] = None


def read_image_info(data: bytes) -> Optional[ImageInfo]:
    """
    Read the pixel size and MIME type of encoded image bytes.

    Returns ``None`` when Pillow cannot identify the data.
    """
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            image_format = img.format
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug(f"Unreadable image data ({len(data)} bytes): {e}")
        return None
    content_type = Image.MIME.get(image_format) if image_format else None
    return ImageInfo(width=width, height=height, content_type=content_type, format=image_format)


def display_size(info: ImageInfo, width: Unit, height: Unit) -> Tuple[int, int]:
    """
    Final pixel size from the requested dimensions.

    A missing dimension is derived from the other one keeping the intrinsic
    aspect ratio; with neither given the intrinsic size is used.
    """
    width_px = width.to_pixels() if width.is_valid else None
    height_px = height.to_pixels() if height.is_valid else None

    if width_px is not None and height_px is not None:
        return width_px, height_px
    if width_px is not None:
        if info.width == 0:
            return width_px, info.height
        return width_px, int(round(info.height * width_px / info.width))
    if height_px is not None:
        if info.height == 0:
            return info.width, height_px
        return int(round(info.width * height_px / info.height)), height_px
    return info.width, info.height
