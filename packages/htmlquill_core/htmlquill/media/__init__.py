"""
Media module: resource loading and image handling.
"""

from .resource_loader import (
    DefaultResourceLoader,
    FetchResult,
    FetchStatus,
    MappingResourceLoader,
    ResourceLoader,
)
from .image_fetcher import ImageFetchPool
from .image_info import ImageInfo, display_size, read_image_info

__all__ = [
    "DefaultResourceLoader",
    "FetchResult",
    "FetchStatus",
    "MappingResourceLoader",
    "ResourceLoader",
    "ImageFetchPool",
    "ImageInfo",
    "display_size",
    "read_image_info",
]
