"""Image model for images referenced by ``<img>`` tags."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..styles.units import EMPTY_UNIT, Unit
from .base import Models


class Image(Models):
    """
    Represents an inline image.

    ``requested_width``/``requested_height`` are the sizes the markup asked
    for; ``width``/``height`` are the final pixel dimensions set once the
    image bytes are bound.
    """

    def __init__(
        self,
        src: str,
        alt: Optional[str] = None,
        title: Optional[str] = None,
        requested_width: Unit = EMPTY_UNIT,
        requested_height: Unit = EMPTY_UNIT,
        source_tag: Optional[str] = "img",
    ):
        super().__init__(source_tag=source_tag)
        self.src: str = src
        self.alt: Optional[str] = alt
        self.title: Optional[str] = title
        self.requested_width: Unit = requested_width
        self.requested_height: Unit = requested_height
        self.resolved_uri: Optional[str] = None
        self.width: Optional[int] = None
        self.height: Optional[int] = None
        self.data: Optional[bytes] = None
        self.content_type: Optional[str] = None

    def set_size(self, width: int, height: int) -> None:
        """Set image size in pixels."""
        self.width = width
        self.height = height

    def get_size(self) -> Tuple[Optional[int], Optional[int]]:
        return (self.width, self.height)

    def set_data(self, data: bytes, content_type: Optional[str] = None) -> None:
        self.data = data
        self.content_type = content_type

    @property
    def is_bound(self) -> bool:
        return self.data is not None

    def _attributes_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"src": self.src}
        if self.alt:
            result["alt"] = self.alt
        if self.title:
            result["title"] = self.title
        if self.width is not None and self.height is not None:
            result["width"] = self.width
            result["height"] = self.height
        if self.content_type:
            result["content_type"] = self.content_type
        if self.data is not None:
            result["size_bytes"] = len(self.data)
        return result

    def __repr__(self) -> str:
        return f"Image(src={self.src[:40]!r}, size={self.width}x{self.height})"
