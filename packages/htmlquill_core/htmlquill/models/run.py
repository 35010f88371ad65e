"""Run model: a piece of text, a line break or an image with one style."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..styles.run_style import EMPTY_RUN_STYLE, RunStyle
from .base import Models
from .image import Image

BREAK_LINE = "line"

# HTML whitespace; U+00A0 from &nbsp; is content
ASCII_WHITESPACE = " \t\n\r\f"


class Run(Models):
    """
    Represents a run with a frozen style snapshot.

    Exactly one of ``text``, ``break_type`` or ``image`` carries the content.
    """

    def __init__(
        self,
        text: str = "",
        style: RunStyle = EMPTY_RUN_STYLE,
        break_type: Optional[str] = None,
        image: Optional[Image] = None,
        source_tag: Optional[str] = None,
    ):
        super().__init__(source_tag=source_tag)
        self.text: str = text
        self.style: RunStyle = style
        self.break_type: Optional[str] = break_type
        self.image: Optional[Image] = image

    @classmethod
    def line_break(cls, style: RunStyle = EMPTY_RUN_STYLE, source_tag: Optional[str] = "br") -> "Run":
        return cls(style=style, break_type=BREAK_LINE, source_tag=source_tag)

    @property
    def is_break(self) -> bool:
        return self.break_type is not None

    @property
    def is_image(self) -> bool:
        return self.image is not None

    @property
    def is_whitespace(self) -> bool:
        """Text run holding nothing but whitespace."""
        return not self.is_break and not self.is_image and not self.text.strip(ASCII_WHITESPACE)

    def add_text(self, text: str) -> None:
        self.text += text

    def get_text(self) -> str:
        if self.is_break:
            return "\n"
        if self.is_image:
            return ""
        return self.text

    def _attributes_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.is_break:
            result["break"] = self.break_type
        elif self.is_image:
            result["image"] = self.image.to_dict()
        else:
            result["text"] = self.text
        style = self.style.to_dict()
        if style:
            result["style"] = style
        return result

    def __repr__(self) -> str:
        if self.is_break:
            return f"Run(break={self.break_type!r})"
        if self.is_image:
            return f"Run(image={self.image.src!r})"
        return f"Run(text={self.text!r})"
