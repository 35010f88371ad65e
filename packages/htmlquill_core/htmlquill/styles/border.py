"""
Border values for HTML/CSS.

A side border is a (style, color, width) triple; :class:`HtmlBorder` groups the
four sides. Each member may be left unspecified so that a per-side property can
inherit the rest from the grouped ``border`` shorthand.
"""

from __future__ import annotations

import re
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

from .color_map import EMPTY_COLOR, HtmlColor
from .units import EMPTY_UNIT, Unit

logger = logging.getLogger(__name__)


class BorderStyle(Enum):
    NONE = "none"
    HIDDEN = "hidden"
    DOTTED = "dotted"
    DASHED = "dashed"
    SOLID = "solid"
    DOUBLE = "double"
    GROOVE = "groove"
    RIDGE = "ridge"
    INSET = "inset"
    OUTSET = "outset"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["BorderStyle"]:
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_WIDTH_KEYWORDS = {
    "thin": Unit("px", 1.0),
    "medium": Unit("px", 3.0),
    "thick": Unit("px", 5.0),
}

# whitespace separated, keeping "rgb(1, 2, 3)" in one piece
_TOKEN_PATTERN = re.compile(r"[^\s(]+(?:\([^)]*\))?")


@dataclass(frozen=True)
class SideBorder:
    """Style, color and width of one border side."""

    style: Optional[BorderStyle] = None
    color: HtmlColor = EMPTY_COLOR
    width: Unit = EMPTY_UNIT

    @staticmethod
    def parse_width(value: Optional[str]) -> Unit:
        """Parse a border width: a length or ``thin``/``medium``/``thick``."""
        if not value:
            return EMPTY_UNIT
        keyword = _WIDTH_KEYWORDS.get(value.strip().lower())
        if keyword is not None:
            return keyword
        unit = Unit.parse(value)
        if unit.is_percentage:
            return EMPTY_UNIT
        return unit

    @classmethod
    def parse(cls, text: Optional[str]) -> "SideBorder":
        """Parse a ``border`` shorthand such as ``1px solid red`` (any order)."""
        if not text:
            return EMPTY_SIDE_BORDER

        style: Optional[BorderStyle] = None
        color = EMPTY_COLOR
        width = EMPTY_UNIT
        for token in _TOKEN_PATTERN.findall(text):
            token_style = BorderStyle.parse(token)
            if token_style is not None and style is None:
                style = token_style
                continue
            token_width = cls.parse_width(token)
            if token_width.is_valid and not width.is_valid:
                width = token_width
                continue
            token_color = HtmlColor.parse(token)
            if not token_color.is_empty and color.is_empty:
                color = token_color
                continue
            logger.debug(f"Ignoring border token {token!r} in {text!r}")
        return cls(style=style, color=color, width=width)

    @property
    def is_valid(self) -> bool:
        return self.style is not None or self.width.is_valid or not self.color.is_empty

    @property
    def is_visible(self) -> bool:
        """A border is drawn unless its style is explicitly none/hidden or width zero."""
        if not self.is_valid:
            return False
        if self.style in (BorderStyle.NONE, BorderStyle.HIDDEN):
            return False
        return not (self.width.is_valid and self.width.value <= 0)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "style": self.style.value if self.style else None,
            "color": self.color.to_hex() if not self.color.is_empty else None,
            "width": str(self.width) if self.width.is_valid else None,
        }

    def inherit(self, group: "SideBorder") -> "SideBorder":
        """Fill every unspecified member from ``group``."""
        return SideBorder(
            style=self.style if self.style is not None else group.style,
            color=self.color if not self.color.is_empty else group.color,
            width=self.width if self.width.is_valid else group.width,
        )


EMPTY_SIDE_BORDER = SideBorder()


@dataclass(frozen=True)
class HtmlBorder:
    """Borders of the four sides of a box."""

    top: SideBorder = EMPTY_SIDE_BORDER
    right: SideBorder = EMPTY_SIDE_BORDER
    bottom: SideBorder = EMPTY_SIDE_BORDER
    left: SideBorder = EMPTY_SIDE_BORDER

    @classmethod
    def uniform(cls, side: SideBorder) -> "HtmlBorder":
        return cls(top=side, right=side, bottom=side, left=side)

    @property
    def is_empty(self) -> bool:
        return not any(side.is_valid for side in (self.top, self.right, self.bottom, self.left))

    def with_side(self, name: str, side: SideBorder) -> "HtmlBorder":
        return replace(self, **{name: side})


EMPTY_BORDER = HtmlBorder()
