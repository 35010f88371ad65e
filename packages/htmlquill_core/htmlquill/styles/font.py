"""
Font values for HTML/CSS.

Parses the ``font`` shorthand and its ``font-style``, ``font-variant``,
``font-weight``, ``font-size`` and ``font-family`` sub-properties.
"""

from __future__ import annotations

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .units import EMPTY_UNIT, Unit

logger = logging.getLogger(__name__)

FONT_WEIGHT_NORMAL = 400
FONT_WEIGHT_BOLD = 700


class FontStyle(Enum):
    NORMAL = "normal"
    ITALIC = "italic"
    OBLIQUE = "oblique"


class FontVariant(Enum):
    NORMAL = "normal"
    SMALL_CAPS = "small-caps"


_SIZE_KEYWORDS = {
    "xx-small": Unit("pt", 7.0),
    "x-small": Unit("pt", 7.5),
    "small": Unit("pt", 10.0),
    "medium": Unit("pt", 12.0),
    "large": Unit("pt", 13.5),
    "x-large": Unit("pt", 18.0),
    "xx-large": Unit("pt", 24.0),
    "xxx-large": Unit("pt", 36.0),
    "smaller": Unit("em", 0.83),
    "larger": Unit("em", 1.2),
}

_WEIGHT_KEYWORDS = {
    "normal": FONT_WEIGHT_NORMAL,
    "bold": FONT_WEIGHT_BOLD,
    "bolder": FONT_WEIGHT_BOLD,
    "lighter": 300,
}

# whitespace separated, keeping quoted family names together
_SHORTHAND_TOKEN = re.compile(r"\"[^\"]*\"|'[^']*'|[^\s]+")


def parse_font_style(value: Optional[str]) -> Optional[FontStyle]:
    if not value:
        return None
    try:
        return FontStyle(value.strip().lower())
    except ValueError:
        return None


def parse_font_variant(value: Optional[str]) -> Optional[FontVariant]:
    if not value:
        return None
    try:
        return FontVariant(value.strip().lower())
    except ValueError:
        return None


def parse_font_weight(value: Optional[str]) -> Optional[int]:
    """Return a numeric weight (400 normal, 700 bold) or ``None``."""
    if not value:
        return None
    value = value.strip().lower()
    if value in _WEIGHT_KEYWORDS:
        return _WEIGHT_KEYWORDS[value]
    if value.isdigit():
        weight = int(value)
        if 1 <= weight <= 1000:
            return weight
    return None


def parse_font_size(value: Optional[str]) -> Unit:
    if not value:
        return EMPTY_UNIT
    keyword = _SIZE_KEYWORDS.get(value.strip().lower())
    if keyword is not None:
        return keyword
    size = Unit.parse(value)
    if size.is_valid and size.value <= 0:
        return EMPTY_UNIT
    return size


def parse_font_family(value: Optional[str]) -> Optional[str]:
    """Return the first family of a comma separated list, unquoted."""
    if not value:
        return None
    for candidate in value.split(","):
        family = candidate.strip().strip("\"'").strip()
        if family:
            return family
    return None


@dataclass(frozen=True)
class HtmlFont:
    """Resolved font properties; ``None``/invalid members are unspecified."""

    style: Optional[FontStyle] = None
    variant: Optional[FontVariant] = None
    weight: Optional[int] = None
    size: Unit = EMPTY_UNIT
    family: Optional[str] = None

    @classmethod
    def parse(cls, text: Optional[str]) -> "HtmlFont":
        """
        Parse the ``font`` shorthand: ``[style] [variant] [weight] size[/line-height] family``.

        The size is mandatory; without one the shorthand is ignored.
        """
        if not text:
            return EMPTY_FONT
        tokens: List[str] = _SHORTHAND_TOKEN.findall(text)
        style = variant = weight = None
        for index, token in enumerate(tokens):
            lowered = token.lower()
            if lowered == "normal":
                continue
            if style is None and parse_font_style(lowered) is not None:
                style = parse_font_style(lowered)
                continue
            if variant is None and parse_font_variant(lowered) is not None:
                variant = parse_font_variant(lowered)
                continue
            if weight is None and parse_font_weight(lowered) is not None:
                weight = parse_font_weight(lowered)
                continue

            size = parse_font_size(token.split("/", 1)[0])
            if not size.is_valid:
                logger.debug(f"Font shorthand without a valid size: {text!r}")
                return EMPTY_FONT
            family = parse_font_family(" ".join(tokens[index + 1:]))
            return cls(style=style, variant=variant, weight=weight, size=size, family=family)

        return EMPTY_FONT

    @property
    def is_bold(self) -> Optional[bool]:
        if self.weight is None:
            return None
        return self.weight >= 600

    @property
    def is_italic(self) -> Optional[bool]:
        if self.style is None:
            return None
        return self.style in (FontStyle.ITALIC, FontStyle.OBLIQUE)

    @property
    def is_empty(self) -> bool:
        return (
            self.style is None
            and self.variant is None
            and self.weight is None
            and not self.size.is_valid
            and self.family is None
        )


EMPTY_FONT = HtmlFont()
