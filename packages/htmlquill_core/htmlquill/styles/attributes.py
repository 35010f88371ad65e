"""
Attribute collection for an HTML tag.

Splits a tag's raw attribute text (or an inline ``style`` declaration list)
into a name/value table and exposes typed getters. Getters never raise: an
absent or malformed value gives an empty/invalid result.
"""

from __future__ import annotations

import re
import logging
from html import unescape
from typing import Dict, Iterator, Optional

from .border import EMPTY_SIDE_BORDER, BorderStyle, HtmlBorder, SideBorder
from .color_map import HtmlColor
from .font import (
    HtmlFont,
    parse_font_family,
    parse_font_size,
    parse_font_style,
    parse_font_variant,
    parse_font_weight,
)
from .margin import SIDES, Margin
from .units import Unit

logger = logging.getLogger(__name__)

# Attribute names: word characters, ':' and '-'
ATTRIBUTE_NAME = r"[\w:-]+"

# <table border="1" contenteditable style="text-align: center" cellpadding=0 cellspacing='0'>
# DOTALL keeps values spanning lines (base64 images) in one piece.
_ATTRIBUTE_PATTERN = re.compile(
    r"""
    (?P<quoted_name>""" + ATTRIBUTE_NAME + r""")\s*=\s*(?P<sep>["'])\s*(?P<quoted_value>\#?.*?)(?:(?P=sep)|>)
    |
    (?P<bare_name>""" + ATTRIBUTE_NAME + r""")\s*=\s*(?P<bare_value>[^\s"'=<>`]+)
    |
    (?P<flag_name>""" + ATTRIBUTE_NAME + r""")
    """,
    re.VERBOSE | re.DOTALL,
)

_STYLE_PATTERN = re.compile(r"(?P<name>[^:;]+?):\s*(?P<value>[^;]+);*\s*")
_IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)


class HtmlAttributeCollection:
    """Represents the attributes (or inline style properties) of one tag."""

    def __init__(self, attributes: Optional[Dict[str, str]] = None):
        self._attributes: Dict[str, str] = dict(attributes or {})
        # undecoded values, as authored
        self._raw: Dict[str, str] = dict(self._attributes)

    @classmethod
    def parse(cls, html_tag: Optional[str]) -> "HtmlAttributeCollection":
        """
        Parse the attribute part of a tag.

        Args:
            html_tag: Raw text between the tag name and the closing ``>``

        Returns:
            Collection keyed by attribute name as authored. Duplicates: last wins.
        """
        collection = cls()
        if not html_tag:
            return collection

        for match in _ATTRIBUTE_PATTERN.finditer(html_tag):
            if match.group("quoted_name"):
                name, value = match.group("quoted_name"), match.group("quoted_value")
            elif match.group("bare_name"):
                name, value = match.group("bare_name"), match.group("bare_value")
            else:
                name, value = match.group("flag_name"), ""
            collection._raw[name] = value
            collection._attributes[name] = unescape(value)
        return collection

    @classmethod
    def parse_style(cls, html_style: Optional[str]) -> "HtmlAttributeCollection":
        """
        Parse an inline ``style`` attribute into CSS properties.

        Entities are decoded before splitting so that encoded separators
        (``text-decoration&#58;underline&#59;color:red``) split like literal ones.
        """
        collection = cls()
        if not html_style:
            return collection

        for match in _STYLE_PATTERN.finditer(unescape(html_style)):
            name = match.group("name").strip().lower()
            if not name:
                continue
            value = _IMPORTANT.sub("", match.group("value")).strip()
            collection._attributes[name] = value
        return collection

    # ------------------------------------------------------------------
    def __getitem__(self, name: str) -> Optional[str]:
        return self._attributes.get(name)

    def get_raw(self, name: str) -> Optional[str]:
        """Value before entity decoding (what ``parse_style`` expects)."""
        return self._raw.get(name)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._attributes.get(name, default)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __bool__(self) -> bool:
        return bool(self._attributes)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._attributes)

    def __repr__(self) -> str:
        return f"HtmlAttributeCollection({self._attributes!r})"

    # ------------------------------------------------------------------
    def get_as_color(self, name: str) -> HtmlColor:
        """Gets a named, hexadecimal or ``rgb()`` color."""
        return HtmlColor.parse(self[name])

    def get_as_unit(self, name: str) -> Unit:
        """Gets a length such as ``120px``, ``10pt``, ``5em`` or ``20%``."""
        return Unit.parse(self[name])

    def get_as_margin(self, name: str) -> Margin:
        """
        Gets the four sides of ``name`` (``margin``, ``padding``).

        A valid side-specific property (``margin-left``) overrides the shorthand.
        """
        margin = Margin.parse(self[name])
        for side in SIDES:
            unit = self.get_as_unit(f"{name}-{side}")
            if unit.is_valid:
                margin = margin.with_side(side, unit)
        return margin

    def get_as_border(self) -> HtmlBorder:
        """
        Gets the four border sides.

        Each side starts from the grouped ``border`` definition and overrides
        style, color and width independently with ``border-<side>*`` properties.
        """
        group = self.get_as_side_border("border")
        border = HtmlBorder.uniform(group)
        for side in SIDES:
            specific = self.get_as_side_border(f"border-{side}")
            if specific.is_valid:
                border = border.with_side(side, specific.inherit(group))
        return border

    def get_as_side_border(self, name: str) -> SideBorder:
        """
        Gets one border side from ``name`` and its ``-style``/``-color``/``-width`` properties.
        """
        border = SideBorder.parse(self[name]) if self[name] is not None else EMPTY_SIDE_BORDER

        width = SideBorder.parse_width(self[f"{name}-width"])
        if not width.is_valid:
            width = border.width

        color = self.get_as_color(f"{name}-color")
        if color.is_empty:
            color = border.color

        style = BorderStyle.parse(self[f"{name}-style"])
        if style is None:
            style = border.style

        return SideBorder(style=style, color=color, width=width)

    def get_as_font(self, name: str) -> HtmlFont:
        """Gets the ``font`` shorthand combined with its specific sub-properties."""
        font = HtmlFont.parse(self[name])

        font_style = parse_font_style(self[f"{name}-style"]) or font.style
        variant = parse_font_variant(self[f"{name}-variant"]) or font.variant
        weight = parse_font_weight(self[f"{name}-weight"])
        if weight is None:
            weight = font.weight
        family = parse_font_family(self[f"{name}-family"]) or font.family

        size = parse_font_size(self[f"{name}-size"])
        if not size.is_valid:
            size = font.size

        return HtmlFont(style=font_style, variant=variant, weight=weight, size=size, family=family)
