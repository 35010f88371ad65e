"""
Run style for HTML content.

A :class:`RunStyle` is used both as the formatting delta a single tag
introduces and as the merged, frozen snapshot attached to an emitted run.
``None`` means "not defined here": the serializer omits it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from .attributes import HtmlAttributeCollection
from .border import SideBorder
from .color_map import HtmlColor
from .font import FontVariant
from .units import Unit

logger = logging.getLogger(__name__)

MONOSPACE_FAMILY = "Courier New"

VERTICAL_ALIGN_SUPERSCRIPT = "superscript"
VERTICAL_ALIGN_SUBSCRIPT = "subscript"
VERTICAL_ALIGN_BASELINE = "baseline"


@dataclass(frozen=True)
class RunStyle:
    """Character formatting properties."""

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strike: Optional[bool] = None
    small_caps: Optional[bool] = None
    color: Optional[HtmlColor] = None
    background: Optional[HtmlColor] = None
    font_family: Optional[str] = None
    font_size: Optional[Unit] = None
    vertical_align: Optional[str] = None
    border: Optional[SideBorder] = None
    hyperlink: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def defined(self) -> Dict[str, Any]:
        """Properties that are set, keyed by field name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def override(self, **changes: Any) -> "RunStyle":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """JSON friendly view of the defined properties."""
        result: Dict[str, Any] = {}
        for name, value in self.defined().items():
            if isinstance(value, HtmlColor):
                result[name] = value.to_hex() if value.alpha else "transparent"
            elif isinstance(value, Unit):
                result[name] = str(value)
            elif isinstance(value, SideBorder):
                result[name] = value.to_dict()
            else:
                result[name] = value
        return result


EMPTY_RUN_STYLE = RunStyle()

_TAG_DELTAS: Dict[str, RunStyle] = {
    "b": RunStyle(bold=True),
    "strong": RunStyle(bold=True),
    "th": RunStyle(bold=True),
    "i": RunStyle(italic=True),
    "em": RunStyle(italic=True),
    "cite": RunStyle(italic=True),
    "dfn": RunStyle(italic=True),
    "var": RunStyle(italic=True),
    "address": RunStyle(italic=True),
    "u": RunStyle(underline=True),
    "ins": RunStyle(underline=True),
    "s": RunStyle(strike=True),
    "strike": RunStyle(strike=True),
    "del": RunStyle(strike=True),
    "sup": RunStyle(vertical_align=VERTICAL_ALIGN_SUPERSCRIPT),
    "sub": RunStyle(vertical_align=VERTICAL_ALIGN_SUBSCRIPT),
    "code": RunStyle(font_family=MONOSPACE_FAMILY),
    "kbd": RunStyle(font_family=MONOSPACE_FAMILY),
    "samp": RunStyle(font_family=MONOSPACE_FAMILY),
    "tt": RunStyle(font_family=MONOSPACE_FAMILY),
    "pre": RunStyle(font_family=MONOSPACE_FAMILY),
    "mark": RunStyle(background=HtmlColor.from_rgb(255, 255, 0)),
    "small": RunStyle(font_size=Unit("em", 0.83)),
    "big": RunStyle(font_size=Unit("em", 1.2)),
}

# <font size="1..7">
_FONT_TAG_SIZES = {1: 8.0, 2: 10.0, 3: 12.0, 4: 14.0, 5: 18.0, 6: 24.0, 7: 36.0}


def _font_tag_size(value: Optional[str]) -> Optional[Unit]:
    if not value:
        return None
    value = value.strip()
    try:
        if value[:1] in "+-":
            size = 3 + int(value)
        else:
            size = int(value)
    except ValueError:
        return None
    size = max(1, min(7, size))
    return Unit("pt", _FONT_TAG_SIZES[size])


def _background_color(styles: HtmlAttributeCollection) -> Optional[HtmlColor]:
    color = styles.get_as_color("background-color")
    if not color.is_empty:
        return color
    shorthand = styles["background"]
    if not shorthand:
        return None
    color = HtmlColor.parse(shorthand)
    if color.is_empty:
        for token in shorthand.split():
            color = HtmlColor.parse(token)
            if not color.is_empty:
                break
    return None if color.is_empty else color


def _text_decoration(styles: HtmlAttributeCollection) -> Dict[str, bool]:
    value = styles["text-decoration-line"] or styles["text-decoration"]
    if not value:
        return {}
    tokens = value.lower().split()
    if "none" in tokens:
        return {"underline": False, "strike": False}
    changes: Dict[str, bool] = {}
    if "underline" in tokens:
        changes["underline"] = True
    if "line-through" in tokens:
        changes["strike"] = True
    return changes


def formatting_delta(
    tag: str,
    attributes: HtmlAttributeCollection,
    styles: HtmlAttributeCollection,
    inline: bool = True,
) -> RunStyle:
    """
    Compute the formatting a tag introduces.

    Args:
        tag: Lower-case tag name
        attributes: Parsed tag attributes
        styles: Parsed inline ``style`` of the tag
        inline: Box properties (background, border) only reach runs for
            inline tags; blocks keep them on the paragraph or cell.

    Returns:
        A partial :class:`RunStyle` (possibly empty)
    """
    delta = _TAG_DELTAS.get(tag, EMPTY_RUN_STYLE)
    changes: Dict[str, Any] = {}

    if tag == "font":
        color = attributes.get_as_color("color")
        if not color.is_empty:
            changes["color"] = color
        face = attributes["face"]
        if face:
            family = face.split(",")[0].strip().strip("\"'")
            if family:
                changes["font_family"] = family
        size = _font_tag_size(attributes["size"])
        if size is not None:
            changes["font_size"] = size
    elif tag == "a":
        href = attributes["href"]
        if href and href.strip():
            changes["hyperlink"] = href.strip()

    if styles:
        color = styles.get_as_color("color")
        if not color.is_empty:
            changes["color"] = color

        font = styles.get_as_font("font")
        if font.is_italic is not None:
            changes["italic"] = font.is_italic
        if font.is_bold is not None:
            changes["bold"] = font.is_bold
        if font.variant is not None:
            changes["small_caps"] = font.variant is FontVariant.SMALL_CAPS
        if font.size.is_valid:
            changes["font_size"] = font.size
        if font.family:
            changes["font_family"] = font.family

        changes.update(_text_decoration(styles))

        vertical_align = (styles["vertical-align"] or "").strip().lower()
        if vertical_align == "super":
            changes["vertical_align"] = VERTICAL_ALIGN_SUPERSCRIPT
        elif vertical_align == "sub":
            changes["vertical_align"] = VERTICAL_ALIGN_SUBSCRIPT
        elif vertical_align == "baseline":
            changes["vertical_align"] = VERTICAL_ALIGN_BASELINE

        if inline:
            background = _background_color(styles)
            if background is not None:
                changes["background"] = background
            border = styles.get_as_side_border("border")
            if border.is_valid:
                changes["border"] = border

    if changes:
        delta = replace(delta, **changes)
    return delta


__all__ = [
    "RunStyle",
    "EMPTY_RUN_STYLE",
    "formatting_delta",
    "MONOSPACE_FAMILY",
    "VERTICAL_ALIGN_SUPERSCRIPT",
    "VERTICAL_ALIGN_SUBSCRIPT",
    "VERTICAL_ALIGN_BASELINE",
]
