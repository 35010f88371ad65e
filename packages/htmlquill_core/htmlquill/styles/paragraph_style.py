"""
Paragraph style for HTML block elements.

Collects the block-level properties a paragraph takes from the block element
that contains it: style id, alignment, margins, borders and shading.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .attributes import HtmlAttributeCollection
from .border import EMPTY_BORDER, HtmlBorder
from .color_map import HtmlColor
from .margin import EMPTY_MARGIN, SIDES, Margin

ALIGNMENTS = ("left", "center", "right", "justify")

_STYLE_IDS = {
    "h1": "Heading1",
    "h2": "Heading2",
    "h3": "Heading3",
    "h4": "Heading4",
    "h5": "Heading5",
    "h6": "Heading6",
    "blockquote": "Quote",
    "pre": "Preformatted",
    "li": "ListParagraph",
    "dd": "ListParagraph",
    "figcaption": "Caption",
    "caption": "Caption",
}


@dataclass(frozen=True)
class ParagraphStyle:
    """Block properties of a paragraph."""

    style_id: Optional[str] = None
    alignment: Optional[str] = None
    margin: Margin = EMPTY_MARGIN
    border: HtmlBorder = EMPTY_BORDER
    background: Optional[HtmlColor] = None
    list_level: Optional[int] = None

    def inherit(self, outer: "ParagraphStyle") -> "ParagraphStyle":
        """Alignment and list level are inherited from enclosing blocks."""
        changes: Dict[str, Any] = {}
        if self.alignment is None and outer.alignment is not None:
            changes["alignment"] = outer.alignment
        if self.list_level is None and outer.list_level is not None:
            changes["list_level"] = outer.list_level
        return replace(self, **changes) if changes else self

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.style_id:
            result["style_id"] = self.style_id
        if self.alignment:
            result["alignment"] = self.alignment
        if self.margin.is_valid:
            result["margin"] = {
                side: str(getattr(self.margin, side))
                for side in SIDES
                if getattr(self.margin, side).is_valid
            }
        if not self.border.is_empty:
            result["border"] = {
                side: getattr(self.border, side).to_dict()
                for side in SIDES
                if getattr(self.border, side).is_valid
            }
        if self.background is not None:
            result["background"] = self.background.to_hex()
        if self.list_level is not None:
            result["list_level"] = self.list_level
        return result


EMPTY_PARAGRAPH_STYLE = ParagraphStyle()


def parse_alignment(attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> Optional[str]:
    value = styles["text-align"] or attributes["align"]
    if not value:
        return None
    value = value.strip().lower()
    if value in ("start", "left"):
        return "left"
    if value in ("end", "right"):
        return "right"
    if value in ALIGNMENTS:
        return value
    return None


def block_style(
    tag: str,
    attributes: HtmlAttributeCollection,
    styles: HtmlAttributeCollection,
    list_level: Optional[int] = None,
) -> ParagraphStyle:
    """Compute the paragraph properties declared by one block element."""
    background = styles.get_as_color("background-color")
    alignment = parse_alignment(attributes, styles)
    if alignment is None and tag == "center":
        alignment = "center"
    return ParagraphStyle(
        style_id=_STYLE_IDS.get(tag),
        alignment=alignment,
        margin=styles.get_as_margin("margin"),
        border=styles.get_as_border(),
        background=None if background.is_empty else background,
        list_level=list_level,
    )
