"""
Styles module for HTML attribute and formatting resolution.

This module contains the value parsers (colors, units, margins, borders,
fonts), the attribute/style collection used by the parser, and the
cascade engine producing run style snapshots.
"""

from .color_map import HtmlColor, EMPTY_COLOR, NAMED_COLORS, resolve_color
from .units import Unit, EMPTY_UNIT
from .margin import Margin, EMPTY_MARGIN
from .border import BorderStyle, SideBorder, HtmlBorder, EMPTY_SIDE_BORDER, EMPTY_BORDER
from .font import HtmlFont, FontStyle, FontVariant, EMPTY_FONT
from .attributes import HtmlAttributeCollection
from .run_style import RunStyle, EMPTY_RUN_STYLE, formatting_delta
from .paragraph_style import ParagraphStyle, EMPTY_PARAGRAPH_STYLE, block_style
from .style_cascade_engine import StyleCascadeEngine

__all__ = [
    "HtmlColor",
    "EMPTY_COLOR",
    "NAMED_COLORS",
    "resolve_color",
    "Unit",
    "EMPTY_UNIT",
    "Margin",
    "EMPTY_MARGIN",
    "BorderStyle",
    "SideBorder",
    "HtmlBorder",
    "EMPTY_SIDE_BORDER",
    "EMPTY_BORDER",
    "HtmlFont",
    "FontStyle",
    "FontVariant",
    "EMPTY_FONT",
    "HtmlAttributeCollection",
    "RunStyle",
    "EMPTY_RUN_STYLE",
    "formatting_delta",
    "ParagraphStyle",
    "EMPTY_PARAGRAPH_STYLE",
    "block_style",
    "StyleCascadeEngine",
]
