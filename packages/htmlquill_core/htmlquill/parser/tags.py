"""
Static tag grammar for the HTML parser.

Every known tag maps to a :class:`TagKind`; tags missing from :data:`TAGS`
are treated as opaque so that unknown and XML-like markup never leaks text.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping


class TagKind(Enum):
    INLINE = "inline"
    PARAGRAPH = "paragraph"
    BLOCK = "block"
    HEADING = "heading"
    PREFORMATTED = "preformatted"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    TABLE_SECTION = "table_section"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    CAPTION = "caption"
    # void tags producing content
    VOID = "void"
    # void tags producing nothing
    IGNORED = "ignored"
    # content skipped up to the matching close tag
    OPAQUE = "opaque"

    @property
    def is_block(self) -> bool:
        return self not in (TagKind.INLINE, TagKind.VOID, TagKind.IGNORED, TagKind.OPAQUE)

    @property
    def is_table_structure(self) -> bool:
        return self in (
            TagKind.TABLE,
            TagKind.TABLE_SECTION,
            TagKind.TABLE_ROW,
            TagKind.TABLE_CELL,
            TagKind.CAPTION,
        )


_INLINE_TAGS = (
    "a", "abbr", "acronym", "b", "bdi", "bdo", "big", "cite", "code", "data",
    "del", "dfn", "em", "font", "i", "ins", "kbd", "label", "mark", "nobr",
    "q", "s", "samp", "small", "span", "strike", "strong", "sub", "sup",
    "time", "tt", "u", "var", "colgroup",
)

_BLOCK_TAGS = (
    "html", "body", "div", "section", "article", "header", "footer", "nav",
    "aside", "main", "figure", "figcaption", "blockquote", "address", "center",
    "form", "fieldset", "legend", "details", "summary", "hgroup", "dialog",
)

_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

_LIST_TAGS = ("ul", "ol", "menu", "dir", "dl")

# list containers that increase the list level
NUMBERED_LIST_TAGS = ("ul", "ol", "menu", "dir")

_LIST_ITEM_TAGS = ("li", "dt", "dd")

_VOID_TAGS = ("br", "img", "hr")

_IGNORED_TAGS = (
    "input", "meta", "link", "base", "col", "wbr", "area", "source", "track",
    "embed", "param",
)

_OPAQUE_TAGS = (
    "script", "style", "head", "title", "button", "select", "textarea",
    "progress", "meter", "object", "iframe", "svg", "math", "noscript",
    "template", "canvas", "video", "audio", "map", "xml",
)


def _build_table() -> Mapping[str, TagKind]:
    table: Dict[str, TagKind] = {}
    for names, kind in (
        (_INLINE_TAGS, TagKind.INLINE),
        (_BLOCK_TAGS, TagKind.BLOCK),
        (("p",), TagKind.PARAGRAPH),
        (_HEADING_TAGS, TagKind.HEADING),
        (("pre", "listing"), TagKind.PREFORMATTED),
        (_LIST_TAGS, TagKind.LIST),
        (_LIST_ITEM_TAGS, TagKind.LIST_ITEM),
        (("table",), TagKind.TABLE),
        (("thead", "tbody", "tfoot"), TagKind.TABLE_SECTION),
        (("tr",), TagKind.TABLE_ROW),
        (("td", "th"), TagKind.TABLE_CELL),
        (("caption",), TagKind.CAPTION),
        (_VOID_TAGS, TagKind.VOID),
        (_IGNORED_TAGS, TagKind.IGNORED),
        (_OPAQUE_TAGS, TagKind.OPAQUE),
    ):
        for name in names:
            table[name] = kind
    return MappingProxyType(table)


TAGS: Mapping[str, TagKind] = _build_table()


def tag_kind(name: str) -> TagKind:
    """Kind of a (lower-case) tag name; unknown names are opaque."""
    return TAGS.get(name, TagKind.OPAQUE)


def is_opaque(name: str) -> bool:
    return tag_kind(name) is TagKind.OPAQUE


def is_void(name: str) -> bool:
    return tag_kind(name) in (TagKind.VOID, TagKind.IGNORED)
