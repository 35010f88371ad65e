"""
HTML Parser - builds the document tree from (possibly malformed) HTML.

Handles:
- Paragraphs, headings, lists, blockquotes and preformatted text
- Nested inline formatting (tags and inline ``style`` attributes)
- Tables with rows, cells and captions
- Line breaks, horizontal rules and images
- Implicit closing of unclosed tags and recovery from mis-nesting
"""

from __future__ import annotations

import re
import logging
from dataclasses import dataclass, field
from html import unescape
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..models.body import Body
from ..models.image import Image
from ..models.paragraph import Paragraph
from ..models.run import Run
from ..models.table import Table, TableCell, TableRow
from ..styles.attributes import HtmlAttributeCollection
from ..styles.border import BorderStyle, HtmlBorder, SideBorder
from ..styles.color_map import HtmlColor
from ..styles.paragraph_style import EMPTY_PARAGRAPH_STYLE, ParagraphStyle, block_style, parse_alignment
from ..styles.run_style import RunStyle, formatting_delta
from ..styles.style_cascade_engine import StyleCascadeEngine
from ..styles.units import EMPTY_UNIT, Unit
from .tags import NUMBERED_LIST_TAGS, TagKind, tag_kind
from .tokenizer import Comment, EndTag, HtmlTokenizer, StartTag, TextToken

logger = logging.getLogger(__name__)

# ASCII whitespace as HTML defines it
_WHITESPACE = re.compile(r"[ \t\n\r\f]+")

_BOUNDARY_KINDS = (TagKind.TABLE_CELL, TagKind.CAPTION, TagKind.TABLE)

_HR_BORDER = SideBorder(style=BorderStyle.SOLID, color=HtmlColor.from_rgb(128, 128, 128), width=Unit("px", 1.0))
_LEGACY_BORDER_COLOR = HtmlColor.from_rgb(0, 0, 0)

Container = Union[Body, TableCell, Table]


@dataclass
class ImageSlot:
    """An image run waiting for its bytes, with the nodes that own it."""

    run: Run
    paragraph: Paragraph
    container: Container

    @property
    def image(self) -> Image:
        return self.run.image


@dataclass
class ParseResult:
    body: Body
    images: List[ImageSlot] = field(default_factory=list)


@dataclass
class _OpenElement:
    serial: int
    tag: str
    kind: TagKind
    paragraph_style: ParagraphStyle = EMPTY_PARAGRAPH_STYLE
    node: Optional[object] = None


class HtmlContentBuilder:
    """Tag-stack tree builder fed by :class:`HtmlTokenizer` tokens."""

    def __init__(self, style_engine: Optional[StyleCascadeEngine] = None):
        self.body = Body()
        self.images: List[ImageSlot] = []
        self._engine = style_engine or StyleCascadeEngine()
        self._open: List[_OpenElement] = []
        self._formatting: List[Tuple[int, RunStyle]] = []
        self._serial = 0
        self._paragraph: Optional[Paragraph] = None
        self._paragraph_container: Optional[Container] = None
        # newline right after <pre> is not content
        self._skip_newline = False

    # ------------------------------------------------------------------
    # Token handlers
    # ------------------------------------------------------------------
    def handle_starttag(self, tag: str, attributes_text: str = "", self_closing: bool = False) -> None:
        tag = tag.lower()
        kind = tag_kind(tag)
        self._skip_newline = False
        if kind in (TagKind.IGNORED, TagKind.OPAQUE):
            return

        attributes = HtmlAttributeCollection.parse(attributes_text)
        styles = HtmlAttributeCollection.parse_style(attributes.get_raw("style"))

        if kind is TagKind.VOID:
            if tag == "br":
                self._line_break()
            elif tag == "img":
                self._image(attributes, styles)
            elif tag == "hr":
                self._horizontal_rule(attributes, styles)
            return

        if kind.is_block:
            self._close_implied(tag, kind)
            self._flush_paragraph()

        element = _OpenElement(serial=self._next_serial(), tag=tag, kind=kind)
        parent_style = self._open[-1].paragraph_style if self._open else EMPTY_PARAGRAPH_STYLE

        if kind.is_table_structure:
            if not self._open_table_structure(element, attributes, styles):
                return
            if kind is TagKind.TABLE:
                element.paragraph_style = ParagraphStyle().inherit(parent_style)
            else:
                element.paragraph_style = ParagraphStyle(
                    alignment=parse_alignment(attributes, styles),
                ).inherit(parent_style)
        elif kind.is_block:
            list_level = None
            if tag == "li":
                list_level = max(0, self._list_depth() - 1)
            element.paragraph_style = block_style(tag, attributes, styles, list_level).inherit(parent_style)
            if kind is TagKind.PREFORMATTED:
                self._skip_newline = True
        else:
            element.paragraph_style = parent_style

        self._open.append(element)
        delta = formatting_delta(tag, attributes, styles, inline=kind is TagKind.INLINE)
        if not delta.is_empty:
            self._formatting.append((element.serial, delta))

        if self_closing:
            self._close_to(len(self._open) - 1)

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        kind = tag_kind(tag)
        if tag == "br":
            self._line_break()
            return
        if kind in (TagKind.VOID, TagKind.IGNORED, TagKind.OPAQUE):
            return

        index = self._find_open(tag, self._end_tag_boundaries(kind))
        if index is None:
            logger.debug(f"Ignoring unmatched </{tag}>")
            return
        if kind is TagKind.INLINE:
            # inline elements opened inside stay open with their formatting
            self._close_element(index)
            return
        self._close_to(index)

    def handle_data(self, data: str) -> None:
        if not data:
            return
        text = unescape(data)
        if self._in_preformatted():
            self._preformatted_text(text)
            return
        self._skip_newline = False

        collapsed = _WHITESPACE.sub(" ", text)
        core = collapsed.strip(" ")
        if not core:
            # whitespace only: never starts a paragraph
            if self._paragraph is not None:
                self._append_space(self._current_style())
            return

        style = self._current_style()
        paragraph = self._ensure_paragraph()
        if collapsed.startswith(" "):
            self._append_space(style)
        paragraph.add_run(Run(core, style))
        if collapsed.endswith(" "):
            paragraph.add_run(Run(" ", style))

    def handle_comment(self, data: str) -> None:
        logger.debug(f"Dropping comment/declaration ({len(data)} chars)")

    def close(self) -> ParseResult:
        """Close every open element (LIFO) and return the finished tree."""
        self._close_to(0)
        self._flush_paragraph()
        return ParseResult(self.body, self.images)

    # ------------------------------------------------------------------
    # Stack handling
    # ------------------------------------------------------------------
    def _next_serial(self) -> int:
        self._serial += 1
        return self._serial

    def _find_open(self, tags: Union[str, Tuple[str, ...]], boundaries: Tuple[TagKind, ...]) -> Optional[int]:
        """Index of the nearest open element named in ``tags`` above any boundary."""
        if isinstance(tags, str):
            tags = (tags,)
        for index in range(len(self._open) - 1, -1, -1):
            element = self._open[index]
            if element.tag in tags:
                return index
            if element.kind in boundaries:
                return None
        return None

    def _end_tag_boundaries(self, kind: TagKind) -> Tuple[TagKind, ...]:
        if kind is TagKind.TABLE:
            return ()
        if kind.is_table_structure:
            return (TagKind.TABLE,)
        return _BOUNDARY_KINDS

    def _close_implied(self, tag: str, kind: TagKind) -> None:
        """Close the open elements a new block start ends implicitly."""
        if kind is TagKind.CAPTION:
            candidates: Tuple[str, ...] = ()
        elif kind is TagKind.TABLE_ROW:
            candidates = ("tr",)
        elif kind is TagKind.TABLE_CELL:
            candidates = ("td", "th")
        elif kind is TagKind.TABLE_SECTION:
            candidates = ("thead", "tbody", "tfoot")
        else:
            candidates = ()

        if candidates:
            boundaries: Tuple[TagKind, ...] = (TagKind.TABLE,)
            if kind is TagKind.TABLE_CELL:
                boundaries = (TagKind.TABLE_ROW, TagKind.TABLE)
            index = self._find_open(candidates, boundaries)
            if index is not None:
                logger.debug(f"<{tag}> implicitly closes <{self._open[index].tag}>")
                self._close_to(index)
            return

        index = self._find_open("p", _BOUNDARY_KINDS)
        if index is not None:
            self._close_to(index)

        if kind is TagKind.HEADING:
            index = self._find_open(("h1", "h2", "h3", "h4", "h5", "h6"), _BOUNDARY_KINDS)
        elif tag == "li":
            index = self._find_open("li", _BOUNDARY_KINDS + (TagKind.LIST,))
        elif tag in ("dt", "dd"):
            index = self._find_open(("dt", "dd"), _BOUNDARY_KINDS + (TagKind.LIST,))
        else:
            index = None
        if index is not None:
            logger.debug(f"<{tag}> implicitly closes <{self._open[index].tag}>")
            self._close_to(index)

    def _close_to(self, index: int) -> None:
        """Close the element at ``index`` and everything opened after it."""
        while len(self._open) > index:
            element = self._open.pop()
            if element.kind.is_block:
                self._flush_paragraph()
            self._formatting = [entry for entry in self._formatting if entry[0] != element.serial]

    def _close_element(self, index: int) -> None:
        """Close only the element at ``index``, dropping exactly the formatting it pushed."""
        element = self._open.pop(index)
        self._formatting = [entry for entry in self._formatting if entry[0] != element.serial]

    def _list_depth(self) -> int:
        return sum(1 for element in self._open if element.tag in NUMBERED_LIST_TAGS)

    def _in_preformatted(self) -> bool:
        for element in reversed(self._open):
            if element.kind is TagKind.PREFORMATTED:
                return True
            if element.kind in _BOUNDARY_KINDS:
                return False
        return False

    def _current_table(self) -> Optional[_OpenElement]:
        for element in reversed(self._open):
            if element.kind is TagKind.TABLE:
                return element
        return None

    def _container(self, for_table: bool = False) -> Container:
        for element in reversed(self._open):
            if element.kind is TagKind.TABLE_CELL:
                return element.node
            if element.kind is TagKind.CAPTION and not for_table:
                return element.node
        return self.body

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    def _open_table_structure(
        self,
        element: _OpenElement,
        attributes: HtmlAttributeCollection,
        styles: HtmlAttributeCollection,
    ) -> bool:
        if element.kind is TagKind.TABLE:
            table = _build_table(attributes, styles)
            _append_block(self._container(for_table=True), table)
            element.node = table
            return True

        table_element = self._current_table()
        if table_element is None:
            logger.debug(f"<{element.tag}> outside a table ignored")
            return False

        if element.kind is TagKind.TABLE_SECTION:
            return True

        if element.kind is TagKind.CAPTION:
            element.node = table_element.node
            return True

        if element.kind is TagKind.TABLE_ROW:
            in_head = self._find_open("thead", (TagKind.TABLE,)) is not None
            element.node = table_element.node.add_row(TableRow(is_header=in_head))
            return True

        # cell: needs a row of the current table
        row_index = self._find_open("tr", (TagKind.TABLE,))
        if row_index is None:
            logger.debug(f"<{element.tag}> without <tr>, opening a row")
            row = _OpenElement(
                serial=self._next_serial(),
                tag="tr",
                kind=TagKind.TABLE_ROW,
                paragraph_style=self._open[-1].paragraph_style,
                node=table_element.node.add_row(TableRow()),
            )
            self._open.append(row)
        else:
            row = self._open[row_index]
        element.node = row.node.add_cell(_build_cell(element.tag, attributes, styles))
        return True

    # ------------------------------------------------------------------
    # Paragraphs and runs
    # ------------------------------------------------------------------
    def _current_style(self) -> RunStyle:
        return self._engine.cascade(delta for _, delta in self._formatting)

    def _current_paragraph_style(self) -> ParagraphStyle:
        return self._open[-1].paragraph_style if self._open else EMPTY_PARAGRAPH_STYLE

    def _ensure_paragraph(self) -> Paragraph:
        if self._paragraph is None:
            tag = None
            for element in reversed(self._open):
                if element.kind.is_block:
                    tag = element.tag
                    break
            self._paragraph = Paragraph(
                style=self._current_paragraph_style(),
                preserve_space=self._in_preformatted(),
                source_tag=tag,
            )
            self._paragraph_container = self._container()
        return self._paragraph

    def _flush_paragraph(self) -> None:
        paragraph = self._paragraph
        container = self._paragraph_container
        self._paragraph = None
        self._paragraph_container = None
        if paragraph is None:
            return
        if not paragraph.preserve_space:
            paragraph.strip_trailing_whitespace()
        if paragraph.is_empty() or all(run.is_whitespace for run in paragraph.runs):
            return
        _append_block(container, paragraph)

    def _append_space(self, style: RunStyle) -> None:
        paragraph = self._paragraph
        last = paragraph.last_run if paragraph is not None else None
        if last is None or last.is_break or (not last.is_image and last.text.endswith(" ")):
            return
        paragraph.add_run(Run(" ", style))

    def _preformatted_text(self, text: str) -> None:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if self._skip_newline and text.startswith("\n"):
            text = text[1:]
        self._skip_newline = False
        if not text:
            return
        style = self._current_style()
        paragraph = self._ensure_paragraph()
        for index, line in enumerate(text.split("\n")):
            if index:
                paragraph.add_run(Run.line_break(style, source_tag="pre"))
            if line:
                paragraph.add_run(Run(line, style))

    def _line_break(self) -> None:
        self._ensure_paragraph().add_run(Run.line_break(self._current_style()))

    def _horizontal_rule(self, attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> None:
        self._close_implied("hr", TagKind.BLOCK)
        self._flush_paragraph()
        border = styles.get_as_border()
        if border.is_empty:
            border = HtmlBorder(bottom=_HR_BORDER)
        style = ParagraphStyle(
            alignment=self._current_paragraph_style().alignment,
            margin=styles.get_as_margin("margin"),
            border=border,
        )
        _append_block(self._container(), Paragraph(style=style, source_tag="hr"))

    def _image(self, attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> None:
        src = attributes["src"]
        if not src or not src.strip():
            logger.debug("Dropping <img> without src")
            return

        image = Image(
            src=src.strip(),
            alt=attributes["alt"],
            title=attributes["title"],
            requested_width=_image_dimension("width", attributes, styles),
            requested_height=_image_dimension("height", attributes, styles),
        )

        style = self._current_style()
        border = styles.get_as_side_border("border")
        if not border.is_valid:
            legacy = Unit.parse(attributes["border"])
            if legacy.is_valid and legacy.value > 0 and not legacy.is_percentage:
                border = SideBorder(style=BorderStyle.SOLID, color=_LEGACY_BORDER_COLOR, width=legacy)
        if border.is_valid:
            style = style.override(border=border)

        paragraph = self._ensure_paragraph()
        run = paragraph.add_run(Run(image=image, style=style, source_tag="img"))
        self.images.append(ImageSlot(run=run, paragraph=paragraph, container=self._paragraph_container))


# ----------------------------------------------------------------------
# Node factories
# ----------------------------------------------------------------------
def _append_block(container: Container, block) -> None:
    if isinstance(container, Table):
        if isinstance(block, Paragraph):
            container.add_caption(block)
        return
    container.add_model(block)


def _background(attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> Optional[HtmlColor]:
    color = styles.get_as_color("background-color")
    if color.is_empty:
        color = attributes.get_as_color("bgcolor")
    return None if color.is_empty else color


def _length(name: str, attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> Unit:
    unit = styles.get_as_unit(name)
    if not unit.is_valid:
        unit = attributes.get_as_unit(name)
    return unit


def _image_dimension(name: str, attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> Unit:
    unit = _length(name, attributes, styles)
    if unit.is_percentage or (unit.is_valid and unit.value <= 0):
        return EMPTY_UNIT
    return unit


def _span(value: Optional[str]) -> int:
    try:
        return max(1, int((value or "1").strip()))
    except ValueError:
        return 1


def _build_table(attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> Table:
    border = styles.get_as_border()
    if border.is_empty:
        legacy = Unit.parse(attributes["border"])
        if legacy.is_valid and legacy.value > 0:
            border = HtmlBorder.uniform(
                SideBorder(style=BorderStyle.SOLID, color=_LEGACY_BORDER_COLOR, width=legacy)
            )
    alignment = attributes["align"]
    return Table(
        border=border,
        width=_length("width", attributes, styles),
        alignment=alignment.strip().lower() if alignment else None,
        background=_background(attributes, styles),
    )


def _build_cell(tag: str, attributes: HtmlAttributeCollection, styles: HtmlAttributeCollection) -> TableCell:
    vertical = (styles["vertical-align"] or attributes["valign"] or "").strip().lower()
    if vertical == "center":
        vertical = "middle"
    return TableCell(
        colspan=_span(attributes["colspan"]),
        rowspan=_span(attributes["rowspan"]),
        is_header=tag == "th",
        width=_length("width", attributes, styles),
        background=_background(attributes, styles),
        vertical_alignment=vertical if vertical in ("top", "middle", "bottom") else None,
        source_tag=tag,
    )


class HtmlParser:
    """
    Parser converting HTML markup into the document tree.
    """

    def __init__(self, html_content: str):
        """
        Args:
            html_content: HTML markup to parse
        """
        self.html_content = html_content

    def parse(self) -> ParseResult:
        """
        Parse the markup. Never raises on malformed input.

        Returns:
            :class:`ParseResult` with the body and the pending image slots
        """
        builder = HtmlContentBuilder()
        for token in HtmlTokenizer(self.html_content):
            if isinstance(token, TextToken):
                builder.handle_data(token.text)
            elif isinstance(token, StartTag):
                builder.handle_starttag(token.name, token.attributes_text, token.self_closing)
            elif isinstance(token, EndTag):
                builder.handle_endtag(token.name)
            elif isinstance(token, Comment):
                builder.handle_comment(token.text)
        result = builder.close()
        logger.debug(f"Parsed {len(result.body)} blocks, {len(result.images)} images")
        return result

    @staticmethod
    def parse_file(html_path: Union[str, Path], encoding: str = "utf-8") -> ParseResult:
        """
        Parse an HTML file.

        Args:
            html_path: Path to the HTML file
            encoding: Text encoding of the file
        """
        html_path = Path(html_path)
        html_content = html_path.read_text(encoding=encoding, errors="replace")
        return HtmlParser(html_content).parse()
