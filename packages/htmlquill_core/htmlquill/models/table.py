"""
Table model for the HTML document tree.

``Table`` holds rows, ``TableRow`` holds cells and ``TableCell`` is a block
container like :class:`Body`, so cells may hold paragraphs and nested tables.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..styles.border import EMPTY_BORDER, HtmlBorder
from ..styles.color_map import HtmlColor
from ..styles.units import EMPTY_UNIT, Unit
from .base import Models
from .body import Body
from .paragraph import Paragraph

logger = logging.getLogger(__name__)


class Table(Models):
    """Represents a table with rows and an optional caption."""

    def __init__(
        self,
        border: HtmlBorder = EMPTY_BORDER,
        width: Unit = EMPTY_UNIT,
        alignment: Optional[str] = None,
        background: Optional[HtmlColor] = None,
        source_tag: Optional[str] = "table",
    ):
        super().__init__(source_tag=source_tag)
        self.border: HtmlBorder = border
        self.width: Unit = width
        self.alignment: Optional[str] = alignment
        self.background: Optional[HtmlColor] = background
        self.caption: List[Paragraph] = []

    @property
    def rows(self) -> List["TableRow"]:
        return [child for child in self.children if isinstance(child, TableRow)]

    def add_row(self, row: "TableRow") -> "TableRow":
        """Add row to table."""
        if not isinstance(row, TableRow):
            raise TypeError(f"Table can only contain rows, got {type(row)!r}")
        self.children.append(row)
        logger.debug(f"Added row to table. Total rows: {len(self.children)}")
        return row

    def add_caption(self, paragraph: Paragraph) -> Paragraph:
        self.caption.append(paragraph)
        return paragraph

    def remove_child(self, model: Models) -> bool:
        for index, paragraph in enumerate(self.caption):
            if paragraph is model:
                del self.caption[index]
                return True
        return super().remove_child(model)

    def get_cell(self, row_index: int, col_index: int) -> Optional["TableCell"]:
        rows = self.rows
        if 0 <= row_index < len(rows):
            cells = rows[row_index].cells
            if 0 <= col_index < len(cells):
                return cells[col_index]
        return None

    def get_dimensions(self) -> Tuple[int, int]:
        rows = self.rows
        if not rows:
            return (0, 0)
        return (len(rows), max(len(row.cells) for row in rows))

    def get_text(self) -> str:
        """Get text content from caption and all cells."""
        text_parts = [paragraph.get_text() for paragraph in self.caption]
        text_parts.extend(row.get_text() for row in self.rows)
        return "\n".join(part for part in text_parts if part)

    def flatten(self) -> List[Models]:
        result: List[Models] = [self]
        for paragraph in self.caption:
            result.extend(paragraph.flatten())
        for child in self.children:
            result.extend(child.flatten())
        return result

    def _attributes_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.caption:
            result["caption"] = [paragraph.to_dict() for paragraph in self.caption]
        if self.width.is_valid:
            result["width"] = str(self.width)
        if self.alignment:
            result["alignment"] = self.alignment
        if self.background is not None:
            result["background"] = self.background.to_hex()
        if not self.border.is_empty:
            result["border"] = {
                side: getattr(self.border, side).to_dict()
                for side in ("top", "right", "bottom", "left")
                if getattr(self.border, side).is_valid
            }
        result["dimensions"] = list(self.get_dimensions())
        return result


class TableRow(Models):
    """Represents a table row."""

    def __init__(self, is_header: bool = False, source_tag: Optional[str] = "tr"):
        super().__init__(source_tag=source_tag)
        self.is_header: bool = is_header

    @property
    def cells(self) -> List["TableCell"]:
        return [child for child in self.children if isinstance(child, TableCell)]

    def add_cell(self, cell: "TableCell") -> "TableCell":
        if not isinstance(cell, TableCell):
            raise TypeError(f"TableRow can only contain cells, got {type(cell)!r}")
        self.children.append(cell)
        return cell

    def get_text(self) -> str:
        return "\t".join(cell.get_text() for cell in self.cells)

    def _attributes_dict(self) -> Dict[str, Any]:
        return {"is_header": True} if self.is_header else {}


class TableCell(Body):
    """Represents a table cell holding block nodes."""

    def __init__(
        self,
        colspan: int = 1,
        rowspan: int = 1,
        is_header: bool = False,
        width: Unit = EMPTY_UNIT,
        background: Optional[HtmlColor] = None,
        vertical_alignment: Optional[str] = None,
        source_tag: Optional[str] = "td",
    ):
        super().__init__(source_tag=source_tag)
        self.colspan: int = colspan
        self.rowspan: int = rowspan
        self.is_header: bool = is_header
        self.width: Unit = width
        self.background: Optional[HtmlColor] = background
        self.vertical_alignment: Optional[str] = vertical_alignment

    def _attributes_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.colspan != 1:
            result["colspan"] = self.colspan
        if self.rowspan != 1:
            result["rowspan"] = self.rowspan
        if self.is_header:
            result["is_header"] = True
        if self.width.is_valid:
            result["width"] = str(self.width)
        if self.background is not None:
            result["background"] = self.background.to_hex()
        if self.vertical_alignment:
            result["vertical_alignment"] = self.vertical_alignment
        return result
