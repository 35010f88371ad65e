"""
WordprocessingML exporter for HtmlQuill document trees.

Produces the ``w:body`` content of a ``document.xml`` part. Image bytes and
hyperlink targets are collected as relationship entries (``rId1``, ``rId2``,
...) for the packaging layer; building the ``.docx`` zip is left to the caller.
"""

import math
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..models.body import Body
from ..models.image import Image
from ..models.paragraph import Paragraph
from ..models.run import Run
from ..models.table import Table, TableCell, TableRow
from ..styles.border import BorderStyle, HtmlBorder, SideBorder
from ..styles.margin import Margin
from ..styles.paragraph_style import ParagraphStyle
from ..styles.run_style import RunStyle
from ..styles.units import Unit
from .base_exporter import BaseExporter

logger = logging.getLogger(__name__)

NAMESPACES = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "wp": "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "pic": "http://schemas.openxmlformats.org/drawingml/2006/picture",
}

IMAGE_RELATIONSHIP = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"
HYPERLINK_RELATIONSHIP = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"

EMU_PER_PIXEL = 9525

_ALIGNMENT = {"left": "left", "center": "center", "right": "right", "justify": "both"}

_BORDER_VALUES = {
    BorderStyle.NONE: "nil",
    BorderStyle.HIDDEN: "nil",
    BorderStyle.DOTTED: "dotted",
    BorderStyle.DASHED: "dashed",
    BorderStyle.SOLID: "single",
    BorderStyle.DOUBLE: "double",
    BorderStyle.GROOVE: "threeDEngrave",
    BorderStyle.RIDGE: "threeDEmboss",
    BorderStyle.INSET: "inset",
    BorderStyle.OUTSET: "outset",
}

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "image/webp": "webp",
    "image/x-icon": "ico",
}

for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)


def _qn(name: str) -> str:
    """``"w:p"`` -> ``"{namespace}p"``."""
    prefix, local = name.split(":", 1)
    return f"{{{NAMESPACES[prefix]}}}{local}"


@dataclass(frozen=True)
class Relationship:
    """A relationship the ``document.xml`` part needs."""

    rel_id: str
    type: str
    target: str
    external: bool = False
    data: Optional[bytes] = None
    content_type: Optional[str] = None


class WordMLExporter(BaseExporter):
    """
    Serializes the document tree as WordprocessingML.
    """

    format_name = "wordml"
    file_extension = ".xml"

    def __init__(
        self,
        output_path: Optional[Union[str, Path]] = None,
        indent: int = 2,
        pretty: bool = True,
        encoding: str = "utf-8",
    ):
        """
        Args:
            output_path: Output file path (string output when ``None``)
            indent: Indentation step when ``pretty`` is set
            pretty: Indent the generated XML
            encoding: Output encoding
        """
        super().__init__(output_path, encoding=encoding)
        self.indent = indent
        self.pretty = pretty
        self.relationships: List[Relationship] = []
        self._hyperlinks: Dict[str, str] = {}
        self._drawing_id = 0

    # ------------------------------------------------------------------
    @property
    def media(self) -> List[Relationship]:
        return [rel for rel in self.relationships if rel.type == IMAGE_RELATIONSHIP]

    def build(self, body: Body) -> ET.Element:
        """Build the ``w:body`` element for ``body``."""
        self.relationships = []
        self._hyperlinks = {}
        self._drawing_id = 0

        root = ET.Element(_qn("w:body"))
        self._append_blocks(root, body.children)
        if self.pretty:
            self._indent_xml(root)
        return root

    def export_to_string(self, body: Body) -> str:
        root = self.build(body)
        xml = ET.tostring(root, encoding="unicode")
        logger.debug(f"WordML export: {len(body)} blocks, {len(self.relationships)} relationships")
        return xml

    def relationships_xml(self) -> str:
        """The ``document.xml.rels`` part for the collected relationships."""
        package_ns = "http://schemas.openxmlformats.org/package/2006/relationships"
        root = ET.Element(f"{{{package_ns}}}Relationships")
        for rel in self.relationships:
            element = ET.SubElement(root, f"{{{package_ns}}}Relationship")
            element.set("Id", rel.rel_id)
            element.set("Type", rel.type)
            element.set("Target", rel.target)
            if rel.external:
                element.set("TargetMode", "External")
        return ET.tostring(root, encoding="unicode")

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------
    def _append_blocks(self, parent: ET.Element, blocks: Iterable[Any]) -> None:
        for block in blocks:
            if isinstance(block, Paragraph):
                parent.append(self._export_paragraph_xml(block))
            elif isinstance(block, Table):
                for caption in block.caption:
                    parent.append(self._export_paragraph_xml(caption, default_style="Caption"))
                parent.append(self._export_table_xml(block))
            else:
                logger.warning(f"WordML export: skipping unsupported block {type(block).__name__}")

    def _export_paragraph_xml(self, paragraph: Paragraph, default_style: Optional[str] = None) -> ET.Element:
        p = ET.Element(_qn("w:p"))
        pPr = ET.Element(_qn("w:pPr"))
        self._add_paragraph_properties(pPr, paragraph.style, default_style)
        if len(pPr):
            p.append(pPr)

        hyperlink: Optional[ET.Element] = None
        hyperlink_target: Optional[str] = None
        for run in paragraph.runs:
            target = run.style.hyperlink
            if target != hyperlink_target:
                hyperlink = None
                hyperlink_target = target
                if target:
                    hyperlink = ET.SubElement(p, _qn("w:hyperlink"))
                    hyperlink.set(_qn("r:id"), self._hyperlink_id(target))
            parent = hyperlink if hyperlink is not None else p
            r = self._export_run_xml(run)
            if r is not None:
                parent.append(r)
        return p

    def _export_run_xml(self, run: Run) -> Optional[ET.Element]:
        r = ET.Element(_qn("w:r"))
        rPr = ET.Element(_qn("w:rPr"))
        self._add_run_properties(rPr, run.style)
        if len(rPr):
            r.append(rPr)

        if run.is_break:
            ET.SubElement(r, _qn("w:br"))
        elif run.is_image:
            drawing = self._export_image_xml(run.image)
            if drawing is None:
                return None
            r.append(drawing)
        else:
            t = ET.SubElement(r, _qn("w:t"))
            t.text = run.text
            if run.text != run.text.strip():
                t.set("{http://www.w3.org/XML/1998/namespace}space", "preserve")
        return r

    def _export_table_xml(self, table: Table) -> ET.Element:
        tbl = ET.Element(_qn("w:tbl"))
        tblPr = ET.SubElement(tbl, _qn("w:tblPr"))
        self._add_table_properties(tblPr, table)

        columns = max((sum(cell.colspan for cell in row.cells) for row in table.rows), default=0)
        grid = ET.SubElement(tbl, _qn("w:tblGrid"))
        for _ in range(columns):
            ET.SubElement(grid, _qn("w:gridCol"))

        for row in table.rows:
            tbl.append(self._export_row_xml(row))
        return tbl

    def _export_row_xml(self, row: TableRow) -> ET.Element:
        tr = ET.Element(_qn("w:tr"))
        if row.is_header:
            trPr = ET.SubElement(tr, _qn("w:trPr"))
            ET.SubElement(trPr, _qn("w:tblHeader"))
        for cell in row.cells:
            tr.append(self._export_cell_xml(cell))
        return tr

    def _export_cell_xml(self, cell: TableCell) -> ET.Element:
        tc = ET.Element(_qn("w:tc"))
        tcPr = ET.Element(_qn("w:tcPr"))
        self._add_cell_properties(tcPr, cell)
        if len(tcPr):
            tc.append(tcPr)
        self._append_blocks(tc, cell.children)
        # a cell must end with a paragraph
        if not len(tc) or tc[-1].tag != _qn("w:p"):
            ET.SubElement(tc, _qn("w:p"))
        return tc

    def _export_image_xml(self, image: Image) -> Optional[ET.Element]:
        if image.data is None or image.width is None or image.height is None:
            logger.warning(f"WordML export: image {image.src[:80]!r} has no data, skipping")
            return None

        rel_id = self._next_rel_id()
        extension = _EXTENSIONS.get(image.content_type or "", "bin")
        media_index = len(self.media) + 1
        self.relationships.append(
            Relationship(
                rel_id=rel_id,
                type=IMAGE_RELATIONSHIP,
                target=f"media/image{media_index}.{extension}",
                data=image.data,
                content_type=image.content_type,
            )
        )
        self._drawing_id += 1
        cx = str(image.width * EMU_PER_PIXEL)
        cy = str(image.height * EMU_PER_PIXEL)
        name = f"Picture {self._drawing_id}"

        drawing = ET.Element(_qn("w:drawing"))
        inline = ET.SubElement(drawing, _qn("wp:inline"))
        extent = ET.SubElement(inline, _qn("wp:extent"))
        extent.set("cx", cx)
        extent.set("cy", cy)
        doc_pr = ET.SubElement(inline, _qn("wp:docPr"))
        doc_pr.set("id", str(self._drawing_id))
        doc_pr.set("name", name)
        if image.alt:
            doc_pr.set("descr", image.alt)
        if image.title:
            doc_pr.set("title", image.title)

        graphic = ET.SubElement(inline, _qn("a:graphic"))
        graphic_data = ET.SubElement(graphic, _qn("a:graphicData"))
        graphic_data.set("uri", NAMESPACES["pic"])
        pic = ET.SubElement(graphic_data, _qn("pic:pic"))
        nv_pic_pr = ET.SubElement(pic, _qn("pic:nvPicPr"))
        c_nv_pr = ET.SubElement(nv_pic_pr, _qn("pic:cNvPr"))
        c_nv_pr.set("id", "0")
        c_nv_pr.set("name", name)
        ET.SubElement(nv_pic_pr, _qn("pic:cNvPicPr"))
        blip_fill = ET.SubElement(pic, _qn("pic:blipFill"))
        blip = ET.SubElement(blip_fill, _qn("a:blip"))
        blip.set(_qn("r:embed"), rel_id)
        stretch = ET.SubElement(blip_fill, _qn("a:stretch"))
        ET.SubElement(stretch, _qn("a:fillRect"))
        sp_pr = ET.SubElement(pic, _qn("pic:spPr"))
        xfrm = ET.SubElement(sp_pr, _qn("a:xfrm"))
        off = ET.SubElement(xfrm, _qn("a:off"))
        off.set("x", "0")
        off.set("y", "0")
        ext = ET.SubElement(xfrm, _qn("a:ext"))
        ext.set("cx", cx)
        ext.set("cy", cy)
        geometry = ET.SubElement(sp_pr, _qn("a:prstGeom"))
        geometry.set("prst", "rect")
        return drawing

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    def _add_paragraph_properties(
        self, pPr: ET.Element, style: ParagraphStyle, default_style: Optional[str] = None
    ) -> None:
        style_id = style.style_id or default_style
        if style_id:
            self._set_val(ET.SubElement(pPr, _qn("w:pStyle")), style_id)

        if not style.border.is_empty:
            pBdr = ET.SubElement(pPr, _qn("w:pBdr"))
            self._add_borders(pBdr, style.border)

        if style.background is not None:
            self._add_shading(pPr, style.background.to_hex())

        self._add_spacing(pPr, style.margin)

        if style.alignment in _ALIGNMENT:
            self._set_val(ET.SubElement(pPr, _qn("w:jc")), _ALIGNMENT[style.alignment])

    def _add_spacing(self, pPr: ET.Element, margin: Margin) -> None:
        before = _twips(margin.top)
        after = _twips(margin.bottom)
        if before is not None or after is not None:
            spacing = ET.SubElement(pPr, _qn("w:spacing"))
            self._set_attr(spacing, _qn("w:before"), before)
            self._set_attr(spacing, _qn("w:after"), after)
        left = _twips(margin.left)
        right = _twips(margin.right)
        if left is not None or right is not None:
            ind = ET.SubElement(pPr, _qn("w:ind"))
            self._set_attr(ind, _qn("w:left"), left)
            self._set_attr(ind, _qn("w:right"), right)

    def _add_run_properties(self, rPr: ET.Element, style: RunStyle) -> None:
        if style.font_family:
            fonts = ET.SubElement(rPr, _qn("w:rFonts"))
            fonts.set(_qn("w:ascii"), style.font_family)
            fonts.set(_qn("w:hAnsi"), style.font_family)
            fonts.set(_qn("w:cs"), style.font_family)
        if style.hyperlink:
            self._set_val(ET.SubElement(rPr, _qn("w:rStyle")), "Hyperlink")
        self._add_toggle(rPr, "w:b", style.bold)
        self._add_toggle(rPr, "w:i", style.italic)
        self._add_toggle(rPr, "w:smallCaps", style.small_caps)
        self._add_toggle(rPr, "w:strike", style.strike)
        if style.color is not None and not style.color.is_transparent:
            self._set_val(ET.SubElement(rPr, _qn("w:color")), style.color.to_hex())
        if style.font_size is not None:
            half_points = style.font_size.to_half_points()
            if half_points:
                self._set_val(ET.SubElement(rPr, _qn("w:sz")), half_points)
        if style.underline is not None:
            self._set_val(ET.SubElement(rPr, _qn("w:u")), "single" if style.underline else "none")
        if style.border is not None and style.border.is_valid:
            self._add_border(rPr, "w:bdr", style.border)
        if style.background is not None and not style.background.is_transparent:
            self._add_shading(rPr, style.background.to_hex())
        if style.vertical_align:
            self._set_val(ET.SubElement(rPr, _qn("w:vertAlign")), style.vertical_align)

    def _add_table_properties(self, tblPr: ET.Element, table: Table) -> None:
        self._add_width(tblPr, "w:tblW", table.width)
        if table.alignment in _ALIGNMENT:
            self._set_val(ET.SubElement(tblPr, _qn("w:jc")), _ALIGNMENT[table.alignment])
        if not table.border.is_empty:
            borders = ET.SubElement(tblPr, _qn("w:tblBorders"))
            self._add_borders(borders, table.border)
            # the legacy border attribute also draws the inner grid
            side = table.border.top
            if side.is_valid:
                self._add_border(borders, "w:insideH", side)
                self._add_border(borders, "w:insideV", side)
        if table.background is not None:
            self._add_shading(tblPr, table.background.to_hex())

    def _add_cell_properties(self, tcPr: ET.Element, cell: TableCell) -> None:
        self._add_width(tcPr, "w:tcW", cell.width)
        if cell.colspan > 1:
            self._set_val(ET.SubElement(tcPr, _qn("w:gridSpan")), cell.colspan)
        if cell.rowspan > 1:
            self._set_val(ET.SubElement(tcPr, _qn("w:vMerge")), "restart")
        if cell.background is not None:
            self._add_shading(tcPr, cell.background.to_hex())
        if cell.vertical_alignment:
            value = "center" if cell.vertical_alignment == "middle" else cell.vertical_alignment
            self._set_val(ET.SubElement(tcPr, _qn("w:vAlign")), value)

    def _add_width(self, parent: ET.Element, name: str, width: Unit) -> None:
        if not width.is_valid:
            return
        element = ET.SubElement(parent, _qn(name))
        if width.is_percentage:
            # fiftieths of a percent
            element.set(_qn("w:w"), str(int(round(width.value * 50))))
            element.set(_qn("w:type"), "pct")
        else:
            twips = width.to_twips()
            if twips is None:
                parent.remove(element)
                return
            element.set(_qn("w:w"), str(twips))
            element.set(_qn("w:type"), "dxa")

    def _add_borders(self, parent: ET.Element, border: HtmlBorder) -> None:
        for side in ("top", "left", "bottom", "right"):
            side_border = getattr(border, side)
            if side_border.is_valid:
                self._add_border(parent, f"w:{side}", side_border)

    def _add_border(self, parent: ET.Element, name: str, border: SideBorder) -> None:
        element = ET.SubElement(parent, _qn(name))
        style = border.style if border.style is not None else BorderStyle.SOLID
        if not border.is_visible:
            style = BorderStyle.NONE
        element.set(_qn("w:val"), _BORDER_VALUES[style])
        points = border.width.to_points() if border.width.is_valid else 0.75
        if points is not None:
            # eighths of a point, within Word's 2..96 range
            element.set(_qn("w:sz"), str(max(2, min(96, int(round(points * 8))))))
        element.set(_qn("w:space"), "0")
        color = border.color.to_hex() if not border.color.is_empty else "auto"
        element.set(_qn("w:color"), color)

    def _add_shading(self, parent: ET.Element, fill: str) -> None:
        shd = ET.SubElement(parent, _qn("w:shd"))
        shd.set(_qn("w:val"), "clear")
        shd.set(_qn("w:color"), "auto")
        shd.set(_qn("w:fill"), fill)

    def _add_toggle(self, rPr: ET.Element, name: str, value: Optional[bool]) -> None:
        if value is None:
            return
        element = ET.SubElement(rPr, _qn(name))
        if not value:
            element.set(_qn("w:val"), "0")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _coerce_attr_value(value: Any) -> Optional[str]:
        """Convert attribute value to a safe string for XML serialization."""
        if value is None:
            return None
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return None
            if value.is_integer():
                return str(int(value))
            return format(value, ".10g")
        return str(value)

    def _set_attr(self, element: ET.Element, key: str, value: Any) -> None:
        coerced = self._coerce_attr_value(value)
        if coerced is not None:
            element.set(key, coerced)

    def _set_val(self, element: ET.Element, value: Any) -> None:
        self._set_attr(element, _qn("w:val"), value)

    def _next_rel_id(self) -> str:
        return f"rId{len(self.relationships) + 1}"

    def _hyperlink_id(self, target: str) -> str:
        rel_id = self._hyperlinks.get(target)
        if rel_id is None:
            rel_id = self._next_rel_id()
            self._hyperlinks[target] = rel_id
            self.relationships.append(
                Relationship(rel_id=rel_id, type=HYPERLINK_RELATIONSHIP, target=target, external=True)
            )
        return rel_id

    def _indent_xml(self, elem: ET.Element, level: int = 0) -> None:
        """Add indentation to XML element."""
        indent = "\n" + " " * (level * self.indent)
        if len(elem):
            if not elem.text or not elem.text.strip():
                elem.text = indent + " " * self.indent
            for child in elem:
                self._indent_xml(child, level + 1)
            last = elem[-1]
            if not last.tail or not last.tail.strip():
                last.tail = indent
        if level and (not elem.tail or not elem.tail.strip()):
            elem.tail = indent


def _twips(unit: Unit) -> Optional[int]:
    if not unit.is_valid:
        return None
    return unit.to_twips()
