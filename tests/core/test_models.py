"""
Tests for the document tree models.
"""

import pytest

from htmlquill.models import Body, Image, Paragraph, Run, Table, TableCell, TableRow
from htmlquill.styles.run_style import RunStyle
from htmlquill.styles.units import Unit


class TestBody:
    """Test the root container."""

    def test_add_blocks(self):
        body = Body()
        paragraph = body.add_paragraph(Paragraph())
        table = body.add_table(Table())
        assert body.blocks == [paragraph, table]
        assert body.get_paragraphs() == [paragraph]
        assert body.get_tables() == [table]
        assert len(body) == 2
        assert list(body) == [paragraph, table]

    def test_rejects_non_blocks(self):
        body = Body()
        with pytest.raises(TypeError):
            body.add_model(Run("x"))
        with pytest.raises(TypeError):
            body.add_model("text")

    def test_find_and_remove(self):
        body = Body()
        paragraph = body.add_paragraph(Paragraph())
        run = paragraph.add_run(Run("x"))
        assert body.find_by_id(run.id) is run
        assert body.remove_child(paragraph)
        assert not body.remove_child(paragraph)
        assert body.is_empty()


class TestParagraph:
    """Test paragraph helpers."""

    def test_runs_and_text(self):
        paragraph = Paragraph()
        paragraph.add_run(Run("a"))
        paragraph.add_run(Run.line_break())
        paragraph.add_run(Run("b"))
        assert paragraph.get_text() == "a\nb"
        assert paragraph.last_run.text == "b"

    def test_add_run_type_check(self):
        with pytest.raises(TypeError):
            Paragraph().add_run(Paragraph())

    def test_strip_whitespace(self):
        paragraph = Paragraph()
        for text in (" ", " lead", "mid", "trail ", " "):
            paragraph.add_run(Run(text))
        paragraph.strip_whitespace()
        assert [run.text for run in paragraph.runs] == ["lead", "mid", "trail"]

    def test_is_empty(self):
        paragraph = Paragraph()
        assert paragraph.is_empty()
        paragraph.add_run(Run(""))
        assert paragraph.is_empty()
        paragraph.add_run(Run(image=Image("a.png")))
        assert not paragraph.is_empty()

    def test_to_dict(self):
        paragraph = Paragraph(source_tag="p")
        paragraph.add_run(Run("bold", RunStyle(bold=True)))
        data = paragraph.to_dict()
        assert data["type"] == "paragraph"
        assert data["source_tag"] == "p"
        assert data["children"] == [{"type": "run", "text": "bold", "style": {"bold": True}}]


class TestRunAndImage:
    """Test runs and images."""

    def test_run_kinds(self):
        assert Run(" ").is_whitespace
        assert Run("\t\n").is_whitespace
        assert not Run("\u00a0").is_whitespace
        assert not Run.line_break().is_whitespace
        assert Run.line_break().to_dict()["break"] == "line"
        run = Run(image=Image("a.png"))
        assert run.is_image
        assert run.get_text() == ""

    def test_add_text(self):
        run = Run("a")
        run.add_text("b")
        assert run.text == "ab"

    def test_image_binding(self):
        image = Image("a.png", alt="A", requested_width=Unit("px", 10.0))
        assert not image.is_bound
        image.set_data(b"\x89PNG", "image/png")
        image.set_size(10, 5)
        assert image.is_bound
        assert image.get_size() == (10, 5)
        data = image.to_dict()
        assert data["size_bytes"] == 4
        assert data["width"] == 10
        assert data["alt"] == "A"


class TestTable:
    """Test table structure."""

    def build(self):
        table = Table()
        for values in (("a", "b"), ("c",)):
            row = table.add_row(TableRow())
            for value in values:
                cell = row.add_cell(TableCell())
                paragraph = cell.add_paragraph(Paragraph())
                paragraph.add_run(Run(value))
        return table

    def test_dimensions_and_cells(self):
        table = self.build()
        assert table.get_dimensions() == (2, 2)
        assert table.get_cell(0, 1).get_text() == "b"
        assert table.get_cell(1, 1) is None
        assert table.get_cell(5, 0) is None
        assert Table().get_dimensions() == (0, 0)

    def test_text(self):
        table = self.build()
        table.add_caption(Paragraph()).add_run(Run("Caption"))
        assert table.get_text() == "Caption\na\tb\nc"

    def test_remove_caption(self):
        table = Table()
        caption = table.add_caption(Paragraph())
        assert table.remove_child(caption)
        assert table.caption == []

    def test_type_checks(self):
        with pytest.raises(TypeError):
            Table().add_row(TableCell())
        with pytest.raises(TypeError):
            TableRow().add_cell(Paragraph())

    def test_cell_is_a_block_container(self):
        cell = TableCell()
        cell.add_table(Table())
        assert len(cell.get_tables()) == 1

    def test_flatten_includes_caption(self):
        table = self.build()
        caption = table.add_caption(Paragraph())
        assert caption in table.flatten()

    def test_to_dict(self):
        data = self.build().to_dict()
        assert data["type"] == "table"
        assert data["dimensions"] == [2, 2]
        assert data["children"][0]["type"] == "tablerow"
