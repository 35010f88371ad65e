"""
Tests for HTML Parser.

Tests the tag-stack tree builder: paragraphs, runs, whitespace handling,
implicit closing, block properties and tables.
"""

import pytest

from htmlquill.models import Paragraph, Table, TableCell
from htmlquill.parser.html_parser import HtmlContentBuilder, HtmlParser
from htmlquill.styles.border import BorderStyle
from htmlquill.styles.color_map import HtmlColor
from htmlquill.styles.run_style import MONOSPACE_FAMILY
from htmlquill.styles.units import Unit


def parse(html):
    return HtmlParser(html).parse().body


def texts(runs):
    return [run.text for run in runs]


class TestRuns:
    """Test run splitting and inline formatting."""

    def test_parse_simple_html(self):
        body = parse("<p>Hello <b>world</b></p>")
        assert len(body) == 1
        paragraph = body.children[0]
        assert isinstance(paragraph, Paragraph)
        assert texts(paragraph.runs) == ["Hello", " ", "world"]
        assert paragraph.runs[2].style.bold is True
        assert paragraph.runs[0].style.bold is None
        assert paragraph.get_text() == "Hello world"

    def test_unclosed_formatting_nests(self):
        body = parse("<p>some text in <i>italics <b>,bold and italics</p>")
        runs = body.children[0].runs
        assert len(runs) == 5
        assert runs[2].text == "italics"
        assert runs[2].style.italic is True
        assert runs[2].style.bold is None
        assert runs[4].text == ",bold and italics"
        assert runs[4].style.italic is True
        assert runs[4].style.bold is True

    def test_trailing_space_is_its_own_run(self):
        runs = parse("<p>Some <b>bold\n</b>text</p>").children[0].runs
        assert texts(runs) == ["Some", " ", "bold", " ", "text"]
        assert runs[3].style.bold is True
        assert runs[4].style.bold is None

    def test_newline_collapses_inside_text(self):
        runs = parse("<p>Some\ntext</p>").children[0].runs
        assert texts(runs) == ["Some text"]

    def test_whitespace_runs_collapse(self):
        runs = parse("<p>  a \t\r\n  b  </p>").children[0].runs
        assert texts(runs) == ["a b"]

    def test_nested_formatting_union(self):
        runs = parse("<b>x<i>y</i></b>").children[0].runs
        assert runs[1].style.bold is True
        assert runs[1].style.italic is True
        assert runs[0].style.italic is None

    def test_innermost_style_wins(self):
        runs = parse('<span style="color:red">a<span style="color:blue">b</span>c</span>').children[0].runs
        assert texts(runs) == ["a", "b", "c"]
        assert runs[0].style.color == HtmlColor.from_rgb(255, 0, 0)
        assert runs[1].style.color == HtmlColor.from_rgb(0, 0, 255)
        assert runs[2].style.color == HtmlColor.from_rgb(255, 0, 0)

    def test_inline_style_properties(self):
        html = (
            '<span style="font-weight:bold; font-style:italic; text-decoration:underline line-through;'
            ' font-size:14pt; font-family:\'Times New Roman\', serif; vertical-align:super">x</span>'
        )
        style = parse(html).children[0].runs[0].style
        assert style.bold is True
        assert style.italic is True
        assert style.underline is True
        assert style.strike is True
        assert style.font_size == Unit("pt", 14.0)
        assert style.font_family == "Times New Roman"
        assert style.vertical_align == "superscript"

    def test_block_style_reaches_runs(self):
        runs = parse('<div style="color:#00ff00"><p>x</p></div>').children[0].runs
        assert runs[0].style.color == HtmlColor.from_rgb(0, 255, 0)

    def test_font_tag(self):
        style = parse('<font color="red" face="Arial, sans-serif" size="5">x</font>').children[0].runs[0].style
        assert style.color == HtmlColor.from_rgb(255, 0, 0)
        assert style.font_family == "Arial"
        assert style.font_size == Unit("pt", 18.0)

    def test_tag_deltas(self):
        body = parse("<p><u>u</u><s>s</s><sub>2</sub><code>c</code><mark>m</mark></p>")
        runs = body.children[0].runs
        assert runs[0].style.underline is True
        assert runs[1].style.strike is True
        assert runs[2].style.vertical_align == "subscript"
        assert runs[3].style.font_family == MONOSPACE_FAMILY
        assert runs[4].style.background == HtmlColor.from_rgb(255, 255, 0)

    def test_relative_sizes(self):
        runs = parse("<p><small>s</small><big>b</big></p>").children[0].runs
        assert runs[0].style.font_size == Unit("em", 0.83)
        assert runs[1].style.font_size == Unit("em", 1.2)

    def test_hyperlink(self):
        runs = parse('<p>see <a href=" https://example.com/ ">here</a></p>').children[0].runs
        assert runs[-1].style.hyperlink == "https://example.com/"
        assert runs[0].style.hyperlink is None

    def test_self_closed_inline_tag_is_empty(self):
        runs = parse("<b/>text").children[0].runs
        assert runs[0].style.bold is None

    def test_misnested_end_tag_keeps_inner_formatting(self):
        runs = parse("<b>bold <i>both</b> plain</i> after").children[0].runs
        assert runs[2].text == "both"
        assert runs[2].style.bold is True and runs[2].style.italic is True
        assert runs[4].text == "plain"
        assert runs[4].style.bold is None
        assert runs[4].style.italic is True
        assert runs[-1].text == "after"
        assert runs[-1].style.italic is None

    def test_end_tag_pops_only_its_own_formatting(self):
        runs = parse("<p><b><i>x</b>y</i></p>").children[0].runs
        assert texts(runs) == ["x", "y"]
        assert runs[1].style.bold is None
        assert runs[1].style.italic is True

    def test_style_value_is_decoded_once(self):
        runs = parse('<p><span style="font-family:Fish&amp;ltChips">x</span></p>').children[0].runs
        assert runs[0].style.font_family == "Fish&ltChips"

    def test_entities_are_decoded(self):
        paragraph = parse("<p>Fish &amp; Chips&nbsp;&lt;3</p>").children[0]
        assert paragraph.get_text() == "Fish & Chips\u00a0<3"


class TestLiteralText:
    """Markup that is not a tag stays text."""

    def test_spaced_tag_is_text(self):
        runs = parse(" < b >bold</b>").children[0].runs
        assert texts(runs) == ["< b >bold"]

    def test_heart_is_text(self):
        runs = parse(" <3").children[0].runs
        assert texts(runs) == ["<3"]

    def test_whitespace_only_input(self):
        assert parse("  \n").is_empty()
        assert parse("").is_empty()

    @pytest.mark.parametrize(
        "html",
        [
            "<style>{font-size:2em}</script>",
            "<xml><p>hidden</p></xml>",
            '<input type="text" value="x"/>',
            "<!--<p>hidden</p>-->",
            "<script>document.write('<p>x</p>')</script>",
            "<head><title>t</title></head>",
            "<p></p><p>   </p><p><b></b></p>",
        ],
    )
    def test_markup_without_content(self, html):
        assert parse(html).is_empty()


class TestParagraphs:
    """Test paragraph boundaries and implicit closing."""

    def test_paragraph_closes_paragraph(self):
        body = parse("<p>A<p>B</p>")
        assert [p.get_text() for p in body.children] == ["A", "B"]

    def test_nbsp_paragraph_is_kept(self):
        body = parse("<p>&nbsp;</p><p>B</p>")
        assert [p.get_text() for p in body.children] == ["\u00a0", "B"]

    def test_trailing_nbsp_is_kept(self):
        assert parse("<p>A<b>&nbsp;</b></p>").children[0].get_text() == "A\u00a0"

    def test_formatting_does_not_leak_into_next_paragraph(self):
        body = parse("<p>First paragraph in <i>italics </i><p>Second paragraph not in italic</p>")
        first, second = body.children
        assert texts(first.runs) == ["First paragraph in", " ", "italics"]
        assert first.runs[2].style.italic is True
        assert texts(second.runs) == ["Second paragraph not in italic"]
        assert second.runs[0].style.italic is None

    def test_unclosed_inline_closed_with_paragraph(self):
        body = parse("<p>First <i>italic<p>Second</p>")
        assert body.children[1].runs[0].style.italic is None

    def test_text_after_block(self):
        body = parse("<div>a</div>b")
        assert [p.get_text() for p in body.children] == ["a", "b"]

    def test_unmatched_end_tags_are_ignored(self):
        body = parse("</div><p>x</p></span></p>")
        assert len(body) == 1
        assert body.children[0].get_text() == "x"

    def test_unclosed_at_end_of_input(self):
        body = parse("<div><p><b>unfinished")
        assert len(body) == 1
        assert body.children[0].runs[0].style.bold is True

    def test_headings(self):
        body = parse("<h1>One<h2>Two</h2><p>Body</p>")
        assert [p.style.style_id for p in body.children] == ["Heading1", "Heading2", None]
        assert body.children[0].source_tag == "h1"

    def test_alignment(self):
        body = parse('<p align="center">a</p><div style="text-align:right"><p>b</p></div><center>c</center>')
        assert [p.alignment for p in body.children] == ["center", "right", "center"]

    def test_block_margin_and_background(self):
        paragraph = parse('<p style="margin:4px; margin-left:8px; background-color:yellow">x</p>').children[0]
        assert paragraph.style.margin.top == Unit("px", 4.0)
        assert paragraph.style.margin.left == Unit("px", 8.0)
        assert paragraph.style.background == HtmlColor.from_rgb(255, 255, 0)
        # block backgrounds stay on the paragraph
        assert paragraph.runs[0].style.background is None

    def test_blockquote(self):
        paragraph = parse("<blockquote>quoted</blockquote>").children[0]
        assert paragraph.style.style_id == "Quote"


class TestLists:
    """List items become plain paragraphs with a list level."""

    def test_items_close_each_other(self):
        body = parse("<ul><li>One<li>Two</ul>")
        assert [p.get_text() for p in body.children] == ["One", "Two"]
        assert all(p.style.style_id == "ListParagraph" for p in body.children)
        assert all(p.style.list_level == 0 for p in body.children)

    def test_nested_lists(self):
        body = parse("<ul><li>A<ul><li>B</li></ul></li><li>C</li></ul>")
        levels = [(p.get_text(), p.style.list_level) for p in body.children]
        assert levels == [("A", 0), ("B", 1), ("C", 0)]

    def test_definition_list(self):
        body = parse("<dl><dt>term<dd>definition</dl>")
        assert [p.get_text() for p in body.children] == ["term", "definition"]


class TestBreaksAndRules:
    """Line breaks, horizontal rules and preformatted text."""

    def test_line_break(self):
        runs = parse("<p>line one<br>line two</p>").children[0].runs
        assert len(runs) == 3
        assert runs[1].is_break
        assert runs[1].get_text() == "\n"

    def test_space_after_break_is_dropped(self):
        runs = parse("<p>a<br> b</p>").children[0].runs
        assert [run.get_text() for run in runs] == ["a", "\n", "b"]

    def test_end_br_is_a_break(self):
        runs = parse("<p>a</br>b</p>").children[0].runs
        assert runs[1].is_break

    def test_break_alone_makes_a_paragraph(self):
        body = parse("<br>")
        assert len(body) == 1

    def test_horizontal_rule(self):
        body = parse("<p>above</p><hr><p>below</p>")
        assert len(body) == 3
        rule = body.children[1]
        assert rule.source_tag == "hr"
        assert rule.runs == []
        assert rule.style.border.bottom.style is BorderStyle.SOLID

    def test_horizontal_rule_closes_paragraph(self):
        body = parse("<p>a<hr>b</p>")
        assert [p.source_tag for p in body.children] == ["p", "hr", None]
        assert body.children[2].get_text() == "b"

    def test_preformatted(self):
        paragraph = parse("<pre>\nline 1\n  indented</pre>").children[0]
        assert paragraph.preserve_space
        assert paragraph.style.style_id == "Preformatted"
        assert [run.get_text() for run in paragraph.runs] == ["line 1", "\n", "  indented"]
        assert paragraph.runs[0].style.font_family == MONOSPACE_FAMILY


class TestTables:
    """Test table construction."""

    def test_simple_table(self):
        html = (
            '<table border="1"><tr><td>A</td><td colspan="2">B</td></tr>'
            "<tr><th>C</th></tr></table>"
        )
        body = parse(html)
        assert len(body) == 1
        table = body.children[0]
        assert isinstance(table, Table)
        assert table.get_dimensions() == (2, 2)
        assert table.get_cell(0, 1).colspan == 2
        header = table.get_cell(1, 0)
        assert header.is_header
        assert header.children[0].runs[0].style.bold is True
        assert table.border.top.style is BorderStyle.SOLID
        assert table.border.top.width == Unit("px", 1.0)

    def test_implicit_cell_and_row_closing(self):
        table = parse("<table><tr><td>1<td>2<tr><td>3</table>").children[0]
        assert [len(row.cells) for row in table.rows] == [2, 1]
        assert table.get_cell(1, 0).get_text() == "3"

    def test_cell_without_row(self):
        table = parse("<table><td>x</td></table>").children[0]
        assert table.get_dimensions() == (1, 1)

    def test_cell_outside_table_is_ignored(self):
        body = parse("<td>x</td>")
        assert len(body) == 1
        assert isinstance(body.children[0], Paragraph)

    def test_header_section(self):
        html = "<table><thead><tr><th>H</th></tr></thead><tbody><tr><td>v</td></tr></tbody></table>"
        table = parse(html).children[0]
        assert [row.is_header for row in table.rows] == [True, False]

    def test_caption(self):
        table = parse("<table><caption>Title</caption><tr><td>x</td></tr></table>").children[0]
        assert [p.get_text() for p in table.caption] == ["Title"]
        assert table.get_text().startswith("Title")

    def test_cell_properties(self):
        html = '<table><tr><td bgcolor="#ff0000" valign="center" rowspan="2" width="120">x</td></tr></table>'
        cell = parse(html).children[0].get_cell(0, 0)
        assert cell.background == HtmlColor.from_rgb(255, 0, 0)
        assert cell.vertical_alignment == "middle"
        assert cell.rowspan == 2
        assert cell.width == Unit("px", 120.0)

    def test_nested_table(self):
        html = "<table><tr><td><table><tr><td>inner</td></tr></table></td></tr></table>"
        outer = parse(html).children[0]
        cell = outer.get_cell(0, 0)
        assert isinstance(cell, TableCell)
        inner = cell.children[0]
        assert isinstance(inner, Table)
        assert inner.get_cell(0, 0).get_text() == "inner"

    def test_paragraph_closed_by_cell_end(self):
        cell = parse("<table><tr><td><p>x</td></tr></table>").children[0].get_cell(0, 0)
        assert cell.get_text() == "x"

    def test_stray_table_text_goes_to_container(self):
        body = parse("<table>stray<tr><td>x</td></tr></table>")
        assert isinstance(body.children[0], Table)
        assert body.children[1].get_text() == "stray"


class TestParserEntryPoints:
    """Test HtmlParser and HtmlContentBuilder entry points."""

    def test_parse_file(self, temp_dir):
        path = temp_dir / "page.html"
        path.write_text("<p>from file</p>", encoding="utf-8")
        result = HtmlParser.parse_file(path)
        assert result.body.get_text() == "from file"
        assert result.images == []

    def test_builder_handlers(self):
        builder = HtmlContentBuilder()
        builder.handle_starttag("P")
        builder.handle_data("text")
        builder.handle_comment("ignored")
        builder.handle_endtag("p")
        result = builder.close()
        assert result.body.get_text() == "text"

    def test_parser_never_raises(self):
        garbage = "<<p>></b></table><td><tr>&&#;<img><a href>x</a><p style='color:'>y"
        body = parse(garbage)
        assert "x" in body.get_text()
