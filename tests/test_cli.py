"""
Tests for the command-line interface.
"""

import io
import json
import logging
import xml.etree.ElementTree as ET

import pytest
from rich.console import Console
from rich.logging import RichHandler

from htmlquill.cli import create_parser, main
from htmlquill.export.wordml_exporter import NAMESPACES
from htmlquill.utils.rich_logger import RichLogger, setup_logging

W = "{%s}" % NAMESPACES["w"]


@pytest.fixture
def html_file(temp_dir):
    path = temp_dir / "page.html"
    path.write_text("<h1>Title</h1><p>Hello <b>world</b></p>", encoding="utf-8")
    return path


class TestParser:
    def test_convert_defaults(self):
        args = create_parser().parse_args(["convert", "page.html"])
        assert args.format == "xml"
        assert args.output is None
        assert args.max_concurrency == 4
        assert not args.verbose

    def test_unknown_format(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["convert", "page.html", "-f", "pdf"])


class TestConvertCommand:
    """Test cases for the convert command."""

    def test_json_to_file(self, html_file, temp_dir):
        output = temp_dir / "out.json"
        assert main(["convert", str(html_file), "-f", "json", "-o", str(output)]) == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert [child["source_tag"] for child in data["children"]] == ["h1", "p"]

    def test_xml_to_stdout(self, html_file, capsys):
        assert main(["convert", str(html_file)]) == 0
        root = ET.fromstring(capsys.readouterr().out)
        assert root.tag == W + "body"
        assert len(root.findall(W + "p")) == 2

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"<p>from stdin</p>")))
        assert main(["convert", "-", "-f", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["children"][0]["children"][0]["text"] == "from stdin"

    def test_missing_file(self, temp_dir, capsys):
        assert main(["convert", str(temp_dir / "missing.html")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_concurrency(self, html_file, capsys):
        assert main(["convert", str(html_file), "--max-concurrency", "0"]) == 1
        assert "max_concurrency" in capsys.readouterr().err

    def test_relative_image_next_to_input(self, temp_dir, png_bytes):
        (temp_dir / "images").mkdir()
        (temp_dir / "images" / "a.png").write_bytes(png_bytes)
        page = temp_dir / "page.html"
        page.write_text('<p><img src="images/a.png" alt="logo"></p>', encoding="utf-8")
        output = temp_dir / "out.json"

        assert main(["convert", str(page), "-f", "json", "-o", str(output)]) == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        image = data["children"][0]["children"][0]["image"]
        assert (image["width"], image["height"]) == (40, 20)
        assert image["content_type"] == "image/png"

    def test_verbose_configures_logging(self, html_file, temp_dir):
        main(["convert", str(html_file), "-o", str(temp_dir / "out.xml"), "-v"])
        logger = logging.getLogger("htmlquill")
        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0], RichHandler)


class TestOtherCommands:
    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert "HtmlQuill v0.1.0" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: htmlquill" in capsys.readouterr().out


class TestSetupLogging:
    def test_plain_handler(self):
        logger = setup_logging("info", use_rich=False)
        assert logger.name == "htmlquill"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], RichHandler)
        assert not logger.propagate

    def test_reporter_writes_to_console(self):
        console = Console(file=io.StringIO(), width=120)
        reporter = RichLogger(console)
        reporter.success("Saved: out.xml")
        reporter.failure("File not found: page.html")
        output = console.file.getvalue()
        assert "✓ Saved: out.xml" in output
        assert "✗ File not found: page.html" in output
