"""
Tests for HtmlConverter: input decoding, image binding, options and cancellation.
"""

import base64
import codecs
import io
import threading
from unittest.mock import Mock

import pytest

from htmlquill import (
    CancellationToken,
    ConfigurationError,
    ConversionCancelled,
    ConverterOptions,
    HtmlConverter,
    JSONExporter,
    convert_html,
)
from htmlquill.converter import decode_markup, resolve_image_uri
from htmlquill.exceptions import ResourceError
from htmlquill.media.resource_loader import FetchResult, MappingResourceLoader, ResourceLoader
from htmlquill.models import Body, Table


class CountingLoader(MappingResourceLoader):
    def __init__(self, resources):
        super().__init__(resources)
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, uri):
        with self._lock:
            self.calls.append(uri)
        return super().fetch(uri)


class ErrorLoader(ResourceLoader):
    def fetch(self, uri):
        raise ResourceError("connection reset", uri=uri)


class CancellingLoader(ResourceLoader):
    def __init__(self, token, data):
        self.token = token
        self.data = data

    def fetch(self, uri):
        self.token.cancel("stop")
        return FetchResult.found(self.data)


def images_in(body):
    return [run.image for paragraph in body.get_paragraphs() for run in paragraph.runs if run.is_image]


class TestDecodeMarkup:
    """Test the accepted input types."""

    def test_str(self):
        assert decode_markup("<p>x</p>") == "<p>x</p>"

    def test_utf8_bytes(self):
        assert decode_markup("<p>zażółć</p>".encode("utf-8")) == "<p>zażółć</p>"

    def test_utf8_bom(self):
        assert decode_markup(codecs.BOM_UTF8 + b"<p>x</p>") == "<p>x</p>"

    def test_utf16(self):
        assert decode_markup("<p>x</p>".encode("utf-16")) == "<p>x</p>"

    def test_invalid_bytes_are_replaced(self):
        assert decode_markup(b"<p>\xff</p>") == "<p>�</p>"

    def test_file_like(self):
        assert decode_markup(io.StringIO("<p>a</p>")) == "<p>a</p>"
        assert decode_markup(io.BytesIO(b"<p>b</p>")) == "<p>b</p>"

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            decode_markup(42)


class TestResolveImageUri:
    @pytest.mark.parametrize(
        "src, base, expected",
        [
            ("img/a.png", "https://example.com/", "https://example.com/img/a.png"),
            ("../b.png", "https://example.com/a/b/", "https://example.com/a/b.png"),
            ("/root.png", "https://example.com/a/", "https://example.com/root.png"),
            ("https://cdn.example.com/x.png", "https://example.com/", "https://cdn.example.com/x.png"),
            ("data:image/png;base64,AAAA", "https://example.com/", "data:image/png;base64,AAAA"),
            ("a.png", "file:///tmp/pages/", "file:///tmp/pages/a.png"),
            ("  a.png ", None, "a.png"),
        ],
    )
    def test_resolution(self, src, base, expected):
        assert resolve_image_uri(src, base) == expected


class TestConverterParse:
    """Test parsing through the converter."""

    def test_parse_returns_body(self):
        with HtmlConverter(MappingResourceLoader()) as converter:
            body = converter.parse("<p>Hello</p>")
        assert isinstance(body, Body)
        assert body.get_text() == "Hello"

    def test_convert_with_sink(self):
        output = HtmlConverter(MappingResourceLoader()).convert("<p>x</p>", JSONExporter())
        assert '"paragraph"' in output

    def test_convert_html_helper(self, image_loader):
        body = convert_html("<p>x</p>", resource_loader=image_loader)
        assert isinstance(body, Body)
        text = convert_html("<p>x</p>", JSONExporter(), resource_loader=image_loader)
        assert isinstance(text, str)


class TestImageBinding:
    """Test image fetching and binding."""

    def test_bound_with_intrinsic_size(self, image_loader):
        converter = HtmlConverter(image_loader, base_image_url="https://example.com/")
        body = converter.parse('<p><img src="img/a.png" alt="A"></p>')
        (image,) = images_in(body)
        assert image.resolved_uri == "https://example.com/img/a.png"
        assert image.is_bound
        assert image.get_size() == (40, 20)
        assert image.content_type == "image/png"

    def test_proportional_scaling(self, image_loader):
        converter = HtmlConverter(image_loader, base_image_url="https://example.com/")
        body = converter.parse('<img src="img/a.png" width="100"><img src="img/a.png" style="height:10px">')
        assert [image.get_size() for image in images_in(body)] == [(100, 50), (20, 10)]

    def test_explicit_size(self, image_loader):
        converter = HtmlConverter(image_loader, base_image_url="https://example.com/")
        body = converter.parse('<img src="img/a.png" width="7" height="9">')
        assert images_in(body)[0].get_size() == (7, 9)

    def test_not_found_image_is_dropped(self, image_loader, caplog):
        converter = HtmlConverter(image_loader, base_image_url="https://example.com/")
        with caplog.at_level("WARNING", logger="htmlquill"):
            body = converter.parse('<p>Text <img src="missing.png"></p>')
        paragraph = body.children[0]
        assert [run.text for run in paragraph.runs] == ["Text"]
        assert "Dropping image" in caplog.text

    def test_image_only_paragraph_is_removed(self, image_loader):
        converter = HtmlConverter(image_loader, base_image_url="https://example.com/")
        body = converter.parse('<p><img src="missing.png"></p><p>after</p>')
        assert [p.get_text() for p in body.children] == ["after"]

    def test_unsupported_scheme_is_dropped(self):
        with HtmlConverter() as converter:
            body = converter.parse('<p><img src="ftp://example.com/a.png"></p>')
        assert body.is_empty()

    def test_unreadable_bytes_are_dropped(self, image_loader):
        body = HtmlConverter(image_loader).parse('<img src="https://example.com/broken.png">')
        assert body.is_empty()

    def test_loader_error_is_dropped(self):
        body = HtmlConverter(ErrorLoader()).parse('<p>a<img src="https://example.com/x.png">b</p>')
        assert body.get_text() == "ab"

    def test_data_uri_with_default_loader(self, png_bytes):
        uri = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
        with HtmlConverter(base_image_url="https://example.com/") as converter:
            body = converter.parse(f'<img src="{uri}">')
        assert images_in(body)[0].get_size() == (40, 20)

    def test_identical_sources_fetched_once(self, png_bytes):
        loader = CountingLoader({"https://example.com/a.png": png_bytes})
        converter = HtmlConverter(loader, base_image_url="https://example.com/")
        body = converter.parse('<img src="a.png"><img src="/a.png"><img src="https://example.com/a.png">')
        assert len(images_in(body)) == 3
        assert loader.calls == ["https://example.com/a.png"]

    def test_image_in_cell_dropped(self, image_loader):
        body = HtmlConverter(image_loader).parse('<table><tr><td><img src="nope.png"></td></tr></table>')
        table = body.children[0]
        assert isinstance(table, Table)
        assert table.get_cell(0, 0).is_empty()

    def test_preformatted_keeps_spaces_when_dropping(self, image_loader):
        body = HtmlConverter(image_loader).parse('<pre>a <img src="nope.png"> b</pre>')
        assert body.children[0].get_text() == "a  b"


class TestOptions:
    """Test converter configuration."""

    def test_defaults(self):
        options = ConverterOptions()
        assert options.max_concurrency == 4
        assert options.base_image_url is None
        assert options.cancellation is None

    @pytest.mark.parametrize("value", [0, -1, 1.5])
    def test_invalid_concurrency(self, value):
        with pytest.raises(ConfigurationError):
            ConverterOptions(max_concurrency=value)

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError):
            ConverterOptions(fetch_timeout=0)

    def test_overrides(self):
        base = ConverterOptions(base_image_url="https://a/")
        converter = HtmlConverter(MappingResourceLoader(), base, max_concurrency=2)
        assert converter.options.max_concurrency == 2
        assert converter.options.base_image_url == "https://a/"
        assert base.max_concurrency == 4

    def test_unknown_override(self):
        with pytest.raises(ConfigurationError):
            HtmlConverter(MappingResourceLoader(), colour="red")

    def test_default_loader_uses_options(self):
        converter = HtmlConverter(fetch_timeout=3.0, user_agent="agent/1")
        assert converter.resource_loader.timeout == 3.0
        assert converter.resource_loader.user_agent == "agent/1"

    def test_close_only_owned_loader(self):
        loader = Mock(spec=ResourceLoader)
        HtmlConverter(loader).close()
        loader.close.assert_not_called()


class TestCancellation:
    """Cancellation raises and returns no tree."""

    def test_cancelled_before_parse(self):
        token = CancellationToken()
        token.cancel("early")
        converter = HtmlConverter(MappingResourceLoader(), cancellation=token)
        with pytest.raises(ConversionCancelled) as exc_info:
            converter.parse("<p>x</p>")
        assert exc_info.value.details == "early"

    def test_cancelled_during_image_fetch(self, png_bytes):
        token = CancellationToken()
        converter = HtmlConverter(CancellingLoader(token, png_bytes), cancellation=token)
        with pytest.raises(ConversionCancelled):
            converter.parse('<p><img src="a.png"></p>')

    def test_not_cancelled(self, image_loader):
        token = CancellationToken()
        converter = HtmlConverter(image_loader, cancellation=token)
        assert converter.parse("<p>x</p>").get_text() == "x"
