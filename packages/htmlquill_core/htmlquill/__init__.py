"""
HtmlQuill - tolerant HTML to document tree conversion.

Parses (possibly malformed) HTML into a rich-text document tree of
paragraphs, runs, images and tables, and serializes it as
WordprocessingML or JSON.

Quick Start:
    from htmlquill import HtmlConverter, WordMLExporter

    converter = HtmlConverter(base_image_url="https://example.com/")
    body = converter.parse("<p>Hello <b>world</b></p>")
    xml = converter.convert("<p>Hello</p>", WordMLExporter())
"""

from .version import __version__, __version_info__

from .exceptions import (
    HtmlQuillError,
    ConversionCancelled,
    ResourceError,
    ExportError,
    ConfigurationError,
)
from .cancellation import CancellationToken
from .config import ConverterOptions
from .converter import HtmlConverter, convert_html
from .export import BaseExporter, DocumentSink, JSONExporter, WordMLExporter
from .media import DefaultResourceLoader, FetchResult, FetchStatus, MappingResourceLoader, ResourceLoader
from .models import Body, Image, Paragraph, Run, Table, TableCell, TableRow
from .parser import HtmlParser
from .styles import HtmlAttributeCollection, HtmlColor, RunStyle, StyleCascadeEngine, Unit

__all__ = [
    "__version__",
    "__version_info__",
    "HtmlQuillError",
    "ConversionCancelled",
    "ResourceError",
    "ExportError",
    "ConfigurationError",
    "CancellationToken",
    "ConverterOptions",
    "HtmlConverter",
    "convert_html",
    "BaseExporter",
    "DocumentSink",
    "JSONExporter",
    "WordMLExporter",
    "DefaultResourceLoader",
    "FetchResult",
    "FetchStatus",
    "MappingResourceLoader",
    "ResourceLoader",
    "Body",
    "Image",
    "Paragraph",
    "Run",
    "Table",
    "TableCell",
    "TableRow",
    "HtmlParser",
    "HtmlAttributeCollection",
    "HtmlColor",
    "RunStyle",
    "StyleCascadeEngine",
    "Unit",
]
