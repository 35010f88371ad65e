"""
Export module: document sinks for the HtmlQuill document tree.
"""

from .base_exporter import BaseExporter, DocumentSink
from .json_exporter import JSONExporter
from .wordml_exporter import Relationship, WordMLExporter

__all__ = [
    "BaseExporter",
    "DocumentSink",
    "JSONExporter",
    "Relationship",
    "WordMLExporter",
]
