"""
Models module for the HTML document tree.

This module contains the node classes the parser builds and the
document sinks consume.
"""

from .base import Models
from .body import Body
from .paragraph import Paragraph
from .run import Run, BREAK_LINE
from .image import Image
from .table import Table, TableRow, TableCell

__all__ = [
    "Models",
    "Body",
    "Paragraph",
    "Run",
    "BREAK_LINE",
    "Image",
    "Table",
    "TableRow",
    "TableCell",
]
