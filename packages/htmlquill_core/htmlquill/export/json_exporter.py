"""
JSON exporter for HtmlQuill document trees.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..models.body import Body
from ..version import __version__
from .base_exporter import BaseExporter

logger = logging.getLogger(__name__)


class JSONExporter(BaseExporter):
    """
    Exports the document tree as JSON.
    """

    format_name = "json"
    file_extension = ".json"

    def __init__(
        self,
        output_path: Optional[Union[str, Path]] = None,
        indent: Optional[int] = 2,
        ensure_ascii: bool = False,
        include_metadata: bool = False,
    ):
        """
        Args:
            output_path: Output file path (string output when ``None``)
            indent: JSON indentation level
            ensure_ascii: Whether to escape non-ASCII characters
            include_metadata: Wrap the tree with generator metadata
        """
        super().__init__(output_path)
        self.indent = indent
        self.ensure_ascii = ensure_ascii
        self.include_metadata = include_metadata

    def export_document_model(self, body: Body) -> Dict[str, Any]:
        """Document tree as a JSON-compatible dictionary."""
        data = body.to_dict()
        if not self.include_metadata:
            return data
        return {
            "metadata": {
                "generator": f"htmlquill {__version__}",
                "created": datetime.now().isoformat(timespec="seconds"),
                "blocks": len(body),
            },
            "document": data,
        }

    def export_to_string(self, body: Body) -> str:
        return json.dumps(self.export_document_model(body), indent=self.indent, ensure_ascii=self.ensure_ascii)
