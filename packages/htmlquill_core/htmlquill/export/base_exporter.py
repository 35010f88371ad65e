"""
Base exporter for HtmlQuill document trees.

A document sink receives the finished :class:`~htmlquill.models.Body` and
serializes it. Exporters can return the serialized text or write it to a file.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import ExportError
from ..models.body import Body

logger = logging.getLogger(__name__)


class DocumentSink(ABC):
    """Consumer of a finished document tree."""

    @abstractmethod
    def write(self, body: Body) -> Any:
        """Serialize ``body``; the return value is sink specific."""


class BaseExporter(DocumentSink):
    """
    Base class for all exporters.
    """

    format_name = "text"
    file_extension = ".txt"

    def __init__(
        self,
        output_path: Optional[Union[str, Path]] = None,
        export_options: Optional[Dict[str, Any]] = None,
        encoding: str = "utf-8",
    ):
        """
        Initialize base exporter.

        Args:
            output_path: File written by :meth:`write`; when ``None`` the
                serialized string is returned instead
            export_options: Export options
            encoding: Output file encoding
        """
        self.output_path = Path(output_path) if output_path is not None else None
        self.export_options = export_options or {}
        self.encoding = encoding

    def get_export_option(self, key: str, default: Any = None) -> Any:
        return self.export_options.get(key, default)

    def set_export_option(self, key: str, value: Any) -> None:
        self.export_options[key] = value

    # ------------------------------------------------------------------
    def write(self, body: Body) -> Union[str, Path]:
        """
        Export ``body``.

        Returns:
            The output path when one was configured, otherwise the serialized string
        """
        if self.output_path is not None:
            return self.export_to_file(body, self.output_path)
        return self.export_to_string(body)

    @abstractmethod
    def export_to_string(self, body: Body) -> str:
        """Serialize ``body`` to a string."""

    def export_to_file(self, body: Body, file_path: Union[str, Path]) -> Path:
        """
        Serialize ``body`` into ``file_path``.

        Raises:
            ExportError: the file cannot be written
        """
        file_path = Path(file_path)
        content = self.export_to_string(body)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding=self.encoding)
        except OSError as e:
            raise ExportError(f"Cannot write {self.format_name} output to {file_path}", details=str(e)) from e
        logger.info(f"Document exported to {self.format_name}: {file_path}")
        return file_path

    def get_export_info(self) -> Dict[str, Any]:
        return {
            "format": self.format_name,
            "extension": self.file_extension,
            "encoding": self.encoding,
            "options": dict(self.export_options),
        }
