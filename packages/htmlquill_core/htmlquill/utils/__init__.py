"""
Utility helpers for HtmlQuill.
"""

from .rich_logger import RichLogger, setup_logging

__all__ = ["RichLogger", "setup_logging"]
