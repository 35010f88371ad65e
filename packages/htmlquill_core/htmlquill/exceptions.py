"""Custom exceptions for HtmlQuill.

Malformed markup never raises: the parser recovers locally. These exceptions
cover the boundaries where a real failure has to reach the caller.
"""

from typing import Optional


class HtmlQuillError(Exception):
    """Base exception for HtmlQuill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConversionCancelled(HtmlQuillError):
    """Raised when a conversion is aborted through its cancellation token."""

    def __init__(self, message: str = "Conversion cancelled", details: Optional[str] = None):
        super().__init__(message, details)


class ResourceError(HtmlQuillError):
    """Exception raised by resource loaders for I/O failures."""

    def __init__(self, message: str, uri: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message, details)
        self.uri = uri


class ExportError(HtmlQuillError):
    """Exception raised when a document sink cannot serialize or write a tree."""

    pass


class ConfigurationError(HtmlQuillError):
    """Exception raised for invalid converter options."""

    pass
