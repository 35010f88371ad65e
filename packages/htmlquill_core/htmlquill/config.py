"""
Converter configuration.

Options recognized by :class:`htmlquill.converter.HtmlConverter`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from .cancellation import CancellationToken
from .exceptions import ConfigurationError

DEFAULT_MAX_CONCURRENCY = 4
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "htmlquill"


@dataclass
class ConverterOptions:
    """
    Options for a conversion.

    Attributes:
        base_image_url: Base used to resolve relative image ``src`` values
        max_concurrency: Upper bound on parallel image fetches
        cancellation: Token that aborts the conversion when cancelled
        fetch_timeout: Per-request timeout (seconds) of the default loader
        user_agent: User-Agent header sent by the default loader
    """

    base_image_url: Optional[str] = None
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    cancellation: Optional[CancellationToken] = None
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not isinstance(self.max_concurrency, int) or self.max_concurrency < 1:
            raise ConfigurationError(
                "max_concurrency must be a positive integer", details=repr(self.max_concurrency)
            )
        if self.fetch_timeout is not None and self.fetch_timeout <= 0:
            raise ConfigurationError("fetch_timeout must be positive", details=repr(self.fetch_timeout))

    def with_overrides(self, **overrides: Any) -> "ConverterOptions":
        """Return a copy with the given fields replaced (unknown names raise)."""
        unknown = [name for name in overrides if name not in self.__dataclass_fields__]
        if unknown:
            raise ConfigurationError("Unknown converter option", details=", ".join(sorted(unknown)))
        return replace(self, **overrides)
