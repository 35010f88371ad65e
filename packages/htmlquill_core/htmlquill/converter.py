"""
HTML to document tree conversion.

:class:`HtmlConverter` parses markup into a :class:`~htmlquill.models.Body`,
fetches the images the markup references and hands the finished tree to a
document sink.
"""

from __future__ import annotations

import codecs
import logging
from typing import IO, Any, List, Optional, Union
from urllib.parse import urljoin, urlparse

from .config import ConverterOptions
from .exceptions import ConversionCancelled
from .media.image_fetcher import ImageFetchPool
from .media.image_info import display_size, read_image_info
from .media.resource_loader import DefaultResourceLoader, FetchResult, ResourceLoader
from .models.body import Body
from .parser.html_parser import HtmlParser, ImageSlot

logger = logging.getLogger(__name__)

Markup = Union[str, bytes, bytearray, IO[str], IO[bytes]]

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def decode_markup(markup: Markup) -> str:
    """
    Turn the accepted input types into text.

    Bytes are decoded by BOM (UTF-8, UTF-16) and default to UTF-8; undecodable
    sequences are replaced rather than raising.
    """
    if hasattr(markup, "read"):
        markup = markup.read()
    if isinstance(markup, str):
        return markup
    if isinstance(markup, (bytes, bytearray)):
        data = bytes(markup)
        for bom, encoding in _BOMS:
            if data.startswith(bom):
                return data.decode(encoding, errors="replace")
        return data.decode("utf-8", errors="replace")
    raise TypeError(f"Unsupported markup type: {type(markup).__name__}")


def resolve_image_uri(src: str, base_image_url: Optional[str]) -> str:
    """Resolve a relative ``src`` against ``base_image_url``; absolute URIs are kept."""
    src = src.strip()
    if not base_image_url:
        return src
    # any scheme, or a drive letter ("C:\\images\\a.png")
    if urlparse(src).scheme:
        return src
    return urljoin(base_image_url, src)


class HtmlConverter:
    """
    Converts HTML markup into a document tree.

    Example:
        >>> converter = HtmlConverter(base_image_url="https://example.com/")
        >>> body = converter.parse("<p>Hello <b>world</b></p>")
        >>> converter.convert("<p>Hello</p>", JSONExporter())
    """

    def __init__(
        self,
        resource_loader: Optional[ResourceLoader] = None,
        options: Optional[ConverterOptions] = None,
        **overrides: Any,
    ):
        """
        Args:
            resource_loader: Loader for image bytes; defaults to
                :class:`DefaultResourceLoader` built from the options
            options: Conversion options
            **overrides: Individual :class:`ConverterOptions` fields
        """
        options = options or ConverterOptions()
        if overrides:
            options = options.with_overrides(**overrides)
        self.options = options
        self._owns_loader = resource_loader is None
        self.resource_loader = resource_loader or DefaultResourceLoader(
            timeout=options.fetch_timeout,
            user_agent=options.user_agent,
        )

    # ------------------------------------------------------------------
    def parse(self, markup: Markup) -> Body:
        """
        Parse markup and bind its images.

        Raises:
            ConversionCancelled: the options' cancellation token was cancelled
        """
        self._raise_if_cancelled()
        text = decode_markup(markup)
        result = HtmlParser(text).parse()
        self._raise_if_cancelled()
        if result.images:
            self._bind_images(result.images)
        self._raise_if_cancelled()
        return result.body

    def convert(self, markup: Markup, sink) -> Any:
        """Parse markup and hand the finished tree to ``sink``."""
        body = self.parse(markup)
        return sink.write(body)

    def close(self) -> None:
        if self._owns_loader:
            self.resource_loader.close()

    def __enter__(self) -> "HtmlConverter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    def _raise_if_cancelled(self) -> None:
        token = self.options.cancellation
        if token is not None and token.cancelled:
            raise ConversionCancelled(details=token.reason)

    def _bind_images(self, slots: List[ImageSlot]) -> None:
        uris = []
        for slot in slots:
            uri = resolve_image_uri(slot.image.src, self.options.base_image_url)
            slot.image.resolved_uri = uri
            uris.append(uri)

        pool = ImageFetchPool(
            self.resource_loader,
            max_concurrency=self.options.max_concurrency,
            cancellation=self.options.cancellation,
        )
        results = pool.fetch_all(uris)

        dropped = 0
        for slot, result in zip(slots, results):
            if not self._bind_image(slot, result):
                _drop_image(slot)
                dropped += 1
        logger.debug(f"Bound {len(slots) - dropped} images, dropped {dropped}")

    def _bind_image(self, slot: ImageSlot, result: Optional[FetchResult]) -> bool:
        image = slot.image
        uri = image.resolved_uri or image.src
        if result is None:
            return False
        if not result.ok:
            logger.warning(f"Dropping image {uri[:80]!r}: {result.status.value}")
            return False
        info = read_image_info(result.data)
        if info is None:
            logger.warning(f"Dropping image {uri[:80]!r}: not a readable image")
            return False
        image.set_data(result.data, info.content_type or result.content_type)
        width, height = display_size(info, image.requested_width, image.requested_height)
        image.set_size(width, height)
        return True


def _drop_image(slot: ImageSlot) -> None:
    """Remove an image run, and its paragraph when nothing else remains."""
    paragraph = slot.paragraph
    paragraph.remove_run(slot.run)
    if not paragraph.preserve_space:
        paragraph.strip_whitespace()
    if paragraph.is_empty():
        slot.container.remove_child(paragraph)


def convert_html(
    markup: Markup,
    sink=None,
    resource_loader: Optional[ResourceLoader] = None,
    options: Optional[ConverterOptions] = None,
    **overrides: Any,
) -> Any:
    """
    One-shot conversion.

    Returns the :class:`Body` when no sink is given, otherwise whatever the
    sink's ``write`` returns.
    """
    with HtmlConverter(resource_loader, options, **overrides) as converter:
        if sink is None:
            return converter.parse(markup)
        return converter.convert(markup, sink)
