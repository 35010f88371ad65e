"""
Resource loading for images referenced by the markup.

A loader turns a URI into bytes. :class:`DefaultResourceLoader` serves
``data:`` URIs, local files (``file:`` URIs and plain paths) and
``http``/``https`` URLs; every other scheme is reported as unsupported.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Dict, Optional, Union
from urllib.parse import unquote, unquote_to_bytes, urlparse
from urllib.request import url2pathname

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from urllib3.util.retry import Retry

from ..config import DEFAULT_FETCH_TIMEOUT, DEFAULT_USER_AGENT
from ..exceptions import ResourceError

logger = logging.getLogger(__name__)


class FetchStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    UNSUPPORTED_SCHEME = "unsupported_scheme"


@dataclass(frozen=True)
class FetchResult:
    status: FetchStatus
    data: Optional[bytes] = None
    content_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK and self.data is not None

    @classmethod
    def found(cls, data: bytes, content_type: Optional[str] = None) -> "FetchResult":
        return cls(FetchStatus.OK, data, content_type)


NOT_FOUND = FetchResult(FetchStatus.NOT_FOUND)
UNSUPPORTED_SCHEME = FetchResult(FetchStatus.UNSUPPORTED_SCHEME)


class ResourceLoader(ABC):
    """
    Capability fetching the bytes behind a URI.

    ``fetch`` may be a plain method or a coroutine function; it reports a
    missing resource or an unknown scheme through :class:`FetchStatus` and
    raises :class:`ResourceError` for I/O failures.
    """

    @abstractmethod
    def fetch(self, uri: str) -> Union[FetchResult, Awaitable[FetchResult]]:
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the loader."""


class DefaultResourceLoader(ResourceLoader):
    """Loader for ``data:``, ``file:``, plain paths and ``http(s)``."""

    def __init__(
        self,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        max_retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            timeout: Request timeout in seconds for remote resources
            user_agent: User-Agent header sent with remote requests
            max_retries: Retries for transient HTTP failures
            session: Pre-configured session (mostly for tests)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_retries = max_retries
        self._session = session
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    @property
    def session(self) -> requests.Session:
        with self._lock:
            if self._session is None:
                self._session = self._create_session()
            return self._session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({"User-Agent": self.user_agent, "Accept": "image/*,*/*;q=0.8"})
        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=0.3,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        logger.debug(f"Created HTTP session (timeout={self.timeout}s)")
        return session

    def close(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    # ------------------------------------------------------------------
    def fetch(self, uri: str) -> FetchResult:
        uri = uri.strip()
        parsed = urlparse(uri)
        scheme = parsed.scheme.lower()

        if scheme == "data":
            return self._fetch_data(uri)
        if scheme in ("http", "https"):
            return self._fetch_http(uri)
        if scheme == "file":
            return self._fetch_file(Path(url2pathname(unquote(parsed.path))))
        # "C:\images\a.png" parses with a one-letter scheme
        if scheme == "" or (len(scheme) == 1 and scheme.isalpha()):
            return self._fetch_file(Path(uri))

        logger.debug(f"Unsupported scheme {scheme!r} for {uri[:80]!r}")
        return UNSUPPORTED_SCHEME

    def _fetch_data(self, uri: str) -> FetchResult:
        header, separator, payload = uri[5:].partition(",")
        if not separator:
            logger.debug("Malformed data: URI without payload")
            return NOT_FOUND
        parameters = [part.strip() for part in header.split(";")]
        content_type = parameters[0] or "text/plain"
        try:
            if "base64" in (part.lower() for part in parameters[1:]):
                data = base64.b64decode("".join(unquote(payload).split()), validate=True)
            else:
                data = unquote_to_bytes(payload)
        except (binascii.Error, ValueError) as e:
            logger.debug(f"Undecodable data: URI: {e}")
            return NOT_FOUND
        return FetchResult.found(data, content_type)

    def _fetch_file(self, path: Path) -> FetchResult:
        if not path.is_file():
            return NOT_FOUND
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ResourceError(f"Cannot read {path}", uri=str(path), details=str(e)) from e
        content_type, _ = mimetypes.guess_type(path.name)
        return FetchResult.found(data, content_type)

    def _fetch_http(self, uri: str) -> FetchResult:
        try:
            response = self.session.get(uri, timeout=self.timeout)
        except RequestException as e:
            raise ResourceError(f"Request failed for {uri}", uri=uri, details=str(e)) from e
        if response.status_code in (404, 410):
            return NOT_FOUND
        if response.status_code >= 400:
            raise ResourceError(
                f"HTTP {response.status_code} for {uri}",
                uri=uri,
                details=response.reason,
            )
        content_type = response.headers.get("Content-Type")
        if content_type:
            content_type = content_type.split(";")[0].strip()
        return FetchResult.found(response.content, content_type)


class MappingResourceLoader(ResourceLoader):
    """Loader serving resources from an in-memory mapping of URI to bytes."""

    def __init__(self, resources: Optional[Dict[str, bytes]] = None):
        self.resources: Dict[str, bytes] = dict(resources or {})

    def add(self, uri: str, data: bytes) -> None:
        self.resources[uri] = data

    def fetch(self, uri: str) -> FetchResult:
        data = self.resources.get(uri)
        if data is None:
            return NOT_FOUND
        content_type, _ = mimetypes.guess_type(uri)
        return FetchResult.found(data, content_type)
