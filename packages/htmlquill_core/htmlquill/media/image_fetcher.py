"""
Bounded concurrent fetching of image resources.

Fetches run on a thread pool; results are stored by position so callers see
them in source order regardless of completion order. Identical URIs are
fetched once.
"""

import asyncio
import inspect
import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Awaitable, Dict, List, Optional, Sequence

from ..cancellation import CancellationToken
from ..config import DEFAULT_MAX_CONCURRENCY
from ..exceptions import ConfigurationError, ConversionCancelled, HtmlQuillError
from .resource_loader import FetchResult, ResourceLoader

logger = logging.getLogger(__name__)


async def _await_result(awaitable: Awaitable[FetchResult]) -> FetchResult:
    return await awaitable


class ImageFetchPool:
    """
    Thread pool fetching URIs through a :class:`ResourceLoader`.

    A loader returning an awaitable is driven to completion with
    :func:`asyncio.run` inside the worker thread.
    """

    def __init__(
        self,
        loader: ResourceLoader,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        cancellation: Optional[CancellationToken] = None,
        poll_interval: float = 0.05,
    ):
        """
        Args:
            loader: Resource loader used by the workers
            max_concurrency: Maximum number of concurrent fetches
            cancellation: Token checked before submission, while waiting and in workers
            poll_interval: Seconds between cancellation checks while waiting
        """
        if max_concurrency < 1:
            raise ConfigurationError("max_concurrency must be a positive integer", details=repr(max_concurrency))
        self.loader = loader
        self.max_concurrency = max_concurrency
        self.cancellation = cancellation
        self.poll_interval = poll_interval

    # ------------------------------------------------------------------
    def fetch_all(self, uris: Sequence[str]) -> List[Optional[FetchResult]]:
        """
        Fetch every URI.

        Returns:
            One entry per input position: the loader's :class:`FetchResult`, or
            ``None`` when the fetch failed with an error.

        Raises:
            ConversionCancelled: the token was cancelled before all fetches ended
        """
        self._raise_if_cancelled()
        unique = list(dict.fromkeys(uris))
        if not unique:
            return []

        results: Dict[str, Optional[FetchResult]] = {}
        workers = min(self.max_concurrency, len(unique))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="htmlquill-fetch")
        logger.debug(f"ImageFetchPool: fetching {len(unique)} resources with {workers} workers")
        try:
            futures: Dict[Future, str] = {}
            for uri in unique:
                self._raise_if_cancelled()
                futures[executor.submit(self._fetch_one, uri)] = uri

            pending = set(futures)
            while pending:
                done, pending = wait(pending, timeout=self.poll_interval, return_when=FIRST_COMPLETED)
                for future in done:
                    results[futures[future]] = future.result()
                self._raise_if_cancelled()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return [results[uri] for uri in uris]

    # ------------------------------------------------------------------
    def _fetch_one(self, uri: str) -> Optional[FetchResult]:
        """Runs in a worker thread."""
        self._raise_if_cancelled()
        try:
            result: Any = self.loader.fetch(uri)
            if inspect.isawaitable(result):
                result = asyncio.run(_await_result(result))
        except ConversionCancelled:
            raise
        except HtmlQuillError as e:
            logger.warning(f"ImageFetchPool: failed to fetch {uri[:80]!r}: {e}")
            return None
        except Exception as e:
            logger.warning(f"ImageFetchPool: loader error for {uri[:80]!r}: {e}", exc_info=True)
            return None
        self._raise_if_cancelled()
        return result

    def _raise_if_cancelled(self) -> None:
        if self.cancellation is not None:
            self.cancellation.raise_if_cancelled()
