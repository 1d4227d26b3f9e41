"""
Remote stylesheet fetching.

Downloads CSS text over HTTP GET with a per-attempt timeout and a fixed
number of attempts driven by tenacity. Requests run in a worker thread so
the event loop keeps serving queries while a download is in flight.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

import requests
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from ..models.config import FetchConfig

logger = logging.getLogger(__name__)


class FetchErrorKind(Enum):
    """Classification of the final failed attempt"""
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    UNKNOWN = "unknown"


class UnexpectedStatusError(Exception):
    """A response arrived with a status other than 200"""

    def __init__(self, status_code: int):
        super().__init__(f"Unexpected response status \"{status_code}\" while loading css file content")
        self.status_code = status_code


class SourceFetchError(Exception):
    """All attempts to fetch a stylesheet failed"""

    def __init__(self, message: str, url: str, kind: FetchErrorKind, attempts: int):
        super().__init__(message)
        self.url = url
        self.kind = kind
        self.attempts = attempts


class RemoteSourceFetcher:
    """
    Fetches stylesheet text from an absolute URL.

    Features:
    - Hard timeout per attempt, a slow body aborts the attempt
    - Retry without delay, non-200 responses consume an attempt
    - Failure classified as timeout, network, status or unknown
    """

    def __init__(self, config: Optional[FetchConfig] = None):
        self.config = config or FetchConfig()

    @property
    def timeout(self) -> float:
        return self.config.timeout

    @property
    def max_attempts(self) -> int:
        return self.config.max_attempts

    async def fetch(self, url: str) -> str:
        """
        Fetch CSS text.

        Args:
            url: Absolute http(s) URL

        Returns:
            Response body decoded as UTF-8

        Raises:
            SourceFetchError: after the last attempt fails
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_none(),
            retry=retry_if_exception_type(Exception),
            after=self._log_failed_attempt(url),
            reraise=True,
        )

        try:
            return await retrying(self._attempt, url)
        except Exception as e:
            raise self._classify(url, e) from e

    async def _attempt(self, url: str) -> str:
        # The worker thread outlives a timed out attempt until requests gives up on its own
        return await asyncio.wait_for(asyncio.to_thread(self._get, url), self.timeout)

    def _log_failed_attempt(self, url: str) -> Callable[[RetryCallState], None]:
        def log(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            logger.warning(
                f"Fetching \"{url}\" failed (attempt {retry_state.attempt_number}/{self.max_attempts}): "
                f"{error!r}"
            )

        return log

    def _get(self, url: str) -> str:
        """Single blocking GET attempt"""
        response = requests.get(url, timeout=self.timeout)

        if response.status_code != 200:
            raise UnexpectedStatusError(response.status_code)

        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(
                f"Stylesheet from \"{url}\" is not valid UTF-8 ({e.reason} at byte {e.start}); "
                f"invalid bytes were replaced"
            )
            return response.content.decode("utf-8", errors="replace")

    def _classify(self, url: str, error: Exception) -> SourceFetchError:
        # Timeout is checked first: ConnectTimeout is also a ConnectionError
        if isinstance(error, (requests.exceptions.Timeout, asyncio.TimeoutError)):
            return SourceFetchError(
                f"Request to \"{url}\" timed out", url, FetchErrorKind.TIMEOUT, self.max_attempts
            )
        if isinstance(error, requests.exceptions.ConnectionError):
            return SourceFetchError(
                f"Failed to fetch css file from url \"{url}\"", url, FetchErrorKind.NETWORK, self.max_attempts
            )
        if isinstance(error, UnexpectedStatusError):
            return SourceFetchError(
                f"Failed to fetch css file from url \"{url}\": {error}",
                url, FetchErrorKind.HTTP_STATUS, self.max_attempts
            )
        return SourceFetchError(
            f"Caught unknown error while loading css file from \"{url}\"",
            url, FetchErrorKind.UNKNOWN, self.max_attempts
        )
