"""HTTP download of the playlist feed with fixed-delay retries."""

from __future__ import annotations

import logging
import time
from typing import Mapping

import httpx

from ..errors import PlaylistFetchError

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRY_DELAY = 1.0


class PlaylistClient:
    """Fetches playlist text over HTTP(S).

    Every attempt is a fresh GET with its own timeout; failed attempts are
    followed by a fixed delay. Any non-2xx status, transport error or timeout
    counts as a failed attempt. Redirects are not followed, so a 3xx
    response fails like any other non-2xx status.
    """

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: float = DEFAULT_TIMEOUT,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.retry_delay = retry_delay
        self._client = httpx.Client(
            timeout=timeout,
            headers=dict(headers or {}),
            transport=transport,
        )

    def fetch_text(self, url: str) -> str:
        """Return the response body of ``url``.

        Raises:
            PlaylistFetchError: When every attempt failed.
        """
        last_exception: Exception | None = None
        last_status: int | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self._client.get(url)
                if not 200 <= response.status_code < 300:
                    last_status = response.status_code
                    raise PlaylistFetchError(
                        f"HTTP {response.status_code}: {response.reason_phrase}",
                        attempts=attempt,
                        status_code=response.status_code,
                    )
                return response.text
            except (httpx.HTTPError, PlaylistFetchError) as exc:
                last_exception = exc
                LOGGER.warning("Playlist request failed (attempt %d/%d): %s", attempt, self.max_attempts, exc)
                if attempt < self.max_attempts:
                    time.sleep(self.retry_delay)

        raise PlaylistFetchError(
            f"Failed to fetch {url} after {self.max_attempts} attempts: {last_exception}",
            attempts=self.max_attempts,
            status_code=last_status,
        ) from last_exception

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> PlaylistClient:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def fetch_with_retry(
    url: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    timeout: float = DEFAULT_TIMEOUT,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    headers: Mapping[str, str] | None = None,
) -> str:
    """One-shot download of ``url`` using a short-lived :class:`PlaylistClient`."""
    with PlaylistClient(
        max_attempts=max_attempts,
        timeout=timeout,
        retry_delay=retry_delay,
        headers=headers,
    ) as client:
        return client.fetch_text(url)
