"""HTTP download of remote images.

:class:`AssetDownloader` wraps an :class:`httpx.Client` and fetches one
URL at a time with the retry policy of :mod:`notionsync.utils.retries`:

1. ``2xx`` -- return the body and ``Content-Type``.
2. ``429`` / ``5xx`` / timeout / network error -- back off and retry.
3. Any other status, or retries exhausted -- raise
   :class:`~notionsync.errors.NotionSyncAssetDownloadError`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx

from notionsync.config import SyncConfig
from notionsync.errors import NotionSyncAssetDownloadError
from notionsync.observability import NoopMetricsHook, get_logger
from notionsync.utils.retries import compute_backoff, parse_retry_after, should_retry

log = get_logger("notionsync.assets")


@dataclass(frozen=True)
class DownloadedAsset:
    """Body and declared content type of a downloaded image."""

    url: str
    content: bytes
    content_type: str | None = None


class AssetDownloader:
    """Synchronous image downloader with retries.

    Parameters
    ----------
    config:
        Run configuration (timeouts, retry knobs, proxy, metrics).
    client:
        Optional pre-built :class:`httpx.Client`, e.g. one using
        :class:`httpx.MockTransport` in tests.  A client passed in is not
        closed by :meth:`close`.
    sleep:
        Function used to wait between attempts.
    """

    def __init__(
        self,
        config: SyncConfig,
        client: httpx.Client | None = None,
        sleep: Any = time.sleep,
    ) -> None:
        self._config = config
        self._metrics = config.metrics or NoopMetricsHook()
        self._sleep = sleep
        self._owns_client = client is None
        if client is None:
            client_kwargs: dict[str, Any] = {
                "timeout": config.download_timeout_seconds,
                "follow_redirects": True,
            }
            if config.http_proxy:
                client_kwargs["proxy"] = config.http_proxy
            client = httpx.Client(**client_kwargs)
        self._client = client

    def fetch(self, url: str) -> DownloadedAsset:
        """Download *url* and return its body.

        Raises
        ------
        NotionSyncAssetDownloadError
            On a non-retryable status or when all attempts failed.
        """
        max_attempts = self._config.retry_max_attempts
        for attempt in range(max_attempts):
            try:
                response = self._client.get(url)
            except httpx.HTTPError as exc:
                if not should_retry(None, exc, attempt, max_attempts):
                    raise NotionSyncAssetDownloadError(
                        message=f"Failed to download {url}: {exc}",
                        context={"url": url, "attempts": attempt + 1},
                        cause=exc,
                    ) from exc
                self._back_off(url, attempt, reason="network_error", error=str(exc))
                continue

            if response.is_success:
                return DownloadedAsset(
                    url=url,
                    content=response.content,
                    content_type=response.headers.get("content-type"),
                )

            status = response.status_code
            if not should_retry(status, None, attempt, max_attempts):
                raise NotionSyncAssetDownloadError(
                    message=f"Failed to download {url}: HTTP {status}",
                    context={"url": url, "status_code": status, "attempts": attempt + 1},
                )
            self._back_off(
                url,
                attempt,
                reason=f"http_{status}",
                retry_after=parse_retry_after(response),
            )

        # max_attempts >= 1 and the last attempt always raises above.
        raise AssertionError("unreachable")  # pragma: no cover

    def _back_off(
        self,
        url: str,
        attempt: int,
        reason: str,
        retry_after: float | None = None,
        error: str | None = None,
    ) -> None:
        delay = compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
            retry_after=retry_after,
        )
        self._metrics.increment("notionsync.download_retries_total", tags={"reason": reason})
        log.debug(
            "Retrying download",
            extra={
                "extra_fields": {
                    "op": "download",
                    "url": url,
                    "attempt": attempt + 1,
                    "reason": reason,
                    "error": error,
                    "delay_seconds": delay,
                }
            },
        )
        self._sleep(delay)

    def close(self) -> None:
        """Close the underlying client if this downloader created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> AssetDownloader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
