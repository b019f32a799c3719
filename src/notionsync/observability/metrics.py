"""Metrics hook protocol and no-op default implementation.

notionsync emits counters and timings while it writes documents and
mirrors images.  By default a :class:`NoopMetricsHook` is used.  Any object
satisfying :class:`MetricsHook` can be passed as ``SyncConfig.metrics`` to
route the data points to StatsD, Prometheus, or a test recorder.

Emitted metric names:

* ``notionsync.documents_written_total``  -- counter
* ``notionsync.documents_skipped_total``  -- counter
* ``notionsync.documents_failed_total``   -- counter
* ``notionsync.assets_downloaded_total``  -- counter
* ``notionsync.asset_failures_total``     -- counter
* ``notionsync.download_retries_total``   -- counter
* ``notionsync.document_duration_ms``     -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* is an optional dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
