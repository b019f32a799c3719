"""Shared test fixtures for the notionsync test suite."""

from __future__ import annotations

from datetime import date
from typing import Any

import httpx
import pytest

from notionsync.config import SyncConfig
from notionsync.image.download import AssetDownloader
from notionsync.image.localize import AssetLocalizer
from notionsync.models import Document

UPLOAD_HOST = "https://prod-files-secure.s3.us-west-2.amazonaws.com"


def _upload_url(name: str, folder: str = "a1b2c3") -> str:
    """A signed Notion upload URL ending in *name*."""
    return (
        f"{UPLOAD_HOST}/ws-1234/{folder}/{name}"
        "?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Expires=3600"
    )


def _make_document(body: str = "", **overrides: Any) -> Document:
    values: dict[str, Any] = {
        "id": "page-1",
        "title": "Hello World",
        "slug": "hello-world",
        "date": date(2024, 1, 1),
        "categories": ("General",),
        "tags": (),
        "body": body,
    }
    values.update(overrides)
    return Document(**values)


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> list[str]:
        return [i["name"] for i in self.increments]


@pytest.fixture
def config(tmp_path) -> SyncConfig:
    """Test configuration writing under a temporary directory."""
    return SyncConfig(
        token="secret_test_token_1234",
        database_ids=["db-1"],
        author="tester",
        posts_root=str(tmp_path / "_posts"),
        assets_root=str(tmp_path / "assets" / "images"),
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
    )


@pytest.fixture
def image_server():
    """A MockTransport handler serving fake image bytes.

    ``image_server.fail`` holds URL substrings answered with HTTP 404;
    ``image_server.requests`` records every requested URL.
    """

    class _Server:
        def __init__(self) -> None:
            self.fail: set[str] = set()
            self.requests: list[str] = []

        def __call__(self, request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            self.requests.append(url)
            if any(part in url for part in self.fail):
                return httpx.Response(404, content=b"not found")
            return httpx.Response(
                200,
                content=f"bytes of {request.url.path}".encode(),
                headers={"content-type": "image/png"},
            )

    return _Server()


@pytest.fixture
def downloader(config: SyncConfig, image_server) -> AssetDownloader:
    client = httpx.Client(transport=httpx.MockTransport(image_server))
    return AssetDownloader(config, client=client, sleep=lambda _: None)


@pytest.fixture
def localizer(config: SyncConfig, downloader: AssetDownloader) -> AssetLocalizer:
    return AssetLocalizer(config, downloader=downloader)


@pytest.fixture
def upload_url():
    """Factory for signed Notion upload URLs: ``upload_url("img.png")``."""
    return _upload_url


@pytest.fixture
def make_document():
    """Factory for :class:`Document` with overridable fields."""
    return _make_document


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()
