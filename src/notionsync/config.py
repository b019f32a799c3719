"""Run configuration for notionsync.

:class:`SyncConfig` is a dataclass that captures every tuneable knob of a
sync run.  The only values without a usable default are the Notion
``token`` and the ``database_ids`` to sync, which the run loop needs but
the normalization pipeline does not.

:data:`DEFAULT_UPLOAD_HOST_PATTERN` matches the transient, signed URLs
Notion hands out for uploaded files.  Those URLs expire after about an
hour, so images behind them must be mirrored locally.
"""

from __future__ import annotations

import dataclasses
import os
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from notionsync.errors import NotionSyncConfigError

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_UPLOAD_HOST_PATTERN: str = (
    r"https://(?:"
    r"prod-files-secure\.s3\.[a-z0-9-]+\.amazonaws\.com"
    r"|s3\.[a-z0-9-]+\.amazonaws\.com/secure\.notion-static\.com"
    r"|file\.notion\.so"
    r")/[^\s)\"'<>]+"
)
"""Regex for Notion's temporary upload hosts (S3 buckets and file proxy)."""

DEFAULT_AUTHOR: str = "frombunny"


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class SyncConfig:
    """Complete configuration for a sync run.

    Parameters
    ----------
    token:
        Notion integration token.  Never logged.
    database_ids:
        Source collections to sync, processed in order.
    author:
        Value of the ``author`` front-matter key.
    posts_root:
        Directory that receives the post files.
    assets_root:
        Directory that receives downloaded images.
    assets_url_prefix:
        Site path under which ``assets_root`` is served.
    upload_host_pattern:
        Regex matching image URLs that must be localized.
    line_break_style:
        How consecutive paragraph lines are kept apart.

        * ``"hard"`` -- append a markdown hard break (two spaces).
        * ``"blank"`` -- insert a blank line (separate paragraphs).
    duplicate_path_policy:
        What to do when two documents of one run resolve to the same file.

        * ``"suffix"`` -- append ``-1``, ``-2``, ... to the slug.
        * ``"raise"`` -- fail the later document.
        * ``"overwrite"`` -- last write wins.
    max_concurrent_downloads:
        Number of parallel image downloads per document.
    download_timeout_seconds:
        HTTP timeout for one image download.
    retry_max_attempts:
        Total attempts per image for retryable failures.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Randomize backoff intervals between 50 % and 100 %.
    http_proxy:
        Optional HTTP/HTTPS proxy URL for downloads.
    metrics:
        Optional :class:`~notionsync.observability.MetricsHook`.
    """

    # ── Source ──────────────────────────────────────────────────────────
    token: str = ""

    database_ids: list[str] = field(default_factory=list)

    # ── Output ──────────────────────────────────────────────────────────
    author: str = DEFAULT_AUTHOR

    posts_root: str = "_posts"

    assets_root: str = "assets/images"

    assets_url_prefix: str = "/assets/images"

    # ── Normalization ───────────────────────────────────────────────────
    upload_host_pattern: str = DEFAULT_UPLOAD_HOST_PATTERN

    line_break_style: Literal["hard", "blank"] = "hard"

    duplicate_path_policy: Literal["suffix", "raise", "overwrite"] = "suffix"

    # ── Downloads ───────────────────────────────────────────────────────
    max_concurrent_downloads: int = 1

    download_timeout_seconds: float = 30.0

    retry_max_attempts: int = 3

    retry_base_delay: float = 1.0

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.line_break_style not in ("hard", "blank"):
            raise NotionSyncConfigError(
                f"line_break_style must be 'hard' or 'blank', got {self.line_break_style!r}",
                context={"field": "line_break_style", "value": self.line_break_style},
            )
        if self.duplicate_path_policy not in ("suffix", "raise", "overwrite"):
            raise NotionSyncConfigError(
                "duplicate_path_policy must be 'suffix', 'raise' or 'overwrite', "
                f"got {self.duplicate_path_policy!r}",
                context={"field": "duplicate_path_policy", "value": self.duplicate_path_policy},
            )
        try:
            re.compile(self.upload_host_pattern)
        except re.error as exc:
            raise NotionSyncConfigError(
                f"upload_host_pattern is not a valid regex: {exc}",
                context={"field": "upload_host_pattern", "value": self.upload_host_pattern},
                cause=exc,
            ) from exc

        if self.max_concurrent_downloads < 1:
            raise NotionSyncConfigError(
                f"max_concurrent_downloads must be >= 1, got {self.max_concurrent_downloads}",
                context={"field": "max_concurrent_downloads"},
            )
        if self.download_timeout_seconds <= 0:
            raise NotionSyncConfigError(
                f"download_timeout_seconds must be > 0, got {self.download_timeout_seconds}",
                context={"field": "download_timeout_seconds"},
            )
        if self.retry_max_attempts < 1:
            raise NotionSyncConfigError(
                f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}",
                context={"field": "retry_max_attempts"},
            )
        if self.retry_base_delay < 0 or self.retry_max_delay < 0:
            raise NotionSyncConfigError(
                "retry delays must be >= 0",
                context={"field": "retry_base_delay"},
            )

        self.assets_url_prefix = "/" + self.assets_url_prefix.strip("/")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> SyncConfig:
        """Build a config from ``NOTION_TOKEN`` and ``NOTION_DATABASE_IDS``.

        ``NOTION_DATABASE_IDS`` is a comma-separated list.  The optional
        ``NOTIONSYNC_AUTHOR`` overrides the front-matter author.  Keyword
        *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ
        token = env.get("NOTION_TOKEN", "")
        if not token:
            raise NotionSyncConfigError(
                "NOTION_TOKEN is not set",
                context={"field": "token"},
            )
        ids = [part.strip() for part in env.get("NOTION_DATABASE_IDS", "").split(",")]
        values: dict[str, Any] = {
            "token": token,
            "database_ids": [i for i in ids if i],
        }
        if env.get("NOTIONSYNC_AUTHOR"):
            values["author"] = env["NOTIONSYNC_AUTHOR"]
        values.update(overrides)
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"SyncConfig({', '.join(parts)})"
