"""notionsync: Notion database pages to Jekyll posts.

Public re-exports
-----------------

* **Pipeline:** :func:`normalize_markdown`, :class:`DocumentAssembler`,
  :class:`AssetLocalizer`
* **Run loop:** :class:`SyncRunner`, :class:`DocumentSource`
* **Configuration:** :class:`SyncConfig`
* **Errors:** Every :class:`NotionSyncError` subclass and :class:`ErrorCode`
* **Models:** Documents, regions, assets and results

Usage::

    from notionsync import DocumentAssembler, SyncConfig, document_from_page

    config = SyncConfig(author="me")
    document = document_from_page(page, markdown)
    result = DocumentAssembler(config).assemble(document)
"""

from __future__ import annotations

# ── Pipeline ────────────────────────────────────────────────────────────
from notionsync.assembler import DocumentAssembler

# ── Configuration ───────────────────────────────────────────────────────
from notionsync.config import DEFAULT_UPLOAD_HOST_PATTERN, SyncConfig
from notionsync.converter import normalize_markdown

# ── Errors ──────────────────────────────────────────────────────────────
from notionsync.errors import (
    ErrorCode,
    NotionSyncAssetDownloadError,
    NotionSyncAssetError,
    NotionSyncAssetWriteError,
    NotionSyncConfigError,
    NotionSyncError,
    NotionSyncPathConflictError,
    NotionSyncSourceError,
    NotionSyncWriteError,
)
from notionsync.image import AssetDownloader, AssetLocalizer

# ── Models ──────────────────────────────────────────────────────────────
from notionsync.models import (
    AssetReference,
    Document,
    DocumentResult,
    DocumentStatus,
    LineKind,
    LocalAsset,
    NormalizedBody,
    ProtectedRegion,
    RegionKind,
    SyncReport,
    SyncWarning,
)
from notionsync.properties import document_from_page, is_published

# ── Run loop ────────────────────────────────────────────────────────────
from notionsync.sync import DocumentSource, SyncRunner

__all__ = [
    # Pipeline
    "DocumentAssembler",
    "AssetDownloader",
    "AssetLocalizer",
    "normalize_markdown",
    "document_from_page",
    "is_published",
    # Run loop
    "SyncRunner",
    "DocumentSource",
    # Configuration
    "SyncConfig",
    "DEFAULT_UPLOAD_HOST_PATTERN",
    # Errors
    "NotionSyncError",
    "ErrorCode",
    "NotionSyncConfigError",
    "NotionSyncSourceError",
    "NotionSyncAssetError",
    "NotionSyncAssetDownloadError",
    "NotionSyncAssetWriteError",
    "NotionSyncWriteError",
    "NotionSyncPathConflictError",
    # Models
    "Document",
    "ProtectedRegion",
    "RegionKind",
    "LineKind",
    "AssetReference",
    "LocalAsset",
    "NormalizedBody",
    "SyncWarning",
    "DocumentResult",
    "DocumentStatus",
    "SyncReport",
]
