"""Mirroring of transient remote images into the site's assets folder.

For every distinct upload-host URL in a document:

1. download it (optionally several in parallel);
2. pick a collision-free filename in the document's asset folder and write
   the bytes, in order of first appearance, under the folder's lock;
3. replace every occurrence of the URL with the site path of the local
   copy.

A download or write failure only affects its own image: a warning is
logged and recorded, and the remote URL stays in the text.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from notionsync.config import SyncConfig
from notionsync.errors import NotionSyncAssetError, NotionSyncAssetWriteError
from notionsync.models import AssetReference, Document, LocalAsset, SyncWarning
from notionsync.observability import NoopMetricsHook, get_logger
from notionsync.utils.slug import sanitize_folder_name

from .detect import compile_host_pattern, find_asset_references
from .download import AssetDownloader, DownloadedAsset
from .naming import FolderLocks, filename_from_url, next_free_path

log = get_logger("notionsync.assets")

_Outcome = DownloadedAsset | NotionSyncAssetError


@dataclass
class LocalizationResult:
    """Rewritten texts plus the assets written and warnings raised."""

    text: str
    extra_texts: list[str] = field(default_factory=list)
    assets: dict[str, LocalAsset] = field(default_factory=dict)
    warnings: list[SyncWarning] = field(default_factory=list)


def rewrite_urls(text: str, assets: dict[str, LocalAsset]) -> str:
    """Replace every occurrence of each remote URL with its local path."""
    # Longest first, so a URL that prefixes another cannot clobber it.
    for url in sorted(assets, key=len, reverse=True):
        text = text.replace(url, assets[url].url_path)
    return text


class AssetLocalizer:
    """Download upload-host images of a document and rewrite references.

    Parameters
    ----------
    config:
        Run configuration (assets root and URL prefix, host pattern,
        download concurrency).
    downloader:
        Downloader to use; one is built from *config* when omitted.
    folder_locks:
        Lock registry shared by localizers writing to the same assets root.
    """

    def __init__(
        self,
        config: SyncConfig,
        downloader: AssetDownloader | None = None,
        folder_locks: FolderLocks | None = None,
    ) -> None:
        self._config = config
        self._downloader = downloader or AssetDownloader(config)
        self._locks = folder_locks or FolderLocks()
        self._host_re = compile_host_pattern(config.upload_host_pattern)
        self._metrics = config.metrics or NoopMetricsHook()

    def asset_folder(self, document: Document) -> str:
        return sanitize_folder_name(document.slug, fallback=document.id)

    def localize(
        self,
        text: str,
        document: Document,
        extra_texts: Sequence[str] = (),
    ) -> LocalizationResult:
        """Localize the upload-host images of *text* and *extra_texts*.

        Parameters
        ----------
        text:
            Main (placeholder-stripped) markdown of the document.
        document:
            The owning document; its slug names the asset folder.
        extra_texts:
            Additional texts scanned and rewritten with the same mapping,
            e.g. the disclosure regions.
        """
        refs = find_asset_references([text, *extra_texts], document.slug, self._host_re)
        result = LocalizationResult(text=text, extra_texts=list(extra_texts))
        if not refs:
            return result

        folder = self.asset_folder(document)
        folder_path = Path(self._config.assets_root) / folder

        for ref, outcome in zip(refs, self._download_all(refs)):
            if isinstance(outcome, NotionSyncAssetError):
                self._record_failure(result, document, ref, outcome)
                continue
            try:
                asset = self._store(folder, folder_path, outcome)
            except NotionSyncAssetWriteError as exc:
                self._record_failure(result, document, ref, exc)
                continue
            result.assets[ref.url] = asset
            self._metrics.increment("notionsync.assets_downloaded_total")
            log.debug(
                "Asset localized",
                extra={
                    "extra_fields": {
                        "op": "localize",
                        "document_id": document.id,
                        "url": ref.url,
                        "path": str(asset.path),
                    }
                },
            )

        result.text = rewrite_urls(text, result.assets)
        result.extra_texts = [rewrite_urls(t, result.assets) for t in extra_texts]
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fetch(self, ref: AssetReference) -> _Outcome:
        try:
            return self._downloader.fetch(ref.url)
        except NotionSyncAssetError as exc:
            return exc

    def _download_all(self, refs: list[AssetReference]) -> list[_Outcome]:
        workers = min(self._config.max_concurrent_downloads, len(refs))
        if workers <= 1:
            return [self._fetch(ref) for ref in refs]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self._fetch, refs))

    def _store(self, folder: str, folder_path: Path, downloaded: DownloadedAsset) -> LocalAsset:
        filename = filename_from_url(downloaded.url, downloaded.content_type)
        with self._locks.get(folder_path):
            try:
                folder_path.mkdir(parents=True, exist_ok=True)
                path = next_free_path(folder_path, filename)
                path.write_bytes(downloaded.content)
            except OSError as exc:
                raise NotionSyncAssetWriteError(
                    message=f"Failed to write asset for {downloaded.url}: {exc}",
                    context={"url": downloaded.url, "path": str(folder_path / filename)},
                    cause=exc,
                ) from exc
        return LocalAsset(
            folder=folder,
            filename=path.name,
            path=path,
            url_prefix=self._config.assets_url_prefix,
        )

    def _record_failure(
        self,
        result: LocalizationResult,
        document: Document,
        ref: AssetReference,
        exc: NotionSyncAssetError,
    ) -> None:
        self._metrics.increment("notionsync.asset_failures_total", tags={"code": exc.code})
        log.warning(
            "Asset not localized, keeping remote URL",
            extra={
                "extra_fields": {
                    "op": "localize",
                    "document_id": document.id,
                    "url": ref.url,
                    "error_code": exc.code,
                    "error": exc.message,
                }
            },
        )
        result.warnings.append(
            SyncWarning(
                code="ASSET_NOT_LOCALIZED",
                message=exc.message,
                context={"url": ref.url, "error_code": exc.code},
            )
        )

    def close(self) -> None:
        self._downloader.close()
