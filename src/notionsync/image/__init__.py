"""Image pipeline for detecting, downloading, naming and localizing assets.

Exports
-------
find_asset_references
    Collect upload-host image URLs from markdown.
filename_from_url / next_free_path
    Derive a local filename and resolve collisions.
AssetDownloader
    httpx-based downloader with retries.
AssetLocalizer
    Download a document's images and rewrite its references.
"""

from .detect import find_asset_references, is_upload_url
from .download import AssetDownloader, DownloadedAsset
from .localize import AssetLocalizer, LocalizationResult, rewrite_urls
from .naming import FolderLocks, filename_from_url, next_free_path

__all__ = [
    "AssetDownloader",
    "AssetLocalizer",
    "DownloadedAsset",
    "FolderLocks",
    "LocalizationResult",
    "filename_from_url",
    "find_asset_references",
    "is_upload_url",
    "next_free_path",
    "rewrite_urls",
]
