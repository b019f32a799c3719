"""Detection of images hosted on transient upload URLs.

Notion serves uploaded files through signed URLs that expire after about
an hour.  Only markdown image references (``![alt](url)``) whose URL
matches the configured upload-host pattern are collected; external images
the author linked on purpose are left alone.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from notionsync.config import DEFAULT_UPLOAD_HOST_PATTERN
from notionsync.models import AssetReference

# ![alt](url) or ![alt](url "title"); the URL group stops at whitespace.
_IMAGE_RE = re.compile(r"!\[[^\]\n]*\]\(\s*<?([^\s)>]+)>?(?:\s+\"[^\"]*\")?\s*\)")


def compile_host_pattern(pattern: str | re.Pattern[str] | None = None) -> re.Pattern[str]:
    """Compile *pattern*, defaulting to the Notion upload hosts."""
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern or DEFAULT_UPLOAD_HOST_PATTERN)


def is_upload_url(url: str, pattern: str | re.Pattern[str] | None = None) -> bool:
    """Return ``True`` if *url* is served from a transient upload host."""
    return compile_host_pattern(pattern).fullmatch(url.strip()) is not None


def find_asset_references(
    texts: str | Iterable[str],
    slug: str,
    pattern: str | re.Pattern[str] | None = None,
) -> list[AssetReference]:
    """Collect the distinct upload-host image URLs in *texts*.

    Parameters
    ----------
    texts:
        One markdown string, or several scanned in order.
    slug:
        Slug of the owning document.
    pattern:
        Upload-host regex; defaults to
        :data:`~notionsync.config.DEFAULT_UPLOAD_HOST_PATTERN`.

    Returns
    -------
    list[AssetReference]
        One reference per distinct URL, in order of first appearance.
    """
    host_re = compile_host_pattern(pattern)
    if isinstance(texts, str):
        texts = [texts]

    seen: set[str] = set()
    refs: list[AssetReference] = []
    for text in texts:
        for match in _IMAGE_RE.finditer(text):
            url = match.group(1)
            if url in seen or host_re.fullmatch(url) is None:
                continue
            seen.add(url)
            refs.append(AssetReference(url=url, slug=slug))
    return refs
