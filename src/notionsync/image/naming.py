"""Destination naming for localized images.

Images are written to ``<assets_root>/<folder>/<filename>`` where *folder*
is the sanitized document slug and *filename* is the original basename of
the URL.  When that name is taken, ``-1``, ``-2``, ... is inserted before
the extension.  :class:`FolderLocks` serializes name resolution per
folder so that concurrent writers never race on the same suffix.
"""

from __future__ import annotations

import mimetypes
import posixpath
import re
import threading
from pathlib import Path
from urllib.parse import unquote, urlparse

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]')

_CONTENT_TYPE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
    "image/avif": ".avif",
}

DEFAULT_FILENAME = "image"


def extension_for_content_type(content_type: str | None) -> str:
    """Return a file extension (with dot) for a ``Content-Type`` value."""
    if not content_type:
        return ""
    mime = content_type.split(";", 1)[0].strip().lower()
    return _CONTENT_TYPE_EXTENSIONS.get(mime) or mimetypes.guess_extension(mime) or ""


def filename_from_url(url: str, content_type: str | None = None) -> str:
    """Derive the local filename from the last segment of the URL path.

    Query string and fragment are ignored and percent-escapes decoded.  If
    the basename has no extension, one is guessed from *content_type*.
    """
    name = unquote(posixpath.basename(urlparse(url).path))
    name = _UNSAFE_FILENAME_RE.sub("_", name).strip(" .")
    if not name:
        name = DEFAULT_FILENAME
    if not posixpath.splitext(name)[1]:
        name += extension_for_content_type(content_type)
    return name


def candidate_names(filename: str):
    """Yield ``filename``, then ``stem-1.ext``, ``stem-2.ext``, ..."""
    stem, ext = posixpath.splitext(filename)
    yield filename
    counter = 1
    while True:
        yield f"{stem}-{counter}{ext}"
        counter += 1


def next_free_path(folder: Path, filename: str, reserved: set[str] | None = None) -> Path:
    """Return the first candidate path in *folder* that is not taken.

    A name is taken when a file of that name exists or when it is in
    *reserved*.
    """
    reserved = reserved or set()
    for name in candidate_names(filename):
        if name not in reserved and not (folder / name).exists():
            return folder / name
    raise AssertionError("unreachable")  # pragma: no cover


class FolderLocks:
    """A registry of one :class:`threading.Lock` per destination folder."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Path, threading.Lock] = {}

    def get(self, folder: Path) -> threading.Lock:
        key = folder.resolve()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock
