"""Slug and folder-name helpers."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_]+")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_UNSAFE_FOLDER_RE = re.compile(r"[^A-Za-z0-9_-]")


def slugify(text: str) -> str:
    """Convert a title to a lowercase, hyphen-separated slug.

    Word characters of any script are kept, so non-Latin titles keep a
    readable slug.

    >>> slugify("Hello World")
    'hello-world'
    """
    text = _NON_WORD_RE.sub("", text.lower())
    text = _SEPARATOR_RE.sub("-", text)
    return _HYPHEN_RUN_RE.sub("-", text).strip("-")


def sanitize_folder_name(name: str, fallback: str = "untitled") -> str:
    """Map *name* to a filesystem-safe folder name.

    Characters outside ``[A-Za-z0-9_-]`` become ``-``, hyphen runs
    collapse and leading/trailing hyphens are dropped.  *fallback* is used
    (sanitized the same way) when nothing is left.

    >>> sanitize_folder_name("my post: v2!")
    'my-post-v2'
    """
    folder = _HYPHEN_RUN_RE.sub("-", _UNSAFE_FOLDER_RE.sub("-", name)).strip("-")
    if folder:
        return folder
    if fallback and fallback != name:
        return sanitize_folder_name(fallback, fallback="untitled")
    return "untitled"
