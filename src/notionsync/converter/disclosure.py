"""Finishing pass for ``<details>`` disclosure blocks.

Disclosure blocks are protected from the structural reformatter, so they
get their own cleanup here.  Jekyll's kramdown only parses markdown inside
a raw HTML block when the block carries ``markdown="1"``; the converter also
leaves backslash escapes and HTML entities in the block body that would
otherwise show up literally.

Fenced code blocks nested in a disclosure block are still placeholder
tokens at this point and pass through byte-identical.
"""

from __future__ import annotations

import dataclasses
import re

from notionsync.models import ProtectedRegion, RegionKind

from .inline_html import decode_entities, normalize_captions
from .reformat import collapse_blank_runs

MARKDOWN_ATTRIBUTE = 'markdown="1"'

_OPEN_TAG_RE = re.compile(r"<details\b([^>]*)>", re.IGNORECASE)
_MARKDOWN_ATTR_RE = re.compile(r"\bmarkdown\s*=", re.IGNORECASE)
_CAPTION_END_RE = re.compile(r"</summary>(?:[ \t]*\n)*", re.IGNORECASE)
_ESCAPED_MARKER_RE = re.compile(r"\\([*_])")


def ensure_markdown_attribute(block: str) -> str:
    """Add ``markdown="1"`` to the opening ``<details>`` tag if missing."""

    def _inject(match: re.Match[str]) -> str:
        attrs = match.group(1)
        if _MARKDOWN_ATTR_RE.search(attrs):
            return match.group(0)
        return f"<details{attrs.rstrip()} {MARKDOWN_ATTRIBUTE}>"

    return _OPEN_TAG_RE.sub(_inject, block, count=1)


def unescape_body(text: str) -> str:
    """Drop backslashes before ``*``/``_`` and decode basic HTML entities."""
    return decode_entities(_ESCAPED_MARKER_RE.sub(r"\1", text))


def finish_disclosure(block: str) -> str:
    """Return the finished form of one ``<details>...</details>`` block.

    Applying it to an already finished block returns the block unchanged.
    """
    block = ensure_markdown_attribute(block)
    block = normalize_captions(block)

    caption_end = _CAPTION_END_RE.search(block)
    if caption_end is not None:
        head = block[: caption_end.start()] + "</summary>\n\n"
        body = block[caption_end.end():]
    else:
        open_tag = _OPEN_TAG_RE.search(block)
        split = open_tag.end() if open_tag is not None else 0
        head, body = block[:split], block[split:]

    return collapse_blank_runs(head + unescape_body(body))


def finish_regions(regions: list[ProtectedRegion]) -> list[ProtectedRegion]:
    """Finish every disclosure region, in extraction order.

    Code regions are returned unchanged.
    """
    return [
        dataclasses.replace(region, text=finish_disclosure(region.text))
        if region.kind is RegionKind.DISCLOSURE
        else region
        for region in regions
    ]
