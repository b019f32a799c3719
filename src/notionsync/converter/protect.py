"""Verbatim region protection.

Fenced code blocks and ``<details>`` disclosure blocks must survive the
line-oriented reformatting untouched.  :func:`extract` cuts them out of a
markdown string and leaves a placeholder token in their place;
:func:`restore` puts them back.

Code fences are extracted first.  A fence nested inside a disclosure block
therefore becomes a code region whose token sits inside the disclosure
region's text, and :func:`restore` resolves the nesting.

Matching is always anchored on a closing marker: an unterminated fence or
``<details>`` tag is left in the text as ordinary content.
"""

from __future__ import annotations

import re

from notionsync.models import ProtectedRegion, RegionKind

_CODE_FENCE_RE = re.compile(r"```[\s\S]*?```")

_DISCLOSURE_RE = re.compile(r"<details\b[^>]*>[\s\S]*?</details>", re.IGNORECASE)

TOKEN_RE = re.compile(r"\{\{(CODE|DISCLOSURE)_BLOCK_(\d+)\}\}")

# Extraction order matters: fences before disclosure blocks.
_PATTERNS: tuple[tuple[RegionKind, re.Pattern[str]], ...] = (
    (RegionKind.CODE, _CODE_FENCE_RE),
    (RegionKind.DISCLOSURE, _DISCLOSURE_RE),
)


def extract(text: str) -> tuple[str, list[ProtectedRegion]]:
    """Replace protected spans in *text* with placeholder tokens.

    Parameters
    ----------
    text:
        Raw markdown.

    Returns
    -------
    tuple[str, list[ProtectedRegion]]
        The stripped text and the regions in extraction order.  A region's
        ``index`` is its position in the list.
    """
    regions: list[ProtectedRegion] = []

    for kind, pattern in _PATTERNS:

        def _stash(match: re.Match[str], kind: RegionKind = kind) -> str:
            region = ProtectedRegion(kind=kind, index=len(regions), text=match.group(0))
            regions.append(region)
            return region.token

        text = pattern.sub(_stash, text)

    return text, regions


def restore(text: str, regions: list[ProtectedRegion]) -> str:
    """Replace every placeholder token in *text* with its region text.

    Tokens inside restored regions are resolved too.  A token whose index
    is out of range, or whose kind does not match the region at that index,
    is left as-is.  Restoring text without tokens is a no-op.
    """

    def _resolve(match: re.Match[str]) -> str:
        kind_name, index = match.group(1), int(match.group(2))
        if index >= len(regions):
            return match.group(0)
        region = regions[index]
        if region.kind.name != kind_name:
            return match.group(0)
        return region.text

    # Each pass unwraps one nesting level.
    for _ in range(len(regions) + 1):
        restored = TOKEN_RE.sub(_resolve, text)
        if restored == text:
            break
        text = restored
    return text


def find_unresolved_tokens(text: str) -> list[str]:
    """Return the placeholder tokens still present in *text*."""
    return [m.group(0) for m in TOKEN_RE.finditer(text)]
