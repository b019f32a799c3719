"""Markdown normalization stages.

Public API:

- :func:`extract` / :func:`restore` -- protect code fences and disclosure blocks.
- :func:`reformat` -- quote, paragraph and blank-line rules.
- :func:`normalize_inline` / :func:`normalize_captions` -- caption inline markup.
- :func:`finish_disclosure` / :func:`finish_regions` -- disclosure cleanup.
- :func:`normalize_markdown` -- the whole pipeline for one document.
"""

from notionsync.converter.disclosure import finish_disclosure, finish_regions
from notionsync.converter.inline_html import normalize_captions, normalize_inline
from notionsync.converter.pipeline import normalize_markdown
from notionsync.converter.protect import extract, find_unresolved_tokens, restore
from notionsync.converter.reformat import classify_line, reformat

__all__ = [
    "classify_line",
    "extract",
    "find_unresolved_tokens",
    "finish_disclosure",
    "finish_regions",
    "normalize_captions",
    "normalize_inline",
    "normalize_markdown",
    "reformat",
    "restore",
]
