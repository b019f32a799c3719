"""Inline markdown inside HTML captions.

The block converter emits the text of a ``<summary>`` caption verbatim, and
Jekyll does not render markdown inside raw HTML inline elements.  The small
inline subset authors actually use there is therefore rewritten to HTML
tags:

==================  ===============================
Markdown            HTML
==================  ===============================
`` `X` ``           ``<code>X</code>``
``**X**``           ``<strong>X</strong>``
``*X*``             ``<em>X</em>``
``[text](url)``     ``<a href="url">text</a>``
==================  ===============================

Code spans are converted first and shielded from the emphasis and link
rules; bold runs before italic so that a ``**`` pair is never read as two
italic markers.  The ``&lt;`` / ``&gt;`` / ``&amp;`` entities the converter
introduced are decoded last, after the link rule has seen the URL.

``<code>`` and ``<a>`` elements already present in a caption are left
alone entirely, so converting a converted caption again is a no-op.
"""

from __future__ import annotations

import re

_CODE_RE = re.compile(r"`([^`\n]+)`")
_HTML_SPAN_RE = re.compile(r"<(code|a)\b[^>]*>.*?</\1>", re.IGNORECASE)
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"(?<!\*)\*(?![*\s])([^*\n]+?)(?<![*\s])\*(?!\*)")
_LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")
_ENTITY_RE = re.compile(r"&(lt|gt|amp);")
_CAPTION_RE = re.compile(r"(<summary\b[^>]*>)([\s\S]*?)(</summary>)", re.IGNORECASE)

# Private-use delimiters for shielded spans.
_SHIELD_OPEN = "\ue000"
_SHIELD_CLOSE = "\ue001"
_SHIELD_RE = re.compile(f"{_SHIELD_OPEN}(\\d+){_SHIELD_CLOSE}")
_KEPT_RE = re.compile(f"{_SHIELD_OPEN}k(\\d+){_SHIELD_CLOSE}")

_ENTITIES = {"lt": "<", "gt": ">", "amp": "&"}


def decode_entities(text: str) -> str:
    """Decode ``&lt;``, ``&gt;`` and ``&amp;`` in a single pass.

    ``&amp;lt;`` becomes ``&lt;``, not ``<``.
    """
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(1)], text)


def normalize_inline(text: str) -> str:
    """Convert the caption inline subset of *text* to HTML tags.

    Examples
    --------
    >>> normalize_inline("**hi** and *there* and `code` and [a](http://x)")
    '<strong>hi</strong> and <em>there</em> and <code>code</code> and <a href="http://x">a</a>'
    """
    kept: list[str] = []
    spans: list[str] = []

    def _keep(match: re.Match[str]) -> str:
        kept.append(match.group(0))
        return f"{_SHIELD_OPEN}k{len(kept) - 1}{_SHIELD_CLOSE}"

    def _shield(match: re.Match[str]) -> str:
        spans.append(f"<code>{match.group(1)}</code>")
        return f"{_SHIELD_OPEN}{len(spans) - 1}{_SHIELD_CLOSE}"

    text = _HTML_SPAN_RE.sub(_keep, text)
    text = _CODE_RE.sub(_shield, text)
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    text = _ITALIC_RE.sub(r"<em>\1</em>", text)
    text = _LINK_RE.sub(r'<a href="\2">\1</a>', text)
    text = _SHIELD_RE.sub(lambda m: spans[int(m.group(1))], text)
    text = decode_entities(text)
    return _KEPT_RE.sub(lambda m: kept[int(m.group(1))], text)


def normalize_captions(text: str) -> str:
    """Apply :func:`normalize_inline` to every ``<summary>`` element in *text*."""
    return _CAPTION_RE.sub(
        lambda m: m.group(1) + normalize_inline(m.group(2)) + m.group(3),
        text,
    )
