"""Line-level structural reformatting.

Works on markdown whose code fences and disclosure blocks have already been
replaced by placeholder tokens (see :mod:`notionsync.converter.protect`).
Each line is first classified into a :class:`~notionsync.models.LineKind`;
the rules below are then applied per kind, looking only at the kind of the
next line:

* quote lines are normalized to ``"> " + content``;
* a quoted numbered list that directly follows quoted prose is preceded by
  an empty ``>`` line so that it renders as a list;
* a quote run is followed by exactly one blank line;
* consecutive paragraph lines are kept apart by a hard break (``"hard"``
  style) or a blank line (``"blank"`` style);
* paragraphs and protected blocks are separated from neighbouring quote
  and protected lines by a blank line;
* blank runs collapse to one blank line.

The output is a fixed point: reformatting it again returns it unchanged.
"""

from __future__ import annotations

import re

from notionsync.models import LineKind

from .protect import TOKEN_RE

HARD_BREAK = "  "

_QUOTE_LIST_ITEM_RE = re.compile(r"^\d+\.\s")


def normalize_newlines(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def classify_line(line: str) -> LineKind:
    """Return the :class:`LineKind` of a single line (without newline)."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if line.startswith(">"):
        return LineKind.QUOTE
    if TOKEN_RE.match(stripped):
        return LineKind.PROTECTED
    return LineKind.PARAGRAPH


def normalize_quote_line(line: str) -> str:
    """Rewrite a ``>`` line to exactly ``"> "`` plus its trimmed content."""
    content = line[1:].strip()
    return f"> {content}" if content else ">"


def _quote_content(line: str) -> str:
    return line[1:].strip()


def _normalize_lines(lines: list[str]) -> list[tuple[LineKind, str]]:
    """Classify *lines* and rewrite quote lines in place."""
    items: list[tuple[LineKind, str]] = []
    for line in lines:
        kind = classify_line(line)
        if kind is LineKind.QUOTE:
            line = normalize_quote_line(line)
            content = _quote_content(line)
            if _QUOTE_LIST_ITEM_RE.match(content) and items:
                prev_kind, prev_line = items[-1]
                prev_content = _quote_content(prev_line)
                if (
                    prev_kind is LineKind.QUOTE
                    and prev_content
                    and not _QUOTE_LIST_ITEM_RE.match(prev_content)
                ):
                    items.append((LineKind.QUOTE, ">"))
        elif kind is LineKind.PARAGRAPH:
            line = line.rstrip()
        items.append((kind, line))
    return items


def reformat(text: str, line_break_style: str = "hard") -> str:
    """Apply the structural rules to placeholder-stripped markdown.

    Parameters
    ----------
    text:
        Markdown with protected regions replaced by tokens.
    line_break_style:
        ``"hard"`` appends :data:`HARD_BREAK` to a paragraph line that is
        directly followed by another paragraph line; ``"blank"`` inserts a
        blank line instead.

    Returns
    -------
    str
        The reformatted text, ending in a single newline (or empty).
    """
    items = _normalize_lines(normalize_newlines(text).split("\n"))
    out: list[str] = []

    for i, (kind, line) in enumerate(items):
        if kind is LineKind.BLANK:
            if out and out[-1] != "":
                out.append("")
            continue

        next_kind = items[i + 1][0] if i + 1 < len(items) else None

        if kind is LineKind.PARAGRAPH and next_kind is LineKind.PARAGRAPH:
            if line_break_style == "blank":
                out.extend((line, ""))
            else:
                out.append(line + HARD_BREAK)
            continue

        out.append(line)

        if next_kind is None or next_kind is LineKind.BLANK:
            continue
        if kind is LineKind.QUOTE and next_kind is not LineKind.QUOTE:
            out.append("")
        elif kind is LineKind.PARAGRAPH:
            # next line is a quote or a protected block
            out.append("")
        elif kind is LineKind.PROTECTED:
            out.append("")

    while out and out[-1] == "":
        out.pop()
    return "\n".join(out) + "\n" if out else ""


def collapse_blank_runs(text: str, max_newlines: int = 2) -> str:
    """Collapse runs of more than *max_newlines* newlines.

    Whitespace-only lines inside a run count as blank.
    """
    pattern = re.compile(r"\n(?:[ \t]*\n){%d,}" % max_newlines)
    return pattern.sub("\n" * max_newlines, text)
