"""Jekyll front matter.

The metadata block is YAML between ``---`` fences, written with
:func:`yaml.safe_dump` so that titles containing ``:``, quotes or ``#``
are escaped and read back identically by :func:`parse_front_matter`.
"""

from __future__ import annotations

from typing import Any

import yaml

from notionsync.models import Document

DELIMITER = "---"


def build_front_matter(document: Document, author: str) -> dict[str, Any]:
    """Return the front-matter mapping of *document*.

    ``categories`` holds the whole category path as one entry, so Jekyll
    keeps nested categories together (``["JAVA/Basics"]``).
    """
    return {
        "layout": "post",
        "title": document.title,
        "date": document.date,
        "categories": [document.category_path],
        "tags": list(document.tags),
        "author": author,
    }


def render_post(front_matter: dict[str, Any], body: str) -> str:
    """Serialize *front_matter* and prepend it to *body*."""
    fm_text = yaml.safe_dump(
        front_matter,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    ).strip()
    body = body.lstrip("\n")
    return f"{DELIMITER}\n{fm_text}\n{DELIMITER}\n\n{body}"


def parse_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a post into its front-matter mapping and body.

    Text without a leading ``---`` fence has an empty mapping.
    """
    if not text.startswith(DELIMITER + "\n"):
        return {}, text
    end = text.find(f"\n{DELIMITER}\n", len(DELIMITER))
    if end == -1:
        return {}, text
    fm = yaml.safe_load(text[len(DELIMITER) + 1 : end]) or {}
    body = text[end + len(DELIMITER) + 2 :]
    return fm, body.removeprefix("\n")
