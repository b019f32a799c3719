"""Construction of :class:`~notionsync.models.Document` from Notion pages.

Reads the database properties a blog database is expected to have:

===========  ================  =====================================
Property     Notion type       Fallback
===========  ================  =====================================
Title        title             first ``title`` property, "Untitled"
Slug         rich_text         slugified title, then page id
Category     multi_select      ``["General"]``
Tags         multi_select      ``select``, then no tags
Date         date              page ``created_time``, then today
Published    checkbox          unpublished
===========  ================  =====================================
"""

from __future__ import annotations

from datetime import date
from typing import Any

from notionsync.models import Document
from notionsync.utils.slug import slugify

DEFAULT_TITLE = "Untitled"
DEFAULT_CATEGORIES: tuple[str, ...] = ("General",)


def _plain_text(segments: list[dict] | None) -> str:
    return "".join(seg.get("plain_text", "") for seg in segments or []).strip()


def _title_property(props: dict[str, Any]) -> dict[str, Any]:
    if "Title" in props:
        return props["Title"] or {}
    for prop in props.values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return prop
    return {}


def _names(options: list[dict] | None) -> tuple[str, ...]:
    names = (str(opt.get("name", "")).strip() for opt in options or [])
    return tuple(name for name in names if name)


def _parse_date(value: str | None) -> date | None:
    """Parse the calendar date of an ISO date or timestamp string."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def extract_title(props: dict[str, Any]) -> str:
    return _plain_text(_title_property(props).get("title")) or DEFAULT_TITLE


def extract_slug(props: dict[str, Any], title: str) -> str:
    slug = _plain_text((props.get("Slug") or {}).get("rich_text"))
    return slug or slugify(title)


def extract_categories(props: dict[str, Any]) -> tuple[str, ...]:
    return _names((props.get("Category") or {}).get("multi_select")) or DEFAULT_CATEGORIES


def extract_tags(props: dict[str, Any]) -> tuple[str, ...]:
    tags_prop = props.get("Tags") or {}
    tags = _names(tags_prop.get("multi_select"))
    if tags:
        return tags
    return _names([tags_prop["select"]]) if tags_prop.get("select") else ()


def extract_date(page: dict[str, Any], today: date | None = None) -> date:
    """Return the post date: Date property, then creation time, then today."""
    date_prop = (page.get("properties", {}).get("Date") or {}).get("date") or {}
    return (
        _parse_date(date_prop.get("start"))
        or _parse_date(page.get("created_time"))
        or today
        or date.today()
    )


def is_published(page: dict[str, Any]) -> bool:
    """Return the value of the page's ``Published`` checkbox.

    For :class:`~notionsync.sync.DocumentSource` implementations that query
    a Notion database: only pages for which this is true should be yielded.
    """
    return bool((page.get("properties", {}).get("Published") or {}).get("checkbox"))


def document_from_page(
    page: dict[str, Any],
    body: str,
    today: date | None = None,
) -> Document:
    """Build a :class:`Document` from a Notion page object and its markdown.

    Parameters
    ----------
    page:
        A page object as returned by the Notion database query API.
    body:
        Markdown produced for the page by the block converter.
    today:
        Date used when the page has neither a Date property nor a
        creation time.
    """
    props = page.get("properties", {})
    title = extract_title(props)
    page_id = str(page.get("id", ""))
    return Document(
        id=page_id,
        title=title,
        slug=extract_slug(props, title) or slugify(page_id) or "untitled",
        date=extract_date(page, today),
        categories=extract_categories(props),
        tags=extract_tags(props),
        body=body or "",
    )
