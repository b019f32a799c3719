"""Data models for notionsync.

Plain dataclasses with no behaviour beyond structural equality and a few
derived properties.  :class:`Document` and the region/asset types are
frozen: they are built once and threaded through the pipeline as values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from urllib.parse import quote


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class RegionKind(str, Enum):
    """Kind of a verbatim span protected from reformatting."""

    CODE = "code"
    """A fenced code block (```` ``` ```` ... ```` ``` ````)."""

    DISCLOSURE = "disclosure"
    """An HTML ``<details>`` block."""


class LineKind(str, Enum):
    """Classification of one line of placeholder-stripped markdown."""

    QUOTE = "quote"
    BLANK = "blank"
    PROTECTED = "protected"
    PARAGRAPH = "paragraph"


class DocumentStatus(str, Enum):
    """Outcome of assembling one document."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Document:
    """One unit of conversion.

    Attributes
    ----------
    id:
        Stable identifier of the source record (Notion page id).
    title:
        Post title.
    slug:
        URL slug used in the output filename and asset folder.
    date:
        Publication date.
    categories:
        Ordered category path segments, e.g. ``("JAVA", "Basics")``.
    tags:
        Ordered tags; may be empty.
    body:
        Raw markdown produced by the block-to-text converter.
    """

    id: str
    title: str
    slug: str
    date: date
    categories: tuple[str, ...] = ("General",)
    tags: tuple[str, ...] = ()
    body: str = ""

    @property
    def category_path(self) -> str:
        """Category segments joined with ``/``."""
        return "/".join(self.categories)


# ---------------------------------------------------------------------------
# Protected regions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProtectedRegion:
    """A verbatim span cut out of a markdown string.

    Attributes
    ----------
    kind:
        Whether the span is a code fence or a disclosure block.
    index:
        Position in the extraction-ordered region list; also the number
        in the placeholder token.
    text:
        The original span, restored byte-for-byte.
    """

    kind: RegionKind
    index: int
    text: str

    @property
    def token(self) -> str:
        return f"{{{{{self.kind.name}_BLOCK_{self.index}}}}}"


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AssetReference:
    """A remote image URL discovered in the body of the document *slug*."""

    url: str
    slug: str


@dataclass(frozen=True)
class LocalAsset:
    """Where a downloaded image lives on disk and on the site.

    Attributes
    ----------
    folder:
        Sanitized document slug the asset is namespaced under.
    filename:
        Collision-free filename inside *folder*.
    path:
        Filesystem path the bytes were written to.
    url_prefix:
        Site path of the assets root.
    """

    folder: str
    filename: str
    path: Path
    url_prefix: str = "/assets/images"

    @property
    def url_path(self) -> str:
        """Site path of the asset, percent-encoded for use as a link target."""
        return f"{self.url_prefix.rstrip('/')}/{quote(self.folder)}/{quote(self.filename)}"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class SyncWarning:
    """A non-fatal issue encountered while processing a document.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"ASSET_DOWNLOAD_FAILED"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class NormalizedBody:
    """Output of the normalization pipeline for one document."""

    text: str
    assets: dict[str, LocalAsset] = field(default_factory=dict)
    warnings: list[SyncWarning] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass
class DocumentResult:
    """Outcome of assembling one document.

    Attributes
    ----------
    document_id:
        Identifier of the processed document.
    status:
        Written, skipped (empty body) or failed.
    path:
        Output file, when one was written.
    warnings:
        Non-fatal issues (failed assets, empty content, ...).
    error:
        The document-fatal error, for ``FAILED`` results.
    """

    document_id: str
    status: DocumentStatus
    path: Path | None = None
    warnings: list[SyncWarning] = field(default_factory=list)
    error: Exception | None = None


@dataclass
class SyncReport:
    """Results of a run, grouped by source collection."""

    collections: dict[str, list[DocumentResult]] = field(default_factory=dict)
    collection_errors: dict[str, Exception] = field(default_factory=dict)

    def results(self) -> list[DocumentResult]:
        return [r for results in self.collections.values() for r in results]

    def _count(self, status: DocumentStatus) -> int:
        return sum(1 for r in self.results() if r.status == status)

    @property
    def total(self) -> int:
        return len(self.results())

    @property
    def written(self) -> int:
        return self._count(DocumentStatus.WRITTEN)

    @property
    def skipped(self) -> int:
        return self._count(DocumentStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(DocumentStatus.FAILED)
