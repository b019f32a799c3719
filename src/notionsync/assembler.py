"""Document assembly: normalized body + front matter -> post file.

Output layout::

    <posts_root>/<category segments, lower-cased>/<YYYY-MM-DD>-<slug>.md

A document whose body is blank after normalization is skipped with a
warning.  Failing to create the directory or write the file raises
:class:`~notionsync.errors.NotionSyncWriteError`; isolating that failure
from the other documents is the caller's job (see :mod:`notionsync.sync`).
"""

from __future__ import annotations

import time
from pathlib import Path

from notionsync.config import SyncConfig
from notionsync.converter.pipeline import normalize_markdown
from notionsync.errors import NotionSyncPathConflictError, NotionSyncWriteError
from notionsync.frontmatter import build_front_matter, render_post
from notionsync.image import AssetLocalizer
from notionsync.image.naming import candidate_names
from notionsync.models import (
    Document,
    DocumentResult,
    DocumentStatus,
    NormalizedBody,
    SyncWarning,
)
from notionsync.observability import NoopMetricsHook, get_logger

log = get_logger("notionsync.assembler")


class DocumentAssembler:
    """Normalize documents and write them as Jekyll posts.

    One assembler is meant to live for one run: it remembers which output
    paths it has handed out so that two documents resolving to the same
    file are handled according to ``config.duplicate_path_policy``.

    Parameters
    ----------
    config:
        Run configuration.
    localizer:
        Asset localizer; ``None`` disables image mirroring.
    """

    def __init__(self, config: SyncConfig, localizer: AssetLocalizer | None = None) -> None:
        self._config = config
        self._localizer = localizer
        self._metrics = config.metrics or NoopMetricsHook()
        self._claimed: dict[Path, str] = {}

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def output_dir(self, document: Document) -> Path:
        segments = [
            segment.strip().lower()
            for segment in document.categories
            if segment.strip() not in ("", ".", "..")
        ]
        return Path(self._config.posts_root).joinpath(*segments)

    def output_filename(self, document: Document) -> str:
        slug = document.slug.replace("/", "-").replace("\\", "-")
        return f"{document.date.isoformat()}-{slug}.md"

    def _claim_path(self, document: Document) -> Path:
        base = self.output_dir(document) / self.output_filename(document)
        policy = self._config.duplicate_path_policy

        for name in candidate_names(base.name):
            path = base.with_name(name)
            owner = self._claimed.get(path)
            if owner is None or owner == document.id or policy == "overwrite":
                self._claimed[path] = document.id
                return path
            if policy == "raise":
                raise NotionSyncPathConflictError(
                    message=f"Output path {path} is already used by document {owner}",
                    context={
                        "document_id": document.id,
                        "path": str(path),
                        "previous_document_id": owner,
                    },
                )
        raise AssertionError("unreachable")  # pragma: no cover

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize(self, document: Document) -> NormalizedBody:
        """Run the normalization pipeline on *document*."""
        return normalize_markdown(document, self._config, self._localizer)

    def assemble(self, document: Document) -> DocumentResult:
        """Normalize *document* and write its post file.

        Returns
        -------
        DocumentResult
            ``WRITTEN`` with the output path, or ``SKIPPED`` when the body
            is blank.

        Raises
        ------
        NotionSyncWriteError
            If the output directory or file cannot be written.
        NotionSyncPathConflictError
            If the output path is taken and the policy is ``"raise"``.
        """
        started = time.monotonic()
        body = self.normalize(document)

        if body.is_empty:
            log.warning(
                "Skipped empty post",
                extra={"extra_fields": {"document_id": document.id, "title": document.title}},
            )
            self._metrics.increment("notionsync.documents_skipped_total")
            body.warnings.append(
                SyncWarning(
                    code="EMPTY_CONTENT",
                    message=f"Document {document.title!r} has no content",
                    context={"document_id": document.id},
                )
            )
            return DocumentResult(
                document_id=document.id,
                status=DocumentStatus.SKIPPED,
                warnings=body.warnings,
            )

        path = self._claim_path(document)
        post = render_post(build_front_matter(document, self._config.author), body.text)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(post, encoding="utf-8")
        except OSError as exc:
            raise NotionSyncWriteError(
                message=f"Failed to write {path}: {exc}",
                context={"document_id": document.id, "path": str(path)},
                cause=exc,
            ) from exc

        elapsed_ms = (time.monotonic() - started) * 1000
        self._metrics.increment("notionsync.documents_written_total")
        self._metrics.timing("notionsync.document_duration_ms", elapsed_ms)
        log.info(
            "Synced",
            extra={
                "extra_fields": {
                    "document_id": document.id,
                    "path": str(path),
                    "assets": len(body.assets),
                    "warnings": len(body.warnings),
                }
            },
        )
        return DocumentResult(
            document_id=document.id,
            status=DocumentStatus.WRITTEN,
            path=path,
            warnings=body.warnings,
        )
