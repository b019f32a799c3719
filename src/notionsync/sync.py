"""Run loop over source collections.

Documents are processed one at a time, in listing order, collection after
collection.  A document that fails is recorded and logged; the loop moves
on.  A collection whose listing fails is recorded the same way and the next
collection runs.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from notionsync.assembler import DocumentAssembler
from notionsync.config import SyncConfig
from notionsync.errors import NotionSyncSourceError
from notionsync.image import AssetLocalizer
from notionsync.models import Document, DocumentResult, DocumentStatus, SyncReport
from notionsync.observability import NoopMetricsHook, get_logger

log = get_logger("notionsync.sync")


@runtime_checkable
class DocumentSource(Protocol):
    """Anything that can list the published documents of a collection."""

    def iter_documents(self, collection_id: str) -> Iterable[Document]:
        """Yield the documents of *collection_id* in listing order."""
        ...


class SyncRunner:
    """Sync every configured collection from *source* to post files.

    Parameters
    ----------
    config:
        Run configuration; ``database_ids`` lists the collections.
    source:
        Where documents come from.
    assembler:
        Assembler to use; one with an :class:`AssetLocalizer` is built
        from *config* when omitted.
    """

    def __init__(
        self,
        config: SyncConfig,
        source: DocumentSource,
        assembler: DocumentAssembler | None = None,
    ) -> None:
        self._config = config
        self._source = source
        self._owned_localizer: AssetLocalizer | None = None
        if assembler is None:
            self._owned_localizer = AssetLocalizer(config)
            assembler = DocumentAssembler(config, self._owned_localizer)
        self._assembler = assembler
        self._metrics = config.metrics or NoopMetricsHook()

    def run(self, collection_ids: Iterable[str] | None = None) -> SyncReport:
        """Process the collections and return a :class:`SyncReport`."""
        ids = list(self._config.database_ids if collection_ids is None else collection_ids)
        report = SyncReport()
        try:
            for collection_id in ids:
                report.collections[collection_id] = self._run_collection(collection_id, report)
        finally:
            if self._owned_localizer is not None:
                self._owned_localizer.close()

        log.info(
            f"Synced total {report.written} posts from {len(ids)} databases",
            extra={
                "extra_fields": {
                    "written": report.written,
                    "skipped": report.skipped,
                    "failed": report.failed,
                    "collections": len(ids),
                }
            },
        )
        return report

    def _run_collection(self, collection_id: str, report: SyncReport) -> list[DocumentResult]:
        results: list[DocumentResult] = []
        try:
            for document in self._source.iter_documents(collection_id):
                results.append(self.sync_document(document))
        except Exception as exc:
            error = exc
            if not isinstance(exc, NotionSyncSourceError):
                error = NotionSyncSourceError(
                    message=f"Listing collection {collection_id} failed: {exc}",
                    context={"collection_id": collection_id},
                    cause=exc,
                )
            report.collection_errors[collection_id] = error
            log.error(
                "Collection failed",
                extra={"extra_fields": {"collection_id": collection_id, "error": str(exc)}},
            )
        log.info(
            "Collection processed",
            extra={"extra_fields": {"collection_id": collection_id, "documents": len(results)}},
        )
        return results

    def sync_document(self, document: Document) -> DocumentResult:
        """Assemble one document, turning a document-fatal error into a
        ``FAILED`` result.
        """
        try:
            return self._assembler.assemble(document)
        except Exception as exc:
            self._metrics.increment("notionsync.documents_failed_total")
            log.error(
                "Document failed",
                exc_info=exc,
                extra={"extra_fields": {"document_id": document.id, "title": document.title}},
            )
            return DocumentResult(
                document_id=document.id,
                status=DocumentStatus.FAILED,
                error=exc,
            )
