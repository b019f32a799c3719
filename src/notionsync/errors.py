"""Error hierarchy for notionsync.

Every public error class inherits from :class:`NotionSyncError`.  Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and an
optional ``cause`` (chained exception).

Only filesystem failures on the output file are document-fatal.  Asset
errors are raised by the downloader and caught by the localizer, which
falls back to the remote URL.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error notionsync can raise."""

    CONFIG_ERROR = "CONFIG_ERROR"
    SOURCE_ERROR = "SOURCE_ERROR"
    ASSET_ERROR = "ASSET_ERROR"
    ASSET_DOWNLOAD_ERROR = "ASSET_DOWNLOAD_ERROR"
    ASSET_WRITE_ERROR = "ASSET_WRITE_ERROR"
    WRITE_ERROR = "WRITE_ERROR"
    PATH_CONFLICT = "PATH_CONFLICT"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionSyncError(Exception):
    """Base exception for all notionsync errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class NotionSyncConfigError(NotionSyncError):
    """A configuration value is missing or invalid.

    Context keys: ``field``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotionSyncSourceError(NotionSyncError):
    """The document source failed to list a collection.

    Context keys: ``collection_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.SOURCE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Asset errors (recoverable: the remote URL is kept)
# ---------------------------------------------------------------------------

class NotionSyncAssetError(NotionSyncError):
    """Base class for asset localization errors."""

    def __init__(
        self,
        code: str = ErrorCode.ASSET_ERROR,
        message: str = "Asset error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class NotionSyncAssetDownloadError(NotionSyncAssetError):
    """A remote asset could not be transferred.

    Context keys: ``url``, ``status_code``, ``attempts``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.ASSET_DOWNLOAD_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotionSyncAssetWriteError(NotionSyncAssetError):
    """A downloaded asset could not be written to the assets folder.

    Context keys: ``url``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.ASSET_WRITE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Output errors (document-fatal)
# ---------------------------------------------------------------------------

class NotionSyncWriteError(NotionSyncError):
    """The output directory or post file could not be written.

    Context keys: ``document_id``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.WRITE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotionSyncPathConflictError(NotionSyncError):
    """Two documents of one run resolved to the same output path and the
    configured policy is ``"raise"``.

    Context keys: ``document_id``, ``path``, ``previous_document_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PATH_CONFLICT,
            message=message,
            context=context,
            cause=cause,
        )
