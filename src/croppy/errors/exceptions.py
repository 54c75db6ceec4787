"""Custom exception hierarchy for croppy."""

from __future__ import annotations


class CroppyError(Exception):
    """Base exception for all croppy errors.

    ``http_status`` is the status an HTTP front end should answer with when
    the error escapes a request.
    """

    http_status: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(CroppyError):
    """Bad arguments to the URL builder (e.g. an empty source URL)."""

    http_status = 400


class UnconfiguredPath(CroppyError):
    """A path matched none of the configured ``path`` patterns."""

    http_status = 404

    def __init__(
        self, message: str = "", path: str = "", patterns: list[str] | None = None
    ) -> None:
        super().__init__(message)
        self.path = path
        self.patterns = patterns or []


class SignatureMismatch(CroppyError):
    """Token missing or wrong.

    Surfaced as 404 so a client cannot tell a bad token from a missing file.
    """

    http_status = 404


class TooManyDerivatives(CroppyError):
    """The source already has ``max_crops`` derivatives."""

    http_status = 500

    def __init__(self, message: str = "", source_path: str = "", limit: int = 0) -> None:
        super().__init__(message)
        self.source_path = source_path
        self.limit = limit


class SourceUnreadable(CroppyError):
    """The source image could not be read from the source store."""

    http_status = 404

    def __init__(self, message: str = "", source_path: str = "") -> None:
        super().__init__(message)
        self.source_path = source_path


class ProcessingFailed(CroppyError):
    """The image processor raised or timed out. Nothing was written."""

    http_status = 500

    def __init__(
        self,
        message: str = "",
        source_path: str = "",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source_path = source_path
        self.original = original


class BlobNotFound(CroppyError, FileNotFoundError):
    """A blob store has nothing at the requested key."""

    http_status = 404

    def __init__(self, message: str = "", key: str = "") -> None:
        super().__init__(message)
        self.key = key


class PurgeRefused(CroppyError):
    """Sources and derivatives share one root, so orphans cannot be told apart
    from source images whose names happen to match the grammar."""

    http_status = 409
