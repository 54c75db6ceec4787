"""Error handling: exception hierarchy mapped to HTTP statuses."""

from croppy.errors.exceptions import (
    BlobNotFound,
    CroppyError,
    InvalidInput,
    ProcessingFailed,
    PurgeRefused,
    SignatureMismatch,
    SourceUnreadable,
    TooManyDerivatives,
    UnconfiguredPath,
)

__all__ = [
    "CroppyError",
    "InvalidInput",
    "UnconfiguredPath",
    "SignatureMismatch",
    "TooManyDerivatives",
    "SourceUnreadable",
    "ProcessingFailed",
    "PurgeRefused",
    "BlobNotFound",
]
