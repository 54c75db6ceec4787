"""Tests for the exception hierarchy."""

import pytest

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


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            InvalidInput,
            UnconfiguredPath,
            SignatureMismatch,
            TooManyDerivatives,
            SourceUnreadable,
            ProcessingFailed,
            BlobNotFound,
            PurgeRefused,
        ],
    )
    def test_inherit_from_base(self, cls):
        assert issubclass(cls, CroppyError)

    def test_blob_not_found_is_file_not_found(self):
        assert issubclass(BlobNotFound, FileNotFoundError)

    @pytest.mark.parametrize(
        "cls,status",
        [
            (CroppyError, 500),
            (InvalidInput, 400),
            (UnconfiguredPath, 404),
            (SignatureMismatch, 404),
            (TooManyDerivatives, 500),
            (SourceUnreadable, 404),
            (ProcessingFailed, 500),
            (BlobNotFound, 404),
            (PurgeRefused, 409),
        ],
    )
    def test_http_status(self, cls, status):
        assert cls.http_status == status


class TestAttributes:
    def test_message(self):
        err = InvalidInput("empty url")
        assert err.message == "empty url"
        assert str(err) == "empty url"

    def test_unconfigured_path(self):
        err = UnconfiguredPath("nope", path="x/y.jpg", patterns=["^a/(.+)$"])
        assert err.path == "x/y.jpg"
        assert err.patterns == ["^a/(.+)$"]

    def test_too_many(self):
        err = TooManyDerivatives("full", source_path="cat.jpg", limit=12)
        assert err.source_path == "cat.jpg"
        assert err.limit == 12

    def test_processing_failed_keeps_original(self):
        original = ValueError("bad")
        err = ProcessingFailed("failed", source_path="cat.jpg", original=original)
        assert err.original is original

    def test_no_extra_keywords(self):
        with pytest.raises(TypeError):
            CroppyError("x", foo=1)

    def test_defaults(self):
        assert UnconfiguredPath().patterns == []
        assert ProcessingFailed().original is None
