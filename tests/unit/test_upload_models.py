"""Tests for upload models."""
import pytest

from onedrivepy.core.exceptions import UnexpectedStatusError
from onedrivepy.core.upload.models import UploadErrorKind, UploadProgress, UploadResult


class TestUploadProgress:
    """Test suite for UploadProgress."""

    def test_percentage(self):
        progress = UploadProgress(total_ranges=4, uploaded_ranges=1, total_bytes=1000, uploaded_bytes=250)

        assert progress.percentage == 25.0
        assert not progress.is_complete

    def test_empty_content(self):
        """Test zero-byte progress does not divide by zero."""
        progress = UploadProgress(total_ranges=0)

        assert progress.percentage == 0.0
        assert progress.is_complete

    def test_complete(self):
        progress = UploadProgress(total_ranges=1, uploaded_ranges=1, total_bytes=10, uploaded_bytes=10)

        assert progress.is_complete


class TestUploadResult:
    """Test suite for UploadResult."""

    def test_success(self):
        item = object()
        result = UploadResult.success(item, uploaded_bytes=10)

        assert result.ok
        assert not result.retryable
        assert result.error_kind is None
        assert result.unwrap() is item

    def test_failure_raises_on_unwrap(self):
        error = UnexpectedStatusError('PUT', 'http://uplo.ad/url', 503)
        result = UploadResult.failure(UploadErrorKind.UNEXPECTED_STATUS, str(error), error)

        assert not result.ok
        with pytest.raises(UnexpectedStatusError):
            result.unwrap()

    def test_failure_without_exception(self):
        result = UploadResult.failure(UploadErrorKind.NOT_FINALIZED, 'No item')

        with pytest.raises(RuntimeError, match="No item"):
            result.unwrap()

    @pytest.mark.parametrize("kind,retryable", [
        (UploadErrorKind.TRANSPORT, True),
        (UploadErrorKind.UNEXPECTED_STATUS, False),
        (UploadErrorKind.NOT_FINALIZED, False),
        (UploadErrorKind.INVALID_RESPONSE, False),
    ])
    def test_retryable(self, kind, retryable):
        assert UploadResult.failure(kind, 'detail').retryable is retryable
