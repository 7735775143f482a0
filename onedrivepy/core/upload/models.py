"""
Data models for upload module.

Uses dataclasses for type-safe progress and result records.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..proxy.drive_item import DriveItemProxy


@dataclass
class UploadProgress:
    """
    Upload progress information.

    Attributes:
        total_ranges: Total number of range requests
        uploaded_ranges: Number of ranges accepted by the provider
        total_bytes: Total content size
        uploaded_bytes: Bytes accepted so far
    """
    total_ranges: int
    uploaded_ranges: int = 0
    total_bytes: int = 0
    uploaded_bytes: int = 0

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage of bytes."""
        if self.total_bytes == 0:
            return 0.0
        return (self.uploaded_bytes / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        return self.uploaded_bytes >= self.total_bytes


class UploadErrorKind(Enum):
    """Kinds of upload session failures."""
    UNEXPECTED_STATUS = 'unexpected_status'
    NOT_FINALIZED = 'not_finalized'
    INVALID_RESPONSE = 'invalid_response'
    TRANSPORT = 'transport'


@dataclass
class UploadResult:
    """
    Outcome of an upload session: either the created item or a failure.

    Attributes:
        item: Created drive item (success only)
        error_kind: Kind of failure (failure only)
        detail: Human readable failure description
        error: Exception that caused the failure
        uploaded_bytes: Bytes accepted before the session ended
    """
    item: Optional[DriveItemProxy] = None
    error_kind: Optional[UploadErrorKind] = None
    detail: Optional[str] = None
    error: Optional[Exception] = None
    uploaded_bytes: int = 0

    @classmethod
    def success(cls, item: DriveItemProxy, uploaded_bytes: int = 0) -> UploadResult:
        return cls(item=item, uploaded_bytes=uploaded_bytes)

    @classmethod
    def failure(
        cls,
        kind: UploadErrorKind,
        detail: str,
        error: Optional[Exception] = None,
        uploaded_bytes: int = 0
    ) -> UploadResult:
        return cls(error_kind=kind, detail=detail, error=error, uploaded_bytes=uploaded_bytes)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @property
    def retryable(self) -> bool:
        """True for transport failures, which may succeed when tried again."""
        return self.error_kind is UploadErrorKind.TRANSPORT

    def unwrap(self) -> DriveItemProxy:
        """
        Get the created item, raising the failure otherwise.

        Raises:
            Exception: The error that ended the session
        """
        if self.ok:
            return self.item
        if self.error is not None:
            raise self.error
        raise RuntimeError(self.detail or 'Upload failed')
