"""
Upload session protocol.

Uploads a content in sequential byte ranges to the URL of a provider-issued
upload session, until OneDrive reports that it created the drive item.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..exceptions import (
    OneDriveRequestError,
    OneDriveUploadError,
    UnexpectedStatusError,
    UploadNotFinalizedError,
)
from ..logging import get_logger
from ..models import DriveItem, UploadSessionInfo
from .content import as_content
from .models import UploadErrorKind, UploadProgress, UploadResult
from .protocols import TransportProtocol, UploadContent
from .ranges import ByteRange, RangeChunkingStrategy, normalize_range_size

if TYPE_CHECKING:
    from ..proxy.drive_item import DriveItemProxy

logger = get_logger('onedrivepy.upload.session')

# Range accepted, more ranges expected
STATUS_CONTINUE = 202

# Last range accepted, drive item created
STATUS_COMPLETED = (200, 201)


class UploadSession:
    """
    Proxy to an upload session.

    Owns the session handle, the content and the range size configuration,
    and drives the range uploads to completion. Ranges are sent one at a
    time, in increasing offset order; a failed range ends the session.

    The session is single-use: complete() consumes the content.

    Example:
        >>> session = await folder.start_upload('video.mp4', Path('video.mp4'),
        ...                                     range_size=10 * 1024 * 1024)
        >>> item = await session.complete()
        >>> print(item.id, item.size)
    """

    def __init__(
        self,
        graph: TransportProtocol,
        info: UploadSessionInfo,
        content: Any,
        content_type: Optional[str] = None,
        range_size: Optional[int] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None
    ):
        """
        Initialize upload session.

        Args:
            graph: Authenticated transport
            info: Session handle returned by createUploadSession
            content: Content to upload (see as_content for accepted types)
            content_type: Content-Type sent with every range, if any
            range_size: Preferred range size, rounded down to a multiple of
                320 KiB and clamped to [320 KiB, 60 MiB]
            progress_callback: Called after each range accepted with 202

        Raises:
            ValueError: If the content size cannot be determined
        """
        self._graph = graph
        self._info = info
        self._content: UploadContent = as_content(content)
        self._content_type = content_type
        self._range_size = normalize_range_size(range_size)
        self._progress_callback = progress_callback
        self._uploaded_bytes = 0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def upload_url(self) -> str:
        return self._info.upload_url

    @property
    def expiration_time(self) -> Optional[datetime]:
        return self._info.expiration_time

    @property
    def next_expected_ranges(self) -> List[str]:
        """Outstanding ranges reported by the provider when the session was created."""
        return list(self._info.next_expected_ranges)

    @property
    def content(self) -> UploadContent:
        return self._content

    @property
    def content_type(self) -> Optional[str]:
        return self._content_type

    @property
    def range_size(self) -> int:
        return self._range_size

    @property
    def uploaded_bytes(self) -> int:
        return self._uploaded_bytes

    @property
    def is_expired(self) -> bool:
        if self.expiration_time is None:
            return False
        expiration = self.expiration_time
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        return expiration <= datetime.now(timezone.utc)

    # =========================================================================
    # Protocol
    # =========================================================================

    def _range_headers(self, byte_range: ByteRange) -> Dict[str, str]:
        headers = {
            'Content-Length': str(byte_range.length),
            'Content-Range': byte_range.content_range,
        }

        if self._content_type is not None:
            headers['Content-Type'] = self._content_type

        return headers

    async def complete(self) -> DriveItemProxy:
        """
        Upload the content in multiple ranges and complete this session.

        Returns:
            The drive item created by OneDrive

        Raises:
            UnexpectedStatusError: If a range is answered with a status other
                than 200, 201 or 202; no further range is sent
            UploadNotFinalizedError: If the content ran out before OneDrive
                answered with 200 or 201
            OneDriveUploadError: If the final answer is not a drive item
            OneDriveRequestError: If a range could not be sent
            ValueError: If the content yields more bytes than its size
        """
        content = self._content
        total_size = content.size
        range_size = self._range_size
        offset = 0

        progress = UploadProgress(
            total_ranges=RangeChunkingStrategy(range_size).count(total_size),
            total_bytes=total_size
        )

        logger.info(
            f"Starting upload session: {total_size} bytes in "
            f"{progress.total_ranges} ranges of {range_size} bytes"
        )
        upload_start = time.time()

        try:
            while True:
                window = await content.read(range_size)

                if not window:
                    break

                if offset + len(window) > total_size:
                    raise ValueError(
                        f"Content yielded more than its declared size of {total_size} bytes"
                    )

                byte_range = ByteRange.at(offset, len(window), total_size)
                offset += byte_range.length

                logger.debug(f"Uploading range {byte_range.content_range}")

                response = await self._graph.request(
                    'PUT',
                    self.upload_url,
                    headers=self._range_headers(byte_range),
                    body=window
                )

                status = response.status

                if status in STATUS_COMPLETED:
                    self._uploaded_bytes = offset
                    item = self._build_item(response)
                    elapsed = time.time() - upload_start
                    logger.info(f"Upload completed in {elapsed:.2f}s: {item.id}")
                    return item

                if status != STATUS_CONTINUE:
                    logger.error(f"Range {byte_range.content_range} rejected with status {status}")
                    raise UnexpectedStatusError('PUT', self.upload_url, status)

                self._uploaded_bytes = offset
                progress.uploaded_ranges += 1
                progress.uploaded_bytes = offset

                if self._progress_callback:
                    self._progress_callback(progress)
        finally:
            await content.close()

        logger.error(f"Content exhausted after {offset} bytes without a created item")
        raise UploadNotFinalizedError(self.upload_url, offset)

    async def complete_with_result(self) -> UploadResult:
        """
        Complete this session, reporting failures as a value.

        Returns:
            UploadResult holding the created item or the failure; transport
            failures are flagged as retryable
        """
        try:
            item = await self.complete()
        except UnexpectedStatusError as e:
            return UploadResult.failure(
                UploadErrorKind.UNEXPECTED_STATUS, str(e), e, self._uploaded_bytes
            )
        except UploadNotFinalizedError as e:
            return UploadResult.failure(
                UploadErrorKind.NOT_FINALIZED, str(e), e, self._uploaded_bytes
            )
        except OneDriveUploadError as e:
            return UploadResult.failure(
                UploadErrorKind.INVALID_RESPONSE, str(e), e, self._uploaded_bytes
            )
        except OneDriveRequestError as e:
            return UploadResult.failure(
                UploadErrorKind.TRANSPORT, str(e), e, self._uploaded_bytes
            )

        return UploadResult.success(item, self._uploaded_bytes)

    async def cancel(self) -> None:
        """
        Cancel this session, discarding the ranges already uploaded.

        Raises:
            UnexpectedStatusError: If OneDrive does not answer with 204
        """
        response = await self._graph.request('DELETE', self.upload_url)

        if response.status != 204:
            raise UnexpectedStatusError('DELETE', self.upload_url, response.status)

        logger.info("Upload session cancelled")

    def _build_item(self, response) -> DriveItemProxy:
        """Build the drive item proxy from the final range response."""
        from ..proxy.drive_item import DriveItemProxy

        try:
            item = DriveItem.from_dict(response.json())
        except (ValueError, TypeError, AttributeError) as e:
            raise OneDriveUploadError(
                f"Invalid drive item produced by 'PUT {self.upload_url}': {e}",
                response.status
            )

        return DriveItemProxy(self._graph, item)

    def __repr__(self) -> str:
        return (
            f"UploadSession(upload_url={self.upload_url!r}, "
            f"expiration_time={self.expiration_time!r}, range_size={self._range_size})"
        )
