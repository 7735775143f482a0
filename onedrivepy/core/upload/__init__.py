"""
Upload module.

Resumable uploads through OneDrive upload sessions:
- ranges: range size normalization and byte range math
- content: content sources (bytes, streams, files)
- session: the range upload protocol
"""
from .ranges import (
    RANGE_SIZE_MULTIPLE,
    MIN_RANGE_SIZE,
    MAX_RANGE_SIZE,
    normalize_range_size,
    ByteRange,
    RangeChunkingStrategy,
)
from .content import BytesContent, StreamContent, FileContent, as_content
from .models import UploadProgress, UploadErrorKind, UploadResult
from .protocols import UploadContent, TransportProtocol
from .session import UploadSession

__all__ = [
    'RANGE_SIZE_MULTIPLE',
    'MIN_RANGE_SIZE',
    'MAX_RANGE_SIZE',
    'normalize_range_size',
    'ByteRange',
    'RangeChunkingStrategy',
    'BytesContent',
    'StreamContent',
    'FileContent',
    'as_content',
    'UploadProgress',
    'UploadErrorKind',
    'UploadResult',
    'UploadContent',
    'TransportProtocol',
    'UploadSession',
]
