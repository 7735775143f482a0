"""
Byte range math for upload sessions.

OneDrive accepts ranges whose size is a multiple of 320 KiB, up to 60 MiB
per request.
"""
from dataclasses import dataclass
from typing import List, Optional

# Range size multiple. OneDrive requires 320 KiB.
RANGE_SIZE_MULTIPLE = 320 * 1024

MIN_RANGE_SIZE = RANGE_SIZE_MULTIPLE

# OneDrive limits a single range to 60 MiB.
MAX_RANGE_SIZE = 60 * 1024 * 1024


def normalize_range_size(preference: Optional[int] = None) -> int:
    """
    Compute the range size actually used for a preference.

    The preference is rounded down to a multiple of RANGE_SIZE_MULTIPLE and
    clamped into [MIN_RANGE_SIZE, MAX_RANGE_SIZE]. Out-of-range values are
    corrected, never rejected.

    Args:
        preference: Requested range size in bytes, None for the default

    Returns:
        Range size in bytes
    """
    if preference is None:
        return RANGE_SIZE_MULTIPLE

    range_size = int(preference)
    range_size -= range_size % RANGE_SIZE_MULTIPLE
    range_size = min(range_size, MAX_RANGE_SIZE)
    range_size = max(range_size, MIN_RANGE_SIZE)

    return range_size


@dataclass(frozen=True)
class ByteRange:
    """
    Inclusive byte range of an upload.

    Attributes:
        first: Offset of the first byte
        last: Offset of the last byte (inclusive)
        total: Total size of the uploaded content
    """
    first: int
    last: int
    total: int

    @classmethod
    def at(cls, offset: int, length: int, total: int) -> 'ByteRange':
        """Build the range of ``length`` bytes starting at ``offset``."""
        if length <= 0:
            raise ValueError("Range length must be positive")
        return cls(offset, offset + length - 1, total)

    @property
    def length(self) -> int:
        return self.last - self.first + 1

    @property
    def content_range(self) -> str:
        """Value of the Content-Range header for this range."""
        return f"bytes {self.first}-{self.last}/{self.total}"

    def __str__(self) -> str:
        return self.content_range


class RangeChunkingStrategy:
    """
    Fixed-size partition of a content into upload ranges.

    Every range but the last one is exactly ``range_size`` bytes long.
    """

    def __init__(self, range_size: Optional[int] = None):
        """
        Initialize with a range size preference.

        Args:
            range_size: Preferred range size, normalized with normalize_range_size
        """
        self.range_size = normalize_range_size(range_size)

    def calculate_ranges(self, total_size: int) -> List[ByteRange]:
        """
        Calculate the ranges covering a content.

        Args:
            total_size: Content size in bytes

        Returns:
            Contiguous, strictly increasing ranges covering [0, total_size)
        """
        if total_size < 0:
            raise ValueError("Content size cannot be negative")

        ranges = []
        position = 0

        while position < total_size:
            length = min(self.range_size, total_size - position)
            ranges.append(ByteRange.at(position, length, total_size))
            position += length

        return ranges

    def count(self, total_size: int) -> int:
        """Number of range requests needed for a content."""
        return -(-total_size // self.range_size) if total_size > 0 else 0
