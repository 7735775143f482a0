"""Upload session handle model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional, List

from .base import parse_datetime


@dataclass
class UploadSessionInfo:
    """
    Handle of an upload session as issued by the provider.

    Attributes:
        upload_url: Pre-authenticated URL receiving the byte ranges
        expiration_time: Time after which the session is discarded
        next_expected_ranges: Ranges the provider still expects ("0-", "26-")
    """
    upload_url: str
    expiration_time: Optional[datetime] = None
    next_expected_ranges: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadSessionInfo':
        if not isinstance(data, dict) or not data.get('uploadUrl'):
            raise ValueError(f"Not an upload session payload: {data!r}")
        return cls(
            upload_url=data['uploadUrl'],
            expiration_time=parse_datetime(data.get('expirationDateTime')),
            next_expected_ranges=list(data.get('nextExpectedRanges') or []),
        )
