"""Drive models."""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from .base import parse_int
from .item import IdentitySet


@dataclass
class Quota:
    """Storage quota of a drive, in bytes."""
    total: int = 0
    used: int = 0
    remaining: int = 0
    deleted: int = 0
    state: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['Quota']:
        if not data:
            return None
        return cls(
            total=parse_int(data.get('total')) or 0,
            used=parse_int(data.get('used')) or 0,
            remaining=parse_int(data.get('remaining')) or 0,
            deleted=parse_int(data.get('deleted')) or 0,
            state=data.get('state'),
        )

    @property
    def used_percent(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.used / self.total) * 100

    def has_space_for(self, size: int) -> bool:
        """Check if the drive has room for ``size`` more bytes."""
        return self.remaining >= size


@dataclass
class Drive:
    """
    A OneDrive or document library.

    Attributes:
        id: Drive ID
        drive_type: "personal", "business" or "documentLibrary"
        owner: Owner identities
        quota: Storage quota
        raw: Complete decoded payload
    """
    id: str
    drive_type: Optional[str] = None
    name: Optional[str] = None
    owner: Optional[IdentitySet] = None
    quota: Optional[Quota] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Drive':
        if not isinstance(data, dict) or not data.get('id'):
            raise ValueError(f"Not a drive payload: {data!r}")
        return cls(
            id=data['id'],
            drive_type=data.get('driveType'),
            name=data.get('name'),
            owner=IdentitySet.from_dict(data.get('owner')),
            quota=Quota.from_dict(data.get('quota')),
            raw=dict(data),
        )
