"""
Drive item models.

Typed records built from the JSON payloads of the drive item resources.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional, List

from .base import parse_datetime, parse_int


@dataclass
class Identity:
    """A user, application or device."""
    id: Optional[str] = None
    display_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['Identity']:
        if not data:
            return None
        return cls(id=data.get('id'), display_name=data.get('displayName'))


@dataclass
class IdentitySet:
    """Set of identities associated with an action (created by, owner...)."""
    user: Optional[Identity] = None
    application: Optional[Identity] = None
    device: Optional[Identity] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['IdentitySet']:
        if not data:
            return None
        return cls(
            user=Identity.from_dict(data.get('user')),
            application=Identity.from_dict(data.get('application')),
            device=Identity.from_dict(data.get('device')),
        )

    @property
    def display_name(self) -> Optional[str]:
        for identity in (self.user, self.application, self.device):
            if identity and identity.display_name:
                return identity.display_name
        return None


@dataclass
class ItemReference:
    """Reference to the parent of a drive item."""
    id: Optional[str] = None
    drive_id: Optional[str] = None
    drive_type: Optional[str] = None
    path: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['ItemReference']:
        if not data:
            return None
        return cls(
            id=data.get('id'),
            drive_id=data.get('driveId'),
            drive_type=data.get('driveType'),
            path=data.get('path'),
            name=data.get('name'),
        )


@dataclass
class FileFacet:
    """Present on items that are files."""
    mime_type: Optional[str] = None
    hashes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['FileFacet']:
        if data is None:
            return None
        return cls(
            mime_type=data.get('mimeType'),
            hashes=dict(data.get('hashes') or {}),
        )


@dataclass
class FolderFacet:
    """Present on items that are folders."""
    child_count: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['FolderFacet']:
        if data is None:
            return None
        return cls(child_count=parse_int(data.get('childCount')) or 0)


@dataclass
class Permission:
    """
    Sharing permission granted on a drive item.

    Only the fields commonly used are mapped; the complete payload stays
    available in ``raw``.
    """
    id: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    link_type: Optional[str] = None
    link_scope: Optional[str] = None
    link_web_url: Optional[str] = None
    granted_to: Optional[IdentitySet] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Permission':
        if not isinstance(data, dict):
            raise ValueError(f"Not a permission payload: {data!r}")
        link = data.get('link') or {}
        return cls(
            id=data.get('id'),
            roles=list(data.get('roles') or []),
            link_type=link.get('type'),
            link_scope=link.get('scope'),
            link_web_url=link.get('webUrl'),
            granted_to=IdentitySet.from_dict(data.get('grantedTo')),
            raw=dict(data),
        )


@dataclass
class DriveItem:
    """
    File or folder entry of a drive.

    Attributes:
        id: Item ID
        name: Item name
        size: Size in bytes (folders report the size of their content)
        parent_reference: Parent folder reference
        file: File facet (None for folders)
        folder: Folder facet (None for files)
        raw: Complete decoded payload
    """
    id: str
    name: Optional[str] = None
    size: Optional[int] = None
    parent_reference: Optional[ItemReference] = None
    file: Optional[FileFacet] = None
    folder: Optional[FolderFacet] = None
    description: Optional[str] = None
    e_tag: Optional[str] = None
    c_tag: Optional[str] = None
    web_url: Optional[str] = None
    created_date_time: Optional[datetime] = None
    last_modified_date_time: Optional[datetime] = None
    created_by: Optional[IdentitySet] = None
    last_modified_by: Optional[IdentitySet] = None
    permissions: Optional[List[Permission]] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DriveItem':
        """
        Create from a decoded drive item payload.

        Args:
            data: Decoded JSON object

        Returns:
            DriveItem instance

        Raises:
            ValueError: If the payload is not an object with an id
        """
        if not isinstance(data, dict) or not data.get('id'):
            raise ValueError(f"Not a drive item payload: {data!r}")

        permissions = data.get('permissions')

        return cls(
            id=data['id'],
            name=data.get('name'),
            size=parse_int(data.get('size')),
            parent_reference=ItemReference.from_dict(data.get('parentReference')),
            file=FileFacet.from_dict(data.get('file')),
            folder=FolderFacet.from_dict(data.get('folder')),
            description=data.get('description'),
            e_tag=data.get('eTag'),
            c_tag=data.get('cTag'),
            web_url=data.get('webUrl'),
            created_date_time=parse_datetime(data.get('createdDateTime')),
            last_modified_date_time=parse_datetime(data.get('lastModifiedDateTime')),
            created_by=IdentitySet.from_dict(data.get('createdBy')),
            last_modified_by=IdentitySet.from_dict(data.get('lastModifiedBy')),
            permissions=(
                [Permission.from_dict(p) for p in permissions]
                if permissions is not None else None
            ),
            raw=dict(data),
        )

    @property
    def is_folder(self) -> bool:
        return self.folder is not None

    @property
    def is_file(self) -> bool:
        return self.file is not None
