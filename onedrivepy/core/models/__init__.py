"""
Resource models.

Typed records for the drive, drive item and upload session payloads.
"""
from .item import (
    DriveItem,
    ItemReference,
    FileFacet,
    FolderFacet,
    Identity,
    IdentitySet,
    Permission,
)
from .drive import Drive, Quota
from .upload_session import UploadSessionInfo
from .base import parse_datetime

__all__ = [
    'DriveItem',
    'ItemReference',
    'FileFacet',
    'FolderFacet',
    'Identity',
    'IdentitySet',
    'Permission',
    'Drive',
    'Quota',
    'UploadSessionInfo',
    'parse_datetime',
]
