"""Proxy to a OneDrive drive."""
from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

from ..models import Drive, DriveItem, IdentitySet, Quota
from .drive_item import DriveItemProxy, expect_status

if TYPE_CHECKING:
    from ..api.async_client import AsyncGraphClient


class DriveProxy:
    """
    Proxy to a drive.

    Example:
        >>> drive = await client.get_my_drive()
        >>> print(drive.quota.remaining)
        >>> root = await drive.get_root()
    """

    def __init__(self, graph: AsyncGraphClient, drive: Drive):
        self._graph = graph
        self._drive = drive

    @property
    def id(self) -> str:
        return self._drive.id

    @property
    def drive_type(self) -> Optional[str]:
        return self._drive.drive_type

    @property
    def name(self) -> Optional[str]:
        return self._drive.name

    @property
    def owner(self) -> Optional[IdentitySet]:
        return self._drive.owner

    @property
    def quota(self) -> Optional[Quota]:
        return self._drive.quota

    @property
    def raw(self) -> Dict[str, Any]:
        return self._drive.raw

    async def get_root(self) -> DriveItemProxy:
        """
        Get the root folder of this drive.

        Returns:
            Root folder proxy
        """
        endpoint = f"/drives/{self.id}/items/root"
        response = await self._graph.request('GET', endpoint)
        expect_status(response, 'GET', endpoint, 200)

        return DriveItemProxy(self._graph, DriveItem.from_dict(response.json()), drive_id=self.id)

    def __repr__(self) -> str:
        return f"DriveProxy(id={self.id!r}, drive_type={self.drive_type!r})"
