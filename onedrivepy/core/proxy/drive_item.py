"""Proxy to a OneDrive file or folder."""
from __future__ import annotations

from datetime import datetime
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union, TYPE_CHECKING
from urllib.parse import quote

from ..exceptions import UnexpectedStatusError
from ..logging import get_logger
from ..models import (
    DriveItem,
    FileFacet,
    FolderFacet,
    IdentitySet,
    ItemReference,
    Permission,
    UploadSessionInfo,
)

if TYPE_CHECKING:
    from ..api.async_client import AsyncGraphClient
    from ..upload.models import UploadProgress
    from ..upload.session import UploadSession

logger = get_logger('onedrivepy.proxy')


def expect_status(response, method: str, endpoint: str, *statuses: int):
    """Raise UnexpectedStatusError unless the response status is one of ``statuses``."""
    if response.status not in statuses:
        raise UnexpectedStatusError(method, endpoint, response.status)
    return response


class DriveItemProxy:
    """
    Proxy to a drive item (file or folder).

    Wraps a DriveItem and the transport used to operate on it. A proxy built
    from an item ID only is populated on the first call to load().

    Example:
        >>> root = await client.get_root()
        >>> for child in await root.children():
        ...     print(child.name, child.size)
        >>> folder = await root.create_folder('Reports')
        >>> item = await folder.upload('notes.txt', b'Hello')
    """

    def __init__(
        self,
        graph: AsyncGraphClient,
        item: Union[DriveItem, str],
        drive_id: Optional[str] = None
    ):
        """
        Initialize proxy.

        Args:
            graph: Authenticated transport
            item: Item model, or item ID for a lazily loaded proxy
            drive_id: ID of the drive holding the item, if known
        """
        self._graph = graph

        if isinstance(item, DriveItem):
            self._item: Optional[DriveItem] = item
            self._id = item.id
        else:
            self._item = None
            self._id = item

        self._drive_id = drive_id
        self._children: Optional[List[DriveItemProxy]] = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_loaded(self) -> bool:
        return self._item is not None

    @property
    def item(self) -> Optional[DriveItem]:
        """Underlying model, None until loaded."""
        return self._item

    @property
    def drive_id(self) -> Optional[str]:
        if self._drive_id:
            return self._drive_id
        if self._item and self._item.parent_reference:
            return self._item.parent_reference.drive_id
        return None

    @property
    def name(self) -> Optional[str]:
        return self._item.name if self._item else None

    @property
    def size(self) -> Optional[int]:
        return self._item.size if self._item else None

    @property
    def parent_reference(self) -> Optional[ItemReference]:
        return self._item.parent_reference if self._item else None

    @property
    def file(self) -> Optional[FileFacet]:
        return self._item.file if self._item else None

    @property
    def folder(self) -> Optional[FolderFacet]:
        return self._item.folder if self._item else None

    @property
    def is_folder(self) -> bool:
        return bool(self._item and self._item.is_folder)

    @property
    def is_file(self) -> bool:
        return bool(self._item and self._item.is_file)

    @property
    def description(self) -> Optional[str]:
        return self._item.description if self._item else None

    @property
    def web_url(self) -> Optional[str]:
        return self._item.web_url if self._item else None

    @property
    def e_tag(self) -> Optional[str]:
        return self._item.e_tag if self._item else None

    @property
    def created_date_time(self) -> Optional[datetime]:
        return self._item.created_date_time if self._item else None

    @property
    def last_modified_date_time(self) -> Optional[datetime]:
        return self._item.last_modified_date_time if self._item else None

    @property
    def created_by(self) -> Optional[IdentitySet]:
        return self._item.created_by if self._item else None

    @property
    def last_modified_by(self) -> Optional[IdentitySet]:
        return self._item.last_modified_by if self._item else None

    @property
    def permissions(self) -> Optional[List[Permission]]:
        return self._item.permissions if self._item else None

    @property
    def raw(self) -> Dict[str, Any]:
        return self._item.raw if self._item else {}

    # =========================================================================
    # Endpoints
    # =========================================================================

    @property
    def endpoint(self) -> str:
        """Graph endpoint of this item."""
        drive_id = self.drive_id
        if drive_id:
            return f"/drives/{drive_id}/items/{self._id}"
        return f"/me/drive/items/{self._id}"

    def _child_endpoint(self, name: str, action: str) -> str:
        return f"{self.endpoint}:/{quote(name, safe='')}:/{action}"

    def _wrap(self, data: Dict[str, Any]) -> DriveItemProxy:
        return DriveItemProxy(self._graph, DriveItem.from_dict(data))

    # =========================================================================
    # Loading
    # =========================================================================

    async def load(self, refresh: bool = False) -> DriveItemProxy:
        """
        Fetch the item from OneDrive.

        Args:
            refresh: Fetch again even if already loaded

        Returns:
            This proxy
        """
        if self._item is not None and not refresh:
            return self

        endpoint = self.endpoint
        response = await self._graph.request('GET', endpoint)
        expect_status(response, 'GET', endpoint, 200)

        self._item = DriveItem.from_dict(response.json())
        self._id = self._item.id
        return self

    async def children(self, refresh: bool = False) -> List[DriveItemProxy]:
        """
        Get the children of this folder.

        The list is cached after the first call.

        Args:
            refresh: Fetch the list again

        Returns:
            Child proxies (first page only)
        """
        if self._children is not None and not refresh:
            return self._children

        endpoint = f"{self.endpoint}/children"
        response = await self._graph.request('GET', endpoint)
        expect_status(response, 'GET', endpoint, 200)

        payload = response.json() or {}
        self._children = [self._wrap(child) for child in payload.get('value', [])]
        return self._children

    # =========================================================================
    # Operations
    # =========================================================================

    async def create_folder(
        self,
        name: str,
        description: Optional[str] = None,
        conflict_behavior: Optional[str] = None
    ) -> DriveItemProxy:
        """
        Create a folder in this folder.

        Args:
            name: Folder name
            description: Folder description
            conflict_behavior: 'fail', 'replace' or 'rename'

        Returns:
            The created folder
        """
        body: Dict[str, Any] = {
            'name': name,
            'folder': {'@odata.type': 'microsoft.graph.folder'},
        }

        if description is not None:
            body['description'] = description

        if conflict_behavior is not None:
            body['@microsoft.graph.conflictBehavior'] = conflict_behavior

        endpoint = f"{self.endpoint}/children"
        response = await self._graph.request('POST', endpoint, json=body)
        expect_status(response, 'POST', endpoint, 200, 201)

        self._children = None
        logger.info(f"Created folder {name!r}")
        return self._wrap(response.json())

    async def delete(self) -> None:
        """Delete this item."""
        endpoint = self.endpoint
        response = await self._graph.request('DELETE', endpoint)
        expect_status(response, 'DELETE', endpoint, 204)
        logger.info(f"Deleted item {self._id}")

    async def upload(
        self,
        name: str,
        content: Union[bytes, str],
        content_type: Optional[str] = None
    ) -> DriveItemProxy:
        """
        Upload a small file into this folder in a single request.

        Suitable for contents up to 4 MiB; use upload_large() beyond that.

        Args:
            name: File name
            content: File content (str is encoded as UTF-8)
            content_type: Content-Type of the file

        Returns:
            The created or replaced file
        """
        if isinstance(content, str):
            content = content.encode('utf-8')

        headers = {'Content-Type': content_type} if content_type else None
        endpoint = self._child_endpoint(name, 'content')
        response = await self._graph.request('PUT', endpoint, headers=headers, body=bytes(content))
        expect_status(response, 'PUT', endpoint, 200, 201)

        self._children = None
        return self._wrap(response.json())

    async def start_upload(
        self,
        name: str,
        content: Any,
        content_type: Optional[str] = None,
        range_size: Optional[int] = None,
        conflict_behavior: Optional[str] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None,
        size: Optional[int] = None
    ) -> UploadSession:
        """
        Create an upload session for a file in this folder.

        Args:
            name: File name
            content: Bytes, str, path or binary stream
            content_type: Content-Type sent with every range
            range_size: Preferred range size (APIConfig.default_range_size if omitted)
            conflict_behavior: 'fail', 'replace' or 'rename'
            progress_callback: Called after each accepted range
            size: Size of a stream that cannot be measured

        Returns:
            UploadSession ready to complete()

        Raises:
            TypeError: If the content type is not supported
            ValueError: If the content size cannot be determined
            FileNotFoundError: If a content path does not exist
        """
        from ..upload.content import as_content
        from ..upload.session import UploadSession

        source = as_content(content, size=size)

        body = None
        if conflict_behavior is not None:
            body = {'item': {'@microsoft.graph.conflictBehavior': conflict_behavior}}

        endpoint = self._child_endpoint(name, 'createUploadSession')
        response = await self._graph.request('POST', endpoint, json=body)
        expect_status(response, 'POST', endpoint, 200)

        info = UploadSessionInfo.from_dict(response.json())

        if range_size is None:
            range_size = self._graph.config.default_range_size

        logger.debug(f"Upload session created for {name!r}")

        return UploadSession(
            self._graph,
            info,
            source,
            content_type=content_type,
            range_size=range_size,
            progress_callback=progress_callback
        )

    async def upload_large(
        self,
        name: str,
        content: Any,
        content_type: Optional[str] = None,
        range_size: Optional[int] = None,
        conflict_behavior: Optional[str] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None,
        size: Optional[int] = None
    ) -> DriveItemProxy:
        """Upload a file of any size through an upload session."""
        session = await self.start_upload(
            name,
            content,
            content_type=content_type,
            range_size=range_size,
            conflict_behavior=conflict_behavior,
            progress_callback=progress_callback,
            size=size
        )
        item = await session.complete()
        self._children = None
        return item

    async def download(self) -> bytes:
        """
        Download the content of this file.

        Returns:
            File content
        """
        endpoint = f"{self.endpoint}/content"
        response = await self._graph.request('GET', endpoint)
        expect_status(response, 'GET', endpoint, 200)
        return response.content

    async def iter_download(self, chunk_size: int = 64 * 1024) -> AsyncIterator[bytes]:
        """
        Download the content of this file in chunks.

        Args:
            chunk_size: Maximum size of each chunk

        Yields:
            Content chunks
        """
        async for chunk in self._graph.stream('GET', f"{self.endpoint}/content", chunk_size=chunk_size):
            yield chunk

    async def rename(self, name: str, description: Optional[str] = None) -> DriveItemProxy:
        """
        Rename this item.

        Returns:
            The renamed item
        """
        body: Dict[str, Any] = {'name': name}
        if description is not None:
            body['description'] = description

        return await self._patch(body)

    async def move(
        self,
        destination: Union[DriveItemProxy, str],
        name: Optional[str] = None
    ) -> DriveItemProxy:
        """
        Move this item into another folder.

        Args:
            destination: Destination folder or its ID
            name: New name, keeps the current one if omitted

        Returns:
            The moved item
        """
        body: Dict[str, Any] = {'parentReference': {'id': _item_id(destination)}}
        if name is not None:
            body['name'] = name

        return await self._patch(body)

    async def copy(
        self,
        destination: Union[DriveItemProxy, str],
        name: Optional[str] = None
    ) -> str:
        """
        Copy this item into another folder.

        The copy runs asynchronously on OneDrive.

        Args:
            destination: Destination folder or its ID
            name: Name of the copy, keeps the current one if omitted

        Returns:
            URL to monitor the copy progress
        """
        body: Dict[str, Any] = {'parentReference': {'id': _item_id(destination)}}
        if name is not None:
            body['name'] = name

        endpoint = f"{self.endpoint}/copy"
        response = await self._graph.request('POST', endpoint, json=body)
        expect_status(response, 'POST', endpoint, 202)

        return response.header('Location')

    async def _patch(self, body: Dict[str, Any]) -> DriveItemProxy:
        endpoint = self.endpoint
        response = await self._graph.request('PATCH', endpoint, json=body)
        expect_status(response, 'PATCH', endpoint, 200)

        self._item = DriveItem.from_dict(response.json())
        return self

    def __repr__(self) -> str:
        kind = 'folder' if self.is_folder else 'file' if self.is_file else 'item'
        return f"DriveItemProxy({kind}, id={self._id!r}, name={self.name!r})"


def _item_id(item: Union[DriveItemProxy, str]) -> str:
    return item.id if isinstance(item, DriveItemProxy) else item
