"""
OneDriveClient - High-level async client for OneDrive.

Example:
    >>> async with OneDriveClient("client-id", storage="work") as onedrive:
    ...     root = await onedrive.get_root()
    ...     for child in await root.children():
    ...         print(child.name)
"""
from pathlib import Path
from typing import Iterable, List, Optional, Union
from urllib.parse import quote

from .core.api import (
    AsyncGraphClient,
    GraphResponse,
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig
)
from .core.auth import AuthState, TokenData, AsyncAuthService, AccessTokenStatus
from .core.logging import get_logger
from .core.models import Drive, DriveItem
from .core.proxy import DriveProxy, DriveItemProxy, expect_status
from .core.session import SessionStorage, SessionData, SQLiteSession, MemorySession


class OneDriveClient:
    """
    High-level async client for OneDrive.

    Ties together the configuration, the caller-owned OAuth state, the OAuth
    service and the Graph transport. The state is persisted in the session
    storage each time a token is obtained or renewed.

    Session mode:
        >>> client = OneDriveClient("client-id", storage="my_account")
        >>> # State loaded from / saved to my_account.session

    Explicit state:
        >>> state = AuthState()
        >>> client = OneDriveClient("client-id", state)
        >>> url = client.get_login_url(['files.readwrite', 'offline_access'],
        ...                            'http://localhost:7000/')

    With custom configuration:
        >>> config = OneDriveClient.create_config(proxy="http://proxy:8080")
        >>> client = OneDriveClient("client-id", config=config)
    """

    def __init__(
        self,
        client_id: str,
        state: Optional[AuthState] = None,
        *,
        config: Optional[APIConfig] = None,
        storage: Optional[Union[str, Path, SessionStorage]] = None,
        base_path: Optional[Path] = None
    ):
        """
        Initialize OneDrive client.

        Args:
            client_id: Application (client) ID
            state: OAuth state (loaded from storage, or empty, if omitted)
            config: Optional API configuration
            storage: Session name or path (SQLite file), or a SessionStorage
            base_path: Base path for session files

        Raises:
            ValueError: If the client ID is empty
        """
        if not client_id:
            raise ValueError('The client ID must be set')

        self._client_id = client_id
        self._config = config or APIConfig.default()
        self._logger = get_logger('onedrivepy.client')

        if storage is None:
            self._storage: SessionStorage = MemorySession()
        elif isinstance(storage, (str, Path)):
            self._storage = SQLiteSession(storage, base_path)
        else:
            self._storage = storage

        if state is None:
            state = self._load_state()

        self._state = state
        self._auth = AsyncAuthService(client_id, state, self._config)
        self._graph = AsyncGraphClient(state, self._config)

    # =========================================================================
    # Configuration helpers
    # =========================================================================

    @staticmethod
    def create_config(
        proxy: Optional[str] = None,
        proxy_user: Optional[str] = None,
        proxy_pass: Optional[str] = None,
        timeout: float = 300,
        max_retries: int = 4,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        range_size: Optional[int] = None
    ) -> APIConfig:
        """
        Create API configuration with common options.

        Args:
            proxy: Proxy URL (e.g., "http://proxy:8080")
            proxy_user: Proxy username
            proxy_pass: Proxy password
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for idempotent requests
            verify_ssl: Whether to verify SSL certificates
            user_agent: Custom user agent string
            range_size: Default upload session range size

        Returns:
            APIConfig instance
        """
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(
                url=proxy,
                username=proxy_user,
                password=proxy_pass
            )

        return APIConfig(
            proxy=proxy_config,
            timeout=TimeoutConfig(total=timeout),
            retry=RetryConfig(max_retries=max_retries),
            ssl=SSLConfig(verify=verify_ssl),
            user_agent=user_agent or 'onedrivepy/1.0.0',
            default_range_size=range_size
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def config(self) -> APIConfig:
        return self._config

    @property
    def graph(self) -> AsyncGraphClient:
        """Authenticated transport, for requests not covered by the client."""
        return self._graph

    @property
    def storage(self) -> SessionStorage:
        return self._storage

    @property
    def session_file(self) -> Optional[Path]:
        """Get session file path if using SQLite session."""
        if isinstance(self._storage, SQLiteSession):
            return self._storage.path
        return None

    # =========================================================================
    # Session persistence
    # =========================================================================

    def _load_state(self) -> AuthState:
        """Load the stored state, or start from an empty one."""
        if not self._storage.exists():
            return AuthState()

        data = self._storage.load()

        if data is None:
            return AuthState()

        if data.client_id != self._client_id:
            self._logger.warning(
                f"Stored session belongs to client {data.client_id}, ignoring it"
            )
            return AuthState()

        self._logger.debug("Resumed stored OAuth state")
        return data.state

    def save_state(self) -> None:
        """Persist the current state in the session storage."""
        existing = self._storage.load() if self._storage.exists() else None

        if existing is not None and existing.client_id == self._client_id:
            existing.state = self._state
            data = existing
        else:
            data = SessionData(client_id=self._client_id, state=self._state)

        self._storage.save(data)

    def get_session(self) -> Optional[SessionData]:
        """Get stored session data."""
        return self._storage.load()

    async def log_out(self) -> None:
        """Forget the token and delete the stored session."""
        self._state.token = None
        self._state.redirect_uri = None
        self._storage.delete()
        await self.close()

    # =========================================================================
    # Context manager
    # =========================================================================

    async def __aenter__(self) -> 'OneDriveClient':
        await self._graph.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        await self._graph.close()
        self._storage.close()

    # =========================================================================
    # Authentication
    # =========================================================================

    def get_login_url(self, scopes: Iterable[str], redirect_uri: str) -> str:
        """
        Build the URL the user visits to grant access.

        Args:
            scopes: OAuth scopes, e.g. ['files.readwrite', 'offline_access']
            redirect_uri: URI receiving the authorization code

        Returns:
            Login URL
        """
        url = self._auth.get_login_url(scopes, redirect_uri)
        self.save_state()
        return url

    async def obtain_access_token(self, client_secret: str, code: str) -> TokenData:
        """Exchange an authorization code for an access token and save it."""
        token = await self._auth.obtain_access_token(client_secret, code)
        self.save_state()
        return token

    async def renew_access_token(self, client_secret: str) -> TokenData:
        """Renew the access token with the refresh token and save it."""
        token = await self._auth.renew_access_token(client_secret)
        self.save_state()
        return token

    def access_token_status(self) -> AccessTokenStatus:
        return self._auth.access_token_status()

    def token_expire(self) -> float:
        """Seconds before the access token expires."""
        return self._auth.token_expire()

    @property
    def is_logged_in(self) -> bool:
        return self._state.token is not None

    # =========================================================================
    # Drives
    # =========================================================================

    async def _get(self, endpoint: str) -> GraphResponse:
        response = await self._graph.request('GET', endpoint)
        return expect_status(response, 'GET', endpoint, 200)

    async def _get_drive(self, endpoint: str) -> DriveProxy:
        response = await self._get(endpoint)
        return DriveProxy(self._graph, Drive.from_dict(response.json()))

    async def _get_item(self, endpoint: str) -> DriveItemProxy:
        response = await self._get(endpoint)
        return DriveItemProxy(self._graph, DriveItem.from_dict(response.json()))

    async def _get_items(self, endpoint: str) -> List[DriveItemProxy]:
        response = await self._get(endpoint)
        payload = response.json() or {}
        return [
            DriveItemProxy(self._graph, DriveItem.from_dict(data))
            for data in payload.get('value', [])
        ]

    async def get_drives(self) -> List[DriveProxy]:
        """
        Get the drives available to the signed-in user.

        Returns:
            Drive proxies (first page only)
        """
        response = await self._get('/me/drives')
        payload = response.json() or {}
        return [
            DriveProxy(self._graph, Drive.from_dict(data))
            for data in payload.get('value', [])
        ]

    async def get_my_drive(self) -> DriveProxy:
        """Get the default drive of the signed-in user."""
        return await self._get_drive('/me/drive')

    async def get_drive_by_id(self, drive_id: str) -> DriveProxy:
        return await self._get_drive(f"/drives/{drive_id}")

    async def get_drive_by_user(self, user_id: str) -> DriveProxy:
        """Get the default drive of a user, by ID or user principal name."""
        return await self._get_drive(f"/users/{user_id}/drive")

    async def get_drive_by_group(self, group_id: str) -> DriveProxy:
        """Get the document library of a group."""
        return await self._get_drive(f"/groups/{group_id}/drive")

    async def get_drive_by_site(self, site_id: str) -> DriveProxy:
        """Get the default document library of a SharePoint site."""
        return await self._get_drive(f"/sites/{site_id}/drive")

    # =========================================================================
    # Drive items
    # =========================================================================

    async def get_drive_item_by_id(
        self,
        item_id: str,
        drive_id: Optional[str] = None
    ) -> DriveItemProxy:
        """
        Get a drive item by ID.

        Args:
            item_id: Item ID
            drive_id: Drive holding the item (default drive if omitted)

        Returns:
            Item proxy
        """
        if drive_id:
            return await self._get_item(f"/drives/{drive_id}/items/{item_id}")
        return await self._get_item(f"/me/drive/items/{item_id}")

    async def get_drive_item_by_path(self, path: str) -> DriveItemProxy:
        """
        Get a drive item of the default drive by path.

        Args:
            path: Absolute path from the drive root, e.g. "/Documents/report.pdf"

        Returns:
            Item proxy

        Raises:
            ValueError: If the path is not absolute
        """
        if not path.startswith('/'):
            raise ValueError(f"Path must be absolute: {path!r}")

        if path == '/':
            return await self.get_root()

        return await self._get_item(f"/me/drive/root:{quote(path.rstrip('/'))}")

    async def get_root(self) -> DriveItemProxy:
        """Get the root folder of the default drive."""
        return await self._get_item('/me/drive/root')

    async def get_special_folder(self, name: str) -> DriveItemProxy:
        """
        Get a special folder of the default drive.

        Args:
            name: 'documents', 'photos', 'cameraroll', 'approot' or 'music'
        """
        return await self._get_item(f"/me/drive/special/{name}")

    async def get_shared(self) -> List[DriveItemProxy]:
        """Get the items shared with the signed-in user (first page only)."""
        return await self._get_items('/me/drive/sharedWithMe')

    async def get_recent(self) -> List[DriveItemProxy]:
        """Get the items recently used by the signed-in user (first page only)."""
        return await self._get_items('/me/drive/recent')

    def __repr__(self) -> str:
        return f"OneDriveClient(client_id={self._client_id!r}, logged_in={self.is_logged_in})"
