"""
Async Graph API client.

Authenticated transport for the OneDrive REST resources, with comprehensive
configuration support.
"""
import json as jsonlib
import asyncio
import logging
from typing import Dict, Optional, Any, AsyncIterator, Union

import aiohttp

from .config import APIConfig
from .response import GraphResponse
from ..auth.state import AuthState
from ..exceptions import OneDriveRequestError, UnexpectedStatusError


Body = Union[bytes, bytearray, memoryview, str]


class AsyncGraphClient:
    """
    Asynchronous Graph API client.

    Features:
    - Full async/await support
    - Configurable proxy, SSL, timeouts
    - Bearer credentials read from a caller-owned AuthState
    - Automatic retry with exponential backoff for idempotent requests
    - Connection pooling

    Relative endpoints ("/me/drive") resolve against the configured base URL
    and carry the Authorization header. Absolute URLs, such as upload session
    URLs, are pre-authenticated and are sent without it.

    Example:
        >>> state = AuthState(token=token)
        >>> async with AsyncGraphClient(state) as graph:
        ...     response = await graph.request('GET', '/me/drive')
    """

    def __init__(
        self,
        state: Optional[AuthState] = None,
        config: Optional[APIConfig] = None
    ):
        """
        Initialize async Graph client.

        Args:
            state: OAuth state holding the access token
            config: API configuration (uses defaults if not provided)
        """
        self._config = config or APIConfig.default()
        self._state = state if state is not None else AuthState()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._closed = False

        from ..logging import get_logger
        self._logger = get_logger('onedrivepy.api')
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def state(self) -> AuthState:
        return self._state

    async def __aenter__(self) -> 'AsyncGraphClient':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
            self._closed = False
        return self._session

    async def close(self):
        """Close client and release resources."""
        self._closed = True

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    def is_absolute(self, endpoint: str) -> bool:
        return endpoint.startswith('http://') or endpoint.startswith('https://')

    def build_url(self, endpoint: str) -> str:
        """Build request URL for an endpoint."""
        if self.is_absolute(endpoint):
            return endpoint
        return f"{self._config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def build_headers(
        self,
        endpoint: str,
        headers: Optional[Dict[str, Any]] = None
    ) -> Dict[str, str]:
        """Build request headers, adding credentials for Graph endpoints."""
        result: Dict[str, str] = {}

        if not self.is_absolute(endpoint) and self._state.access_token:
            result['Authorization'] = f"Bearer {self._state.access_token}"

        if headers:
            for key, value in headers.items():
                result[key] = str(value)

        return result

    async def request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Dict[str, Any]] = None,
        body: Optional[Body] = None,
        json: Any = None
    ) -> GraphResponse:
        """
        Send a request and read the complete response.

        The status code is not interpreted here; callers decide which statuses
        they accept.

        Args:
            method: HTTP method
            endpoint: Graph endpoint ("/me/drive") or absolute URL
            headers: Additional request headers
            body: Raw request body
            json: Object to send as JSON body (ignored when body is given)

        Returns:
            GraphResponse with status, headers and body

        Raises:
            OneDriveRequestError: If the request could not be exchanged
        """
        method = method.upper()
        url = self.build_url(endpoint)
        request_headers = self.build_headers(endpoint, headers)

        data = body
        if data is None and json is not None:
            data = jsonlib.dumps(json)
            request_headers.setdefault('Content-Type', 'application/json')

        retry = self._config.retry
        attempt = 0

        while True:
            session = await self._ensure_session()
            self._logger.debug(f"{method} {url}")

            try:
                async with session.request(
                    method,
                    url,
                    data=data,
                    headers=request_headers,
                    proxy=self._config.get_proxy()
                ) as response:
                    content = await response.read()
                    result = GraphResponse(
                        status=response.status,
                        headers=response.headers,
                        content=content
                    )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                self._logger.error(f"Network error on {method} {url}: {e}")

                if retry.allows(method) and attempt < retry.max_retries:
                    await asyncio.sleep(retry.calculate_delay(attempt))
                    attempt += 1
                    continue

                raise OneDriveRequestError(f"Network error on '{method} {url}': {e}")

            self._logger.debug(f"{method} {url} -> {result.status}")

            if (
                result.status in retry.retry_on_status
                and retry.allows(method)
                and attempt < retry.max_retries
            ):
                delay = self._retry_after(result) or retry.calculate_delay(attempt)
                self._logger.warning(
                    f"Retrying {method} {url} after status {result.status}, attempt {attempt + 1}"
                )
                await asyncio.sleep(delay)
                attempt += 1
                continue

            return result

    async def stream(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Dict[str, Any]] = None,
        chunk_size: int = 64 * 1024
    ) -> AsyncIterator[bytes]:
        """
        Send a request and yield the response body in chunks.

        Args:
            method: HTTP method
            endpoint: Graph endpoint or absolute URL
            headers: Additional request headers
            chunk_size: Maximum size of each yielded chunk

        Yields:
            Body chunks

        Raises:
            UnexpectedStatusError: If the status is not 200
            OneDriveRequestError: If the request could not be exchanged
        """
        method = method.upper()
        url = self.build_url(endpoint)
        session = await self._ensure_session()

        try:
            async with session.request(
                method,
                url,
                headers=self.build_headers(endpoint, headers),
                proxy=self._config.get_proxy()
            ) as response:
                if response.status != 200:
                    raise UnexpectedStatusError(method, endpoint, response.status)

                async for chunk in response.content.iter_chunked(chunk_size):
                    yield chunk
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error on {method} {url}: {e}")
            raise OneDriveRequestError(f"Network error on '{method} {url}': {e}")

    def _retry_after(self, response: GraphResponse) -> Optional[float]:
        """Get the delay requested by a Retry-After header, if any."""
        value = response.header('Retry-After')
        if value is None:
            return None
        try:
            return min(float(value), self._config.retry.max_delay)
        except ValueError:
            return None
