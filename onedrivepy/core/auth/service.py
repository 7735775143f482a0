"""
OAuth2 authorization-code flow service.

Builds the login URL, exchanges authorization codes and renews access tokens
against the Microsoft identity platform (v2.0) endpoints.
"""
import json
import time
from enum import IntEnum
from typing import Iterable, Optional, Dict, Any
from urllib.parse import urlencode, quote

import aiohttp

from ..api.config import APIConfig
from ..exceptions import OneDriveAuthError, OneDriveRequestError
from ..logging import get_logger
from .state import AuthState, TokenData


class AccessTokenStatus(IntEnum):
    """Status of the access token held by an AuthState."""
    MISSING = 0
    EXPIRED = -2
    EXPIRING = -1
    VALID = 1


# Tokens closer than this to their expiry are reported as EXPIRING
EXPIRING_THRESHOLD = 60


class AsyncAuthService:
    """
    OAuth2 authorization-code flow manager.

    The service reads and updates the AuthState it was given; it keeps no
    token of its own.

    Example:
        >>> state = AuthState()
        >>> auth = AsyncAuthService('client-id', state)
        >>> url = auth.get_login_url(['files.readwrite', 'offline_access'],
        ...                          'http://localhost:7000/')
        >>> # user visits url, gets redirected with ?code=...
        >>> await auth.obtain_access_token('client-secret', code)
    """

    def __init__(
        self,
        client_id: str,
        state: AuthState,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize auth service.

        Args:
            client_id: Application (client) ID
            state: Caller-owned OAuth state
            config: API configuration (uses defaults if not provided)
            session: Optional shared HTTP session
        """
        if not client_id:
            raise ValueError('The client ID must be set')

        self._client_id = client_id
        self._state = state
        self._config = config or APIConfig.default()
        self._session = session
        self._logger = get_logger('onedrivepy.auth')

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def client_id(self) -> str:
        return self._client_id

    def get_login_url(self, scopes: Iterable[str], redirect_uri: str) -> str:
        """
        Build the URL the user visits to grant access.

        The redirect URI is remembered in the state, it is required again when
        exchanging the authorization code.

        Args:
            scopes: OAuth scopes to request
            redirect_uri: URI the user agent is redirected to with ?code=...

        Returns:
            Login URL
        """
        redirect_uri = str(redirect_uri)
        self._state.redirect_uri = redirect_uri

        values = {
            'client_id': self._client_id,
            'response_type': 'code',
            'redirect_uri': redirect_uri,
            'scope': ' '.join(scopes),
            'response_mode': 'query',
        }

        return f"{self._config.auth_url}?{urlencode(values, quote_via=quote)}"

    def token_expire(self, now: Optional[float] = None) -> float:
        """
        Get the number of seconds before the access token expires.

        Raises:
            OneDriveAuthError: If no token has been obtained
        """
        if self._state.token is None:
            raise OneDriveAuthError('No access token has been obtained')
        return self._state.token.remaining(now)

    def access_token_status(self, now: Optional[float] = None) -> AccessTokenStatus:
        """Get the status of the current access token."""
        if self._state.token is None:
            return AccessTokenStatus.MISSING

        remaining = self.token_expire(now)

        if remaining <= 0:
            return AccessTokenStatus.EXPIRED

        if remaining <= EXPIRING_THRESHOLD:
            return AccessTokenStatus.EXPIRING

        return AccessTokenStatus.VALID

    async def obtain_access_token(self, client_secret: str, code: str) -> TokenData:
        """
        Exchange an authorization code for an access token.

        Args:
            client_secret: Application secret
            code: Authorization code received on the redirect URI

        Returns:
            New token (also stored in the state)

        Raises:
            OneDriveAuthError: If the redirect URI is unknown or the exchange fails
        """
        if self._state.redirect_uri is None:
            raise OneDriveAuthError(
                "The state's redirect URI must be set to call obtain_access_token()"
            )

        values = {
            'client_id': self._client_id,
            'redirect_uri': self._state.redirect_uri,
            'client_secret': str(client_secret),
            'code': str(code),
            'grant_type': 'authorization_code',
        }

        data = await self._post_form(values)
        token = self._store_token(data)
        self._state.redirect_uri = None
        self._logger.info("Access token obtained")
        return token

    async def renew_access_token(self, client_secret: str) -> TokenData:
        """
        Renew the access token using the stored refresh token.

        Args:
            client_secret: Application secret

        Returns:
            New token (also stored in the state)

        Raises:
            OneDriveAuthError: If no refresh token is available or renewal fails
        """
        if self._state.refresh_token is None:
            raise OneDriveAuthError(
                "The refresh token is not set or no permission for "
                "'offline_access' was given to renew the token"
            )

        values = {
            'client_id': self._client_id,
            'client_secret': str(client_secret),
            'grant_type': 'refresh_token',
            'refresh_token': self._state.refresh_token,
        }

        data = await self._post_form(values)
        token = self._store_token(data)
        self._logger.info("Access token renewed")
        return token

    def _store_token(self, data: Dict[str, Any]) -> TokenData:
        try:
            token = TokenData.from_response(data, obtained=time.time())
        except KeyError:
            raise OneDriveAuthError('Token response carries no access token')
        self._state.token = token
        return token

    async def _post_form(self, values: Dict[str, str]) -> Dict[str, Any]:
        """
        Post form values to the token endpoint and decode the JSON answer.

        Raises:
            OneDriveAuthError: On non-200 status or undecodable body
            OneDriveRequestError: On network errors
        """
        owns_session = self._session is None
        session = self._session or aiohttp.ClientSession(
            **self._config.get_session_kwargs()
        )

        try:
            async with session.post(
                self._config.token_url,
                data=values,
                proxy=self._config.get_proxy()
            ) as response:
                body = await response.text()
                status = response.status
        except aiohttp.ClientError as e:
            self._logger.error(f"Token request failed: {e}")
            raise OneDriveRequestError(f"Network error: {e}")
        finally:
            if owns_session:
                await session.close()

        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            raise OneDriveAuthError('Token endpoint returned an undecodable body', status)

        if status != 200 or not isinstance(data, dict):
            description = data.get('error_description') if isinstance(data, dict) else None
            raise OneDriveAuthError(
                f"Token request failed with status {status}: {description or data}",
                status
            )

        return data
