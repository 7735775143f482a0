"""
OAuth state models.

The state is owned by the caller and passed by reference to the components
that read or refresh the access token.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import json
import time


@dataclass
class TokenData:
    """
    Access token as returned by the token endpoint.

    Attributes:
        access_token: Bearer token sent with Graph requests
        obtained: Unix time at which the token was received
        expires_in: Lifetime in seconds, counted from ``obtained``
        token_type: Token type (normally "Bearer")
        scope: Granted scopes, space separated
        refresh_token: Token used to renew the access token (offline_access)
        raw: Complete decoded token response
    """
    access_token: str
    obtained: float
    expires_in: int = 0
    token_type: str = 'Bearer'
    scope: Optional[str] = None
    refresh_token: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any], obtained: Optional[float] = None) -> 'TokenData':
        """
        Create from a decoded token endpoint response.

        Args:
            data: Decoded JSON body
            obtained: Reception time (defaults to now)

        Returns:
            TokenData instance

        Raises:
            KeyError: If the response carries no access token
        """
        return cls(
            access_token=data['access_token'],
            obtained=obtained if obtained is not None else time.time(),
            expires_in=int(data.get('expires_in', 0)),
            token_type=data.get('token_type', 'Bearer'),
            scope=data.get('scope'),
            refresh_token=data.get('refresh_token'),
            raw=dict(data),
        )

    @property
    def expires_at(self) -> float:
        return self.obtained + self.expires_in

    def remaining(self, now: Optional[float] = None) -> float:
        """Seconds until the token expires (negative once expired)."""
        return self.expires_at - (now if now is not None else time.time())

    def to_dict(self) -> dict:
        return {
            'access_token': self.access_token,
            'obtained': self.obtained,
            'expires_in': self.expires_in,
            'token_type': self.token_type,
            'scope': self.scope,
            'refresh_token': self.refresh_token,
            'raw': self.raw,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TokenData':
        return cls(
            access_token=data['access_token'],
            obtained=float(data['obtained']),
            expires_in=int(data.get('expires_in', 0)),
            token_type=data.get('token_type', 'Bearer'),
            scope=data.get('scope'),
            refresh_token=data.get('refresh_token'),
            raw=data.get('raw') or {},
        )


@dataclass
class AuthState:
    """
    OAuth2 authorization-code flow state.

    Attributes:
        redirect_uri: Redirect URI remembered between building the login URL
            and exchanging the authorization code
        token: Current access token, None before the first exchange
    """
    redirect_uri: Optional[str] = None
    token: Optional[TokenData] = None

    @property
    def access_token(self) -> Optional[str]:
        return self.token.access_token if self.token else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self.token.refresh_token if self.token else None

    def to_dict(self) -> dict:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            'redirect_uri': self.redirect_uri,
            'token': self.token.to_dict() if self.token else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AuthState':
        """
        Create from dictionary.

        Args:
            data: Dictionary with state data

        Returns:
            AuthState instance
        """
        token = data.get('token')
        return cls(
            redirect_uri=data.get('redirect_uri'),
            token=TokenData.from_dict(token) if token else None,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'AuthState':
        return cls.from_dict(json.loads(json_str))
