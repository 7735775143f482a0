"""OAuth2 authorization-code flow."""
from .state import AuthState, TokenData
from .service import AsyncAuthService, AccessTokenStatus

__all__ = [
    'AuthState',
    'TokenData',
    'AsyncAuthService',
    'AccessTokenStatus',
]
