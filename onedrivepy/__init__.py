"""
onedrivepy - Async Python client for OneDrive.

Usage:
    >>> from onedrivepy import OneDriveClient
    >>>
    >>> async with OneDriveClient("client-id", storage="work") as onedrive:
    ...     root = await onedrive.get_root()
    ...     item = await root.upload_large('video.mp4', Path('video.mp4'))
"""
import logging
from .client import OneDriveClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
    AsyncGraphClient,
    GraphResponse
)

# Authentication
from .core.auth import AuthState, TokenData, AsyncAuthService, AccessTokenStatus

# Session management
from .core.session import (
    SessionStorage,
    SessionData,
    SQLiteSession,
    MemorySession
)

# Resources
from .core.models import Drive, DriveItem, Quota, UploadSessionInfo
from .core.proxy import DriveProxy, DriveItemProxy
from .core.upload import UploadSession, UploadResult, UploadErrorKind, UploadProgress

# Errors
from .core.exceptions import (
    OneDriveException,
    OneDriveAuthError,
    OneDriveRequestError,
    UnexpectedStatusError,
    OneDriveUploadError,
    UploadNotFinalizedError
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for onedrivepy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'onedrivepy',
        'onedrivepy.api',
        'onedrivepy.auth',
        'onedrivepy.client',
        'onedrivepy.proxy',
        'onedrivepy.session',
        'onedrivepy.upload',
        'onedrivepy.upload.content',
        'onedrivepy.upload.session',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'OneDriveClient',
    'AsyncGraphClient',
    'GraphResponse',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'AuthState',
    'TokenData',
    'AsyncAuthService',
    'AccessTokenStatus',
    'SessionStorage',
    'SessionData',
    'SQLiteSession',
    'MemorySession',
    'Drive',
    'DriveItem',
    'Quota',
    'UploadSessionInfo',
    'DriveProxy',
    'DriveItemProxy',
    'UploadSession',
    'UploadResult',
    'UploadErrorKind',
    'UploadProgress',
    'OneDriveException',
    'OneDriveAuthError',
    'OneDriveRequestError',
    'UnexpectedStatusError',
    'OneDriveUploadError',
    'UploadNotFinalizedError',
    'setup_logging',
]
