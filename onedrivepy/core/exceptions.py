"""
Custom exceptions for OneDrive operations.

This module defines exception classes raised by the transport, the OAuth
flow and the upload session protocol.
"""
from typing import Optional


class OneDriveException(Exception):
    """Base exception for all OneDrive-related errors."""
    
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            status_code: HTTP status code (if available)
        """
        self.status_code = status_code
        super().__init__(message)


class OneDriveAuthError(OneDriveException):
    """Exception raised for OAuth state and token errors."""
    pass


class OneDriveRequestError(OneDriveException):
    """
    Exception raised when a request could not be exchanged at all.
    
    Wraps network errors and timeouts; the request may be retried.
    """
    pass


class UnexpectedStatusError(OneDriveException):
    """Exception raised when the API answers with an unexpected status code."""
    
    def __init__(self, method: str, endpoint: str, status: int) -> None:
        """
        Initialize the exception.
        
        Args:
            method: HTTP method of the failed request
            endpoint: Endpoint or URL of the failed request
            status: Status code returned by the API
        """
        self.method = method
        self.endpoint = endpoint
        super().__init__(
            f"Unexpected status code produced by '{method} {endpoint}': {status}",
            status
        )
    
    @property
    def status(self) -> int:
        return self.status_code


class OneDriveUploadError(OneDriveException):
    """Base exception for upload session protocol failures."""
    pass


class UploadNotFinalizedError(OneDriveUploadError):
    """Exception raised when the content ran out before OneDrive created the item."""
    
    def __init__(self, upload_url: str, uploaded_bytes: int = 0) -> None:
        self.upload_url = upload_url
        self.uploaded_bytes = uploaded_bytes
        super().__init__('OneDrive did not create a drive item for the uploaded file')
