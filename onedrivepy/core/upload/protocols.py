"""
Protocol definitions for upload module.

Defines the interfaces the upload session depends on, so that content
sources and transports can be swapped (and mocked in tests).
"""
from typing import Protocol, Dict, Any, Optional, runtime_checkable

from ..api.response import GraphResponse


@runtime_checkable
class UploadContent(Protocol):
    """
    Protocol for upload content sources.

    A source knows its total size before the first read and is read
    sequentially, once.
    """

    @property
    def size(self) -> int:
        """Total number of bytes the source yields."""
        ...

    async def read(self, n: int) -> bytes:
        """
        Read the next bytes of the content.

        Args:
            n: Maximum number of bytes to read

        Returns:
            Exactly n bytes, fewer only when the end is reached, b'' at the end
        """
        ...

    async def close(self) -> None:
        """Release the resources held by the source."""
        ...


class TransportProtocol(Protocol):
    """Protocol for the authenticated transport used by upload sessions."""

    async def request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Dict[str, Any]] = None,
        body: Optional[bytes] = None,
        json: Any = None
    ) -> GraphResponse:
        """Send a request and return the complete response."""
        ...
