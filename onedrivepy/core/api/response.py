"""Response wrapper for Graph API requests."""
import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass
class GraphResponse:
    """
    Fully read response of a Graph API request.

    Attributes:
        status: HTTP status code
        headers: Response headers (case-insensitive mapping from aiohttp)
        content: Raw response body
    """
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes = b''

    @property
    def text(self) -> str:
        return self.content.decode('utf-8', errors='replace')

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Returns:
            Decoded object, or None for an empty body

        Raises:
            ValueError: If the body is not valid JSON
        """
        if not self.content:
            return None
        return json.loads(self.content)

    def header(self, name: str) -> Optional[str]:
        """Get a header value, ignoring case."""
        value = self.headers.get(name)
        if value is not None:
            return value
        lowered = name.lower()
        for key, candidate in self.headers.items():
            if key.lower() == lowered:
                return candidate
        return None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
