"""
In-memory session storage implementation.

Non-persistent storage for tests and short-lived scripts.
"""
from typing import Optional

from .protocols import SessionStorage
from .models import SessionData


class MemorySession(SessionStorage):
    """
    In-memory session storage.

    Data is lost when the object is destroyed.

    Example:
        >>> storage = MemorySession()
        >>> storage.save(SessionData(client_id='abc', state=state))
        >>> loaded = storage.load()
    """

    def __init__(self):
        self._data: Optional[SessionData] = None

    def load(self) -> Optional[SessionData]:
        return self._data

    def save(self, data: SessionData) -> None:
        data.update_timestamp()
        self._data = data

    def delete(self) -> None:
        self._data = None

    def exists(self) -> bool:
        return self._data is not None

    def close(self) -> None:
        """Close storage (no-op for memory storage)."""
        pass

    def __enter__(self) -> 'MemorySession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
