"""
Session data models.

Contains the record persisted by session storages.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import json

from ..auth.state import AuthState


@dataclass
class SessionData:
    """
    Persisted OAuth session.

    Holds what is needed to resume a session without going through the
    login URL again.

    Attributes:
        client_id: Application (client) ID the token was issued to
        state: OAuth state (redirect URI and token)
        created_at: Session creation timestamp
        updated_at: Last update timestamp
    """
    client_id: str
    state: AuthState = field(default_factory=AuthState)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            'client_id': self.client_id,
            'state': self.state.to_dict(),
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SessionData':
        """
        Create from dictionary.

        Args:
            data: Dictionary with session data

        Returns:
            SessionData instance
        """
        return cls(
            client_id=data['client_id'],
            state=AuthState.from_dict(data.get('state') or {}),
            created_at=datetime.fromisoformat(data['created_at']) if data.get('created_at') else datetime.now(),
            updated_at=datetime.fromisoformat(data['updated_at']) if data.get('updated_at') else datetime.now(),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'SessionData':
        return cls.from_dict(json.loads(json_str))

    def is_valid(self) -> bool:
        """
        Check if session data can authenticate requests.

        Returns:
            True if a client ID and an access token are present
        """
        return bool(self.client_id and self.state.access_token)

    def update_timestamp(self) -> None:
        """Update the updated_at timestamp to now."""
        self.updated_at = datetime.now()
