"""
Storage interface

The CRUD surface every backend implements. Route handlers and services only
talk to this interface, so the backing store can be swapped by configuration.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from companion_chat.models.companion import Companion
from companion_chat.models.message import Message, MessageRole
from companion_chat.models.session import AuthSession
from companion_chat.models.user import User


class StorageError(Exception):
    """Base exception for storage errors"""


class DuplicateUsernameError(StorageError):
    """Raised when a username is already taken (case-insensitive)."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already exists")


class Storage(ABC):
    """Abstract storage backend."""

    # User operations

    @abstractmethod
    def create_user(self, username: str, password_hash: str) -> User:
        """Create a user, raising DuplicateUsernameError on a clash."""

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive lookup."""

    # Companion operations

    @abstractmethod
    def get_preferences(self, user_id: int) -> Optional[Companion]:
        ...

    @abstractmethod
    def set_preferences(self, user_id: int, settings: Dict[str, Any]) -> Companion:
        """Create or wholesale replace the user's companion settings."""

    # Message operations

    @abstractmethod
    def get_messages(self, user_id: int, limit: Optional[int] = None) -> List[Message]:
        """Messages in (timestamp, id) order; ``limit`` keeps the trailing slice."""

    @abstractmethod
    def add_message(
        self,
        user_id: int,
        role: MessageRole,
        content: str,
        companion_id: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> Message:
        ...

    # Session operations

    @abstractmethod
    def create_session(self, token: str, user_id: int, expires_at: datetime) -> AuthSession:
        ...

    @abstractmethod
    def get_session(self, token: str) -> Optional[AuthSession]:
        ...

    @abstractmethod
    def delete_session(self, token: str) -> None:
        ...

    @abstractmethod
    def delete_expired_sessions(self, now: Optional[datetime] = None) -> int:
        """Remove sessions whose expiry has passed; returns how many went."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""
