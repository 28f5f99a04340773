"""In-memory storage backend."""
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from companion_chat.models.companion import Companion
from companion_chat.models.message import Message, MessageRole
from companion_chat.models.session import AuthSession
from companion_chat.models.user import User, normalize_username
from companion_chat.storage.base import DuplicateUsernameError, Storage
from companion_chat.utils.clock import as_utc, utcnow


class MemoryStorage(Storage):
    """Process-local storage backed by dictionaries.

    Data is lost on restart. All access goes through one lock, so the store
    stays consistent when it is shared with worker threads.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.users: Dict[int, User] = {}
        self.companions: Dict[int, Companion] = {}  # keyed by user_id
        self.messages: Dict[int, Message] = {}
        self.sessions: Dict[str, AuthSession] = {}
        self.next_user_id = 1
        self.next_companion_id = 1
        self.next_message_id = 1

    def create_user(self, username: str, password_hash: str) -> User:
        key = normalize_username(username)
        with self.lock:
            if any(u.username_key == key for u in self.users.values()):
                raise DuplicateUsernameError(username)

            user = User(
                id=self.next_user_id,
                username=username,
                username_key=key,
                password_hash=password_hash,
                created_at=utcnow(),
            )
            self.users[user.id] = user
            self.next_user_id += 1
            return user

    def get_user(self, user_id: int) -> Optional[User]:
        with self.lock:
            return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        key = normalize_username(username)
        with self.lock:
            return next((u for u in self.users.values() if u.username_key == key), None)

    def get_preferences(self, user_id: int) -> Optional[Companion]:
        with self.lock:
            return self.companions.get(user_id)

    def set_preferences(self, user_id: int, settings: Dict[str, Any]) -> Companion:
        now = utcnow()
        with self.lock:
            existing = self.companions.get(user_id)
            if existing:
                companion = Companion(
                    id=existing.id,
                    user_id=user_id,
                    settings=dict(settings),
                    created_at=existing.created_at,
                    updated_at=now,
                )
            else:
                companion = Companion(
                    id=self.next_companion_id,
                    user_id=user_id,
                    settings=dict(settings),
                    created_at=now,
                    updated_at=now,
                )
                self.next_companion_id += 1
            self.companions[user_id] = companion
            return companion

    def get_messages(self, user_id: int, limit: Optional[int] = None) -> List[Message]:
        with self.lock:
            messages = sorted(
                (m for m in self.messages.values() if m.user_id == user_id),
                key=lambda m: (m.timestamp, m.id),
            )
        if limit is not None:
            return messages[-limit:] if limit > 0 else []
        return messages

    def add_message(
        self,
        user_id: int,
        role: MessageRole,
        content: str,
        companion_id: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> Message:
        with self.lock:
            message = Message(
                id=self.next_message_id,
                user_id=user_id,
                companion_id=companion_id,
                role=MessageRole(role).value,
                content=content,
                timestamp=as_utc(timestamp) or utcnow(),
            )
            self.messages[message.id] = message
            self.next_message_id += 1
            return message

    def create_session(self, token: str, user_id: int, expires_at: datetime) -> AuthSession:
        session = AuthSession(token=token, user_id=user_id, created_at=utcnow(), expires_at=as_utc(expires_at))
        with self.lock:
            self.sessions[token] = session
        return session

    def get_session(self, token: str) -> Optional[AuthSession]:
        with self.lock:
            return self.sessions.get(token)

    def delete_session(self, token: str) -> None:
        with self.lock:
            self.sessions.pop(token, None)

    def delete_expired_sessions(self, now: Optional[datetime] = None) -> int:
        with self.lock:
            expired = [token for token, s in self.sessions.items() if s.is_expired(now)]
            for token in expired:
                del self.sessions[token]
            return len(expired)
