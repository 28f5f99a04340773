"""Relational storage backend using SQLModel."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from companion_chat.db.config import build_engine
from companion_chat.db.init import init_db
from companion_chat.models.companion import Companion
from companion_chat.models.message import Message, MessageRole
from companion_chat.models.session import AuthSession
from companion_chat.models.user import User, normalize_username
from companion_chat.storage.base import DuplicateUsernameError, Storage
from companion_chat.utils.clock import as_utc, utcnow


class DatabaseStorage(Storage):
    """Storage over a SQL database. Each call runs in its own short session."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, create_tables: bool = True) -> "DatabaseStorage":
        engine = build_engine(database_url)
        if create_tables:
            init_db(engine)
        return cls(engine)

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def create_user(self, username: str, password_hash: str) -> User:
        key = normalize_username(username)
        with self._session() as session:
            existing = session.exec(select(User).where(User.username_key == key)).first()
            if existing:
                raise DuplicateUsernameError(username)

            user = User(username=username, username_key=key, password_hash=password_hash)
            session.add(user)
            try:
                session.commit()
            except IntegrityError:
                # Lost a race against a concurrent registration
                session.rollback()
                raise DuplicateUsernameError(username)
            session.refresh(user)
            return user

    def get_user(self, user_id: int) -> Optional[User]:
        with self._session() as session:
            return session.get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        key = normalize_username(username)
        with self._session() as session:
            return session.exec(select(User).where(User.username_key == key)).first()

    def get_preferences(self, user_id: int) -> Optional[Companion]:
        with self._session() as session:
            return session.exec(select(Companion).where(Companion.user_id == user_id)).first()

    def set_preferences(self, user_id: int, settings: Dict[str, Any]) -> Companion:
        with self._session() as session:
            companion = session.exec(select(Companion).where(Companion.user_id == user_id)).first()
            if companion:
                # Assign a fresh dict so the JSON column is flagged dirty
                companion.settings = dict(settings)
                companion.updated_at = utcnow()
            else:
                companion = Companion(user_id=user_id, settings=dict(settings))
            session.add(companion)
            session.commit()
            session.refresh(companion)
            return companion

    def get_messages(self, user_id: int, limit: Optional[int] = None) -> List[Message]:
        with self._session() as session:
            if limit is None:
                statement = select(Message).where(
                    Message.user_id == user_id
                ).order_by(Message.timestamp, Message.id)
                return list(session.exec(statement).all())

            if limit <= 0:
                return []

            # Newest first, then flip back to chronological order
            statement = select(Message).where(
                Message.user_id == user_id
            ).order_by(Message.timestamp.desc(), Message.id.desc()).limit(limit)
            return list(reversed(session.exec(statement).all()))

    def add_message(
        self,
        user_id: int,
        role: MessageRole,
        content: str,
        companion_id: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> Message:
        message = Message(
            user_id=user_id,
            companion_id=companion_id,
            role=MessageRole(role).value,
            content=content,
            timestamp=as_utc(timestamp) or utcnow(),
        )
        with self._session() as session:
            session.add(message)
            session.commit()
            session.refresh(message)
            return message

    def create_session(self, token: str, user_id: int, expires_at: datetime) -> AuthSession:
        auth_session = AuthSession(token=token, user_id=user_id, expires_at=as_utc(expires_at))
        with self._session() as session:
            session.add(auth_session)
            session.commit()
            session.refresh(auth_session)
            return auth_session

    def get_session(self, token: str) -> Optional[AuthSession]:
        with self._session() as session:
            return session.get(AuthSession, token)

    def delete_session(self, token: str) -> None:
        with self._session() as session:
            auth_session = session.get(AuthSession, token)
            if auth_session:
                session.delete(auth_session)
                session.commit()

    def delete_expired_sessions(self, now: Optional[datetime] = None) -> int:
        cutoff = as_utc(now) or utcnow()
        with self._session() as session:
            expired = session.exec(select(AuthSession).where(AuthSession.expires_at <= cutoff)).all()
            for auth_session in expired:
                session.delete(auth_session)
            session.commit()
            return len(expired)

    def close(self) -> None:
        self.engine.dispose()
