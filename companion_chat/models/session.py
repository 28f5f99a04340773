"""Server-side session model."""
from sqlmodel import SQLModel, Field
from datetime import datetime

from companion_chat.db.types import UTCDateTime
from companion_chat.utils.clock import as_utc, utcnow


class AuthSession(SQLModel, table=True):
    """Maps a session token to the user it authenticates."""
    __tablename__ = "auth_sessions"

    token: str = Field(primary_key=True, max_length=128)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    expires_at: datetime = Field(sa_type=UTCDateTime, index=True)

    def is_expired(self, now: datetime | None = None) -> bool:
        return as_utc(now or utcnow()) >= as_utc(self.expires_at)
