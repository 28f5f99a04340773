"""User model for SQLModel."""
from sqlmodel import SQLModel, Field
from datetime import datetime

from companion_chat.db.types import UTCDateTime
from companion_chat.utils.clock import utcnow


def normalize_username(username: str) -> str:
    """Key used for case-insensitive username uniqueness."""
    return username.strip().lower()


class User(SQLModel, table=True):
    """User entity for authentication and companion ownership."""
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(max_length=50, index=True)
    username_key: str = Field(max_length=50, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
