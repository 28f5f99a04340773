"""
Message Model for companion chat

Stores individual chat messages (user or assistant) for a user.
Messages are immutable once created.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text, String

from companion_chat.db.types import UTCDateTime
from companion_chat.utils.clock import utcnow


class MessageRole(str, Enum):
    """Message sender role"""
    USER = "user"
    ASSISTANT = "assistant"


class Message(SQLModel, table=True):
    """
    Individual chat message (user or assistant).

    Messages are append-only and listed by (timestamp, id).
    """
    __tablename__ = "messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    companion_id: Optional[int] = Field(default=None, foreign_key="companions.id")
    role: str = Field(sa_column=Column(String(16), nullable=False))  # Store enum value as string
    content: str = Field(sa_column=Column(Text, nullable=False))
    timestamp: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
