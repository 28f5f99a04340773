"""Companion (preferences) model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from datetime import datetime
from typing import Any, Dict

from companion_chat.db.types import UTCDateTime
from companion_chat.utils.clock import utcnow


class Companion(SQLModel, table=True):
    """
    Stored companion settings for a user.

    At most one row per user. Saving new settings replaces the ``settings``
    document wholesale; nothing is merged from the previous value.
    """
    __tablename__ = "companions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)
    settings: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
