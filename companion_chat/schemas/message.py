"""Message schemas."""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class MessageCreate(BaseModel):
    """Schema for a message sent by the user."""
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message content cannot be empty")
        return value


class MessageResponse(BaseModel):
    """Schema for a stored message."""
    id: int
    user_id: int
    companion_id: Optional[int] = None
    role: str
    content: str
    timestamp: datetime

    class Config:
        from_attributes = True


class ChatExchangeResponse(BaseModel):
    """The user's stored message and the companion's stored reply."""
    message: MessageResponse
    reply: MessageResponse
