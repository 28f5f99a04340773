"""Authentication schemas for Companion Chat."""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class Credentials(BaseModel):
    """Register / login request body."""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=256)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username is required")
        return value


class UserResponse(BaseModel):
    """Public view of a user. Never includes credential material."""
    id: int
    username: str
    created_at: datetime

    class Config:
        from_attributes = True
