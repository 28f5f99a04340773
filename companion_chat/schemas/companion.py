"""Companion settings schemas."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class CompanionSettings(BaseModel):
    """Schema for the companion persona a user configures."""
    name: str = Field(..., min_length=1, max_length=100)
    personality: str = Field(..., min_length=1, max_length=2000)
    description: Optional[str] = Field(None, max_length=4000)  # Free-text background
    interests: List[str] = Field(default_factory=list, max_length=25)
    avatar: Optional[str] = Field(None, max_length=2000)  # URL or data URI
    creativity: Optional[float] = Field(None, ge=0.0, le=1.0)  # Sampling temperature


class CompanionResponse(BaseModel):
    """Schema for a stored companion record."""
    id: int
    user_id: int
    settings: CompanionSettings
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
