"""Companion preferences router."""
from fastapi import APIRouter, Depends
from typing import Optional
import logging

from companion_chat.schemas.companion import CompanionSettings, CompanionResponse
from companion_chat.middleware.auth import get_current_user
from companion_chat.models.user import User
from companion_chat.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Preferences"])  # No prefix since main.py adds /api prefix


@router.get("/preferences", response_model=Optional[CompanionResponse])
async def get_preferences(
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Return the user's companion settings, or null before they are saved."""
    return storage.get_preferences(user.id)


@router.post("/preferences", response_model=CompanionResponse)
async def save_preferences(
    settings: CompanionSettings,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Replace the user's companion settings with the request body."""
    companion = storage.set_preferences(user.id, settings.model_dump())
    logger.info(f"Saved companion settings for user {user.id}: {settings.name}")
    return companion
