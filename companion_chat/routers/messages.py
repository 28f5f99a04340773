"""
Messages API Router

Chat with the configured companion. Each POST runs one synchronous turn:
the user's message is stored, the completion API is called, and the reply
is stored and returned.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import List
import logging

from companion_chat.schemas.message import MessageCreate, MessageResponse, ChatExchangeResponse
from companion_chat.middleware.auth import get_current_user
from companion_chat.models.user import User
from companion_chat.services.chat_service import ChatService, CompanionNotConfiguredError
from companion_chat.services.companion_ai import CompanionAI, CompanionAIError
from companion_chat.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messages"])  # No prefix since main.py adds /api prefix


def get_companion_ai(request: Request) -> CompanionAI:
    """Dependency returning the application's completion client."""
    return request.app.state.companion_ai


def get_chat_service(
    request: Request,
    storage: Storage = Depends(get_storage),
    companion_ai: CompanionAI = Depends(get_companion_ai),
) -> ChatService:
    """Dependency for getting ChatService instance."""
    return ChatService(
        storage,
        companion_ai,
        context_window_size=request.app.state.settings.context_window_size,
    )


@router.get("/messages", response_model=List[MessageResponse])
async def list_messages(
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """List the user's messages oldest first."""
    messages = service.list_messages(user.id)
    logger.info(f"Fetching messages for user {user.id}, found {len(messages)} messages")
    return messages


@router.post("/messages", response_model=ChatExchangeResponse)
async def send_message(
    body: MessageCreate,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Send a message to the companion and return it with the reply."""
    logger.info(f"Chat request from user {user.id}: {body.content[:50]}...")

    try:
        exchange = await service.send_message(user.id, body.content)
    except CompanionNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except CompanionAIError as e:
        logger.error(f"Completion failed for user {user.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process message"
        )
    except Exception as e:
        logger.error(f"Messages endpoint error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process message"
        )

    return ChatExchangeResponse(
        message=MessageResponse.model_validate(exchange.message),
        reply=MessageResponse.model_validate(exchange.reply),
    )
