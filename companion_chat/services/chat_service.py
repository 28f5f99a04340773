"""
Chat Service

Runs one user turn: persist the message, ask the companion for a reply,
persist the reply.
"""

import logging
from dataclasses import dataclass
from typing import List

from companion_chat.models.message import Message, MessageRole
from companion_chat.services.companion_ai import CompanionAI
from companion_chat.storage.base import Storage
from companion_chat.utils.metrics import metrics_collector

logger = logging.getLogger(__name__)


class CompanionNotConfiguredError(Exception):
    """Raised when a user chats before saving companion settings."""

    def __init__(self):
        super().__init__(
            "Companion not configured. Save your companion settings before sending messages."
        )


@dataclass
class ChatExchange:
    message: Message
    reply: Message


class ChatService:
    """Service for listing and sending chat messages"""

    def __init__(self, storage: Storage, companion_ai: CompanionAI, context_window_size: int = 6):
        self.storage = storage
        self.companion_ai = companion_ai
        self.context_window_size = context_window_size

    def list_messages(self, user_id: int) -> List[Message]:
        return self.storage.get_messages(user_id)

    async def send_message(self, user_id: int, content: str) -> ChatExchange:
        """
        Store the user's message and the companion's reply.

        The user's message is stored before anything can fail.

        Raises:
            CompanionNotConfiguredError: If the user has no companion settings
            CompanionAIError: If the reply could not be generated; the user's
                message stays stored
        """
        context = self.storage.get_messages(user_id, limit=self.context_window_size)
        companion = self.storage.get_preferences(user_id)

        user_message = self.storage.add_message(
            user_id=user_id,
            role=MessageRole.USER,
            content=content,
            companion_id=companion.id if companion else None,
        )
        if not companion:
            raise CompanionNotConfiguredError()

        try:
            with metrics_collector.time_operation("completion_seconds"):
                reply_text = await self.companion_ai.generate_response(
                    content, companion.settings, context
                )
        except Exception:
            metrics_collector.completion_error()
            raise

        reply = self.storage.add_message(
            user_id=user_id,
            role=MessageRole.ASSISTANT,
            content=reply_text,
            companion_id=companion.id,
        )
        metrics_collector.message_processed()
        logger.info(f"Processed message {user_message.id} for user {user_id} with reply {reply.id}")

        return ChatExchange(message=user_message, reply=reply)
