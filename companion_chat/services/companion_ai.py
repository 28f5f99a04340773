"""
Companion AI

Formats the companion persona into a system prompt and forwards it, together
with the recent conversation, to Cohere's chat API.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import cohere

from companion_chat.models.message import Message, MessageRole

logger = logging.getLogger(__name__)

# Cohere chat history speaker names
COHERE_ROLES = {
    MessageRole.USER.value: "USER",
    MessageRole.ASSISTANT.value: "CHATBOT",
}


class CompanionAIError(Exception):
    """Raised when a companion reply could not be generated."""


def build_system_prompt(settings: Dict[str, Any]) -> str:
    """Describe the companion persona for the model."""
    name = settings.get("name", "").strip()
    personality = settings.get("personality", "").strip()
    description = (settings.get("description") or "").strip()
    interests = [i.strip() for i in settings.get("interests") or [] if i and i.strip()]

    parts = [f"You are {name}, an AI companion with the following personality: {personality}."]
    if description:
        parts.append(f"About you: {description}")
    if interests:
        parts.append(f"Your interests include: {', '.join(interests)}.")
        parts.append("Maintain this personality and knowledge of these interests throughout the conversation.")
    else:
        parts.append("Maintain this personality throughout the conversation.")
    return " ".join(parts)


def build_chat_history(messages: Sequence[Message]) -> List[Dict[str, str]]:
    """Map stored messages to Cohere chat history entries, keeping real roles."""
    return [
        {"role": COHERE_ROLES[m.role], "message": m.content}
        for m in messages
        if m.role in COHERE_ROLES
    ]


class CompanionAI:
    """
    Client for generating companion replies.

    Responsibilities:
    - Build the persona system prompt
    - Send system prompt, context window and new message to Cohere
    - Surface every failure as CompanionAIError
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "command-r-plus",
        temperature: float = 0.7,
        max_tokens: int = 1024,
        client: Any = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        if client is not None:
            self.client = client
        elif api_key:
            self.client = cohere.AsyncClient(api_key=api_key)
        else:
            self.client = None

        if self.client is not None:
            logger.info(f"Companion AI initialized with model: {self.model}")
        else:
            logger.warning("Companion AI disabled - COHERE_API_KEY not set")

    @property
    def enabled(self) -> bool:
        return self.client is not None

    @classmethod
    def from_settings(cls, settings) -> "CompanionAI":
        return cls(
            api_key=settings.cohere_api_key,
            model=settings.cohere_model,
            temperature=settings.cohere_temperature,
            max_tokens=settings.cohere_max_tokens,
        )

    async def generate_response(
        self,
        message: str,
        settings: Dict[str, Any],
        context: Sequence[Message],
    ) -> str:
        """
        Generate the companion's reply to ``message``.

        Args:
            message: The user's new message
            settings: Stored companion settings
            context: Trailing window of earlier messages, oldest first

        Returns:
            Reply text

        Raises:
            CompanionAIError: If the provider is unavailable or the call fails
        """
        if not self.enabled:
            raise CompanionAIError("Companion AI is not configured")

        creativity = settings.get("creativity")
        temperature = self.temperature if creativity is None else float(creativity)

        try:
            response = await self.client.chat(
                model=self.model,
                message=message,
                preamble=build_system_prompt(settings),
                chat_history=build_chat_history(context),
                temperature=temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"Error generating response with Cohere: {str(e)}")
            raise CompanionAIError("Failed to generate AI response") from e

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise CompanionAIError("Empty response from AI provider")
        return text
