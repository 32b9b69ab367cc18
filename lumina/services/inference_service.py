"""Service for assistant replies and conversation titles via the hosted LLM."""

from collections.abc import Callable, Sequence
from typing import Any

import structlog
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
)

from lumina.core.exceptions import InferenceError
from lumina.models.message import Message

logger = structlog.get_logger()

RESPONSE_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Provide concise and accurate answers."
)
TITLE_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates concise conversation titles. "
    "Return ONLY the title text, no quotes or punctuation."
)
TITLE_PROMPT_TEMPLATE = (
    "Based on this exchange, generate a very short (max 4 words) descriptive "
    "title for the conversation.\n\n"
    "User: {user_text}\n"
    "Assistant: {assistant_text}\n\n"
    "Title:"
)

FALLBACK_RESPONSE = "I'm sorry, I couldn't generate a response."
FALLBACK_TITLE = "New Chat"
MAX_TITLE_WORDS = 4


def to_chat_messages(history: Sequence[Message]) -> list[BaseMessage]:
    """Convert stored messages into ordered model turns."""
    turns: list[BaseMessage] = []
    for message in history:
        if message.role == "assistant":
            turns.append(AIMessage(content=message.content))
        else:
            turns.append(HumanMessage(content=message.content))
    return turns


def _response_text(response: Any) -> str:
    """Extract plain text from a chat model response."""
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return ""


def clean_title(raw: str) -> str:
    """Trim quotes, trailing punctuation and anything past four words."""
    words = raw.strip().strip("\"'`").split()
    title = " ".join(words[:MAX_TITLE_WORDS])
    return title.strip("\"'`.:;!?,")


class InferenceService:
    """Single-shot calls to the hosted model; failures become fallback text.

    The model is built on first use, so a missing provider key surfaces as a
    failed call rather than a failed client.
    """

    def __init__(self, llm_factory: Callable[[], BaseChatModel]) -> None:
        self._llm_factory = llm_factory

    async def generate_response(
        self, history: Sequence[Message], user_text: str
    ) -> str:
        """Answer ``user_text`` given the prior conversation."""
        turns = [
            SystemMessage(content=RESPONSE_SYSTEM_PROMPT),
            *to_chat_messages(history),
            HumanMessage(content=user_text),
        ]
        try:
            text = await self._invoke(turns)
        except InferenceError:
            logger.exception("Failed to generate response", turns=len(turns))
            return FALLBACK_RESPONSE
        return text or FALLBACK_RESPONSE

    async def generate_title(self, user_text: str, assistant_text: str) -> str:
        """Summarise the first exchange into a title of at most four words."""
        prompt = TITLE_PROMPT_TEMPLATE.format(
            user_text=user_text, assistant_text=assistant_text
        )
        try:
            text = await self._invoke(
                [
                    SystemMessage(content=TITLE_SYSTEM_PROMPT),
                    HumanMessage(content=prompt),
                ]
            )
        except InferenceError:
            logger.exception("Failed to generate title")
            return FALLBACK_TITLE
        return clean_title(text) or FALLBACK_TITLE

    async def _invoke(self, turns: list[BaseMessage]) -> str:
        try:
            response = await self._llm_factory().ainvoke(turns)
        except Exception as exc:
            raise InferenceError(message=f"Model request failed: {exc}") from exc
        return _response_text(response).strip()
