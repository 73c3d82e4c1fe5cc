"""Pydantic models for conversations and the chat transport.

Models:
    - Message: One conversation turn with text and image items
    - TextItem / ImageItem: The two content variants
    - ChatRequest: Payload sent from the UI to the forwarding endpoint
    - ChatResponse: Assistant message or error list returned to the UI
"""

from src.models.schemas import (
    ChatRequest,
    ChatResponse,
    ContentItem,
    Conversation,
    ErrorDetail,
    ImageBlock,
    ImageItem,
    ImageSource,
    Message,
    TextItem,
    conversation_adapter,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ContentItem",
    "Conversation",
    "ErrorDetail",
    "ImageBlock",
    "ImageItem",
    "ImageSource",
    "Message",
    "TextItem",
    "conversation_adapter",
]
