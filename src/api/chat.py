"""Chat forwarding endpoint.

Receives the full conversation from the UI, forwards it to Bedrock through
the ChatService and returns the assistant message as a JSON string.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Request

from src.agent.chat_agent import ChatService, create_chat_service
from src.models.schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_service(request: Request) -> ChatService:
    """FastAPI dependency returning the application's ChatService.

    The service is created on first use and kept on ``app.state``.
    """
    service = getattr(request.app.state, "chat_service", None)
    if service is None:
        service = create_chat_service()
        request.app.state.chat_service = service
    return service


@router.post("", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Run one chat exchange.

    Args:
        payload: Request with the JSON-encoded conversation.
        service: Injected chat service.

    Returns:
        ChatResponse whose ``data`` is the JSON-encoded assistant message.

    Raises:
        400: Conversation is not valid JSON or does not match the message schema.
        502: Bedrock call failed or returned no output message.
    """
    message = await asyncio.to_thread(service.converse, payload.conversation)
    logger.info(f"Received {message.role} message with {len(message.content)} items")
    return ChatResponse(data=message.model_dump_json(by_alias=True))
