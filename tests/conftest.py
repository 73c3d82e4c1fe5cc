"""Pytest fixtures and shared test configuration.

Fixtures:
    - converse_output: Bedrock Converse response with a text reply
    - runtime_client: Stub bedrock-runtime client returning converse_output
    - chat_config: Configuration with a fixed region and model
    - chat_service: ChatService wired to the stub client
    - app / async_client: FastAPI app and HTTPX client over ASGI
"""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.agent.chat_agent import ChatService
from src.agent.config import ChatConfig
from src.api.app import create_app

ASSISTANT_REPLY = "Paris is lovely in spring. Start with the Louvre!"


@pytest.fixture
def converse_output() -> dict[str, Any]:
    """Return a successful Converse API response."""
    return {
        "output": {
            "message": {
                "role": "assistant",
                "content": [{"text": ASSISTANT_REPLY}],
            }
        },
        "stopReason": "end_turn",
        "usage": {"inputTokens": 12, "outputTokens": 9, "totalTokens": 21},
    }


@pytest.fixture
def runtime_client(converse_output: dict[str, Any]) -> MagicMock:
    """Stub bedrock-runtime client."""
    client = MagicMock()
    client.converse.return_value = converse_output
    return client


@pytest.fixture
def chat_config() -> ChatConfig:
    return ChatConfig(aws_region="us-east-1", model_id="test-model")


@pytest.fixture
def chat_service(runtime_client: MagicMock, chat_config: ChatConfig) -> ChatService:
    return ChatService(client=runtime_client, config=chat_config)


@pytest.fixture
def app(chat_service: ChatService) -> FastAPI:
    return create_app(chat_service=chat_service)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
