"""Integration tests for the POST /chat forwarding endpoint.

Runs the FastAPI app over ASGI with a stub bedrock-runtime client.
The live test at the bottom calls Bedrock and is skipped without
credentials and MODEL_ID.
"""

import json
import os
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, ReadTimeoutError
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.models.schemas import ChatResponse, Message
from tests.conftest import ASSISTANT_REPLY


def has_aws_config() -> bool:
    """Check if a Bedrock model and AWS credentials are configured."""
    return bool(os.environ.get("MODEL_ID")) and bool(
        os.environ.get("AWS_ACCESS_KEY_ID") or os.environ.get("AWS_PROFILE")
    )


requires_aws = pytest.mark.skipif(
    not has_aws_config(),
    reason="MODEL_ID or AWS credentials not set - skipping live Bedrock test",
)

PARIS = [{"role": "user", "content": [{"text": "Show me Paris"}]}]


class TestChatEndpoint:
    """POST /chat with a stubbed Bedrock runtime."""

    async def test_returns_assistant_message(self, async_client: AsyncClient) -> None:
        """A valid conversation returns the assistant message as JSON."""
        response = await async_client.post("/chat", json={"conversation": json.dumps(PARIS)})

        assert response.status_code == 200
        body = ChatResponse.model_validate(response.json())
        assert body.errors is None
        assert isinstance(body.data, str)
        message = Message.model_validate_json(body.data)
        assert message.role == "assistant"
        assert message.content[0].text == ASSISTANT_REPLY

    async def test_image_reaches_bedrock_as_bytes(
        self, async_client: AsyncClient, runtime_client: MagicMock
    ) -> None:
        """Data URI images are decoded before the Converse call."""
        conversation = [
            {
                "role": "user",
                "content": [
                    {"image": {"format": "jpeg", "source": {"bytes": "data:image/jpeg;base64,QUJD"}}}
                ],
            }
        ]

        response = await async_client.post(
            "/chat", json={"conversation": json.dumps(conversation)}
        )

        assert response.status_code == 200
        kwargs = runtime_client.converse.call_args.kwargs
        assert kwargs["modelId"] == "test-model"
        assert kwargs["messages"][0]["content"][0]["image"]["source"]["bytes"] == b"ABC"
        assert kwargs["inferenceConfig"] == {"maxTokens": 1000, "temperature": 0.5}

    async def test_invalid_conversation_returns_format_error(
        self, async_client: AsyncClient, runtime_client: MagicMock
    ) -> None:
        """Invalid JSON returns 400 with a FormatError entry."""
        response = await async_client.post("/chat", json={"conversation": "not json"})

        assert response.status_code == 400
        assert response.json() == {
            "data": None,
            "errors": [{"message": "Invalid conversation format", "errorType": "FormatError"}],
        }
        runtime_client.converse.assert_not_called()

    async def test_missing_output_returns_remote_error(
        self, async_client: AsyncClient, runtime_client: MagicMock
    ) -> None:
        """A response without output returns 502 with a RemoteError entry."""
        runtime_client.converse.return_value = {"stopReason": "end_turn"}

        response = await async_client.post("/chat", json={"conversation": json.dumps(PARIS)})

        assert response.status_code == 502
        error = response.json()["errors"][0]
        assert error["message"] == "No message in the response output"
        assert error["errorType"] == "RemoteError"

    async def test_bedrock_client_error(
        self, async_client: AsyncClient, runtime_client: MagicMock
    ) -> None:
        """Bedrock error code and message are passed through."""
        runtime_client.converse.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "No model access"}},
            "Converse",
        )

        response = await async_client.post("/chat", json={"conversation": json.dumps(PARIS)})

        assert response.status_code == 502
        assert response.json()["errors"] == [
            {"message": "No model access", "errorType": "AccessDeniedException"}
        ]

    async def test_bedrock_timeout(
        self, async_client: AsyncClient, runtime_client: MagicMock
    ) -> None:
        """A botocore timeout is reported by its exception name."""
        runtime_client.converse.side_effect = ReadTimeoutError(endpoint_url="https://bedrock")

        response = await async_client.post("/chat", json={"conversation": json.dumps(PARIS)})

        assert response.status_code == 502
        assert response.json()["errors"][0]["errorType"] == "ReadTimeoutError"

    async def test_missing_conversation_returns_422(self, async_client: AsyncClient) -> None:
        """A body without conversation fails request validation."""
        response = await async_client.post("/chat", json={})

        assert response.status_code == 422

    async def test_health(self, async_client: AsyncClient) -> None:
        """Health endpoint reports the service as healthy."""
        response = await async_client.get("/health")

        assert response.json() == {"status": "healthy", "service": "travel-chat"}


@requires_aws
async def test_live_bedrock_exchange() -> None:
    """A real Converse call returns an assistant message."""
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/chat",
            json={"conversation": json.dumps([{"role": "user", "content": [{"text": "Say hi"}]}])},
        )

    assert response.status_code == 200
    message = Message.model_validate_json(response.json()["data"])
    assert message.role == "assistant"
    assert message.content
