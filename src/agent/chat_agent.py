"""Bedrock Converse forwarding service.

Normalizes a conversation received from the UI and forwards it to the
Bedrock runtime ``converse`` operation, returning the assistant message.

The runtime client is constructed by the caller and injected, so the
service holds no process-wide state and tests can pass a stub client.
Failures are logged and re-raised; the HTTP layer turns them into an
error list for the UI.
"""

import logging
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from pydantic import ValidationError

from src.agent.config import ChatConfig, get_chat_config
from src.errors import RemoteError
from src.models.schemas import Message
from src.parsing.conversation import normalize_conversation

logger = logging.getLogger(__name__)

DISPLAYABLE_BLOCKS = ("text", "image")


def create_runtime_client(config: ChatConfig) -> Any:
    """Create a ``bedrock-runtime`` client for the configured region.

    Retries are disabled and connect/read time is bounded by the config.

    Args:
        config: Chat configuration.

    Returns:
        A boto3 ``bedrock-runtime`` client.
    """
    session = boto3.Session(
        profile_name=config.aws_profile,
        region_name=config.aws_region,
    )
    client = session.client(
        service_name="bedrock-runtime",
        region_name=config.aws_region,
        config=BotoConfig(
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        ),
    )
    logger.info(f"Initialized bedrock-runtime client in region {config.aws_region}")
    return client


def displayable_content(message: dict[str, Any]) -> dict[str, Any]:
    """Drop Converse content blocks other than text and image.

    Reasoning models add blocks such as ``reasoningContent`` that the chat
    does not show.
    """
    content = message.get("content") or []
    kept = [block for block in content if any(key in block for key in DISPLAYABLE_BLOCKS)]
    if len(kept) != len(content):
        logger.debug(f"Ignoring {len(content) - len(kept)} non-displayable content blocks")
    return {**message, "content": kept}


class ChatService:
    """Forwards conversations to the Bedrock Converse API."""

    def __init__(self, client: Any, config: ChatConfig | None = None) -> None:
        """Initialize the chat service.

        Args:
            client: A ``bedrock-runtime`` client (or any object with ``converse``).
            config: Optional configuration. Loads from environment if not provided.
        """
        self._client = client
        self._config = config or get_chat_config()

    @property
    def config(self) -> ChatConfig:
        return self._config

    def build_request(self, messages: list[Message]) -> dict[str, Any]:
        """Build the Converse request for a normalized conversation."""
        return {
            "modelId": self._config.model_id,
            "system": [{"text": self._config.system_prompt}],
            "messages": [m.model_dump(by_alias=True) for m in messages],
            "inferenceConfig": {
                "maxTokens": self._config.max_tokens,
                "temperature": self._config.temperature,
            },
        }

    def converse(self, conversation: str | list[Any]) -> Message:
        """Run one exchange with the inference API.

        Args:
            conversation: JSON-encoded conversation or list of messages.

        Returns:
            The assistant's output message.

        Raises:
            FormatError: If the conversation cannot be parsed.
            RemoteError: If the response carries no output message.
            botocore.exceptions.ClientError: If Bedrock rejects the request.
        """
        try:
            messages = normalize_conversation(conversation)
            request = self.build_request(messages)
            logger.info(
                f"Sending {len(messages)} messages to {self._config.model_id}"
            )

            response = self._client.converse(**request)

            output_message = (response.get("output") or {}).get("message")
            if not output_message:
                raise RemoteError("No message in the response output")

            try:
                return Message.model_validate(displayable_content(output_message))
            except ValidationError as e:
                raise RemoteError("Unexpected message in the response output") from e

        except Exception as e:
            logger.error(f"Error in chat handler: {e}")
            raise


def create_chat_service(config: ChatConfig | None = None) -> ChatService:
    """Create a ChatService with a freshly constructed runtime client."""
    config = config or get_chat_config()
    return ChatService(client=create_runtime_client(config), config=config)
