"""HTTP client for the chat forwarding endpoint."""

import logging
import os

import httpx
from pydantic import ValidationError

from src.errors import RemoteError, ResponseParseError
from src.models.schemas import ChatResponse

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "120"))


class ChatApiClient:
    """Posts conversations to ``/chat`` and returns the decoded response."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = API_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def exchange(self, conversation: str) -> ChatResponse:
        """Send a JSON-encoded conversation and return the endpoint's response.

        Error lists returned by the endpoint are passed back in the response.

        Raises:
            RemoteError: On connection failures, timeouts, or an HTTP error
                without an error list.
            ResponseParseError: If a successful response body is not a
                ChatResponse.
        """
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post("/chat", json={"conversation": conversation})
            except httpx.TimeoutException as e:
                raise RemoteError("The request timed out. Please try again.") from e
            except httpx.RequestError as e:
                raise RemoteError(f"Connection failed: {e}") from e

        try:
            body = ChatResponse.model_validate_json(response.content)
        except ValidationError as e:
            if response.is_error:
                raise RemoteError(f"HTTP {response.status_code}") from e
            raise ResponseParseError("Failed to parse response data") from e

        if response.is_error and not body.errors:
            raise RemoteError(f"HTTP {response.status_code}")

        logger.debug(f"Chat response status {response.status_code}")
        return body
