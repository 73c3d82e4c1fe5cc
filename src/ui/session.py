"""Per-session chat state and the submit cycle.

A ChatSession owns one immutable SessionState and replaces it on every
transition. Submitting runs ``Idle -> Submitting -> Idle`` with the history
updated on success or the error set on failure.
"""

import asyncio
import base64
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.errors import ImageValidationError, RemoteError, ResponseParseError
from src.models.schemas import (
    ChatResponse,
    ContentItem,
    ErrorDetail,
    ImageBlock,
    ImageItem,
    ImageSource,
    Message,
    TextItem,
    conversation_adapter,
)

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB

INVALID_IMAGE_TYPE = "Please select a valid image file (JPEG, PNG, GIF, or WebP)"
IMAGE_TOO_LARGE = "Image size must be less than 5MB"
UNKNOWN_ERROR = "An unknown error occurred."

Exchange = Callable[[str], Awaitable[ChatResponse]]


class PendingImage(BaseModel):
    """An image selected for the next message.

    Attributes:
        name: Original file name.
        mime_type: Validated MIME type, e.g. ``image/png``.
        data: Raw file content.
        preview: Base64 data URI, None until encoding finishes.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str
    data: bytes = Field(repr=False)
    preview: str | None = None

    @property
    def format(self) -> str:
        return self.mime_type.split("/")[1]

    @property
    def ready(self) -> bool:
        return self.preview is not None


class SessionState(BaseModel):
    """Snapshot of one UI session."""

    model_config = ConfigDict(frozen=True)

    history: tuple[Message, ...] = ()
    input_text: str = ""
    pending_image: PendingImage | None = None
    loading: bool = False
    error: str | None = None

    @property
    def can_submit(self) -> bool:
        if self.loading:
            return False
        has_image = self.pending_image is not None and self.pending_image.ready
        return bool(self.input_text.strip()) or has_image


def validate_image(mime_type: str, size: int) -> None:
    """Check an image against the allowed types and the size limit.

    Raises:
        ImageValidationError: With the message shown to the user.
    """
    if mime_type not in ALLOWED_IMAGE_TYPES:
        raise ImageValidationError(INVALID_IMAGE_TYPE)
    if size > MAX_IMAGE_SIZE:
        raise ImageValidationError(IMAGE_TOO_LARGE)


def encode_data_uri(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def describe_errors(errors: list[ErrorDetail] | None) -> str:
    """Human readable message for the first reported error."""
    if not errors:
        return UNKNOWN_ERROR
    first = errors[0]
    if first.message:
        return first.message
    if first.errorType:
        return first.errorType
    rendered = first.model_dump_json(exclude_none=True)
    return rendered if rendered != "{}" else UNKNOWN_ERROR


def parse_response_message(data: str | dict[str, Any]) -> Message:
    """Decode response data into a Message.

    Raises:
        ResponseParseError: If the data is not a valid message.
    """
    try:
        if isinstance(data, str):
            return Message.model_validate_json(data)
        return Message.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError("Failed to parse response data") from e


class ChatSession:
    """Conversation state and actions for one chat page."""

    def __init__(
        self,
        exchange: Exchange,
        on_change: Callable[[SessionState], None] | None = None,
    ) -> None:
        """Initialize an empty session.

        Args:
            exchange: Coroutine function sending a JSON conversation to the API.
            on_change: Called with the new state after every transition.
        """
        self._exchange = exchange
        self._on_change = on_change
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    def _set(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)
        if self._on_change is not None:
            self._on_change(self._state)

    def update_text(self, value: str) -> None:
        self._set(input_text=value, error=None)

    def clear_image(self) -> None:
        if self._state.pending_image is not None:
            self._set(pending_image=None)

    def new_chat(self) -> None:
        """Reset the session, unless an exchange is in flight."""
        if self._state.loading:
            return
        self._state = SessionState()
        if self._on_change is not None:
            self._on_change(self._state)

    async def select_image(self, name: str, mime_type: str, data: bytes) -> bool:
        """Validate and attach an image to the next message.

        The preview is encoded off the event loop. The image becomes
        submittable once its preview is ready.

        Returns:
            True if the image was accepted.
        """
        try:
            validate_image(mime_type, len(data))
        except ImageValidationError as e:
            logger.info(f"Rejected image {name}: {e}")
            self._set(error=str(e))
            return False

        pending = PendingImage(name=name, mime_type=mime_type, data=data)
        self._set(pending_image=pending, error=None)

        preview = await asyncio.to_thread(encode_data_uri, mime_type, data)
        # Ignore the preview if the image was removed or replaced meanwhile
        if self._state.pending_image is pending:
            self._set(pending_image=pending.model_copy(update={"preview": preview}))
        return True

    def build_user_message(self) -> Message:
        """Message for the current input: text first, then the image."""
        content: list[ContentItem] = []
        if self._state.input_text.strip():
            content.append(TextItem(text=self._state.input_text))

        image = self._state.pending_image
        if image is not None and image.ready:
            content.append(
                ImageItem(
                    image=ImageBlock(
                        format=image.format,
                        source=ImageSource(data=image.preview),
                    )
                )
            )
        return Message(role="user", content=content)

    async def submit(self) -> bool:
        """Send the current input with the full history.

        Returns:
            True if the exchange succeeded, False if it failed or nothing was sent.
        """
        if not self._state.can_submit:
            return False

        message = self.build_user_message()
        candidate = [*self._state.history, message]
        self._set(input_text="", pending_image=None, loading=True, error=None)

        try:
            conversation = conversation_adapter.dump_json(candidate, by_alias=True).decode()
            logger.debug(f"Sending conversation with {len(candidate)} messages")
            response = await self._exchange(conversation)

            if response.errors or response.data is None:
                raise RemoteError(describe_errors(response.errors))
            reply = parse_response_message(response.data)
        except Exception as e:
            logger.error(f"Error fetching chat response: {e}")
            self._set(loading=False, error=str(e) or UNKNOWN_ERROR)
            return False

        self._set(history=(*self._state.history, message, reply), loading=False)
        return True
