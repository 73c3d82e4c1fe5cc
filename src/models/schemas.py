import base64
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_serializer,
)


class TextItem(BaseModel):
    """Plain text content of a message."""

    model_config = ConfigDict(extra="forbid")

    text: str


class ImageSource(BaseModel):
    """Image payload.

    Holds a base64 string (optionally a data URI) on the UI side and raw
    bytes once normalized for the inference API. Serialized as ``bytes``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    data: str | bytes = Field(..., alias="bytes")

    @field_serializer("data", when_used="json")
    def serialize_data(self, value: str | bytes) -> str:
        if isinstance(value, bytes):
            return base64.b64encode(value).decode("ascii")
        return value


class ImageBlock(BaseModel):
    format: str
    source: ImageSource


class ImageItem(BaseModel):
    """Image content of a message."""

    model_config = ConfigDict(extra="forbid")

    image: ImageBlock


def _content_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "image" if "image" in value else "text"
    return "image" if isinstance(value, ImageItem) else "text"


ContentItem = Annotated[
    Annotated[TextItem, Tag("text")] | Annotated[ImageItem, Tag("image")],
    Discriminator(_content_kind),
]


class Message(BaseModel):
    """A single conversation turn.

    Attributes:
        role: Speaker label, usually "user" or "assistant".
        content: Ordered text and image items.
    """

    role: str
    content: list[ContentItem] = Field(default_factory=list)


Conversation = list[Message]

conversation_adapter: TypeAdapter[list[Message]] = TypeAdapter(Conversation)


class ChatRequest(BaseModel):
    """Request payload for the chat forwarding endpoint.

    Attributes:
        conversation: JSON-encoded conversation, oldest message first.
    """

    conversation: str


class ErrorDetail(BaseModel):
    """One entry of an error list returned by the chat endpoint.

    Keys other than ``message`` and ``errorType`` are kept so they can be
    shown when neither is present.
    """

    model_config = ConfigDict(extra="allow")

    message: str | None = None
    errorType: str | None = None


class ChatResponse(BaseModel):
    """Response from the chat forwarding endpoint.

    Attributes:
        data: JSON-encoded assistant message, or None on failure.
        errors: Error details, or None on success.
    """

    data: str | dict[str, Any] | None = None
    errors: list[ErrorDetail] | None = None
