"""Conversation normalization for the inference API.

Turns a conversation received from the UI into the structure the Converse
API expects: image payloads arrive as base64 data URIs and leave as bytes.
"""

import base64
import binascii
import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from src.errors import FormatError
from src.models.schemas import (
    ImageBlock,
    ImageItem,
    ImageSource,
    Message,
    TextItem,
    conversation_adapter,
)

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = re.compile(r"^data:image/[a-z]+;base64,")


def decode_image_bytes(encoded: str) -> bytes:
    """Decode a base64 image string, with or without a data URI header.

    Args:
        encoded: Base64 payload, e.g. ``data:image/png;base64,QUJD`` or ``QUJD``.

    Returns:
        The decoded binary payload.

    Raises:
        FormatError: If the payload is not valid base64.
    """
    payload = DATA_URI_PREFIX.sub("", encoded, count=1)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError("Invalid image payload") from e


def _parse(conversation: str | list[Any]) -> list[Message]:
    if isinstance(conversation, str):
        logger.debug("Parsing conversation string")
        try:
            raw = json.loads(conversation)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse conversation: {e}")
            raise FormatError("Invalid conversation format") from e
    else:
        logger.debug("Using conversation object directly")
        raw = conversation

    try:
        return conversation_adapter.validate_python(raw)
    except ValidationError as e:
        logger.error(f"Conversation does not match message schema: {e}")
        raise FormatError("Invalid conversation format") from e


def _normalize_item(item: TextItem | ImageItem) -> TextItem | ImageItem:
    match item:
        case TextItem():
            return item
        case ImageItem(image=ImageBlock(source=ImageSource(data=str() as encoded))):
            return ImageItem(
                image=ImageBlock(
                    format=item.image.format,
                    source=ImageSource(data=decode_image_bytes(encoded)),
                )
            )
        case ImageItem():
            return item


def normalize_conversation(conversation: str | list[Any]) -> list[Message]:
    """Convert a conversation into the canonical binary-image form.

    Accepts either a JSON string or an already structured list of messages.
    Message and item order is preserved and the input is never mutated.

    Args:
        conversation: JSON-encoded conversation or list of message dicts/models.

    Returns:
        New list of messages where every string image payload is decoded to bytes.

    Raises:
        FormatError: If the input cannot be parsed into messages or an image
            payload is not valid base64.
    """
    messages = _parse(conversation)
    return [
        Message(
            role=message.role,
            content=[_normalize_item(item) for item in message.content],
        )
        for message in messages
    ]
