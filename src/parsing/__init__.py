"""Conversation parsing utilities.

Responsibilities:
    - JSON conversation decoding into typed messages
    - Data URI stripping and base64 decoding of image payloads
"""

from src.parsing.conversation import decode_image_bytes, normalize_conversation

__all__ = ["decode_image_bytes", "normalize_conversation"]
