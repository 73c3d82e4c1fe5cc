"""Inference forwarding for the travel chat.

Responsibilities:
    - Bedrock runtime client construction from configuration
    - Converse request assembly (system prompt, inference settings)
    - Output message extraction and error logging

Keeps the HTTP layer free of boto3 details.
"""

from src.agent.chat_agent import ChatService, create_chat_service, create_runtime_client
from src.agent.config import ChatConfig, get_chat_config

__all__ = [
    "ChatConfig",
    "ChatService",
    "create_chat_service",
    "create_runtime_client",
    "get_chat_config",
]
