"""FastAPI endpoints for the travel chat.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Forward a conversation to Bedrock and return the reply
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
