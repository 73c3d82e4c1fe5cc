"""Integration tests for components working together.

Coverage:
    - POST /chat with real HTTP requests over ASGI
    - ChatSession driving ChatApiClient against the app
    - Live Bedrock exchange (requires AWS credentials and MODEL_ID)
"""
