"""Travel Chat - multimodal travel planning assistant on Amazon Bedrock.

Combines FastAPI for the forwarding endpoint, boto3 for the Bedrock
Converse API, NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoint forwarding conversations to Bedrock
    - agent: Bedrock runtime client and Converse request assembly
    - parsing: Conversation normalization and image decoding
    - ui: Chat session state and web interface
    - models: Conversation and transport schemas
"""

__version__ = "0.1.0"
