"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Conversation normalization and image decoding
    - models/: Content union and serialization
    - agent/: Configuration and Converse request handling
    - ui/: Session state transitions and rendering helpers
"""
