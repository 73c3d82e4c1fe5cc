"""Test package for Travel Chat.

Structure:
    - unit/: Normalizer, schemas, service and session logic in isolation
    - integration/: HTTP endpoint and full UI-to-API exchanges

The Bedrock runtime client is stubbed except in tests marked requires_aws.
Leverages pytest with pytest-check for soft assertions.
"""
