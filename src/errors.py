"""Error taxonomy shared by the forwarding API and the chat UI."""


class ChatError(Exception):
    """Base class for chat exchange failures."""

    pass


class FormatError(ChatError):
    """Raised when a conversation cannot be parsed into messages."""

    pass


class ImageValidationError(ChatError):
    """Raised when a selected image fails the type or size checks."""

    pass


class RemoteError(ChatError):
    """Raised when the inference call fails or returns no output message."""

    pass


class ResponseParseError(ChatError):
    """Raised when response data cannot be decoded into a message."""

    pass
