"""Error taxonomy for the chat client.

Only TransportError and EmptyResponseError ever reach the user, as a
synthetic assistant message. FrameParseError and StorageParseError are
recovered where they are raised.
"""


class ChatError(Exception):
    """Base class for chat client errors."""

    pass


class TransportError(ChatError):
    """Raised when the request fails, returns non-2xx, or the connection drops.

    Attributes:
        status_code: HTTP status when the server answered, else None.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(ChatError):
    """Raised when the stream closes without delivering any text."""

    def __init__(self, message: str = "no response received from the server") -> None:
        super().__init__(message)


class FrameParseError(ChatError):
    """Raised when a single stream frame cannot be parsed."""

    pass


class StorageParseError(ChatError):
    """Raised when persisted conversation history cannot be decoded."""

    pass
