from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    """Speaker of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        role: The speaker identifier (user, assistant, or system).
        content: The message text.
    """

    role: Role = Field(..., description="Message role: 'user', 'assistant', or 'system'")
    content: str = Field(..., description="The message content")

    model_config = {"use_enum_values": True}


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        messages: Conversation so far, in chronological order.
    """

    messages: list[ChatMessage] = Field(..., min_length=1)

    @field_validator("messages")
    @classmethod
    def single_system_message(cls, v: list[ChatMessage]) -> list[ChatMessage]:
        """Reject conversations carrying more than one system directive."""
        if sum(1 for m in v if m.role == Role.SYSTEM.value) > 1:
            raise ValueError("At most one system message is allowed")
        return v


class StreamFrame(BaseModel):
    """JSON payload carried by one `data:` frame of the stream.

    Attributes:
        response: The text delta of this frame.
    """

    response: str


class ChatResponse(BaseModel):
    """Complete (non-streaming) response body."""

    response: str


class ErrorResponse(BaseModel):
    """Error body returned with a non-2xx status.

    Attributes:
        error: Short error summary.
        details: Optional human-readable reason.
    """

    error: str
    details: str | None = None
