"""Pydantic models for conversation messages and API payloads.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Role: Speaker of a message (user, assistant, system)
    - ChatMessage: Individual message in conversation
    - ChatRequest: Outgoing/incoming chat request payload
    - StreamFrame: Payload of one streamed data frame
    - ChatResponse: Non-streaming response body
    - ErrorResponse: Error body returned on failure
"""

from streamchat.models.schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    Role,
    StreamFrame,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "Role",
    "StreamFrame",
]
