"""Client configuration with environment variable loading.

Pydantic-based configuration for the chat session controller and its
streaming pipeline.
"""

import codecs
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from streamchat.streaming.events import (
    DEFAULT_DATA_PREFIX,
    DEFAULT_DONE_SENTINEL,
    DEFAULT_TEXT_FIELD,
)
from streamchat.streaming.scheduler import DEFAULT_TYPING_INTERVAL

# Load environment variables from .env file
load_dotenv()

DEFAULT_GREETING = "Hello! I'm a chatbot. How can I help you today?"


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


def _typing_interval() -> float | None:
    # Set but blank selects immediate rendering.
    value = os.getenv("TYPING_INTERVAL")
    if value is None:
        return DEFAULT_TYPING_INTERVAL
    return float(value) if value.strip() else None


class ClientConfig(BaseModel):
    """Configuration for the chat client.

    Attributes:
        api_url: Chat endpoint receiving the message list.
        typing_interval: Seconds per revealed character (None = render
            each delta immediately).
        data_prefix: Marker that introduces a stream frame.
        done_sentinel: Payload marking end of stream.
        text_field: JSON field carrying text in each frame.
        encoding: Text encoding of the response body.
        history_max_age: Seconds after which saved history is discarded
            on load (None = never).
        greeting: Assistant message opening a fresh conversation.
        system_prompt: Optional system directive kept at the head of history.
        storage_key: Storage key of the JSON-encoded history.
        timestamp_key: Storage key of the last-write timestamp.
        archive_key: Storage key holding the last archived conversation.
    """

    model_config = {"validate_default": True}

    api_url: str = Field(
        default_factory=lambda: os.getenv("CHAT_API_URL", "http://localhost:8000/api/chat"),
        description="Chat endpoint URL",
    )
    typing_interval: float | None = Field(
        default_factory=_typing_interval,
        ge=0.0,
        description="Seconds between reveal ticks",
    )
    data_prefix: str = DEFAULT_DATA_PREFIX
    done_sentinel: str = DEFAULT_DONE_SENTINEL
    text_field: str = DEFAULT_TEXT_FIELD
    encoding: str = "utf-8"
    history_max_age: float | None = Field(
        default_factory=lambda: _optional_float("HISTORY_MAX_AGE"),
        gt=0.0,
        description="Maximum age in seconds of restored history",
    )
    greeting: str | None = Field(
        default_factory=lambda: os.getenv("CHAT_GREETING", DEFAULT_GREETING),
    )
    system_prompt: str | None = Field(
        default_factory=lambda: os.getenv("CLIENT_SYSTEM_PROMPT") or None,
    )
    storage_key: str = "chat_history"
    timestamp_key: str = "chat_history_saved_at"
    archive_key: str = "chat_history_archive"

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("CHAT_API_URL must be an http(s) URL")
        return v

    @field_validator("greeting", "system_prompt")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank text as unset."""
        if v is None or not v.strip():
            return None
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Require a codec known to Python, stored under its canonical name."""
        try:
            return codecs.lookup(v).name
        except LookupError as e:
            raise ValueError(f"Unknown text encoding: {v}") from e


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig()
