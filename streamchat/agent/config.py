"""Settings for the model that answers /api/chat.

Every field falls back to an environment variable, so a .env file is enough
to point the backend at OpenAI or any OpenAI-compatible server.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful, friendly assistant. Answer clearly and concisely, "
    "using markdown where it improves readability."
)


def _env_number(name: str, default: float | None) -> float | None:
    value = os.getenv(name)
    return float(value) if value else default


class AgentConfig(BaseModel):
    """Model settings for the chat backend.

    Attributes:
        api_key: Provider key (LLM_API_KEY, falling back to OPENAI_API_KEY).
        base_url: OpenAI-compatible endpoint, None for api.openai.com.
        model_name: Model id passed to the provider.
        temperature: Sampling temperature, 0.0 to 2.0.
        max_tokens: Cap on tokens generated per reply.
        max_history: Most recent non-system messages forwarded to the model
            (None forwards the whole conversation).
        system_prompt: Directive used when the client sends none.
    """

    model_config = {"validate_default": True}

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
    )
    base_url: str | None = Field(default_factory=lambda: os.getenv("LLM_BASE_URL") or None)
    model_name: str = Field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"))
    temperature: float = Field(
        default_factory=lambda: _env_number("LLM_TEMPERATURE", 0.7),
        ge=0.0,
        le=2.0,
    )
    max_tokens: int = Field(
        default_factory=lambda: int(_env_number("LLM_MAX_TOKENS", 1024)),
        ge=1,
        le=128000,
    )
    max_history: int | None = Field(
        default_factory=lambda: _env_number("LLM_MAX_HISTORY", None),
        ge=1,
    )
    system_prompt: str = Field(
        default_factory=lambda: os.getenv("SYSTEM_PROMPT") or DEFAULT_SYSTEM_PROMPT,
    )

    @field_validator("api_key")
    @classmethod
    def require_api_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env")
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Build AgentConfig from the environment.

    Raises:
        ValueError: If no API key is set.
    """
    return AgentConfig()
