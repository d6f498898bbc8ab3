"""Agno agent service streaming model output for client-held conversations.

The browser owns the conversation: every request carries the full message
list, so the agent keeps no session storage of its own.

Architecture Decisions:

1. **Singleton Pattern** - Agent initialization is expensive (client setup,
   model configuration). The singleton reuses one agent across requests.

2. **Service Wrapper** - Decouples the API from Agno's interface. If Agno's
   run API changes we only fix one place, and the endpoint can depend on this
   class (and tests can override it) instead of on Agno directly.

3. **Streaming Generator** - Agno returns raw events with metadata. We extract
   just the content string, giving the SSE endpoint a clean text stream.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.models.message import Message
from agno.models.openai import OpenAIChat

from streamchat.agent.config import AgentConfig, get_agent_config
from streamchat.models.schemas import ChatMessage, Role

logger = logging.getLogger(__name__)


def with_system_prompt(messages: list[ChatMessage], prompt: str) -> list[ChatMessage]:
    """Prepend a system message unless the conversation already has one."""
    if any(m.role == Role.SYSTEM.value for m in messages):
        return list(messages)
    return [ChatMessage(role=Role.SYSTEM, content=prompt), *messages]


def trim_history(messages: list[ChatMessage], limit: int | None) -> list[ChatMessage]:
    """Keep system messages and the last `limit` other messages."""
    if limit is None:
        return list(messages)
    system = [m for m in messages if m.role == Role.SYSTEM.value]
    rest = [m for m in messages if m.role != Role.SYSTEM.value]
    return system + rest[-limit:]


class AgentService:
    """Answers client-held conversations with an Agno agent.

    Each call receives the whole conversation. The service trims it to the
    configured window, makes sure it carries a system directive, and hands
    it to the agent as Agno messages.
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            markdown=True,
        )

    def prepare_messages(self, messages: list[ChatMessage]) -> list[Message]:
        """Convert request messages to Agno messages, adding the system prompt."""
        window = trim_history(messages, self._config.max_history)
        return [
            Message(role=m.role, content=m.content)
            for m in with_system_prompt(window, self._config.system_prompt)
        ]

    async def stream_response(
        self,
        messages: list[ChatMessage],
    ) -> AsyncGenerator[str]:
        """Stream response chunks for a conversation.

        Args:
            messages: The full conversation, oldest first.

        Yields:
            Response text chunks as they arrive.
        """
        response_stream = self._agent.arun(
            self.prepare_messages(messages),
            stream=True,
        )

        async for chunk in response_stream:
            if hasattr(chunk, "content") and isinstance(chunk.content, str) and chunk.content:
                yield chunk.content

    async def get_response(self, messages: list[ChatMessage]) -> str:
        """Get complete response for a conversation.

        Non-streaming alternative for simpler clients.

        Args:
            messages: The full conversation, oldest first.

        Returns:
            Complete response text.
        """
        response = await self._agent.arun(self.prepare_messages(messages))
        return response.content or ""


_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Process-wide AgentService, created on first use."""
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
