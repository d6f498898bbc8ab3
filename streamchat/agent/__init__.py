"""Agno agent logic for upstream model access.

Responsibilities:
    - Agent initialization with OpenAI-compatible models
    - System prompt injection when the client sends none
    - Streaming token generation for the chat endpoint

Maintains clean separation from the HTTP layer.
"""

from streamchat.agent.chat_agent import AgentService, get_agent_service, with_system_prompt
from streamchat.agent.config import AgentConfig, get_agent_config

__all__ = [
    "AgentConfig",
    "AgentService",
    "get_agent_config",
    "get_agent_service",
    "with_system_prompt",
]
