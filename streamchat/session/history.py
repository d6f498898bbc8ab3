"""Conversation history owned by one chat session.

Append-only during a live session; insertion order is chronological order.
A system directive, when present, is always the first entry and never
appears twice.
"""

import logging
from collections.abc import Iterable, Iterator

from streamchat.models.schemas import ChatMessage, Role

logger = logging.getLogger(__name__)


class ConversationHistory:
    """Ordered list of chat messages.

    Args:
        greeting: Assistant message opening a fresh conversation.
        system_prompt: Optional system directive kept at index 0.
    """

    def __init__(
        self,
        greeting: str | None = None,
        system_prompt: str | None = None,
    ) -> None:
        self._greeting = greeting
        self._system_prompt = system_prompt
        self._messages: list[ChatMessage] = []
        self.reset()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]

    @property
    def messages(self) -> list[ChatMessage]:
        """A copy of the messages, safe to hand to other components."""
        return list(self._messages)

    def visible(self) -> list[tuple[int, ChatMessage]]:
        """Messages shown in the UI, with their history indices."""
        return [
            (i, m) for i, m in enumerate(self._messages) if m.role != Role.SYSTEM.value
        ]

    def has_system(self) -> bool:
        return any(m.role == Role.SYSTEM.value for m in self._messages)

    def ensure_system(self, prompt: str) -> None:
        """Prepend a system directive unless one is already present."""
        if self.has_system():
            return
        self._messages.insert(0, ChatMessage(role=Role.SYSTEM, content=prompt))

    def append(self, role: Role, content: str) -> ChatMessage:
        """Append a user or assistant message.

        Raises:
            ValueError: If a system message is appended; use ensure_system.
        """
        if Role(role) == Role.SYSTEM:
            raise ValueError("System messages can only be placed with ensure_system()")
        message = ChatMessage(role=role, content=content)
        self._messages.append(message)
        return message

    def replace(self, messages: Iterable[ChatMessage]) -> None:
        """Replace the whole conversation, keeping only the first system message."""
        kept: list[ChatMessage] = []
        system: ChatMessage | None = None
        for message in messages:
            if message.role == Role.SYSTEM.value:
                if system is None:
                    system = message
                else:
                    logger.warning("Discarding duplicate system message from restored history")
                continue
            kept.append(message)
        self._messages = ([system] if system else []) + kept
        if self._system_prompt:
            self.ensure_system(self._system_prompt)

    def reset(self) -> None:
        """Restore the default opening conversation."""
        self._messages = []
        if self._system_prompt:
            self.ensure_system(self._system_prompt)
        if self._greeting:
            self._messages.append(ChatMessage(role=Role.ASSISTANT, content=self._greeting))

    def to_payload(self) -> list[dict[str, str]]:
        """JSON-ready list of role/content dicts."""
        return [m.model_dump() for m in self._messages]
