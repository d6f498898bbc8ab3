"""Durable key-value storage for conversation history.

The controller persists the history as a JSON-encoded message list under
one key and the last-write time (epoch seconds) under another. Any backend
offering get/set/delete on text values can be plugged in.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import MutableMapping

from pydantic import TypeAdapter, ValidationError

from streamchat.errors import StorageParseError
from streamchat.models.schemas import ChatMessage

logger = logging.getLogger(__name__)

_messages_adapter = TypeAdapter(list[ChatMessage])


class KeyValueStore(ABC):
    """Abstract text key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored text, or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store text under a key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""


class MappingStore(KeyValueStore):
    """Store backed by any mutable mapping.

    Wraps a plain dict for tests and in-process use, or NiceGUI's
    `app.storage.user` for per-browser persistence.
    """

    def __init__(self, mapping: MutableMapping[str, str] | None = None) -> None:
        self._mapping = mapping if mapping is not None else {}

    def get(self, key: str) -> str | None:
        value = self._mapping.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._mapping[key] = value

    def delete(self, key: str) -> None:
        self._mapping.pop(key, None)


def encode_history(messages: list[ChatMessage]) -> str:
    """Serialize messages to JSON text."""
    return _messages_adapter.dump_json(messages).decode("utf-8")


def decode_history(raw: str) -> list[ChatMessage]:
    """Parse JSON text into messages.

    Raises:
        StorageParseError: If the text is not a valid message list.
    """
    try:
        return _messages_adapter.validate_json(raw)
    except ValidationError as e:
        raise StorageParseError(f"Corrupt conversation history: {e.error_count()} errors") from e


class HistoryStore:
    """Reads and writes one conversation in a key-value store.

    Args:
        store: Backend store.
        history_key: Key of the JSON-encoded history.
        timestamp_key: Key of the last-write timestamp.
        archive_key: Key of the archived previous conversation.
        max_age: Seconds after which a saved history is expired on load.
        clock: Returns current epoch seconds.
    """

    def __init__(
        self,
        store: KeyValueStore,
        history_key: str = "chat_history",
        timestamp_key: str = "chat_history_saved_at",
        archive_key: str = "chat_history_archive",
        max_age: float | None = None,
        clock=time.time,
    ) -> None:
        self._store = store
        self._history_key = history_key
        self._timestamp_key = timestamp_key
        self._archive_key = archive_key
        self._max_age = max_age
        self._clock = clock

    def is_expired(self) -> bool:
        """Whether the saved history is older than the configured max age."""
        if self._max_age is None:
            return False
        saved_at = self._store.get(self._timestamp_key)
        if saved_at is None:
            return False
        try:
            age = self._clock() - float(saved_at)
        except ValueError:
            logger.warning(f"Unreadable history timestamp {saved_at!r}; treating as expired")
            return True
        return age > self._max_age

    def load(self) -> list[ChatMessage] | None:
        """Return the saved messages, or None when nothing is stored.

        Expired history is deleted and reported as absent.

        Raises:
            StorageParseError: If the stored history is corrupt.
        """
        if self.is_expired():
            logger.info("Saved conversation expired; discarding")
            self.clear()
            return None

        raw = self._store.get(self._history_key)
        if raw is None:
            return None
        return decode_history(raw)

    def save(self, messages: list[ChatMessage]) -> None:
        self._store.set(self._history_key, encode_history(messages))
        self._store.set(self._timestamp_key, str(self._clock()))

    def archive(self, messages: list[ChatMessage]) -> None:
        """Keep a copy of a finished conversation under the archive key."""
        self._store.set(self._archive_key, encode_history(messages))

    def load_archive(self) -> list[ChatMessage] | None:
        raw = self._store.get(self._archive_key)
        if raw is None:
            return None
        return decode_history(raw)

    def clear(self) -> None:
        """Remove the saved history and its timestamp."""
        self._store.delete(self._history_key)
        self._store.delete(self._timestamp_key)

    def delete_all(self) -> None:
        """Remove history, timestamp and archive."""
        self.clear()
        self._store.delete(self._archive_key)
