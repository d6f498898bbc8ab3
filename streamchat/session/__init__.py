"""Chat session management.

Owns everything that outlives a single network read:

    - controller: exchange state machine (send, stream, commit or fail)
    - history: ordered conversation with a single optional system directive
    - storage: durable key-value persistence with age-based expiry
    - presenter: contract for the front end hosting the session
    - config: environment-driven client settings

Only the controller reads or writes durable storage.
"""

from streamchat.session.config import ClientConfig, get_client_config
from streamchat.session.controller import (
    ChatSession,
    ExchangeStatus,
    SessionState,
    StreamedExchange,
)
from streamchat.session.history import ConversationHistory
from streamchat.session.presenter import Presenter
from streamchat.session.storage import HistoryStore, KeyValueStore, MappingStore

__all__ = [
    "ChatSession",
    "ClientConfig",
    "ConversationHistory",
    "ExchangeStatus",
    "HistoryStore",
    "KeyValueStore",
    "MappingStore",
    "Presenter",
    "SessionState",
    "StreamedExchange",
    "get_client_config",
]
