"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - client_config: ClientConfig pointing at a fake endpoint, no env reads
    - memory_store: Dict-backed key-value store
    - presenter: Presenter recording every call
    - make_session: Factory building a ChatSession around a MockTransport handler
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from streamchat.api import app
from streamchat.session.config import ClientConfig
from streamchat.session.controller import ChatSession
from streamchat.session.storage import MappingStore
from tests.helpers import RecordingPresenter

API_URL = "http://test/api/chat"
FIXED_TIME = datetime(2024, 1, 1, 12, 0)


@pytest.fixture
def client_config() -> ClientConfig:
    """Client config with explicit values so tests ignore the environment."""
    return ClientConfig(
        api_url=API_URL,
        typing_interval=0.0,
        history_max_age=None,
        greeting="Hello! How can I help?",
        system_prompt=None,
    )


@pytest.fixture
def memory_store() -> MappingStore:
    return MappingStore({})


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
async def make_session(
    client_config: ClientConfig,
    memory_store: MappingStore,
    presenter: RecordingPresenter,
) -> AsyncGenerator[Callable[..., ChatSession]]:
    """Factory building sessions whose HTTP calls go to a MockTransport handler.

    Yields:
        Callable taking a request handler (and optional config overrides).
    """
    clients: list[httpx.AsyncClient] = []

    def factory(handler, **config_overrides) -> ChatSession:
        config = client_config.model_copy(update=config_overrides)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return ChatSession(
            presenter,
            memory_store,
            config=config,
            client=client,
            clock=lambda: FIXED_TIME,
        )

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
