"""Chat session controller.

Runs one request/response exchange at a time:

    Idle -> Sending -> Streaming -> Committed | Failed -> Idle

The controller sends the conversation, pipes the response body through the
frame decoder, event extractor and playback scheduler, and on success
appends the reply to history and persists it. Failures surface as a
synthetic assistant message that is never saved. Submissions arriving while
an exchange is in flight are dropped, not queued.
"""

import json
import logging
from collections.abc import Callable
from contextlib import aclosing, nullcontext
from datetime import datetime
from enum import Enum

import httpx
from pydantic import BaseModel, Field

from streamchat.errors import (
    ChatError,
    EmptyResponseError,
    StorageParseError,
    TransportError,
)
from streamchat.models.schemas import ChatMessage, Role
from streamchat.session.config import ClientConfig, get_client_config
from streamchat.session.history import ConversationHistory
from streamchat.session.presenter import Presenter
from streamchat.session.storage import HistoryStore, KeyValueStore
from streamchat.streaming.decoder import iter_lines
from streamchat.streaming.events import EventExtractor, StreamEnd, TextDelta
from streamchat.streaming.scheduler import PlaybackScheduler
from streamchat.ui.formatting import MessageFormatter

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Sorry, an error occurred"


class SessionState(str, Enum):
    """Controller state."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    COMMITTED = "committed"
    FAILED = "failed"


class ExchangeStatus(str, Enum):
    """Lifecycle of a single exchange."""

    SENDING = "sending"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


class StreamedExchange(BaseModel):
    """One user turn and the streamed reply to it.

    Attributes:
        sent_messages: Snapshot of history at send time.
        raw_buffer: All text received so far.
        displayed_buffer: Text revealed so far (prefix of raw_buffer).
        status: Current lifecycle status.
        error: User-visible failure reason, when failed.
    """

    sent_messages: list[ChatMessage]
    raw_buffer: str = ""
    displayed_buffer: str = ""
    status: ExchangeStatus = ExchangeStatus.SENDING
    error: str | None = None
    started_at: datetime = Field(default_factory=datetime.now)


def error_message_from_body(status_code: int, body: bytes) -> str:
    """Pick the user-visible reason out of an error response body.

    Uses the `details` or `error` field of a JSON body verbatim, else a
    generic message naming the status.
    """
    try:
        data = json.loads(body)
    except ValueError:
        data = None

    if isinstance(data, dict):
        for field in ("details", "error"):
            value = data.get(field)
            if isinstance(value, str) and value.strip():
                return value
    return f"server error {status_code}"


class ChatSession:
    """Owns conversation history and drives exchanges against the chat API.

    Args:
        presenter: Presentation sink receiving UI mutations.
        store: Durable key-value store for history.
        config: Client configuration (loaded from environment if omitted).
        formatter: Render/sanitize pair for bubble HTML.
        client: Shared HTTP client. A short-lived client is created per
            exchange when omitted.
        clock: Returns the timestamp shown on new bubbles.
    """

    def __init__(
        self,
        presenter: Presenter,
        store: KeyValueStore,
        config: ClientConfig | None = None,
        formatter: MessageFormatter | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config or get_client_config()
        self._presenter = presenter
        self._formatter = formatter or MessageFormatter()
        self._client = client
        self._clock = clock
        self._store = HistoryStore(
            store,
            history_key=self._config.storage_key,
            timestamp_key=self._config.timestamp_key,
            archive_key=self._config.archive_key,
            max_age=self._config.history_max_age,
        )
        self.history = ConversationHistory(
            greeting=self._config.greeting,
            system_prompt=self._config.system_prompt,
        )
        self.state = SessionState.IDLE
        self.exchange: StreamedExchange | None = None

    @property
    def busy(self) -> bool:
        return self.state != SessionState.IDLE

    # === Session commands ===

    def load(self) -> None:
        """Restore saved history (or the default conversation) and render it."""
        try:
            saved = self._store.load()
        except StorageParseError as e:
            logger.warning(f"{e}; starting a fresh conversation")
            self._store.clear()
            saved = None

        if saved:
            self.history.replace(saved)
        else:
            self.history.reset()
        self.render_history()

    def render_history(self) -> None:
        """Redraw every visible history message."""
        self._presenter.clear_messages()
        now = self._clock()
        for index, message in self.history.visible():
            self._presenter.show_message(
                Role(message.role), self._html(message), now, index=index
            )

    def new_session(self) -> bool:
        """Archive the current conversation and start a fresh one.

        Returns:
            False if an exchange is in flight.
        """
        if self.busy:
            logger.info("New session rejected: exchange in flight")
            return False
        self._store.archive(self.history.messages)
        self.history.reset()
        self._store.save(self.history.messages)
        self.render_history()
        logger.info("Started new session")
        return True

    def delete_session(self) -> bool:
        """Erase all stored conversation data and start a fresh one.

        Returns:
            False if an exchange is in flight.
        """
        if self.busy:
            logger.info("Delete session rejected: exchange in flight")
            return False
        self._store.delete_all()
        self.history.reset()
        self.render_history()
        logger.info("Deleted session")
        return True

    def copy_response(self, index: int) -> bool:
        """Copy the assistant message at history `index` to the clipboard."""
        if not 0 <= index < len(self.history):
            return False
        message = self.history[index]
        if message.role != Role.ASSISTANT.value:
            return False
        self._presenter.copy_to_clipboard(message.content)
        return True

    # === Exchange ===

    async def submit(self, text: str) -> StreamedExchange | None:
        """Send a user message and stream the reply.

        Args:
            text: Raw user input.

        Returns:
            The finished exchange, or None if the input was empty or another
            exchange is in flight.
        """
        text = text.strip()
        if not text:
            return None
        if self.busy:
            logger.info("Submission dropped: exchange already in flight")
            return None

        self.state = SessionState.SENDING
        self.history.append(Role.USER, text)
        self._presenter.show_message(
            Role.USER, self._formatter.user(text), self._clock(), index=len(self.history) - 1
        )
        self._presenter.set_input_enabled(False)
        self._presenter.show_waiting()

        exchange = StreamedExchange(sent_messages=self.history.messages)
        self.exchange = exchange
        logger.info(f"Exchange started with {len(exchange.sent_messages)} messages")

        try:
            await self._run(exchange)
        except ChatError as e:
            self._fail(exchange, e)
        else:
            self._commit(exchange)
        finally:
            self.state = SessionState.IDLE
            self._presenter.set_input_enabled(True)
            self._presenter.focus_input()

        return exchange

    async def _run(self, exchange: StreamedExchange) -> None:
        """Perform the request and feed the response through the pipeline.

        Raises:
            TransportError: On request failure, non-2xx status, or drop.
            EmptyResponseError: If the stream ends without text.
        """
        payload = {"messages": [m.model_dump() for m in exchange.sent_messages]}
        client_context = (
            nullcontext(self._client)
            if self._client is not None
            else httpx.AsyncClient(timeout=None)
        )

        async with client_context as client:
            try:
                async with client.stream(
                    "POST",
                    self._config.api_url,
                    json=payload,
                    headers={"Accept": "text/event-stream"},
                ) as response:
                    if not response.is_success:
                        body = await response.aread()
                        raise TransportError(
                            error_message_from_body(response.status_code, body),
                            status_code=response.status_code,
                        )
                    await self._receive(exchange, response)
            except (httpx.HTTPError, httpx.StreamError) as e:
                raise TransportError(f"connection failed: {e}") from e

        if not exchange.raw_buffer:
            raise EmptyResponseError()

    async def _receive(self, exchange: StreamedExchange, response: httpx.Response) -> None:
        self.state = SessionState.STREAMING
        exchange.status = ExchangeStatus.STREAMING
        self._presenter.hide_waiting()
        self._presenter.open_placeholder(self._clock())

        def render(shown: str) -> None:
            exchange.displayed_buffer = shown
            self._presenter.update_placeholder(self._formatter.assistant(shown))

        scheduler = PlaybackScheduler(render, interval=self._config.typing_interval)
        try:
            if response.headers.get("content-type", "").startswith("application/json"):
                await self._receive_whole(exchange, response, scheduler)
            else:
                await self._receive_stream(exchange, response, scheduler)
        finally:
            scheduler.cancel()
        scheduler.on_stream_end()

    async def _receive_stream(
        self,
        exchange: StreamedExchange,
        response: httpx.Response,
        scheduler: PlaybackScheduler,
    ) -> None:
        extractor = EventExtractor(
            prefix=self._config.data_prefix,
            sentinel=self._config.done_sentinel,
            text_field=self._config.text_field,
        )
        lines = iter_lines(response.aiter_bytes(), encoding=self._config.encoding)
        async with aclosing(lines):
            async for line in lines:
                event = extractor.extract(line)
                if isinstance(event, TextDelta):
                    exchange.raw_buffer += event.text
                    scheduler.on_delta(event.text)
                elif isinstance(event, StreamEnd):
                    break
        extractor.finish()

    async def _receive_whole(
        self,
        exchange: StreamedExchange,
        response: httpx.Response,
        scheduler: PlaybackScheduler,
    ) -> None:
        body = await response.aread()
        try:
            data = json.loads(body)
        except ValueError as e:
            raise TransportError("invalid response body from server") from e

        text = data.get(self._config.text_field) if isinstance(data, dict) else None
        if isinstance(text, str) and text:
            exchange.raw_buffer += text
            scheduler.on_delta(text)

    def _commit(self, exchange: StreamedExchange) -> None:
        self.state = SessionState.COMMITTED
        exchange.status = ExchangeStatus.COMPLETE
        self.history.append(Role.ASSISTANT, exchange.raw_buffer)
        self._presenter.commit_placeholder(len(self.history) - 1)
        self._store.save(self.history.messages)
        logger.info(f"Exchange committed ({len(exchange.raw_buffer)} chars)")

    def _fail(self, exchange: StreamedExchange, error: ChatError) -> None:
        self.state = SessionState.FAILED
        exchange.status = ExchangeStatus.FAILED
        exchange.error = str(error)
        logger.warning(f"Exchange failed: {error}")
        self._presenter.hide_waiting()
        self._presenter.remove_placeholder()
        notice = f"{ERROR_PREFIX}: {error}"
        self._presenter.show_message(
            Role.ASSISTANT, self._formatter.user(notice), self._clock(), index=None
        )

    def _html(self, message: ChatMessage) -> str:
        if message.role == Role.USER.value:
            return self._formatter.user(message.content)
        return self._formatter.assistant(message.content)
