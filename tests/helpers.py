"""Shared test doubles and stream builders."""

from collections.abc import AsyncIterator

import httpx

from streamchat.models.schemas import ChatMessage, Role
from streamchat.session.presenter import Presenter


class RecordingPresenter(Presenter):
    """Presenter that records calls and mirrors the visible bubbles."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.bubbles: list[tuple[str, str, int | None]] = []
        self.placeholder: str | None = None
        self.placeholder_updates: list[str] = []
        self.waiting = False
        self.input_enabled = True
        self.clipboard: str | None = None

    def show_message(self, role, html, timestamp, index=None) -> None:
        self.calls.append(("show_message", Role(role).value, html, index))
        self.bubbles.append((Role(role).value, html, index))

    def clear_messages(self) -> None:
        self.calls.append(("clear_messages",))
        self.bubbles.clear()
        self.placeholder = None

    def show_waiting(self) -> None:
        self.calls.append(("show_waiting",))
        self.waiting = True

    def hide_waiting(self) -> None:
        self.calls.append(("hide_waiting",))
        self.waiting = False

    def open_placeholder(self, timestamp) -> None:
        self.calls.append(("open_placeholder",))
        self.placeholder = ""

    def update_placeholder(self, html) -> None:
        self.placeholder = html
        self.placeholder_updates.append(html)

    def commit_placeholder(self, index) -> None:
        self.calls.append(("commit_placeholder", index))
        self.bubbles.append((Role.ASSISTANT.value, self.placeholder or "", index))
        self.placeholder = None

    def remove_placeholder(self) -> None:
        self.calls.append(("remove_placeholder",))
        self.placeholder = None

    def set_input_enabled(self, enabled) -> None:
        self.calls.append(("set_input_enabled", enabled))
        self.input_enabled = enabled

    def focus_input(self) -> None:
        self.calls.append(("focus_input",))

    def copy_to_clipboard(self, text) -> None:
        self.clipboard = text


def sse_body(*chunks: bytes) -> AsyncIterator[bytes]:
    """Async byte stream delivering the given chunks one by one."""

    async def body() -> AsyncIterator[bytes]:
        for chunk in chunks:
            yield chunk

    return body()


def stream_response(*chunks: bytes, status_code: int = 200) -> httpx.Response:
    """Streamed event-stream response made of the given raw chunks."""
    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream"},
        content=sse_body(*chunks),
    )


class FakeAgentService:
    """Stands in for AgentService, replaying scripted chunks.

    Args:
        chunks: Text chunks to stream.
        fail_at: Index at which to raise `error` instead of yielding.
        error: Exception raised at `fail_at`.
    """

    def __init__(
        self,
        chunks: list[str],
        fail_at: int | None = None,
        error: Exception | None = None,
    ) -> None:
        self.chunks = chunks
        self.fail_at = fail_at
        self.error = error or RuntimeError("model unavailable")
        self.received: list[list[ChatMessage]] = []

    async def stream_response(self, messages: list[ChatMessage]) -> AsyncIterator[str]:
        self.received.append(messages)
        for i, chunk in enumerate(self.chunks):
            if i == self.fail_at:
                raise self.error
            yield chunk
        if self.fail_at is not None and self.fail_at >= len(self.chunks):
            raise self.error

    async def get_response(self, messages: list[ChatMessage]) -> str:
        self.received.append(messages)
        if self.fail_at is not None:
            raise self.error
        return "".join(self.chunks)
