"""NiceGUI chat interface driven by a ChatSession."""

import os
from collections.abc import Callable
from datetime import datetime

from nicegui import app, ui

from streamchat.models.schemas import Role
from streamchat.session.config import get_client_config
from streamchat.session.controller import ChatSession
from streamchat.session.presenter import Presenter
from streamchat.session.storage import MappingStore

USER_AVATAR = "person"
ASSISTANT_AVATAR = "smart_toy"
TIME_FORMAT = "%I:%M %p"

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }
    .avatar-assistant { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #667eea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }
    .input-box:focus-within { border-color: #667eea; }

    .message-assistant pre {
        background: #1f2937; color: #f3f4f6;
        border-radius: 8px; padding: 0.75rem; overflow-x: auto;
    }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant ul { list-style: disc inside; }
    .message-assistant ol { list-style: decimal inside; }
    .message-assistant a { color: #4f46e5; text-decoration: underline; }
</style>
"""


def render_avatar(is_user: bool) -> None:
    css = "avatar-user" if is_user else "avatar-assistant"
    icon = USER_AVATAR if is_user else ASSISTANT_AVATAR
    with ui.element("div").classes(
        f"w-9 h-9 rounded-full flex items-center justify-center {css}"
    ):
        ui.icon(icon).classes("text-white text-lg")


class NiceGUIPresenter(Presenter):
    """Presenter rendering a chat session into NiceGUI elements.

    Args:
        container: Column holding the message bubbles.
        input_field: Message textarea.
        send_btn: Send button.
        scroll_area: Scroll area wrapping the container.
    """

    def __init__(
        self,
        container: ui.column,
        input_field: ui.textarea,
        send_btn: ui.button,
        scroll_area: ui.scroll_area,
    ) -> None:
        self._container = container
        self._input = input_field
        self._send_btn = send_btn
        self._scroll = scroll_area
        self._waiting: ui.row | None = None
        self._placeholder: ui.row | None = None
        self._placeholder_html: ui.html | None = None
        self._placeholder_meta: ui.row | None = None
        self.on_copy: Callable[[int], bool] | None = None

    def _bubble(self, role: Role, timestamp: datetime) -> tuple[ui.row, ui.html, ui.row]:
        is_user = role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with self._container, ui.row().classes(f"w-full {align} gap-3 items-end") as row:
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    content = ui.html("", sanitize=False).classes("text-sm leading-relaxed")
                with ui.row().classes(
                    f"items-center gap-2 {'self-end' if is_user else 'self-start'}"
                ) as meta:
                    ui.label(timestamp.strftime(TIME_FORMAT)).classes(
                        "text-[10px] text-gray-400"
                    )
            if is_user:
                render_avatar(True)
        return row, content, meta

    def _add_copy_button(self, meta: ui.row, index: int) -> None:
        with meta:
            ui.button(icon="content_copy", on_click=lambda: self._copy(index)).props(
                "flat dense round size=xs color=grey"
            )

    def _copy(self, index: int) -> None:
        if self.on_copy is not None and self.on_copy(index):
            ui.notify("Copied to clipboard", type="positive")

    def _scroll_to_bottom(self) -> None:
        self._scroll.scroll_to(percent=1.0)

    def show_message(
        self,
        role: Role,
        html: str,
        timestamp: datetime,
        index: int | None = None,
    ) -> None:
        _, content, meta = self._bubble(role, timestamp)
        content.set_content(html)
        if role == Role.ASSISTANT and index is not None:
            self._add_copy_button(meta, index)
        self._scroll_to_bottom()

    def clear_messages(self) -> None:
        self._container.clear()
        self._waiting = None
        self._forget_placeholder()

    def show_waiting(self) -> None:
        if self._waiting is not None:
            return
        with self._container, ui.row().classes("w-full justify-start gap-3 items-end") as row:
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")
        self._waiting = row
        self._scroll_to_bottom()

    def hide_waiting(self) -> None:
        if self._waiting is not None:
            self._waiting.delete()
            self._waiting = None

    def open_placeholder(self, timestamp: datetime) -> None:
        self.remove_placeholder()
        self._placeholder, self._placeholder_html, self._placeholder_meta = self._bubble(
            Role.ASSISTANT, timestamp
        )
        self._scroll_to_bottom()

    def update_placeholder(self, html: str) -> None:
        if self._placeholder_html is not None:
            self._placeholder_html.set_content(html)
            self._scroll_to_bottom()

    def commit_placeholder(self, index: int) -> None:
        if self._placeholder_meta is not None:
            self._add_copy_button(self._placeholder_meta, index)
        self._forget_placeholder()

    def remove_placeholder(self) -> None:
        if self._placeholder is not None:
            self._placeholder.delete()
        self._forget_placeholder()

    def _forget_placeholder(self) -> None:
        self._placeholder = None
        self._placeholder_html = None
        self._placeholder_meta = None

    def set_input_enabled(self, enabled: bool) -> None:
        if enabled:
            self._input.enable()
            self._send_btn.enable()
        else:
            self._input.disable()
            self._send_btn.disable()

    def focus_input(self) -> None:
        self._input.run_method("focus")

    def copy_to_clipboard(self, text: str) -> None:
        ui.clipboard.write(text)


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    config = get_client_config()

    session: ChatSession

    async def send_message() -> None:
        text = input_field.value
        if not text.strip() or session.busy:
            return
        input_field.value = ""
        await session.submit(text)

    def new_chat() -> None:
        if not session.new_session():
            ui.notify("Wait for the current reply to finish", type="warning")

    def delete_chat() -> None:
        if session.delete_session():
            ui.notify("Conversation deleted", type="info")
        else:
            ui.notify("Wait for the current reply to finish", type="warning")

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon(ASSISTANT_AVATAR).classes("text-white text-3xl")
                ui.label("StreamChat").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-1"):
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")
                ui.button(icon="delete", on_click=delete_chat).props("flat round color=white")

        # Messages
        with ui.scroll_area().classes("flex-grow w-full bg-gray-50") as scroll_area:
            with ui.column().classes("w-full p-5"):
                messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                input_field = (
                    ui.textarea(placeholder="Type a message...")
                    .props("autogrow borderless dense rows=1")
                    .classes("w-full")
                    .on("keydown.enter.prevent", send_message)
                )
            send_btn = ui.button(icon="send", on_click=send_message).props(
                "round unelevated"
            )

    presenter = NiceGUIPresenter(messages_container, input_field, send_btn, scroll_area)
    session = ChatSession(presenter, MappingStore(app.storage.user), config=config)
    presenter.on_copy = session.copy_response
    session.load()


def main() -> None:
    ui.run(
        title="StreamChat",
        port=int(os.getenv("UI_PORT", "8080")),
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "streamchat-secret"),
        reload=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
