"""Presentation sink driven by the session controller.

The controller never builds UI elements itself. It calls these methods
with already-sanitized HTML, so any front end (NiceGUI page, terminal,
test recorder) can host a chat session.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from streamchat.models.schemas import Role


class Presenter(ABC):
    """Receives presentation mutations from a chat session."""

    @abstractmethod
    def show_message(
        self,
        role: Role,
        html: str,
        timestamp: datetime,
        index: int | None = None,
    ) -> None:
        """Append a finished message bubble.

        Args:
            role: Speaker of the message.
            html: Safe HTML content.
            timestamp: Time shown under the bubble.
            index: History index of the message; None for notices that are
                not part of history (such as error messages).
        """

    @abstractmethod
    def clear_messages(self) -> None:
        """Remove every bubble."""

    @abstractmethod
    def show_waiting(self) -> None:
        """Show the waiting indicator."""

    @abstractmethod
    def hide_waiting(self) -> None:
        """Hide the waiting indicator. No-op if hidden."""

    @abstractmethod
    def open_placeholder(self, timestamp: datetime) -> None:
        """Create an empty assistant bubble for streamed content."""

    @abstractmethod
    def update_placeholder(self, html: str) -> None:
        """Replace the placeholder content."""

    @abstractmethod
    def commit_placeholder(self, index: int) -> None:
        """Turn the placeholder into a regular message at history `index`."""

    @abstractmethod
    def remove_placeholder(self) -> None:
        """Delete the placeholder, if any."""

    @abstractmethod
    def set_input_enabled(self, enabled: bool) -> None:
        """Enable or disable the input field and send button."""

    @abstractmethod
    def focus_input(self) -> None:
        """Move focus to the input field."""

    @abstractmethod
    def copy_to_clipboard(self, text: str) -> None:
        """Place text on the user's clipboard."""
