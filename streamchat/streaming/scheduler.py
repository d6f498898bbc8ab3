"""Typing-cadence playback of streamed text.

Network deltas land in a raw buffer as fast as they arrive. A reveal timer
moves one character at a time from the raw buffer into the displayed buffer,
so bursty delivery still renders as steady typing. Stream end flushes the
remainder at once.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_TYPING_INTERVAL = 0.02


class SchedulerState(str, Enum):
    """Whether a reveal tick is pending."""

    IDLE = "idle"
    RUNNING = "running"


class PlaybackScheduler:
    """Reveals buffered text on a fixed timer.

    The displayed buffer is always a prefix of the raw buffer. `render` is
    called with the displayed text after every change to it.

    Args:
        render: Callback receiving the full displayed text.
        interval: Seconds between reveal ticks. None renders every delta
            immediately instead of typing it out.
    """

    def __init__(
        self,
        render: Callable[[str], None],
        interval: float | None = DEFAULT_TYPING_INTERVAL,
    ) -> None:
        if interval is not None and interval < 0:
            raise ValueError("interval must be >= 0")
        self._render = render
        self._interval = interval
        self._raw_text = ""
        self._displayed = 0
        self._handle: asyncio.TimerHandle | None = None
        self._finished = False

    @property
    def raw_buffer(self) -> str:
        return self._raw_text

    @property
    def displayed_buffer(self) -> str:
        return self._raw_text[: self._displayed]

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.RUNNING if self._handle is not None else SchedulerState.IDLE

    @property
    def finished(self) -> bool:
        return self._finished

    def on_delta(self, text: str) -> None:
        """Append text to the raw buffer and start revealing it."""
        if self._finished:
            logger.debug("Delta received after stream end; ignoring")
            return
        if not text:
            return

        self._raw_text += text

        if self._interval is None:
            self._displayed = len(self._raw_text)
            self._render(self.displayed_buffer)
            return

        if self._handle is None:
            self._schedule()

    def on_stream_end(self) -> None:
        """Stop the timer and render the complete raw buffer."""
        if self._finished:
            return
        self.cancel()
        self._finished = True
        self._displayed = len(self._raw_text)
        self._render(self.displayed_buffer)

    def cancel(self) -> None:
        """Cancel the pending reveal tick. Safe to call at any time."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if self._displayed >= len(self._raw_text):
            return

        self._displayed += 1
        self._render(self.displayed_buffer)

        if self._displayed < len(self._raw_text):
            self._schedule()
