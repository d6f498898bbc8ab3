"""Streaming render pipeline.

Turns a chunked HTTP response body into rendered text in three stages:

    - decoder: raw bytes -> complete lines (chunk-boundary safe)
    - events: lines -> TextDelta / StreamEnd / Ignore
    - scheduler: deltas -> typing-cadence reveal of the displayed text

Stages are sequenced by the session controller; none of them touches the
network or storage directly.
"""

from streamchat.streaming.decoder import FrameDecoder, iter_lines
from streamchat.streaming.events import (
    EventExtractor,
    Ignore,
    StreamEnd,
    StreamEvent,
    TextDelta,
)
from streamchat.streaming.scheduler import PlaybackScheduler, SchedulerState

__all__ = [
    "EventExtractor",
    "FrameDecoder",
    "Ignore",
    "PlaybackScheduler",
    "SchedulerState",
    "StreamEnd",
    "StreamEvent",
    "TextDelta",
    "iter_lines",
]
