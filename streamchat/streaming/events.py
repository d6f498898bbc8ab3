"""Semantic events extracted from decoded stream lines.

Each line of the stream maps to exactly one of:
    - TextDelta: an incremental piece of assistant text
    - StreamEnd: the termination sentinel was received
    - Ignore: nothing to act on (blank, foreign, or malformed line)

Malformed frames never abort an exchange. A frame whose JSON payload does
not parse is held back and retried once, joined with the next line, to
recover frames the upstream broke across two lines. A data marker repeated on
the continuation line is removed before joining. If the joined text still
does not yield a delta, the held frame is dropped and logged.
"""

import json
import logging
from typing import Literal

from pydantic import BaseModel

from streamchat.errors import FrameParseError

logger = logging.getLogger(__name__)

DEFAULT_DATA_PREFIX = "data:"
DEFAULT_DONE_SENTINEL = "[DONE]"
DEFAULT_TEXT_FIELD = "response"


class TextDelta(BaseModel):
    """Incremental assistant text."""

    kind: Literal["delta"] = "delta"
    text: str


class StreamEnd(BaseModel):
    """End-of-stream sentinel."""

    kind: Literal["end"] = "end"


class Ignore(BaseModel):
    """A line that produces no output.

    Attributes:
        reason: Why the line was ignored, for logging.
    """

    kind: Literal["ignore"] = "ignore"
    reason: str = ""


StreamEvent = TextDelta | StreamEnd | Ignore


class EventExtractor:
    """Parses decoded lines into stream events.

    One extractor serves one exchange; it holds at most one pending
    malformed frame between calls.

    Attributes:
        prefix: Data-field marker that introduces a frame (e.g. "data:").
        sentinel: Payload marking the end of the stream.
        text_field: JSON field carrying the text delta.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_DATA_PREFIX,
        sentinel: str = DEFAULT_DONE_SENTINEL,
        text_field: str = DEFAULT_TEXT_FIELD,
    ) -> None:
        self.prefix = prefix
        self.sentinel = sentinel
        self.text_field = text_field
        self._held: str | None = None
        self.dropped = 0

    @property
    def holding(self) -> bool:
        """Whether a malformed frame is waiting for its continuation."""
        return self._held is not None

    def extract(self, line: str) -> StreamEvent:
        """Map one decoded line to a stream event.

        Args:
            line: A complete line from the frame decoder.

        Returns:
            The event this line produces.
        """
        if not line.strip():
            return Ignore(reason="blank")

        if self._held is not None:
            held, self._held = self._held, None
            continuation = line.rstrip("\r")
            if continuation.startswith(self.prefix):
                continuation = self._strip_prefix(continuation)
            try:
                event = self._parse_payload(held + continuation)
            except FrameParseError as e:
                self._drop(f"Dropping malformed frame after retry: {e}")
            else:
                if not isinstance(event, TextDelta):
                    self._drop(f"Dropping rejoined frame without text: {event.reason}")
                return event

        if not line.startswith(self.prefix):
            logger.debug(f"Ignoring line without data prefix: {line[:80]!r}")
            return Ignore(reason="no prefix")

        # Trailing whitespace may belong to a string the upstream split.
        payload = self._strip_prefix(line).lstrip()
        if payload.strip() == self.sentinel:
            return StreamEnd()

        try:
            return self._parse_payload(payload)
        except FrameParseError:
            self._held = payload
            return Ignore(reason="incomplete frame")

    def finish(self) -> None:
        """Drop any frame still held at end of stream."""
        if self._held is not None:
            self._drop(f"Dropping incomplete frame at end of stream: {self._held[:80]!r}")
            self._held = None

    def _strip_prefix(self, line: str) -> str:
        """Remove the data marker and the single space that may follow it."""
        rest = line[len(self.prefix):]
        return rest[1:] if rest.startswith(" ") else rest

    def _drop(self, message: str) -> None:
        self.dropped += 1
        logger.warning(message)

    def _parse_payload(self, payload: str) -> StreamEvent:
        """Decode a JSON payload into a delta.

        Raises:
            FrameParseError: If the payload is not valid JSON.
        """
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise FrameParseError(f"{e.msg}: {payload[:80]!r}") from e

        if not isinstance(data, dict):
            return Ignore(reason="payload is not an object")

        text = data.get(self.text_field)
        if not isinstance(text, str):
            return Ignore(reason=f"no '{self.text_field}' field")
        return TextDelta(text=text)
