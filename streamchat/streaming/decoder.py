"""Incremental decoding of streamed response bytes into text lines.

Bytes arrive in arbitrary chunks that need not align with line or character
boundaries. The decoder carries incomplete multi-byte sequences and the
trailing partial line forward until they are completed.
"""

import codecs
import logging
from collections.abc import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)

LINE_TERMINATOR = "\n"


class FrameDecoder:
    """Turns byte chunks into complete lines.

    A line is emitted only once its terminator has been seen, or on
    `flush()` at end of stream. Trailing carriage returns are stripped so
    CRLF-terminated streams yield the same lines as LF-terminated ones.

    Attributes:
        encoding: Text encoding of the stream.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    @property
    def pending(self) -> str:
        """Text received after the last line terminator."""
        return self._pending

    def feed(self, chunk: bytes) -> list[str]:
        """Decode a chunk and return the lines it completes.

        Args:
            chunk: Raw bytes read from the response body.

        Returns:
            Complete lines, without terminators, in arrival order.
        """
        self._pending += self._decoder.decode(chunk)
        if LINE_TERMINATOR not in self._pending:
            return []

        *lines, self._pending = self._pending.split(LINE_TERMINATOR)
        return [line.removesuffix("\r") for line in lines]

    def flush(self) -> list[str]:
        """Finish the stream and return the final unterminated line, if any."""
        self._pending += self._decoder.decode(b"", final=True)
        lines = self.feed(b"")
        remainder = self._pending.removesuffix("\r")
        self._pending = ""
        if remainder:
            lines.append(remainder)
        return lines

    def reset(self) -> None:
        """Discard buffered state so the decoder can serve a new exchange."""
        self._decoder.reset()
        self._pending = ""


async def iter_lines(
    chunks: AsyncIterable[bytes],
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Lazily yield decoded lines from an async stream of byte chunks.

    Args:
        chunks: Async iterable of raw byte chunks (e.g. `response.aiter_bytes()`).
        encoding: Text encoding of the stream.

    Yields:
        Complete lines in arrival order, the final unterminated line last.
    """
    decoder = FrameDecoder(encoding)
    async for chunk in chunks:
        for line in decoder.feed(chunk):
            yield line
    for line in decoder.flush():
        yield line
