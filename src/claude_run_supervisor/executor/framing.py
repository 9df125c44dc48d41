"""Newline framing for process output streams."""

import codecs
from typing import Iterable, Iterator, Union

Chunk = Union[bytes, str]


class LineFramer:
    """Split a stream of chunks into complete ``\\n``-delimited lines.

    An incomplete trailing fragment is held back until a later chunk
    completes it or the stream is closed. Bytes are decoded incrementally,
    so a multi-byte UTF-8 character split across two reads is kept intact.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._closed = False

    @property
    def pending(self) -> str:
        """The buffered fragment that has not been emitted yet."""
        return self._buffer

    def feed(self, chunk: Chunk) -> list[str]:
        """Add a chunk and return every line it completes."""
        if self._closed:
            raise ValueError("LineFramer is closed")
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        if not chunk:
            return []

        self._buffer += chunk
        if "\n" not in chunk:
            return []

        *lines, self._buffer = self._buffer.split("\n")
        return lines

    def flush(self) -> str:
        """Return the buffered fragment now and start a fresh line."""
        fragment, self._buffer = self._buffer, ""
        return fragment

    def close(self) -> list[str]:
        """Flush the residual fragment at end of stream.

        The fragment is emitted as one last line only if it holds something
        other than whitespace.
        """
        if self._closed:
            return []
        self._closed = True

        residual = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        lines = []
        if "\n" in residual:
            *lines, residual = residual.split("\n")
        if residual.strip():
            lines.append(residual)
        return lines


def iter_lines(chunks: Iterable[Chunk], encoding: str = "utf-8") -> Iterator[str]:
    """Lazily frame an iterable of chunks into lines."""
    framer = LineFramer(encoding)
    for chunk in chunks:
        yield from framer.feed(chunk)
    yield from framer.close()
