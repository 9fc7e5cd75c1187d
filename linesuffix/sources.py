"""
Line sources feeding LineSuffixReader.

A line source hands out one line at a time with its terminator stripped and
returns None once the input is exhausted.
"""

import re
from abc import ABCMeta, abstractmethod
from typing import Any, Iterable, Optional

_TERMINATOR = re.compile(r"[\r\n]")


class LineSource(metaclass=ABCMeta):
    """Abstract base class for anything LineSuffixReader can pull lines from."""

    @abstractmethod
    def next_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end of input."""
        pass

    def close(self) -> None:
        """Release the underlying input, if any."""
        pass


class TextLineSource(LineSource):
    """
    Splits a readable text stream into lines.

    A line ends at a line feed, a carriage return, or a carriage return
    followed by a line feed. The final line does not need a terminator, and a
    terminator right before end of input does not produce an extra empty line.
    """

    DEFAULT_CHUNK_SIZE = 65536

    def __init__(self, stream: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """
        Args:
            stream: Object with a ``read(size)`` method returning str, "" at end of input
            chunk_size: Number of characters requested from `stream` per read (default: 65536)
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._stream = stream
        self._chunk_size = chunk_size
        self._chunk = ""
        self._pos = 0
        self._eof = False
        self._skip_lf = False

    def _next_chunk(self) -> bool:
        data = self._stream.read(self._chunk_size)
        if not data:
            self._eof = True
            return False
        if self._skip_lf:
            self._skip_lf = False
            if data[0] == "\n":
                data = data[1:]
        self._chunk = data
        self._pos = 0
        return True

    def next_line(self) -> Optional[str]:
        parts = []
        while True:
            if self._pos >= len(self._chunk):
                if self._eof or not self._next_chunk():
                    # a pending partial line is the last line
                    return "".join(parts) if parts else None
                if not self._chunk:
                    continue

            chunk = self._chunk
            start = self._pos
            match = _TERMINATOR.search(chunk, start)
            if match is None:
                parts.append(chunk[start:])
                self._pos = len(chunk)
                continue

            end = match.start()
            parts.append(chunk[start:end])
            if chunk[end] == "\r":
                if end + 1 < len(chunk):
                    if chunk[end + 1] == "\n":
                        end += 1
                else:
                    # the matching \n, if any, arrives with the next chunk
                    self._skip_lf = True
            self._pos = end + 1
            return "".join(parts)

    def close(self) -> None:
        self._stream.close()


class IterableLineSource(LineSource):
    """Adapts an iterable of already split lines; one trailing terminator is stripped from each item."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)

    def next_line(self) -> Optional[str]:
        line = next(self._lines, None)
        if line is None:
            return None
        if line.endswith("\r\n"):
            return line[:-2]
        if line.endswith(("\n", "\r")):
            return line[:-1]
        return line
