"""linesuffix provides LineSuffixReader, a read-only text stream that re-emits the lines of an underlying
source with a suffix appended to every non-empty line and an optional distinct suffix for the first line.

Useful for adding a synthetic trailing column to every row of a large CSV file while streaming it.
"""

import argparse
import io
import logging
import re
import shutil
import threading
from enum import Enum
from sys import stdin, stdout
from typing import Any, MutableSequence, Optional, Union

from .events import EventSource
from .sources import LineSource, TextLineSource
from .tape import Tape

logger = logging.getLogger(__name__)

EOF = -1
DEFAULT_BUFFER_SIZE = 8192

StreamState = Enum("StreamState", "ACTIVE DRAINED")


class LineSuffixException(Exception):
    """Base class of the errors raised by linesuffix."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self._msg: str = msg

    def __str__(self) -> str:
        return self._msg


class InvalidArgumentError(LineSuffixException, ValueError):
    """Raised when LineSuffixReader is constructed with an unusable argument."""


class InvalidSuffixError(InvalidArgumentError):
    """Raised when the mandatory suffix is missing or empty."""


class BufferBoundsError(LineSuffixException, IndexError):
    """Raised by read_into when offset/length do not fit the destination buffer."""


def _unsupported(name: str) -> io.UnsupportedOperation:
    return io.UnsupportedOperation(f"LineSuffixReader does not support {name}(): the stream is single pass")


class LineSuffixReader(io.TextIOBase, EventSource):
    """A forward-only text stream that appends a suffix to every non-empty line of its source

    Lines are pulled from a `LineSource` (or from any readable text file object, which is wrapped in a
    `TextLineSource`) with their terminators stripped, and re-serialized as ``line + suffix``. The first line
    gets `first_line_suffix` instead when one is configured, even if that line is empty. Any other empty line,
    including a run of blank lines at the end of the input, contributes nothing to the output.

    The transformed stream has no notion of lines or positions, so line reads, iteration, seek/tell,
    mark/reset and skip raise ``io.UnsupportedOperation``.

    All reads are serialized by a per-instance lock.

    Apart from the reading API, an API for attaching events is inherited from linesuffix.events.EventSource:

    self.add_listener(event, listener)
    self.remove_listener(listener, event=None)
    self.add_catch_all_listener(listener) - this listener receives ALL events
    self.remove_catch_all_listener(listener)
    self.auto_listen(observer, prefix="_on_")

    Events:
        LineSuffixReader.LINE_EVENT (str): Fired for each line pulled from the source; delivers the line text
            and the suffix attached to it ("" when none was attached)
        LineSuffixReader.REFILL_EVENT (str): Fired after each buffer refill; delivers the requested number of
            characters and the number of characters now buffered
        LineSuffixReader.DRAINED_EVENT (str): Fired once, when the source is exhausted and every buffered
            character has been read
    """

    LINE_EVENT = "line"
    REFILL_EVENT = "refill"
    DRAINED_EVENT = "drained"

    def __init__(
        self,
        source: Union[LineSource, Any],
        suffix: str,
        first_line_suffix: Optional[str] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        closefd: bool = True,
    ) -> None:
        """Initialize LineSuffixReader

        Args:
            source: A LineSource, or a readable text file object to split into lines
            suffix (str): Appended after every non-empty line; must not be empty
            first_line_suffix (str, optional): Appended after the first line instead of `suffix`. None means the
                first line is treated like every other line. (default: None)
            buffer_size (int): Minimum number of characters buffered per refill by read() and read_char()
                (default: 8192)
            closefd (bool): Close the source when the reader is closed (default: True)

        Raises:
            InvalidSuffixError: If `suffix` is None or empty
            InvalidArgumentError: If `source` cannot supply lines or `buffer_size` is not positive
        """
        io.TextIOBase.__init__(self)
        EventSource.__init__(self)
        self._source: Optional[LineSource] = None
        self._closefd = closefd
        if not suffix:
            raise InvalidSuffixError("empty suffix")
        if buffer_size <= 0:
            raise InvalidArgumentError(f"buffer_size must be positive, got {buffer_size}")
        if not isinstance(source, LineSource):
            if not hasattr(source, "read"):
                raise InvalidArgumentError(f"cannot read lines from {type(source).__name__}")
            source = TextLineSource(source)

        self._source = source
        self._suffix = suffix
        self._first_line_suffix = first_line_suffix
        self._buffer_size = buffer_size
        self._lock = threading.RLock()
        self._tape = Tape()
        self._source_exhausted = False
        self._first_line_unconsumed = True
        self._lines_read = 0
        self._state = StreamState.ACTIVE

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def first_line_suffix(self) -> Optional[str]:
        return self._first_line_suffix

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def lines_read(self) -> int:
        """Number of lines pulled from the source so far"""
        return self._lines_read

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def mark_supported(self) -> bool:
        return False

    def read_char(self) -> int:
        """Read one character

        Returns:
            The code point of the next character, or EOF (-1) at end of stream
        """
        with self._lock:
            self._check_open()
            if self._tape.exhausted:
                self._fill(self._buffer_size)
            char = self._tape.read(1)
            self._update_state()
            return ord(char) if char else EOF

    def read_into(self, buffer: MutableSequence[str], offset: int = 0, length: Optional[int] = None) -> int:
        """Read characters into a mutable sequence

        Args:
            buffer: Destination, e.g. a list of characters or ``array('u')``
            offset (int): Index of `buffer` to start writing at (default: 0)
            length (int, optional): Maximum number of characters to read. None means up to the end of
                `buffer`. (default: None)

        Returns:
            The number of characters copied, which may be less than `length` only when the source has no more
            data, or EOF (-1) at end of stream. A zero length returns 0 without touching the source.

        Raises:
            BufferBoundsError: If `offset` or `length` does not fit within `buffer`
        """
        with self._lock:
            self._check_open()
            capacity = len(buffer)
            if length is None:
                length = capacity - offset
            if offset < 0 or offset > capacity or length < 0 or offset + length > capacity:
                raise BufferBoundsError(
                    f"offset {offset} and length {length} out of bounds for buffer of size {capacity}"
                )
            if length == 0:
                return 0

            self._fill(length)
            if self._source_exhausted and self._tape.exhausted:
                self._update_state()
                return EOF

            count = self._tape.read_into(buffer, offset, length)
            self._update_state()
            return count

    def read(self, size: Optional[int] = -1) -> str:
        """Read up to `size` characters, or everything that is left when `size` is negative or None

        Returns:
            The characters read; "" at end of stream
        """
        with self._lock:
            self._check_open()
            if size is None or size < 0:
                chunks = []
                while not (self._source_exhausted and self._tape.exhausted):
                    self._fill(self._buffer_size)
                    chunks.append(self._tape.read())
                self._update_state()
                return "".join(chunks)

            if size == 0:
                return ""
            if len(self._tape) < size:
                self._fill(max(size, self._buffer_size))
            result = self._tape.read(size)
            self._update_state()
            return result

    def _fill(self, requested: int) -> None:
        """Make sure at least `requested` characters are buffered, unless the source runs out first"""
        if self._source_exhausted:
            return
        if len(self._tape) >= requested:
            return

        parts = [self._tape.tail()]
        buffered = len(parts[0])
        notify = self.has_listeners(LineSuffixReader.LINE_EVENT)
        while buffered < requested:
            line = self._source.next_line()
            if line is None:
                self._source_exhausted = True
                break
            suffix = self._suffix_for(line)
            parts.append(line)
            parts.append(suffix)
            buffered += len(line) + len(suffix)
            self._lines_read += 1
            if notify:
                self.fire(LineSuffixReader.LINE_EVENT, line, suffix)

        self._tape.rebuild("".join(parts))
        logger.debug("refilled %d characters (requested %d, %d lines read)", buffered, requested, self._lines_read)
        self.fire(LineSuffixReader.REFILL_EVENT, requested, buffered)

    def _suffix_for(self, line: str) -> str:
        if self._first_line_unconsumed:
            self._first_line_unconsumed = False
            if self._first_line_suffix is not None:
                return self._first_line_suffix
        # empty lines never get the regular suffix
        return self._suffix if line else ""

    def _update_state(self) -> None:
        if self._state is StreamState.DRAINED:
            return
        if self._source_exhausted and self._tape.exhausted:
            self._state = StreamState.DRAINED
            logger.debug("stream drained after %d lines", self._lines_read)
            self.fire(LineSuffixReader.DRAINED_EVENT)

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed file.")

    def readline(self, size: int = -1) -> str:
        raise _unsupported("readline")

    def readlines(self, hint: int = -1) -> list:
        raise _unsupported("readlines")

    def __iter__(self):
        raise _unsupported("__iter__")

    def __next__(self) -> str:
        raise _unsupported("__next__")

    def mark(self, read_ahead_limit: int = 0) -> None:
        raise _unsupported("mark")

    def reset(self) -> None:
        raise _unsupported("reset")

    def skip(self, n: int) -> int:
        raise _unsupported("skip")

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        raise _unsupported("seek")

    def tell(self) -> int:
        raise _unsupported("tell")

    def truncate(self, size: Optional[int] = None) -> int:
        raise _unsupported("truncate")

    def write(self, s: str) -> int:
        raise _unsupported("write")

    def close(self) -> None:
        """Close the reader, and the source too when the reader was created with closefd=True"""
        if self.closed:
            return
        try:
            if self._closefd and self._source is not None:
                self._source.close()
        finally:
            super().close()


_ESCAPES = {"\\n": "\n", "\\r": "\r", "\\t": "\t", "\\\\": "\\"}


def _unescape(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return re.sub(r"\\[nrt\\]", lambda m: _ESCAPES[m.group(0)], value)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linesuffix", description="Append a suffix to every non-empty line of a text stream."
    )
    parser.add_argument("input", nargs="?", help="file to read (default: stdin)")
    parser.add_argument("-s", "--suffix", required=True, help="suffix for every non-empty line; \\n, \\r and \\t are decoded")
    parser.add_argument("-f", "--first-line-suffix", default=None, help="suffix for the first line only")
    parser.add_argument("-b", "--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE, help="characters per refill")
    parser.add_argument("--encoding", default="utf-8", help="encoding of the input file (default: utf-8)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log refills to stderr")
    return parser


def run(argv=None, data=None, out=None):
    args = _parser().parse_args(argv)
    logging.basicConfig(format="%(levelname)s:%(message)s", level=logging.DEBUG if args.verbose else logging.WARNING)

    out = out if out is not None else stdout
    closefd = False
    try:
        if data is None and args.input:
            data = open(args.input, encoding=args.encoding, newline="")
            closefd = True
        elif data is None:
            data = stdin

        with LineSuffixReader(
            data,
            _unescape(args.suffix),
            _unescape(args.first_line_suffix),
            buffer_size=args.buffer_size,
            closefd=closefd,
        ) as reader:
            shutil.copyfileobj(reader, out, args.buffer_size)
    except (LineSuffixException, OSError) as e:
        logger.error("%s", e)
        return 1
    finally:
        if closefd and not data.closed:
            data.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
