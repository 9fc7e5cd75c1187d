"""
Tape: the reassembly buffer behind LineSuffixReader.

Holds the characters produced by the last refill and a cursor marking the
next character to hand out. Content is never appended to in place; a refill
rebuilds the tape from the unconsumed tail plus the newly suffixed lines.
"""

from typing import MutableSequence, Optional


class Tape:
    """
    A read-once character buffer with a cursor.
    Reading advances the cursor; `rebuild` replaces the content and rewinds the cursor to 0.
    """

    def __init__(self, initial_value: str = "") -> None:
        """Initialize the Tape with optional initial content.

        Args:
            initial_value: Initial content to populate the tape (default: empty string)
        """
        self._buffer: str = initial_value
        self._cursor: int = 0

    @property
    def cursor(self) -> int:
        """Index of the next character to be read, always within ``0..len(content)``"""
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._cursor == len(self._buffer)

    def read(self, size: Optional[int] = None) -> str:
        """Read and consume characters from the cursor onward.

        Args:
            size: Maximum number of characters to read. None or a negative value reads
                everything left. (default: None)

        Returns:
            The characters read, possibly fewer than `size` and "" when the tape is exhausted.

        Examples:
            >>> tape = Tape("hello world")
            >>> tape.read(5)
            'hello'
            >>> tape.read()
            ' world'
        """
        if size is None or size < 0:
            end = len(self._buffer)
        else:
            end = min(self._cursor + size, len(self._buffer))
        result = self._buffer[self._cursor : end]
        self._cursor = end
        return result

    def read_into(self, target: MutableSequence[str], offset: int, size: int) -> int:
        """Copy up to `size` characters into `target` starting at `offset`.

        Args:
            target: Mutable sequence of single characters, e.g. a list or ``array('u')``
            offset: First index of `target` to write to
            size: Maximum number of characters to copy

        Returns:
            The number of characters copied
        """
        end = min(self._cursor + size, len(self._buffer))
        chunk = self._buffer[self._cursor : end]
        for i, char in enumerate(chunk):
            target[offset + i] = char
        # advance only once every character has been accepted by target
        self._cursor = end
        return len(chunk)

    def tail(self) -> str:
        """Return the unconsumed characters without moving the cursor."""
        return self._buffer[self._cursor :]

    def rebuild(self, content: str) -> None:
        """Replace the tape content and rewind the cursor.

        Args:
            content: The new content; callers carry any unconsumed tail over themselves
        """
        self._buffer = content
        self._cursor = 0

    def __len__(self) -> int:
        """Return the number of characters still available from the cursor onward.

        Returns:
            Count of unconsumed characters
        """
        return len(self._buffer) - self._cursor

    def __str__(self) -> str:
        return self.tail()
