"""linesuffix provides LineSuffixReader, a single pass text stream which appends a suffix to every non-empty
line of an underlying line source, with an optional distinct suffix for the first line.

Useful for adding a synthetic trailing column to every row of a large delimited file without loading it
into memory.
"""

from linesuffix.linesuffix import (
    EOF,
    BufferBoundsError,
    InvalidArgumentError,
    InvalidSuffixError,
    LineSuffixException,
    LineSuffixReader,
    StreamState,
)
from linesuffix.sources import IterableLineSource, LineSource, TextLineSource

__all__ = [
    "LineSuffixReader",
    "LineSource",
    "TextLineSource",
    "IterableLineSource",
    "StreamState",
    "EOF",
    "LineSuffixException",
    "InvalidArgumentError",
    "InvalidSuffixError",
    "BufferBoundsError",
]
