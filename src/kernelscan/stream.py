"""
Pushback Character Stream
=========================

A forward-only character source with an unbounded "unget" buffer, in the
spirit of ``ungetc()`` but without the one-character limit.

The lexer needs more than one character of lookahead in a few places
(``0x`` prefixes, ``->``, doubled operators, ``*/`` inside comments) and
must be able to retract all of it when a match fails. Pushed-back
characters are kept on a stack, so the most recently pushed character is
returned first:

>>> stream = PushbackStream("abc")
>>> a, b = stream.next_char(), stream.next_char()
>>> stream.push_back(b)
>>> stream.push_back(a)
>>> "".join(iter(stream.next_char, None))
'abc'

End of input is signalled by ``None``, which can never collide with a
real character.

Line Accounting
---------------
The stream counts every newline it pulls from the underlying source exactly
once (``newlines``), no matter how often that newline is pushed back and
re-read. ``line`` is the current 1-based position and follows pushback.
"""

from typing import Iterable, Iterator, Optional, TextIO


# Read size used by from_file(); mirrors the classic 64K stdin buffer
DEFAULT_CHUNK_SIZE = 65536


def _read_chunks(fp: TextIO, chunk_size: int) -> Iterator[str]:
    """Yield characters from a text file, reading it chunk by chunk."""
    while True:
        chunk = fp.read(chunk_size)
        if not chunk:
            return
        yield from chunk


class PushbackStream:
    """
    Character stream with unlimited pushback.

    Attributes:
        newlines: Number of newline characters read from the source
    """

    def __init__(self, source: Iterable[str]):
        """
        Args:
            source: A string or any iterable yielding single characters
        """
        self._source = iter(source)
        self._pushed: list[str] = []
        self._line = 1
        self.newlines = 0

    @classmethod
    def from_file(
        cls,
        fp: TextIO,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> "PushbackStream":
        """Create a stream that reads an open text file lazily."""
        return cls(_read_chunks(fp, chunk_size))

    @property
    def line(self) -> int:
        """Current line number (1-indexed)."""
        return self._line

    def next_char(self) -> Optional[str]:
        """
        Return the next character, or None at end of input.

        Pushed-back characters are drained (last pushed first) before
        reading forward from the source.
        """
        if self._pushed:
            ch = self._pushed.pop()
        else:
            ch = next(self._source, None)
            if ch is None:
                return None
            if ch == "\n":
                self.newlines += 1

        if ch == "\n":
            self._line += 1
        return ch

    def push_back(self, ch: Optional[str]) -> None:
        """
        Push a character back so the next next_char() returns it.

        Pushing back None (end of input) is a no-op: an exhausted source
        keeps reporting end of input by itself.
        """
        if ch is None:
            return
        if ch == "\n":
            self._line -= 1
        self._pushed.append(ch)

    def peek(self) -> Optional[str]:
        """Return the next character without consuming it."""
        ch = self.next_char()
        self.push_back(ch)
        return ch

    @property
    def pending(self) -> int:
        """Number of pushed-back characters waiting to be re-read."""
        return len(self._pushed)
