"""
Kernel Source Lexer (Tokenizer)
===============================

This module implements a deliberately small lexer for C and C++ source.
It recognizes just enough of the language to find logging calls such as
``printk(...)`` and ``dev_err(...)`` and to rebuild their text.

Token Categories
----------------
- Identifiers: leading ASCII letter, then letters, digits and underscores
- Numbers: decimal, octal (leading 0) and hexadecimal (0x); integers only
- Strings: "double quoted", kept with their quotes
- Characters: 'single quoted', kept with their quotes
- Punctuation with its own kind: ( ) [ ] < > , ; -> #
- Everything else (++, ==, ||, &&, --, { } : ~ ? * % ! . /): UNKNOWN

Characters outside this grammar (``_`` at the start of a token, ``@``,
``$``, ``^``, non-ASCII text outside literals) are skipped without
producing a token.

Comments
--------
``// ...`` and ``/* ... */`` are consumed and never produce a token.

Escape Handling
---------------
With ``escape_strip`` disabled every escape sequence inside a literal is
copied verbatim. With it enabled:

| Escape               | Result                                        |
|----------------------|-----------------------------------------------|
| \\?                  | ?                                             |
| \\a \\b \\f \\n \\r \\t \\v | a space, unless the closing quote follows  |
| anything else        | kept as backslash + character                 |

Example Usage
-------------
>>> from kernelscan.lexer import tokenize
>>> for token in tokenize('pr_err("x %d", 0x1F);'):
...     print(token)
Token(IDENTIFIER, 'pr_err', 1)
Token(PAREN_OPEN, '(', 1)
Token(STRING_LITERAL, '"x %d"', 1)
Token(COMMA, ',', 1)
Token(NUMBER, '0x1F', 1)
Token(PAREN_CLOSE, ')', 1)
Token(SEMICOLON, ';', 1)
"""

from typing import Iterator, Optional
import string

from kernelscan.stream import PushbackStream
from kernelscan.tokens import (
    OTHER_PUNCTUATION,
    PUNCTUATION,
    Token,
    TokenBuffer,
    TokenType,
)


class _EndOfInput(Exception):
    """Raised internally when input runs out in the middle of a token."""


class Lexer:
    """
    Produces tokens one at a time from a PushbackStream.

    Usage:
        lexer = Lexer(PushbackStream(source), escape_strip=True)
        while (token := lexer.next_token()) is not None:
            ...

    End of input, including end of input in the middle of a literal,
    comment or escape sequence, is reported as None.

    Attributes:
        stream: The character source (also tracks line numbers)
        escape_strip: Weaken control-character escapes inside literals
        skip_whitespace: Default for next_token(); drop whitespace silently
    """

    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    WHITESPACE = " \t\r\n\\"

    # Digit classes used after the leading character of a number.
    # "8" is accepted as octal, as the original tool always has.
    OCTAL_DIGITS = "012345678"
    HEX_DIGITS = string.hexdigits
    DECIMAL_DIGITS = string.digits

    # Escapes replaced by a space when escape stripping is enabled
    CONTROL_ESCAPES = "abfnrtv"

    # Operators that may appear doubled: ++ == || &&
    DOUBLING_OPERATORS = "+=|&"

    def __init__(
        self,
        stream: PushbackStream,
        escape_strip: bool = False,
        skip_whitespace: bool = False,
    ):
        self.stream = stream
        self.escape_strip = escape_strip
        self.skip_whitespace = skip_whitespace
        self._buffer = TokenBuffer()

    @classmethod
    def from_source(
        cls,
        source: str,
        escape_strip: bool = False,
        skip_whitespace: bool = False,
    ) -> "Lexer":
        """Create a lexer reading from a string."""
        return cls(PushbackStream(source), escape_strip, skip_whitespace)

    def tokens(self) -> Iterator[Token]:
        """Yield tokens until end of input."""
        while (token := self.next_token()) is not None:
            yield token

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self, skip_whitespace: Optional[bool] = None) -> Optional[Token]:
        """
        Scan and return the next token.

        Args:
            skip_whitespace: Override the lexer's whitespace setting for
                this call

        Returns:
            The next Token, or None at end of input
        """
        if skip_whitespace is None:
            skip_whitespace = self.skip_whitespace

        self._buffer.clear()
        try:
            return self._scan_token(skip_whitespace)
        except _EndOfInput:
            self._buffer.clear()
            return None

    def _read(self) -> str:
        """Read a character that must exist for the current token."""
        ch = self.stream.next_char()
        if ch is None:
            raise _EndOfInput()
        return ch

    def _scan_token(self, skip_whitespace: bool) -> Token:
        while True:
            line = self.stream.line
            ch = self._read()

            if ch == "/":
                if self._skip_comment():
                    continue
                return self._single(ch, TokenType.UNKNOWN, line)

            if ch == "#":
                return self._single(ch, TokenType.PREPROCESSOR, line)

            if ch in self.WHITESPACE:
                if skip_whitespace:
                    continue
                self._buffer.append(ch)
                if ch == "\\" and not self.escape_strip:
                    # Keep a line continuation intact
                    self._buffer.append(self._read())
                return self._buffer.to_token(TokenType.WHITESPACE, line)

            if ch in PUNCTUATION:
                return self._single(ch, PUNCTUATION[ch], line)

            if ch in OTHER_PUNCTUATION:
                return self._single(ch, TokenType.UNKNOWN, line)

            if ch in self.DECIMAL_DIGITS:
                return self._scan_number(ch, line)

            if ch in self.IDENT_START:
                return self._scan_identifier(ch, line)

            if ch == '"':
                return self._scan_literal(ch, TokenType.STRING_LITERAL, line)

            if ch == "'":
                return self._scan_literal(ch, TokenType.CHAR_LITERAL, line)

            if ch in self.DOUBLING_OPERATORS:
                return self._scan_doubled(ch, line)

            if ch == "-":
                return self._scan_minus(ch, line)

            # Not part of the grammar subset; drop it and keep going

    def _single(self, ch: str, token_type: TokenType, line: int) -> Token:
        self._buffer.append(ch)
        return self._buffer.to_token(token_type, line)

    # =========================================================================
    # Comments
    # =========================================================================

    def _skip_comment(self) -> bool:
        """
        Consume a comment after a '/' has been read.

        Returns:
            True if a comment was skipped, False if the '/' stands alone
            (the lookahead character is pushed back)
        """
        ch = self._read()

        if ch == "/":
            while self._read() != "\n":
                pass
            return True

        if ch == "*":
            while True:
                if self._read() == "*":
                    ch = self._read()
                    if ch == "/":
                        return True
                    # Could be the start of "*/" again, e.g. "**/"
                    self.stream.push_back(ch)

        self.stream.push_back(ch)
        return False

    # =========================================================================
    # Numbers and Identifiers
    # =========================================================================

    def _scan_number(self, ch: str, line: int) -> Token:
        """
        Scan an integer.

        A leading 0 selects octal or hex based on up to two characters of
        lookahead; if neither applies the lookahead is pushed back and the
        token is just "0".
        """
        self._buffer.append(ch)
        digits = self.DECIMAL_DIGITS

        if ch == "0":
            next1 = self.stream.next_char()
            if next1 is not None and next1 in self.OCTAL_DIGITS:
                self._buffer.append(next1)
                digits = self.OCTAL_DIGITS
            elif next1 in ("x", "X"):
                next2 = self.stream.next_char()
                if next2 is not None and next2 in self.HEX_DIGITS:
                    self._buffer.append(next1)
                    self._buffer.append(next2)
                    digits = self.HEX_DIGITS
                else:
                    self.stream.push_back(next2)
                    self.stream.push_back(next1)
                    return self._buffer.to_token(TokenType.NUMBER, line)
            else:
                self.stream.push_back(next1)
                return self._buffer.to_token(TokenType.NUMBER, line)

        while True:
            ch = self.stream.next_char()
            if ch is None:
                break
            if ch not in digits:
                self.stream.push_back(ch)
                break
            self._buffer.append(ch)

        return self._buffer.to_token(TokenType.NUMBER, line)

    def _scan_identifier(self, ch: str, line: int) -> Token:
        self._buffer.append(ch)

        while True:
            ch = self.stream.next_char()
            if ch is None:
                break
            if ch not in self.IDENT_CHARS:
                self.stream.push_back(ch)
                break
            self._buffer.append(ch)

        return self._buffer.to_token(TokenType.IDENTIFIER, line)

    # =========================================================================
    # Literals
    # =========================================================================

    def _scan_literal(self, quote: str, token_type: TokenType, line: int) -> Token:
        """
        Scan a string or character literal, delimiters included.

        Raises:
            _EndOfInput: If the literal is not closed before end of input
        """
        self._buffer.append(quote)

        while True:
            ch = self._read()

            if ch == "\\":
                if self.escape_strip:
                    self._strip_escape(quote)
                else:
                    self._buffer.append(ch)
                    self._buffer.append(self._read())
                continue

            self._buffer.append(ch)
            if ch == quote:
                return self._buffer.to_token(token_type, line)

    def _strip_escape(self, quote: str) -> None:
        """Append the weakened form of the escape following a backslash."""
        ch = self._read()

        if ch == "?":
            self._buffer.append(ch)
        elif ch in self.CONTROL_ESCAPES:
            # No space when the escape is the last thing in the literal
            if self.stream.peek() != quote:
                self._buffer.append(" ")
        else:
            self._buffer.append("\\")
            self._buffer.append(ch)

    # =========================================================================
    # Operators
    # =========================================================================

    def _scan_doubled(self, op: str, line: int) -> Token:
        """Scan +, =, |, & and their doubled forms."""
        self._buffer.append(op)

        ch = self.stream.next_char()
        if ch == op:
            self._buffer.append(ch)
        else:
            self.stream.push_back(ch)

        return self._buffer.to_token(TokenType.UNKNOWN, line)

    def _scan_minus(self, op: str, line: int) -> Token:
        """Scan -, -- and ->."""
        self._buffer.append(op)
        token_type = TokenType.UNKNOWN

        ch = self.stream.next_char()
        if ch == op:
            self._buffer.append(ch)
        elif ch == ">":
            self._buffer.append(ch)
            token_type = TokenType.ARROW
        else:
            self.stream.push_back(ch)

        return self._buffer.to_token(token_type, line)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(
    source: str,
    escape_strip: bool = False,
    skip_whitespace: bool = True,
) -> list[Token]:
    """
    Tokenize a string of C source.

    Args:
        source: The source text
        escape_strip: Weaken control-character escapes inside literals
        skip_whitespace: Drop whitespace instead of returning it as tokens

    Returns:
        All tokens up to end of input
    """
    lexer = Lexer.from_source(source, escape_strip, skip_whitespace)
    return list(lexer.tokens())
