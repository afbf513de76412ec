"""
Kernel Message Statement Extractor
==================================

Rebuilds a logging call such as

    dev_err(&pdev->dev, "failed to map "
            "registers: %d\\n", ret);

into one normalized line

    dev_err(&pdev->dev, "failed to map registers: %d\\n", ret)

Adjacent string literals are merged the way the compiler would merge them,
every other token is copied through as written, and a single space follows
each comma. Whitespace and comments never reach the extractor because the
scanner runs the lexer with whitespace skipping enabled.

A call is only reported when at least one string literal appears among its
arguments; ``pr_debug(x);`` is recognized but produces nothing.
"""

from dataclasses import dataclass
from typing import Optional

from kernelscan.errors import IncompleteStatementError, SourceLocation
from kernelscan.lexer import Lexer
from kernelscan.tokens import Token, TokenType


@dataclass(frozen=True)
class Statement:
    """
    A reconstructed logging call.

    Attributes:
        function: Name of the tracked function or macro
        text: The normalized statement, without the trailing semicolon
        messages: Each run of adjacent string literals, concatenated and
            without quotes, in call order
        line: Line of the function name in the source file
    """
    function: str
    text: str
    messages: tuple[str, ...]
    line: int

    def __str__(self) -> str:
        return self.text


class StatementExtractor:
    """
    Pulls the rest of a tracked call from the lexer.

    The driver hands over control right after reading a tracked identifier;
    the extractor reads up to and including the terminating ';' and then
    returns control.

    Example:
        extractor = StatementExtractor(lexer, filename="foo.c")
        statement = extractor.extract(identifier_token)
    """

    def __init__(self, lexer: Lexer, filename: str = "<input>"):
        self.lexer = lexer
        self.filename = filename

    def _next(self) -> Optional[Token]:
        return self.lexer.next_token(skip_whitespace=True)

    def extract(self, identifier: Token) -> Optional[Statement]:
        """
        Extract the call started by identifier.

        Returns:
            The Statement, or None if the identifier is not followed by '('
            or the call has no string literal argument

        Raises:
            IncompleteStatementError: If input ends before the ';'
        """
        token = self._next()
        if token is None:
            raise self._incomplete(identifier)

        if token.type != TokenType.PAREN_OPEN:
            # Not a call (variable, macro use...): skip to the next ';'
            self._skip_statement()
            return None

        parts = [identifier.text, token.text]
        messages: list[str] = []
        literal: Optional[list[str]] = None

        while True:
            token = self._next()
            if token is None:
                raise self._incomplete(identifier)

            if token.type == TokenType.SEMICOLON:
                break

            if token.type == TokenType.STRING_LITERAL:
                text = token.unquoted()
                if literal is None:
                    literal = []
                    parts.append('"')
                literal.append(text)
                parts.append(text)
                continue

            if literal is not None:
                parts.append('"')
                messages.append("".join(literal))
                literal = None

            parts.append(token.text)
            if token.type == TokenType.COMMA:
                parts.append(" ")

        if literal is not None:
            messages.append("".join(literal))

        if not messages:
            return None

        return Statement(
            function=identifier.text,
            text="".join(parts),
            messages=tuple(messages),
            line=identifier.line,
        )

    def _skip_statement(self) -> None:
        """Discard tokens up to and including the next ';'."""
        while True:
            token = self._next()
            if token is None or token.type == TokenType.SEMICOLON:
                return

    def _incomplete(self, identifier: Token) -> IncompleteStatementError:
        return IncompleteStatementError(
            identifier.text,
            SourceLocation(self.filename, identifier.line),
        )
