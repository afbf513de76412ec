"""
Tokens and the Token Buffer
===========================

Token kinds recognized by the kernel-message lexer, the immutable Token
record it returns, and the reusable TokenBuffer it accumulates characters in.

Only the handful of token kinds that matter for finding call expressions
get their own type; every other operator or punctuation character is
reported as UNKNOWN with its text preserved.
"""

from dataclasses import dataclass
from enum import Enum, auto


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Subset of C token kinds needed to pick logging calls out of source."""

    UNKNOWN = auto()        # Anything without a dedicated kind: { } : * ++ ...
    NUMBER = auto()         # Integer (decimal, octal or hex)
    STRING_LITERAL = auto() # "string"
    CHAR_LITERAL = auto()   # 'x'
    IDENTIFIER = auto()     # identifier
    PAREN_OPEN = auto()     # (
    PAREN_CLOSE = auto()    # )
    BRACKET_OPEN = auto()   # [
    BRACKET_CLOSE = auto()  # ]
    PREPROCESSOR = auto()   # # (start of a preprocessor directive)
    WHITESPACE = auto()     # ' ', '\t', '\r', '\n', '\\'
    LESS_THAN = auto()      # <
    GREATER_THAN = auto()   # >
    COMMA = auto()          # ,
    ARROW = auto()          # ->
    SEMICOLON = auto()      # ;


# Single characters that map directly to a token type
PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.PAREN_OPEN,
    ")": TokenType.PAREN_CLOSE,
    "[": TokenType.BRACKET_OPEN,
    "]": TokenType.BRACKET_CLOSE,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
}

# Single characters with no meaning to this grammar subset
OTHER_PUNCTUATION = frozenset("{}:~?*%!.")


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A classified lexical unit.

    Attributes:
        type: The TokenType classification
        text: The exact characters; literals keep their quote characters
        line: Line number where the token starts (1-indexed)
    """
    type: TokenType
    text: str
    line: int = 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, {self.line})"

    def is_literal(self) -> bool:
        """Return True for string and character literals."""
        return self.type in (TokenType.STRING_LITERAL, TokenType.CHAR_LITERAL)

    def unquoted(self) -> str:
        """
        Return the literal text without its delimiting quotes.

        Non-literal tokens are returned unchanged.
        """
        if self.is_literal():
            return self.text[1:-1]
        return self.text


# =============================================================================
# Token Buffer
# =============================================================================

class TokenBuffer:
    """
    Growable accumulator for the characters of the token being lexed.

    One buffer is owned by each lexer and cleared between tokens, so the
    storage is reused across the whole file.
    """

    def __init__(self):
        self._chars: list[str] = []

    def append(self, ch: str) -> None:
        self._chars.append(ch)

    def clear(self) -> None:
        self._chars.clear()

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def __bool__(self) -> bool:
        return bool(self._chars)

    def to_token(self, token_type: TokenType, line: int) -> Token:
        """Freeze the buffered characters into a Token and clear the buffer."""
        token = Token(token_type, self.text, line)
        self.clear()
        return token
