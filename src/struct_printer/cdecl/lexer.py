"""
Declaration Lexer (Tokenizer)
=============================

This module implements the lexer for the C declaration subset understood
by the struct parser. It converts source text into a stream of tokens.

Token Categories
----------------
- Keywords: struct, union, enum, typedef
- Identifiers: [A-Za-z_][A-Za-z_0-9]*
- Numbers: a digit followed by letters, digits or underscores (10, 0x10, 16u).
  Numbers are only meaningful as array sizes, so they are never evaluated.
- Punctuation: { } * ; [ ] ( ) ,

Comments
--------
- Line comments: // comment
- Preprocessor lines: # anything (skipped like a line comment)
- Block comments: /* comment */ (an unterminated one runs to end of input)

Tokens do not copy text out of the source. Each token carries a Span
that refers back into the source string, and the text is sliced out only
when asked for.

Example Usage
-------------
>>> from struct_printer.cdecl.lexer import Lexer
>>> for token in Lexer("struct { int x; }").tokenize():
...     print(token)
Token(STRUCT, 'struct', 0)
Token(LBRACE, '{', 7)
Token(IDENTIFIER, 'int', 9)
Token(IDENTIFIER, 'x', 13)
Token(SEMICOLON, ';', 14)
Token(RBRACE, '}', 16)
Token(EOF, 17)
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional
import string

from struct_printer.errors import ERROR_LOCATION_LEN, SourceLocation
from struct_printer.cdecl.errors import UnrecognizedCharacterError


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the declaration subset."""

    # === Structural Tokens ===
    EOF = auto()            # End of input

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # Type and field names
    NUMBER = auto()         # Array sizes

    # === Keywords ===
    STRUCT = auto()         # struct
    UNION = auto()          # union
    ENUM = auto()           # enum
    TYPEDEF = auto()        # typedef

    # === Punctuation ===
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    STAR = auto()           # *
    SEMICOLON = auto()      # ;
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    COMMA = auto()          # ,


KEYWORDS: dict[str, TokenType] = {
    "struct": TokenType.STRUCT,
    "union": TokenType.UNION,
    "enum": TokenType.ENUM,
    "typedef": TokenType.TYPEDEF,
}

PUNCTUATION: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "*": TokenType.STAR,
    ";": TokenType.SEMICOLON,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}

WHITESPACE = " \t\n\r\f\v"
IDENT_START = string.ascii_letters + "_"
IDENT_CHARS = string.ascii_letters + string.digits + "_"


# =============================================================================
# Source Spans
# =============================================================================

@dataclass(frozen=True)
class Span:
    """
    A slice of the source text, held as an offset and a length.

    The span keeps a reference to the source string instead of a copy of
    the text. Python strings are immutable, so the referenced text stays
    valid for as long as any span into it is alive.

    Attributes:
        source: The complete source string
        start: Offset of the first character
        length: Number of characters
    """
    source: str = field(repr=False)
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    def excerpt(self, length: int = ERROR_LOCATION_LEN) -> str:
        """Return up to `length` characters of source starting at this span."""
        return self.source[self.start:self.start + length]

    def location(self, filename: str = "<input>") -> SourceLocation:
        return SourceLocation.from_offset(self.source, self.start, filename)

    def __str__(self) -> str:
        return self.text


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of declaration source.

    Attributes:
        type: The TokenType classification
        span: Where the token's text lives in the source (empty for EOF)
    """
    type: TokenType
    span: Span

    def __repr__(self) -> str:
        if self.type == TokenType.EOF:
            return f"Token(EOF, {self.span.start})"
        return f"Token({self.type.name}, {self.value!r}, {self.span.start})"

    @property
    def value(self) -> Optional[str]:
        """The token text, or None for end of input."""
        if self.type == TokenType.EOF:
            return None
        return self.span.text

    def is_struct_or_union(self) -> bool:
        return self.type in (TokenType.STRUCT, TokenType.UNION)

    def describe(self) -> str:
        """
        Describe the token kind and text for error messages.

        Examples: "identifier 'count'", "keyword 'struct'", "'{'",
        "end of input".
        """
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type == TokenType.NUMBER:
            return f"number '{self.value}'"
        if self.type in KEYWORDS.values():
            return f"keyword '{self.value}'"
        return f"'{self.value}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

def _skip_ignored(source: str, position: int) -> int:
    """
    Skip whitespace and comments starting at position.

    Each pass skips whitespace, then at most one line comment and one
    block comment. Passes repeat until one of them skips nothing, so any
    mix of comments and whitespace is consumed.
    """
    end = len(source)
    while True:
        start = position

        while position < end and source[position] in WHITESPACE:
            position += 1

        # Line comment: // or # up to (not including) the newline
        if source.startswith("//", position) or source.startswith("#", position):
            newline = source.find("\n", position)
            position = end if newline == -1 else newline

        # Block comment: /* ... */
        if source.startswith("/*", position):
            close = source.find("*/", position + 2)
            position = end if close == -1 else close + 2

        if position == start:
            return position


def next_token(
    source: str,
    position: int,
    filename: str = "<input>",
) -> tuple[Token, int]:
    """
    Scan one token starting at position.

    Args:
        source: The complete source text
        position: Offset to start scanning from
        filename: Source filename for error messages

    Returns:
        The token and the offset just past it. At end of input the EOF
        token is returned with an unchanged position, so asking again
        keeps returning EOF.

    Raises:
        UnrecognizedCharacterError: If the character at the scan
            position starts no valid token
    """
    position = _skip_ignored(source, position)
    end = len(source)

    if position >= end:
        return Token(TokenType.EOF, Span(source, end, 0)), end

    char = source[position]

    if char in PUNCTUATION:
        return Token(PUNCTUATION[char], Span(source, position, 1)), position + 1

    # Identifiers and keywords
    if char in IDENT_START:
        stop = position + 1
        while stop < end and source[stop] in IDENT_CHARS:
            stop += 1
        token_type = KEYWORDS.get(source[position:stop], TokenType.IDENTIFIER)
        return Token(token_type, Span(source, position, stop - position)), stop

    # Numbers are kept as text, including any suffix or base prefix
    if char in string.digits:
        stop = position + 1
        while stop < end and source[stop] in IDENT_CHARS:
            stop += 1
        return Token(TokenType.NUMBER, Span(source, position, stop - position)), stop

    raise UnrecognizedCharacterError(
        char,
        SourceLocation.from_offset(source, position, filename),
        source[position:position + ERROR_LOCATION_LEN],
    )


class Lexer:
    """
    Tokenizes declaration source.

    The lexer owns its scan position, so several lexers can work on the
    same or different sources at the same time without interfering.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def next_token(self) -> Token:
        """
        Scan and return the next token, advancing the position.

        Raises:
            UnrecognizedCharacterError: If invalid input is encountered
        """
        token, self._pos = next_token(self.source, self._pos, self.filename)
        return token

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the remaining source.

        Yields:
            Token objects, ending with exactly one EOF token
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return
