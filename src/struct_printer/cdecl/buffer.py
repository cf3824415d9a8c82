"""
Token Lookahead Buffer
======================

A fixed-size ring of tokens that gives the parser bounded lookahead over
the lexer output without re-lexing.

The buffer always holds the tokens for logical positions
[current, current + depth). Advancing overwrites the slot of the old
current token with one freshly lexed token and moves the head forward,
so every token is lexed exactly once and the window only moves forward.

    slots:    [ t8 | t1 | t2 | t3 | t4 | t5 | t6 | t7 ]
                     ^ head (current = t1)

The declaration grammar needs two tokens of lookahead. Asking for more
than the buffer holds is a programming error and raises
LookaheadOverflowError instead of returning a wrong token.
"""

from struct_printer.cdecl.errors import LookaheadOverflowError
from struct_printer.cdecl.lexer import Lexer, Token


# Default (and minimum) number of buffered tokens
TOKEN_BUFFER_SIZE = 8


class TokenBuffer:
    """
    Forward-only ring buffer over a Lexer.

    Example:
        buffer = TokenBuffer.from_source("struct { int x; }")
        buffer.current()        # Token(STRUCT, ...)
        buffer.look_ahead(1)    # Token(LBRACE, ...)
        buffer.advance()        # Token(LBRACE, ...)
    """

    def __init__(self, lexer: Lexer, depth: int = TOKEN_BUFFER_SIZE):
        """
        Fill the buffer with the first `depth` tokens of the lexer.

        Args:
            lexer: Token source, positioned at the start of input
            depth: Number of tokens held (at least TOKEN_BUFFER_SIZE)

        Raises:
            ValueError: If depth is below TOKEN_BUFFER_SIZE
            UnrecognizedCharacterError: If the pre-fetched source is invalid
        """
        if depth < TOKEN_BUFFER_SIZE:
            raise ValueError(
                f"token buffer depth must be at least {TOKEN_BUFFER_SIZE}, got {depth}"
            )
        self.lexer = lexer
        self._depth = depth
        self._slots: list[Token] = [lexer.next_token() for _ in range(depth)]
        self._head = 0
        self._position = 0

    @classmethod
    def from_source(
        cls,
        source: str,
        filename: str = "<input>",
        depth: int = TOKEN_BUFFER_SIZE,
    ) -> "TokenBuffer":
        return cls(Lexer(source, filename), depth)

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def position(self) -> int:
        """Logical index of the current token in the token stream."""
        return self._position

    @property
    def filename(self) -> str:
        return self.lexer.filename

    def current(self) -> Token:
        return self._slots[self._head]

    def look_ahead(self, offset: int) -> Token:
        """
        Return the token `offset` positions after the current one.

        look_ahead(0) is the current token.

        Raises:
            LookaheadOverflowError: If offset is outside [0, depth)
        """
        if not 0 <= offset < self._depth:
            raise LookaheadOverflowError(offset, self._depth)
        return self._slots[(self._head + offset) % self._depth]

    def advance(self) -> Token:
        """
        Move one token forward and return the new current token.

        The slot of the token being left behind is refilled with the next
        token from the lexer, which becomes the last lookahead slot.
        """
        self._slots[self._head] = self.lexer.next_token()
        self._head = (self._head + 1) % self._depth
        self._position += 1
        return self._slots[self._head]
