"""
Declaration Parser Error Hierarchy
==================================

This module defines the exceptions raised while lexing and parsing C
declarations. All exceptions inherit from CDeclError, which itself
inherits from the package-wide StructPrinterError.

Exception Hierarchy
-------------------
CDeclError (base for all declaration errors)
├── LexError - the source cannot be tokenized
│   └── UnrecognizedCharacterError - character starts no valid token
└── ParseError - the token stream does not match the grammar
    ├── UnexpectedTokenError - token where the grammar forbids it
    ├── ExpectedTokenError - a specific required token is absent
    └── LookaheadOverflowError - lookahead past the buffer depth (a defect)

Every error is fatal for the parse that raised it: no partial model is
returned and no resynchronization is attempted.

Error Message Format
--------------------
    shapes.h:3:14: error: expected ';', found '}'
        } Bad;
        ^
"""

from typing import Optional

from struct_printer.errors import StructPrinterError, SourceLocation


# =============================================================================
# Base Declaration Exception
# =============================================================================

class CDeclError(StructPrinterError):
    """
    Base exception for all declaration lexing and parsing errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        excerpt: A short slice of the source starting at the error
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        excerpt: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.excerpt = excerpt
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source excerpt, and hint.

            shapes.h:5:12: error: unexpected token '('
                (*callback)(int
                ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # The excerpt starts at the offending character, so the caret
        # always sits under its first column.
        if self.excerpt:
            flattened = "".join(" " if c in "\r\n\t\f\v" else c for c in self.excerpt)
            parts.append(f"    {flattened}")
            parts.append("    ^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexer Errors
# =============================================================================

class LexError(CDeclError):
    """The source text cannot be converted into tokens."""
    pass


class UnrecognizedCharacterError(LexError):
    """
    The current character starts no valid token.

    Example:
        int x = 3;      // '=' is not part of the declaration subset
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        excerpt: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unrecognized character '{char}' (0x{ord(char):02X})",
            location=location,
            excerpt=excerpt,
        )


# =============================================================================
# Parser Errors
# =============================================================================

class ParseError(CDeclError):
    """The token stream does not match the declaration grammar."""
    pass


class UnexpectedTokenError(ParseError):
    """
    A token appears where the grammar forbids it.

    Examples:
        int bad[10][2];       // second '[' (multidimensional array)
        void (*fn)(void);     // '(' (function pointer)
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        excerpt: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            f"unexpected token {found}",
            location=location,
            hint=hint,
            excerpt=excerpt,
        )


class ExpectedTokenError(ParseError):
    """
    A specific required token is absent.

    Example:
        typedef struct { int x } Bad;     // ';' missing after 'x'
    """

    def __init__(
        self,
        expected: str,
        found: str,
        location: Optional[SourceLocation] = None,
        excerpt: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected {expected}, found {found}",
            location=location,
            excerpt=excerpt,
        )


class LookaheadOverflowError(ParseError):
    """
    Lookahead requested beyond the token buffer depth.

    The grammar needs at most two tokens of lookahead, so this can only
    be raised by a defect in the parser, never by user input.
    """

    def __init__(self, requested: int, depth: int):
        self.requested = requested
        self.depth = depth
        super().__init__(
            f"lookahead of {requested} tokens requested from a buffer of depth {depth}",
            hint="valid lookahead offsets are 0 to depth - 1",
        )
