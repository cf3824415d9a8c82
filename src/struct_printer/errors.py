"""
Struct Printer Error Hierarchy
==============================

This module defines the root of the exception hierarchy for the whole
package. All exceptions inherit from StructPrinterError, allowing callers
to catch every package error with a single except clause if desired.

Exception Hierarchy
-------------------
StructPrinterError (base)
└── CDeclError (declaration lexing and parsing, see cdecl.errors)
    ├── LexError
    └── ParseError

Error messages follow this format:
    filename:line:column: error: description
        excerpt_of_source
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# Number of source characters quoted in error messages
ERROR_LOCATION_LEN = 16


# =============================================================================
# Base Exception Class
# =============================================================================

class StructPrinterError(Exception):
    """
    Base exception for all struct printer errors.

        try:
            generate_printers(source)
        except StructPrinterError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"

    @classmethod
    def from_offset(cls, source: str, offset: int, filename: str = "<input>") -> "SourceLocation":
        """
        Compute the line and column of a character offset in source.

        Locations are only needed when reporting errors, so they are
        derived from the offset on demand instead of being tracked for
        every token.
        """
        offset = max(0, min(offset, len(source)))
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(filename, line, offset - line_start + 1)
