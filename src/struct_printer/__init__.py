"""
Struct Printer - Printer Function Generator for C Structs
=========================================================

This package reads C headers, finds every typedef'd struct and union,
and generates a C function that prints a value of each type.

Main Components
---------------
- **cdecl**: declaration lexer, lookahead buffer, parser, model and
  printer code generator
- **cli**: the `structprint` command-line tool

Quick Start
-----------
Parse declarations:
    >>> from struct_printer import parse_source
    >>> model = parse_source("typedef struct Point { int x; int y; } Point;")
    >>> [d.names for d in model[0].declarations]
    [['x'], ['y']]

Generate printers:
    >>> from struct_printer import generate_printers
    >>> c_source = generate_printers(open("shapes.h").read(), "shapes.h")

Or use the command-line tool:
    $ structprint shapes.h -o shapes_printer -h -p prefix.c
"""

__version__ = "1.0.0"

from struct_printer.errors import StructPrinterError, SourceLocation
from struct_printer.cdecl import (
    CDeclError,
    LexError,
    ParseError,
    FieldDeclaration,
    StructDefinition,
    FileModel,
    parse_source,
    GeneratorOptions,
    StructPrinterGenerator,
    generate_printers,
)

__all__ = [
    "__version__",
    # Errors
    "StructPrinterError",
    "SourceLocation",
    "CDeclError",
    "LexError",
    "ParseError",
    # Model and parsing
    "FieldDeclaration",
    "StructDefinition",
    "FileModel",
    "parse_source",
    # Generation
    "GeneratorOptions",
    "StructPrinterGenerator",
    "generate_printers",
]
