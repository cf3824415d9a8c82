"""
C Declaration Parser and Printer Generator
==========================================

This package parses typedef'd C structs and unions and generates a
printer function for each of them.

- A lexer (tokenizer) for the declaration subset
- A fixed-depth lookahead buffer over the token stream
- A recursive descent parser producing a structural model
- A code generator emitting C printer functions

Pipeline
--------
    C Source → Lexer → Token Buffer → Parser → Model → Code Generator → C

Usage
-----
>>> from struct_printer.cdecl import parse_source
>>> model = parse_source('typedef union { int i; float f; } Num;')
>>> model[0].is_union, model[0].is_named_struct
(True, False)

Language Subset
---------------
Supported:
- typedef struct/union with named or anonymous bodies
- Nested structs and unions, with or without member names
- Pointer and single-dimension array fields
- Several names per declaration: int a, b, *c;
- Comments: //, /* */ and # lines (preprocessor lines are skipped)

Not supported:
- Function pointers, bitfields, multidimensional arrays
- Enum bodies, macro expansion, type checking
"""

from struct_printer.cdecl.errors import (
    CDeclError,
    LexError,
    UnrecognizedCharacterError,
    ParseError,
    UnexpectedTokenError,
    ExpectedTokenError,
    LookaheadOverflowError,
)
from struct_printer.cdecl.lexer import Lexer, Span, Token, TokenType, next_token
from struct_printer.cdecl.buffer import TokenBuffer, TOKEN_BUFFER_SIZE
from struct_printer.cdecl.model import (
    FieldDeclaration,
    StructDefinition,
    FileModel,
    ModelPrinter,
    format_model,
)
from struct_printer.cdecl.parser import StructParser, parse_source
from struct_printer.cdecl.codegen import PrinterCodeGenerator
from struct_printer.cdecl.generator import (
    GeneratorOptions,
    GeneratorResult,
    StructPrinterGenerator,
    generate_printers,
)

__all__ = [
    # Errors
    "CDeclError",
    "LexError",
    "UnrecognizedCharacterError",
    "ParseError",
    "UnexpectedTokenError",
    "ExpectedTokenError",
    "LookaheadOverflowError",
    # Lexer
    "Lexer",
    "Span",
    "Token",
    "TokenType",
    "next_token",
    # Token buffer
    "TokenBuffer",
    "TOKEN_BUFFER_SIZE",
    # Model
    "FieldDeclaration",
    "StructDefinition",
    "FileModel",
    "ModelPrinter",
    "format_model",
    # Parser
    "StructParser",
    "parse_source",
    # Code generation
    "PrinterCodeGenerator",
    "GeneratorOptions",
    "GeneratorResult",
    "StructPrinterGenerator",
    "generate_printers",
]
