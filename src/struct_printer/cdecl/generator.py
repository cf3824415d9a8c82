"""
Struct Printer Generator
========================

This module provides the main interface for turning C declarations into
printer functions. It runs the complete pipeline:

    Source → Lex → Parse → Model → Code Generator → C source (+ header)

Usage
-----
Command line:
    $ structprint shapes.h -o shapes_printer -h

Programmatic:
    >>> from struct_printer.cdecl import generate_printers
    >>> c_source = generate_printers('typedef struct { int x; } P;')

Configuration
-------------
GeneratorOptions holds every setting. Two of them can also come from the
environment (see GeneratorOptions.from_env):

    STRUCTPRINT_FUNCTION_PREFIX    prefix of generated function names
    STRUCTPRINT_LOOKAHEAD_DEPTH    token lookahead buffer depth
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from struct_printer.cdecl.buffer import TOKEN_BUFFER_SIZE
from struct_printer.cdecl.codegen import DEFAULT_FUNCTION_PREFIX, PrinterCodeGenerator
from struct_printer.cdecl.model import FileModel
from struct_printer.cdecl.parser import parse_source

logger = logging.getLogger(__name__)


DEFAULT_OUTPUT_BASENAME = "struct_printer.out"


@dataclass
class GeneratorOptions:
    """
    Generator configuration options.

    Attributes:
        function_prefix: Prefix of every generated printer function name
        emit_header: Also generate a header with the function prototypes
        header_name: File name the C source includes for its prototypes
            (defaults to the output basename plus ".h" in the CLI)
        prefix_text: Text written before the generated C source, usually
            the #include lines that make the struct types visible
        suffix_text: Text written after the generated C source
        lookahead_depth: Token buffer depth for the parser
    """
    function_prefix: str = DEFAULT_FUNCTION_PREFIX
    emit_header: bool = False
    header_name: Optional[str] = None
    prefix_text: Optional[str] = None
    suffix_text: Optional[str] = None
    lookahead_depth: int = TOKEN_BUFFER_SIZE

    @classmethod
    def from_env(cls, **overrides) -> "GeneratorOptions":
        """
        Create GeneratorOptions from environment variables.

        Environment variables (all optional):
            STRUCTPRINT_FUNCTION_PREFIX: Printer function name prefix
            STRUCTPRINT_LOOKAHEAD_DEPTH: Lookahead depth (integer)

        Keyword arguments override both the defaults and the environment.
        """
        options = cls()

        if prefix := os.environ.get("STRUCTPRINT_FUNCTION_PREFIX"):
            options.function_prefix = prefix

        if depth := os.environ.get("STRUCTPRINT_LOOKAHEAD_DEPTH"):
            try:
                value = int(depth)
            except ValueError:
                value = 0
            if value >= TOKEN_BUFFER_SIZE:
                options.lookahead_depth = value
            else:
                logger.warning(f"Ignoring invalid STRUCTPRINT_LOOKAHEAD_DEPTH={depth!r}")

        for name, value in overrides.items():
            setattr(options, name, value)
        return options


@dataclass
class GeneratorResult:
    """
    Output of one generator run.

    Attributes:
        filename: Source filename
        model: Parsed declarations
        c_source: Generated C source, prefix and suffix included
        header: Generated header (None unless requested)
    """
    filename: str
    model: FileModel
    c_source: str = ""
    header: Optional[str] = None

    @property
    def function_count(self) -> int:
        return sum(1 for definition in self.model if definition.alias)


def header_guard(header_name: str) -> str:
    """Derive an include guard macro from a header file name."""
    guard = re.sub(r"[^A-Za-z0-9]", "_", Path(header_name).name).upper()
    if guard[:1].isdigit():
        guard = f"_{guard}"
    return guard


class StructPrinterGenerator:
    """
    Generates printer functions from C declaration source.

    Example:
        generator = StructPrinterGenerator(GeneratorOptions(emit_header=True))
        result = generator.generate_file("shapes.h")
        print(result.c_source)

    Attributes:
        options: Generator configuration options
    """

    def __init__(self, options: Optional[GeneratorOptions] = None):
        self.options = options or GeneratorOptions()

    def parse(self, source: str, filename: str = "<input>") -> FileModel:
        """
        Parse source into a model without generating code.

        Raises:
            CDeclError: If the source cannot be parsed
        """
        return parse_source(source, filename, self.options.lookahead_depth)

    def generate_source(self, source: str, filename: str = "<input>") -> GeneratorResult:
        """
        Generate printer functions for C source text.

        Args:
            source: C source containing typedef'd structs
            filename: Source filename for error messages

        Returns:
            GeneratorResult with the model and the generated text

        Raises:
            CDeclError: If the source cannot be parsed
        """
        options = self.options
        model = self.parse(source, filename)
        result = GeneratorResult(filename=filename, model=model)

        codegen = PrinterCodeGenerator(options.function_prefix)

        header_name = None
        if options.emit_header:
            header_name = options.header_name or f"{Path(filename).stem}_printer.h"
            result.header = codegen.generate_header(model, header_guard(header_name))

        parts = []
        if options.prefix_text:
            parts.append(options.prefix_text.rstrip("\n") + "\n")
        parts.append(codegen.generate(model, header_name))
        if options.suffix_text:
            parts.append(options.suffix_text.rstrip("\n") + "\n")
        result.c_source = "\n".join(parts)

        logger.info(f"{filename}: {len(model)} definitions, {result.function_count} printers")
        return result

    def generate_file(self, filepath: str | Path) -> GeneratorResult:
        """
        Generate printer functions for a C source file.

        Raises:
            CDeclError: If the source cannot be parsed
            FileNotFoundError: If the source file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.generate_source(source, str(path))


def generate_printers(source: str, filename: str = "<input>", **options) -> str:
    """
    Convenience function: return the printer C source for declarations.

    Keyword arguments are passed to GeneratorOptions.
    """
    generator = StructPrinterGenerator(GeneratorOptions(**options))
    return generator.generate_source(source, filename).c_source
