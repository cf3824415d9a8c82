"""
structprint - Struct Printer Generator Command-Line Interface
=============================================================

This module implements the command-line interface that turns a C header
into printer functions for its typedef'd structs and unions.

Usage Examples
--------------
Basic generation (writes struct_printer.out.c):
    $ structprint shapes.h

With output basename and header (writes shapes_printer.c/.h):
    $ structprint shapes.h -o shapes_printer -h

With prefix and suffix files around the generated code:
    $ structprint shapes.h -p prefix.c -s suffix.c

Dump the parsed model:
    $ structprint --ast shapes.h
"""

import logging
from pathlib import Path
from typing import Optional

import click

from struct_printer import __version__
from struct_printer.cdecl.generator import (
    DEFAULT_OUTPUT_BASENAME,
    GeneratorOptions,
    StructPrinterGenerator,
)
from struct_printer.cdecl.model import format_model
from struct_printer.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def confirm_overwrite(path: Path, force: bool) -> None:
    """
    Ask before replacing an existing output file.

    Raises:
        click.Abort: If the user declines
    """
    if path.exists() and not force:
        click.confirm(
            f"File: '{path}' already exists.\n\tOverride?",
            default=False,
            abort=True,
        )


def read_optional(path: Optional[Path]) -> Optional[str]:
    if path is None:
        return None
    return path.read_text(encoding="utf-8")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    default=DEFAULT_OUTPUT_BASENAME,
    show_default=True,
    help="Output basename; '.c' (and '.h') are appended",
)
@click.option(
    "-h", "--header",
    is_flag=True,
    help="Also write a header with the printer prototypes",
)
@click.option(
    "-p", "--prefix",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File copied before the generated code (e.g. #include lines)",
)
@click.option(
    "-s", "--suffix",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File copied after the generated code",
)
@click.option(
    "--function-prefix",
    default=None,
    help="Prefix of generated function names (default: print_, "
         "or $STRUCTPRINT_FUNCTION_PREFIX)",
)
@click.option(
    "-f", "--force",
    is_flag=True,
    help="Overwrite existing output files without asking",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the parsed model and exit (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="structprint")
def main(
    input_file: Path,
    output: str,
    header: bool,
    prefix: Optional[Path],
    suffix: Optional[Path],
    function_prefix: Optional[str],
    force: bool,
    ast: bool,
    verbose: bool,
) -> None:
    """
    Generate printer functions for the structs of a C header.

    INPUT_FILE is the C source to scan for 'typedef struct' and
    'typedef union' declarations.

    \b
    Examples:
        structprint shapes.h                     # Writes struct_printer.out.c
        structprint shapes.h -o out -h           # Writes out.c and out.h
        structprint shapes.h -p prefix.c         # Prepend prefix.c
        structprint --ast shapes.h               # Dump the parsed model
    """
    setup_logging(verbose)

    c_path = Path(f"{output}.c")
    h_path = Path(f"{output}.h")

    try:
        options = GeneratorOptions.from_env(
            emit_header=header,
            header_name=h_path.name,
            prefix_text=read_optional(prefix),
            suffix_text=read_optional(suffix),
        )
        if function_prefix:
            options.function_prefix = function_prefix

        generator = StructPrinterGenerator(options)
        source = input_file.read_text(encoding="utf-8")

        if ast:
            click.echo(format_model(generator.parse(source, str(input_file))))
            return

        if verbose:
            click.echo(f"Parsing {input_file}...")

        result = generator.generate_source(source, str(input_file))

        confirm_overwrite(c_path, force)
        if result.header is not None:
            confirm_overwrite(h_path, force)

        c_path.write_text(result.c_source, encoding="utf-8")
        logger.debug(f"Wrote {len(result.c_source)} bytes to {c_path}")
        if result.header is not None:
            h_path.write_text(result.header, encoding="utf-8")
            logger.debug(f"Wrote {len(result.header)} bytes to {h_path}")

        written = f"{c_path}" + (f", {h_path}" if result.header is not None else "")
        click.echo(f"Generated {result.function_count} printer functions -> {written}")

    except click.exceptions.Abort:
        raise
    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
