"""
Printer Function Code Generator
===============================

This module generates C source code from the declaration model: one
printer function per typedef'd struct or union.

    typedef struct Point { int x; int y; } Point;

becomes

    void print_Point(FILE* out, const Point* value)
    {
        fprintf(out, "Point {\\n");
        fprintf(out, "  x = %d\\n", value->x);
        fprintf(out, "  y = %d\\n", value->y);
        fprintf(out, "}\\n");
    }

Field Printing Strategy
-----------------------
There is no type checking, so the printf format is chosen from the type
words of each declaration:

| Type words                  | Output                                 |
|-----------------------------|----------------------------------------|
| int, short, signed          | %d                                     |
| unsigned ...                | %u, %lu, %llu by number of 'long'      |
| long, long long             | %ld, %lld                              |
| float, double, long double  | %f, %f, %Lf                            |
| char                        | %c                                     |
| char* / char[N]             | string (NULL-safe / length-bounded)    |
| other pointers              | %p                                     |
| stdint and size_t names     | matching width format, cast if needed  |
| enum Tag                    | %d                                     |
| another printed typedef     | call its printer function              |
| anything else               | <TypeName> placeholder                 |

Arrays are printed element by element. Members of nested anonymous
structs are reached through their access path (value->inner.a, or
value->a for C11 anonymous members).

The generated code expects the struct typedefs to be visible. The CLI
prefix file is the place to include them.
"""

import logging
from typing import Optional

from struct_printer.cdecl.model import FieldDeclaration, FileModel, StructDefinition

logger = logging.getLogger(__name__)


DEFAULT_FUNCTION_PREFIX = "print_"

INDENT = "    "
LABEL_INDENT = "  "

# Words that do not change how a value prints
_QUALIFIERS = {"const", "volatile", "restrict", "static", "extern", "register"}

_INTEGER_WORDS = {"int", "short", "long", "signed", "unsigned"}

# Single-word typedefs from stdint.h/stddef.h: (format, cast)
_NAMED_FORMATS: dict[str, tuple[str, Optional[str]]] = {
    "int8_t": ("%d", "int"),
    "int16_t": ("%d", "int"),
    "int32_t": ("%ld", "long"),
    "int64_t": ("%lld", "long long"),
    "uint8_t": ("%u", "unsigned"),
    "uint16_t": ("%u", "unsigned"),
    "uint32_t": ("%lu", "unsigned long"),
    "uint64_t": ("%llu", "unsigned long long"),
    "intptr_t": ("%lld", "long long"),
    "uintptr_t": ("%llu", "unsigned long long"),
    "size_t": ("%zu", None),
    "ptrdiff_t": ("%td", None),
    "bool": ("%d", "int"),
    "_Bool": ("%d", "int"),
}


def scalar_format(type_words: list[str]) -> Optional[tuple[str, Optional[str]]]:
    """
    Choose a printf conversion for a non-pointer value.

    Args:
        type_words: Type words of the declaration, qualifiers included

    Returns:
        (format, cast) where cast is a C type to convert the value to
        before printing (None if no cast is needed), or None when the
        type is not a known scalar
    """
    words = [w for w in type_words if w not in _QUALIFIERS]
    if not words:
        return None

    if words[0] == "enum":
        return ("%d", "int")

    if len(words) == 1 and words[0] in _NAMED_FORMATS:
        return _NAMED_FORMATS[words[0]]

    if "double" in words:
        return ("%Lf", None) if "long" in words else ("%f", None)

    if words == ["float"]:
        return ("%f", "double")

    if "char" in words:
        if "unsigned" in words:
            return ("%u", "unsigned")
        if "signed" in words:
            return ("%d", "int")
        return ("%c", None)

    if all(w in _INTEGER_WORDS for w in words):
        unsigned = "unsigned" in words
        longs = words.count("long")
        if longs >= 2:
            return ("%llu", None) if unsigned else ("%lld", None)
        if longs == 1:
            return ("%lu", None) if unsigned else ("%ld", None)
        return ("%u", None) if unsigned else ("%d", None)

    return None


def _is_char(type_words: list[str]) -> bool:
    return [w for w in type_words if w not in _QUALIFIERS] == ["char"]


class PrinterCodeGenerator:
    """
    Generates printer functions for every typedef'd struct of a model.

    Example:
        generator = PrinterCodeGenerator()
        c_source = generator.generate(model)
        header = generator.generate_header(model, "SHAPES_PRINTER_H")

    Attributes:
        function_prefix: Prepended to the typedef name to name each printer
    """

    def __init__(self, function_prefix: str = DEFAULT_FUNCTION_PREFIX):
        self.function_prefix = function_prefix
        self._output: list[str] = []

        # typedef alias -> definition, struct tag -> typedef alias
        self._aliases: dict[str, StructDefinition] = {}
        self._tags: dict[str, str] = {}

    # =========================================================================
    # Public Interface
    # =========================================================================

    def printable(self, model: FileModel) -> list[StructDefinition]:
        """Top-level definitions that get a printer (those with an alias)."""
        return [definition for definition in model if definition.alias]

    def function_name(self, definition: StructDefinition) -> str:
        return f"{self.function_prefix}{definition.alias}"

    def prototype(self, definition: StructDefinition) -> str:
        return (
            f"void {self.function_name(definition)}"
            f"(FILE* out, const {definition.alias}* value)"
        )

    def generate(self, model: FileModel, header_name: Optional[str] = None) -> str:
        """
        Generate the C source with one printer function per definition.

        Args:
            model: Parsed declarations
            header_name: Generated header to include; when None the
                prototypes are emitted at the top of the source instead

        Returns:
            C source text
        """
        self._output = []
        self._index(model)
        definitions = self.printable(model)

        self._emit(f"/* Printer functions generated from {model.filename} */")
        self._emit("#include <stdio.h>")
        if header_name:
            self._emit(f'#include "{header_name}"')
        else:
            self._emit()
            for definition in definitions:
                self._emit(f"{self.prototype(definition)};")

        for definition in definitions:
            self._emit()
            self._generate_function(definition)

        logger.debug(f"Generated {len(definitions)} printer functions")
        return "\n".join(self._output) + "\n"

    def generate_header(self, model: FileModel, guard: str) -> str:
        """Generate a header declaring every printer function."""
        self._output = []
        definitions = self.printable(model)

        self._emit(f"#ifndef {guard}")
        self._emit(f"#define {guard} 1")
        self._emit()
        self._emit("#include <stdio.h>")
        self._emit()
        for definition in definitions:
            self._emit(f"{self.prototype(definition)};")
        self._emit()
        self._emit(f"#endif /* {guard} */")
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Output Helpers
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_print(self, text: str, *args: str, depth: int = 1) -> None:
        """Emit an fprintf call; text is inserted into a C string literal."""
        arguments = "".join(f", {arg}" for arg in args)
        self._emit(f'{INDENT * depth}fprintf(out, "{text}"{arguments});')

    def _index(self, model: FileModel) -> None:
        self._aliases = {}
        self._tags = {}
        for definition in self.printable(model):
            self._aliases[definition.alias] = definition
            if definition.struct_name:
                self._tags.setdefault(definition.struct_name, definition.alias)

    def _printer_for(self, type_words: list[str]) -> Optional[str]:
        """Printer function for a field whose type is another printed struct."""
        words = [w for w in type_words if w not in _QUALIFIERS]
        if len(words) == 2 and words[0] in ("struct", "union"):
            alias = self._tags.get(words[1])
        elif len(words) == 1:
            alias = words[0] if words[0] in self._aliases else None
        else:
            alias = None
        if alias is None:
            return None
        return f"{self.function_prefix}{alias}"

    # =========================================================================
    # Functions and Members
    # =========================================================================

    def _generate_function(self, definition: StructDefinition) -> None:
        self._emit(self.prototype(definition))
        self._emit("{")
        self._emit_print(f"{definition.alias} {{\\n")
        self._generate_members(definition, "value->", "")
        self._emit_print("}\\n")
        self._emit("}")

    def _generate_members(self, definition: StructDefinition, access: str, label: str) -> None:
        for member in definition.members:
            if isinstance(member, StructDefinition):
                self._generate_nested(member, access, label)
            else:
                for name in member.names:
                    self._generate_field(member, f"{access}{name}", f"{label}{name}")

    def _generate_nested(self, nested: StructDefinition, access: str, label: str) -> None:
        if nested.declarators is None:
            # A tagged body without member names only declares a type
            if not nested.is_named_struct:
                self._generate_members(nested, access, label)
            return

        declarators = nested.declarators
        for name in declarators.names:
            if declarators.is_pointer or declarators.is_array:
                self._emit_print(f"{LABEL_INDENT}{label}{name} = <{nested.keyword}>\\n")
            else:
                self._generate_members(nested, f"{access}{name}.", f"{label}{name}.")

    def _generate_field(self, decl: FieldDeclaration, access: str, label: str) -> None:
        words = [span.text for span in decl.type_names]
        prefix = f"{LABEL_INDENT}{label} = "

        if decl.is_pointer:
            if _is_char(words) and not decl.is_array:
                self._emit_print(f'{prefix}\\"%s\\"\\n', f'{access} ? {access} : "(null)"')
            else:
                self._emit_print(f"{prefix}%p\\n", f"(const void*) {access}")
            return

        if decl.is_array:
            self._generate_array(decl, words, access, label)
            return

        printer = self._printer_for(words)
        if printer is not None:
            self._emit_print(prefix)
            self._emit(f"{INDENT}{printer}(out, &{access});")
            return

        self._generate_scalar(words, access, prefix, depth=1)

    def _generate_scalar(self, words: list[str], access: str, prefix: str, depth: int) -> None:
        fmt = scalar_format(words)
        if fmt is None:
            type_name = " ".join(words) or "unknown"
            self._emit_print(f"{prefix}<{type_name}>\\n", depth=depth)
            return

        conversion, cast = fmt
        value = f"({cast}) {access}" if cast else access
        self._emit_print(f"{prefix}{conversion}\\n", value, depth=depth)

    def _generate_array(self, decl: FieldDeclaration, words: list[str], access: str, label: str) -> None:
        prefix = f"{LABEL_INDENT}{label} = "
        count = f"sizeof({access}) / sizeof({access}[0])"

        if _is_char(words):
            self._emit_print(f'{prefix}\\"%.*s\\"\\n', f"(int) sizeof({access})", access)
            return

        printer = self._printer_for(words)
        if printer is not None:
            self._emit(f"{INDENT}for (size_t i = 0; i < {count}; ++i) {{")
            self._emit_print(f"{LABEL_INDENT}{label}[%zu] = ", "i", depth=2)
            self._emit(f"{INDENT * 2}{printer}(out, &{access}[i]);")
            self._emit(f"{INDENT}}}")
            return

        fmt = scalar_format(words)
        if fmt is None:
            type_name = " ".join(words) or "unknown"
            self._emit_print(f"{prefix}<{type_name}[{decl.array_size_text}]>\\n")
            return

        conversion, cast = fmt
        element = f"({cast}) {access}[i]" if cast else f"{access}[i]"
        self._emit_print(f"{prefix}[")
        self._emit(f"{INDENT}for (size_t i = 0; i < {count}; ++i) {{")
        self._emit(f'{INDENT * 2}fprintf(out, i ? ", {conversion}" : "{conversion}", {element});')
        self._emit(f"{INDENT}}}")
        self._emit_print("]\\n")
