"""
Declaration Model
=================

This module defines the structural model produced by the struct parser.
The model describes each typedef'd struct or union in enough detail to
generate code from it (for example a printer function per struct).

Model Hierarchy
---------------
FileModel - every typedef'd struct/union of one source, in order
└── StructDefinition - one struct or union body
    ├── FieldDeclaration - 'int a, b;' (one type, one or more names)
    └── StructDefinition - nested struct/union, owned by its parent

Design Notes
------------
- All nodes are frozen dataclasses holding tuples; a new parse produces
  a new model and nothing is ever updated in place.
- Names are Spans into the parsed source rather than copied strings.
- A struct keeps its fields and nested structs interleaved in source
  order (`members`); `declarations` and `nested_structs_or_unions` are
  ordered views of each kind.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from struct_printer.cdecl.lexer import Span


# =============================================================================
# Field Declarations
# =============================================================================

@dataclass(frozen=True)
class FieldDeclaration:
    """
    One field declaration inside a struct body.

    `unsigned int *a, b;` is a single FieldDeclaration: the type words
    are `unsigned int`, the declared identifiers are `a` and `b`, and the
    pointer modifier is shared by all of them.

    Attributes:
        type_names: Type words before the first declared name (may include
            the 'struct', 'union' or 'enum' keyword)
        identifiers: Declared names, in order
        is_pointer: A '*' appeared in the declaration
        is_array: An array size appeared in the declaration
        array_size: Numeric literal or constant name inside '[ ]'
    """
    type_names: tuple[Span, ...]
    identifiers: tuple[Span, ...]
    is_pointer: bool = False
    is_array: bool = False
    array_size: Optional[Span] = None

    def __post_init__(self):
        if self.is_array and self.array_size is None:
            raise ValueError("array declaration requires an array size")
        if not self.identifiers:
            raise ValueError("declaration requires at least one identifier")

    @property
    def ids(self) -> tuple[Span, ...]:
        """Every identifier and keyword seen, type words first."""
        return self.type_names + self.identifiers

    @property
    def names(self) -> list[str]:
        return [span.text for span in self.identifiers]

    @property
    def type_name(self) -> str:
        """Type words joined by spaces, e.g. 'unsigned int' or 'struct Node'."""
        return " ".join(span.text for span in self.type_names)

    @property
    def array_size_text(self) -> Optional[str]:
        return self.array_size.text if self.array_size is not None else None

    def __str__(self) -> str:
        pointer = "*" if self.is_pointer else ""
        suffix = f"[{self.array_size_text}]" if self.is_array else ""
        declarators = ", ".join(f"{pointer}{name}{suffix}" for name in self.names)
        if self.type_names:
            return f"{self.type_name} {declarators};"
        return f"{declarators};"


# =============================================================================
# Struct and Union Definitions
# =============================================================================

@dataclass(frozen=True)
class StructDefinition:
    """
    A struct or union body and everything declared inside it.

    Attributes:
        name: The struct tag (None for an anonymous struct)
        members: Field declarations and nested definitions in source order
        is_union: True for 'union', False for 'struct'
        declarators: Member names declared with a nested body, as in
            'struct { int a; } inner;' (None when the body stands alone)
        typedef_name: Alias given by the enclosing typedef (top level only)
    """
    name: Optional[Span]
    members: tuple[Union[FieldDeclaration, "StructDefinition"], ...] = ()
    is_union: bool = False
    declarators: Optional[FieldDeclaration] = None
    typedef_name: Optional[Span] = None

    @property
    def is_named_struct(self) -> bool:
        return self.name is not None

    @property
    def struct_name(self) -> Optional[str]:
        return self.name.text if self.name is not None else None

    @property
    def alias(self) -> Optional[str]:
        return self.typedef_name.text if self.typedef_name is not None else None

    @property
    def keyword(self) -> str:
        return "union" if self.is_union else "struct"

    @property
    def declarations(self) -> list[FieldDeclaration]:
        return [m for m in self.members if isinstance(m, FieldDeclaration)]

    @property
    def nested_structs_or_unions(self) -> list["StructDefinition"]:
        return [m for m in self.members if isinstance(m, StructDefinition)]

    @property
    def field_count(self) -> int:
        """Number of declared identifiers across all field declarations."""
        return sum(len(decl.identifiers) for decl in self.declarations)

    def __repr__(self) -> str:
        label = self.alias or self.struct_name or "<anonymous>"
        return (
            f"{self.keyword.capitalize()}Definition({label}, "
            f"{len(self.declarations)} declarations, "
            f"{len(self.nested_structs_or_unions)} nested)"
        )


# =============================================================================
# File Model
# =============================================================================

@dataclass(frozen=True)
class FileModel:
    """
    All typedef'd structs and unions of one source file, in source order.

    Attributes:
        structs: Top-level definitions
        filename: Name of the parsed source
    """
    structs: tuple[StructDefinition, ...] = ()
    filename: str = field(default="<input>", compare=False)

    def __len__(self) -> int:
        return len(self.structs)

    def __iter__(self) -> Iterator[StructDefinition]:
        return iter(self.structs)

    def __getitem__(self, index: int) -> StructDefinition:
        return self.structs[index]

    def find(self, name: str) -> Optional[StructDefinition]:
        """Find a top-level definition by typedef alias or struct tag."""
        for definition in self.structs:
            if definition.alias == name:
                return definition
        for definition in self.structs:
            if definition.struct_name == name:
                return definition
        return None


# =============================================================================
# Model Printer
# =============================================================================

class ModelPrinter:
    """
    Pretty printer for model debugging.

    Usage:
        printer = ModelPrinter()
        print(printer.print(model))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, model: FileModel) -> str:
        """Print the model and return it as a string."""
        self.output = []
        self.indent_level = 0
        self._emit(f"File: {model.filename} ({len(model)} definitions)")
        self.indent_level += 1
        for definition in model:
            self._print_struct(definition)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _print_struct(self, definition: StructDefinition) -> None:
        header = definition.keyword.capitalize()
        if definition.is_named_struct:
            header += f" {definition.struct_name}"
        else:
            header += " (anonymous)"
        if definition.alias:
            header += f" typedef {definition.alias}"
        if definition.declarators is not None:
            header += f" -> {definition.declarators}"
        self._emit(header)

        self.indent_level += 1
        for member in definition.members:
            if isinstance(member, StructDefinition):
                self._print_struct(member)
            else:
                self._emit(f"Field: {member}")
        self.indent_level -= 1


def format_model(model: FileModel) -> str:
    """Return a human-readable dump of a parsed model."""
    return ModelPrinter().print(model)
