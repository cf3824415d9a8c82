"""
Struct Declaration Parser
=========================

This module implements a recursive descent parser for typedef'd C
structs and unions. It reads tokens through a TokenBuffer and builds the
structural model defined in struct_printer.cdecl.model.

Grammar (Simplified EBNF)
-------------------------
file            ::= (typedef_struct | other_typedef | ANY)*
typedef_struct  ::= 'typedef' struct_or_union IDENTIFIER ';'
other_typedef   ::= 'typedef' ANY* ';'
struct_or_union ::= ('struct' | 'union') IDENTIFIER? '{' member* '}'
member          ::= declaration ';'
                  | struct_or_union declaration? ';'
declaration     ::= (IDENTIFIER | 'struct' | 'union' | 'enum' | '*'
                     | '[' (IDENTIFIER | NUMBER) ']' | ',')+

Disambiguation
--------------
Inside a body, 'struct'/'union' starts a nested definition when the next
token is '{' or the next two are a name and '{'. Otherwise the keyword is
the start of a field whose type is a struct tag ('struct Node *next;').

Only typedef'd structs are collected. Free-standing struct definitions,
functions and globals at top level are skipped token by token.

Every error is fatal: the first one aborts the parse and no partial
model is returned.

Example Usage
-------------
>>> from struct_printer.cdecl.parser import parse_source
>>> model = parse_source("typedef struct Point { int x; int y; } Point;")
>>> model[0].struct_name, len(model[0].declarations)
('Point', 2)
"""

import logging
from dataclasses import replace
from typing import Optional

from struct_printer.cdecl.buffer import TokenBuffer, TOKEN_BUFFER_SIZE
from struct_printer.cdecl.errors import ExpectedTokenError, UnexpectedTokenError
from struct_printer.cdecl.lexer import Span, Token, TokenType
from struct_printer.cdecl.model import FieldDeclaration, FileModel, StructDefinition

logger = logging.getLogger(__name__)


# Tokens recorded as names (or type words) by the declaration parser
_NAME_TOKENS = (
    TokenType.IDENTIFIER,
    TokenType.STRUCT,
    TokenType.UNION,
    TokenType.ENUM,
)

# Tokens that can only mean the ';' of a declaration is missing
_DECLARATION_ENDERS = (
    TokenType.RBRACE,
    TokenType.EOF,
    TokenType.TYPEDEF,
)


class StructParser:
    """
    Recursive descent parser for typedef'd structs and unions.

    The parser reads from a TokenBuffer that it shares with nobody else,
    so separate parsers can run independently on separate sources.

    Attributes:
        buffer: Token buffer positioned at the first token to parse
        filename: Source filename for error reporting
    """

    def __init__(self, buffer: TokenBuffer):
        self.buffer = buffer
        self.filename = buffer.filename

    @classmethod
    def from_source(
        cls,
        source: str,
        filename: str = "<input>",
        depth: int = TOKEN_BUFFER_SIZE,
    ) -> "StructParser":
        return cls(TokenBuffer.from_source(source, filename, depth))

    # =========================================================================
    # Error Helpers
    # =========================================================================

    def _unexpected(self, token: Token, hint: Optional[str] = None) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            token.describe(),
            location=token.span.location(self.filename),
            excerpt=token.span.excerpt(),
            hint=hint,
        )

    def _expected(self, expected: str, token: Token) -> ExpectedTokenError:
        return ExpectedTokenError(
            expected,
            token.describe(),
            location=token.span.location(self.filename),
            excerpt=token.span.excerpt(),
        )

    def _expect(self, token_type: TokenType, token: Token, description: str) -> Token:
        """
        Check that token has the given type.

        Raises:
            ExpectedTokenError: If it does not
        """
        if token.type != token_type:
            raise self._expected(description, token)
        return token

    def _expect_semicolon(self) -> Token:
        return self._expect(TokenType.SEMICOLON, self.buffer.advance(), "';'")

    # =========================================================================
    # Declarations
    # =========================================================================

    def parse_declaration(self) -> FieldDeclaration:
        """
        Parse one field declaration, up to but not including its ';'.

        The buffer must be positioned at the first token of the
        declaration. On return the current token is the last token of the
        declaration and look_ahead(1) is the ';', left for the caller.

        Examples:
            int x                  -> type 'int', names [x]
            unsigned int *a, b     -> type 'unsigned int', names [a, b], pointer
            char name[NAME_LEN]    -> type 'char', names [name], array NAME_LEN
            struct Node *next      -> type 'struct Node', names [next], pointer

        Raises:
            UnexpectedTokenError: For tokens the declaration cannot contain,
                including a second '[' (multidimensional arrays)
            ExpectedTokenError: For a missing ']', a missing ';' or a
                missing declared name
        """
        buffer = self.buffer
        token = buffer.current()

        leading: list[Span] = []        # names before the first comma
        trailing: list[Span] = []       # names after a comma
        after_comma = False
        name_pending = False            # a comma still waits for its name
        is_pointer = False
        is_array = False
        array_size: Optional[Span] = None

        while True:
            if token.type in _NAME_TOKENS:
                (trailing if after_comma else leading).append(token.span)
                name_pending = False

            elif token.type == TokenType.STAR:
                is_pointer = True

            elif token.type == TokenType.LBRACKET:
                if is_array:
                    raise self._unexpected(
                        token, hint="multidimensional arrays are not supported"
                    )
                is_array = True
                token = buffer.advance()
                if token.type not in (TokenType.IDENTIFIER, TokenType.NUMBER):
                    raise self._unexpected(token, hint="expected an array size")
                array_size = token.span
                token = self._expect(TokenType.RBRACKET, buffer.advance(), "']'")

            elif token.type == TokenType.COMMA:
                if name_pending or not leading:
                    raise self._unexpected(token)
                after_comma = True
                name_pending = True

            elif token.type in _DECLARATION_ENDERS:
                raise self._expected("';'", token)

            else:
                raise self._unexpected(token)

            if buffer.look_ahead(1).type == TokenType.SEMICOLON:
                break

            token = buffer.advance()

        if name_pending or not leading:
            raise self._expected("identifier", buffer.look_ahead(1))

        return FieldDeclaration(
            type_names=tuple(leading[:-1]),
            identifiers=(leading[-1], *trailing),
            is_pointer=is_pointer,
            is_array=is_array,
            array_size=array_size,
        )

    # =========================================================================
    # Structs and Unions
    # =========================================================================

    def parse_struct_or_union(self) -> StructDefinition:
        """
        Parse a struct or union definition.

        The buffer must be positioned at the 'struct' or 'union' keyword.
        On return the current token is the closing '}'.

        Raises:
            UnexpectedTokenError: For a member that cannot start a field
                or nested definition
            ExpectedTokenError: If the body's '{' or a member's ';' is missing
        """
        buffer = self.buffer
        token = buffer.current()

        if token.type == TokenType.STRUCT:
            is_union = False
        elif token.type == TokenType.UNION:
            is_union = True
        else:
            raise self._unexpected(token)

        name: Optional[Span] = None
        token = buffer.advance()
        if token.type == TokenType.IDENTIFIER:
            name = token.span
            logger.debug(f"Struct name: {name.text}")
            token = buffer.advance()

        self._expect(TokenType.LBRACE, token, "'{'")

        members: list[FieldDeclaration | StructDefinition] = []

        while True:
            token = buffer.advance()

            if token.type == TokenType.RBRACE:
                break

            if token.type == TokenType.IDENTIFIER:
                members.append(self.parse_declaration())

            elif token.is_struct_or_union():
                members.append(self._parse_struct_member())

            elif token.type == TokenType.ENUM:
                members.append(self._parse_enum_member())

            else:
                raise self._unexpected(token)

            self._expect_semicolon()

        return StructDefinition(
            name=name,
            members=tuple(members),
            is_union=is_union,
        )

    def _parse_struct_member(self) -> FieldDeclaration | StructDefinition:
        """
        Parse a member that starts with 'struct' or 'union'.

            struct { ... } ;            nested anonymous definition
            struct Tag { ... } ;        nested named definition
            struct Tag *next ;          field of struct type
        """
        one_ahead = self.buffer.look_ahead(1)

        if one_ahead.type == TokenType.LBRACE:
            return self._parse_nested_definition()

        if one_ahead.type == TokenType.IDENTIFIER:
            if self.buffer.look_ahead(2).type == TokenType.LBRACE:
                return self._parse_nested_definition()
            return self.parse_declaration()

        raise self._unexpected(one_ahead)

    def _parse_nested_definition(self) -> StructDefinition:
        """
        Parse a nested body and any member names that follow it.

            struct { int a; } inner, *pointer;
        """
        nested = self.parse_struct_or_union()

        if self.buffer.look_ahead(1).type != TokenType.SEMICOLON:
            self.buffer.advance()
            nested = replace(nested, declarators=self.parse_declaration())

        return nested

    def _parse_enum_member(self) -> FieldDeclaration:
        """Parse a field of enum type ('enum Color color;')."""
        one_ahead = self.buffer.look_ahead(1)
        if one_ahead.type != TokenType.IDENTIFIER:
            raise self._unexpected(one_ahead)

        two_ahead = self.buffer.look_ahead(2)
        if two_ahead.type == TokenType.LBRACE:
            raise self._unexpected(two_ahead, hint="enum bodies are not supported")

        return self.parse_declaration()

    # =========================================================================
    # Files
    # =========================================================================

    def parse_file(self) -> FileModel:
        """
        Parse a whole source and collect every typedef'd struct or union.

        Raises:
            CDeclError: On the first lexing or parsing error
        """
        buffer = self.buffer
        structs: list[StructDefinition] = []

        token = buffer.current()
        while token.type != TokenType.EOF:
            if token.type == TokenType.TYPEDEF:
                token = buffer.advance()

                if token.is_struct_or_union() and self._has_body():
                    definition = self.parse_struct_or_union()

                    alias = self._expect(
                        TokenType.IDENTIFIER, buffer.advance(), "typedef name"
                    )
                    self._expect_semicolon()

                    definition = replace(definition, typedef_name=alias.span)
                    logger.debug(f"Parsed {definition.keyword} typedef '{alias.value}'")
                    structs.append(definition)
                else:
                    # Aliases of other types are not modeled
                    while token.type not in (TokenType.SEMICOLON, TokenType.EOF):
                        token = buffer.advance()
                    continue

            token = buffer.advance()

        logger.debug(f"Found {len(structs)} struct/union typedefs in {self.filename}")
        return FileModel(structs=tuple(structs), filename=self.filename)

    def _has_body(self) -> bool:
        """
        Check whether the 'struct'/'union' at the current token opens a body.

        'typedef struct Tag Alias;' only names an existing struct type and
        is skipped like any other typedef.
        """
        one_ahead = self.buffer.look_ahead(1)
        if one_ahead.type == TokenType.IDENTIFIER:
            return self.buffer.look_ahead(2).type == TokenType.LBRACE
        return True


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    filename: str = "<input>",
    depth: int = TOKEN_BUFFER_SIZE,
) -> FileModel:
    """
    Parse C source and return its typedef'd structs and unions.

    Args:
        source: C source text
        filename: Source filename for error messages
        depth: Token lookahead buffer depth

    Raises:
        CDeclError: On the first lexing or parsing error
    """
    return StructParser.from_source(source, filename, depth).parse_file()
