# =============================================================================
# test_lexer.py - Declaration Lexer Unit Tests
# =============================================================================
# Tests for the C declaration lexer/tokenizer.
#
# Test coverage includes:
#   - Keywords, identifiers, numbers and punctuation
#   - Whitespace, line comments (// and #) and block comments
#   - Spans referring back into the source
#   - Explicit positions (no shared cursor between lexers)
#   - Error conditions
# =============================================================================

import pytest
from struct_printer.cdecl.lexer import Lexer, Span, TokenType, next_token
from struct_printer.cdecl.errors import UnrecognizedCharacterError, LexError
from struct_printer.errors import StructPrinterError


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str) -> list:
    """Tokenize and drop the trailing EOF token."""
    tokens = list(Lexer(source, "<test>").tokenize())
    assert tokens[-1].type == TokenType.EOF
    return tokens[:-1]


def types(source: str) -> list:
    return [t.type for t in tokenize(source)]


def values(source: str) -> list:
    return [t.value for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition."""

    def test_empty_source(self):
        """Empty source should produce only EOF."""
        tokens = list(Lexer("").tokenize())
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].value is None

    def test_whitespace_only(self):
        """Whitespace of every kind is skipped."""
        assert tokenize("  \t\n\r\n\f\v ") == []

    def test_identifier(self):
        tokens = tokenize("count")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "count"

    def test_identifier_with_underscore_and_digits(self):
        assert values("_private x1 MAX_LEN_2") == ["_private", "x1", "MAX_LEN_2"]
        assert types("_private x1 MAX_LEN_2") == [TokenType.IDENTIFIER] * 3

    def test_keywords(self):
        """The four keywords get their own token types."""
        assert types("struct union enum typedef") == [
            TokenType.STRUCT,
            TokenType.UNION,
            TokenType.ENUM,
            TokenType.TYPEDEF,
        ]

    def test_keyword_prefixed_identifiers(self):
        """Identifiers that merely start with a keyword stay identifiers."""
        assert types("structure union_tag enumerate typedefs") == [TokenType.IDENTIFIER] * 4
        assert values("structure") == ["structure"]

    def test_punctuation(self):
        assert types("{ } * ; [ ] ( ) ,") == [
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.STAR,
            TokenType.SEMICOLON,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.COMMA,
        ]

    def test_punctuation_without_spaces(self):
        assert values("int*p[10];") == ["int", "*", "p", "[", "10", "]", ";"]

    def test_numbers(self):
        """Numbers are digit runs kept as text, suffixes included."""
        tokens = tokenize("10 0x1F 16u")
        assert [t.type for t in tokens] == [TokenType.NUMBER] * 3
        assert [t.value for t in tokens] == ["10", "0x1F", "16u"]

    def test_complete_declaration(self):
        source = "typedef struct Point { int x; int y; } Point;"
        assert types(source) == [
            TokenType.TYPEDEF,
            TokenType.STRUCT,
            TokenType.IDENTIFIER,
            TokenType.LBRACE,
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
            TokenType.SEMICOLON,
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
            TokenType.SEMICOLON,
            TokenType.RBRACE,
            TokenType.IDENTIFIER,
            TokenType.SEMICOLON,
        ]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test that every comment style is elided from the token stream."""

    def test_line_comment(self):
        assert values("int // comment\nx") == ["int", "x"]

    def test_hash_line_comment(self):
        """Preprocessor lines are skipped like line comments."""
        assert values("#include <stdio.h>\n#define N 10\nint x;") == ["int", "x", ";"]

    def test_hash_comment_of_one_character(self):
        """A bare '#' line does not swallow the following line."""
        assert values("#\nint x;") == ["int", "x", ";"]

    def test_block_comment(self):
        assert values("int /* a comment */ x") == ["int", "x"]

    def test_multiline_block_comment(self):
        assert values("int /* line one\nline two\n*/ x") == ["int", "x"]

    def test_block_comment_stars(self):
        assert values("a /** doc **/ b") == ["a", "b"]

    def test_slash_star_slash_is_not_closed(self):
        assert values("a /*/ still comment */ b") == ["a", "b"]

    def test_consecutive_comments(self):
        """Comments and whitespace in any order need several skip passes."""
        source = "/* one */ // two\n   /* three */\n# four\n  /*five*//*six*/ x"
        assert values(source) == ["x"]

    def test_comment_at_end_of_input(self):
        assert values("int x; // trailing") == ["int", "x", ";"]
        assert values("x /* trailing */") == ["x"]

    def test_unterminated_block_comment_runs_to_end(self):
        """An unterminated block comment is not an error."""
        assert values("int x; /* never closed") == ["int", "x", ";"]
        assert values("/*") == []

    def test_line_comment_without_newline(self):
        assert values("// only a comment") == []


# =============================================================================
# Span Tests
# =============================================================================

class TestSpans:
    """Test that tokens refer back into the source."""

    def test_span_offsets(self):
        source = "struct Point"
        tokens = tokenize(source)
        assert tokens[1].span.start == 7
        assert tokens[1].span.length == 5
        assert tokens[1].span.end == 12
        assert tokens[1].span.source is source

    def test_span_text(self):
        span = Span("typedef struct", 8, 6)
        assert span.text == "struct"
        assert str(span) == "struct"

    def test_eof_span_is_empty(self):
        source = "x  "
        eof = list(Lexer(source).tokenize())[-1]
        assert eof.span.start == len(source)
        assert eof.span.length == 0

    def test_excerpt(self):
        span = Span("abcdefghijklmnopqrstuvwxyz", 2, 1)
        assert span.excerpt() == "cdefghijklmnopqr"
        assert span.excerpt(4) == "cdef"

    def test_location(self):
        source = "int a;\n  int b;"
        tokens = tokenize(source)
        location = tokens[4].span.location("demo.h")
        assert (location.filename, location.line, location.column) == ("demo.h", 2, 7)

    def test_token_describe(self):
        tokens = list(Lexer("count struct { 10").tokenize())
        assert tokens[0].describe() == "identifier 'count'"
        assert tokens[1].describe() == "keyword 'struct'"
        assert tokens[2].describe() == "'{'"
        assert tokens[3].describe() == "number '10'"
        assert tokens[4].describe() == "end of input"

    def test_tokens_are_immutable(self):
        token = tokenize("x")[0]
        with pytest.raises(AttributeError):
            token.type = TokenType.STAR


# =============================================================================
# next_token Function Tests
# =============================================================================

class TestNextToken:
    """Test the position-threading lexer function."""

    def test_returns_new_position(self):
        token, position = next_token("  int x", 0)
        assert token.value == "int"
        assert position == 5

        token, position = next_token("  int x", position)
        assert token.value == "x"
        assert position == 7

    def test_eof_is_repeatable(self):
        token, position = next_token("x", 1)
        assert token.type == TokenType.EOF
        again, same = next_token("x", position)
        assert again.type == TokenType.EOF
        assert same == position

    def test_independent_lexers(self):
        """Two lexers interleaved do not share a cursor."""
        first = Lexer("int a;")
        second = Lexer("struct { }")
        assert first.next_token().value == "int"
        assert second.next_token().value == "struct"
        assert first.next_token().value == "a"
        assert second.next_token().value == "{"
        assert first.position == 5
        assert second.position == 8


# =============================================================================
# Error Tests
# =============================================================================

class TestLexerErrors:
    """Test lexer error conditions."""

    def test_unrecognized_character(self):
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            tokenize("int x = 3;")
        error = exc_info.value
        assert error.char == "="
        assert error.location.line == 1
        assert error.location.column == 7
        assert error.location.filename == "<test>"

    def test_error_excerpt_is_short(self):
        source = "int x; @" + "y" * 40
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            tokenize(source)
        assert exc_info.value.excerpt == "@" + "y" * 15
        assert "@yyy" in str(exc_info.value)

    def test_error_hierarchy(self):
        with pytest.raises(LexError):
            tokenize("a - b")
        with pytest.raises(StructPrinterError):
            tokenize("'c'")

    def test_error_message_format(self):
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            list(Lexer("int\n  x = 1;", "demo.h").tokenize())
        message = str(exc_info.value)
        assert message.startswith("demo.h:2:5: error: unrecognized character '='")
        assert "0x3D" in message
