# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the script lexer/tokenizer.
#
# Test coverage includes:
#   - Number literals, including a leading decimal point
#   - String and character literals with escape sequences
#   - Reserved words, identifiers, operators, delimiters, end of line
#   - '$' comments and insignificant whitespace
#   - Error accumulation: every lexical error reported in one scan
# =============================================================================

import pytest

from pseudolang.syntax.errors import (
    ExpectedApostropheError,
    ExpectedQuoteError,
    InvalidEscapeSequenceError,
    InvalidNumberError,
    LexicalErrors,
    MultipleDecimalPointsError,
    UnknownCharacterError,
)
from pseudolang.syntax.lexer import KEYWORDS, Lexer, Token, TokenType, tokenize


# =============================================================================
# Helper Functions
# =============================================================================

def types(source: str) -> list[TokenType]:
    """Token types of source, in order."""
    return [t.type for t in tokenize(source)]


def scan_errors(source: str) -> list:
    """Lexical errors of source; fails the test if the scan succeeds."""
    with pytest.raises(LexicalErrors) as exc_info:
        tokenize(source)
    return exc_info.value.errors


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces no tokens at all."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Spaces, tabs and carriage returns are insignificant."""
        assert tokenize("   \t \r ") == []

    def test_identifier(self):
        tokens = tokenize("count")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "count"

    def test_identifier_with_digits_and_uppercase(self):
        """Identifiers allow uppercase, underscores and trailing digits."""
        tokens = tokenize("Total_2 _x")
        assert [t.value for t in tokens] == ["Total_2", "_x"]
        assert all(t.type == TokenType.IDENTIFIER for t in tokens)

    def test_digit_cannot_start_identifier(self):
        """'2x' is a number followed by an identifier."""
        assert types("2x") == [TokenType.NUMBER, TokenType.IDENTIFIER]

    @pytest.mark.parametrize("word", sorted(KEYWORDS))
    def test_every_keyword(self, word):
        """Every reserved word gets its own payload-free token."""
        tokens = tokenize(word)
        assert len(tokens) == 1
        assert tokens[0].type == KEYWORDS[word]
        assert tokens[0].value is None

    def test_keywords_are_case_sensitive(self):
        tokens = tokenize("Let IF End")
        assert all(t.type == TokenType.IDENTIFIER for t in tokens)

    def test_keyword_prefix_is_identifier(self):
        """A word merely starting with a keyword is an identifier."""
        tokens = tokenize("letter endless")
        assert [t.type for t in tokens] == [TokenType.IDENTIFIER] * 2

    def test_newline_is_a_token(self):
        assert types("a\nb") == [
            TokenType.IDENTIFIER,
            TokenType.ENDLINE,
            TokenType.IDENTIFIER,
        ]

    def test_crlf_line_ending(self):
        """'\\r' is whitespace, so CRLF gives a single ENDLINE."""
        assert types("a\r\nb") == [
            TokenType.IDENTIFIER,
            TokenType.ENDLINE,
            TokenType.IDENTIFIER,
        ]

    def test_token_count_matches_symbols(self):
        """let x <- foo(1, 2) has nine words and symbols."""
        assert len(tokenize("let x <- foo(1, 2)")) == 9


# =============================================================================
# Number Literal Tests
# =============================================================================

class TestNumbers:
    """Numbers are always floating point."""

    def test_number_formats(self):
        tokens = tokenize("123 45.67 0.89 .42")
        assert [t.type for t in tokens] == [TokenType.NUMBER] * 4
        assert [t.value for t in tokens] == [123.0, 45.67, 0.89, 0.42]

    def test_integer_is_float(self):
        assert isinstance(tokenize("7")[0].value, float)

    def test_trailing_point(self):
        assert tokenize("5.")[0].value == 5.0

    def test_multiple_decimal_points(self):
        errors = scan_errors("123.45.67")
        assert len(errors) == 1
        assert isinstance(errors[0], MultipleDecimalPointsError)
        assert errors[0].line == 1
        assert errors[0].offset == 6

    def test_every_extra_point_reported(self):
        errors = scan_errors("1.2.3.4")
        assert [e.offset for e in errors] == [3, 5]
        assert all(isinstance(e, MultipleDecimalPointsError) for e in errors)

    def test_lone_point_is_invalid_number(self):
        errors = scan_errors("let x <- .")
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidNumberError)
        assert errors[0].offset == 9


# =============================================================================
# String and Character Literal Tests
# =============================================================================

class TestStrings:
    """Test string literal scanning."""

    def test_simple_string(self):
        tokens = tokenize('"hello world"')
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"

    def test_empty_string(self):
        assert tokenize('""')[0].value == ""

    def test_newline_escape(self):
        tokens = tokenize('"a\\nb"')
        assert len(tokens) == 1
        assert tokens[0].value == "a\nb"

    @pytest.mark.parametrize("escape,expected", [
        ("\\0", "\0"),
        ("\\n", "\n"),
        ("\\r", "\r"),
        ("\\t", "\t"),
        ("\\\\", "\\"),
        ("\\'", "'"),
        ('\\"', '"'),
    ])
    def test_escape_table(self, escape, expected):
        assert tokenize(f'"{escape}"')[0].value == expected

    def test_invalid_escape(self):
        errors = scan_errors('"a\\qb"')
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidEscapeSequenceError)
        assert errors[0].char == "q"
        assert errors[0].offset == 3

    def test_scanning_continues_inside_string(self):
        """Both bad escapes of one string are reported."""
        errors = scan_errors('"\\x and \\y"')
        assert [e.char for e in errors] == ["x", "y"]

    def test_unterminated_string(self):
        errors = scan_errors('"abc')
        assert len(errors) == 1
        assert isinstance(errors[0], ExpectedQuoteError)
        assert errors[0].offset == 4

    def test_string_cannot_span_lines(self):
        errors = scan_errors('print "abc\nprint 1')
        assert len(errors) == 1
        assert isinstance(errors[0], ExpectedQuoteError)
        assert errors[0].line == 1
        assert errors[0].offset == 10

    def test_comment_char_inside_string(self):
        """'$' inside a string is text, not a comment."""
        assert tokenize('"cost: $5"')[0].value == "cost: $5"


class TestCharacters:
    """Test character literal scanning."""

    def test_simple_char(self):
        tokens = tokenize("'a'")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.CHAR
        assert tokens[0].value == "a"

    def test_escaped_char(self):
        assert tokenize("'\\n'")[0].value == "\n"
        assert tokenize("'\\''")[0].value == "'"

    def test_invalid_escape_in_char(self):
        errors = scan_errors("'\\q'")
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidEscapeSequenceError)
        assert errors[0].offset == 2

    def test_missing_apostrophe(self):
        errors = scan_errors("'ab")
        assert len(errors) == 1
        assert isinstance(errors[0], ExpectedApostropheError)
        assert errors[0].offset == 2

    def test_char_at_end_of_input(self):
        errors = scan_errors("'")
        assert isinstance(errors[0], ExpectedApostropheError)


# =============================================================================
# Operator and Delimiter Tests
# =============================================================================

class TestOperators:
    """Test operator recognition, including longest match."""

    def test_two_char_operators_win(self):
        assert types("<= >= <> <- < >") == [
            TokenType.LESS_EQUAL,
            TokenType.GREATER_EQUAL,
            TokenType.DIFFERENT,
            TokenType.ASSIGN,
            TokenType.LESS,
            TokenType.GREATER,
        ]

    def test_assignment_without_spaces(self):
        assert types("x<-1") == [
            TokenType.IDENTIFIER,
            TokenType.ASSIGN,
            TokenType.NUMBER,
        ]

    def test_less_than_negative(self):
        """With a space, '< -' is a comparison with a negative operand."""
        assert types("a < -1") == [
            TokenType.IDENTIFIER,
            TokenType.LESS,
            TokenType.MINUS,
            TokenType.NUMBER,
        ]

    def test_single_char_tokens(self):
        assert types("+ - * / % = ( ) [ ] { } , :") == [
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.STAR,
            TokenType.SLASH,
            TokenType.PERCENT,
            TokenType.EQUALS,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.COMMA,
            TokenType.COLON,
        ]

    def test_unknown_character(self):
        errors = scan_errors("~")
        assert len(errors) == 1
        assert isinstance(errors[0], UnknownCharacterError)
        assert errors[0].char == "~"
        assert errors[0].line == 1
        assert errors[0].offset == 0


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """'$' comments run to the end of the line."""

    def test_comment_only(self):
        assert tokenize("$ nothing to see") == []

    def test_comment_keeps_endline(self):
        assert types("let x <- 1 $ set x\nprint x") == [
            TokenType.LET,
            TokenType.IDENTIFIER,
            TokenType.ASSIGN,
            TokenType.NUMBER,
            TokenType.ENDLINE,
            TokenType.PRINT,
            TokenType.IDENTIFIER,
        ]

    def test_unknown_characters_in_comment_ignored(self):
        assert types("$ ~ # @") == []


# =============================================================================
# Error Accumulation Tests
# =============================================================================

class TestErrorAccumulation:
    """The scan never stops early; all errors come back together."""

    def test_all_errors_reported(self):
        errors = scan_errors("~ let # x")
        assert [e.offset for e in errors] == [0, 6]
        assert all(isinstance(e, UnknownCharacterError) for e in errors)

    def test_mixed_error_kinds_in_source_order(self):
        errors = scan_errors("1.2.3 ~\n'ab\n\"open")
        assert [type(e) for e in errors] == [
            MultipleDecimalPointsError,
            UnknownCharacterError,
            ExpectedApostropheError,
            ExpectedQuoteError,
        ]
        assert [e.line for e in errors] == [1, 1, 2, 3]

    def test_error_on_later_line(self):
        errors = scan_errors("let a <- 1\nlet b <- ~")
        assert errors[0].line == 2
        assert errors[0].offset == 9
        assert errors[0].source_line == "let b <- ~"

    def test_no_partial_token_list(self):
        """A single bad character means no tokens at all."""
        with pytest.raises(LexicalErrors):
            tokenize("let x <- 1\nlet y <- 2 ~")


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Test line and column tracking."""

    def test_columns_are_one_based(self):
        tokens = tokenize("let x <- 42")
        assert [(t.line, t.column) for t in tokens] == [
            (1, 1), (1, 5), (1, 7), (1, 10),
        ]

    def test_second_line(self):
        tokens = tokenize("a\n  b")
        assert (tokens[2].line, tokens[2].column) == (2, 3)

    def test_starting_line_number(self):
        lexer = Lexer("x\ny", "<test>", line_number=10)
        tokens = lexer.tokenize()
        assert tokens[0].line == 10
        assert tokens[2].line == 11
        assert tokens[0].filename == "<test>"

    def test_location_property(self):
        token = tokenize("  foo", "script.pseudo")[0]
        assert str(token.location) == "script.pseudo:1:3"


class TestToken:
    """Test the Token data class."""

    def test_repr_with_payload(self):
        assert repr(tokenize("x")[0]) == "Token(IDENTIFIER, 'x', 1:1)"
        assert repr(tokenize("4")[0]) == "Token(NUMBER, 4.0, 1:1)"

    def test_repr_without_payload(self):
        assert repr(tokenize("end")[0]) == "Token(END, 1:1)"

    def test_describe(self):
        assert Token(TokenType.THEN, None, 1, 1).describe() == "'then'"
        assert Token(TokenType.ASSIGN, None, 1, 1).describe() == "'<-'"
        assert Token(TokenType.ENDLINE, None, 1, 1).describe() == "end of line"
        assert Token(TokenType.IDENTIFIER, "x", 1, 1).describe() == "identifier 'x'"
        assert Token(TokenType.NUMBER, 2.0, 1, 1).describe() == "number 2"

    def test_tokens_are_immutable(self):
        token = tokenize("x")[0]
        with pytest.raises(AttributeError):
            token.value = "y"
