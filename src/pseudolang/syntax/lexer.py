"""
Script Lexer (Tokenizer)
========================

Converts script source text into a list of tokens for the parser.

Token Categories
----------------
- Literals: numbers (always floating point), 'c' characters, "strings"
- Identifiers: variable and function names
- Reserved words: let, if, then, else, end, for, execute, while, ...
- Operators: + - * / % = < <= > >= <> <- and or
- Delimiters: ( ) [ ] { } , :
- End of line: every newline is a statement separator token

Comments
--------
A '$' starts a comment that runs to the end of the line. The newline
that ends the comment still produces an ENDLINE token.

Escape Sequences
----------------
\\0 (NUL), \\n (line feed), \\r (carriage return), \\t (tab),
\\\\ (backslash), \\' (apostrophe), \\" (quote)

Error Handling
--------------
The lexer never stops at the first problem. Each bad character is
recorded, skipped, and scanning continues, so one run reports every
lexical error in the source. Tokens are only returned when the whole
source scanned cleanly; otherwise LexicalErrors is raised.

Example Usage
-------------
>>> from pseudolang.syntax.lexer import tokenize
>>> for token in tokenize('let x <- 42'):
...     print(token)
Token(LET, 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(ASSIGN, 1:7)
Token(NUMBER, 42.0, 1:10)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from pseudolang.errors import SourceLocation
from pseudolang.syntax.errors import (
    ErrorCollector,
    ExpectedApostropheError,
    ExpectedQuoteError,
    InvalidEscapeSequenceError,
    InvalidNumberError,
    MultipleDecimalPointsError,
    UnknownCharacterError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the scripting language.

    Reserved words get their own type so the parser never has to compare
    identifier text.
    """

    # === Literals ===
    NUMBER = auto()         # 123, 4.5, .42
    CHAR = auto()           # 'c'
    STRING = auto()         # "text"
    IDENTIFIER = auto()     # names

    # === Constants ===
    NULL = auto()           # null
    TRUE = auto()           # true
    FALSE = auto()          # false

    # === Keywords ===
    LET = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()
    END = auto()
    FOR = auto()
    EXECUTE = auto()
    WHILE = auto()
    DO = auto()
    UNTIL = auto()
    PRINT = auto()
    READ = auto()
    THROW = auto()
    TRY = auto()
    CATCH = auto()
    FUNCTION = auto()
    RETURN = auto()
    CONTINUE = auto()
    BREAK = auto()
    INCLUDE = auto()
    RUN = auto()
    AND = auto()
    OR = auto()

    # === Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    PERCENT = auto()        # %
    EQUALS = auto()         # =
    LESS = auto()           # <
    LESS_EQUAL = auto()     # <=
    GREATER = auto()        # >
    GREATER_EQUAL = auto()  # >=
    DIFFERENT = auto()      # <>
    ASSIGN = auto()         # <-

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    COMMA = auto()          # ,
    COLON = auto()          # :
    ENDLINE = auto()        # newline


# =============================================================================
# Keyword and Symbol Mapping
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    # Constants
    "null": TokenType.NULL,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,

    # Statements and control flow
    "let": TokenType.LET,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "end": TokenType.END,
    "for": TokenType.FOR,
    "execute": TokenType.EXECUTE,
    "while": TokenType.WHILE,
    "do": TokenType.DO,
    "until": TokenType.UNTIL,
    "print": TokenType.PRINT,
    "read": TokenType.READ,
    "throw": TokenType.THROW,
    "try": TokenType.TRY,
    "catch": TokenType.CATCH,
    "function": TokenType.FUNCTION,
    "return": TokenType.RETURN,
    "continue": TokenType.CONTINUE,
    "break": TokenType.BREAK,
    "include": TokenType.INCLUDE,
    "run": TokenType.RUN,

    # Logical operators
    "and": TokenType.AND,
    "or": TokenType.OR,
}

# Single-character operators and delimiters. '<' and '>' are scanned
# separately because they start two-character operators.
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "=": TokenType.EQUALS,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}

# Source text of every payload-free token, for diagnostics
TOKEN_TEXT: dict[TokenType, str] = {
    **{token_type: text for text, token_type in KEYWORDS.items()},
    **{token_type: text for text, token_type in SINGLE_CHAR_TOKENS.items()},
    TokenType.LESS: "<",
    TokenType.LESS_EQUAL: "<=",
    TokenType.GREATER: ">",
    TokenType.GREATER_EQUAL: ">=",
    TokenType.DIFFERENT: "<>",
    TokenType.ASSIGN: "<-",
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of script source.

    Attributes:
        type: The TokenType classification
        value: Payload for literals and identifiers (float for NUMBER,
            one-character str for CHAR, str for STRING and IDENTIFIER);
            None for every other token
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: float | str | None
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            if isinstance(self.value, float):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """Short human-readable form used in parse error messages."""
        if self.type == TokenType.ENDLINE:
            return "end of line"
        if self.type == TokenType.NUMBER:
            return f"number {self.value:g}"
        if self.type == TokenType.CHAR:
            return f"character {self.value!r}"
        if self.type == TokenType.STRING:
            return f"string {self.value!r}"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        return f"'{TOKEN_TEXT[self.type]}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes script source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = lexer.tokenize()

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"

    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    DIGITS = string.digits

    # Whitespace that carries no meaning; '\n' is a token
    WHITESPACE = " \t\r"

    COMMENT_CHAR = "$"

    ESCAPE_SEQUENCES = {
        "0": "\0",      # Null
        "n": "\n",      # Line feed
        "r": "\r",      # Carriage return
        "t": "\t",      # Tab
        "\\": "\\",     # Backslash
        "'": "'",       # Apostrophe
        '"': '"',       # Quote
    }

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        line_number: int = 1,
    ):
        """
        Initialize the lexer with source code.

        Args:
            source: The script source to tokenize
            filename: Name of the source file (for error messages)
            line_number: Line number of the first source line
        """
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = line_number
        self._column = 1
        self._line_start_pos = 0

        self._errors = ErrorCollector()

    def tokenize(self) -> list[Token]:
        """
        Scan the whole source.

        Returns:
            Every token in source order (an empty list for empty source)

        Raises:
            LexicalErrors: If any lexical error was found; carries all of them
        """
        tokens: list[Token] = []

        while not self._at_end():
            self._skip_whitespace_and_comments()

            if self._at_end():
                break

            token = self._scan_token()
            if token is not None:
                tokens.append(token)

        if self._errors.has_errors():
            logger.debug(
                "%s: %d lexical error(s)", self.filename, self._errors.error_count()
            )
            self._errors.raise_if_errors()

        logger.debug("%s: scanned %d tokens", self.filename, len(tokens))
        return tokens

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line and column."""
        assert not self._at_end(), "advanced past end of source"

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    # =========================================================================
    # Token and Error Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: float | str | None,
        start_line: int,
        start_column: int,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    def _location(self) -> SourceLocation:
        """Location of the current character."""
        return SourceLocation(self.filename, self._line, self._column)

    def _get_current_line(self) -> str:
        """Full text of the line being scanned, without its line ending."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end].rstrip("\r")

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            if char == self.COMMENT_CHAR:
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            break

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Optional[Token]:
        """
        Scan the next token from source.

        Returns:
            The next Token, or None if the lexeme was malformed (the
            error has already been recorded)
        """
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if char == "\n":
            self._advance()
            return self._make_token(TokenType.ENDLINE, None, start_line, start_column)

        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char in self.DIGITS or char == ".":
            return self._scan_number(start_line, start_column)

        if char == '"':
            return self._scan_string(start_line, start_column)

        if char == "'":
            return self._scan_char(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """
        Scan an identifier or reserved word.

        Identifiers start with a letter or underscore and continue with
        letters, digits and underscores. Reserved words are case-sensitive.
        """
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)

        if name in KEYWORDS:
            return self._make_token(KEYWORDS[name], None, start_line, start_column)

        return self._make_token(TokenType.IDENTIFIER, name, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Optional[Token]:
        """
        Scan a number literal.

        Digits with at most one decimal point; the integer part may be
        empty (.42). A second decimal point is reported and skipped, and
        the rest of the literal is still consumed so scanning resumes
        after it.
        """
        start_location = self._location()
        source_line = self._get_current_line()

        chars = []
        seen_point = False
        malformed = False

        while self._peek() and self._peek() in self.DIGITS + ".":
            if self._peek() == ".":
                if seen_point:
                    self._errors.add(
                        MultipleDecimalPointsError(self._location(), source_line)
                    )
                    self._advance()
                    malformed = True
                    continue
                seen_point = True
            chars.append(self._advance())

        if malformed:
            return None

        lexeme = "".join(chars)
        try:
            value = float(lexeme)
        except ValueError:
            self._errors.add(InvalidNumberError(lexeme, start_location, source_line))
            return None

        return self._make_token(TokenType.NUMBER, value, start_line, start_column)

    def _scan_escape_sequence(self) -> Optional[str]:
        """
        Scan the character after a backslash.

        Returns:
            The escaped character, or None if the escape is unknown (the
            error is recorded and the character skipped)
        """
        location = self._location()
        char = self._advance()

        if char in self.ESCAPE_SEQUENCES:
            return self.ESCAPE_SEQUENCES[char]

        self._errors.add(
            InvalidEscapeSequenceError(char, location, self._get_current_line())
        )
        return None

    def _scan_string(self, start_line: int, start_column: int) -> Optional[Token]:
        """
        Scan a double-quoted string literal.

        Strings end at the closing quote and may not span lines. A bad
        escape is reported and scanning continues inside the string.
        """
        self._advance()  # consume opening "

        chars = []
        malformed = False

        while True:
            char = self._peek()

            if char == "" or char == "\n":
                # Newline stays in the input and still ends the line
                self._errors.add(
                    ExpectedQuoteError(self._location(), self._get_current_line())
                )
                return None

            if char == '"':
                self._advance()
                break

            if char == "\\":
                self._advance()
                if self._peek() in ("", "\n"):
                    continue
                escaped = self._scan_escape_sequence()
                if escaped is None:
                    malformed = True
                else:
                    chars.append(escaped)
            else:
                chars.append(self._advance())

        if malformed:
            return None

        return self._make_token(TokenType.STRING, "".join(chars), start_line, start_column)

    def _scan_char(self, start_line: int, start_column: int) -> Optional[Token]:
        """
        Scan a single-quoted character literal.

        Exactly one character or escape sequence between apostrophes.
        """
        self._advance()  # consume opening '

        if self._peek() in ("", "\n"):
            self._errors.add(
                ExpectedApostropheError(self._location(), self._get_current_line())
            )
            return None

        if self._peek() == "\\":
            self._advance()
            if self._peek() in ("", "\n"):
                self._errors.add(
                    ExpectedApostropheError(self._location(), self._get_current_line())
                )
                return None
            value = self._scan_escape_sequence()
        else:
            value = self._advance()

        if not self._match("'"):
            self._errors.add(
                ExpectedApostropheError(self._location(), self._get_current_line())
            )
            if self._peek() not in ("", "\n"):
                self._advance()
            return None

        if value is None:
            return None

        return self._make_token(TokenType.CHAR, value, start_line, start_column)

    def _scan_operator(self, start_line: int, start_column: int) -> Optional[Token]:
        """
        Scan an operator or delimiter.

        Two-character operators win over their one-character prefixes:
        <= <> <- before <, and >= before >.
        """
        location = self._location()
        char = self._advance()

        if char == "<":
            if self._match("="):
                token_type = TokenType.LESS_EQUAL
            elif self._match(">"):
                token_type = TokenType.DIFFERENT
            elif self._match("-"):
                token_type = TokenType.ASSIGN
            else:
                token_type = TokenType.LESS
            return self._make_token(token_type, None, start_line, start_column)

        if char == ">":
            token_type = TokenType.GREATER_EQUAL if self._match("=") else TokenType.GREATER
            return self._make_token(token_type, None, start_line, start_column)

        if char in SINGLE_CHAR_TOKENS:
            return self._make_token(
                SINGLE_CHAR_TOKENS[char], None, start_line, start_column
            )

        self._errors.add(
            UnknownCharacterError(char, location, self._get_current_line())
        )
        return None


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(
    source: str,
    filename: str = "<input>",
    line_number: int = 1,
) -> list[Token]:
    """
    Tokenize script source.

    Raises:
        LexicalErrors: If the source contains any lexical error
    """
    return Lexer(source, filename, line_number).tokenize()
