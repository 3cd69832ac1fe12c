"""
Script Syntax Errors
====================

Exceptions raised by the scanner and the parser.

The scanner never stops at the first bad character: each problem becomes
one LexicalError, and the whole set is raised at the end of the scan as a
single LexicalErrors aggregate. The parser, in contrast, raises one
ParseError at the first token that does not fit the grammar.

Diagnostic Format
-----------------
Every error renders as a block that echoes the offending line and points
at the exact column:

    Error: unknown character '~'

       3 | let x <- ~1
                     ^-- Here

Blocks for several lexical errors are printed one after another, in
source order.
"""

from typing import Optional, TYPE_CHECKING

from pseudolang.errors import PseudoError, SourceLocation

if TYPE_CHECKING:
    from pseudolang.syntax.lexer import Token


# Width of the right-aligned line number gutter
LINE_NUMBER_WIDTH = 4

# Separator between gutter and echoed source line
GUTTER_SEPARATOR = " | "


# =============================================================================
# Base Syntax Exception
# =============================================================================

class ScriptSyntaxError(PseudoError):
    """
    Base exception for lexical and syntax errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error (not part of the rendered block)
        source_line: The full text of the offending source line
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def render(self) -> str:
        """
        Render the diagnostic block for this error.

        The caret is indented by the gutter width plus the column offset.
        Tabs in the echoed line are shown as single spaces so the caret
        stays under the offending character.
        """
        parts = [f"Error: {self.message}"]

        if self.source_line is not None and self.location is not None:
            text = self.source_line.replace("\t", " ")
            gutter = f"{self.location.line:>{LINE_NUMBER_WIDTH}}{GUTTER_SEPARATOR}"
            parts.append("")
            parts.append(f"{gutter}{text}")
            parts.append(" " * (len(gutter) + self.location.offset) + "^-- Here")

        return "\n".join(parts) + "\n"

    def _format_message(self) -> str:
        return self.render()


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(ScriptSyntaxError):
    """
    A single problem found by the scanner.

    Always points at one character of the original source: the scanner
    records the error, skips that character and keeps going.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        source_line: str,
        hint: Optional[str] = None,
    ):
        super().__init__(message, location, hint=hint, source_line=source_line)

    @property
    def line(self) -> int:
        """1-based line number of the offending character."""
        return self.location.line

    @property
    def offset(self) -> int:
        """0-based column offset of the offending character."""
        return self.location.offset


class MultipleDecimalPointsError(LexicalError):
    """A number literal with a second '.', e.g. 123.45.67."""

    def __init__(self, location: SourceLocation, source_line: str):
        super().__init__(
            "multiple decimal points in number literal",
            location,
            source_line,
        )


class InvalidNumberError(LexicalError):
    """A number-shaped lexeme that is not a number, e.g. a lone '.'."""

    def __init__(self, lexeme: str, location: SourceLocation, source_line: str):
        self.lexeme = lexeme
        super().__init__(f"invalid number '{lexeme}'", location, source_line)


class InvalidEscapeSequenceError(LexicalError):
    """
    Backslash followed by a character with no escape mapping.

    Valid escapes are \\0 \\n \\r \\t \\\\ \\' and \\".
    """

    def __init__(self, char: str, location: SourceLocation, source_line: str):
        self.char = char
        super().__init__(
            f"invalid escape sequence '\\{char}'",
            location,
            source_line,
            hint="valid escapes are \\0 \\n \\r \\t \\\\ \\' \\\"",
        )


class ExpectedApostropheError(LexicalError):
    """Character literal without its closing apostrophe."""

    def __init__(self, location: SourceLocation, source_line: str):
        super().__init__(
            "expected ' to close character literal",
            location,
            source_line,
        )


class ExpectedQuoteError(LexicalError):
    """String literal not closed before the end of its line."""

    def __init__(self, location: SourceLocation, source_line: str):
        super().__init__(
            'expected " to close string literal',
            location,
            source_line,
        )


class UnknownCharacterError(LexicalError):
    """A character that cannot start any token."""

    def __init__(self, char: str, location: SourceLocation, source_line: str):
        self.char = char
        super().__init__(f"unknown character {char!r}", location, source_line)


class LexicalErrors(ScriptSyntaxError):
    """
    Every lexical error found in one scan, in source order.

    str() of this exception is the concatenation of the individual
    diagnostic blocks.
    """

    def __init__(self, errors: list[LexicalError]):
        self.errors = list(errors)
        super().__init__("\n".join(error.render() for error in self.errors))

    def __iter__(self):
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def render(self) -> str:
        return self.message

    def _format_message(self) -> str:
        return self.message


# =============================================================================
# Parse Errors
# =============================================================================

class ParseError(ScriptSyntaxError):
    """
    The grammar rule at the current position could not be satisfied.

    Attributes:
        expected: Description of the token kind or rule that was required
        found: The token actually present, or None at end of input
    """

    def __init__(
        self,
        expected: str,
        found: Optional["Token"] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found

        found_text = found.describe() if found is not None else "end of input"
        if location is None and found is not None:
            location = found.location

        super().__init__(
            f"expected {expected}, found {found_text}",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Error Collection
# =============================================================================

class ErrorCollector:
    """
    Collects lexical errors during one scan.

        collector = ErrorCollector()
        collector.add(UnknownCharacterError(...))
        collector.raise_if_errors()   # raises LexicalErrors
    """

    def __init__(self):
        self.errors: list[LexicalError] = []

    def add(self, error: LexicalError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def raise_if_errors(self) -> None:
        """
        Raise LexicalErrors if anything was collected.

        Raises:
            LexicalErrors: With every collected error, in source order
        """
        if self.errors:
            raise LexicalErrors(sorted(
                self.errors,
                key=lambda e: (e.location.line, e.location.column),
            ))
