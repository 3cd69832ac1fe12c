"""
pseudolang Error Hierarchy
==========================

Root of every exception raised by the pseudolang front end. Callers that
only care whether a script was accepted can catch PseudoError and report
whatever they receive.

Exception Hierarchy
-------------------
PseudoError (base)
└── ScriptSyntaxError (syntax package)
    ├── LexicalError - one offending character found by the scanner
    │   ├── MultipleDecimalPointsError
    │   ├── InvalidNumberError
    │   ├── InvalidEscapeSequenceError
    │   ├── ExpectedApostropheError
    │   ├── ExpectedQuoteError
    │   └── UnknownCharacterError
    ├── LexicalErrors - every LexicalError found in one scan
    └── ParseError - first unmet grammar expectation
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class PseudoError(Exception):
    """
    Base exception for all pseudolang errors.

        try:
            program = parse_source(text)
        except PseudoError as e:
            print(e)
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in script source, used by tokens, AST nodes and errors.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    @property
    def offset(self) -> int:
        """Zero-based column offset from the start of the line."""
        return self.column - 1

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"
