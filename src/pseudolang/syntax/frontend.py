"""
Front End Driver
================

Runs the whole front end over one script:

    Source → Lex → Parse → AST

Usage
-----
Command line:
    $ pseudo check script.pseudo

Programmatic:
    >>> from pseudolang.syntax import Frontend
    >>> result = Frontend().process_source('print "hi"')
    >>> result.success
    True

Error Handling
--------------
The driver turns expected failures into data: process_source never
raises for malformed scripts. A lexical failure yields every lexical
error and no tokens; a syntax failure yields the single ParseError and
no AST. Anything else (an internal bug) propagates.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pseudolang.syntax.ast import Expressions
from pseudolang.syntax.errors import LexicalErrors, ParseError, ScriptSyntaxError
from pseudolang.syntax.lexer import Lexer, Token
from pseudolang.syntax.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front end configuration.

    Attributes:
        filename: Name reported in token and error locations when the
            source does not come from a file
        line_number: Line number of the first source line, for scripts
            embedded in a larger file
    """
    filename: str = "<input>"
    line_number: int = 1


@dataclass
class FrontendResult:
    """
    Outcome of running the front end over one script.

    Attributes:
        filename: Source filename
        success: True if the script was tokenized and parsed
        tokens: Tokens produced (empty after a lexical failure)
        ast: Program node (None after any failure)
        token_count: Number of tokens produced
        errors: Lexical errors, or the single parse error
    """
    filename: str = ""
    success: bool = False
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Expressions] = None
    token_count: int = 0
    errors: list[ScriptSyntaxError] = field(default_factory=list)

    def report(self) -> str:
        """Render every diagnostic, one block per error."""
        return "\n".join(error.render() for error in self.errors)


class Frontend:
    """
    Script front end: lexer and parser behind one call.

    Example:
        frontend = Frontend()
        result = frontend.process_file("script.pseudo")
        if not result.success:
            print(result.report())
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def process_source(self, source: str, filename: Optional[str] = None) -> FrontendResult:
        """
        Tokenize and parse script source.

        Args:
            source: Script text
            filename: Overrides the filename from the options

        Returns:
            FrontendResult with the AST or the diagnostics
        """
        filename = filename or self.options.filename
        line_number = self.options.line_number
        result = FrontendResult(filename=filename)

        try:
            result.tokens = Lexer(source, filename, line_number).tokenize()
        except LexicalErrors as e:
            logger.debug("%s: lexing failed", filename)
            result.errors = list(e.errors)
            return result

        result.token_count = len(result.tokens)

        parser = Parser(result.tokens, filename, source.splitlines(), line_number)
        try:
            result.ast = parser.parse()
        except ParseError as e:
            logger.debug("%s: parsing failed", filename)
            result.errors = [e]
            return result

        result.success = True
        return result

    def process_file(self, path: str | Path) -> FrontendResult:
        """
        Tokenize and parse a script file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        logger.debug("reading %s", path)
        source = path.read_text(encoding="utf-8")
        return self.process_source(source, str(path))
