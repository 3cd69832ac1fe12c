"""
pseudolang - Scripting Language Front End
=========================================

Lexical and syntactic analysis for a small imperative scripting language
with variables, if/for/while/do-until control flow, functions,
try/catch/throw, arrays, dictionaries, file-redirected read/print and
include/run of other scripts.

    Source → Lexer → tokens → Parser → AST

Executing the AST is left to the caller.

Quick Start
-----------
    >>> from pseudolang import tokenize, parse
    >>> program = parse(tokenize('if x then print "y" end'))
    >>> program.body[0].false_body is None
    True

Or from the command line:
    $ pseudo ast script.pseudo
"""

__version__ = "1.0.0"

from pseudolang.errors import PseudoError, SourceLocation
from pseudolang.syntax import (
    ASTPrinter,
    ASTVisitor,
    Frontend,
    FrontendOptions,
    FrontendResult,
    LexicalError,
    LexicalErrors,
    ParseError,
    ScriptSyntaxError,
    Token,
    TokenType,
    parse,
    parse_source,
    tokenize,
)

__all__ = [
    "__version__",
    "PseudoError",
    "SourceLocation",
    "ScriptSyntaxError",
    "LexicalError",
    "LexicalErrors",
    "ParseError",
    "Token",
    "TokenType",
    "tokenize",
    "parse",
    "parse_source",
    "ASTVisitor",
    "ASTPrinter",
    "Frontend",
    "FrontendOptions",
    "FrontendResult",
]
