"""
Script Syntax
=============

Lexer, parser and AST for the scripting language.

    >>> from pseudolang.syntax import parse_source, ASTPrinter
    >>> print(ASTPrinter().print(parse_source('let x <- 1 + 2')))
    Expressions
      let x <- (1 + 2)
"""

from pseudolang.syntax.ast import ASTNode, ASTPrinter, ASTVisitor, Expressions
from pseudolang.syntax.errors import (
    ExpectedApostropheError,
    ExpectedQuoteError,
    InvalidEscapeSequenceError,
    InvalidNumberError,
    LexicalError,
    LexicalErrors,
    MultipleDecimalPointsError,
    ParseError,
    ScriptSyntaxError,
    UnknownCharacterError,
)
from pseudolang.syntax.frontend import Frontend, FrontendOptions, FrontendResult
from pseudolang.syntax.lexer import KEYWORDS, Lexer, Token, TokenType, tokenize
from pseudolang.syntax.parser import Parser, parse, parse_source

__all__ = [
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "KEYWORDS",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # AST
    "ASTNode",
    "Expressions",
    "ASTVisitor",
    "ASTPrinter",
    # Driver
    "Frontend",
    "FrontendOptions",
    "FrontendResult",
    # Errors
    "ScriptSyntaxError",
    "LexicalError",
    "LexicalErrors",
    "MultipleDecimalPointsError",
    "InvalidNumberError",
    "InvalidEscapeSequenceError",
    "ExpectedApostropheError",
    "ExpectedQuoteError",
    "UnknownCharacterError",
    "ParseError",
]
