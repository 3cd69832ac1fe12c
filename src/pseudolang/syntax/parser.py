"""
Script Recursive Descent Parser
===============================

Turns the token list produced by the lexer into an AST.

One token of lookahead over an index into the token list, no
backtracking. The first token that does not fit the grammar raises
ParseError; there is no recovery and no partial tree.

Grammar (EBNF, precedence lowest to highest)
--------------------------------------------
program     ::= block
block       ::= ENDLINE* (expression (ENDLINE+ expression)*)? ENDLINE*
expression  ::= if_expr | for_expr | while_expr | do_until | 'continue'
              | 'break' | try_catch | 'throw' expression | function_def
              | 'return' expression | 'include' STRING | 'run' STRING
              | read_expr | print_expr | assignment | logical
logical     ::= comparison (('and' | 'or') comparison)*
comparison  ::= arith (('=' | '<' | '<=' | '>' | '>=' | '<>') arith)*
arith       ::= arith2 (('+' | '-') arith2)*
arith2      ::= factor (('*' | '/' | '%') factor)*
factor      ::= base ('[' expression ']' | '(' arguments? ')')*
base        ::= NUMBER | CHAR | STRING | IDENTIFIER | 'null' | 'true'
              | 'false' | '(' expression ')' | array | dictionary
              | ('+' | '-') base

Every binary tier is left-associative: a / b * c is (a / b) * c.

Statement Forms
---------------
if C then B (else B)? end
for i <- S, E (, STEP)? execute B end
while C execute B end
do B until C end
try B catch e B end
function f(a, b) B end
read (<file>)? a, b
print (<file>)? E, E
let x[i][j] <- E

A body (B) may sit on the same line as its keywords:

    if x then print "y" end

Example Usage
-------------
>>> from pseudolang.syntax.parser import parse_source
>>> program = parse_source('let x <- 42')
>>> program.body[0]
Assignment(identifier='x', index_access=(), expression=Number(value=42.0))
"""

import logging
from dataclasses import replace
from typing import Callable, Optional, TypeVar

from pseudolang.errors import SourceLocation
from pseudolang.syntax.errors import ParseError
from pseudolang.syntax.lexer import TOKEN_TEXT, Lexer, Token, TokenType
from pseudolang.syntax.ast import (
    ASTNode,
    Array,
    ArithmeticOperation,
    ArithmeticOperation2,
    ArithmeticOperator,
    ArithmeticOperator2,
    Assignment,
    Boolean,
    Break,
    Char,
    ComparisonOperation,
    ComparisonOperator,
    Continue,
    Dictionary,
    DoUntil,
    Expressions,
    FnCall,
    For,
    FunctionDefinition,
    Identifier,
    If,
    Include,
    IndexAccess,
    LogicalOperation,
    LogicalOperator,
    Null,
    Number,
    Print,
    Read,
    Return,
    Run,
    String,
    Throw,
    TryCatch,
    Unary,
    UnaryOperator,
    While,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# Names used in "expected ..." messages for tokens that carry a payload
_PAYLOAD_NAMES = {
    TokenType.NUMBER: "number",
    TokenType.CHAR: "character",
    TokenType.STRING: "string",
    TokenType.IDENTIFIER: "identifier",
    TokenType.ENDLINE: "end of line",
}

LOGICAL_OPERATORS = {
    TokenType.AND: LogicalOperator.AND,
    TokenType.OR: LogicalOperator.OR,
}

COMPARISON_OPERATORS = {
    TokenType.EQUALS: ComparisonOperator.EQUAL,
    TokenType.LESS: ComparisonOperator.LESS,
    TokenType.LESS_EQUAL: ComparisonOperator.LESS_EQUAL,
    TokenType.GREATER: ComparisonOperator.GREATER,
    TokenType.GREATER_EQUAL: ComparisonOperator.GREATER_EQUAL,
    TokenType.DIFFERENT: ComparisonOperator.DIFFERENT,
}

ARITHMETIC_OPERATORS = {
    TokenType.PLUS: ArithmeticOperator.ADD,
    TokenType.MINUS: ArithmeticOperator.SUBTRACT,
}

ARITHMETIC2_OPERATORS = {
    TokenType.STAR: ArithmeticOperator2.MULTIPLY,
    TokenType.SLASH: ArithmeticOperator2.DIVIDE,
    TokenType.PERCENT: ArithmeticOperator2.MODULO,
}

UNARY_OPERATORS = {
    TokenType.PLUS: UnaryOperator.PLUS,
    TokenType.MINUS: UnaryOperator.MINUS,
}


def describe_token_type(token_type: TokenType) -> str:
    """Human-readable name of a token type for error messages."""
    if token_type in _PAYLOAD_NAMES:
        return _PAYLOAD_NAMES[token_type]
    return f"'{TOKEN_TEXT[token_type]}'"


class Parser:
    """
    Recursive descent parser for the scripting language.

    Attributes:
        tokens: Tokens to parse (never modified)
        filename: Source filename for error reporting
        source_lines: Original source lines for error context
        first_line: Line number of source_lines[0]
    """

    # Keywords that close a block
    BLOCK_TERMINATORS = (
        TokenType.END,
        TokenType.ELSE,
        TokenType.UNTIL,
        TokenType.CATCH,
    )

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        first_line: int = 1,
    ):
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []
        self.first_line = first_line

        # Current position in token list
        self._pos = 0

        # Leading keyword -> parser for keyword-introduced expressions
        self._keyword_parsers: dict[TokenType, Callable[[], ASTNode]] = {
            TokenType.IF: self._parse_if,
            TokenType.FOR: self._parse_for,
            TokenType.WHILE: self._parse_while,
            TokenType.DO: self._parse_do_until,
            TokenType.CONTINUE: self._parse_continue,
            TokenType.BREAK: self._parse_break,
            TokenType.TRY: self._parse_try_catch,
            TokenType.THROW: self._parse_throw,
            TokenType.FUNCTION: self._parse_function,
            TokenType.RETURN: self._parse_return,
            TokenType.INCLUDE: self._parse_include,
            TokenType.RUN: self._parse_run,
            TokenType.READ: self._parse_read,
            TokenType.PRINT: self._parse_print,
            TokenType.LET: self._parse_assignment,
        }

    def parse(self) -> Expressions:
        """
        Parse the whole token list as a program.

        Returns:
            Expressions node with the program's top-level nodes

        Raises:
            ParseError: At the first token that does not fit the grammar, or
                where nesting exceeds the interpreter recursion limit
        """
        try:
            program = self._parse_block()
        except RecursionError:
            raise self._error("less deeply nested expression") from None

        if not self._at_end():
            raise self._error("end of line")

        logger.debug(
            "%s: parsed %d top-level expressions", self.filename, len(program.body)
        )
        return program

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    def _peek(self) -> Optional[Token]:
        """Current token, or None at end of input."""
        if self._at_end():
            return None
        return self.tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        assert not self._at_end(), "advanced past end of tokens"
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        token = self._peek()
        return token is not None and token.type in types

    def _location(self) -> Optional[SourceLocation]:
        token = self._peek()
        return token.location if token is not None else None

    def _get_source_line(self, line: int) -> Optional[str]:
        index = line - self.first_line
        if 0 <= index < len(self.source_lines):
            return self.source_lines[index]
        return None

    def _error(self, expected: str) -> ParseError:
        """Build a ParseError for the current token."""
        found = self._peek()
        source_line = self._get_source_line(found.line) if found is not None else None
        return ParseError(expected, found, source_line=source_line)

    # =========================================================================
    # Combinators
    # =========================================================================

    def _require(self, token_type: TokenType, expected: Optional[str] = None) -> Token:
        """
        Consume the current token if it has the given type.

        Raises:
            ParseError: If the current token is missing or of another type
        """
        if self._check(token_type):
            return self._advance()
        raise self._error(expected or describe_token_type(token_type))

    def _extract(self, token_type: TokenType, expected: Optional[str] = None):
        """Consume a token of the given type and return its payload."""
        return self._require(token_type, expected).value

    def _try_consume(self, token_type: TokenType, action: Callable[[], T]) -> Optional[T]:
        """If the current token matches, consume it and return action()."""
        if self._check(token_type):
            self._advance()
            return action()
        return None

    def _repeat_while(self, token_type: TokenType, action: Callable[[], T]) -> list[T]:
        """Consume-and-run while the current token matches (zero or more)."""
        results = []
        while self._check(token_type):
            self._advance()
            results.append(action())
        return results

    def _skip_endlines(self) -> None:
        while self._check(TokenType.ENDLINE):
            self._advance()

    # =========================================================================
    # Blocks
    # =========================================================================

    def _parse_block(self) -> Expressions:
        """
        Parse expressions up to a block terminator or end of input.

        Expressions are separated by one or more newlines. The terminator
        itself is left for the caller to require.
        """
        self._skip_endlines()
        location = self._location()

        body = []
        while not self._at_end() and not self._check(*self.BLOCK_TERMINATORS):
            body.append(self._parse_expression())
            if not self._check(TokenType.ENDLINE):
                break
            self._skip_endlines()

        return Expressions(tuple(body), location=location)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> ASTNode:
        """Parse any expression, including keyword-introduced forms."""
        token = self._peek()
        if token is None:
            raise self._error("expression")

        keyword_parser = self._keyword_parsers.get(token.type)
        if keyword_parser is not None:
            return keyword_parser()

        return self._parse_logical()

    def _parse_if(self) -> If:
        location = self._require(TokenType.IF).location
        condition = self._parse_expression()
        self._require(TokenType.THEN)
        true_body = self._parse_block()
        false_body = self._try_consume(TokenType.ELSE, self._parse_block)
        self._require(TokenType.END)

        return If(condition, true_body, false_body, location=location)

    def _parse_for(self) -> For:
        location = self._require(TokenType.FOR).location
        identifier = self._extract(TokenType.IDENTIFIER)
        self._require(TokenType.ASSIGN)
        start = self._parse_expression()
        self._require(TokenType.COMMA)
        end = self._parse_expression()
        step = self._try_consume(TokenType.COMMA, self._parse_expression)
        self._require(TokenType.EXECUTE)
        body = self._parse_block()
        self._require(TokenType.END)

        return For(identifier, start, end, step, body, location=location)

    def _parse_while(self) -> While:
        location = self._require(TokenType.WHILE).location
        condition = self._parse_expression()
        self._require(TokenType.EXECUTE)
        body = self._parse_block()
        self._require(TokenType.END)

        return While(condition, body, location=location)

    def _parse_do_until(self) -> DoUntil:
        location = self._require(TokenType.DO).location
        body = self._parse_block()
        self._require(TokenType.UNTIL)
        condition = self._parse_expression()
        self._require(TokenType.END)

        return DoUntil(condition, body, location=location)

    def _parse_continue(self) -> Continue:
        return Continue(location=self._require(TokenType.CONTINUE).location)

    def _parse_break(self) -> Break:
        return Break(location=self._require(TokenType.BREAK).location)

    def _parse_try_catch(self) -> TryCatch:
        location = self._require(TokenType.TRY).location
        try_body = self._parse_block()
        self._require(TokenType.CATCH)
        catch_identifier = self._extract(TokenType.IDENTIFIER)
        catch_body = self._parse_block()
        self._require(TokenType.END)

        return TryCatch(try_body, catch_identifier, catch_body, location=location)

    def _parse_throw(self) -> Throw:
        location = self._require(TokenType.THROW).location
        return Throw(self._parse_expression(), location=location)

    def _parse_function(self) -> FunctionDefinition:
        location = self._require(TokenType.FUNCTION).location
        identifier = self._extract(TokenType.IDENTIFIER, "function name")
        self._require(TokenType.LPAREN)

        parameters = []
        if self._check(TokenType.IDENTIFIER):
            parameters.append(self._extract(TokenType.IDENTIFIER))
            parameters.extend(self._repeat_while(TokenType.COMMA, self._parse_parameter))
        self._require(TokenType.RPAREN)

        body = self._parse_block()
        self._require(TokenType.END)

        return FunctionDefinition(identifier, tuple(parameters), body, location=location)

    def _parse_parameter(self) -> str:
        return self._extract(TokenType.IDENTIFIER, "parameter name")

    def _parse_return(self) -> Return:
        location = self._require(TokenType.RETURN).location
        return Return(self._parse_expression(), location=location)

    def _parse_include(self) -> Include:
        location = self._require(TokenType.INCLUDE).location
        return Include(self._extract(TokenType.STRING), location=location)

    def _parse_run(self) -> Run:
        location = self._require(TokenType.RUN).location
        return Run(self._extract(TokenType.STRING), location=location)

    def _parse_file_target(self) -> str:
        """Rest of a '<' identifier '>' redirection after the '<'."""
        name = self._extract(TokenType.IDENTIFIER, "file identifier")
        self._require(TokenType.GREATER)
        return name

    def _parse_read(self) -> Read:
        location = self._require(TokenType.READ).location
        file = self._try_consume(TokenType.LESS, self._parse_file_target)

        identifiers = [self._extract(TokenType.IDENTIFIER)]
        identifiers.extend(self._repeat_while(
            TokenType.COMMA, lambda: self._extract(TokenType.IDENTIFIER)
        ))

        return Read(file, tuple(identifiers), location=location)

    def _parse_print(self) -> Print:
        location = self._require(TokenType.PRINT).location
        file = self._try_consume(TokenType.LESS, self._parse_file_target)

        expressions = [self._parse_expression()]
        expressions.extend(self._repeat_while(TokenType.COMMA, self._parse_expression))

        return Print(file, tuple(expressions), location=location)

    def _parse_assignment(self) -> Assignment:
        location = self._require(TokenType.LET).location
        identifier = self._extract(TokenType.IDENTIFIER)
        index_access = self._repeat_while(TokenType.LBRACKET, self._parse_subscript)
        self._require(TokenType.ASSIGN)
        expression = self._parse_expression()

        return Assignment(identifier, tuple(index_access), expression, location=location)

    def _parse_subscript(self) -> ASTNode:
        """Rest of a '[' expression ']' subscript after the '['."""
        index = self._parse_expression()
        self._require(TokenType.RBRACKET)
        return index

    # =========================================================================
    # Operator Tiers
    # =========================================================================

    def _parse_logical(self) -> ASTNode:
        """Parse logical expression (and or)."""
        return self._parse_binary(
            self._parse_comparison, LOGICAL_OPERATORS, LogicalOperation
        )

    def _parse_comparison(self) -> ASTNode:
        """Parse comparison expression (= < <= > >= <>)."""
        return self._parse_binary(
            self._parse_arith, COMPARISON_OPERATORS, ComparisonOperation
        )

    def _parse_arith(self) -> ASTNode:
        """Parse additive expression (+ -)."""
        return self._parse_binary(
            self._parse_arith2, ARITHMETIC_OPERATORS, ArithmeticOperation
        )

    def _parse_arith2(self) -> ASTNode:
        """Parse multiplicative expression (* / %)."""
        return self._parse_binary(
            self._parse_factor, ARITHMETIC2_OPERATORS, ArithmeticOperation2
        )

    def _parse_binary(
        self,
        operand_parser: Callable[[], ASTNode],
        operators: dict,
        node_class: type,
    ) -> ASTNode:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Parser for the next tighter-binding tier
            operators: Map of token types to operator enum members
            node_class: AST node built for each operator application
        """
        expr = operand_parser()

        while self._check(*operators):
            op_token = self._advance()
            right = operand_parser()
            expr = node_class(
                expr, right, operators[op_token.type], location=expr.location
            )

        return expr

    def _parse_factor(self) -> ASTNode:
        """Parse a base expression followed by any number of [index] / (args)."""
        expr = self._parse_base()

        while True:
            if self._check(TokenType.LBRACKET):
                self._advance()
                index = self._parse_subscript()
                expr = IndexAccess(expr, index, location=expr.location)

            elif self._check(TokenType.LPAREN):
                self._advance()
                arguments = self._parse_arguments()
                self._require(TokenType.RPAREN)
                expr = FnCall(expr, tuple(arguments), location=expr.location)

            else:
                break

        return expr

    def _parse_arguments(self) -> list[ASTNode]:
        """Comma-separated expressions, possibly none, before a ')'."""
        if self._check(TokenType.RPAREN):
            return []
        arguments = [self._parse_expression()]
        arguments.extend(self._repeat_while(TokenType.COMMA, self._parse_expression))
        return arguments

    def _parse_base(self) -> ASTNode:
        """Parse literals, names, groups, arrays, dictionaries and signs."""
        token = self._peek()
        if token is None:
            raise self._error("expression")

        location = token.location

        if token.type == TokenType.NUMBER:
            self._advance()
            return Number(token.value, location=location)

        if token.type == TokenType.CHAR:
            self._advance()
            return Char(token.value, location=location)

        if token.type == TokenType.STRING:
            self._advance()
            return String(token.value, location=location)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(token.value, location=location)

        if token.type == TokenType.NULL:
            self._advance()
            return Null(location=location)

        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return Boolean(token.type == TokenType.TRUE, location=location)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._require(TokenType.RPAREN)
            # A group starts at its opening parenthesis
            return replace(expr, location=location)

        if token.type == TokenType.LBRACKET:
            return self._parse_array()

        if token.type == TokenType.LBRACE:
            return self._parse_dictionary()

        if token.type in UNARY_OPERATORS:
            self._advance()
            operand = self._parse_base()
            return Unary(UNARY_OPERATORS[token.type], operand, location=location)

        raise self._error("expression")

    def _parse_array(self) -> Array:
        location = self._require(TokenType.LBRACKET).location

        elements = []
        if not self._check(TokenType.RBRACKET):
            elements.append(self._parse_expression())
            elements.extend(self._repeat_while(TokenType.COMMA, self._parse_expression))
        self._require(TokenType.RBRACKET)

        return Array(tuple(elements), location=location)

    def _parse_dictionary(self) -> Dictionary:
        location = self._require(TokenType.LBRACE).location

        pairs = []
        if not self._check(TokenType.RBRACE):
            pairs.append(self._parse_pair())
            pairs.extend(self._repeat_while(TokenType.COMMA, self._parse_pair))
        self._require(TokenType.RBRACE)

        return Dictionary(tuple(pairs), location=location)

    def _parse_pair(self) -> tuple[ASTNode, ASTNode]:
        key = self._parse_expression()
        self._require(TokenType.COLON)
        value = self._parse_expression()
        return (key, value)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    tokens: list[Token],
    filename: str = "<input>",
    source_lines: Optional[list[str]] = None,
    first_line: int = 1,
) -> Expressions:
    """
    Parse a token list into a program.

    Raises:
        ParseError: At the first syntax error
    """
    return Parser(tokens, filename, source_lines, first_line).parse()


def parse_source(
    source: str,
    filename: str = "<input>",
    line_number: int = 1,
) -> Expressions:
    """
    Tokenize and parse script source.

    This is a convenience function that combines lexing and parsing.

    Raises:
        LexicalErrors: If the source has lexical errors
        ParseError: At the first syntax error
    """
    tokens = Lexer(source, filename, line_number).tokenize()
    return Parser(tokens, filename, source.splitlines(), line_number).parse()
