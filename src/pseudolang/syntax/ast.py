"""
Script Abstract Syntax Tree (AST) Definitions
=============================================

AST node types produced by the parser. Every language construct,
including control flow, is an expression node; a statement body is an
Expressions node holding its nodes in order.

Node Hierarchy
--------------
ASTNode (base)
├── Expressions - ordered block of nodes (program or body)
├── Control flow
│   ├── If, For, While, DoUntil
│   ├── Continue, Break
│   ├── TryCatch, Throw
│   └── FunctionDefinition, Return
├── Modules and I/O
│   ├── Include, Run
│   └── Read, Print
├── Operations
│   ├── Assignment
│   ├── LogicalOperation       and or
│   ├── ComparisonOperation    = < <= > >= <>
│   ├── ArithmeticOperation    + -
│   ├── ArithmeticOperation2   * / %
│   ├── Unary                  + -
│   ├── FnCall
│   └── IndexAccess
└── Values
    ├── Number, Char, String, Identifier
    ├── Null, Boolean
    └── Array, Dictionary

Design Notes
------------
- Nodes are frozen dataclasses; child sequences are tuples, so a tree
  cannot change once the parser hands it out
- Each node records its source location; locations are ignored when
  comparing nodes, so two parses of the same text compare equal even
  when they start on different lines
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional

from pseudolang.errors import SourceLocation


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location of the node's first token (keyword-only,
            excluded from equality)
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )

    def children(self) -> list["ASTNode"]:
        """Direct child nodes, in field order."""
        result = []
        for node_field in fields(self):
            if node_field.name == "location":
                continue
            _collect_nodes(getattr(self, node_field.name), result)
        return result


def _collect_nodes(value: Any, result: list[ASTNode]) -> None:
    if isinstance(value, ASTNode):
        result.append(value)
    elif isinstance(value, tuple):
        for item in value:
            _collect_nodes(item, result)


# =============================================================================
# Operators
# =============================================================================

class LogicalOperator(Enum):
    """Logical operators (lowest precedence tier)."""
    AND = "and"
    OR = "or"


class ComparisonOperator(Enum):
    """Comparison operators."""
    EQUAL = "="
    LESS = "<"
    LESS_EQUAL = "<="
    GREATER = ">"
    GREATER_EQUAL = ">="
    DIFFERENT = "<>"


class ArithmeticOperator(Enum):
    """Additive operators."""
    ADD = "+"
    SUBTRACT = "-"


class ArithmeticOperator2(Enum):
    """Multiplicative operators."""
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"


class UnaryOperator(Enum):
    """Prefix sign operators."""
    PLUS = "+"
    MINUS = "-"


# =============================================================================
# Blocks and Control Flow
# =============================================================================

@dataclass(frozen=True)
class Expressions(ASTNode):
    """Ordered, possibly empty sequence of nodes: a program or a body."""
    body: tuple[ASTNode, ...] = ()

    def __iter__(self):
        return iter(self.body)


@dataclass(frozen=True)
class If(ASTNode):
    """if condition then true_body (else false_body)? end"""
    condition: ASTNode
    true_body: Expressions
    false_body: Optional[Expressions] = None


@dataclass(frozen=True)
class For(ASTNode):
    """for identifier <- start, end (, step)? execute body end"""
    identifier: str
    start: ASTNode
    end: ASTNode
    step: Optional[ASTNode]
    body: Expressions


@dataclass(frozen=True)
class While(ASTNode):
    """while condition execute body end"""
    condition: ASTNode
    body: Expressions


@dataclass(frozen=True)
class DoUntil(ASTNode):
    """do body until condition end"""
    condition: ASTNode
    body: Expressions


@dataclass(frozen=True)
class Continue(ASTNode):
    pass


@dataclass(frozen=True)
class Break(ASTNode):
    pass


@dataclass(frozen=True)
class TryCatch(ASTNode):
    """try try_body catch catch_identifier catch_body end"""
    try_body: Expressions
    catch_identifier: str
    catch_body: Expressions


@dataclass(frozen=True)
class Throw(ASTNode):
    expression: ASTNode


@dataclass(frozen=True)
class FunctionDefinition(ASTNode):
    """function identifier(parameters) body end"""
    identifier: str
    parameters: tuple[str, ...]
    body: Expressions


@dataclass(frozen=True)
class Return(ASTNode):
    expression: ASTNode


# =============================================================================
# Modules and I/O
# =============================================================================

@dataclass(frozen=True)
class Include(ASTNode):
    """include "path": the path is only recorded, never resolved."""
    path: str


@dataclass(frozen=True)
class Run(ASTNode):
    """run "path": the path is only recorded, never resolved."""
    path: str


@dataclass(frozen=True)
class Read(ASTNode):
    """
    read (<file>)? identifier, ...

    Attributes:
        file: Name of the variable holding the input file, None for stdin
        identifiers: Variables to read into, in order
    """
    file: Optional[str]
    identifiers: tuple[str, ...]


@dataclass(frozen=True)
class Print(ASTNode):
    """
    print (<file>)? expression, ...

    Attributes:
        file: Name of the variable holding the output file, None for stdout
        expressions: Values to print, in order
    """
    file: Optional[str]
    expressions: tuple[ASTNode, ...]


# =============================================================================
# Operations
# =============================================================================

@dataclass(frozen=True)
class Assignment(ASTNode):
    """
    let identifier[index]... <- expression

    Attributes:
        identifier: Variable being assigned
        index_access: Subscripts applied to the variable, outermost first
        expression: Assigned value
    """
    identifier: str
    index_access: tuple[ASTNode, ...]
    expression: ASTNode


@dataclass(frozen=True)
class LogicalOperation(ASTNode):
    left: ASTNode
    right: ASTNode
    operator: LogicalOperator


@dataclass(frozen=True)
class ComparisonOperation(ASTNode):
    left: ASTNode
    right: ASTNode
    operator: ComparisonOperator


@dataclass(frozen=True)
class ArithmeticOperation(ASTNode):
    left: ASTNode
    right: ASTNode
    operator: ArithmeticOperator


@dataclass(frozen=True)
class ArithmeticOperation2(ASTNode):
    left: ASTNode
    right: ASTNode
    operator: ArithmeticOperator2


@dataclass(frozen=True)
class Unary(ASTNode):
    operator: UnaryOperator
    operand: ASTNode


@dataclass(frozen=True)
class FnCall(ASTNode):
    callee: ASTNode
    arguments: tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class IndexAccess(ASTNode):
    base: ASTNode
    index: ASTNode


# =============================================================================
# Values
# =============================================================================

@dataclass(frozen=True)
class Number(ASTNode):
    value: float


@dataclass(frozen=True)
class Char(ASTNode):
    value: str


@dataclass(frozen=True)
class String(ASTNode):
    value: str


@dataclass(frozen=True)
class Identifier(ASTNode):
    name: str


@dataclass(frozen=True)
class Null(ASTNode):
    pass


@dataclass(frozen=True)
class Boolean(ASTNode):
    value: bool


@dataclass(frozen=True)
class Array(ASTNode):
    elements: tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class Dictionary(ASTNode):
    """{key: value, ...}, pairs kept in source order."""
    pairs: tuple[tuple[ASTNode, ASTNode], ...] = ()


# Every concrete node type; visitors are expected to handle all of them
NODE_TYPES: tuple[type[ASTNode], ...] = (
    Expressions, If, For, While, DoUntil, Continue, Break, TryCatch, Throw,
    FunctionDefinition, Return, Include, Run, Read, Print, Assignment,
    LogicalOperation, ComparisonOperation, ArithmeticOperation,
    ArithmeticOperation2, Unary, FnCall, IndexAccess, Number, Char, String,
    Identifier, Null, Boolean, Array, Dictionary,
)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; every other node falls through to generic_visit, which walks
    the node's children.

    Usage:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = set()

            def visit_Identifier(self, node):
                self.names.add(node.name)

        collector = NameCollector()
        collector.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """Visit a node by dispatching to visit_<ClassName>."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all children of the node."""
        for child in node.children():
            self.visit(child)

    def visit_Expressions(self, node: Expressions): return self.generic_visit(node)
    def visit_If(self, node: If): return self.generic_visit(node)
    def visit_For(self, node: For): return self.generic_visit(node)
    def visit_While(self, node: While): return self.generic_visit(node)
    def visit_DoUntil(self, node: DoUntil): return self.generic_visit(node)
    def visit_Continue(self, node: Continue): return self.generic_visit(node)
    def visit_Break(self, node: Break): return self.generic_visit(node)
    def visit_TryCatch(self, node: TryCatch): return self.generic_visit(node)
    def visit_Throw(self, node: Throw): return self.generic_visit(node)
    def visit_FunctionDefinition(self, node: FunctionDefinition): return self.generic_visit(node)
    def visit_Return(self, node: Return): return self.generic_visit(node)
    def visit_Include(self, node: Include): return self.generic_visit(node)
    def visit_Run(self, node: Run): return self.generic_visit(node)
    def visit_Read(self, node: Read): return self.generic_visit(node)
    def visit_Print(self, node: Print): return self.generic_visit(node)
    def visit_Assignment(self, node: Assignment): return self.generic_visit(node)
    def visit_LogicalOperation(self, node: LogicalOperation): return self.generic_visit(node)
    def visit_ComparisonOperation(self, node: ComparisonOperation): return self.generic_visit(node)
    def visit_ArithmeticOperation(self, node: ArithmeticOperation): return self.generic_visit(node)
    def visit_ArithmeticOperation2(self, node: ArithmeticOperation2): return self.generic_visit(node)
    def visit_Unary(self, node: Unary): return self.generic_visit(node)
    def visit_FnCall(self, node: FnCall): return self.generic_visit(node)
    def visit_IndexAccess(self, node: IndexAccess): return self.generic_visit(node)
    def visit_Number(self, node: Number): return self.generic_visit(node)
    def visit_Char(self, node: Char): return self.generic_visit(node)
    def visit_String(self, node: String): return self.generic_visit(node)
    def visit_Identifier(self, node: Identifier): return self.generic_visit(node)
    def visit_Null(self, node: Null): return self.generic_visit(node)
    def visit_Boolean(self, node: Boolean): return self.generic_visit(node)
    def visit_Array(self, node: Array): return self.generic_visit(node)
    def visit_Dictionary(self, node: Dictionary): return self.generic_visit(node)


# =============================================================================
# AST Printer (for debugging)
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Blocks and control flow are printed one node per line with two-space
    indentation; operands are printed inline. A control-flow node used as
    an operand shows as <If>, <While> and so on, and is printed in full
    on the lines below the line that uses it.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0
        self._nested: list[ASTNode] = []

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self._nested = []
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

        # Control-flow operands collected while building text
        nested, self._nested = self._nested, []
        if nested:
            self._indent()
            for node in nested:
                self.visit(node)
            self._dedent()

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _block(self, label: str, body: Expressions) -> None:
        self._emit(label)
        self._indent()
        for node in body:
            self.visit(node)
        self._dedent()

    def visit_Expressions(self, node: Expressions):
        self._block("Expressions", node)

    def visit_If(self, node: If):
        self._emit(f"If {self._expr_str(node.condition)}")
        self._indent()
        self._block("Then:", node.true_body)
        if node.false_body is not None:
            self._block("Else:", node.false_body)
        self._dedent()

    def visit_For(self, node: For):
        header = (
            f"For {node.identifier} <- {self._expr_str(node.start)}, "
            f"{self._expr_str(node.end)}"
        )
        if node.step is not None:
            header += f", {self._expr_str(node.step)}"
        self._block(header, node.body)

    def visit_While(self, node: While):
        self._block(f"While {self._expr_str(node.condition)}", node.body)

    def visit_DoUntil(self, node: DoUntil):
        self._block("Do", node.body)
        self._emit(f"Until {self._expr_str(node.condition)}")

    def visit_Continue(self, node: Continue):
        self._emit("Continue")

    def visit_Break(self, node: Break):
        self._emit("Break")

    def visit_TryCatch(self, node: TryCatch):
        self._block("Try", node.try_body)
        self._block(f"Catch {node.catch_identifier}", node.catch_body)

    def visit_Throw(self, node: Throw):
        self._emit(f"Throw {self._expr_str(node.expression)}")

    def visit_FunctionDefinition(self, node: FunctionDefinition):
        params = ", ".join(node.parameters)
        self._block(f"Function: {node.identifier}({params})", node.body)

    def visit_Return(self, node: Return):
        self._emit(f"Return {self._expr_str(node.expression)}")

    def visit_Include(self, node: Include):
        self._emit(f"Include {node.path!r}")

    def visit_Run(self, node: Run):
        self._emit(f"Run {node.path!r}")

    def visit_Read(self, node: Read):
        target = f" <{node.file}>" if node.file else ""
        self._emit(f"Read{target} {', '.join(node.identifiers)}")

    def visit_Print(self, node: Print):
        target = f" <{node.file}>" if node.file else ""
        values = ", ".join(self._expr_str(e) for e in node.expressions)
        self._emit(f"Print{target} {values}")

    def generic_visit(self, node: ASTNode) -> None:
        self._emit(self._expr_str(node))

    def visit_Assignment(self, node: Assignment): return self.generic_visit(node)
    def visit_LogicalOperation(self, node: LogicalOperation): return self.generic_visit(node)
    def visit_ComparisonOperation(self, node: ComparisonOperation): return self.generic_visit(node)
    def visit_ArithmeticOperation(self, node: ArithmeticOperation): return self.generic_visit(node)
    def visit_ArithmeticOperation2(self, node: ArithmeticOperation2): return self.generic_visit(node)
    def visit_Unary(self, node: Unary): return self.generic_visit(node)
    def visit_FnCall(self, node: FnCall): return self.generic_visit(node)
    def visit_IndexAccess(self, node: IndexAccess): return self.generic_visit(node)
    def visit_Number(self, node: Number): return self.generic_visit(node)
    def visit_Char(self, node: Char): return self.generic_visit(node)
    def visit_String(self, node: String): return self.generic_visit(node)
    def visit_Identifier(self, node: Identifier): return self.generic_visit(node)
    def visit_Null(self, node: Null): return self.generic_visit(node)
    def visit_Boolean(self, node: Boolean): return self.generic_visit(node)
    def visit_Array(self, node: Array): return self.generic_visit(node)
    def visit_Dictionary(self, node: Dictionary): return self.generic_visit(node)

    def _expr_str(self, expr: ASTNode) -> str:
        """Convert an operand to its inline string form."""
        if isinstance(expr, Number):
            return f"{expr.value:g}"
        if isinstance(expr, Char):
            return repr(expr.value)
        if isinstance(expr, String):
            escaped = expr.value.encode("unicode_escape").decode("ascii")
            return '"' + escaped.replace('"', '\\"') + '"'
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, Null):
            return "null"
        if isinstance(expr, Boolean):
            return "true" if expr.value else "false"
        if isinstance(expr, Array):
            return "[" + ", ".join(self._expr_str(e) for e in expr.elements) + "]"
        if isinstance(expr, Dictionary):
            pairs = ", ".join(
                f"{self._expr_str(k)}: {self._expr_str(v)}" for k, v in expr.pairs
            )
            return "{" + pairs + "}"
        if isinstance(expr, Unary):
            return f"{expr.operator.value}{self._expr_str(expr.operand)}"
        if isinstance(
            expr,
            (LogicalOperation, ComparisonOperation, ArithmeticOperation, ArithmeticOperation2),
        ):
            return (
                f"({self._expr_str(expr.left)} {expr.operator.value} "
                f"{self._expr_str(expr.right)})"
            )
        if isinstance(expr, FnCall):
            args = ", ".join(self._expr_str(a) for a in expr.arguments)
            return f"{self._expr_str(expr.callee)}({args})"
        if isinstance(expr, IndexAccess):
            return f"{self._expr_str(expr.base)}[{self._expr_str(expr.index)}]"
        if isinstance(expr, Assignment):
            indices = "".join(f"[{self._expr_str(i)}]" for i in expr.index_access)
            return f"let {expr.identifier}{indices} <- {self._expr_str(expr.expression)}"
        self._nested.append(expr)
        return f"<{expr.__class__.__name__}>"
