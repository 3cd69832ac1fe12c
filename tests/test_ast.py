"""
Tests for AST nodes, the visitor and the debug printer.
"""

import dataclasses

import pytest

from pseudolang.errors import SourceLocation
from pseudolang.syntax.ast import (
    NODE_TYPES,
    Array,
    ArithmeticOperation,
    ArithmeticOperator,
    ASTPrinter,
    ASTVisitor,
    Assignment,
    Dictionary,
    Expressions,
    FnCall,
    Identifier,
    If,
    Number,
    Print,
    String,
)
from pseudolang.syntax.parser import parse_source


def render(source: str) -> str:
    return ASTPrinter().print(parse_source(source))


# =============================================================================
# Nodes
# =============================================================================

class TestNodes:
    """Test node construction, equality and immutability."""

    def test_nodes_are_frozen(self):
        node = Number(1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.value = 2.0

    def test_location_is_keyword_only(self):
        loc = SourceLocation("<input>", 3, 4)
        node = Identifier("x", location=loc)
        assert node.location is loc

    def test_location_excluded_from_equality(self):
        here = Identifier("x", location=SourceLocation("a", 1, 1))
        there = Identifier("x", location=SourceLocation("b", 9, 9))
        assert here == there

    def test_location_excluded_from_repr(self):
        node = Identifier("x", location=SourceLocation("a", 1, 1))
        assert repr(node) == "Identifier(name='x')"

    def test_nodes_are_hashable(self):
        assert hash(Array((Number(1.0),))) == hash(Array((Number(1.0),)))

    def test_children_in_field_order(self):
        left, right = Identifier("a"), Number(1.0)
        node = ArithmeticOperation(left, right, ArithmeticOperator.ADD)
        assert node.children() == [left, right]

    def test_children_flatten_tuples(self):
        key, value = String("k"), Number(1.0)
        assert Dictionary(((key, value),)).children() == [key, value]

    def test_children_skip_plain_values(self):
        value = Number(2.0)
        node = Assignment("x", (), value)
        assert node.children() == [value]

    def test_expressions_iterate_body(self):
        program = Expressions((Number(1.0), Number(2.0)))
        assert list(program) == [Number(1.0), Number(2.0)]

    def test_empty_expressions(self):
        assert list(Expressions()) == []

    def test_operator_values_are_symbols(self):
        assert ArithmeticOperator.ADD.value == "+"


# =============================================================================
# Visitor
# =============================================================================

class NameCollector(ASTVisitor):
    def __init__(self):
        self.names = []

    def visit_Identifier(self, node):
        self.names.append(node.name)


class TestVisitor:
    """Test visitor dispatch and traversal."""

    @pytest.mark.parametrize("node_type", NODE_TYPES, ids=lambda t: t.__name__)
    def test_visitor_handles_every_node_type(self, node_type):
        assert hasattr(ASTVisitor, f"visit_{node_type.__name__}")

    @pytest.mark.parametrize("node_type", NODE_TYPES, ids=lambda t: t.__name__)
    def test_printer_handles_every_node_type(self, node_type):
        assert hasattr(ASTPrinter, f"visit_{node_type.__name__}")

    def test_collects_names_in_order(self):
        program = parse_source(
            "let total <- a + f(b)[c]\n"
            "if d then print e else print [g] end"
        )
        collector = NameCollector()
        collector.visit(program)
        assert collector.names == ["a", "f", "b", "c", "d", "e", "g"]

    def test_visits_dictionary_pairs(self):
        collector = NameCollector()
        collector.visit(parse_source("{k: v}"))
        assert collector.names == ["k", "v"]

    def test_visit_returns_method_result(self):
        class Counter(ASTVisitor):
            def visit_Number(self, node):
                return node.value * 2

        assert Counter().visit(Number(21.0)) == 42.0


# =============================================================================
# Printer
# =============================================================================

class TestPrinter:
    """Test the indented debug dump."""

    def test_assignment(self):
        assert render("let x <- 1 + 2") == "Expressions\n  let x <- (1 + 2)"

    def test_if_else(self):
        source = 'if x > 1 then print "big" else print "small" end'
        assert render(source) == (
            "Expressions\n"
            "  If (x > 1)\n"
            "    Then:\n"
            '      Print "big"\n'
            "    Else:\n"
            '      Print "small"'
        )

    def test_if_without_else(self):
        assert render("if a then\nend") == "Expressions\n  If a\n    Then:"

    def test_for_with_step(self):
        assert render("for i <- 10, 1, -1 execute print i end") == (
            "Expressions\n"
            "  For i <- 10, 1, -1\n"
            "    Print i"
        )

    def test_loops_and_jumps(self):
        source = "do\n  continue\n  break\nuntil n >= 3 end"
        assert render(source) == (
            "Expressions\n"
            "  Do\n"
            "    Continue\n"
            "    Break\n"
            "  Until (n >= 3)"
        )

    def test_function_and_return(self):
        source = "function add(a, b)\n  return a + b\nend"
        assert render(source) == (
            "Expressions\n"
            "  Function: add(a, b)\n"
            "    Return (a + b)"
        )

    def test_try_catch_throw(self):
        source = 'try\n  throw "bad"\ncatch e\n  print e\nend'
        assert render(source) == (
            "Expressions\n"
            "  Try\n"
            '    Throw "bad"\n'
            "  Catch e\n"
            "    Print e"
        )

    def test_modules_and_io(self):
        source = 'include "lib"\nrun "main"\nread <f> a, b\nprint <g> a, "x"'
        assert render(source) == (
            "Expressions\n"
            "  Include 'lib'\n"
            "  Run 'main'\n"
            "  Read <f> a, b\n"
            '  Print <g> a, "x"'
        )

    def test_values(self):
        source = "print [1, 2.5], {'k': null}, true, false, -x, m[0](1, 2)"
        assert render(source) == (
            "Expressions\n"
            "  Print [1, 2.5], {'k': null}, true, false, -x, m[0](1, 2)"
        )

    def test_string_escapes(self):
        printer = ASTPrinter()
        node = Print(None, (String('say "hi"\n'),))
        assert printer.print(node) == 'Print "say \\"hi\\"\\n"'

    def test_indexed_assignment(self):
        assert render("let a[i][2] <- b") == "Expressions\n  let a[i][2] <- b"

    def test_nested_blocks_indent(self):
        source = "while a execute\n  if b then\n    break\n  end\nend"
        assert render(source) == (
            "Expressions\n"
            "  While a\n"
            "    If b\n"
            "      Then:\n"
            "        Break"
        )

    def test_control_flow_as_operand(self):
        node = FnCall(Identifier("f"), (If(Identifier("c"), Expressions()),))
        assert ASTPrinter().print(node) == "f(<If>)\n  If c\n    Then:"

    def test_assigned_if_keeps_its_body(self):
        source = "let x <- if c then\n print 1\nelse\n print 2\nend"
        assert render(source) == (
            "Expressions\n"
            "  let x <- <If>\n"
            "    If c\n"
            "      Then:\n"
            "        Print 1\n"
            "      Else:\n"
            "        Print 2"
        )

    def test_operands_in_loop_header(self):
        source = "while f(function g()\n return 1\nend) execute\n break\nend"
        assert render(source) == (
            "Expressions\n"
            "  While f(<FunctionDefinition>)\n"
            "    Function: g()\n"
            "      Return 1\n"
            "    Break"
        )

    def test_printer_is_reusable(self):
        printer = ASTPrinter()
        first = printer.print(parse_source("let x <- 1"))
        assert printer.print(parse_source("let x <- 1")) == first
