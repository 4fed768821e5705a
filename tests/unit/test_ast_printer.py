"""Tests for the AST debug printer."""

from ssac.ast import Return
from ssac.ast_printer import format_program
from ssac.lexer import tokenize
from ssac.parser import parse

SOURCE = """\
let x = 1 + 2;
fn main(a) {
  return x;
  println("hi", 2.5);
}
"""

EXPECTED = """\
LetStmt: x =
  BinaryExpr: +
    IntExpr: 1
    IntExpr: 2
FunctionStmt: main(a)
  BlockStmt:
    ReturnStmt:
      IdentifierExpr: x
    ExprStmt:
      CallExpr: println
        StringExpr: "hi"
        FloatExpr: 2.5"""


class TestFormatProgram:
    def test_nested_dump(self):
        assert format_program(parse(tokenize(SOURCE))) == EXPECTED

    def test_empty_program(self):
        assert format_program(()) == ""

    def test_bare_return_has_no_children(self):
        assert format_program((Return(),)) == "ReturnStmt:"
