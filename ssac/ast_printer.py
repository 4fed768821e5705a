"""Indented text dump of a parsed program, for debugging."""

from __future__ import annotations

from .ast import (
    Binary,
    Block,
    Call,
    Expr,
    ExprStmt,
    FloatLiteral,
    FunctionDecl,
    Identifier,
    IntLiteral,
    Let,
    Program,
    Return,
    Stmt,
    StringLiteral,
)

_INDENT = "  "


def _format_expr(expr: Expr, depth: int, lines: list[str]) -> None:
    pad = _INDENT * depth
    match expr:
        case IntLiteral(value=value):
            lines.append(f"{pad}IntExpr: {value}")
        case FloatLiteral(value=value):
            lines.append(f"{pad}FloatExpr: {value}")
        case StringLiteral(value=value):
            lines.append(f'{pad}StringExpr: "{value}"')
        case Identifier(name=name):
            lines.append(f"{pad}IdentifierExpr: {name}")
        case Binary(op=op, left=left, right=right):
            lines.append(f"{pad}BinaryExpr: {op}")
            _format_expr(left, depth + 1, lines)
            _format_expr(right, depth + 1, lines)
        case Call(callee=callee, args=args):
            lines.append(f"{pad}CallExpr: {callee}")
            for arg in args:
                _format_expr(arg, depth + 1, lines)
        case _:
            lines.append(f"{pad}Unknown Expr")


def _format_stmt(stmt: Stmt, depth: int, lines: list[str]) -> None:
    pad = _INDENT * depth
    match stmt:
        case Let(name=name, value=value):
            lines.append(f"{pad}LetStmt: {name} =")
            _format_expr(value, depth + 1, lines)
        case ExprStmt(expr=expr):
            lines.append(f"{pad}ExprStmt:")
            _format_expr(expr, depth + 1, lines)
        case Return(value=value):
            lines.append(f"{pad}ReturnStmt:")
            if value is not None:
                _format_expr(value, depth + 1, lines)
        case Block(statements=statements):
            lines.append(f"{pad}BlockStmt:")
            for child in statements:
                _format_stmt(child, depth + 1, lines)
        case FunctionDecl(name=name, params=params, body=body):
            lines.append(f"{pad}FunctionStmt: {name}({', '.join(params)})")
            _format_stmt(body, depth + 1, lines)
        case _:
            lines.append(f"{pad}Unknown Stmt")


def format_program(program: Program) -> str:
    lines: list[str] = []
    for stmt in program:
        _format_stmt(stmt, 0, lines)
    return "\n".join(lines)
