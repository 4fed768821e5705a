"""AST node types (pure data, no business logic).

Nodes are frozen dataclasses holding tuples, so a parsed program is an
immutable tree with no shared children.  ``Expr`` and ``Stmt`` are the closed
unions every consumer dispatches over.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# ── expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class IntLiteral:
    value: int
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class FloatLiteral:
    value: float
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class StringLiteral:
    value: str
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class Identifier:
    name: str
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class Binary:
    op: str
    left: Expr
    right: Expr
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class Call:
    callee: str
    args: tuple[Expr, ...] = ()
    line: int = 0
    column: int = 0


Expr = Union[IntLiteral, FloatLiteral, StringLiteral, Identifier, Binary, Call]

# ── statements ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Let:
    name: str
    value: Expr
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class Return:
    value: Expr | None = None
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class Block:
    statements: tuple[Stmt, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    params: tuple[str, ...]
    body: Block
    line: int = 0
    column: int = 0


Stmt = Union[Let, ExprStmt, Return, Block, FunctionDecl]

Program = tuple[Stmt, ...]
