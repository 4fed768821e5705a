"""Code generator — AST to QBE-style SSA IR.

Lowering runs in two phases over an already-parsed program:

1. Globals: every top-level ``let`` becomes a data definition.  Literal
   initializers are emitted statically; anything else gets a zero placeholder
   and is evaluated later, inside the synthesized entry point.  Function
   names are recorded in the same pass; globals, functions and the entry
   point share one symbol namespace.
2. Functions: every top-level ``fn`` becomes an IR function with its own
   locals table.  The user's ``main`` is renamed so a public ``main`` can be
   synthesized that initializes deferred globals and then calls it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from . import constants
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
from .compile_types import CompileConfig
from .errors import InternalError, SemanticError
from .ir import (
    BINARY_OPCODES,
    CallArg,
    DataDef,
    IRFunction,
    IRInstruction,
    IRModule,
    Opcode,
)

logger = logging.getLogger(__name__)

# println picks a specifier from the argument's syntactic kind, not its type.
_FORMAT_SPECIFIERS: dict[type, str] = {
    IntLiteral: "%d",
    Identifier: "%d",
    FloatLiteral: "%f",
    StringLiteral: "%s",
}
_FALLBACK_SPECIFIER = "%s"


@dataclass
class GlobalSymbol:
    name: str
    label: str
    ty: str = constants.LONG
    deferred: Expr | None = None


def _global_ref(label: str) -> str:
    return f"{constants.GLOBAL_SIGIL}{label}"


def _float_immediate(value: float) -> str:
    return f"{constants.DOUBLE}_{value!r}"


def _symbol_name(name: str) -> str:
    """Map a source function name to its IR symbol; frees up ``main``."""
    return constants.USER_MAIN_ALIAS if name == constants.USER_MAIN_NAME else name


def _is_plain_byte(ch: str) -> bool:
    """True for characters that may sit unescaped inside a quoted data run."""
    return ch >= "\x80" or (" " <= ch <= "~" and ch not in "\"\\")


def _string_items(content: str) -> list[tuple[str, str]]:
    """Render *content* as NUL-terminated byte items.

    Printable runs become quoted strings; quotes, backslashes and control
    characters are emitted as numeric bytes so the assembler never has to
    interpret an escape sequence.
    """
    items: list[tuple[str, str]] = []
    run: list[str] = []
    for ch in content:
        if _is_plain_byte(ch):
            run.append(ch)
            continue
        if run:
            items.append((constants.BYTE, '"' + "".join(run) + '"'))
            run = []
        items.append((constants.BYTE, str(ord(ch))))
    if run:
        items.append((constants.BYTE, '"' + "".join(run) + '"'))
    items.append((constants.BYTE, "0"))
    return items


class QBECodegen:
    """Lowers a parsed program into an ``IRModule``."""

    def __init__(self, config: CompileConfig = CompileConfig()):
        self._config = config
        self._reg_counter: int = 0
        self._label_counter: int = 0
        self._string_counter: int = 0
        self._instructions: list[IRInstruction] = []
        self._data: list[DataDef] = []
        self._strings: dict[str, str] = {}
        self._reg_types: dict[str, str] = {}
        self._locals: dict[str, str] = {}
        self._globals: dict[str, GlobalSymbol] = {}
        self._functions: set[str] = set()
        self._STMT_DISPATCH: dict[type, Callable[[Any], None]] = {
            Let: self._lower_let,
            ExprStmt: self._lower_expr_stmt,
            Return: self._lower_return,
            Block: self._lower_block,
        }
        self._EXPR_DISPATCH: dict[type, Callable[[Any], str | None]] = {
            IntLiteral: self._lower_int,
            FloatLiteral: self._lower_float,
            StringLiteral: self._lower_string,
            Identifier: self._lower_identifier,
            Binary: self._lower_binary,
            Call: self._lower_call,
        }

    # ── helpers ──────────────────────────────────────────────────

    def _fresh_reg(self) -> str:
        r = f"{constants.REG_SIGIL}{self._reg_counter}"
        self._reg_counter += 1
        return r

    def _fresh_label(self, prefix: str) -> str:
        lbl = f"{prefix}_{self._label_counter}"
        self._label_counter += 1
        return lbl

    def _emit(
        self,
        opcode: Opcode,
        *,
        result_reg: str = "",
        ty: str = constants.LONG,
        operands: list[str] = [],
        label: str = "",
        args: list[CallArg] = [],
        variadic_from: int | None = None,
    ) -> IRInstruction:
        # Nothing may follow a ret inside the same block.
        if (
            opcode != Opcode.LABEL
            and self._instructions
            and self._instructions[-1].is_terminator
        ):
            self._emit(
                Opcode.LABEL, label=self._fresh_label(constants.AFTER_RETURN_LABEL)
            )
        inst = IRInstruction(
            opcode=opcode,
            result_reg=result_reg or None,
            ty=ty,
            operands=list(operands),
            label=label or None,
            args=list(args),
            variadic_from=variadic_from,
        )
        if result_reg:
            self._reg_types[result_reg] = ty
        self._instructions.append(inst)
        return inst

    def _value_type(self, ref: str) -> str:
        return self._reg_types.get(ref, constants.LONG)

    def _convert(self, ref: str, ty: str) -> str:
        """Return *ref* as a value of class *ty*, converting between l and d."""
        if self._value_type(ref) == ty:
            return ref
        opcode = Opcode.SLTOF if ty == constants.DOUBLE else Opcode.DTOSI
        reg = self._fresh_reg()
        self._emit(opcode, result_reg=reg, ty=ty, operands=[ref])
        return reg

    def _intern_string(self, content: str) -> str:
        """Return the data label holding *content*, emitting it on first use."""
        label = self._strings.get(content)
        if label is None:
            label = f"{constants.STRING_DATA_PREFIX}.{self._string_counter}"
            self._string_counter += 1
            self._data.append(DataDef(label=label, items=_string_items(content)))
            self._strings[content] = label
        return _global_ref(label)

    def _semantic_error(self, message: str, node: Any, near: str = "") -> SemanticError:
        return SemanticError(
            message,
            file_name=self._config.file_name,
            line=getattr(node, "line", 0),
            column=getattr(node, "column", 0),
            near=near,
        )

    def _internal_error(self, node: Any) -> InternalError:
        return InternalError(
            f"Cannot lower {type(node).__name__} here",
            file_name=self._config.file_name,
            line=getattr(node, "line", 0),
            column=getattr(node, "column", 0),
            near=getattr(node, "name", ""),
        )

    # ── entry point ──────────────────────────────────────────────

    def lower(self, program: Program) -> IRModule:
        self._reg_counter = 0
        self._label_counter = 0
        self._string_counter = 0
        self._instructions = []
        self._data = []
        self._strings = {}
        self._reg_types = {}
        self._locals = {}
        self._globals = {}
        self._functions = set()

        self._declare_top_level(program)

        functions: list[IRFunction] = []
        found_main = False
        for stmt in program:
            if isinstance(stmt, FunctionDecl):
                found_main = found_main or stmt.name == constants.USER_MAIN_NAME
                functions.append(self._lower_function(stmt))

        if not found_main:
            raise SemanticError(
                f"Mandatory function '{constants.USER_MAIN_NAME}' not found",
                file_name=self._config.file_name,
                near=constants.USER_MAIN_NAME,
            )

        functions.append(self._synthesize_entry_point())
        logger.info(
            "Lowered %s: %d data definitions, %d functions",
            self._config.file_name,
            len(self._data),
            len(functions),
        )
        return IRModule(data=self._data, functions=functions)

    # ── phase 1: globals and function names ──────────────────────

    def _reserved_symbols(self) -> set[str]:
        return {constants.USER_MAIN_ALIAS, self._config.printf_symbol}

    def _declare_top_level(self, program: Program) -> None:
        for stmt in program:
            if isinstance(stmt, Let):
                self._declare_global(stmt)
            elif isinstance(stmt, FunctionDecl):
                self._declare_function(stmt)
            else:
                # rejected rather than skipped, so no statement is dropped silently
                raise self._semantic_error(
                    "Only 'let' and 'fn' are allowed at top level", stmt
                )

    def _declare_function(self, fn: FunctionDecl) -> None:
        if fn.name in self._functions:
            raise self._semantic_error("Duplicate function", fn, near=fn.name)
        if fn.name in self._globals:
            raise self._semantic_error(
                "Function conflicts with global", fn, near=fn.name
            )
        if fn.name in self._reserved_symbols():
            raise self._semantic_error("Reserved symbol name", fn, near=fn.name)
        seen: set[str] = set()
        for param in fn.params:
            if param in seen:
                raise self._semantic_error("Duplicate parameter", fn, near=param)
            seen.add(param)
        self._functions.add(fn.name)

    def _declare_global(self, stmt: Let) -> None:
        if stmt.name in self._globals:
            raise self._semantic_error("Duplicate global", stmt, near=stmt.name)
        if stmt.name in self._functions:
            raise self._semantic_error(
                "Global conflicts with function", stmt, near=stmt.name
            )
        # globals share the $ namespace with functions, including the entry point
        if stmt.name in self._reserved_symbols() | {constants.ENTRY_POINT_NAME}:
            raise self._semantic_error("Reserved symbol name", stmt, near=stmt.name)

        symbol = GlobalSymbol(name=stmt.name, label=_global_ref(stmt.name))
        value = stmt.value
        if isinstance(value, IntLiteral):
            items = [(constants.LONG, str(value.value))]
        elif isinstance(value, FloatLiteral):
            symbol.ty = constants.DOUBLE
            items = [(constants.DOUBLE, _float_immediate(value.value))]
        elif isinstance(value, StringLiteral):
            bytes_label = f"{stmt.name}{constants.GLOBAL_BYTES_SUFFIX}"
            self._data.append(
                DataDef(label=bytes_label, items=_string_items(value.value))
            )
            items = [(constants.LONG, _global_ref(bytes_label))]
        else:
            symbol.deferred = value
            items = [(constants.LONG, "0")]

        self._data.append(DataDef(label=stmt.name, items=items))
        self._globals[stmt.name] = symbol
        logger.debug(
            "Global %s (%s)", stmt.name, "deferred" if symbol.deferred else "static"
        )

    # ── phase 2: functions ───────────────────────────────────────

    def _lower_function(self, fn: FunctionDecl) -> IRFunction:
        self._locals = {}
        self._instructions = []
        params: list[str] = []
        for name in fn.params:
            reg = f"{constants.REG_SIGIL}{name}"
            self._locals[name] = reg
            params.append(reg)

        self._emit(Opcode.LABEL, label=self._fresh_label(constants.FUNC_ENTRY_LABEL))
        for stmt in fn.body.statements:
            self._lower_stmt(stmt)
        if not self._instructions[-1].is_terminator:
            self._emit(Opcode.RET, operands=["0"])

        logger.debug(
            "Lowered function %s: %d instructions", fn.name, len(self._instructions)
        )
        return IRFunction(
            name=_symbol_name(fn.name),
            params=params,
            instructions=self._instructions,
        )

    def _synthesize_entry_point(self) -> IRFunction:
        self._locals = {}
        self._instructions = []
        self._emit(Opcode.LABEL, label=self._fresh_label(constants.FUNC_ENTRY_LABEL))
        for symbol in self._globals.values():
            if symbol.deferred is None:
                continue
            value = self._convert(self._lower_value(symbol.deferred), symbol.ty)
            self._emit(Opcode.STORE, ty=symbol.ty, operands=[value, symbol.label])

        result = self._fresh_reg()
        self._emit(
            Opcode.CALL,
            result_reg=result,
            ty=constants.WORD,
            operands=[_global_ref(constants.USER_MAIN_ALIAS)],
        )
        self._emit(Opcode.RET, operands=[result])
        return IRFunction(
            name=constants.ENTRY_POINT_NAME,
            return_type=constants.WORD,
            exported=True,
            instructions=self._instructions,
        )

    # ── statements ───────────────────────────────────────────────

    def _lower_stmt(self, stmt: Stmt) -> None:
        handler = self._STMT_DISPATCH.get(type(stmt))
        if handler is None:
            raise self._internal_error(stmt)
        handler(stmt)

    def _lower_let(self, stmt: Let) -> None:
        value = self._lower_value(stmt.value)
        symbol = self._globals.get(stmt.name)
        if symbol is not None:
            value = self._convert(value, symbol.ty)
            self._emit(Opcode.STORE, ty=symbol.ty, operands=[value, symbol.label])
            return
        reg = self._fresh_reg()
        self._locals[stmt.name] = reg
        self._emit(
            Opcode.COPY, result_reg=reg, ty=self._value_type(value), operands=[value]
        )

    def _lower_expr_stmt(self, stmt: ExprStmt) -> None:
        self._lower_expr(stmt.expr)

    def _lower_return(self, stmt: Return) -> None:
        value = self._lower_value(stmt.value) if stmt.value is not None else None
        if self._config.return_values and value is not None:
            # every function is declared to return l
            self._emit(Opcode.RET, operands=[self._convert(value, constants.LONG)])
        else:
            self._emit(Opcode.RET, operands=["0"])

    def _lower_block(self, stmt: Block) -> None:
        for child in stmt.statements:
            self._lower_stmt(child)

    # ── expressions → register ───────────────────────────────────

    def _lower_expr(self, expr: Expr) -> str | None:
        """Lower an expression; return the register holding its value, if any."""
        handler = self._EXPR_DISPATCH.get(type(expr))
        if handler is None:
            raise self._internal_error(expr)
        return handler(expr)

    def _lower_value(self, expr: Expr) -> str:
        ref = self._lower_expr(expr)
        if ref is None:
            raise self._semantic_error(
                "Expression does not produce a value",
                expr,
                near=getattr(expr, "callee", ""),
            )
        return ref

    def _lower_int(self, expr: IntLiteral) -> str:
        reg = self._fresh_reg()
        self._emit(Opcode.COPY, result_reg=reg, operands=[str(expr.value)])
        return reg

    def _lower_float(self, expr: FloatLiteral) -> str:
        reg = self._fresh_reg()
        self._emit(
            Opcode.COPY,
            result_reg=reg,
            ty=constants.DOUBLE,
            operands=[_float_immediate(expr.value)],
        )
        return reg

    def _lower_string(self, expr: StringLiteral) -> str:
        reg = self._fresh_reg()
        self._emit(Opcode.COPY, result_reg=reg, operands=[self._intern_string(expr.value)])
        return reg

    def _lower_identifier(self, expr: Identifier) -> str:
        if expr.name in self._locals:
            return self._locals[expr.name]
        symbol = self._globals.get(expr.name)
        if symbol is None:
            raise self._semantic_error("Undefined variable", expr, near=expr.name)
        reg = self._fresh_reg()
        self._emit(Opcode.LOAD, result_reg=reg, ty=symbol.ty, operands=[symbol.label])
        return reg

    def _lower_binary(self, expr: Binary) -> str:
        opcode = BINARY_OPCODES.get(expr.op)
        if opcode is None:
            raise self._semantic_error(
                "Unsupported binary operator", expr, near=expr.op
            )
        lhs = self._lower_value(expr.left)
        rhs = self._lower_value(expr.right)
        reg = self._fresh_reg()
        self._emit(opcode, result_reg=reg, operands=[lhs, rhs])
        return reg

    def _lower_call(self, expr: Call) -> str | None:
        if expr.callee == constants.PRINTLN_INTRINSIC:
            self._lower_println(expr)
            return None
        arg_regs = [self._lower_value(arg) for arg in expr.args]
        reg = self._fresh_reg()
        self._emit(
            Opcode.CALL,
            result_reg=reg,
            operands=[_global_ref(_symbol_name(expr.callee))],
            args=[CallArg(ty=self._value_type(r), value=r) for r in arg_regs],
        )
        return reg

    def _lower_println(self, expr: Call) -> None:
        specifiers = [
            _FORMAT_SPECIFIERS.get(type(arg), _FALLBACK_SPECIFIER) for arg in expr.args
        ]
        fmt = self._intern_string(" ".join(specifiers) + "\n")
        arg_regs = [self._lower_value(arg) for arg in expr.args]
        self._emit(
            Opcode.CALL,
            operands=[_global_ref(self._config.printf_symbol)],
            args=[CallArg(ty=constants.LONG, value=fmt)]
            + [CallArg(ty=self._value_type(r), value=r) for r in arg_regs],
            variadic_from=1,
        )


def generate(program: Program, config: CompileConfig = CompileConfig()) -> str:
    """Lower *program* and render the IR text."""
    return str(QBECodegen(config).lower(program))
