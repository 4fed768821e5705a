"""Recursive-descent parser with precedence climbing for expressions.

Grammar::

    declaration := "let" IDENT "=" expression ";"
                 | "fn" IDENT "(" [IDENT ("," IDENT)*] ")" block
                 | statement
    statement   := "return" [expression] ";" | expression ";"
    block       := "{" declaration* "}"
    expression  := primary (OP expression)*      -- precedence climbing
    primary     := INT | FLOAT | STRING | IDENT | IDENT "(" args ")"
                 | "(" expression ")"
"""

from __future__ import annotations

import logging

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
from .errors import ParseError
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class Parser:
    """Consumes a token list once, front to back, with one-token lookahead."""

    def __init__(
        self, tokens: list[Token], file_name: str = constants.DEFAULT_FILE_NAME
    ):
        self._tokens = tokens
        self._file_name = file_name
        self._pos = 0

    # ── cursor ───────────────────────────────────────────────────

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _peek(self) -> Token | None:
        return None if self._at_end() else self._tokens[self._pos]

    def _previous(self) -> Token | None:
        return self._tokens[self._pos - 1] if self._pos > 0 else None

    def _advance(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise self._end_of_input()
        self._pos += 1
        return tok

    def _check_symbol(self, text: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.is_symbol(text)

    def _check_keyword(self, text: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.is_keyword(text)

    def _match_symbol(self, text: str) -> bool:
        if self._check_symbol(text):
            self._pos += 1
            return True
        return False

    def _consume(self, kind: TokenKind, expected: str, text: str = "") -> Token:
        tok = self._peek()
        if tok is None:
            raise self._end_of_input()
        if tok.kind != kind or (text and tok.text != text):
            raise self._error(f"Expected {expected}", tok)
        self._pos += 1
        return tok

    # ── errors ───────────────────────────────────────────────────

    def _error(self, message: str, tok: Token) -> ParseError:
        return ParseError(
            message,
            file_name=self._file_name,
            line=tok.line,
            column=tok.column,
            near=tok.text,
        )

    def _end_of_input(self) -> ParseError:
        last = self._previous()
        return ParseError(
            "Unexpected end of input",
            file_name=self._file_name,
            line=last.line if last else 1,
            column=last.column if last else 1,
            near=last.text if last else "",
        )

    # ── entry point ──────────────────────────────────────────────

    def parse(self) -> Program:
        statements: list[Stmt] = []
        while not self._at_end():
            statements.append(self._declaration())
        logger.info(
            "Parsed %s: %d top-level statements", self._file_name, len(statements)
        )
        return tuple(statements)

    # ── declarations & statements ────────────────────────────────

    def _declaration(self) -> Stmt:
        if self._check_keyword("let"):
            return self._let_declaration()
        if self._check_keyword("fn"):
            return self._function_declaration()
        return self._statement()

    def _let_declaration(self) -> Let:
        kw = self._consume(TokenKind.KEYWORD, "'let'", "let")
        name = self._consume(TokenKind.IDENTIFIER, "variable name after 'let'")
        self._consume(TokenKind.SYMBOL, "'=' after variable name", "=")
        value = self._expression()
        self._consume(TokenKind.SYMBOL, "';' after variable declaration", ";")
        return Let(name=name.text, value=value, line=kw.line, column=kw.column)

    def _function_declaration(self) -> FunctionDecl:
        kw = self._consume(TokenKind.KEYWORD, "'fn'", "fn")
        name = self._consume(TokenKind.IDENTIFIER, "function name after 'fn'")
        self._consume(TokenKind.SYMBOL, "'(' after function name", "(")
        params: list[str] = []
        if not self._check_symbol(")"):
            params.append(self._consume(TokenKind.IDENTIFIER, "parameter name").text)
            while self._match_symbol(","):
                params.append(
                    self._consume(TokenKind.IDENTIFIER, "parameter name").text
                )
        self._consume(TokenKind.SYMBOL, "')' after parameters", ")")
        body = self._block()
        logger.debug("Parsed function %s(%s)", name.text, ", ".join(params))
        return FunctionDecl(
            name=name.text,
            params=tuple(params),
            body=body,
            line=kw.line,
            column=kw.column,
        )

    def _block(self) -> Block:
        brace = self._consume(TokenKind.SYMBOL, "'{' to open block", "{")
        statements: list[Stmt] = []
        while not self._check_symbol("}"):
            if self._at_end():
                raise self._end_of_input()
            statements.append(self._declaration())
        self._consume(TokenKind.SYMBOL, "'}' to close block", "}")
        return Block(statements=tuple(statements), line=brace.line, column=brace.column)

    def _statement(self) -> Stmt:
        if self._check_keyword("return"):
            return self._return_statement()
        return self._expression_statement()

    def _return_statement(self) -> Return:
        kw = self._consume(TokenKind.KEYWORD, "'return'", "return")
        value = None if self._check_symbol(";") else self._expression()
        self._consume(TokenKind.SYMBOL, "';' after return value", ";")
        return Return(value=value, line=kw.line, column=kw.column)

    def _expression_statement(self) -> ExprStmt:
        start = self._peek()
        expr = self._expression()
        self._consume(TokenKind.SYMBOL, "';' after expression", ";")
        return ExprStmt(expr=expr, line=start.line, column=start.column)

    # ── expressions ──────────────────────────────────────────────

    def _binary_precedence(self) -> int:
        tok = self._peek()
        if tok is None or tok.kind != TokenKind.SYMBOL:
            return constants.LOWEST_PRECEDENCE
        return constants.BINARY_PRECEDENCE.get(tok.text, constants.LOWEST_PRECEDENCE)

    def _expression(self, min_precedence: int = constants.LOWEST_PRECEDENCE) -> Expr:
        """Precedence climbing: fold operators binding tighter than *min_precedence*."""
        left = self._null_denotation()
        while (precedence := self._binary_precedence()) > min_precedence:
            op = self._advance()
            right = self._expression(precedence)
            left = Binary(
                op=op.text, left=left, right=right, line=op.line, column=op.column
            )
        return left

    def _null_denotation(self) -> Expr:
        tok = self._advance()

        if tok.kind == TokenKind.INTEGER:
            value = int(tok.text)
            if not constants.INT64_MIN <= value <= constants.INT64_MAX:
                raise self._error("Integer literal out of range", tok)
            return IntLiteral(value=value, line=tok.line, column=tok.column)

        if tok.kind == TokenKind.FLOAT:
            return FloatLiteral(value=float(tok.text), line=tok.line, column=tok.column)

        if tok.kind == TokenKind.STRING:
            return StringLiteral(value=tok.text, line=tok.line, column=tok.column)

        if tok.kind == TokenKind.IDENTIFIER:
            if self._match_symbol("("):
                return self._finish_call(tok)
            return Identifier(name=tok.text, line=tok.line, column=tok.column)

        if tok.is_symbol("("):
            inner = self._expression()
            self._consume(TokenKind.SYMBOL, "')' after expression", ")")
            return inner

        raise self._error("Unexpected token in expression", tok)

    def _finish_call(self, callee: Token) -> Call:
        args: list[Expr] = []
        if not self._check_symbol(")"):
            args.append(self._expression())
            while self._match_symbol(","):
                args.append(self._expression())
        self._consume(TokenKind.SYMBOL, "')' after arguments", ")")
        return Call(
            callee=callee.text, args=tuple(args), line=callee.line, column=callee.column
        )


def parse(tokens: list[Token], file_name: str = constants.DEFAULT_FILE_NAME) -> Program:
    """Parse *tokens* into a tuple of top-level statements."""
    return Parser(tokens, file_name).parse()
