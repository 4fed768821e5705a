"""Compile error taxonomy.

Every stage raises a ``CompileError`` subclass and never recovers.  The CLI is
the single place that catches them, prints ``diagnostic()`` to stderr and
exits with ``constants.EXIT_FAILURE``.
"""

from __future__ import annotations

from . import constants


class CompileError(Exception):
    """Base class for fatal compilation errors."""

    stage: str = ""

    def __init__(
        self,
        message: str,
        *,
        file_name: str = constants.DEFAULT_FILE_NAME,
        line: int = 0,
        column: int = 0,
        near: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.file_name = file_name
        self.line = line
        self.column = column
        self.near = near

    def _prefix(self) -> str:
        return f"[{self.stage}] {self.file_name}:{self.line}:{self.column}: "

    def diagnostic(self) -> str:
        if self.near:
            return f"{self._prefix()}{self.message} near '{self.near}'"
        return f"{self._prefix()}{self.message}"

    def __str__(self) -> str:
        return self.diagnostic()


class LexicalError(CompileError):
    """Unexpected character, unterminated string, malformed number."""

    stage = constants.STAGE_LEXER

    def diagnostic(self) -> str:
        # End of input is reported as a NUL character
        char = self.near[:1]
        code = ord(char) if char else 0
        shown = char if char else "\\0"
        return f"{self._prefix()}{self.message} with '{shown}' (ASCII: {code})"


class ParseError(CompileError):
    """Unexpected or missing token, unexpected end of input."""

    stage = constants.STAGE_PARSER


class SemanticError(CompileError):
    """Lowering failure: undefined name, bad operator, missing main."""

    stage = constants.STAGE_CODEGEN


class InternalError(CompileError):
    """An AST shape reached the generator that it has no lowering for."""

    stage = constants.STAGE_CODEGEN
