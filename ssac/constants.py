"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

KEYWORDS: frozenset[str] = frozenset(
    {"let", "print", "if", "else", "while", "fn", "return"}
)

SYMBOLS: frozenset[str] = frozenset("=+-*/(){};,")

WHITESPACE: frozenset[str] = frozenset(" \t\n\r")

BINARY_PRECEDENCE: dict[str, int] = {
    "+": 10,
    "-": 10,
    "*": 20,
    "/": 20,
}
LOWEST_PRECEDENCE = 0

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# IR sigils
REG_SIGIL = "%"
GLOBAL_SIGIL = "$"
LABEL_SIGIL = "@"

WORD = "w"
LONG = "l"
DOUBLE = "d"
BYTE = "b"

FUNC_ENTRY_LABEL = "start"
AFTER_RETURN_LABEL = "dead"
STRING_DATA_PREFIX = "str"
GLOBAL_BYTES_SUFFIX = ".str"

USER_MAIN_NAME = "main"
USER_MAIN_ALIAS = "__user_main"
ENTRY_POINT_NAME = "main"

PRINTLN_INTRINSIC = "println"
PRINTF_SYMBOL = "printf"

DEFAULT_FILE_NAME = "<input>"

EXIT_FAILURE = 69

STAGE_LEXER = "LEXER"
STAGE_PARSER = "PARSER"
STAGE_CODEGEN = "CODEGEN"
