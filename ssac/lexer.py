"""Tokenizer — source text to a flat token list."""

from __future__ import annotations

import logging

from . import constants
from .errors import LexicalError
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_EOF = ""


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


def _is_ident_start(c: str) -> bool:
    return _is_alpha(c) or c == "_"


def _is_ident_char(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c) or c == "_"


class Lexer:
    """Single-use scanner over one source buffer.

    Tracks a cursor plus 1-based line/column.  The first malformed lexeme
    raises ``LexicalError``; there is no resynchronisation.
    """

    def __init__(self, source: str, file_name: str = constants.DEFAULT_FILE_NAME):
        self._src = source
        self._file_name = file_name
        self._pos = 0
        self._line = 1
        self._col = 1

    # ── cursor ───────────────────────────────────────────────────

    def _peek(self) -> str:
        return self._src[self._pos] if self._pos < len(self._src) else _EOF

    def _peek_next(self) -> str:
        nxt = self._pos + 1
        return self._src[nxt] if nxt < len(self._src) else _EOF

    def _advance(self) -> str:
        c = self._peek()
        self._pos += 1
        if c == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return c

    def _eof(self) -> bool:
        return self._pos >= len(self._src)

    def _error(self, message: str) -> LexicalError:
        return LexicalError(
            message,
            file_name=self._file_name,
            line=self._line,
            column=self._col,
            near=self._peek(),
        )

    # ── entry point ──────────────────────────────────────────────

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while not self._eof():
            c = self._peek()
            if c in constants.WHITESPACE:
                self._advance()
            elif _is_digit(c) or (c == "." and _is_digit(self._peek_next())):
                tokens.append(self._make_number())
            elif _is_ident_start(c):
                tokens.append(self._make_identifier_or_keyword())
            elif c == '"':
                tokens.append(self._make_string())
            elif c in constants.SYMBOLS:
                tokens.append(self._make_symbol())
            else:
                raise self._error("Unexpected character")
        logger.info("Tokenized %s: %d tokens", self._file_name, len(tokens))
        return tokens

    # ── lexemes ──────────────────────────────────────────────────

    def _make_number(self) -> Token:
        line, col = self._line, self._col
        chars: list[str] = []
        has_dot = False

        if self._peek() == ".":
            has_dot = True
            chars.append(self._advance())
            if not _is_digit(self._peek()):
                raise self._error("Expected digit after decimal point, but got:")

        # Only the first '.' belongs to the literal.
        while _is_digit(self._peek()) or (not has_dot and self._peek() == "."):
            if self._peek() == ".":
                has_dot = True
            chars.append(self._advance())

        kind = TokenKind.FLOAT if has_dot else TokenKind.INTEGER
        return Token(kind=kind, text="".join(chars), line=line, column=col)

    def _make_identifier_or_keyword(self) -> Token:
        line, col = self._line, self._col
        chars: list[str] = []
        while _is_ident_char(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        kind = TokenKind.KEYWORD if text in constants.KEYWORDS else TokenKind.IDENTIFIER
        return Token(kind=kind, text=text, line=line, column=col)

    def _make_string(self) -> Token:
        line, col = self._line, self._col
        self._advance()  # opening quote
        chars: list[str] = []
        while not self._eof() and self._peek() != '"':
            chars.append(self._advance())
        if self._eof():
            raise self._error("Unterminated string literal")
        self._advance()  # closing quote
        return Token(kind=TokenKind.STRING, text="".join(chars), line=line, column=col)

    def _make_symbol(self) -> Token:
        line, col = self._line, self._col
        return Token(kind=TokenKind.SYMBOL, text=self._advance(), line=line, column=col)


def tokenize(source: str, file_name: str = constants.DEFAULT_FILE_NAME) -> list[Token]:
    """Convert *source* into an ordered list of tokens."""
    return Lexer(source, file_name).tokenize()


def format_tokens(tokens: list[Token]) -> str:
    """Render one token per line for debug dumps."""
    return "\n".join(str(tok) for tok in tokens)
