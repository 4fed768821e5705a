"""Token data types."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class TokenKind(str, Enum):
    INTEGER = "Integer"
    FLOAT = "Float"
    IDENTIFIER = "Identifier"
    STRING = "String"
    SYMBOL = "Symbol"
    KEYWORD = "Keyword"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    line: int
    column: int

    def is_symbol(self, text: str) -> bool:
        return self.kind == TokenKind.SYMBOL and self.text == text

    def is_keyword(self, text: str) -> bool:
        return self.kind == TokenKind.KEYWORD and self.text == text

    def __str__(self) -> str:
        return (
            f"[{self.kind.value}]\t\"{self.text}\""
            f"\tat line {self.line}, column {self.column}"
        )
