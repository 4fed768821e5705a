"""Tests for the composable API functions in ssac.api."""

import pytest

from ssac.api import (
    compile_source,
    compile_with_stats,
    dump_ast,
    dump_tokens,
    lower_source,
    parse_source,
    tokenize_source,
)
from ssac.ast import FunctionDecl, Let
from ssac.compile_types import CompileConfig
from ssac.errors import LexicalError, ParseError, SemanticError
from ssac.ir import IRModule

SIMPLE_SOURCE = "let x = 42;\nfn main() { println(x); }\n"


class TestTokenizeAndParse:
    def test_tokenize_source(self):
        tokens = tokenize_source(SIMPLE_SOURCE)
        assert tokens[0].text == "let"
        assert tokens[-1].text == "}"

    def test_parse_source(self):
        program = parse_source(SIMPLE_SOURCE)
        assert [type(s) for s in program] == [Let, FunctionDecl]

    def test_file_name_flows_into_diagnostics(self):
        with pytest.raises(ParseError) as exc_info:
            parse_source("let 1;", file_name="bad.src")
        assert exc_info.value.diagnostic().startswith("[PARSER] bad.src:1:5:")


class TestLowerSource:
    def test_returns_module(self):
        module = lower_source(SIMPLE_SOURCE)
        assert isinstance(module, IRModule)
        assert module.functions[-1].name == "main"

    def test_compile_source_returns_text(self):
        text = compile_source(SIMPLE_SOURCE)
        assert text.startswith("data $x = { l 42 }")
        assert "export function w $main() {" in text

    def test_deterministic_output(self):
        assert compile_source(SIMPLE_SOURCE) == compile_source(SIMPLE_SOURCE)

    @pytest.mark.parametrize(
        "source, error",
        [
            ("let x = 1 @ 2;", LexicalError),
            ("let x = ;", ParseError),
            ("fn main() { y; }", SemanticError),
        ],
    )
    def test_each_stage_raises_its_own_error(self, source, error):
        with pytest.raises(error):
            compile_source(source, CompileConfig(file_name="p.src"))


class TestDumps:
    def test_dump_tokens(self):
        dump = dump_tokens("let x;")
        assert dump.split("\n")[1] == '[Identifier]\t"x"\tat line 1, column 5'

    def test_dump_ast(self):
        assert dump_ast("let x = 1;") == "LetStmt: x =\n  IntExpr: 1"


class TestCompileWithStats:
    def test_stats_describe_the_run(self):
        text, stats = compile_with_stats(SIMPLE_SOURCE, CompileConfig(file_name="s.src"))
        assert text == compile_source(SIMPLE_SOURCE)
        assert stats.file_name == "s.src"
        assert stats.source_lines == 2
        assert stats.token_count == len(tokenize_source(SIMPLE_SOURCE))
        assert stats.statement_count == 2
        assert stats.function_count == 2
        assert stats.instruction_count > 0
        assert "Pipeline Statistics" in stats.report()
