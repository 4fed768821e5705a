"""Composable API functions for the compile pipeline.

Each function corresponds to a CLI workflow (--tokens, --ast, default IR
output, --stats) but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging
import time

from . import constants
from .ast import Program
from .ast_printer import format_program
from .codegen import QBECodegen
from .compile_types import CompileConfig, PipelineStats
from .ir import IRModule
from .ir_stats import count_instructions, count_opcodes
from .lexer import format_tokens, tokenize
from .parser import parse
from .tokens import Token

logger = logging.getLogger(__name__)


def tokenize_source(
    source: str, file_name: str = constants.DEFAULT_FILE_NAME
) -> list[Token]:
    """Tokenize source text.

    Raises:
        LexicalError: On the first malformed lexeme.
    """
    return tokenize(source, file_name)


def parse_source(source: str, file_name: str = constants.DEFAULT_FILE_NAME) -> Program:
    """Tokenize and parse source text into a program.

    Raises:
        LexicalError: On the first malformed lexeme.
        ParseError: On the first malformed construct.
    """
    return parse(tokenize(source, file_name), file_name)


def lower_source(source: str, config: CompileConfig = CompileConfig()) -> IRModule:
    """Run the full pipeline and return the structured IR module.

    Args:
        source: The source code text.
        config: Code generation configuration; ``file_name`` is also used in
            diagnostics from the lexer and parser.

    Returns:
        An ``IRModule`` with data definitions and functions, the synthesized
        entry point last.
    """
    logger.info("Compiling %s", config.file_name)
    program = parse_source(source, config.file_name)
    return QBECodegen(config).lower(program)


def compile_source(source: str, config: CompileConfig = CompileConfig()) -> str:
    """Compile source text to IR text."""
    return str(lower_source(source, config))


def dump_tokens(source: str, file_name: str = constants.DEFAULT_FILE_NAME) -> str:
    """Tokenize and return one line per token."""
    return format_tokens(tokenize_source(source, file_name))


def dump_ast(source: str, file_name: str = constants.DEFAULT_FILE_NAME) -> str:
    """Parse and return the indented AST dump."""
    return format_program(parse_source(source, file_name))


def ir_stats(source: str, config: CompileConfig = CompileConfig()) -> dict[str, int]:
    """Compile source and return opcode frequency counts."""
    return count_opcodes(lower_source(source, config))


def compile_with_stats(
    source: str, config: CompileConfig = CompileConfig()
) -> tuple[str, PipelineStats]:
    """Compile source, timing each stage.

    Returns:
        The IR text and a ``PipelineStats`` describing the run.
    """
    stats = PipelineStats(
        file_name=config.file_name,
        source_bytes=len(source),
        source_lines=source.count("\n") + (1 if source and not source.endswith("\n") else 0),
    )
    start = time.perf_counter()

    t0 = time.perf_counter()
    tokens = tokenize(source, config.file_name)
    stats.tokenize_time = time.perf_counter() - t0
    stats.token_count = len(tokens)

    t0 = time.perf_counter()
    program = parse(tokens, config.file_name)
    stats.parse_time = time.perf_counter() - t0
    stats.statement_count = len(program)

    t0 = time.perf_counter()
    module = QBECodegen(config).lower(program)
    text = str(module)
    stats.codegen_time = time.perf_counter() - t0
    stats.data_count = len(module.data)
    stats.function_count = len(module.functions)
    stats.instruction_count = count_instructions(module)

    stats.total_time = time.perf_counter() - start
    return text, stats
