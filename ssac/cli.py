"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import constants
from .api import compile_with_stats, dump_ast, dump_tokens
from .compile_types import CompileConfig
from .errors import CompileError

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssac", description="Compile source to QBE-style SSA IR"
    )
    parser.add_argument("file", help="Source file to compile")
    parser.add_argument("--output", "-o", default=None,
                        help="Write IR to this file instead of stdout")
    parser.add_argument("--tokens", action="store_true",
                        help="Only print the token stream")
    parser.add_argument("--ast", action="store_true",
                        help="Only print the parsed AST")
    parser.add_argument("--stats", action="store_true",
                        help="Print pipeline statistics to stderr")
    parser.add_argument("--return-values", action="store_true",
                        help="Lower `return expr;` to return the computed value")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log pipeline progress to stderr")
    return parser


def _read_source(path: Path) -> str:
    # latin-1 maps every byte to one character, keeping the pipeline byte-oriented
    return path.read_bytes().decode("latin-1")


def _write_output(text: str, output: str | None = None) -> None:
    # inverse of _read_source: each character goes back out as the byte it came from
    data = text.encode("latin-1")
    if output:
        Path(output).write_bytes(data)
        logger.info("Wrote %d bytes to %s", len(data), output)
        return
    sys.stdout.flush()
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def run(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    path = Path(args.file)
    try:
        source = _read_source(path)
    except OSError as exc:
        print(f"Cannot read input file {path}: {exc.strerror}", file=sys.stderr)
        return constants.EXIT_FAILURE

    file_name = str(path)
    try:
        if args.tokens:
            _write_output(dump_tokens(source, file_name) + "\n")
            return 0
        if args.ast:
            _write_output(dump_ast(source, file_name) + "\n")
            return 0
        config = CompileConfig(file_name=file_name, return_values=args.return_values)
        text, stats = compile_with_stats(source, config)
    except CompileError as exc:
        print(exc.diagnostic(), file=sys.stderr)
        return constants.EXIT_FAILURE

    _write_output(text, args.output)

    if args.stats:
        print(stats.report(), file=sys.stderr)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
