"""Compile pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class CompileConfig:
    """Groups code generation configuration."""

    file_name: str = constants.DEFAULT_FILE_NAME
    # False keeps the fixed `ret 0`; True returns the evaluated expression.
    return_values: bool = False
    printf_symbol: str = constants.PRINTF_SYMBOL


@dataclass
class PipelineStats:
    """Timing and size statistics for each pipeline stage."""

    file_name: str = ""
    source_bytes: int = 0
    source_lines: int = 0

    # Stage timings (seconds)
    tokenize_time: float = 0.0
    parse_time: float = 0.0
    codegen_time: float = 0.0
    total_time: float = 0.0

    # Output sizes
    token_count: int = 0
    statement_count: int = 0
    data_count: int = 0
    function_count: int = 0
    instruction_count: int = 0

    def report(self) -> str:
        lines = [
            "═══ Pipeline Statistics ═══",
            f"  Source: {self.file_name}, {self.source_lines} lines, {self.source_bytes} bytes",
            "",
            f"  {'Stage':<20} {'Time':>10}  {'Output':>30}",
            f"  {'─' * 20} {'─' * 10}  {'─' * 30}",
        ]
        stages = [
            ("Tokenize", self.tokenize_time, f"{self.token_count} tokens"),
            ("Parse", self.parse_time, f"{self.statement_count} statements"),
            (
                "Codegen",
                self.codegen_time,
                f"{self.function_count} functions, {self.data_count} data",
            ),
        ]
        for name, t, output in stages:
            time_str = f"{t * 1000:>8.1f}ms"
            lines.append(f"  {name:<20} {time_str:>10}  {output:>30}")

        lines.append(f"  {'─' * 20} {'─' * 10}  {'─' * 30}")
        lines.append(f"  {'Total':<20} {self.total_time * 1000:>8.1f}ms")
        lines.append("")
        lines.append(f"  Emitted {self.instruction_count} IR instructions")
        return "\n".join(lines)
