"""Pure functions for computing statistics over an IR module."""

from __future__ import annotations

from collections import Counter

from ssac.ir import IRModule, Opcode


def count_opcodes(module: IRModule) -> dict[str, int]:
    """Return a frequency map of opcode names across every function in *module*.

    Args:
        module: A lowered IR module.

    Returns:
        A dict mapping opcode name strings to their occurrence counts.
        Empty dict for a module with no instructions.
    """
    return dict(
        Counter(
            inst.opcode.value for fn in module.functions for inst in fn.instructions
        )
    )


def count_instructions(module: IRModule) -> int:
    """Count real instructions, excluding LABEL pseudo-instructions."""
    return sum(
        1
        for fn in module.functions
        for inst in fn.instructions
        if inst.opcode != Opcode.LABEL
    )
