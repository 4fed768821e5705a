"""End-to-end lowering of small complete programs."""

import pytest

from ssac.api import lower_source
from ssac.ir import IRModule, Opcode

ARITHMETIC = """\
fn square(n) {
  return n * n;
}

fn main() {
  let a = square(3);
  let b = (a + 1) / 2 - 4;
  println(a, b);
  return 0;
}
"""

GLOBALS = """\
let base = 10;
let scale = 2.5;
let name = "ssac";
let total = base * 3 + offset();

fn offset() {
  return base;
}

fn main() {
  println(name, total, scale);
}
"""

SHADOWING = """\
fn main() {
  let x = 1;
  let x = x + 1;
  let x = x * 10;
  println(x);
}
"""


def _opcodes(module: IRModule, fn_name: str) -> list[Opcode]:
    return [inst.opcode for inst in module.function(fn_name).instructions]


def _assert_well_formed(module: IRModule) -> None:
    """Every function starts with a label and ends with a ret."""
    for fn in module.functions:
        assert fn.instructions[0].opcode == Opcode.LABEL
        assert fn.instructions[-1].opcode == Opcode.RET


@pytest.mark.parametrize("source", [ARITHMETIC, GLOBALS, SHADOWING])
def test_programs_lower_to_well_formed_functions(source):
    _assert_well_formed(lower_source(source))


class TestArithmetic:
    def test_functions_in_declaration_order(self):
        module = lower_source(ARITHMETIC)
        assert [fn.name for fn in module.functions] == ["square", "__user_main", "main"]

    def test_operator_sequence(self):
        ops = _opcodes(lower_source(ARITHMETIC), "__user_main")
        arithmetic = [op for op in ops if op in (Opcode.ADD, Opcode.SUB, Opcode.DIV)]
        assert arithmetic == [Opcode.ADD, Opcode.DIV, Opcode.SUB]


class TestGlobals:
    def test_static_and_deferred_data(self):
        module = lower_source(GLOBALS)
        assert str(module.data_def("base")) == "data $base = { l 10 }"
        assert str(module.data_def("scale")) == "data $scale = { d d_2.5 }"
        assert str(module.data_def("name")) == "data $name = { l $name.str }"
        assert str(module.data_def("total")) == "data $total = { l 0 }"

    def test_entry_point_computes_total_then_calls_main(self):
        module = lower_source(GLOBALS)
        ops = _opcodes(module, "main")
        assert ops[-3:] == [Opcode.STORE, Opcode.CALL, Opcode.RET]
        entry_calls = [
            inst.operands[0]
            for inst in module.function("main").instructions
            if inst.opcode == Opcode.CALL
        ]
        assert entry_calls == ["$offset", "$__user_main"]

    def test_float_global_loaded_as_double(self):
        module = lower_source(GLOBALS)
        loads = [
            inst
            for inst in module.function("__user_main").instructions
            if inst.opcode == Opcode.LOAD and inst.operands == ["$scale"]
        ]
        assert loads[0].ty == "d"

    def test_println_format_uses_syntactic_kinds(self):
        module = lower_source(GLOBALS)
        fmt = next(d for d in module.data if d.label.startswith("str."))
        # identifiers always format as integers
        assert fmt.items == [("b", '"%d %d %d"'), ("b", "10"), ("b", "0")]


class TestShadowing:
    def test_each_let_reads_previous_binding(self):
        module = lower_source(SHADOWING)
        lines = [str(inst).strip() for inst in module.function("__user_main").instructions]
        assert lines[:9] == [
            "@start_0",
            "%0 =l copy 1",
            "%1 =l copy %0",
            "%2 =l copy 1",
            "%3 =l add %1, %2",
            "%4 =l copy %3",
            "%5 =l copy 10",
            "%6 =l mul %4, %5",
            "%7 =l copy %6",
        ]
