"""Tests for IR model rendering."""

from ssac.ir import CallArg, DataDef, IRFunction, IRInstruction, IRModule, Opcode


def _make_instructions(*specs):
    """Helper: build IRInstruction list from (opcode, kwargs) tuples."""
    return [IRInstruction(opcode=op, **kw) for op, kw in specs]


class TestInstructionRendering:
    def test_label(self):
        inst = IRInstruction(opcode=Opcode.LABEL, label="start_0")
        assert str(inst) == "@start_0"

    def test_copy(self):
        inst = IRInstruction(opcode=Opcode.COPY, result_reg="%0", operands=["42"])
        assert str(inst) == "\t%0 =l copy 42"

    def test_binary(self):
        inst = IRInstruction(opcode=Opcode.DIV, result_reg="%2", operands=["%0", "%1"])
        assert str(inst) == "\t%2 =l div %0, %1"

    def test_conversions(self):
        to_long = IRInstruction(opcode=Opcode.DTOSI, result_reg="%1", operands=["%0"])
        to_double = IRInstruction(
            opcode=Opcode.SLTOF, result_reg="%2", ty="d", operands=["%1"]
        )
        assert str(to_long) == "\t%1 =l dtosi %0"
        assert str(to_double) == "\t%2 =d sltof %1"

    def test_load_and_store_carry_type_suffix(self):
        load = IRInstruction(opcode=Opcode.LOAD, result_reg="%0", ty="d", operands=["$f"])
        store = IRInstruction(opcode=Opcode.STORE, operands=["%0", "$g"])
        assert str(load) == "\t%0 =d loadd $f"
        assert str(store) == "\tstorel %0, $g"

    def test_bare_ret(self):
        assert str(IRInstruction(opcode=Opcode.RET)) == "\tret"
        assert IRInstruction(opcode=Opcode.RET).is_terminator

    def test_call_with_variadic_marker(self):
        inst = IRInstruction(
            opcode=Opcode.CALL,
            operands=["$printf"],
            args=[CallArg(ty="l", value="$fmt"), CallArg(ty="d", value="%1")],
            variadic_from=1,
        )
        assert str(inst) == "\tcall $printf(l $fmt, ..., d %1)"


class TestModuleRendering:
    def test_data_def(self):
        d = DataDef(label="s", items=[("b", '"hi"'), ("b", "0")])
        assert str(d) == 'data $s = { b "hi", b 0 }'

    def test_function_and_module(self):
        fn = IRFunction(
            name="f",
            params=["%a"],
            instructions=_make_instructions(
                (Opcode.LABEL, {"label": "start_0"}),
                (Opcode.RET, {"operands": ["0"]}),
            ),
        )
        module = IRModule(data=[DataDef(label="x", items=[("l", "1")])], functions=[fn])
        assert str(module) == (
            "data $x = { l 1 }\n"
            "\n"
            "function l $f(l %a) {\n"
            "@start_0\n"
            "\tret 0\n"
            "}\n"
        )

    def test_exported_function_header(self):
        fn = IRFunction(name="main", return_type="w", exported=True)
        assert str(fn).startswith("export function w $main() {")
