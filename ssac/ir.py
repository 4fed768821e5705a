"""IR Design — QBE-flavoured SSA text.

Instructions, data definitions and functions are pydantic models whose
``__str__`` renders the textual form consumed by the downstream assembler::

    data $x = { l 5 }
    function l $add(l %a, l %b) {
    @start_0
        %0 =l add %a, %b
        ret 0
    }
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from . import constants


class Opcode(str, Enum):
    # Value producers
    COPY = "COPY"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    LOAD = "LOAD"
    DTOSI = "DTOSI"  # double -> signed long
    SLTOF = "SLTOF"  # signed long -> double
    CALL = "CALL"
    # Value consumers / control flow
    STORE = "STORE"
    RET = "RET"
    # Labels (pseudo-instruction)
    LABEL = "LABEL"


BINARY_OPCODES: dict[str, Opcode] = {
    "+": Opcode.ADD,
    "-": Opcode.SUB,
    "*": Opcode.MUL,
    "/": Opcode.DIV,
}


class CallArg(BaseModel):
    ty: str
    value: str

    def __str__(self) -> str:
        return f"{self.ty} {self.value}"


class IRInstruction(BaseModel):
    opcode: Opcode
    result_reg: str | None = None
    ty: str = constants.LONG  # result type, or stored/loaded type
    operands: list[str] = []
    label: str | None = None  # for LABEL
    args: list[CallArg] = []  # for CALL
    variadic_from: int | None = None  # CALL: index of the first variadic arg

    def _mnemonic(self) -> str:
        if self.opcode in (Opcode.LOAD, Opcode.STORE):
            return f"{self.opcode.value.lower()}{self.ty}"
        return self.opcode.value.lower()

    def _render_call(self) -> str:
        rendered = [str(arg) for arg in self.args]
        if self.variadic_from is not None:
            rendered.insert(self.variadic_from, "...")
        return f"call {self.operands[0]}({', '.join(rendered)})"

    def __str__(self) -> str:
        if self.opcode == Opcode.LABEL:
            return f"{constants.LABEL_SIGIL}{self.label}"
        body = (
            self._render_call()
            if self.opcode == Opcode.CALL
            else " ".join([self._mnemonic(), ", ".join(self.operands)]).rstrip()
        )
        if self.result_reg:
            return f"\t{self.result_reg} ={self.ty} {body}"
        return f"\t{body}"

    @property
    def is_terminator(self) -> bool:
        return self.opcode == Opcode.RET


class DataDef(BaseModel):
    label: str
    items: list[tuple[str, str]]

    def __str__(self) -> str:
        fields = ", ".join(f"{ty} {value}" for ty, value in self.items)
        return f"data {constants.GLOBAL_SIGIL}{self.label} = {{ {fields} }}"


class IRFunction(BaseModel):
    name: str
    params: list[str] = []
    return_type: str = constants.LONG
    exported: bool = False
    instructions: list[IRInstruction] = []

    def __str__(self) -> str:
        params = ", ".join(f"{constants.LONG} {p}" for p in self.params)
        export = "export " if self.exported else ""
        lines = [
            f"{export}function {self.return_type} "
            f"{constants.GLOBAL_SIGIL}{self.name}({params}) {{"
        ]
        lines.extend(str(inst) for inst in self.instructions)
        lines.append("}")
        return "\n".join(lines)


class IRModule(BaseModel):
    data: list[DataDef] = []
    functions: list[IRFunction] = []

    def function(self, name: str) -> IRFunction:
        """Return the function called *name*; raise ``KeyError`` if absent."""
        for fn in self.functions:
            if fn.name == name:
                return fn
        raise KeyError(name)

    def data_def(self, label: str) -> DataDef:
        for d in self.data:
            if d.label == label:
                return d
        raise KeyError(label)

    def __str__(self) -> str:
        sections = ["\n".join(str(d) for d in self.data)] if self.data else []
        sections.extend(str(fn) for fn in self.functions)
        return "\n\n".join(sections) + "\n"
