"""Functions of the IR: parameters, local variables and their instruction code."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from minic.instruction import Instruction, InterCode, IRInstOperator, LabelInstruction
from minic.labels import LABEL_PREFIX

TEMP_PREFIX = "%t"
LOCAL_PREFIX = "%l"
GLOBAL_PREFIX = "@"

_STORE_THROUGH_POINTER = 1
_LOAD_THROUGH_POINTER = 2


def _dims_text(dimensions: Iterable[int]) -> str:
    return "".join(f"[{dim}]" for dim in dimensions)


@dataclass(eq=False)
class LocalVariable:
    """Variable declared inside a function; arrays carry their dimensions."""

    type: str
    name: str = ""
    scope_level: int = 1
    is_const: bool = False
    dimensions: tuple[int, ...] = ()
    ir_name: str = ""

    @property
    def is_array(self) -> bool:
        return bool(self.dimensions)

    def declaration(self) -> str:
        """The declare line of the variable, without leading tab."""
        text = f"declare {self.type} {self.ir_name}{_dims_text(self.dimensions)}"
        if self.name:
            text += f" ; {self.scope_level}:{self.name}"
        return text


@dataclass(eq=False)
class FormalParam:
    """Formal parameter of a function; array parameters carry their dimensions."""

    type: str
    name: str = ""
    dimensions: tuple[int, ...] = ()
    ir_name: str = ""

    @property
    def is_array(self) -> bool:
        return bool(self.dimensions)

    def declaration(self) -> str:
        """The parameter as it appears in a function header."""
        return f"{self.type} {self.ir_name}{_dims_text(self.dimensions)}"


@dataclass
class _LoopLabels:
    start: LabelInstruction
    end: LabelInstruction


class Function:
    """A function with its signature, local variables and linear IR code."""

    def __init__(
        self,
        name: str,
        return_type: str,
        params: Iterable[FormalParam] = (),
        builtin: bool = False,
    ) -> None:
        self.name = name
        self.ir_name = GLOBAL_PREFIX + name
        self.return_type = return_type
        self.params: list[FormalParam] = list(params)
        self.builtin = builtin
        self.alignment = 1
        self.code = InterCode()
        self.vars: list[LocalVariable] = []
        self.exit_label: Instruction | None = None
        self.return_value: LocalVariable | None = None
        self.max_depth = 0
        self.relocated = False
        self.exist_func_call = False
        self.max_func_call_arg_cnt = 0
        self.protected_regs: list[int] = []
        self.protected_reg_str = ""
        self.real_arg_count = 0
        self._loops: list[_LoopLabels] = []

    @property
    def is_function(self) -> bool:
        return True

    def new_local_var(
        self,
        type_name: str,
        name: str = "",
        scope_level: int = 1,
        is_const: bool = False,
    ) -> LocalVariable:
        """Create a local variable and record it; names may repeat."""
        var = LocalVariable(type_name, name, scope_level, is_const)
        self.vars.append(var)
        return var

    def create_local_array(
        self, name: str, type_name: str, dimensions: Iterable[int]
    ) -> LocalVariable:
        """Create a local array of the given element type and dimensions."""
        var = self.new_local_var(type_name, name)
        var.dimensions = tuple(dimensions)
        return var

    def set_max_depth(self, depth: int) -> None:
        """Set the stack frame depth; the frame is then marked as relocated."""
        self.max_depth = depth
        self.relocated = True

    def rename_ir(self) -> None:
        """Give parameters, locals, labels and temporaries sequential IR names."""
        if self.builtin:
            return
        index = 0
        for param in self.params:
            param.ir_name = f"{TEMP_PREFIX}{index}"
            index += 1
        for var in self.vars:
            var.ir_name = f"{LOCAL_PREFIX}{index}"
            index += 1
        for inst in self.code:
            if inst.op is IRInstOperator.LABEL:
                inst.ir_name = f"{LABEL_PREFIX}{index}"
                index += 1
            elif inst.has_result_value():
                inst.ir_name = f"{TEMP_PREFIX}{index}"
                index += 1

    def push_loop_labels(
        self, start_label: LabelInstruction, end_label: LabelInstruction
    ) -> None:
        """Enter a loop whose continue and break targets are the given labels."""
        self._loops.append(_LoopLabels(start_label, end_label))

    def pop_loop_labels(self) -> None:
        """Leave the innermost loop, if any."""
        if self._loops:
            self._loops.pop()

    def current_loop_start_label(self) -> LabelInstruction | None:
        """Start label of the innermost loop, or None outside loops."""
        return self._loops[-1].start if self._loops else None

    def current_loop_end_label(self) -> LabelInstruction | None:
        """End label of the innermost loop, or None outside loops."""
        return self._loops[-1].end if self._loops else None

    def real_arg_count_inc(self) -> None:
        """Count one more argument instruction."""
        self.real_arg_count += 1

    def real_arg_count_reset(self) -> None:
        """Reset the argument instruction count."""
        self.real_arg_count = 0

    def _used_as_pointer(self, inst: Instruction) -> bool:
        marker = "*" + inst.ir_name
        for other in self.code:
            if other.op is not IRInstOperator.ASSIGN or marker not in str(other):
                continue
            op_type = getattr(other, "op_type", None)
            if op_type == _STORE_THROUGH_POINTER and getattr(other, "dst", None) is inst:
                return True
            if op_type == _LOAD_THROUGH_POINTER and getattr(other, "src", None) is inst:
                return True
        return False

    def _temp_declaration(self, inst: Instruction) -> str:
        star = "*" if self._used_as_pointer(inst) else ""
        text = f"\tdeclare {inst.type}{star} {inst.ir_name}"
        _, sep, comment = inst.ir_name.partition(" ; ")
        if sep:
            text += sep + comment
        return text

    def to_text(self) -> str:
        """The textual IR of the function; empty for built-in functions."""
        if self.builtin:
            return ""
        params = ", ".join(param.declaration() for param in self.params)
        lines = [f"define {self.return_type} {self.ir_name}({params})", "{"]
        lines.extend(f"\t{var.declaration()}" for var in self.vars)
        lines.extend(
            self._temp_declaration(inst)
            for inst in self.code
            if inst.has_result_value()
        )
        for inst in self.code:
            text = str(inst)
            if not text:
                continue
            lines.append(text if inst.op is IRInstOperator.LABEL else f"\t{text}")
        lines.append("}")
        return "\n".join(lines) + "\n"