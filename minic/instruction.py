"""Linear IR instructions and instruction sequences."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Iterable, Iterator

VOID = "void"


class IRInstOperator(Enum):
    """Operation codes of IR instructions."""

    ENTRY = auto()
    EXIT = auto()
    LABEL = auto()
    GOTO = auto()
    ADD_I = auto()
    ADD_F = auto()
    SUB_I = auto()
    SUB_F = auto()
    ASSIGN = auto()
    FUNC_CALL = auto()
    ARG = auto()
    NEG_I = auto()
    NEG_F = auto()
    MUL_I = auto()
    MUL_F = auto()
    DIV_I = auto()
    DIV_F = auto()
    MOD_I = auto()
    XOR_I = auto()
    LT_I = auto()
    LT_F = auto()
    LE_F = auto()
    LE_I = auto()
    GT_I = auto()
    GT_F = auto()
    GE_F = auto()
    GE_I = auto()
    EQ_I = auto()
    EQ_F = auto()
    NE_F = auto()
    NE_I = auto()
    LOGICAL_AND_I = auto()
    LOGICAL_OR_I = auto()
    LOGICAL_NOT_I = auto()
    FTOI = auto()
    ITOF = auto()
    GEP = auto()
    GEP_FORMAL_PARAM = auto()
    STORE = auto()
    LOAD = auto()
    MAX = auto()


_MNEMONICS = {
    IRInstOperator.ADD_I: "add",
    IRInstOperator.ADD_F: "fadd",
    IRInstOperator.SUB_I: "sub",
    IRInstOperator.SUB_F: "fsub",
    IRInstOperator.MUL_I: "mul",
    IRInstOperator.MUL_F: "fmul",
    IRInstOperator.DIV_I: "div",
    IRInstOperator.DIV_F: "fdiv",
    IRInstOperator.MOD_I: "mod",
    IRInstOperator.XOR_I: "xor",
    IRInstOperator.LT_I: "icmp lt",
    IRInstOperator.LT_F: "fcmp lt",
    IRInstOperator.LE_I: "icmp le",
    IRInstOperator.LE_F: "fcmp le",
    IRInstOperator.GT_I: "icmp gt",
    IRInstOperator.GT_F: "fcmp gt",
    IRInstOperator.GE_I: "icmp ge",
    IRInstOperator.GE_F: "fcmp ge",
    IRInstOperator.EQ_I: "icmp eq",
    IRInstOperator.EQ_F: "fcmp eq",
    IRInstOperator.NE_I: "icmp ne",
    IRInstOperator.NE_F: "fcmp ne",
    IRInstOperator.LOGICAL_AND_I: "and",
    IRInstOperator.LOGICAL_OR_I: "or",
}


class Instruction:
    """Base IR instruction; an instruction is also the value it computes."""

    def __init__(
        self,
        function: Any,
        op: IRInstOperator,
        type_name: str = VOID,
        operands: Iterable[Any] = (),
    ) -> None:
        self.function = function
        self.op = op
        self.type = type_name
        self.operands: list[Any] = list(operands)
        self.dead = False
        self.name = ""
        self.ir_name = ""
        self.is_const = False
        self.const_int = 0
        self.reg_id = -1
        self.offset = 0
        self.base_reg_no = -1
        self.load_reg_id = -1

    def has_result_value(self) -> bool:
        """True when the instruction produces a value."""
        return self.type != VOID

    def set_dead(self, dead: bool = True) -> None:
        """Mark or unmark the instruction as dead."""
        self.dead = dead

    def set_memory_addr(self, reg_id: int, offset: int) -> None:
        """Set the base register and offset used to address the value."""
        self.base_reg_no = reg_id
        self.offset = offset

    def memory_addr(self) -> tuple[int, int] | None:
        """Base register and offset, or None when no base register is set."""
        if self.base_reg_no == -1:
            return None
        return self.base_reg_no, self.offset

    def __str__(self) -> str:
        return "Unkown IR Instruction"


class LabelInstruction(Instruction):
    """Jump target; its name is its IR name."""

    def __init__(self, function: Any, name: str = "") -> None:
        super().__init__(function, IRInstOperator.LABEL)
        self.ir_name = name

    @property
    def name(self) -> str:
        return self.ir_name

    @name.setter
    def name(self, value: str) -> None:
        self.ir_name = value

    def __str__(self) -> str:
        return f"{self.ir_name}:"


class GotoInstruction(Instruction):
    """Unconditional jump, or conditional jump when a condition is given."""

    def __init__(
        self,
        function: Any,
        true_target: LabelInstruction | None,
        false_target: LabelInstruction | None = None,
        condition: Any = None,
    ) -> None:
        super().__init__(
            function,
            IRInstOperator.GOTO,
            operands=() if condition is None else (condition,),
        )
        self.condition = condition
        self.true_target = true_target
        self.false_target = false_target

    def target(self) -> LabelInstruction | None:
        """Target of an unconditional jump (the true target otherwise)."""
        return self.true_target

    def __str__(self) -> str:
        if self.condition is None:
            target = self.true_target.ir_name if self.true_target else ""
            return f"br label {target}"
        true_name = self.true_target.ir_name if self.true_target else ""
        false_name = self.false_target.ir_name if self.false_target else ""
        return f"bc {self.condition.ir_name}, label {true_name}, label {false_name}"


class ExitInstruction(Instruction):
    """Function epilogue, optionally returning a value."""

    def __init__(self, function: Any, value: Any = None) -> None:
        super().__init__(
            function, IRInstOperator.EXIT, operands=() if value is None else (value,)
        )
        self.value = value

    def __str__(self) -> str:
        return "exit" if self.value is None else f"exit {self.value.ir_name}"


class EntryInstruction(Instruction):
    """Function prologue."""

    def __init__(self, function: Any) -> None:
        super().__init__(function, IRInstOperator.ENTRY)

    def __str__(self) -> str:
        return "entry"


class BinaryInstruction(Instruction):
    """Two-operand arithmetic, comparison or logical instruction."""

    def __init__(
        self,
        function: Any,
        op: IRInstOperator,
        left: Any,
        right: Any,
        type_name: str = "i32",
    ) -> None:
        super().__init__(function, op, type_name, (left, right))

    @property
    def left(self) -> Any:
        return self.operands[0]

    @property
    def right(self) -> Any:
        return self.operands[1]

    def __str__(self) -> str:
        mnemonic = _MNEMONICS.get(self.op, self.op.name.lower())
        return f"{self.ir_name} = {mnemonic} {self.left.ir_name},{self.right.ir_name}"


class FuncCallInstruction(Instruction):
    """Call of a named function with the given arguments."""

    def __init__(
        self,
        function: Any,
        called_name: str,
        args: Iterable[Any] = (),
        type_name: str = VOID,
    ) -> None:
        super().__init__(function, IRInstOperator.FUNC_CALL, type_name, args)
        self.called_name = called_name

    def __str__(self) -> str:
        args = ", ".join(arg.ir_name for arg in self.operands)
        call = f"call {self.type} @{self.called_name}({args})"
        return f"{self.ir_name} = {call}" if self.has_result_value() else call


class InterCode:
    """Ordered sequence of IR instructions."""

    def __init__(self, insts: Iterable[Instruction] = ()) -> None:
        self.insts: list[Instruction] = list(insts)

    def add(self, inst: Instruction) -> None:
        """Append one instruction."""
        self.insts.append(inst)

    def extend(self, block: InterCode) -> None:
        """Move all instructions of another block to the end of this one."""
        self.insts.extend(block.insts)
        block.insts.clear()

    def clear(self) -> None:
        """Drop all instructions, detaching their operands first."""
        for inst in self.insts:
            inst.operands.clear()
        self.insts.clear()

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.insts)

    def __len__(self) -> int:
        return len(self.insts)

    def __getitem__(self, index: int) -> Instruction:
        return self.insts[index]