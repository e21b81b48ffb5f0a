"""Dead code marking over the IR of a module's functions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from minic.cfg import mark_unreachable_blocks
from minic.instruction import (
    BinaryInstruction,
    FuncCallInstruction,
    GotoInstruction,
    Instruction,
    IRInstOperator,
    LabelInstruction,
)

log = logging.getLogger(__name__)

ENTRY_FUNCTION = "main"
_DIGITS = frozenset("0123456789")
_CONST_COMPARISONS = (IRInstOperator.EQ_I, IRInstOperator.NE_I)


def is_numeric(text: str) -> bool:
    """True when the text is a decimal integer literal, optionally negative."""
    digits = text[1:] if text.startswith("-") else text
    return bool(digits) and all(ch in _DIGITS for ch in digits)


def _mark(inst: Instruction) -> None:
    if inst.op is not IRInstOperator.LABEL:
        inst.set_dead()


def _is_unconditional_jump(inst: Instruction) -> bool:
    return inst.op is IRInstOperator.GOTO and inst.condition is None


def _jump_targets(inst: GotoInstruction) -> list[str]:
    if inst.condition is None:
        target = inst.target()
        return [target.name] if target is not None else []
    if inst.true_target is not None and inst.false_target is not None:
        return [inst.true_target.name, inst.false_target.name]
    return []


@dataclass
class _Block:
    start: int
    end: int = 0
    has_return: bool = False
    successors: list[str] = field(default_factory=list)


class DeadCodeEliminator:
    """Marks dead instructions in the non built-in functions of a module."""

    def __init__(self, functions: Iterable[Any]) -> None:
        self.functions = list(functions)

    def _user_functions(self) -> list[Any]:
        return [func for func in self.functions if not func.builtin]

    def run(self) -> dict[str, int]:
        """Run every pass and return the number of dead instructions per function."""
        self.mark_unused_functions()
        counts: dict[str, int] = {}
        for func in self._user_functions():
            log.debug("processing function %s", func.name)
            self.process_constant_conditions(func)
            self.mark_constant_conditions(func)
            self.mark_code_after_return(func)
            mark_unreachable_blocks(func)
            counts[func.name] = sum(1 for inst in func.code if inst.dead)
            log.debug("%d dead instructions in %s", counts[func.name], func.name)
        return counts

    def collect_function_calls(self) -> set[str]:
        """Names of all called functions, always including the entry function."""
        called = {ENTRY_FUNCTION}
        for func in self._user_functions():
            called.update(
                inst.called_name
                for inst in func.code
                if isinstance(inst, FuncCallInstruction)
            )
        return called

    def mark_unused_functions(self) -> None:
        """Mark every instruction of a function that is never called as dead."""
        called = self.collect_function_calls()
        for func in self._user_functions():
            if func.name not in called:
                log.debug("unused function %s", func.name)
                for inst in func.code:
                    _mark(inst)

    def process_constant_conditions(self, func: Any) -> None:
        """Fold equality tests of two literals and the branches that use them."""
        insts = func.code.insts
        for i, inst in enumerate(insts):
            if inst.op not in _CONST_COMPARISONS:
                continue
            if not isinstance(inst, BinaryInstruction) or len(inst.operands) != 2:
                continue
            left, right = inst.operands
            if left is None or right is None:
                continue
            if not (is_numeric(left.ir_name) and is_numeric(right.ir_name)):
                continue
            equal = int(left.ir_name) == int(right.ir_name)
            result = equal if inst.op is IRInstOperator.EQ_I else not equal
            inst.is_const = True
            inst.const_int = 1 if result else 0

            for j in range(i + 1, len(insts)):
                jump = insts[j]
                if not isinstance(jump, GotoInstruction) or jump.condition is not inst:
                    continue
                taken, other = (
                    (jump.true_target, jump.false_target)
                    if result
                    else (jump.false_target, jump.true_target)
                )
                if taken is not None:
                    insts[j] = GotoInstruction(func, taken)
                    if other is not None:
                        self.mark_dead_branch(insts, j, other)
                break

    def mark_dead_branch(
        self, insts: list[Instruction], start: int, label: LabelInstruction
    ) -> None:
        """Mark the block opened by the label, searched for after start, as dead."""
        in_branch = False
        for inst in insts[start + 1 :]:
            if isinstance(inst, LabelInstruction):
                if inst is label:
                    in_branch = True
                elif in_branch:
                    break
            if in_branch:
                _mark(inst)

    def _fold_jump(
        self, func: Any, insts: list[Instruction], index: int, taken: bool
    ) -> None:
        jump = insts[index]
        target, dead = (
            (jump.true_target, jump.false_target)
            if taken
            else (jump.false_target, jump.true_target)
        )
        insts[index] = GotoInstruction(func, target)
        self.mark_dead_branch(insts, index, dead)

    def mark_constant_conditions(self, func: Any) -> None:
        """Replace conditional jumps on constant conditions by plain jumps."""
        insts = func.code.insts
        for i, inst in enumerate(insts):
            if not isinstance(inst, GotoInstruction):
                continue
            condition = inst.condition
            if condition is None or inst.true_target is None or inst.false_target is None:
                continue
            if getattr(condition, "is_const", False):
                self._fold_jump(func, insts, i, condition.const_int != 0)
                continue
            operands = getattr(condition, "operands", None)
            if operands is None or len(operands) != 2:
                continue
            left, right = operands
            if left is None or right is None:
                continue
            if not (getattr(left, "is_const", False) and getattr(right, "is_const", False)):
                continue
            name = condition.ir_name
            if "icmp eq" in name:
                taken = left.const_int == right.const_int
            elif "icmp ne" in name:
                taken = left.const_int != right.const_int
            else:
                continue
            self._fold_jump(func, insts, i, taken)

    def _blocks(self, insts: list[Instruction]) -> dict[str, _Block]:
        blocks: dict[str, _Block] = {}
        current: str | None = None
        for i, inst in enumerate(insts):
            if isinstance(inst, LabelInstruction):
                if current is not None:
                    blocks[current].end = i - 1
                current = inst.name
                blocks[current] = _Block(start=i)
            if inst.op is IRInstOperator.EXIT and current is not None:
                blocks[current].has_return = True
        if current is not None:
            blocks[current].end = len(insts) - 1

        current = None
        for i, inst in enumerate(insts):
            if isinstance(inst, LabelInstruction):
                current = inst.name
            if current is None:
                continue
            block = blocks[current]
            if isinstance(inst, GotoInstruction):
                block.successors.extend(_jump_targets(inst))
            elif i == block.end and inst.op is not IRInstOperator.EXIT:
                following = next(
                    (nxt for nxt in insts[i + 1 :] if isinstance(nxt, LabelInstruction)),
                    None,
                )
                if following is not None:
                    block.successors.append(following.name)
        return blocks

    def mark_code_after_return(self, func: Any) -> None:
        """Mark code following returns and jumps, and blocks they make unreachable."""
        insts = func.code.insts
        blocks = self._blocks(insts)

        for block in blocks.values():
            after_return = False
            for inst in insts[block.start : block.end + 1]:
                if inst.op is IRInstOperator.EXIT:
                    after_return = True
                elif after_return:
                    _mark(inst)
                    log.debug("dead after return: %s", inst)

        reachable: set[str] = set()
        if blocks:
            first = next(iter(blocks))
            reachable.add(first)
            stack = [first]
            while stack:
                current = stack.pop()
                block = blocks.get(current)
                if block is None or block.has_return:
                    continue
                for nxt in block.successors:
                    if nxt not in reachable:
                        reachable.add(nxt)
                        stack.append(nxt)

        for name, block in blocks.items():
            if name not in reachable:
                for inst in insts[block.start : block.end + 1]:
                    _mark(inst)
                    log.debug("dead in unreachable block: %s", inst)

        for i, inst in enumerate(insts):
            if _is_unconditional_jump(inst) or inst.op is IRInstOperator.EXIT:
                for following in insts[i + 1 :]:
                    if isinstance(following, LabelInstruction):
                        break
                    following.set_dead()
                    log.debug("dead after jump or return: %s", following)