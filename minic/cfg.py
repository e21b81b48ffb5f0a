"""Control flow graphs of IR functions and marking of unreachable blocks."""

from __future__ import annotations

from typing import Any

from minic.instruction import GotoInstruction, IRInstOperator
from minic.labels import LABEL_PREFIX

ENTRY_SUFFIX = "_entry"


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class ControlFlowGraph:
    """Blocks of one function in program order with their successor blocks."""

    def __init__(
        self,
        function_name: str,
        blocks: list[str],
        successors: dict[str, list[str]],
        entry_block: str | None = None,
    ) -> None:
        self.function_name = function_name
        self.blocks = blocks
        self.successors = successors
        self.entry_block = entry_block

    def reachable(self) -> set[str]:
        """Names of the blocks reachable from the first block."""
        if not self.blocks:
            return set()
        start = self.blocks[0]
        seen = {start}
        stack = [start]
        while stack:
            current = stack.pop()
            for nxt in self.successors.get(current, ()):
                if nxt not in seen:
                    seen.add(nxt)
                    stack.append(nxt)
        return seen

    def unreachable(self) -> list[str]:
        """Label blocks that cannot be reached, in program order."""
        reachable = self.reachable()
        return [
            block
            for block in self.blocks
            if block != self.entry_block and block not in reachable
        ]

    def to_dot(self) -> str:
        """The graph in Graphviz dot syntax; unreachable blocks are highlighted."""
        unreachable = set(self.unreachable())
        known = set(self.blocks)
        lines = ["digraph g {"]
        for block in self.blocks:
            attrs = f"shape=box, label={_quote(block)}"
            if block in unreachable:
                attrs += ", style=filled, fillcolor=yellow"
            lines.append(f"\t{_quote(block)} [{attrs}];")
        for block in self.blocks:
            for target in self.successors.get(block, ()):
                if target in known:
                    lines.append(f"\t{_quote(block)} -> {_quote(target)};")
        lines.append("}")
        return "\n".join(lines) + "\n"


def _goto_targets(inst: GotoInstruction) -> list[str]:
    if inst.condition is None:
        target = inst.target()
        return [target.name] if target is not None else []
    if inst.true_target is not None and inst.false_target is not None:
        return [inst.true_target.name, inst.false_target.name]
    return []


def build_cfg(func: Any) -> ControlFlowGraph:
    """Build the block graph of a function.

    Labels are first renamed to sequential names so that block names are
    unique. The entry instruction opens a block named after the function.
    """
    insts = func.code.insts
    for index, label in enumerate(
        inst for inst in insts if inst.op is IRInstOperator.LABEL
    ):
        label.name = f"{LABEL_PREFIX}{index}"

    entry_name = func.name + ENTRY_SUFFIX
    blocks: list[str] = []
    successors: dict[str, list[str]] = {}
    entry_block: str | None = None
    for inst in insts:
        if inst.op is IRInstOperator.ENTRY:
            entry_block = entry_name
            blocks.append(entry_name)
            successors[entry_name] = []
        elif inst.op is IRInstOperator.LABEL:
            blocks.append(inst.name)
            successors[inst.name] = []

    current = entry_name
    has_goto = False
    for inst, following in zip(insts, [*insts[1:], None]):
        if inst.op is IRInstOperator.LABEL:
            has_goto = False
            current = inst.name
        elif inst.op is IRInstOperator.GOTO:
            has_goto = True
            successors.setdefault(current, []).extend(_goto_targets(inst))
        if (
            not has_goto
            and following is not None
            and following.op is IRInstOperator.LABEL
        ):
            successors.setdefault(current, []).append(following.name)

    return ControlFlowGraph(func.name, blocks, successors, entry_block)


def mark_unreachable_blocks(func: Any) -> ControlFlowGraph:
    """Mark the instructions of unreachable blocks dead and return the graph.

    Labels themselves are never marked; code before the first label is
    always considered reachable.
    """
    graph = build_cfg(func)
    reachable = graph.reachable()
    is_reachable = True
    for inst in func.code:
        if inst.op is IRInstOperator.LABEL:
            is_reachable = inst.name in reachable
        elif not is_reachable:
            inst.set_dead()
    return graph