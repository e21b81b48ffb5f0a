"""Generation of unique label names and tracking of loop scopes."""

from __future__ import annotations

from dataclasses import dataclass

LABEL_PREFIX = ".L"


@dataclass(frozen=True)
class _LoopScope:
    break_label: str
    continue_label: str


class LabelManager:
    """Hands out unique label names and keeps a stack of enclosing loops."""

    def __init__(self) -> None:
        self._counter = 0
        self._loops: list[_LoopScope] = []

    def new_label(self, prefix: str = "") -> str:
        """Return a fresh label name made of the prefix and a running counter."""
        label = f"{LABEL_PREFIX}{prefix}{self._counter}"
        self._counter += 1
        return label

    def if_labels(self) -> tuple[str, str, str]:
        """Return the true, false and exit labels of an if statement."""
        return (
            self.new_label("if_true_"),
            self.new_label("if_false_"),
            self.new_label("if_exit_"),
        )

    def while_labels(self) -> tuple[str, str, str]:
        """Return the entry, body and exit labels of a while loop."""
        return (
            self.new_label("while_entry_"),
            self.new_label("while_body_"),
            self.new_label("while_exit_"),
        )

    def enter_loop(self) -> None:
        """Open a new loop scope with its own break and continue labels."""
        break_label = self.new_label("break_")
        continue_label = self.new_label("continue_")
        self._loops.append(_LoopScope(break_label, continue_label))

    def exit_loop(self) -> None:
        """Close the innermost loop scope, if there is one."""
        if self._loops:
            self._loops.pop()

    def break_label(self) -> str | None:
        """Break label of the innermost loop, or None outside any loop."""
        return self._loops[-1].break_label if self._loops else None

    def continue_label(self) -> str | None:
        """Continue label of the innermost loop, or None outside any loop."""
        return self._loops[-1].continue_label if self._loops else None