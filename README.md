# minic

The middle end of a compiler for a small C-like language: a linear
intermediate representation (instructions, instruction sequences and
functions), a label manager for control-flow statements, a control-flow graph
builder, and a pass that marks dead code in the IR.

## Installation

```
pip install .
```

With the test suite:

```
pip install .[test]
pytest
```

## Modules

- `minic.labels` – `LabelManager` hands out unique label names (`new_label`,
  `if_labels`, `while_labels`) and keeps a stack of loop scopes
  (`enter_loop`, `exit_loop`, `break_label`, `continue_label`).
- `minic.instruction` – the `IRInstOperator` enum, the `Instruction` base
  class and its kinds (`LabelInstruction`, `GotoInstruction`,
  `EntryInstruction`, `ExitInstruction`, `BinaryInstruction`,
  `FuncCallInstruction`), and `InterCode`, an ordered sequence of
  instructions with `add`, `extend` and `clear`.
- `minic.function` – `Function` with its `FormalParam` and `LocalVariable`
  values, loop label tracking, sequential IR naming (`rename_ir`) and
  textual IR output (`to_text`).
- `minic.cfg` – `build_cfg` splits a function's instructions into basic
  blocks and returns a `ControlFlowGraph`; `reachable` gives the blocks
  reachable from the first one and `to_dot` renders the graph as Graphviz
  DOT text, with unreachable blocks filled yellow. `mark_unreachable_blocks`
  marks the instructions of unreachable blocks dead and returns the graph.
  Both rename labels to sequential `.L<n>` names first.
- `minic.deadcode` – `DeadCodeEliminator` takes a collection of functions.
  `run` marks the code of functions never called (`main` always counts as
  called), folds `icmp eq`/`icmp ne` comparisons of constant operands into
  unconditional jumps, marks code after returns and unconditional jumps,
  marks unreachable blocks, and returns the number of dead instructions per
  function. `is_numeric` tells whether a string is a decimal integer literal.

## Example

```python
from minic.labels import LabelManager

labels = LabelManager()
true_label, false_label, exit_label = labels.if_labels()
print(true_label)             # .Lif_true_0

labels.enter_loop()
print(labels.break_label())   # .Lbreak_3
labels.exit_loop()
print(labels.break_label())   # None outside any loop
```

Dead instructions are only marked, never removed: check `inst.dead` after
running the eliminator and leave marked instructions out when generating code.

## What this package does not do

It has no lexer or parser, no front end that builds IR from source text, no
code generation for any target, and no command-line program. IR is built by
constructing the instruction and function objects directly. Control-flow
graphs are produced as DOT text only; no images are drawn or written to disk.