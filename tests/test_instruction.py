import pytest

from minic.instruction import (
    BinaryInstruction,
    EntryInstruction,
    ExitInstruction,
    FuncCallInstruction,
    GotoInstruction,
    Instruction,
    InterCode,
    IRInstOperator,
    LabelInstruction,
)


def _value(name):
    inst = Instruction(None, IRInstOperator.ASSIGN, "i32")
    inst.ir_name = name
    return inst


def test_has_result_value_depends_on_type():
    assert not Instruction(None, IRInstOperator.LABEL).has_result_value()
    assert Instruction(None, IRInstOperator.ADD_I, "i32").has_result_value()


def test_set_dead_defaults_to_true_and_can_revert():
    inst = EntryInstruction(None)
    assert inst.dead is False
    inst.set_dead()
    assert inst.dead is True
    inst.set_dead(False)
    assert inst.dead is False


def test_memory_addr_none_until_set():
    inst = _value("%t0")
    assert inst.memory_addr() is None
    inst.set_memory_addr(29, -16)
    assert inst.memory_addr() == (29, -16)


def test_base_instruction_text():
    assert str(Instruction(None, IRInstOperator.MAX)) == "Unkown IR Instruction"


def test_label_name_and_ir_name_are_the_same():
    label = LabelInstruction(None, "L1")
    assert label.name == "L1"
    label.name = "L7"
    assert label.ir_name == "L7"
    assert str(label) == "L7:"
    assert label.op is IRInstOperator.LABEL


def test_unconditional_goto():
    target = LabelInstruction(None, "L3")
    goto = GotoInstruction(None, target)
    assert goto.target() is target
    assert goto.condition is None
    assert goto.operands == []
    assert "L3" in str(goto)


def test_conditional_goto_keeps_condition_as_operand():
    cond = _value("%t2")
    true_label = LabelInstruction(None, "L1")
    false_label = LabelInstruction(None, "L2")
    goto = GotoInstruction(None, true_label, false_label, condition=cond)
    assert goto.operands == [cond]
    assert goto.true_target is true_label
    assert goto.false_target is false_label
    text = str(goto)
    assert "%t2" in text and "L1" in text and "L2" in text


def test_binary_instruction_operands_and_text():
    left, right = _value("%t1"), _value("%t2")
    inst = BinaryInstruction(None, IRInstOperator.EQ_I, left, right)
    inst.ir_name = "%t3"
    assert inst.left is left and inst.right is right
    assert len(inst.operands) == 2
    assert str(inst).startswith("%t3 = icmp eq")
    assert inst.has_result_value()


def test_exit_with_and_without_value():
    assert ExitInstruction(None).operands == []
    value = _value("%l1")
    exit_inst = ExitInstruction(None, value)
    assert exit_inst.operands == [value]
    assert "%l1" in str(exit_inst)


def test_func_call_records_name_and_args():
    arg = _value("%t0")
    call = FuncCallInstruction(None, "putint", [arg])
    assert call.called_name == "putint"
    assert call.operands == [arg]
    assert call.op is IRInstOperator.FUNC_CALL
    assert not call.has_result_value()
    assert "@putint(%t0)" in str(call)


def test_intercode_add_and_iterate():
    code = InterCode()
    first, second = EntryInstruction(None), ExitInstruction(None)
    code.add(first)
    code.add(second)
    assert list(code) == [first, second]
    assert len(code) == 2
    assert code[1] is second


def test_intercode_extend_moves_and_empties_block():
    code = InterCode([EntryInstruction(None)])
    block = InterCode([LabelInstruction(None, "a"), ExitInstruction(None)])
    moved = list(block)
    code.extend(block)
    assert code.insts[1:] == moved
    assert len(block) == 0


def test_intercode_clear_detaches_operands():
    left, right = _value("%t1"), _value("%t2")
    inst = BinaryInstruction(None, IRInstOperator.ADD_I, left, right)
    code = InterCode([inst])
    code.clear()
    assert len(code) == 0
    assert inst.operands == []


def test_intercode_index_out_of_range():
    with pytest.raises(IndexError):
        InterCode()[0]