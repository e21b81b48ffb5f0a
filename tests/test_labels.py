import pytest

from minic.labels import LabelManager


def test_new_label_uses_prefix_and_counter():
    manager = LabelManager()
    assert manager.new_label("if_true_") == ".Lif_true_0"
    assert manager.new_label() == ".L1"


def test_labels_are_unique():
    manager = LabelManager()
    labels = [manager.new_label("x") for _ in range(50)]
    assert len(set(labels)) == 50
    assert all(label.startswith(".Lx") for label in labels)


def test_if_labels_order_and_prefixes():
    manager = LabelManager()
    true_label, false_label, exit_label = manager.if_labels()
    assert true_label.startswith(".Lif_true_")
    assert false_label.startswith(".Lif_false_")
    assert exit_label.startswith(".Lif_exit_")
    assert len({true_label, false_label, exit_label}) == 3


def test_while_labels_order_and_prefixes():
    manager = LabelManager()
    entry, body, exit_label = manager.while_labels()
    assert entry.startswith(".Lwhile_entry_")
    assert body.startswith(".Lwhile_body_")
    assert exit_label.startswith(".Lwhile_exit_")


def test_counter_shared_between_kinds():
    manager = LabelManager()
    ifs = tuple(manager.if_labels())
    whiles = tuple(manager.while_labels())
    assert ifs == (".Lif_true_0", ".Lif_false_1", ".Lif_exit_2")
    assert whiles == (".Lwhile_entry_3", ".Lwhile_body_4", ".Lwhile_exit_5")


def test_no_loop_gives_none():
    manager = LabelManager()
    assert manager.break_label() is None
    assert manager.continue_label() is None


def test_enter_loop_sets_labels():
    manager = LabelManager()
    manager.enter_loop()
    assert manager.break_label().startswith(".Lbreak_")
    assert manager.continue_label().startswith(".Lcontinue_")


@pytest.mark.parametrize("depth", [1, 2, 5])
def test_nested_loops_restore_outer(depth):
    manager = LabelManager()
    seen = []
    for _ in range(depth):
        manager.enter_loop()
        seen.append((manager.break_label(), manager.continue_label()))
    popped = []
    for _ in range(depth):
        popped.append((manager.break_label(), manager.continue_label()))
        manager.exit_loop()
    assert len(popped) == depth
    assert popped == list(reversed(seen))
    assert manager.break_label() is None


def test_exit_loop_without_loop_is_harmless():
    manager = LabelManager()
    manager.exit_loop()
    manager.enter_loop()
    label = manager.break_label()
    manager.exit_loop()
    manager.exit_loop()
    assert manager.break_label() is None
    assert label.startswith(".Lbreak_")