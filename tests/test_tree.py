from __future__ import annotations

import logging

import pytest

from conftest import timed_call
from tictoc_profiler.exceptions import MismatchedTicTocError
from tictoc_profiler.tree import ROOT_LABEL, TimingTree


def _ids(tree: TimingTree, *labels: str) -> list[int]:
    return [tree.registry.id_for(label) for label in labels]


def test_new_tree_has_only_root(tree: TimingTree) -> None:
    assert len(tree) == 1
    assert tree.root.label == ROOT_LABEL
    assert tree.current is tree.root
    assert tree.depth() == 0


def test_repeated_region_aggregates_calls(tree: TimingTree, clocks) -> None:
    timed_call(tree, "solve", clocks, 1500, 2000)
    timed_call(tree, "solve", clocks, 2500, 3000)

    node = tree.children_of(tree.root)[0]
    assert len(tree) == 2
    assert node.n == 2
    assert node.t_cpu == 4000
    assert node.t_wall == 5000
    assert tree.current is tree.root


def test_same_label_under_different_parents_is_tracked_separately(tree: TimingTree, clocks) -> None:
    x_id, y_id, a_id = _ids(tree, "X", "Y", "A")

    tree.tic(x_id, "X")
    timed_call(tree, "A", clocks, 100)
    tree.toc(x_id, "X")

    tree.tic(y_id, "Y")
    timed_call(tree, "A", clocks, 700)
    timed_call(tree, "A", clocks, 200)
    tree.toc(y_id, "Y")

    x_node, y_node = tree.children_of(tree.root)
    (a_under_x,) = tree.children_of(x_node)
    (a_under_y,) = tree.children_of(y_node)
    assert a_under_x is not a_under_y
    assert a_under_x.id == a_under_y.id == a_id
    assert (a_under_x.n, a_under_x.t_cpu) == (1, 100)
    assert (a_under_y.n, a_under_y.t_cpu) == (2, 900)


def test_open_reuses_existing_child(tree: TimingTree) -> None:
    (a_id,) = _ids(tree, "A")
    root = tree.root.handle

    first = tree.open(root, a_id, "A")
    second = tree.open(root, a_id, "A")

    assert first == second
    assert len(tree) == 2


def test_children_keep_creation_order(tree: TimingTree, clocks) -> None:
    # Register ids in the opposite order to their first use.
    _ids(tree, "third", "second", "first")
    for label in ("first", "second", "third", "first"):
        timed_call(tree, label, clocks, 10)

    children = tree.children_of(tree.root)
    assert [child.label for child in children] == ["first", "second", "third"]
    assert [child.order for child in children] == [1, 2, 3]


def test_children_never_exceed_parent_time(tree: TimingTree, clocks) -> None:
    outer_id, = _ids(tree, "outer")
    for _ in range(3):
        tree.tic(outer_id, "outer")
        clocks.advance(50)
        timed_call(tree, "inner_a", clocks, 200)
        clocks.advance(5)
        timed_call(tree, "inner_b", clocks, 300)
        tree.toc(outer_id, "outer")

    for _, node in tree.walk():
        if node.n == 0:
            continue
        kids = tree.children_of(node)
        assert sum(kid.t_cpu for kid in kids) <= node.t_cpu
        assert sum(kid.t_wall for kid in kids) <= node.t_wall


def test_iteration_extrema(tree: TimingTree, clocks) -> None:
    for per_iteration in ([5], [2], [3, 5]):
        for cpu in per_iteration:
            timed_call(tree, "step", clocks, cpu)
        tree.finish_iteration()

    node = tree.children_of(tree.root)[0]
    assert node.t_max == 8
    assert node.t_min == 2
    assert node.t_it == 0
    assert node.n == 4


def test_finish_iteration_reaches_nested_nodes(tree: TimingTree, clocks) -> None:
    (outer_id,) = _ids(tree, "outer")
    for cpu in (40, 10):
        tree.tic(outer_id, "outer")
        timed_call(tree, "inner", clocks, cpu)
        tree.toc(outer_id, "outer")
        tree.finish_iteration()

    inner = tree.children_of(tree.children_of(tree.root)[0])[0]
    assert (inner.t_min, inner.t_max) == (10, 40)


def test_mean_and_std(tree: TimingTree, clocks) -> None:
    timed_call(tree, "solve", clocks, 1_000_000)
    timed_call(tree, "solve", clocks, 3_000_000)

    node = tree.children_of(tree.root)[0]
    assert node.mean_seconds == pytest.approx(2.0)
    assert node.std_seconds == pytest.approx(1.0)


def test_time_us_sums_leaves(tree: TimingTree, clocks) -> None:
    (outer_id,) = _ids(tree, "outer")
    tree.tic(outer_id, "outer")
    timed_call(tree, "a", clocks, 30)
    timed_call(tree, "b", clocks, 70)
    clocks.advance(25)
    tree.toc(outer_id, "outer")

    outer = tree.children_of(tree.root)[0]
    assert outer.t_cpu == 125
    assert tree.time_us(outer) == 100
    assert tree.time_us(tree.root) == 100


def test_reset_discards_everything(tree: TimingTree, clocks) -> None:
    timed_call(tree, "solve", clocks, 100)
    tree.finish_iteration()
    generation = tree.generation

    tree.reset()

    assert len(tree) == 1
    assert tree.root.n == 0
    assert tree.root.children == {}
    assert tree.current is tree.root
    assert tree.generation == generation + 1


def test_get_node_does_not_move_cursor(tree: TimingTree) -> None:
    (a_id,) = _ids(tree, "A")

    node = tree.get_node(a_id, "A")

    assert node.label == "A"
    assert node.n == 0
    assert tree.current is tree.root
    assert tree.get_node(a_id, "A") is node


def test_mismatched_toc_logs_and_restores_parent(tree: TimingTree, clocks, caplog) -> None:
    a_id, b_id = _ids(tree, "A", "B")
    tree.tic(a_id, "A")
    clocks.advance(10)

    with caplog.at_level(logging.WARNING, logger="tictoc_profiler.tree"):
        tree.toc(b_id, "B")

    assert "Mismatched tic/toc" in caplog.text
    assert tree.current is tree.root
    assert tree.children_of(tree.root)[0].n == 1


def test_mismatched_toc_raises_in_strict_mode(tree: TimingTree) -> None:
    a_id, b_id = _ids(tree, "A", "B")
    tree.strict = True
    tree.tic(a_id, "A")

    with pytest.raises(MismatchedTicTocError):
        tree.toc(b_id, "B")


def test_toc_at_root_raises(tree: TimingTree) -> None:
    (a_id,) = _ids(tree, "A")

    with pytest.raises(MismatchedTicTocError, match="already at the root"):
        tree.toc(a_id, "A")


def test_walk_is_depth_first_in_creation_order(tree: TimingTree, clocks) -> None:
    (outer_id,) = _ids(tree, "outer")
    tree.tic(outer_id, "outer")
    timed_call(tree, "inner", clocks, 1)
    tree.toc(outer_id, "outer")
    timed_call(tree, "after", clocks, 1)

    walked = [(depth, node.label) for depth, node in tree.walk()]

    assert walked == [(0, "Total"), (1, "outer"), (2, "inner"), (1, "after")]


def test_verbose_logs_each_tic_and_toc(tree: TimingTree, clocks, caplog) -> None:
    tree.verbose = True

    with caplog.at_level(logging.DEBUG, logger="tictoc_profiler.tree"):
        timed_call(tree, "solve", clocks, 5)

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("tic ") for message in messages)
    assert any(message.startswith("toc ") for message in messages)
