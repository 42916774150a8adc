from __future__ import annotations

import io
import threading

from tictoc_profiler import context
from tictoc_profiler.registry import LabelRegistry, region
from tictoc_profiler.tictoc import (
    finished_iteration_,
    get_node_,
    print_,
    print_mean_std_,
    reset_,
    scoped_,
    tic_,
    toc_,
)
from tictoc_profiler.tree import TimingTree


def test_tic_and_toc_record_into_thread_tree(active_tree: TimingTree, clocks) -> None:
    handle = tic_("assemble")
    clocks.advance(12)
    toc_(handle)

    node = get_node_("assemble")
    assert (node.n, node.t_cpu) == (1, 12)
    assert active_tree.current is active_tree.root


def test_long_regions_nest_with_scoped_ones(active_tree: TimingTree, clocks) -> None:
    outer = region("elimination")
    tic_(outer)
    with scoped_("factor"):
        clocks.advance(20)
    toc_(outer)

    elimination = active_tree.children_of(active_tree.root)[0]
    assert [child.label for child in active_tree.children_of(elimination)] == ["factor"]
    assert elimination.t_cpu == 20


def test_finished_iteration_and_reset(active_tree: TimingTree, clocks) -> None:
    for cpu in (5, 2, 8):
        with scoped_("step"):
            clocks.advance(cpu)
        finished_iteration_()

    node = get_node_("step")
    assert (node.t_min, node.t_max) == (2, 8)

    reset_()
    assert len(active_tree) == 1
    assert active_tree.root.n == 0


def test_print_functions_write_to_given_stream(active_tree: TimingTree, clocks) -> None:
    with scoped_("solve"):
        clocks.advance(1000)

    outline = io.StringIO()
    stats = io.StringIO()
    print_(outline)
    print_mean_std_(stats)

    assert "-solve:" in outline.getvalue()
    assert "(mean)" in stats.getvalue()


def test_each_thread_gets_its_own_tree(active_tree: TimingTree) -> None:
    seen: list[TimingTree] = []

    def worker() -> None:
        with scoped_("background"):
            pass
        seen.append(context.get_tree())
        context.teardown_tree()

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert seen and seen[0] is not active_tree
    assert active_tree.root.children == {}
    assert seen[0].root.children


def test_teardown_then_get_creates_fresh_tree(active_tree: TimingTree) -> None:
    assert context.teardown_tree() is active_tree

    fresh = context.get_tree()

    assert fresh is not active_tree
    assert context.get_tree() is fresh
    context.teardown_tree()


def test_region_from_another_registry_is_rebound(clocks) -> None:
    private = LabelRegistry()
    installed = context.init_tree(TimingTree(private, cpu_clock=clocks.cpu, wall_clock=clocks.wall))
    try:
        tic_("assemble")
        clocks.advance(10)
        toc_("assemble")
        region("registered_elsewhere")
        foreign = region("solve_from_default_registry")
        with scoped_(foreign):
            clocks.advance(5)

        children = [(node.label, node.n, node.t_cpu) for node in installed.children_of(installed.root)]
        assert children == [("assemble", 1, 10), ("solve_from_default_registry", 1, 5)]
        assert installed.children_of(installed.root)[1].id == private.id_for("solve_from_default_registry")
    finally:
        context.teardown_tree()
