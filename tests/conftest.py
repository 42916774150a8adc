from __future__ import annotations

from collections.abc import Iterator

import pytest

from tictoc_profiler.context import init_tree, teardown_tree
from tictoc_profiler.registry import LabelRegistry
from tictoc_profiler.tree import TimingTree


class FakeClock:
    """Microsecond clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 0

    def __call__(self) -> int:
        return self.now

    def advance(self, usecs: int) -> None:
        self.now += usecs


class Clocks:
    def __init__(self) -> None:
        self.cpu = FakeClock()
        self.wall = FakeClock()

    def advance(self, cpu_us: int, wall_us: int | None = None) -> None:
        self.cpu.advance(cpu_us)
        self.wall.advance(cpu_us if wall_us is None else wall_us)


@pytest.fixture()
def clocks() -> Clocks:
    return Clocks()


@pytest.fixture()
def tree(clocks: Clocks) -> TimingTree:
    return TimingTree(LabelRegistry(), cpu_clock=clocks.cpu, wall_clock=clocks.wall)


@pytest.fixture()
def active_tree(clocks: Clocks) -> Iterator[TimingTree]:
    """Fake-clock tree installed as this thread's tree for the test."""

    installed = init_tree(TimingTree(cpu_clock=clocks.cpu, wall_clock=clocks.wall))
    yield installed
    teardown_tree()


def timed_call(tree: TimingTree, label: str, clocks: Clocks, cpu_us: int, wall_us: int | None = None) -> None:
    timing_id = tree.registry.id_for(label)
    tree.tic(timing_id, label)
    clocks.advance(cpu_us, wall_us)
    tree.toc(timing_id, label)
