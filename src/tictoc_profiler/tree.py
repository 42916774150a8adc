"""Timing tree with a cursor tracking the currently open region."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator

from .exceptions import MismatchedTicTocError
from .node import TimingNode
from .registry import LabelRegistry, default_registry

logger = logging.getLogger("tictoc_profiler.tree")

ROOT_LABEL = "Total"

Clock = Callable[[], int]


def wall_clock_us() -> int:
    return time.perf_counter_ns() // 1000


def process_cpu_us() -> int:
    return time.process_time_ns() // 1000


def thread_cpu_us() -> int:
    return time.thread_time_ns() // 1000


_CPU_CLOCKS: dict[str, Clock] = {
    "process": process_cpu_us,
    "thread": thread_cpu_us,
}


def cpu_clock_for(name: str) -> Clock:
    try:
        return _CPU_CLOCKS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown CPU clock {name!r}; expected one of {sorted(_CPU_CLOCKS)}") from exc


class TimingTree:
    """Arena of timing nodes plus the cursor of the open region.

    Nodes are stored in a list and refer to each other by index. ``tic`` and
    ``toc`` must be strictly nested; the tree is not safe to share between
    threads (use one per thread, see ``tictoc_profiler.context``).
    """

    def __init__(
        self,
        registry: LabelRegistry | None = None,
        *,
        cpu_clock: Clock = process_cpu_us,
        wall_clock: Clock = wall_clock_us,
        strict: bool = False,
        verbose: bool = False,
    ) -> None:
        self._registry = registry if registry is not None else default_registry
        self._cpu_clock = cpu_clock
        self._wall_clock = wall_clock
        self.strict = strict
        self.verbose = verbose
        self.generation = 0
        self._nodes: list[TimingNode] = []
        self._root = self._new_node(self._registry.id_for(ROOT_LABEL), ROOT_LABEL, parent=None)
        self._current = self._root

    @property
    def registry(self) -> LabelRegistry:
        return self._registry

    @property
    def root(self) -> TimingNode:
        return self._nodes[self._root]

    @property
    def current(self) -> TimingNode:
        return self._nodes[self._current]

    def node(self, handle: int) -> TimingNode:
        return self._nodes[handle]

    def parent_of(self, node: TimingNode) -> TimingNode | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def children_of(self, node: TimingNode) -> list[TimingNode]:
        """Children in creation order."""

        kids = [self._nodes[handle] for handle in node.children.values()]
        return sorted(kids, key=lambda child: child.order)

    def __len__(self) -> int:
        return len(self._nodes)

    def open(self, parent: int, timing_id: int, label: str) -> int:
        """Return the child of ``parent`` keyed by ``timing_id``, creating it if absent."""

        owner = self._nodes[parent]
        handle = owner.children.get(timing_id)
        if handle is None:
            handle = self._new_node(timing_id, label, parent=parent)
            owner.last_child_order += 1
            self._nodes[handle].order = owner.last_child_order
            owner.children[timing_id] = handle
        return handle

    def tic(self, timing_id: int, label: str) -> int:
        if self.verbose:
            logger.debug("tic id=%d label=%s", timing_id, label)
        handle = self.open(self._current, timing_id, label)
        self._current = handle
        node = self._nodes[handle]
        node.cpu_start = self._cpu_clock()
        node.wall_start = self._wall_clock()
        return handle

    def toc(self, timing_id: int, label: str) -> None:
        wall_now = self._wall_clock()
        cpu_now = self._cpu_clock()
        if self.verbose:
            logger.debug("toc id=%d label=%s", timing_id, label)

        current = self._nodes[self._current]
        if current.parent is None:
            raise MismatchedTicTocError(f"Mismatched tic/toc: extra toc({label!r}), already at the root")
        if timing_id != current.id:
            message = f"Mismatched tic/toc: toc({label!r}) called when last tic was {current.label!r}"
            if self.strict:
                raise MismatchedTicTocError(message)
            logger.warning(message)

        if current.cpu_start is None or current.wall_start is None:  # pragma: no cover - guarded by tic
            raise MismatchedTicTocError(f"Region {current.label!r} was never started")
        current.add(cpu_now - current.cpu_start, wall_now - current.wall_start)
        current.cpu_start = None
        current.wall_start = None
        self._current = current.parent

    def finish_iteration(self) -> None:
        """Close the current iteration on every node, root to leaves."""

        self._finish_iteration(self._root)

    def _finish_iteration(self, handle: int) -> None:
        node = self._nodes[handle]
        node.close_iteration()
        for child in node.children.values():
            self._finish_iteration(child)

    def get_node(self, timing_id: int, label: str) -> TimingNode:
        """Child of the current node for ``timing_id``, without opening it."""

        return self._nodes[self.open(self._current, timing_id, label)]

    def reset(self) -> None:
        """Drop every node and start over from an empty root."""

        self._nodes = []
        self._root = self._new_node(self._registry.id_for(ROOT_LABEL), ROOT_LABEL, parent=None)
        self._current = self._root
        self.generation += 1

    def time_us(self, node: TimingNode) -> int:
        """Children's total when the node has children, its own CPU time otherwise."""

        if not node.children:
            return node.t_cpu
        return sum(self.time_us(self._nodes[child]) for child in node.children.values())

    def time_seconds(self, node: TimingNode) -> float:
        return self.time_us(node) / 1_000_000.0

    def walk(self) -> Iterator[tuple[int, TimingNode]]:
        """Depth-first ``(depth, node)`` pairs from the root, children in creation order."""

        stack: list[tuple[int, TimingNode]] = [(0, self.root)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            for child in reversed(self.children_of(node)):
                stack.append((depth + 1, child))

    def depth(self) -> int:
        """Number of regions currently open."""

        count = 0
        node = self.current
        while node.parent is not None:
            count += 1
            node = self._nodes[node.parent]
        return count

    def _new_node(self, timing_id: int, label: str, *, parent: int | None) -> int:
        handle = len(self._nodes)
        self._nodes.append(TimingNode(id=timing_id, label=label, handle=handle, parent=parent))
        return handle
