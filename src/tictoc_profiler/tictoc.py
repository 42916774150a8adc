"""Always-active instrumentation primitives bound to this thread's tree.

These functions ignore ``TICTOC_ENABLED``; use ``tictoc_profiler.profiler``
for instrumentation that can be switched off.

Basic use::

    SOLVE = region("solve")

    def solve():
        with scoped_(SOLVE):
            with scoped_("linearize"):   # nests under "solve"
                ...

    for _ in range(iterations):
        solve()
        finished_iteration_()
    print_()

``tic_``/``toc_`` open and close a region without a ``with`` block; every
``tic_`` must be paired with exactly one ``toc_`` in nested order.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TextIO

from .context import get_tree
from .node import TimingNode
from .registry import Region, bind
from .reporting import print_mean_std, print_outline
from .scoped import ScopedTimer, timed
from .tree import TimingTree

Label = str | Region


def _resolve(tree: TimingTree, label: Label) -> Region:
    return bind(label, tree.registry)


def tic_(label: Label) -> Region:
    """Open ``label`` under the current region; returns the resolved handle for ``toc_``."""

    tree = get_tree()
    resolved = _resolve(tree, label)
    tree.tic(resolved.id, resolved.label)
    return resolved


def toc_(label: Label) -> None:
    tree = get_tree()
    resolved = _resolve(tree, label)
    tree.toc(resolved.id, resolved.label)


def scoped_(label: Label) -> ScopedTimer:
    tree = get_tree()
    resolved = _resolve(tree, label)
    return ScopedTimer(tree, resolved.id, resolved.label)


def timed_(label: Label | Callable[..., Any] | None = None) -> Any:
    return timed(label)


def finished_iteration_() -> None:
    get_tree().finish_iteration()


def print_(stream: TextIO | None = None) -> None:
    print_outline(get_tree(), stream)


def print_mean_std_(stream: TextIO | None = None) -> None:
    print_mean_std(get_tree(), stream)


def reset_() -> None:
    get_tree().reset()


def get_node_(label: Label) -> TimingNode:
    tree = get_tree()
    resolved = _resolve(tree, label)
    return tree.get_node(resolved.id, resolved.label)
