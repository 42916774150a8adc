"""Text and structured reports over a timing tree.

Everything here only reads the tree; statistics are never modified.
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from typing import TextIO

from .config import config as default_config
from .node import TimingNode
from .schemas import TimingNodeReport, TimingReport
from .tree import TimingTree

_INDENT = "|   "
_STATS_INDENT = "  "
_LABEL_WIDTH = 24


def total_seconds(tree: TimingTree, node: TimingNode) -> float:
    """A node's own CPU total, or the sum of its children's totals when it was never closed."""

    if node.n > 0:
        return node.self_seconds
    return sum(total_seconds(tree, child) for child in tree.children_of(node))


def format_outline(tree: TimingTree) -> str:
    lines: list[str] = []
    _outline(tree, tree.root, "", None, lines)
    return "\n".join(lines) + "\n"


def print_outline(tree: TimingTree, stream: TextIO | None = None) -> None:
    (stream or sys.stdout).write(format_outline(tree))


def _outline(
    tree: TimingTree,
    node: TimingNode,
    outline: str,
    parent_total: float | None,
    lines: list[str],
) -> None:
    label = node.label.replace("_", " ")
    line = (
        f"{outline}-{label}: {node.self_seconds:.6f}s CPU ({node.n} times, "
        f"{node.wall_seconds:.6f}s wall, {tree.time_seconds(node):.6f}s children, "
        f"min: {node.min_seconds:.6f}s max: {node.max_seconds:.6f}s)"
    )
    if parent_total:
        line += f" [{100.0 * total_seconds(tree, node) / parent_total:.1f}% of parent]"
    lines.append(line)

    own_total = total_seconds(tree, node)
    for child in tree.children_of(node):
        _outline(tree, child, outline + _INDENT, own_total, lines)


def format_mean_std(tree: TimingTree, *, precision: int | None = None) -> str:
    digits = default_config.precision if precision is None else precision
    lines: list[str] = []
    _mean_std(tree, tree.root, "", -1.0, digits, lines)
    return "\n".join(lines) + "\n"


def print_mean_std(tree: TimingTree, stream: TextIO | None = None, *, precision: int | None = None) -> None:
    (stream or sys.stdout).write(format_mean_std(tree, precision=precision))


def _mean_std(
    tree: TimingTree,
    node: TimingNode,
    outline: str,
    parent_total: float,
    digits: int,
    lines: list[str],
) -> None:
    label = f"{outline}{node.label}: "
    children_total = total_seconds(tree, node)

    if node.n == 0:
        lines.append(f"{label}{children_total:.{digits}f} seconds")
        for child in tree.children_of(node):
            _mean_std(tree, child, outline, children_total, digits, lines)
        return

    self_total = node.self_seconds
    line = (
        f"{label:<{_LABEL_WIDTH + len(outline)}}{node.n:>2} (times), "
        f"{node.mean_seconds:>6.{digits}f} (mean), "
        f"{node.std_seconds:>6.{digits}f} (std),"
        f"{self_total:>8.{digits}f} (total)"
    )
    if parent_total > 0.0:
        line += f" ({100.0 * self_total / parent_total:.{digits}f} %)"
    lines.append(line)
    for child in tree.children_of(node):
        _mean_std(tree, child, outline + _STATS_INDENT, self_total, digits, lines)


def snapshot(tree: TimingTree) -> TimingReport:
    return TimingReport(
        generated_at=datetime.now(UTC),
        node_count=len(tree),
        root=_node_report(tree, tree.root, None),
    )


def _node_report(tree: TimingTree, node: TimingNode, parent_total: float | None) -> TimingNodeReport:
    own_total = total_seconds(tree, node)
    percent = None
    if parent_total:
        percent = 100.0 * own_total / parent_total
    return TimingNodeReport(
        id=node.id,
        label=node.label,
        calls=node.n,
        cpu_s=node.self_seconds,
        wall_s=node.wall_seconds,
        children_s=tree.time_seconds(node),
        mean_s=node.mean_seconds,
        std_s=node.std_seconds,
        min_s=None if node.t_min is None else node.min_seconds,
        max_s=None if node.t_max is None else node.max_seconds,
        percent_of_parent=percent,
        children=[_node_report(tree, child, own_total) for child in tree.children_of(node)],
    )
