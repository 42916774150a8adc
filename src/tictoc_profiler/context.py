"""Per-thread ownership of the active timing tree."""

from __future__ import annotations

import threading

from .config import ProfilerConfig
from .config import config as default_config
from .tree import TimingTree, cpu_clock_for

_state = threading.local()


def build_tree(cfg: ProfilerConfig = default_config) -> TimingTree:
    """Return an empty tree wired with the configured clocks and checks."""

    return TimingTree(
        cpu_clock=cpu_clock_for(cfg.cpu_clock),
        strict=cfg.strict_nesting,
        verbose=cfg.verbose,
    )


def init_tree(tree: TimingTree | None = None, cfg: ProfilerConfig = default_config) -> TimingTree:
    """Install ``tree`` (or a fresh one) as this thread's active tree."""

    installed = tree if tree is not None else build_tree(cfg)
    _state.tree = installed
    return installed


def get_tree() -> TimingTree:
    """This thread's active tree, created on first use."""

    tree = getattr(_state, "tree", None)
    if tree is None:
        tree = init_tree()
    return tree


def teardown_tree() -> TimingTree | None:
    """Detach and return this thread's tree, if any."""

    tree = getattr(_state, "tree", None)
    _state.tree = None
    return tree
