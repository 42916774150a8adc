"""Hierarchical call-tree profiler with a companion named-vector map."""

from .context import get_tree, init_tree, teardown_tree
from .exceptions import (
    DimensionMismatchError,
    InvalidKeyError,
    MismatchedTicTocError,
    TicTocError,
    VectorConfigError,
)
from .profiler import NullProfiler, Profiler, TicTocProfiler, build_profiler, profiler
from .registry import LabelRegistry, Region, default_registry, region
from .reporting import format_mean_std, format_outline, print_mean_std, print_outline, snapshot
from .scoped import ScopedTimer, timed
from .tictoc import (
    finished_iteration_,
    get_node_,
    print_,
    print_mean_std_,
    reset_,
    scoped_,
    tic_,
    timed_,
    toc_,
)
from .tree import TimingTree
from .vector_config import VectorConfig

__all__ = [
    "DimensionMismatchError",
    "InvalidKeyError",
    "LabelRegistry",
    "MismatchedTicTocError",
    "NullProfiler",
    "Profiler",
    "Region",
    "ScopedTimer",
    "TicTocError",
    "TicTocProfiler",
    "TimingTree",
    "VectorConfig",
    "VectorConfigError",
    "build_profiler",
    "default_registry",
    "finished_iteration_",
    "format_mean_std",
    "format_outline",
    "get_node_",
    "get_tree",
    "init_tree",
    "print_",
    "print_mean_std",
    "print_mean_std_",
    "print_outline",
    "profiler",
    "region",
    "reset_",
    "scoped_",
    "snapshot",
    "teardown_tree",
    "tic_",
    "timed",
    "timed_",
    "toc_",
]
