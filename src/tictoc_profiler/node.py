"""Per-call-path timing statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

_US_PER_SECOND = 1_000_000.0


@dataclass(slots=True)
class TimingNode:
    """Cumulative statistics for one (label, call path) pair.

    Times are integer microseconds except ``t2``, which holds the sum of
    squared per-call CPU durations in seconds squared. ``parent`` and the values
    of ``children`` are handles into the owning tree's arena.
    """

    id: int
    label: str
    handle: int
    parent: int | None = None
    order: int = 0
    t_cpu: int = 0
    t_wall: int = 0
    t2: float = 0.0
    t_it: int = 0
    t_max: int | None = None
    t_min: int | None = None
    n: int = 0
    last_child_order: int = 0
    children: dict[int, int] = field(default_factory=dict)
    cpu_start: int | None = None
    wall_start: int | None = None

    def add(self, cpu_us: int, wall_us: int) -> None:
        """Fold one closed call into the running statistics."""

        self.t_cpu += cpu_us
        self.t_wall += wall_us
        self.t_it += cpu_us
        seconds = cpu_us / _US_PER_SECOND
        self.t2 += seconds * seconds
        self.n += 1

    def close_iteration(self) -> None:
        # Only this node; the tree handles recursion.
        if self.t_max is None or self.t_it > self.t_max:
            self.t_max = self.t_it
        if self.t_min is None or self.t_it < self.t_min:
            self.t_min = self.t_it
        self.t_it = 0

    @property
    def is_open(self) -> bool:
        return self.wall_start is not None

    @property
    def self_seconds(self) -> float:
        return self.t_cpu / _US_PER_SECOND

    @property
    def wall_seconds(self) -> float:
        return self.t_wall / _US_PER_SECOND

    @property
    def min_seconds(self) -> float:
        return (self.t_min or 0) / _US_PER_SECOND

    @property
    def max_seconds(self) -> float:
        return (self.t_max or 0) / _US_PER_SECOND

    @property
    def mean_seconds(self) -> float:
        if self.n == 0:
            return 0.0
        return self.self_seconds / self.n

    @property
    def std_seconds(self) -> float:
        if self.n == 0:
            return 0.0
        mean = self.mean_seconds
        # Clamp: float cancellation can leave a tiny negative variance.
        return math.sqrt(max(self.t2 / self.n - mean * mean, 0.0))
