"""Deterministic instrumented workload for demos and benchmarks."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .profiler import Profiler
from .vector_config import VectorConfig

_KEYS = ["x1", "x2", "l1", "l2", "p0"]


@dataclass
class QuadraticProblem:
    """Separable quadratic 0.5 x'Ax - b'x with one block per key."""

    hessians: dict[str, np.ndarray]
    offsets: dict[str, np.ndarray]

    def gradient(self, values: VectorConfig) -> VectorConfig:
        gradient = VectorConfig()
        for key, hessian in self.hessians.items():
            gradient.insert(key, hessian @ values[key] - self.offsets[key])
        return gradient

    def error(self, values: VectorConfig) -> float:
        total = 0.0
        for key, hessian in self.hessians.items():
            x = values[key]
            total += 0.5 * float(x @ hessian @ x) - float(self.offsets[key] @ x)
        return total

    def step_size(self) -> float:
        largest = max(float(np.linalg.eigvalsh(h).max()) for h in self.hessians.values())
        return 1.0 / largest


@dataclass
class SolverResult:
    values: VectorConfig
    errors: list[float] = field(default_factory=list)

    @property
    def iterations(self) -> int:
        return len(self.errors)


def generate_problem(dim: int, *, seed: int = 42) -> tuple[QuadraticProblem, VectorConfig]:
    """Random well-conditioned problem plus a zero initial estimate."""

    rng = np.random.default_rng(seed)
    hessians: dict[str, np.ndarray] = {}
    offsets: dict[str, np.ndarray] = {}
    initial = VectorConfig()
    for key in _KEYS:
        basis = rng.normal(size=(dim, dim))
        hessians[key] = basis @ basis.T + dim * np.eye(dim)
        offsets[key] = rng.normal(size=dim)
        initial.insert(key, np.zeros(dim))
    return QuadraticProblem(hessians=hessians, offsets=offsets), initial


def run_gradient_descent(
    problem: QuadraticProblem,
    initial: VectorConfig,
    iterations: int,
    profiler: Profiler,
) -> SolverResult:
    """Plain gradient descent, instrumented region by region.

    Each pass of the loop is declared as one iteration so the report carries
    per-iteration min/max times.
    """

    linearize = profiler.timed("linearize")(problem.gradient)

    profiler.tic("setup")
    step = problem.step_size()
    profiler.toc("setup")

    result = SolverResult(values=initial)
    with profiler.scoped("optimize"):
        for _ in range(iterations):
            with profiler.scoped("iterate"):
                gradient = linearize(result.values)
                with profiler.scoped("update"):
                    result.values = result.values.exmap(gradient.scale(-step))
                with profiler.scoped("error"):
                    result.errors.append(problem.error(result.values))
            profiler.finished_iteration()
    return result
