#!/usr/bin/env python
"""Local benchmark for per-region instrumentation overhead."""

from __future__ import annotations

import argparse
import json
import math
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from typing import List

from tictoc_profiler.context import init_tree
from tictoc_profiler.profiler import NullProfiler, Profiler, TicTocProfiler
from tictoc_profiler.registry import region

_BATCH = 1000
_OUTER = region("benchmark_outer")
_INNER = region("benchmark_inner")


def percentile(values: List[float], pct: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    if len(ordered) == 1:
        return ordered[0]
    position = pct * (len(ordered) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return ordered[int(position)]
    weight = position - lower
    return ordered[lower] * (1 - weight) + ordered[upper] * weight


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark tic/toc overhead against the no-op profiler.")
    parser.add_argument("--batches", type=int, default=200, help="Number of timed batches per profiler.")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("outputs/benchmarks/overhead.json"),
        help="Path where benchmark metrics JSON will be written.",
    )
    return parser.parse_args()


def measure(profiler: Profiler, batches: int) -> List[float]:
    """Nanoseconds per nested scoped pair, one sample per batch."""

    samples: List[float] = []
    for _ in range(batches):
        start = perf_counter()
        for _ in range(_BATCH):
            with profiler.scoped(_OUTER):
                with profiler.scoped(_INNER):
                    pass
        samples.append((perf_counter() - start) * 1e9 / _BATCH)
    return samples


def main() -> None:
    args = parse_args()
    output_path = args.output
    output_path.parent.mkdir(parents=True, exist_ok=True)

    tree = init_tree()
    enabled = measure(TicTocProfiler(), args.batches)
    disabled = measure(NullProfiler(), args.batches)

    payload = {
        "batches": args.batches,
        "pairs_per_batch": _BATCH,
        "enabled_ns": {
            "p50": percentile(enabled, 0.5),
            "p95": percentile(enabled, 0.95),
        },
        "disabled_ns": {
            "p50": percentile(disabled, 0.5),
            "p95": percentile(disabled, 0.95),
        },
        "recorded_calls": tree.get_node(_OUTER.id, _OUTER.label).n,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    print(f"Benchmark complete → {output_path}")
    print(
        f"enabled p50={payload['enabled_ns']['p50']:.0f}ns p95={payload['enabled_ns']['p95']:.0f}ns | "
        f"disabled p50={payload['disabled_ns']['p50']:.0f}ns p95={payload['disabled_ns']['p95']:.0f}ns"
    )


if __name__ == "__main__":
    main()
