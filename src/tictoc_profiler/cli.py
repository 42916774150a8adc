"""Typer CLI for exercising the profiler locally."""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path

import typer

from .config import config
from .context import init_tree
from .demo_utils import generate_problem, run_gradient_descent
from .exceptions import TicTocError
from .profiler import build_profiler
from .reporting import format_mean_std, format_outline, snapshot
from .tree import TimingTree

app = typer.Typer(help="Hierarchical tic/toc profiling from the command line.")


class ReportFormat(str, Enum):
    outline = "outline"
    stats = "stats"
    json = "json"


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for profiler diagnostics."),
) -> None:
    level = log_level.upper()
    if level not in logging.getLevelNamesMapping():
        raise typer.BadParameter(f"Unknown log level {log_level!r}.", param_hint="--log-level")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def demo(
    iterations: int = typer.Option(25, "--iterations", "-n", min=1, help="Solver iterations to run."),
    dim: int = typer.Option(8, "--dim", min=1, help="Size of each variable block."),
    seed: int = typer.Option(42, "--seed", help="Random seed for the synthetic problem."),
    report_format: ReportFormat = typer.Option(
        ReportFormat.outline,
        "--format",
        "-f",
        help="outline: cumulative tree; stats: mean/std per node; json: structured snapshot.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report here instead of stdout.",
    ),
    disable: bool = typer.Option(False, "--disable", help="Run with the no-op profiler.", is_flag=True),
    strict: bool = typer.Option(False, "--strict", help="Raise on mismatched tic/toc.", is_flag=True),
) -> None:
    """Run an instrumented gradient-descent solver and report where time went."""

    cfg = replace(config, enabled=not disable, strict_nesting=strict or config.strict_nesting)
    tree = init_tree(cfg=cfg)
    profiler = build_profiler(cfg)

    problem, initial = generate_problem(dim, seed=seed)
    try:
        result = run_gradient_descent(problem, initial, iterations, profiler)
    except TicTocError as exc:
        typer.echo(f"Profiling failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    summary = f"Ran {result.iterations} iteration(s); final error {result.errors[-1]:.6f}."
    if not profiler.enabled:
        typer.echo(f"{summary} Profiling disabled; no report.")
        return

    report = _render(tree, report_format, cfg.precision)
    if output is None:
        typer.echo(report, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(report, encoding="utf-8")
        typer.echo(f"Report → {output}")
    typer.echo(summary)


def _render(tree: TimingTree, report_format: ReportFormat, precision: int) -> str:
    if report_format is ReportFormat.stats:
        return format_mean_std(tree, precision=precision)
    if report_format is ReportFormat.json:
        return snapshot(tree).model_dump_json(indent=2) + "\n"
    return format_outline(tree)


if __name__ == "__main__":
    app()
