"""Runtime configuration and environment helpers for the profiler."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_CPU_CLOCK = "process"
_CPU_CLOCKS = {"process", "thread"}
_DEFAULT_PRECISION = 2


@dataclass(frozen=True)
class ProfilerConfig:
    """Immutable profiler configuration."""

    enabled: bool
    strict_nesting: bool
    verbose: bool
    cpu_clock: str
    precision: int


def _parse_bool(value: str | None, fallback: bool) -> bool:
    if value is None:
        return fallback
    return value.lower() in {"1", "true", "yes", "on"}


def _parse_int(value: str | None, fallback: int, *, minimum: int = 1) -> int:
    if value is None:
        return fallback
    try:
        parsed = int(value)
    except ValueError:
        return fallback
    return fallback if parsed < minimum else parsed


def _parse_choice(value: str | None, fallback: str, choices: set[str]) -> str:
    if value is None:
        return fallback
    normalized = value.strip().lower()
    return normalized if normalized in choices else fallback


def load_config() -> ProfilerConfig:
    """Load configuration from environment variables, applying defaults."""

    return ProfilerConfig(
        enabled=_parse_bool(os.getenv("TICTOC_ENABLED"), True),
        strict_nesting=_parse_bool(os.getenv("TICTOC_STRICT"), False),
        verbose=_parse_bool(os.getenv("TICTOC_VERBOSE"), False),
        cpu_clock=_parse_choice(os.getenv("TICTOC_CPU_CLOCK"), _DEFAULT_CPU_CLOCK, _CPU_CLOCKS),
        precision=_parse_int(os.getenv("TICTOC_PRECISION"), _DEFAULT_PRECISION, minimum=0),
    )


config = load_config()
"""Singleton config loaded at import time for convenience."""
