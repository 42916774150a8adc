"""Switchable instrumentation: a real profiler and a no-op with the same interface."""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType
from typing import Any, Protocol, TextIO

from . import tictoc
from .config import ProfilerConfig
from .config import config as default_config
from .registry import Region
from .tictoc import Label


class Scope(Protocol):
    """What ``Profiler.scoped`` hands back."""

    def stop(self) -> None: ...

    def __enter__(self) -> Scope: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


class Profiler(Protocol):
    """Instrumentation surface shared by the enabled and disabled profilers."""

    enabled: bool

    def tic(self, label: Label) -> None: ...

    def toc(self, label: Label) -> None: ...

    def scoped(self, label: Label) -> Scope: ...

    def timed(self, label: Label | Callable[..., Any] | None = None) -> Any: ...

    def finished_iteration(self) -> None: ...

    def print(self, stream: TextIO | None = None) -> None: ...

    def print_mean_std(self, stream: TextIO | None = None) -> None: ...

    def reset(self) -> None: ...


class TicTocProfiler:
    """Records into the calling thread's timing tree."""

    enabled = True

    def tic(self, label: Label) -> None:
        tictoc.tic_(label)

    def toc(self, label: Label) -> None:
        tictoc.toc_(label)

    def scoped(self, label: Label) -> Scope:
        return tictoc.scoped_(label)

    def timed(self, label: Label | Callable[..., Any] | None = None) -> Any:
        return tictoc.timed_(label)

    def finished_iteration(self) -> None:
        tictoc.finished_iteration_()

    def print(self, stream: TextIO | None = None) -> None:
        tictoc.print_(stream)

    def print_mean_std(self, stream: TextIO | None = None) -> None:
        tictoc.print_mean_std_(stream)

    def reset(self) -> None:
        tictoc.reset_()


class _NullScope:
    __slots__ = ()

    def stop(self) -> None:
        return None

    def __enter__(self) -> _NullScope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        return None


_NULL_SCOPE = _NullScope()


class NullProfiler:
    """Does nothing; ``timed`` hands the function back untouched."""

    enabled = False

    def tic(self, label: Label) -> None:
        return None

    def toc(self, label: Label) -> None:
        return None

    def scoped(self, label: Label) -> Scope:
        return _NULL_SCOPE

    def timed(self, label: Label | Callable[..., Any] | None = None) -> Any:
        if callable(label) and not isinstance(label, Region):
            return label
        return lambda func: func

    def finished_iteration(self) -> None:
        return None

    def print(self, stream: TextIO | None = None) -> None:
        return None

    def print_mean_std(self, stream: TextIO | None = None) -> None:
        return None

    def reset(self) -> None:
        return None


def build_profiler(cfg: ProfilerConfig = default_config) -> Profiler:
    if cfg.enabled:
        return TicTocProfiler()
    return NullProfiler()


profiler = build_profiler()
"""Profiler selected from ``TICTOC_ENABLED`` at import time."""
