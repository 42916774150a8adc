"""Scope guard that closes a timed region exactly once."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, TypeVar

from .context import get_tree
from .exceptions import MismatchedTicTocError
from .registry import Region, bind, region
from .tree import TimingTree

logger = logging.getLogger("tictoc_profiler.scoped")

F = TypeVar("F", bound=Callable[..., Any])


class ScopedTimer:
    """Opens a region on construction and closes it on ``stop()`` or scope exit.

    Use it as a context manager; ``stop()`` may be called early and any later
    call (including the one from ``__exit__``) is ignored.
    """

    __slots__ = ("_tree", "_id", "_label", "_generation", "_active")

    def __init__(self, tree: TimingTree, timing_id: int, label: str) -> None:
        self._tree = tree
        self._id = timing_id
        self._label = label
        self._generation = tree.generation
        tree.tic(timing_id, label)
        self._active = True

    @property
    def label(self) -> str:
        return self._label

    @property
    def active(self) -> bool:
        return self._active

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._tree.generation != self._generation:
            message = f"Scoped timer {self._label!r} outlived a reset of its tree; nothing recorded"
            if self._tree.strict:
                raise MismatchedTicTocError(message)
            logger.warning(message)
            return
        self._tree.toc(self._id, self._label)

    def __enter__(self) -> ScopedTimer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()


def timed(label: str | Region | Callable[..., Any] | None = None, *, tree: TimingTree | None = None) -> Any:
    """Decorator timing every call of the wrapped function.

    The label defaults to the function's qualified name and is resolved to an id
    once, when the decorator is applied. Works bare (``@timed``) or called
    (``@timed("solve")``).
    """

    if callable(label) and not isinstance(label, Region):
        return timed(None, tree=tree)(label)

    def decorator(func: F) -> F:
        registry = tree.registry if tree is not None else None
        resolved = label if isinstance(label, Region) else region(label or func.__qualname__, registry)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            target = tree if tree is not None else get_tree()
            bound = bind(resolved, target.registry)
            with ScopedTimer(target, bound.id, bound.label):
                return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
