"""Custom exception types raised by the profiler and the vector map."""

from __future__ import annotations


class TicTocError(Exception):
    """Base exception for the package."""


class MismatchedTicTocError(TicTocError, RuntimeError):
    """Raised when tic/toc calls are not well nested."""


class VectorConfigError(TicTocError):
    """Base exception for named-vector map failures."""


class InvalidKeyError(VectorConfigError, LookupError):
    """Raised when a key is missing from a VectorConfig."""

    def __init__(self, key: str) -> None:
        super().__init__(f"VectorConfig: invalid key {key!r}")
        self.key = key


class DimensionMismatchError(VectorConfigError, ValueError):
    """Raised when an update vector does not match the stored dimension."""

    def __init__(self, key: str | None, expected: int, actual: int) -> None:
        where = f"key {key!r}" if key is not None else "flat delta"
        super().__init__(f"VectorConfig: mismatched dimensions for {where} (expected {expected}, got {actual})")
        self.key = key
        self.expected = expected
        self.actual = actual
