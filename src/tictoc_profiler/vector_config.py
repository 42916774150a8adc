"""Named-vector map: string keys to numpy vectors with elementwise arithmetic.

Keys keep their insertion order, which fixes the layout of ``vector()`` and of
the flat-vector form of ``exmap``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

import numpy as np

from .exceptions import DimensionMismatchError, InvalidKeyError

logger = logging.getLogger("tictoc_profiler.vector_config")

Vector = np.ndarray


def _as_vector(values: Iterable[float] | Vector) -> Vector:
    return np.array(values, dtype=float).reshape(-1)


def _check_size(key: str, vj: Vector, dj: Vector) -> None:
    if dj.size != vj.size:
        raise DimensionMismatchError(key, vj.size, dj.size)


class VectorConfig:
    """Mapping of names to vectors, as used by iterative solvers.

    Vectors handed out by ``get`` are read-only views; update entries through
    ``insert``, ``add`` or ``exmap``.
    """

    # Keeps numpy from treating the map as a sequence in `np.float64(2) * values`.
    __array_ufunc__ = None

    def __init__(self, values: Mapping[str, Iterable[float] | Vector] | None = None) -> None:
        self._values: dict[str, Vector] = {}
        for key, value in (values or {}).items():
            self.insert(key, value)

    def insert(self, key: str, value: Iterable[float] | Vector) -> VectorConfig:
        """Store ``value`` under ``key``, replacing any previous entry."""

        self._values[key] = _as_vector(value)
        return self

    def add(self, key: str, value: Iterable[float] | Vector) -> None:
        """Add ``value`` into the entry for ``key``; inserts when absent."""

        delta = _as_vector(value)
        existing = self._values.get(key)
        if existing is None:
            self._values[key] = delta
            return
        _check_size(key, existing, delta)
        self._values[key] = existing + delta

    def get(self, key: str) -> Vector:
        try:
            stored = self._values[key]
        except KeyError:
            logger.error("%s\nasked for key %s", self.format(), key)
            raise InvalidKeyError(key) from None
        view = stored.view()
        view.flags.writeable = False
        return view

    def __getitem__(self, key: str) -> Vector:
        return self.get(key)

    def contains(self, key: str) -> bool:
        return key in self._values

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def names(self) -> list[str]:
        return list(self._values)

    def items(self) -> Iterator[tuple[str, Vector]]:
        return iter(self._values.items())

    def size(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def dim(self) -> int:
        """Total number of scalars across all entries."""

        return sum(value.size for value in self._values.values())

    def vector(self) -> Vector:
        """All entries concatenated in insertion order."""

        if not self._values:
            return np.zeros(0)
        return np.concatenate(list(self._values.values()))

    def scale(self, factor: float) -> VectorConfig:
        scaled = VectorConfig()
        for key, value in self._values.items():
            scaled.insert(key, factor * value)
        return scaled

    def __mul__(self, factor: float) -> VectorConfig:
        return self.scale(factor)

    __rmul__ = __mul__

    def __add__(self, other: VectorConfig) -> VectorConfig:
        result = VectorConfig()
        for key, value in self._values.items():
            result.insert(key, value + other.get(key))
        return result

    def __sub__(self, other: VectorConfig) -> VectorConfig:
        result = VectorConfig()
        for key, value in self._values.items():
            result.insert(key, value - other.get(key))
        return result

    def exmap(self, delta: VectorConfig | Vector) -> VectorConfig:
        """Return a copy updated by ``delta``.

        A VectorConfig delta updates same-named entries and leaves the rest
        untouched. A flat vector is cut into consecutive slices, one per entry,
        sized by the stored vectors.
        """

        if isinstance(delta, VectorConfig):
            return self._exmap_config(delta)
        return self._exmap_flat(_as_vector(delta))

    def _exmap_config(self, delta: VectorConfig) -> VectorConfig:
        updated = VectorConfig()
        for key, value in self._values.items():
            if key in delta:
                dj = delta[key]
                _check_size(key, value, dj)
                updated.insert(key, value + dj)
            else:
                updated.insert(key, value)
        return updated

    def _exmap_flat(self, delta: Vector) -> VectorConfig:
        expected = self.dim()
        if delta.size != expected:
            raise DimensionMismatchError(None, expected, delta.size)
        updated = VectorConfig()
        offset = 0
        for key, value in self._values.items():
            width = value.size
            updated.insert(key, value + delta[offset : offset + width])
            offset += width
        return updated

    def dot(self, other: VectorConfig) -> float:
        return float(sum(np.dot(value, other.get(key)) for key, value in self._values.items()))

    def equals(self, expected: VectorConfig, tol: float = 1e-9) -> bool:
        if self.size() != expected.size():
            return False
        for key, actual in self._values.items():
            wanted = expected.get(key)
            if wanted.shape != actual.shape:
                return False
            if not np.allclose(actual, wanted, rtol=0.0, atol=tol):
                return False
        return True

    def format(self, name: str = "") -> str:
        lines = [f"VectorConfig {name}".rstrip(), f"size: {self.size()}"]
        for key, value in self._values.items():
            lines.append(f"{key}: {np.array2string(value, precision=6)}")
        return "\n".join(lines)

    def print(self, name: str = "") -> None:
        print(self.format(name))

    def __repr__(self) -> str:
        entries = ", ".join(f"{key!r}: {value.tolist()}" for key, value in self._values.items())
        return f"VectorConfig({{{entries}}})"


def dot(a: VectorConfig, b: VectorConfig) -> float:
    return a.dot(b)
