"""Process-wide mapping from timing labels to stable integer ids."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


class LabelRegistry:
    """Append-only label -> id table; ids are sequential and never reused."""

    def __init__(self) -> None:
        self._ids: dict[str, int] = {}
        self._labels: list[str] = []
        self._lock = Lock()

    def id_for(self, label: str) -> int:
        """Return the id for ``label``, allocating the next one on first use."""

        existing = self._ids.get(label)
        if existing is not None:
            return existing
        with self._lock:
            existing = self._ids.get(label)
            if existing is None:
                existing = len(self._labels)
                self._labels.append(label)
                self._ids[label] = existing
            return existing

    def label_for(self, timing_id: int) -> str:
        return self._labels[timing_id]

    def labels(self) -> list[str]:
        """Registered labels in id order."""

        return list(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._ids

    def __len__(self) -> int:
        return len(self._labels)


default_registry = LabelRegistry()


@dataclass(frozen=True, slots=True)
class Region:
    """A label whose id has already been resolved.

    Build one per call site (module constant, decorator closure) so the hot path
    never repeats the string lookup.
    """

    id: int
    label: str
    registry: LabelRegistry | None = field(default=None, compare=False, repr=False)


def region(label: str, registry: LabelRegistry | None = None) -> Region:
    reg = registry if registry is not None else default_registry
    return Region(id=reg.id_for(label), label=label, registry=reg)


def bind(label: str | Region, registry: LabelRegistry) -> Region:
    """Resolve ``label`` in ``registry``.

    A Region already resolved there is returned as is; ids from any other
    registry are not comparable, so the label is looked up again.
    """

    if isinstance(label, Region):
        if label.registry is registry:
            return label
        return region(label.label, registry)
    return region(label, registry)
