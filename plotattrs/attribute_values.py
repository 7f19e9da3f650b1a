"""Tagged attribute value types.

A flat ``list`` passed as an attribute is one value shared by every series
(for example per-point colors for a single line). To give each series its own
value, wrap the alternatives in :class:`PerSeries` or pass a NumPy row matrix
of shape ``(1, k)``; those cycle across series. The two spellings are kept
deliberately distinct so that per-point data is never split by accident.

Examples
--------
>>> from plotattrs.attribute_values import PerSeries
>>> colors = PerSeries("red", "blue")
>>> len(colors), colors[3 % len(colors)]
(2, 'blue')
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np


class PerSeries(Sequence):
    """Values distributed over series, item ``i % k`` for series ``i``."""

    __slots__ = ("_items",)

    def __init__(self, *items: Any) -> None:
        self._items = tuple(items)

    @classmethod
    def of(cls, items: Iterable[Any]) -> "PerSeries":
        """Build from an iterable (``PerSeries.of(names)``)."""
        return cls(*items)

    def __getitem__(self, index):  # type: ignore[override]
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PerSeries):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("PerSeries", self._items))

    def __repr__(self) -> str:
        inner = ", ".join(repr(v) for v in self._items)
        return f"PerSeries({inner})"


def is_row_matrix(value: Any) -> bool:
    """Return True for NumPy arrays of shape ``(1, k)``."""
    return isinstance(value, np.ndarray) and value.ndim == 2 and value.shape[0] == 1


def per_series_items(value: Any) -> tuple[Any, ...] | None:
    """Return the cycling items of ``value``, or ``None`` for shared values."""
    if isinstance(value, PerSeries):
        return tuple(value)
    if is_row_matrix(value):
        return tuple(value[0].tolist())
    return None


@dataclass(frozen=True)
class Shape:
    """Custom marker polygon given by its vertices, centered at ``(0, 0)``."""

    vertices: tuple[tuple[float, float], ...]

    def __init__(self, vertices: Iterable[Sequence[float]]) -> None:
        verts = tuple((float(x), float(y)) for x, y in vertices)
        if len(verts) < 3:
            raise ValueError(f"Shape needs at least 3 vertices, got {len(verts)}")
        object.__setattr__(self, "vertices", verts)


def normalize_annotations(value: Any) -> list[tuple[Any, ...]]:
    """Return annotations as a list of ``(x, y, text)`` tuples.

    Accepts a single tuple or a sequence of tuples.
    """
    if isinstance(value, tuple) and len(value) == 3 and not isinstance(value[0], tuple):
        return [value]
    if isinstance(value, (list, tuple)):
        out = []
        for item in value:
            if not (isinstance(item, tuple) and len(item) == 3):
                raise ValueError(f"annotations entries must be (x, y, text) tuples, got {item!r}")
            out.append(item)
        return out
    raise ValueError(f"annotations must be an (x, y, text) tuple or a list of them, got {value!r}")


__all__ = ["PerSeries", "Shape", "is_row_matrix", "normalize_annotations", "per_series_items"]
