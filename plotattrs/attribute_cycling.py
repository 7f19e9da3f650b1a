"""Distribution of attribute values over a number of series.

The rule is intentionally asymmetric:

- :class:`~plotattrs.attribute_values.PerSeries` values and NumPy row matrices
  (shape ``(1, k)``) cycle: series ``i`` gets item ``i % k``.
- NumPy matrices of shape ``(m, k)`` with ``m > 1`` give series ``i`` column
  ``i % k`` (per-point values for each series).
- Everything else, including flat lists and 1-D arrays, is one value shared
  by every series. A flat list is never split, because it usually holds
  per-point data for a single series.

>>> from plotattrs.attribute_values import PerSeries
>>> cycle_attribute(PerSeries("red", "blue"), 3)
['red', 'blue', 'red']
>>> cycle_attribute(["red", "blue"], 2)
[['red', 'blue'], ['red', 'blue']]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np

from .attribute_values import per_series_items


def cycle_attribute(value: Any, n: int) -> list[Any]:
    """Return ``n`` values, one per series, resolved from ``value``."""
    if n < 0:
        raise ValueError(f"series count must be >= 0, got {n}")

    items = per_series_items(value)
    if items is not None:
        if not items:
            raise ValueError("per-series value must contain at least one item")
        k = len(items)
        return [items[i % k] for i in range(n)]

    if isinstance(value, np.ndarray) and value.ndim == 2:
        k = value.shape[1]
        if k == 0:
            raise ValueError("per-series matrix must have at least one column")
        return [value[:, i % k] for i in range(n)]

    return [value] * n


def cycle_attributes(attributes: Mapping[str, Any], n: int) -> list[dict[str, Any]]:
    """Apply :func:`cycle_attribute` to every entry of ``attributes``."""
    columns = {name: cycle_attribute(value, n) for name, value in attributes.items()}
    return [{name: values[i] for name, values in columns.items()} for i in range(n)]


__all__ = ["cycle_attribute", "cycle_attributes"]
