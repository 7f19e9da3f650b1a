"""Tabular-data collaborator contract.

Recipes never look inside a table format. They ask a :class:`TableSource`
for a column by identifier and receive the values with a display label.
Adapters are provided for ``pandas.DataFrame`` and for plain mappings of
column name to sequence.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import numpy as np
import pandas as pd

from .errors import SeriesDataError


@dataclass(frozen=True)
class Column:
    """Values of one table column together with its display label."""

    values: np.ndarray
    label: str


@runtime_checkable
class TableSource(Protocol):
    """Anything that can resolve column identifiers to :class:`Column` data."""

    def columns(self) -> tuple[Hashable, ...]: ...

    def column(self, identifier: Hashable) -> Column: ...


def _column_array(values: Any) -> np.ndarray:
    arr = np.asarray(values)
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)
    return arr.astype(object)


class DataFrameSource:
    """:class:`TableSource` over a ``pandas.DataFrame``."""

    def __init__(self, frame: pd.DataFrame) -> None:
        self._frame = frame

    def columns(self) -> tuple[Hashable, ...]:
        return tuple(self._frame.columns)

    def column(self, identifier: Hashable) -> Column:
        if identifier not in self._frame.columns:
            raise SeriesDataError(f"column not found: {identifier!r}")
        series = self._frame[identifier]
        if pd.api.types.is_numeric_dtype(series):
            values = series.to_numpy(dtype=np.float64, na_value=np.nan)
        else:
            values = series.to_numpy(dtype=object)
        return Column(values=values, label=str(identifier))


class MappingSource:
    """:class:`TableSource` over ``{name: sequence}`` mappings."""

    def __init__(self, mapping: Mapping[Hashable, Any]) -> None:
        self._mapping = mapping

    def columns(self) -> tuple[Hashable, ...]:
        return tuple(self._mapping)

    def column(self, identifier: Hashable) -> Column:
        try:
            values = self._mapping[identifier]
        except KeyError:
            raise SeriesDataError(f"column not found: {identifier!r}") from None
        return Column(values=_column_array(values), label=str(identifier))


def is_table(obj: Any) -> bool:
    """Return True when ``obj`` can be adapted by :func:`as_table_source`."""
    return isinstance(obj, (pd.DataFrame, Mapping, DataFrameSource, MappingSource)) or (
        isinstance(obj, TableSource) and not isinstance(obj, type)
    )


def as_table_source(obj: Any) -> TableSource:
    """Adapt ``obj`` to the :class:`TableSource` protocol.

    Raises
    ------
    TypeError
        If ``obj`` is not a supported table.
    """
    if isinstance(obj, pd.DataFrame):
        return DataFrameSource(obj)
    if isinstance(obj, (DataFrameSource, MappingSource)):
        return obj
    if isinstance(obj, Mapping):
        return MappingSource(obj)
    if isinstance(obj, TableSource) and not isinstance(obj, type):
        return obj
    raise TypeError(f"Expected a DataFrame, a column mapping or a TableSource, got {type(obj).__name__}")


@dataclass(frozen=True, eq=False)
class ColumnRef:
    """Reference to one column of a table, resolved during recipe dispatch."""

    table: Any
    column: Hashable

    def resolve(self) -> Column:
        return as_table_source(self.table).column(self.column)


__all__ = [
    "Column",
    "ColumnRef",
    "DataFrameSource",
    "MappingSource",
    "TableSource",
    "as_table_source",
    "is_table",
]
