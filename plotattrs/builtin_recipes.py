"""Built-in recipes for common positional data.

Purpose
-------
Turns the positional arguments of a plot call into series data: numeric
vectors and matrices, functions sampled over a domain, SymPy expressions,
parametric function pairs, table columns, OHLC bars, and ``x``/``y``/``z``
combinations of all of these. A two-argument function or a 2-D array in the
``z`` position becomes a surface over the ``x``/``y`` grid.

Architecture
------------
The pipeline packs the positional arguments into :class:`PositionalArgs`.
Its recipe classifies the argument *shape* (``(y,)``, ``(x, y)``,
``(f, a, b)``, ``(table, "x", "y")`` ...) into one of the small wrapper types
defined here, and the wrapper recipes do the actual conversion. Every step is
an ordinary registry entry, so packages can override any of them.

Important gotchas
-----------------
- A ``domain`` with exactly two entries is a pair of endpoints sampled with
  ``samples`` points; any longer sequence is used as the sample points.
- Functions are called on the whole sample array first and element by element
  only when that fails, so scalar-only callables such as ``math.sin`` work.
"""

from __future__ import annotations

import functools
import numbers
import types
from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd
import sympy as sp

from .errors import SeriesDataError
from .input_convert import coerce_count, coerce_real
from .plot_spec import SeriesData
from .recipes import DispatchedSeries, RecipeRegistry, RecipeResult, SequenceOf
from .tabular import ColumnRef, as_table_source, is_table

DEFAULT_SAMPLES = 500
DEFAULT_DOMAIN = (-5.0, 5.0)

_FUNCTION_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    np.ufunc,
    functools.partial,
)


# -----------------------------
# Wrapper types
# -----------------------------


class PositionalArgs(tuple):
    """The positional arguments of one plot call, dispatched as a unit."""

    def __repr__(self) -> str:
        return f"PositionalArgs{tuple.__repr__(self)}"


@dataclass(frozen=True, eq=False)
class XYData:
    """Explicit ``x`` with ``y`` (and optional ``z``) still to be converted."""

    x: Any
    y: Any
    z: Any = None


@dataclass(frozen=True, eq=False)
class FunctionRange:
    """Function(s) sampled over ``[start, stop]``."""

    func: Any
    start: Any
    stop: Any


@dataclass(frozen=True, eq=False)
class ParametricFunctions:
    """Curve ``(fx(u), fy(u))`` with ``u`` from ``domain``."""

    fx: Any
    fy: Any
    domain: Any


@dataclass(frozen=True)
class OHLC:
    """One open/high/low/close bar of a financial series.

    A list of bars plots as one series with ``linetype="ohlc"`` unless the
    call says otherwise.

    >>> OHLC(1, 3, 0.5, "2.5").close
    2.5
    """

    open: float
    high: float
    low: float
    close: float

    def __post_init__(self) -> None:
        for name in ("open", "high", "low", "close"):
            object.__setattr__(self, name, coerce_real(getattr(self, name), role=f"OHLC {name}"))
        if self.high < self.low:
            raise ValueError(f"OHLC high {self.high} is below low {self.low}")


# -----------------------------
# Classification helpers
# -----------------------------


def is_function(value: Any) -> bool:
    """Return True for plain callables and SymPy expressions."""
    if isinstance(value, _FUNCTION_TYPES):
        return True
    return isinstance(value, sp.Expr)


def _is_function_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0 and all(is_function(v) for v in value)


def _is_function_like(value: Any) -> bool:
    return is_function(value) or _is_function_list(value)


def _is_scalar(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, str, sp.Number)) or (
        isinstance(value, sp.Expr) and not value.free_symbols
    )


def _is_vector(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim == 1
    if isinstance(value, (range, pd.Series, ColumnRef)):
        return True
    if isinstance(value, (list, tuple)):
        return all(isinstance(v, (numbers.Real, Decimal)) or v is None for v in value)
    return False


def _is_vector_list(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(_is_vector(v) and not isinstance(v, ColumnRef) for v in value)
        and not _is_vector(value)
    )


# -----------------------------
# Numeric coercion
# -----------------------------


def _coerce_ndarray(arr: np.ndarray, *, role: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise SeriesDataError(f"{role} contains non-numeric value at index {i}: {raw!r}") from exc
    return out


def as_numeric_vector(value: Any, *, role: str = "y") -> tuple[np.ndarray, str | None]:
    """Return ``value`` as a 1-D ``float64`` array plus its label, if any."""
    label: str | None = None
    if isinstance(value, ColumnRef):
        column = value.resolve()
        value, label = column.values, column.label
    if isinstance(value, pd.Series):
        if value.name is not None:
            label = str(value.name)
        value = value.to_numpy()
    if isinstance(value, range):
        value = np.asarray(value)
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise SeriesDataError(f"{role} must be 1-D, got shape {value.shape}")
        return _coerce_ndarray(value, role=role), label
    if isinstance(value, (list, tuple)):
        return _coerce_ndarray(np.asarray(value, dtype=object), role=role), label
    raise SeriesDataError(f"unsupported {role} input type: {type(value).__name__}")


def as_axis_vector(value: Any, *, role: str = "x") -> tuple[np.ndarray, str | None]:
    """Like :func:`as_numeric_vector` but keeps categorical values as objects."""
    if isinstance(value, ColumnRef):
        column = value.resolve()
        if column.values.dtype == object:
            return column.values, column.label
        return as_numeric_vector(column.values, role=role)[0], column.label
    if isinstance(value, (list, tuple)) and value and all(isinstance(v, str) for v in value):
        return np.asarray(value, dtype=object), None
    return as_numeric_vector(value, role=role)


def sample_points(domain: Any, samples: Any = DEFAULT_SAMPLES) -> np.ndarray:
    """Return the sample points described by ``domain``.

    Two entries are endpoints (``samples`` evenly spaced points); a longer
    sequence is used as given.
    """
    if isinstance(domain, (range, np.ndarray, list, tuple)) and len(domain) == 2:
        start = coerce_real(domain[0], role="domain start")
        stop = coerce_real(domain[1], role="domain stop")
        return np.linspace(start, stop, num=coerce_count(samples, role="samples", minimum=2))
    xs, _ = as_numeric_vector(domain, role="domain")
    return xs


def _function_label(func: Any) -> str | None:
    if isinstance(func, sp.Expr):
        return str(func)
    name = getattr(func, "__name__", None)
    if not name or name == "<lambda>":
        return None
    return name


def _numeric_callable(func: Any, arity: int = 1):
    if isinstance(func, sp.Expr):
        free = sorted(func.free_symbols, key=lambda s: s.sort_key())
        if len(free) > arity:
            raise SeriesDataError(
                f"cannot sample {func} over {arity} variable(s); it has free symbols {free}"
            )
        # Symbols sort by name, so x and y map to the x and y axes.
        names = [*free, *(sp.Dummy() for _ in range(arity - len(free)))]
        return sp.lambdify(names[0] if arity == 1 else names, func, modules="numpy")
    return func


def evaluate_function(func: Any, xs: np.ndarray) -> np.ndarray:
    """Evaluate ``func`` at ``xs`` and return a ``float64`` array of equal length."""
    f = _numeric_callable(func)
    try:
        ys = np.asarray(f(xs), dtype=np.float64)
    except (TypeError, ValueError):
        ys = np.asarray([f(x) for x in xs.tolist()], dtype=np.float64)
    if ys.ndim == 0:
        ys = np.full(xs.shape, float(ys))
    if ys.shape != xs.shape:
        ys = np.asarray([f(x) for x in xs.tolist()], dtype=np.float64)
    return ys


def evaluate_surface(func: Any, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Evaluate ``func(x, y)`` over the grid spanned by ``xs`` and ``ys``.

    The result has shape ``(len(ys), len(xs))``: row ``i`` holds the values
    at ``y = ys[i]``.
    """
    f = _numeric_callable(func, arity=2)
    grid_x, grid_y = np.meshgrid(xs, ys)
    try:
        zs = np.asarray(f(grid_x, grid_y), dtype=np.float64)
    except (TypeError, ValueError):
        zs = None
    if zs is not None and zs.ndim == 0:
        zs = np.full(grid_x.shape, float(zs))
    if zs is None or zs.shape != grid_x.shape:
        zs = np.asarray([[f(x, y) for x in xs.tolist()] for y in ys.tolist()], dtype=np.float64)
    return zs


def _is_surface(value: Any) -> bool:
    return is_function(value) or (isinstance(value, np.ndarray) and value.ndim == 2)


def _is_ohlc_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0 and all(isinstance(v, OHLC) for v in value)


def _ohlc_table(bars: Sequence[OHLC]) -> np.ndarray:
    return np.asarray([(b.open, b.high, b.low, b.close) for b in bars], dtype=np.float64).reshape(-1, 4)


# -----------------------------
# Recipes
# -----------------------------


def numeric_sequence_recipe(value: Any, attributes: Mapping[str, Any]) -> SeriesData:
    y, _ = as_numeric_vector(value)
    return SeriesData(x=np.arange(y.size, dtype=np.float64), y=y)


def ndarray_recipe(value: np.ndarray, attributes: Mapping[str, Any]) -> Any:
    arr = np.asarray(value)
    if arr.ndim == 1:
        if arr.dtype == object and arr.size and all(is_function(v) for v in arr.tolist()):
            return arr.tolist()
        return numeric_sequence_recipe(arr, attributes)
    if arr.ndim == 2:
        return [arr[:, j] for j in range(arr.shape[1])]
    raise SeriesDataError(f"cannot plot an array with {arr.ndim} dimensions")


def function_recipe(func: Any, attributes: Mapping[str, Any]) -> RecipeResult:
    domain = attributes.get("domain")
    if domain is None:
        domain = attributes.get("xlims", DEFAULT_DOMAIN)
    xs = sample_points(domain, attributes.get("samples", DEFAULT_SAMPLES))
    ys = evaluate_function(func, xs)
    label = _function_label(func)
    return RecipeResult(SeriesData(x=xs, y=ys), defaults={"label": label} if label else {})


def column_recipe(ref: ColumnRef, attributes: Mapping[str, Any]) -> RecipeResult:
    y, label = as_numeric_vector(ref, role=f"column {ref.column!r}")
    return RecipeResult(
        SeriesData(x=np.arange(y.size, dtype=np.float64), y=y),
        defaults={"label": label},
    )


def pandas_series_recipe(series: pd.Series, attributes: Mapping[str, Any]) -> RecipeResult:
    y, label = as_numeric_vector(series)
    return RecipeResult(
        SeriesData(x=np.arange(y.size, dtype=np.float64), y=y),
        defaults={"label": label} if label else {},
    )


def dataframe_recipe(frame: pd.DataFrame, attributes: Mapping[str, Any]) -> list[ColumnRef]:
    numeric = [c for c in frame.columns if pd.api.types.is_numeric_dtype(frame[c])]
    if not numeric:
        raise SeriesDataError("DataFrame has no numeric columns to plot")
    return [ColumnRef(frame, c) for c in numeric]


def function_range_recipe(value: FunctionRange, attributes: Mapping[str, Any]) -> RecipeResult:
    domain = (coerce_real(value.start, role="start"), coerce_real(value.stop, role="stop"))
    funcs = list(value.func) if isinstance(value.func, (list, tuple)) else value.func
    return RecipeResult(funcs, overrides={"domain": domain})


def parametric_recipe(value: ParametricFunctions, attributes: Mapping[str, Any]) -> SeriesData:
    us = sample_points(value.domain, attributes.get("samples", DEFAULT_SAMPLES))
    return SeriesData(x=evaluate_function(value.fx, us), y=evaluate_function(value.fy, us))


def ohlc_recipe(bars: Sequence[OHLC], attributes: Mapping[str, Any]) -> RecipeResult:
    table = _ohlc_table(bars)
    return RecipeResult(
        SeriesData(x=np.arange(len(table), dtype=np.float64), y=table[:, 3].copy(), ohlc=table),
        defaults={"linetype": "ohlc"},
    )


def _surface_result(x: Any, y: Any, z: Any) -> RecipeResult:
    xs, x_label = as_numeric_vector(x, role="x")
    ys, y_label = as_numeric_vector(y, role="y")
    defaults: dict[str, Any] = {}
    if x_label:
        defaults["xlabel"] = x_label
    if y_label:
        defaults["ylabel"] = y_label
    if is_function(z):
        zs = evaluate_surface(z, xs, ys)
        z_label = _function_label(z)
        if z_label:
            defaults["label"] = z_label
    else:
        try:
            zs = np.asarray(z, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise SeriesDataError("z grid contains non-numeric values") from exc
    return RecipeResult(SeriesData(x=xs, y=ys, z=zs), defaults=defaults)


def xy_recipe(value: XYData, attributes: Mapping[str, Any]) -> Any:
    x, y, z = value.x, value.y, value.z

    if z is not None and _is_surface(z) and not _is_function_like(y):
        return _surface_result(x, y, z)

    if z is None and _is_ohlc_list(y):
        xs, x_label = as_axis_vector(x, role="x")
        result = ohlc_recipe(y, attributes)
        if xs.shape != result.data.y.shape:
            raise SeriesDataError(f"x and y length mismatch: {xs.size} != {result.data.y.size}")
        defaults = {**result.defaults, **({"xlabel": x_label} if x_label else {})}
        return RecipeResult(
            SeriesData(x=xs, y=result.data.y, ohlc=result.data.ohlc),
            defaults=defaults,
        )

    if _is_function_list(y):
        return [XYData(x, f, z) for f in y]

    if isinstance(y, np.ndarray) and y.ndim == 2:
        if isinstance(x, np.ndarray) and x.ndim == 2:
            if x.shape[1] != y.shape[1]:
                raise SeriesDataError(f"x has {x.shape[1]} columns but y has {y.shape[1]}")
            return [XYData(x[:, j], y[:, j]) for j in range(y.shape[1])]
        if _is_vector_list(x):
            if len(x) != y.shape[1]:
                raise SeriesDataError(f"{len(x)} x vectors for {y.shape[1]} y columns")
            return [XYData(x[j], y[:, j]) for j in range(y.shape[1])]
        return [XYData(x, y[:, j]) for j in range(y.shape[1])]

    if _is_vector_list(y):
        if _is_vector_list(x):
            if len(x) != len(y):
                raise SeriesDataError(f"{len(x)} x vectors for {len(y)} y vectors")
            return [XYData(xi, yi) for xi, yi in zip(x, y)]
        return [XYData(x, yi) for yi in y]

    defaults: dict[str, Any] = {}
    xs, x_label = as_axis_vector(x, role="x")
    if x_label:
        defaults["xlabel"] = x_label

    if is_function(y):
        if xs.dtype == object:
            raise SeriesDataError("cannot sample a function over categorical x values")
        ys = evaluate_function(y, xs)
        y_label = _function_label(y)
        if y_label:
            defaults["label"] = y_label
    else:
        ys, y_label = as_numeric_vector(y, role="y")
        if y_label:
            defaults["label"] = y_label
            defaults["ylabel"] = y_label

    zs = None
    if z is not None:
        zs, z_label = as_numeric_vector(z, role="z")
        if z_label:
            defaults["zlabel"] = z_label

    if xs.shape != ys.shape:
        raise SeriesDataError(f"x and y length mismatch: {xs.size} != {ys.size}")
    return RecipeResult(SeriesData(x=xs, y=ys, z=zs), defaults=defaults)


def positional_args_recipe(args: PositionalArgs, attributes: Mapping[str, Any]) -> Any:
    """Classify positional arguments by shape."""
    n = len(args)
    if n == 0:
        return []
    if n == 1:
        return args[0]

    first = args[0]
    if is_table(first) and not is_function(first):
        cols = [ColumnRef(first, c) for c in args[1:]]
        if n == 2:
            return cols[0]
        if n in (3, 4):
            return XYData(*cols)
        raise SeriesDataError(f"a table takes 1 to 3 column names, got {n - 1}")

    if n == 2:
        if _is_function_like(first) and not _is_function_like(args[1]):
            return XYData(args[1], first)
        return XYData(first, args[1])

    if n == 3:
        f, a, b = args
        if _is_function_like(f) and _is_scalar(a) and _is_scalar(b):
            return FunctionRange(f, a, b)
        if is_function(f) and is_function(a):
            return ParametricFunctions(f, a, b)
        return XYData(f, a, b)

    if n == 4:
        fx, fy, a, b = args
        if is_function(fx) and is_function(fy) and _is_scalar(a) and _is_scalar(b):
            return ParametricFunctions(fx, fy, (a, b))

    raise SeriesDataError(
        f"unsupported positional arguments ({n} values of types "
        f"{', '.join(type(a).__name__ for a in args)})"
    )


def install_builtin_recipes(registry: RecipeRegistry) -> RecipeRegistry:
    """Register the built-in recipes on ``registry`` and return it."""
    registry.register(PositionalArgs, positional_args_recipe, internal=True)
    registry.register(XYData, xy_recipe, internal=True)
    registry.register(FunctionRange, function_range_recipe, internal=True)
    registry.register(ParametricFunctions, parametric_recipe, internal=True)
    registry.register(ColumnRef, column_recipe)
    registry.register(np.ndarray, ndarray_recipe)
    registry.register(range, numeric_sequence_recipe)
    registry.register(pd.Series, pandas_series_recipe)
    registry.register(pd.DataFrame, dataframe_recipe)
    registry.register(SequenceOf(numbers.Real, Decimal, type(None)), numeric_sequence_recipe, subclasses=True)
    registry.register(SequenceOf(OHLC), ohlc_recipe)
    for tp in _FUNCTION_TYPES:
        registry.register(tp, function_recipe)
    registry.register(sp.Expr, function_recipe, subclasses=True)
    return registry


# -----------------------------
# Grouping
# -----------------------------


def _group_keys(group: Any, table: Any) -> np.ndarray:
    if isinstance(group, Hashable) and not isinstance(group, tuple) and table is not None:
        return np.asarray(as_table_source(table).column(group).values, dtype=object)
    if isinstance(group, pd.Series):
        return group.to_numpy(dtype=object)
    if isinstance(group, (np.ndarray, list, tuple, range)):
        return np.asarray(list(group), dtype=object)
    raise SeriesDataError(f"group must be a sequence of keys or a column name, got {group!r}")


def split_by_group(
    series: Sequence[DispatchedSeries],
    group: Any,
    *,
    table: Any = None,
) -> list[DispatchedSeries]:
    """Split each series into one series per distinct ``group`` key.

    Keys keep their order of first appearance; each split series gets the key
    as its default label.
    """
    keys = _group_keys(group, table)
    out: list[DispatchedSeries] = []
    for item in series:
        if keys.size != len(item.data):
            raise SeriesDataError(
                f"group has {keys.size} entries but the series has {len(item.data)} points"
            )
        seen: dict[Any, None] = dict.fromkeys(keys.tolist())
        for key in seen:
            mask = np.array([k == key for k in keys.tolist()], dtype=bool)
            out.append(
                DispatchedSeries(
                    data=item.data.take(np.flatnonzero(mask)),
                    overrides=dict(item.overrides),
                    defaults={**item.defaults, "label": str(key)},
                )
            )
    return out


__all__ = [
    "DEFAULT_DOMAIN",
    "DEFAULT_SAMPLES",
    "FunctionRange",
    "OHLC",
    "ParametricFunctions",
    "PositionalArgs",
    "XYData",
    "as_axis_vector",
    "as_numeric_vector",
    "evaluate_function",
    "evaluate_surface",
    "install_builtin_recipes",
    "is_function",
    "sample_points",
    "split_by_group",
]
