"""Expansion of composite ("magic") arguments.

Purpose
-------
Arguments such as ``line=("dash", 4, "red")`` or
``xaxis=("Time", (0, 10), "log10")`` bundle several attributes. The position
of each element does not matter: every element is classified by the *shape*
of its value (a known line style, a real number, a two-number tuple, ...).

Architecture
------------
Each group is a :class:`MagicSpec`, an ordered list of :class:`MagicRule`
``(target, predicate)`` pairs. :meth:`MagicSpec.expand` runs every element
through the rules of the targets that are still free and takes the first
match. A rule may carry an ``expand`` callable when one element fills several
attributes (a :class:`Stroke` inside ``marker=...``).

Examples
--------
>>> from plotattrs.magic_arguments import expand_magic
>>> expand_magic("line", ("dash", 4, "red"))
{'linestyle': 'dash', 'linewidth': 4, 'linecolor': 'red'}
>>> expand_magic("xaxis", ((0, 10), "Time"))
{'xlims': (0, 10), 'xlabel': 'Time'}
"""

from __future__ import annotations

import numbers
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

from .attribute_values import Shape, per_series_items
from .errors import AmbiguousMagicArgumentError, DuplicateMagicTargetError

Predicate = Callable[[Any], bool]

LINE_TYPES = frozenset(
    {
        "none",
        "line",
        "path",
        "step",
        "steppre",
        "steppost",
        "sticks",
        "scatter",
        "bar",
        "hist",
        "histogram2d",
        "heatmap",
        "hexbin",
        "hline",
        "vline",
        "contour",
        "pie",
        "ohlc",
        "path3d",
        "scatter3d",
        "surface",
        "wireframe",
    }
)
LINE_STYLES = frozenset({"auto", "solid", "dash", "dot", "dashdot", "dashdotdot"})
MARKER_SHAPES = frozenset(
    {
        "none",
        "auto",
        "circle",
        "ellipse",
        "rect",
        "diamond",
        "d",
        "utriangle",
        "dtriangle",
        "cross",
        "+",
        "xcross",
        "x",
        "star4",
        "star5",
        "star6",
        "star7",
        "star8",
        "hexagon",
        "hex",
        "h",
        "octagon",
        "pentagon",
        "heptagon",
    }
)
AXIS_SCALES = frozenset({"identity", "linear", "log", "log2", "log10", "ln"})


# -----------------------------
# Predicates
# -----------------------------


def _is_real(v: Any) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool)


def _is_alpha(v: Any) -> bool:
    return _is_real(v) and 0 < v < 1


def _is_color(v: Any) -> bool:
    if isinstance(v, str):
        return bool(v)
    if isinstance(v, tuple) and len(v) in (3, 4):
        return all(_is_real(c) for c in v)
    return False


def _color_except(keywords: frozenset[str]) -> Predicate:
    """Color predicate for a group whose own keywords are not color names.

    ``"auto"`` stays a color, so ``fill=(0.5, "auto")`` picks the automatic
    fill color.
    """
    excluded = keywords - {"auto"}
    return lambda v: _is_color(v) and not (isinstance(v, str) and v in excluded)


def _in(choices: frozenset[str]) -> Predicate:
    return lambda v: isinstance(v, str) and v in choices


def _numeric_vector(v: Any) -> bool:
    if isinstance(v, np.ndarray):
        return v.ndim == 1 and v.dtype.kind in {"i", "u", "f"}
    if isinstance(v, range):
        return True
    return isinstance(v, (list, tuple)) and len(v) > 0 and all(_is_real(i) for i in v)


def _limits(v: Any) -> bool:
    return isinstance(v, tuple) and len(v) == 2 and all(_is_real(i) for i in v)


def _ticks(v: Any) -> bool:
    return _numeric_vector(v) and not _limits(v)


def _each(pred: Predicate) -> Predicate:
    """Lift ``pred`` so per-series values match when all their items do."""

    def check(v: Any) -> bool:
        items = per_series_items(v)
        if items is None:
            return pred(v)
        return len(items) > 0 and all(pred(i) for i in items)

    return check


# -----------------------------
# Specs
# -----------------------------


@dataclass(frozen=True)
class MagicRule:
    """Assign an element to ``target`` when ``predicate`` accepts it."""

    target: str
    predicate: Predicate
    expand: Callable[[Any], dict[str, Any]] | None = None

    def assignments(self, value: Any) -> dict[str, Any]:
        if self.expand is None:
            return {self.target: value}
        return self.expand(value)


@dataclass(frozen=True)
class MagicSpec:
    """Ordered classification rules for one magic argument group."""

    group: str
    rules: tuple[MagicRule, ...]

    def expand(self, value: Any) -> dict[str, Any]:
        """Return the canonical attributes encoded by ``value``.

        Raises
        ------
        DuplicateMagicTargetError
            If an element only matches targets that are already assigned.
        AmbiguousMagicArgumentError
            If an element matches no target at all.
        """
        elements = value if isinstance(value, tuple) else (value,)
        assigned: set[str] = set()
        out: dict[str, Any] = {}
        for element in elements:
            rule = next(
                (r for r in self.rules if r.target not in assigned and r.predicate(element)),
                None,
            )
            if rule is None:
                taken = next((r for r in self.rules if r.predicate(element)), None)
                if taken is not None:
                    raise DuplicateMagicTargetError(self.group, element, taken.target)
                raise AmbiguousMagicArgumentError(self.group, element)
            assigned.add(rule.target)
            out.update(rule.assignments(element))
        return out


STROKE_SPEC = MagicSpec(
    group="stroke",
    rules=(
        MagicRule("style", _in(LINE_STYLES)),
        MagicRule("alpha", _is_alpha),
        MagicRule("width", _is_real),
        MagicRule("color", _color_except(LINE_STYLES)),
    ),
)


class Stroke:
    """Marker outline settings, classified like a magic argument.

    >>> Stroke(3, "gray").fields
    {'width': 3, 'color': 'gray'}
    """

    __slots__ = ("fields",)

    def __init__(self, *args: Any) -> None:
        self.fields: dict[str, Any] = STROKE_SPEC.expand(tuple(args))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Stroke):
            return self.fields == other.fields
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.fields.items(), key=lambda kv: kv[0])))

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.fields.items())
        return f"Stroke({inner})"


def stroke(*args: Any) -> Stroke:
    """Shorthand for :class:`Stroke` (``marker=(8, stroke(2, "black"))``)."""
    return Stroke(*args)


def _expand_stroke(value: Stroke) -> dict[str, Any]:
    return {f"markerstroke{k}": v for k, v in value.fields.items()}


def _is_fill_range(v: Any) -> bool:
    # Tuples of reals are colors, not fill ranges.
    return isinstance(v, bool) or _is_real(v) or (_numeric_vector(v) and not isinstance(v, tuple))


def _fill_range(value: Any) -> dict[str, Any]:
    if isinstance(value, bool):
        return {"fillrange": 0 if value else None}
    return {"fillrange": value}


def _axis_spec(letter: str) -> MagicSpec:
    return MagicSpec(
        group=f"{letter}axis",
        rules=(
            MagicRule(f"{letter}scale", _in(AXIS_SCALES)),
            MagicRule(f"{letter}flip", lambda v: isinstance(v, str) and v == "flip", lambda v: {f"{letter}flip": True}),
            MagicRule(f"{letter}lims", _limits),
            MagicRule(f"{letter}ticks", _ticks),
            MagicRule(f"{letter}label", lambda v: isinstance(v, str)),
        ),
    )


MAGIC_SPECS: dict[str, MagicSpec] = {
    "line": MagicSpec(
        group="line",
        rules=(
            MagicRule("linetype", _each(_in(LINE_TYPES))),
            MagicRule("linestyle", _each(_in(LINE_STYLES))),
            MagicRule("linealpha", _each(_is_alpha)),
            MagicRule("linewidth", _each(_is_real)),
            MagicRule("linecolor", _each(_color_except(LINE_TYPES | LINE_STYLES))),
        ),
    ),
    "marker": MagicSpec(
        group="marker",
        rules=(
            MagicRule(
                "markershape",
                _each(lambda v: isinstance(v, Shape) or (isinstance(v, str) and v in MARKER_SHAPES)),
            ),
            MagicRule("markerstroke", lambda v: isinstance(v, Stroke), _expand_stroke),
            MagicRule("markeralpha", _each(_is_alpha)),
            MagicRule("markersize", _each(_is_real)),
            MagicRule("markercolor", _each(_color_except(MARKER_SHAPES))),
        ),
    ),
    "fill": MagicSpec(
        group="fill",
        rules=(
            # An opacity in (0, 1) is read as fillalpha before fillrange.
            MagicRule("fillalpha", _each(_is_alpha)),
            MagicRule(
                "fillrange",
                _each(_is_fill_range),
                _fill_range,
            ),
            MagicRule("fillcolor", _each(_is_color)),
        ),
    ),
    "xaxis": _axis_spec("x"),
    "yaxis": _axis_spec("y"),
    "zaxis": _axis_spec("z"),
}


def expand_magic(group: str, value: Any) -> dict[str, Any]:
    """Expand one magic argument ``group=value`` into canonical attributes."""
    try:
        spec = MAGIC_SPECS[group]
    except KeyError:
        raise KeyError(f"{group!r} is not a magic argument; expected one of {sorted(MAGIC_SPECS)}") from None
    return spec.expand(value)


def expand_all(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Replace every magic group in a canonical attribute map.

    Attributes given explicitly take precedence over values produced by a
    magic argument. The input mapping is not modified.
    """
    out = {k: v for k, v in attributes.items() if k not in MAGIC_SPECS}
    for group, value in attributes.items():
        if group not in MAGIC_SPECS:
            continue
        for name, expanded in expand_magic(group, value).items():
            if name not in attributes:
                out[name] = expanded
    return out


__all__ = [
    "AXIS_SCALES",
    "LINE_STYLES",
    "LINE_TYPES",
    "MAGIC_SPECS",
    "MARKER_SHAPES",
    "MagicRule",
    "MagicSpec",
    "Stroke",
    "expand_all",
    "expand_magic",
    "stroke",
]
