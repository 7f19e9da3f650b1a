"""Canonical attribute names, their scopes, and alias resolution.

Purpose
-------
Plot calls accept many spellings for the same concept (``c``, ``color`` and
``linecolor``; ``w``, ``lw`` and ``linewidth``). This module owns the single
table that maps every accepted spelling to its canonical name and records
whether each canonical attribute belongs to the whole plot or to individual
series.

Architecture
------------
Resolution is a pure function over a mapping. It runs first in the
preprocessing pipeline, so no later stage ever sees an alias. Unknown names
are passed through untouched and reported according to the configured
policy.

Examples
--------
>>> from plotattrs.attribute_aliases import resolve_aliases
>>> resolve_aliases({"c": "red", "lw": 2}).attributes
{'linecolor': 'red', 'linewidth': 2}
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import UnknownAttributeError, UnknownAttributeWarning


class AttributeScope(Enum):
    """Whether an attribute is shared by the plot or distributed per series."""

    PLOT = "plot"
    SERIES = "series"


_SERIES_ATTRIBUTES = (
    "linetype",
    "linestyle",
    "linewidth",
    "linecolor",
    "linealpha",
    "label",
    "markershape",
    "markersize",
    "markercolor",
    "markeralpha",
    "markerstrokewidth",
    "markerstrokecolor",
    "markerstrokealpha",
    "markerstrokestyle",
    "fillrange",
    "fillcolor",
    "fillalpha",
    "zcolor",
    "group",
    "axis",
    "smooth",
    "nbins",
    "domain",
    "samples",
)

_PLOT_ATTRIBUTES = (
    "title",
    "xlabel",
    "ylabel",
    "zlabel",
    "yrightlabel",
    "xlims",
    "ylims",
    "zlims",
    "xticks",
    "yticks",
    "zticks",
    "xscale",
    "yscale",
    "zscale",
    "xflip",
    "yflip",
    "zflip",
    "legend",
    "background_color",
    "foreground_color",
    "palette",
    "size",
    "annotations",
    "n",
    "nr",
    "nc",
    "layout",
)

ATTRIBUTE_SCOPES: dict[str, AttributeScope] = {
    **{name: AttributeScope.SERIES for name in _SERIES_ATTRIBUTES},
    **{name: AttributeScope.PLOT for name in _PLOT_ATTRIBUTES},
}

# Composite arguments expanded by :mod:`plotattrs.magic_arguments`.
MAGIC_GROUPS: tuple[str, ...] = ("line", "marker", "fill", "xaxis", "yaxis", "zaxis")

ALIASES: dict[str, str] = {
    # line
    "t": "linetype",
    "type": "linetype",
    "lt": "linetype",
    "seriestype": "linetype",
    "st": "linetype",
    "s": "linestyle",
    "style": "linestyle",
    "ls": "linestyle",
    "dash": "linestyle",
    "w": "linewidth",
    "width": "linewidth",
    "lw": "linewidth",
    "thickness": "linewidth",
    "c": "linecolor",
    "color": "linecolor",
    "colour": "linecolor",
    "lc": "linecolor",
    "linecolour": "linecolor",
    "alpha": "linealpha",
    "opacity": "linealpha",
    "la": "linealpha",
    "lab": "label",
    "labels": "label",
    "name": "label",
    # markers
    "shape": "markershape",
    "markershapes": "markershape",
    "ms": "markersize",
    "msize": "markersize",
    "mc": "markercolor",
    "mcolor": "markercolor",
    "markercolour": "markercolor",
    "ma": "markeralpha",
    "malpha": "markeralpha",
    "msw": "markerstrokewidth",
    "strokewidth": "markerstrokewidth",
    "msc": "markerstrokecolor",
    "strokecolor": "markerstrokecolor",
    "msa": "markerstrokealpha",
    # fill
    "fillto": "fillrange",
    "frange": "fillrange",
    "fc": "fillcolor",
    "fcolor": "fillcolor",
    "fillcolour": "fillcolor",
    "fa": "fillalpha",
    "falpha": "fillalpha",
    # series extras
    "zcolors": "zcolor",
    "g": "group",
    "reg": "smooth",
    "regression": "smooth",
    "nb": "nbins",
    "nbin": "nbins",
    "bins": "nbins",
    "xdomain": "domain",
    "x_domain": "domain",
    "sampling_points": "samples",
    # plot
    "titles": "title",
    "xlab": "xlabel",
    "xguide": "xlabel",
    "ylab": "ylabel",
    "yguide": "ylabel",
    "zlab": "zlabel",
    "zguide": "zlabel",
    "yrightlab": "yrightlabel",
    "xlim": "xlims",
    "xlimit": "xlims",
    "xlimits": "xlims",
    "x_range": "xlims",
    "ylim": "ylims",
    "ylimit": "ylims",
    "ylimits": "ylims",
    "y_range": "ylims",
    "zlim": "zlims",
    "zlimit": "zlims",
    "zlimits": "zlims",
    "xtick": "xticks",
    "ytick": "yticks",
    "ztick": "zticks",
    "leg": "legend",
    "key": "legend",
    "bg": "background_color",
    "bgcolor": "background_color",
    "bg_color": "background_color",
    "background": "background_color",
    "fg": "foreground_color",
    "fgcolor": "foreground_color",
    "fg_color": "foreground_color",
    "foreground": "foreground_color",
    "windowsize": "size",
    "wsize": "size",
    "ann": "annotations",
    "anns": "annotations",
    "annotate": "annotations",
    "annotation": "annotations",
    "numplots": "n",
    "nrow": "nr",
    "nrows": "nr",
    "ncol": "nc",
    "ncols": "nc",
    # magic groups
    "l": "line",
    "m": "marker",
    "mark": "marker",
    "f": "fill",
    "area": "fill",
    "xax": "xaxis",
    "yax": "yaxis",
    "zax": "zaxis",
}


def _check_tables() -> None:
    canonical = set(ATTRIBUTE_SCOPES) | set(MAGIC_GROUPS)
    for alias, target in ALIASES.items():
        if alias in canonical:
            raise RuntimeError(f"alias {alias!r} shadows a canonical attribute")
        if target not in canonical:
            raise RuntimeError(f"alias {alias!r} points to unknown attribute {target!r}")


_check_tables()


def is_canonical(name: str) -> bool:
    """Return True for canonical attribute names and magic group names."""
    return name in ATTRIBUTE_SCOPES or name in MAGIC_GROUPS


def canonical_name(name: str) -> str | None:
    """Return the canonical name for ``name``, or ``None`` when unknown."""
    if is_canonical(name):
        return name
    return ALIASES.get(name)


def attribute_scope(name: str) -> AttributeScope | None:
    """Return the scope of a canonical attribute (``None`` for others)."""
    return ATTRIBUTE_SCOPES.get(name)


@dataclass(frozen=True)
class ResolvedAttributes:
    """Result of :func:`resolve_aliases`."""

    attributes: dict[str, Any]
    unknown: tuple[str, ...] = ()


def resolve_aliases(
    attributes: Mapping[str, Any],
    *,
    on_unknown: str = "warn",
) -> ResolvedAttributes:
    """Rewrite every key of ``attributes`` to its canonical name.

    Parameters
    ----------
    attributes:
        Keyword attributes as supplied by the caller. The mapping is not
        modified.
    on_unknown:
        ``"warn"`` emits :class:`UnknownAttributeWarning`, ``"error"`` raises
        :class:`UnknownAttributeError`, ``"ignore"`` stays silent. Unknown
        names are passed through unchanged in every non-raising mode.

    Returns
    -------
    ResolvedAttributes
        Canonical mapping (insertion order follows the input) and the unknown
        names. When two keys resolve to the same canonical name the later one
        wins.
    """
    out: dict[str, Any] = {}
    unknown: list[str] = []
    for key, value in attributes.items():
        target = canonical_name(key)
        if target is None:
            unknown.append(key)
            target = key
        # Last write wins, but the key keeps its first position.
        out[target] = value

    if unknown:
        if on_unknown == "error":
            raise UnknownAttributeError(tuple(unknown))
        if on_unknown == "warn":
            warnings.warn(
                f"Unknown plot attribute(s) passed through unresolved: {', '.join(unknown)}",
                UnknownAttributeWarning,
                stacklevel=3,
            )
    return ResolvedAttributes(attributes=out, unknown=tuple(unknown))


def plot_attribute_options() -> dict[str, str]:
    """Return ``{accepted name: canonical name}`` for discoverability."""
    options = {name: name for name in ATTRIBUTE_SCOPES}
    options.update({name: name for name in MAGIC_GROUPS})
    options.update(ALIASES)
    return dict(sorted(options.items()))


__all__ = [
    "ALIASES",
    "ATTRIBUTE_SCOPES",
    "AttributeScope",
    "MAGIC_GROUPS",
    "ResolvedAttributes",
    "attribute_scope",
    "canonical_name",
    "is_canonical",
    "plot_attribute_options",
    "resolve_aliases",
]
