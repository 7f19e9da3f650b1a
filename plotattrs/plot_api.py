"""Module-level convenience API for current-plot workflows.

Purpose
-------
This module owns the free functions most users call: ``plot()``,
``subplot()``, the series-type shortcuts (``scatter()``, ``bar()``,
``histogram()``, ``heatmap()``, ``hline()``, ``ohlc()``, ``contour()`` ...),
their ``*_extend`` variants and shorthand setters such as ``set_title()``.
They delegate to the pipeline through the active
:class:`~plotattrs.plot_context.PlotContext` and keep no state of their own.

Architecture
------------
- Context resolution is handled by :mod:`plotattrs.plot_context`.
- Every call goes through :mod:`plotattrs.pipeline`, so aliases, recipes,
  magic arguments and cycling behave identically here and in the explicit
  ``create_plot(context, ...)`` form.
- Shorthand setters are extend calls without data; they work on whichever
  kind of plot is current.

Examples
--------
>>> import numpy as np
>>> from plotattrs import plot, plot_extend, set_title
>>> p = plot(np.sin, 0, np.pi, c="red")  # doctest: +SKIP
>>> plot_extend(np.cos, 0, np.pi, ls="dash")  # doctest: +SKIP
>>> set_title("Trig")  # doctest: +SKIP
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .attribute_values import PerSeries, normalize_annotations
from .pipeline import _create_plot, _create_subplot, _extend_plot, extend_subplot
from .plot_context import CurrentPlot, PlotContext, active_context, use_context
from .plot_spec import PlotSpec, SubplotSpec

_SCATTER = {"linetype": "scatter"}


def plot(*args: Any, **kwargs: Any) -> PlotSpec:
    """Start a new plot in the active context."""
    return _create_plot(active_context(), args, kwargs)


def plot_extend(*args: Any, **kwargs: Any) -> PlotSpec:
    """Add series or attributes to the current plot."""
    return _extend_plot(active_context(), args, kwargs)


def scatter(*args: Any, **kwargs: Any) -> PlotSpec:
    """Like :func:`plot`, with ``linetype="scatter"`` unless given."""
    return _create_plot(active_context(), args, kwargs, _SCATTER)


def scatter_extend(*args: Any, **kwargs: Any) -> PlotSpec:
    """Like :func:`plot_extend`, with ``linetype="scatter"`` unless given."""
    return _extend_plot(active_context(), args, kwargs, call_defaults=_SCATTER)


def _series_type(linetype: str, name: str) -> tuple[Callable[..., PlotSpec], Callable[..., PlotSpec]]:
    """Build the ``name()`` / ``name_extend()`` pair for one series type."""
    defaults = {"linetype": linetype}

    def create(*args: Any, **kwargs: Any) -> PlotSpec:
        return _create_plot(active_context(), args, kwargs, defaults)

    def extend(*args: Any, **kwargs: Any) -> PlotSpec:
        return _extend_plot(active_context(), args, kwargs, call_defaults=defaults)

    create.__name__ = create.__qualname__ = name
    extend.__name__ = extend.__qualname__ = f"{name}_extend"
    create.__doc__ = f'Like :func:`plot`, with ``linetype="{linetype}"`` unless given.'
    extend.__doc__ = f'Like :func:`plot_extend`, with ``linetype="{linetype}"`` unless given.'
    return create, extend


bar, bar_extend = _series_type("bar", "bar")
histogram, histogram_extend = _series_type("hist", "histogram")
histogram2d, histogram2d_extend = _series_type("histogram2d", "histogram2d")
heatmap, heatmap_extend = _series_type("heatmap", "heatmap")
hline, hline_extend = _series_type("hline", "hline")
vline, vline_extend = _series_type("vline", "vline")
pie, pie_extend = _series_type("pie", "pie")
ohlc, ohlc_extend = _series_type("ohlc", "ohlc")
contour, contour_extend = _series_type("contour", "contour")


def subplot(*args: Any, **kwargs: Any) -> SubplotSpec:
    """Start a grid of panels; see :func:`plotattrs.pipeline.create_subplot`."""
    return _create_subplot(active_context(), args, kwargs)


def subplot_extend(*args: Any, **kwargs: Any) -> SubplotSpec:
    """Deal more series to the panels of the current grid."""
    return extend_subplot(active_context(), *args, **kwargs)


def current_plot() -> CurrentPlot | None:
    """Return the plot being built in the active context, if any."""
    return active_context().current


def reset() -> None:
    """Forget the current plot of the active context."""
    active_context().reset()


def _set(**attributes: Any) -> CurrentPlot:
    ctx = active_context()
    if isinstance(ctx.current, SubplotSpec):
        return extend_subplot(ctx, **attributes)
    return _extend_plot(ctx, (), attributes)


def set_title(text: str) -> CurrentPlot:
    """Set the title of the current plot (every panel of a grid)."""
    return _set(title=text)


def set_xlabel(text: str) -> CurrentPlot:
    """Set the x-axis label."""
    return _set(xlabel=text)


def set_ylabel(text: str) -> CurrentPlot:
    """Set the y-axis label."""
    return _set(ylabel=text)


def set_xlims(value: tuple[Any, Any]) -> CurrentPlot:
    """Set the x-axis limits to ``(low, high)``."""
    return _set(xlims=value)


def set_ylims(value: tuple[Any, Any]) -> CurrentPlot:
    """Set the y-axis limits to ``(low, high)``."""
    return _set(ylims=value)


def set_xticks(value: Any) -> CurrentPlot:
    """Set the x-axis tick positions."""
    return _set(xticks=value)


def set_yticks(value: Any) -> CurrentPlot:
    """Set the y-axis tick positions."""
    return _set(yticks=value)


def xaxis(*args: Any) -> CurrentPlot:
    """Apply an ``xaxis=(...)`` magic argument to the current plot."""
    return _set(xaxis=args if len(args) != 1 else args[0])


def yaxis(*args: Any) -> CurrentPlot:
    """Apply a ``yaxis=(...)`` magic argument to the current plot."""
    return _set(yaxis=args if len(args) != 1 else args[0])


def annotate(*annotations: Any) -> CurrentPlot:
    """Append ``(x, y, text)`` annotations to the current plot.

    ``annotate(1, 2, "peak")`` and ``annotate((1, 2, "peak"), (3, 4, "dip"))``
    are both accepted. Earlier annotations are kept; on a grid, every panel
    keeps its own and receives the new ones.
    """
    if len(annotations) == 3 and not isinstance(annotations[0], tuple):
        new = normalize_annotations(tuple(annotations))
    else:
        new = normalize_annotations(list(annotations))
    current = active_context().current
    if isinstance(current, SubplotSpec):
        return _set(
            annotations=PerSeries.of(
                [*panel.attributes.get("annotations", []), *new] for panel in current
            )
        )
    existing = current.attributes.get("annotations", []) if isinstance(current, PlotSpec) else []
    return _set(annotations=[*existing, *new])


__all__ = [
    "PlotContext",
    "annotate",
    "bar",
    "bar_extend",
    "contour",
    "contour_extend",
    "current_plot",
    "heatmap",
    "heatmap_extend",
    "histogram",
    "histogram2d",
    "histogram2d_extend",
    "histogram_extend",
    "hline",
    "hline_extend",
    "ohlc",
    "ohlc_extend",
    "pie",
    "pie_extend",
    "plot",
    "plot_extend",
    "reset",
    "scatter",
    "scatter_extend",
    "set_title",
    "set_xlabel",
    "set_xlims",
    "set_xticks",
    "set_ylabel",
    "set_ylims",
    "set_yticks",
    "subplot",
    "subplot_extend",
    "use_context",
    "vline",
    "vline_extend",
    "xaxis",
    "yaxis",
]
